"""HTTP access to the EVDS service with response caching."""

import logging
import os
from pathlib import Path
from typing import Optional, Union

import requests
from dotenv import find_dotenv, load_dotenv

from ..cache import ResultCache
from ..config import Config
from ..errors import CredentialsNotFound, FetchError
from ..frame import DataFrame, frame_from_response
from .index import Index, short_filename
from .urls import UrlBuilder

logger = logging.getLogger(__name__)

API_KEY_ENV = "EVDS_APIKEY"
CACHED_OPERATION = "get_request"


def get_api_key(use_dotenv: bool = True) -> str:
    """Read the EVDS API key from the environment.

    Args:
        use_dotenv: Load a .env file from the working directory first

    Raises:
        CredentialsNotFound: If EVDS_APIKEY is not set
    """
    if use_dotenv:
        load_dotenv(find_dotenv(usecwd=True))
    api_key = os.getenv(API_KEY_ENV)
    if not api_key:
        raise CredentialsNotFound(f"Environment variable {API_KEY_ENV} is not set")
    return api_key


def proxy_for(url: str, proxy: str = "") -> str:
    """Explicit proxy if given, else HTTPS_PROXY for https URLs, else HTTP_PROXY."""
    if proxy:
        return proxy
    if url.startswith("https") and os.getenv("HTTPS_PROXY"):
        return os.environ["HTTPS_PROXY"]
    return os.getenv("HTTP_PROXY", "")


class EvdsClient:
    """Fetch raw EVDS responses, consulting the ResultCache first.

    Cache entries are keyed by (url, api key, proxy) so different credentials
    never share a payload.
    """

    def __init__(
        self,
        config: Config,
        cache: Optional[ResultCache] = None,
        session: Optional[requests.Session] = None,
        api_key: Optional[str] = None,
    ):
        self.config = config
        if cache is None and config.cache:
            cache = ResultCache(config.cache_dir, verbose=config.verbose)
        self.cache = cache
        self.session = session or requests.Session()
        self._api_key = api_key

    @property
    def api_key(self) -> str:
        if self._api_key is None:
            self._api_key = get_api_key(use_dotenv=not self.config.test)
        return self._api_key

    def fetch(self, url: str) -> str:
        """
        Get the response body for a URL.

        Args:
            url: Full service URL

        Returns:
            Raw response body

        Raises:
            FetchError: On network failure or a non-2xx status
            CredentialsNotFound: If no API key is configured
            CacheError: If a cache entry cannot be read or written
        """
        api_key = self.api_key
        proxy = proxy_for(url, self.config.proxy)

        fingerprint = None
        if self.cache is not None and self.config.cache:
            fingerprint = ResultCache.fingerprint(CACHED_OPERATION, url, api_key, proxy)
            cached = self.cache.try_get(fingerprint)
            if cached is not None:
                logger.info(f"Loaded data from cache for {url}")
                return cached

        body = self._request(url, api_key, proxy)

        if fingerprint is not None:
            self.cache.put(fingerprint, body)
        return body

    def _request(self, url: str, api_key: str, proxy: str) -> str:
        headers = {"Content-Type": "application/json", "key": api_key}
        proxies = {"http": proxy, "https": proxy} if proxy else None

        logger.info(f"[requesting] {url}")
        try:
            response = self.session.get(
                url, headers=headers, proxies=proxies, timeout=self.config.timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(f"Request failed for {url}: {e}") from e

        return response.text


def get_series(
    template: str, config: Config, client: Optional[EvdsClient] = None
) -> DataFrame:
    """Fetch one index template and ingest it into a DataFrame."""
    client = client or EvdsClient(config)
    index = Index(template)
    url = UrlBuilder(index, config).get_url()
    logger.debug(f"Generated URL: {url}")

    body = client.fetch(url)
    df = frame_from_response(body)
    logger.info(f"[produced series] {index.get()}: {len(df)} rows, columns {df.columns}")
    return df


def output_path(template: str, output_dir: Union[str, Path] = ".") -> Path:
    return Path(output_dir) / f"data_{short_filename(template)}.csv"


def export_series(
    template: str, config: Config, client: Optional[EvdsClient] = None
) -> Path:
    """Fetch one index template and write it as CSV into config.output_dir.

    Returns:
        Path of the written CSV file
    """
    df = get_series(template, config, client)
    return df.to_csv(output_path(template, config.output_dir), delimiter=config.delimiter)
