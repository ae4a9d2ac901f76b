"""Run configuration."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

_BOOL_KEYS = ("cache", "test", "verbose")
_TEXT_KEYS = ("start_date", "end_date", "frequency", "formulas", "aggregation", "proxy", "delimiter")
_PATH_KEYS = ("cache_dir", "output_dir")


@dataclass
class Config:
    """Options for fetching and exporting EVDS indexes.

    Attributes:
        indexes: Index templates to fetch, one CSV per entry
        start_date: First date, 'DD-MM-YYYY'
        end_date: Last date, 'DD-MM-YYYY'
        frequency: daily | business | weekly | semimonthly | monthly |
            quarterly | semiannually | annual | annually, or 'default'
        formulas: level | percentage_change | difference | yoy | ..., or 'default'
        aggregation: avg | min | max | first | last | sum, or 'default'
        cache: Consult and fill the response cache
        cache_dir: Response cache directory
        test: Read the API key from the environment only, skip .env lookup
        proxy: Explicit proxy URL; empty to use HTTPS_PROXY / HTTP_PROXY
        timeout: HTTP timeout in seconds
        delimiter: CSV field separator
        output_dir: Directory receiving the CSV files
    """

    indexes: list[str] = field(default_factory=list)
    verbose: bool = False
    start_date: str = "01-01-2000"
    end_date: str = "31-12-2100"
    frequency: str = "default"
    formulas: str = "default"
    aggregation: str = "default"
    cache: bool = True
    cache_dir: Path = Path(".caches")
    test: bool = False
    proxy: str = ""
    timeout: float = 30.0
    delimiter: str = ","
    output_dir: Path = Path(".")

    @classmethod
    def from_args(cls, args: Mapping[str, Any], **overrides: Any) -> "Config":
        """Build a Config from string options such as parsed CLI flags.

        Boolean keys are true only for the string "true" (or a real True).
        Unknown keys and None values are ignored.
        """
        config = cls(**overrides)
        for key, value in args.items():
            if value is None:
                continue
            if key in _BOOL_KEYS:
                setattr(config, key, value is True or str(value).lower() == "true")
            elif key in _TEXT_KEYS:
                setattr(config, key, str(value))
            elif key in _PATH_KEYS:
                setattr(config, key, Path(value))
            elif key == "timeout":
                config.timeout = float(value)
        return config
