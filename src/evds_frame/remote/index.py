"""Index templates and output filenames."""

import logging
import re
from pathlib import Path
from typing import Iterable, Union

logger = logging.getLogger(__name__)

INDEX_DELIMITER = "-"
DATAGROUP_PREFIX = "bie_"

_SPLIT_RE = re.compile(r"[-\n]")


class Index:
    """One CSV worth of series codes.

    A template such as 'TP.DK.USD.A-TP.DK.EUR.A' groups several series into
    one request; a template starting with 'bie_' names a data group and is
    kept whole.
    """

    def __init__(self, template: Union[str, Iterable[str]]):
        if isinstance(template, str):
            self.parts = self._from_template(template)
        else:
            self.parts = [p for p in template if p]

    @staticmethod
    def _from_template(template: str) -> list[str]:
        if template.startswith(DATAGROUP_PREFIX):
            return [template]
        return [p.strip() for p in _SPLIT_RE.split(template) if p.strip()]

    @property
    def is_datagroup(self) -> bool:
        return len(self.parts) == 1 and DATAGROUP_PREFIX in self.parts[0]

    def get(self) -> str:
        return INDEX_DELIMITER.join(self.parts)

    def __len__(self) -> int:
        return len(self.parts)

    def __repr__(self) -> str:
        return f"Index({self.get()!r})"


def looks_like_filename(name: str, extension: str = ".txt") -> bool:
    return extension in name


def indexes_from_file(path: Union[str, Path]) -> list[str]:
    """Read one index template per non-empty line."""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip()]


def parse_index_args(tokens: Iterable[str]) -> list[str]:
    """Expand CLI tokens into index templates.

    Each token is split on commas; an entry that looks like a .txt file is
    replaced by the templates listed in it.
    """
    indexes: list[str] = []
    for token in tokens:
        for entry in token.split(","):
            entry = entry.strip()
            if not entry:
                continue
            if looks_like_filename(entry):
                try:
                    indexes.extend(indexes_from_file(entry))
                except OSError as e:
                    logger.error(f"Could not read indexes from {entry}: {e}")
            else:
                indexes.append(entry)
    return indexes


def _capitalize_words(text: str) -> str:
    # Non-alphanumerics break words and are dropped
    words = re.split(r"[^0-9A-Za-z]+", text)
    return "".join(w[:1].upper() + w[1:].lower() for w in words if w)


def short_filename(name: str, max_length: int = 15) -> str:
    """Shorten an index template for use in a filename.

    Short names and data groups are kept; otherwise separators become word
    breaks and the words are joined in CapitalizedCase.

    Example:
        >>> short_filename("TP.DK.USD.A-TP.DK.EUR.A")
        'TpDkUsdATpDkEur'
    """
    if len(name) < 9 or DATAGROUP_PREFIX in name:
        return name

    cleaned = "".join(
        c if c.isascii() and c.isalnum() else " "
        for c in name
        if (c.isascii() and c.isalnum()) or c in "-_."
    )
    return _capitalize_words(cleaned)[:max_length]
