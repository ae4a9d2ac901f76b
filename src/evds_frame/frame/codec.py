"""Type inference for EVDS JSON scalars.

This module turns raw JSON values into cells and feeds whole response items
into a DataFrame.

Key features:
- Precedence-ordered classification: null, native number, full date,
  year-month date, numeric string, text
- Year-month strings ('2021-5', '2021-05') normalized to '01-MM-YYYY'
- Malformed or out-of-range numbers degrade to text, never raise
- Minimal fallbacks (< 3), all documented
"""

import json
import logging
import re
from typing import Any, Mapping, Union

import orjson

from ..errors import ResponseFormatError
from .cells import (
    INT64_MAX,
    INT64_MIN,
    NULL,
    DateCell,
    FloatCell,
    IntegerCell,
    TextCell,
    ValueCell,
)
from .dataframe import DataFrame

logger = logging.getLogger(__name__)

# Field carrying the epoch timestamp of each item; never ingested
SKIPPED_FIELDS = frozenset({"UNIXTIME"})

FULL_DATE_RE = re.compile(r"[0-9]{2}-[0-9]{2}-[0-9]{4}")
YEAR_MONTH_RE = re.compile(r"([0-9]{4})-([0-9]{1,2})")
FLOAT_RE = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")
INTEGER_RE = re.compile(r"[+-]?[0-9]+")


class TypeInferencer:
    """Classify raw JSON scalars into cells.

    Example:
        >>> inferencer = TypeInferencer()
        >>> inferencer.infer("2021-5")
        DateCell(value='01-05-2021')
        >>> inferencer.infer("42.5")
        FloatCell(value=42.5)
        >>> inferencer.infer("abc")
        TextCell(value='abc')
    """

    def infer(self, raw: Any) -> ValueCell:
        """Classify one raw JSON value.

        Args:
            raw: Value produced by the JSON parser

        Returns:
            The cell for the value; never raises for parser output
        """
        if raw is None:
            return NULL

        # bool must be checked before int
        if isinstance(raw, bool):
            return NULL
        if isinstance(raw, int):
            if INT64_MIN <= raw <= INT64_MAX:
                return IntegerCell(raw)
            return TextCell(str(raw))
        if isinstance(raw, float):
            return FloatCell(raw)

        if isinstance(raw, str):
            return self._infer_string(raw)

        # Objects and arrays are not scalars of the model
        return NULL

    def _infer_string(self, text: str) -> ValueCell:
        if FULL_DATE_RE.fullmatch(text):
            return DateCell(text)

        match = YEAR_MONTH_RE.fullmatch(text)
        if match:
            year, month = match.groups()
            return DateCell(f"01-{month.zfill(2)}-{year}")

        number = self._parse_number(text)
        if number is not None:
            return number

        return TextCell(text)

    def _parse_number(self, text: str) -> Union[IntegerCell, FloatCell, None]:
        """Parse a numeric string, or return None to fall back to text.

        Strings containing a decimal point are parsed as floats, everything
        else as base-10 integers.
        """
        if "." in text:
            if not FLOAT_RE.fullmatch(text):
                return None
            value = float(text)
            # Fallback #1: overflowing exponent → text
            # Trigger: '1.0e999' parses to inf
            if value in (float("inf"), float("-inf")):
                logger.debug(f"Float out of range, keeping as text: {text!r}")
                return None
            return FloatCell(value)

        if not INTEGER_RE.fullmatch(text):
            return None
        value = int(text)
        if not INT64_MIN <= value <= INT64_MAX:
            logger.debug(f"Integer out of 64-bit range, keeping as text: {text!r}")
            return None
        return IntegerCell(value)


_inferencer = TypeInferencer()


def infer_cell(raw: Any) -> ValueCell:
    """Classify one raw JSON value with the default inferencer."""
    return _inferencer.infer(raw)


def parse_item(item: Mapping[str, Any], df: DataFrame) -> int:
    """Ingest one response item as a record of the DataFrame.

    Every field except UNIXTIME is classified; columns the item does not
    carry receive Null for this record.

    Returns:
        Row count after the record was added
    """
    fields = {
        key: _inferencer.infer(value)
        for key, value in item.items()
        if key not in SKIPPED_FIELDS
    }
    return df.add_record(fields)


def _loads_json(body: Union[str, bytes]) -> Any:
    """Deserialize a response body with orjson, falling back to json.

    Fallback #2: orjson → json
    Trigger: orjson raises JSONDecodeError (e.g. NaN literals, lone surrogates)
    """
    try:
        return orjson.loads(body)
    except orjson.JSONDecodeError as e:
        logger.warning(f"orjson decoding failed: {e}, falling back to json")

    try:
        return json.loads(body)
    except ValueError as e:
        raise ResponseFormatError(f"Response is not valid JSON: {e}") from e


def frame_from_response(body: Union[str, bytes]) -> DataFrame:
    """Build a DataFrame from an EVDS response body.

    Args:
        body: Raw response text, a JSON object with an 'items' array

    Returns:
        DataFrame with one record per item

    Raises:
        ResponseFormatError: If the body is not JSON or has no 'items' array
    """
    document = _loads_json(body)

    if not isinstance(document, dict):
        raise ResponseFormatError(
            f"Expected a JSON object, got {type(document).__name__}"
        )
    items = document.get("items")
    if not isinstance(items, list):
        raise ResponseFormatError("Response has no 'items' array")

    df = DataFrame()
    for position, item in enumerate(items):
        if not isinstance(item, dict):
            logger.warning(f"Skipping non-object item at position {position}")
            continue
        parse_item(item, df)

    logger.debug(f"Parsed {len(df)} records into columns {df.columns}")
    return df
