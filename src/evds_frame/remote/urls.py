"""EVDS request URL construction."""

from typing import Optional

from ..config import Config
from .index import INDEX_DELIMITER, Index

DOMAIN = "https://evds2.tcmb.gov.tr/"

FREQUENCY_CODES = {
    "daily": "1",
    "business": "2",
    "weekly": "3",
    "semimonthly": "4",
    "monthly": "5",
    "quarterly": "6",
    "semiannually": "7",
    "annual": "8",
    "annually": "8",
}

FORMULA_CODES = {
    "level": "0",
    "percentage_change": "1",
    "pc": "1",
    "difference": "2",
    "d": "2",
    "yoy": "3",
    "yoy_p": "3",
    "yoy_pc": "3",
    "yoy_percent": "3",
    "yoy_diff": "4",
    "yoy_d": "4",
    "pc_end": "5",
    "dif_end": "6",
    "mov_ave": "7",
    "ma": "7",
    "mov_sum": "8",
    "ms": "8",
}


class UrlBuilder:
    """Build the service URL for one Index.

    A single 'bie_' index is requested as a data group, everything else as
    a list of series.
    """

    def __init__(self, index: Index, config: Optional[Config] = None):
        self.index = index
        self.config = config or Config()

    def get_url(self) -> str:
        if self.index.is_datagroup:
            return self.build_datagroup()
        return self.build()

    def _repeat(self, value: str) -> str:
        # One entry per series, in series order
        return INDEX_DELIMITER.join(value for _ in self.index.parts)

    def frequency_query(self) -> str:
        code = FREQUENCY_CODES.get(self.config.frequency)
        return f"&frequency={code}" if code else ""

    def aggregation_query(self) -> str:
        if self.config.frequency == "default":
            return ""
        if self.config.aggregation == "default":
            return f"&aggregationTypes={self._repeat('avg')}"
        return f"&aggregationTypes={self.config.aggregation}"

    def formulas_query(self) -> str:
        code = FORMULA_CODES.get(self.config.formulas)
        return f"&formulas={self._repeat(code)}" if code else ""

    def build(self) -> str:
        return (
            f"{DOMAIN}service/evds/series={self.index.get()}"
            f"&startDate={self.config.start_date}"
            f"&endDate={self.config.end_date}"
            f"{self.frequency_query()}"
            f"{self.aggregation_query()}"
            f"{self.formulas_query()}"
            "&type=json"
        )

    def build_datagroup(self) -> str:
        return (
            f"{DOMAIN}service/evds/datagroup={self.index.get()}"
            f"&startDate={self.config.start_date}"
            f"&endDate={self.config.end_date}"
            "&type=json"
        )
