"""Command-line entry point: fetch EVDS indexes and write one CSV each."""

import argparse
import logging
import sys
from typing import Optional, Sequence

from tqdm import tqdm

from .config import Config
from .errors import EvdsError
from .remote.client import EvdsClient, export_series
from .remote.index import parse_index_args

logger = logging.getLogger(__name__)

EPILOG = """\
examples:
  # each index gets its own file
  evds-frame TP.DK.USD.A,TP.DK.EUR.A

  # two indexes in the same file
  evds-frame TP.DK.USD.A-TP.DK.EUR.A

  # with date range and cache
  evds-frame TP.DK.USD.A --start_date 01-01-2021 --end_date 31-12-2021 --cache true

  # a data group and a grouped pair, two files
  evds-frame bie_yssk,TP.DK.USD.A-TP.DK.EUR.A
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="evds-frame",
        description="Request data from the EVDS API and export it as CSV.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "indexes",
        nargs="*",
        help="Comma-separated indexes (e.g. TP.DK.USD.A,TP.DK.EUR.A); "
        "use '-' to group indexes in a single file, or pass a .txt file",
    )
    parser.add_argument("--start_date", help="Start date, DD-MM-YYYY")
    parser.add_argument("--end_date", help="End date, DD-MM-YYYY")
    parser.add_argument("--frequency", help="daily, monthly, annually, ...")
    parser.add_argument("--formulas", help="level, percentage_change, difference, yoy, ...")
    parser.add_argument("--aggregation", help="avg, min, max, first, last, sum")
    parser.add_argument("--cache", nargs="?", const="true", help="true|false")
    parser.add_argument("--cache_dir", help="Response cache directory")
    parser.add_argument("--test", nargs="?", const="true", help="true|false")
    parser.add_argument("--verbose", nargs="?", const="true", help="true|false")
    parser.add_argument("--proxy", help="Proxy URL")
    parser.add_argument("--timeout", type=float, help="HTTP timeout in seconds")
    parser.add_argument("--delimiter", help="CSV field separator")
    parser.add_argument("--output_dir", help="Directory for the CSV files")
    return parser


def run(config: Config, client: Optional[EvdsClient] = None) -> int:
    """Export every configured index, continuing past failures.

    Returns:
        Number of indexes that failed
    """
    client = client or EvdsClient(config)
    failures = 0
    for template in tqdm(config.indexes, desc="Fetching indexes", disable=len(config.indexes) < 2):
        try:
            path = export_series(template, config, client)
        except (EvdsError, OSError) as e:
            failures += 1
            logger.error(f"passing: {template}: {e}")
            continue
        logger.info(f"{template} -> {path}")
    return failures


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    options = {k: v for k, v in vars(args).items() if k != "indexes"}
    config = Config.from_args(options)
    config.indexes = parse_index_args(args.indexes)

    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not config.indexes:
        print("No indexes provided.", file=sys.stderr)
        parser.print_help()
        return 2

    failures = run(config)
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
