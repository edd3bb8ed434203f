"""Write a workbook of two-way frequency tables, one sheet per independent/dependent pairing."""
import argparse
import logging
import sys

from statblog.data_loader import DATASETS, get_dataset, load_csv
from statblog.logger import setup_logging
from statblog.stats_helpers import write_crosstab_workbook
from statblog.validation import PlotInputError

logger = logging.getLogger("export_crosstabs")

DEFAULT_INDEPENDENTS = ["gender", "age_group", "region", "education"]
DEFAULT_DEPENDENTS = ["satisfaction", "recommend"]


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__)
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--dataset", default="survey", choices=sorted(DATASETS),
                        help="built-in dataset to tabulate (default: survey)")
    source.add_argument("--csv", help="CSV file to tabulate instead of a built-in dataset")
    parser.add_argument("-i", "--independent", nargs="+", default=DEFAULT_INDEPENDENTS,
                        help="independent (column) variables")
    parser.add_argument("-d", "--dependent", nargs="+", default=DEFAULT_DEPENDENTS,
                        help="dependent (row) variables")
    parser.add_argument("-o", "--output", default="crosstabs.xlsx", help="workbook to write")
    parser.add_argument("--log-level", default=None, help="console log level")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_level)

    df = load_csv(args.csv) if args.csv else get_dataset(args.dataset)
    logger.info("Loaded %d rows x %d columns", *df.shape)

    try:
        sheets = write_crosstab_workbook(df, args.independent, args.dependent, args.output)
    except PlotInputError as e:
        logger.error("%s", e)
        return 1

    for name in sheets:
        print(f"  {name}")
    print(f"\nDone! {len(sheets)} sheets written to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
