"""Frequency tables and the crosstab workbook export."""
import logging

import pandas as pd

from statblog.constants import MAX_SHEET_NAME, SHEET_NAME_FORBIDDEN
from statblog.plotting import cartesian_pairs
from statblog.validation import drop_missing, require_arguments, resolve_column, resolve_frame

logger = logging.getLogger(__name__)


def descriptive_stats(series):
    """Compute comprehensive descriptive statistics for a numeric series."""
    return {
        "count": len(series),
        "mean": series.mean(),
        "median": series.median(),
        "std": series.std(),
        "min": series.min(),
        "max": series.max(),
        "q25": series.quantile(0.25),
        "q75": series.quantile(0.75),
        "iqr": series.quantile(0.75) - series.quantile(0.25),
    }


def frequency_table(data=None, dependent=None, independent=None, margins=False, namespace=None):
    """Two-way counts: dependent levels down the rows, independent levels across."""
    require_arguments(data=data, dependent=dependent, independent=independent)
    df = resolve_frame(data, namespace)
    dependent = resolve_column(df, dependent)
    independent = resolve_column(df, independent)
    clean = drop_missing(df, [dependent, independent])
    return pd.crosstab(clean[dependent], clean[independent], margins=margins, margins_name="Total")


def percent_table(data=None, dependent=None, independent=None, namespace=None):
    """Column percentages of the two-way table (each independent level sums to 100)."""
    require_arguments(data=data, dependent=dependent, independent=independent)
    df = resolve_frame(data, namespace)
    dependent = resolve_column(df, dependent)
    independent = resolve_column(df, independent)
    clean = drop_missing(df, [dependent, independent])
    return pd.crosstab(clean[dependent], clean[independent], normalize="columns") * 100.0


def sheet_name(dependent, independent):
    """Workbook sheet name for a pairing: dependent name then independent name."""
    name = f"{dependent}{independent}"
    name = "".join(ch for ch in name if ch not in SHEET_NAME_FORBIDDEN)
    return name[:MAX_SHEET_NAME]


def _unique_sheet_name(name, taken):
    # Excel compares sheet titles case-insensitively
    taken = {t.lower() for t in taken}
    if name.lower() not in taken:
        return name
    n = 2
    while True:
        suffix = f"_{n}"
        candidate = name[:MAX_SHEET_NAME - len(suffix)] + suffix
        if candidate.lower() not in taken:
            return candidate
        n += 1


def write_crosstab_workbook(data, independents, dependents, path, namespace=None):
    """
    Write one sheet per independent/dependent pairing holding its frequency table.

    Returns the sheet names in the order they were written.
    """
    df = resolve_frame(data, namespace)
    xs, ys = cartesian_pairs(independents, dependents)
    if not xs:
        raise ValueError("Need at least one independent and one dependent column")

    # Resolve every column and sheet name before the writer opens; an empty workbook cannot be saved
    pairs = [(resolve_column(df, x), resolve_column(df, y)) for x, y in zip(xs, ys)]
    names = []
    for i, (independent, dependent) in enumerate(pairs, 1):
        name = sheet_name(dependent, independent) or f"Sheet{i}"
        names.append(_unique_sheet_name(name, names))

    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for (independent, dependent), name in zip(pairs, names):
            table = frequency_table(df, dependent, independent)
            table.to_excel(writer, sheet_name=name)
            logger.debug("Wrote sheet %s (%d x %d)", name, *table.shape)

    logger.info("Wrote %d crosstab sheets to %s", len(names), path)
    return names
