"""Guard clauses shared by the plotting and table helpers."""
import logging
import warnings

import pandas as pd

logger = logging.getLogger(__name__)


class PlotInputError(ValueError):
    """Base class for bad input handed to a plotting or table helper."""


class MissingArgumentsError(PlotInputError):
    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(
            f"Missing required argument(s): {', '.join(self.missing)}"
        )


class FrameNotFoundError(PlotInputError):
    def __init__(self, name):
        self.name = name
        super().__init__(f"Object '{name}' does not exist")


class NotAFrameError(PlotInputError, TypeError):
    def __init__(self, obj, name=None):
        label = f"'{name}'" if name is not None else "Object"
        super().__init__(
            f"{label} is a {type(obj).__name__}, expected a pandas DataFrame"
        )


class MissingColumnError(PlotInputError):
    def __init__(self, column, available=None):
        self.column = column
        msg = f"Column '{column}' is not in the dataframe"
        if available is not None:
            msg += f" (available: {', '.join(map(str, available))})"
        super().__init__(msg)


class MissingDataWarning(UserWarning):
    """Rows were dropped because a selected column had no value."""


def require_arguments(**kwargs):
    """Raise MissingArgumentsError naming every keyword whose value is None."""
    missing = [name for name, value in kwargs.items() if value is None]
    if missing:
        raise MissingArgumentsError(missing)


def resolve_frame(data, namespace=None):
    """
    Return the DataFrame referred to by ``data``.

    A string is looked up in ``namespace`` when one is given, otherwise in the
    built-in dataset registry.
    """
    if isinstance(data, pd.DataFrame):
        return data
    if not isinstance(data, str):
        raise NotAFrameError(data)

    if namespace is not None:
        if data not in namespace:
            raise FrameNotFoundError(data)
        obj = namespace[data]
    else:
        from statblog.data_loader import get_dataset
        obj = get_dataset(data)

    if not isinstance(obj, pd.DataFrame):
        raise NotAFrameError(obj, name=data)
    return obj


def resolve_column(df, column):
    """Map a column name or 0-based position to the column's name."""
    if isinstance(column, bool):
        raise MissingColumnError(column, df.columns)
    if isinstance(column, int):
        if -len(df.columns) <= column < len(df.columns):
            return df.columns[column]
        raise MissingColumnError(column, df.columns)
    if column not in df.columns:
        raise MissingColumnError(column, df.columns)
    return column


def drop_missing(df, columns):
    """Keep only the rows that are complete on ``columns``, warning if any were dropped."""
    columns = list(dict.fromkeys(columns))
    complete = df[columns].notna().all(axis=1)
    dropped = int((~complete).sum())
    if dropped:
        msg = f"{dropped} rows dropped due to missing values in {', '.join(map(str, columns))}"
        logger.warning(msg)
        warnings.warn(msg, MissingDataWarning, stacklevel=3)
    return df.loc[complete].copy()
