import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def survey_like():
    """Small categorical frame with two incomplete rows."""
    return pd.DataFrame({
        "gender": ["Female", "Male", "Female", "Male", "Female", "Male", "Female", "Male"],
        "region": ["North", "South", "North", None, "South", "North", "South", "North"],
        "recommend": ["Yes", "No", "Yes", "Yes", "No", "No", np.nan, "Yes"],
        "score": [1, 2, 3, 4, 5, 6, 7, 8],
    })


@pytest.fixture
def slope_data():
    return pd.DataFrame({
        "team": ["A", "A", "A", "B", "B", "B", "C", "C", "C"],
        "season": pd.Categorical(
            ["2022", "2023", "2024"] * 3, categories=["2022", "2023", "2024"], ordered=True
        ),
        "wins": [10, 12, 15, 20, 18, 11, 7, 9, 7],
    })
