"""Built-in datasets, cached loading and sidebar filtering."""
import logging
import os

import numpy as np
import pandas as pd
import streamlit as st

from statblog.constants import DATA_DIR, RANDOM_SEED
from statblog.validation import FrameNotFoundError

logger = logging.getLogger(__name__)

YEAR_LABELS = ["5 Year", "10 Year", "15 Year", "20 Year"]

# Tufte's relative survival rates (%), The Visual Display of Quantitative Information
CANCER_SURVIVAL = {
    "Prostate": [99, 95, 87, 81],
    "Thyroid": [96, 96, 94, 95],
    "Testis": [95, 94, 91, 88],
    "Melanomas": [89, 87, 84, 83],
    "Breast": [86, 78, 71, 65],
    "Hodgkin's disease": [85, 80, 74, 67],
    "Corpus uteri, uterus": [84, 83, 81, 79],
    "Urinary, bladder": [82, 76, 70, 68],
    "Cervix, uteri": [71, 64, 63, 60],
    "Larynx": [69, 57, 46, 38],
    "Rectum": [63, 55, 52, 49],
    "Kidney, renal pelvis": [62, 54, 50, 47],
    "Colon": [62, 55, 54, 52],
    "Non-Hodgkin's": [58, 46, 38, 34],
    "Oral cavity, pharynx": [57, 44, 38, 33],
    "Ovary": [55, 49, 50, 50],
    "Leukemia": [43, 32, 30, 26],
    "Brain, nervous system": [32, 29, 28, 26],
    "Multiple myeloma": [30, 13, 7, 5],
    "Stomach": [24, 19, 19, 15],
    "Lung and bronchus": [15, 11, 8, 6],
    "Esophagus": [14, 8, 8, 5],
    "Liver, bile duct": [8, 6, 6, 8],
    "Pancreas": [4, 3, 3, 3],
}

AGE_GROUPS = ["18-29", "30-44", "45-64", "65+"]
EDUCATION_LEVELS = ["High school", "Some college", "Bachelor", "Graduate"]
SATISFACTION_LEVELS = ["Low", "Medium", "High"]


def load_cancer_survival():
    """Tufte's cancer survival table in long format (one row per type and year)."""
    rows = [
        {"cancer_type": cancer, "year": year, "survival": rate}
        for cancer, rates in CANCER_SURVIVAL.items()
        for year, rate in zip(YEAR_LABELS, rates)
    ]
    df = pd.DataFrame(rows)
    df["year"] = pd.Categorical(df["year"], categories=YEAR_LABELS, ordered=True)
    return df


def load_survey(n=600, seed=RANDOM_SEED):
    """Synthetic customer survey with categorical answers and a few skipped questions."""
    rng = np.random.RandomState(seed)
    gender = rng.choice(["Female", "Male"], size=n)
    age_idx = rng.choice(len(AGE_GROUPS), size=n, p=[0.22, 0.30, 0.33, 0.15])
    edu_idx = rng.choice(len(EDUCATION_LEVELS), size=n, p=[0.30, 0.25, 0.28, 0.17])
    region = rng.choice(["North", "South", "East", "West"], size=n)

    # Older and better educated respondents lean towards higher satisfaction
    score = 0.35 * age_idx + 0.45 * edu_idx + (region == "West") * 0.4 + rng.normal(0, 0.9, n)
    sat_idx = np.digitize(score, [0.9, 1.9])
    p_yes = np.array([0.15, 0.5, 0.85])[sat_idx]
    recommend = np.where(rng.uniform(size=n) < p_yes, "Yes", "No")

    df = pd.DataFrame({
        "gender": gender,
        "age_group": np.array(AGE_GROUPS)[age_idx],
        "region": region,
        "education": np.array(EDUCATION_LEVELS)[edu_idx],
        "satisfaction": np.array(SATISFACTION_LEVELS)[sat_idx],
        "recommend": recommend,
    })
    for col in ["region", "satisfaction"]:
        skipped = rng.choice(n, size=max(1, n // 50), replace=False)
        df.loc[skipped, col] = np.nan

    df["age_group"] = pd.Categorical(df["age_group"], categories=AGE_GROUPS, ordered=True)
    df["education"] = pd.Categorical(df["education"], categories=EDUCATION_LEVELS, ordered=True)
    df["satisfaction"] = pd.Categorical(df["satisfaction"], categories=SATISFACTION_LEVELS, ordered=True)
    return df


def load_attrition(n=1000, seed=RANDOM_SEED):
    """Synthetic employee attrition data: mixed categorical/numeric predictors, binary target."""
    rng = np.random.RandomState(seed)
    department = rng.choice(["Sales", "R&D", "HR"], size=n, p=[0.35, 0.55, 0.10])
    overtime = rng.choice(["Yes", "No"], size=n, p=[0.3, 0.7])
    travel = rng.choice(["Non-Travel", "Rarely", "Frequently"], size=n, p=[0.15, 0.65, 0.20])
    job_level = rng.choice(["L1", "L2", "L3", "L4"], size=n, p=[0.35, 0.35, 0.2, 0.1])
    age = rng.randint(18, 61, size=n)
    years = np.clip(rng.poisson(6, size=n), 0, age - 18)
    level_num = np.array([int(lvl[1]) for lvl in job_level])
    income = np.round(2500 + 2200 * level_num + 40 * years + rng.normal(0, 600, n), -1)
    satisfaction = rng.randint(1, 5, size=n)

    logit = (
        -1.6
        + 1.3 * (overtime == "Yes")
        + 0.8 * (travel == "Frequently")
        + 0.3 * (department == "Sales")
        - 0.04 * (age - 35)
        - 0.12 * years
        - 0.45 * (satisfaction - 2.5)
        - 0.00015 * (income - 6000)
    )
    attrition = np.where(rng.uniform(size=n) < 1 / (1 + np.exp(-logit)), "Yes", "No")

    return pd.DataFrame({
        "department": department,
        "overtime": overtime,
        "travel": travel,
        "job_level": job_level,
        "age": age,
        "monthly_income": income,
        "years_at_company": years,
        "satisfaction_score": satisfaction,
        "attrition": attrition,
    })


DATASETS = {
    "cancer_survival": load_cancer_survival,
    "survey": load_survey,
    "attrition": load_attrition,
}


def get_dataset(name):
    """Build a built-in dataset by name."""
    if name not in DATASETS:
        raise FrameNotFoundError(name)
    return DATASETS[name]()


def load_csv(path, **kwargs):
    """Read a CSV, resolving relative paths against the data directory."""
    if not os.path.isabs(path):
        path = os.path.join(DATA_DIR, path)
    logger.info("Reading %s", path)
    return pd.read_csv(path, **kwargs)


@st.cache_data
def load_data(name):
    """Cached access to a built-in dataset for the posts."""
    return get_dataset(name)


def sidebar_filters(df, column, label=None):
    """Render a sidebar multiselect over the levels of ``column``; return filtered DataFrame."""
    st.sidebar.header("Filters")
    levels = df[column].dropna().unique().tolist()
    if isinstance(df[column].dtype, pd.CategoricalDtype):
        levels = [lvl for lvl in df[column].cat.categories if lvl in levels]
    selected = st.sidebar.multiselect(
        label or column.replace("_", " ").title(), levels,
        default=levels,
        key=f"filter_{column}",
    )
    return df[df[column].isin(selected)].copy()
