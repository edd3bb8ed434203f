"""Post 2: Plotting Crosstabs -- side-by-side, stacked and percent bars for two categorical variables."""
import os
import tempfile
import warnings

import streamlit as st

from statblog.constants import SURVEY_COLUMNS, XTAB_PLOT_TYPES
from statblog.data_loader import load_data, sidebar_filters
from statblog.plotting import cartesian_pairs, heatmap_chart, plot_xtabs, plot_xtabs_batch
from statblog.stats_helpers import frequency_table, percent_table, write_crosstab_workbook
from statblog.validation import PlotInputError
from statblog.ui_components import (
    post_header, concept_box, insight_box, warning_box,
    code_example, quiz, takeaways, navigation, show_warnings,
)

# ── Header ───────────────────────────────────────────────────────────────────
post_header(2, "Plotting Crosstabs", tags=["plotting", "categorical"])
st.markdown(
    "Survey data is mostly categorical, and the first thing anyone asks of two categorical "
    "columns is 'how do they relate?' The answer is a crosstab, and a crosstab deserves a "
    "bar chart. There are exactly three bar charts worth drawing, so this post wraps them "
    "in one function with a `plot_type` switch."
)

df = load_data("survey")
fdf = sidebar_filters(df, "region", label="Regions")

# ── 2.1 One Crosstab, Three Charts ───────────────────────────────────────────
st.header("2.1  One Crosstab, Three Charts")

concept_box(
    "Side, Stack, Percent",
    "<b>side</b> puts the bars next to each other: best for comparing raw counts. "
    "<b>stack</b> piles them up: best for seeing group totals. <b>percent</b> stretches "
    "every stack to 100%: best for comparing proportions when the groups differ in size."
)

c1, c2, c3 = st.columns(3)
x_col = c1.selectbox("Independent (x)", SURVEY_COLUMNS, index=3, key="xt_x")
y_col = c2.selectbox("Dependent (fill)", SURVEY_COLUMNS, index=4, key="xt_y")
plot_type = c3.selectbox("plot_type", list(XTAB_PLOT_TYPES), key="xt_type")

try:
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        fig = plot_xtabs(fdf, x_col, y_col, plot_type=plot_type)
    st.plotly_chart(fig, use_container_width=True)
    show_warnings(caught)

    col_a, col_b = st.columns(2)
    with col_a:
        st.subheader("Counts")
        st.dataframe(frequency_table(fdf, y_col, x_col, margins=True), use_container_width=True)
    with col_b:
        st.subheader("Column %")
        st.dataframe(percent_table(fdf, y_col, x_col).round(1), use_container_width=True)
except ValueError as e:
    st.error(str(e))

insight_box(
    "Switch between 'stack' and 'percent' with education on the x-axis. The graduate bar "
    "is the shortest stack, which makes its share of 'High' satisfaction look small. In "
    "the percent view it is the largest. Counts and proportions answer different questions."
)

st.subheader("The Same Table as a Heatmap")
st.plotly_chart(
    heatmap_chart(frequency_table(fdf, y_col, x_col), x_label=x_col, y_label=y_col, height=380),
    use_container_width=True,
)

# ── 2.2 What Goes Wrong ──────────────────────────────────────────────────────
st.header("2.2  Telling You What Went Wrong")
st.markdown(
    "A plotting helper that fails with a stack trace from deep inside Plotly is no fun. "
    "`plot_xtabs` checks its inputs first: every argument present, the data exists and "
    "is a DataFrame, both columns are in it. Rows with missing answers are dropped with a "
    "warning that says how many went, and you still get your chart."
)

bad_calls = {
    "plot_xtabs(survey)": lambda: plot_xtabs(fdf),
    "plot_xtabs('no_such_data', 'gender', 'recommend')": lambda: plot_xtabs("no_such_data", "gender", "recommend"),
    "plot_xtabs([1, 2, 3], 'gender', 'recommend')": lambda: plot_xtabs([1, 2, 3], "gender", "recommend"),
    "plot_xtabs(survey, 'gender', 'shoe_size')": lambda: plot_xtabs(fdf, "gender", "shoe_size"),
}
call = st.selectbox("Try a bad call", list(bad_calls), key="xt_bad")
try:
    bad_calls[call]()
except PlotInputError as e:
    st.code(f"{type(e).__name__}: {e}", language="text")

warning_box(
    "Data names are looked up among the blog's built-in datasets, so "
    "`plot_xtabs('survey', 'gender', 'recommend')` works while a typo in the name fails "
    "loudly instead of silently plotting the wrong thing."
)

# ── 2.3 Every Pairing at Once ────────────────────────────────────────────────
st.header("2.3  Every Pairing at Once")
independents = st.multiselect(
    "Independent variables", SURVEY_COLUMNS, default=["gender", "age_group"], key="xt_ind"
)
dependents = st.multiselect(
    "Dependent variables", SURVEY_COLUMNS, default=["satisfaction", "recommend"], key="xt_dep"
)

independents = [x for x in independents if x not in dependents]
xs, ys = cartesian_pairs(independents, dependents)
st.caption(f"{len(xs)} pairings: " + ", ".join(f"{x} → {y}" for x, y in zip(xs, ys)))

if xs:
    with warnings.catch_warnings(record=True):
        warnings.simplefilter("always")
        figs = plot_xtabs_batch(fdf, independents, dependents, plot_type="percent")
    cols = st.columns(2)
    for i, fig in enumerate(figs.values()):
        cols[i % 2].plotly_chart(fig, use_container_width=True)

    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "crosstabs.xlsx")
        with warnings.catch_warnings(record=True):
            warnings.simplefilter("always")
            sheets = write_crosstab_workbook(fdf, independents, dependents, path)
        with open(path, "rb") as fh:
            st.download_button(
                f"Download {len(sheets)} crosstabs as Excel", fh.read(),
                file_name="crosstabs.xlsx", key="xt_download",
            )

code_example("""
from statblog.plotting import plot_xtabs, plot_xtabs_batch
from statblog.stats_helpers import write_crosstab_workbook

plot_xtabs(survey, "education", "satisfaction", plot_type="percent")

figs = plot_xtabs_batch(survey, ["gender", "age_group"], ["satisfaction", "recommend"])
write_crosstab_workbook(survey, ["gender", "age_group"], ["satisfaction", "recommend"],
                        "crosstabs.xlsx")
""")

st.divider()
quiz(
    "Group sizes differ a lot and you want to compare proportions. Which plot_type?",
    ["side", "stack", "percent"],
    correct_idx=2,
    explanation="Percent bars remove the group size so every bar is read on the same 0-100 scale.",
    key="q_xt_1",
)

takeaways([
    "Three plot types cover almost every two-variable categorical question.",
    "Check inputs before plotting and say exactly which column is missing.",
    "Dropping incomplete rows is fine as long as you say how many you dropped.",
    "A Cartesian product of column lists turns one plot into a whole report.",
])

st.divider()
navigation(
    prev_label="Slopegraphs", prev_page="01_Slopegraphs.py",
    next_label="CHAID Decision Trees", next_page="03_CHAID_Trees.py",
)
