"""Post 1: Slopegraphs -- Tufte's cancer survival table, one line per cancer."""
import warnings

import pandas as pd
import streamlit as st

from statblog.data_loader import YEAR_LABELS, load_data, sidebar_filters
from statblog.plotting import slopegraph
from statblog.stats_helpers import descriptive_stats
from statblog.ui_components import (
    post_header, concept_box, insight_box, warning_box,
    code_example, takeaways, navigation, show_warnings,
)

# ── Header ───────────────────────────────────────────────────────────────────
post_header(1, "Slopegraphs", tags=["plotting", "tufte"])
st.markdown(
    "Edward Tufte printed a table of cancer survival rates in *Beautiful Evidence* and "
    "then drew it again as a slopegraph: each cancer a line, each column a time point, "
    "the numbers written right on the chart. The table holds the same information, but "
    "the slopegraph lets you see which cancers fall off a cliff after five years and "
    "which barely move."
)

df = load_data("cancer_survival")
fdf = sidebar_filters(df, "cancer_type", label="Cancer types")

# ── 1.1 The Data ─────────────────────────────────────────────────────────────
st.header("1.1  The Data")
wide = fdf.pivot(index="cancer_type", columns="year", values="survival")
wide = wide[[y for y in YEAR_LABELS if y in wide.columns]]
st.dataframe(wide.sort_values(YEAR_LABELS[0], ascending=False), use_container_width=True)

stats = descriptive_stats(fdf.loc[fdf["year"] == YEAR_LABELS[0], "survival"])
c1, c2, c3 = st.columns(3)
c1.metric("Cancer types", fdf["cancer_type"].nunique())
c2.metric("Median 5-year survival", f"{stats['median']:.0f}%")
c3.metric("IQR", f"{stats['iqr']:.0f} pts")

# ── 1.2 The Slopegraph ───────────────────────────────────────────────────────
st.header("1.2  Drawing the Slopegraph")

concept_box(
    "What a Slopegraph Shows",
    "The x-axis is a small number of ordered categories (here, years since diagnosis). "
    "Every entity gets one line. Because the values are printed at each point, nothing "
    "is lost compared to the table, and the slope of each line carries the story: "
    "steep means change, flat means stability."
)

years = st.multiselect("Time points", YEAR_LABELS, default=YEAR_LABELS, key="slope_years")
color_by = st.radio("Color lines by", ["direction", "group"], horizontal=True, key="slope_color")

plot_df = fdf[fdf["year"].isin(years)]
if len(years) < 2:
    st.error("Pick at least two time points; a slopegraph with one column is a list.")
else:
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        fig = slopegraph(
            plot_df, times="year", measurement="survival", grouping="cancer_type",
            title="Estimates of % survival rates", color_by=color_by,
        )
    st.plotly_chart(fig, use_container_width=True)
    show_warnings(caught)

insight_box(
    "Most lines slope gently downwards, but look at multiple myeloma: 30% at five years, "
    "5% at twenty. Thyroid and liver cancers are flat. In the table you would have had "
    "to subtract numbers in your head to see that."
)

# ── 1.3 Biggest Movers ───────────────────────────────────────────────────────
st.header("1.3  Who Changes the Most?")
if len(years) >= 2:
    first, last = years[0], years[-1]
    change = (wide[last] - wide[first]).rename("change").sort_values()
    st.dataframe(pd.DataFrame(change), use_container_width=True)

warning_box(
    "Slopegraphs assume one value per entity per time point. Feed it two rows for "
    "'Breast' at '5 Year' and there is no honest line to draw, so the helper refuses "
    "rather than guessing."
)

code_example("""
from statblog.plotting import slopegraph

fig = slopegraph(df, times="year", measurement="survival", grouping="cancer_type",
                 title="Estimates of % survival rates")
fig.show()
""")

takeaways([
    "A slopegraph is a table with the comparisons drawn for you.",
    "Keep the time axis categorical and ordered; the helper uses the categorical order when there is one.",
    "Colour by direction to make 'up' and 'down' pop, or by group when the lines need telling apart.",
    "Missing values are dropped with a warning that says how many rows went.",
])

st.divider()
navigation(next_label="Plotting Crosstabs", next_page="02_Crosstab_Plots.py")
