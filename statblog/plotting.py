"""Shared Plotly plotting helpers: crosstab bars, slopegraphs, model comparisons."""
import itertools
import logging

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from statblog.constants import DIRECTION_COLORS, SERIES_COLORS, XTAB_PLOT_TYPES
from statblog.validation import drop_missing, require_arguments, resolve_column, resolve_frame

logger = logging.getLogger(__name__)


def apply_common_layout(fig, title=None, height=500):
    """Apply common layout settings to a Plotly figure."""
    fig.update_layout(
        template="plotly_white",
        height=height,
        title=title,
        title_x=0.5,
        margin=dict(t=60, b=40, l=60, r=40),
    )
    return fig


def _levels(series, sort=True):
    """Distinct non-missing values of a column as strings, in display order."""
    if isinstance(series.dtype, pd.CategoricalDtype):
        present = set(series.dropna().unique())
        return [str(c) for c in series.cat.categories if c in present]
    values = series.dropna().unique().tolist()
    if sort:
        values = sorted(values, key=lambda v: (str(type(v)), v))
    return [str(v) for v in values]


def plot_xtabs(data=None, x=None, y=None, plot_type="side", namespace=None, title=None, height=500):
    """
    Bar chart of the counts of ``y`` within each level of ``x``.

    ``plot_type`` picks the bar layout: "side" (grouped), "stack" (stacked) or
    "percent" (stacked and filled to 100%). ``data`` may be a DataFrame or the
    name of one; ``x`` and ``y`` may be column names or 0-based positions.
    """
    require_arguments(data=data, x=x, y=y)
    if plot_type not in XTAB_PLOT_TYPES:
        raise ValueError(
            f"plot_type must be one of {', '.join(XTAB_PLOT_TYPES)}, got '{plot_type}'"
        )
    options = XTAB_PLOT_TYPES[plot_type]

    df = resolve_frame(data, namespace)
    x = resolve_column(df, x)
    y = resolve_column(df, y)
    if x == y:
        raise ValueError(f"x and y must be different columns, both are '{x}'")

    clean = drop_missing(df, [x, y])
    x_order, y_order = _levels(clean[x]), _levels(clean[y])
    counts = clean.groupby([x, y], observed=True).size().reset_index(name="count")
    counts[x] = counts[x].astype(str)
    counts[y] = counts[y].astype(str)
    logger.debug("Crosstab %s x %s: %d cells from %d rows", x, y, len(counts), len(clean))

    fig = px.bar(
        counts, x=x, y="count", color=y,
        barmode=options["barmode"],
        category_orders={x: x_order, y: y_order},
        color_discrete_sequence=SERIES_COLORS,
    )
    if options["barnorm"]:
        fig.update_layout(barnorm=options["barnorm"])
    fig.update_layout(xaxis_title=str(x), yaxis_title=options["y_label"], legend_title_text=str(y))
    return apply_common_layout(fig, title or f"{y} by {x}", height)


def cartesian_pairs(independents, dependents):
    """
    Every (independent, dependent) combination as two parallel lists.

    Independents vary slowest, so pairs for the first independent come first.
    """
    if isinstance(independents, (str, int)):
        independents = [independents]
    if isinstance(dependents, (str, int)):
        dependents = [dependents]
    pairs = list(itertools.product(independents, dependents))
    return [p[0] for p in pairs], [p[1] for p in pairs]


def plot_xtabs_batch(data, independents, dependents, plot_type="side", namespace=None, height=450):
    """Crosstab plots for every independent/dependent pairing, keyed by (x, y)."""
    df = resolve_frame(data, namespace)
    xs, ys = cartesian_pairs(independents, dependents)
    return {
        (x, y): plot_xtabs(df, x, y, plot_type=plot_type, height=height)
        for x, y in zip(xs, ys)
    }


def _direction(first, last):
    if last > first:
        return "up"
    if last < first:
        return "down"
    return "flat"


def slopegraph(data=None, times=None, measurement=None, grouping=None, title=None,
               color_by="direction", namespace=None, value_format="{:g}", height=None):
    """
    Tufte-style slopegraph: one line per group across ordered time points.

    Values are printed at every point and group names at both ends of each
    line. Time points follow the category order of a categorical column,
    otherwise the order in which they first appear.
    """
    require_arguments(data=data, times=times, measurement=measurement, grouping=grouping)
    if color_by not in ("direction", "group"):
        raise ValueError(f"color_by must be 'direction' or 'group', got '{color_by}'")

    df = resolve_frame(data, namespace)
    times = resolve_column(df, times)
    measurement = resolve_column(df, measurement)
    grouping = resolve_column(df, grouping)

    clean = drop_missing(df, [times, measurement, grouping])
    if clean.duplicated([grouping, times]).any():
        raise ValueError(f"Each {grouping} needs at most one {measurement} per {times}")

    time_order = _levels(clean[times], sort=False)
    position = {label: i for i, label in enumerate(time_order)}

    fig = go.Figure()
    for i, (group, rows) in enumerate(clean.groupby(grouping, sort=False, observed=True)):
        labels = rows[times].astype(str)
        rows = rows.assign(_label=labels, _pos=labels.map(position)).sort_values("_pos")
        values = rows[measurement].tolist()
        if color_by == "direction":
            color = DIRECTION_COLORS[_direction(values[0], values[-1])]
        else:
            color = SERIES_COLORS[i % len(SERIES_COLORS)]

        fig.add_trace(go.Scatter(
            x=rows["_label"].tolist(), y=values,
            mode="lines+markers+text",
            text=[value_format.format(v) for v in values],
            textposition="top center",
            textfont=dict(size=9),
            name=str(group),
            line=dict(color=color, width=2),
            marker=dict(size=5),
            showlegend=False,
        ))
        for label, value, anchor, shift in [
            (rows["_label"].iloc[0], values[0], "right", -12),
            (rows["_label"].iloc[-1], values[-1], "left", 12),
        ]:
            fig.add_annotation(
                x=label, y=value, text=str(group), showarrow=False,
                xanchor=anchor, xshift=shift, font=dict(size=10, color=color),
            )

    n_groups = len(fig.data)
    apply_common_layout(fig, title, height or max(500, 24 * n_groups))
    fig.update_layout(margin=dict(t=80, b=40, l=170, r=170))
    fig.update_xaxes(
        categoryorder="array", categoryarray=time_order,
        side="top", showgrid=False, title=None,
    )
    fig.update_yaxes(visible=False)
    return fig


def heatmap_chart(data, x_label="", y_label="", title=None, height=500, color_scale="Blues"):
    """Create an annotated heatmap from a 2D DataFrame such as a frequency table."""
    fig = go.Figure(data=go.Heatmap(
        z=data.values,
        x=[str(c) for c in data.columns],
        y=[str(i) for i in data.index],
        colorscale=color_scale,
        text=data.values, texttemplate="%{text}",
    ))
    fig.update_layout(xaxis_title=x_label, yaxis_title=y_label)
    return apply_common_layout(fig, title, height)


def plot_model_comparison(scores, metric="accuracy", title=None, height=450):
    """Box plot of per-fold scores, one box per model."""
    fig = px.box(
        scores, x="model", y=metric, color="model", points="all",
        color_discrete_sequence=SERIES_COLORS,
    )
    fig.update_layout(showlegend=False, xaxis_title="", yaxis_title=metric.replace("_", " ").title())
    return apply_common_layout(fig, title or f"Cross-validated {metric} by model", height)
