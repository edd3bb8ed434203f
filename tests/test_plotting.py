import warnings

import pandas as pd
import plotly.graph_objects as go
import pytest

from statblog.constants import DIRECTION_COLORS, XTAB_PLOT_TYPES
from statblog.plotting import (
    cartesian_pairs,
    plot_model_comparison,
    plot_xtabs,
    plot_xtabs_batch,
    slopegraph,
)
from statblog.validation import (
    FrameNotFoundError,
    MissingArgumentsError,
    MissingColumnError,
    MissingDataWarning,
    NotAFrameError,
)


def _total(fig):
    return sum(float(v) for trace in fig.data for v in trace.y)


class TestPlotXtabsGuards:
    def test_too_few_arguments(self, survey_like):
        with pytest.raises(MissingArgumentsError):
            plot_xtabs(survey_like)
        with pytest.raises(MissingArgumentsError, match="y"):
            plot_xtabs(survey_like, "gender")

    def test_object_does_not_exist(self):
        with pytest.raises(FrameNotFoundError, match="no_such_frame"):
            plot_xtabs("no_such_frame", "gender", "recommend")

    def test_not_a_dataframe(self):
        with pytest.raises(NotAFrameError):
            plot_xtabs({"gender": ["Female"]}, "gender", "recommend")

    def test_missing_column_is_named(self, survey_like):
        with pytest.raises(MissingColumnError) as exc:
            plot_xtabs(survey_like, "gender", "shoe_size")
        assert exc.value.column == "shoe_size"

    def test_missing_values_warn_and_still_plot(self, survey_like):
        with pytest.warns(MissingDataWarning, match="2 rows dropped"):
            fig = plot_xtabs(survey_like, "region", "recommend")
        assert isinstance(fig, go.Figure)
        assert _total(fig) == 6

    def test_unknown_plot_type(self, survey_like):
        with pytest.raises(ValueError, match="side, stack, percent"):
            plot_xtabs(survey_like, "gender", "recommend", plot_type="pie")

    def test_same_column_twice(self, survey_like):
        with pytest.raises(ValueError, match="different columns"):
            plot_xtabs(survey_like, "gender", "gender")


class TestPlotXtabsLayout:
    @pytest.mark.parametrize("plot_type", list(XTAB_PLOT_TYPES))
    def test_layout_follows_option_table(self, survey_like, plot_type):
        options = XTAB_PLOT_TYPES[plot_type]
        fig = plot_xtabs(survey_like, "gender", "score", plot_type=plot_type)
        assert fig.layout.barmode == options["barmode"]
        assert fig.layout.barnorm == options["barnorm"]
        assert fig.layout.yaxis.title.text == options["y_label"]

    def test_one_trace_per_fill_level(self, survey_like):
        fig = plot_xtabs(survey_like, "gender", "score")
        assert len(fig.data) == 8
        assert _total(fig) == 8

    def test_columns_by_position(self, survey_like):
        fig = plot_xtabs(survey_like, 0, 3)
        assert fig.layout.xaxis.title.text == "gender"
        assert fig.layout.legend.title.text == "score"

    def test_builtin_dataset_by_name(self):
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", MissingDataWarning)
            fig = plot_xtabs("survey", "education", "satisfaction", plot_type="percent")
        names = [trace.name for trace in fig.data]
        assert names == ["Low", "Medium", "High"]


class TestCartesianPairs:
    def test_full_product_independents_outer(self):
        xs, ys = cartesian_pairs(["a", "b"], ["y1", "y2", "y3"])
        assert xs == ["a", "a", "a", "b", "b", "b"]
        assert ys == ["y1", "y2", "y3", "y1", "y2", "y3"]

    def test_column_numbers(self):
        xs, ys = cartesian_pairs([1, 2], [5])
        assert list(zip(xs, ys)) == [(1, 5), (2, 5)]

    def test_single_name_is_not_split_into_characters(self):
        assert cartesian_pairs("gender", ["recommend"]) == (["gender"], ["recommend"])

    def test_empty(self):
        assert cartesian_pairs([], ["y"]) == ([], [])


class TestPlotXtabsBatch:
    def test_one_figure_per_pair(self, survey_like):
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", MissingDataWarning)
            figs = plot_xtabs_batch(survey_like, ["gender", "region"], ["recommend"], plot_type="stack")
        assert list(figs) == [("gender", "recommend"), ("region", "recommend")]
        assert all(fig.layout.barmode == "stack" for fig in figs.values())

    def test_resolves_names_once(self):
        with pytest.raises(FrameNotFoundError):
            plot_xtabs_batch("nope", ["a"], ["b"])


class TestSlopegraph:
    def test_one_line_per_group_in_time_order(self, slope_data):
        fig = slopegraph(slope_data, times="season", measurement="wins", grouping="team")
        assert [trace.name for trace in fig.data] == ["A", "B", "C"]
        assert list(fig.data[0].x) == ["2022", "2023", "2024"]
        assert list(fig.data[0].y) == [10, 12, 15]
        assert list(fig.layout.xaxis.categoryarray) == ["2022", "2023", "2024"]

    def test_categorical_order_beats_row_order(self, slope_data):
        shuffled = slope_data.iloc[::-1].reset_index(drop=True)
        fig = slopegraph(shuffled, times="season", measurement="wins", grouping="team")
        trace = next(t for t in fig.data if t.name == "A")
        assert list(trace.x) == ["2022", "2023", "2024"]
        assert list(trace.y) == [10, 12, 15]

    def test_direction_colors(self, slope_data):
        fig = slopegraph(slope_data, times="season", measurement="wins", grouping="team")
        colors = {trace.name: trace.line.color for trace in fig.data}
        assert colors == {
            "A": DIRECTION_COLORS["up"],
            "B": DIRECTION_COLORS["down"],
            "C": DIRECTION_COLORS["flat"],
        }

    def test_value_and_end_labels(self, slope_data):
        fig = slopegraph(slope_data, times="season", measurement="wins", grouping="team")
        assert list(fig.data[1].text) == ["20", "18", "11"]
        assert len(fig.layout.annotations) == 6

    def test_duplicate_observations_rejected(self, slope_data):
        doubled = pd.concat([slope_data, slope_data.iloc[:1]])
        with pytest.raises(ValueError, match="at most one"):
            slopegraph(doubled, times="season", measurement="wins", grouping="team")

    def test_missing_values_warn(self, slope_data):
        slope_data.loc[4, "wins"] = None
        with pytest.warns(MissingDataWarning, match="1 rows dropped"):
            fig = slopegraph(slope_data, times="season", measurement="wins", grouping="team")
        trace = next(t for t in fig.data if t.name == "B")
        assert list(trace.x) == ["2022", "2024"]

    def test_guards(self, slope_data):
        with pytest.raises(MissingArgumentsError):
            slopegraph(slope_data, times="season", measurement="wins")
        with pytest.raises(MissingColumnError):
            slopegraph(slope_data, times="year", measurement="wins", grouping="team")
        with pytest.raises(ValueError, match="color_by"):
            slopegraph(slope_data, "season", "wins", "team", color_by="rainbow")

    def test_cancer_survival_by_name(self):
        fig = slopegraph("cancer_survival", times="year", measurement="survival", grouping="cancer_type")
        assert len(fig.data) == 24
        assert list(fig.data[0].x) == ["5 Year", "10 Year", "15 Year", "20 Year"]


def test_plot_model_comparison():
    scores = pd.DataFrame({
        "model": ["rf"] * 3 + ["gbm"] * 3,
        "fold": [1, 2, 3] * 2,
        "accuracy": [0.8, 0.82, 0.79, 0.81, 0.83, 0.8],
    })
    fig = plot_model_comparison(scores)
    assert len(fig.data) == 2
    assert fig.layout.yaxis.title.text == "Accuracy"
