import numpy as np
import pandas as pd
import pytest
from sklearn.base import BaseEstimator, ClassifierMixin, clone

from statblog.chaid_model import (
    ChaidClassifier,
    chaid_param_grid,
    search_results,
    sort_candidates,
    tune_chaid,
)


class MajorityClassifier(ClassifierMixin, BaseEstimator):
    """Takes the CHAID knobs but always predicts the majority class, so every candidate ties."""

    def __init__(self, alpha_merge=0.05, max_depth=2, min_parent_node_size=30, min_child_node_size=0):
        self.alpha_merge = alpha_merge
        self.max_depth = max_depth
        self.min_parent_node_size = min_parent_node_size
        self.min_child_node_size = min_child_node_size

    def fit(self, X, y):
        self.classes_ = np.unique(y)
        self.majority_ = pd.Series(y).mode()[0]
        return self

    def predict(self, X):
        return np.full(len(X), self.majority_)


@pytest.fixture
def separable():
    """Colour decides the outcome; shape is noise."""
    rng = np.random.RandomState(0)
    n = 300
    colour = rng.choice(["red", "green", "blue"], size=n)
    shape = rng.choice(["circle", "square"], size=n)
    y = np.where(colour == "red", "Yes", "No")
    return pd.DataFrame({"colour": colour, "shape": shape}), y


class TestParamGrid:
    def test_cartesian_grid(self):
        grid = chaid_param_grid(alpha_merge=[0.01, 0.05], max_depth=[2, 3, 4])
        assert len(grid) == 6
        assert {"alpha_merge": 0.05, "max_depth": 3} in grid

    def test_scalar_values(self):
        assert chaid_param_grid(max_depth=3, min_child_node_size=[0, 10]) == [
            {"max_depth": 3, "min_child_node_size": 0},
            {"max_depth": 3, "min_child_node_size": 10},
        ]

    def test_unknown_parameter(self):
        with pytest.raises(ValueError, match="split_threshold"):
            chaid_param_grid(split_threshold=[0.1])


class TestSortCandidates:
    def test_descending_on_each_parameter_in_turn(self):
        grid = chaid_param_grid(
            alpha_merge=[0.01, 0.05], max_depth=[2, 4],
            min_parent_node_size=[30], min_child_node_size=[0, 10],
        )
        ordered = sort_candidates(grid)
        keys = [
            (c["alpha_merge"], c["max_depth"], c["min_parent_node_size"], c["min_child_node_size"])
            for c in ordered
        ]
        assert keys == [
            (0.05, 4, 30, 10), (0.05, 4, 30, 0), (0.05, 2, 30, 10), (0.05, 2, 30, 0),
            (0.01, 4, 30, 10), (0.01, 4, 30, 0), (0.01, 2, 30, 10), (0.01, 2, 30, 0),
        ]

    def test_independent_of_input_order(self):
        grid = chaid_param_grid(alpha_merge=[0.01, 0.05, 0.1], max_depth=[1, 2, 3])
        assert sort_candidates(grid) == sort_candidates(list(reversed(grid)))


class TestTuneChaid:
    def test_ties_go_to_first_sorted_candidate(self, separable):
        X, y = separable
        grid = {"alpha_merge": [0.01, 0.05], "max_depth": [2, 3]}
        search = tune_chaid(X, y, grid=grid, cv=3, estimator=MajorityClassifier())
        assert search.best_params_ == {"alpha_merge": 0.05, "max_depth": 3}

    def test_results_in_tried_order(self, separable):
        X, y = separable
        grid = {"max_depth": [1, 2, 3]}
        search = tune_chaid(X, y, grid=grid, cv=3, estimator=MajorityClassifier())
        results = search_results(search)
        assert results["max_depth"].tolist() == [3, 2, 1]
        assert list(results.columns) == ["max_depth", "mean_score", "std_score", "rank"]
        assert (results["rank"] == 1).all()

    def test_empty_grid_tries_only_the_defaults(self, separable):
        X, y = separable
        search = tune_chaid(X, y, grid={}, cv=3, estimator=MajorityClassifier())
        assert len(search.cv_results_["params"]) == 1
        assert search.best_params_ == {}

    def test_tunes_real_chaid_tree(self, separable):
        X, y = separable
        grid = {"max_depth": [1, 2], "min_parent_node_size": [20], "min_child_node_size": [5]}
        search = tune_chaid(X, y, grid=grid, cv=3)
        assert search.best_score_ > 0.95
        assert isinstance(search.best_estimator_, ChaidClassifier)


class TestChaidClassifier:
    def test_clone_keeps_parameters(self):
        model = ChaidClassifier(alpha_merge=0.01, max_depth=4, min_parent_node_size=50, min_child_node_size=5)
        params = clone(model).get_params()
        assert params["alpha_merge"] == 0.01
        assert params["max_depth"] == 4
        assert params["min_parent_node_size"] == 50
        assert params["min_child_node_size"] == 5

    def test_learns_the_deciding_predictor(self, separable):
        X, y = separable
        model = ChaidClassifier(max_depth=2, min_parent_node_size=20, min_child_node_size=5).fit(X, y)
        assert list(model.classes_) == ["No", "Yes"]
        assert (model.predict(X) == y).mean() == 1.0
        assert model.score(X, y) == 1.0
        assert "colour" in " ".join(model.rules()["rule"])

    def test_predict_proba_rows_sum_to_one(self, separable):
        X, y = separable
        model = ChaidClassifier(min_parent_node_size=20, min_child_node_size=5).fit(X, y)
        proba = model.predict_proba(X.head(10))
        assert proba.shape == (10, 2)
        assert np.allclose(proba.sum(axis=1), 1.0)

    def test_unseen_category_gets_majority_class(self, separable):
        X, y = separable
        model = ChaidClassifier(min_parent_node_size=20, min_child_node_size=5).fit(X, y)
        new = pd.DataFrame({"colour": ["purple"], "shape": ["circle"]})
        majority = pd.Series(y).mode()[0]
        assert model.predict(new)[0] == majority

    def test_rules_table(self, separable):
        X, y = separable
        model = ChaidClassifier(min_parent_node_size=20, min_child_node_size=5).fit(X, y)
        rules = model.rules()
        assert list(rules.columns) == ["node", "rule", "prediction", "n", "purity"]
        assert rules["n"].sum() == len(X)
        assert set(rules["prediction"]) == {"Yes", "No"}

    def test_missing_feature_at_predict(self, separable):
        X, y = separable
        model = ChaidClassifier(min_parent_node_size=20).fit(X, y)
        with pytest.raises(ValueError, match="shape"):
            model.predict(X[["colour"]])

    def test_length_mismatch(self, separable):
        X, y = separable
        with pytest.raises(ValueError, match="rows"):
            ChaidClassifier().fit(X, y[:-1])
