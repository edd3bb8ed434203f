"""
scikit-learn adapter for CHAID trees.

``ChaidClassifier`` lets ``GridSearchCV`` tune four CHAID controls
(``alpha_merge``, ``max_depth``, ``min_parent_node_size`` and
``min_child_node_size``). Tree growth itself is done by the ``CHAID`` package;
this module only translates parameters in and leaf rules out.
"""
import contextlib
import io
import logging

import numpy as np
import pandas as pd
from CHAID import Tree
from sklearn.base import BaseEstimator, ClassifierMixin
from sklearn.model_selection import GridSearchCV, ParameterGrid, StratifiedKFold
from sklearn.utils.validation import check_is_fitted

from statblog.constants import CHAID_DEFAULT_GRID, CHAID_TUNING_PARAMS, CV_FOLDS, RANDOM_SEED

logger = logging.getLogger(__name__)

TARGET = "__target__"


class ChaidClassifier(ClassifierMixin, BaseEstimator):
    """CHAID classification tree over nominal predictors."""

    def __init__(self, alpha_merge=0.05, max_depth=2, min_parent_node_size=30,
                 min_child_node_size=0, split_threshold=0.0):
        self.alpha_merge = alpha_merge
        self.max_depth = max_depth
        self.min_parent_node_size = min_parent_node_size
        self.min_child_node_size = min_child_node_size
        self.split_threshold = split_threshold

    @staticmethod
    def _frame(X, columns=None):
        if isinstance(X, pd.DataFrame):
            return X.reset_index(drop=True)
        X = np.asarray(X)
        if X.ndim != 2:
            raise ValueError(f"Expected 2D input, got array of shape {X.shape}")
        return pd.DataFrame(X, columns=columns or [f"x{i}" for i in range(X.shape[1])])

    def fit(self, X, y):
        X = self._frame(X)
        y = np.asarray(y)
        if len(X) != len(y):
            raise ValueError(f"X has {len(X)} rows but y has {len(y)}")
        if TARGET in X.columns:
            raise ValueError(f"'{TARGET}' is reserved and cannot be a feature name")

        self.classes_ = np.unique(y)
        self.feature_names_ = [str(c) for c in X.columns]
        self.n_features_in_ = len(self.feature_names_)
        lookup = {str(c): i for i, c in enumerate(self.classes_)}

        frame = X.astype(str)
        frame.columns = self.feature_names_
        frame[TARGET] = [str(v) for v in y]

        self.tree_ = Tree.from_pandas_df(
            frame,
            {col: "nominal" for col in self.feature_names_},
            TARGET,
            alpha_merge=self.alpha_merge,
            max_depth=self.max_depth,
            min_parent_node_size=self.min_parent_node_size,
            min_child_node_size=self.min_child_node_size,
            split_threshold=self.split_threshold,
            dep_variable_type="categorical",
        )

        class_counts = np.array([np.sum(y == c) for c in self.classes_], dtype=float)
        self.class_prior_ = class_counts / class_counts.sum()

        nodes = {node.node_id: node for node in self.tree_.tree_store}
        self.leaves_ = []
        for rule in self.tree_.classification_rules():
            counts = np.zeros(len(self.classes_))
            for label, count in nodes[rule["node"]].members.items():
                if str(label) in lookup:
                    counts[lookup[str(label)]] += count
            conditions = [
                (str(cond["variable"]), {str(v) for v in cond["data"]})
                for cond in rule["rules"]
            ]
            self.leaves_.append((rule["node"], conditions, counts))

        logger.debug(
            "CHAID tree with %d leaves (alpha_merge=%s, max_depth=%s)",
            len(self.leaves_), self.alpha_merge, self.max_depth,
        )
        return self

    def predict_proba(self, X):
        check_is_fitted(self, "leaves_")
        X = self._frame(X, columns=self.feature_names_)
        X.columns = [str(c) for c in X.columns]
        missing = [c for c in self.feature_names_ if c not in X.columns]
        if missing:
            raise ValueError(f"Missing feature columns: {', '.join(missing)}")
        X = X[self.feature_names_].astype(str)

        # Rows that fall through every leaf (unseen categories) keep the training prior
        proba = np.tile(self.class_prior_, (len(X), 1))
        assigned = np.zeros(len(X), dtype=bool)
        for _, conditions, counts in self.leaves_:
            mask = ~assigned
            for variable, values in conditions:
                mask &= X[variable].isin(values).to_numpy()
            if counts.sum() > 0:
                proba[mask] = counts / counts.sum()
            assigned |= mask
        return proba

    def predict(self, X):
        return self.classes_[np.argmax(self.predict_proba(X), axis=1)]

    def rules(self):
        """One row per leaf: its conditions, predicted class and training size."""
        check_is_fitted(self, "leaves_")
        rows = []
        for node_id, conditions, counts in self.leaves_:
            rule = " and ".join(
                f"{variable} in [{', '.join(sorted(values))}]" for variable, values in conditions
            )
            rows.append({
                "node": node_id,
                "rule": rule or "(all rows)",
                "prediction": self.classes_[int(np.argmax(counts))],
                "n": int(counts.sum()),
                "purity": float(counts.max() / counts.sum()) if counts.sum() else 0.0,
            })
        return pd.DataFrame(rows)

    def tree_text(self):
        """The fitted tree as printed by the CHAID package."""
        check_is_fitted(self, "tree_")
        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            self.tree_.print_tree()
        return buf.getvalue()


def chaid_param_grid(**values):
    """
    Candidate parameter combinations for ``ChaidClassifier``.

    Each keyword is a tunable parameter and a list (or single value) to try;
    omitted parameters keep the estimator default.
    """
    unknown = [name for name in values if name not in CHAID_TUNING_PARAMS]
    if unknown:
        raise ValueError(
            f"Unknown CHAID parameter(s): {', '.join(unknown)}; "
            f"tunable parameters are {', '.join(CHAID_TUNING_PARAMS)}"
        )
    grid = {
        name: list(v) if isinstance(v, (list, tuple, np.ndarray)) else [v]
        for name, v in values.items()
    }
    return list(ParameterGrid(grid))


def sort_candidates(candidates):
    """Order candidates descending on each tunable parameter in turn."""
    def key(candidate):
        return tuple(-candidate[p] for p in CHAID_TUNING_PARAMS if p in candidate)
    return sorted(candidates, key=key)


def tune_chaid(X, y, grid=None, cv=CV_FOLDS, scoring="accuracy", seed=RANDOM_SEED, estimator=None):
    """
    Cross-validate every grid candidate and refit the best on all of X.

    Candidates are tried in ``sort_candidates`` order, so ties in mean score
    go to the earliest candidate in that order.
    """
    candidates = sort_candidates(chaid_param_grid(**(CHAID_DEFAULT_GRID if grid is None else grid)))
    logger.info("Tuning CHAID over %d candidates with %d-fold CV", len(candidates), cv)
    search = GridSearchCV(
        estimator if estimator is not None else ChaidClassifier(),
        param_grid=[{name: [value] for name, value in c.items()} for c in candidates],
        scoring=scoring,
        cv=StratifiedKFold(n_splits=cv, shuffle=True, random_state=seed),
        refit=True,
    )
    search.fit(X, y)
    logger.info("Best CHAID parameters %s (%s=%.4f)", search.best_params_, scoring, search.best_score_)
    return search


def search_results(search):
    """Candidate parameters with mean/std score and rank, in the order they were tried."""
    results = pd.DataFrame(search.cv_results_)
    param_cols = [c for c in results.columns if c.startswith("param_")]
    table = results[param_cols + ["mean_test_score", "std_test_score", "rank_test_score"]].copy()
    table.columns = [c.replace("param_", "") for c in param_cols] + ["mean_score", "std_score", "rank"]
    return table
