"""Machine learning model training, comparison and evaluation wrappers."""
import logging

import numpy as np
import pandas as pd
import streamlit as st
from sklearn.model_selection import StratifiedKFold, cross_val_score, train_test_split
from sklearn.preprocessing import LabelEncoder, StandardScaler
from sklearn.metrics import (
    accuracy_score, balanced_accuracy_score, classification_report, confusion_matrix,
)

from statblog.constants import CV_FOLDS, RANDOM_SEED

logger = logging.getLogger(__name__)


def encode_features(df, features):
    """One-hot encode the categorical columns among ``features``; numeric ones pass through."""
    X = df[features]
    categorical = [c for c in features if not pd.api.types.is_numeric_dtype(X[c])]
    if categorical:
        X = pd.get_dummies(X, columns=categorical, dtype=int)
    return X


def prepare_classification_data(df, features, target, test_size=0.2, scale=False, seed=RANDOM_SEED):
    """Prepare data for classification: encode features and target, split, optionally scale."""
    clean = df[features + [target]].dropna()
    if len(clean) < len(df):
        logger.info("Dropped %d incomplete rows before modelling", len(df) - len(clean))
    X = encode_features(clean, features)
    le = LabelEncoder()
    y = le.fit_transform(clean[target])

    X_train, X_test, y_train, y_test = train_test_split(
        X, y, test_size=test_size, random_state=seed, stratify=y
    )

    scaler = None
    if scale:
        scaler = StandardScaler()
        X_train = pd.DataFrame(scaler.fit_transform(X_train), columns=X.columns, index=X_train.index)
        X_test = pd.DataFrame(scaler.transform(X_test), columns=X.columns, index=X_test.index)

    return X_train, X_test, y_train, y_test, le, scaler


def classification_metrics(y_true, y_pred, labels=None, positive=1):
    """
    Compute classification metrics.

    For two-class problems sensitivity and specificity are reported with
    ``positive`` as the encoded positive class.
    """
    acc = accuracy_score(y_true, y_pred)
    report = classification_report(y_true, y_pred, target_names=labels, output_dict=True, zero_division=0)
    cm = confusion_matrix(y_true, y_pred)
    metrics = {
        "accuracy": acc,
        "balanced_accuracy": balanced_accuracy_score(y_true, y_pred),
        "report": report,
        "confusion_matrix": cm,
    }

    classes = np.unique(np.concatenate([np.asarray(y_true), np.asarray(y_pred)]))
    if len(classes) == 2:
        y_true = np.asarray(y_true) == positive
        y_pred = np.asarray(y_pred) == positive
        tp = np.sum(y_true & y_pred)
        tn = np.sum(~y_true & ~y_pred)
        fp = np.sum(~y_true & y_pred)
        fn = np.sum(y_true & ~y_pred)
        metrics["sensitivity"] = tp / (tp + fn) if tp + fn else 0.0
        metrics["specificity"] = tn / (tn + fp) if tn + fp else 0.0
    return metrics


def compare_models(models, X, y, cv=CV_FOLDS, seed=RANDOM_SEED, scoring="accuracy"):
    """
    Cross-validate each named model on the same stratified folds.

    Returns one row per model and fold.
    """
    folds = StratifiedKFold(n_splits=cv, shuffle=True, random_state=seed)
    rows = []
    for name, model in models.items():
        scores = cross_val_score(model, X, y, cv=folds, scoring=scoring)
        logger.info("%s: mean %s %.4f over %d folds", name, scoring, scores.mean(), cv)
        rows.extend({"model": name, "fold": i + 1, scoring: s} for i, s in enumerate(scores))
    return pd.DataFrame(rows)


def summarize_comparison(scores, metric="accuracy"):
    """Per-model mean, std, min and max of the fold scores, best model first."""
    summary = scores.groupby("model")[metric].agg(["mean", "std", "min", "max"])
    return summary.sort_values("mean", ascending=False)


def feature_importance_table(model, feature_names, top=None):
    """Fitted tree-ensemble importances, largest first."""
    table = pd.DataFrame({
        "feature": list(feature_names),
        "importance": model.feature_importances_,
    }).sort_values("importance", ascending=False, ignore_index=True)
    return table.head(top) if top else table


def plot_confusion_matrix(cm, labels):
    """Confusion matrix heatmap, actual classes down the rows."""
    from statblog.plotting import heatmap_chart
    table = pd.DataFrame(cm, index=list(labels), columns=list(labels))
    return heatmap_chart(table, x_label="Predicted", y_label="Actual", title="Confusion matrix", height=420)


@st.cache_resource
def train_model(model_class, X_train, y_train, **params):
    """Fit ``model_class(**params)`` once per distinct training set and parameters."""
    logger.info("Fitting %s on %d rows", model_class.__name__, len(X_train))
    return model_class(**params).fit(X_train, y_train)
