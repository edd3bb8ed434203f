"""Post 5: Random Forest vs Gradient Boosting -- same folds, same data, two kinds of ensemble."""
import pandas as pd
import plotly.express as px
import streamlit as st
from sklearn.ensemble import GradientBoostingClassifier, RandomForestClassifier

from statblog.constants import ATTRITION_CATEGORICAL, ATTRITION_NUMERIC, CV_FOLDS, RANDOM_SEED
from statblog.data_loader import load_data
from statblog.ml_helpers import (
    classification_metrics, compare_models, feature_importance_table,
    plot_confusion_matrix, prepare_classification_data, summarize_comparison, train_model,
)
from statblog.plotting import apply_common_layout, plot_model_comparison, plot_xtabs
from statblog.ui_components import (
    post_header, concept_box, insight_box, warning_box,
    code_example, quiz, takeaways, navigation,
)

# ── Header ───────────────────────────────────────────────────────────────────
post_header(5, "Random Forest vs Gradient Boosting", tags=["modeling", "ensembles"])
st.markdown(
    "Both are piles of decision trees. A random forest grows deep trees independently on "
    "bootstrap samples and lets them vote. Gradient boosting grows shallow trees one after "
    "another, each correcting what the previous ones got wrong. Which is better on a small, "
    "messy HR dataset? The only fair way to find out is to score both on exactly the same "
    "cross-validation folds."
)

df = load_data("attrition")
features = ATTRITION_CATEGORICAL + ATTRITION_NUMERIC

# ── 5.1 The Data ─────────────────────────────────────────────────────────────
st.header("5.1  Who Leaves?")
c1, c2, c3 = st.columns(3)
c1.metric("Employees", f"{len(df):,}")
c2.metric("Attrition rate", f"{(df['attrition'] == 'Yes').mean():.1%}")
c3.metric("Predictors", len(features))

xcol = st.selectbox("Attrition by", ATTRITION_CATEGORICAL, key="rf_x")
st.plotly_chart(plot_xtabs(df, xcol, "attrition", plot_type="percent", height=380), use_container_width=True)

# ── 5.2 Cross-Validated Comparison ───────────────────────────────────────────
st.header("5.2  Same Folds, Two Models")

concept_box(
    "Why Identical Folds",
    "If each model gets its own random split, part of the difference in scores is just "
    "luck of the split. Scoring both on the same stratified folds turns the comparison "
    "into a paired one: fold 3 was hard for both, or easy for both."
)

c1, c2, c3 = st.columns(3)
n_trees = c1.slider("Random forest: trees", 50, 500, 200, 50, key="rf_trees")
learning_rate = c2.select_slider("Boosting: learning rate", [0.01, 0.05, 0.1, 0.2], value=0.1, key="gb_lr")
gb_depth = c3.slider("Boosting: tree depth", 1, 5, 3, key="gb_depth")

X_train, X_test, y_train, y_test, le, _ = prepare_classification_data(
    df, features, target="attrition", test_size=0.25
)
models = {
    "Random forest": RandomForestClassifier(n_estimators=n_trees, random_state=RANDOM_SEED),
    "Gradient boosting": GradientBoostingClassifier(
        learning_rate=learning_rate, max_depth=gb_depth, random_state=RANDOM_SEED
    ),
}

with st.spinner("Cross-validating..."):
    scores = compare_models(models, X_train, y_train, cv=CV_FOLDS)

st.plotly_chart(plot_model_comparison(scores), use_container_width=True)
st.dataframe(summarize_comparison(scores).style.format("{:.4f}"), use_container_width=True)

paired = scores.pivot(index="fold", columns="model", values="accuracy")
paired["difference"] = paired["Gradient boosting"] - paired["Random forest"]
fig_diff = px.bar(paired.reset_index(), x="fold", y="difference",
                  title="Boosting minus Forest, per Fold", color_discrete_sequence=["#264653"])
apply_common_layout(fig_diff, title="Boosting minus Forest, per Fold", height=320)
st.plotly_chart(fig_diff, use_container_width=True)

insight_box(
    "On a dataset this size the two are usually within a percentage point or two, and the "
    "per-fold differences change sign. That is not a failure of the experiment: it is the "
    "answer. The model choice matters less than the features."
)

# ── 5.3 Held-Out Test Set ────────────────────────────────────────────────────
st.header("5.3  On the Held-Out Test Set")
labels = le.classes_.tolist()
positive = labels.index("Yes")
cols = st.columns(2)
fitted = {}
for col, (name, model) in zip(cols, models.items()):
    fitted[name] = train_model(type(model), X_train, y_train, **model.get_params())
    metrics = classification_metrics(y_test, fitted[name].predict(X_test), labels=labels, positive=positive)
    with col:
        st.subheader(name)
        m1, m2, m3 = st.columns(3)
        m1.metric("Accuracy", f"{metrics['accuracy']:.1%}")
        m2.metric("Sensitivity", f"{metrics['sensitivity']:.1%}")
        m3.metric("Specificity", f"{metrics['specificity']:.1%}")
        st.plotly_chart(plot_confusion_matrix(metrics["confusion_matrix"], labels), use_container_width=True)

warning_box(
    "With roughly one leaver in four, a model that predicts 'No' for everyone scores "
    "around 75% accuracy. Look at sensitivity: how many of the actual leavers did each "
    "model catch?"
)

# ── 5.4 What Do They Rely On? ────────────────────────────────────────────────
st.header("5.4  What Do They Rely On?")
importance = []
for name, model in fitted.items():
    table = feature_importance_table(model, X_train.columns, top=10)
    table["model"] = name
    importance.append(table)
imp_df = pd.concat(importance)
fig_imp = px.bar(
    imp_df, x="importance", y="feature", color="model", barmode="group", orientation="h",
    color_discrete_sequence=["#2A9D8F", "#E63946"],
)
fig_imp.update_yaxes(categoryorder="total ascending")
apply_common_layout(fig_imp, title="Top 10 Feature Importances", height=520)
st.plotly_chart(fig_imp, use_container_width=True)

code_example("""
from sklearn.ensemble import GradientBoostingClassifier, RandomForestClassifier
from statblog.ml_helpers import compare_models, summarize_comparison

scores = compare_models({
    "Random forest": RandomForestClassifier(n_estimators=200, random_state=42),
    "Gradient boosting": GradientBoostingClassifier(random_state=42),
}, X_train, y_train, cv=5)
summarize_comparison(scores)
""")

st.divider()
quiz(
    "Why compare the two models on the same cross-validation folds?",
    [
        "It is faster",
        "It removes split-to-split luck from the comparison",
        "Gradient boosting requires it",
        "It increases accuracy",
    ],
    correct_idx=1,
    explanation="Identical folds make the comparison paired, so differences come from the models rather than the splits.",
    key="q_rf_1",
)

takeaways([
    "Random forests average independent deep trees; boosting adds shallow corrective trees in sequence.",
    "Compare models on identical folds and look at the per-fold differences, not just the means.",
    "On imbalanced targets report sensitivity and specificity alongside accuracy.",
    "Feature importances from the two ensembles usually agree on the top few predictors.",
])

st.divider()
navigation(prev_label="Tuning CHAID", prev_page="04_Tuning_CHAID_with_Cross_Validation.py")
