"""Post 3: CHAID Decision Trees -- chi-square driven splits over categorical survey answers."""
import plotly.express as px
import streamlit as st
from sklearn.model_selection import train_test_split

from statblog.chaid_model import ChaidClassifier
from statblog.constants import RANDOM_SEED, SURVEY_COLUMNS
from statblog.data_loader import load_data
from statblog.ml_helpers import classification_metrics, plot_confusion_matrix
from statblog.plotting import apply_common_layout
from statblog.ui_components import (
    post_header, concept_box, insight_box, warning_box,
    code_example, quiz, takeaways, navigation,
)

# ── Header ───────────────────────────────────────────────────────────────────
post_header(3, "CHAID Decision Trees", tags=["modeling", "trees", "categorical"])
st.markdown(
    "CHAID (Chi-square Automatic Interaction Detection) grows a tree the way a market "
    "researcher reads a stack of crosstabs: find the predictor most strongly associated "
    "with the outcome, merge the categories of that predictor that behave alike, split, "
    "and repeat inside each branch. Unlike CART it can split a node into more than two "
    "branches, and it only works with categories, which is exactly what survey data is."
)

df = load_data("survey")
predictors = [c for c in SURVEY_COLUMNS if c != "recommend"]

# ── 3.1 Growing a Tree ───────────────────────────────────────────────────────
st.header("3.1  Growing a Tree")

concept_box(
    "The Controls",
    "<b>alpha_merge</b>: categories whose outcome distributions are not significantly "
    "different at this level get merged. <b>max_depth</b>: how many levels of splits. "
    "<b>min_parent_node_size</b>: a node smaller than this is not split. "
    "<b>min_child_node_size</b>: a split that would create a smaller child is rejected."
)

c1, c2, c3, c4 = st.columns(4)
alpha_merge = c1.select_slider("alpha_merge", [0.01, 0.025, 0.05, 0.1], value=0.05, key="ch_alpha")
max_depth = c2.slider("max_depth", 1, 5, 3, key="ch_depth")
min_parent = c3.slider("min_parent_node_size", 10, 200, 30, 10, key="ch_parent")
min_child = c4.slider("min_child_node_size", 0, 100, 10, 5, key="ch_child")

features = st.multiselect("Predictors", predictors, default=predictors, key="ch_features")
if not features:
    st.stop()

model_df = df.dropna(subset=features + ["recommend"])
st.caption(f"{len(df) - len(model_df)} respondents with a skipped question are left out.")
X_train, X_test, y_train, y_test = train_test_split(
    model_df[features], model_df["recommend"],
    test_size=0.25, random_state=RANDOM_SEED, stratify=model_df["recommend"],
)

model = ChaidClassifier(
    alpha_merge=alpha_merge, max_depth=max_depth,
    min_parent_node_size=min_parent, min_child_node_size=min_child,
).fit(X_train, y_train)

st.subheader("The Tree")
st.code(model.tree_text(), language="text")

st.subheader("Leaf Rules")
rules = model.rules()
st.dataframe(rules.style.format({"purity": "{:.1%}"}), use_container_width=True, hide_index=True)

fig_leaves = px.bar(
    rules, x="node", y="n", color="prediction",
    color_discrete_map={"Yes": "#2A9D8F", "No": "#E63946"},
    hover_data=["rule", "purity"], title="Training Respondents per Leaf",
)
fig_leaves.update_xaxes(type="category")
apply_common_layout(fig_leaves, title="Training Respondents per Leaf", height=380)
st.plotly_chart(fig_leaves, use_container_width=True)

insight_box(
    "Satisfaction is the first split, and it splits three ways. A CART tree would need two "
    "binary splits to say the same thing. Inside each satisfaction branch CHAID looks again "
    "for the strongest remaining predictor, and is allowed to find a different one in each."
)

# ── 3.2 How Good Is It? ──────────────────────────────────────────────────────
st.header("3.2  How Good Is It?")
labels = model.classes_.tolist()
y_pred = model.predict(X_test)
metrics = classification_metrics(
    (y_test.to_numpy() == "Yes").astype(int), (y_pred == "Yes").astype(int), labels=labels,
)

m1, m2, m3 = st.columns(3)
m1.metric("Test accuracy", f"{metrics['accuracy']:.1%}")
m2.metric("Sensitivity (Yes)", f"{metrics['sensitivity']:.1%}")
m3.metric("Specificity (No)", f"{metrics['specificity']:.1%}")
st.plotly_chart(plot_confusion_matrix(metrics["confusion_matrix"], labels), use_container_width=True)

warning_box(
    "CHAID needs categorical predictors. Numbers like age or income have to be binned "
    "first (`pd.cut` or `pd.qcut`), otherwise every distinct value becomes its own "
    "category and the merging step has far too much to do."
)

code_example("""
from statblog.chaid_model import ChaidClassifier

model = ChaidClassifier(alpha_merge=0.05, max_depth=3,
                        min_parent_node_size=30, min_child_node_size=10)
model.fit(X_train, y_train)
print(model.tree_text())
model.rules()
model.predict(X_test)
""")

st.divider()
quiz(
    "What does CHAID do with categories of a predictor that have similar outcome distributions?",
    [
        "Drops them",
        "Merges them into one branch",
        "Gives each its own branch regardless",
        "Converts them to numbers",
    ],
    correct_idx=1,
    explanation="Categories that are not significantly different at alpha_merge are merged, "
    "which is how CHAID ends up with anywhere from two to many branches per split.",
    key="q_ch_1",
)

takeaways([
    "CHAID picks splits with chi-square tests and can split a node into many branches.",
    "Four controls shape the tree: alpha_merge, max_depth, min_parent_node_size, min_child_node_size.",
    "Every leaf is a readable rule, which is the whole appeal for survey work.",
    "Rows with a category never seen in training fall back to the overall majority answer.",
])

st.divider()
navigation(
    prev_label="Plotting Crosstabs", prev_page="02_Crosstab_Plots.py",
    next_label="Tuning CHAID", next_page="04_Tuning_CHAID_with_Cross_Validation.py",
)
