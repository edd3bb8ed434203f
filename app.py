"""Statistics Blog -- Main Entry Point."""
import streamlit as st

from statblog.constants import POST_TITLES
from statblog.logger import setup_logging

setup_logging()

st.set_page_config(
    page_title="Statistics Blog",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.title("Statistics Blog")
st.subheader("Small datasets, honest charts, and models you can poke at")

st.markdown("""
Every post here follows the same recipe: load a small dataset, hand it to a well-tested
library, and spend most of our time looking at what comes back. None of the statistics
are implemented from scratch. The tree growing is done by the `CHAID` package, the forests
and boosted trees by scikit-learn, the charts by Plotly. What you will find are the
little bits of glue that make those libraries pleasant to use in a write-up: a crosstab
plotter that tells you which column you misspelled, a loop that plots every pairing
of columns for you, and an adapter that lets scikit-learn's grid search tune a CHAID tree.

### How to Read the Posts

1. **Navigate** via the sidebar. The posts are independent, although the two CHAID
   posts read best in order
2. **Filter** the data from the sidebar where a post offers it
3. **Change** the dropdowns and sliders and watch the charts and models respond
""")

st.subheader("Posts")
for number, title in POST_TITLES.items():
    st.markdown(f"**{number}.** {title}")

st.divider()
st.markdown("**Pick a post from the sidebar.**")
