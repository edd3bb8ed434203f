"""Building blocks for rendering a blog post: header, callouts, quiz, post-to-post links."""
import streamlit as st

CALLOUT_STYLE = (
    "background-color: #F4F6F7; padding: 16px 20px; border-radius: 6px; "
    "border-left: 4px solid {accent}; margin: 12px 0;"
)


def post_header(number, title, published=None, tags=None):
    """Post number and title, then a caption line with the date and #tags."""
    st.title(f"{number}. {title}")
    meta = [published] if published else []
    if tags:
        meta.append(" ".join(f"#{t}" for t in tags))
    if meta:
        st.caption("  ·  ".join(meta))
    st.divider()


def concept_box(title, content, accent="#1F618D"):
    """Render a titled concept callout with a coloured left border."""
    st.markdown(
        f'<div style="{CALLOUT_STYLE.format(accent=accent)}">'
        f'<strong style="color: {accent};">{title}</strong>'
        f'<div style="margin-top: 6px;">{content}</div></div>',
        unsafe_allow_html=True,
    )


def insight_box(text):
    """Render a key insight callout."""
    st.info(f"**Worth noticing:** {text}")


def warning_box(text):
    """Render a common-pitfall callout."""
    st.warning(f"**Watch out:** {text}")


def code_example(code, language="python", label="The code"):
    """Snippet readers can copy, folded away by default."""
    with st.expander(label):
        st.code(code.strip("\n"), language=language)


def quiz(question, options, correct_idx, explanation="", key="quiz"):
    """
    One multiple-choice question.

    Returns None until the reader picks an answer, then whether it was right.
    The explanation is shown either way.
    """
    st.subheader("Check yourself")
    answer = st.radio(question, options, key=key, index=None)
    if answer is None:
        return None
    correct = options.index(answer) == correct_idx
    if correct:
        st.success("Right.")
    else:
        st.error(f"The answer is **{options[correct_idx]}**.")
    if explanation:
        st.caption(explanation)
    return correct


def takeaways(points):
    """Render the post's takeaways as a numbered list."""
    st.subheader("To take away")
    st.markdown("\n".join(f"{i}. {p}" for i, p in enumerate(points, 1)))


def navigation(prev_label=None, next_label=None, prev_page=None, next_page=None):
    """Links to the neighbouring posts; a side is left empty when its label is missing."""
    left, _, right = st.columns([2, 1, 2])
    if prev_label:
        left.page_link(f"pages/{prev_page}", label=f"← {prev_label}")
    if next_label:
        right.page_link(f"pages/{next_page}", label=f"{next_label} →")


def show_warnings(caught):
    """Show warnings captured with ``warnings.catch_warnings(record=True)`` under a chart."""
    for w in caught:
        st.caption(f"⚠️ {w.message}")
