# main.py

"""Streamlit web UI for the moderation scoring client.

Provides a simple interface to submit text and review the per-attribute
scores and span annotations returned by the analysis service.
"""

import math

import streamlit as st
import logging

from moderation import AnalysisClient, AnalyzeOptions, Attribute, ModerationError
from moderation.logging_config import configure_logging
from moderation.service.config import settings

configure_logging(settings.log_level)

logger = logging.getLogger(__name__)


def main():
    """Run the Streamlit application UI.

    This function configures the Streamlit page, accepts input text and
    request options from the user, calls the analysis service, and displays
    the scores along with the toxic verdict and any span annotations.
    """
    st.set_page_config(
        layout="wide", page_title="Comment Moderation Scores", page_icon="🛡️"
    )

    st.title("Comment Moderation Scores")
    st.markdown(
        "Score user-submitted text for toxicity and related attributes with the Perspective API."
    )
    st.markdown("---")

    with st.sidebar:
        st.header("Request Options")
        attribute_names = st.multiselect(
            "Attributes",
            options=[a.value for a in Attribute],
            default=[Attribute.TOXICITY.value],
        )
        language = st.text_input("Language", value=settings.default_language)
        span_annotations = st.checkbox("Span annotations", value=False)
        do_not_store = st.checkbox("Do not store", value=True)
        threshold = st.slider("Toxic threshold", 0.0, 1.0, 0.7, 0.05)

    col1, col2 = st.columns(2)

    with col1:
        st.subheader("Input Text")
        text_input = st.text_area(
            "Comment",
            height=300,
            placeholder="Paste the comment to score here...",
        )

    with col2:
        st.subheader("Scores")

        if st.button("Analyze", type="primary"):
            if not text_input or not text_input.strip():
                st.warning("Please enter text to analyze.")
                logger.warning("Analysis attempted with empty input")

            elif not attribute_names:
                st.warning("Please select at least one attribute.")

            else:
                options = AnalyzeOptions(
                    language=language,
                    do_not_store=do_not_store,
                    span_annotations=span_annotations or None,
                )

                try:
                    with st.spinner("Scoring text..."):
                        with AnalysisClient() as client:
                            result = client.analyze(
                                text_input, attribute_names, options
                            )

                except ModerationError as e:
                    st.error(f"Analysis failed: {e}")
                    logger.error(
                        "Analysis returned error",
                        extra={
                            "error_type": type(e).__name__,
                            "text_length": len(text_input),
                        },
                    )

                else:
                    st.table(
                        [
                            {
                                "Attribute": name,
                                "Score": (
                                    "n/a" if math.isnan(value) else f"{value:.3f}"
                                ),
                            }
                            for name, value in result.scores.items()
                        ]
                    )

                    if result.is_toxic(threshold):
                        st.error(f"Toxic at threshold {threshold:.2f}")
                    else:
                        st.success(f"Not toxic at threshold {threshold:.2f}")

                    if result.span_annotations:
                        st.subheader("Span Annotations")
                        st.table(
                            [
                                {
                                    "Attribute": s.attribute,
                                    "Text": s.text_in(result.message),
                                    "Range": f"[{s.begin}, {s.end})",
                                    "Score": f"{s.score:.3f}",
                                }
                                for s in result.span_annotations
                            ]
                        )

    with st.sidebar:
        st.header("About")
        st.markdown("""
        Scores are probabilities in [0, 1] that a reader would perceive the
        text as having the attribute. Scores shown as **n/a** were requested
        but not returned by the service.

        Requests are sent with *doNotStore* enabled by default.
        """)


if __name__ == "__main__":
    main()
