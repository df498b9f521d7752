"""Streamlit dashboard for the housing manifesto analysis."""

import streamlit as st

from manifesto.constants import PARTIES
from manifesto.jobs.run_analysis import AnalysisResults, run_pipeline
from manifesto.pipeline_config import PipelineConfig
from ui_components import coefficient_figure, color_sentiment_rows, party_sentiment_figure


@st.cache_resource(show_spinner="Running analysis...")
def load_results(corpus_path: str, year: int | None, target_parties: tuple[str, ...], measure: str) -> AnalysisResults:
    """Run the pipeline once per parameter combination.

    Args:
        corpus_path: Sentence-level manifesto CSV.
        year: Election year slice, or None for all years.
        target_parties: Parties forming the target cohort.
        measure: Keyness measure ("chi2" or "lr").

    Returns:
        AnalysisResults: Tables, regression and keyness figure.
    """
    config = PipelineConfig()
    config.corpus.path = corpus_path
    config.corpus.year = year
    config.keyness.target_parties = list(target_parties)
    config.keyness.measure = measure
    return run_pipeline(config)


st.set_page_config(page_title="Irish Manifestos: Housing", layout="wide")
st.title("Housing in Irish party manifestos")

defaults = PipelineConfig()

with st.sidebar:
    corpus_path = st.text_input("Corpus CSV", value=str(defaults.corpus.path))
    year = st.number_input("Election year", min_value=1900, max_value=2100, value=defaults.corpus.year or 2020, step=1)
    target_parties = st.multiselect(
        "Target cohort",
        options=list(PARTIES.keys()),
        default=defaults.keyness.target_parties,
        help="Parties compared against all others in the keyness analysis",
    )
    measure = st.radio("Keyness measure", options=["chi2", "lr"], horizontal=True)

    if st.button("Refresh data", icon=":material/autorenew:", type="secondary", use_container_width=True):
        load_results.clear()
        st.rerun()

if not target_parties:
    st.warning("Select at least one party for the target cohort")
    st.stop()

try:
    results = load_results(corpus_path, int(year), tuple(target_parties), measure)
except (FileNotFoundError, ValueError) as e:
    st.error(f"Analysis failed: {e}")
    st.stop()

col1, col2, col3 = st.columns(3)
col1.metric("Sentences", f"{len(results.sentences):,}")
col2.metric("Parties", len(results.party_summary))
col3.metric("Housing sentences", f"{sum(results.housing_totals.values()):,}")

st.subheader("Housing mentions and sentiment by party")
st.dataframe(
    results.party_summary.style.apply(color_sentiment_rows, axis=1).format(precision=3),
    use_container_width=True,
    hide_index=True,
)
st.plotly_chart(party_sentiment_figure(results.party_summary), use_container_width=True, theme=None)

st.subheader("Sentiment regression")
if results.regression is None:
    st.info("The sentiment model could not be fitted for this selection")
else:
    reg = results.regression
    st.caption(f"`{reg.formula}` · n = {reg.n_obs} · R² = {reg.r_squared:.4f} · adjusted R² = {reg.adj_r_squared:.4f}")
    if reg.non_estimable:
        st.warning(f"Non-estimable coefficients: {', '.join(reg.non_estimable)}")
    st.dataframe(reg.summary_table(), use_container_width=True, hide_index=True)
    st.plotly_chart(coefficient_figure(reg.summary_table()), use_container_width=True, theme=None)

st.subheader("Keyness")
st.plotly_chart(results.keyness_figure, use_container_width=True, theme=None)
with st.expander("Keyness table"):
    st.dataframe(results.keyness, use_container_width=True, hide_index=True)
