"""UI component functions for the Streamlit manifesto dashboard."""

import numpy as np
import pandas as pd
import plotly.graph_objects as go

NEGATIVE_COLOR = (0xD4, 0xA8, 0x9A)
NEUTRAL_COLOR = (0xEC, 0xEB, 0xE3)
POSITIVE_COLOR = (0xC8, 0xDD, 0xC8)


def sentiment_color(score: float, scale: float = 2.0) -> str:
    """Map a log-ratio sentiment score onto the negative-neutral-positive gradient.

    Scores beyond ``±scale`` are clamped to the end colors.

    Args:
        score: Sentiment score (0 is neutral).
        scale: Absolute score mapped to the gradient ends.

    Returns:
        str: Hex color code.
    """
    if score is None or pd.isna(score):
        score = 0.0
    t = float(np.clip(score / scale, -1.0, 1.0))

    start, end = (NEUTRAL_COLOR, POSITIVE_COLOR) if t >= 0 else (NEUTRAL_COLOR, NEGATIVE_COLOR)
    weight = abs(t)
    r, g, b = (int(s + (e - s) * weight) for s, e in zip(start, end))
    return f"#{r:02x}{g:02x}{b:02x}"


def color_sentiment_rows(row: pd.Series, column: str = "mean_sentiment") -> list[str]:
    """Background style for a party summary row based on its mean sentiment.

    Args:
        row: Row of the party summary table.
        column: Sentiment column to color by.

    Returns:
        list[str]: One CSS style per cell.
    """
    return [f"background-color: {sentiment_color(row[column])}"] * len(row)


def party_sentiment_figure(party_summary: pd.DataFrame, indicator: str = "housing") -> go.Figure:
    """Dot plot of mean sentiment per party for topic and non-topic sentences.

    Args:
        party_summary: Output of ``aggregate_by_party``.
        indicator: Topic indicator used to name the columns.

    Returns:
        go.Figure: Plotly figure with one marker series per sentence type.
    """
    fig = go.Figure()
    if party_summary.empty:
        return fig

    topic_column = f"{indicator}_mean_sentiment"
    series = [
        (topic_column, f"{indicator.capitalize()} sentences", "#059669"),
        ("other_mean_sentiment", "Other sentences", "#8b8577"),
    ]
    for column, name, color in series:
        fig.add_trace(go.Scatter(
            x=party_summary[column],
            y=party_summary["party"],
            mode="markers",
            name=name,
            marker=dict(size=12, color=color),
            customdata=party_summary[["n_sentences", f"{indicator}_sentences"]].values,
            hovertemplate=(
                '<b>%{y}</b><br>' +
                'Mean sentiment: %{x:.3f}<br>' +
                'Sentences: %{customdata[0]}<br>' +
                f'{indicator.capitalize()} sentences: ' + '%{customdata[1]}<br>' +
                '<extra></extra>'
            ),
        ))

    fig.add_vline(x=0, line_dash="dash", line_color="gray", opacity=0.5)
    fig.update_layout(
        title=f"Mean sentence sentiment by party: {indicator} vs other",
        xaxis_title="Mean sentiment (log ratio)",
        height=max(350, 45 * len(party_summary) + 150),
        template="plotly_white",
    )
    return fig


def coefficient_figure(coefficients: pd.DataFrame, z: float = 1.96) -> go.Figure:
    """Coefficient plot with confidence intervals, intercept and NaN rows omitted.

    Args:
        coefficients: Output of ``RegressionResult.summary_table()``.
        z: Normal quantile for the interval half-width.

    Returns:
        go.Figure: Plotly figure.
    """
    df = coefficients[(coefficients["term"] != "Intercept") & coefficients["estimate"].notna()]

    fig = go.Figure(go.Scatter(
        x=df["estimate"],
        y=df["term"],
        mode="markers",
        marker=dict(size=10, color="#3d3a2a"),
        error_x=dict(type="data", array=z * df["std_error"], visible=True),
        name="Estimate",
    ))
    fig.add_vline(x=0, line_dash="dash", line_color="gray", opacity=0.5)
    fig.update_layout(
        title="Sentiment model coefficients",
        xaxis_title="Estimate",
        height=max(300, 40 * len(df) + 150),
        template="plotly_white",
    )
    return fig
