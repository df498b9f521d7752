"""Utility helpers for reporting manifesto analysis results."""

import logging
from pathlib import Path

import pandas as pd
import plotly.graph_objects as go

from manifesto.logger import get_logger

logger = get_logger("utils")


def log_banner(log: logging.Logger, title: str, width: int = 60) -> None:
    """Log a section banner.

    Args:
        log: Logger to write to.
        title: Section title.
        width: Banner width in characters.
    """
    log.info("=" * width)
    log.info(title)
    log.info("=" * width)


def log_table(log: logging.Logger, title: str, df: pd.DataFrame, max_rows: int = 40, float_format: str = "{:.4f}") -> None:
    """Log a DataFrame as an aligned text table, one log record per line.

    Args:
        log: Logger to write to.
        title: Heading logged above the table.
        df: Table to print.
        max_rows: Truncate longer tables.
        float_format: Format applied to float columns.
    """
    log.info(f"{title} ({len(df)} rows)")
    if df.empty:
        log.info("  <empty>")
        return

    text = df.head(max_rows).to_string(index=False, float_format=float_format.format)
    for line in text.splitlines():
        log.info(f"  {line}")
    if len(df) > max_rows:
        log.info(f"  ... {len(df) - max_rows} more rows")


def write_figure(fig: go.Figure, output_dir: Path, name: str) -> Path:
    """Write a plotly figure to a standalone HTML file.

    Args:
        fig: Figure to write.
        output_dir: Target directory, created if needed.
        name: File stem.

    Returns:
        Path: Path of the written file.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{name}.html"
    fig.write_html(path, include_plotlyjs="cdn")
    logger.info(f"Wrote figure to {path}")
    return path
