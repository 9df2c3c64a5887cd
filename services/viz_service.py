from typing import Any, Dict, List, Optional, Tuple, Union
import io
import base64
import binascii
import logging
import warnings

import numpy as np
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import seaborn as sns

from models.common_models import ChartData

warnings.filterwarnings("ignore", category=UserWarning)

logger = logging.getLogger(__name__)

SUPPORTED_CHART_TYPES = ("bar", "line", "area", "scatter", "pie", "doughnut")


def _values(dataset: Dict[str, Any]) -> List[float]:
    return [np.nan if v is None else float(v) for v in dataset.get("data", [])]


def _points(dataset: Dict[str, Any], labels: List[Any]) -> Tuple[List[Any], List[float]]:
    """Scatter data comes either as {x, y} points or as values aligned with labels."""
    data = dataset.get("data", [])
    if data and isinstance(data[0], dict):
        return [p.get("x") for p in data], [float(p.get("y")) for p in data]
    return list(labels), _values(dataset)


def _title(options: Dict[str, Any]) -> Optional[str]:
    title = options.get("plugins", {}).get("title", {}) or options.get("title", {})
    if isinstance(title, dict):
        return title.get("text")
    return title or None


def _axis_title(options: Dict[str, Any], axis: str) -> Optional[str]:
    return options.get("scales", {}).get(axis, {}).get("title", {}).get("text")


def _draw(ax, chart_type: str, labels: List[Any], datasets: List[Dict[str, Any]]) -> None:
    positions = np.arange(len(labels))

    if chart_type == "bar":
        width = 0.8 / len(datasets)
        for i, ds in enumerate(datasets):
            offset = (i - (len(datasets) - 1) / 2) * width
            ax.bar(positions + offset, _values(ds), width, label=ds.get("label"))
        ax.set_xticks(positions)
        ax.set_xticklabels([str(l) for l in labels], rotation=45, ha="right")

    elif chart_type in ("line", "area"):
        for ds in datasets:
            values = _values(ds)
            ax.plot(positions, values, marker="o", label=ds.get("label"))
            if chart_type == "area":
                ax.fill_between(positions, values, alpha=0.3)
        ax.set_xticks(positions)
        ax.set_xticklabels([str(l) for l in labels], rotation=45, ha="right")

    elif chart_type == "scatter":
        for ds in datasets:
            xs, ys = _points(ds, labels)
            ax.scatter(xs, ys, label=ds.get("label"))

    elif chart_type in ("pie", "doughnut"):
        # one ring only
        wedgeprops = {"width": 0.4} if chart_type == "doughnut" else None
        ax.pie(_values(datasets[0]), labels=[str(l) for l in labels], autopct="%1.1f%%", wedgeprops=wedgeprops)
        ax.axis("equal")


def render_chart(chart: ChartData, figsize: Tuple[int, int] = (8, 5)) -> Optional[str]:
    """
    Render a chart payload returned by the server to a base64 PNG.
    Returns None for unsupported types or unusable data.
    """
    chart_type = chart.type.lower()
    if chart_type not in SUPPORTED_CHART_TYPES:
        logger.warning(f"Unsupported chart type for rendering: {chart.type}")
        return None

    labels = chart.data.get("labels", [])
    datasets = chart.data.get("datasets", [])
    if not datasets:
        logger.warning(f"Chart payload of type {chart.type} has no datasets")
        return None

    sns.set_theme(style="whitegrid")
    fig, ax = plt.subplots(figsize=figsize)
    try:
        _draw(ax, chart_type, labels, datasets)

        title = _title(chart.options)
        if title:
            ax.set_title(title)
        if chart_type not in ("pie", "doughnut"):
            ax.set_xlabel(_axis_title(chart.options, "x") or "")
            ax.set_ylabel(_axis_title(chart.options, "y") or "")
            if len(datasets) > 1:
                ax.legend()

        buffer = io.BytesIO()
        fig.tight_layout()
        fig.savefig(buffer, format="png")
        buffer.seek(0)
        return base64.b64encode(buffer.read()).decode("utf-8")

    except (TypeError, ValueError) as e:
        logger.warning(f"Could not render {chart.type} chart: {e}")
        return None

    finally:
        plt.close(fig)


def decode_chart_image(image: str) -> Optional[Union[str, bytes]]:
    """
    Stored analysis image as st.image accepts it: URLs pass through,
    data URLs and bare base64 become PNG bytes. None if undecodable.
    """
    if image.startswith(("http://", "https://")):
        return image
    if image.startswith("data:"):
        image = image.partition(",")[2]
    try:
        return base64.b64decode(image, validate=True)
    except (binascii.Error, ValueError):
        logger.warning("Stored chart image is neither a URL nor base64")
        return None
