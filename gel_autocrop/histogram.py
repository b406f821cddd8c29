"""Intensity histogram computation and plotting."""

from __future__ import annotations

import cv2
import numpy as np

from .models import HISTOGRAM_BINS, Histogram
from .validation import require_gray_image


def compute_histogram(gray: np.ndarray) -> Histogram:
    """Count pixels per intensity value.

    Args:
        gray: Input grayscale image

    Returns:
        Histogram with 256 integer counts summing to width * height
    """
    require_gray_image(gray)
    counts = np.bincount(gray.ravel(), minlength=HISTOGRAM_BINS).astype(np.int64)
    return Histogram(counts=counts)


def render_histogram(histogram: Histogram, height: int = HISTOGRAM_BINS) -> np.ndarray:
    """Render a histogram as one vertical bar per bin.

    Bar heights are scaled so the fullest bin spans the whole plot. A
    histogram with no counts renders as an empty (black) plot.

    Args:
        histogram: Histogram to plot
        height: Plot height in pixels

    Returns:
        Plot image of shape (height, 256), white bars on black
    """
    if height < 1:
        raise ValueError(f"height must be >= 1, got {height}")

    plot = np.zeros((height, HISTOGRAM_BINS), dtype=np.uint8)
    max_count = histogram.max_count
    if max_count == 0:
        return plot

    for bin_idx, count in enumerate(histogram.counts):
        bin_height = int(count * height / max_count)
        if bin_height == 0:
            continue
        cv2.line(plot, (bin_idx, height - bin_height), (bin_idx, height - 1), 255)

    return plot


def render_histogram_curve(
    histogram: Histogram,
    width: int = 1024,
    height: int = 800,
) -> np.ndarray:
    """Render a histogram as a connected curve.

    Counts are min-max normalized to the plot height and consecutive bins
    are joined by line segments, each bin spanning round(width / 256) pixels.

    Args:
        histogram: Histogram to plot
        width: Plot width in pixels
        height: Plot height in pixels

    Returns:
        Plot image of shape (height, width), white curve on black
    """
    if width < 1 or height < 1:
        raise ValueError(f"plot size must be positive, got {width}x{height}")

    plot = np.zeros((height, width), dtype=np.uint8)
    bin_w = int(round(width / HISTOGRAM_BINS))

    counts = histogram.counts.astype(np.float64)
    low, high = counts.min(), counts.max()
    if high > low:
        scaled = (counts - low) / (high - low) * (height - 1)
    else:
        scaled = np.zeros_like(counts)

    points = np.array(
        [[bin_w * i, height - 1 - int(round(value))] for i, value in enumerate(scaled)],
        dtype=np.int32,
    )
    cv2.polylines(plot, [points], isClosed=False, color=255)
    return plot
