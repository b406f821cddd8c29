"""Debug visualization utilities for gel detection."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import TYPE_CHECKING

import cv2
import numpy as np

if TYPE_CHECKING:
    from .models import Histogram, Rectangle


def draw_rectangle(
    img: np.ndarray,
    rect: Rectangle,
    thickness: int = 1,
    color: tuple[int, int, int] = (0, 0, 255),
) -> np.ndarray:
    """Return a BGR copy of img with rect outlined (red by default)."""
    if img.ndim == 2:
        vis = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
    else:
        vis = img.copy()

    if rect.is_empty:
        return vis

    cv2.rectangle(vis, rect.as_tuple(), color, thickness)
    return vis


class DebugVisualizer:
    """Saves debug images at each step of gel detection."""

    def __init__(self, output_dir: str | Path):
        self.output_dir = Path(output_dir)
        if self.output_dir.exists():
            # Backup existing debug dir before cleaning
            backup_dir = self.output_dir.with_suffix(".bak")
            if backup_dir.exists():
                shutil.rmtree(backup_dir)
            self.output_dir.rename(backup_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.step = 0

    def _save(self, name: str, img: np.ndarray) -> Path:
        self.step += 1
        path = self.output_dir / f"{self.step:02d}_{name}.png"
        cv2.imwrite(str(path), img)
        return path

    def save_gradient(self, gradient: np.ndarray) -> Path:
        """Save the gradient magnitude image."""
        return self._save("gradient", gradient)

    def save_center_mask(self, mask: np.ndarray) -> Path:
        """Save the float center mask scaled to 0-255."""
        return self._save("center_mask", np.clip(mask * 255, 0, 255).astype(np.uint8))

    def save_edges(self, edges: np.ndarray, threshold: int) -> Path:
        """Save the binarized edge map with the threshold used."""
        vis = cv2.cvtColor(edges, cv2.COLOR_GRAY2BGR)
        cv2.putText(
            vis, f"threshold={threshold}", (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.8, (0, 255, 0), 2
        )
        return self._save("edges", vis)

    def save_lines(self, lines: np.ndarray) -> Path:
        """Save the extracted horizontal and vertical lines."""
        return self._save("lines", lines)

    def save_region(self, img: np.ndarray, rect: Rectangle) -> Path:
        """Save the image with the detected region outlined."""
        thickness = max(1, min(img.shape[:2]) // 200)
        return self._save("region", draw_rectangle(img, rect, thickness))

    def save_foreground(self, index: int, frame: np.ndarray, foreground: np.ndarray) -> Path:
        """Save a source frame and its foreground side by side."""
        return self._save(f"foreground_{index}", np.hstack([frame, foreground]))

    def save_histogram(self, histogram: Histogram, title: str = "Histogram") -> Path:
        """Save a matplotlib plot of the histogram."""
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        import pandas as pd

        df = pd.DataFrame({"brightness": range(len(histogram.counts)), "count": histogram.counts})
        fig, ax = plt.subplots(figsize=(8, 3))
        ax.fill_between(df["brightness"], df["count"], alpha=0.7)
        ax.axvline(x=histogram.peak, color="red", linestyle="--", label=f"peak={histogram.peak}")
        ax.set_xlabel("Brightness")
        ax.set_ylabel("Count")
        ax.set_xlim(0, 255)
        ax.set_title(title)
        ax.legend()
        fig.tight_layout()

        self.step += 1
        path = self.output_dir / f"{self.step:02d}_histogram.png"
        fig.savefig(path, dpi=100)
        plt.close(fig)
        return path
