"""Background/foreground separation across an image sequence."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import cv2
import numpy as np

from .exceptions import InvalidImageError, SessionClosedError
from .models import ForegroundConfig
from .validation import require_gray_image, require_same_shape

logger = logging.getLogger(__name__)


class ForegroundSeparator:
    """Background model session fed one frame at a time.

    Wraps an adaptive Gaussian mixture background subtractor (MOG2). The
    model state evolves with every frame and is never reset; start a new
    separator for a new sequence. A session must be advanced by a single
    caller, in temporal order.

    Usage:
        with ForegroundSeparator() as separator:
            for frame in frames:
                mask, foreground = separator.apply(frame)
    """

    def __init__(self, config: ForegroundConfig | None = None):
        if config is None:
            config = ForegroundConfig()
        config.validate()

        self.config = config
        self.frame_count = 0
        self._shape: tuple[int, ...] | None = None
        self._subtractor = cv2.createBackgroundSubtractorMOG2(
            history=config.history,
            varThreshold=config.var_threshold,
            detectShadows=config.detect_shadows,
        )

    def __enter__(self) -> ForegroundSeparator:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._subtractor is None

    def close(self) -> None:
        """Release the background model."""
        self._subtractor = None

    def apply(self, frame: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Update the model with a frame and separate its foreground.

        Args:
            frame: Next grayscale frame of the sequence

        Returns:
            Tuple of (foreground mask, foreground image). The image holds the
            frame's pixels where the mask is non-zero and 0 elsewhere.
        """
        if self._subtractor is None:
            raise SessionClosedError()

        require_gray_image(frame, "frame")
        if self._shape is None:
            self._shape = frame.shape
        elif frame.shape != self._shape:
            raise InvalidImageError(
                f"frame {self.frame_count} has shape {frame.shape}, expected {self._shape}"
            )

        mask = self._subtractor.apply(frame, learningRate=self.config.learning_rate)
        self.frame_count += 1

        foreground = np.zeros_like(frame)
        np.copyto(foreground, frame, where=mask > 0)

        logger.debug(
            "Frame %d: %d foreground pixels", self.frame_count, int(np.count_nonzero(mask))
        )
        return mask, foreground

    def background_image(self) -> np.ndarray | None:
        """Return the model's current background estimate, or None before any frame."""
        if self._subtractor is None:
            raise SessionClosedError()
        if self.frame_count == 0:
            return None
        return self._subtractor.getBackgroundImage()


def process_sequence(
    images: Sequence[np.ndarray],
    config: ForegroundConfig | None = None,
) -> list[np.ndarray]:
    """Separate the foreground of every frame after the first.

    All frames are fed to a fresh background model. The first frame only
    initializes the model, so its output is not included.

    Args:
        images: Ordered frames of identical shape
        config: Background model settings

    Returns:
        Foreground images for frames 2..N (empty for fewer than two frames)
    """
    require_same_shape(images)

    foregrounds = []
    with ForegroundSeparator(config) as separator:
        for index, image in enumerate(images):
            _, foreground = separator.apply(image)
            if index > 0:
                foregrounds.append(foreground)

    logger.debug("Separated %d foreground frames from %d inputs", len(foregrounds), len(images))
    return foregrounds


def last_foreground(
    images: Sequence[np.ndarray],
    config: ForegroundConfig | None = None,
) -> np.ndarray | None:
    """Return the foreground of the final frame after feeding the whole sequence.

    Args:
        images: Ordered frames of identical shape
        config: Background model settings

    Returns:
        Foreground image of the last frame, or None for an empty sequence
    """
    require_same_shape(images)

    foreground = None
    with ForegroundSeparator(config) as separator:
        for image in images:
            _, foreground = separator.apply(image)
    return foreground
