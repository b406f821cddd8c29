"""Input checks shared by the image algorithms."""

from __future__ import annotations

from collections.abc import Sequence

import cv2
import numpy as np

from .exceptions import InvalidImageError


def require_gray_image(image: np.ndarray, name: str = "image") -> None:
    """Raise InvalidImageError unless image is a non-empty 2-D uint8 array."""
    if not isinstance(image, np.ndarray):
        raise InvalidImageError(f"{name} must be a numpy array, got {type(image).__name__}")
    if image.ndim != 2:
        raise InvalidImageError(f"{name} must be single-channel, got shape {image.shape}")
    if image.dtype != np.uint8:
        raise InvalidImageError(f"{name} must be uint8, got {image.dtype}")
    if image.size == 0:
        raise InvalidImageError(f"{name} must not be empty, got shape {image.shape}")


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Convert a BGR, BGRA or single-channel image to a 2-D uint8 image.

    Args:
        image: Input image as loaded by cv2.imread

    Returns:
        New single-channel image
    """
    if not isinstance(image, np.ndarray):
        raise InvalidImageError(f"image must be a numpy array, got {type(image).__name__}")

    if image.ndim == 3:
        channels = image.shape[2]
        if channels == 1:
            gray = image[:, :, 0].copy()
        elif channels == 3:
            gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        elif channels == 4:
            gray = cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
        else:
            raise InvalidImageError(f"unsupported channel count {channels}")
    else:
        gray = image.copy()

    require_gray_image(gray)
    return gray


def require_same_shape(images: Sequence[np.ndarray]) -> None:
    """Raise InvalidImageError if the frames of a sequence differ in shape or type."""
    if len(images) == 0:
        return

    for index, image in enumerate(images):
        require_gray_image(image, f"frame {index}")

    expected = images[0].shape
    for index, image in enumerate(images[1:], start=1):
        if image.shape != expected:
            raise InvalidImageError(
                f"frame {index} has shape {image.shape}, expected {expected}"
            )
