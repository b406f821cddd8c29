"""Center weighting mask generation."""

from __future__ import annotations

import logging

import cv2
import numpy as np

from .models import CenterMaskConfig, DistanceMetric
from .validation import require_gray_image

logger = logging.getLogger(__name__)


def pad_image(image: np.ndarray, padding: int = 1, value: int = 0) -> np.ndarray:
    """Return a copy of image with a constant border on all sides.

    Args:
        image: Input image
        padding: Border width in pixels
        value: Border fill value

    Returns:
        Padded image of shape (h + 2*padding, w + 2*padding)
    """
    if padding < 0:
        raise ValueError(f"padding must be >= 0, got {padding}")
    return cv2.copyMakeBorder(
        image, padding, padding, padding, padding, cv2.BORDER_CONSTANT, value=value
    )


def remove_padding(image: np.ndarray, padding: int = 1) -> np.ndarray:
    """Return a copy of image with padding pixels stripped from every side."""
    if padding < 0:
        raise ValueError(f"padding must be >= 0, got {padding}")
    img_h, img_w = image.shape[:2]
    if 2 * padding >= img_h or 2 * padding >= img_w:
        raise ValueError(f"padding {padding} leaves nothing of a {img_w}x{img_h} image")
    return image[padding : img_h - padding, padding : img_w - padding].copy()


def generate_center_mask(
    size: tuple[int, int],
    config: CenterMaskConfig | None = None,
) -> np.ndarray:
    """Generate a mask that is 1.0 at the center and falls off toward the edges.

    An all-ones frame is padded with a zero border, distance transformed
    (chessboard metric, 3x3 mask by default) and normalized by its maximum,
    then the padding is removed. With the chessboard metric the falloff is
    rectangular, so non-square sizes plateau along the longer axis.

    Args:
        size: Mask size as (width, height)
        config: Distance metric and padding settings

    Returns:
        float32 mask of shape (height, width) with values in (0, 1]
    """
    if config is None:
        config = CenterMaskConfig()

    width, height = size
    if width < 1 or height < 1:
        raise ValueError(f"mask size must be positive, got {width}x{height}")

    frame = np.ones((height, width), dtype=np.uint8)
    padded = pad_image(frame, config.padding)

    metric = DistanceMetric(config.metric)
    distance = cv2.distanceTransform(padded, metric.cv_metric, cv2.DIST_MASK_3)

    max_distance = float(distance.max())
    logger.debug("Center mask %dx%d max distance %.2f", width, height, max_distance)
    distance /= max_distance

    return remove_padding(distance, config.padding)


def apply_center_weight(gray: np.ndarray, mask: np.ndarray) -> np.ndarray:
    """Scale each pixel by the mask value at the same position.

    Args:
        gray: Input grayscale image
        mask: Float mask of the same shape, typically from generate_center_mask

    Returns:
        Weighted image (uint8)
    """
    require_gray_image(gray)
    if mask.shape != gray.shape:
        raise ValueError(f"mask shape {mask.shape} does not match image shape {gray.shape}")

    weighted = gray.astype(np.float32) * mask
    return np.clip(np.rint(weighted), 0, 255).astype(np.uint8)
