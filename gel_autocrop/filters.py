"""Gradient and line extraction filters for gel boundary detection."""

from __future__ import annotations

import logging
from enum import Enum

import cv2
import numpy as np

from .models import GradientConfig, GradientOperator, LineConfig, StructuringShape
from .validation import require_gray_image

logger = logging.getLogger(__name__)


class LineDirection(Enum):
    """Axis along which a line structuring element extends."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


def _derivatives(gray: np.ndarray, config: GradientConfig) -> tuple[np.ndarray, np.ndarray]:
    """Return signed 16-bit x and y derivatives."""
    if GradientOperator(config.operator) == GradientOperator.SCHARR:
        grad_x = cv2.Scharr(gray, cv2.CV_16S, 1, 0, borderType=cv2.BORDER_DEFAULT)
        grad_y = cv2.Scharr(gray, cv2.CV_16S, 0, 1, borderType=cv2.BORDER_DEFAULT)
    else:
        grad_x = cv2.Sobel(gray, cv2.CV_16S, 1, 0, ksize=config.ksize, borderType=cv2.BORDER_DEFAULT)
        grad_y = cv2.Sobel(gray, cv2.CV_16S, 0, 1, ksize=config.ksize, borderType=cv2.BORDER_DEFAULT)
    return grad_x, grad_y


def gradient_magnitude(gray: np.ndarray, config: GradientConfig | None = None) -> np.ndarray:
    """Compute an approximate gradient magnitude image.

    Each directional derivative is converted to bytes with absolute-value
    scaling and the two are combined as 0.5*|dx| + 0.5*|dy|, saturating
    at 255. Borders are reflected so the output matches the input size.

    Args:
        gray: Input grayscale image
        config: Derivative operator settings (Sobel 3x3 by default)

    Returns:
        Gradient magnitude image (uint8, same shape as input)
    """
    require_gray_image(gray)
    if config is None:
        config = GradientConfig()

    grad_x, grad_y = _derivatives(gray, config)
    abs_grad_x = cv2.convertScaleAbs(grad_x)
    abs_grad_y = cv2.convertScaleAbs(grad_y)

    return cv2.addWeighted(abs_grad_x, 0.5, abs_grad_y, 0.5, 0)


def binarize(gray: np.ndarray, threshold: int = 0) -> tuple[np.ndarray, int]:
    """Threshold an image to a binary edge map.

    Args:
        gray: Input grayscale image
        threshold: Pixels above this value become 255; 0 selects Otsu

    Returns:
        Tuple of (binary map with values 0 or 255, threshold used)
    """
    require_gray_image(gray)

    if threshold == 0:
        used, binary = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
    else:
        used, binary = cv2.threshold(gray, threshold, 255, cv2.THRESH_BINARY)

    logger.debug("Binarized with threshold %d", int(used))
    return binary, int(used)


def line_element(
    length: int,
    direction: LineDirection,
    shape: StructuringShape = StructuringShape.RECT,
) -> np.ndarray:
    """Build a one pixel thick structuring element.

    Args:
        length: Element length along the line direction (at least 1)
        direction: Whether the element is horizontal or vertical
        shape: Structuring element shape

    Returns:
        Structuring element as uint8 array
    """
    length = max(1, int(length))
    if direction == LineDirection.HORIZONTAL:
        size = (length, 1)
    else:
        size = (1, length)
    return cv2.getStructuringElement(shape.cv_shape, size)


def _open_lines(gray: np.ndarray, direction: LineDirection, config: LineConfig | None) -> np.ndarray:
    require_gray_image(gray)
    if config is None:
        config = LineConfig()

    img_h, img_w = gray.shape[:2]
    extent = img_w if direction == LineDirection.HORIZONTAL else img_h
    length = int(extent * config.length_fraction)

    kernel = line_element(length, direction, StructuringShape(config.shape))
    logger.debug("Opening %s lines with element %s", direction.value, kernel.shape[::-1])
    return open_image(gray, kernel)


def open_image(gray: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """Morphological opening that keeps surviving structures in place.

    cv2.dilate does not reflect the element, so an even-length element
    opened with cv2.morphologyEx shifts its result by one pixel. Dilating
    with the reflected element and anchor gives the true opening, which is
    always a subset of the input.

    Args:
        gray: Input grayscale image or binary map
        kernel: Structuring element

    Returns:
        Opened image (same shape as input)
    """
    kernel_h, kernel_w = kernel.shape[:2]
    anchor = (kernel_w // 2, kernel_h // 2)
    reflected_anchor = (kernel_w - 1 - anchor[0], kernel_h - 1 - anchor[1])

    eroded = cv2.erode(gray, kernel, anchor=anchor)
    return cv2.dilate(eroded, np.ascontiguousarray(kernel[::-1, ::-1]), anchor=reflected_anchor)


def extract_horizontal_lines(gray: np.ndarray, config: LineConfig | None = None) -> np.ndarray:
    """Keep only horizontal runs at least half the image width long.

    Morphological opening with a (width/2 x 1) element removes text, noise
    and short edges while long straight borders survive.

    Args:
        gray: Input grayscale image or binary edge map
        config: Element shape and length fraction (default half width)

    Returns:
        Image of surviving horizontal structures (same shape as input)
    """
    return _open_lines(gray, LineDirection.HORIZONTAL, config)


def extract_vertical_lines(gray: np.ndarray, config: LineConfig | None = None) -> np.ndarray:
    """Keep only vertical runs at least half the image height long.

    Args:
        gray: Input grayscale image or binary edge map
        config: Element shape and length fraction (default half height)

    Returns:
        Image of surviving vertical structures (same shape as input)
    """
    return _open_lines(gray, LineDirection.VERTICAL, config)


def extract_lines(gray: np.ndarray, config: LineConfig | None = None) -> np.ndarray:
    """Combine horizontal and vertical line extraction into one image."""
    horizontal = extract_horizontal_lines(gray, config)
    vertical = extract_vertical_lines(gray, config)
    return cv2.bitwise_or(horizontal, vertical)
