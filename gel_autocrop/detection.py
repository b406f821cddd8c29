"""Gel region detection and cropping utilities."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from .exceptions import NoRegionFoundError
from .filters import binarize, extract_lines, gradient_magnitude
from .masks import apply_center_weight, generate_center_mask
from .models import GelConfig, Point, Rectangle, RegionMethod
from .validation import require_gray_image, to_grayscale

if TYPE_CHECKING:
    from .visualizer import DebugVisualizer

logger = logging.getLogger(__name__)


def bounding_rectangle(gray: np.ndarray) -> Rectangle:
    """Compute the bounding rectangle of all non-zero pixels.

    Width and height are max - min, so a single pixel gives a 0x0
    rectangle. When the image has no non-zero pixel the result keeps the
    scan's starting values (left=w-1, top=h-1, right=0, bottom=0) and has
    negative width and height. Use find_region() to get None instead.

    Args:
        gray: Input grayscale image or binary mask

    Returns:
        Rectangle(left, top, width, height)
    """
    require_gray_image(gray)
    img_h, img_w = gray.shape[:2]

    left_most, right_most = img_w - 1, 0
    top_most, bottom_most = img_h - 1, 0

    ys, xs = np.nonzero(gray)
    if xs.size:
        left_most = min(left_most, int(xs.min()))
        right_most = max(right_most, int(xs.max()))
        top_most = min(top_most, int(ys.min()))
        bottom_most = max(bottom_most, int(ys.max()))

    return Rectangle(left_most, top_most, right_most - left_most, bottom_most - top_most)


def _first_nonzero(values: np.ndarray) -> int | None:
    """Return the index of the first non-zero entry, or None."""
    hits = np.flatnonzero(values)
    if hits.size == 0:
        return None
    return int(hits[0])


def _scan_from_center(gray: np.ndarray) -> tuple[int | None, int | None, int | None, int | None]:
    """Find the nearest non-zero pixel above, below, left and right of the center.

    The center pixel itself is included in every ray.

    Returns:
        Tuple of (up, down, left, right) coordinates, None where a ray found nothing
    """
    center = Point.center_of(gray)
    column = gray[:, center.x]
    row = gray[center.y, :]

    up = _first_nonzero(column[center.y :: -1])
    down = _first_nonzero(column[center.y :])
    left = _first_nonzero(row[center.x :: -1])
    right = _first_nonzero(row[center.x :])

    return (
        None if up is None else center.y - up,
        None if down is None else center.y + down,
        None if left is None else center.x - left,
        None if right is None else center.x + right,
    )


def innermost_rectangle(gray: np.ndarray) -> Rectangle:
    """Compute the rectangle bounded by the nearest content around the center.

    Scans up, down, left and right from the center pixel and stops at the
    first non-zero pixel on each ray. A ray that reaches the border without
    a hit falls back to that edge: 0 for up/left, height/width for
    down/right. Use find_innermost_region() to get None in that case.

    Args:
        gray: Input grayscale image or binary mask, typically a frame outline

    Returns:
        Rectangle(left, up, right - left, down - up)
    """
    require_gray_image(gray)
    img_h, img_w = gray.shape[:2]

    up, down, left, right = _scan_from_center(gray)
    up = 0 if up is None else up
    down = img_h if down is None else down
    left = 0 if left is None else left
    right = img_w if right is None else right

    return Rectangle(left, up, right - left, down - up)


def find_region(gray: np.ndarray) -> Rectangle | None:
    """Return the bounding rectangle of the content, or None if there is none."""
    require_gray_image(gray)
    if not np.any(gray):
        return None
    return bounding_rectangle(gray)


def find_innermost_region(gray: np.ndarray) -> Rectangle | None:
    """Return the innermost rectangle, or None unless all four rays hit content."""
    require_gray_image(gray)
    if any(bound is None for bound in _scan_from_center(gray)):
        return None
    return innermost_rectangle(gray)


def prepare_edges(
    gray: np.ndarray,
    config: GelConfig | None = None,
    visualizer: DebugVisualizer | None = None,
) -> np.ndarray:
    """Turn a grayscale image into a binary map of gel boundary candidates.

    Steps: gradient magnitude, optional center weighting, thresholding and,
    unless disabled, extraction of long horizontal and vertical lines.

    Args:
        gray: Input grayscale image
        config: Pipeline configuration
        visualizer: Optional debug visualizer to save intermediate images

    Returns:
        Binary edge map (0 or 255)
    """
    require_gray_image(gray)
    if config is None:
        config = GelConfig()

    gradient = gradient_magnitude(gray, config.gradient)
    if visualizer:
        visualizer.save_gradient(gradient)

    if config.locate.center_weight:
        img_h, img_w = gray.shape[:2]
        mask = generate_center_mask((img_w, img_h), config.center_mask)
        gradient = apply_center_weight(gradient, mask)
        if visualizer:
            visualizer.save_center_mask(mask)

    edges, threshold = binarize(gradient, config.locate.threshold)
    if visualizer:
        visualizer.save_edges(edges, threshold)

    if not config.locate.use_lines:
        return edges

    lines = extract_lines(edges, config.lines)
    if visualizer:
        visualizer.save_lines(lines)
    return lines


def locate_gel(
    img: np.ndarray,
    config: GelConfig | None = None,
    visualizer: DebugVisualizer | None = None,
) -> Rectangle | None:
    """Locate the gel rectangle in an image.

    Args:
        img: Input image (grayscale, or BGR/BGRA which is converted to gray)
        config: Pipeline configuration
        visualizer: Optional debug visualizer to save intermediate images

    Returns:
        Detected Rectangle, or None if no region was found
    """
    if config is None:
        config = GelConfig()
    config.validate()

    gray = to_grayscale(img)
    img_h, img_w = gray.shape[:2]
    logger.debug("Locating gel in %dx%d image", img_w, img_h)

    edges = prepare_edges(gray, config, visualizer)

    if RegionMethod(config.locate.method) == RegionMethod.INNERMOST:
        rect = find_innermost_region(edges)
    else:
        rect = find_region(edges)

    if rect is None:
        logger.warning("No gel region found using %s method", config.locate.method)
        return None

    logger.debug("Gel region: %s", rect.as_tuple())
    if visualizer:
        visualizer.save_region(gray, rect)
    return rect


def crop_region(img: np.ndarray, rect: Rectangle) -> np.ndarray:
    """Crop image to the specified rectangle.

    The crop spans right and bottom inclusively, so a rectangle from
    bounding_rectangle() keeps every content pixel.

    Args:
        img: Input image as numpy array
        rect: Region to keep

    Returns:
        Cropped copy of the image
    """
    if rect.is_empty:
        raise NoRegionFoundError()

    img_h, img_w = img.shape[:2]
    left, top = max(0, rect.left), max(0, rect.top)
    right = min(img_w, rect.right + 1)
    bottom = min(img_h, rect.bottom + 1)
    return img[top:bottom, left:right].copy()
