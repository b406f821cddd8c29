"""Data models for gel autocropping."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any

import cv2
import numpy as np

HISTOGRAM_BINS = 256


class GradientOperator(Enum):
    """Derivative kernels available for gradient extraction."""

    SOBEL = "sobel"
    SCHARR = "scharr"


class StructuringShape(Enum):
    """Structuring element shapes used for line extraction."""

    RECT = "rect"
    CROSS = "cross"
    ELLIPSE = "ellipse"

    @property
    def cv_shape(self) -> int:
        return {
            StructuringShape.RECT: cv2.MORPH_RECT,
            StructuringShape.CROSS: cv2.MORPH_CROSS,
            StructuringShape.ELLIPSE: cv2.MORPH_ELLIPSE,
        }[self]


class DistanceMetric(Enum):
    """Distance metrics for the center weight mask.

    CHEBYSHEV: chessboard distance, max(|dx|, |dy|)
    MANHATTAN: city block distance, |dx| + |dy|
    EUCLIDEAN: approximate L2 distance with a 3x3 mask
    """

    CHEBYSHEV = "chebyshev"
    MANHATTAN = "manhattan"
    EUCLIDEAN = "euclidean"

    @property
    def cv_metric(self) -> int:
        return {
            DistanceMetric.CHEBYSHEV: cv2.DIST_C,
            DistanceMetric.MANHATTAN: cv2.DIST_L1,
            DistanceMetric.EUCLIDEAN: cv2.DIST_L2,
        }[self]


class RegionMethod(Enum):
    """How the gel rectangle is derived from the edge image.

    BOUNDING: global extent of all non-zero pixels
    INNERMOST: nearest non-zero pixel along four rays from the center
    """

    BOUNDING = "bounding"
    INNERMOST = "innermost"


@dataclass(frozen=True)
class Point:
    """Integer pixel coordinate."""

    x: int
    y: int

    @classmethod
    def center_of(cls, image: np.ndarray) -> Point:
        """Return the center pixel of an image (integer division)."""
        img_h, img_w = image.shape[:2]
        return cls(img_w // 2, img_h // 2)


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned rectangle as (left, top, width, height).

    Width or height may be negative when no content was found; such a
    rectangle is empty and must not be used as a crop.
    """

    left: int
    top: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    @property
    def is_empty(self) -> bool:
        """Check if this is the degenerate "no region" rectangle."""
        return self.width < 0 or self.height < 0

    @property
    def area(self) -> int:
        """Return the area, or 0 for an empty rectangle."""
        if self.is_empty:
            return 0
        return self.width * self.height

    def as_tuple(self) -> tuple[int, int, int, int]:
        """Return rectangle as (left, top, width, height) tuple."""
        return (self.left, self.top, self.width, self.height)

    def as_bounds(self) -> tuple[int, int, int, int]:
        """Return rectangle as (left, right, top, bottom) tuple."""
        return (self.left, self.right, self.top, self.bottom)


@dataclass
class Histogram:
    """Intensity histogram of a byte image."""

    counts: np.ndarray
    """Count per intensity value, length 256."""

    @property
    def max_count(self) -> int:
        return int(self.counts.max())

    @property
    def total(self) -> int:
        """Return the number of pixels tallied."""
        return int(self.counts.sum())

    @property
    def peak(self) -> int:
        """Return the most populated intensity value."""
        return int(np.argmax(self.counts))


# =============================================================================
# Configuration Classes
# =============================================================================


def _check_type(name: str, default: Any, value: Any) -> None:
    """Raise ValueError unless value has the type of the field's default.

    Integers are accepted for float fields; booleans only for bool fields.
    """
    expected = type(default)
    if expected is float:
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
    elif expected is int:
        ok = isinstance(value, int) and not isinstance(value, bool)
    else:
        ok = isinstance(value, expected)
    if not ok:
        raise ValueError(
            f"{name} must be {expected.__name__}, got {type(value).__name__}"
        )


@dataclass
class GradientConfig:
    """Parameters for gradient magnitude extraction."""

    operator: str = "sobel"
    ksize: int = 3

    def validate(self) -> None:
        """Validate parameter ranges."""
        valid_operators = {op.value for op in GradientOperator}
        if self.operator not in valid_operators:
            raise ValueError(f"gradient.operator must be one of {valid_operators}")
        if self.ksize not in (1, 3, 5, 7):
            raise ValueError(f"gradient.ksize must be 1, 3, 5 or 7, got {self.ksize}")


@dataclass
class LineConfig:
    """Parameters for horizontal/vertical line extraction."""

    shape: str = "rect"
    length_fraction: float = 0.5

    def validate(self) -> None:
        """Validate parameter ranges."""
        valid_shapes = {shape.value for shape in StructuringShape}
        if self.shape not in valid_shapes:
            raise ValueError(f"lines.shape must be one of {valid_shapes}")
        if not (0.0 < self.length_fraction <= 1.0):
            raise ValueError(
                f"lines.length_fraction must be in (0, 1], got {self.length_fraction}"
            )


@dataclass
class CenterMaskConfig:
    """Parameters for the center weight mask."""

    metric: str = "chebyshev"
    padding: int = 1

    def validate(self) -> None:
        """Validate parameter ranges."""
        valid_metrics = {metric.value for metric in DistanceMetric}
        if self.metric not in valid_metrics:
            raise ValueError(f"center_mask.metric must be one of {valid_metrics}")
        if self.padding < 1:
            raise ValueError(f"center_mask.padding must be >= 1, got {self.padding}")


@dataclass
class ForegroundConfig:
    """Parameters for the adaptive background model (MOG2)."""

    history: int = 500
    var_threshold: float = 16.0
    detect_shadows: bool = True
    learning_rate: float = -1.0

    def validate(self) -> None:
        """Validate parameter ranges."""
        if self.history < 1:
            raise ValueError(f"foreground.history must be >= 1, got {self.history}")
        if self.var_threshold <= 0:
            raise ValueError(
                f"foreground.var_threshold must be > 0, got {self.var_threshold}"
            )
        if self.learning_rate != -1.0 and not (0.0 <= self.learning_rate <= 1.0):
            raise ValueError(
                f"foreground.learning_rate must be -1 or 0.0-1.0, got {self.learning_rate}"
            )


@dataclass
class LocateConfig:
    """Parameters for the gel locating pipeline."""

    method: str = "bounding"
    center_weight: bool = False
    threshold: int = 0
    use_lines: bool = True

    def validate(self) -> None:
        """Validate parameter ranges."""
        valid_methods = {method.value for method in RegionMethod}
        if self.method not in valid_methods:
            raise ValueError(f"locate.method must be one of {valid_methods}")
        if not (0 <= self.threshold <= 255):
            raise ValueError(f"locate.threshold must be 0-255, got {self.threshold}")


@dataclass
class GelConfig:
    """Complete configuration for gel autocropping."""

    gradient: GradientConfig = field(default_factory=GradientConfig)
    lines: LineConfig = field(default_factory=LineConfig)
    center_mask: CenterMaskConfig = field(default_factory=CenterMaskConfig)
    foreground: ForegroundConfig = field(default_factory=ForegroundConfig)
    locate: LocateConfig = field(default_factory=LocateConfig)

    def validate(self) -> None:
        """Validate all configuration."""
        self.gradient.validate()
        self.lines.validate()
        self.center_mask.validate()
        self.foreground.validate()
        self.locate.validate()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GelConfig:
        """Create GelConfig from dictionary.

        Sections and keys missing from ``data`` keep their defaults.
        """
        config = cls()
        sections = {f.name for f in fields(config)}

        if not isinstance(data, dict):
            raise ValueError(f"Config must be an object, got {type(data).__name__}")

        for section, values in data.items():
            if section not in sections:
                raise ValueError(f"Unknown config section: {section}")
            if not isinstance(values, dict):
                raise ValueError(
                    f"Config section {section} must be an object, got {type(values).__name__}"
                )
            target = getattr(config, section)
            known = {f.name for f in fields(target)}
            for key, value in values.items():
                if key not in known:
                    raise ValueError(f"Unknown config key: {section}.{key}")
                _check_type(f"{section}.{key}", getattr(target, key), value)
                setattr(target, key, value)

        config.validate()
        return config

    @classmethod
    def from_json(cls, json_str: str) -> GelConfig:
        """Parse GelConfig from JSON string."""
        data = json.loads(json_str)
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: str | Path) -> GelConfig:
        """Load GelConfig from JSON file."""
        with open(path) as f:
            return cls.from_json(f.read())

    @classmethod
    def default_json(cls) -> str:
        """Return default configuration as formatted JSON string."""
        config = cls()
        return config.to_json()
