"""Gel region location and image preprocessing for autocropping."""

__version__ = "0.1.0"

_LAZY = {
    "bounding_rectangle": "detection",
    "innermost_rectangle": "detection",
    "find_region": "detection",
    "find_innermost_region": "detection",
    "locate_gel": "detection",
    "crop_region": "detection",
    "gradient_magnitude": "filters",
    "extract_horizontal_lines": "filters",
    "extract_vertical_lines": "filters",
    "compute_histogram": "histogram",
    "render_histogram": "histogram",
    "generate_center_mask": "masks",
    "ForegroundSeparator": "separation",
    "process_sequence": "separation",
    "GelConfig": "models",
    "Histogram": "models",
    "Point": "models",
    "Rectangle": "models",
}


def __getattr__(name):
    """Lazy import to avoid loading cv2 for CLI subcommands that don't need it."""
    if name in _LAZY:
        from importlib import import_module

        module = import_module(f".{_LAZY[name]}", __name__)
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = list(_LAZY)
