import numpy as np
import pytest

from gel_autocrop.detection import (
    bounding_rectangle,
    crop_region,
    find_innermost_region,
    find_region,
    innermost_rectangle,
    locate_gel,
)
from gel_autocrop.exceptions import InvalidImageError, NoRegionFoundError
from gel_autocrop.models import GelConfig, Rectangle
from gel_autocrop.visualizer import DebugVisualizer

from .conftest import GEL_BOX


class TestBoundingRectangle:
    def test_block(self):
        img = np.zeros((8, 8), dtype=np.uint8)
        img[3:5, 3:5] = 255
        assert bounding_rectangle(img) == Rectangle(3, 3, 1, 1)

    def test_single_pixel(self):
        img = np.zeros((6, 10), dtype=np.uint8)
        img[2, 5] = 1
        assert bounding_rectangle(img) == Rectangle(5, 2, 0, 0)

    def test_all_zero_is_degenerate(self):
        img = np.zeros((6, 10), dtype=np.uint8)
        rect = bounding_rectangle(img)
        assert rect == Rectangle(9, 5, -9, -5)
        assert rect.width < 0 and rect.height < 0
        assert rect.is_empty

    def test_content_is_enclosed(self):
        rng = np.random.default_rng(0)
        img = np.zeros((40, 50), dtype=np.uint8)
        img[10:30, 5:45] = (rng.random((20, 40)) > 0.8).astype(np.uint8) * 255
        img[12, 7] = 255

        rect = bounding_rectangle(img)
        assert rect.width >= 0 and rect.height >= 0

        inside = np.zeros_like(img, dtype=bool)
        inside[rect.top : rect.bottom + 1, rect.left : rect.right + 1] = True
        assert not np.any(img[~inside])

        assert np.any(img[rect.top, rect.left : rect.right + 1])
        assert np.any(img[rect.bottom, rect.left : rect.right + 1])
        assert np.any(img[rect.top : rect.bottom + 1, rect.left])
        assert np.any(img[rect.top : rect.bottom + 1, rect.right])

    def test_rejects_color(self):
        with pytest.raises(InvalidImageError):
            bounding_rectangle(np.zeros((4, 4, 3), dtype=np.uint8))

    def test_rejects_float(self):
        with pytest.raises(InvalidImageError):
            bounding_rectangle(np.zeros((4, 4), dtype=np.float32))

    def test_rejects_empty(self):
        with pytest.raises(InvalidImageError):
            bounding_rectangle(np.zeros((0, 4), dtype=np.uint8))


class TestInnermostRectangle:
    def test_frame(self, frame_image):
        assert innermost_rectangle(frame_image) == Rectangle(3, 4, 14, 12)

    def test_empty_defaults_to_edges(self):
        img = np.zeros((6, 10), dtype=np.uint8)
        assert innermost_rectangle(img) == Rectangle(0, 0, 10, 6)

    def test_center_on_content(self):
        img = np.zeros((7, 9), dtype=np.uint8)
        img[3, 4] = 255
        assert innermost_rectangle(img) == Rectangle(4, 3, 0, 0)

    def test_nearest_not_outermost(self, frame_image):
        img = frame_image.copy()
        img[1, :] = 255
        assert innermost_rectangle(img).top == 4


class TestOptionalRegions:
    def test_find_region_none(self):
        assert find_region(np.zeros((5, 5), dtype=np.uint8)) is None

    def test_find_region(self):
        img = np.zeros((8, 8), dtype=np.uint8)
        img[3:5, 3:5] = 255
        assert find_region(img) == Rectangle(3, 3, 1, 1)

    def test_find_innermost_region(self, frame_image):
        assert find_innermost_region(frame_image) == Rectangle(3, 4, 14, 12)

    def test_find_innermost_region_open_side(self, frame_image):
        img = frame_image.copy()
        img[:, 17] = 0
        assert find_innermost_region(img) is None


class TestCropRegion:
    def test_crop_is_inclusive(self):
        img = np.zeros((8, 8), dtype=np.uint8)
        img[3:5, 3:5] = 255
        crop = crop_region(img, bounding_rectangle(img))
        assert crop.shape == (2, 2)
        assert np.all(crop == 255)

    def test_crop_is_copy(self):
        img = np.zeros((8, 8), dtype=np.uint8)
        img[3:5, 3:5] = 255
        crop = crop_region(img, Rectangle(3, 3, 1, 1))
        crop[:] = 0
        assert img[3, 3] == 255

    def test_empty_rectangle(self):
        with pytest.raises(NoRegionFoundError):
            crop_region(np.zeros((8, 8), dtype=np.uint8), Rectangle(7, 7, -7, -7))


class TestLocateGel:
    def _assert_near_box(self, rect):
        left, top, right, bottom = GEL_BOX
        assert rect is not None
        assert abs(rect.left - left) <= 2
        assert abs(rect.top - top) <= 2
        assert abs(rect.right - (right - 1)) <= 2
        assert abs(rect.bottom - (bottom - 1)) <= 2

    def test_bounding(self, gel_image):
        self._assert_near_box(locate_gel(gel_image))

    def test_innermost(self, gel_image):
        config = GelConfig()
        config.locate.method = "innermost"
        self._assert_near_box(locate_gel(gel_image, config))

    def test_center_weight(self, gel_image):
        config = GelConfig()
        config.locate.center_weight = True
        self._assert_near_box(locate_gel(gel_image, config))

    def test_without_lines(self, gel_image):
        config = GelConfig()
        config.locate.use_lines = False
        self._assert_near_box(locate_gel(gel_image, config))

    def test_color_input(self, gel_image):
        bgr = np.dstack([gel_image] * 3)
        self._assert_near_box(locate_gel(bgr))

    def test_uniform_image(self):
        assert locate_gel(np.full((50, 80), 128, dtype=np.uint8)) is None

    def test_debug_output(self, gel_image, tmp_path):
        visualizer = DebugVisualizer(tmp_path / "debug")
        locate_gel(gel_image, visualizer=visualizer)
        names = sorted(p.name for p in (tmp_path / "debug").iterdir())
        assert names == ["01_gradient.png", "02_edges.png", "03_lines.png", "04_region.png"]
