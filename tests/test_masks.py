import numpy as np
import pytest

from gel_autocrop.masks import apply_center_weight, generate_center_mask, pad_image, remove_padding
from gel_autocrop.models import CenterMaskConfig


def test_center_is_one():
    mask = generate_center_mask((9, 9))
    assert mask.dtype == np.float32
    assert mask[4, 4] == pytest.approx(1.0)
    assert mask.max() == pytest.approx(1.0)
    assert mask.min() > 0


def test_strictly_decreasing_from_center():
    mask = generate_center_mask((9, 9))
    center = 4
    rays = [
        mask[center, center:],
        mask[center, center::-1],
        mask[center:, center],
        mask[center::-1, center],
    ]
    for ray in rays:
        assert np.all(np.diff(ray) < 0)


def test_size_is_width_height():
    mask = generate_center_mask((12, 7))
    assert mask.shape == (7, 12)


def test_non_square_plateaus_along_long_axis():
    mask = generate_center_mask((9, 5))
    assert mask[2, 2] == pytest.approx(1.0)
    assert mask[2, 4] == pytest.approx(1.0)
    assert mask[2, 6] == pytest.approx(1.0)
    assert np.all(np.diff(mask[2, 4:]) <= 0)
    assert np.all(np.diff(mask[2:, 4]) < 0)


def test_even_size_center():
    mask = generate_center_mask((8, 8))
    assert mask[4, 4] == pytest.approx(1.0)


def test_manhattan_metric():
    mask = generate_center_mask((9, 9), CenterMaskConfig(metric="manhattan"))
    assert mask[4, 4] == pytest.approx(1.0)
    # Distance to a straight border is the same under both metrics
    np.testing.assert_allclose(mask, generate_center_mask((9, 9)))


def test_single_pixel():
    mask = generate_center_mask((1, 1))
    assert mask.shape == (1, 1)
    assert mask[0, 0] == pytest.approx(1.0)


def test_rejects_empty_size():
    with pytest.raises(ValueError):
        generate_center_mask((0, 5))


def test_padding_helpers():
    img = np.full((3, 4), 9, dtype=np.uint8)
    padded = pad_image(img, 2)
    assert padded.shape == (7, 8)
    assert not np.any(padded[:2])
    assert not np.any(padded[:, -2:])

    restored = remove_padding(padded, 2)
    np.testing.assert_array_equal(restored, img)
    assert not np.shares_memory(restored, padded)


def test_remove_padding_too_large():
    with pytest.raises(ValueError):
        remove_padding(np.zeros((4, 4), dtype=np.uint8), 2)


def test_apply_center_weight():
    img = np.full((9, 9), 200, dtype=np.uint8)
    mask = generate_center_mask((9, 9))
    weighted = apply_center_weight(img, mask)
    assert weighted.dtype == np.uint8
    assert weighted[4, 4] == 200
    assert weighted[0, 0] == 40


def test_apply_center_weight_shape_mismatch():
    with pytest.raises(ValueError):
        apply_center_weight(np.zeros((4, 4), dtype=np.uint8), np.ones((5, 5), dtype=np.float32))
