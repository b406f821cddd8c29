import numpy as np
import pytest

from gel_autocrop.exceptions import InvalidImageError, SessionClosedError
from gel_autocrop.models import ForegroundConfig
from gel_autocrop.separation import ForegroundSeparator, last_foreground, process_sequence


def _static_frames(count: int, shape=(40, 40), value=50) -> list[np.ndarray]:
    return [np.full(shape, value, dtype=np.uint8) for _ in range(count)]


def _frame_with_square() -> np.ndarray:
    frame = np.full((40, 40), 50, dtype=np.uint8)
    frame[10:20, 10:20] = 255
    return frame


class TestProcessSequence:
    def test_empty(self):
        assert process_sequence([]) == []

    def test_single_frame(self):
        assert process_sequence(_static_frames(1)) == []

    def test_drops_first_frame(self):
        foregrounds = process_sequence(_static_frames(5))
        assert len(foregrounds) == 4
        assert all(fg.shape == (40, 40) for fg in foregrounds)

    def test_first_frame_output_excluded(self):
        rng = np.random.default_rng(3)
        frames = [rng.integers(0, 256, (40, 40), dtype=np.uint8) for _ in range(4)]

        with ForegroundSeparator() as separator:
            expected = [separator.apply(frame)[1] for frame in frames]

        foregrounds = process_sequence(frames)
        assert len(foregrounds) == 3
        for got, want in zip(foregrounds, expected[1:]):
            np.testing.assert_array_equal(got, want)
        assert np.any(expected[0])
        assert not any(np.array_equal(fg, expected[0]) for fg in foregrounds)

    def test_accepts_stacked_array(self):
        frames = np.stack(_static_frames(3))
        foregrounds = process_sequence(frames)
        assert len(foregrounds) == 2
        assert last_foreground(frames).shape == (40, 40)

    def test_mismatched_shapes(self):
        frames = _static_frames(2) + [np.zeros((30, 40), dtype=np.uint8)]
        with pytest.raises(InvalidImageError):
            process_sequence(frames)

    def test_rejects_color_frames(self):
        with pytest.raises(InvalidImageError):
            process_sequence([np.zeros((4, 4, 3), dtype=np.uint8)])

    def test_new_object_is_foreground(self):
        frames = _static_frames(30) + [_frame_with_square()]
        foreground = process_sequence(frames)[-1]

        assert np.all(foreground[10:20, 10:20] == 255)
        outside = foreground.copy()
        outside[10:20, 10:20] = 0
        assert np.count_nonzero(outside) < 0.01 * outside.size

    def test_inputs_untouched(self):
        frames = _static_frames(3)
        process_sequence(frames)
        assert all(np.all(frame == 50) for frame in frames)


class TestForegroundSeparator:
    def test_foreground_follows_mask(self):
        rng = np.random.default_rng(4)
        with ForegroundSeparator() as separator:
            for _ in range(5):
                frame = rng.integers(0, 256, size=(16, 16), dtype=np.uint8)
                mask, foreground = separator.apply(frame)
                assert mask.shape == frame.shape
                np.testing.assert_array_equal(foreground[mask > 0], frame[mask > 0])
                assert not np.any(foreground[mask == 0])

    def test_frame_count(self):
        separator = ForegroundSeparator()
        for frame in _static_frames(3):
            separator.apply(frame)
        assert separator.frame_count == 3

    def test_background_image(self):
        separator = ForegroundSeparator()
        assert separator.background_image() is None
        for frame in _static_frames(3):
            separator.apply(frame)
        assert separator.background_image().shape[:2] == (40, 40)

    def test_closed_session(self):
        with ForegroundSeparator() as separator:
            separator.apply(_static_frames(1)[0])
        assert separator.closed
        with pytest.raises(SessionClosedError):
            separator.apply(_static_frames(1)[0])

    def test_shape_change(self):
        separator = ForegroundSeparator()
        separator.apply(np.zeros((10, 10), dtype=np.uint8))
        with pytest.raises(InvalidImageError):
            separator.apply(np.zeros((10, 12), dtype=np.uint8))

    def test_invalid_config(self):
        with pytest.raises(ValueError):
            ForegroundSeparator(ForegroundConfig(history=0))


class TestLastForeground:
    def test_empty(self):
        assert last_foreground([]) is None

    def test_last_frame(self):
        frames = _static_frames(30) + [_frame_with_square()]
        foreground = last_foreground(frames)
        assert foreground.shape == (40, 40)
        assert np.all(foreground[10:20, 10:20] == 255)
