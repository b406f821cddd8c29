import numpy as np
import pytest

GEL_BOX = (60, 40, 240, 160)  # left, top, right (exclusive), bottom (exclusive)


@pytest.fixture
def gel_image() -> np.ndarray:
    """Bright gel rectangle on a dark 300x200 background."""
    img = np.full((200, 300), 20, dtype=np.uint8)
    left, top, right, bottom = GEL_BOX
    img[top:bottom, left:right] = 200
    return img


@pytest.fixture
def frame_image() -> np.ndarray:
    """Hollow rectangular outline on a 21x21 canvas."""
    img = np.zeros((21, 21), dtype=np.uint8)
    img[4, 3:18] = 255
    img[16, 3:18] = 255
    img[4:17, 3] = 255
    img[4:17, 17] = 255
    return img
