import cv2
import numpy as np


def solid(width, height, color, dtype=np.uint8):
    """(H, W, C) array filled with one color."""
    arr = np.empty((height, width, len(color)), dtype=dtype)
    arr[:, :] = color
    return arr


def encode_png(rgb: np.ndarray) -> bytes:
    """Encode an RGB(A) or single-channel array as PNG bytes."""
    if rgb.ndim == 3 and rgb.shape[2] == 3:
        rgb = cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)
    elif rgb.ndim == 3 and rgb.shape[2] == 4:
        rgb = cv2.cvtColor(rgb, cv2.COLOR_RGBA2BGRA)
    ok, buf = cv2.imencode(".png", rgb)
    assert ok
    return buf.tobytes()
