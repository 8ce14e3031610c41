import cv2
import numpy as np
from typing import Optional, Union

Frame = Union[bytes, bytearray, memoryview, np.ndarray]


def frame_to_rgba(frame: Frame, height: int, width: int) -> np.ndarray:
    """
    Wrap a raw RGBA texture buffer as an (H, W, 4) uint8 image.
    Only the first H*W*4 bytes are read; a shorter buffer raises ValueError.
    """
    if isinstance(frame, np.ndarray):
        if frame.dtype != np.uint8:
            raise ValueError(f"Frame must be uint8 RGBA, got {frame.dtype}")
        flat = np.ascontiguousarray(frame).reshape(-1)
    else:
        flat = np.frombuffer(frame, dtype=np.uint8)

    n_bytes = height * width * 4
    if flat.size < n_bytes:
        raise ValueError(f"Frame holds {flat.size} bytes, expected {n_bytes}")

    return flat[:n_bytes].reshape(height, width, 4)


def rgba_to_rgb(texture: np.ndarray) -> np.ndarray:
    """Drop the alpha channel -> interleaved (H, W, 3) uint8."""
    return cv2.cvtColor(texture, cv2.COLOR_RGBA2RGB)


def hwc_to_planar(rgb: np.ndarray, out: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Interleaved HWC uint8 -> planar CHW float32 in [0, 1].

    Args:
        rgb: (H, W, 3) uint8 image
        out: optional destination holding 3*H*W float32 values
             (e.g. the (1, 3, H, W) input tensor view); written in place
    Returns:
        The planar (3, H, W) values, or `out` when given
    """
    # out[c*H*W + p] = rgb[p*3 + c] / 255
    planar = np.transpose(rgb, (2, 0, 1)).astype(np.float32) / np.float32(255.0)

    if out is None:
        return planar

    np.copyto(out, planar.reshape(out.shape))
    return out
