"""
Stable host-facing calls.

Four operations, flat integer results, nothing raised across the boundary
except an out-of-range device name lookup:

    get_device_count()                       -> int
    get_device_name(index)                   -> str
    load_model(model_path, index, [w, h])    -> 0 ok | 1 unreadable | 2 reshape rejected
                                                | 3 compile failed | 4 bad device index
    perform_inference(frame)                 -> class index | -1 no classes | -2 error

Call order: enumerate -> load -> perform (many times). All calls go through
one process-wide engine and are serialized by a lock.
"""
import threading
from typing import Optional, Sequence

from loguru import logger

from ov_classifier.config import ClassifierConfig
from ov_classifier.inference.errors import ClassifierError, InferenceStatus, LoadStatus
from ov_classifier.inference.openvino_engine import ClassifierEngine
from ov_classifier.utils.image import Frame

# Module-level instance
_engine: Optional[ClassifierEngine] = None
_lock = threading.RLock()


def configure(config: Optional[ClassifierConfig] = None, core=None) -> ClassifierEngine:
    """Replace the process-wide engine (drops any loaded model)."""
    global _engine
    with _lock:
        _engine = ClassifierEngine(config, core=core)
        return _engine


def get_engine() -> ClassifierEngine:
    """Get or create the process-wide engine."""
    global _engine
    with _lock:
        if _engine is None:
            _engine = ClassifierEngine()
        return _engine


def get_device_count() -> int:
    with _lock:
        return get_engine().get_device_count()


def get_device_name(index: int) -> str:
    """Raises DeviceIndexError (an IndexError) outside the last enumeration."""
    with _lock:
        return get_engine().get_device_name(index)


def load_model(model_path: str, device_index: int, input_dims: Sequence[int]) -> int:
    with _lock:
        try:
            return int(get_engine().load_model(model_path, device_index, input_dims))
        except ClassifierError as e:
            logger.debug(f"load_model -> {int(e.status)}: {e}")
            return int(e.status)


def perform_inference(frame: Frame) -> int:
    with _lock:
        try:
            return int(get_engine().classify(frame))
        except ClassifierError as e:
            logger.debug(f"perform_inference -> {int(InferenceStatus.FAILED)}: {e}")
            return int(InferenceStatus.FAILED)


__all__ = [
    "LoadStatus",
    "InferenceStatus",
    "configure",
    "get_engine",
    "get_device_count",
    "get_device_name",
    "load_model",
    "perform_inference",
]
