"""Device registry, model loading and inference on the OpenVINO runtime."""

from .devices import DeviceRegistry
from .errors import (
    ClassifierError,
    DeviceIndexError,
    InferenceError,
    InferenceStatus,
    LoadStatus,
    ModelCompileError,
    ModelNotLoadedError,
    ModelReadError,
)
from .openvino_engine import ClassifierEngine, LoadedModel

__all__ = [
    "ClassifierEngine",
    "LoadedModel",
    "DeviceRegistry",
    "LoadStatus",
    "InferenceStatus",
    "ClassifierError",
    "DeviceIndexError",
    "InferenceError",
    "ModelCompileError",
    "ModelNotLoadedError",
    "ModelReadError",
]
