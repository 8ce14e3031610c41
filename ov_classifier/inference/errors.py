from enum import IntEnum


class LoadStatus(IntEnum):
    """Codes returned by load_model across the export surface."""
    OK = 0
    MODEL_UNREADABLE = 1
    RESHAPE_REJECTED = 2   # still usable at the model's native shape
    COMPILE_FAILED = 3
    INVALID_DEVICE = 4


class InferenceStatus(IntEnum):
    """Negative codes returned by perform_inference."""
    NO_CLASSES = -1
    FAILED = -2


class ClassifierError(RuntimeError):
    """Base error for the classifier engine."""
    status: int = InferenceStatus.FAILED


class ModelReadError(ClassifierError):
    status = LoadStatus.MODEL_UNREADABLE


class ModelCompileError(ClassifierError):
    status = LoadStatus.COMPILE_FAILED


class DeviceIndexError(ClassifierError, IndexError):
    status = LoadStatus.INVALID_DEVICE


class ModelNotLoadedError(ClassifierError):
    status = InferenceStatus.FAILED


class InferenceError(ClassifierError):
    status = InferenceStatus.FAILED
