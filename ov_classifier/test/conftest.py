"""Test configuration and fixtures."""

from typing import Callable, Dict, List, Optional, Sequence

import numpy as np
import pytest

from ov_classifier.api import exports
from ov_classifier.config import ClassifierConfig
from ov_classifier.inference.openvino_engine import ClassifierEngine


# =============================================================================
# Fake OpenVINO runtime
# =============================================================================
class FakeTensor:
    def __init__(self, shape: Sequence[int], data: Optional[np.ndarray] = None):
        self.shape = list(shape)
        self.data = np.zeros(self.shape, dtype=np.float32) if data is None else data


class FakePort:
    def __init__(self, shape: Sequence[int]):
        self._shape = list(shape)

    def get_shape(self) -> List[int]:
        return list(self._shape)


class FakeModel:
    """Parsed model; `forward` maps the (1, 3, H, W) input to logits."""

    def __init__(self, forward: Callable, num_classes: int,
                 input_shape=(1, 3, 224, 224), fixed_shape: bool = False):
        self.forward = forward
        self.num_classes = num_classes
        self.input_shape = tuple(input_shape)
        self.fixed_shape = fixed_shape

    def reshape(self, shape):
        shape = tuple(shape)
        if self.fixed_shape and shape != self.input_shape:
            raise RuntimeError(f"Cannot reshape {self.input_shape} to {shape}")
        self.input_shape = shape


class FakeInferRequest:
    def __init__(self, compiled: "FakeCompiledModel"):
        self.compiled = compiled
        self.infer_calls = 0
        self._input = FakeTensor(compiled.input_shape)
        self._output = FakeTensor([1, compiled.num_classes])

    def get_input_tensor(self, index: int = 0) -> FakeTensor:
        return self._input

    def infer(self):
        self.infer_calls += 1
        logits = np.asarray(self.compiled.forward(self._input.data), dtype=np.float32)
        self._output = FakeTensor([1, logits.size], logits.reshape(1, -1))

    def get_output_tensor(self, index: int = 0) -> FakeTensor:
        return self._output


class FakeCompiledModel:
    def __init__(self, model: FakeModel, device_name: str, config: Dict[str, str]):
        self.forward = model.forward
        self.num_classes = model.num_classes
        self.input_shape = model.input_shape
        self.device_name = device_name
        self.config = dict(config)

    def output(self, index: int = 0) -> FakePort:
        return FakePort([1, self.num_classes])

    def create_infer_request(self) -> FakeInferRequest:
        return FakeInferRequest(self)


class FakeCore:
    """Stands in for openvino.Core."""

    def __init__(self, devices: Sequence[str] = ("CPU", "GNA", "GPU.0")):
        self.available_devices = list(devices)
        self.properties: Dict[str, Dict[str, str]] = {}
        self.compile_calls: List[tuple] = []
        self.read_calls: List[str] = []
        self.fail_compile = False
        self._models: Dict[str, dict] = {}

    def add_model(self, path: str, forward: Callable, num_classes: int, **kwargs) -> str:
        self._models[path] = dict(forward=forward, num_classes=num_classes, **kwargs)
        return path

    def read_model(self, path: str) -> FakeModel:
        self.read_calls.append(path)
        if path not in self._models:
            raise RuntimeError(f"Model file {path} cannot be opened!")
        return FakeModel(**self._models[path])

    def set_property(self, device: str, properties: Dict[str, str]):
        self.properties.setdefault(device, {}).update(properties)

    def compile_model(self, model: FakeModel, device_name: str, config: Dict[str, str]):
        self.compile_calls.append((device_name, dict(config)))
        if self.fail_compile:
            raise RuntimeError("Compilation failed")
        return FakeCompiledModel(model, device_name, config)


def constant_logits(values):
    """Forward function ignoring its input."""
    logits = np.asarray(values, dtype=np.float32)
    return lambda x: logits


def channel_means(x: np.ndarray) -> np.ndarray:
    """Forward function: one logit per colour channel (its mean)."""
    return x[0].mean(axis=(1, 2))


def rgba_frame(height: int, width: int, rgb=(0, 0, 0), alpha=255) -> bytes:
    frame = np.empty((height, width, 4), dtype=np.uint8)
    frame[..., :3] = rgb
    frame[..., 3] = alpha
    return frame.tobytes()


# =============================================================================
# Fixtures
# =============================================================================
@pytest.fixture
def fake_core() -> FakeCore:
    core = FakeCore()
    core.add_model("two_class.xml", constant_logits([1.0, 0.0]), 2)
    core.add_model("tie.xml", constant_logits([0.5, 0.5, 0.5]), 3)
    core.add_model("rgb.xml", channel_means, 3)
    core.add_model("fixed_224.xml", channel_means, 3,
                   input_shape=(1, 3, 224, 224), fixed_shape=True)
    core.add_model("no_classes.xml", constant_logits([]), 0)
    return core


@pytest.fixture
def config(tmp_path) -> ClassifierConfig:
    return ClassifierConfig(cache_dir=str(tmp_path / "cache"))


@pytest.fixture
def engine(config: ClassifierConfig, fake_core: FakeCore) -> ClassifierEngine:
    engine = ClassifierEngine(config, core=fake_core)
    engine.get_device_count()
    return engine


@pytest.fixture
def host_engine(config: ClassifierConfig, fake_core: FakeCore) -> ClassifierEngine:
    """Process-wide engine behind the export surface, backed by the fake runtime."""
    return exports.configure(config, core=fake_core)


@pytest.fixture(autouse=True)
def reset_exports():
    yield
    exports._engine = None
