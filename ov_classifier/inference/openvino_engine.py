import os
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

import numpy as np
import openvino as ov
from loguru import logger

from ov_classifier.config import ClassifierConfig
from ov_classifier.inference.devices import DeviceRegistry
from ov_classifier.inference.errors import (
    InferenceError,
    InferenceStatus,
    LoadStatus,
    ModelCompileError,
    ModelNotLoadedError,
    ModelReadError,
)
from ov_classifier.utils.image import Frame, frame_to_rgba, hwc_to_planar, rgba_to_rgb


@dataclass
class LoadedModel:
    """
    Everything derived from one successful load.

    Ownership runs compiled_model -> infer_request -> input_tensor -> input_view;
    the whole bundle is replaced at once on reload.
    """
    device: str
    compiled_model: Any
    infer_request: Any
    input_tensor: Any
    input_view: np.ndarray   # writable (1, 3, H, W) float32 view into input_tensor
    height: int
    width: int
    num_pixels: int
    num_classes: int


class ClassifierEngine:
    """
    OpenVINO image classifier: device list, model load, RGBA frame -> class index.

    Not thread-safe; callers serialize access (see api.exports).
    """

    def __init__(self, config: Optional[ClassifierConfig] = None, core=None):
        self.config = config or ClassifierConfig()
        self.core = core if core is not None else ov.Core()
        self.registry = DeviceRegistry(self.core, self.config.excluded_device_markers)
        self._loaded: Optional[LoadedModel] = None

    # ------------------------------------------------------------------
    # Devices
    # ------------------------------------------------------------------
    def get_device_count(self) -> int:
        return self.registry.refresh()

    def get_device_name(self, index: int) -> str:
        return self.registry.name(index)

    @property
    def devices(self) -> List[str]:
        return self.registry.devices

    # ------------------------------------------------------------------
    # Model loading
    # ------------------------------------------------------------------
    def load_model(self, model_path: str, device_index: int, input_dims: Sequence[int]) -> LoadStatus:
        """
        Read, reshape and compile an IR model for the chosen device.

        Args:
            model_path: path to the OpenVINO IR (.xml) file
            device_index: index into the most recent device list
            input_dims: [width, height] of the frames that will be sent
        Returns:
            LoadStatus.OK, or LoadStatus.RESHAPE_REJECTED when the model kept
            its native input shape
        Raises:
            DeviceIndexError, ModelReadError, ModelCompileError
            (previously loaded state is untouched on any of these)
        """
        width, height = (int(d) for d in input_dims)
        device = self.registry.name(device_index)
        status = LoadStatus.OK

        self._configure_cache()

        logger.info(f"Loading {model_path} to {device}...")
        try:
            model = self.core.read_model(model_path)
        except Exception as e:
            raise ModelReadError(f"Failed to read model {model_path}: {e}") from e

        try:
            model.reshape([1, self.config.num_channels, height, width])
        except Exception as e:
            logger.debug(f"Keeping native input shape, reshape to {width}x{height} rejected: {e}")
            status = LoadStatus.RESHAPE_REJECTED

        loaded = self._compile(model, device)
        self._loaded = loaded

        logger.info(
            f"Engine Ready on {device}. Input: {loaded.width}x{loaded.height}, "
            f"classes: {loaded.num_classes}"
        )
        return status

    def _configure_cache(self) -> None:
        # Only GPU compilation is slow enough to be worth caching
        gpu = self.config.gpu_cache_device
        if not any(d.startswith(gpu) for d in self.registry.devices):
            return
        # Cache is optional: an unwritable dir only costs recompilation
        try:
            os.makedirs(self.config.cache_dir, exist_ok=True)
            self.core.set_property(gpu, {"CACHE_DIR": self.config.cache_dir})
        except Exception as e:
            logger.debug(f"{gpu} model cache disabled ({self.config.cache_dir}): {e}")
            return
        logger.debug(f"{gpu} model cache: {self.config.cache_dir}")

    def _compile(self, model, device: str) -> LoadedModel:
        try:
            compiled_model = self.core.compile_model(
                model,
                self.config.device_facade,
                {
                    "MULTI_DEVICE_PRIORITIES": device,
                    "PERFORMANCE_HINT": self.config.performance_hint,
                    "INFERENCE_PRECISION_HINT": self.config.inference_precision,
                },
            )

            # Classifier output is [1, C]
            num_classes = int(compiled_model.output(0).get_shape()[1])

            infer_request = compiled_model.create_infer_request()
            input_tensor = infer_request.get_input_tensor(0)
            _, _, height, width = (int(d) for d in input_tensor.shape)
            input_view = input_tensor.data
        except Exception as e:
            raise ModelCompileError(f"Failed to compile model for {device}: {e}") from e

        return LoadedModel(
            device=device,
            compiled_model=compiled_model,
            infer_request=infer_request,
            input_tensor=input_tensor,
            input_view=input_view,
            height=height,
            width=width,
            num_pixels=height * width,
            num_classes=num_classes,
        )

    @property
    def loaded(self) -> Optional[LoadedModel]:
        return self._loaded

    # ------------------------------------------------------------------
    # Inference
    # ------------------------------------------------------------------
    def preprocess(self, frame: Frame) -> np.ndarray:
        """Write an RGBA frame into the input tensor as planar RGB / 255."""
        loaded = self._require_loaded()
        texture = frame_to_rgba(frame, loaded.height, loaded.width)
        rgb = rgba_to_rgb(texture)
        return hwc_to_planar(rgb, out=loaded.input_view)

    def classify(self, frame: Frame) -> int:
        """
        Args: frame - H*W*4 bytes of row-major RGBA matching the loaded input size
        Returns: index of the highest logit (lowest index on ties),
                 or InferenceStatus.NO_CLASSES when the model has no classes
        """
        loaded = self._require_loaded()
        if loaded.num_classes == 0:
            return InferenceStatus.NO_CLASSES

        try:
            self.preprocess(frame)
            loaded.infer_request.infer()
            logits = loaded.infer_request.get_output_tensor().data
            logits = np.asarray(logits).reshape(-1)[:loaded.num_classes]
            return int(np.argmax(logits))
        except Exception as e:
            raise InferenceError(f"Inference failed: {e}") from e

    def _require_loaded(self) -> LoadedModel:
        if self._loaded is None:
            raise ModelNotLoadedError("No model loaded")
        return self._loaded
