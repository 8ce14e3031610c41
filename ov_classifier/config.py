from typing import Tuple
from pydantic import BaseModel, ConfigDict


class ClassifierConfig(BaseModel):
    """Runtime knobs for the classifier engine."""
    model_config = ConfigDict(frozen=True)

    # Compiled-model cache for GPU plugins (relative to the working dir)
    cache_dir: str = "cache"
    gpu_cache_device: str = "GPU"

    # Devices whose name contains any of these are never listed
    excluded_device_markers: Tuple[str, ...] = ("GNA",)

    # Multi-device facade + compile hints
    device_facade: str = "AUTO"
    performance_hint: str = "LATENCY"
    inference_precision: str = "f32"

    num_channels: int = 3
