"""
OpenVINO texture classifier.

Host runtime hands RGBA texture bytes -> argmax class index.
"""
from ov_classifier.api.exports import (
    configure,
    get_device_count,
    get_device_name,
    load_model,
    perform_inference,
)

__all__ = [
    "configure",
    "get_device_count",
    "get_device_name",
    "load_model",
    "perform_inference",
]
