"""
Pydantic Schemas for WebSocket API Communication

Host -> Server: one request per export call, tagged by `type`
Server -> Host: the matching response, or ErrorMessage
"""
from typing import Annotated, List, Literal, Union
from pydantic import BaseModel, Field, TypeAdapter

# Re-export codec utilities
from ov_classifier.utils.codec import decode_msgpack, encode_msgpack


# =============================================================================
# Host -> Server Messages
# =============================================================================
class DeviceCountRequest(BaseModel):
    type: Literal["device_count"]


class DeviceNameRequest(BaseModel):
    type: Literal["device_name"]
    index: int


class LoadModelRequest(BaseModel):
    """inputDims is [width, height] of the frames that will follow."""
    type: Literal["load_model"]
    modelPath: str
    deviceIndex: int
    inputDims: List[int] = Field(min_length=2, max_length=2)


class InferenceRequest(BaseModel):
    """Raw RGBA texture bytes, row-major, height * width * 4."""
    type: Literal["inference"]
    frame: bytes


HostMessage = Annotated[
    Union[DeviceCountRequest, DeviceNameRequest, LoadModelRequest, InferenceRequest],
    Field(discriminator="type"),
]
host_message_adapter = TypeAdapter(HostMessage)


def decode_host_message(data: bytes):
    return decode_msgpack(data, host_message_adapter)


# =============================================================================
# Server -> Host Messages
# =============================================================================
class DeviceCountResponse(BaseModel):
    type: Literal["device_count"] = "device_count"
    count: int


class DeviceNameResponse(BaseModel):
    type: Literal["device_name"] = "device_name"
    index: int
    name: str


class LoadModelResponse(BaseModel):
    type: Literal["load_model"] = "load_model"
    status: int


class InferenceResponse(BaseModel):
    type: Literal["inference"] = "inference"
    classIndex: int


class ErrorMessage(BaseModel):
    type: Literal["error"] = "error"
    message: str


class DeviceList(BaseModel):
    devices: List[str]


__all__ = [
    "DeviceCountRequest",
    "DeviceNameRequest",
    "LoadModelRequest",
    "InferenceRequest",
    "HostMessage",
    "decode_host_message",
    "DeviceCountResponse",
    "DeviceNameResponse",
    "LoadModelResponse",
    "InferenceResponse",
    "ErrorMessage",
    "DeviceList",
    "decode_msgpack",
    "encode_msgpack",
]
