"""
Msgpack Codec Utilities for WebSocket Communication
"""
from typing import Any, Type, TypeVar, Union
from pydantic import BaseModel, TypeAdapter
import msgpack

T = TypeVar("T", bound=BaseModel)


def decode_msgpack(data: bytes, model: Union[Type[T], TypeAdapter]) -> Any:
    """Decode msgpack bytes into a Pydantic model (or a TypeAdapter'd union)."""
    raw = msgpack.unpackb(data, raw=False)
    if isinstance(model, TypeAdapter):
        return model.validate_python(raw)
    return model.model_validate(raw)


def encode_msgpack(model: BaseModel) -> bytes:
    """Encode a Pydantic model into msgpack bytes."""
    data = msgpack.packb(model.model_dump(), use_bin_type=True)
    assert isinstance(data, (bytes, bytearray))
    return bytes(data)
