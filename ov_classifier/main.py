import argparse

import uvicorn
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import BaseModel, ValidationError

from ov_classifier.api import exports
from ov_classifier.api.models import (
    DeviceCountRequest,
    DeviceCountResponse,
    DeviceList,
    DeviceNameRequest,
    DeviceNameResponse,
    ErrorMessage,
    InferenceRequest,
    InferenceResponse,
    LoadModelRequest,
    LoadModelResponse,
    decode_host_message,
    encode_msgpack,
)
from ov_classifier.inference.errors import DeviceIndexError

# =============================================================================
# FastAPI Application
# =============================================================================
app = FastAPI(title="OpenVINO Texture Classifier", version="1.0")
app.add_middleware(CORSMiddleware, allow_origins=["*"])


def handle_message(msg) -> BaseModel:
    """Dispatch one decoded host request to the export surface."""
    if isinstance(msg, DeviceCountRequest):
        return DeviceCountResponse(count=exports.get_device_count())

    if isinstance(msg, DeviceNameRequest):
        try:
            name = exports.get_device_name(msg.index)
        except DeviceIndexError as e:
            return ErrorMessage(message=str(e))
        return DeviceNameResponse(index=msg.index, name=name)

    if isinstance(msg, LoadModelRequest):
        status = exports.load_model(msg.modelPath, msg.deviceIndex, msg.inputDims)
        return LoadModelResponse(status=status)

    if isinstance(msg, InferenceRequest):
        return InferenceResponse(classIndex=exports.perform_inference(msg.frame))

    return ErrorMessage(message=f"Unsupported message: {type(msg).__name__}")


@app.get("/api/devices")
def list_devices() -> DeviceList:
    count = exports.get_device_count()
    return DeviceList(devices=[exports.get_device_name(i) for i in range(count)])


@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    await ws.accept()
    logger.info("Host connected")

    try:
        while True:
            data = await ws.receive_bytes()

            try:
                msg = decode_host_message(data)
            except (ValidationError, ValueError) as e:
                await ws.send_bytes(encode_msgpack(ErrorMessage(message=f"Invalid message: {e}")))
                continue

            await ws.send_bytes(encode_msgpack(handle_message(msg)))

    except WebSocketDisconnect:
        logger.info("Host disconnected")


def run():
    parser = argparse.ArgumentParser(description="Serve the texture classifier to an external host")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    uvicorn.run("ov_classifier.main:app", host=args.host, port=args.port, reload=False)


if __name__ == "__main__":
    run()
