import argparse
import time
from typing import Any, Dict

import numpy as np
from tqdm import tqdm

from ov_classifier.api import exports
from ov_classifier.inference.errors import LoadStatus


def run_benchmark(
    model_path: str,
    device_index: int = 0,
    width: int = 224,
    height: int = 224,
    warmup: int = 10,
    iterations: int = 100,
    seed: int = 0,
) -> Dict[str, Any]:
    """Load a model through the export surface and time perform_inference."""
    if iterations < 1:
        raise ValueError(f"iterations must be >= 1, got {iterations}")

    count = exports.get_device_count()
    device = exports.get_device_name(device_index)
    print(f"[INFO] {count} device(s), benchmarking on {device}")

    status = exports.load_model(model_path, device_index, [width, height])
    if status not in (LoadStatus.OK, LoadStatus.RESHAPE_REJECTED):
        raise RuntimeError(f"Failed to load {model_path}: status {status}")

    # Frames must match the size the model actually accepts
    loaded = exports.get_engine().loaded
    if status == LoadStatus.RESHAPE_REJECTED:
        print(f"[WARN] Reshape rejected, using native {loaded.width}x{loaded.height}")

    # random garbage frame (model input size)
    rng = np.random.default_rng(seed)
    dummy = rng.integers(0, 256, (loaded.height, loaded.width, 4), dtype=np.uint8).tobytes()

    print("Warming up...")
    for _ in range(warmup):
        exports.perform_inference(dummy)

    print("Benchmarking...")
    times = []
    failures = 0

    for _ in tqdm(range(iterations)):
        t0 = time.perf_counter()
        result = exports.perform_inference(dummy)
        t1 = time.perf_counter()
        times.append((t1 - t0) * 1000.0)  # ms
        if result < 0:
            failures += 1

    avg = float(np.mean(times))
    p95 = float(np.percentile(times, 95))

    return {
        "device": device,
        "avg_ms": avg,
        "p95_ms": p95,
        "fps": 1000.0 / avg if avg > 0 else 0.0,
        "failures": failures,
    }


def main():
    parser = argparse.ArgumentParser(description="Texture classifier latency benchmark")
    parser.add_argument("model_path")
    parser.add_argument("--device", type=int, default=0, help="index into the device list")
    parser.add_argument("--width", type=int, default=224)
    parser.add_argument("--height", type=int, default=224)
    parser.add_argument("--warmup", type=int, default=10)
    parser.add_argument("--iterations", type=int, default=100)
    args = parser.parse_args()

    results = run_benchmark(
        args.model_path,
        device_index=args.device,
        width=args.width,
        height=args.height,
        warmup=args.warmup,
        iterations=args.iterations,
    )

    print(f"\nResults on {results['device']}:")
    print(f"  Avg latency : {results['avg_ms']:.2f} ms")
    print(f"  P95 latency : {results['p95_ms']:.2f} ms")
    print(f"  FPS (avg)   : {results['fps']:.2f}")
    if results["failures"]:
        print(f"  Failures    : {results['failures']}")


if __name__ == "__main__":
    main()
