from typing import List, Sequence

from loguru import logger

from ov_classifier.inference.errors import DeviceIndexError


class DeviceRegistry:
    """
    Ordered list of usable compute devices reported by the runtime.

    Devices matching an excluded marker (GNA by default) are dropped here,
    so the indices handed to the host stay contiguous.
    """

    def __init__(self, core, excluded_markers: Sequence[str] = ("GNA",)):
        self.core = core
        self.excluded_markers = tuple(excluded_markers)
        self._devices: List[str] = []

    def refresh(self) -> int:
        """Rebuild the list from the runtime and return its length."""
        devices = []
        for device in self.core.available_devices:
            if not device:
                continue
            if any(marker in device for marker in self.excluded_markers):
                logger.debug(f"Skipping device {device}")
                continue
            devices.append(device)

        self._devices = devices
        logger.debug(f"Available devices: {devices}")
        return len(devices)

    def name(self, index: int) -> str:
        if not 0 <= index < len(self._devices):
            raise DeviceIndexError(
                f"Device index {index} out of range (0..{len(self._devices) - 1})"
            )
        return self._devices[index]

    @property
    def devices(self) -> List[str]:
        return list(self._devices)

    def __len__(self) -> int:
        return len(self._devices)
