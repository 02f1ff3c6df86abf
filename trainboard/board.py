"""Detection of the board's hardware revision."""

from __future__ import annotations

import logging
from enum import Enum

_log = logging.getLogger(__name__)

# Exclusive millivolt ranges read on the hardware version pin.
_VERSION_RANGES_MV = (
    (1550, 1750),
    (910, 1110),
    (2080, 2280),
)


class HardwareVersion(Enum):
    """Known hardware revisions."""

    V1 = "v1"
    V1_1 = "v1.1"
    V1_2 = "v1.2"
    UNKNOWN = "unknown"


_VERSIONS_BY_RANGE = dict(
    zip(_VERSION_RANGES_MV, (HardwareVersion.V1, HardwareVersion.V1_1, HardwareVersion.V1_2))
)


def hardware_version_from_millivolts(millivolts: int) -> HardwareVersion:
    """The hardware revision matching a reading of the version pin."""
    for (low, high), version in _VERSIONS_BY_RANGE.items():
        if low < millivolts < high:
            return version
    return HardwareVersion.UNKNOWN


class BoardConfig:
    """The hardware revision of the board, once it has been read."""

    def __init__(self) -> None:
        self.hw_version = HardwareVersion.UNKNOWN
        self._hw_version_string = ""

    def read_hw_version(self, millivolts: int) -> HardwareVersion:
        """Work out the revision from a version pin reading and remember it."""
        self.hw_version = hardware_version_from_millivolts(millivolts)
        # An unknown revision leaves the previous name in place.
        if self.hw_version is not HardwareVersion.UNKNOWN:
            self._hw_version_string = self.hw_version.value
        _log.info("HW version detected: %s", self._hw_version_string)
        return self.hw_version

    def hw_version_string(self) -> str:
        """The revision's name, such as "v1.1"; empty until a known one was read."""
        return self._hw_version_string