"""
Device Registry
===============

Key-value store of known devices, keyed by serial, optionally persisted to a
JSON file.
"""

from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import TypeAdapter

from eufy_bridge.events.schema import DeviceRecord
from eufy_bridge.logging_utils import get_component_logger

logger = get_component_logger(__name__, "registry")

_RECORDS = TypeAdapter(List[DeviceRecord])


class DeviceRegistry:
    """
    Device registry with optional JSON file persistence.

    Records are kept in insertion order. Devices are never deleted: a device
    removed from the vendor account stays known until the file is edited.

    Args:
        path: JSON file to load from and write to (None = in-memory only)

    Example:
        >>> registry = DeviceRegistry("devices.json")
        >>> registry.load()
        >>> await registry.create_or_update_device(record)
        >>> devices = await registry.get_devices()
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self._devices: Dict[str, DeviceRecord] = {}
        self._path = Path(path) if path else None

    def load(self) -> None:
        """
        Load devices from the backing file, if it exists.

        Raises:
            pydantic.ValidationError: If the file is not a list of devices
        """
        if self._path is None or not self._path.exists():
            return

        records = _RECORDS.validate_json(self._path.read_bytes())
        self._devices = {record.serial: record for record in records}
        logger.info(f"Loaded {len(self._devices)} devices from {self._path}")

    async def create_or_update_device(self, record: DeviceRecord) -> DeviceRecord:
        """
        Insert or replace a device.

        Args:
            record: Device to store

        Returns:
            The stored record
        """
        self._devices[record.serial] = record
        self._save()
        return record

    async def get_devices(self) -> List[DeviceRecord]:
        """Get all devices in insertion order"""
        return list(self._devices.values())

    def get(self, serial: str) -> Optional[DeviceRecord]:
        """Get a device by serial, None if unknown"""
        return self._devices.get(serial)

    def size(self) -> int:
        """Get number of known devices"""
        return len(self._devices)

    def _save(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_bytes(
            _RECORDS.dump_json(list(self._devices.values()), by_alias=True, indent=2)
        )
