"""
Device Sync
===========

Pulls the device list from the vendor cloud into the device registry and
manages the push token registration.
"""

from typing import Any, List, Mapping

from pydantic import ValidationError

from eufy_bridge.events.schema import SUPPORTED_DEVICES, DeviceRecord
from eufy_bridge.interfaces import CloudClient, DeviceStore
from eufy_bridge.logging_utils import get_component_logger

logger = get_component_logger(__name__, "device_sync")


class DeviceSync:
    """
    Synchronizes vendor devices into the registry.

    Args:
        cloud: Vendor cloud client (CloudClient protocol)
        registry: Device registry (DeviceStore protocol)
    """

    def __init__(self, cloud: CloudClient, registry: DeviceStore):
        self.cloud = cloud
        self.registry = registry

    async def refresh_devices(self) -> List[DeviceRecord]:
        """
        Upsert every device reported by the cloud.

        Unsupported models are stored anyway and reported with a warning.
        Entries without a serial cannot be keyed and are skipped.

        Returns:
            Records stored during this refresh
        """
        devices = await self.cloud.list_devices()
        logger.debug(f"Device list: {devices}")

        stored = []
        for raw in devices:
            if not _serial_of(raw):
                logger.warning(
                    f"Skipping device without a serial: {raw}",
                    extra={"event": "device_skipped"},
                )
                continue
            try:
                record = DeviceRecord.model_validate(raw)
            except ValidationError as e:
                logger.warning(
                    f"Skipping invalid device {_serial_of(raw)}: {e}",
                    extra={"event": "device_skipped"},
                )
                continue

            await self.registry.create_or_update_device(record)
            stored.append(record)

            logger.info(
                f"Stored device: {record.name} ({record.serial} - type: {record.model})",
                extra={"event": "device_stored", "device_sn": record.serial},
            )

            if record.model not in SUPPORTED_DEVICES:
                logger.warning(
                    f"DEVICE {record.name} NOT SUPPORTED (model {record.model}), only motion events will be announced",
                    extra={"event": "device_unsupported", "device_model": record.model},
                )

        return stored

    async def register_push_token(self, token: str) -> None:
        response = await self.cloud.register_push_token(token)
        logger.info(f"Registered Push Token: {response}")

    async def check_push_token(self) -> None:
        response = await self.cloud.push_token_check()
        logger.info(f"Checked Push Token: {response}")


def _serial_of(raw: Any) -> Any:
    if isinstance(raw, Mapping):
        return raw.get("device_sn") or raw.get("serial")
    return None
