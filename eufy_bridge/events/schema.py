"""
Event Schema for Eufy Bridge
=============================

Vendor codes, device models and the pydantic models that flow between the
notification normalizer, the dispatcher and the MQTT publisher.
"""

from enum import Enum, IntEnum
from typing import Any, Dict, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NotificationType(IntEnum):
    """Vendor push-notification event codes"""

    CAM_SOMEONE_SPOTTED = 3101
    DOORBELL_PRESSED = 3102
    DOORBELL_SOMEONE_SPOTTED = 3103
    CRYING_DETECTED = 3104
    CAM_2_SOMEONE_SPOTTED = 3105
    CAM_2C_SOMEONE_SPOTTED = 3106
    FLOODLIGHT_MOTION_DETECTED = 3107
    MOTION_SENSOR_TRIGGERED = 3201


class EventKind(str, Enum):
    """Event families a notification can be routed to"""

    DOORBELL = "doorbell"
    MOTION = "motion"
    CRYING = "crying"
    UNRECOGNIZED = "unrecognized"


# Payload published to <base>/state. Doorbell presses reuse the motion literal
# so existing Home Assistant entities keep matching payload_on.
STATE_PAYLOADS: Dict[EventKind, str] = {
    EventKind.DOORBELL: "motion",
    EventKind.MOTION: "motion",
    EventKind.CRYING: "crying",
}


class DeviceType(str, Enum):
    """Vendor device models known to the bridge"""

    HOMEBASE = "T8010"
    EUFYCAM = "T8111"
    EUFYCAM_E = "T8112"
    EUFYCAM_2C = "T8113"
    EUFYCAM_2 = "T8114"
    DOORBELL_2K = "T8200"
    DOORBELL_2K_BATTERY = "T8210"
    DOORBELL_1080P_BATTERY = "T8222"
    INDOOR_CAM_2K = "T8400"
    INDOOR_CAM_PAN_TILT = "T8410"
    FLOODLIGHT = "T8420"
    MOTION_SENSOR = "T8910"


SUPPORTED_DEVICES: FrozenSet[str] = frozenset(device.value for device in DeviceType)

DOORBELLS: FrozenSet[str] = frozenset(
    {
        DeviceType.DOORBELL_2K.value,
        DeviceType.DOORBELL_2K_BATTERY.value,
        DeviceType.DOORBELL_1080P_BATTERY.value,
    }
)

INDOOR_CAMERAS: FrozenSet[str] = frozenset(
    {DeviceType.INDOOR_CAM_2K.value, DeviceType.INDOOR_CAM_PAN_TILT.value}
)

# Devices that never produce a snapshot
NO_THUMBNAIL: FrozenSet[str] = frozenset(
    {DeviceType.HOMEBASE.value, DeviceType.MOTION_SENSOR.value}
)


class DeviceRecord(BaseModel):
    """Device as stored in the registry"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    serial: str = Field(alias="device_sn", min_length=1, description="Device serial number")
    name: str = Field(default="", alias="device_name", description="User-facing device name")
    model: Optional[str] = Field(
        default=None, alias="device_model", description="Vendor model code (e.g. T8210)"
    )

    @field_validator("name", mode="before")
    @classmethod
    def _name_or_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def supported(self) -> bool:
        return self.model in SUPPORTED_DEVICES


class EventAttributes(BaseModel):
    """Attributes published next to each state change"""

    event_time: Optional[Any] = Field(default=None, description="Vendor event timestamp")
    thumbnail: Optional[str] = Field(default=None, description="Snapshot URL")

    def to_json(self) -> str:
        """Serialize without the fields the notification did not carry"""
        return self.model_dump_json(exclude_none=True)


class NormalizedEvent(BaseModel):
    """Canonical view of a vendor push notification"""

    type: int = Field(default=0, description="Vendor event code (0 = unresolved)")
    kind: EventKind = Field(default=EventKind.UNRECOGNIZED, description="Routed event family")
    device_serial: Optional[str] = Field(default=None, description="Serial of the emitting device")
    attributes: EventAttributes = Field(default_factory=EventAttributes)


class DiscoveryConfig(BaseModel):
    """Home Assistant MQTT discovery announcement"""

    topic: str = Field(description="Discovery config topic")
    message: Dict[str, Any] = Field(description="Discovery payload (serialized as JSON)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "topic": "homeassistant/binary_sensor/eufy_T8010P23201/motion/config",
                "message": {
                    "name": "Front Door motion",
                    "device_class": "motion",
                    "state_topic": "eufy/T8010P23201/motion/state",
                    "json_attributes_topic": "eufy/T8010P23201/motion/attributes",
                    "payload_on": "motion",
                    "off_delay": 5,
                },
            }
        }
    )
