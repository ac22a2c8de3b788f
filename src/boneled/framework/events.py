"""Device lifecycle events for the observer pattern."""

from enum import Enum


class DeviceEvent(Enum):
    """Events from live devices."""

    DEVICE_DISCOVERED = "device_discovered"    # New record created for a device
    DEVICE_PROVISIONED = "device_provisioned"  # Existing record reattached to a device
    STATE_CHANGED = "state_changed"            # A transition completed
