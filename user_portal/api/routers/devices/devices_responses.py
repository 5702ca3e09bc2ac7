"""
Device response builders.

Dependencies: user_portal.models.device
System role: Device response shaping
"""

from typing import Any

from user_portal.models.device import DeviceResponse


def build_device_response(device: dict[str, Any]) -> DeviceResponse:
    return DeviceResponse(**device)


def build_device_list_response(devices: list[dict[str, Any]]) -> dict[str, Any]:
    """Wrap a device list with its count."""
    return {
        "devices": [build_device_response(d) for d in devices],
        "total": len(devices),
    }
