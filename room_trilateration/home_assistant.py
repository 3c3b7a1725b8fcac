"""
Publishes estimated positions as Home Assistant sensor states.
"""

import logging
from typing import Optional

import requests

from .errors import ServiceError
from .room_assistant import TrackedDevice
from .trilateration import PositionEstimate

logger = logging.getLogger(__name__)


def sensor_name(device_id: str) -> str:
    """Home Assistant sensor object id for a device."""
    return f"{device_id.replace('-', '_')}_position"


def sensor_state(estimate: PositionEstimate) -> str:
    return f"{estimate.x},{estimate.y}"


def build_payload(device: TrackedDevice, estimate: PositionEstimate) -> dict:
    return {
        'friendly_name': device.name,
        'state': sensor_state(estimate),
        'attributes': {
            'x': estimate.x,
            'y': estimate.y,
            'error': estimate.standard_error,
        },
    }


class HomeAssistantPublisher:
    """Creates or updates ``sensor.<device>_position`` entities through the REST API."""

    def __init__(self, api_url: str, token: str, session: Optional[requests.Session] = None, timeout: float = 10.0):
        self.api_url = api_url.rstrip('/')
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    def publish(self, device: TrackedDevice, estimate: PositionEstimate) -> str:
        """
        Publish an estimate for a device.

        Returns:
            The sensor name that was written

        Raises:
            ServiceError: If the request fails
        """
        name = sensor_name(device.id)
        url = f"{self.api_url}/states/sensor.{name}"
        try:
            response = self.session.post(
                url,
                json=build_payload(device, estimate),
                headers={
                    'Authorization': f'Bearer {self.token}',
                    'Content-Type': 'application/json',
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise ServiceError(f"Could not publish sensor.{name}: {e}", device_id=device.id) from e

        logger.debug("Published sensor.%s = %s", name, sensor_state(estimate))
        return name
