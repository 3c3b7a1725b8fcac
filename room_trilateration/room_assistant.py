"""
Client for the room-assistant entities API.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from urllib.parse import urljoin

import requests

from .errors import ServiceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrackedDevice:
    """A device reported by room-assistant with its distance to each anchor."""

    id: str
    name: str
    distances: Dict[str, float] = field(default_factory=dict)


def parse_entity(entity: dict) -> Optional[TrackedDevice]:
    """
    Convert a room-assistant entity into a tracked device.

    Returns None for entities without distances and for devices that are not home.
    """
    raw_distances = entity.get("distances")
    if not raw_distances or entity.get("state") == "not_home":
        return None

    distances = {}
    for anchor, reading in raw_distances.items():
        value = reading.get("distance") if isinstance(reading, dict) else reading
        if value is None:
            continue
        distances[anchor] = value

    device_id = str(entity["id"])
    return TrackedDevice(id=device_id, name=entity.get("name") or device_id, distances=distances)


class RoomAssistantClient:
    """Fetches tracked devices from a room-assistant instance."""

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: float = 10.0):
        self.base_url = base_url
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def entities_url(self) -> str:
        return urljoin(self.base_url, "/entities")

    def fetch_devices(self) -> List[TrackedDevice]:
        """
        Get all devices that currently report distances.

        Raises:
            ServiceError: If the request fails or the payload is not a list of entities
        """
        try:
            response = self.session.get(self.entities_url, timeout=self.timeout)
            response.raise_for_status()
            entities = response.json()
        except (requests.RequestException, ValueError) as e:
            raise ServiceError(f"Could not fetch entities from {self.entities_url}: {e}") from e

        if not isinstance(entities, list):
            raise ServiceError(f"Unexpected entities payload from {self.entities_url}: {type(entities).__name__}")

        devices = []
        for entity in entities:
            try:
                device = parse_entity(entity)
            except (KeyError, AttributeError, TypeError) as e:
                logger.warning("Skipping malformed entity %r: %s", entity, e)
                continue
            if device is not None:
                devices.append(device)

        logger.debug("Fetched %d tracked devices from %d entities", len(devices), len(entities))
        return devices
