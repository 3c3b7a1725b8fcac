"""
One poll-estimate-publish pass over all tracked devices.
"""

import logging
from typing import List, Tuple

from .errors import ServiceError
from .home_assistant import HomeAssistantPublisher, sensor_state
from .room_assistant import RoomAssistantClient
from .trilateration import TrilaterationEngine

logger = logging.getLogger(__name__)


def update_sensors(engine: TrilaterationEngine,
                   source: RoomAssistantClient,
                   publisher: HomeAssistantPublisher) -> List[Tuple[str, str]]:
    """
    Estimate and publish positions for every device room-assistant reports.

    Failures for a single device are logged and skipped. A failure to reach
    room-assistant itself propagates as ServiceError.

    Returns:
        (sensor name, state) pairs that were published
    """
    devices = source.fetch_devices()
    batch = engine.estimate_many({device.id: device.distances for device in devices})

    published = []
    for device in devices:
        estimate = batch.estimates.get(device.id)
        if estimate is None:
            continue
        try:
            name = publisher.publish(device, estimate)
        except ServiceError as e:
            logger.warning("Skipping device %s: %s", device.id, e)
            continue
        published.append((name, sensor_state(estimate)))

    logger.info("Updated sensors: %s (%d skipped)", published, len(batch.failures))
    return published
