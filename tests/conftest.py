import copy

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from room_trilateration.anchors import AnchorTable
from room_trilateration.bounding import BoundingBox
from room_trilateration.trilateration import TrilaterationEngine


HOUSE_OPTIONS = {
    "location_mappings": [
        {"name": "kitchen", "x": -0.92, "y": 0.99},
        {"name": "living", "x": -4.63, "y": -3.475},
        {"name": "bedroom", "x": 2.03, "y": 0.58},
    ],
    "home_dimensions": {"width": 10.66, "height": 7.75},
    "room_assistant_url": "http://room-assistant.local:6415",
}


def exact_distances(anchors, position):
    """Noise-free distance from position to every anchor."""
    return {
        anchor_id: float(np.linalg.norm(np.array(position) - np.array(anchor_pos)))
        for anchor_id, anchor_pos in anchors.items()
    }


@pytest.fixture
def house_anchors():
    return AnchorTable({"kitchen": (-0.92, 0.99), "living": (-4.63, -3.475), "bedroom": (2.03, 0.58)})


@pytest.fixture
def house_bounds():
    return BoundingBox.from_dimensions(10.66, 7.75)


@pytest.fixture
def square_anchors():
    return AnchorTable({"a": (-4.0, -3.0), "b": (4.0, -3.0), "c": (4.0, 3.0), "d": (-4.0, 3.0)})


@pytest.fixture
def square_engine(square_anchors):
    return TrilaterationEngine(square_anchors, BoundingBox.from_dimensions(10.0, 8.0))


@pytest.fixture
def house_options():
    return copy.deepcopy(HOUSE_OPTIONS)
