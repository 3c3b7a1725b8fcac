"""
Anchor table: fixed reference points with known coordinates.
"""

import math
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Tuple, Union

import numpy as np

from .errors import ConfigurationError

Coordinates = Tuple[float, float]


class AnchorTable(Mapping[str, Coordinates]):
    """Read-only mapping from anchor id to (x, y) coordinates."""

    def __init__(self, anchors: Mapping[str, Coordinates]):
        """
        Initialize the anchor table.

        Args:
            anchors: Mapping of anchor id to (x, y) coordinates

        Raises:
            ConfigurationError: If the table is empty or a coordinate is not finite
        """
        if not anchors:
            raise ConfigurationError("Anchor table must contain at least one anchor")

        positions: Dict[str, Coordinates] = {}
        for anchor_id, position in anchors.items():
            try:
                x, y = (float(value) for value in position)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid coordinates for anchor {anchor_id!r}: {position!r}") from e
            if not (math.isfinite(x) and math.isfinite(y)):
                raise ConfigurationError(f"Coordinates for anchor {anchor_id!r} must be finite")
            positions[str(anchor_id)] = (x, y)

        self._positions = MappingProxyType(positions)

    @classmethod
    def from_mappings(cls, mappings: Union[list, Mapping]) -> "AnchorTable":
        """
        Build a table from the add-on ``location_mappings`` option.

        Accepts either a list of ``{"name", "x", "y"}`` entries or a mapping of
        ``name -> {"x", "y"}``.
        """
        if isinstance(mappings, Mapping):
            entries = [dict(position, name=name) for name, position in mappings.items()]
        else:
            entries = list(mappings)

        anchors: Dict[str, Coordinates] = {}
        for entry in entries:
            try:
                name = entry["name"]
                position = (entry["x"], entry["y"])
            except (KeyError, TypeError) as e:
                raise ConfigurationError(f"Invalid location mapping: {entry!r}") from e
            if name in anchors:
                raise ConfigurationError(f"Duplicate anchor name: {name!r}")
            anchors[name] = position
        return cls(anchors)

    def __getitem__(self, anchor_id: str) -> Coordinates:
        return self._positions[anchor_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._positions)

    def __len__(self) -> int:
        return len(self._positions)

    def __repr__(self) -> str:
        return f"AnchorTable({dict(self._positions)!r})"

    def as_array(self) -> np.ndarray:
        """Anchor coordinates as an (N, 2) array, in table order."""
        return np.array(list(self._positions.values()), dtype=float)
