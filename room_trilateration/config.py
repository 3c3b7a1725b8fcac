"""
Add-on options loading.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping

from .anchors import AnchorTable
from .bounding import BoundingBox
from .errors import ConfigurationError
from .minimizer import DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE, InitialGuess
from .trilateration import TrilaterationEngine
from .utils import DEFAULT_MAX_CONDITION

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS_PATH = "/data/options.json"
DEFAULT_HOME_ASSISTANT_URL = "http://supervisor/core/api"
DEFAULT_UPDATE_INTERVAL = 5


@dataclass(frozen=True)
class AddonConfig:
    """Validated add-on options.

    ``update_interval`` is carried for the supervisor that schedules update
    cycles; nothing in this package reads it.
    """

    anchors: AnchorTable
    bounds: BoundingBox
    room_assistant_url: str
    home_assistant_url: str = DEFAULT_HOME_ASSISTANT_URL
    update_interval: float = DEFAULT_UPDATE_INTERVAL
    initial_guess: InitialGuess = InitialGuess.ORIGIN
    tolerance: float = DEFAULT_TOLERANCE
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    max_condition: float = DEFAULT_MAX_CONDITION

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> "AddonConfig":
        """
        Build the configuration from parsed add-on options.

        Raises:
            ConfigurationError: If a required option is missing or invalid
        """
        if not isinstance(options, Mapping):
            raise ConfigurationError(f"Options must be a JSON object, got {type(options).__name__}")
        for key in ("location_mappings", "home_dimensions", "room_assistant_url"):
            if not options.get(key):
                raise ConfigurationError(f"Missing configuration: {key}")

        try:
            return cls(
                anchors=AnchorTable.from_mappings(options["location_mappings"]),
                bounds=BoundingBox.from_mapping(options["home_dimensions"]),
                room_assistant_url=str(options["room_assistant_url"]),
                home_assistant_url=str(options.get("home_assistant_url") or DEFAULT_HOME_ASSISTANT_URL),
                update_interval=float(options.get("update_interval") or DEFAULT_UPDATE_INTERVAL),
                initial_guess=InitialGuess(options.get("initial_guess", InitialGuess.ORIGIN.value)),
                tolerance=float(options.get("tolerance", DEFAULT_TOLERANCE)),
                max_iterations=int(options.get("max_iterations", DEFAULT_MAX_ITERATIONS)),
                max_condition=float(options.get("max_condition", DEFAULT_MAX_CONDITION)),
            )
        except ConfigurationError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def create_engine(self) -> TrilaterationEngine:
        return TrilaterationEngine(
            self.anchors,
            self.bounds,
            initial_guess=self.initial_guess,
            gtol=self.tolerance,
            max_iterations=self.max_iterations,
            max_condition=self.max_condition,
        )


def load_config(path: str = DEFAULT_OPTIONS_PATH) -> AddonConfig:
    """
    Load add-on options from a JSON file.

    Args:
        path: Path of the options file

    Returns:
        The validated configuration
    """
    try:
        with open(path, "r") as f:
            options = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Options file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Options file {path} is not valid JSON: {e}") from e

    config = AddonConfig.from_dict(options)
    logger.info("Loaded configuration with %d anchors, house %.2fm x %.2fm, room-assistant at %s",
                len(config.anchors), config.bounds.half_width * 2, config.bounds.half_height * 2,
                config.room_assistant_url)
    return config
