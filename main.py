#!/usr/bin/env python3
"""
Command line entry point for the trilateration add-on.

Usage:
    python main.py estimate -c options.json -d kitchen=2.1 -d living=3.4 -d bedroom=1.8
    python main.py replay -c options.json recordings/ --plot
    python main.py update -c /data/options.json
"""

import argparse
import json
import logging
import os
import sys

from room_trilateration.config import DEFAULT_OPTIONS_PATH, load_config
from room_trilateration.errors import ConfigurationError, EstimationError, ServiceError
from room_trilateration.home_assistant import HomeAssistantPublisher
from room_trilateration.reader import MeasurementReader
from room_trilateration.room_assistant import RoomAssistantClient
from room_trilateration.updater import update_sensors
from room_trilateration.visualize import PositionVisualizer

logger = logging.getLogger(__name__)


def parse_distance(value):
    """Parse a ``name=distance`` pair."""
    name, sep, distance = value.partition('=')
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected name=distance, got {value!r}")
    try:
        return name, float(distance)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid distance in {value!r}")


def run_estimate(args, config):
    """Estimate a single position from distances given on the command line."""
    engine = config.create_engine()
    estimate = engine.estimate_position(dict(args.distance), device_id=args.device)
    print(json.dumps(estimate.to_dict(), indent=2))


def run_replay(args, config):
    """Estimate the latest position of every device in recorded measurements."""
    engine = config.create_engine()
    reader = MeasurementReader(args.path)
    batch = engine.estimate_many(reader.get_all_latest_distances())

    output = {device_id: estimate.to_dict() for device_id, estimate in batch.estimates.items()}
    output.update({device_id: {'error': str(e)} for device_id, e in batch.failures.items()})
    print(json.dumps(output, indent=2))

    if args.plot:
        PositionVisualizer(config.anchors, config.bounds).plot_estimates(batch.estimates)


def run_update(args, config):
    """Run one poll-estimate-publish cycle."""
    token = args.token or os.environ.get('SUPERVISOR_TOKEN')
    if not token:
        raise ConfigurationError("Missing Home Assistant token: pass --token or set SUPERVISOR_TOKEN")

    engine = config.create_engine()
    source = RoomAssistantClient(config.room_assistant_url)
    publisher = HomeAssistantPublisher(config.home_assistant_url, token)
    update_sensors(engine, source, publisher)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Trilaterate device positions from anchor distances")
    parser.add_argument('-c', '--config', default=DEFAULT_OPTIONS_PATH, help="Add-on options JSON file")
    parser.add_argument('-v', '--verbose', action='store_true', help="Enable debug logging")
    subparsers = parser.add_subparsers(dest='command', required=True)

    estimate_parser = subparsers.add_parser('estimate', help="Estimate one position")
    estimate_parser.add_argument('-d', '--distance', type=parse_distance, action='append', required=True,
                                 help="Distance to an anchor as name=meters (repeatable)")
    estimate_parser.add_argument('--device', default=None, help="Device id used in log messages")
    estimate_parser.set_defaults(func=run_estimate)

    replay_parser = subparsers.add_parser('replay', help="Estimate positions from recorded CSV measurements")
    replay_parser.add_argument('path', help="CSV file or directory of CSV files")
    replay_parser.add_argument('--plot', action='store_true', help="Plot the estimates")
    replay_parser.set_defaults(func=run_replay)

    update_parser = subparsers.add_parser('update', help="Publish positions for devices tracked by room-assistant")
    update_parser.add_argument('--token', default=None, help="Home Assistant token (default: $SUPERVISOR_TOKEN)")
    update_parser.set_defaults(func=run_update)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        config = load_config(args.config)
        args.func(args, config)
    except (ConfigurationError, EstimationError, ServiceError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
