"""
Web view and JSON API for the trilateration add-on.

Run with ``flask --app app run``; options are read from $OPTIONS_PATH
(default /data/options.json).
"""

import logging
import os

from flask import Flask, render_template, jsonify, request
from flask_bootstrap import Bootstrap

from room_trilateration.config import DEFAULT_OPTIONS_PATH, load_config
from room_trilateration.errors import EstimationError, ServiceError
from room_trilateration.room_assistant import RoomAssistantClient

logger = logging.getLogger(__name__)


def _device_info(device, batch):
    info = {'id': device.id, 'name': device.name, 'distances': device.distances}
    if device.id in batch.estimates:
        estimate = batch.estimates[device.id]
        info.update(position={'x': estimate.x, 'y': estimate.y}, estimate=estimate.to_dict())
    else:
        error = batch.failures[device.id]
        info.update(position=None, error={'kind': type(error).__name__, 'message': str(error)})
    return info


def create_app(config=None, source=None):
    """
    Create the Flask application.

    Args:
        config: Add-on configuration; loaded from $OPTIONS_PATH if omitted
        source: Room-assistant client; built from the configuration if omitted
    """
    if config is None:
        config = load_config(os.environ.get('OPTIONS_PATH', DEFAULT_OPTIONS_PATH))
    if source is None:
        source = RoomAssistantClient(config.room_assistant_url)

    app = Flask(__name__)
    Bootstrap(app)
    engine = config.create_engine()

    def tracked_devices():
        devices = source.fetch_devices()
        batch = engine.estimate_many({device.id: device.distances for device in devices})
        return [_device_info(device, batch) for device in devices]

    @app.route('/')
    def index():
        try:
            devices = tracked_devices()
            service_error = None
        except ServiceError as e:
            logger.warning("%s", e)
            devices, service_error = [], str(e)
        return render_template('index.html', anchors=config.anchors, bounds=config.bounds,
                               devices=devices, service_error=service_error)

    @app.route('/api/anchors')
    def get_anchors():
        anchors = [{'id': aid, 'position': {'x': x, 'y': y}} for aid, (x, y) in config.anchors.items()]
        return jsonify(anchors)

    @app.route('/api/devices')
    def get_devices():
        try:
            return jsonify(tracked_devices())
        except ServiceError as e:
            logger.warning("%s", e)
            return jsonify({'error': {'kind': type(e).__name__, 'message': str(e)}}), 502

    @app.route('/api/estimate', methods=['POST'])
    def estimate():
        data = request.get_json(silent=True) or {}
        distances = data.get('distances')
        if not isinstance(distances, dict):
            return jsonify({'error': {'kind': 'BadRequest', 'message': "'distances' must be an object"}}), 400

        try:
            result = engine.estimate_position(distances, device_id=data.get('device_id'))
        except EstimationError as e:
            return jsonify({'error': {'kind': type(e).__name__, 'message': str(e)}}), 422
        return jsonify(result.to_dict())

    return app


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    create_app().run(debug=True)
