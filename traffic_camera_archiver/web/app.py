"""Flask web application exposing cached frames and camera search."""

import os
from typing import Optional

from flask import Flask, Response, jsonify, request, send_from_directory

from ..logging_config import get_logger
from ..poll_scheduler import PollScheduler
from ..services.errors import ProviderUnavailable
from ..services.interfaces import CameraProviderInterface, ImageCacheInterface

logger = get_logger("web")

STATIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "static")


class ArchiverWebApp:
    """Flask web application for the traffic camera archiver."""

    def __init__(self,
                 image_cache: ImageCacheInterface,
                 camera_client: CameraProviderInterface,
                 scheduler: Optional[PollScheduler] = None):
        self.app = Flask(__name__, static_folder=STATIC_DIR, static_url_path='/static')

        self.image_cache = image_cache
        self.camera_client = camera_client
        self.scheduler = scheduler

        self._setup_routes()

        logger.info("Archiver web application initialized")

    def _setup_routes(self):
        """Setup Flask routes."""

        @self.app.route('/')
        def index():
            """Viewer page."""
            return send_from_directory(STATIC_DIR, 'index.html')

        @self.app.route('/<camera_id>/latest')
        def latest_image(camera_id):
            """Latest cached JPEG for a camera."""
            cached = self.image_cache.get(camera_id)
            if cached is None:
                return jsonify({
                    'success': False,
                    'error': f'No image cached for camera {camera_id}'
                }), 404

            response = Response(cached.image_bytes, mimetype='image/jpeg')
            response.headers['Cache-Control'] = 'no-cache'
            response.last_modified = cached.timestamp
            return response

        @self.app.route('/search')
        def search():
            """Search provider cameras by name."""
            query = request.args.get('search', '').strip()
            if not query:
                return jsonify({
                    'success': False,
                    'error': 'Missing search query parameter'
                }), 400

            try:
                cameras = self.camera_client.search_by_name(query)
            except ProviderUnavailable as e:
                logger.error(f"Camera search for {query!r} failed: {e}")
                return jsonify({
                    'success': False,
                    'error': 'Camera provider unavailable'
                }), 502

            if not cameras:
                return jsonify({
                    'success': False,
                    'error': f'No cameras found matching {query}'
                }), 404

            return jsonify([camera.to_dict() for camera in cameras])

        @self.app.route('/api/status')
        def api_status():
            """Get scheduler status."""
            if self.scheduler is None:
                return jsonify({
                    'success': False,
                    'error': 'Poll scheduler not attached'
                }), 503

            return jsonify({
                'success': True,
                'data': self.scheduler.get_status()
            })

    def run(self, host='0.0.0.0', port=3000, debug=False):
        """Run the Flask application."""
        logger.info(f"Starting archiver web interface on {host}:{port}")
        self.app.run(host=host, port=port, debug=debug, threaded=True, use_reloader=False)

    def get_app(self):
        """Get the Flask app instance for external WSGI servers."""
        return self.app


def create_app(image_cache: ImageCacheInterface,
               camera_client: CameraProviderInterface,
               scheduler: Optional[PollScheduler] = None) -> Flask:
    """Factory function to create Flask app."""
    web_app = ArchiverWebApp(image_cache, camera_client, scheduler)
    return web_app.get_app()
