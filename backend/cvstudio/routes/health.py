"""
Health check routes
"""
from flask import Blueprint, jsonify

from cvstudio.config import CV_API_BASE_URL
from cvstudio.templates import list_templates

health_bp = Blueprint('health', __name__)


@health_bp.route('/ping')
def ping():
    return "pong"


@health_bp.route('/health')
def health():
    """Health check endpoint"""
    return jsonify({
        'status': 'healthy',
        'templates': [t['key'] for t in list_templates()],
        'services': {
            'renderer': 'reportlab',
            'cv_api': CV_API_BASE_URL,
        }
    })


@health_bp.get("/healthz")
def healthz():
    """Kubernetes health check endpoint"""
    return jsonify({"status": "ok"}), 200
