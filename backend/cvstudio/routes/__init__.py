"""
Routes package - all API route blueprints
"""
from cvstudio.routes.health import health_bp
from cvstudio.routes.render import render_bp

__all__ = [
    'health_bp',
    'render_bp',
]
