"""
Flask REST API for the transaction categorization service.

Provides endpoints for:
- Category predictions
- Personalization (update, reset, export)
- Model information and health checks
"""

from txncategorizer.api.server import create_app
from txncategorizer.api.routes import register_routes

__all__ = [
    "create_app",
    "register_routes",
]
