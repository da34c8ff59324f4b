"""Web Entry Point - Root Module.

Exposes the Flask application for WSGI servers
(e.g. ``gunicorn main:app``).
"""

from quakemap.main import create_app

app = create_app()

__all__ = [
    "app",
    "create_app",
]
