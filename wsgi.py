"""
WSGI entry point.

Usage:
    flask --app wsgi run
    flask --app wsgi converge-schema
    flask --app wsgi seed-status
"""

from app import create_app

app = create_app()
