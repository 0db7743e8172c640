"""Reservo: reservation microservices over Celery RPC."""

__version__ = "1.0.0"
