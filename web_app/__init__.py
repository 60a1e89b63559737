"""Web application for the HTML link shortener."""

from .app_factory import create_app

__all__ = ["create_app"]
