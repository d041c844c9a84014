"""HTTP surface for the traffic camera archiver."""

from .app import ArchiverWebApp, create_app

__all__ = ['ArchiverWebApp', 'create_app']
