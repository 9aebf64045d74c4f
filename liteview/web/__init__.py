"""Web module - Flask front end for a session"""

from .app import create_app

__all__ = ['create_app']
