"""
UI Package for the Pointing Client

Terminal user interface built with the Textual framework.
"""

from .app import PointingApp

__all__ = ["PointingApp"]
