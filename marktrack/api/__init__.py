"""
API module for the REST implementation.
"""

from .rest_api import MarkTrackRestAPI

__all__ = [
    "MarkTrackRestAPI",
]
