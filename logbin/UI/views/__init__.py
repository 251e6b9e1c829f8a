"""
LogBin UI Views Package
"""

from .landing import LandingView
from .log_stream import LogStreamView

__all__ = [
    'LandingView',
    'LogStreamView',
]
