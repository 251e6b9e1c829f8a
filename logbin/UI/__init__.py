"""
LogBin Terminal UI
"""

from .app import LogBinApp, run_app

__all__ = [
    'LogBinApp',
    'run_app',
]
