"""
LogBin - live log channel viewer

Pipe text or JSON log lines into a named channel and watch them arrive
in a terminal UI. Useful for debugging edge functions, webhooks and
services that cannot be tailed directly.
"""

__version__ = "0.1.0"
