"""
Ingest Package - Sending records to a channel
"""

from .client import IngestClient

__all__ = ['IngestClient']
