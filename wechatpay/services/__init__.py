"""
Service modules for WeChat Pay gateway operations.
"""

from .base_client import BaseClient
from .download_service import DownloadService

__all__ = [
    'BaseClient',
    'DownloadService',
]
