"""
modder 下载层

包含下载管理与下载大小校验。
"""

from modder.download.manager import DownloadManager, DownloadStats
from modder.download.verifier import SizeVerifier

__all__ = [
    "DownloadManager",
    "DownloadStats",
    "SizeVerifier",
]
