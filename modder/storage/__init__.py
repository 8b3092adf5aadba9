"""
modder 存储层

包含构件存储和配置档存储。
"""

from modder.storage.artifacts import ArtifactStore
from modder.storage.profiles import ProfileStore

__all__ = [
    "ArtifactStore",
    "ProfileStore",
]
