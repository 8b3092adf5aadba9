"""
modder 数据模型包

包含配置模型、配置档模型和 API 模型定义。
"""

from modder.models.config import (
    ModLoader,
    Config,
    load_config,
    save_config,
    get_home,
)
from modder.models.profile import (
    Pool,
    Profile,
    ArtifactKey,
)
from modder.models.api import (
    ProjectInfo,
    FileInfo,
    VersionInfo,
    SearchHit,
    ResolvedMod,
)

__all__ = [
    # 配置模型
    "ModLoader",
    "Config",
    "load_config",
    "save_config",
    "get_home",
    # 配置档模型
    "Pool",
    "Profile",
    "ArtifactKey",
    # API 模型
    "ProjectInfo",
    "FileInfo",
    "VersionInfo",
    "SearchHit",
    "ResolvedMod",
]
