"""
modder 服务层

包含 Modrinth API 客户端、模组解析与 OptiFine 获取。
"""

from modder.services.api_client import ModrinthClient, create_session
from modder.services.mod_resolver import ModResolver
from modder.services.optifine import OptifineFetcher, OPTIFINE_SLUG

__all__ = [
    "ModrinthClient",
    "create_session",
    "ModResolver",
    "OptifineFetcher",
    "OPTIFINE_SLUG",
]
