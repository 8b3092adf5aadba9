"""
modder 统一异常体系

分层的异常结构，支持错误代码、上下文信息和字典序列化。
"""

from typing import Any, Dict, Optional

import aiohttp


class ModderError(Exception):
    """modder 基础异常类"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self._get_default_code()
        self.context = context or {}

    def _get_default_code(self) -> str:
        return "E000"

    def to_dict(self) -> Dict[str, Any]:
        """将异常转换为字典格式"""
        return {
            "error": True,
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "type": self.__class__.__name__,
        }

    def __str__(self) -> str:
        return self.message


class UserError(ModderError):
    """用户操作错误：报告后命令正常返回，不做任何修改"""

    def _get_default_code(self) -> str:
        return "E100"


class NoProfileSelectedError(UserError):
    def __init__(self):
        super().__init__(
            "No profile selected. Please select a profile with `modder switch <profile>`."
        )

    def _get_default_code(self) -> str:
        return "E101"


class ProfileNotFoundError(UserError):
    def __init__(self, name: str, hint: str = ""):
        message = f"Profile '{name}' does not exist."
        if hint:
            message = f"{message} {hint}"
        super().__init__(message, context={"profile": name})
        self.name = name

    def _get_default_code(self) -> str:
        return "E102"


class ProfileExistsError(UserError):
    def __init__(self, name: str):
        super().__init__(
            f"Profile '{name}' already exists. Did you mean to switch to it?",
            context={"profile": name},
        )
        self.name = name

    def _get_default_code(self) -> str:
        return "E103"


class ProfileInUseError(UserError):
    def __init__(self, name: str):
        super().__init__(
            "Cannot delete the currently selected profile.",
            context={"profile": name},
        )
        self.name = name

    def _get_default_code(self) -> str:
        return "E104"


class InvalidLoaderError(UserError):
    def _get_default_code(self) -> str:
        return "E105"


class CatalogError(ModderError):
    """目录查询错误，按模组记录为失败，批处理继续"""

    def __init__(
        self,
        message: str,
        slug: str = "",
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, code, context)
        self.slug = slug
        if slug:
            self.context.setdefault("slug", slug)

    def _get_default_code(self) -> str:
        return "E200"


class ProjectNotFoundError(CatalogError):
    def _get_default_code(self) -> str:
        return "E201"


class ClientUnsupportedError(CatalogError):
    """项目不支持客户端。与其他错误不同，会中止整个安装批次"""

    def _get_default_code(self) -> str:
        return "E202"


class LoaderUnsupportedError(CatalogError):
    def _get_default_code(self) -> str:
        return "E203"


class VersionUnsupportedError(CatalogError):
    def _get_default_code(self) -> str:
        return "E204"


class NoFileAvailableError(CatalogError):
    def _get_default_code(self) -> str:
        return "E205"


class SpecialArtifactError(CatalogError):
    """OptiFine 等特殊构件获取失败"""

    def _get_default_code(self) -> str:
        return "E206"


class CatalogNetworkError(CatalogError):
    def _get_default_code(self) -> str:
        return "E207"


class APIError(CatalogError):
    """API 返回了非预期的状态码"""

    def __init__(
        self,
        message: str,
        slug: str = "",
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        response: Optional[aiohttp.ClientResponse] = None,
    ):
        super().__init__(message, slug, code, context)
        self.response = response
        if response is not None:
            self.context["status_code"] = response.status
            self.context["url"] = str(response.url)

    def _get_default_code(self) -> str:
        return "E210"


class DownloadError(ModderError):
    """下载相关错误"""

    def _get_default_code(self) -> str:
        return "E300"


class DownloadNetworkError(DownloadError):
    def _get_default_code(self) -> str:
        return "E301"


class DownloadSizeError(DownloadError):
    """下载内容为空或大小与预期不符"""

    def _get_default_code(self) -> str:
        return "E302"


class ReconciliationError(ModderError):
    """链接投影失败，目录可能只完成了一部分"""

    def _get_default_code(self) -> str:
        return "E400"


class MissingArtifactError(ReconciliationError):
    def __init__(self, path: str, pool: str):
        kind = "Lib" if pool == "libs" else "Mod"
        super().__init__(
            f"{kind} {path} does not exist on disk",
            context={"path": path, "pool": pool},
        )
        self.path = path
        self.pool = pool

    def _get_default_code(self) -> str:
        return "E401"


class ForkCycleError(ReconciliationError):
    def __init__(self, chain: list):
        super().__init__(
            f"Fork cycle detected: {' -> '.join(chain)}",
            context={"chain": list(chain)},
        )
        self.chain = list(chain)

    def _get_default_code(self) -> str:
        return "E402"


class StorageError(ModderError):
    def _get_default_code(self) -> str:
        return "E500"


class ConfigError(ModderError):
    """配置文件无法解析或内容无效"""

    def _get_default_code(self) -> str:
        return "E600"


__all__ = [
    "ModderError",
    # 用户错误
    "UserError",
    "NoProfileSelectedError",
    "ProfileNotFoundError",
    "ProfileExistsError",
    "ProfileInUseError",
    "InvalidLoaderError",
    # 目录错误
    "CatalogError",
    "ProjectNotFoundError",
    "ClientUnsupportedError",
    "LoaderUnsupportedError",
    "VersionUnsupportedError",
    "NoFileAvailableError",
    "SpecialArtifactError",
    "CatalogNetworkError",
    "APIError",
    # 下载错误
    "DownloadError",
    "DownloadNetworkError",
    "DownloadSizeError",
    # 投影错误
    "ReconciliationError",
    "MissingArtifactError",
    "ForkCycleError",
    # 存储错误
    "StorageError",
    # 配置错误
    "ConfigError",
]
