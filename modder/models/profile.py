"""
配置档与构件模型
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from modder.exceptions import ConfigError

ARTIFACT_SUFFIX = ".jar"


class Pool(Enum):
    """构件池"""

    MODS = "mods"
    LIBS = "libs"


def _unique(items) -> List[str]:
    """保持顺序去重"""
    seen = set()
    return [item for item in items if not (item in seen or seen.add(item))]


@dataclass
class Profile:
    """
    配置档：一个游戏版本、加载器以及一组同时启用的模组和库。

    mods / libs 保持插入顺序且不重复，fork 为其他配置档名称，
    在投影时按需解析。
    """

    version: str
    loader: str
    mods: List[str] = field(default_factory=list)
    libs: List[str] = field(default_factory=list)
    fork: Optional[List[str]] = None

    def __post_init__(self):
        self.mods = _unique(self.mods)
        self.libs = _unique(self.libs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Profile":
        if not isinstance(data, dict):
            raise ConfigError("Profile file must contain a JSON object")
        try:
            version = data["version"]
            loader = data["loader"]
        except KeyError as e:
            raise ConfigError(f"Profile is missing required key {e}") from e

        fork = data.get("fork")
        if fork is not None and not isinstance(fork, list):
            fork = [fork]

        return cls(
            version=str(version),
            loader=str(loader),
            mods=list(data.get("mods", [])),
            libs=list(data.get("libs", [])),
            fork=fork,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "version": self.version,
            "loader": self.loader,
            "mods": list(self.mods),
            "libs": list(self.libs),
        }
        if self.fork:
            data["fork"] = list(self.fork)
        return data

    def add_mod(self, slug: str) -> bool:
        """添加模组，已存在时返回 False"""
        if slug in self.mods:
            return False
        self.mods.append(slug)
        return True

    def remove(self, slug: str) -> bool:
        """从 mods 与 libs 中移除，返回是否存在过"""
        found = False
        if slug in self.mods:
            self.mods.remove(slug)
            found = True
        if slug in self.libs:
            self.libs.remove(slug)
            found = True
        return found

    def uses(self, slug: str) -> bool:
        return slug in self.mods or slug in self.libs

    def artifact_keys(self, pool: Pool) -> List["ArtifactKey"]:
        slugs = self.mods if pool is Pool.MODS else self.libs
        return [ArtifactKey(slug, self.version, self.loader) for slug in slugs]


@dataclass(frozen=True)
class ArtifactKey:
    """构件键 (slug, 游戏版本, 加载器)"""

    slug: str
    game_version: str
    loader: str

    @property
    def filename(self) -> str:
        return f"{self.slug}-{self.game_version}-{self.loader}{ARTIFACT_SUFFIX}"

    @classmethod
    def from_filename(cls, filename: str) -> Optional["ArtifactKey"]:
        """
        从文件名解析构件键。

        slug 可以包含 '-'，游戏版本和加载器不可以；
        不符合格式的文件返回 None。
        """
        if not filename.endswith(ARTIFACT_SUFFIX):
            return None
        parts = filename[: -len(ARTIFACT_SUFFIX)].rsplit("-", 2)
        if len(parts) != 3 or not all(parts):
            return None
        return cls(*parts)
