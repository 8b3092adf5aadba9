"""
链接投影

让客户端的 mods 目录恰好反映当前配置档所需的构件：
先清空目录，再为配置档（及其 fork）的每个模组和库创建指向构件存储的符号链接。
"""

import os
from pathlib import Path
from typing import List, Optional

from loguru import logger

from modder.exceptions import (
    ConfigError,
    ForkCycleError,
    MissingArtifactError,
    ProfileNotFoundError,
    ReconciliationError,
)
from modder.models import ArtifactKey, Pool, Profile
from modder.storage import ArtifactStore, ProfileStore


class LinkProjector:
    """链接投影器"""

    def __init__(self, mods_dir, artifacts: ArtifactStore, profiles: ProfileStore):
        self.mods_dir = Path(mods_dir) if mods_dir else None
        self.artifacts = artifacts
        self.profiles = profiles

    def _require_mods_dir(self) -> Path:
        if self.mods_dir is None:
            raise ConfigError(
                "The mods directory is not set, please set 'mods_dir' in config.json"
            )
        return self.mods_dir

    def clear(self) -> int:
        """
        删除 mods 目录中的所有条目

        目录不存在时什么也不做。真实的子目录无法 unlink，会直接抛出 OSError。
        """
        mods_dir = self._require_mods_dir()
        if not mods_dir.exists():
            return 0

        removed = 0
        for entry in list(mods_dir.iterdir()):
            entry.unlink()
            removed += 1
        logger.debug(f"Removed {removed} entries from {mods_dir}")
        return removed

    def project(self, profile_name: Optional[str]) -> List[Path]:
        """
        投影配置档到 mods 目录

        Args:
            profile_name: 当前配置档名称，None 表示没有选择配置档（清空目录）

        Returns:
            创建的链接路径列表

        Raises:
            MissingArtifactError: 所需构件不在存储中，投影中止，已创建的链接保留
            ForkCycleError: fork 形成环
            ReconciliationError: fork 指向不存在的配置档
        """
        self.clear()

        if profile_name is None:
            return []

        profile = self.profiles.load(profile_name)
        if not profile.mods:
            return []

        links: List[Path] = []
        self._link_profile(profile_name, profile, [profile_name], links)
        logger.debug(f"Projected {len(links)} links for profile '{profile_name}'")
        return links

    def _link_profile(
        self, name: str, profile: Profile, chain: List[str], links: List[Path]
    ) -> None:
        for pool in (Pool.MODS, Pool.LIBS):
            for key in profile.artifact_keys(pool):
                links.append(self._link(key, pool))

        for fork in profile.fork or []:
            # chain 只包含当前路径上的配置档，菱形 fork 是允许的
            if fork in chain:
                raise ForkCycleError(chain + [fork])
            try:
                fork_profile = self.profiles.load(fork)
            except ProfileNotFoundError as e:
                raise ReconciliationError(
                    f"Profile '{name}' forks '{fork}', which does not exist",
                    context={"profile": name, "fork": fork},
                ) from e
            self._link_profile(fork, fork_profile, chain + [fork], links)

    def _link(self, key: ArtifactKey, pool: Pool) -> Path:
        source = self.artifacts.path(key, pool)
        if not source.is_file():
            raise MissingArtifactError(str(source), pool.value)

        mods_dir = self._require_mods_dir()
        mods_dir.mkdir(parents=True, exist_ok=True)

        link = mods_dir / source.name
        if os.path.lexists(link):
            link.unlink()
        link.symlink_to(source.resolve())
        return link
