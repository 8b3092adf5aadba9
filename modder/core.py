from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger

from modder.download import DownloadManager
from modder.exceptions import (
    InvalidLoaderError,
    NoProfileSelectedError,
    ProfileExistsError,
    ProfileInUseError,
    ProfileNotFoundError,
)
from modder.installer import InstallOptions, InstallReport, Installer
from modder.models import (
    ArtifactKey,
    Config,
    ModLoader,
    Pool,
    Profile,
    SearchHit,
    get_home,
    load_config,
    save_config,
)
from modder.projector import LinkProjector
from modder.services import (
    ModResolver,
    ModrinthClient,
    OptifineFetcher,
    create_session,
)
from modder.storage import ArtifactStore, ProfileStore


class Modder:
    """
    一次命令调用的应用对象。

    持有启动时加载的 Config，以及构件存储、配置档存储和链接投影器；
    每个 CLI 命令对应一个方法。预期内的失败以 UserError 抛出，不做任何修改。
    """

    def __init__(self, config: Config, home: Path):
        self.config = config
        self.home = Path(home)
        self.artifacts = ArtifactStore(self.home)
        self.profiles = ProfileStore(self.home)
        self.projector = LinkProjector(config.mods_dir, self.artifacts, self.profiles)

    @classmethod
    def load(cls, home: Optional[Path] = None) -> "Modder":
        home = home or get_home()
        return cls(load_config(home), home)

    @property
    def selected_profile(self) -> Optional[str]:
        return self.config.selected_profile

    def _require_profile(self) -> str:
        if self.config.selected_profile is None:
            raise NoProfileSelectedError()
        return self.config.selected_profile

    def _select(self, name: Optional[str]) -> List[Path]:
        self.config.selected_profile = name
        save_config(self.config)
        if name:
            logger.info(f"Switched to profile {name}")
        else:
            logger.info("Deselected profile")
        return self.projector.project(name)

    # ── install ──────────────────────────────────────────────────────────────

    def make_installer(
        self, client: ModrinthClient, downloader: DownloadManager
    ) -> Installer:
        return Installer(
            profile_name=self._require_profile(),
            resolver=ModResolver(client),
            downloader=downloader,
            optifine=OptifineFetcher(downloader),
            artifacts=self.artifacts,
            profiles=self.profiles,
            projector=self.projector,
        )

    async def install(
        self, slugs: Sequence[str], options: Optional[InstallOptions] = None
    ) -> InstallReport:
        """安装模组；不指定模组时重新安装当前配置档的全部模组"""
        name = self._require_profile()
        options = options or InstallOptions()

        if not slugs:
            slugs = self.profiles.load(name).mods
            options = InstallOptions(
                add=True,
                update=options.update,
                version=options.version,
                loader=options.loader,
            )

        async with create_session(self.config) as session:
            client = ModrinthClient(session, base_url=self.config.api_url)
            downloader = DownloadManager(
                max_retries=self.config.max_retries,
                retry_delay=self.config.retry_delay,
                session=session,
            )
            installer = self.make_installer(client, downloader)
            return await installer.install(slugs, options)

    # ── profile contents ─────────────────────────────────────────────────────

    def remove(self, slugs: Sequence[str]) -> Tuple[List[str], List[str]]:
        """
        从当前配置档移除模组或库，构件保留在存储中（由 clean 清理）

        Returns:
            (已移除, 不在配置档中)
        """
        name = self._require_profile()
        profile = self.profiles.load(name)

        removed, missing = [], []
        for slug in slugs:
            (removed if profile.remove(slug) else missing).append(slug)

        if removed:
            self.profiles.save(name, profile)
            self.projector.project(name)
        return removed, missing

    def refresh(self) -> List[Path]:
        """重新投影当前配置档"""
        return self.projector.project(self.config.selected_profile)

    def clean(self) -> Dict[Pool, List[ArtifactKey]]:
        """删除没有任何配置档引用的构件"""
        referenced: Dict[Pool, set] = {Pool.MODS: set(), Pool.LIBS: set()}
        for name in self.profiles.list_names():
            profile = self.profiles.load(name)
            for pool in referenced:
                referenced[pool].update(profile.artifact_keys(pool))

        removed: Dict[Pool, List[ArtifactKey]] = {}
        for pool, keys in referenced.items():
            orphans = [k for k in self.artifacts.list_all(pool) if k not in keys]
            for key in orphans:
                self.artifacts.delete(key, pool)
            removed[pool] = orphans
        return removed

    def using(self, slug: str) -> List[str]:
        """列出包含该模组的配置档"""
        return [
            name
            for name in self.profiles.list_names()
            if self.profiles.load(name).uses(slug)
        ]

    async def search(self, query: str) -> List[SearchHit]:
        async with create_session(self.config) as session:
            client = ModrinthClient(session, base_url=self.config.api_url)
            return await client.search(query)

    def status(self) -> dict:
        info = {
            "selected_profile": self.config.selected_profile,
            "installed_mods": self.artifacts.count(Pool.MODS),
            "installed_libs": self.artifacts.count(Pool.LIBS),
            "profiles": len(self.profiles.list_names()),
        }
        if self.config.selected_profile is not None:
            profile = self.profiles.load(self.config.selected_profile)
            info.update(
                version=profile.version,
                loader=profile.loader,
                mod_count=len(profile.mods),
            )
        return info

    # ── profiles ─────────────────────────────────────────────────────────────

    def switch(self, name: Optional[str]) -> List[Path]:
        """切换配置档，name 为 None 时取消选择"""
        if name and not self.profiles.exists(name):
            raise ProfileNotFoundError(name, "Did you mean to create it?")
        return self._select(name or None)

    def create(
        self,
        name: str,
        version: str,
        loader: str,
        switch: bool = False,
        forks: Sequence[str] = (),
    ) -> Profile:
        if self.profiles.exists(name):
            raise ProfileExistsError(name)
        if loader not in ModLoader.values():
            raise InvalidLoaderError(
                f"Unknown loader '{loader}', expected one of: "
                + ", ".join(ModLoader.values())
            )
        for fork in forks:
            if not self.profiles.exists(fork):
                raise ProfileNotFoundError(fork)

        profile = Profile(version=version, loader=loader, fork=list(forks) or None)
        self.profiles.save(name, profile)
        logger.info(f"Created profile {name}")

        if switch:
            self._select(name)
        return profile

    def delete(self, name: str) -> None:
        """删除配置档；和切换一样会取消当前选择并清空 mods 目录"""
        if self.config.selected_profile == name:
            raise ProfileInUseError(name)
        if not self.profiles.exists(name):
            raise ProfileNotFoundError(name)

        self.profiles.delete(name)
        logger.info(f"Deleted profile {name}")
        self._select(None)
