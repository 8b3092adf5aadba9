"""
安装流程

按给定顺序逐个处理请求的模组：解析、命中缓存时跳过或更新、下载并写入构件存储，
再按需把模组加入当前配置档并重新投影链接。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from loguru import logger

from modder.download import DownloadManager
from modder.exceptions import (
    CatalogError,
    ClientUnsupportedError,
    DownloadError,
    ReconciliationError,
)
from modder.models import ArtifactKey, ModLoader, Pool
from modder.projector import LinkProjector
from modder.services import ModResolver, OptifineFetcher, OPTIFINE_SLUG
from modder.storage import ArtifactStore, ProfileStore


class InstallStatus(Enum):
    INSTALLED = "installed"
    SKIPPED = "skipped"
    FAILED = "failed"


class BatchResult(Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILURE = "failure"


@dataclass
class InstallOptions:
    """安装选项"""

    add: bool = True
    update: bool = False
    version: Optional[str] = None
    loader: Optional[str] = None


@dataclass
class InstallOutcome:
    slug: str
    status: InstallStatus
    reason: str = ""


@dataclass
class InstallReport:
    """一次安装批次的结果，不持久化"""

    requested: List[str]
    outcomes: List[InstallOutcome] = field(default_factory=list)
    aborted: bool = False
    projection_errors: List[str] = field(default_factory=list)

    def _with_status(self, status: InstallStatus) -> List[InstallOutcome]:
        return [o for o in self.outcomes if o.status is status]

    @property
    def installed(self) -> List[InstallOutcome]:
        return self._with_status(InstallStatus.INSTALLED)

    @property
    def skipped(self) -> List[InstallOutcome]:
        return self._with_status(InstallStatus.SKIPPED)

    @property
    def failed(self) -> List[InstallOutcome]:
        return self._with_status(InstallStatus.FAILED)

    @property
    def not_attempted(self) -> List[str]:
        """批次中止后未处理的模组"""
        return self.requested[len(self.outcomes):]

    @property
    def result(self) -> BatchResult:
        # 中止后未处理的模组不算失败
        if self.failed and len(self.failed) == len(self.requested):
            return BatchResult.FAILURE
        if self.failed:
            return BatchResult.PARTIAL
        return BatchResult.SUCCESS


class Installer:
    """安装器，作用于当前选中的配置档"""

    def __init__(
        self,
        profile_name: str,
        resolver: ModResolver,
        downloader: DownloadManager,
        optifine: OptifineFetcher,
        artifacts: ArtifactStore,
        profiles: ProfileStore,
        projector: LinkProjector,
    ):
        self.profile_name = profile_name
        self.resolver = resolver
        self.downloader = downloader
        self.optifine = optifine
        self.artifacts = artifacts
        self.profiles = profiles
        self.projector = projector
        self._report: Optional[InstallReport] = None

    async def install(
        self, slugs: Iterable[str], options: Optional[InstallOptions] = None
    ) -> InstallReport:
        """
        安装一批模组

        单个模组失败不会中止批次；项目不支持客户端时按原有行为中止剩余的模组。

        Args:
            slugs: 模组 slug 列表，按顺序处理
            options: 安装选项

        Returns:
            InstallReport
        """
        options = options or InstallOptions()
        profile = self.profiles.load(self.profile_name)
        game_version = options.version or profile.version
        loader = options.loader or profile.loader

        report = InstallReport(requested=list(slugs))
        self._report = report

        for slug in report.requested:
            logger.info(f"Installing {slug}")
            try:
                outcome = await self._install_one(slug, game_version, loader, options)
            except ClientUnsupportedError as e:
                logger.error(str(e))
                report.outcomes.append(
                    InstallOutcome(slug, InstallStatus.FAILED, str(e))
                )
                report.aborted = True
                break
            except (CatalogError, DownloadError) as e:
                outcome = InstallOutcome(slug, InstallStatus.FAILED, str(e))

            if outcome.status is InstallStatus.INSTALLED:
                logger.success(f"Installed {slug}")
            elif outcome.status is InstallStatus.SKIPPED:
                logger.info(f"Skipped {slug}: {outcome.reason}")
            else:
                logger.error(outcome.reason)
            report.outcomes.append(outcome)

        self._report = None
        return report

    async def _install_one(
        self, slug: str, game_version: str, loader: str, options: InstallOptions
    ) -> InstallOutcome:
        if slug == OPTIFINE_SLUG:
            return await self._install_optifine(game_version, loader, options)

        resolved = await self.resolver.resolve(slug, game_version, loader)
        key = ArtifactKey(slug, game_version, loader)

        if self.artifacts.exists(key, Pool.MODS):
            if options.update:
                self.artifacts.delete(key, Pool.MODS)
            elif options.add:
                self._add_to_profile(slug)
                return InstallOutcome(slug, InstallStatus.SKIPPED, "already installed")
            else:
                return InstallOutcome(
                    slug,
                    InstallStatus.SKIPPED,
                    "Mod already installed and not added to profile",
                )

        data = await self.downloader.fetch(
            resolved.file.url,
            filename=resolved.file.filename,
            expected_size=resolved.file.size or None,
        )
        await self.artifacts.write(key, Pool.MODS, data)

        if options.add:
            self._add_to_profile(slug)
        return InstallOutcome(slug, InstallStatus.INSTALLED)

    async def _install_optifine(
        self, game_version: str, loader: str, options: InstallOptions
    ) -> InstallOutcome:
        if loader != ModLoader.FORGE.value:
            return InstallOutcome(
                OPTIFINE_SLUG,
                InstallStatus.FAILED,
                "Optifine is only compatible with Forge.",
            )

        data = await self.optifine.fetch(game_version)
        key = ArtifactKey(OPTIFINE_SLUG, game_version, ModLoader.FORGE.value)
        await self.artifacts.write(key, Pool.MODS, data)

        if options.add:
            self._add_to_profile(OPTIFINE_SLUG)
        return InstallOutcome(OPTIFINE_SLUG, InstallStatus.INSTALLED)

    def _add_to_profile(self, slug: str) -> None:
        """把模组加入当前配置档（已存在则不重复），然后重新投影"""
        profile = self.profiles.load(self.profile_name)
        if profile.add_mod(slug):
            self.profiles.save(self.profile_name, profile)
            logger.info(f"Added {slug} to profile '{self.profile_name}'")

        try:
            self.projector.project(self.profile_name)
        except ReconciliationError as e:
            logger.error(str(e))
            if self._report is not None:
                self._report.projection_errors.append(str(e))
