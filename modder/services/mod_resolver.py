"""
模组解析服务

将 (slug, 游戏版本, 加载器) 解析为具体的发布与下载文件。
"""

from loguru import logger

from modder.models import ResolvedMod
from modder.services.api_client import ModrinthClient
from modder.exceptions import (
    ClientUnsupportedError,
    LoaderUnsupportedError,
    NoFileAvailableError,
    ProjectNotFoundError,
    VersionUnsupportedError,
)


class ModResolver:
    """模组解析器"""

    def __init__(self, client: ModrinthClient):
        self.client = client

    async def resolve(self, slug: str, game_version: str, loader: str) -> ResolvedMod:
        """
        解析模组

        依次检查：项目存在且支持客户端、存在支持该加载器的发布、
        存在支持该游戏版本的发布，再取两者同时匹配的最新发布及其主文件。

        Raises:
            ProjectNotFoundError: 项目不存在
            ClientUnsupportedError: 项目不支持客户端
            LoaderUnsupportedError: 没有支持该加载器的发布
            VersionUnsupportedError: 没有支持该游戏版本（及加载器组合）的发布
            NoFileAvailableError: 匹配的发布没有任何文件
        """
        project = await self.client.get_project(slug)
        if project is None:
            raise ProjectNotFoundError(f"{slug} was not found on Modrinth", slug)

        title = project.title
        if project.client_side == "unsupported":
            raise ClientUnsupportedError(
                f"{title} is not available for the minecraft client.", slug
            )

        by_loader = await self.client.get_versions(slug, loader=loader)
        if not any(loader in v.loaders for v in by_loader):
            raise LoaderUnsupportedError(f"{title} does not support {loader}", slug)

        by_game_version = await self.client.get_versions(slug, game_version=game_version)
        if not any(game_version in v.game_versions for v in by_game_version):
            raise VersionUnsupportedError(
                f"{title} does not support {game_version}", slug
            )

        candidates = await self.client.get_versions(
            slug, loader=loader, game_version=game_version
        )
        release = next(
            (v for v in candidates if v.supports(game_version, loader)), None
        )
        if release is None:
            raise VersionUnsupportedError(
                f"{title} does not support {game_version} on {loader}", slug
            )

        file = release.primary_file()
        if file is None:
            raise NoFileAvailableError(
                f"{title} does not have a file for {game_version}", slug
            )

        logger.debug(f"Resolved {slug} -> {release.version} ({file.filename})")
        return ResolvedMod(project=project, version=release, file=file)
