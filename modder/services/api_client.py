"""
API 客户端

Modrinth v2 API 的只读查询：项目、版本列表与搜索。
"""

import asyncio
from typing import List, Optional

import aiohttp
from loguru import logger

from modder.models import Config, ProjectInfo, SearchHit, VersionInfo
from modder.models.config import DEFAULT_USER_AGENT, MODRINTH_BASE_URL
from modder.exceptions import APIError, CatalogNetworkError


def create_session(config: Config) -> aiohttp.ClientSession:
    """按配置创建共享的 aiohttp session（User-Agent 与总超时）"""
    return aiohttp.ClientSession(
        headers={"User-Agent": config.user_agent},
        timeout=aiohttp.ClientTimeout(total=config.timeout),
    )


class ModrinthClient:
    """Modrinth API 客户端"""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        base_url: str = MODRINTH_BASE_URL,
    ):
        self._session = session
        self._owned_session = session is None
        self.base_url = base_url.rstrip("/")

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": DEFAULT_USER_AGENT}
            )
            self._owned_session = True
        return self._session

    async def _request(self, endpoint: str, params: Optional[dict] = None):
        """
        发送 API 请求

        Returns:
            解析后的 JSON，资源不存在 (404) 时返回 None
        """
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"GET {url} {params or ''}")
        try:
            async with self.session.get(url, params=params) as response:
                if response.status == 200:
                    return await response.json()
                elif response.status == 404:
                    return None
                else:
                    raise APIError(
                        f"Modrinth API request failed (status {response.status})",
                        response=response,
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise CatalogNetworkError(
                f"Cannot reach Modrinth: {str(e) or type(e).__name__}",
                context={"url": url},
            ) from e

    async def get_project(self, slug: str) -> Optional[ProjectInfo]:
        """获取项目信息，项目不存在时返回 None"""
        response = await self._request(f"/project/{slug}")
        if response is None:
            return None
        return ProjectInfo.from_modrinth(response)

    async def get_versions(
        self,
        slug: str,
        loader: Optional[str] = None,
        game_version: Optional[str] = None,
    ) -> List[VersionInfo]:
        """
        获取项目的发布列表（按时间从新到旧）

        Args:
            slug: 项目 slug 或 ID
            loader: 仅返回支持该加载器的发布
            game_version: 仅返回支持该游戏版本的发布
        """
        params = {}
        if loader:
            params["loaders"] = f'["{loader}"]'
        if game_version:
            params["game_versions"] = f'["{game_version}"]'

        response = await self._request(f"/project/{slug}/version", params or None)
        if not response:
            return []
        return [VersionInfo.from_modrinth(v) for v in response]

    async def search(self, query: str, limit: int = 10) -> List[SearchHit]:
        """按关键字搜索，只返回模组类项目"""
        response = await self._request(
            "/search",
            {"index": "relevance", "query": query, "limit": str(limit)},
        )
        if not response:
            return []
        hits = [SearchHit.from_modrinth(hit) for hit in response.get("hits", [])]
        return [hit for hit in hits if hit.project_type == "mod"]

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()
