"""
OptiFine 下载

OptiFine 不在 Modrinth 上发布，只能从 optifine.net 的下载页面抓取：
版本列表页 -> 镜像页 -> 下载按钮。
"""

import asyncio
import html
import re
from typing import Optional
from urllib.parse import urljoin

import aiohttp
from loguru import logger

from modder.download import DownloadManager
from modder.exceptions import DownloadError, SpecialArtifactError

OPTIFINE_URL = "https://optifine.net"
OPTIFINE_SLUG = "optifine"

# 属性值可以是单引号或双引号，class 可以是多个类名
_DOWNLOAD_LINE = re.compile(
    r"<tr\b[^>]*\bclass=(['\"])[^'\"]*\bdownloadLine\b[^'\"]*\1[^>]*>.*?"
    r"<td\b[^>]*\bclass=(['\"])[^'\"]*\bcolDownload\b[^'\"]*\2[^>]*>\s*"
    r"<a\b[^>]*\bhref=(['\"])(?P<href>.*?)\3",
    re.S | re.I,
)
_DOWNLOAD_BUTTON = re.compile(
    r"\bclass=(['\"])[^'\"]*\bdownloadButton\b[^'\"]*\1[^>]*>.*?"
    r"<a\b[^>]*\bhref=(['\"])(?P<href>.*?)\2",
    re.S | re.I,
)
_SECTION_END = re.compile(r"<h2\b", re.I)


def find_download_link(page: str, game_version: str) -> Optional[str]:
    """在版本列表页中找到指定游戏版本的第一个下载链接，只在该版本的标题下查找"""
    heading = re.search(
        rf"<h2[^>]*>\s*Minecraft {re.escape(game_version)}\s*</h2>", page
    )
    if heading is None:
        return None
    end = _SECTION_END.search(page, heading.end())
    section = page[heading.end():end.start() if end else len(page)]
    match = _DOWNLOAD_LINE.search(section)
    if match is None:
        return None
    return html.unescape(match.group("href"))


def mirror_url(link: str) -> str:
    """去掉广告跳转参数，得到镜像页地址"""
    path = link.split("optifine.net", 1)[-1].split("&x=", 1)[0]
    return urljoin(OPTIFINE_URL + "/", path.lstrip("/"))


def find_mirror_download(page: str) -> Optional[str]:
    """在镜像页中找到下载按钮的链接"""
    match = _DOWNLOAD_BUTTON.search(page)
    if match is None:
        return None
    return urljoin(OPTIFINE_URL + "/", html.unescape(match.group("href")))


class OptifineFetcher:
    """OptiFine 获取器"""

    def __init__(self, downloader: DownloadManager):
        self.downloader = downloader

    async def _get_text(self, url: str) -> str:
        try:
            async with self.downloader.session.get(url) as response:
                if response.status != 200:
                    raise SpecialArtifactError(
                        f"optifine.net returned HTTP {response.status}",
                        OPTIFINE_SLUG,
                        context={"url": url},
                    )
                return await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SpecialArtifactError(
                f"Cannot reach optifine.net: {str(e) or type(e).__name__}",
                OPTIFINE_SLUG,
                context={"url": url},
            ) from e

    async def fetch(self, game_version: str) -> bytes:
        """
        下载指定游戏版本的 OptiFine

        Raises:
            SpecialArtifactError: 页面中找不到对应版本或下载失败
        """
        logger.info("Fetching optifine versions")
        versions_page = await self._get_text(f"{OPTIFINE_URL}/downloads")
        link = find_download_link(versions_page, game_version)
        if link is None:
            raise SpecialArtifactError(
                f"OptiFine is not available for {game_version}", OPTIFINE_SLUG
            )

        logger.info("Fetching optifine download")
        mirror_page = await self._get_text(mirror_url(link))
        download_url = find_mirror_download(mirror_page)
        if download_url is None:
            raise SpecialArtifactError(
                "Cannot find the OptiFine download button", OPTIFINE_SLUG
            )

        try:
            return await self.downloader.fetch(
                download_url, filename=f"OptiFine {game_version}"
            )
        except DownloadError as e:
            raise SpecialArtifactError(str(e), OPTIFINE_SLUG) from e
