"""
下载管理器

顺序下载单个文件到内存，带重试、指数退避和大小校验。
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

import aiohttp
from loguru import logger

from modder.download.verifier import SizeVerifier
from modder.exceptions import DownloadError, DownloadNetworkError


@dataclass
class DownloadStats:
    """下载统计"""

    completed: int = 0
    failed: int = 0
    retries: int = 0
    bytes_downloaded: int = 0


class DownloadManager:
    """下载管理器"""

    def __init__(
        self,
        max_retries: int = 2,
        retry_delay: float = 1.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.verifier = SizeVerifier()
        self.stats = DownloadStats()
        self._session = session
        self._owned_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owned_session = True
        return self._session

    async def _get(self, url: str) -> tuple[bytes, Optional[int]]:
        async with self.session.get(url) as response:
            if response.status != 200:
                raise DownloadNetworkError(
                    f"HTTP {response.status}",
                    context={"url": url, "status": response.status},
                )
            # 压缩传输时 Content-Length 是压缩后的大小
            content_length = (
                None
                if response.headers.get("Content-Encoding")
                else response.content_length
            )
            chunks = []
            async for chunk in response.content.iter_chunked(8192):
                chunks.append(chunk)
            return b"".join(chunks), content_length

    async def fetch(
        self,
        url: str,
        filename: Optional[str] = None,
        expected_size: Optional[int] = None,
    ) -> bytes:
        """
        下载单个文件

        Args:
            url: 下载地址
            filename: 文件名（用于日志）
            expected_size: 预期大小，未知时为 None

        Returns:
            文件内容

        Raises:
            DownloadError: 重试后仍然失败
        """
        filename = filename or url.rsplit("/", 1)[-1]
        logger.info(f"Downloading {filename}")

        for attempt in range(self.max_retries + 1):
            try:
                data, content_length = await self._get(url)
                self.verifier.verify(filename, data, expected_size, content_length)
            except (DownloadError, aiohttp.ClientError, asyncio.TimeoutError) as e:
                reason = str(e) or type(e).__name__
                if attempt < self.max_retries:
                    delay = self.retry_delay * (2**attempt)
                    self.stats.retries += 1
                    logger.warning(
                        f"Downloading {filename} failed (attempt {attempt + 1}): "
                        f"{reason}. Retrying in {delay:.1f}s..."
                    )
                    await asyncio.sleep(delay)
                    continue

                self.stats.failed += 1
                logger.error(f"Downloading {filename} failed: {reason}")
                if isinstance(e, DownloadError):
                    raise
                raise DownloadNetworkError(
                    f"Download of {filename} failed: {reason}",
                    context={"url": url},
                ) from e

            self.stats.completed += 1
            self.stats.bytes_downloaded += len(data)
            logger.debug(f"Downloaded {filename} ({len(data) / (1024 * 1024):.2f} MB)")
            return data

        # max_retries < 0
        raise DownloadError(f"Download of {filename} was not attempted")

    async def close(self):
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()
