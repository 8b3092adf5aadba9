"""
下载内容校验

只做大小检查：内容不能为空，且与目录或 Content-Length 给出的大小一致。
不做哈希校验。
"""

from typing import Optional

from modder.exceptions import DownloadSizeError


class SizeVerifier:
    """下载大小校验器"""

    @staticmethod
    def verify(
        filename: str,
        data: bytes,
        expected_size: Optional[int] = None,
        content_length: Optional[int] = None,
    ) -> None:
        """
        校验下载内容

        Args:
            filename: 文件名（用于错误信息）
            data: 下载到的内容
            expected_size: 目录给出的文件大小，0 或 None 表示未知
            content_length: 响应头中的 Content-Length

        Raises:
            DownloadSizeError: 内容为空或大小不一致
        """
        size = len(data)
        if size == 0:
            raise DownloadSizeError(
                f"Downloaded file {filename} is empty", context={"file": filename}
            )

        for label, expected in (
            ("catalog size", expected_size),
            ("Content-Length", content_length),
        ):
            if expected and size != expected:
                raise DownloadSizeError(
                    f"Downloaded file {filename} is {size} bytes, "
                    f"{label} says {expected}",
                    context={"file": filename, "size": size, "expected": expected},
                )
