"""
日志模块

使用 loguru 提供统一的日志记录功能。
"""

import os
import sys
from typing import Optional

from loguru import logger


# 普通输出给 CLI 用户看，调试时带上时间和调用位置
INFO_FORMAT = "<level>{level: <8}</level> | {message}"
DEBUG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - {message}"
)


def setup_logger(
    level: Optional[str] = None,
    sink=None,
    colorize: Optional[bool] = None,
) -> None:
    """
    设置日志记录器

    Args:
        level: 日志级别 (DEBUG, INFO, WARNING, ERROR)，默认由 MODDER_DEBUG 决定
        sink: 输出目标，默认为调用时的 sys.stderr
        colorize: 是否启用颜色，None 时由 loguru 根据终端判断
    """
    if level is None:
        level = "DEBUG" if os.environ.get("MODDER_DEBUG", "0") == "1" else "INFO"
    debug = level == "DEBUG"

    logger.remove()
    logger.add(
        sink=sink if sink is not None else sys.stderr,
        format=DEBUG_FORMAT if debug else INFO_FORMAT,
        level=level,
        colorize=colorize,
        backtrace=debug,
        diagnose=debug,
    )

    if debug:
        logger.debug("DEBUG mode enabled")


__all__ = ["logger", "setup_logger", "INFO_FORMAT", "DEBUG_FORMAT"]
