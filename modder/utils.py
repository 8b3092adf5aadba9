import os
import platform
from pathlib import Path

from loguru import logger


def default_mods_dir() -> str:
    """按平台推导 Minecraft 客户端的 mods 目录"""
    system = platform.system()
    if system == "Windows":
        return os.environ.get("APPDATA", "") + "/.minecraft/mods"
    if system == "Darwin":
        return str(Path.home() / "Library" / "Application Support" / "minecraft" / "mods")
    if system == "Linux":
        return str(Path.home() / ".minecraft" / "mods")
    logger.warning(
        "Platform not known, please set the mods directory in config.json manually"
    )
    return ""


def plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"
