"""
配置模型

进程级配置（当前配置档、客户端 mods 目录）及其读写。
"""

import json
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from modder import __version__
from modder.exceptions import ConfigError
from modder.utils import default_mods_dir

MODRINTH_BASE_URL = "https://api.modrinth.com/v2"
DEFAULT_USER_AGENT = f"modder/{__version__}"
CONFIG_FILENAME = "config.json"


class ModLoader(Enum):
    """模组加载器"""

    FORGE = "forge"
    FABRIC = "fabric"
    QUILT = "quilt"
    NEOFORGE = "neoforge"

    @classmethod
    def values(cls) -> list[str]:
        return [loader.value for loader in cls]


@dataclass
class Config:
    """进程级配置，启动时加载一次并传递给各组件"""

    mods_dir: str
    selected_profile: Optional[str] = None
    api_url: str = MODRINTH_BASE_URL
    timeout: float = 30.0
    max_retries: int = 2
    retry_delay: float = 1.0
    user_agent: str = DEFAULT_USER_AGENT
    path: Optional[Path] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], path: Optional[Path] = None) -> "Config":
        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a JSON object")

        selected = data.get("selected_profile")
        if selected is not None and not isinstance(selected, str):
            raise ConfigError("'selected_profile' must be a string or null")

        try:
            return cls(
                mods_dir=str(data.get("mods_dir", "")),
                selected_profile=selected,
                api_url=data.get("api_url", MODRINTH_BASE_URL),
                timeout=float(data.get("timeout", 30.0)),
                max_retries=int(data.get("max_retries", 2)),
                retry_delay=float(data.get("retry_delay", 1.0)),
                user_agent=data.get("user_agent", DEFAULT_USER_AGENT),
                path=path,
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid config value: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "selected_profile": self.selected_profile,
            "mods_dir": self.mods_dir,
        }
        # 只写回用户修改过的可选项
        defaults = {
            "api_url": MODRINTH_BASE_URL,
            "timeout": 30.0,
            "max_retries": 2,
            "retry_delay": 1.0,
            "user_agent": DEFAULT_USER_AGENT,
        }
        for key, default in defaults.items():
            value = getattr(self, key)
            if value != default:
                data[key] = value
        return data


def get_home() -> Path:
    """modder 工作目录，可通过 MODDER_HOME 覆盖"""
    home = os.environ.get("MODDER_HOME")
    if home:
        return Path(home).expanduser()
    return Path.home() / ".modder"


def load_config(home: Optional[Path] = None) -> Config:
    """
    加载配置文件，首次运行时以平台默认的 mods 目录创建

    Args:
        home: 工作目录，默认为 get_home()

    Returns:
        Config 实例
    """
    home = home or get_home()
    path = home / CONFIG_FILENAME

    if not path.exists():
        config = Config(mods_dir=default_mods_dir(), path=path)
        save_config(config)
        logger.debug(f"Created config file {path}")
        return config

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Cannot parse {path}: {e}") from e

    return Config.from_dict(data, path=path)


def save_config(config: Config) -> None:
    """写回配置文件"""
    if config.path is None:
        config.path = get_home() / CONFIG_FILENAME
    config.path.parent.mkdir(parents=True, exist_ok=True)
    config.path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
