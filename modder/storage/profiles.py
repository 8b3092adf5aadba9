"""
配置档存储

每个配置档保存为 profiles/<name>.json。每次 load 都重新读取磁盘，没有缓存，也没有加锁。
"""

import json
from pathlib import Path
from typing import List

from loguru import logger

from modder.exceptions import ConfigError, ProfileNotFoundError, UserError
from modder.models import Profile


def validate_profile_name(name: str) -> None:
    """配置档名直接用作文件名，不能包含路径分隔符或以点开头"""
    if not name or name.startswith(".") or any(c in name for c in '/\\:*?"<>|'):
        raise UserError(f"'{name}' is not a valid profile name.")


class ProfileStore:
    """配置档存储"""

    def __init__(self, root: Path):
        self.root = Path(root)

    @property
    def profiles_dir(self) -> Path:
        path = self.root / "profiles"
        path.mkdir(parents=True, exist_ok=True)
        return path

    def path(self, name: str) -> Path:
        validate_profile_name(name)
        return self.profiles_dir / f"{name}.json"

    def exists(self, name: str) -> bool:
        return self.path(name).is_file()

    def load(self, name: str) -> Profile:
        path = self.path(name)
        if not path.is_file():
            raise ProfileNotFoundError(name)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Cannot parse profile {path}: {e}") from e
        return Profile.from_dict(data)

    def save(self, name: str, profile: Profile) -> None:
        path = self.path(name)
        path.write_text(json.dumps(profile.to_dict(), indent=2), encoding="utf-8")
        logger.debug(f"Wrote profile {path}")

    def delete(self, name: str) -> None:
        path = self.path(name)
        if not path.is_file():
            raise ProfileNotFoundError(name)
        path.unlink()

    def list_names(self) -> List[str]:
        return sorted(
            p.stem for p in self.profiles_dir.glob("*.json") if not p.name.startswith(".")
        )
