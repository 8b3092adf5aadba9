"""
构件存储

以 (slug, 游戏版本, 加载器) 为键，在 mods / libs 两个池中缓存下载的模组文件。
磁盘上的文件本身就是全部状态，没有额外的元数据记录。
"""

import os
from pathlib import Path
from typing import List

import aiofiles
from loguru import logger

from modder.exceptions import StorageError
from modder.models import ArtifactKey, Pool


class ArtifactStore:
    """构件存储"""

    def __init__(self, root: Path):
        self.root = Path(root)

    def pool_dir(self, pool: Pool) -> Path:
        path = self.root / pool.value
        path.mkdir(parents=True, exist_ok=True)
        return path

    def path(self, key: ArtifactKey, pool: Pool) -> Path:
        return self.pool_dir(pool) / key.filename

    def exists(self, key: ArtifactKey, pool: Pool) -> bool:
        return self.path(key, pool).is_file()

    async def write(self, key: ArtifactKey, pool: Pool, data: bytes) -> Path:
        """
        写入构件，已存在时覆盖

        先写入 .part 临时文件再重命名，中断的写入不会留下同名的残缺构件。
        """
        path = self.path(key, pool)
        tmp_path = path.with_name(path.name + ".part")
        try:
            async with aiofiles.open(tmp_path, "wb") as f:
                await f.write(data)
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path.exists():
                tmp_path.unlink()
            raise StorageError(
                f"Cannot write {path}: {e}", context={"path": str(path)}
            ) from e

        logger.debug(f"Stored {pool.value}/{key.filename} ({len(data)} bytes)")
        return path

    def delete(self, key: ArtifactKey, pool: Pool) -> bool:
        """删除构件，不存在时什么也不做"""
        path = self.path(key, pool)
        if not path.exists():
            return False
        path.unlink()
        logger.debug(f"Deleted {pool.value}/{key.filename}")
        return True

    def list_all(self, pool: Pool) -> List[ArtifactKey]:
        """列出池中所有构件键（按文件名排序）"""
        keys = []
        for entry in sorted(self.pool_dir(pool).iterdir()):
            if not entry.is_file():
                continue
            key = ArtifactKey.from_filename(entry.name)
            if key is None:
                logger.debug(f"Ignoring non-artifact file {entry}")
                continue
            keys.append(key)
        return keys

    def count(self, pool: Pool) -> int:
        return len(self.list_all(pool))
