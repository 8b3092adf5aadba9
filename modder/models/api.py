"""
API 数据模型

定义 Modrinth API 相关的数据类，包括项目信息、版本信息等。
"""

from dataclasses import dataclass
from typing import Optional, List


@dataclass
class ProjectInfo:
    """
    模组项目信息。
    """

    id: str
    slug: str
    title: str
    description: str
    project_type: str
    client_side: str
    server_side: str

    @classmethod
    def from_modrinth(cls, data: dict) -> "ProjectInfo":
        return cls(
            id=data.get("id", ""),
            slug=data.get("slug", ""),
            title=data.get("title", data.get("slug", "")),
            description=data.get("description", ""),
            project_type=data.get("project_type", "mod"),
            client_side=data.get("client_side", "unknown"),
            server_side=data.get("server_side", "unknown"),
        )


@dataclass
class FileInfo:
    """文件信息"""

    url: str
    filename: str
    size: int
    primary: bool = False

    @classmethod
    def from_modrinth(cls, data: dict) -> "FileInfo":
        return cls(
            url=data["url"],
            filename=data.get("filename", ""),
            size=data.get("size", 0),
            primary=data.get("primary", False),
        )


@dataclass
class VersionInfo:
    """
    模组版本（发布）信息。
    """

    id: str
    name: str
    version: str
    loaders: List[str]
    game_versions: List[str]
    files: List[FileInfo]

    @classmethod
    def from_modrinth(cls, data: dict) -> "VersionInfo":
        """
        将 Modrinth API 返回的版本信息转换为 VersionInfo 对象。
        """
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            version=data.get("version_number", ""),
            loaders=data.get("loaders", []),
            game_versions=data.get("game_versions", []),
            files=[FileInfo.from_modrinth(f) for f in data.get("files", [])],
        )

    def supports(self, game_version: str, loader: str) -> bool:
        return game_version in self.game_versions and loader in self.loaders

    def primary_file(self) -> Optional[FileInfo]:
        """主文件，没有标记主文件时取第一个"""
        if not self.files:
            return None
        for file in self.files:
            if file.primary:
                return file
        return self.files[0]


@dataclass
class SearchHit:
    """搜索结果条目"""

    slug: str
    title: str
    author: str
    description: str
    downloads: int
    follows: int
    project_type: str
    client_side: Optional[str] = None
    server_side: Optional[str] = None

    @classmethod
    def from_modrinth(cls, data: dict) -> "SearchHit":
        return cls(
            slug=data.get("slug", ""),
            title=data.get("title", ""),
            author=data.get("author", ""),
            description=data.get("description", ""),
            downloads=data.get("downloads", 0),
            follows=data.get("follows", 0),
            project_type=data.get("project_type", ""),
            client_side=data.get("client_side"),
            server_side=data.get("server_side"),
        )


@dataclass
class ResolvedMod:
    """目录解析结果：项目、匹配的发布以及要下载的文件"""

    project: ProjectInfo
    version: VersionInfo
    file: FileInfo
