"""
Shared fixtures and fakes for the modder test suite.
"""

import pytest
from loguru import logger

from modder.core import Modder
from modder.installer import Installer
from modder.models import ArtifactKey, Config, Pool, Profile, ProjectInfo, VersionInfo, FileInfo
from modder.models.config import save_config
from modder.exceptions import DownloadNetworkError


@pytest.fixture(autouse=True)
def quiet_logger():
    """Drop loguru handlers so tests never write to streams pytest has closed."""
    logger.remove()
    yield
    logger.remove()


@pytest.fixture
def home(tmp_path, monkeypatch):
    path = tmp_path / "home"
    path.mkdir()
    monkeypatch.setenv("MODDER_HOME", str(path))
    return path


@pytest.fixture
def mods_dir(tmp_path):
    path = tmp_path / "minecraft" / "mods"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def config(home, mods_dir):
    cfg = Config(mods_dir=str(mods_dir), path=home / "config.json")
    save_config(cfg)
    return cfg


@pytest.fixture
def app(config, home):
    return Modder(config, home)


def add_profile(app, name, version="1.20.1", loader="fabric", mods=(), libs=(), fork=None):
    profile = Profile(version=version, loader=loader, mods=list(mods), libs=list(libs), fork=fork)
    app.profiles.save(name, profile)
    return profile


def add_artifact(app, slug, version="1.20.1", loader="fabric", pool=Pool.MODS, data=b"jar"):
    path = app.artifacts.path(ArtifactKey(slug, version, loader), pool)
    path.write_bytes(data)
    return path


def listing(path):
    return sorted(p.name for p in path.iterdir())


# ── catalog fakes ────────────────────────────────────────────────────────────

def make_project(slug, title=None, client_side="required"):
    return ProjectInfo(
        id=f"id-{slug}",
        slug=slug,
        title=title or slug.capitalize(),
        description="",
        project_type="mod",
        client_side=client_side,
        server_side="optional",
    )


def make_version(slug, game_versions=("1.20.1",), loaders=("fabric",), files=None):
    if files is None:
        files = [FileInfo(url=f"https://cdn.test/{slug}.jar", filename=f"{slug}.jar", size=0, primary=True)]
    return VersionInfo(
        id=f"v-{slug}",
        name=slug,
        version="1.0.0",
        loaders=list(loaders),
        game_versions=list(game_versions),
        files=files,
    )


class FakeCatalog:
    """In-memory stand-in for ModrinthClient that filters like the real API."""

    def __init__(self):
        self.projects = {}
        self.versions = {}
        self.errors = {}
        self.calls = []

    def add(self, project, *versions):
        self.projects[project.slug] = project
        self.versions[project.slug] = list(versions)

    async def get_project(self, slug):
        self.calls.append(("project", slug))
        if slug in self.errors:
            raise self.errors[slug]
        return self.projects.get(slug)

    async def get_versions(self, slug, loader=None, game_version=None):
        self.calls.append(("versions", slug, loader, game_version))
        return [
            v
            for v in self.versions.get(slug, [])
            if (loader is None or loader in v.loaders)
            and (game_version is None or game_version in v.game_versions)
        ]


class FakeDownloader:
    def __init__(self, payloads=None, fail=()):
        self.payloads = payloads or {}
        self.fail = set(fail)
        self.fetched = []

    async def fetch(self, url, filename=None, expected_size=None):
        self.fetched.append(url)
        if url in self.fail:
            raise DownloadNetworkError(f"Download of {filename} failed: HTTP 500")
        return self.payloads.get(url, b"downloaded:" + url.encode())


class FakeOptifine:
    def __init__(self, data=b"optifine"):
        self.data = data
        self.versions = []

    async def fetch(self, game_version):
        self.versions.append(game_version)
        return self.data


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def downloader():
    return FakeDownloader()


@pytest.fixture
def optifine():
    return FakeOptifine()


@pytest.fixture
def make_installer(app, catalog, downloader, optifine):
    from modder.services import ModResolver

    def factory(profile_name=None):
        return Installer(
            profile_name=profile_name or app.config.selected_profile,
            resolver=ModResolver(catalog),
            downloader=downloader,
            optifine=optifine,
            artifacts=app.artifacts,
            profiles=app.profiles,
            projector=app.projector,
        )

    return factory
