"""
Tests for the artifact store, profile store and the config/profile models.
"""

import asyncio
import json

import pytest

from modder.exceptions import ConfigError, ProfileNotFoundError, StorageError, UserError
from modder.models import ArtifactKey, Config, Pool, Profile, load_config
from modder.models.config import save_config
from modder.storage import ArtifactStore, ProfileStore


# ── ArtifactKey ──────────────────────────────────────────────────────────────

def test_artifact_filename_keeps_hyphenated_slug():
    key = ArtifactKey("fabric-api", "1.20.1", "fabric")

    assert key.filename == "fabric-api-1.20.1-fabric.jar"
    assert ArtifactKey.from_filename(key.filename) == key


@pytest.mark.parametrize("name", ["notes.txt", "sodium.jar", "sodium-fabric.jar", "a.jar.part"])
def test_non_artifact_filenames(name):
    assert ArtifactKey.from_filename(name) is None


# ── ArtifactStore ────────────────────────────────────────────────────────────

def test_artifact_store_lifecycle(tmp_path):
    store = ArtifactStore(tmp_path)
    key = ArtifactKey("sodium", "1.20.1", "fabric")

    assert not store.exists(key, Pool.MODS)
    path = asyncio.run(store.write(key, Pool.MODS, b"v1"))
    asyncio.run(store.write(key, Pool.MODS, b"v2"))

    assert path == tmp_path / "mods" / "sodium-1.20.1-fabric.jar"
    assert path.read_bytes() == b"v2"
    assert store.exists(key, Pool.MODS)
    assert not store.exists(key, Pool.LIBS)
    assert not path.with_name(path.name + ".part").exists()

    assert store.delete(key, Pool.MODS)
    assert not store.delete(key, Pool.MODS)
    assert not store.exists(key, Pool.MODS)


def test_list_all_ignores_foreign_files(tmp_path):
    store = ArtifactStore(tmp_path)
    asyncio.run(store.write(ArtifactKey("sodium", "1.20.1", "fabric"), Pool.MODS, b"x"))
    asyncio.run(store.write(ArtifactKey("fabric-api", "1.20.1", "fabric"), Pool.LIBS, b"x"))
    (tmp_path / "mods" / "README.txt").write_text("hi")

    assert store.list_all(Pool.MODS) == [ArtifactKey("sodium", "1.20.1", "fabric")]
    assert store.count(Pool.LIBS) == 1


def test_failed_write_leaves_no_partial_file(tmp_path):
    store = ArtifactStore(tmp_path)
    key = ArtifactKey("sodium", "1.20.1", "fabric")
    store.path(key, Pool.MODS).mkdir()
    (store.path(key, Pool.MODS) / "keep").write_text("x")

    with pytest.raises(StorageError) as exc:
        asyncio.run(store.write(key, Pool.MODS, b"jar"))

    assert exc.value.code == "E500"
    assert isinstance(exc.value.__cause__, OSError)
    assert not (tmp_path / "mods" / "sodium-1.20.1-fabric.jar.part").exists()
    assert store.list_all(Pool.MODS) == []


# ── ProfileStore ─────────────────────────────────────────────────────────────

def test_profile_store_round_trip(tmp_path):
    store = ProfileStore(tmp_path)
    store.save("demo", Profile(version="1.20.1", loader="fabric", mods=["sodium"]))

    data = json.loads((tmp_path / "profiles" / "demo.json").read_text())
    assert data == {"version": "1.20.1", "loader": "fabric", "mods": ["sodium"], "libs": []}
    assert store.load("demo").mods == ["sodium"]
    assert store.list_names() == ["demo"]

    store.delete("demo")
    assert store.list_names() == []


def test_profile_store_missing(tmp_path):
    store = ProfileStore(tmp_path)

    with pytest.raises(ProfileNotFoundError):
        store.load("nope")
    with pytest.raises(ProfileNotFoundError):
        store.delete("nope")


def test_profile_load_drops_duplicates_and_reads_fork(tmp_path):
    store = ProfileStore(tmp_path)
    store.path("demo").write_text(
        json.dumps(
            {
                "version": "1.20.1",
                "loader": "fabric",
                "mods": ["sodium", "iris", "sodium"],
                "libs": [],
                "fork": ["base"],
            }
        )
    )

    profile = store.load("demo")

    assert profile.mods == ["sodium", "iris"]
    assert profile.fork == ["base"]
    assert profile.to_dict()["fork"] == ["base"]


def test_profile_membership_helpers():
    profile = Profile(version="1.20.1", loader="fabric", mods=["sodium"], libs=["fabric-api"])

    assert not profile.add_mod("sodium")
    assert profile.add_mod("iris")
    assert profile.mods == ["sodium", "iris"]
    assert profile.uses("fabric-api")
    assert profile.remove("fabric-api")
    assert not profile.remove("fabric-api")


@pytest.mark.parametrize("name", ["../config", ".hidden", "a\\b", ""])
def test_profile_store_rejects_path_names(tmp_path, name):
    store = ProfileStore(tmp_path)

    with pytest.raises(UserError, match="not a valid profile name"):
        store.path(name)


def test_invalid_profile_file(tmp_path):
    store = ProfileStore(tmp_path)
    store.path("broken").write_text("{not json")
    store.path("partial").write_text('{"mods": []}')

    with pytest.raises(ConfigError):
        store.load("broken")
    with pytest.raises(ConfigError, match="version"):
        store.load("partial")


# ── Config ───────────────────────────────────────────────────────────────────

def test_first_run_creates_config(tmp_path, monkeypatch):
    monkeypatch.setattr("modder.models.config.default_mods_dir", lambda: "/games/mods")

    config = load_config(tmp_path)

    assert config.selected_profile is None
    assert config.mods_dir == "/games/mods"
    assert json.loads((tmp_path / "config.json").read_text()) == {
        "selected_profile": None,
        "mods_dir": "/games/mods",
    }


def test_config_keeps_custom_settings(tmp_path):
    (tmp_path / "config.json").write_text(
        json.dumps({"selected_profile": "demo", "mods_dir": "/m", "timeout": 5})
    )

    config = load_config(tmp_path)
    config.selected_profile = None
    save_config(config)

    assert config.timeout == 5.0
    assert json.loads((tmp_path / "config.json").read_text()) == {
        "selected_profile": None,
        "mods_dir": "/m",
        "timeout": 5.0,
    }


def test_invalid_config(tmp_path):
    (tmp_path / "config.json").write_text("[]")

    with pytest.raises(ConfigError):
        load_config(tmp_path)

    with pytest.raises(ConfigError):
        Config.from_dict({"mods_dir": "/m", "max_retries": "many"})
