"""
Tests for the click commands against a temporary MODDER_HOME.
"""

import json

import pytest
from click.testing import CliRunner

from modder.cli import main
from modder.models import ArtifactKey, Pool
from tests.conftest import add_artifact, add_profile, listing


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, *args):
    return runner.invoke(main, list(args), catch_exceptions=False)


def read_config(home):
    return json.loads((home / "config.json").read_text())


# ── profiles ─────────────────────────────────────────────────────────────────

def test_create_twice_is_rejected(runner, app, home):
    first = invoke(runner, "create", "demo", "1.20.1", "fabric")
    before = (home / "profiles" / "demo.json").read_text()
    second = invoke(runner, "create", "demo", "1.20.1", "fabric")

    assert first.exit_code == 0
    assert second.exit_code == 1
    assert "already exists" in second.output
    assert (home / "profiles" / "demo.json").read_text() == before


def test_create_rejects_unknown_loader(runner, app, home):
    result = invoke(runner, "create", "demo", "1.20.1", "rift")

    assert result.exit_code == 1
    assert "Unknown loader" in result.output
    assert not (home / "profiles" / "demo.json").exists()


def test_create_with_switch_and_fork(runner, app, home):
    invoke(runner, "create", "base", "1.20.1", "fabric")
    result = invoke(runner, "create", "demo", "1.20.1", "fabric", "--switch", "--fork", "base")

    assert result.exit_code == 0
    assert read_config(home)["selected_profile"] == "demo"
    assert json.loads((home / "profiles" / "demo.json").read_text())["fork"] == ["base"]


def test_switch_projects_profile(runner, app, home, mods_dir):
    add_profile(app, "demo", mods=["sodium"])
    add_artifact(app, "sodium")

    result = invoke(runner, "switch", "demo")

    assert result.exit_code == 0
    assert read_config(home)["selected_profile"] == "demo"
    assert listing(mods_dir) == ["sodium-1.20.1-fabric.jar"]

    invoke(runner, "switch")
    assert read_config(home)["selected_profile"] is None
    assert listing(mods_dir) == []


def test_switch_to_unknown_profile(runner, app, home):
    result = invoke(runner, "switch", "nope")

    assert result.exit_code == 1
    assert "Did you mean to create it?" in result.output
    assert read_config(home)["selected_profile"] is None


def test_switch_reports_missing_artifact(runner, app, home):
    add_profile(app, "demo", mods=["sodium"])

    result = invoke(runner, "switch", "demo")

    assert result.exit_code == 1
    assert "does not exist on disk" in result.output


def test_delete_selected_profile_is_rejected(runner, app, home):
    add_profile(app, "demo")
    invoke(runner, "switch", "demo")

    result = invoke(runner, "delete", "demo")

    assert result.exit_code == 1
    assert "currently selected" in result.output
    assert (home / "profiles" / "demo.json").exists()


def test_delete_profile_deselects(runner, app, home):
    add_profile(app, "demo")
    add_profile(app, "other")
    invoke(runner, "switch", "demo")

    result = invoke(runner, "delete", "other")

    assert result.exit_code == 0
    assert not (home / "profiles" / "other.json").exists()
    assert read_config(home)["selected_profile"] is None



@pytest.mark.parametrize("command", ["delete", "switch"])
def test_profile_names_cannot_escape_profiles_dir(runner, app, home, command):
    before = (home / "config.json").read_text()

    result = invoke(runner, command, "../config")

    assert result.exit_code == 1
    assert "not a valid profile name" in result.output
    assert (home / "config.json").read_text() == before


# ── profile contents ─────────────────────────────────────────────────────────

def test_clean_removes_unreferenced_artifacts(runner, app, home):
    add_profile(app, "one", mods=["a", "b"])
    add_profile(app, "two", mods=["b", "c"])
    for slug in "abcd":
        add_artifact(app, slug)

    result = invoke(runner, "clean")

    assert result.exit_code == 0
    assert "Removed 1 mod\n" in result.output
    assert "Removed 0 libs" in result.output
    assert [k.slug for k in app.artifacts.list_all(Pool.MODS)] == ["a", "b", "c"]


def test_clean_respects_version_and_loader(runner, app):
    add_profile(app, "demo", mods=["sodium"])
    add_artifact(app, "sodium")
    add_artifact(app, "sodium", version="1.19.2")
    add_artifact(app, "fabric-api", pool=Pool.LIBS)

    result = invoke(runner, "clean")

    assert "Removed 1 mod\n" in result.output
    assert "Removed 1 lib\n" in result.output
    assert [k.game_version for k in app.artifacts.list_all(Pool.MODS)] == ["1.20.1"]


def test_using_lists_profiles(runner, app):
    add_profile(app, "demo", mods=["x"])
    add_profile(app, "other", mods=["y"])

    result = invoke(runner, "using", "x")

    assert result.output.splitlines() == ["demo"]
    assert app.using("x") == ["demo"]


def test_remove_updates_profile_and_links(runner, app, mods_dir):
    add_profile(app, "demo", mods=["sodium", "iris"])
    add_artifact(app, "sodium")
    add_artifact(app, "iris")
    invoke(runner, "switch", "demo")

    result = invoke(runner, "remove", "iris", "lithium")

    assert "Removed iris from demo" in result.output
    assert "lithium is not part of demo" in result.output
    assert app.profiles.load("demo").mods == ["sodium"]
    assert listing(mods_dir) == ["sodium-1.20.1-fabric.jar"]
    assert app.artifacts.exists(ArtifactKey("iris", "1.20.1", "fabric"), Pool.MODS)


def test_refresh_relinks(runner, app, mods_dir):
    add_profile(app, "demo", mods=["sodium"])
    add_artifact(app, "sodium")
    invoke(runner, "switch", "demo")
    (mods_dir / "sodium-1.20.1-fabric.jar").unlink()

    result = invoke(runner, "refresh")

    assert "Linked 1 file" in result.output
    assert listing(mods_dir) == ["sodium-1.20.1-fabric.jar"]


def test_install_requires_selected_profile(runner, app):
    result = invoke(runner, "install", "sodium")

    assert result.exit_code == 1
    assert "No profile selected" in result.output


def test_status(runner, app):
    add_profile(app, "demo", mods=["sodium"])
    add_artifact(app, "sodium")
    invoke(runner, "switch", "demo")

    result = invoke(runner, "status")

    assert "Selected Profile: demo" in result.output
    assert "Installed Mods: 1" in result.output
    assert "Created Profiles: 1" in result.output
    assert "Selected Profile modloader: fabric" in result.output
    assert "Mod Count: 1" in result.output
