"""
CLI 模块

命令行接口实现。
"""

import asyncio
import functools
from typing import Optional

import click
from loguru import logger
from rich.console import Console
from rich.table import Table

from modder import __version__
from modder.core import Modder
from modder.exceptions import ModderError
from modder.installer import BatchResult, InstallOptions, InstallReport
from modder.logger import setup_logger
from modder.models import Pool
from modder.utils import plural


def handle_errors(func):
    """把预期内的错误转换为 click 错误信息（stderr，退出码 1）"""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ModderError as e:
            logger.debug(f"{e.code} {e.to_dict()}")
            raise click.ClickException(str(e))

    return wrapper


def _support_mark(side: Optional[str]) -> str:
    if side is None:
        return "?"
    return {"required": "✓", "optional": "-"}.get(side, "✗")


def print_report(report: InstallReport) -> None:
    result = report.result
    if result is BatchResult.SUCCESS:
        if report.skipped:
            click.echo(f"Done, {plural(len(report.skipped), 'mod')} skipped:")
            for outcome in report.skipped:
                click.echo(f"  - {outcome.slug}: {outcome.reason}")
        else:
            click.echo("All mods installed successfully.")
    else:
        if result is BatchResult.FAILURE:
            click.echo("Failed to install the requested mods:", err=True)
        else:
            click.echo("Some mods could not be installed:", err=True)
        for outcome in report.failed:
            click.echo(f"  - {outcome.slug}: {outcome.reason}", err=True)
        if report.skipped:
            click.echo("Skipped:", err=True)
            for outcome in report.skipped:
                click.echo(f"  - {outcome.slug}: {outcome.reason}", err=True)
        if report.not_attempted:
            click.echo(
                "Not attempted: " + ", ".join(report.not_attempted), err=True
            )

    for error in report.projection_errors:
        click.echo(f"Could not update the mods directory: {error}", err=True)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.version_option(version=__version__)
def main(debug: bool):
    """modder - Minecraft mod profile manager"""
    setup_logger(level="DEBUG" if debug else None)


@main.command()
@click.argument("slugs", nargs=-1)
@click.option("-a", "--no-add", "no_add", is_flag=True, help="Don't add the mod to the profile")
@click.option("-u", "--update", is_flag=True, help="Update mods")
@click.option("-v", "--version", "version", help="Game version to install the mod for")
@click.option("-l", "--loader", help="The modloader to install the mod for")
@handle_errors
def install(slugs, no_add, update, version, loader):
    """Install mods (the whole profile when no slug is given)"""
    app = Modder.load()
    options = InstallOptions(add=not no_add, update=update, version=version, loader=loader)
    report = asyncio.run(app.install(list(slugs), options))
    print_report(report)
    if report.result is BatchResult.FAILURE:
        raise SystemExit(1)


@main.command()
@click.argument("slugs", nargs=-1, required=True)
@handle_errors
def remove(slugs):
    """Remove mods from the selected profile"""
    app = Modder.load()
    removed, missing = app.remove(list(slugs))
    for slug in removed:
        click.echo(f"Removed {slug} from {app.selected_profile}")
    for slug in missing:
        click.echo(f"{slug} is not part of {app.selected_profile}", err=True)


@main.command()
@handle_errors
def refresh():
    """Recreate the links in the mods directory"""
    app = Modder.load()
    links = app.refresh()
    click.echo(f"Linked {plural(len(links), 'file')}")


@main.command()
@handle_errors
def clean():
    """Delete cached mods no profile uses"""
    app = Modder.load()
    removed = app.clean()
    click.echo(f"Removed {plural(len(removed[Pool.MODS]), 'mod')}")
    click.echo(f"Removed {plural(len(removed[Pool.LIBS]), 'lib')}")


@main.command()
@click.argument("slug")
@handle_errors
def using(slug):
    """List the profiles that use a mod"""
    app = Modder.load()
    names = app.using(slug)
    if not names:
        click.echo(f"No profile uses {slug}")
        return
    for name in names:
        click.echo(name)


@main.command()
@click.argument("query")
@handle_errors
def search(query):
    """Search for mods"""
    app = Modder.load()
    hits = asyncio.run(app.search(query))

    table = Table(header_style="bold magenta")
    for column in ("slug", "name", "author", "description", "downloads", "follows"):
        table.add_column(column)
    table.add_column("client", justify="center")
    table.add_column("server", justify="center")

    for hit in hits:
        table.add_row(
            hit.slug,
            hit.title,
            hit.author,
            hit.description,
            str(hit.downloads),
            str(hit.follows),
            _support_mark(hit.client_side),
            _support_mark(hit.server_side),
        )
    Console().print(table)


@main.command()
@handle_errors
def status():
    """Show information"""
    app = Modder.load()
    info = app.status()
    selected = info["selected_profile"]
    click.echo(
        "Selected Profile: "
        + (selected if selected else click.style("None", fg="red"))
    )
    click.echo(f"Installed Mods: {info['installed_mods']}")
    click.echo(f"Installed Libraries: {info['installed_libs']}")
    click.echo(f"Created Profiles: {info['profiles']}")
    if selected is None:
        return
    click.echo(f"Selected Profile version: {info['version']}")
    click.echo(f"Selected Profile modloader: {info['loader']}")
    click.echo(f"Mod Count: {info['mod_count']}")


@main.command()
@click.argument("profile", required=False)
@handle_errors
def switch(profile):
    """Switch to a different profile (deselect without argument)"""
    app = Modder.load()
    app.switch(profile)
    if profile:
        click.echo(f"Switched to profile {profile}")
    else:
        click.echo("Deselected profile")


@main.command()
@click.argument("profile")
@click.argument("version")
@click.argument("loader")
@click.option("-s", "--switch", "switch_to", is_flag=True, help="Switch to the new profile after creation")
@click.option("-f", "--fork", "forks", multiple=True, help="Include the mods of another profile")
@handle_errors
def create(profile, version, loader, switch_to, forks):
    """Create a new profile"""
    app = Modder.load()
    app.create(profile, version, loader, switch=switch_to, forks=list(forks))
    click.echo(f"Created profile {profile}")
    if switch_to:
        click.echo(f"Switched to profile {profile}")


@main.command()
@click.argument("profile")
@handle_errors
def delete(profile):
    """Delete a profile"""
    app = Modder.load()
    app.delete(profile)
    click.echo(f"Deleted profile {profile}")


if __name__ == "__main__":
    main()
