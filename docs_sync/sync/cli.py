"""CLI interface for the documentation sync."""
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from ..config import DocsSyncConfig
from ..exceptions import DocsSyncError
from ..models import SiteMapItem, Source
from .orchestrator import SyncOrchestrator, ensure_synced
from .sitemap import SitemapBuilder, load_sitemap
from .sources import SourceSetManager

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def _load_config(root: Optional[str], config_path: Optional[str]) -> DocsSyncConfig:
    config = DocsSyncConfig.from_env()
    updates = {}
    if root:
        updates["root_folder"] = Path(root)
    if config_path:
        updates["config_path"] = Path(config_path)
    return config.model_copy(update=updates) if updates else config


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Docs Sync CLI - Sync documentation archives and rebuild sitemaps."""
    _configure_logging(verbose)


@cli.command()
@click.option("--force", "-f", is_flag=True, help="Sync even if the root sitemap already exists")
@click.option("--root", "-r", help="Documentation root folder")
@click.option("--config", "-c", "config_path", help="Sources configuration file")
@click.option("--repo", help="Sync only this GitHub repository instead of the configured sources")
@click.option("--branch", "-b", default="master", show_default=True, help="Branch of --repo to download")
@click.option("--folder", default="", help="Target folder of --repo relative to the root")
def sync(
    force: bool,
    root: Optional[str],
    config_path: Optional[str],
    repo: Optional[str],
    branch: str,
    folder: str,
):
    """Download all sources (or a single --repo) and replace the local documentation."""
    config = _load_config(root, config_path)
    orchestrator = SyncOrchestrator(config)

    sources = None
    if repo:
        try:
            sources = [Source.for_github_repo(repo, branch=branch, folder=folder)]
        except ValidationError as e:
            click.echo(f"Error: invalid repository source: {e}", err=True)
            sys.exit(1)

    try:
        if sources:
            result = orchestrator.run(sources)
        else:
            result = ensure_synced(force_overwrite=force, orchestrator=orchestrator)
    except DocsSyncError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if result is None:
        click.echo(f"Documentation already present in {config.root_folder} (use --force to resync)")
        return

    click.echo("\n" + "=" * 60)
    click.echo("SYNC RESULTS")
    click.echo("=" * 60)

    for item in result.results:
        folder = item.source.folder or "(root)"
        click.echo(f"\n{folder}: {item.status}")
        click.echo(f"  URL: {item.source.url}")
        if item.branch:
            click.echo(f"  Branch: {item.branch}")
        if item.sitemap_path:
            click.echo(f"  Sitemap: {item.sitemap_path}")
        if item.error:
            click.echo(f"  Error: {item.error}")
        click.echo(f"  Duration: {item.duration_seconds:.1f}s")

    click.echo("\n" + "-" * 60)
    click.echo(result.summary())

    if result.failed:
        sys.exit(1)


@cli.command()
@click.argument("folder", default="")
@click.option("--root", "-r", help="Documentation root folder")
def sitemap(folder: str, root: Optional[str]):
    """Rebuild the sitemap of a synced folder without downloading."""
    config = _load_config(root, None)
    target = Path(config.root_folder) / folder

    if not target.is_dir():
        click.echo(f"Folder '{target}' not found.", err=True)
        sys.exit(1)

    builder = SitemapBuilder(
        url_template=config.sitemap_url_template(),
        filename=config.sitemap_filename,
    )

    try:
        path = builder.rebuild(target)
    except DocsSyncError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Wrote {path}")


@cli.command("show")
@click.argument("folder", default="")
@click.option("--root", "-r", help="Documentation root folder")
@click.option("--urls", is_flag=True, help="Show item URLs")
def show(folder: str, root: Optional[str], urls: bool):
    """Print the persisted sitemap tree of a folder."""
    config = _load_config(root, None)
    target = Path(config.root_folder) / folder

    try:
        tree = load_sitemap(target, config.sitemap_filename)
    except DocsSyncError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _echo_tree(tree, urls)


def _echo_tree(item: SiteMapItem, urls: bool) -> None:
    for node in item.walk():
        line = f"{'  ' * node.level}{node.name} [{node.sort}]"
        if urls:
            line += f"  {node.url}"
        click.echo(line)


@cli.command("sources")
@click.option("--config", "-c", "config_path", help="Sources configuration file")
def sources(config_path: Optional[str]):
    """List configured sources and allowed branches."""
    config = _load_config(None, config_path)
    manager = SourceSetManager(config.config_path)

    try:
        info = manager.get_info()
    except DocsSyncError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Configuration: {info['config_path']}")
    click.echo("-" * 40)

    if not info["sources"]:
        click.echo("No sources configured.")
    for source in info["sources"]:
        click.echo(f"  {source['folder']}: {source['url']}")

    branches = ", ".join(info["allowed_branches"]) or "(none - all branches rejected)"
    click.echo(f"\nAllowed branches: {branches}")


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
