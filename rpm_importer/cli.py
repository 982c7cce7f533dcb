"""rpm-importer -- generate and commit a wrapper pom.xml for a dist-git repository.

Usage:
    rpm-importer --url URL --branch BRANCH [OPTIONS]
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from rpm_importer import __version__
from rpm_importer.config import ImportOptions, load_profile, resolve_config_dir
from rpm_importer.errors import ImporterError
from rpm_importer.pipeline import ImportResult, run_import

logger = logging.getLogger("rpm_importer.cli")

LOG_FORMAT = "%(asctime)s %(name)-28s %(levelname)-5s %(message)s"


def setup_logging(level: int = logging.INFO, log_file: str | None = None) -> None:
    """Configure Python logging."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
    if level == logging.DEBUG:
        logger.debug("Log level set to DEBUG")


def _report(result: ImportResult) -> None:
    if not result.written:
        click.echo(f"pom.xml already present in {result.repository}; nothing written.")
        return
    click.echo(f"Generated {result.group_id}:{result.artifact_id} wrapping {result.upstream}")
    click.echo(f"  Working copy: {result.repository}")
    click.echo(f"  Artifacts:    {result.dependency_count}")
    if result.committed:
        click.echo(f"  Commit:       {result.commit}{' (pushed)' if result.pushed else ''}")
    else:
        click.echo("  Commit:       nothing to commit")
    for warning in result.warnings:
        click.echo(f"  Warning: {warning}")


@click.command()
@click.version_option(__version__, prog_name="rpm-importer")
@click.option("--url", required=True, help="External URL of the dist-git repository.")
@click.option("--branch", default="", help="Branch to import.")
@click.option(
    "--repository",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Use this local working copy instead of cloning.",
)
@click.option("--skip-sync", is_flag=True, help="Do not create or sync the internal repository.")
@click.option("--overwrite", is_flag=True, help="Replace an existing pom.xml.")
@click.option("--push", is_flag=True, help="Push the commit to the upstream branch.")
@click.option(
    "--latest-plugin-version",
    is_flag=True,
    help="Use the latest rpm-builder-maven-plugin release from Maven Central.",
)
@click.option("--profile", default="default", show_default=True, help="Configuration profile.")
@click.option("-p", "--config-path", default=None, help="Folder holding config.yaml.")
@click.option("--log-file", default=None, help="Log to file in addition to stdout.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(
    url: str,
    branch: str,
    repository: Path | None,
    skip_sync: bool,
    overwrite: bool,
    push: bool,
    latest_plugin_version: bool,
    profile: str,
    config_path: str | None,
    log_file: str | None,
    verbose: bool,
) -> None:
    """Import a build into PNC by generating a wrapper pom.xml."""
    setup_logging(logging.DEBUG if verbose else logging.INFO, log_file)

    try:
        options = ImportOptions(
            url=url,
            branch=branch,
            repository=repository,
            skip_sync=skip_sync,
            overwrite=overwrite,
            push=push,
            latest_plugin_version=latest_plugin_version,
        )
        options.validate()
        settings = load_profile(resolve_config_dir(config_path), profile)
        result = run_import(settings, options)
    except ImporterError as e:
        logger.error("%s: %s", type(e).__name__, e)
        sys.exit(e.exit_code)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        sys.exit(130)

    _report(result)
