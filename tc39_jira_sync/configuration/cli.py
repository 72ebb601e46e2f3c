"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from tc39_jira_sync.configuration.driver import get_jira_credentials, get_sync_config
from tc39_jira_sync.configuration.env import Settings
from tc39_jira_sync.configuration.exceptions import JiraAuthenticationConfigurationUndefinedError, StageMappingConfigurationError
from tc39_jira_sync.configuration.models import JiraCredentials, SyncConfig
from tc39_jira_sync.processing.exceptions import DatasetLoadingError
from tc39_jira_sync.synchronize.driver import run_export_index_workflow, run_sync_proposals_workflow
from tc39_jira_sync.synchronize.exceptions import IndexConstructionError
from tc39_jira_sync.synchronize.index import build_index_from_export, save_index_snapshot
from tc39_jira_sync.synchronize.results import SyncProposalsResult
from tc39_jira_sync.utils.logging import configure_logging

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Synchronize the TC39 proposals dataset with Jira issues.")


def load_settings() -> Settings:
    """Load settings from the environment, exiting with a readable error if they are invalid."""
    try:
        return Settings()
    except ValueError as exc:
        typer.echo(f"Invalid configuration in environment: {exc}", err=True)
        raise typer.Exit(1) from exc


def load_sync_config(settings: Settings, jira_api_url: str | None) -> SyncConfig:
    """Reconcile the synchronization configuration, exiting on configuration defects."""
    try:
        return get_sync_config(settings, jira_api_url=jira_api_url)
    except (StageMappingConfigurationError, ValueError) as exc:
        typer.echo(f"Invalid synchronization configuration: {exc}", err=True)
        raise typer.Exit(1) from exc


def load_jira_credentials(settings: Settings, jira_user_email: str | None, api_token_path: Path | None) -> JiraCredentials:
    """Resolve the Jira credentials, exiting if they are missing."""
    try:
        return get_jira_credentials(settings, jira_user_email=jira_user_email, jira_api_token_path=api_token_path)
    except JiraAuthenticationConfigurationUndefinedError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def echo_sync_summary(result: SyncProposalsResult) -> None:
    """Print the per-run summary of a sync."""
    sync_results = result.proposal_synchronization_results
    typer.echo("")
    typer.echo("=" * 70)
    typer.echo("SYNC SUMMARY (dry run)" if sync_results.dry_run else "SYNC SUMMARY")
    typer.echo("=" * 70)
    typer.echo(f"Proposals processed: {len(sync_results.results)}")
    typer.echo(f"Tracked issues known at start: {sync_results.index_size}")
    typer.echo(f"Issues created: {sync_results.created}")
    typer.echo(f"Issues updated: {sync_results.updated}")
    typer.echo(f"Proposals skipped: {sync_results.skipped}")
    typer.echo(f"Failures: {len(sync_results.failures)}")
    typer.echo("=" * 70)


@typer_app.command(name="sync")
def sync_cli(
    dataset_path: Annotated[
        Path | None, Argument(help="Local copy of the proposals dataset. The published dataset is fetched when omitted.")
    ] = None,
    jira_api_url: Annotated[str | None, Option(help="Jira base URL, overriding JIRA_API_URL.")] = None,
    jira_user_email: Annotated[str | None, Option(help="Email of the Jira user the API token belongs to, overriding JIRA_USER_EMAIL.")] = None,
    api_token_path: Annotated[Path | None, Option(help="File holding the Jira API token, overriding JIRA_API_TOKEN_PATH.")] = None,
    index_snapshot: Annotated[
        Path | None, Option(help="Use a saved identifier index instead of searching Jira for tracked issues.")
    ] = None,
    save_index: Annotated[Path | None, Option(help="Save the identifier index used for this run to a JSON file.")] = None,
    dry_run: Annotated[bool, Option(help="Decide what would change without creating or updating issues.")] = False,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug mode.")] = False,
) -> None:
    """Create or update a Jira issue for every tracked proposal in the dataset."""
    settings = load_settings()
    configure_logging(debug or settings.DEBUG)
    config = load_sync_config(settings, jira_api_url)
    credentials = load_jira_credentials(settings, jira_user_email, api_token_path)

    if dataset_path is not None and not dataset_path.exists():
        typer.echo(f"Dataset file not found: {dataset_path.absolute()}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Synchronizing proposals from {dataset_path or settings.DATASET_URL} with {config.jira_api_url} (project {config.project_key})")

    try:
        result = asyncio.run(
            run_sync_proposals_workflow(
                config=config,
                credentials=credentials,
                dataset_path=dataset_path,
                dataset_url=settings.DATASET_URL,
                index_snapshot_path=index_snapshot,
                save_index_path=save_index,
                dry_run=dry_run,
            )
        )
    except DatasetLoadingError as exc:
        typer.echo(f"Error loading proposals dataset: {exc}", err=True)
        raise typer.Exit(1) from exc
    except IndexConstructionError as exc:
        typer.echo(f"Error building identifier index, no proposals were synchronized: {exc}", err=True)
        raise typer.Exit(1) from exc

    echo_sync_summary(result)
    if result.errors:
        typer.echo("Error(s) encountered while synchronizing proposals:", err=True)
        for err in result.errors:
            typer.echo(str(err), err=True)
        raise typer.Exit(1)


@typer_app.command(name="build-index-from-export")
def build_index_from_export_cli(
    export_file: Annotated[Path, Argument(help="Bulk text export of the Jira project (e.g. a CSV export).")],
    output_file: Annotated[Path, Argument(help="Path to save the identifier index JSON snapshot.")],
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug mode.")] = False,
) -> None:
    """Bootstrap an identifier index snapshot from a bulk export of the Jira project."""
    settings = load_settings()
    configure_logging(debug or settings.DEBUG)
    config = load_sync_config(settings, None)

    if not export_file.exists():
        typer.echo(f"Export file not found: {export_file.absolute()}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Reading bulk export from {export_file.absolute()}")
    index = build_index_from_export(export_file.read_text(encoding="utf-8"), config.key_pattern)
    save_index_snapshot(index, output_file)
    typer.echo(f"Saved {len(index)} identifier(s) to {output_file}")


@typer_app.command(name="export-index")
def export_index_cli(
    output_file: Annotated[Path, Argument(help="Path to save the identifier index JSON snapshot.")],
    jira_api_url: Annotated[str | None, Option(help="Jira base URL, overriding JIRA_API_URL.")] = None,
    jira_user_email: Annotated[str | None, Option(help="Email of the Jira user the API token belongs to, overriding JIRA_USER_EMAIL.")] = None,
    api_token_path: Annotated[Path | None, Option(help="File holding the Jira API token, overriding JIRA_API_TOKEN_PATH.")] = None,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug mode.")] = False,
) -> None:
    """Search Jira for tracked issues and save the identifier index as a JSON snapshot."""
    settings = load_settings()
    configure_logging(debug or settings.DEBUG)
    config = load_sync_config(settings, jira_api_url)
    credentials = load_jira_credentials(settings, jira_user_email, api_token_path)

    try:
        index = asyncio.run(run_export_index_workflow(config=config, credentials=credentials, output_path=output_file))
    except IndexConstructionError as exc:
        typer.echo(f"Error building identifier index: {exc}", err=True)
        raise typer.Exit(1) from exc
    typer.echo(f"Saved {len(index)} identifier(s) to {output_file}")


if __name__ == "__main__":
    typer_app()
