"""Main CLI entry point for the GitHub branch migration tool."""

import sys
import asyncio
from typing import Optional
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..api.exceptions import GitHubAPIError
from ..config.config import Config, GitHubConfig, MigrationConfig
from ..utils.logging import setup_logging
from ..migration.engine import MigrationEngine
from ..migration.orchestrator import MigrationSummary, RepositoryMigrationError
from ..migration.state_machine import MigrationStatus

console = Console()

DEFAULT_CONFIG_PATHS = ['config.yaml', 'config.yml', '.github-branch-migrate.yaml']

STATUS_STYLES = {
    MigrationStatus.COMPLETED: 'green',
    MigrationStatus.SKIPPED: 'yellow',
    MigrationStatus.PENDING: 'blue',
    MigrationStatus.FAILED: 'red',
}


@click.group()
@click.version_option(version=__version__, prog_name='github-branch-migrate')
@click.option(
    '--config',
    '-c',
    type=click.Path(exists=True),
    help='Path to configuration file',
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    help='Enable verbose logging',
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """GitHub Branch Migration Tool - Rename the default branch of every active repository in an organization."""
    ctx.ensure_object(dict)

    if config:
        ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    # LOG_LEVEL applies unless --verbose is given; refined once config is loaded
    setup_logging('DEBUG' if verbose else None)


@cli.command()
@click.option(
    '--output',
    '-o',
    default='config.yaml',
    help='Output configuration file path',
)
@click.pass_context
def init(ctx: click.Context, output: str) -> None:
    """Initialize a new configuration file."""
    console.print(
        Panel.fit(
            '[bold green]GitHub Branch Migration Tool[/bold green]\n'
            'Initializing configuration...',
            border_style='green',
        )
    )

    try:
        Config.create_template(output)

        console.print(f'[green]✓[/green] Configuration template created at: {output}')
        console.print(
            f'[yellow]Please edit {output} with your GitHub credentials and organization[/yellow]'
        )

    except Exception as e:
        console.print(f'[red]✗[/red] Failed to create configuration: {e}')
        sys.exit(1)


@cli.command()
@click.option('--username', '-u', help='GitHub username')
@click.option('--password', '-p', help='GitHub password or personal access token')
@click.option('--endpoint', help='API base URL (default: https://api.github.com)')
@click.option(
    '--dry-run',
    is_flag=True,
    help='List the repositories that would be migrated without changing anything',
)
@click.option(
    '--continue-on-error',
    is_flag=True,
    help='Keep going after a repository fails instead of aborting the run',
)
@click.argument('organization', required=False)
@click.pass_context
def migrate(
    ctx: click.Context,
    username: Optional[str],
    password: Optional[str],
    endpoint: Optional[str],
    dry_run: bool,
    continue_on_error: bool,
    organization: Optional[str],
) -> None:
    """Migrate ORGANIZATION's repositories to the new default branch."""
    console.print(
        Panel.fit(
            '[bold blue]GitHub Branch Migration Tool[/bold blue]\n'
            'Starting migration process...',
            border_style='blue',
        )
    )

    if dry_run:
        console.print(
            '[yellow]Running in dry-run mode - no changes will be made[/yellow]'
        )

    try:
        config = _load_config(ctx)
        config = _apply_overrides(
            config,
            username=username,
            password=password,
            endpoint=endpoint,
            organization=organization,
            dry_run=dry_run,
            continue_on_error=continue_on_error,
        )

        _setup_logging_with_config(ctx, config)

        if not config.migration.dry_run and not (
            config.github.username and config.github.password
        ):
            raise click.UsageError(
                'A username and password are required '
                '(--username/--password or GITHUB_USERNAME/GITHUB_PASSWORD)'
            )

        summary = asyncio.run(_run_migration(config))
        _display_migration_summary(summary)

    except click.UsageError:
        raise
    except RepositoryMigrationError as e:
        if e.summary is not None:
            _display_migration_summary(e.summary)
        console.print(
            f'[red]✗[/red] Migration of [bold]{e.repository}[/bold] failed at stage '
            f'[bold]{e.stage.value if e.stage else "unknown"}[/bold]'
        )
        _print_api_error(e.status_code, e.response_body)
        sys.exit(1)
    except GitHubAPIError as e:
        console.print(f'[red]✗[/red] Migration failed: {e}')
        _print_api_error(e.status_code, e.response_text)
        sys.exit(1)
    except Exception as e:
        console.print(f'[red]✗[/red] Migration failed: {e}')
        if ctx.obj.get('verbose'):
            console.print_exception()
        sys.exit(1)

    if summary.failed:
        sys.exit(1)


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the effective migration configuration."""
    console.print(
        Panel.fit(
            '[bold magenta]GitHub Branch Migration Tool[/bold magenta]\nMigration Status',
            border_style='magenta',
        )
    )

    try:
        config = _load_config(ctx)

        _setup_logging_with_config(ctx, config)

        table = Table(title='Migration Configuration')
        table.add_column('Setting', style='cyan')
        table.add_column('Value', style='green')

        table.add_row('API URL', config.github.url)
        table.add_row('Username', config.github.username or '-')
        table.add_row('Password', '********' if config.github.password else '-')
        table.add_row('Organization', config.migration.organization)
        table.add_row('Legacy Branch', config.migration.legacy_branch)
        table.add_row('New Branch', config.migration.new_branch)
        table.add_row('Repository Type', config.migration.repo_type)
        table.add_row('Fail Fast', '✓' if config.migration.fail_fast else '✗')
        table.add_row('Dry Run', '✓' if config.migration.dry_run else '✗')

        console.print(table)

    except Exception as e:
        console.print(f'[red]✗[/red] Failed to load status: {e}')
        if ctx.obj.get('verbose'):
            console.print_exception()
        sys.exit(1)


def _load_config(ctx: click.Context) -> Config:
    """Load configuration from file or environment."""
    config_path = ctx.obj.get('config_path')

    if config_path:
        if not Path(config_path).exists():
            raise FileNotFoundError(f'Configuration file not found: {config_path}')
        return Config.from_file(config_path)

    # Try to load from default locations
    for path in DEFAULT_CONFIG_PATHS:
        if Path(path).exists():
            return Config.from_file(path)

    # Fall back to environment variables
    return Config.from_env()


def _apply_overrides(
    config: Config,
    username: Optional[str] = None,
    password: Optional[str] = None,
    endpoint: Optional[str] = None,
    organization: Optional[str] = None,
    dry_run: bool = False,
    continue_on_error: bool = False,
) -> Config:
    """Return a copy of ``config`` with command line values applied."""
    github_overrides = {
        key: value
        for key, value in {
            'username': username,
            'password': password,
            'url': endpoint,
        }.items()
        if value is not None
    }
    migration_overrides = {}
    if organization:
        migration_overrides['organization'] = organization
    if dry_run:
        migration_overrides['dry_run'] = True
    if continue_on_error:
        migration_overrides['fail_fast'] = False

    # Rebuild the sections so validators run on the overridden values
    return config.model_copy(
        update={
            'github': GitHubConfig(**{**config.github.model_dump(), **github_overrides}),
            'migration': MigrationConfig(
                **{**config.migration.model_dump(), **migration_overrides}
            ),
        }
    )


def _setup_logging_with_config(ctx: click.Context, config: Config) -> None:
    """Setup logging with configuration from config file."""
    verbose = ctx.obj.get('verbose', False)

    log_level = 'DEBUG' if verbose else config.logging.level
    setup_logging(
        level=log_level, log_file=config.logging.file, log_format=config.logging.format
    )


async def _run_migration(config: Config) -> MigrationSummary:
    """Run the migration for the configured organization."""
    engine = MigrationEngine(config)
    return await engine.migrate(config.migration.organization)


def _print_api_error(status_code: Optional[int], body: Optional[str]) -> None:
    """Print the HTTP status and server response of a failed API call."""
    if status_code is not None:
        console.print(f'[red]HTTP error:[/red] {status_code}')
    if body:
        console.print('[red]Server response:[/red]')
        console.print(body, markup=False, highlight=False)


def _display_migration_summary(summary: MigrationSummary) -> None:
    """Display migration summary results."""
    table = Table(title=f'Migration Summary: {summary.organization}')
    table.add_column('Repository', style='cyan')
    table.add_column('Status')
    table.add_column('Details')

    for outcome in summary.outcomes:
        style = STATUS_STYLES.get(outcome.status, 'white')
        if outcome.status == MigrationStatus.FAILED:
            stage = outcome.stage.value if outcome.stage else 'unknown'
            details = f'{stage}: {outcome.error_message}'
        else:
            details = outcome.detail or ''
        table.add_row(
            escape(outcome.repository),
            f'[{style}]{outcome.status.value}[/{style}]',
            escape(details),
        )

    console.print(table)

    counts = summary.counts
    console.print(
        f'Listed {summary.total_repositories} repositories, '
        f'{summary.active_repositories} active: '
        f'[green]{counts["completed"]} completed[/green], '
        f'[yellow]{counts["skipped"]} skipped[/yellow], '
        f'[blue]{counts["pending"]} pending[/blue], '
        f'[red]{counts["failed"]} failed[/red]'
    )

    if summary.completed_at:
        duration = summary.completed_at - summary.started_at
        console.print(f'[blue]Migration Duration:[/blue] {duration}')


def main() -> None:
    """Main entry point for the CLI application."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print('\n[red]Migration interrupted by user[/red]')
        sys.exit(1)


if __name__ == '__main__':
    main()
