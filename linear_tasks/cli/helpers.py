# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Shared helper functions for lintask commands
"""

import asyncio
from typing import Iterable, Optional

import click
import requests
from rich.console import Console
from rich.table import Table

from linear_tasks.classes import ShortIssue, TaskState
from linear_tasks.cli.config_commands import get_config_value
from linear_tasks.data_source import LinearRemoteDataSource
from linear_tasks.utils.graphql_client import LinearGraphQLClient

# Status display colors, keyed by Linear state type
STATE_TYPE_COLORS = {
    'started': 'yellow',
    'unstarted': 'cyan',
    'backlog': 'blue',
    'triage': 'magenta',
    'completed': 'green',
    'canceled': 'dim',
}

console = Console()


def print_success(message: str) -> None:
    """Print a standardized success message."""
    console.print(f'\n  [green]✓[/green] {message}\n')


def print_error(message: str) -> None:
    """Print a standardized error message."""
    console.print(f'\n  [red]✗[/red] {message}\n')


def colorize_state(name: Optional[str], state_type: Optional[str]) -> str:
    """Wrap a state name with the Rich color for its type."""
    color = STATE_TYPE_COLORS.get(state_type or '', 'white')
    return f'[{color}]{name or "?"}[/{color}]'


def build_data_source() -> LinearRemoteDataSource:
    """Create a data source from the configured API key and endpoint."""
    api_key = get_config_value('api_key')
    if not api_key:
        raise click.UsageError('No Linear API key configured. Set LINEAR_API_KEY or run "lintask config set api_key <key>"')
    client = LinearGraphQLClient(api_key, api_url=get_config_value('api_url'))
    return LinearRemoteDataSource(client)


def resolve_team_key(team: Optional[str]) -> str:
    """Return the team key from the option or the configuration."""
    team_key = team or get_config_value('team_key')
    if not team_key:
        raise click.BadParameter('No team key given or configured', param_hint='--team')
    return team_key


def run_single_shot(coroutine):
    """Run one single-shot operation, turning its failure into a CLI error."""
    try:
        return asyncio.run(coroutine)
    except (ValueError, RuntimeError, requests.exceptions.RequestException) as e:
        print_error(str(e))
        raise SystemExit(1)


def issues_table(issues: Iterable[ShortIssue]) -> Table:
    table = Table(show_header=True, header_style='bold magenta')
    table.add_column('ID', style='cyan', no_wrap=True)
    table.add_column('State')
    table.add_column('Title', style='white')
    table.add_column('Updated', style='dim')

    for issue in issues:
        updated = (issue.updated_at or '')[:10]
        table.add_row(issue.identifier, colorize_state(issue.state_name, issue.state_type), issue.title, updated)
    return table


def states_table(states: Iterable[TaskState]) -> Table:
    table = Table(show_header=True, header_style='bold magenta')
    table.add_column('State', style='green')
    table.add_column('ID', style='cyan')
    for state in sorted(states, key=lambda s: s.name.lower()):
        table.add_row(state.name, state.id)
    return table
