# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Issue and workflow state commands

Commands:
    lintask test                      Verify API key and team visibility
    lintask issues (alias: i)         List or search team issues
    lintask states (alias: s)         List states an issue can move to
    lintask set-state                 Move an issue to a state
"""

from typing import Optional

import click

from linear_tasks.classes import TaskState
from linear_tasks.cli.helpers import (
    build_data_source,
    console,
    issues_table,
    print_error,
    print_success,
    resolve_team_key,
    run_single_shot,
    states_table,
)
from linear_tasks.constants import ISSUES_BATCH_SIZE


@click.command('test')
@click.option('--team', '-t', default=None, help='Team key (uses configured team_key if omitted)')
def check_connection(team: Optional[str]):
    """Verify the API key and that the team is visible.

    \b
    Example:
        lintask test --team ENG
    """
    team_key = resolve_team_key(team)
    data_source = build_data_source()
    run_single_shot(data_source.test_connection(team_key))
    print_success(f'Connected, team [cyan]{team_key}[/cyan] is visible')


@click.command('issues')
@click.option('--team', '-t', default=None, help='Team key (uses configured team_key if omitted)')
@click.option('--query', '-q', default=None, help='Free text filter')
@click.option('--offset', type=click.IntRange(min=0), default=0, show_default=True, help='Issues to skip')
@click.option(
    '--limit', type=click.IntRange(min=0), default=ISSUES_BATCH_SIZE, show_default=True, help='Issues to return'
)
@click.option('--with-closed', is_flag=True, help='Include closed issues (not applied yet)')
def list_issues(team: Optional[str], query: Optional[str], offset: int, limit: int, with_closed: bool):
    """List team issues, most recently updated first.

    \b
    Examples:
        lintask issues --limit 20
        lintask i -q "login bug" --offset 50 --limit 25
    """
    team_key = resolve_team_key(team)
    data_source = build_data_source()
    team_id = run_single_shot(data_source.get_team_id_by_key(team_key))

    issues = data_source.get_issues(team_id, query, offset, limit, with_closed)
    if not issues:
        console.print('[yellow]No issues found.[/yellow]')
        return

    console.print(issues_table(issues))
    console.print(f'\n[dim]{len(issues)} issues (offset {offset})[/dim]')


@click.command('states')
@click.argument('issue_id', type=str)
def list_states(issue_id: str):
    """List the workflow states an issue can move to.

    \b
    Example:
        lintask states ENG-123
    """
    data_source = build_data_source()
    states = run_single_shot(data_source.get_available_task_states(issue_id))
    if not states:
        console.print(f'[yellow]No states available for {issue_id}.[/yellow]')
        return
    console.print(states_table(states))


@click.command('set-state')
@click.argument('issue_id', type=str)
@click.argument('state', type=str)
def set_state(issue_id: str, state: str):
    """Move an issue to a workflow state, given by state id or name.

    \b
    Examples:
        lintask set-state ENG-123 "In Progress"
        lintask set-state ENG-123 0f3c1a2b-...
    """
    data_source = build_data_source()
    states = run_single_shot(data_source.get_available_task_states(issue_id))

    target = next((s for s in states if s.id == state), None)
    if target is None:
        target = next((s for s in states if s.name.lower() == state.lower()), None)
    if target is None:
        if states:
            print_error(f'Unknown state {state!r}. Available: {", ".join(sorted(s.name for s in states))}')
            raise SystemExit(1)
        # states could not be listed, let the server validate the id
        target = TaskState(id=state, name=state)

    run_single_shot(data_source.set_task_state(issue_id, target))
    print_success(f'{issue_id} moved to [green]{target.name}[/green]')


def register_commands(cli):
    """Register issue commands with a parent CLI group."""
    cli.add_command(check_connection)
    cli.add_command(list_issues)
    cli.add_command(list_states)
    cli.add_command(set_state)
