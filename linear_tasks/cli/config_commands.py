# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
CLI commands for managing lintask configuration.

Users can configure:
- Linear API key
- Default team key
- API endpoint (for proxies and tests)

Environment variables (or a .env file) take precedence over the config file:
LINEAR_API_KEY, LINEAR_TEAM_KEY, LINEAR_API_URL.
"""

import json
import os
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from linear_tasks.constants import LINEAR_API_URL
from linear_tasks.utils.utils import mask_secret

# Config file location
LINTASK_DIR = Path.home() / '.lintask'
CONFIG_FILE = LINTASK_DIR / 'config.json'

CONFIG_KEYS = ['api_key', 'team_key', 'api_url']
ENV_VARS = {
    'api_key': 'LINEAR_API_KEY',
    'team_key': 'LINEAR_TEAM_KEY',
    'api_url': 'LINEAR_API_URL',
}
DEFAULTS = {'api_url': LINEAR_API_URL}

console = Console()


def load_config() -> dict:
    """Load configuration from file."""
    if not CONFIG_FILE.exists():
        return {}
    try:
        with open(CONFIG_FILE, 'r') as f:
            return json.load(f)
    except (json.JSONDecodeError, IOError):
        return {}


def save_config(config: dict) -> bool:
    """Save configuration to file."""
    LINTASK_DIR.mkdir(parents=True, exist_ok=True)
    try:
        with open(CONFIG_FILE, 'w') as f:
            json.dump(config, f, indent=2)
        return True
    except IOError as e:
        console.print(f'[red]Failed to save config: {e}[/red]')
        return False


def get_config_value(key: str, default: str = '') -> str:
    """Get a config value, environment first, then the config file, then the default."""
    env_value = os.getenv(ENV_VARS[key], '') if key in ENV_VARS else ''
    if env_value:
        return env_value
    config = load_config()
    return config.get(key) or DEFAULTS.get(key, default)


def _display_value(key: str, value: str) -> str:
    if key == 'api_key' and value:
        return mask_secret(value)
    return str(value)


@click.group(name='config', invoke_without_command=True)
@click.pass_context
def config(ctx):
    """Manage CLI configuration.

    \b
    Examples:
        lintask config                       # Show current config
        lintask config set team_key ENG      # Set default team
        lintask config set api_key lin_api_x # Store API key
        lintask config clear                 # Remove config file
    """
    if ctx.invoked_subcommand is None:
        show_config()


def show_config():
    """Display current configuration."""
    config_values = load_config()

    console.print('\n[bold cyan]lintask Configuration[/bold cyan]\n')

    table = Table(show_header=True, header_style='bold magenta')
    table.add_column('Setting', style='cyan')
    table.add_column('Value', style='green')
    table.add_column('Source', style='dim')

    for key in CONFIG_KEYS:
        env_var = ENV_VARS[key]
        if os.getenv(env_var):
            table.add_row(key, _display_value(key, os.getenv(env_var)), env_var)
        elif config_values.get(key):
            table.add_row(key, _display_value(key, config_values[key]), 'config')
        elif key in DEFAULTS:
            table.add_row(key, DEFAULTS[key], 'default')
        else:
            table.add_row(key, '(not set)', '')

    console.print(table)
    console.print(f'\n[dim]Config file: {CONFIG_FILE}[/dim]')


@config.command('set')
@click.argument('key', type=click.Choice(CONFIG_KEYS))
@click.argument('value', type=str)
def config_set(key: str, value: str):
    """Set a configuration value.

    \b
    Examples:
        lintask config set team_key ENG
        lintask config set api_url https://api.linear.app/graphql
    """
    config_values = load_config()
    old_value: Optional[str] = config_values.get(key)
    config_values[key] = value

    if not save_config(config_values):
        return

    if old_value is not None:
        console.print(
            f'[green]Updated {key}:[/green] {_display_value(key, old_value)} → {_display_value(key, value)}'
        )
    else:
        console.print(f'[green]Set {key}:[/green] {_display_value(key, value)}')


@config.command('clear')
@click.option('--force', '-f', is_flag=True, help='Skip confirmation')
def config_clear(force: bool):
    """Clear all configuration.

    \b
    Example:
        lintask config clear
        lintask config clear --force
    """
    if not CONFIG_FILE.exists():
        console.print('[yellow]No configuration to clear.[/yellow]')
        return

    if not force and not click.confirm('Clear all configuration?', default=False):
        console.print('[yellow]Cancelled.[/yellow]')
        return

    try:
        CONFIG_FILE.unlink()
        console.print('[green]Configuration cleared.[/green]')
    except IOError as e:
        console.print(f'[red]Failed to clear config: {e}[/red]')
