# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
lintask CLI - Main entry point

Usage:
    lintask config              - Show/set CLI configuration
    lintask test                - Verify API key and team
    lintask issues ...          - List or search issues (alias: i)
    lintask states <issue>      - List available states (alias: s)
    lintask set-state ...       - Move an issue to a state
"""

import bittensor as bt
import click
from dotenv import load_dotenv

from linear_tasks import __version__
from linear_tasks.cli.config_commands import config
from linear_tasks.cli.issue_commands import register_commands


class AliasGroup(click.Group):
    """Root group for lintask with short aliases for the read commands.

    ``lintask i`` runs ``issues`` and ``lintask s`` runs ``states``. Help lists each command once,
    as ``issues, i``, instead of registering the alias as a second command.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._aliases = {}  # alias -> canonical name

    def add_alias(self, name, alias):
        """Register an alias for an existing command."""
        self._aliases[alias] = name

    def get_command(self, ctx, cmd_name):
        canonical = self._aliases.get(cmd_name, cmd_name)
        return super().get_command(ctx, canonical)

    def format_commands(self, ctx, formatter):
        """Write the help text, appending aliases to command descriptions."""
        alias_map = {}
        for alias, canonical in self._aliases.items():
            alias_map.setdefault(canonical, []).append(alias)

        commands = []
        for subcommand in self.list_commands(ctx):
            cmd = self.commands.get(subcommand)
            if cmd is None or cmd.hidden:
                continue
            help_text = cmd.get_short_help_str(limit=150)
            aliases = alias_map.get(subcommand)
            if aliases:
                subcommand = f'{subcommand}, {", ".join(sorted(aliases))}'
            commands.append((subcommand, help_text))

        if commands:
            with formatter.section('Commands'):
                formatter.write_dl(commands)


@click.group(cls=AliasGroup)
@click.version_option(version=__version__, prog_name='lintask')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def cli(debug: bool):
    """lintask - Browse and update Linear issues from the terminal"""
    load_dotenv()
    if debug:
        bt.logging.set_debug(True)


cli.add_command(config)
register_commands(cli)
cli.add_alias('issues', 'i')
cli.add_alias('states', 's')


def main():
    """Main entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
