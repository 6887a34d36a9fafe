"""Subcommand modules for blogctl.

register_commands() imports command modules on demand to keep
``blogctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from blogctl.commands.list_cmd import list_group
    from blogctl.commands.new import new

    cli.add_command(new)
    cli.add_command(list_group)

    # --- Standalone commands ---
    from blogctl.commands.build import build
    from blogctl.commands.check import check
    from blogctl.commands.init_cmd import init_cmd
    from blogctl.commands.publish import publish, unpublish

    cli.add_command(init_cmd)
    cli.add_command(build)
    cli.add_command(check)
    cli.add_command(publish)
    cli.add_command(unpublish)
