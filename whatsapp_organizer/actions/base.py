from __future__ import annotations

"""
Subcommand contract of the organizer CLI.

`app.py` keeps one instance per subcommand (`template`, `segment`,
`organize`). Each one registers its own flags on a dedicated subparser and is
then run with the loaded `organizer.yaml`, unless it declares that it works
without one.
"""

import argparse
from typing import Protocol

from whatsapp_organizer.config import OrganizerConfig


class Action(Protocol):
    """
    One organizer subcommand.

    Attributes:
        name:
            Subcommand typed on the command line.
        help:
            One-line summary shown by `whatsapp-organizer --help`.
        requires_config:
            False only for commands that run before a config exists, such as
            `template`. All others receive the parsed `OrganizerConfig` and
            accept `--config`.
    """

    name: str
    help: str
    requires_config: bool

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Add the subcommand's own flags (for example `--policy`)."""

    def run(self, args: argparse.Namespace, config: OrganizerConfig | None) -> None:
        """
        Perform the subcommand.

        Args:
            args:
                Parsed flags of this subcommand.
            config:
                Loaded configuration, or None when `requires_config` is False.

        Raises:
            ConfigError:
                For problems the user must fix (missing export, refused
                overwrite). The CLI turns them into exit code 2.
        """
