# WhatsApp Organizer
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""
Template configuration generator.

This action writes a ready-to-edit `organizer.yaml` file into the current
directory (or a user-specified path).
"""

import argparse
from dataclasses import dataclass
from pathlib import Path

from whatsapp_organizer.config import ConfigError, OrganizerConfig


@dataclass(frozen=True)
class TemplateAction:
    """
    `template` subcommand.

    This action does not require a YAML config because it produces one.
    """

    name: str = "template"
    help: str = "Write a template organizer.yaml config"
    requires_config: bool = False

    _TEMPLATE_YAML: str = "\n".join(
        [
            "# Directory with the WhatsApp export (_chat.txt) and its media files",
            "input_dir: input",
            "",
            "# Optional: transcript file name inside input_dir.",
            "# If omitted, the first .txt file in input_dir is used.",
            "# transcript: _chat.txt",
            "",
            "# Organized folders are created below this directory",
            "output_dir: output",
            "",
            "# Run reports",
            "logs_dir: logs",
            "",
            "# Working directory for intermediate files (blocks.yaml)",
            "workdir: work",
            "",
            "# Attachment extensions recognized in the chat (optional; defaults shown)",
            "# media_extensions: [.jpg, .jpeg, .png, .mp4]",
            "",
            "grouping:",
            "  # How attachments are grouped into blocks:",
            "  #   continuity: same author within a short time window",
            "  #   blank_line: an empty message separates blocks",
            "  #   merge: blank lines and author changes separate blocks, then blocks",
            "  #          with the same protocol are joined",
            "  policy: blank_line",
            "",
            "  # Optional: maximum gap in minutes between messages of one block.",
            "  # Defaults to 2 for 'continuity' and no limit for the others.",
            "  # tolerance_minutes: 2",
            "",
            "  # Optional: captions typed more than this many minutes after the last",
            "  # message of a block are not read (blank_line default: 2).",
            "  # caption_window_minutes: 2",
            "",
            "  # Optional: gaps above this many minutes are reported (merge default: 30).",
            "  # interval_alert_minutes: 30",
            "",
            "# File copy options (optional; defaults shown)",
            "# copy:",
            "#   concurrency: 10",
            "#   min_photos_per_protocol: 3",
            "",
        ]
    )

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """
        Register CLI arguments for the `template` subcommand.

        Args:
            parser:
                Subparser for this command.

        Returns:
            None
        """

        parser.add_argument(
            "path",
            nargs="?",
            default="organizer.yaml",
            help="Destination path for the template (default: ./organizer.yaml)",
        )
        parser.add_argument(
            "-f",
            "--force",
            action="store_true",
            help="Allow overwriting an existing file",
        )

    def run(self, args: argparse.Namespace, config: OrganizerConfig | None) -> None:
        """
        Execute the template writer.

        Raises:
            ConfigError:
                If the destination exists and `--force` is not set.
        """

        _ = config
        dest = Path(args.path)
        if dest.exists() and not args.force:
            raise ConfigError(f"Refusing to overwrite existing file: {dest} (use --force)")

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(self._TEMPLATE_YAML, encoding="utf-8")
        print(f"Wrote template config to: {dest}")
