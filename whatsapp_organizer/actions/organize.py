# WhatsApp Organizer
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""
File organization action.

Runs the full pipeline: group the chat attachments into blocks, plan the
destination of every file, copy the files and write the run report.

For safety:
- If the run output folder already contains files and `--force` is not given,
  the user is prompted on an interactive TTY; otherwise the action aborts.
- `--dry-run` plans everything and writes nothing but the console summary.
"""

import argparse
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from whatsapp_organizer.cli_io import is_interactive_tty, prompt_reuse_output
from whatsapp_organizer.config import ConfigError, OrganizerConfig
from whatsapp_organizer.copier import copy_files
from whatsapp_organizer.grouping.alerts import AlertRecorder
from whatsapp_organizer.grouping.pipeline import segment_transcript
from whatsapp_organizer.grouping.policies import PRESETS
from whatsapp_organizer.placement import output_folder_name, plan_placement
from whatsapp_organizer.report import RunStats, render_report, write_report
from whatsapp_organizer.transcripts.loader import find_transcript, load_transcript


@dataclass(frozen=True)
class OrganizeAction:
    """
    `organize` subcommand.

    Copies the chat media into protocol folders below the output directory.
    """

    name: str = "organize"
    help: str = "Copy chat media into protocol folders and write a report"
    requires_config: bool = True

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """
        Register CLI arguments for the `organize` subcommand.

        Args:
            parser:
                Subparser for this command.

        Returns:
            None
        """

        parser.add_argument(
            "--policy",
            choices=sorted(PRESETS),
            help="Override the grouping policy from the config",
        )
        parser.add_argument(
            "-n",
            "--dry-run",
            action="store_true",
            help="Plan only; do not create folders, copy files or write the report",
        )
        parser.add_argument(
            "-f",
            "--force",
            action="store_true",
            help="Copy into an existing, non-empty output folder without asking",
        )

    def run(self, args: argparse.Namespace, config: OrganizerConfig | None) -> None:
        """
        Execute the organization run.

        Args:
            args:
                Parsed args for the subcommand.
            config:
                Loaded configuration.

        Returns:
            None

        Raises:
            ConfigError:
                If the transcript cannot be found or read, or if confirmation is
                required but cannot be requested.
        """

        if config is None:
            raise RuntimeError("OrganizeAction requires a config, but none was provided")

        dry_run = bool(args.dry_run)
        policy = config.grouping.build_policy(getattr(args, "policy", None))

        if dry_run:
            print("DRY-RUN: no file will be copied")

        transcript = find_transcript(config)
        print(f"Reading: {transcript.name}")

        result = segment_transcript(
            load_transcript(transcript),
            policy,
            extensions=config.media_extensions,
        )
        print(f"{result.messages_total} message(s) found")
        print(f"{len(result.blocks)} media block(s) identified (policy: {policy.name})")

        if policy.merge_by_protocol:
            with_protocol = sum(1 for b in result.blocks if b.protocol_number)
            print(f"   - {with_protocol} block(s) with protocol")
            print(f"   - {len(result.blocks) - with_protocol} block(s) without protocol")

        output_dir = config.output_dir / output_folder_name(policy, result.last_timestamp)
        if not dry_run and not args.force and self._has_files(output_dir):
            if not is_interactive_tty():
                raise ConfigError(
                    f"Output folder already contains files: {output_dir}. Re-run with --force."
                )
            if not prompt_reuse_output(output_dir):
                print("Aborted.")
                return

        recorder = AlertRecorder(list(result.alerts))
        plan = plan_placement(
            result.blocks,
            policy,
            input_dir=config.input_dir,
            output_dir=output_dir,
            recorder=recorder,
            min_photos=config.copy.min_photos_per_protocol,
        )

        print(f"{len(plan.tasks)} file(s) to {'process (dry-run)' if dry_run else 'copy'} into: {output_dir}")
        stats = copy_files(
            plan,
            concurrency=config.copy.concurrency,
            dry_run=dry_run,
            recorder=recorder,
        )

        print("Done.")
        print(f"   - {stats.copied} file(s) {'would be copied' if dry_run else 'copied'}")
        print(f"   - {stats.errors} file(s) not found")
        print(f"   - {len(recorder)} alert(s)")

        now = datetime.now()
        report = render_report(
            RunStats(
                policy=policy.name,
                merge_by_protocol=policy.merge_by_protocol,
                output_dir=output_dir,
                dry_run=dry_run,
                blocks_total=len(result.blocks),
                copied=stats.copied,
                not_found=stats.errors,
            ),
            recorder.alerts,
            generated_at=now,
        )

        if dry_run:
            print(report)
            return

        report_path = write_report(report, config.logs_dir, policy=policy.name, generated_at=now)
        print(f"Report written to: {report_path}")

    def _has_files(self, path: Path) -> bool:
        return path.is_dir() and any(path.iterdir())
