# WhatsApp Organizer
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""
Block segmentation action.

This action groups the attachments of the chat export into blocks and writes
them, together with all alerts, to a YAML work file for inspection. No media
file is touched.

The work file records the MD5 of the export and the effective grouping policy,
so an unchanged input is not segmented twice.
"""

import argparse
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from whatsapp_organizer.config import OrganizerConfig
from whatsapp_organizer.grouping.pipeline import segment_transcript
from whatsapp_organizer.grouping.policies import PRESETS, GroupingPolicy
from whatsapp_organizer.hash_utils import md5_file
from whatsapp_organizer.transcripts.loader import GROUPING_VERSION, find_transcript, load_transcript
from whatsapp_organizer.yaml_io import read_yaml_mapping, write_yaml_mapping


@dataclass(frozen=True)
class SegmentAction:
    """
    `segment` subcommand.

    Writes `<workdir>/blocks.yaml` with the grouping result.
    """

    name: str = "segment"
    help: str = "Group chat attachments into blocks (no files are copied)"
    requires_config: bool = True

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """
        Register CLI arguments for the `segment` subcommand.

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
            "-f",
            "--force",
            action="store_true",
            help="Segment again even if the export and policy are unchanged",
        )

    def run(self, args: argparse.Namespace, config: OrganizerConfig | None) -> None:
        """
        Execute block segmentation.

        Args:
            args:
                Parsed args for the subcommand.
            config:
                Loaded configuration.

        Returns:
            None

        Raises:
            ConfigError:
                If the transcript cannot be found or read.
        """

        if config is None:
            raise RuntimeError("SegmentAction requires a config, but none was provided")

        policy = config.grouping.build_policy(getattr(args, "policy", None))
        transcript = find_transcript(config)
        out_path = config.workdir / "blocks.yaml"

        transcript_md5 = md5_file(transcript)
        rel_path = self._rel_posix(config.base_dir, transcript)

        if not args.force and out_path.exists():
            existing = read_yaml_mapping(out_path)
            if self._blocks_up_to_date(existing, rel_path=rel_path, transcript_md5=transcript_md5, policy=policy):
                print(f"Skipping unchanged transcript: {rel_path}")
                return

        print(f"Segmenting: {rel_path} (policy: {policy.name})")
        result = segment_transcript(
            load_transcript(transcript),
            policy,
            extensions=config.media_extensions,
        )

        payload: dict[str, Any] = {
            "schema_version": 1,
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "grouping_version": GROUPING_VERSION,
            "source": {
                "path": rel_path,
                "md5": transcript_md5,
            },
            "policy": asdict(policy),
            "messages_total": result.messages_total,
            "blocks_total": len(result.blocks),
            "blocks": [b.to_dict() for b in result.blocks],
            "alerts": [{"kind": a.kind.value, "message": a.message} for a in result.alerts],
        }
        write_yaml_mapping(out_path, payload)

        print(f"{result.messages_total} message(s), {len(result.blocks)} block(s), {len(result.alerts)} alert(s)")
        print(f"Wrote blocks: {out_path}")

    def _blocks_up_to_date(
        self,
        existing: dict[str, Any],
        *,
        rel_path: str,
        transcript_md5: str,
        policy: GroupingPolicy,
    ) -> bool:
        """Return True if an existing block work file matches current inputs."""

        if int(existing.get("grouping_version") or 0) != GROUPING_VERSION:
            return False

        source = existing.get("source")
        if not isinstance(source, dict):
            return False

        if str(source.get("path") or "") != rel_path:
            return False

        if str(source.get("md5") or "") != transcript_md5:
            return False

        return existing.get("policy") == asdict(policy)

    def _rel_posix(self, base_dir: Path, path: Path) -> str:
        """
        Compute a stable POSIX-style relative path.

        Args:
            base_dir:
                Base directory.
            path:
                Path to relativize.

        Returns:
            Relative path using '/' separators.
        """

        try:
            rel = path.resolve().relative_to(base_dir.resolve())
        except ValueError:
            rel = path.resolve()
        return rel.as_posix()
