# WhatsApp Organizer
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""
Configuration loading and validation.

This module handles reading `organizer.yaml`, validating required keys, and
normalizing paths so that downstream actions can rely on a typed config object.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from whatsapp_organizer.grouping.policies import PRESETS, GroupingPolicy, get_policy
from whatsapp_organizer.transcripts.media import DEFAULT_MEDIA_EXTENSIONS


CONFIG_ENV_VAR = "WHATSAPP_ORGANIZER_CONFIG"


@dataclass(frozen=True)
class GroupingConfig:
    """
    Configuration for block grouping.

    Attributes:
        policy:
            Name of the grouping preset (`continuity`, `blank_line`, `merge`).
        tolerance_minutes:
            Optional override of the preset's continuity window.
        caption_window_minutes:
            Optional override of the preset's caption text window.
        interval_alert_minutes:
            Optional override of the preset's large-gap alert threshold.
    """

    policy: str = "blank_line"
    tolerance_minutes: float | None = None
    caption_window_minutes: float | None = None
    interval_alert_minutes: float | None = None

    def build_policy(self, name: str | None = None) -> GroupingPolicy:
        """Build the effective policy, optionally for another preset name."""

        overrides: dict[str, Any] = {}
        if self.tolerance_minutes is not None:
            overrides["tolerance_minutes"] = self.tolerance_minutes
        if self.caption_window_minutes is not None:
            overrides["caption_window_minutes"] = self.caption_window_minutes
        if self.interval_alert_minutes is not None:
            overrides["interval_alert_minutes"] = self.interval_alert_minutes

        try:
            return get_policy(name or self.policy, **overrides)
        except KeyError as exc:
            raise ConfigError(
                f"Unknown grouping policy: {name or self.policy} (supported: {', '.join(PRESETS)})"
            ) from exc


@dataclass(frozen=True)
class CopyConfig:
    """
    Configuration for the file placement step.

    Attributes:
        concurrency:
            Number of files copied in parallel.
        min_photos_per_protocol:
            Protocol folders with fewer photos are reported.
    """

    concurrency: int = 10
    min_photos_per_protocol: int = 3


@dataclass(frozen=True)
class OrganizerConfig:
    """
    Parsed configuration for an organizer run.

    Attributes:
        config_path:
            Path to the YAML config file used for this run.
        base_dir:
            Directory that relative paths are resolved against.
        input_dir:
            Directory holding the chat export and its media files.
        transcript:
            Explicit transcript file. If None, the first `.txt` file in
            `input_dir` is used.
        output_dir:
            Directory receiving the organized folders.
        logs_dir:
            Directory for run reports.
        workdir:
            Directory for intermediate work files.
        media_extensions:
            Attachment extensions recognized in the transcript.
        grouping:
            Settings used by the grouping step.
        copy:
            Settings used by the placement step.
    """

    config_path: Path
    base_dir: Path
    input_dir: Path
    transcript: Path | None
    output_dir: Path
    logs_dir: Path
    workdir: Path
    media_extensions: tuple[str, ...]
    grouping: GroupingConfig
    copy: CopyConfig


class ConfigError(RuntimeError):
    """
    Raised when the YAML configuration is missing, invalid, or cannot be parsed.
    """

    pass


def find_config_path(cli_path: str | None) -> Path:
    """
    Determine which YAML config file to use.

    Args:
        cli_path:
            Optional config path provided on the command line.

    Returns:
        The resolved Path object (not necessarily existing). The command line
        wins over the `WHATSAPP_ORGANIZER_CONFIG` environment variable, which
        wins over `./organizer.yaml`.
    """

    if cli_path:
        return Path(cli_path)

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    return Path.cwd() / "organizer.yaml"


def load_config(path: Path) -> OrganizerConfig:
    """
    Load and validate an `organizer.yaml` configuration file.

    Args:
        path:
            Path to the YAML config file.

    Returns:
        A validated OrganizerConfig instance.

    Raises:
        ConfigError:
            If the file is missing, unreadable, cannot be parsed as YAML, or
            contains invalid values.
    """

    if not path.exists():
        raise ConfigError(
            "No organizer.yaml found in current directory and no --config provided. "
            "Use the 'template' command to create one or pass --config PATH."
        )
    if not path.is_file():
        raise ConfigError(f"Config path is not a file: {path}")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except Exception as exc:  # noqa: BLE001
        raise ConfigError(f"Failed to read YAML config: {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError("Config YAML must contain a mapping at the top level")

    input_dir = _parse_dir(raw, "input_dir", "input")
    output_dir = _parse_dir(raw, "output_dir", "output")
    logs_dir = _parse_dir(raw, "logs_dir", "logs")
    workdir = _parse_dir(raw, "workdir", "work")

    transcript = raw.get("transcript")
    if transcript is not None and (not isinstance(transcript, str) or not transcript.strip()):
        raise ConfigError("'transcript' must be a non-empty string if provided")

    media_extensions = _parse_extensions(raw.get("media_extensions"))
    grouping = _parse_grouping(raw.get("grouping"))
    copy_cfg = _parse_copy(raw.get("copy"))

    # Interpret directories relative to config file location.
    base_dir = path.parent.resolve()
    input_path = (base_dir / input_dir).resolve()

    return OrganizerConfig(
        config_path=path.resolve(),
        base_dir=base_dir,
        input_dir=input_path,
        transcript=(input_path / transcript.strip()).resolve() if isinstance(transcript, str) else None,
        output_dir=(base_dir / output_dir).resolve(),
        logs_dir=(base_dir / logs_dir).resolve(),
        workdir=(base_dir / workdir).resolve(),
        media_extensions=media_extensions,
        grouping=grouping,
        copy=copy_cfg,
    )


def _parse_dir(raw: dict[str, Any], key: str, default: str) -> str:
    value = raw.get(key, default)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{key}' must be a non-empty string")
    return value.strip()


def _parse_extensions(value: Any) -> tuple[str, ...]:
    """
    Parse the optional `media_extensions` list.

    Entries may be given with or without the leading dot.
    """

    if value is None:
        return DEFAULT_MEDIA_EXTENSIONS

    if not isinstance(value, list) or not value:
        raise ConfigError("'media_extensions' must be a non-empty list if provided")

    out: list[str] = []
    for idx, item in enumerate(value, start=1):
        if not isinstance(item, str) or not item.strip().lstrip("."):
            raise ConfigError(
                f"Media extension must be a non-empty string (problem at index {idx})"
            )
        ext = "." + item.strip().lstrip(".").lower()
        if ext not in out:
            out.append(ext)

    return tuple(out)


def _parse_minutes(value: Any, key: str) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{key} must be a number")
    if value < 0:
        raise ConfigError(f"{key} must be >= 0")
    return float(value)


def _parse_grouping(value: Any) -> GroupingConfig:
    """
    Parse and validate the optional `grouping` section.

    Args:
        value:
            Raw YAML value for the `grouping` key.

    Returns:
        A GroupingConfig instance (with defaults if section is missing).

    Raises:
        ConfigError:
            If the section exists but is not valid.
    """

    if value is None:
        return GroupingConfig()

    if not isinstance(value, dict):
        raise ConfigError("'grouping' must be a mapping if provided")

    policy = value.get("policy", GroupingConfig.policy)
    if not isinstance(policy, str) or not policy.strip():
        raise ConfigError("grouping.policy must be a non-empty string")

    policy_norm = policy.strip().lower()
    if policy_norm not in PRESETS:
        raise ConfigError(f"grouping.policy must be one of: {', '.join(PRESETS)}")

    return GroupingConfig(
        policy=policy_norm,
        tolerance_minutes=_parse_minutes(value.get("tolerance_minutes"), "grouping.tolerance_minutes"),
        caption_window_minutes=_parse_minutes(
            value.get("caption_window_minutes"), "grouping.caption_window_minutes"
        ),
        interval_alert_minutes=_parse_minutes(
            value.get("interval_alert_minutes"), "grouping.interval_alert_minutes"
        ),
    )


def _parse_copy(value: Any) -> CopyConfig:
    """
    Parse and validate the optional `copy` section.

    Args:
        value:
            Raw YAML value for the `copy` key.

    Returns:
        A CopyConfig instance (with defaults if section is missing).

    Raises:
        ConfigError:
            If the section exists but is not valid.
    """

    if value is None:
        return CopyConfig()

    if not isinstance(value, dict):
        raise ConfigError("'copy' must be a mapping if provided")

    concurrency = value.get("concurrency", CopyConfig.concurrency)
    min_photos = value.get("min_photos_per_protocol", CopyConfig.min_photos_per_protocol)

    if isinstance(concurrency, bool) or not isinstance(concurrency, int):
        raise ConfigError("copy.concurrency must be an integer")
    if isinstance(min_photos, bool) or not isinstance(min_photos, int):
        raise ConfigError("copy.min_photos_per_protocol must be an integer")

    if concurrency <= 0:
        raise ConfigError("copy.concurrency must be > 0")
    if min_photos < 0:
        raise ConfigError("copy.min_photos_per_protocol must be >= 0")

    return CopyConfig(
        concurrency=concurrency,
        min_photos_per_protocol=min_photos,
    )
