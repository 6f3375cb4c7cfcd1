# WhatsApp Organizer
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Bounded-parallel file copy.

Copy tasks are processed in fixed-size batches; within a batch the copies run
concurrently in worker threads. A failed copy is reported as an alert and does
not stop the run.
"""

import asyncio
import shutil
from dataclasses import dataclass

from whatsapp_organizer.grouping.alerts import AlertKind, AlertRecorder
from whatsapp_organizer.placement import CopyTask, PlacementPlan


@dataclass(frozen=True)
class CopyStats:
    copied: int = 0
    errors: int = 0


def copy_files(
    plan: PlacementPlan,
    *,
    concurrency: int,
    dry_run: bool,
    recorder: AlertRecorder,
) -> CopyStats:
    """Execute a placement plan.

    Args:
        plan:
            Folders and copy tasks to execute.
        concurrency:
            Batch size (number of parallel copies).
        dry_run:
            If True, nothing is written; every task counts as copied.
        recorder:
            Alert sink for missing or failing files.

    Returns:
        Copy statistics.
    """

    if concurrency <= 0:
        raise ValueError("concurrency must be > 0")

    if dry_run:
        return CopyStats(copied=len(plan.tasks), errors=0)

    for directory in plan.directories:
        directory.mkdir(parents=True, exist_ok=True)

    return asyncio.run(_copy_all(plan.tasks, concurrency=concurrency, recorder=recorder))


async def _copy_all(tasks: list[CopyTask], *, concurrency: int, recorder: AlertRecorder) -> CopyStats:
    copied = 0
    errors = 0
    total = len(tasks)

    for start in range(0, total, concurrency):
        batch = tasks[start:start + concurrency]
        results = await asyncio.gather(*(_copy_one(t) for t in batch))

        # Alerts are recorded in task order, independent of completion order.
        for task, error in zip(batch, results):
            if error is None:
                copied += 1
                continue

            errors += 1
            if isinstance(error, FileNotFoundError):
                recorder.add(
                    AlertKind.FILE_NOT_FOUND,
                    f"Arquivo não encontrado: {task.original_name} ({task.sent} - {task.author})",
                )
            else:
                recorder.add(
                    AlertKind.FILE_NOT_FOUND,
                    f"Erro ao copiar {task.original_name}: {error}",
                )

        done = min(start + concurrency, total)
        print(f"\r   Copiando: {done}/{total}", end="", flush=True)

    if total:
        print()

    return CopyStats(copied=copied, errors=errors)


async def _copy_one(task: CopyTask) -> OSError | None:
    try:
        await asyncio.to_thread(shutil.copy2, task.source, task.destination)
    except OSError as exc:
        return exc
    return None
