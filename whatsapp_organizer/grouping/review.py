# WhatsApp Organizer
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Caption outcome review.

After segmentation each block is checked for caption anomalies, block by block,
so the alerts of one block stay together in the report. A protocol captioned in
more than one block is reported here as a shared folder. The review only records
alerts; how a block is filed is decided by the placement stage.
"""

from whatsapp_organizer.grouping.alerts import AlertKind, AlertRecorder
from whatsapp_organizer.grouping.blocks import Block
from whatsapp_organizer.grouping.policies import GroupingPolicy


def review_blocks(blocks: list[Block], policy: GroupingPolicy, recorder: AlertRecorder) -> None:
    """Record caption anomalies for every block, in block order."""

    used_protocols: set[str] = set()
    for block in blocks:
        if policy.merge_by_protocol:
            _review_protocol_block(block, recorder)
        else:
            _review_caption_block(block, used_protocols, recorder)


def _review_caption_block(block: Block, used_protocols: set[str], recorder: AlertRecorder) -> None:
    valid = block.valid_protocols

    for token in block.invalid_tokens:
        recorder.add(
            AlertKind.INVALID_PROTOCOL,
            f'Protocolo "{token}" inválido (esperado 2025/2026 + 6 dígitos) - '
            f"{block.author} - enviado para sem_legenda",
        )

    if len(valid) > 1:
        recorder.add(
            AlertKind.MULTIPLE_CAPTIONS,
            f"Bloco com {len(valid)} legendas ({', '.join(valid)}) - {block.author} - subpastas criadas",
        )
    elif len(valid) == 1:
        if valid[0] in used_protocols:
            recorder.add(
                AlertKind.SHARED_FOLDER,
                f"Pasta {valid[0]} recebeu arquivos de múltiplos blocos",
            )
        used_protocols.add(valid[0])

        for text in block.free_text:
            recorder.add(AlertKind.IGNORED_TEXT, f'Texto "{text[:50]}" ignorado no bloco {valid[0]}')


def _review_protocol_block(block: Block, recorder: AlertRecorder) -> None:
    valid = block.valid_protocols
    if len(valid) > 1:
        recorder.add(
            AlertKind.MULTIPLE_CAPTIONS,
            f"Bloco OS {block.protocol_number} com {len(valid)} legendas ({', '.join(valid)}) - "
            f"{block.author} - arquivado em {block.protocol_number}",
        )

    if block.protocol_number:
        return

    opened = block.first_timestamp.strftime("%d/%m/%Y %H:%M") if block.first_timestamp else "sem-data"
    invalid = block.invalid_tokens
    if invalid:
        recorder.add(
            AlertKind.NO_PROTOCOL,
            f"Bloco com legenda inválida ({', '.join(invalid)}): {block.author} - {opened} "
            f"({len(block.media)} mídias)",
        )
    else:
        recorder.add(
            AlertKind.NO_PROTOCOL,
            f"Bloco sem OS: {block.author} - {opened} ({len(block.media)} mídias)",
        )
