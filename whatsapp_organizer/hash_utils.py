# WhatsApp Organizer
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Hash utilities.

MD5 is only used to detect whether a chat export changed since the last
segmentation run. It is not used for cryptographic security.
"""

from pathlib import Path
import hashlib


def md5_file(path: Path) -> str:
    """Compute an MD5 hash for a file.

    Args:
        path:
            File path.

    Returns:
        Lowercase hex MD5 digest.
    """

    hasher = hashlib.md5(usedforsecurity=False)

    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1024 * 1024), b""):
            hasher.update(chunk)

    return hasher.hexdigest()
