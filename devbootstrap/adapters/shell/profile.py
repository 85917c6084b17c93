"""
Shell profile writer — append-if-absent text injection.

The only mutation performed on rc files is appending a block that is
not already there. Presence is decided by a marker line contained in
the block, so repeated runs leave the file unchanged.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class ProfileWriter:
    """Append text blocks to shell profiles exactly once."""

    def contains(self, path: Path, marker: str) -> bool:
        if not path.is_file():
            return False
        return marker in path.read_text(encoding="utf-8", errors="replace")

    def append_if_absent(
        self,
        path: Path,
        marker: str,
        block: str,
        create: bool = False,
    ) -> bool:
        """Append ``block`` unless ``marker`` already appears in ``path``.

        Args:
            path: Profile file (e.g. ``~/.zshrc``).
            marker: Substring identifying the block.
            block: Text to append. Should contain ``marker``.
            create: Create the file when missing; otherwise a missing
                file is left alone.

        Returns:
            True if the file was modified.
        """
        if not path.exists():
            if not create:
                logger.debug("Profile %s does not exist, skipping", path)
                return False
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()
            logger.info("Created %s", path)

        if self.contains(path, marker):
            logger.debug("Profile %s already has %r", path, marker)
            return False

        existing = path.read_text(encoding="utf-8", errors="replace")
        prefix = "" if not existing or existing.endswith("\n") else "\n"
        with path.open("a", encoding="utf-8") as f:
            f.write(f"{prefix}\n{block.rstrip()}\n")
        logger.info("Updated %s", path)
        return True
