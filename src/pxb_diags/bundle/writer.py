"""Persist fetched artifacts into the bundle."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from pxb_diags.errors import WriteError

logger = logging.getLogger(__name__)


class ArtifactWriter:
    """Writes artifact text to its planned path.

    Content goes to a temporary sibling first and is renamed over the destination,
    so a reader never sees a partially written artifact and reruns replace files in place.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def write(self, path: Path, content: str) -> Path:
        path = Path(path)
        try:
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        except OSError as e:
            raise WriteError(str(path), f"error creating file: {e}") from e
        try:
            with os.fdopen(fd, "w", encoding=self.encoding, errors="replace") as f:
                f.write(content)
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise WriteError(str(path), str(e)) from e
        logger.debug("Wrote %d characters to %s", len(content), path)
        return path
