"""Country API - Summary Image Artifact.

One PNG at a fixed path, overwritten by each refresh. No history is kept.
"""

import os
from pathlib import Path

from country_api.core.errors import NotFound
from country_api.core.logging import get_logger

logger = get_logger("summary.artifact")


def save_summary_image(data: bytes, path: Path) -> Path:
    """Replace the artifact atomically so readers never see a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    tmp.write_bytes(data)
    os.replace(tmp, path)
    logger.info(f"Summary image written to {path} ({len(data)} bytes)")
    return path


def read_summary_image(path: Path) -> bytes:
    """Return the last rendered image; NotFound if no refresh produced one."""
    try:
        return path.read_bytes()
    except FileNotFoundError as e:
        raise NotFound("Summary image not found") from e
