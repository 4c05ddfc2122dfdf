"""Loader for the art-channel allow-list of trusted site domains."""

from __future__ import annotations

from pathlib import Path

from spiritbot.util.logger import get_logger

logger = get_logger("allowed_sites")


def load_allowed_sites(path: Path) -> tuple[str, ...]:
    """Read one allow-listed site per line from ``path``.

    Blank lines and surrounding whitespace are dropped, since an empty entry
    would match every message. A missing file yields an empty allow-list so
    every text-only art post is rejected until the file is provided.

    Args:
        path: Location of the flat text file.

    Returns:
        The allow-listed substrings in file order.
    """
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except FileNotFoundError:
        logger.error("[ALLOWED SITES] %s not found; text-only art posts will be rejected", path)
        return ()

    sites = tuple(line.strip() for line in lines if line.strip())
    logger.info("[ALLOWED SITES] Loaded %d allow-listed sites from %s", len(sites), path)
    return sites
