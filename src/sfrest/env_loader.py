# src/sfrest/env_loader.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from dotenv import load_dotenv

_logger = logging.getLogger(__name__)

ENV_FILE_NAMES = (".env", ".dotenv")


def load_env_files(
    candidates: Optional[Iterable[Path]] = None,
    *,
    override: bool = False,
) -> Optional[Path]:
    """Load SF_* settings from the first existing .env-style file.

    Looks for .env / .dotenv in the current working directory unless
    ``candidates`` is given. Variables already set in the environment win
    unless ``override`` is true. Returns the file that was loaded, if any.
    """
    if candidates is None:
        cwd = Path.cwd()
        candidates = [cwd / name for name in ENV_FILE_NAMES]
    paths = [Path(p) for p in candidates]

    for path in paths:
        if path.is_file():
            load_dotenv(path, override=override)
            _logger.debug("Loaded environment variables from %s", path)
            return path

    _logger.debug("No env file found among: %s", ", ".join(str(p) for p in paths))
    return None
