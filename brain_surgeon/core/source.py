"""
Source File Module

Reading, writing and backing up program files. Every failure is reported as
an IOFailure carrying the offending path.
"""

import datetime
import shutil
from pathlib import Path
import logging

from .errors import IOFailure

logger = logging.getLogger(__name__)

DEFAULT_BACKUP_DIR = ".brain_surgeon_backups"


def read_source(filepath: str) -> str:
    """Read a program file as UTF-8 text."""
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read file {filepath}: {e}")
        raise IOFailure(f"Cannot open file: {filepath}", filepath) from e


def write_source(filepath: str, content: str):
    """Overwrite a program file with new content."""
    try:
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(content)
    except OSError as e:
        logger.error(f"Failed to write file {filepath}: {e}")
        raise IOFailure(f"Cannot write to file: {filepath}", filepath) from e
    logger.info(f"Wrote {len(content)} characters to {filepath}")


def create_backup(filepath: str, backup_dir: str = DEFAULT_BACKUP_DIR) -> Path:
    """
    Copy a file into the backup directory before it is overwritten.

    Args:
        filepath: File to back up
        backup_dir: Directory receiving timestamped copies

    Returns:
        Path of the created backup
    """
    try:
        backup_path = Path(backup_dir)
        backup_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        backup_filepath = backup_path / f"{Path(filepath).name}.{timestamp}.backup"
        shutil.copy2(filepath, backup_filepath)
    except OSError as e:
        logger.error(f"Failed to create backup for {filepath}: {e}")
        raise IOFailure(f"Cannot back up file: {filepath}", filepath) from e

    logger.info(f"Created backup: {backup_filepath}")
    return backup_filepath
