"""Load a journal JSON backup into a LogBundle."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import ValidationError

from healthlog.models import LogBundle

logger = logging.getLogger(__name__)


class BackupFormatError(ValueError):
    """Raised when a backup file is not a valid journal backup."""


# Backup key -> LogBundle field. Several keys map to one field across
# backup versions; their entries are concatenated.
BACKUP_KEYS = {
    "foodEntries": "food",
    "symptomEntries": "symptoms",
    "waterEntries": "water",
    "exerciseEntries": "exercise",
    "sleepEntries": "sleep",
    "wellnessFeelings": "wellness",
    "medicineEntries": "medications",
    "medicationLogs": "medications",
    "knownAllergies": "allergies",
}


def load_backup(data: Dict[str, Any]) -> LogBundle:
    """
    Build a LogBundle from a parsed backup document.

    The document must carry ``version`` and ``foodEntries``; every other
    category is optional. Unknown keys (bowel entries, weight, settings)
    are ignored.

    Raises:
        BackupFormatError: If required keys are missing or an entry is invalid
    """
    if not isinstance(data, dict) or not data.get("version") or "foodEntries" not in data:
        raise BackupFormatError("Invalid backup file format")

    fields: Dict[str, list] = {}
    for key, field_name in BACKUP_KEYS.items():
        entries = data.get(key)
        if entries:
            fields.setdefault(field_name, []).extend(entries)

    try:
        bundle = LogBundle.model_validate(fields)
    except ValidationError as e:
        raise BackupFormatError(f"Invalid backup entry: {e.errors()[0]['msg']}") from e

    logger.info(
        "Loaded backup version %s: %d food, %d symptom entries",
        data.get("version"),
        len(bundle.food),
        len(bundle.symptoms),
    )
    return bundle


def load_backup_file(path: Union[str, Path]) -> LogBundle:
    """Read and parse a backup file from disk."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise BackupFormatError("Backup is not a UTF-8 text file") from e
    except json.JSONDecodeError as e:
        raise BackupFormatError(f"Backup is not valid JSON: {e.msg}") from e
    return load_backup(data)
