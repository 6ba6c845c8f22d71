from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import List

from models import Decision

logger = logging.getLogger(__name__)

DATA_DIR = Path(os.getenv("DECISIONS_DIR", "data"))


class StorageError(Exception):
    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


def ensure_data_dir() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def slugify(name: str) -> str:
    cleaned = re.sub(r"[^a-zA-Z0-9_-]+", "-", name.strip()).strip("-")
    return cleaned.lower() or "decision"


def decision_path(title: str) -> Path:
    ensure_data_dir()
    return DATA_DIR / f"{slugify(title)}.json"


def list_decisions() -> List[str]:
    ensure_data_dir()
    return sorted(path.stem for path in DATA_DIR.glob("*.json"))


def save_decision(decision: Decision) -> Path:
    path = decision_path(decision.title)
    decision.touch()
    with path.open("w", encoding="utf-8") as handle:
        json.dump(decision.to_dict(), handle, indent=2)
    logger.info("Saved decision '%s' to %s", decision.title, path)
    return path


def load_decision(title: str) -> Decision | None:
    path = decision_path(title)
    if not path.exists():
        logger.debug("No saved decision at %s", path)
        return None
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise StorageError(path, f"invalid JSON ({exc.msg})") from exc
        except UnicodeDecodeError as exc:
            raise StorageError(path, "not UTF-8 text") from exc
    if not isinstance(data, dict):
        raise StorageError(path, "expected a JSON object")
    try:
        decision = Decision.from_dict(data)
    except (TypeError, ValueError, KeyError, AttributeError) as exc:
        raise StorageError(path, f"malformed decision ({exc})") from exc
    logger.info("Loaded decision from %s", path)
    return decision


def delete_decision(title: str) -> bool:
    path = decision_path(title)
    if not path.exists():
        return False
    path.unlink()
    logger.info("Deleted decision file %s", path)
    return True
