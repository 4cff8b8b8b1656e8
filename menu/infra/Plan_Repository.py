"""Plan persistence. Reads and writes never raise: on failure the in-memory plan stays authoritative."""
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from datetime import date
from pathlib import Path
from typing import Optional, Union

from menu.domain.Plan import Plan

logger = logging.getLogger(__name__)


class PlanStore(ABC):
    """Base store: load() returns a Plan (defaults when nothing usable is stored), save() persists one."""

    def load(self, today: Optional[date] = None) -> Plan:
        return Plan.from_dict(self._read(), today=today)

    def save(self, plan: Plan) -> bool:
        try:
            self._write(plan.to_dict())
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to save plan: %s", e)
            return False

    @abstractmethod
    def _read(self) -> dict:
        pass

    @abstractmethod
    def _write(self, document: dict) -> None:
        pass


class MemoryPlanStore(PlanStore):
    def __init__(self, document: Optional[dict] = None):
        self.document = dict(document or {})
        self.saves = 0

    def _read(self) -> dict:
        return json.loads(json.dumps(self.document))

    def _write(self, document: dict) -> None:
        self.document = json.loads(json.dumps(document))
        self.saves += 1


class JsonFilePlanStore(PlanStore):
    """One JSON document on disk, replaced atomically on every save."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> dict:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.error("Failed to read plan from %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Plan file %s does not hold an object; using defaults", self.path)
            return {}
        return data

    def _write(self, document: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".plan_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(document, tmp, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
