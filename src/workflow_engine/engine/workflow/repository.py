"""Keyed storage for workflow definitions and instances.

The transition engine only needs get/put/list by id plus a way to serialize
writers on a single instance. Two implementations are provided:

- `InMemoryWorkflowRepository`: process-local dictionaries
- `JsonFileWorkflowRepository`: two JSON files under a state directory

Neither gives durability guarantees beyond "the last put is on disk" for the
JSON variant. Its per-instance locks serialize writers within one process
only; separate processes sharing a state directory can still lose updates.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from pathlib import Path
from typing import Protocol, TypeVar

from pydantic import BaseModel

from .models import WorkflowDefinition, WorkflowInstance

logger = logging.getLogger(__name__)

_M = TypeVar("_M", bound=BaseModel)


class WorkflowRepository(Protocol):
    """Storage contract the workflow service depends on."""

    def get_definition(self, definition_id: str) -> WorkflowDefinition | None: ...

    def put_definition(self, definition: WorkflowDefinition) -> WorkflowDefinition: ...

    def list_definitions(self) -> list[WorkflowDefinition]: ...

    def get_instance(self, instance_id: str) -> WorkflowInstance | None: ...

    def put_instance(self, instance: WorkflowInstance) -> WorkflowInstance: ...

    def list_instances(self) -> list[WorkflowInstance]: ...

    def instance_lock(self, instance_id: str) -> AbstractContextManager[None]:
        """Hold exclusive write access to one instance id."""
        ...


class _KeyedLocks:
    """One lock per key, created on first use and dropped by its last holder."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._holders: dict[str, int] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._holders[key] = self._holders.get(key, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._holders[key] -= 1
                if self._holders[key] == 0:
                    del self._holders[key]
                    del self._locks[key]


class InMemoryWorkflowRepository:
    """Thread-safe in-memory repository.

    Stored models are copied on the way in and out so callers can never mutate
    a stored record without going through `put_*`.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._definitions: dict[str, WorkflowDefinition] = {}
        self._instances: dict[str, WorkflowInstance] = {}
        self._instance_locks = _KeyedLocks()

    def get_definition(self, definition_id: str) -> WorkflowDefinition | None:
        with self._lock:
            found = self._definitions.get(definition_id)
            return found.model_copy(deep=True) if found is not None else None

    def put_definition(self, definition: WorkflowDefinition) -> WorkflowDefinition:
        with self._lock:
            self._definitions[definition.id] = definition.model_copy(deep=True)
        return definition

    def list_definitions(self) -> list[WorkflowDefinition]:
        with self._lock:
            return [d.model_copy(deep=True) for d in self._definitions.values()]

    def get_instance(self, instance_id: str) -> WorkflowInstance | None:
        with self._lock:
            found = self._instances.get(instance_id)
            return found.model_copy(deep=True) if found is not None else None

    def put_instance(self, instance: WorkflowInstance) -> WorkflowInstance:
        with self._lock:
            self._instances[instance.id] = instance.model_copy(deep=True)
        return instance

    def list_instances(self) -> list[WorkflowInstance]:
        with self._lock:
            return [i.model_copy(deep=True) for i in self._instances.values()]

    def instance_lock(self, instance_id: str) -> AbstractContextManager[None]:
        return self._instance_locks.hold(instance_id)


class JsonFileWorkflowRepository:
    """JSON-file backed repository.

    Layout under `root`:
      - definitions.json: list of definitions
      - instances.json: list of instances
    """

    def __init__(self, root: Path) -> None:
        self._root = root
        self._lock = threading.Lock()
        self._instance_locks = _KeyedLocks()

    @property
    def definitions_file(self) -> Path:
        return self._root / "definitions.json"

    @property
    def instances_file(self) -> Path:
        return self._root / "instances.json"

    def _load_unlocked(self, path: Path, model: type[_M]) -> dict[str, _M]:
        if not path.exists():
            return {}
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            raw = None
        if not isinstance(raw, list):
            self._set_aside_unlocked(path)
            return {}
        items = [model.model_validate(item) for item in raw if isinstance(item, dict)]
        return {getattr(item, "id"): item for item in items}

    def _set_aside_unlocked(self, path: Path) -> None:
        # The next put rewrites `path`, so keep the unreadable contents next to it.
        corrupt = path.with_suffix(path.suffix + ".corrupt")
        path.replace(corrupt)
        logger.warning(
            "Workflow state file is unreadable; moved aside and treating as empty",
            extra={"path": str(path), "moved_to": str(corrupt)},
        )

    def _save_unlocked(self, path: Path, items: dict[str, _M]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = [item.model_dump(mode="json") for item in items.values()]
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        tmp.replace(path)

    def get_definition(self, definition_id: str) -> WorkflowDefinition | None:
        with self._lock:
            return self._load_unlocked(self.definitions_file, WorkflowDefinition).get(
                definition_id
            )

    def put_definition(self, definition: WorkflowDefinition) -> WorkflowDefinition:
        with self._lock:
            items = self._load_unlocked(self.definitions_file, WorkflowDefinition)
            items[definition.id] = definition
            self._save_unlocked(self.definitions_file, items)
        return definition

    def list_definitions(self) -> list[WorkflowDefinition]:
        with self._lock:
            return list(self._load_unlocked(self.definitions_file, WorkflowDefinition).values())

    def get_instance(self, instance_id: str) -> WorkflowInstance | None:
        with self._lock:
            return self._load_unlocked(self.instances_file, WorkflowInstance).get(instance_id)

    def put_instance(self, instance: WorkflowInstance) -> WorkflowInstance:
        with self._lock:
            items = self._load_unlocked(self.instances_file, WorkflowInstance)
            items[instance.id] = instance
            self._save_unlocked(self.instances_file, items)
        return instance

    def list_instances(self) -> list[WorkflowInstance]:
        with self._lock:
            return list(self._load_unlocked(self.instances_file, WorkflowInstance).values())

    def instance_lock(self, instance_id: str) -> AbstractContextManager[None]:
        return self._instance_locks.hold(instance_id)
