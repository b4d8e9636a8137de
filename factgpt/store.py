"""
FactGPT Record Storage

Records live at fixed locations derived from a static tag and the
instance id, so each instance has exactly one registry and one binding
and both can be found without a directory.

Implementations must be:
- Atomic on create (both records or neither; fails if either exists)
- Write-once on resolve (conditional update, never overwrite)
"""

import json
import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, List, Optional, Union

from .records import OracleBinding, Outcome, QuestionRegistry

STATE_ACCOUNT_TAG = "state_account"
MUON_INFO_TAG = "muon_info"

DEFAULT_INSTANCE_ID = "default"


def record_key(tag: str, instance_id: str = DEFAULT_INSTANCE_ID) -> str:
    """Derive the storage location of a record."""
    return f"{tag}:{instance_id}"


class StateStore(ABC):
    """Abstract interface for question record storage."""

    @abstractmethod
    def create(self, instance_id: str, registry: QuestionRegistry, binding: OracleBinding) -> bool:
        """
        Create both records of an instance.

        Returns:
            True if the records were created
            False if either location already holds a record (nothing written)
        """
        pass

    @abstractmethod
    def get_registry(self, instance_id: str) -> Optional[QuestionRegistry]:
        pass

    @abstractmethod
    def get_binding(self, instance_id: str) -> Optional[OracleBinding]:
        pass

    @abstractmethod
    def resolve(self, instance_id: str, outcome: bool, resolved_at: int, request_id: str) -> bool:
        """
        Write the outcome of an unresolved instance.

        Returns:
            True if the outcome was written
            False if the instance is missing or already resolved
        """
        pass

    @abstractmethod
    def instances(self) -> List[str]:
        pass


class InMemoryStateStore(StateStore):
    """
    In-memory record store for development/testing.

    Not persistent across restarts.
    """

    def __init__(self):
        self._records: Dict[str, Union[QuestionRegistry, OracleBinding]] = {}
        self._lock = threading.Lock()

    def create(self, instance_id: str, registry: QuestionRegistry, binding: OracleBinding) -> bool:
        state_key = record_key(STATE_ACCOUNT_TAG, instance_id)
        info_key = record_key(MUON_INFO_TAG, instance_id)
        with self._lock:
            if state_key in self._records or info_key in self._records:
                return False
            self._records[state_key] = registry
            self._records[info_key] = binding
            return True

    def get_registry(self, instance_id: str) -> Optional[QuestionRegistry]:
        with self._lock:
            return self._records.get(record_key(STATE_ACCOUNT_TAG, instance_id))

    def get_binding(self, instance_id: str) -> Optional[OracleBinding]:
        with self._lock:
            return self._records.get(record_key(MUON_INFO_TAG, instance_id))

    def resolve(self, instance_id: str, outcome: bool, resolved_at: int, request_id: str) -> bool:
        state_key = record_key(STATE_ACCOUNT_TAG, instance_id)
        with self._lock:
            registry = self._records.get(state_key)
            if registry is None or registry.resolved:
                return False
            self._records[state_key] = registry.with_outcome(outcome, resolved_at, request_id)
            return True

    def instances(self) -> List[str]:
        prefix = STATE_ACCOUNT_TAG + ":"
        with self._lock:
            return sorted(k[len(prefix):] for k in self._records if k.startswith(prefix))


class SQLiteStateStore(StateStore):
    """
    SQLite-backed record store.

    Uniqueness of the derived locations is enforced by primary keys, and
    resolution is a conditional UPDATE, so concurrent writers cannot both win.
    """

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = Path(db_path)
        self._local = threading.local()
        self.init_db()

    def _get_connection(self) -> sqlite3.Connection:
        if getattr(self._local, 'conn', None) is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
            conn.row_factory = sqlite3.Row
            self._local.conn = conn
        return self._local.conn

    @contextmanager
    def _transaction(self):
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def init_db(self) -> None:
        """Create the schema. Safe to call multiple times."""
        with self._transaction() as conn:
            conn.execute("""
            CREATE TABLE IF NOT EXISTS question_registry (
                location TEXT PRIMARY KEY,
                instance_id TEXT NOT NULL UNIQUE,
                owner TEXT NOT NULL,
                prompt TEXT NOT NULL,
                deadline INTEGER NOT NULL,
                resolution TEXT NOT NULL DEFAULT 'UNRESOLVED',
                resolved_at INTEGER,
                resolved_request_id TEXT
            );""")
            conn.execute("""
            CREATE TABLE IF NOT EXISTS oracle_binding (
                location TEXT PRIMARY KEY,
                instance_id TEXT NOT NULL UNIQUE,
                binding_json TEXT NOT NULL
            );""")

    def create(self, instance_id: str, registry: QuestionRegistry, binding: OracleBinding) -> bool:
        try:
            with self._transaction() as conn:
                self._insert_records(conn, instance_id, registry, binding)
        except sqlite3.IntegrityError:
            return False
        return True

    def _insert_records(
        self,
        conn: sqlite3.Connection,
        instance_id: str,
        registry: QuestionRegistry,
        binding: OracleBinding
    ) -> None:
        conn.execute(
            "INSERT INTO question_registry(location, instance_id, owner, prompt, deadline, "
            "resolution, resolved_at, resolved_request_id) VALUES(?,?,?,?,?,?,?,?)",
            (
                record_key(STATE_ACCOUNT_TAG, instance_id),
                instance_id,
                registry.owner,
                registry.prompt,
                registry.deadline,
                registry.resolution.value,
                registry.resolved_at,
                registry.resolved_request_id,
            )
        )
        conn.execute(
            "INSERT INTO oracle_binding(location, instance_id, binding_json) VALUES(?,?,?)",
            (
                record_key(MUON_INFO_TAG, instance_id),
                instance_id,
                json.dumps(binding.to_dict(), sort_keys=True),
            )
        )

    def get_registry(self, instance_id: str) -> Optional[QuestionRegistry]:
        conn = self._get_connection()
        cur = conn.execute(
            "SELECT owner, prompt, deadline, resolution, resolved_at, resolved_request_id "
            "FROM question_registry WHERE location=?",
            (record_key(STATE_ACCOUNT_TAG, instance_id),)
        )
        row = cur.fetchone()
        return QuestionRegistry.from_dict(dict(row)) if row else None

    def get_binding(self, instance_id: str) -> Optional[OracleBinding]:
        conn = self._get_connection()
        cur = conn.execute(
            "SELECT binding_json FROM oracle_binding WHERE location=?",
            (record_key(MUON_INFO_TAG, instance_id),)
        )
        row = cur.fetchone()
        return OracleBinding.from_dict(json.loads(row['binding_json'])) if row else None

    def resolve(self, instance_id: str, outcome: bool, resolved_at: int, request_id: str) -> bool:
        with self._transaction() as conn:
            cur = conn.execute(
                "UPDATE question_registry SET resolution=?, resolved_at=?, resolved_request_id=? "
                "WHERE location=? AND resolution=?",
                (
                    Outcome.from_bool(outcome).value,
                    resolved_at,
                    request_id,
                    record_key(STATE_ACCOUNT_TAG, instance_id),
                    Outcome.UNRESOLVED.value,
                )
            )
            return cur.rowcount == 1

    def instances(self) -> List[str]:
        conn = self._get_connection()
        cur = conn.execute("SELECT instance_id FROM question_registry ORDER BY instance_id ASC")
        return [row['instance_id'] for row in cur.fetchall()]

    def close(self) -> None:
        if getattr(self._local, 'conn', None) is not None:
            self._local.conn.close()
            self._local.conn = None
