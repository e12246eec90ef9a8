"""
Ledger — Append-only store of payment records.

The verification service is the only writer. Entitlement and analytics read
snapshots. Two backends share one interface: an in-memory list for tests and
single-process deployments, and a SQLAlchemy table for durable storage.
"""
import secrets
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional

from sqlalchemy import select, func
from sqlalchemy.orm import sessionmaker

from payledger.models.payment import PaymentEntry
from payledger.schemas.schemas import PaymentRecord

RecordFilter = Callable[[PaymentRecord], bool]


def new_record_id() -> str:
    """Epoch-millis prefix plus a random suffix; never reused."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(3)}"


class Ledger(ABC):
    """Ordered, append-only collection of PaymentRecord."""

    name = "abstract"

    @abstractmethod
    def append(self, record: PaymentRecord) -> PaymentRecord:
        """Persist a new record. Existing records are never modified."""

    @abstractmethod
    def get(self, record_id: str) -> Optional[PaymentRecord]:
        ...

    @abstractmethod
    def snapshot(self) -> list[PaymentRecord]:
        """All records in append order."""

    @abstractmethod
    def __len__(self) -> int:
        ...

    def find(self, predicate: RecordFilter) -> list[PaymentRecord]:
        return [record for record in self.snapshot() if predicate(record)]

    def first(self, predicate: RecordFilter) -> Optional[PaymentRecord]:
        return next((record for record in self.snapshot() if predicate(record)), None)


class InMemoryLedger(Ledger):
    """Process-lifetime ledger. A lock serialises appends; reads copy under it."""

    name = "memory"

    def __init__(self):
        self._records: list[PaymentRecord] = []
        self._index: dict[str, PaymentRecord] = {}
        self._lock = threading.Lock()

    def append(self, record: PaymentRecord) -> PaymentRecord:
        with self._lock:
            if record.id in self._index:
                raise ValueError(f"Duplicate ledger id: {record.id}")
            self._records.append(record)
            self._index[record.id] = record
        return record

    def get(self, record_id: str) -> Optional[PaymentRecord]:
        with self._lock:
            return self._index.get(record_id)

    def snapshot(self) -> list[PaymentRecord]:
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class SqlLedger(Ledger):
    """Durable ledger over the ``payments`` table. Insert-only."""

    name = "sql"

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @staticmethod
    def _to_record(entry: PaymentEntry) -> PaymentRecord:
        return PaymentRecord(
            id=entry.id,
            user_id=entry.user_id,
            user_name=entry.user_name or "",
            user_email=entry.user_email or "",
            amount=entry.amount,
            currency=entry.currency,
            plan=entry.plan,
            plan_name=entry.plan_name,
            plan_duration=entry.plan_duration,
            status=entry.status,
            payment_method=entry.payment_method,
            gateway_order_id=entry.gateway_order_id or "",
            gateway_payment_id=entry.gateway_payment_id or "",
            created_at=entry.created_at,
            updated_at=entry.updated_at,
            failure_reason=entry.failure_reason,
        )

    def append(self, record: PaymentRecord) -> PaymentRecord:
        db = self._session_factory()
        try:
            db.add(PaymentEntry(**record.model_dump()))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
        return record

    def get(self, record_id: str) -> Optional[PaymentRecord]:
        db = self._session_factory()
        try:
            entry = db.execute(select(PaymentEntry).where(PaymentEntry.id == record_id)).scalar_one_or_none()
            return self._to_record(entry) if entry else None
        finally:
            db.close()

    def snapshot(self) -> list[PaymentRecord]:
        db = self._session_factory()
        try:
            entries = db.execute(select(PaymentEntry).order_by(PaymentEntry.seq.asc())).scalars().all()
            return [self._to_record(entry) for entry in entries]
        finally:
            db.close()

    def __len__(self) -> int:
        db = self._session_factory()
        try:
            return db.execute(select(func.count(PaymentEntry.seq))).scalar() or 0
        finally:
            db.close()
