"""
Store de transações PIX.

Um registro por cobrança, chaveado pelo id que a PushinPay devolve. Este
módulo só cria registros (write-once); quem altera o status depois é o
webhook da operadora, lendo e atualizando pela mesma chave.
"""

from __future__ import annotations

import threading
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Any, Protocol

from django.db import IntegrityError, transaction as db_transaction
from django.utils import timezone

from .errors import DuplicateTransactionError, TransactionNotFound
from .models import Transaction, TransactionStatus

UPDATABLE_FIELDS = frozenset({"status"})


@dataclass(frozen=True)
class TransactionRecord:
    plan: str
    email: str
    name: str
    price: Decimal
    fbp: str | None = None
    fbc: str | None = None
    status: str = TransactionStatus.CREATED
    created_at: datetime = field(default_factory=timezone.now)

    def to_document(self) -> dict[str, Any]:
        """Formato documento (JSON-safe), o mesmo que o webhook lê."""
        document = asdict(self)
        document["status"] = str(self.status)
        document["price"] = str(self.price)
        document["createdAt"] = document.pop("created_at").isoformat()
        return document

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "TransactionRecord":
        created_at = document.get("createdAt")
        return cls(
            plan=document["plan"],
            email=document["email"],
            name=document["name"],
            price=Decimal(str(document["price"])),
            fbp=document.get("fbp"),
            fbc=document.get("fbc"),
            status=document.get("status") or TransactionStatus.CREATED,
            created_at=datetime.fromisoformat(created_at) if created_at else timezone.now(),
        )


class TransactionStore(Protocol):
    def put(self, transaction_id: str, record: TransactionRecord) -> None:
        ...

    def get(self, transaction_id: str) -> TransactionRecord | None:
        ...

    def update(self, transaction_id: str, **fields: Any) -> TransactionRecord:
        ...


def _check_update_fields(fields: dict[str, Any]) -> None:
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Campos não atualizáveis: {', '.join(sorted(unknown))}")
    status = fields.get("status")
    if status is not None and status not in TransactionStatus.values:
        raise ValueError(f"Status inválido: {status}")


class DjangoTransactionStore:
    """Store padrão, sobre o model Transaction (banco de DATABASE_URL)."""

    def put(self, transaction_id: str, record: TransactionRecord) -> None:
        try:
            with db_transaction.atomic():
                Transaction.objects.create(
                    id=transaction_id,
                    status=record.status,
                    plan=record.plan,
                    email=record.email,
                    name=record.name,
                    price=record.price,
                    fbp=record.fbp,
                    fbc=record.fbc,
                    created_at=record.created_at,
                )
        except IntegrityError as exc:
            if Transaction.objects.filter(pk=transaction_id).exists():
                raise DuplicateTransactionError(
                    f"Transação {transaction_id} já existe."
                ) from exc
            raise

    def get(self, transaction_id: str) -> TransactionRecord | None:
        obj = Transaction.objects.filter(pk=transaction_id).first()
        if obj is None:
            return None
        return _to_record(obj)

    def update(self, transaction_id: str, **fields: Any) -> TransactionRecord:
        _check_update_fields(fields)
        obj = Transaction.objects.filter(pk=transaction_id).first()
        if obj is None:
            raise TransactionNotFound(f"Transação {transaction_id} não encontrada.")
        for key, value in fields.items():
            setattr(obj, key, value)
        obj.save(update_fields=[*fields, "updated_at"])
        return _to_record(obj)


def _to_record(obj: Transaction) -> TransactionRecord:
    return TransactionRecord(
        plan=obj.plan,
        email=obj.email,
        name=obj.name,
        price=obj.price,
        fbp=obj.fbp,
        fbc=obj.fbc,
        status=obj.status,
        created_at=obj.created_at,
    )


class InMemoryTransactionStore:
    """Store em memória (testes, scripts locais). Thread-safe."""

    def __init__(self) -> None:
        self._records: dict[str, TransactionRecord] = {}
        self._lock = threading.Lock()

    def put(self, transaction_id: str, record: TransactionRecord) -> None:
        with self._lock:
            if transaction_id in self._records:
                raise DuplicateTransactionError(f"Transação {transaction_id} já existe.")
            self._records[transaction_id] = record

    def get(self, transaction_id: str) -> TransactionRecord | None:
        with self._lock:
            return self._records.get(transaction_id)

    def update(self, transaction_id: str, **fields: Any) -> TransactionRecord:
        _check_update_fields(fields)
        with self._lock:
            record = self._records.get(transaction_id)
            if record is None:
                raise TransactionNotFound(f"Transação {transaction_id} não encontrada.")
            record = replace(record, **fields)
            self._records[transaction_id] = record
            return record

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


# Criado uma vez no import do processo; view e task resolvem via get_store().
default_store = DjangoTransactionStore()


def get_store() -> TransactionStore:
    return default_store
