"""
Criação de cobranças PIX: converte o pedido do front, chama a PushinPay e
registra a transação para o webhook encontrar depois.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from types import ModuleType
from typing import Any

from django.conf import settings
from django.db import DatabaseError

from checkout.errors import (
    ConfigurationError,
    DuplicateTransactionError,
    InvalidPaymentRequest,
    PersistenceError,
)
from checkout.models import Transaction
from checkout.store import TransactionRecord, TransactionStore

from . import pushinpay
from .pushinpay import GatewayChargeRequest, Payer

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "email", "cpf", "plan", "price")


def to_minor_units(price: Decimal | float | int | str) -> int:
    """Reais para centavos. A PushinPay só aceita inteiro (19.90 -> 1990)."""
    try:
        amount = Decimal(str(price))
    except InvalidOperation as exc:
        raise ValueError(f"Preço inválido: {price!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Preço inválido: {price!r}")
    if amount < 0:
        raise ValueError(f"Preço negativo: {price!r}")
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def sanitize_document(cpf: str) -> str:
    return re.sub(r"\D", "", cpf or "")


def max_storable_price() -> Decimal:
    """Primeiro valor que a coluna Transaction.price não comporta."""
    field = Transaction._meta.get_field("price")
    return Decimal(10) ** (field.max_digits - field.decimal_places)


def build_webhook_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


@dataclass(frozen=True)
class PaymentRequest:
    name: str
    email: str
    cpf: str
    plan: str
    price: Decimal
    phone: str = ""
    fbc: str | None = None
    fbp: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "PaymentRequest":
        if not isinstance(payload, dict):
            raise InvalidPaymentRequest("Corpo da requisição deve ser um objeto JSON.")
        missing = [key for key in REQUIRED_FIELDS if payload.get(key) in (None, "")]
        if missing:
            raise InvalidPaymentRequest(f"Campos obrigatórios ausentes: {', '.join(missing)}")

        raw_price = payload["price"]
        if isinstance(raw_price, bool):
            raise InvalidPaymentRequest("Preço inválido.")
        try:
            price = Decimal(str(raw_price))
        except InvalidOperation as exc:
            raise InvalidPaymentRequest("Preço inválido.") from exc
        if not price.is_finite() or price < 0:
            raise InvalidPaymentRequest("Preço inválido.")
        if price >= max_storable_price():
            raise InvalidPaymentRequest("Preço acima do limite aceito.")

        return cls(
            name=str(payload["name"]),
            email=str(payload["email"]),
            cpf=str(payload["cpf"]),
            plan=str(payload["plan"]),
            price=price,
            phone=str(payload.get("phone") or ""),
            # cookie ausente chega como null ou "", os dois viram None
            fbc=payload.get("fbc") or None,
            fbp=payload.get("fbp") or None,
        )


@dataclass(frozen=True)
class PixChargeResult:
    id: str
    qr_code_base64: str | None
    copia_e_cola: str | None

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "qrCodeBase64": self.qr_code_base64,
            "copiaECola": self.copia_e_cola,
        }


@dataclass
class CheckoutConfig:
    token: str
    base_url: str
    webhook_path: str


def get_config() -> CheckoutConfig:
    return CheckoutConfig(
        token=pushinpay.get_config().token,
        base_url=settings.CHECKOUT_BASE_URL,
        webhook_path=settings.CHECKOUT_WEBHOOK_PATH,
    )


class PixChargeService:
    """
    Gera a cobrança na operadora e só então grava a transação.

    O registro nunca é criado antes da PushinPay confirmar a cobrança. Se a
    gravação falhar depois disso a cobrança já existe lá fora: o id é logado,
    uma task tenta gravar de novo e o comprador recebe erro genérico.
    """

    def __init__(self, store: TransactionStore, gateway: ModuleType | Any = pushinpay) -> None:
        self.store = store
        self.gateway = gateway

    def create_pix_charge(self, request: PaymentRequest) -> PixChargeResult:
        config = get_config()
        if not config.token:
            raise ConfigurationError("Token ausente")
        if not config.base_url:
            raise ConfigurationError("URL base ausente")

        charge_request = GatewayChargeRequest(
            value=to_minor_units(request.price),
            webhook_url=build_webhook_url(config.base_url, config.webhook_path),
            payer=Payer(
                name=request.name,
                document=sanitize_document(request.cpf),
                email=request.email,
            ),
        )
        charge = self.gateway.create_charge(charge_request)

        record = TransactionRecord(
            plan=request.plan,
            email=request.email,
            name=request.name,
            price=request.price,
            fbp=request.fbp,
            fbc=request.fbc,
        )
        try:
            self.store.put(charge.id, record)
        except DuplicateTransactionError:
            # id repetido pela operadora: o registro original fica como está
            logger.error("[checkout] PushinPay devolveu id já registrado: %s", charge.id)
            raise
        except DatabaseError as exc:
            logger.exception(
                "[checkout] Cobrança %s criada na PushinPay mas não registrada.", charge.id
            )
            _schedule_persist_retry(charge.id, record)
            raise PersistenceError(str(exc), transaction_id=charge.id) from exc

        logger.info("[checkout] PIX gerado com sucesso: %s plan=%s", charge.id, request.plan)
        return PixChargeResult(
            id=charge.id,
            qr_code_base64=charge.qr_code_base64,
            copia_e_cola=charge.qr_code,
        )


def _schedule_persist_retry(transaction_id: str, record: TransactionRecord) -> None:
    from checkout.tasks import persist_transaction

    try:
        persist_transaction.delay(transaction_id, record.to_document())
    except Exception:
        logger.exception(
            "[checkout] Não foi possível agendar a regravação de %s.", transaction_id
        )
