from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any

import requests
from django.conf import settings

from checkout.errors import (
    ConfigurationError,
    GatewayRejectedError,
    GatewayUnavailableError,
)

logger = logging.getLogger(__name__)

# Só a consulta é retentada; criar cobrança duas vezes gera dois PIX.
MAX_RETRIES = 3
RETRY_BASE_DELAY = 1


@dataclass
class PushinPayConfig:
    token: str
    base_url: str
    timeout: float


def get_config() -> PushinPayConfig:
    return PushinPayConfig(
        token=settings.PUSHINPAY_TOKEN,
        base_url=settings.PUSHINPAY_BASE_URL.rstrip("/"),
        timeout=settings.PUSHINPAY_TIMEOUT,
    )


@dataclass(frozen=True)
class Payer:
    name: str
    document: str
    email: str


@dataclass(frozen=True)
class GatewayChargeRequest:
    value: int
    webhook_url: str
    payer: Payer

    def to_payload(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "webhook_url": self.webhook_url,
            "payer": {
                "name": self.payer.name,
                "document": self.payer.document,
                "email": self.payer.email,
            },
        }


@dataclass(frozen=True)
class GatewayCharge:
    id: str
    qr_code_base64: str | None = None
    qr_code: str | None = None
    status: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_response(cls, data: Any) -> "GatewayCharge":
        if not isinstance(data, dict) or not data.get("id"):
            raise GatewayRejectedError(
                "Resposta da PushinPay sem id de transação.",
                details=data,
            )
        return cls(
            id=str(data["id"]),
            qr_code_base64=data.get("qr_code_base64"),
            qr_code=data.get("qr_code"),
            status=data.get("status"),
            raw=data,
        )


def _headers(token: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/json",
        "Content-Type": "application/json",
    }


def _require_token(config: PushinPayConfig) -> None:
    if not config.token:
        raise ConfigurationError("Token ausente")


def _error_details(resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


def create_charge(request: GatewayChargeRequest) -> GatewayCharge:
    """
    Cria a cobrança PIX (cashIn). Uma única tentativa: sem chave de
    idempotência na API, um retry poderia gerar cobrança duplicada.
    """
    config = get_config()
    _require_token(config)

    payload = request.to_payload()
    logger.info(
        "[pushinpay] Gerando PIX value=%s webhook_url=%s payer=%s",
        payload["value"],
        payload["webhook_url"],
        request.payer.email,
    )
    try:
        resp = requests.post(
            f"{config.base_url}/pix/cashIn",
            json=payload,
            headers=_headers(config.token),
            timeout=config.timeout,
        )
    except requests.RequestException as exc:
        logger.error("[pushinpay] Falha de comunicação ao gerar PIX: %s", exc)
        raise GatewayUnavailableError(f"Erro PushinPay (cashIn): {exc}") from exc

    if not resp.ok:
        details = _error_details(resp)
        logger.error("[pushinpay] cashIn recusado status=%s body=%s", resp.status_code, details)
        raise GatewayRejectedError(
            f"Erro PushinPay (cashIn): HTTP {resp.status_code}",
            status_code=resp.status_code,
            details=details,
        )

    try:
        data = resp.json()
    except ValueError as exc:
        raise GatewayRejectedError(
            "Resposta da PushinPay não é JSON.",
            status_code=resp.status_code,
            details=resp.text,
        ) from exc
    return GatewayCharge.from_response(data)


def fetch_charge(charge_id: str) -> GatewayCharge:
    """Consulta uma cobrança. Leitura idempotente: retenta rede e 5xx com backoff."""
    config = get_config()
    _require_token(config)

    last_error: Exception | None = None
    for attempt in range(MAX_RETRIES):
        try:
            resp = requests.get(
                f"{config.base_url}/transactions/{charge_id}",
                headers=_headers(config.token),
                timeout=config.timeout,
            )
        except requests.RequestException as exc:
            last_error = GatewayUnavailableError(f"Erro PushinPay (transactions): {exc}")
        else:
            if resp.status_code < 500:
                if not resp.ok:
                    raise GatewayRejectedError(
                        f"Erro PushinPay (transactions): HTTP {resp.status_code}",
                        status_code=resp.status_code,
                        details=_error_details(resp),
                    )
                try:
                    return GatewayCharge.from_response(resp.json())
                except ValueError as exc:
                    raise GatewayRejectedError(
                        "Resposta da PushinPay não é JSON.",
                        status_code=resp.status_code,
                        details=resp.text,
                    ) from exc
            last_error = GatewayRejectedError(
                f"Erro PushinPay (transactions): HTTP {resp.status_code}",
                status_code=resp.status_code,
                details=_error_details(resp),
            )

        logger.warning(
            "[pushinpay] Consulta de %s falhou (tentativa %d/%d): %s",
            charge_id,
            attempt + 1,
            MAX_RETRIES,
            last_error,
        )
        if attempt < MAX_RETRIES - 1:
            time.sleep(RETRY_BASE_DELAY * (2**attempt))

    raise last_error
