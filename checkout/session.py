"""
Máquina de estados do modal de checkout (lado do cliente).

form -> loading -> pix -> success, com volta loading -> form em qualquer
falha. Abrir o modal sempre recomeça em form. Fechar nunca cancela a
requisição em andamento: a cobrança e o registro já existem no servidor,
só a resposta deixa de ser exibida.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping

import requests
from django.http.cookie import parse_cookie

logger = logging.getLogger(__name__)

GENERATE_PIX_PATH = "/api/gerar-pix/"
FALLBACK_ERROR = "Erro ao gerar PIX. Tente novamente."
CONNECTION_ERROR = "Erro de conexão com o servidor. Tente novamente."


class CheckoutState(str, enum.Enum):
    FORM = "form"
    LOADING = "loading"
    PIX = "pix"
    SUCCESS = "success"


@dataclass(frozen=True)
class Plan:
    name: str
    price: Decimal


@dataclass(frozen=True)
class BuyerInput:
    name: str
    email: str
    cpf: str
    phone: str


@dataclass(frozen=True)
class TrackingContext:
    fbp: str | None = None
    fbc: str | None = None

    @classmethod
    def from_cookies(cls, cookies: Mapping[str, str] | None) -> "TrackingContext":
        cookies = cookies or {}
        return cls(fbp=cookies.get("_fbp") or None, fbc=cookies.get("_fbc") or None)

    @classmethod
    def from_cookie_header(cls, header: str | None) -> "TrackingContext":
        # mesmo parser do request.COOKIES: um cookie malformado não derruba os demais
        return cls.from_cookies(parse_cookie(header or ""))


@dataclass(frozen=True)
class PixData:
    id: str
    qr_code_base64: str | None
    copia_e_cola: str | None


class CheckoutApiError(Exception):
    """Falha ao gerar o PIX; a mensagem é a que o comprador vê."""


class CheckoutApi:
    """Cliente HTTP do endpoint de geração de PIX."""

    def __init__(
        self,
        base_url: str,
        session: requests.Session | None = None,
        timeout: float = 30,
    ) -> None:
        self.url = f"{base_url.rstrip('/')}{GENERATE_PIX_PATH}"
        self.session = session or requests.Session()
        self.timeout = timeout

    def generate_pix(self, payload: dict[str, Any]) -> PixData:
        try:
            resp = self.session.post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("[checkout] Falha de conexão ao gerar PIX: %s", exc)
            raise CheckoutApiError(CONNECTION_ERROR) from exc

        try:
            data = resp.json()
        except ValueError:
            data = None

        if not resp.ok:
            message = data.get("error") if isinstance(data, dict) else None
            raise CheckoutApiError(message or FALLBACK_ERROR)

        if not isinstance(data, dict) or not data.get("id"):
            raise CheckoutApiError(FALLBACK_ERROR)
        return PixData(
            id=str(data["id"]),
            qr_code_base64=data.get("qrCodeBase64"),
            copia_e_cola=data.get("copiaECola"),
        )


def _json_price(price: Decimal) -> float:
    # o endpoint lê o número com parse_float=Decimal, então 167.9 chega exato
    return float(price)


class CheckoutSession:
    def __init__(self, api: CheckoutApi, cookies: Mapping[str, str] | None = None) -> None:
        self.api = api
        self.cookies = cookies
        self.is_open = False
        self.state = CheckoutState.FORM
        self.selected_plan: Plan | None = None
        self.pix_data: PixData | None = None
        self.error: str | None = None
        # muda a cada abertura/fechamento; respostas de uma sessão antiga são descartadas
        self._generation = 0

    @property
    def can_submit(self) -> bool:
        return self.is_open and self.state is CheckoutState.FORM and self.selected_plan is not None

    def open_modal(self, plan_name: str, price: Decimal | float | str) -> None:
        self._generation += 1
        self.selected_plan = Plan(name=plan_name, price=Decimal(str(price)))
        self.state = CheckoutState.FORM
        self.pix_data = None
        self.error = None
        self.is_open = True

    def close_modal(self) -> None:
        self._generation += 1
        self.is_open = False

    def build_payload(self, buyer: BuyerInput, tracking: TrackingContext) -> dict[str, Any]:
        plan = self.selected_plan
        return {
            "name": buyer.name,
            "email": buyer.email,
            "cpf": buyer.cpf,
            "phone": buyer.phone,
            "plan": plan.name,
            "price": _json_price(plan.price),
            "fbc": tracking.fbc,
            "fbp": tracking.fbp,
        }

    def submit(self, buyer: BuyerInput, tracking: TrackingContext | None = None) -> bool:
        """
        Dispara a geração do PIX. Retorna False (sem requisição) se não
        estiver em form, o que cobre cliques repetidos durante o loading.
        """
        if not self.can_submit:
            return False

        if tracking is None:
            tracking = TrackingContext.from_cookies(self.cookies)
        payload = self.build_payload(buyer, tracking)
        generation = self._generation
        self.state = CheckoutState.LOADING
        self.error = None

        try:
            pix_data = self.api.generate_pix(payload)
        except CheckoutApiError as exc:
            if generation == self._generation:
                self.error = str(exc)
                self.state = CheckoutState.FORM
            return True

        if generation != self._generation:
            logger.info("[checkout] PIX %s gerado após fechar o modal.", pix_data.id)
            return True
        self.pix_data = pix_data
        self.state = CheckoutState.PIX
        return True

    def confirm_payment(self, transaction_id: str) -> bool:
        """pix -> success, quando o polling/push confirma o pagamento exibido."""
        if self.state is not CheckoutState.PIX or self.pix_data is None:
            return False
        if self.pix_data.id != transaction_id:
            return False
        self.state = CheckoutState.SUCCESS
        return True

    def copy_code(self) -> str | None:
        if self.state is CheckoutState.PIX and self.pix_data:
            return self.pix_data.copia_e_cola
        return None
