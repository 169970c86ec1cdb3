"""Erros do checkout e o envelope JSON que o front recebe."""

from __future__ import annotations

from typing import Any


class CheckoutError(Exception):
    """Base dos erros do checkout; status_code e public_message vão para o cliente."""

    status_code = 500
    public_message = "Erro interno"

    def __init__(self, message: str | None = None, details: Any = None) -> None:
        super().__init__(message or self.public_message)
        self.details = details

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.public_message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ConfigurationError(CheckoutError):
    """Token da operadora ou URL base ausente. Não adianta o comprador tentar de novo."""

    public_message = "Configuração de servidor incompleta"

    def to_payload(self) -> dict[str, Any]:
        return {"error": f"{self.public_message} ({self})"}


class InvalidPaymentRequest(CheckoutError):
    status_code = 400
    public_message = "Dados do pedido inválidos"

    def to_payload(self) -> dict[str, Any]:
        return {"error": str(self)}


class GatewayError(CheckoutError):
    public_message = "Falha ao gerar Pix na operadora"


class GatewayRejectedError(GatewayError):
    """A PushinPay respondeu, mas recusou a cobrança (ou respondeu lixo)."""

    def __init__(self, message: str, status_code: int | None = None, details: Any = None) -> None:
        super().__init__(message, details=details)
        self.gateway_status = status_code


class GatewayUnavailableError(GatewayError):
    """Falha de rede ou timeout falando com a PushinPay."""

    public_message = "Erro de comunicação com a operadora de pagamento"


class PersistenceError(CheckoutError):
    """Cobrança criada na operadora mas o registro local falhou."""

    public_message = "Erro interno ao registrar a transação"

    def __init__(self, message: str, transaction_id: str) -> None:
        super().__init__(message)
        self.transaction_id = transaction_id


class DuplicateTransactionError(CheckoutError):
    public_message = "Transação já registrada"


class TransactionNotFound(CheckoutError):
    status_code = 404
    public_message = "Transação não encontrada"
