from __future__ import annotations

import json
import logging
from decimal import Decimal

from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt
from django.views.generic import TemplateView

from .errors import CheckoutError
from .services import pushinpay
from .services.charges import PaymentRequest, PixChargeService
from .store import TransactionStore, get_store

logger = logging.getLogger(__name__)


class LandingView(TemplateView):
    template_name = "checkout/landing.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["plans"] = settings.CHECKOUT_PLANS
        return context


@method_decorator(csrf_exempt, name="dispatch")
class GeneratePixView(View):
    """POST do modal de checkout: gera o PIX e devolve QR code + copia e cola."""

    http_method_names = ["post"]
    # Sobrescrevíveis via as_view(store=..., gateway=...)
    store: TransactionStore | None = None
    gateway = pushinpay

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            payload = (
                json.loads(request.body.decode("utf-8"), parse_float=Decimal)
                if request.body
                else {}
            )
        except (json.JSONDecodeError, UnicodeDecodeError):
            return JsonResponse({"error": "JSON inválido"}, status=400)

        store = self.store if self.store is not None else get_store()
        service = PixChargeService(store=store, gateway=self.gateway)
        try:
            payment_request = PaymentRequest.from_payload(payload)
            result = service.create_pix_charge(payment_request)
        except CheckoutError as exc:
            logger.warning(
                "[checkout] Falha ao gerar PIX (%s): %s", type(exc).__name__, exc
            )
            return JsonResponse(exc.to_payload(), status=exc.status_code)
        except Exception:
            logger.exception("[checkout] Erro crítico ao gerar PIX.")
            return JsonResponse({"error": "Erro interno"}, status=500)

        return JsonResponse(result.to_payload())
