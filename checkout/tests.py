"""
Testes do app checkout - PushinPay, store de transações, serviço e endpoint.
"""

import json
from decimal import Decimal
from unittest.mock import MagicMock, patch

import requests
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse

from .errors import (
    ConfigurationError,
    DuplicateTransactionError,
    GatewayRejectedError,
    GatewayUnavailableError,
    InvalidPaymentRequest,
    PersistenceError,
    TransactionNotFound,
)
from .models import Transaction, TransactionStatus
from .services import pushinpay
from .services.charges import (
    CheckoutConfig,
    PaymentRequest,
    PixChargeService,
    build_webhook_url,
    get_config,
    sanitize_document,
    to_minor_units,
)
from .services.pushinpay import GatewayCharge, GatewayChargeRequest, Payer
from .store import DjangoTransactionStore, InMemoryTransactionStore, TransactionRecord
from .tasks import persist_transaction
from .testing import make_response, pushinpay_payload


# ---------------------------------------------------------------------------
# Factories / Fixtures
# ---------------------------------------------------------------------------


def make_payment_request(**kwargs) -> PaymentRequest:
    data = {
        "name": "Maria Souza",
        "email": "maria@example.com",
        "cpf": "123.456.789-00",
        "phone": "(11) 99999-0000",
        "plan": "Kit 5 Meses",
        "price": Decimal("167.90"),
        "fbc": None,
        "fbp": None,
    }
    data.update(kwargs)
    return PaymentRequest(**data)


# ---------------------------------------------------------------------------
# Helpers de conversão
# ---------------------------------------------------------------------------


class ToMinorUnitsTest(SimpleTestCase):
    """Testes de to_minor_units."""

    def test_converte_precos_dos_kits(self):
        self.assertEqual(to_minor_units(Decimal("123.90")), 12390)
        self.assertEqual(to_minor_units(Decimal("167.90")), 16790)
        self.assertEqual(to_minor_units(Decimal("227.90")), 22790)

    def test_uma_casa_decimal_vira_centavos_corretos(self):
        self.assertEqual(to_minor_units(19.9), 1990)
        self.assertEqual(to_minor_units("19.9"), 1990)
        self.assertEqual(to_minor_units(Decimal("19.9")), 1990)

    def test_floats_com_erro_binario_sao_exatos(self):
        self.assertEqual(to_minor_units(0.1 + 0.2), 30)
        self.assertEqual(to_minor_units(1.005), 101)

    def test_inteiro_e_zero(self):
        self.assertEqual(to_minor_units(100), 10000)
        self.assertEqual(to_minor_units(0), 0)

    def test_retorna_int(self):
        self.assertIsInstance(to_minor_units(Decimal("167.90")), int)

    def test_rejeita_negativo_e_lixo(self):
        with self.assertRaises(ValueError):
            to_minor_units(Decimal("-1.00"))
        with self.assertRaises(ValueError):
            to_minor_units("abc")
        with self.assertRaises(ValueError):
            to_minor_units(float("nan"))


class SanitizeDocumentTest(SimpleTestCase):
    """Testes de sanitize_document."""

    def test_remove_pontuacao_do_cpf(self):
        self.assertEqual(sanitize_document("123.456.789-00"), "12345678900")

    def test_mantem_ordem_e_remove_espacos_e_letras(self):
        self.assertEqual(sanitize_document(" 9a8 7-6 "), "9876")

    def test_vazio(self):
        self.assertEqual(sanitize_document(""), "")


class BuildWebhookUrlTest(SimpleTestCase):
    def test_concatena_sem_barra_dupla(self):
        self.assertEqual(
            build_webhook_url("https://loja.test/", "/api/webhook"),
            "https://loja.test/api/webhook",
        )
        self.assertEqual(
            build_webhook_url("https://loja.test", "api/webhook"),
            "https://loja.test/api/webhook",
        )


class PaymentRequestTest(SimpleTestCase):
    """Testes de PaymentRequest.from_payload."""

    def test_monta_a_partir_do_json_do_front(self):
        req = PaymentRequest.from_payload(
            {
                "name": "Maria",
                "email": "maria@example.com",
                "cpf": "123.456.789-00",
                "phone": "11999990000",
                "plan": "Kit 3 Meses",
                "price": Decimal("123.90"),
                "fbc": "fb.1.123.abc",
                "fbp": "fb.1.456.def",
            }
        )
        self.assertEqual(req.price, Decimal("123.90"))
        self.assertEqual(req.fbc, "fb.1.123.abc")
        self.assertEqual(req.fbp, "fb.1.456.def")

    def test_cookies_vazios_viram_none(self):
        req = PaymentRequest.from_payload(
            {"name": "A", "email": "a@b.c", "cpf": "1", "plan": "Kit", "price": 10, "fbc": "", "fbp": None}
        )
        self.assertIsNone(req.fbc)
        self.assertIsNone(req.fbp)
        self.assertEqual(req.phone, "")

    def test_campos_obrigatorios_ausentes(self):
        with self.assertRaises(InvalidPaymentRequest) as ctx:
            PaymentRequest.from_payload({"name": "A", "price": 10})
        self.assertIn("email", str(ctx.exception))
        self.assertIn("cpf", str(ctx.exception))
        self.assertIn("plan", str(ctx.exception))

    def test_preco_invalido(self):
        base = {"name": "A", "email": "a@b.c", "cpf": "1", "plan": "Kit"}
        for price in ("abc", -1, True):
            with self.subTest(price=price):
                with self.assertRaises(InvalidPaymentRequest):
                    PaymentRequest.from_payload({**base, "price": price})

    def test_preco_acima_da_coluna_e_rejeitado(self):
        base = {"name": "A", "email": "a@b.c", "cpf": "1", "plan": "Kit"}
        with self.assertRaisesMessage(InvalidPaymentRequest, "Preço acima do limite aceito."):
            PaymentRequest.from_payload({**base, "price": Decimal("123456789.90")})

    def test_maior_preco_que_cabe_na_coluna_e_aceito(self):
        base = {"name": "A", "email": "a@b.c", "cpf": "1", "plan": "Kit"}
        req = PaymentRequest.from_payload({**base, "price": Decimal("99999999.99")})
        self.assertEqual(req.price, Decimal("99999999.99"))

    def test_corpo_que_nao_e_objeto(self):
        with self.assertRaises(InvalidPaymentRequest):
            PaymentRequest.from_payload(["not", "a", "dict"])


# ---------------------------------------------------------------------------
# Services - PushinPay
# ---------------------------------------------------------------------------


class PushinPayCreateChargeTest(SimpleTestCase):
    """Testes de pushinpay.create_charge."""

    def setUp(self):
        self.request = GatewayChargeRequest(
            value=16790,
            webhook_url="https://loja.test/api/webhook",
            payer=Payer(name="Maria", document="12345678900", email="maria@example.com"),
        )

    @patch("checkout.services.pushinpay.requests.post")
    def test_envia_payload_autenticado(self, mock_post):
        mock_post.return_value = make_response(200, pushinpay_payload())

        charge = pushinpay.create_charge(self.request)

        mock_post.assert_called_once()
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], "https://pushinpay.test/api/pix/cashIn")
        self.assertEqual(
            kwargs["json"],
            {
                "value": 16790,
                "webhook_url": "https://loja.test/api/webhook",
                "payer": {"name": "Maria", "document": "12345678900", "email": "maria@example.com"},
            },
        )
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer ci-token")
        self.assertIn("timeout", kwargs)
        self.assertEqual(charge.id, "9c1e-abc")
        self.assertEqual(charge.qr_code, "00020101021226770014BR.GOV.BCB.PIX")
        self.assertEqual(charge.qr_code_base64, "iVBORw0KGgoAAAANSUhEUg==")

    @patch("checkout.services.pushinpay.requests.post")
    def test_erro_da_operadora_carrega_o_corpo(self, mock_post):
        body = {"message": "CPF inválido", "errors": {"document": ["inválido"]}}
        mock_post.return_value = make_response(422, body)

        with self.assertRaises(GatewayRejectedError) as ctx:
            pushinpay.create_charge(self.request)

        self.assertEqual(ctx.exception.gateway_status, 422)
        self.assertEqual(ctx.exception.details, body)

    @patch("checkout.services.pushinpay.requests.post")
    def test_erro_sem_json_usa_texto(self, mock_post):
        mock_post.return_value = make_response(502, None, text="Bad Gateway")

        with self.assertRaises(GatewayRejectedError) as ctx:
            pushinpay.create_charge(self.request)
        self.assertEqual(ctx.exception.details, "Bad Gateway")

    @patch("checkout.services.pushinpay.requests.post")
    def test_falha_de_rede(self, mock_post):
        mock_post.side_effect = requests.Timeout("read timeout")

        with self.assertRaises(GatewayUnavailableError):
            pushinpay.create_charge(self.request)
        self.assertEqual(mock_post.call_count, 1)

    @patch("checkout.services.pushinpay.requests.post")
    def test_resposta_sem_id_e_falha(self, mock_post):
        mock_post.return_value = make_response(200, {"qr_code": "x"})

        with self.assertRaises(GatewayRejectedError):
            pushinpay.create_charge(self.request)

    @override_settings(PUSHINPAY_TOKEN="")
    @patch("checkout.services.pushinpay.requests.post")
    def test_sem_token_nao_chama_a_api(self, mock_post):
        with self.assertRaises(ConfigurationError):
            pushinpay.create_charge(self.request)
        mock_post.assert_not_called()


class PushinPayFetchChargeTest(SimpleTestCase):
    """Testes de pushinpay.fetch_charge."""

    @patch("checkout.services.pushinpay.time.sleep")
    @patch("checkout.services.pushinpay.requests.get")
    def test_retenta_5xx_e_rede(self, mock_get, mock_sleep):
        mock_get.side_effect = [
            make_response(503, None, text="unavailable"),
            requests.ConnectionError("reset"),
            make_response(200, {**pushinpay_payload(), "status": "paid"}),
        ]

        charge = pushinpay.fetch_charge("9c1e-abc")

        self.assertEqual(charge.status, "paid")
        self.assertEqual(mock_get.call_count, 3)
        self.assertEqual(mock_sleep.call_count, 2)
        self.assertEqual(mock_get.call_args[0][0], "https://pushinpay.test/api/transactions/9c1e-abc")

    @patch("checkout.services.pushinpay.time.sleep")
    @patch("checkout.services.pushinpay.requests.get")
    def test_404_nao_retenta(self, mock_get, mock_sleep):
        mock_get.return_value = make_response(404, {"message": "not found"})

        with self.assertRaises(GatewayRejectedError):
            pushinpay.fetch_charge("nope")
        self.assertEqual(mock_get.call_count, 1)
        mock_sleep.assert_not_called()

    @patch("checkout.services.pushinpay.time.sleep")
    @patch("checkout.services.pushinpay.requests.get")
    def test_desiste_apos_max_retries(self, mock_get, mock_sleep):
        mock_get.side_effect = requests.ConnectionError("down")

        with self.assertRaises(GatewayUnavailableError):
            pushinpay.fetch_charge("9c1e-abc")
        self.assertEqual(mock_get.call_count, pushinpay.MAX_RETRIES)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


def make_record(**kwargs) -> TransactionRecord:
    data = {
        "plan": "Kit 5 Meses",
        "email": "maria@example.com",
        "name": "Maria Souza",
        "price": Decimal("167.90"),
    }
    data.update(kwargs)
    return TransactionRecord(**data)


class DjangoTransactionStoreTest(TestCase):
    """Testes do DjangoTransactionStore."""

    def setUp(self):
        self.store = DjangoTransactionStore()

    def test_put_e_get_pelo_id_da_operadora(self):
        self.store.put("tx-1", make_record(fbp="fb.1.1", fbc=None))

        record = self.store.get("tx-1")
        self.assertEqual(record.status, TransactionStatus.CREATED)
        self.assertEqual(record.price, Decimal("167.90"))
        self.assertEqual(record.fbp, "fb.1.1")
        self.assertIsNone(record.fbc)
        self.assertTrue(Transaction.objects.filter(pk="tx-1").exists())

    def test_get_inexistente(self):
        self.assertIsNone(self.store.get("nao-existe"))

    def test_put_nao_sobrescreve(self):
        self.store.put("tx-1", make_record())
        with self.assertRaises(DuplicateTransactionError):
            self.store.put("tx-1", make_record(name="Outro"))
        self.assertEqual(self.store.get("tx-1").name, "Maria Souza")

    def test_update_de_status(self):
        self.store.put("tx-1", make_record())
        record = self.store.update("tx-1", status=TransactionStatus.PAID)
        self.assertEqual(record.status, TransactionStatus.PAID)
        self.assertEqual(Transaction.objects.get(pk="tx-1").status, "paid")

    def test_update_rejeita_campos_e_status_invalidos(self):
        self.store.put("tx-1", make_record())
        with self.assertRaises(ValueError):
            self.store.update("tx-1", price=Decimal("1.00"))
        with self.assertRaises(ValueError):
            self.store.update("tx-1", status="refunded-ish")

    def test_update_inexistente(self):
        with self.assertRaises(TransactionNotFound):
            self.store.update("nao-existe", status=TransactionStatus.PAID)


class InMemoryTransactionStoreTest(SimpleTestCase):
    """Testes do InMemoryTransactionStore."""

    def test_write_once_e_update(self):
        store = InMemoryTransactionStore()
        store.put("tx-1", make_record())
        with self.assertRaises(DuplicateTransactionError):
            store.put("tx-1", make_record())
        self.assertEqual(store.update("tx-1", status="expired").status, "expired")
        self.assertEqual(len(store), 1)


class TransactionRecordTest(SimpleTestCase):
    def test_documento_ida_e_volta(self):
        record = make_record(fbc="fb.1.2")
        document = record.to_document()
        self.assertEqual(document["status"], "created")
        self.assertEqual(document["price"], "167.90")
        self.assertIn("createdAt", document)
        self.assertNotIn("created_at", document)
        self.assertEqual(TransactionRecord.from_document(document), record)


# ---------------------------------------------------------------------------
# Services - PixChargeService
# ---------------------------------------------------------------------------


class PixChargeServiceTest(TestCase):
    """Testes de PixChargeService.create_pix_charge."""

    def setUp(self):
        self.store = InMemoryTransactionStore()
        self.gateway = MagicMock()
        self.gateway.create_charge.return_value = GatewayCharge(
            id="9c1e-abc",
            qr_code="00020101021226770014BR.GOV.BCB.PIX",
            qr_code_base64="iVBORw0KGgoAAAANSUhEUg==",
        )
        self.service = PixChargeService(store=self.store, gateway=self.gateway)

    def test_monta_cobranca_e_registra_com_id_da_operadora(self):
        result = self.service.create_pix_charge(make_payment_request())

        charge_request = self.gateway.create_charge.call_args[0][0]
        self.assertEqual(charge_request.value, 16790)
        self.assertEqual(charge_request.payer.document, "12345678900")
        self.assertEqual(charge_request.webhook_url, "https://loja.test/api/webhook")

        self.assertEqual(result.id, "9c1e-abc")
        self.assertEqual(
            result.to_payload(),
            {
                "id": "9c1e-abc",
                "qrCodeBase64": "iVBORw0KGgoAAAANSUhEUg==",
                "copiaECola": "00020101021226770014BR.GOV.BCB.PIX",
            },
        )
        record = self.store.get("9c1e-abc")
        self.assertEqual(record.status, TransactionStatus.CREATED)
        self.assertEqual(record.plan, "Kit 5 Meses")
        self.assertIsNone(record.fbp)
        self.assertIsNone(record.fbc)

    def test_recusa_da_operadora_nao_registra_nada(self):
        self.gateway.create_charge.side_effect = GatewayRejectedError(
            "HTTP 422", status_code=422, details={"message": "CPF inválido"}
        )
        with self.assertRaises(GatewayRejectedError):
            self.service.create_pix_charge(make_payment_request())
        self.assertEqual(len(self.store), 0)

    def test_falha_de_rede_nao_registra_nada(self):
        self.gateway.create_charge.side_effect = GatewayUnavailableError("timeout")
        with self.assertRaises(GatewayUnavailableError):
            self.service.create_pix_charge(make_payment_request())
        self.assertEqual(len(self.store), 0)

    @override_settings(PUSHINPAY_TOKEN="")
    def test_sem_token_e_erro_de_configuracao(self):
        with self.assertRaises(ConfigurationError):
            self.service.create_pix_charge(make_payment_request())
        self.gateway.create_charge.assert_not_called()

    @patch("checkout.services.charges.get_config")
    def test_token_vem_da_configuracao_do_checkout(self, mock_config):
        mock_config.return_value = CheckoutConfig(
            token="", base_url="https://loja.test", webhook_path="/api/webhook"
        )
        with self.assertRaisesMessage(ConfigurationError, "Token ausente"):
            self.service.create_pix_charge(make_payment_request())
        self.gateway.create_charge.assert_not_called()

    @override_settings(PUSHINPAY_TOKEN="tok-novo", CHECKOUT_BASE_URL="https://outra.test")
    def test_get_config_le_token_da_pushinpay(self):
        config = get_config()
        self.assertEqual(config.token, "tok-novo")
        self.assertEqual(config.base_url, "https://outra.test")

    @override_settings(CHECKOUT_BASE_URL="")
    def test_sem_url_base_e_erro_de_configuracao(self):
        with self.assertRaises(ConfigurationError):
            self.service.create_pix_charge(make_payment_request())
        self.gateway.create_charge.assert_not_called()

    @patch("checkout.tasks.persist_transaction")
    def test_falha_ao_gravar_agenda_regravacao(self, mock_task):
        store = MagicMock()
        store.put.side_effect = DatabaseError("database is locked")
        service = PixChargeService(store=store, gateway=self.gateway)

        with self.assertRaises(PersistenceError) as ctx:
            service.create_pix_charge(make_payment_request())

        self.assertEqual(ctx.exception.transaction_id, "9c1e-abc")
        mock_task.delay.assert_called_once()
        transaction_id, document = mock_task.delay.call_args[0]
        self.assertEqual(transaction_id, "9c1e-abc")
        self.assertEqual(document["plan"], "Kit 5 Meses")
        self.assertEqual(document["price"], "167.90")

    def test_submissoes_repetidas_geram_cobrancas_independentes(self):
        self.gateway.create_charge.side_effect = [
            GatewayCharge(id="tx-a", qr_code="a"),
            GatewayCharge(id="tx-b", qr_code="b"),
        ]
        self.service.create_pix_charge(make_payment_request())
        self.service.create_pix_charge(make_payment_request())
        self.assertEqual(len(self.store), 2)


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


class PersistTransactionTaskTest(TestCase):
    """Testes da task persist_transaction."""

    def test_grava_registro_pendente(self):
        document = make_record(fbp="fb.1.9").to_document()
        self.assertTrue(persist_transaction("tx-9", document))

        obj = Transaction.objects.get(pk="tx-9")
        self.assertEqual(obj.fbp, "fb.1.9")
        self.assertEqual(obj.price, Decimal("167.90"))

    def test_grava_no_store_resolvido_em_tempo_de_execucao(self):
        store = InMemoryTransactionStore()
        with patch("checkout.tasks.get_store", return_value=store):
            self.assertTrue(persist_transaction("tx-9", make_record().to_document()))

        self.assertEqual(store.get("tx-9").plan, "Kit 5 Meses")
        self.assertFalse(Transaction.objects.filter(pk="tx-9").exists())

    def test_registro_ja_existente_nao_e_sobrescrito(self):
        DjangoTransactionStore().put("tx-9", make_record())
        document = make_record(name="Outro").to_document()

        self.assertFalse(persist_transaction("tx-9", document))
        self.assertEqual(Transaction.objects.get(pk="tx-9").name, "Maria Souza")


# ---------------------------------------------------------------------------
# Views - GeneratePixView
# ---------------------------------------------------------------------------


class GeneratePixViewTest(TestCase):
    """Testes do endpoint /api/gerar-pix/."""

    def post(self, payload):
        return self.client.post(
            reverse("checkout:generate-pix"),
            data=json.dumps(payload),
            content_type="application/json",
        )

    def checkout_payload(self, **kwargs) -> dict:
        data = {
            "name": "Maria Souza",
            "email": "maria@example.com",
            "cpf": "123.456.789-00",
            "phone": "(11) 99999-0000",
            "plan": "Kit 5 Meses",
            "price": 167.90,
            "fbc": None,
            "fbp": None,
        }
        data.update(kwargs)
        return data

    @patch("checkout.services.pushinpay.requests.post")
    def test_kit_5_meses_sem_cookies(self, mock_post):
        mock_post.return_value = make_response(200, pushinpay_payload())

        response = self.post(self.checkout_payload())

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {
                "id": "9c1e-abc",
                "qrCodeBase64": "iVBORw0KGgoAAAANSUhEUg==",
                "copiaECola": "00020101021226770014BR.GOV.BCB.PIX",
            },
        )
        self.assertEqual(mock_post.call_args.kwargs["json"]["value"], 16790)
        self.assertEqual(mock_post.call_args.kwargs["json"]["payer"]["document"], "12345678900")

        transaction = Transaction.objects.get(pk="9c1e-abc")
        self.assertEqual(transaction.status, TransactionStatus.CREATED)
        self.assertEqual(transaction.plan, "Kit 5 Meses")
        self.assertEqual(transaction.price, Decimal("167.90"))
        self.assertIsNone(transaction.fbp)
        self.assertIsNone(transaction.fbc)

    @patch("checkout.services.pushinpay.requests.post")
    def test_preco_19_9_vira_1990(self, mock_post):
        mock_post.return_value = make_response(200, pushinpay_payload("tx-1990"))

        response = self.post(self.checkout_payload(price=19.9, plan="Teste"))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(mock_post.call_args.kwargs["json"]["value"], 1990)

    @patch("checkout.services.pushinpay.requests.post")
    def test_cookies_de_rastreamento_sao_gravados(self, mock_post):
        mock_post.return_value = make_response(200, pushinpay_payload())

        self.post(self.checkout_payload(fbp="fb.1.111.222", fbc="fb.1.333.click"))

        transaction = Transaction.objects.get(pk="9c1e-abc")
        self.assertEqual(transaction.fbp, "fb.1.111.222")
        self.assertEqual(transaction.fbc, "fb.1.333.click")

    @patch("checkout.services.pushinpay.requests.post")
    def test_recusa_da_operadora_retorna_500_com_detalhes(self, mock_post):
        body = {"message": "O campo document é inválido."}
        mock_post.return_value = make_response(422, body)

        response = self.post(self.checkout_payload())

        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.json(),
            {"error": "Falha ao gerar Pix na operadora", "details": body},
        )
        self.assertFalse(Transaction.objects.exists())

    @patch("checkout.services.pushinpay.requests.post")
    def test_falha_de_rede_retorna_500(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("refused")

        response = self.post(self.checkout_payload())

        self.assertEqual(response.status_code, 500)
        self.assertIn("error", response.json())
        self.assertFalse(Transaction.objects.exists())

    @override_settings(PUSHINPAY_TOKEN="")
    @patch("checkout.services.pushinpay.requests.post")
    def test_sem_token_retorna_erro_de_configuracao(self, mock_post):
        response = self.post(self.checkout_payload())

        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.json(),
            {"error": "Configuração de servidor incompleta (Token ausente)"},
        )
        mock_post.assert_not_called()

    @patch("checkout.services.pushinpay.requests.post")
    def test_view_usa_o_store_resolvido_por_get_store(self, mock_post):
        mock_post.return_value = make_response(200, pushinpay_payload())
        store = InMemoryTransactionStore()

        with patch("checkout.views.get_store", return_value=store):
            response = self.post(self.checkout_payload())

        self.assertEqual(response.status_code, 200)
        self.assertEqual(store.get("9c1e-abc").plan, "Kit 5 Meses")
        self.assertFalse(Transaction.objects.exists())

    @patch("checkout.services.pushinpay.requests.post")
    def test_preco_acima_da_coluna_retorna_400_sem_cobrar(self, mock_post):
        response = self.post(self.checkout_payload(price=123456789.90))

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Preço acima do limite aceito."})
        mock_post.assert_not_called()
        self.assertFalse(Transaction.objects.exists())

    def test_json_invalido_retorna_400(self):
        response = self.client.post(
            reverse("checkout:generate-pix"),
            data="{nope",
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("error", response.json())

    @patch("checkout.services.pushinpay.requests.post")
    def test_campos_ausentes_retorna_400_sem_chamar_operadora(self, mock_post):
        response = self.post({"name": "Maria"})

        self.assertEqual(response.status_code, 400)
        self.assertIn("error", response.json())
        mock_post.assert_not_called()

    def test_get_nao_permitido(self):
        response = self.client.get(reverse("checkout:generate-pix"))
        self.assertEqual(response.status_code, 405)

    @patch("checkout.services.pushinpay.requests.post")
    def test_erro_inesperado_vira_envelope_generico(self, mock_post):
        mock_post.side_effect = RuntimeError("boom")

        response = self.post(self.checkout_payload())

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Erro interno"})


# ---------------------------------------------------------------------------
# Views - LandingView
# ---------------------------------------------------------------------------


class LandingViewTest(TestCase):
    def test_retorna_200_com_planos(self):
        response = self.client.get(reverse("checkout:landing"))
        self.assertEqual(response.status_code, 200)
        names = [plan["name"] for plan in response.context["plans"]]
        self.assertEqual(names, ["Kit 3 Meses", "Kit 5 Meses", "Kit 12 Meses"])
        self.assertContains(response, 'data-plan="Kit 5 Meses"')

    def test_expoe_endpoint_e_gatilhos_para_o_front(self):
        response = self.client.get(reverse("checkout:landing"))
        self.assertContains(response, 'data-endpoint="/api/gerar-pix/"')
        self.assertContains(response, "data-checkout-trigger", count=3)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class TransactionModelTest(TestCase):
    def test_str_retorna_id_plano_status(self):
        transaction = Transaction.objects.create(
            id="tx-1",
            plan="Kit 3 Meses",
            email="a@b.c",
            name="A",
            price=Decimal("123.90"),
        )
        self.assertEqual(str(transaction), "tx-1 - Kit 3 Meses - created")
