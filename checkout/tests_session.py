"""
Testes da máquina de estados do modal de checkout e do cliente HTTP.
"""

from decimal import Decimal
from unittest.mock import MagicMock

import requests
from django.test import SimpleTestCase

from .session import (
    CONNECTION_ERROR,
    FALLBACK_ERROR,
    BuyerInput,
    CheckoutApi,
    CheckoutApiError,
    CheckoutSession,
    CheckoutState,
    PixData,
    TrackingContext,
)
from .testing import make_response

BUYER = BuyerInput(
    name="Maria Souza",
    email="maria@example.com",
    cpf="123.456.789-00",
    phone="(11) 99999-0000",
)
PIX = PixData(id="9c1e-abc", qr_code_base64="iVBORw0KGgo=", copia_e_cola="000201...")


class FakeApi:
    """Registra os payloads; on_call roda durante a "espera" da resposta."""

    def __init__(self, result=PIX, on_call=None):
        self.result = result
        self.on_call = on_call
        self.payloads = []

    def generate_pix(self, payload):
        self.payloads.append(payload)
        if self.on_call:
            self.on_call()
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


# ---------------------------------------------------------------------------
# TrackingContext
# ---------------------------------------------------------------------------


class TrackingContextTest(SimpleTestCase):
    def test_le_cookies_do_facebook(self):
        tracking = TrackingContext.from_cookies({"_fbp": "fb.1.1", "_fbc": "fb.1.2", "outro": "x"})
        self.assertEqual(tracking, TrackingContext(fbp="fb.1.1", fbc="fb.1.2"))

    def test_cookies_ausentes_sao_none(self):
        self.assertEqual(TrackingContext.from_cookies({}), TrackingContext(None, None))
        self.assertEqual(TrackingContext.from_cookies(None), TrackingContext(None, None))

    def test_le_cabecalho_cookie(self):
        tracking = TrackingContext.from_cookie_header("sessionid=abc; _fbp=fb.1.99; theme=dark")
        self.assertEqual(tracking.fbp, "fb.1.99")
        self.assertIsNone(tracking.fbc)

    def test_cookie_com_json_nao_esconde_os_do_facebook(self):
        tracking = TrackingContext.from_cookie_header('consent={"ads":true}; _fbp=fb.1.2')
        self.assertEqual(tracking.fbp, "fb.1.2")

    def test_cookie_com_espaco_no_valor_nao_esconde_os_do_facebook(self):
        tracking = TrackingContext.from_cookie_header("a=b c; _fbp=fb.1.2; _fbc=fb.1.3")
        self.assertEqual(tracking, TrackingContext(fbp="fb.1.2", fbc="fb.1.3"))

    def test_cabecalho_ausente_ou_vazio(self):
        self.assertEqual(TrackingContext.from_cookie_header(None), TrackingContext(None, None))
        self.assertEqual(TrackingContext.from_cookie_header(""), TrackingContext(None, None))


# ---------------------------------------------------------------------------
# CheckoutSession
# ---------------------------------------------------------------------------


class CheckoutSessionTest(SimpleTestCase):
    """Testes das transições form -> loading -> pix/form -> success."""

    def test_abrir_modal_comeca_em_form_com_plano(self):
        session = CheckoutSession(FakeApi())
        session.open_modal("Kit 5 Meses", 167.90)

        self.assertTrue(session.is_open)
        self.assertEqual(session.state, CheckoutState.FORM)
        self.assertEqual(session.selected_plan.name, "Kit 5 Meses")
        self.assertEqual(session.selected_plan.price, Decimal("167.9"))
        self.assertTrue(session.can_submit)

    def test_kit_5_meses_sem_cookies_vai_para_pix(self):
        api = FakeApi()
        session = CheckoutSession(api, cookies={})
        session.open_modal("Kit 5 Meses", Decimal("167.90"))

        self.assertTrue(session.submit(BUYER))

        self.assertEqual(session.state, CheckoutState.PIX)
        self.assertEqual(session.pix_data, PIX)
        self.assertEqual(
            api.payloads,
            [
                {
                    "name": "Maria Souza",
                    "email": "maria@example.com",
                    "cpf": "123.456.789-00",
                    "phone": "(11) 99999-0000",
                    "plan": "Kit 5 Meses",
                    "price": 167.9,
                    "fbc": None,
                    "fbp": None,
                }
            ],
        )

    def test_cookies_da_sessao_vao_no_payload(self):
        api = FakeApi()
        session = CheckoutSession(api, cookies={"_fbp": "fb.1.1", "_fbc": "fb.1.2"})
        session.open_modal("Kit 3 Meses", "123.90")
        session.submit(BUYER)

        self.assertEqual(api.payloads[0]["fbp"], "fb.1.1")
        self.assertEqual(api.payloads[0]["fbc"], "fb.1.2")

    def test_fica_em_loading_durante_a_requisicao(self):
        states = []
        session = CheckoutSession(FakeApi(on_call=lambda: states.append(session.state)))
        session.open_modal("Kit 5 Meses", 167.90)
        session.submit(BUYER)

        self.assertEqual(states, [CheckoutState.LOADING])

    def test_clique_repetido_durante_loading_nao_dispara_segunda_requisicao(self):
        second = []

        def click_again():
            second.append(session.submit(BUYER))
            self.assertFalse(session.can_submit)

        api = FakeApi(on_call=click_again)
        session = CheckoutSession(api)
        session.open_modal("Kit 5 Meses", 167.90)
        session.submit(BUYER)

        self.assertEqual(second, [False])
        self.assertEqual(len(api.payloads), 1)

    def test_submit_fora_de_form_e_ignorado(self):
        api = FakeApi()
        session = CheckoutSession(api)
        self.assertFalse(session.submit(BUYER))  # modal fechado, sem plano

        session.open_modal("Kit 5 Meses", 167.90)
        session.submit(BUYER)
        self.assertFalse(session.submit(BUYER))  # já em pix
        self.assertEqual(len(api.payloads), 1)

    def test_falha_volta_para_form_com_erro_e_mantem_plano(self):
        api = FakeApi(result=CheckoutApiError("Falha ao gerar Pix na operadora"))
        session = CheckoutSession(api)
        session.open_modal("Kit 12 Meses", 227.90)
        session.submit(BUYER)

        self.assertEqual(session.state, CheckoutState.FORM)
        self.assertEqual(session.error, "Falha ao gerar Pix na operadora")
        self.assertEqual(session.selected_plan.name, "Kit 12 Meses")
        self.assertIsNone(session.pix_data)
        self.assertTrue(session.can_submit)

    def test_reabrir_reseta_para_form_e_limpa_pix(self):
        session = CheckoutSession(FakeApi())
        session.open_modal("Kit 5 Meses", 167.90)
        session.submit(BUYER)
        session.close_modal()

        session.open_modal("Kit 3 Meses", 123.90)

        self.assertEqual(session.state, CheckoutState.FORM)
        self.assertIsNone(session.pix_data)
        self.assertIsNone(session.error)
        self.assertEqual(session.selected_plan.name, "Kit 3 Meses")

    def test_fechar_durante_loading_nao_cancela_e_descarta_resposta(self):
        api = FakeApi(on_call=lambda: session.close_modal())
        session = CheckoutSession(api)
        session.open_modal("Kit 5 Meses", 167.90)
        session.submit(BUYER)

        self.assertEqual(len(api.payloads), 1)
        self.assertFalse(session.is_open)
        self.assertIsNone(session.pix_data)

        session.open_modal("Kit 5 Meses", 167.90)
        self.assertEqual(session.state, CheckoutState.FORM)

    def test_resposta_antiga_nao_sobrescreve_sessao_reaberta(self):
        def reopen():
            session.close_modal()
            session.open_modal("Kit 3 Meses", 123.90)

        session = CheckoutSession(FakeApi(on_call=reopen))
        session.open_modal("Kit 5 Meses", 167.90)
        session.submit(BUYER)

        self.assertEqual(session.state, CheckoutState.FORM)
        self.assertIsNone(session.pix_data)
        self.assertEqual(session.selected_plan.name, "Kit 3 Meses")

    def test_confirmacao_leva_pix_para_success(self):
        session = CheckoutSession(FakeApi())
        session.open_modal("Kit 5 Meses", 167.90)
        session.submit(BUYER)

        self.assertFalse(session.confirm_payment("outro-id"))
        self.assertEqual(session.state, CheckoutState.PIX)
        self.assertTrue(session.confirm_payment("9c1e-abc"))
        self.assertEqual(session.state, CheckoutState.SUCCESS)

    def test_confirmacao_fora_de_pix_e_ignorada(self):
        session = CheckoutSession(FakeApi())
        session.open_modal("Kit 5 Meses", 167.90)
        self.assertFalse(session.confirm_payment("9c1e-abc"))
        self.assertEqual(session.state, CheckoutState.FORM)

    def test_copiar_codigo(self):
        session = CheckoutSession(FakeApi())
        session.open_modal("Kit 5 Meses", 167.90)
        self.assertIsNone(session.copy_code())
        session.submit(BUYER)
        self.assertEqual(session.copy_code(), "000201...")


# ---------------------------------------------------------------------------
# CheckoutApi
# ---------------------------------------------------------------------------


class CheckoutApiTest(SimpleTestCase):
    """Testes do cliente HTTP do endpoint /api/gerar-pix/."""

    def setUp(self):
        self.http = MagicMock()
        self.api = CheckoutApi("https://loja.test/", session=self.http, timeout=5)

    def test_sucesso_devolve_pix_data(self):
        self.http.post.return_value = make_response(
            200, {"id": "tx-1", "qrCodeBase64": "b64", "copiaECola": "code"}
        )

        pix = self.api.generate_pix({"plan": "Kit"})

        self.assertEqual(pix, PixData(id="tx-1", qr_code_base64="b64", copia_e_cola="code"))
        self.http.post.assert_called_once_with(
            "https://loja.test/api/gerar-pix/", json={"plan": "Kit"}, timeout=5
        )

    def test_erro_usa_mensagem_do_servidor(self):
        self.http.post.return_value = make_response(
            500, {"error": "Falha ao gerar Pix na operadora", "details": {"message": "x"}}
        )
        with self.assertRaisesMessage(CheckoutApiError, "Falha ao gerar Pix na operadora"):
            self.api.generate_pix({})

    def test_erro_sem_corpo_usa_mensagem_padrao(self):
        self.http.post.return_value = make_response(502, None, text="<html>")
        with self.assertRaisesMessage(CheckoutApiError, FALLBACK_ERROR):
            self.api.generate_pix({})

    def test_falha_de_conexao(self):
        self.http.post.side_effect = requests.ConnectionError("refused")
        with self.assertRaisesMessage(CheckoutApiError, CONNECTION_ERROR):
            self.api.generate_pix({})

    def test_resposta_malformada(self):
        self.http.post.return_value = make_response(200, {"qrCodeBase64": "b64"})
        with self.assertRaisesMessage(CheckoutApiError, FALLBACK_ERROR):
            self.api.generate_pix({})

    def test_sessao_volta_para_form_em_falha_http(self):
        self.http.post.return_value = make_response(500, {"error": "Erro interno"})
        session = CheckoutSession(self.api)
        session.open_modal("Kit 5 Meses", 167.90)
        session.submit(BUYER)

        self.assertEqual(session.state, CheckoutState.FORM)
        self.assertEqual(session.error, "Erro interno")
