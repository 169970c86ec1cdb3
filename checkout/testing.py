"""
Fakes compartilhados pelos módulos de teste do checkout.
"""

import json
from unittest.mock import MagicMock


def make_response(status_code: int = 200, payload=None, text: str = "") -> MagicMock:
    """Resposta fake no formato de requests.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 400
    resp.text = text or (json.dumps(payload) if payload is not None else "")
    if payload is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload
    return resp


def pushinpay_payload(charge_id: str = "9c1e-abc") -> dict:
    return {
        "id": charge_id,
        "qr_code": "00020101021226770014BR.GOV.BCB.PIX",
        "qr_code_base64": "iVBORw0KGgoAAAANSUhEUg==",
        "status": "created",
        "value": 16790,
    }
