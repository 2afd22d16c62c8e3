import warnings

import pytest
from fastapi.testclient import TestClient

from cotizaobra.server.api.descriptions import get_description_client
from cotizaobra.server.main import app
from cotizaobra.server.schemas.quote import DescriptionIn, LineItemIn, QuoteIn
from cotizaobra.server.settings.config import settings
from cotizaobra.services.description_client import DescriptionClient

QUOTE = {
    "project_name": "Escalera",
    "client_name": "Ana",
    "line_items": [
        {"id": "a", "description": "Piso", "quantity": 2, "unit_price": 100, "labor_unit_price": 50},
        {"id": "b", "description": "Barandal", "quantity": "", "unit_price": "abc"},
        {"id": "c", "description": "Pintura", "quantity": "3", "unit_price": 0, "labor_unit_price": 5},
    ],
    "tax_rate": 16,
    "currency": "USD",
}


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_template(client):
    r = client.get("/quotes/template", params={"language": "es"})
    body = r.json()
    assert r.status_code == 200
    assert len(body["line_items"]) == 1
    assert body["line_items"][0]["unit"] == "unidad"
    assert body["currency"] == "MXN"


def test_totals(client):
    r = client.post("/quotes/totals", params={"language": "en"}, json=QUOTE)
    assert r.status_code == 200
    body = r.json()
    assert body["subtotal"] == 315
    assert body["tax_amount"] == pytest.approx(50.4)
    assert body["grand_total"] == pytest.approx(365.4)
    assert body["formatted"]["grand_total"] == "$365.40"
    assert [row["id"] for row in body["line_totals"]] == ["a", "b", "c"]
    assert [row["line_total"] for row in body["line_totals"]] == [300, 0, 15]


def test_totals_rejects_unknown_currency(client):
    r = client.post("/quotes/totals", json={**QUOTE, "currency": "EUR"})
    assert r.status_code == 422


def test_add_and_remove_line_items(client):
    added = client.post("/quotes/line-items", params={"language": "en"}, json=QUOTE).json()
    assert [i["id"] for i in added["line_items"]][:3] == ["a", "b", "c"]
    assert len(added["line_items"]) == 4
    assert added["line_items"][3]["unit"] == "unit"

    r = client.request("DELETE", "/quotes/line-items/b", json=QUOTE)
    assert r.status_code == 200
    assert [i["id"] for i in r.json()["line_items"]] == ["a", "c"]


def test_document(client):
    r = client.post("/quotes/document", params={"language": "es"}, json=QUOTE)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert "Barandal" in r.text


def test_generate_description(client, fake_openai):
    sdk, completions = fake_openai(content="Texto generado.")
    app.dependency_overrides[get_description_client] = lambda: DescriptionClient(api_key="k", client=sdk)

    r = client.post("/descriptions/generate", json={"prompt": "escalera", "language": "es"})
    assert r.status_code == 200
    assert r.json() == {"text": "Texto generado.", "ok": True, "error": None, "status": "succeeded"}
    assert len(completions.calls) == 1


def test_generate_description_unconfigured(client, fake_openai):
    sdk, completions = fake_openai()
    app.dependency_overrides[get_description_client] = lambda: DescriptionClient(api_key="", client=sdk)

    r = client.post("/descriptions/generate", json={"prompt": "escalera", "language": "en"})
    body = r.json()
    assert r.status_code == 200
    assert body["ok"] is False and body["error"] == "unconfigured"
    assert body["status"] == "failed"
    assert completions.calls == []


def test_generate_description_blank_prompt(client, fake_openai):
    sdk, completions = fake_openai()
    app.dependency_overrides[get_description_client] = lambda: DescriptionClient(api_key="k", client=sdk)

    r = client.post("/descriptions/generate", json={"prompt": "  ", "language": "es"})
    assert r.status_code == 422
    assert completions.calls == []


def test_totals_with_huge_amounts(client):
    quote = {"line_items": [{"id": "a", "quantity": "1e15", "unit_price": "1e15"}], "currency": "USD"}
    r = client.post("/quotes/totals", params={"language": "en"}, json=quote)
    assert r.status_code == 200
    assert r.json()["formatted"]["subtotal"] == "$1,000,000,000,000,000,000,000,000,000,000.00"


def test_duplicate_line_item_ids_are_rejected(client):
    quote = {**QUOTE, "line_items": [{"id": "x"}, {"id": "x"}, {"id": "y"}]}

    assert client.post("/quotes/totals", json=quote).status_code == 422
    r = client.request("DELETE", "/quotes/line-items/x", json=quote)
    assert r.status_code == 422
    assert "x" in r.json()["detail"]


def test_generate_description_service_failure(client, fake_openai):
    sdk, completions = fake_openai(exc=ConnectionError("timeout"))
    app.dependency_overrides[get_description_client] = lambda: DescriptionClient(api_key="k", client=sdk)

    body = client.post("/descriptions/generate", json={"prompt": "techo"}).json()
    assert body["ok"] is False
    assert body["error"] == "service_error"
    assert body["status"] == "failed"


def test_description_language_defaults_from_settings():
    assert DescriptionIn(prompt="techo").language.value == settings.default_language


def test_lifespan_shares_one_description_client():
    with TestClient(app) as c:
        shared = app.state.description_client
        assert isinstance(shared, DescriptionClient)
        assert c.get("/health").status_code == 200
        assert app.state.description_client is shared


def test_schema_defaults_serialize_without_warnings():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        dumped = QuoteIn(line_items=[LineItemIn()]).model_dump(mode="json")
    assert dumped["tax_rate"] == 16
    assert dumped["line_items"][0]["quantity"] == 1
