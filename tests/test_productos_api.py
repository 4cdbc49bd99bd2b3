"""
HTTP contract of the productos API, exercised through FastAPI's TestClient.
"""
from __future__ import annotations

import json
import sys
from dataclasses import replace
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Garantiza que el paquete api sea importable durante los tests locales
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from api.app import create_app, start, stop  # noqa: E402
from api.core.config import get_settings  # noqa: E402
from api.db.session import StorageError  # noqa: E402

JPEG_BYTES = b"\xff\xd8\xff\xe0" + bytes(range(256)) + b"\xff\xd9"
SAMPLE_ORDER = ["Dell XPS 13", "MacBook Air M2", "Samsung Galaxy S23", "iPad Pro", "iPhone 14"]


@pytest.fixture()
def settings(tmp_path):
    return replace(
        get_settings(),
        database_url=f"sqlite:///{tmp_path / 'productos.db'}",
        seed_data_file=tmp_path / "data" / "resumen_productos.json",
        pago_qr_file=tmp_path / "data" / "pagoQR.jpg",
        version="9.9.9",
    )


@pytest.fixture()
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


def test_index_describes_service(client):
    resp = client.get("/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "OK"
    assert body["version"] == "9.9.9"
    assert body["timestamp"].endswith("Z")
    assert any("/productos" in item for item in body["endpoints"])


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "OK"
    assert body["uptime"] >= 0
    assert "timestamp" in body


@pytest.mark.parametrize("path", ["/", "/health", "/productos", "/productos/search/iPad", "/productos/precio/1/2"])
def test_head_is_answered_on_get_routes(client, path):
    resp = client.head(path)
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/json")


def test_list_returns_sample_products_sorted(client):
    resp = client.get("/productos")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["count"] == 5
    assert [p["modelo"] for p in body["data"]] == SAMPLE_ORDER
    assert set(body["data"][0]) == {"id", "modelo", "precio"}


def test_search_by_substring(client):
    resp = client.get("/productos/search/iPhone")
    body = resp.json()
    assert resp.status_code == 200
    assert body["search"] == "iPhone"
    assert body["count"] == 1
    assert body["data"][0]["modelo"] == "iPhone 14"

    resp = client.get("/productos/search/iPhone%2014")
    assert resp.json()["data"][0]["precio"] == 1200000

    resp = client.get("/productos/search/Nokia")
    assert resp.json() == {"success": True, "search": "Nokia", "count": 0, "data": []}


def test_price_range(client):
    resp = client.get("/productos/precio/1100000/1500000")
    body = resp.json()
    assert resp.status_code == 200
    assert body["priceRange"] == {"min": 1100000, "max": 1500000}
    assert body["count"] == 3
    assert all(1100000 <= p["precio"] <= 1500000 for p in body["data"])


def test_price_range_inverted_is_empty(client):
    body = client.get("/productos/precio/1500000/1100000").json()
    assert body["success"] is True
    assert body["count"] == 0
    assert body["data"] == []


def test_price_range_rejects_non_integers(client):
    resp = client.get("/productos/precio/barato/100")
    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert "error" in resp.json()


def test_get_by_id(client):
    first = client.get("/productos").json()["data"][0]
    resp = client.get(f"/productos/{first['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "data": first}


@pytest.mark.parametrize("product_id", ["999999", "1.5", "1e400"])
def test_get_missing_id_is_404(client, product_id):
    resp = client.get(f"/productos/{product_id}")
    assert resp.status_code == 404
    assert resp.json()["error"] == "Producto no encontrado"


@pytest.mark.parametrize("product_id", ["abc", "nan", "12abc", "0_1", "inf", "1__0"])
def test_get_non_numeric_id_is_400(client, product_id):
    resp = client.get(f"/productos/{product_id}")
    assert resp.status_code == 400
    assert resp.json()["error"] == "ID debe ser un número"


def test_pago_qr_missing_is_404(client):
    resp = client.get("/pagoQR")
    assert resp.status_code == 404
    assert resp.headers["content-type"].startswith("application/json")
    assert "error" in resp.json()


def test_pago_qr_served_after_seeding(settings):
    settings.pago_qr_file.parent.mkdir(parents=True, exist_ok=True)
    settings.pago_qr_file.write_bytes(JPEG_BYTES)

    with TestClient(create_app(settings)) as client:
        resp = client.get("/pagoQR")

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/jpeg"
    assert resp.headers["cache-control"] == "public, max-age=86400"
    assert len(resp.content) == len(JPEG_BYTES)
    assert resp.content == JPEG_BYTES


def test_seed_file_is_used_when_present(settings):
    settings.seed_data_file.parent.mkdir(parents=True, exist_ok=True)
    settings.seed_data_file.write_text(
        json.dumps([{"modelo": "Pixel 8", "precio": 900000}]), encoding="utf-8"
    )
    with TestClient(create_app(settings)) as client:
        body = client.get("/productos").json()
    assert body["count"] == 1
    assert body["data"][0]["modelo"] == "Pixel 8"


def test_bad_seed_records_do_not_block_startup(settings):
    settings.seed_data_file.parent.mkdir(parents=True, exist_ok=True)
    settings.seed_data_file.write_text(
        json.dumps(
            [
                {"modelo": "Enorme", "precio": 10**20},
                {"modelo": "Doble signo", "precio": "--5"},
                {"modelo": "Superindice", "precio": "²"},
                {"modelo": "Pixel 8", "precio": 900000},
            ]
        ),
        encoding="utf-8",
    )
    with TestClient(create_app(settings)) as client:
        body = client.get("/productos").json()
        report = client.app.state.handle.seed_report
    assert [p["modelo"] for p in body["data"]] == ["Pixel 8"]
    assert report.products.failed == ["Enorme", "Doble signo", "Superindice"]


def test_restart_does_not_duplicate_rows(settings):
    for _ in range(2):
        with TestClient(create_app(settings)) as client:
            assert client.get("/productos").json()["count"] == 5


@pytest.mark.parametrize("method,path", [("GET", "/no-existe"), ("GET", "/productos/precio/1"), ("POST", "/productos")])
def test_unmatched_route_is_structured_404(client, method, path):
    resp = client.request(method, path)
    assert resp.status_code == 404
    assert resp.json() == {
        "success": False,
        "error": "Endpoint no encontrado",
        "message": f"La ruta {path} no existe",
    }


def test_storage_error_is_500_without_internals(client, monkeypatch):
    def boom():
        raise StorageError("list_products", "database disk image is malformed")

    monkeypatch.setattr(client.app.state.handle.repository, "list_products", boom)
    resp = client.get("/productos")
    assert resp.status_code == 500
    body = resp.json()
    assert body["success"] is False
    assert "malformed" not in body["error"]


def test_start_and_stop_release_storage(settings):
    handle = start(settings)
    try:
        assert handle.seed_report.source == "sample"
        assert handle.catalog.list_all().count == 5
    finally:
        stop(handle)
    assert handle.storage._closed is True


def test_start_is_fatal_when_database_cannot_open(settings, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    bad = replace(settings, database_url=f"sqlite:///{blocker / 'db' / 'productos.db'}")
    with pytest.raises(StorageError):
        start(bad)
