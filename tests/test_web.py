"""Tests for the HTTP API."""

import io
import json

import pytest

from sealvault.core.crypto.keypair import KeyPairManager
from sealvault.web.app import app

PASSWORD = "Correct-Horse-9"


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def key_texts(keypair):
    return KeyPairManager.export_public(keypair), KeyPairManager.export_private(keypair)


def _upload(data, name):
    return (io.BytesIO(data), name)


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.get_json()
    assert body["status"] == "healthy"
    assert len(body["self_test"]) == 5
    assert body["algorithms"]["encryption"] == "AES-256-GCM"


def test_cors_headers(client):
    response = client.options("/api/encrypt")

    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert "X-Fingerprint-Valid" in response.headers["Access-Control-Expose-Headers"]


def test_generate_keys(client):
    body = client.post("/api/keys/generate").get_json()

    assert body["key_size"] == 2048
    assert KeyPairManager.import_public(body["public_key"]) is not None
    assert KeyPairManager.import_private(body["private_key"]) is not None


def test_public_key_round_trip(client, key_texts):
    public_text, private_text = key_texts

    sealed = client.post(
        "/api/encrypt",
        data={"file": _upload(b"hello", "a.txt"), "public_key": public_text},
        content_type="multipart/form-data",
    )
    assert sealed.status_code == 200
    assert sealed.headers["X-Content-SHA256"] == (
        "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
    )
    assert "a.txt.enc.json" in sealed.headers["Content-Disposition"]
    assert json.loads(sealed.data)["filename"] == "a.txt"

    opened = client.post(
        "/api/decrypt",
        data={
            "envelope": _upload(sealed.data, "a.txt.enc.json"),
            "private_key": _upload(private_text.encode("utf-8"), "private.pem"),
        },
        content_type="multipart/form-data",
    )
    assert opened.status_code == 200
    assert opened.data == b"hello"
    assert opened.headers["X-Fingerprint-Valid"] == "true"
    assert "a.txt" in opened.headers["Content-Disposition"]


def test_password_round_trip(client):
    sealed = client.post(
        "/api/password/encrypt",
        data={"file": _upload(b"my diary", "diary.txt"), "password": PASSWORD},
        content_type="multipart/form-data",
    )
    assert sealed.status_code == 200
    assert "diary.txt.pwd.json" in sealed.headers["Content-Disposition"]

    opened = client.post(
        "/api/password/decrypt",
        data={"envelope": sealed.data.decode("utf-8"), "password": PASSWORD},
        content_type="multipart/form-data",
    )
    assert opened.status_code == 200
    assert opened.data == b"my diary"


def test_wrong_password_is_422(client):
    sealed = client.post(
        "/api/password/encrypt",
        data={"file": _upload(b"my diary", "diary.txt"), "password": PASSWORD},
        content_type="multipart/form-data",
    )
    opened = client.post(
        "/api/password/decrypt",
        data={"envelope": sealed.data.decode("utf-8"), "password": "not-the-password"},
        content_type="multipart/form-data",
    )

    assert opened.status_code == 422
    assert "password" in opened.get_json()["error"]


def test_wrong_private_key_is_422(client, key_texts, other_keypair):
    public_text, _ = key_texts
    sealed = client.post(
        "/api/encrypt",
        data={"file": _upload(b"hello", "a.txt"), "public_key": public_text},
        content_type="multipart/form-data",
    )
    opened = client.post(
        "/api/decrypt",
        data={
            "envelope": sealed.data.decode("utf-8"),
            "private_key": KeyPairManager.export_private(other_keypair),
        },
        content_type="multipart/form-data",
    )

    assert opened.status_code == 422


def test_weak_password_is_400(client):
    response = client.post(
        "/api/password/encrypt",
        data={"file": _upload(b"x", "x.txt"), "password": "short"},
        content_type="multipart/form-data",
    )

    assert response.status_code == 400
    assert response.get_json()["error"] == "Password must be at least 8 characters"


def test_bad_key_is_400(client):
    response = client.post(
        "/api/encrypt",
        data={"file": _upload(b"x", "x.txt"), "public_key": "not a key"},
        content_type="multipart/form-data",
    )

    assert response.status_code == 400
    assert "Invalid key" in response.get_json()["error"]


def test_wrong_shape_is_400(client, key_texts):
    _, private_text = key_texts
    sealed = client.post(
        "/api/password/encrypt",
        data={"file": _upload(b"x", "x.txt"), "password": PASSWORD},
        content_type="multipart/form-data",
    )
    response = client.post(
        "/api/decrypt",
        data={"envelope": sealed.data.decode("utf-8"), "private_key": private_text},
        content_type="multipart/form-data",
    )

    assert response.status_code == 400
    assert response.get_json()["error"] == "This is not a public-key envelope"


def test_malformed_envelope_is_400(client, key_texts):
    _, private_text = key_texts
    response = client.post(
        "/api/decrypt",
        data={"envelope": "{not json", "private_key": private_text},
        content_type="multipart/form-data",
    )

    assert response.status_code == 400
    assert response.get_json()["error"] == "Invalid envelope file"


def test_missing_file_is_400(client):
    response = client.post("/api/password/encrypt", data={"password": PASSWORD})

    assert response.status_code == 400
    assert response.get_json()["error"] == "No file provided"


def test_password_strength(client):
    body = client.post("/api/password/strength", json={"password": "abc"}).get_json()

    assert body["strength"] == "low"
    assert body["feedback"][0] == "Use at least 8 characters"


def test_password_strength_requires_object(client):
    response = client.post("/api/password/strength", json=["x"])

    assert response.status_code == 400
    assert "JSON object" in response.get_json()["error"]


def test_health_reports_config_hash(client):
    from sealvault.web.app import config

    assert client.get("/api/health").get_json()["config_hash"] == config.config_hash
