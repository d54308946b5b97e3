"""Tests for envelope encoding and strict decoding."""

import json
from base64 import b64encode

import pytest

from sealvault.core.crypto.envelope import (
    PASSWORD_FIELDS,
    PASSWORD_SHAPE,
    RSA_FIELDS,
    RSA_SHAPE,
    EnvelopeCodec,
    PasswordEnvelope,
    RsaEnvelope,
    detect_shape,
)
from sealvault.core.crypto.errors import MalformedEnvelope, WrongEnvelopeShape

SHA = "ab" * 32


def _b64(data):
    return b64encode(data).decode("ascii")


@pytest.fixture
def rsa_envelope():
    return RsaEnvelope(
        filename="report.pdf",
        nonce=bytes(12),
        tag=bytes(range(16)),
        ciphertext=b"ciphertext",
        enc_aes_key=bytes(256),
        sha256=SHA,
    )


@pytest.fixture
def password_envelope():
    return PasswordEnvelope(
        filename="notes.txt",
        salt=bytes(range(16)),
        nonce=bytes(12),
        tag=bytes(16),
        ciphertext=b"",
        sha256=SHA,
    )


def test_rsa_wire_fields(rsa_envelope):
    obj = json.loads(EnvelopeCodec.encode(rsa_envelope))

    assert tuple(obj) == RSA_FIELDS
    assert obj["encAesKey"] == _b64(bytes(256))
    assert obj["tag"] == _b64(bytes(range(16)))
    assert obj["sha256"] == SHA


def test_password_wire_fields(password_envelope):
    obj = json.loads(EnvelopeCodec.encode(password_envelope))

    assert tuple(obj) == PASSWORD_FIELDS
    assert obj["salt"] == _b64(bytes(range(16)))
    assert obj["ciphertext"] == ""


def test_json_is_indented(rsa_envelope):
    text = EnvelopeCodec.encode(rsa_envelope)
    assert text.startswith('{\n  "filename": "report.pdf"')


def test_decode_round_trip(rsa_envelope, password_envelope):
    assert EnvelopeCodec.decode_rsa(EnvelopeCodec.encode(rsa_envelope)) == rsa_envelope
    assert EnvelopeCodec.decode_password(EnvelopeCodec.encode(password_envelope)) == password_envelope
    assert isinstance(EnvelopeCodec.decode(EnvelopeCodec.encode(password_envelope)), PasswordEnvelope)


def test_non_ascii_filename_preserved(password_envelope):
    envelope = PasswordEnvelope(
        filename="résumé 履歴書.pdf",
        salt=password_envelope.salt,
        nonce=password_envelope.nonce,
        tag=password_envelope.tag,
        ciphertext=password_envelope.ciphertext,
        sha256=SHA,
    )
    assert EnvelopeCodec.decode_password(envelope.to_json()).filename == "résumé 履歴書.pdf"


def test_extra_fields_ignored(rsa_envelope):
    obj = rsa_envelope.to_dict()
    obj["comment"] = "added by hand"

    assert EnvelopeCodec.decode_rsa(json.dumps(obj)) == rsa_envelope


def test_wrong_shape(rsa_envelope, password_envelope):
    with pytest.raises(WrongEnvelopeShape) as excinfo:
        EnvelopeCodec.decode_password(rsa_envelope.to_json())
    assert excinfo.value.expected == PASSWORD_SHAPE
    assert excinfo.value.found == RSA_SHAPE

    with pytest.raises(WrongEnvelopeShape):
        EnvelopeCodec.decode_rsa(password_envelope.to_json())


def test_wrong_shape_is_malformed(password_envelope):
    with pytest.raises(MalformedEnvelope):
        EnvelopeCodec.decode_rsa(password_envelope.to_json())


def test_detect_shape_ambiguous():
    with pytest.raises(MalformedEnvelope):
        detect_shape({"encAesKey": "", "salt": ""})
    with pytest.raises(MalformedEnvelope):
        detect_shape({"filename": "x"})


@pytest.mark.parametrize("text", ["", "not json", "[1, 2]", '"string"', b"\xff\xfe"])
def test_not_an_object(text):
    with pytest.raises(MalformedEnvelope):
        EnvelopeCodec.decode(text)


def test_deeply_nested_json():
    with pytest.raises(MalformedEnvelope):
        EnvelopeCodec.decode("[" * 100_000 + "]" * 100_000)


@pytest.mark.parametrize("field", ["filename", "nonce", "tag", "ciphertext", "sha256"])
def test_missing_field(rsa_envelope, field):
    obj = rsa_envelope.to_dict()
    del obj[field]

    with pytest.raises(MalformedEnvelope):
        EnvelopeCodec.decode_rsa(json.dumps(obj))


@pytest.mark.parametrize(
    "field, value",
    [
        ("nonce", _b64(bytes(11))),
        ("tag", _b64(bytes(15))),
        ("ciphertext", "not*base64"),
        ("encAesKey", "@@@@"),
        ("sha256", "abc"),
        ("sha256", "zz" * 32),
        ("sha256", SHA + "\n"),
        ("filename", 42),
    ],
)
def test_invalid_field(rsa_envelope, field, value):
    obj = rsa_envelope.to_dict()
    obj[field] = value

    with pytest.raises(MalformedEnvelope):
        EnvelopeCodec.decode_rsa(json.dumps(obj))


def test_short_salt(password_envelope):
    obj = password_envelope.to_dict()
    obj["salt"] = _b64(bytes(8))

    with pytest.raises(MalformedEnvelope):
        EnvelopeCodec.decode_password(json.dumps(obj))


def test_uppercase_sha256_normalized(rsa_envelope):
    obj = rsa_envelope.to_dict()
    obj["sha256"] = SHA.upper()

    assert EnvelopeCodec.decode_rsa(json.dumps(obj)).sha256 == SHA


def test_repr_hides_content(rsa_envelope):
    assert repr(rsa_envelope) == "RsaEnvelope(filename='report.pdf', ct_len=10)"
