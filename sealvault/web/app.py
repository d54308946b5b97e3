"""
SealVault Web API
=================
Stateless Flask backend exposing the envelope engine over HTTP.

Nothing is stored server-side: every request carries its file, key or
password and gets back an envelope or a recovered file.
"""

import io
import os

from flask import Flask, request, jsonify, send_file
from werkzeug.exceptions import BadRequest
from werkzeug.utils import secure_filename

from sealvault.core.config import SecureConfig
from sealvault.core.crypto.errors import (
    AsymmetricUnwrapFailure,
    AuthenticationFailure,
    KeyImportError,
    MalformedEnvelope,
    WeakPassword,
    WrongEnvelopeShape,
)
from sealvault.core.crypto.envelope import RSA_SHAPE
from sealvault.core.crypto.hybrid_engine import EnvelopeEngine
from sealvault.core.crypto.keypair import KeyPairManager
from sealvault.core.logging import configure_logging
from sealvault.security.constants import (
    ENCRYPTION_ALGORITHM,
    KEY_DERIVATION_FUNCTION,
    KEY_WRAP_ALGORITHM,
    PASSWORD_ENVELOPE_SUFFIX,
    RSA_ENVELOPE_SUFFIX,
)
from sealvault.security.hardening import CryptoSelfTest
from sealvault.security.password_strength import calculate_password_strength

# ============================================================
# APP CONFIG
# ============================================================

config = SecureConfig.get_instance()
log = configure_logging(config).getChild("web")
engine = EnvelopeEngine.from_config(config)

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = config.security.max_envelope_bytes

_self_test_results = None


# CORS handler - handles both preflight and actual requests
@app.after_request
def add_cors_headers(response):
    response.headers['Access-Control-Allow-Origin'] = '*'
    response.headers['Access-Control-Allow-Methods'] = 'GET, POST, OPTIONS'
    response.headers['Access-Control-Allow-Headers'] = 'Content-Type'
    response.headers['Access-Control-Expose-Headers'] = 'X-Content-SHA256, X-Fingerprint-Valid'
    response.headers['Access-Control-Max-Age'] = '3600'
    return response


@app.route('/api/<path:path>', methods=['OPTIONS'])
def handle_options(path):
    return app.make_response('')


# ============================================================
# ERROR HANDLING
# ============================================================

def _error(message, status):
    return jsonify({"error": message}), status


@app.errorhandler(BadRequest)
def handle_bad_request(e):
    return _error(e.description or "Bad request", 400)


@app.errorhandler(KeyImportError)
def handle_key_import(e):
    return _error("Invalid key. Check your key format.", 400)


@app.errorhandler(WeakPassword)
def handle_weak_password(e):
    return _error(str(e), 400)


@app.errorhandler(WrongEnvelopeShape)
def handle_wrong_shape(e):
    expected = "public-key" if e.expected == RSA_SHAPE else "password"
    return _error(f"This is not a {expected} envelope", 400)


@app.errorhandler(MalformedEnvelope)
def handle_malformed(e):
    return _error("Invalid envelope file", 400)


@app.errorhandler(AsymmetricUnwrapFailure)
@app.errorhandler(AuthenticationFailure)
def handle_decrypt_failure(e):
    log.warning("Decryption rejected on %s", request.path)
    if request.path.startswith("/api/password/"):
        return _error("Decryption failed. Check your password or file.", 422)
    return _error("Decryption failed. Check your private key or envelope file.", 422)


# ============================================================
# REQUEST HELPERS
# ============================================================

def _required_file(name):
    upload = request.files.get(name)
    if upload is None or not upload.filename:
        raise BadRequest(f"No {name} provided")
    return upload


def _text_field(name):
    """Read a text field sent either as a form value or an uploaded file."""
    value = request.form.get(name)
    if value:
        return value

    upload = request.files.get(name)
    if upload is None:
        raise BadRequest(f"No {name} provided")
    try:
        return upload.read().decode("utf-8")
    except UnicodeDecodeError:
        raise BadRequest(f"{name} must be UTF-8 text")


def _password_field():
    password = request.form.get("password", "")
    if not password:
        raise BadRequest("Please enter a password")
    return password


def _envelope_response(envelope_text, filename, suffix, sha256):
    download_name = (secure_filename(filename) or "file") + suffix
    response = send_file(
        io.BytesIO(envelope_text.encode("utf-8")),
        mimetype="application/json",
        download_name=download_name,
        as_attachment=True,
    )
    response.headers["X-Content-SHA256"] = sha256
    return response


def _opened_response(opened):
    response = send_file(
        io.BytesIO(opened.data),
        mimetype="application/octet-stream",
        download_name=secure_filename(opened.filename) or "decrypted_file",
        as_attachment=True,
    )
    response.headers["X-Fingerprint-Valid"] = "true" if opened.fingerprint_valid else "false"
    return response


# ============================================================
# HEALTH CHECK
# ============================================================

@app.route("/api/health")
def health():
    global _self_test_results
    if _self_test_results is None:
        _self_test_results = CryptoSelfTest.run_all_tests()

    healthy = all(check.passed for check in _self_test_results)
    return jsonify({
        "status": "healthy" if healthy else "degraded",
        "version": config.app.version,
        "config_hash": config.config_hash,
        "algorithms": {
            "encryption": ENCRYPTION_ALGORITHM,
            "key_wrap": KEY_WRAP_ALGORITHM,
            "key_derivation": KEY_DERIVATION_FUNCTION,
        },
        "self_test": [check.to_dict() for check in _self_test_results],
    }), 200 if healthy else 503


# ============================================================
# KEY GENERATION
# ============================================================

@app.route("/api/keys/generate", methods=["POST"])
def generate_keys():
    keypair = engine.generate_keypair()
    return jsonify({
        "key_size": keypair.key_size,
        "public_key": KeyPairManager.export_public(keypair),
        "private_key": KeyPairManager.export_private(keypair),
    })


# ============================================================
# PUBLIC-KEY MODE
# ============================================================

@app.route("/api/encrypt", methods=["POST"])
def encrypt_file():
    upload = _required_file("file")
    public_key = _text_field("public_key")

    envelope = engine.seal_rsa_envelope(upload.read(), upload.filename, public_key)
    log.info("Encrypted upload in public-key mode")

    return _envelope_response(envelope.to_json(), upload.filename, RSA_ENVELOPE_SUFFIX, envelope.sha256)


@app.route("/api/decrypt", methods=["POST"])
def decrypt_file():
    envelope_text = _text_field("envelope")
    private_key = _text_field("private_key")

    opened = engine.open_with_private_key(envelope_text, private_key)
    return _opened_response(opened)


# ============================================================
# PASSWORD MODE
# ============================================================

@app.route("/api/password/encrypt", methods=["POST"])
def password_encrypt_file():
    upload = _required_file("file")
    password = _password_field()

    envelope = engine.seal_password_envelope(upload.read(), upload.filename, password)
    log.info("Encrypted upload in password mode")

    return _envelope_response(envelope.to_json(), upload.filename, PASSWORD_ENVELOPE_SUFFIX, envelope.sha256)


@app.route("/api/password/decrypt", methods=["POST"])
def password_decrypt_file():
    envelope_text = _text_field("envelope")
    password = _password_field()

    opened = engine.open_with_password(envelope_text, password)
    return _opened_response(opened)


@app.route("/api/password/strength", methods=["POST"])
def password_strength():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest("Expected a JSON object with a password field")
    password = data.get("password", "")
    if not isinstance(password, str):
        raise BadRequest("password must be a string")

    return jsonify(calculate_password_strength(password).to_dict())


# ============================================================
# ENTRY POINT
# ============================================================

application = app

if __name__ == "__main__":
    app.run(host="127.0.0.1", port=int(os.environ.get("PORT", 5000)))
