"""Tests for cryptographic self-tests."""

from sealvault.security.hardening import CryptoSelfTest, SecurityCheckResult


def test_individual_checks_pass(keypair):
    assert CryptoSelfTest.test_sha256().result is SecurityCheckResult.PASS
    assert CryptoSelfTest.test_aes_gcm().result is SecurityCheckResult.PASS
    assert CryptoSelfTest.test_pbkdf2().result is SecurityCheckResult.PASS
    assert CryptoSelfTest.test_rsa_oaep(keypair).result is SecurityCheckResult.PASS


def test_run_all(keypair):
    results = CryptoSelfTest.run_all_tests(keypair)

    assert [check.name for check in results] == [
        "SHA-256",
        "AES-256-GCM",
        "PBKDF2-SHA256",
        "RSA-OAEP-SHA256",
        "CSPRNG",
    ]
    assert all(check.passed for check in results)


def test_check_result_dict():
    data = CryptoSelfTest.test_sha256().to_dict()

    assert data == {"name": "SHA-256", "result": "PASS", "message": "Self-test passed"}
