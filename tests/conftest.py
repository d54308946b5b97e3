"""Shared fixtures for the SealVault test suite."""

import pytest

from sealvault.core.config import SecureConfig
from sealvault.core.crypto.hybrid_engine import EnvelopeEngine
from sealvault.core.crypto.keypair import KeyPairManager


@pytest.fixture(scope="session")
def keypair():
    """One RSA-2048 key pair for the whole run; generation is slow."""
    return KeyPairManager().generate()


@pytest.fixture(scope="session")
def other_keypair():
    return KeyPairManager().generate()


@pytest.fixture
def engine():
    return EnvelopeEngine()


@pytest.fixture
def fresh_config():
    """Drop the cached configuration before and after a test."""
    SecureConfig.reset_instance()
    yield
    SecureConfig.reset_instance()
