"""Shared fixtures for the cryptbox test suite."""

import pytest

from cryptbox.crypto import ed25519, rsa

# Inputs shared by the known-answer tests.
INPUTS = ["", "123", "你好，世界"]


@pytest.fixture(scope="session")
def rsa_keys() -> tuple[rsa.PrivateKey, rsa.PublicKey]:
    return rsa.generate_keys(2048)


@pytest.fixture(scope="session")
def ed25519_keys() -> tuple[ed25519.PrivateKey, ed25519.PublicKey]:
    return ed25519.generate_keys()


@pytest.fixture
def seed() -> bytes:
    return b"12345678876543211234567887654321"
