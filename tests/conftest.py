import os
import secrets
import sys

import pytest


# Ensure repository src directory is on sys.path for tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from privacy_layer.elgamal import Keypair, SecretKey  # noqa: E402


@pytest.fixture(scope="session")
def keypair():
    return Keypair.from_secret(SecretKey.from_bytes(secrets.token_bytes(32)))


@pytest.fixture
def rand():
    """Fresh 32 random bytes per call, as callers must supply for each encryption."""
    return lambda: secrets.token_bytes(32)
