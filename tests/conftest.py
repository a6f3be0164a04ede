"""
Pytest configuration and shared fixtures for proofview tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

# Import fixture modules
_pki = importlib.import_module("fixtures.pki_fixtures")
_proofs = importlib.import_module("fixtures.proof_fixtures")

# Extract factory functions
make_notary_key = _pki.make_notary_key
make_pki = _pki.make_pki
public_pem = _pki.public_pem

make_proof = _proofs.make_proof


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(scope="session")
def notary_key():
    """Provide the notary's P-256 signing key."""
    return make_notary_key()


@pytest.fixture(scope="session")
def notary_pem(notary_key):
    """Provide the notary's public key as PEM."""
    return public_pem(notary_key)


@pytest.fixture(scope="session")
def pki():
    """Provide a root CA and a leaf certificate for example.com."""
    return make_pki("example.com")


@pytest.fixture
def trusted_key(notary_pem):
    """Provide a TrustedKey snapshot of the notary key."""
    from core.config.keys import TrustedKey
    return TrustedKey.from_pem(notary_pem)


@pytest.fixture
def key_store(notary_pem):
    """Provide a key store trusting the notary key."""
    from core.config.keys import TrustedKeyStore
    return TrustedKeyStore(notary_pem)


@pytest.fixture
def cert_verifier(pki):
    """Provide a certificate verifier anchored at the test root."""
    from core.crypto.certificates import WebPkiVerifier
    return WebPkiVerifier(roots=[pki.root_cert])


@pytest.fixture
def pipeline(key_store, cert_verifier):
    """Provide a pipeline wired to the test notary key and root."""
    from orchestrator.pipeline import VerificationPipeline
    return VerificationPipeline(key_store=key_store, cert_verifier=cert_verifier)


@pytest.fixture
def built_proof(pki, notary_key):
    """Provide a fully disclosed, validly signed proof."""
    return make_proof(pki, notary_key)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: runs the whole pipeline from artifact bytes (deselect with '-m \"not integration\"')"
    )
