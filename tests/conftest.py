"""
Pytest configuration and fixtures for hdkeys tests.
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from _hdkeys_test_helpers import SEED_VECTOR_1, TEST_MNEMONIC

from hdkeys.crypto import CryptoProvider, default_provider
from hdkeys.settings import reset_settings


@pytest.fixture
def provider() -> CryptoProvider:
    """Default coincurve-backed provider"""
    return default_provider()


@pytest.fixture
def test_mnemonic() -> str:
    """Test mnemonic (BIP39 test vector)"""
    return TEST_MNEMONIC


@pytest.fixture
def seed_vector_1() -> bytes:
    return bytes.fromhex(SEED_VECTOR_1)


@pytest.fixture(autouse=True)
def isolated_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Keep tests away from the user's ~/.hdkeys and mnemonic environment."""
    data_dir = tmp_path / ".hdkeys"
    monkeypatch.setenv("HDKEYS_DATA_DIR", str(data_dir))
    for name in ("HDKEYS_CONFIG_FILE", "MNEMONIC", "MNEMONIC_FILE", "BIP39_PASSPHRASE"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()
