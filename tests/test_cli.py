"""
E2E tests for hdkeys CLI commands.
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from _hdkeys_test_helpers import (
    BIP44_BTC_ACCOUNT_XPUB,
    BIP44_BTC_FIRST_ADDRESS,
    BIP44_ETH_FIRST_ADDRESS,
    SEED_VECTOR_1,
    TEST_MNEMONIC,
)
from loguru import logger
from typer.testing import CliRunner

from hdkeys.bip39 import validate_mnemonic
from hdkeys.cli import app
from hdkeys.paths import get_default_data_dir
from hdkeys.version import __version__

runner = CliRunner()

VECTOR_1_XPRV = (
    "xprv9s21ZrQH143K3QTDL4LXw2F7HEK3wJUD2nW2nRk4stbPy6cq3jPPqjiChkVvvNKmPGJxWUtg6LnF5kejMRNNU3TGtRBeJgk33yuGBxrMPHi"
)
VECTOR_1_XPUB = (
    "xpub661MyMwAqRbcFtXgS5sYJABqqG9YLmC4Q1Rdap9gSE8NqtwybGhePY2gZ29ESFjqJoCu1Rupje8YtGqsefD265TMg7usUDFdp6W1EGMcet8"
)
VECTOR_1_M0H_1_2H_XPUB = (
    "xpub6D4BDPcP2GT577Vvch3R8wDkScZWzQzMMUm3PWbmWvVJrZwQY4VUNgqFJPMM3No2dFDFGTsxxpG5uJh7n7epu4trkrX7x7DogT5Uv6fcLW5"
)
VECTOR_1_M0H_1_2H_XPRV = (
    "xprv9z4pot5VBttmtdRTWfWQmoH1taj2axGVzFqSb8C9xaxKymcFzXBDptWmT7FwuEzG3ryjH4ktypQSAewRiNMjANTtpgP4mLTj34bhnZX7UiM"
)
VECTOR_1_M0H_1_2H_2_XPUB = (
    "xpub6FHa3pjLCk84BayeJxFW2SP4XRrFd1JYnxeLeU8EqN3vDfZmbqBqaGJAyiLjTAwm6ZLRQUMv1ZACTj37sR62cfN7fe5JnJ7dh8zL4fiyLHV"
)


@pytest.fixture(autouse=True)
def drop_cli_log_sinks() -> Generator[None, None, None]:
    """The CLI points loguru at the runner's stderr, which is closed afterwards."""
    yield
    logger.remove()


def _last_line(output: str) -> str:
    return output.strip().splitlines()[-1].strip()


class TestMnemonicCommands:
    def test_generate_default_words(self) -> None:
        result = runner.invoke(app, ["generate"])

        assert result.exit_code == 0, result.output
        assert "GENERATED MNEMONIC" in result.stdout
        phrases = [line for line in result.stdout.splitlines() if len(line.split()) == 24]
        assert len(phrases) == 1
        assert validate_mnemonic(phrases[0])

    def test_generate_12_words(self) -> None:
        result = runner.invoke(app, ["generate", "--words", "12"])

        assert result.exit_code == 0, result.output
        phrases = [line for line in result.stdout.splitlines() if len(line.split()) == 12]
        assert len(phrases) == 1

    def test_generate_word_count_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HDKEYS_WALLET__WORD_COUNT", "15")

        result = runner.invoke(app, ["generate"])

        assert result.exit_code == 0, result.output
        assert any(len(line.split()) == 15 for line in result.stdout.splitlines())

    def test_generate_invalid_words(self) -> None:
        result = runner.invoke(app, ["generate", "--words", "13"])
        assert result.exit_code == 1

    def test_validate_valid(self, tmp_path: Path) -> None:
        mnemonic_file = tmp_path / "test.mnemonic"
        mnemonic_file.write_text(TEST_MNEMONIC)

        result = runner.invoke(app, ["validate", "--mnemonic-file", str(mnemonic_file)])

        assert result.exit_code == 0, result.output
        assert "Mnemonic is VALID" in result.stdout
        assert "Word count: 12" in result.stdout
        assert "Entropy bits: 128" in result.stdout

    def test_validate_invalid(self) -> None:
        result = runner.invoke(
            app, ["validate", "--mnemonic", TEST_MNEMONIC.replace("about", "abandon")]
        )

        assert result.exit_code == 1
        assert "Mnemonic is INVALID" in result.stdout

    def test_validate_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app, ["validate", "--mnemonic-file", str(tmp_path / "missing.mnemonic")]
        )
        assert result.exit_code == 1

    def test_seed(self) -> None:
        result = runner.invoke(
            app, ["seed", "--mnemonic", TEST_MNEMONIC, "--bip39-passphrase", "TREZOR"]
        )

        assert result.exit_code == 0, result.output
        assert _last_line(result.stdout) == (
            "c55257c360c07c72029aebc1b53c05ed0362ada38ead3e3e9efa3708e53495531f09a6987599d18264"
            "c1e1c92f2cf141630c7a3c4ab7c81b2f001698e7463b04"
        )

    def test_seed_passphrase_from_env(self) -> None:
        result = runner.invoke(
            app,
            ["seed", "--mnemonic", TEST_MNEMONIC],
            env={"BIP39_PASSPHRASE": "TREZOR"},
        )

        assert result.exit_code == 0, result.output
        assert _last_line(result.stdout).startswith("c55257c3")

    def test_seed_without_mnemonic(self) -> None:
        result = runner.invoke(app, ["seed"])
        assert result.exit_code == 1


class TestKeyCommands:
    def test_root_from_seed(self) -> None:
        result = runner.invoke(app, ["root", "--seed", SEED_VECTOR_1])

        assert result.exit_code == 0, result.output
        assert VECTOR_1_XPRV in result.stdout
        assert VECTOR_1_XPUB in result.stdout

    def test_root_public_only(self) -> None:
        result = runner.invoke(app, ["root", "--seed", SEED_VECTOR_1, "--public"])

        assert result.exit_code == 0, result.output
        assert VECTOR_1_XPRV not in result.stdout
        assert VECTOR_1_XPUB in result.stdout

    def test_root_testnet(self) -> None:
        result = runner.invoke(app, ["root", "--seed", SEED_VECTOR_1, "--network", "testnet"])

        assert result.exit_code == 0, result.output
        assert "tprv" in result.stdout
        assert "tpub" in result.stdout

    def test_root_invalid_seed(self) -> None:
        result = runner.invoke(app, ["root", "--seed", "not-hex"])
        assert result.exit_code == 1

    def test_root_invalid_network(self) -> None:
        result = runner.invoke(app, ["root", "--seed", SEED_VECTOR_1, "--network", "regtest"])
        assert result.exit_code == 1

    def test_derive_from_seed(self) -> None:
        result = runner.invoke(app, ["derive", "--seed", SEED_VECTOR_1, "--path", "m/0'/1/2'"])

        assert result.exit_code == 0, result.output
        assert _last_line(result.stdout) == VECTOR_1_M0H_1_2H_XPRV

    def test_derive_public_flag(self) -> None:
        result = runner.invoke(
            app, ["derive", "--seed", SEED_VECTOR_1, "--path", "m/0h/1/2h", "--public"]
        )

        assert result.exit_code == 0, result.output
        assert _last_line(result.stdout) == VECTOR_1_M0H_1_2H_XPUB

    def test_derive_from_xpub(self) -> None:
        result = runner.invoke(
            app, ["derive", "--key", VECTOR_1_M0H_1_2H_XPUB, "--path", "m/2"]
        )

        assert result.exit_code == 0, result.output
        assert _last_line(result.stdout) == VECTOR_1_M0H_1_2H_2_XPUB

    def test_derive_hardened_from_xpub_fails(self) -> None:
        result = runner.invoke(
            app, ["derive", "--key", VECTOR_1_M0H_1_2H_XPUB, "--path", "m/2'"]
        )
        assert result.exit_code == 1

    def test_derive_bad_path(self) -> None:
        result = runner.invoke(app, ["derive", "--seed", SEED_VECTOR_1, "--path", "x/0"])
        assert result.exit_code == 1

    def test_derive_from_mnemonic_file(self, tmp_path: Path) -> None:
        mnemonic_file = tmp_path / "test.mnemonic"
        mnemonic_file.write_text(TEST_MNEMONIC)

        result = runner.invoke(
            app,
            ["derive", "--mnemonic-file", str(mnemonic_file), "--path", "M/44'/0'/0'"],
        )

        assert result.exit_code == 0, result.output
        assert _last_line(result.stdout) == BIP44_BTC_ACCOUNT_XPUB

    def test_inspect_xprv(self) -> None:
        result = runner.invoke(app, ["inspect", VECTOR_1_M0H_1_2H_XPRV])

        assert result.exit_code == 0, result.output
        assert "mainnet (private)" in result.stdout
        assert "Depth:              3" in result.stdout
        assert "2' (2147483650)" in result.stdout
        assert VECTOR_1_M0H_1_2H_XPUB in result.stdout
        assert VECTOR_1_M0H_1_2H_XPRV not in result.stdout

    def test_inspect_root_fingerprint(self) -> None:
        result = runner.invoke(app, ["inspect", VECTOR_1_XPUB])

        assert result.exit_code == 0, result.output
        assert "Parent fingerprint: 00000000" in result.stdout
        assert "Fingerprint:        3442193e" in result.stdout

    def test_inspect_invalid(self) -> None:
        result = runner.invoke(app, ["inspect", VECTOR_1_XPUB[:-1] + "2"])
        assert result.exit_code == 1


class TestAccountCommands:
    def test_addresses_btc(self) -> None:
        result = runner.invoke(
            app, ["addresses", "--mnemonic", TEST_MNEMONIC, "--count", "2"]
        )

        assert result.exit_code == 0, result.output
        assert "Bitcoin account m/44'/0'/0'/0" in result.stdout
        assert "m/44'/0'/0'/0/0" in result.stdout
        assert BIP44_BTC_FIRST_ADDRESS in result.stdout
        assert "m/44'/0'/0'/0/1" in result.stdout
        assert "m/44'/0'/0'/0/2" not in result.stdout

    def test_addresses_eth(self) -> None:
        result = runner.invoke(
            app, ["addresses", "--mnemonic", TEST_MNEMONIC, "--coin", "ETH", "--count", "1"]
        )

        assert result.exit_code == 0, result.output
        assert BIP44_ETH_FIRST_ADDRESS in result.stdout

    def test_addresses_change_and_start(self) -> None:
        result = runner.invoke(
            app,
            [
                "addresses",
                "--mnemonic",
                TEST_MNEMONIC,
                "--change",
                "--start",
                "5",
                "--count",
                "1",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "m/44'/0'/0'/1/5" in result.stdout

    def test_addresses_from_account_xpub(self) -> None:
        exported = runner.invoke(app, ["account-xpub", "--mnemonic", TEST_MNEMONIC])
        assert exported.exit_code == 0, exported.output
        chain_xpub = _last_line(exported.stdout)
        assert chain_xpub.startswith("xpub")

        result = runner.invoke(app, ["addresses", "--xpub", chain_xpub, "--count", "1"])

        assert result.exit_code == 0, result.output
        assert BIP44_BTC_FIRST_ADDRESS in result.stdout

    def test_addresses_unknown_coin(self) -> None:
        result = runner.invoke(app, ["addresses", "--mnemonic", TEST_MNEMONIC, "--coin", "XYZ"])
        assert result.exit_code == 1


class TestConfigCommands:
    def test_config_init(self, tmp_path: Path) -> None:
        data_dir = tmp_path / "cfg"

        result = runner.invoke(app, ["config-init", "--data-dir", str(data_dir)])

        assert result.exit_code == 0, result.output
        assert (data_dir / "config.toml").exists()
        assert "Config file created at" in result.stdout

    def test_config_init_honors_config_file_env(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_path = tmp_path / "elsewhere" / "hdkeys.toml"
        monkeypatch.setenv("HDKEYS_CONFIG_FILE", str(config_path))

        result = runner.invoke(app, ["config-init"])

        assert result.exit_code == 0, result.output
        assert config_path.exists()
        assert str(config_path) in result.stdout

    def test_config_init_defaults_to_data_dir(self) -> None:
        result = runner.invoke(app, ["config-init"])

        assert result.exit_code == 0, result.output
        assert (get_default_data_dir(create=False) / "config.toml").exists()

    def test_languages(self) -> None:
        result = runner.invoke(app, ["languages"])

        assert result.exit_code == 0, result.output
        assert "english" in result.stdout.split()

    def test_coins(self) -> None:
        result = runner.invoke(app, ["coins"])

        assert result.exit_code == 0, result.output
        assert "ETH" in result.stdout
        assert "TBTC" in result.stdout

    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == f"hdkeys {__version__}"
