"""Tests for the command-line interface."""

import json

import pytest

from totp_gen import config
from totp_gen.base32 import ALPHABET
from totp_gen.cli import main
from totp_gen.totp import SystemClock


SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


@pytest.fixture(autouse=True)
def config_dir(tmp_path, monkeypatch):
    """Keep the CLI away from the real user config directory."""
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    return tmp_path


@pytest.fixture
def frozen_clock(monkeypatch):
    """Freeze the system clock at time step 1."""
    monkeypatch.setattr(SystemClock, "now", lambda self: 59.0)


def test_no_command(capsys):
    """Test that running without a command prints help."""
    assert main([]) == 1
    assert "usage:" in capsys.readouterr().out


def test_code_command(frozen_clock, capsys):
    """Test printing the current TOTP code."""
    assert main(["code", SECRET]) == 0
    assert capsys.readouterr().out.strip() == "287082"


def test_code_command_digits(frozen_clock, capsys):
    """Test the --digits flag."""
    assert main(["code", SECRET, "--digits", "8"]) == 0
    assert capsys.readouterr().out.strip() == "94287082"


def test_code_command_uses_config(frozen_clock, capsys):
    """Test that configured defaults apply and flags override them."""
    config.set_value("digits", "8")
    assert main(["code", SECRET]) == 0
    assert capsys.readouterr().out.strip() == "94287082"

    assert main(["code", SECRET, "-d", "6"]) == 0
    assert capsys.readouterr().out.strip() == "287082"


def test_code_command_invalid_secret(frozen_clock, capsys):
    """Test that decode errors are reported on stderr."""
    assert main(["code", "GEZ1"]) == 1
    err = capsys.readouterr().err
    assert "✗" in err
    assert "Invalid base32 character '1'" in err


def test_code_command_unsupported_algorithm(frozen_clock, capsys):
    """Test that an unknown algorithm is reported."""
    assert main(["code", SECRET, "--algorithm", "MD5"]) == 1
    assert "Unsupported HMAC algorithm" in capsys.readouterr().err


def test_hotp_command(capsys):
    """Test HOTP generation for an explicit counter."""
    assert main(["hotp", SECRET, "2"]) == 0
    assert capsys.readouterr().out.strip() == "359152"


def test_hotp_command_negative_counter(capsys):
    """Test that a negative counter fails."""
    assert main(["hotp", SECRET, "-5"]) == 1
    assert "Counter must be between 0" in capsys.readouterr().err


def test_secret_command(capsys):
    """Test random secret generation."""
    assert main(["secret", "--length", "15"]) == 0
    secret = capsys.readouterr().out.strip()
    assert len(secret) == 16
    assert set(secret) <= set(ALPHABET)


def test_secret_command_invalid_length(capsys):
    """Test that a non-positive length fails."""
    assert main(["secret", "--length", "0"]) == 1
    assert "length must be positive" in capsys.readouterr().err


def test_backup_command(capsys):
    """Test backup code output, one per line."""
    assert main(["backup", "--count", "4", "--length", "5"]) == 0
    lines = capsys.readouterr().out.split()
    assert len(lines) == 4
    for line in lines:
        assert len(line) == 8
        assert set(line) <= set(ALPHABET)


def test_url_command(capsys):
    """Test provisioning URL output."""
    assert main(["url", SECRET, "alice", "--issuer", "ACME & Co"]) == 0
    assert capsys.readouterr().out.strip() == (
        f"otpauth://totp/ACME%20%26%20Co:alice?secret={SECRET}&issuer=ACME%20%26%20Co"
        "&algorithm=SHA1&digits=6&period=30&counter=0&initial_time=0&window=1"
    )


def test_url_command_issuer_from_config(capsys):
    """Test that the issuer can come from the config file."""
    config.set_value("issuer", "Example")
    assert main(["url", SECRET, "bob", "--window", "3"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("otpauth://totp/Example:bob?")
    assert out.strip().endswith("&window=3")


def test_url_command_missing_issuer(capsys):
    """Test that a missing issuer is reported."""
    assert main(["url", SECRET, "bob"]) == 1
    assert "No issuer given" in capsys.readouterr().err


def test_hex_command(capsys):
    """Test base32 to hex conversion."""
    assert main(["hex", SECRET]) == 0
    assert capsys.readouterr().out.strip() == b"12345678901234567890".hex()


def test_config_show(config_dir, capsys):
    """Test that config show prints the effective settings."""
    assert main(["config"]) == 0
    out = capsys.readouterr().out
    settings = json.loads(out.split("  (file:")[0])
    assert settings["algorithm"] == "SHA1"
    assert str(config_dir) in out


def test_config_set(capsys):
    """Test storing a setting from the command line."""
    assert main(["config", "set", "period", "60"]) == 0
    assert "✓ period = 60" in capsys.readouterr().out
    assert config.load_config()["period"] == 60


def test_config_set_invalid_value(capsys):
    """Test that an unconvertible value is reported."""
    assert main(["config", "set", "digits", "many"]) == 1
    assert "Invalid value for digits" in capsys.readouterr().err


def test_config_file_error_reported(config_dir, frozen_clock, capsys):
    """Test that a broken config file fails the command cleanly."""
    (config_dir / "config.json").write_text("{broken", encoding="utf-8")
    assert main(["code", SECRET]) == 1
    assert "Invalid config file" in capsys.readouterr().err


@pytest.mark.parametrize(
    "argv",
    [
        ["code", SECRET],
        ["hotp", SECRET, "1"],
        ["url", SECRET, "alice", "--issuer", "ACME"],
        ["config", "show"],
    ],
)
def test_wrong_typed_config_reported(config_dir, frozen_clock, capsys, argv):
    """Test that wrong-typed config values fail commands with exit status 1."""
    (config_dir / "config.json").write_text(
        json.dumps({"digits": "8", "period": "x"}), encoding="utf-8"
    )
    assert main(argv) == 1
    err = capsys.readouterr().err
    assert "✗" in err
    assert "must be an integer" in err


def test_config_set_out_of_range(capsys):
    """Test that config set refuses values that would break generation."""
    assert main(["config", "set", "digits", "42"]) == 1
    assert "digits must be between 1 and 10" in capsys.readouterr().err

    assert main(["config", "set", "algorithm", "MD5"]) == 1
    assert "Unsupported HMAC algorithm" in capsys.readouterr().err
    assert config.read_config() == {}


def test_code_command_initial_time(monkeypatch, capsys):
    """Test that --initial-time shifts the time steps like the URL's initial_time."""
    monkeypatch.setattr(SystemClock, "now", lambda self: 1059.0)
    assert main(["code", SECRET, "--initial-time", "1000"]) == 0
    assert capsys.readouterr().out.strip() == "287082"


def test_code_command_before_initial_time(frozen_clock, capsys):
    """Test that a clock earlier than the initial time is reported."""
    assert main(["code", SECRET, "--initial-time", "1000"]) == 1
    assert "before the initial time" in capsys.readouterr().err
