"""Tests for codec configuration loading."""

import pytest

from ser_io.color import Endianness
from ser_io.config import CodecConfig, default_config, load_config


def test_default_config():
    cfg = default_config()
    assert cfg.accepted_signatures == ("LUCAM-RECORDER",)
    assert cfg.zero_flag_endianness is Endianness.LITTLE_ENDIAN
    assert cfg.text_encoding == "latin-1"
    assert cfg.text_overflow == "truncate"


def test_load_from_toml(tmp_path):
    path = tmp_path / "ser.toml"
    path.write_text(
        """
[ser]
accepted_signatures = ["LUCAM-RECORDER", "SER-RECORDER"]
zero_flag_endianness = "big"
text_encoding = "utf-8"
text_overflow = "error"
""",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.accepted_signatures == ("LUCAM-RECORDER", "SER-RECORDER")
    assert cfg.zero_flag_endianness is Endianness.BIG_ENDIAN
    assert cfg.text_encoding == "utf-8"
    assert cfg.text_overflow == "error"


def test_load_from_yaml(tmp_path):
    path = tmp_path / "ser.yaml"
    path.write_text(
        "ser:\n  accepted_signatures: LUCAM-RECORDER\n  zero_flag_endianness: le\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.accepted_signatures == ("LUCAM-RECORDER",)
    assert cfg.zero_flag_endianness is Endianness.LITTLE_ENDIAN


def test_missing_section_uses_defaults(tmp_path):
    path = tmp_path / "empty.toml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == default_config()


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.toml")


def test_invalid_endianness_value(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text('[ser]\nzero_flag_endianness = "middle"\n', encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"accepted_signatures": ()},
        {"accepted_signatures": ("THIS-SIGNATURE-IS-TOO-LONG",)},
        {"text_overflow": "ignore"},
        {"text_encoding": "no-such-codec"},
    ],
)
def test_invalid_config_values(kwargs):
    with pytest.raises(ValueError):
        CodecConfig(**kwargs)


def test_accepts_signature_ignores_padding():
    cfg = CodecConfig(accepted_signatures=("SER",))
    assert cfg.accepts_signature(b"SER" + b"\x00" * 11)
    assert cfg.accepts_signature(b"SER" + b" " * 11)
    assert not cfg.accepts_signature(b"LUCAM-RECORDER")
