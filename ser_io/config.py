# ser_io/config.py
from __future__ import annotations

import codecs
import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional, Tuple

import yaml

from .color import ZERO_FLAG_ENDIANNESS, Endianness

logger = logging.getLogger(__name__)

SIGNATURE = "LUCAM-RECORDER"
SIGNATURE_SIZE = 14

TextOverflow = Literal["truncate", "error"]


@dataclass(frozen=True)
class CodecConfig:
    accepted_signatures: Tuple[str, ...] = (SIGNATURE,)
    zero_flag_endianness: Endianness = ZERO_FLAG_ENDIANNESS
    text_encoding: str = "latin-1"
    text_overflow: TextOverflow = "truncate"

    def __post_init__(self) -> None:
        if not self.accepted_signatures:
            raise ValueError("At least one accepted signature is required")
        for sig in self.accepted_signatures:
            if len(sig.encode("ascii")) > SIGNATURE_SIZE:
                raise ValueError(
                    f"Signature '{sig}' exceeds {SIGNATURE_SIZE} bytes"
                )
        if self.text_overflow not in {"truncate", "error"}:
            raise ValueError(
                f"text_overflow must be 'truncate' or 'error', got '{self.text_overflow}'"
            )
        try:
            codecs.lookup(self.text_encoding)
        except LookupError as e:
            raise ValueError(f"Unknown text encoding '{self.text_encoding}'") from e

    def accepts_signature(self, file_id: bytes) -> bool:
        """Check a raw 14-byte file id, ignoring NUL/space padding."""
        return file_id.rstrip(b"\x00 ") in {
            sig.encode("ascii") for sig in self.accepted_signatures
        }


def _parse_endianness(value: Optional[str]) -> Endianness:
    v = (value or ZERO_FLAG_ENDIANNESS.value).lower()
    aliases = {"little": "little", "le": "little", "big": "big", "be": "big"}
    if v not in aliases:
        raise ValueError(f"Invalid zero_flag_endianness '{value}' in config file")
    return Endianness(aliases[v])


def _load_raw(p: Path) -> dict:
    if p.suffix.lower() in {".yaml", ".yml"}:
        with p.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    with p.open("rb") as f:
        return tomllib.load(f)


def load_config(config_path: str | Path) -> CodecConfig:
    """
    Load a CodecConfig from a TOML or YAML file.

    Expected TOML structure:

    [ser]
    accepted_signatures = ["LUCAM-RECORDER"]
    zero_flag_endianness = "little"   # little|big
    text_encoding = "latin-1"
    text_overflow = "truncate"        # truncate|error

    YAML files use the same keys under a top-level ``ser`` mapping.
    """
    p = Path(config_path)
    if not p.exists():
        raise FileNotFoundError(f"Configuration file not found: {p}")

    data = _load_raw(p)
    ser = data.get("ser") or {}

    signatures = ser.get("accepted_signatures") or [SIGNATURE]
    if isinstance(signatures, str):
        signatures = [signatures]

    cfg = CodecConfig(
        accepted_signatures=tuple(str(s) for s in signatures),
        zero_flag_endianness=_parse_endianness(ser.get("zero_flag_endianness")),
        text_encoding=str(ser.get("text_encoding", "latin-1")),
        text_overflow=str(ser.get("text_overflow", "truncate")),  # type: ignore[arg-type]
    )

    logger.info(
        "Loaded CodecConfig: signatures=%s, zero flag=%s, text=%s/%s",
        ",".join(cfg.accepted_signatures),
        cfg.zero_flag_endianness,
        cfg.text_encoding,
        cfg.text_overflow,
    )
    return cfg


def default_config() -> CodecConfig:
    return CodecConfig()
