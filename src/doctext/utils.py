from __future__ import annotations

import codecs
from pathlib import Path

import chardet

# Minimum chardet confidence before its guess is trusted over a UTF-8 fallback.
MIN_CHARSET_CONFIDENCE = 0.7

_BOMS: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)


def suffix_of(path: Path) -> str:
    """Lower-cased suffix, treating bare dot-files (`.gitignore`) as their own suffix."""
    if path.suffix:
        return path.suffix.lower()
    if path.name.startswith(".") and path.name.count(".") == 1:
        return path.name.lower()
    return ""


def has_suffix(path: Path, suffixes: frozenset[str]) -> bool:
    return suffix_of(path) in suffixes


def _codec_exists(name: str) -> bool:
    try:
        codecs.lookup(name)
    except LookupError:
        return False
    return True


def decode_bytes(data: bytes) -> str:
    """Decode file content to text.

    BOM first, then strict UTF-8, then chardet's guess when confident,
    then UTF-8 with replacement characters.
    """
    for bom, encoding in _BOMS:
        if data.startswith(bom):
            return data.decode(encoding, errors="replace")

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        pass

    guess = chardet.detect(data)
    encoding = guess.get("encoding")
    confidence = guess.get("confidence") or 0.0
    if encoding and confidence >= MIN_CHARSET_CONFIDENCE and _codec_exists(encoding):
        return data.decode(encoding, errors="replace")
    return data.decode("utf-8", errors="replace")


def read_text(path: Path) -> str:
    return decode_bytes(path.read_bytes())
