from __future__ import annotations

import csv
import struct
from pathlib import Path
from typing import Dict, Mapping, Tuple

from huffman import HuffmanError, code_table_items

MAGIC = b"HUF1"
_HEADER = struct.Struct(">4sBI") # magic, pad bits, symbol count


class FormatError(HuffmanError):
    pass


def write_code_table(path: Path, code_map: Mapping[int, str]) -> None:
    """Write one `symbol,code` row per byte value, sorted by symbol."""
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["symbol", "code"])
        for symbol, code in code_table_items(code_map):
            w.writerow([symbol, code])


def read_code_table(path: Path) -> Dict[int, str]:
    code_map: Dict[int, str] = {}
    with path.open("r", newline="", encoding="utf-8") as f:
        for line_no, row in enumerate(csv.DictReader(f), start=2):
            try:
                symbol = int(row["symbol"])
                code = row["code"]
            except (KeyError, TypeError, ValueError):
                raise FormatError(f"{path}:{line_no}: malformed code table row {row!r}") from None
            if code is None or code.strip("01"):
                raise FormatError(f"{path}:{line_no}: code {code!r} for symbol {symbol} is not a string of 0s and 1s")
            if not 0 <= symbol <= 255:
                raise FormatError(f"{path}:{line_no}: symbol {symbol} is not a byte value")
            if symbol in code_map:
                raise FormatError(f"{path}:{line_no}: duplicate entry for symbol {symbol}")
            code_map[symbol] = code
    return code_map


def pack_container(packed: bytes, pad_bits: int, symbol_count: int) -> bytes:
    return _HEADER.pack(MAGIC, pad_bits, symbol_count) + packed


def unpack_container(blob: bytes) -> Tuple[bytes, int, int]:
    """Split a compressed blob into (packed_bits, pad_bits, symbol_count)."""
    if len(blob) < _HEADER.size:
        raise FormatError(f"compressed data is {len(blob)} bytes, shorter than the {_HEADER.size}-byte header")
    magic, pad_bits, symbol_count = _HEADER.unpack_from(blob)
    if magic != MAGIC:
        raise FormatError(f"bad magic {magic!r}, expected {MAGIC!r}")
    if pad_bits > 7:
        raise FormatError(f"bad pad count {pad_bits}")
    return blob[_HEADER.size:], pad_bits, symbol_count
