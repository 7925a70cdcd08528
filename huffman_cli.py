"""
Command-line driver: compress a file with a Huffman code, or restore it.

How to run:
  python huffman_cli.py compress WarAndPeace.txt --outdir out
  python huffman_cli.py decompress out/compressed.bin --codes out/codes.csv --output decoded.txt

compress writes the code table (codes.csv) and the packed bits (compressed.bin)
and prints size statistics. decompress rebuilds the tree from the code table
alone, so the tree itself is never stored.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

import bitpack
import codebook
import huffman as huff


def compress_file(input_path: Path, outdir: Path) -> int:
    begin = time.perf_counter()

    data = input_path.read_bytes()
    ft = huff.count_frequencies(data)
    if ft:
        root = huff.build_huffman_tree(ft)
        code_map = huff.generate_huffman_codes(root)
    else:
        code_map = {} # empty file -> empty table, zero bits

    bits = huff.huffman_encode(data, code_map)
    packed, pad_bits = bitpack.pack_bits(bits)
    blob = codebook.pack_container(packed, pad_bits, len(data))

    outdir.mkdir(parents=True, exist_ok=True)
    codes_path = outdir / "codes.csv"
    compressed_path = outdir / "compressed.bin"
    codebook.write_code_table(codes_path, code_map)
    compressed_path.write_bytes(blob)

    original_size = len(data) * 8
    compressed_size = len(blob) * 8
    ratio = compressed_size / max(1, original_size) * 100
    elapsed_ms = (time.perf_counter() - begin) * 1000

    print(f"Original file size in bits   : {original_size} bits  ({original_size // 8} bytes)")
    print(f"Compressed file size in bits : {compressed_size} bits  ({compressed_size // 8} bytes)")
    print(f"Compressed ratio             : {ratio:.2f} %")
    print(f"Total Time                   : {elapsed_ms:.0f} milliseconds")
    print(f"Wrote code table to {codes_path}")
    print(f"Wrote compressed data to {compressed_path}")
    return 0


def decompress_file(compressed_path: Path, codes_path: Path, output_path: Path) -> int:
    code_map = codebook.read_code_table(codes_path)
    packed, pad_bits, symbol_count = codebook.unpack_container(compressed_path.read_bytes())
    bits = bitpack.unpack_bits(packed, pad_bits)

    decoded = huff.huffman_decode_bytes(bits, code_map)
    if len(decoded) != symbol_count:
        raise codebook.FormatError(f"decoded {len(decoded)} symbols, header says {symbol_count}")

    output_path.write_bytes(decoded)
    print(f"Wrote {len(decoded)} bytes to {output_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Huffman file compressor")
    sub = ap.add_subparsers(dest="command", required=True)

    c = sub.add_parser("compress", help="Compress a file, writing codes.csv and compressed.bin")
    c.add_argument("input", type=str, help="File to compress")
    c.add_argument("--outdir", type=str, default=".", help="Directory for codes.csv and compressed.bin")

    d = sub.add_parser("decompress", help="Restore a file from compressed.bin and its code table")
    d.add_argument("compressed", type=str, help="Compressed file written by 'compress'")
    d.add_argument("--codes", type=str, required=True, help="Code table CSV written by 'compress'")
    d.add_argument("--output", type=str, required=True, help="Where to write the restored file")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        if args.command == "compress":
            return compress_file(Path(args.input), Path(args.outdir))
        return decompress_file(Path(args.compressed), Path(args.codes), Path(args.output))
    except (ValueError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
