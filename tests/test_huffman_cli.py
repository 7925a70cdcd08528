import pytest

import huffman_cli


def _compress_then_restore(tmp_path, data):
    src = tmp_path / "input.txt"
    src.write_bytes(data)
    outdir = tmp_path / "out"
    restored = tmp_path / "decoded.txt"

    assert huffman_cli.main(["compress", str(src), "--outdir", str(outdir)]) == 0
    assert huffman_cli.main([
        "decompress", str(outdir / "compressed.bin"),
        "--codes", str(outdir / "codes.csv"),
        "--output", str(restored),
    ]) == 0
    return outdir, restored.read_bytes()


@pytest.mark.parametrize("data", [
    b"abracadabra",
    b"aaaaaaaa",
    b"",
    bytes(range(256)) * 3,
])
def test_compress_decompress_round_trip(tmp_path, data):
    _, restored = _compress_then_restore(tmp_path, data)
    assert restored == data


def test_compress_prints_statistics(tmp_path, capsys):
    src = tmp_path / "input.txt"
    src.write_bytes(b"the rain in spain " * 50)

    assert huffman_cli.main(["compress", str(src), "--outdir", str(tmp_path)]) == 0

    out = capsys.readouterr().out
    assert "Original file size in bits   : 7200 bits  (900 bytes)" in out
    assert "Compressed ratio" in out
    assert (tmp_path / "codes.csv").exists()
    assert (tmp_path / "compressed.bin").exists()


def test_decompress_detects_symbol_count_mismatch(tmp_path, capsys):
    outdir, _ = _compress_then_restore(tmp_path, b"abracadabra")
    compressed = outdir / "compressed.bin"
    blob = bytearray(compressed.read_bytes())
    blob[8] += 1 # low byte of the symbol count
    compressed.write_bytes(bytes(blob))

    status = huffman_cli.main([
        "decompress", str(compressed),
        "--codes", str(outdir / "codes.csv"),
        "--output", str(tmp_path / "bad.txt"),
    ])
    assert status == 1
    assert "header says 12" in capsys.readouterr().err


def test_missing_input_reports_error(tmp_path, capsys):
    status = huffman_cli.main(["compress", str(tmp_path / "nope.txt"), "--outdir", str(tmp_path)])
    assert status == 1
    assert capsys.readouterr().err.startswith("error:")
