import pytest

import codebook
import huffman as huff


def test_code_table_csv_round_trip(tmp_path):
    data = b"abracadabra\n\x00\xff"
    code_map = huff.generate_huffman_codes(huff.build_huffman_tree(huff.count_frequencies(data)))
    path = tmp_path / "codes.csv"

    codebook.write_code_table(path, code_map)

    assert path.read_text(encoding="utf-8").splitlines()[0] == "symbol,code"
    assert codebook.read_code_table(path) == dict(code_map)


def test_code_table_keeps_leading_zeros(tmp_path):
    path = tmp_path / "codes.csv"
    codebook.write_code_table(path, {97: "00", 98: "01", 99: "1"})
    assert codebook.read_code_table(path) == {97: "00", 98: "01", 99: "1"}


@pytest.mark.parametrize("body", [
    "symbol,code\nx,01\n",
    "symbol,code\n300,01\n",
    "symbol,code\n97,0\n97,1\n",
    "symbol,code\n97\n98,1\n",
    "symbol,code\n97,0x\n98,1\n",
    "sym,bits\n97,0\n",
])
def test_read_code_table_rejects_bad_rows(tmp_path, body):
    path = tmp_path / "codes.csv"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(codebook.FormatError):
        codebook.read_code_table(path)


def test_container_round_trip():
    blob = codebook.pack_container(b"\xab\xcd", 3, 42)
    assert blob.startswith(codebook.MAGIC)
    assert codebook.unpack_container(blob) == (b"\xab\xcd", 3, 42)


@pytest.mark.parametrize("blob", [
    b"HUF",
    b"ZIP1\x00\x00\x00\x00\x00",
    b"HUF1\x09\x00\x00\x00\x00",
])
def test_container_rejects_bad_header(blob):
    with pytest.raises(codebook.FormatError):
        codebook.unpack_container(blob)
