from typing import Tuple


def pack_bits(bitstring: str) -> Tuple[bytes, int]:
    """
    Packs a string of '0'/'1' characters into bytes, MSB first
    Returns (packed_bytes, pad_bits) where pad_bits is number of 0 bits added at the end
    """
    out = bytearray()
    acc = 0
    acc_bits = 0

    for position, ch in enumerate(bitstring):
        if ch not in "01":
            raise ValueError(f"not a bit: {ch!r} at position {position}")
        acc = (acc << 1) | (ch == "1")
        acc_bits += 1
        if acc_bits == 8:
            out.append(acc)
            acc = 0
            acc_bits = 0

    pad_bits = 0
    if acc_bits != 0:
        pad_bits = 8 - acc_bits
        out.append(acc << pad_bits)

    return bytes(out), pad_bits


def unpack_bits(packed: bytes, pad_bits: int) -> str:
    """
    Inverse of pack_bits: expand bytes back into '0'/'1' text and drop the padding
    """
    if not 0 <= pad_bits <= 7:
        raise ValueError(f"pad_bits must be between 0 and 7, got {pad_bits}")
    if pad_bits and not packed:
        raise ValueError("padding recorded for an empty payload")

    bits = "".join(f"{byte:08b}" for byte in packed)
    return bits[:len(bits) - pad_bits]
