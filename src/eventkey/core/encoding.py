"""
Order-preserving binary-to-text encoding.

The alphabet lists its 64 symbols in ascending ASCII order, so comparing two
encoded strings of equal-length inputs gives the same answer as comparing the
inputs as unsigned big-endian numbers. Output is never padded: a trailing
group of 1 or 2 bytes yields 2 or 3 symbols.
"""

from __future__ import annotations

ALPHABET = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"
SHIFTS = (18, 12, 6, 0)

_INDEX = {ch: i for i, ch in enumerate(ALPHABET)}


def encoded_length(byte_count: int) -> int:
    """Length of ``encode_sortable`` output for ``byte_count`` input bytes."""
    return -(-byte_count * 4 // 3)


def encode_sortable(data: bytes) -> str:
    """Encode ``data`` into the sortable alphabet."""
    out: list[str] = []
    for start in range(0, len(data), 3):
        chunk = data[start : start + 3]
        group = int.from_bytes(chunk.ljust(3, b"\x00"), "big")
        # Keep one symbol per started 6-bit window; drop those that only
        # cover the zero fill of a partial group
        for shift in SHIFTS[: len(chunk) + 1]:
            out.append(ALPHABET[(group >> shift) & 0x3F])
    return "".join(out)


def decode_sortable(text: str) -> bytes:
    """Invert `encode_sortable`.

    Raises:
        ValueError: if ``text`` has a symbol outside the alphabet or a length
            no input could have produced.
    """
    if len(text) % 4 == 1:
        raise ValueError(f"invalid encoded length: {len(text)}")
    out = bytearray()
    for start in range(0, len(text), 4):
        chunk = text[start : start + 4]
        group = 0
        for pos, ch in enumerate(chunk):
            try:
                idx = _INDEX[ch]
            except KeyError:
                raise ValueError(f"invalid symbol {ch!r} at {start + pos}") from None
            group |= idx << SHIFTS[pos]
        out.extend(group.to_bytes(3, "big")[: len(chunk) - 1])
    return bytes(out)


__all__ = ["ALPHABET", "SHIFTS", "encode_sortable", "decode_sortable", "encoded_length"]
