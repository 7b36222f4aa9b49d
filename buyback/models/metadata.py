"""Multiplexed payment metadata.

Payers attach one metadata blob to a payment; several hooks may each read
their own block out of it. Layout (all offsets in 32-byte words):

    [0:32)          reserved for the terminal
    [32:...)        lookup table of 5-byte entries: 4-byte tag + 1-byte offset,
                    zero-padded to a word boundary
    [offset*32:...) data block for each tag, up to the next entry's offset

The buyback block is abi.encode(uint256 amountToSwapWith, uint256 minimumSwapAmountOut).
"""

from __future__ import annotations

from buyback.errors import MalformedMetadata

from .payment import PayerQuote

WORD_SIZE = 32
TAG_SIZE = 4
TABLE_ENTRY_SIZE = TAG_SIZE + 1
RESERVED_SIZE = WORD_SIZE

_EMPTY_TAG = b"\x00" * TAG_SIZE


def _pad_to_word(data: bytes) -> bytes:
    remainder = len(data) % WORD_SIZE
    if remainder == 0:
        return data
    return data + b"\x00" * (WORD_SIZE - remainder)


def encode_metadata(blocks: dict[bytes, bytes], reserved: bytes = b"") -> bytes:
    """Build a metadata blob from tagged data blocks.

    Args:
        blocks: Mapping of 4-byte tag -> data (padded to words on write)
        reserved: Terminal-reserved prefix (at most one word)

    Returns:
        Encoded metadata

    Raises:
        ValueError: On bad tags, an oversized reserved word, or offsets past 255 words
    """
    if len(reserved) > RESERVED_SIZE:
        raise ValueError(f"Reserved prefix is {len(reserved)} bytes, max {RESERVED_SIZE}")
    for tag in blocks:
        if len(tag) != TAG_SIZE or tag == _EMPTY_TAG:
            raise ValueError(f"Invalid metadata tag: {tag!r}")

    table_words = -(-(len(blocks) * TABLE_ENTRY_SIZE) // WORD_SIZE)
    offset = RESERVED_SIZE // WORD_SIZE + table_words

    table = b""
    data = b""
    for tag, block in blocks.items():
        if offset > 0xFF:
            raise ValueError("Metadata too large: data offset exceeds 255 words")
        padded = _pad_to_word(block)
        table += tag + bytes([offset])
        data += padded
        offset += len(padded) // WORD_SIZE

    header = reserved.ljust(RESERVED_SIZE, b"\x00")
    return header + _pad_to_word(table) + data


def get_metadata(tag: bytes, metadata: bytes) -> bytes | None:
    """Find the data block stored under `tag`.

    Returns:
        The block (word padded), or None when the tag is absent
    """
    if len(metadata) < RESERVED_SIZE + TABLE_ENTRY_SIZE:
        return None

    entries: list[tuple[bytes, int]] = []
    position = RESERVED_SIZE
    table_end = len(metadata)
    while position + TABLE_ENTRY_SIZE <= table_end:
        entry_tag = metadata[position : position + TAG_SIZE]
        if entry_tag == _EMPTY_TAG:
            break
        entry_offset = metadata[position + TAG_SIZE]
        entries.append((entry_tag, entry_offset))
        # The table can't extend into the first data block
        table_end = min(table_end, entries[0][1] * WORD_SIZE)
        position += TABLE_ENTRY_SIZE

    for index, (entry_tag, entry_offset) in enumerate(entries):
        if entry_tag != tag:
            continue
        start = entry_offset * WORD_SIZE
        if index + 1 < len(entries):
            end = entries[index + 1][1] * WORD_SIZE
        else:
            end = len(metadata)
        if start >= len(metadata) or end < start:
            return None
        return metadata[start:end]
    return None


def encode_payer_quote(quote: PayerQuote) -> bytes:
    """ABI-encode a payer quote as the buyback metadata block."""
    from eth_abi import encode  # type: ignore[attr-defined]

    return encode(
        ["uint256", "uint256"],
        [quote.amount_to_swap_with, quote.minimum_swap_amount_out],
    )


def decode_payer_quote(tag: bytes, metadata: bytes) -> PayerQuote | None:
    """Read the payer quote out of multiplexed metadata.

    Returns:
        The PayerQuote, or None if the metadata carries no buyback block

    Raises:
        MalformedMetadata: If the block exists but is not two uint256 words
    """
    from eth_abi import decode  # type: ignore[attr-defined]
    from eth_abi.exceptions import DecodingError

    block = get_metadata(tag, metadata)
    if block is None:
        return None
    if len(block) < 2 * WORD_SIZE:
        raise MalformedMetadata(f"Buyback metadata block is {len(block)} bytes, expected 64")

    try:
        amount_to_swap_with, minimum_swap_amount_out = decode(
            ["uint256", "uint256"], block[: 2 * WORD_SIZE]
        )
    except DecodingError as e:
        raise MalformedMetadata(f"Could not decode buyback metadata: {e}") from e

    return PayerQuote(
        amount_to_swap_with=int(amount_to_swap_with),
        minimum_swap_amount_out=int(minimum_swap_amount_out),
    )


def build_payer_metadata(
    tag: bytes,
    amount_to_swap_with: int,
    minimum_swap_amount_out: int,
    other_blocks: dict[bytes, bytes] | None = None,
) -> bytes:
    """Convenience for clients: metadata carrying a buyback quote plus other blocks."""
    blocks = dict(other_blocks or {})
    blocks[tag] = encode_payer_quote(PayerQuote(amount_to_swap_with, minimum_swap_amount_out))
    return encode_metadata(blocks)


__all__ = [
    "encode_metadata",
    "get_metadata",
    "encode_payer_quote",
    "decode_payer_quote",
    "build_payer_metadata",
]
