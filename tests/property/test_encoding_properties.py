from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from eventkey.core.encoding import ALPHABET, decode_sortable, encode_sortable
from eventkey.core.hashid import HashIdGenerator, extract_timestamp
from eventkey.core.settings import HashIdSettings
from eventkey.core.timestamp import timestamp_prefix

pytestmark = pytest.mark.property

equal_length_pairs = st.integers(min_value=0, max_value=40).flatmap(
    lambda n: st.tuples(
        st.binary(min_size=n, max_size=n), st.binary(min_size=n, max_size=n)
    )
)

field_values = st.text(max_size=40)


@given(data=st.binary(max_size=100))
@settings(max_examples=300)
def test_length_follows_residue(data: bytes) -> None:
    text = encode_sortable(data)
    full, rest = divmod(len(data), 3)
    assert len(text) == 4 * full + (rest + 1 if rest else 0)
    assert set(text) <= set(ALPHABET)


@given(pair=equal_length_pairs)
@settings(max_examples=500)
def test_order_preserved_for_equal_lengths(pair: tuple[bytes, bytes]) -> None:
    a, b = pair
    ea, eb = encode_sortable(a), encode_sortable(b)
    assert (a < b) == (ea < eb)
    assert (a == b) == (ea == eb)


@given(data=st.binary(max_size=100))
@settings(max_examples=300)
def test_decode_inverts_encode(data: bytes) -> None:
    assert decode_sortable(encode_sortable(data)) == data


@given(
    epoch=st.integers(min_value=-(2**40), max_value=2**40),
    digest=st.binary(min_size=16, max_size=16),
)
@settings(max_examples=200)
def test_prefix_is_low_32_bits(epoch: int, digest: bytes) -> None:
    prefix = timestamp_prefix(epoch)
    assert prefix == (epoch & 0xFFFFFFFF).to_bytes(4, "big")
    assert extract_timestamp(encode_sortable(prefix + digest)) == epoch & 0xFFFFFFFF


@given(
    values=st.dictionaries(
        st.text(alphabet="abcdefghij_", min_size=1, max_size=8),
        field_values,
        min_size=1,
        max_size=5,
    ),
    order_seed=st.randoms(use_true_random=False),
)
@settings(max_examples=100, deadline=None)
def test_source_order_invariance(values: dict[str, str], order_seed) -> None:
    names = list(values)
    shuffled = list(names)
    order_seed.shuffle(shuffled)
    event = dict(values)
    event["@timestamp"] = 1451613600
    first = HashIdGenerator(HashIdSettings(source=names)).generate(event)
    second = HashIdGenerator(HashIdSettings(source=shuffled)).generate(event)
    assert first == second
