"""
Tests for canonical serialization of exported history.
"""

from rewind.core.canonical import canonicalize, canonical_json_bytes, canonical_json_str


def test_canonicalize_dict_key_order():
    """Dict key order must not affect canonical output."""
    d1 = {"z": 1, "a": 2, "m": 3}
    d2 = {"a": 2, "m": 3, "z": 1}

    assert canonicalize(d1) == canonicalize(d2)


def test_canonicalize_stringifies_int_keys():
    """actionsById uses int keys in memory but string keys on the wire."""
    canon = canonicalize({10: "b", 2: "a"})

    assert list(canon.keys()) == ["10", "2"]


def test_canonicalize_tuples_become_lists():
    """Tuples serialize as JSON arrays."""
    assert canonicalize({"ids": (0, 1, 2)}) == {"ids": [0, 1, 2]}


def test_canonical_json_str_layout():
    """Keys sorted, no whitespace."""
    assert canonical_json_str({"b": 2, "a": 1}) == '{"a":1,"b":2}'
    assert canonical_json_bytes({"b": 2, "a": 1}) == b'{"a":1,"b":2}'


def test_canonical_handles_unicode():
    """Non-ASCII text survives canonical encoding."""
    s = canonical_json_str({"key": "日本語"})

    assert "日本語" in s
