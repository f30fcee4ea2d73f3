"""Hashing.

Two unrelated jobs live here:

- ``rolling_hash``: the 32-bit polynomial hash the planner uses to pick among
  fixed option lists. It is an index, not an identity; two intents may
  collide and then share the same stylistic choices.
- ``hash_string``: the xxhash64 digest the pipeline uses to fingerprint plans
  for replay comparison.
"""

import xxhash

MASK_32 = 0xFFFFFFFF


def hash_string(text: str) -> str:
    """
    Hash string to a 16-character hex digest (xxhash64).

    Examples:
        >>> len(hash_string("plan"))
        16
    """
    return xxhash.xxh64(text.encode("utf-8")).hexdigest()


def rolling_hash(text: str) -> int:
    """
    32-bit polynomial rolling hash over character codes.

    ``h = (h * 31 + ord(c)) mod 2**32``. Deterministic across processes,
    unlike ``hash()``.

    Examples:
        >>> rolling_hash("")
        0
        >>> rolling_hash("ab") == (97 * 31 + 98)
        True
    """
    value = 0
    for char in text:
        value = (value * 31 + ord(char)) & MASK_32
    return value


__all__ = [
    "hash_string",
    "rolling_hash",
]
