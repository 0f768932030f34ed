"""Short code encoding: counter identifiers to obfuscated base62 strings.

Sequential identifiers are encoded in base62 over an alphabet that has been
shuffled with a generator seeded from the secret key, so consecutive ids do
not produce lexicographically consecutive codes.

Flow Diagram — encode()
=======================
::
    ┌─────────────┐      ┌─────────────┐
    │ secret_key  │      │ identifier  │
    └──────┬──────┘      └──────┬──────┘
           ▼                    │
    ┌─────────────┐             │
    │ SHA-256     │             │
    │ (32 bytes)  │             │
    └──────┬──────┘             │
           ▼                    │
    ┌─────────────┐             │
    │ Random(seed)│             │
    │ .shuffle()  │             │
    └──────┬──────┘             │
           ▼                    ▼
    ┌──────────────────────────────┐
    │ base62 digits over permuted  │
    │ alphabet, most significant   │
    │ first                        │
    └──────────────────────────────┘

Key Behaviours
===============
- Pure function: no I/O and no cached alphabet table. The permutation is
  rebuilt on every call, which costs one hash and a 62-element shuffle.
- The module-level ``random`` generator is never touched; each call owns a
  private ``random.Random`` instance.
- The same (secret_key, identifier) pair always yields the same code, in
  every process.
- Identifier 0 encodes to a single symbol, never to an empty string.
"""

import hashlib
import random

__all__ = ["BASE62_ALPHABET", "MAX_IDENTIFIER", "encode", "shuffled_alphabet"]

BASE62_ALPHABET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
MAX_IDENTIFIER = 2**64 - 1


def shuffled_alphabet(secret_key: str) -> str:
    """Return the base62 alphabet permuted deterministically by ``secret_key``.

    Args:
        secret_key: Deployment secret used to seed the permutation

    Returns:
        str: The 62 alphabet symbols in key-specific order
    """
    seed = hashlib.sha256(secret_key.encode("utf-8")).digest()
    symbols = list(BASE62_ALPHABET)
    random.Random(seed).shuffle(symbols)
    return "".join(symbols)


def encode(secret_key: str, identifier: int) -> str:
    """Encode an identifier as a short code.

    Args:
        secret_key: Deployment secret used to permute the alphabet
        identifier: Unsigned 64-bit integer (already offset by the caller)

    Returns:
        str: Base62 code over the permuted alphabet

    Raises:
        TypeError: If identifier is not an int
        ValueError: If identifier is outside ``0 .. 2**64 - 1``

    Example:
        >>> encode("default_secret", 0) == shuffled_alphabet("default_secret")[0]
        True
    """
    if isinstance(identifier, bool) or not isinstance(identifier, int):
        raise TypeError(f"identifier must be int, got {type(identifier).__name__}")
    if identifier < 0 or identifier > MAX_IDENTIFIER:
        raise ValueError(f"identifier out of unsigned 64-bit range: {identifier}")

    alphabet = shuffled_alphabet(secret_key)
    base = len(alphabet)

    if identifier == 0:
        return alphabet[0]

    result = []
    while identifier > 0:
        identifier, remainder = divmod(identifier, base)
        result.append(alphabet[remainder])

    return "".join(result[::-1])
