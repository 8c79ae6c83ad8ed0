"""
Entry identifier generation.

Ids are locally unique, best-effort tokens. They are not a security
boundary, so the non-cryptographic `random` module is enough and no
collision check or retry is made.
"""

import random
import string

ID_PREFIX = "_"
ID_LENGTH = 9
_ALPHABET = string.digits + string.ascii_lowercase


def generate_id() -> str:
    """Return a new opaque entry id such as '_k3j9x0a2m'."""
    return ID_PREFIX + "".join(random.choices(_ALPHABET, k=ID_LENGTH))
