"""
Random database name generation.

Names are drawn from the lowercase latin alphabet with the ``secrets``
CSPRNG, so two names of the default length collide with probability 26**-15.
"""

import secrets
import string

from memongo.errors import RandomSourceError

DB_NAME_ALPHABET = string.ascii_lowercase
DEFAULT_DB_NAME_LENGTH = 15


def generate_db_name(length: int = DEFAULT_DB_NAME_LENGTH) -> str:
    """
    Generate a random database name.

    Args:
        length: Number of characters in the name

    Returns:
        A string of exactly ``length`` lowercase letters

    Raises:
        ValueError: If length is negative
        RandomSourceError: If the system entropy source is unavailable
    """
    if length < 0:
        raise ValueError(f"Database name length must not be negative: {length}")

    try:
        return ''.join(secrets.choice(DB_NAME_ALPHABET) for _ in range(length))
    except (NotImplementedError, OSError) as e:
        raise RandomSourceError(f"cannot generate database name: {e}") from e
