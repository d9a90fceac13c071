"""Database naming package for memongo."""

from .name_generator import generate_db_name, DB_NAME_ALPHABET, DEFAULT_DB_NAME_LENGTH

__all__ = ['generate_db_name', 'DB_NAME_ALPHABET', 'DEFAULT_DB_NAME_LENGTH']
