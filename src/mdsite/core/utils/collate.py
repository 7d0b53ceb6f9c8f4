"""Locale-independent collation used for every name/path ordering"""

import unicodedata


def collation_key(name: str) -> tuple[str, str]:
    """Case- and width-insensitive sort key.

    Names equal after folding fall back to the raw name with its case swapped,
    so lowercase sorts before uppercase ('readme' < 'README').
    """
    return unicodedata.normalize('NFKC', name).casefold(), name.swapcase()
