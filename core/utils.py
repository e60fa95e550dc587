# core/utils.py

import re
import unicodedata


def sanitize(data: dict) -> dict:
    """
    Sanitize dictionary data before it is written to Supabase:
    - Empty strings → None
    - Strip string whitespace
    - Preserve booleans, numbers, lists and None values

    Numeric fields are typed by the pydantic models, so strings are
    never coerced here (phone numbers and codes stay strings).
    """
    clean = {}

    for k, v in data.items():
        if isinstance(v, str):
            stripped = v.strip()
            clean[k] = stripped or None
            continue

        clean[k] = v

    return clean


def safe_filename(filename: str) -> str:
    """
    Storage-safe file name: accents removed, anything outside
    [A-Za-z0-9._-] replaced by "_".
    """
    decomposed = unicodedata.normalize("NFD", filename)
    without_accents = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return re.sub(r"[^A-Za-z0-9._-]", "_", without_accents)
