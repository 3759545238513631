"""IBAN normalization utilities."""

from __future__ import annotations


def normalize_iban(value: str | None) -> str | None:
    """Normalize an IBAN for stable comparisons.

    - Removes all spaces
    - Strips surrounding whitespace
    - Uppercases

    Returns None if value is None or blank.
    """
    if value is None:
        return None
    normalized = value.strip().replace(" ", "").upper()
    return normalized or None


def ibans_match(a: str | None, b: str | None) -> bool:
    """Return True if both IBANs are present and equal after normalization."""
    norm_a = normalize_iban(a)
    return norm_a is not None and norm_a == normalize_iban(b)


def has_iban_shape(value: str | None) -> bool:
    """Return True if the normalized value could be an IBAN.

    Only the country prefix (2 letters, 2 check digits) and the maximum
    length of 34 characters are checked, not the checksum.
    """
    normalized = normalize_iban(value)
    if normalized is None or len(normalized) > 34:
        return False
    return normalized[:2].isalpha() and normalized[2:4].isdigit()
