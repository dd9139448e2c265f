"""Address clean-up for places coming from the mapping API."""

import re

_POSTAL_CODE = re.compile(r",?\s*[A-Z]?\d{4}\s*")
_DIGIT_LETTER = re.compile(r"(\d+)([A-Za-z])")
_DOUBLE_COMMA = re.compile(r",\s*,")
_TRAILING_COMMA = re.compile(r",\s*$")
_LEADING_COMMA = re.compile(r"^\s*,\s*")
_SPACES = re.compile(r"\s+")


def clean_address(address: str | None) -> str:
    """Drop postal codes (S2000, 2000...) and tidy commas and spacing.

    >>> clean_address("Av. Pellegrini 1234, S2000 Rosario, Santa Fe, Argentina")
    'Av. Pellegrini, Rosario, Santa Fe, Argentina'
    """
    if not address or not isinstance(address, str):
        return ""
    address = _POSTAL_CODE.sub(", ", address)
    address = _DIGIT_LETTER.sub(r"\1 \2", address)
    address = _DOUBLE_COMMA.sub(",", address)
    address = _TRAILING_COMMA.sub("", address)
    address = _LEADING_COMMA.sub("", address)
    address = _SPACES.sub(" ", address)
    return address.strip()
