"""
PhoneNumber value object and its two text encodings.

A phone number is kept as three digit strings so leading zeros survive.
It has a storage form used by the database column codec and a display
form used in XML documents and API responses:

    storage:  +41-22-3796111
    display:  +41 22 3796111

parse() accepts either form, and the usual separators people type
(spaces, dashes, dots, parentheses).
"""

import re
from dataclasses import dataclass

# Separators accepted between the three parts
_SEPARATORS = re.compile(r"[\s\-.()]+")
_DIGITS = re.compile(r"^\d+$")


class PhoneNumberFormatError(ValueError):
    """Raised when a text value cannot be decoded into a PhoneNumber."""


@dataclass(frozen=True)
class PhoneNumber:
    country_code: str
    area_code: str
    number: str

    def __post_init__(self):
        for part_name in ("country_code", "area_code", "number"):
            part = getattr(self, part_name)
            if not isinstance(part, str) or not _DIGITS.match(part):
                raise PhoneNumberFormatError(
                    "Phone number {} must contain digits only, got {!r}".format(part_name, part))

    @classmethod
    def parse(cls, text: str) -> "PhoneNumber":
        """Decode either the storage or the display form."""
        if text is None or not text.strip():
            raise PhoneNumberFormatError("Phone number is empty")
        parts = [p for p in _SEPARATORS.split(text.strip().lstrip("+")) if p]
        if len(parts) != 3:
            raise PhoneNumberFormatError(
                "Expected country code, area code and number in {!r}".format(text))
        return cls(*parts)

    def to_storage(self) -> str:
        return "+{}-{}-{}".format(self.country_code, self.area_code, self.number)

    def __str__(self):
        return "+{} {} {}".format(self.country_code, self.area_code, self.number)
