"""Address value object, stored inline in the owning student's row."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Address:
    street: Optional[str] = None
    number: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
