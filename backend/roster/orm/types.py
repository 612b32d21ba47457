"""
Custom column types.

PhoneNumberType stores a PhoneNumber value object in a plain VARCHAR
column using its storage form (+CC-AREA-NUMBER).
"""

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator

from roster.models.phone_number import PhoneNumber


class PhoneNumberType(TypeDecorator):
    """Encode PhoneNumber to text on the way in, decode on the way out."""
    impl = String(32)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, str):
            value = PhoneNumber.parse(value)
        return value.to_storage()

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return PhoneNumber.parse(value)
