"""Shared validation and normalization helpers."""

import re
from datetime import datetime, timezone

from julisha.errors import ValidationError

_WHITESPACE_RE = re.compile(r'\s+')
_PHONE_SEPARATORS_RE = re.compile(r'[\s\-\.\(\)]')
_KENYAN_PHONE_RE = re.compile(r'^\+254[17]\d{8}$')
_HASH_RE = re.compile(r'^[0-9a-f]{64}$')

COUNTIES = (
    "Baringo", "Bomet", "Bungoma", "Busia", "Elgeyo-Marakwet", "Embu",
    "Garissa", "Homa Bay", "Isiolo", "Kajiado", "Kakamega", "Kericho",
    "Kiambu", "Kilifi", "Kirinyaga", "Kisii", "Kisumu", "Kitui", "Kwale",
    "Laikipia", "Lamu", "Machakos", "Makueni", "Mandera", "Marsabit", "Meru",
    "Migori", "Mombasa", "Murang'a", "Nairobi", "Nakuru", "Nandi", "Narok",
    "Nyamira", "Nyandarua", "Nyeri", "Samburu", "Siaya", "Taita-Taveta",
    "Tana River", "Tharaka-Nithi", "Trans Nzoia", "Turkana", "Uasin Gishu",
    "Vihiga", "Wajir", "West Pokot",
)
_COUNTY_LOOKUP = {c.upper(): c for c in COUNTIES}


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how DateTime columns are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def normalize_identifier(value: str) -> str:
    """Strip all whitespace and uppercase, as the browser does before hashing."""
    return _WHITESPACE_RE.sub('', value or '').upper()


def normalize_phone(value: str) -> str:
    """Return *value* in canonical +254XXXXXXXXX form.

    Accepts local (07..., 01...), bare (7...) and international (254..., +254...)
    renderings with any mix of spaces, hyphens, dots and parentheses.
    Raises ValidationError if the result is not a Kenyan mobile number.
    """
    phone = _PHONE_SEPARATORS_RE.sub('', (value or '').strip())
    if phone.startswith('0'):
        phone = '+254' + phone[1:]
    elif phone.startswith('254'):
        phone = '+' + phone
    elif not phone.startswith('+'):
        phone = '+254' + phone

    if not _KENYAN_PHONE_RE.match(phone):
        raise ValidationError("Please enter a valid Kenyan phone number (Safaricom or Airtel).")
    return phone


def is_valid_hash(value: str) -> bool:
    """Return True if *value* is a lowercase hex SHA-256 digest."""
    return bool(value and _HASH_RE.match(value))


def canonical_county(value: str) -> str | None:
    """Map a case-insensitive county name to its canonical spelling."""
    if not value:
        return None
    return _COUNTY_LOOKUP.get(_WHITESPACE_RE.sub(' ', value.strip()).upper())
