"""
Email validation and deterministic placeholder emails
"""
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from ..config import settings

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


@dataclass
class EmailValidationResult:
    is_valid: bool
    error: Optional[str] = None


def validate_email(email: Optional[str]) -> EmailValidationResult:
    """Format-level email check"""
    if not email or not email.strip():
        return EmailValidationResult(is_valid=False, error='Email is required')
    if not EMAIL_PATTERN.match(email):
        return EmailValidationResult(is_valid=False, error='Invalid email format')
    return EmailValidationResult(is_valid=True)


def normalize_email(email: Optional[str]) -> str:
    """Lower-cased, trimmed email for comparison"""
    return (email or '').strip().lower()


def is_placeholder_email(email: Optional[str], domains: Optional[Iterable[str]] = None) -> bool:
    """True when the email belongs to a reserved placeholder domain"""
    normalized = normalize_email(email)
    if not normalized:
        return False
    domains = domains if domains is not None else settings.placeholder_email_domains
    return any(normalized.endswith('@' + domain.lower()) for domain in domains)


def name_hash(seed: str) -> int:
    """32-bit rolling string hash (h * 31 + code), wrapped to a signed int"""
    value = 0
    for char in seed:
        value = ((value << 5) - value + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


def generate_placeholder_email(
    first_name: str,
    last_name: str,
    phone: Optional[str] = None,
    domain: Optional[str] = None,
) -> str:
    """
    Deterministic placeholder email for a contact.

    The same name and phone always produce the same address. The last six
    phone digits make it unique per person; without a phone a hash of the
    name is used instead.
    """
    clean_first = re.sub(r'[^a-z]', '', (first_name or '').lower()) or 'unknown'
    clean_last = re.sub(r'[^a-z]', '', (last_name or '').lower()) or 'contact'
    domain = domain or settings.placeholder_email_domain

    if phone:
        digits = re.sub(r'\D', '', phone)
        suffix = digits[-6:] or '000000'
    else:
        suffix = str(abs(name_hash(clean_first + clean_last)))[:6].zfill(6)

    return f'{clean_first}.{clean_last}.{suffix}@{domain}'
