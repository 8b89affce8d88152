"""
Phone number normalization

Format-level validation of phone numbers using the phonenumbers library,
with United States numbering preferred for unqualified input.
"""
import re
from dataclasses import dataclass
from typing import List, Optional

import phonenumbers
import structlog
from phonenumbers import NumberParseException

from ..config import settings
from .email_normalizer import name_hash

logger = structlog.get_logger(__name__)

# Reserved fictional-use range: 555-0100 through 555-0199
FICTIONAL_RANGE = re.compile(r'^1?\d{3}55501\d{2}$')


@dataclass
class PhoneValidationResult:
    """Outcome of validating one phone number"""
    is_valid: bool
    formatted: Optional[str] = None
    error: Optional[str] = None
    suggestion: Optional[str] = None


def normalize_phone(phone: Optional[str]) -> str:
    """Digits only, for comparison keys"""
    return re.sub(r'\D', '', phone or '')


def is_placeholder_phone(phone: Optional[str], base_phone: Optional[str] = None) -> bool:
    """True for numbers in the fictional range or sharing the base placeholder prefix"""
    digits = normalize_phone(phone)
    if not digits:
        return False
    if FICTIONAL_RANGE.match(digits):
        return True
    if base_phone:
        base_digits = normalize_phone(base_phone)
        prefix = base_digits[:-2]
        if prefix and len(digits) == len(base_digits) and digits.startswith(prefix):
            return True
    return False


def generate_placeholder_phone(first_name: str, last_name: str) -> str:
    """Deterministic +1AAA555LLLL number derived from the contact's name"""
    seed = re.sub(r'[^a-z]', '', f'{first_name or ""}{last_name or ""}'.lower())
    digits = str(abs(name_hash(seed))).zfill(10)[:10]
    return f'+1{digits[:3]}555{digits[3:7]}'


class PhoneNumberNormalizer:
    """Validates and reformats phone numbers"""

    def __init__(self, default_region: Optional[str] = None):
        self.default_region = default_region or settings.default_region

    def validate(self, raw: Optional[str]) -> PhoneValidationResult:
        """Validate a phone number and return its international form"""
        if not raw or not raw.strip():
            return PhoneValidationResult(is_valid=False, error='Phone number is required')

        cleaned = self._clean_phone_number(raw)
        region = self.detect_region(cleaned)

        for candidate, candidate_region in self._parse_attempts(raw, cleaned, region):
            parsed = self._parse(candidate, candidate_region)
            if parsed is not None and phonenumbers.is_valid_number(parsed):
                return PhoneValidationResult(
                    is_valid=True,
                    formatted=self._format_international(parsed),
                )

        digits = normalize_phone(cleaned)
        logger.debug("Phone number failed validation", region=region, digit_count=len(digits))
        if len(digits) == 10:
            return PhoneValidationResult(
                is_valid=False,
                error='Invalid phone number format',
                suggestion=f'+1{digits}',
            )
        return PhoneValidationResult(is_valid=False, error='Invalid phone number format')

    def detect_region(self, phone: str) -> str:
        """Region for an unqualified number, preferring the default region"""
        parsed = self._parse(phone, self.default_region)
        if parsed is not None and phonenumbers.is_valid_number(parsed):
            return self.default_region

        if phone.startswith('+'):
            parsed = self._parse(phone, None)
            if parsed is not None:
                region = phonenumbers.region_code_for_number(parsed)
                if region and region != 'ZZ':
                    return region

        return self.default_region

    def format_phone(self, raw: Optional[str]) -> str:
        """International form when valid, else the input unchanged"""
        result = self.validate(raw)
        return result.formatted or (raw or '')

    def _parse_attempts(self, raw: str, cleaned: str, region: str) -> List[tuple]:
        attempts = [(cleaned, region)]
        if cleaned.startswith('+'):
            attempts.append((cleaned, None))
        original = raw.strip()
        if original != cleaned:
            attempts.append((original, region))
        return attempts

    def _parse(self, phone: str, region: Optional[str]):
        try:
            return phonenumbers.parse(phone, region)
        except NumberParseException:
            return None

    def _clean_phone_number(self, phone: str) -> str:
        """Clean phone number of formatting characters"""
        cleaned = re.sub(r'[^\d+]', '', phone)
        if cleaned.startswith('00'):
            cleaned = '+' + cleaned[2:]
        return cleaned

    def _format_international(self, parsed) -> str:
        # phonenumbers groups with spaces ("+1 206-555-0199" for NANP, "+44 20 7946 0958" elsewhere)
        return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.INTERNATIONAL)


# Global normalizer instance
phone_normalizer = PhoneNumberNormalizer()
