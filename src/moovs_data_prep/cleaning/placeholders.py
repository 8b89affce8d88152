"""
Placeholder allocation for one processing run
"""
import re
from typing import Optional

import structlog

from ..config import settings

logger = structlog.get_logger(__name__)


class PlaceholderAllocator:
    """
    Issues sequential placeholder phone numbers and static placeholder addresses.

    The first number issued is the base number verbatim; later numbers add an
    offset to the base's numeric value and keep its layout. One allocator
    belongs to one run and is never shared.
    """

    def __init__(
        self,
        base_phone: Optional[str] = None,
        pickup_address: Optional[str] = None,
        dropoff_address: Optional[str] = None,
    ):
        self.base_phone = base_phone or settings.default_base_phone
        self.base_digits = re.sub(r'\D', '', self.base_phone)
        if not self.base_digits:
            raise ValueError(f"Base placeholder phone has no digits: {self.base_phone!r}")
        self._pickup_address = pickup_address or None
        self._dropoff_address = dropoff_address or None
        self._counter = 0
        self.issued_count = 0

    @property
    def base_value(self) -> int:
        return int(self.base_digits)

    def next_phone_number(self) -> str:
        """Get the next sequential placeholder phone number"""
        offset = self._counter
        self._counter += 1
        self.issued_count += 1
        if offset == 0:
            return self.base_phone
        return self._format(self.base_value + offset)

    def continue_from(self, number: int) -> None:
        """Make the next issued number equal to ``number`` (never moves backwards)"""
        offset = number - self.base_value
        if offset > self._counter:
            logger.info(
                "Continuing placeholder numbering",
                base_phone=self.base_phone,
                next_number=number,
                skipped=offset - self._counter,
            )
            self._counter = offset

    def pickup_address(self) -> Optional[str]:
        return self._pickup_address

    def dropoff_address(self) -> Optional[str]:
        return self._dropoff_address

    def reset(self) -> None:
        """Restart numbering from the base number"""
        self._counter = 0
        self.issued_count = 0

    def _format(self, value: int) -> str:
        digits = str(value)
        if len(self.base_digits) == 11 and self.base_phone.startswith('+1'):
            return f'+1 {digits[1:4]}-{digits[4:7]}-{digits[7:11]}'
        return f'+{digits}'
