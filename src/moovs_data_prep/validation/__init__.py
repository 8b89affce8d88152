"""
Validation package

- Phone and email normalization
- Field Mapping System with per-format alias templates
- Record validation with suggested fixes
- Duplicate Detection System
"""

from .error_handler import (
    ConfigurationError,
    DataPrepError,
    EmptyFileError,
    ErrorCategory,
    ErrorSeverity,
    FileParseError,
    FileTooLargeError,
    IncompatibleHeadersError,
)
from .phone_normalizer import (
    PhoneNumberNormalizer,
    PhoneValidationResult,
    generate_placeholder_phone,
    is_placeholder_phone,
    normalize_phone,
    phone_normalizer,
)
from .email_normalizer import (
    generate_placeholder_email,
    is_placeholder_email,
    normalize_email,
    validate_email,
)
from .field_mapping_system import (
    FieldMappingSystem,
    TemplateManager,
    field_mapping_system,
)
from .record_validator import (
    RecordValidator,
    ValidationOutcome,
    auto_fix,
    generate_placeholder_emails,
    ready_count,
)
from .duplicate_detection_system import (
    DuplicateDetectionSystem,
    duplicate_detection_system,
)

__all__ = [
    "ConfigurationError",
    "DataPrepError",
    "EmptyFileError",
    "ErrorCategory",
    "ErrorSeverity",
    "FileParseError",
    "FileTooLargeError",
    "IncompatibleHeadersError",
    "PhoneNumberNormalizer",
    "PhoneValidationResult",
    "generate_placeholder_phone",
    "is_placeholder_phone",
    "normalize_phone",
    "phone_normalizer",
    "generate_placeholder_email",
    "is_placeholder_email",
    "normalize_email",
    "validate_email",
    "FieldMappingSystem",
    "TemplateManager",
    "field_mapping_system",
    "RecordValidator",
    "ValidationOutcome",
    "auto_fix",
    "generate_placeholder_emails",
    "ready_count",
    "DuplicateDetectionSystem",
    "duplicate_detection_system",
]
