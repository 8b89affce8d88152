"""
Error taxonomy for import runs

Input errors (empty file, unreadable file, incompatible headers, bad
configuration) are raised and abort the operation before any state changes.
Field-level problems are reported as DataIssue values and never raised.
"""
from enum import Enum
from typing import Any, Dict, Optional


class ErrorSeverity(Enum):
    """Error severity levels"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories"""
    INPUT_ERROR = "input_error"
    PARSE_ERROR = "parse_error"
    SCHEMA_ERROR = "schema_error"
    CONFIGURATION_ERROR = "configuration_error"


class DataPrepError(Exception):
    """Base class for errors that abort an import operation"""
    category = ErrorCategory.INPUT_ERROR
    severity = ErrorSeverity.HIGH

    def __init__(self, message: str, filename: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.filename = filename

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for reporting"""
        return {
            'error': type(self).__name__,
            'category': self.category.value,
            'severity': self.severity.value,
            'message': self.message,
            'filename': self.filename,
        }


class EmptyFileError(DataPrepError):
    """The file has no header row"""

    def __init__(self, filename: Optional[str] = None):
        super().__init__('Empty CSV file', filename=filename)


class FileParseError(DataPrepError):
    category = ErrorCategory.PARSE_ERROR


class FileTooLargeError(DataPrepError):
    severity = ErrorSeverity.MEDIUM


class IncompatibleHeadersError(DataPrepError):
    """A later file in a multi-file upload does not match the first file's headers"""
    category = ErrorCategory.SCHEMA_ERROR

    def __init__(self, file_index: int, filename: Optional[str] = None):
        super().__init__(
            f'File {file_index + 1} has different headers. '
            'Please ensure all files are from the same export type.',
            filename=filename,
        )
        self.file_index = file_index


class ConfigurationError(DataPrepError):
    category = ErrorCategory.CONFIGURATION_ERROR
    severity = ErrorSeverity.CRITICAL
