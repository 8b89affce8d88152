"""
File parsers for dispatch-software exports
"""

from .csv_parser import CSVParser, ParsedCSV, csv_parser

__all__ = [
    "CSVParser",
    "ParsedCSV",
    "csv_parser",
]
