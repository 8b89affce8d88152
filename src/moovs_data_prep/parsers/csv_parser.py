"""
CSV parser for dispatch-software exports

Reads raw CSV bytes into (headers, rows) with encoding detection, combines
multi-file uploads and writes canonical export CSV text.
"""
import csv
import io
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

import chardet
import pandas as pd
import structlog

from ..config import settings
from ..schemas import CanonicalRecord, Workflow
from ..validation.error_handler import (
    EmptyFileError,
    FileParseError,
    FileTooLargeError,
    IncompatibleHeadersError,
)

logger = structlog.get_logger(__name__)


@dataclass
class ParsedCSV:
    """Header row plus data rows of one file"""
    headers: List[str]
    rows: List[List[str]]
    filename: Optional[str] = None
    encoding: Optional[str] = None
    overflow_rows: int = 0


class CSVParser:
    """Reads and writes CSV files"""

    def __init__(self):
        self.encoding_candidates = ['utf-8-sig', 'utf-8', 'cp1252', 'latin-1']

    def parse(self, data: bytes, filename: Optional[str] = None) -> ParsedCSV:
        """Parse one CSV file; blank rows are dropped"""
        max_bytes = settings.max_file_size_mb * 1024 * 1024
        if len(data) > max_bytes:
            raise FileTooLargeError(
                f'File exceeds the {settings.max_file_size_mb} MB limit',
                filename=filename,
            )

        encoding = self._detect_encoding(data)
        try:
            text = data.decode(encoding)
        except UnicodeDecodeError as e:
            raise FileParseError(f'Could not decode file as {encoding}: {e}', filename=filename) from e

        if not text.strip():
            raise EmptyFileError(filename=filename)

        overflow: List[int] = []

        def _keep_long_line(line: List[str]) -> List[str]:
            overflow.append(len(line))
            return line

        try:
            frame = pd.read_csv(
                io.StringIO(text),
                header=0,
                index_col=False,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                engine='python',
                on_bad_lines=_keep_long_line,
            )
        except pd.errors.EmptyDataError as e:
            raise EmptyFileError(filename=filename) from e
        except (pd.errors.ParserError, csv.Error, ValueError) as e:
            raise FileParseError(f'Failed to parse CSV: {e}', filename=filename) from e

        headers = [self._header_name(column) for column in frame.columns]
        frame = frame.fillna('')
        rows = [
            [str(value) for value in row]
            for row in frame.itertuples(index=False, name=None)
        ]
        rows = [row for row in rows if any(cell.strip() for cell in row)]

        logger.info(
            "Parsed CSV file",
            filename=filename,
            encoding=encoding,
            columns=len(headers),
            rows=len(rows),
            overflow_rows=len(overflow),
        )
        return ParsedCSV(headers=headers, rows=rows, filename=filename, encoding=encoding,
                         overflow_rows=len(overflow))

    def combine_files(self, parsed_files: Sequence[ParsedCSV]) -> ParsedCSV:
        """
        Concatenate files that share the first file's headers.

        A file is rejected when more than the configured share of its headers
        are absent from the first file. Rows of later files are re-aligned to
        the first file's column order by header name.
        """
        if not parsed_files:
            raise EmptyFileError()

        reference = parsed_files[0]
        reference_set = set(reference.headers)
        rows = list(reference.rows)

        for file_index, parsed in enumerate(parsed_files[1:], start=1):
            mismatched = [h for h in parsed.headers if h not in reference_set]
            if mismatched and len(mismatched) > len(reference.headers) * settings.header_overlap_threshold:
                raise IncompatibleHeadersError(file_index, filename=parsed.filename)

            if parsed.headers == reference.headers:
                rows.extend(parsed.rows)
                continue

            positions = {}
            for position, header in enumerate(parsed.headers):
                positions.setdefault(header, position)
            for row in parsed.rows:
                rows.append([
                    row[positions[header]] if header in positions and positions[header] < len(row) else ''
                    for header in reference.headers
                ])

        logger.info("Combined CSV files", files=len(parsed_files), rows=len(rows))
        return ParsedCSV(headers=list(reference.headers), rows=rows, filename=reference.filename)

    def generate_csv(self, records: Sequence[CanonicalRecord], headers: Sequence[str]) -> str:
        """Canonical CSV text: minimal quoting, newline-joined rows"""
        frame = pd.DataFrame([record.to_row() for record in records], columns=list(headers))
        frame = frame.fillna('')
        output = frame.to_csv(index=False, lineterminator='\n', quoting=csv.QUOTE_MINIMAL)
        return output[:-1] if output.endswith('\n') else output

    def export_filename(self, workflow: Workflow, timestamp_ms: Optional[int] = None) -> str:
        timestamp_ms = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
        return f'moovs-{workflow.value}-{timestamp_ms}.csv'

    def _detect_encoding(self, data: bytes) -> str:
        if data.startswith(b'\xef\xbb\xbf'):
            return 'utf-8-sig'

        sample = data[:100000]
        detected = chardet.detect(sample)
        encoding = detected.get('encoding')
        confidence = detected.get('confidence') or 0.0

        candidates = ([encoding] if encoding and confidence > 0.8 else []) + self.encoding_candidates
        for candidate in candidates:
            try:
                data.decode(candidate)
            except (UnicodeDecodeError, LookupError):
                continue
            return candidate
        return 'latin-1'

    def _header_name(self, column) -> str:
        # pandas renames blank headers to "Unnamed: N" and repeats to "Name.1"
        name = str(column)
        if name.startswith('Unnamed: '):
            return ''
        return name.strip()


# Global parser instance
csv_parser = CSVParser()
