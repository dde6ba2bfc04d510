"""Row encoders for the unload formats.

This module provides the byte-level encoding of result rows for each
DataFormat. Encoders are stateless; every call turns one row into one line.
"""

import csv
import json
from abc import ABC, abstractmethod
from datetime import date, datetime, time
from decimal import Decimal
from io import StringIO
from typing import Any, Sequence

from unloader.core.sinks import DataFormat


class RowFormat(ABC):
    """Base class for row encoders."""

    encoding = "utf-8"

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the format name (e.g., 'tsv')."""
        ...

    @property
    def extensions(self) -> list[str]:
        return [f".{self.name}"]

    @abstractmethod
    def encode_row(self, values: Sequence[Any]) -> bytes:
        """Encode one row, including its trailing newline."""
        ...

    def encode_rows(self, rows: Sequence[Sequence[Any]]) -> bytes:
        return b"".join(self.encode_row(row) for row in rows)


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "t" if value else "f"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "\\x" + bytes(value).hex()
    if isinstance(value, (list, tuple)):
        return "{" + ",".join(_array_element(v) for v in value) + "}"
    if isinstance(value, dict):
        return json.dumps(value, default=_json_default)
    return str(value)


def _array_element(value: Any) -> str:
    if value is None:
        return "NULL"
    text = _text(value)
    if any(c in text for c in ',{}"\\ ') or text == "" or text.upper() == "NULL":
        return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return text


class TSVFormat(RowFormat):
    """Tab-separated values in PostgreSQL text COPY format."""

    NULL = "\\N"
    _ESCAPES = str.maketrans({"\\": "\\\\", "\t": "\\t", "\n": "\\n", "\r": "\\r"})

    @property
    def name(self) -> str:
        return "tsv"

    def encode_row(self, values: Sequence[Any]) -> bytes:
        fields = [
            self.NULL if value is None else _text(value).translate(self._ESCAPES)
            for value in values
        ]
        return ("\t".join(fields) + "\n").encode(self.encoding)


class CSVFormat(RowFormat):
    """Comma-separated values without a header; NULL is an empty field."""

    @property
    def name(self) -> str:
        return "csv"

    def encode_row(self, values: Sequence[Any]) -> bytes:
        buffer = StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(["" if value is None else _text(value) for value in values])
        return buffer.getvalue().encode(self.encoding)


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value) if value != value.to_integral_value() else int(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "\\x" + bytes(value).hex()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return str(value)


class TSJFormat(RowFormat):
    """Tab-separated JSON: one JSON value per column."""

    @property
    def name(self) -> str:
        return "tsj"

    def encode_row(self, values: Sequence[Any]) -> bytes:
        fields = [
            json.dumps(value, ensure_ascii=False, default=_json_default) for value in values
        ]
        return ("\t".join(fields) + "\n").encode(self.encoding)


_ROW_FORMATS: dict[DataFormat, RowFormat] = {
    DataFormat.TSJ: TSJFormat(),
    DataFormat.TSV: TSVFormat(),
    DataFormat.CSV: CSVFormat(),
}


def get_row_format(data_format: DataFormat) -> RowFormat:
    """Return the encoder for a DataFormat."""
    return _ROW_FORMATS[DataFormat(data_format)]
