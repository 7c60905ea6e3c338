"""
hwarang - HWP 5.x / HWPX 텍스트 추출기
라이선스: MIT
"""

from .errors import (
    ErrorKind,
    HwarangError,
    FileError,
    UnsupportedFormatError,
    InvalidSignatureError,
    UnsupportedVersionError,
    PasswordProtectedError,
    StreamNotFoundError,
    InvalidRecordHeaderError,
    DecompressFailedError,
    DecryptFailedError,
    ParseError,
    HwpxError,
)
from .models import (
    Format,
    RawDocument,
    CompoundEntry,
    HWPVersion,
    HWPHeader,
    RecordHeader,
    Record,
    Section,
    ExtractResult,
    BatchResult,
)
from .compound import CompoundFile
from .package import ZipPackage
from .reader import HWPReader, parse_file_header
from .record import RecordParser, decode_stream
from .structure import StructureParser, decode_para_text
from .triage import detect_format, triage_file
from .extractor import extract, extract_text, list_streams, load_document
from .batch import BatchProcessor, extract_batch
from .exporter import YAMLExporter

__version__ = "0.1.0"
__all__ = [
    # Core API
    "extract_text",
    "list_streams",
    "extract_batch",
    "extract",
    "load_document",
    "BatchProcessor",
    "YAMLExporter",
    # Containers / decoders
    "CompoundFile",
    "ZipPackage",
    "HWPReader",
    "parse_file_header",
    "RecordParser",
    "decode_stream",
    "StructureParser",
    "decode_para_text",
    "detect_format",
    "triage_file",
    # Models
    "Format",
    "RawDocument",
    "CompoundEntry",
    "HWPVersion",
    "HWPHeader",
    "RecordHeader",
    "Record",
    "Section",
    "ExtractResult",
    "BatchResult",
    # Errors
    "ErrorKind",
    "HwarangError",
    "FileError",
    "UnsupportedFormatError",
    "InvalidSignatureError",
    "UnsupportedVersionError",
    "PasswordProtectedError",
    "StreamNotFoundError",
    "InvalidRecordHeaderError",
    "DecompressFailedError",
    "DecryptFailedError",
    "ParseError",
    "HwpxError",
]
