"""HWP/HWPX 텍스트 추출기

처리 흐름:
    경로 → 파일 읽기 → 형식 감지
        → HWP 5.x: Compound → FileHeader → 접근 확인 → 섹션 레코드 → 본문 조립
        → HWPX: ZIP → manifest → 섹션 XML
        → 알 수 없음: UnsupportedFormatError

어느 단계든 첫 오류에서 중단하며, 오류와 함께 일부 텍스트를 반환하지 않는다.
"""

import logging
import os

from .compound import CompoundFile
from .constants import MAX_FILE_SIZE_MB
from .errors import FileError, HwarangError, ParseError, UnsupportedFormatError
from .hwpx import extract_hwpx_text
from .models import ExtractResult, Format, RawDocument
from .package import ZipPackage
from .reader import HWPReader
from .structure import StructureParser, extract_document
from .triage import sniff

logger = logging.getLogger(__name__)


def load_document(filepath: str) -> RawDocument:
    """
    파일 전체를 읽고 형식 감지

    Raises:
        FileError: 파일 없음, 일반 파일 아님, 권한/입출력 오류, 크기 초과
    """
    if not os.path.exists(filepath):
        raise FileError(f"파일이 존재하지 않음: {filepath}")
    if not os.path.isfile(filepath):
        raise FileError(f"일반 파일이 아님: {filepath}")

    try:
        file_size = os.path.getsize(filepath)
        if file_size > MAX_FILE_SIZE_MB * 1024 * 1024:
            raise FileError(
                f"파일 크기 초과 ({file_size / 1024 / 1024:.1f}MB > {MAX_FILE_SIZE_MB}MB): {filepath}"
            )
        with open(filepath, "rb") as f:
            data = f.read()
    except PermissionError as e:
        raise FileError(f"파일 읽기 권한 없음: {filepath}") from e
    except OSError as e:
        raise FileError(f"파일 읽기 실패 ({e.strerror or e}): {filepath}") from e

    fmt, package = sniff(data)
    return RawDocument(path=filepath, data=data, format=fmt, package=package)


def extract_hwp5_text(document: RawDocument) -> str:
    """HWP 5.x 본문 텍스트 추출"""
    reader = HWPReader(document.data, document.path)
    reader.check_access()

    parser = StructureParser()
    sections = [
        parser.parse_section(index, records, name)
        for index, name, records in reader.iter_sections()
    ]
    return extract_document(sections)


def extract_document_text(document: RawDocument) -> str:
    """
    형식에 맞는 파이프라인으로 텍스트 추출

    Raises:
        UnsupportedFormatError: 알 수 없는 형식
        HwarangError: 각 단계의 오류
    """
    if document.format is Format.COMPOUND_HWP:
        return extract_hwp5_text(document)
    if document.format is Format.ZIP_HWPX:
        return extract_hwpx_text(document.package or ZipPackage(document.data))
    raise UnsupportedFormatError(f"지원하지 않는 파일 형식: {document.path}")


def extract_text(filepath: str) -> str:
    """
    HWP/HWPX 파일에서 텍스트 추출

    Args:
        filepath: 파일 경로

    Returns:
        추출된 텍스트 (빈 문서면 빈 문자열)

    Raises:
        HwarangError: FileError, UnsupportedFormatError 등 첫 번째 오류
    """
    return extract_document_text(load_document(filepath))


def extract(filepath: str) -> ExtractResult:
    """
    텍스트 추출 결과를 성공/실패로 정규화 (예외를 던지지 않음)

    Args:
        filepath: 파일 경로

    Returns:
        ExtractResult 객체
    """
    fmt = Format.UNKNOWN
    try:
        document = load_document(filepath)
        fmt = document.format
        text = extract_document_text(document)
    except HwarangError as e:
        logger.debug("%s: %s (%s)", filepath, e, e.kind.value)
        return ExtractResult.from_error(filepath, e, fmt)
    except Exception as e:
        logger.exception("%s: 예상치 못한 오류", filepath)
        return ExtractResult.from_error(filepath, ParseError(f"예상치 못한 오류: {e}"), fmt)

    return ExtractResult.from_text(filepath, text, fmt)


def list_streams(filepath: str) -> list[str]:
    """
    HWP 5.x 파일의 스트림 경로 목록

    Raises:
        FileError: 파일 오류
        UnsupportedFormatError: HWP 5.x (Compound) 파일이 아님
        ParseError: 컨테이너 구조 오류
    """
    document = load_document(filepath)
    if document.format is not Format.COMPOUND_HWP:
        raise UnsupportedFormatError(
            f"스트림 목록은 HWP 5.x 파일만 지원: {filepath}"
        )

    return CompoundFile(document.data).list_streams()
