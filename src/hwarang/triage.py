"""HWP 파일 트리아지 (형식 감지 및 분류)"""

import logging
from dataclasses import dataclass

from .constants import (
    OLE2_SIGNATURE,
    ZIP_SIGNATURE,
    HWPX_MIMETYPE,
    HWPX_PART_MIMETYPE,
    HWPX_PART_HEADER,
    HWPX_PART_CONTENT,
)
from .errors import HwpxError
from .models import Format
from .package import ZipPackage

logger = logging.getLogger(__name__)


def is_hwpx_package(package: ZipPackage) -> bool:
    """
    ZIP 패키지가 HWPX인지 확인

    HWPX는 mimetype 파트("application/hwp+zip") 또는
    Contents/header.xml, Contents/content.hpf를 포함
    """
    if package.has_part(HWPX_PART_MIMETYPE):
        try:
            mimetype = package.read_part(HWPX_PART_MIMETYPE)
        except HwpxError as e:
            logger.debug("mimetype 읽기 실패: %s", e)
        else:
            if mimetype.decode("ascii", errors="ignore").strip().startswith(HWPX_MIMETYPE):
                return True

    return package.has_part(HWPX_PART_HEADER) or package.has_part(HWPX_PART_CONTENT)


def sniff(data: bytes) -> tuple[Format, ZipPackage | None]:
    """
    형식 감지와 함께 HWPX면 이미 읽은 패키지도 반환

    Returns:
        (Format, ZipPackage 또는 None)
    """
    # 1. OLE2 확인 (HWP 5.x)
    if data[:len(OLE2_SIGNATURE)] == OLE2_SIGNATURE:
        return Format.COMPOUND_HWP, None

    # 2. HWPX 확인 (ZIP 시그니처 + 중앙 디렉토리 + HWPX 표식)
    if data[:len(ZIP_SIGNATURE)] == ZIP_SIGNATURE:
        try:
            package = ZipPackage(data)
        except HwpxError as e:
            logger.debug("ZIP 중앙 디렉토리 해석 실패: %s", e)
            return Format.UNKNOWN, None
        if is_hwpx_package(package):
            return Format.ZIP_HWPX, package

    return Format.UNKNOWN, None


def detect_format(data: bytes) -> Format:
    """
    파일 앞부분 시그니처로 형식 감지

    Args:
        data: 파일 전체 바이트

    Returns:
        Format enum (COMPOUND_HWP, ZIP_HWPX, UNKNOWN)
    """
    return sniff(data)[0]


@dataclass
class TriageResult:
    """트리아지 결과"""
    filepath: str
    format: Format
    file_size: int
    can_process: bool
    note: str = ""


_NOTES = {
    Format.COMPOUND_HWP: "HWP 5.x 처리 가능",
    Format.ZIP_HWPX: "HWPX 처리 가능",
    Format.UNKNOWN: "알 수 없는 형식",
}


def triage_file(filepath: str) -> TriageResult:
    """
    단일 파일 트리아지 (예외를 던지지 않음)

    Args:
        filepath: 파일 경로

    Returns:
        TriageResult
    """
    try:
        with open(filepath, "rb") as f:
            data = f.read()
    except OSError as e:
        return TriageResult(
            filepath=filepath,
            format=Format.UNKNOWN,
            file_size=0,
            can_process=False,
            note=f"파일 읽기 실패: {e.strerror or e}",
        )

    fmt = detect_format(data)
    return TriageResult(
        filepath=filepath,
        format=fmt,
        file_size=len(data),
        can_process=fmt is not Format.UNKNOWN,
        note=_NOTES[fmt],
    )


def triage_files(filepaths: list[str]) -> dict[Format, list[str]]:
    """
    파일 목록을 형식별로 분류

    Returns:
        Format → 파일 경로 목록
    """
    groups: dict[Format, list[str]] = {fmt: [] for fmt in Format}
    for filepath in filepaths:
        groups[triage_file(filepath).format].append(filepath)
    return groups
