"""HWP 5.x 문서 읽기 (FileHeader 해석 및 본문 스트림 접근)"""

import logging
import re
from typing import Iterator

from .compound import CompoundFile
from .constants import (
    HWP_SIGNATURE,
    STREAM_FILE_HEADER,
    STREAM_BODY_TEXT,
    SECTION_PREFIX,
    MIN_SUPPORTED_VERSION,
    MAX_SUPPORTED_VERSION,
)
from .errors import (
    InvalidSignatureError,
    ParseError,
    PasswordProtectedError,
    StreamNotFoundError,
    UnsupportedVersionError,
)
from .models import HWPHeader, HWPVersion, Record
from .record import decode_stream
from .utils import section_number

logger = logging.getLogger(__name__)

_SECTION_RE = re.compile(rf"^{SECTION_PREFIX}(\d+)$", re.IGNORECASE)


def parse_file_header(data: bytes) -> HWPHeader:
    """
    FileHeader 스트림 해석

    구조:
    - offset 0-31: 시그니처 "HWP Document File" (NUL 패딩)
    - offset 32-35: 버전 (revision, build, minor, major 순 1바이트씩)
    - offset 36-39: 속성 플래그
    - offset 40-43: 라이선스 플래그
    - offset 44-47: 암호화 버전

    Raises:
        InvalidSignatureError: 시그니처 불일치
        ParseError: 헤더 길이 부족
        UnsupportedVersionError: 지원 범위 밖 버전
    """
    if data[:len(HWP_SIGNATURE)] != HWP_SIGNATURE:
        raise InvalidSignatureError("유효한 HWP 5.x 파일이 아님: FileHeader 시그니처 불일치")

    if len(data) < 40:
        raise ParseError(f"FileHeader 길이 부족 ({len(data)}바이트)")

    version_bytes = data[32:36]
    version = HWPVersion(
        major=version_bytes[3],
        minor=version_bytes[2],
        build=version_bytes[1],
        revision=version_bytes[0],
    )
    if not MIN_SUPPORTED_VERSION <= version.as_tuple() < MAX_SUPPORTED_VERSION:
        raise UnsupportedVersionError(f"지원하지 않는 HWP 버전: {version}")

    return HWPHeader(
        signature=data[:32].rstrip(b"\x00").decode("ascii", errors="replace"),
        version=version,
        flags=int.from_bytes(data[36:40], "little"),
        license_flags=int.from_bytes(data[40:44], "little") if len(data) >= 44 else 0,
        encrypt_version=int.from_bytes(data[44:48], "little") if len(data) >= 48 else 0,
    )


class HWPReader:
    """HWP 5.x 문서 읽기 클래스"""

    def __init__(self, data: bytes, filepath: str = ""):
        """
        Compound 컨테이너와 FileHeader 해석

        Args:
            data: 파일 전체 바이트
            filepath: 로그/오류 메시지용 경로

        Raises:
            ParseError: 컨테이너 구조 오류
            StreamNotFoundError: FileHeader 없음
            InvalidSignatureError, UnsupportedVersionError: FileHeader 오류
        """
        self.filepath = filepath
        self.container = CompoundFile(data)
        self.header = parse_file_header(self.container.read_stream(STREAM_FILE_HEADER))
        logger.debug(
            "%s: HWP %s, flags=0x%08X", filepath, self.header.version, self.header.flags,
        )

    def check_access(self) -> None:
        """
        본문 접근 가능 여부 확인 (복호화 미지원)

        Raises:
            PasswordProtectedError: 암호/배포용/DRM 문서
        """
        header = self.header
        if header.password_protected:
            raise PasswordProtectedError("암호가 설정된 HWP 문서는 지원하지 않음")
        if header.distribution:
            raise PasswordProtectedError("배포용 HWP 문서는 지원하지 않음")
        if header.encrypted:
            raise PasswordProtectedError("DRM/인증서 암호화된 HWP 문서는 지원하지 않음")

    def list_streams(self) -> list[str]:
        """OLE 스트림 목록"""
        return self.container.list_streams()

    def has_stream(self, name: str) -> bool:
        """스트림 존재 여부"""
        return self.container.exists(name)

    def open_stream(self, name: str) -> bytes:
        """스트림 원본 바이트"""
        return self.container.read_stream(name)

    def read_records(self, name: str) -> list[Record]:
        """스트림을 (압축 해제 후) 레코드 목록으로 읽기"""
        return decode_stream(self.open_stream(name), self.header.compressed, name)

    def section_names(self) -> list[str]:
        """
        BodyText 섹션 스트림 이름 (번호 순)

        Raises:
            StreamNotFoundError: BodyText/Section0 없음
        """
        prefix = STREAM_BODY_TEXT + "/"
        names = []
        for path in self.container.list_streams():
            if not path.lower().startswith(prefix.lower()):
                continue
            leaf = path[len(prefix):]
            if _SECTION_RE.match(leaf):
                names.append(path)

        names.sort(key=section_number)
        if not names or section_number(names[0]) != 0:
            raise StreamNotFoundError(
                f"본문 스트림이 존재하지 않음: {STREAM_BODY_TEXT}/{SECTION_PREFIX}0"
            )
        return names

    def iter_sections(self) -> Iterator[tuple[int, str, list[Record]]]:
        """
        BodyText 섹션 순회

        Yields:
            (섹션 번호, 스트림 이름, 레코드 목록)
        """
        for name in self.section_names():
            yield section_number(name), name, self.read_records(name)
