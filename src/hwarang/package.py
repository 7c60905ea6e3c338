"""HWPX ZIP 패키지 읽기

zipfile로 중앙 디렉토리를 읽어 파트 이름 색인을 만들고,
파트를 요청받을 때 압축을 해제한다. HWPX가 쓰는 방식(stored, deflate)만 허용한다.
"""

import io
import logging
import zipfile
import zlib

from .errors import HwpxError

logger = logging.getLogger(__name__)

_FLAG_ENCRYPTED = 0x0001
_SUPPORTED_METHODS = (zipfile.ZIP_STORED, zipfile.ZIP_DEFLATED)

# 손상된 ZIP에서 zipfile이 내는 예외
_ZIP_ERRORS = (zipfile.BadZipFile, zlib.error, EOFError, OSError, ValueError, NotImplementedError)


class ZipPackage:
    """메모리 상의 ZIP 패키지 읽기 클래스"""

    def __init__(self, data: bytes):
        """
        중앙 디렉토리 색인 생성

        Args:
            data: 파일 전체 바이트

        Raises:
            HwpxError: 중앙 디렉토리 없음/손상, 분할(멀티 디스크) ZIP
        """
        try:
            self._zip = zipfile.ZipFile(io.BytesIO(data))
        except _ZIP_ERRORS as e:
            raise HwpxError(f"ZIP 중앙 디렉토리 해석 실패: {e}") from e

        for info in self._zip.infolist():
            if info.volume != 0:
                raise HwpxError(f"분할(멀티 디스크) ZIP은 지원하지 않음: {info.filename}")

        logger.debug("ZIP 중앙 디렉토리: %d개 엔트리", len(self._zip.infolist()))

    def names(self) -> list[str]:
        """파트 이름 목록 (중앙 디렉토리 순서)"""
        return list(dict.fromkeys(info.filename for info in self._zip.infolist()))

    def has_part(self, name: str) -> bool:
        return name in self._zip.NameToInfo

    def read_part(self, name: str) -> bytes:
        """
        파트 압축 해제 후 반환

        Args:
            name: 파트 이름 (예: "Contents/section0.xml")

        Raises:
            HwpxError: 파트 없음, 지원하지 않는 압축 방식,
                암호화된 파트, 압축 해제 실패, CRC 불일치
        """
        try:
            info = self._zip.getinfo(name)
        except KeyError:
            raise HwpxError(f"HWPX 파트가 존재하지 않음: {name}") from None

        if info.flag_bits & _FLAG_ENCRYPTED:
            raise HwpxError(f"암호화된 HWPX 파트는 지원하지 않음: {name}")
        if info.compress_type not in _SUPPORTED_METHODS:
            raise HwpxError(f"지원하지 않는 압축 방식 {info.compress_type}: {name}")

        try:
            content = self._zip.read(info)
        except RuntimeError as e:
            raise HwpxError(f"암호화된 HWPX 파트는 지원하지 않음: {name}") from e
        except _ZIP_ERRORS as e:
            raise HwpxError(f"파트 읽기 실패 ({name}): {e}") from e

        if len(content) != info.file_size:
            raise HwpxError(
                f"파트 크기 불일치 ({name}): 선언 {info.file_size}, 실제 {len(content)}"
            )
        return content
