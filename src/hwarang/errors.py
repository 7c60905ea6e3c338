"""HWP 추출 오류 분류

모든 오류는 하나의 루트(HwarangError)를 공유하며,
안정적인 ``kind`` 식별자로 구분된다.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """오류 종류 (값은 외부에 노출되는 안정적인 이름)"""
    FILE = "FileError"
    UNSUPPORTED_FORMAT = "UnsupportedFormatError"
    INVALID_SIGNATURE = "InvalidSignatureError"
    UNSUPPORTED_VERSION = "UnsupportedVersionError"
    PASSWORD_PROTECTED = "PasswordProtectedError"
    STREAM_NOT_FOUND = "StreamNotFoundError"
    INVALID_RECORD_HEADER = "InvalidRecordHeaderError"
    DECOMPRESS_FAILED = "DecompressFailedError"
    DECRYPT_FAILED = "DecryptFailedError"
    PARSE = "ParseError"
    HWPX = "HwpxError"


class HwarangError(Exception):
    """HWP 추출 오류"""

    kind: ErrorKind = ErrorKind.PARSE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class FileError(HwarangError):
    """파일 입출력 오류 (없음, 읽기 불가, 권한)"""
    kind = ErrorKind.FILE


class UnsupportedFormatError(HwarangError):
    """알 수 없는 파일 형식"""
    kind = ErrorKind.UNSUPPORTED_FORMAT


class InvalidSignatureError(HwarangError):
    """컨테이너는 맞으나 HWP 시그니처 불일치"""
    kind = ErrorKind.INVALID_SIGNATURE


class UnsupportedVersionError(HwarangError):
    """지원 범위를 벗어난 문서 버전"""
    kind = ErrorKind.UNSUPPORTED_VERSION


class PasswordProtectedError(HwarangError):
    """암호/배포용/DRM 문서"""
    kind = ErrorKind.PASSWORD_PROTECTED


class StreamNotFoundError(HwarangError):
    """필요한 스트림 없음"""
    kind = ErrorKind.STREAM_NOT_FOUND


class InvalidRecordHeaderError(HwarangError):
    """레코드 프레이밍 오류"""
    kind = ErrorKind.INVALID_RECORD_HEADER


class DecompressFailedError(HwarangError):
    """압축 해제 실패"""
    kind = ErrorKind.DECOMPRESS_FAILED


class DecryptFailedError(HwarangError):
    """암호화된 스트림 복호화 실패"""
    kind = ErrorKind.DECRYPT_FAILED


class ParseError(HwarangError):
    """
    구조 오류

    - 컨테이너 손상 (헤더, FAT/DIFAT, 디렉토리, 섹터 체인)
    - 레코드 레벨 건너뜀: level은 직전 레코드 level + 1 (현재 조상 스택 깊이)을 넘을 수 없음
    - PARA_TEXT의 상위 레코드가 PARA_HEADER가 아님
    """
    kind = ErrorKind.PARSE


class HwpxError(HwarangError):
    """HWPX(ZIP/XML) 처리 오류"""
    kind = ErrorKind.HWPX


_ERROR_CLASSES: dict[ErrorKind, type[HwarangError]] = {
    cls.kind: cls
    for cls in (
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
}


def error_for_kind(kind: ErrorKind | str, message: str) -> HwarangError:
    """
    kind로부터 오류 객체 재구성

    Args:
        kind: ErrorKind 또는 그 값 (예: "FileError")
        message: 오류 메시지

    Returns:
        해당 kind의 HwarangError 하위 클래스 인스턴스
    """
    return _ERROR_CLASSES[ErrorKind(kind)](message)
