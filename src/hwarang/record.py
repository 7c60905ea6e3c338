"""HWP 레코드 구조 파싱"""

import logging
import zlib
from typing import Iterator

from .constants import (
    HWPTAG_DISTRIBUTE_DOC_DATA,
    DISTRIBUTE_DOC_DATA_SIZE,
    RECORD_TAG_MASK,
    RECORD_LEVEL_MASK,
    RECORD_LEVEL_SHIFT,
    RECORD_SIZE_SHIFT,
    RECORD_SIZE_EXTENDED,
)
from .errors import (
    DecompressFailedError,
    DecryptFailedError,
    InvalidRecordHeaderError,
)
from .models import Record, RecordHeader

logger = logging.getLogger(__name__)


def decompress_stream(data: bytes) -> bytes:
    """
    raw deflate 스트림 압축 해제

    HWP는 zlib 헤더 없는 deflate(-15)를 사용

    Raises:
        DecompressFailedError: 잘못된 deflate 데이터 또는 중간에 끊긴 스트림
    """
    decompressor = zlib.decompressobj(-zlib.MAX_WBITS)
    try:
        result = decompressor.decompress(data) + decompressor.flush()
    except zlib.error as e:
        raise DecompressFailedError(f"압축 해제 실패: {e}") from e

    if not decompressor.eof:
        raise DecompressFailedError("압축 해제 실패: deflate 스트림이 중간에 끝남")

    if decompressor.unused_data:
        logger.debug("deflate 스트림 뒤 %d바이트 무시", len(decompressor.unused_data))

    return result


def detect_encryption(data: bytes) -> bool:
    """
    스트림이 배포용 문서 방식으로 암호화되었는지 확인

    암호화된 스트림은 압축/암호화되지 않은 DISTRIBUTE_DOC_DATA 레코드
    (256바이트)로 시작한다.
    """
    if len(data) < 4:
        return False
    header_val = int.from_bytes(data[:4], "little")
    tag_id = header_val & RECORD_TAG_MASK
    size = (header_val >> RECORD_SIZE_SHIFT) & RECORD_SIZE_EXTENDED
    return tag_id == HWPTAG_DISTRIBUTE_DOC_DATA and size == DISTRIBUTE_DOC_DATA_SIZE


class RecordParser:
    """HWP 레코드 파서"""

    @staticmethod
    def parse_header(data: bytes, offset: int = 0) -> tuple[RecordHeader, int]:
        """
        레코드 헤더 파싱

        HWP 레코드 헤더 구조 (4바이트):
        - bits 0-9: TagID (10비트)
        - bits 10-19: Level (10비트)
        - bits 20-31: Size (12비트)

        Size가 0xFFF(4095)이면 추가 4바이트에 실제 크기 저장

        Args:
            data: 바이트 데이터
            offset: 시작 오프셋

        Returns:
            (RecordHeader, 다음 오프셋)

        Raises:
            InvalidRecordHeaderError: 헤더 바이트 부족
        """
        if len(data) < offset + 4:
            raise InvalidRecordHeaderError(
                f"레코드 헤더 잘림 (offset {offset}, 남은 {len(data) - offset}바이트)"
            )

        # 4바이트 리틀 엔디안
        header_val = int.from_bytes(data[offset:offset + 4], "little")

        tag_id = header_val & RECORD_TAG_MASK
        level = (header_val >> RECORD_LEVEL_SHIFT) & RECORD_LEVEL_MASK
        size = (header_val >> RECORD_SIZE_SHIFT) & RECORD_SIZE_EXTENDED

        next_offset = offset + 4

        # 확장 크기 (Size == 0xFFF)
        if size == RECORD_SIZE_EXTENDED:
            if len(data) < next_offset + 4:
                raise InvalidRecordHeaderError(
                    f"확장 크기 필드 잘림 (offset {offset})"
                )
            size = int.from_bytes(data[next_offset:next_offset + 4], "little")
            next_offset += 4

        return RecordHeader(tag_id=tag_id, level=level, size=size), next_offset

    @classmethod
    def iter_records(cls, data: bytes) -> Iterator[Record]:
        """
        스트림 데이터에서 레코드 순회

        Args:
            data: 압축 해제된 스트림 데이터

        Yields:
            Record 객체

        Raises:
            InvalidRecordHeaderError: 페이로드가 버퍼 끝을 넘어감
        """
        offset = 0
        data_len = len(data)

        while offset < data_len:
            header, next_offset = cls.parse_header(data, offset)

            record_end = next_offset + header.size
            if record_end > data_len:
                raise InvalidRecordHeaderError(
                    f"레코드 크기가 버퍼를 넘어감 ({header.tag_name}, offset {offset}, "
                    f"크기 {header.size}, 남은 {data_len - next_offset}바이트)"
                )

            yield Record(header=header, data=data[next_offset:record_end], offset=offset)

            offset = record_end


def decode_stream(data: bytes, compressed: bool, name: str = "") -> list[Record]:
    """
    스트림 원본 바이트를 레코드 목록으로 변환

    Args:
        data: 스트림 원본 바이트
        compressed: FileHeader 압축 플래그
        name: 로그/오류 메시지용 스트림 이름

    Returns:
        Record 목록 (스트림 순서)

    Raises:
        DecryptFailedError: 암호화된 스트림
        DecompressFailedError: 압축 해제 실패
        InvalidRecordHeaderError: 레코드 구조 오류
    """
    if detect_encryption(data):
        raise DecryptFailedError(f"암호화된 스트림은 복호화할 수 없음: {name}")

    if compressed:
        data = decompress_stream(data)

    records = list(RecordParser.iter_records(data))
    logger.debug("%s: %d바이트, %d개 레코드", name, len(data), len(records))
    return records
