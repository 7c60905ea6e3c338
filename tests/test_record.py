"""HWP 레코드 파싱 테스트"""

import zlib

import pytest

from hwarang.constants import (
    HWPTAG_PARA_HEADER,
    HWPTAG_PARA_TEXT,
    HWPTAG_DISTRIBUTE_DOC_DATA,
)
from hwarang.errors import (
    DecompressFailedError,
    DecryptFailedError,
    InvalidRecordHeaderError,
)
from hwarang.record import (
    RecordParser,
    decode_stream,
    decompress_stream,
    detect_encryption,
)

from hwp_fixtures import compress, make_record_bytes


class TestParseHeader:
    """레코드 헤더 파싱"""

    def test_basic_header(self):
        """태그/레벨/크기 비트 분리"""
        data = make_record_bytes(HWPTAG_PARA_TEXT, 3, b"\x00" * 10)
        header, next_offset = RecordParser.parse_header(data)
        assert header.tag_id == HWPTAG_PARA_TEXT
        assert header.level == 3
        assert header.size == 10
        assert next_offset == 4

    def test_extended_size(self):
        """크기 필드 0xFFF → 다음 4바이트가 실제 크기"""
        payload = b"\x01" * 5000
        data = make_record_bytes(HWPTAG_PARA_TEXT, 1, payload)
        header, next_offset = RecordParser.parse_header(data)
        assert header.size == 5000
        assert next_offset == 8

    def test_exact_0xfff_uses_extended(self):
        """크기 4095는 확장 크기로 기록됨"""
        data = make_record_bytes(HWPTAG_PARA_TEXT, 0, b"\x00" * 0xFFF)
        records = list(RecordParser.iter_records(data))
        assert len(records) == 1
        assert records[0].header.size == 0xFFF

    def test_truncated_header(self):
        """4바이트 미만 헤더"""
        with pytest.raises(InvalidRecordHeaderError):
            RecordParser.parse_header(b"\x42\x00")

    def test_truncated_extended_size(self):
        """확장 크기 필드가 잘림"""
        header_val = HWPTAG_PARA_TEXT | (0xFFF << 20)
        with pytest.raises(InvalidRecordHeaderError):
            RecordParser.parse_header(header_val.to_bytes(4, "little") + b"\x00\x00")

    def test_tag_name(self):
        header, _ = RecordParser.parse_header(make_record_bytes(HWPTAG_PARA_HEADER, 0, b""))
        assert header.tag_name == "PARA_HEADER"
        header, _ = RecordParser.parse_header(make_record_bytes(0x3FF, 0, b""))
        assert header.tag_name == "TAG_03FF"


class TestIterRecords:
    """레코드 순회"""

    def test_sequence(self):
        """레코드 순서와 오프셋 보존"""
        data = (
            make_record_bytes(HWPTAG_PARA_HEADER, 0, b"\x00" * 22)
            + make_record_bytes(HWPTAG_PARA_TEXT, 1, "가".encode("utf-16-le"))
        )
        records = list(RecordParser.iter_records(data))
        assert [r.header.tag_id for r in records] == [HWPTAG_PARA_HEADER, HWPTAG_PARA_TEXT]
        assert records[0].offset == 0
        assert records[1].offset == 26
        assert records[1].data == "가".encode("utf-16-le")

    def test_empty(self):
        assert list(RecordParser.iter_records(b"")) == []

    def test_payload_overflow(self):
        """선언 크기가 버퍼 끝을 넘어감"""
        data = make_record_bytes(HWPTAG_PARA_TEXT, 0, b"\x00" * 10)[:-3]
        with pytest.raises(InvalidRecordHeaderError):
            list(RecordParser.iter_records(data))

    def test_trailing_garbage(self):
        """레코드 뒤 2바이트 (헤더 불완전)"""
        data = make_record_bytes(HWPTAG_PARA_TEXT, 0, b"\x00\x00") + b"\x01\x02"
        with pytest.raises(InvalidRecordHeaderError):
            list(RecordParser.iter_records(data))


class TestDecodeStream:
    """스트림 해제 및 레코드 변환"""

    def test_compressed(self):
        raw = make_record_bytes(HWPTAG_PARA_HEADER, 0, b"\x00" * 22)
        records = decode_stream(compress(raw), compressed=True, name="Section0")
        assert len(records) == 1

    def test_uncompressed(self):
        raw = make_record_bytes(HWPTAG_PARA_HEADER, 0, b"\x00" * 22)
        records = decode_stream(raw, compressed=False)
        assert records[0].header.tag_id == HWPTAG_PARA_HEADER

    def test_invalid_deflate(self):
        """잘못된 deflate 데이터"""
        with pytest.raises(DecompressFailedError):
            decompress_stream(b"\xff\xff\xff\xff not deflate")

    def test_zlib_wrapped_data_rejected(self):
        """zlib 헤더가 붙은 데이터는 raw deflate가 아님"""
        with pytest.raises(DecompressFailedError):
            decompress_stream(zlib.compress(b"hello" * 100))

    def test_truncated_deflate(self):
        """중간에 끊긴 deflate 스트림"""
        data = compress(bytes(range(256)) * 40)
        with pytest.raises(DecompressFailedError):
            decompress_stream(data[:len(data) // 2])

    def test_encrypted_stream(self):
        """DISTRIBUTE_DOC_DATA로 시작하는 스트림"""
        data = make_record_bytes(HWPTAG_DISTRIBUTE_DOC_DATA, 0, b"\x00" * 256) + b"\x00" * 64
        assert detect_encryption(data)
        with pytest.raises(DecryptFailedError):
            decode_stream(data, compressed=True, name="Section0")

    def test_not_encrypted(self):
        """일반 레코드는 암호화로 보지 않음"""
        data = make_record_bytes(HWPTAG_DISTRIBUTE_DOC_DATA, 0, b"\x00" * 10)
        assert not detect_encryption(data)
        assert not detect_encryption(b"\x00")
