"""HWPX 패키지 / XML 텍스트 추출 테스트"""

import io
import struct
import warnings
import zipfile
import xml.etree.ElementTree as ET

import pytest

from hwarang.errors import HwpxError
from hwarang.hwpx import (
    discover_sections,
    extract_hwpx_text,
    extract_section_text,
    find_rootfile,
)
from hwarang.package import ZipPackage
from hwarang.utils import get_local_tag, section_number, sort_section_files

from hwp_fixtures import HP_NS, HS_NS, build_hwpx, build_zip, section_xml


class TestSectionOrdering:
    """섹션 파일 숫자 정렬 테스트"""

    def test_numeric_sort_double_digit(self):
        """두 자릿수 숫자 정렬 (렉시코그래픽 vs 숫자)"""
        files = ["section10.xml", "section2.xml", "section1.xml"]
        assert sort_section_files(files) == ["section1.xml", "section2.xml", "section10.xml"]

    def test_numeric_sort_with_path(self):
        """경로가 포함된 파일명 정렬"""
        files = [
            "Contents/section10.xml",
            "Contents/section2.xml",
            "Contents/section1.xml",
        ]
        assert sort_section_files(files) == [
            "Contents/section1.xml",
            "Contents/section2.xml",
            "Contents/section10.xml",
        ]

    def test_numeric_sort_mixed_case(self):
        """대소문자 혼합"""
        files = ["Section2.xml", "section1.xml", "SECTION10.xml"]
        assert sort_section_files(files) == ["section1.xml", "Section2.xml", "SECTION10.xml"]

    def test_section_number(self):
        assert section_number("/BodyText/Section3") == 3
        assert section_number("Contents/section10.xml") == 10
        assert section_number("Contents/header.xml") == -1


class TestLocalTag:
    """네임스페이스 제거"""

    def test_namespaced(self):
        elem = ET.Element(f"{{{HP_NS}}}lineBreak")
        assert get_local_tag(elem) == "linebreak"

    def test_plain(self):
        assert get_local_tag(ET.Element("P")) == "p"

    def test_comment(self):
        assert get_local_tag(ET.Comment("주석")) == ""


class TestZipPackage:
    """ZIP 중앙 디렉토리 읽기"""

    def test_read_parts(self):
        data = build_zip({"a.txt": "가나다", "b/c.xml": "<x/>"})
        package = ZipPackage(data)
        assert package.names() == ["a.txt", "b/c.xml"]
        assert package.read_part("a.txt") == "가나다".encode("utf-8")
        assert package.read_part("b/c.xml") == b"<x/>"

    def test_stored(self):
        data = build_zip({"a.txt": "stored"}, method=zipfile.ZIP_STORED)
        assert ZipPackage(data).read_part("a.txt") == b"stored"

    def test_missing_part(self):
        package = ZipPackage(build_zip({"a.txt": "x"}))
        assert not package.has_part("b.txt")
        with pytest.raises(HwpxError):
            package.read_part("b.txt")

    def test_comment(self):
        """긴 ZIP 주석 뒤의 EOCD 탐색"""
        data = build_hwpx(comment=b"c" * 60000)
        package = ZipPackage(data)
        assert package.has_part("mimetype")
        assert package.read_part("mimetype") == b"application/hwp+zip"

    def test_no_eocd(self):
        with pytest.raises(HwpxError):
            ZipPackage(b"PK\x03\x04" + b"\x00" * 100)

    def test_crc_mismatch(self):
        """내용이 바뀌어 CRC가 맞지 않음"""
        data = bytearray(build_zip({"a.txt": "abcdef"}, method=zipfile.ZIP_STORED))
        pos = data.find(b"abcdef")
        data[pos] = ord("X")
        with pytest.raises(HwpxError):
            ZipPackage(bytes(data)).read_part("a.txt")

    def test_corrupt_deflate(self):
        data = bytearray(build_zip({"a.txt": "hello world " * 50}))
        # 로컬 헤더 뒤 압축 데이터 첫 바이트를 잘못된 블록 타입으로
        name_len, extra_len = struct.unpack_from("<HH", data, 26)
        data[30 + name_len + extra_len] = 0xFF
        with pytest.raises(HwpxError):
            ZipPackage(bytes(data)).read_part("a.txt")

    def test_unsupported_method(self):
        """deflate/stored 외 압축 방식"""
        data = bytearray(build_zip({"a.txt": "abc"}, method=zipfile.ZIP_STORED))
        cd = data.find(b"PK\x01\x02")
        struct.pack_into("<H", data, cd + 10, 12)   # bzip2
        with pytest.raises(HwpxError):
            ZipPackage(bytes(data)).read_part("a.txt")

    def test_bad_central_signature(self):
        """중앙 디렉토리 엔트리 시그니처 손상"""
        data = bytearray(build_zip({"a.txt": "abc"}))
        cd = data.find(b"PK\x01\x02")
        data[cd + 3] = 0x09
        with pytest.raises(HwpxError):
            ZipPackage(bytes(data))

    def test_multi_disk_rejected(self):
        """다른 디스크에서 시작하는 엔트리"""
        data = bytearray(build_zip({"a.txt": "abc"}))
        cd = data.find(b"PK\x01\x02")
        struct.pack_into("<H", data, cd + 34, 1)
        with pytest.raises(HwpxError):
            ZipPackage(bytes(data))

    def test_encrypted_part(self):
        """암호화 플래그가 켜진 파트"""
        data = bytearray(build_zip({"a.txt": "abc"}, method=zipfile.ZIP_STORED))
        cd = data.find(b"PK\x01\x02")
        flags = struct.unpack_from("<H", data, cd + 8)[0]
        struct.pack_into("<H", data, cd + 8, flags | 0x1)
        with pytest.raises(HwpxError):
            ZipPackage(bytes(data)).read_part("a.txt")

    def test_duplicate_names_listed_once(self):
        buffer = io.BytesIO()
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            with zipfile.ZipFile(buffer, "w") as zf:
                zf.writestr("a.txt", "first")
                zf.writestr("a.txt", "second")
        package = ZipPackage(buffer.getvalue())
        assert package.names() == ["a.txt"]
        assert package.read_part("a.txt") == b"second"


class TestSectionText:
    """섹션 XML 텍스트 추출"""

    def test_paragraphs(self):
        xml = section_xml(["첫 단락", "둘째 단락"])
        assert extract_section_text(xml.encode("utf-8")) == "첫 단락\n둘째 단락"

    def test_line_break_and_tab(self):
        """<hp:lineBreak/>, <hp:tab/> 마커와 tail 텍스트"""
        xml = (
            f'<hs:sec xmlns:hs="{HS_NS}" xmlns:hp="{HP_NS}"><hp:p><hp:run>'
            "<hp:t>앞<hp:lineBreak/>뒤<hp:tab/>끝</hp:t>"
            "</hp:run></hp:p></hs:sec>"
        )
        assert extract_section_text(xml.encode("utf-8")) == "앞\n뒤\t끝"

    def test_multiple_runs(self):
        """한 단락의 여러 run은 이어붙임"""
        xml = (
            f'<hs:sec xmlns:hs="{HS_NS}" xmlns:hp="{HP_NS}"><hp:p>'
            "<hp:run><hp:t>가나</hp:t></hp:run><hp:run><hp:t>다라</hp:t></hp:run>"
            "</hp:p></hs:sec>"
        )
        assert extract_section_text(xml.encode("utf-8")) == "가나다라"

    def test_table_cells(self):
        """표 셀의 단락은 표를 가진 단락 뒤에"""
        xml = (
            f'<hs:sec xmlns:hs="{HS_NS}" xmlns:hp="{HP_NS}">'
            "<hp:p><hp:run><hp:t>표 앞</hp:t>"
            "<hp:tbl><hp:tr>"
            "<hp:tc><hp:subList><hp:p><hp:run><hp:t>셀1</hp:t></hp:run></hp:p></hp:subList></hp:tc>"
            "<hp:tc><hp:subList><hp:p><hp:run><hp:t>셀2</hp:t></hp:run></hp:p></hp:subList></hp:tc>"
            "</hp:tr></hp:tbl></hp:run></hp:p>"
            "<hp:p><hp:run><hp:t>표 뒤</hp:t></hp:run></hp:p>"
            "</hs:sec>"
        )
        assert extract_section_text(xml.encode("utf-8")) == "표 앞\n셀1\n셀2\n표 뒤"

    def test_empty_paragraph(self):
        xml = section_xml(["앞", "", "뒤"])
        assert extract_section_text(xml.encode("utf-8")) == "앞\n\n뒤"

    def test_escaped_text(self):
        xml = section_xml(["a < b & c"])
        assert extract_section_text(xml.encode("utf-8")) == "a < b & c"

    def test_malformed_xml(self):
        with pytest.raises(HwpxError):
            extract_section_text(b"<hs:sec><hp:p>")


class TestManifest:
    """manifest/spine 기반 섹션 순서"""

    def test_rootfile(self):
        assert find_rootfile(ZipPackage(build_hwpx())) == "Contents/content.hpf"

    def test_spine_order(self):
        """spine 순서가 파일 이름 순서보다 우선"""
        sections = [section_xml(["영"]), section_xml(["일"]), section_xml(["이"])]
        spine = ["Contents/section2.xml", "Contents/section0.xml", "Contents/section1.xml"]
        package = ZipPackage(build_hwpx(sections, spine=spine))
        assert discover_sections(package) == spine
        assert extract_hwpx_text(package) == "이\n영\n일"

    def test_numeric_order_without_spine(self):
        """spine에 섹션이 없으면 manifest 항목을 숫자 순으로"""
        sections = [section_xml([str(i)]) for i in range(11)]
        package = ZipPackage(build_hwpx(sections, spine=[]))
        names = discover_sections(package)
        assert names[1] == "Contents/section1.xml"
        assert names[2] == "Contents/section2.xml"
        assert names[-1] == "Contents/section10.xml"

    def test_missing_manifest(self):
        data = build_zip({"mimetype": "application/hwp+zip", "Contents/section0.xml": "<a/>"})
        with pytest.raises(HwpxError):
            discover_sections(ZipPackage(data))

    def test_missing_section_part(self):
        """manifest가 가리키는 섹션 파트가 없음"""
        package = ZipPackage(build_hwpx(
            parts={"Contents/content.hpf": (
                '<opf:package xmlns:opf="http://www.idpf.org/2007/opf/"><opf:manifest>'
                '<opf:item id="s0" href="Contents/section5.xml" media-type="application/xml"/>'
                "</opf:manifest></opf:package>"
            )},
        ))
        with pytest.raises(HwpxError):
            discover_sections(package)

    def test_relative_href(self):
        """content.hpf 기준 상대 경로 href"""
        package = ZipPackage(build_hwpx(
            parts={"Contents/content.hpf": (
                '<opf:package xmlns:opf="http://www.idpf.org/2007/opf/"><opf:manifest>'
                '<opf:item id="s0" href="section0.xml" media-type="application/xml"/>'
                '</opf:manifest><opf:spine><opf:itemref idref="s0"/></opf:spine></opf:package>'
            )},
        ))
        assert discover_sections(package) == ["Contents/section0.xml"]

    def test_full_text(self):
        assert extract_hwpx_text(ZipPackage(build_hwpx())) == "안녕하세요\nHWPX 문서입니다."
