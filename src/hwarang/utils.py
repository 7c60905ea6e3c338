"""HWP 파서 유틸리티"""

import re
import xml.etree.ElementTree as ET

_SECTION_NUM_RE = re.compile(r"section(\d+)(?:\.xml)?$", re.IGNORECASE)


def section_number(name: str) -> int:
    """
    이름에서 섹션 번호 추출

    "/BodyText/Section3" → 3, "Contents/section10.xml" → 10,
    숫자가 없으면 -1
    """
    match = _SECTION_NUM_RE.search(name)
    if match:
        return int(match.group(1))
    return -1


def is_section_name(name: str) -> bool:
    """섹션 스트림/파트 이름인지 확인"""
    return _SECTION_NUM_RE.search(name) is not None


def sort_section_files(files: list[str]) -> list[str]:
    """
    섹션 이름 숫자 기준 정렬

    sorted()는 "section10.xml"을 "section2.xml" 앞에 배치하므로
    파일명에서 숫자를 추출하여 정수로 정렬
    """
    return sorted(files, key=section_number)


def get_local_tag(element: ET.Element) -> str:
    """
    네임스페이스 제거한 로컬 태그명 추출

    예: "{http://example.com}p" → "p"
    """
    tag = element.tag
    if not isinstance(tag, str):
        # 주석/처리 지시문
        return ""
    if tag.startswith("{"):
        return tag.split("}", 1)[1].lower()
    return tag.lower()
