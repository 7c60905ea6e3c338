"""HWPX (XML 기반) 텍스트 추출

HWPX는 ZIP 압축된 XML 파일 모음:
- mimetype: "application/hwp+zip"
- META-INF/container.xml: 패키지 문서(content.hpf) 위치
- Contents/content.hpf: OPF manifest/spine (섹션 파트 목록과 순서)
- Contents/section*.xml: 본문

<hp:p>
  <hp:run><hp:t>텍스트1<hp:lineBreak/>텍스트2</hp:t></hp:run>
  <hp:run><hp:tbl>... <hp:tc><hp:subList><hp:p>셀</hp:p></hp:subList></hp:tc></hp:tbl></hp:run>
</hp:p>
"""

import logging
import posixpath
import xml.etree.ElementTree as ET

from .constants import (
    HWPX_PART_CONTAINER,
    HWPX_PART_CONTENT,
    HWPX_ROOTFILE_MEDIA_TYPE,
)
from .errors import HwpxError
from .package import ZipPackage
from .utils import get_local_tag, is_section_name, sort_section_files

logger = logging.getLogger(__name__)


def _parse_xml(content: bytes, name: str) -> ET.Element:
    try:
        return ET.fromstring(content)
    except ET.ParseError as e:
        raise HwpxError(f"XML 파싱 실패 ({name}): {e}") from e


# ============================================================================
# manifest / spine
# ============================================================================

def find_rootfile(package: ZipPackage) -> str:
    """
    META-INF/container.xml에서 패키지 문서(content.hpf) 경로 찾기

    container.xml이 없으면 기본 경로(Contents/content.hpf) 사용
    """
    if not package.has_part(HWPX_PART_CONTAINER):
        return HWPX_PART_CONTENT

    root = _parse_xml(package.read_part(HWPX_PART_CONTAINER), HWPX_PART_CONTAINER)
    fallback = None
    for elem in root.iter():
        if get_local_tag(elem) != "rootfile":
            continue
        full_path = elem.get("full-path")
        if not full_path:
            continue
        if elem.get("media-type") == HWPX_ROOTFILE_MEDIA_TYPE:
            return full_path
        if fallback is None and full_path.lower().endswith(".hpf"):
            fallback = full_path

    return fallback or HWPX_PART_CONTENT


def _resolve_href(package: ZipPackage, base_dir: str, href: str) -> str:
    """manifest href를 패키지 파트 이름으로 변환"""
    if package.has_part(href):
        return href
    joined = posixpath.normpath(posixpath.join(base_dir, href))
    if package.has_part(joined):
        return joined
    raise HwpxError(f"manifest에 있는 섹션 파트가 존재하지 않음: {href}")


def discover_sections(package: ZipPackage) -> list[str]:
    """
    manifest/spine을 읽어 섹션 파트 이름을 문서 순서대로 반환

    Raises:
        HwpxError: manifest 없음, 섹션 없음, 참조된 파트 없음
    """
    rootfile = find_rootfile(package)
    if not package.has_part(rootfile):
        raise HwpxError(f"HWPX manifest가 존재하지 않음: {rootfile}")

    root = _parse_xml(package.read_part(rootfile), rootfile)

    items: dict[str, str] = {}
    spine: list[str] = []
    for elem in root.iter():
        tag = get_local_tag(elem)
        if tag == "item" and elem.get("id") and elem.get("href"):
            items[elem.get("id")] = elem.get("href")
        elif tag == "itemref" and elem.get("idref"):
            spine.append(elem.get("idref"))

    hrefs = [items[ref] for ref in spine if ref in items and is_section_name(items[ref])]
    if not hrefs:
        # spine에 섹션이 없으면 manifest 항목을 번호 순으로
        hrefs = sort_section_files([h for h in items.values() if is_section_name(h)])

    if not hrefs:
        raise HwpxError(f"HWPX 섹션 파트가 없음: {rootfile}")

    base_dir = posixpath.dirname(rootfile)
    sections = [_resolve_href(package, base_dir, href) for href in hrefs]
    logger.debug("HWPX 섹션: %s", sections)
    return sections


# ============================================================================
# 섹션 텍스트
# ============================================================================

def _collect_t(element: ET.Element, parts: list[str]) -> None:
    """<t> 요소 텍스트 (줄바꿈/탭 마커 포함)"""
    if element.text:
        parts.append(element.text)
    for child in element:
        tag = get_local_tag(child)
        if tag == "linebreak":
            parts.append("\n")
        elif tag == "tab":
            parts.append("\t")
        if child.tail:
            parts.append(child.tail)


def _collect_inline(element: ET.Element, parts: list[str], paragraphs: list[str]) -> None:
    """단락 내부 요소 순회 (중첩 단락은 별도 단락으로)"""
    for child in element:
        tag = get_local_tag(child)
        if tag == "t":
            _collect_t(child, parts)
        elif tag == "p":
            _collect_paragraph(child, paragraphs)
        else:
            _collect_inline(child, parts, paragraphs)


def _collect_paragraph(element: ET.Element, paragraphs: list[str]) -> None:
    """
    단락 텍스트 수집

    부모 단락 자리를 먼저 확보하여, 표 셀 등 중첩 단락이
    부모 단락 뒤에 오도록 문서 순서를 유지
    """
    slot = len(paragraphs)
    paragraphs.append("")
    parts: list[str] = []
    _collect_inline(element, parts, paragraphs)
    paragraphs[slot] = "".join(parts)


def _collect_paragraphs(element: ET.Element, paragraphs: list[str]) -> None:
    for child in element:
        if get_local_tag(child) == "p":
            _collect_paragraph(child, paragraphs)
        else:
            _collect_paragraphs(child, paragraphs)


def extract_section_text(content: bytes, name: str = "section") -> str:
    """
    섹션 XML에서 단락 텍스트 추출

    Args:
        content: section*.xml 바이트
        name: 오류 메시지용 파트 이름

    Returns:
        단락을 줄바꿈으로 연결한 텍스트

    Raises:
        HwpxError: XML 파싱 실패
    """
    root = _parse_xml(content, name)
    paragraphs: list[str] = []
    if get_local_tag(root) == "p":
        _collect_paragraph(root, paragraphs)
    else:
        _collect_paragraphs(root, paragraphs)
    return "\n".join(paragraphs)


def extract_hwpx_text(package: ZipPackage) -> str:
    """
    HWPX 패키지 전체 텍스트 추출

    Raises:
        HwpxError: manifest/섹션/XML 오류
    """
    texts = []
    for name in discover_sections(package):
        texts.append(extract_section_text(package.read_part(name), name))
    return "\n".join(texts)
