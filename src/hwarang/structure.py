"""HWP 5.x 본문 구조 조립

레코드의 level 필드로 암묵적인 트리를 복원한다.
레코드는 평탄한 목록 그대로 두고, 순회 중에만 레벨별 조상 스택을 유지한다.

    Level 0: PARA_HEADER          (단락)
    Level 1:   PARA_TEXT          (단락 텍스트)
    Level 1:   CTRL_HEADER "tbl " (표)
    Level 2:     LIST_HEADER      (셀)
    Level 2:     PARA_HEADER      (셀 단락)
    Level 3:       PARA_TEXT
"""

import logging
import struct
from typing import Iterable

from .constants import (
    HWPTAG_PARA_HEADER,
    HWPTAG_PARA_TEXT,
    DEFAULT_ENCODING,
    CTRL_CHAR_LINE_BREAK,
    CTRL_CHAR_PARA_BREAK,
    CTRL_CHAR_TAB,
    CTRL_CHAR_HYPHEN,
    CTRL_CHAR_NBSPACE,
    CTRL_CHAR_FWSPACE,
    CTRL_CHAR_WIDTH,
    EXTENDED_CTRL_CHARS,
)
from .errors import ParseError
from .models import Record, Section

logger = logging.getLogger(__name__)

# 1글자 크기 제어 문자 → 대체 텍스트
_CHAR_CONTROLS = {
    CTRL_CHAR_LINE_BREAK: "\n",
    CTRL_CHAR_HYPHEN: "-",
    CTRL_CHAR_NBSPACE: " ",
    CTRL_CHAR_FWSPACE: " ",
}


def decode_para_text(data: bytes) -> str:
    """
    PARA_TEXT 레코드 디코딩

    HWP 텍스트는 UTF-16LE로 인코딩되며,
    제어 문자(0x0000-0x001F)는 특수 의미를 가짐:
    - 0x0A 줄바꿈 → "\\n"
    - 0x0D 단락 끝 → 출력 없음
    - 0x09 탭 (8글자 인라인 컨트롤) → "\\t"
    - 그 밖의 인라인/확장 컨트롤 (8글자) → 스킵
    """
    if not data:
        return ""

    # 홀수 바이트는 마지막 1바이트 무시
    count = len(data) // 2
    units = struct.unpack(f"<{count}H", data[:count * 2])

    result: list[str] = []
    run_start: int | None = None

    def flush(end: int) -> None:
        # 일반 문자 구간은 한 번에 디코딩 (서로게이트 쌍 보존)
        if run_start is not None:
            chunk = data[run_start * 2:end * 2]
            result.append(chunk.decode(DEFAULT_ENCODING, errors="replace"))

    i = 0
    while i < count:
        code = units[i]

        if code >= 0x0020:
            if run_start is None:
                run_start = i
            i += 1
            continue

        flush(i)
        run_start = None
        if code == CTRL_CHAR_TAB:
            result.append("\t")
            i += CTRL_CHAR_WIDTH
        elif code in EXTENDED_CTRL_CHARS:
            i += CTRL_CHAR_WIDTH
        else:
            replacement = _CHAR_CONTROLS.get(code)
            if replacement:
                result.append(replacement)
            i += 1

    flush(count)
    return "".join(result)


class StructureParser:
    """HWP 5.x 본문 조립기

    레코드 순서대로 한 번 순회하며 레벨 스택으로 부모를 찾는다.
    """

    def parse_section(
        self,
        section_idx: int,
        records: Iterable[Record],
        name: str = "",
    ) -> Section:
        """
        섹션 레코드에서 단락 텍스트 복원

        Args:
            section_idx: 섹션 번호
            records: 섹션 스트림의 레코드 (스트림 순서)
            name: 섹션 스트림 이름

        Returns:
            Section 객체

        Raises:
            ParseError: level이 직전 레코드 level + 1을 넘음 (레벨 건너뜀),
                PARA_TEXT의 부모가 단락(PARA_HEADER)이 아님
        """
        records = list(records)
        section = Section(index=section_idx, name=name)

        # stack[level] = 해당 레벨의 현재 조상 레코드 번호
        stack: list[int] = []
        # PARA_HEADER 레코드 번호 → section.paragraphs 위치
        para_slots: dict[int, int] = {}
        para_parts: list[list[str]] = []

        for idx, record in enumerate(records):
            level = record.header.level

            if level > len(stack):
                raise ParseError(
                    f"레코드 레벨 건너뜀 ({name or section_idx}): "
                    f"{record.header.tag_name} level {level}, "
                    f"이전 최대 허용 level {len(stack)} (offset {record.offset})"
                )
            del stack[level:]
            stack.append(idx)

            tag_id = record.header.tag_id
            if tag_id == HWPTAG_PARA_HEADER:
                para_slots[idx] = len(para_parts)
                para_parts.append([])

            elif tag_id == HWPTAG_PARA_TEXT:
                parent = stack[level - 1] if level > 0 else None
                if parent is None or parent not in para_slots:
                    raise ParseError(
                        f"PARA_TEXT의 상위 레코드가 PARA_HEADER가 아님 "
                        f"({name or section_idx}, offset {record.offset})"
                    )
                para_parts[para_slots[parent]].append(decode_para_text(record.data))

        section.paragraphs = ["".join(parts) for parts in para_parts]
        logger.debug(
            "섹션 %s: 레코드 %d개, 단락 %d개",
            name or section_idx, len(records), len(section.paragraphs),
        )
        return section


def extract_document(sections: Iterable[Section]) -> str:
    """섹션 텍스트를 섹션 번호 순서대로 연결"""
    ordered = sorted(sections, key=lambda s: s.index)
    return "\n".join(s.text for s in ordered)
