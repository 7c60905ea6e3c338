"""Compound File (OLE2) 컨테이너 읽기

HWP 5.x 문서는 OLE2 Compound File 구조 안에 스트림을 저장한다.
헤더/FAT/DIFAT/디렉토리 해석은 olefile에 맡기고, 그 위에서
스트림마다 섹터 체인(FAT/Mini FAT)을 다시 따라가며 검증한다.
체인이 끝나지 않거나 순환하거나, 선언 크기와 길이가 맞지 않으면 구조 오류다.

구조 (v3 섹터 512바이트, v4 섹터 4096바이트):
- 헤더: 시그니처, 섹터 크기, FAT/디렉토리/Mini FAT/DIFAT 위치
- FAT: 섹터 번호 → 다음 섹터 번호 (109개 넘는 FAT 섹터는 DIFAT 체인)
- 디렉토리: 128바이트 엔트리, 형제는 red-black 트리, 자식은 child 링크
- Mini Stream: 4096바이트 미만 스트림을 64바이트 미니 섹터로 저장
"""

import io
import logging
import struct

import olefile

from .errors import ParseError, StreamNotFoundError
from .models import CompoundEntry

logger = logging.getLogger(__name__)

_KIND_NAMES = {
    olefile.STGTY_ROOT: "root",
    olefile.STGTY_STORAGE: "storage",
    olefile.STGTY_STREAM: "stream",
}

# olefile이 손상된 입력에서 내는 예외 (OleFileError는 OSError 하위)
_OLE_ERRORS = (OSError, struct.error, IndexError, ValueError)


def _ceil_div(a: int, b: int) -> int:
    return -(-a // b)


def _normalize_path(path: str) -> str:
    """스트림 경로 정규화 ("BodyText/Section0" → "/bodytext/section0")"""
    return "/" + path.replace("\\", "/").strip("/").lower()


class CompoundFile:
    """메모리 상의 Compound File 읽기 클래스"""

    def __init__(self, data: bytes):
        """
        Compound File 파싱

        Args:
            data: 파일 전체 바이트

        Raises:
            ParseError: 헤더/FAT/DIFAT/디렉토리/섹터 체인 구조 오류
        """
        self._data = data

        try:
            # 1536바이트 미만 bytes는 파일 이름으로 취급되므로 BytesIO로 감싼다
            self._ole = olefile.OleFileIO(
                io.BytesIO(data), raise_defects=olefile.DEFECT_INCORRECT
            )
        except RecursionError as e:
            raise ParseError("디렉토리 트리가 너무 깊음") from e
        except _OLE_ERRORS as e:
            raise ParseError(f"Compound 파일 구조 오류: {e}") from e

        ole = self._ole
        self.major_version = ole.dll_version
        self.sector_size = ole.sector_size
        self.mini_sector_size = ole.mini_sector_size
        self.mini_stream_cutoff = ole.minisectorcutoff

        self._fat = ole.fat
        self._walk_chain(ole.first_dir_sector, self._fat, "디렉토리")
        self._minifat = self._load_minifat()

        self._entries: dict[str, CompoundEntry] = {}
        self._order: list[str] = []
        self.root = self._make_entry(ole.root, "/", is_root=True)
        self._build_tree()

        logger.debug(
            "Compound v%d: FAT %d개 엔트리, 엔트리 %d개",
            self.major_version, len(self._fat), len(self._order),
        )

    # ------------------------------------------------------------------
    # 섹터 체인 검증
    # ------------------------------------------------------------------

    @staticmethod
    def _walk_chain(start: int, table, what: str) -> list[int]:
        """
        할당 테이블을 따라 섹터 체인 수집

        Raises:
            ParseError: 종료되지 않거나 순환하는 체인, 범위 밖 섹터
        """
        chain: list[int] = []
        visited: set[int] = set()
        sect = start

        while sect != olefile.ENDOFCHAIN:
            if sect > olefile.MAXREGSECT:
                raise ParseError(f"{what}: 체인에 잘못된 섹터 값 0x{sect:08X}")
            if sect >= len(table):
                raise ParseError(f"{what}: 할당 테이블 범위를 벗어난 섹터 {sect}")
            if sect in visited:
                raise ParseError(f"{what}: 순환하는 섹터 체인 (섹터 {sect})")
            visited.add(sect)
            chain.append(sect)
            sect = table[sect]

        return chain

    def _load_minifat(self):
        ole = self._ole
        if ole.root.size == 0 or ole.num_mini_fat_sectors == 0:
            return []

        self._walk_chain(ole.first_mini_fat_sector, self._fat, "Mini FAT")
        try:
            ole.loadminifat()
        except _OLE_ERRORS as e:
            raise ParseError(f"Mini FAT 구조 오류: {e}") from e
        return ole.minifat

    # ------------------------------------------------------------------
    # 디렉토리 트리
    # ------------------------------------------------------------------

    def _build_tree(self) -> None:
        """olefile이 정리한 자식 목록을 깊이 우선(이름순)으로 펼침"""
        stack = [(kid, "/") for kid in reversed(self._ole.root.kids)]

        while stack:
            node, parent_path = stack.pop()
            kind = _KIND_NAMES.get(node.entry_type)
            if kind not in ("storage", "stream"):
                raise ParseError(f"잘못된 디렉토리 엔트리 종류: {node.entry_type} ({node.name})")

            path = f"{parent_path.rstrip('/')}/{node.name}"
            key = _normalize_path(path)
            self._entries[key] = self._make_entry(node, path)
            self._order.append(key)

            if kind == "storage":
                stack.extend((kid, path) for kid in reversed(node.kids))

    def _make_entry(self, node, path: str, is_root: bool = False) -> CompoundEntry:
        """디렉토리 엔트리 생성 (스트림은 섹터 체인 검증 포함)"""
        kind = _KIND_NAMES[node.entry_type]
        start, size = node.isectStart, node.size

        if kind == "storage":
            return CompoundEntry(sid=node.sid, name=node.name, path=path, kind=kind,
                                 size=0, start_sector=start)

        in_mini = not is_root and size < self.mini_stream_cutoff
        if size == 0:
            chain: list[int] = []
        elif in_mini:
            chain = self._walk_chain(start, self._minifat, f"스트림 {path}")
        else:
            chain = self._walk_chain(start, self._fat, f"스트림 {path}")

        unit = self.mini_sector_size if in_mini else self.sector_size
        expected = _ceil_div(size, unit)
        if len(chain) != expected:
            raise ParseError(
                f"섹터 체인 길이 불일치 ({path}): 선언 크기 {size} → "
                f"{expected}개 필요, 실제 {len(chain)}개"
            )

        # 체인이 가리키는 섹터가 실제 데이터 범위 안에 있는지
        if in_mini:
            limit = self.root.size
        else:
            limit = len(self._data) - self.sector_size
        for sect in chain:
            if sect * unit >= limit:
                raise ParseError(f"버퍼 범위를 벗어난 섹터 {sect} ({path})")

        return CompoundEntry(
            sid=node.sid,
            name=node.name,
            path=path,
            kind=kind,
            size=size,
            start_sector=start,
            chain=tuple(chain),
            in_mini_stream=in_mini,
        )

    # ------------------------------------------------------------------
    # 공개 API
    # ------------------------------------------------------------------

    def list_streams(self) -> list[str]:
        """전체 스트림 경로 목록 (예: "/FileHeader", "/BodyText/Section0")"""
        return [
            self._entries[key].path for key in self._order
            if self._entries[key].is_stream
        ]

    def list_entries(self) -> list[CompoundEntry]:
        """스토리지를 포함한 전체 엔트리 (디렉토리 순서)"""
        return [self._entries[key] for key in self._order]

    def exists(self, path: str) -> bool:
        return _normalize_path(path) in self._entries

    def entry(self, path: str) -> CompoundEntry:
        """
        경로로 엔트리 조회

        Raises:
            StreamNotFoundError: 경로 없음
        """
        try:
            return self._entries[_normalize_path(path)]
        except KeyError:
            raise StreamNotFoundError(f"스트림이 존재하지 않음: {path}") from None

    def read_stream(self, path: str) -> bytes:
        """
        스트림 데이터 읽기

        Args:
            path: 스트림 경로 (예: "/BodyText/Section0")

        Returns:
            스트림 바이트 (선언 크기만큼)

        Raises:
            StreamNotFoundError: 스트림 없음
            ParseError: 섹터가 버퍼 밖이거나 데이터가 잘림
        """
        entry = self.entry(path)
        if not entry.is_stream:
            raise StreamNotFoundError(f"스트림이 아님 (스토리지): {path}")

        try:
            data = self._ole.openstream(entry.path.strip("/").split("/")).read()
        except _OLE_ERRORS as e:
            raise ParseError(f"스트림 읽기 실패 ({path}): {e}") from e

        if len(data) < entry.size:
            raise ParseError(
                f"스트림 데이터가 잘려 있음 ({path}): {len(data)}/{entry.size}바이트"
            )
        return data[:entry.size]
