"""HWP 파서 데이터 모델"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .constants import (
    FLAG_COMPRESSED,
    FLAG_PASSWORD,
    FLAG_DISTRIBUTION,
    FLAG_SCRIPT,
    FLAG_DRM,
    FLAG_XML_TEMPLATE,
    FLAG_HISTORY,
    FLAG_CERT_SIGNED,
    FLAG_CERT_ENCRYPTED,
    FLAG_CERT_DRM,
    HWPTAG_PARA_HEADER,
    HWPTAG_PARA_TEXT,
    HWPTAG_PARA_CHAR_SHAPE,
    HWPTAG_PARA_LINE_SEG,
    HWPTAG_CTRL_HEADER,
    HWPTAG_LIST_HEADER,
    HWPTAG_TABLE,
    HWPTAG_DISTRIBUTE_DOC_DATA,
)
from .errors import ErrorKind, HwarangError
from .package import ZipPackage


class Format(Enum):
    """파일 형식"""
    COMPOUND_HWP = "hwp5"   # HWP 5.x (OLE2 기반)
    ZIP_HWPX = "hwpx"       # HWPX (XML + ZIP)
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class RawDocument:
    """파일 전체 바이트와 감지된 형식"""
    path: str
    data: bytes
    format: Format
    # 형식 감지 때 읽은 HWPX 중앙 디렉토리 (HWPX가 아니면 None)
    package: ZipPackage | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class CompoundEntry:
    """Compound 파일 디렉토리 엔트리"""
    sid: int
    name: str
    path: str
    kind: str                       # "root" | "storage" | "stream"
    size: int
    start_sector: int
    chain: tuple[int, ...] = ()
    in_mini_stream: bool = False

    @property
    def is_stream(self) -> bool:
        return self.kind == "stream"


@dataclass(frozen=True, order=True)
class HWPVersion:
    """HWP 버전 정보"""
    major: int
    minor: int
    build: int
    revision: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.build}.{self.revision}"

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.major, self.minor, self.build, self.revision)


@dataclass(frozen=True)
class HWPHeader:
    """FileHeader 스트림 내용"""
    signature: str
    version: HWPVersion
    flags: int
    license_flags: int = 0
    encrypt_version: int = 0

    @property
    def compressed(self) -> bool:
        return bool(self.flags & FLAG_COMPRESSED)

    @property
    def password_protected(self) -> bool:
        return bool(self.flags & FLAG_PASSWORD)

    @property
    def distribution(self) -> bool:
        """배포용 문서 여부"""
        return bool(self.flags & FLAG_DISTRIBUTION)

    @property
    def script(self) -> bool:
        return bool(self.flags & FLAG_SCRIPT)

    @property
    def drm(self) -> bool:
        return bool(self.flags & FLAG_DRM)

    @property
    def xml_template(self) -> bool:
        return bool(self.flags & FLAG_XML_TEMPLATE)

    @property
    def history(self) -> bool:
        return bool(self.flags & FLAG_HISTORY)

    @property
    def cert_signed(self) -> bool:
        return bool(self.flags & FLAG_CERT_SIGNED)

    @property
    def cert_encrypted(self) -> bool:
        return bool(self.flags & FLAG_CERT_ENCRYPTED)

    @property
    def cert_drm(self) -> bool:
        return bool(self.flags & FLAG_CERT_DRM)

    @property
    def encrypted(self) -> bool:
        """본문이 DRM/인증서로 암호화되었는지"""
        return self.drm or self.cert_encrypted or self.cert_drm


@dataclass(frozen=True)
class RecordHeader:
    """HWP 레코드 헤더"""
    tag_id: int
    level: int
    size: int

    @property
    def tag_name(self) -> str:
        """태그 ID를 사람이 읽을 수 있는 이름으로 변환"""
        names = {
            HWPTAG_PARA_HEADER: "PARA_HEADER",
            HWPTAG_PARA_TEXT: "PARA_TEXT",
            HWPTAG_PARA_CHAR_SHAPE: "PARA_CHAR_SHAPE",
            HWPTAG_PARA_LINE_SEG: "PARA_LINE_SEG",
            HWPTAG_CTRL_HEADER: "CTRL_HEADER",
            HWPTAG_LIST_HEADER: "LIST_HEADER",
            HWPTAG_TABLE: "TABLE",
            HWPTAG_DISTRIBUTE_DOC_DATA: "DISTRIBUTE_DOC_DATA",
        }
        return names.get(self.tag_id, f"TAG_{self.tag_id:04X}")


@dataclass(frozen=True)
class Record:
    """HWP 레코드 (스트림 내 위치 포함)"""
    header: RecordHeader
    data: bytes
    offset: int = 0


@dataclass
class Section:
    """본문 섹션 (BodyText/SectionN 하나)"""
    index: int
    name: str = ""
    paragraphs: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(self.paragraphs)


@dataclass
class ExtractResult:
    """텍스트 추출 결과 (성공 시 text, 실패 시 error 중 하나만 존재)"""
    filepath: str
    success: bool
    text: str | None
    format: Format = Format.UNKNOWN
    error: str | None = None
    error_kind: ErrorKind | None = None
    char_count: int = 0
    extracted_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if self.success and (self.text is None or self.error is not None):
            raise ValueError("성공 결과는 text만 가져야 함")
        if not self.success and (self.text is not None or self.error is None):
            raise ValueError("실패 결과는 error만 가져야 함")
        if self.text:
            self.char_count = len(self.text)

    @classmethod
    def from_text(cls, filepath: str, text: str, fmt: Format) -> "ExtractResult":
        return cls(filepath=filepath, success=True, text=text, format=fmt)

    @classmethod
    def from_error(
        cls,
        filepath: str,
        error: HwarangError,
        fmt: Format = Format.UNKNOWN,
    ) -> "ExtractResult":
        return cls(
            filepath=filepath,
            success=False,
            text=None,
            format=fmt,
            error=str(error),
            error_kind=error.kind,
        )

    def to_dict(self) -> dict:
        """배치 결과 형식 ({"text": ...} 또는 {"error": ...})"""
        if self.success:
            return {"text": self.text}
        return {"error": self.error}


@dataclass
class BatchResult:
    """배치 처리 결과 (경로 → 결과)"""
    results: dict[str, ExtractResult] = field(default_factory=dict)
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: datetime | None = None

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def success(self) -> int:
        return sum(1 for r in self.results.values() if r.success)

    @property
    def failed(self) -> int:
        return self.total - self.success

    @property
    def success_rate(self) -> float:
        """성공률 (0.0 ~ 1.0)"""
        if self.total == 0:
            return 0.0
        return self.success / self.total

    @property
    def failed_files(self) -> list[str]:
        """실패한 파일 목록"""
        return [path for path, r in self.results.items() if not r.success]

    def error_breakdown(self) -> dict[str, int]:
        """오류 메시지별 실패 건수 (많은 순)"""
        counts = Counter(r.error for r in self.results.values() if not r.success)
        return dict(counts.most_common())

    def kind_breakdown(self) -> dict[str, int]:
        """오류 종류별 실패 건수 (많은 순)"""
        counts = Counter(
            r.error_kind.value for r in self.results.values()
            if not r.success and r.error_kind is not None
        )
        return dict(counts.most_common())

    def to_mapping(self) -> dict[str, dict]:
        """경로 → {"text": ...} | {"error": ...}"""
        return {path: r.to_dict() for path, r in self.results.items()}

    def to_summary(self) -> dict:
        """요약 정보 반환"""
        return {
            "total": self.total,
            "success": self.success,
            "failed": self.failed,
            "success_rate": f"{self.success_rate:.1%}",
            "errors_by_kind": self.kind_breakdown(),
            "errors_by_message": self.error_breakdown(),
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }
