"""HWP/HWPX 파서 상수 및 설정값"""

# ============================================================================
# 설정
# ============================================================================

# 파일 크기 제한 (MB)
MAX_FILE_SIZE_MB = 200

# 배치 워커 수 (None: CPU 코어 수)
DEFAULT_WORKERS = None

# 진행률 표시 라벨
PROGRESS_DESC = "HWP 추출"

# 지원 버전 범위 (MIN 이상, MAX 미만)
MIN_SUPPORTED_VERSION = (5, 0, 0, 0)
MAX_SUPPORTED_VERSION = (6, 0, 0, 0)

# ============================================================================
# 파일 시그니처
# ============================================================================

OLE2_SIGNATURE = b"\xD0\xCF\x11\xE0\xA1\xB1\x1A\xE1"
ZIP_SIGNATURE = b"PK\x03\x04"

HWP_SIGNATURE = b"HWP Document File"
FILE_HEADER_SIZE = 256

# ============================================================================
# HWP 스트림 이름
# ============================================================================

STREAM_FILE_HEADER = "/FileHeader"
STREAM_BODY_TEXT = "/BodyText"
SECTION_PREFIX = "Section"

# ============================================================================
# FileHeader 속성 플래그 (offset 36)
# ============================================================================

FLAG_COMPRESSED = 0x0001
FLAG_PASSWORD = 0x0002
FLAG_DISTRIBUTION = 0x0004
FLAG_SCRIPT = 0x0008
FLAG_DRM = 0x0010
FLAG_XML_TEMPLATE = 0x0020
FLAG_HISTORY = 0x0040
FLAG_CERT_SIGNED = 0x0080
FLAG_CERT_ENCRYPTED = 0x0100
FLAG_CERT_DRM = 0x0400

# ============================================================================
# 레코드 태그
# ============================================================================

HWPTAG_BEGIN = 0x010

# DocInfo
HWPTAG_DOCUMENT_PROPERTIES = HWPTAG_BEGIN
HWPTAG_DISTRIBUTE_DOC_DATA = HWPTAG_BEGIN + 12

# BodyText
HWPTAG_PARA_HEADER = HWPTAG_BEGIN + 50
HWPTAG_PARA_TEXT = HWPTAG_BEGIN + 51
HWPTAG_PARA_CHAR_SHAPE = HWPTAG_BEGIN + 52
HWPTAG_PARA_LINE_SEG = HWPTAG_BEGIN + 53
HWPTAG_CTRL_HEADER = HWPTAG_BEGIN + 55
HWPTAG_LIST_HEADER = HWPTAG_BEGIN + 56
HWPTAG_TABLE = HWPTAG_BEGIN + 61

# 레코드 헤더 비트 구성
RECORD_TAG_MASK = 0x3FF
RECORD_LEVEL_MASK = 0x3FF
RECORD_LEVEL_SHIFT = 10
RECORD_SIZE_SHIFT = 20
RECORD_SIZE_EXTENDED = 0xFFF

# 배포용 문서 데이터 레코드 크기
DISTRIBUTE_DOC_DATA_SIZE = 256

# ============================================================================
# PARA_TEXT 제어 문자
# ============================================================================

CTRL_CHAR_LINE_BREAK = 0x000A
CTRL_CHAR_PARA_BREAK = 0x000D
CTRL_CHAR_TAB = 0x0009
CTRL_CHAR_HYPHEN = 0x0018
CTRL_CHAR_NBSPACE = 0x001E
CTRL_CHAR_FWSPACE = 0x001F

# 8 code unit(16바이트)을 차지하는 인라인/확장 제어 문자 (탭 제외)
EXTENDED_CTRL_CHARS = frozenset({
    0x0001, 0x0002, 0x0003, 0x0004, 0x0005, 0x0006, 0x0007, 0x0008,
    0x000B, 0x000C, 0x000E, 0x000F, 0x0010, 0x0011, 0x0012, 0x0013,
    0x0014, 0x0015, 0x0016, 0x0017,
})
CTRL_CHAR_WIDTH = 8

DEFAULT_ENCODING = "utf-16-le"

# ============================================================================
# HWPX (ZIP + XML)
# ============================================================================

HWPX_MIMETYPE = "application/hwp+zip"
HWPX_PART_MIMETYPE = "mimetype"
HWPX_PART_CONTAINER = "META-INF/container.xml"
HWPX_PART_CONTENT = "Contents/content.hpf"
HWPX_PART_HEADER = "Contents/header.xml"
HWPX_ROOTFILE_MEDIA_TYPE = "application/hwpml-package+xml"
