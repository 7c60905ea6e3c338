"""공용 pytest 픽스처"""

import pytest

from hwp_fixtures import build_hwp, build_hwpx, make_section


@pytest.fixture
def hwp_file(tmp_path):
    """두 단락짜리 HWP 5.x 파일"""
    path = tmp_path / "sample.hwp"
    path.write_bytes(build_hwp([make_section(["안녕하세요", "HWP 문서입니다."])]))
    return str(path)


@pytest.fixture
def hwpx_file(tmp_path):
    """두 단락짜리 HWPX 파일"""
    path = tmp_path / "sample.hwpx"
    path.write_bytes(build_hwpx())
    return str(path)


@pytest.fixture
def invalid_file(tmp_path):
    """HWP가 아닌 파일"""
    path = tmp_path / "invalid.hwp"
    path.write_bytes(b"not a hwp file")
    return str(path)
