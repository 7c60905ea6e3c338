"""CLI 테스트"""

import sys

import pytest

from hwarang import cli


def run(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["hwarang", *args])
    return cli.main()


class TestCLI:
    """명령별 동작"""

    def test_extract_stdout(self, monkeypatch, capsys, hwp_file):
        assert run(monkeypatch, "extract", hwp_file) == 0
        assert "안녕하세요" in capsys.readouterr().out

    def test_extract_output_file(self, monkeypatch, tmp_path, hwpx_file):
        output = tmp_path / "out.txt"
        assert run(monkeypatch, "extract", hwpx_file, "-o", str(output)) == 0
        assert output.read_text(encoding="utf-8") == "안녕하세요\nHWPX 문서입니다."

    def test_extract_error(self, monkeypatch, capsys, invalid_file):
        """실패 시 종류와 메시지를 stderr로"""
        assert run(monkeypatch, "extract", invalid_file) == 1
        assert "UnsupportedFormatError" in capsys.readouterr().err

    def test_streams(self, monkeypatch, capsys, hwp_file):
        assert run(monkeypatch, "streams", hwp_file) == 0
        out = capsys.readouterr().out.splitlines()
        assert "/FileHeader" in out
        assert "/BodyText/Section0" in out

    def test_batch(self, monkeypatch, tmp_path, hwp_file, invalid_file):
        output = tmp_path / "result"
        code = run(monkeypatch, "batch", str(tmp_path), "-o", str(output), "-q", "-w", "2")
        assert code == 1
        assert (output / "results.yaml").exists()
        assert (output / "summary.yaml").exists()
        assert (output / "failed.jsonl").exists()

    def test_batch_no_files(self, monkeypatch, tmp_path):
        assert run(monkeypatch, "batch", str(tmp_path)) == 1

    def test_no_command(self, monkeypatch, capsys):
        assert run(monkeypatch) == 1
