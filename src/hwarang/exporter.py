"""배치 결과 출력 모듈 (YAML / JSONL)"""

import json
from pathlib import Path

import yaml

from .models import BatchResult


class YAMLExporter:
    """
    배치 결과 저장기

    - results.yaml: 경로 → {text} | {error}
    - summary.yaml: 건수, 성공률, 오류 종류/메시지별 집계
    - 실패 로그 (JSONL)
    """

    RESULTS_FILE = "results.yaml"
    SUMMARY_FILE = "summary.yaml"

    def __init__(self, output_dir: str):
        """
        Args:
            output_dir: 출력 디렉토리
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def _dump(self, data: dict, filename: str) -> str:
        output_path = self.output_dir / filename
        with open(output_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                data,
                f,
                allow_unicode=True,
                default_flow_style=False,
                sort_keys=False,
            )
        return str(output_path)

    def export_results(self, batch_result: BatchResult) -> str:
        """
        경로별 결과 YAML 저장

        Returns:
            저장된 파일 경로
        """
        return self._dump(batch_result.to_mapping(), self.RESULTS_FILE)

    def export_summary(self, batch_result: BatchResult) -> str:
        """
        요약 YAML 저장

        Returns:
            저장된 파일 경로
        """
        return self._dump(batch_result.to_summary(), self.SUMMARY_FILE)

    def export_failed_log(
        self,
        batch_result: BatchResult,
        output_file: str,
    ) -> int:
        """
        실패 로그 JSONL 저장

        Args:
            batch_result: 배치 처리 결과
            output_file: 출력 파일 경로

        Returns:
            저장된 레코드 수
        """
        count = 0

        with open(output_file, "w", encoding="utf-8") as f:
            for filepath, result in batch_result.results.items():
                if result.success:
                    continue

                log_entry = {
                    "filepath": filepath,
                    "kind": result.error_kind.value if result.error_kind else None,
                    "error": result.error,
                    "timestamp": result.extracted_at.isoformat(),
                }
                f.write(json.dumps(log_entry, ensure_ascii=False))
                f.write("\n")
                count += 1

        return count
