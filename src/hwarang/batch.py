"""배치 처리 모듈"""

import logging
import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from datetime import datetime
from pathlib import Path

from tqdm import tqdm

from .constants import DEFAULT_WORKERS, PROGRESS_DESC
from .errors import ParseError
from .extractor import extract
from .models import BatchResult, ExtractResult

logger = logging.getLogger(__name__)

_SUFFIXES = {".hwp", ".hwpx"}


def _worker_extract(filepath: str) -> ExtractResult:
    """워커 프로세스에서 실행되는 추출 함수"""
    return extract(filepath)


class BatchProcessor:
    """
    HWP/HWPX 파일 배치 처리기

    병렬 처리로 다수의 파일에서 텍스트 추출.
    파일 하나의 실패는 해당 경로의 결과로만 기록되고 배치를 중단시키지 않는다.
    """

    def __init__(
        self,
        workers: int | None = DEFAULT_WORKERS,
        progress: bool = False,
    ):
        """
        Args:
            workers: 워커 프로세스 수 (기본: CPU 코어 수)
            progress: 진행률 표시 여부
        """
        if workers is None:
            workers = os.cpu_count() or 1
        self.workers = max(1, workers)
        self.progress = progress

    def process_files(self, files: list[str]) -> BatchResult:
        """
        파일 목록 처리

        Args:
            files: 파일 경로 목록 (중복 허용, 결과는 경로당 하나)

        Returns:
            BatchResult 객체
        """
        unique_files = list(dict.fromkeys(files))
        batch = BatchResult(started_at=datetime.now())

        if not unique_files:
            batch.finished_at = datetime.now()
            return batch

        workers = min(self.workers, len(unique_files))
        with ProcessPoolExecutor(max_workers=workers) as executor:
            future_to_file = {
                executor.submit(_worker_extract, f): f for f in unique_files
            }

            iterator = as_completed(future_to_file)
            if self.progress:
                iterator = tqdm(iterator, total=len(future_to_file), desc=PROGRESS_DESC)

            for future in iterator:
                filepath = future_to_file[future]
                try:
                    result = future.result()
                except Exception as e:
                    # 워커 프로세스 자체의 실패 (BrokenProcessPool 등)
                    logger.error("%s: 워커 실패: %s", filepath, e)
                    result = ExtractResult.from_error(
                        filepath, ParseError(f"워커 실패: {e}")
                    )
                batch.results[filepath] = result

        batch.finished_at = datetime.now()
        logger.info(
            "배치 완료: 성공 %d/%d (%.1f%%)",
            batch.success, batch.total, batch.success_rate * 100,
        )
        return batch

    def process_directory(
        self,
        directory: str,
        recursive: bool = True,
    ) -> BatchResult:
        """
        디렉토리 내 모든 HWP/HWPX 파일 처리

        Args:
            directory: 디렉토리 경로
            recursive: 하위 디렉토리 포함 여부

        Returns:
            BatchResult 객체
        """
        return self.process_files(collect_files(directory, recursive))


def collect_files(directory: str, recursive: bool = True) -> list[str]:
    """디렉토리에서 .hwp/.hwpx 파일 수집 (대소문자 무시, 정렬)"""
    path = Path(directory)
    candidates = path.rglob("*") if recursive else path.glob("*")
    return sorted(
        str(f) for f in candidates
        if f.is_file() and f.suffix.lower() in _SUFFIXES
    )


def extract_batch(paths: list[str], workers: int | None = DEFAULT_WORKERS) -> dict[str, dict]:
    """
    여러 파일 병렬 추출

    Args:
        paths: 파일 경로 목록
        workers: 워커 프로세스 수

    Returns:
        경로 → {"text": ...} 또는 {"error": ...}
    """
    return BatchProcessor(workers=workers).process_files(paths).to_mapping()
