#!/usr/bin/env python3
"""HWP/HWPX 텍스트 추출 CLI"""

import argparse
import logging
import sys
from pathlib import Path

from .batch import BatchProcessor, collect_files
from .errors import HwarangError
from .exporter import YAMLExporter
from .extractor import extract_text, list_streams


def cmd_extract(args):
    """단일 파일 추출"""
    try:
        text = extract_text(args.file)
    except HwarangError as e:
        print(f"✗ 추출 실패 [{e.kind.value}]: {e}", file=sys.stderr)
        return 1

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)
        print(f"✓ 저장됨: {args.output}")
    else:
        print(text)
    return 0


def cmd_streams(args):
    """스트림 목록 출력"""
    try:
        streams = list_streams(args.file)
    except HwarangError as e:
        print(f"✗ 오류 [{e.kind.value}]: {e}", file=sys.stderr)
        return 1

    for stream in streams:
        print(stream)
    return 0


def cmd_batch(args):
    """배치 처리"""
    if args.filelist:
        with open(args.filelist, "r", encoding="utf-8") as f:
            files = [line.strip() for line in f if line.strip()]
    else:
        files = []
        for directory in args.directories:
            files.extend(collect_files(directory, recursive=args.recursive))

    if not files:
        print("✗ 처리할 HWP/HWPX 파일이 없음", file=sys.stderr)
        return 1

    print(f"📁 {len(files)}개 파일 처리 시작...")

    processor = BatchProcessor(workers=args.workers, progress=not args.quiet)
    result = processor.process_files(files)

    elapsed = (result.finished_at - result.started_at).total_seconds()
    print(f"\n📊 결과: 성공 {result.success}/{result.total} ({result.success_rate:.1%}), {elapsed:.2f}초")

    if result.failed:
        print("\n오류 분류:")
        for error, count in result.error_breakdown().items():
            print(f"  {count}\t{error}")

    if args.output:
        exporter = YAMLExporter(args.output)
        print(f"💾 결과 저장: {exporter.export_results(result)}")
        print(f"💾 요약 저장: {exporter.export_summary(result)}")

        if result.failed:
            failed_log = Path(args.output) / "failed.jsonl"
            count = exporter.export_failed_log(result, str(failed_log))
            print(f"📝 실패 로그: {count}개 → {failed_log}")

    return 0 if result.failed == 0 else 1


def main():
    """CLI 진입점"""
    parser = argparse.ArgumentParser(
        prog="hwarang",
        description="HWP 5.x / HWPX 텍스트 추출기",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="디버그 로그 출력")
    subparsers = parser.add_subparsers(dest="command", help="명령")

    # extract 명령
    p_extract = subparsers.add_parser("extract", help="단일 파일 텍스트 추출")
    p_extract.add_argument("file", help="HWP/HWPX 파일 경로")
    p_extract.add_argument("-o", "--output", help="출력 파일 경로")
    p_extract.set_defaults(func=cmd_extract)

    # streams 명령
    p_streams = subparsers.add_parser("streams", help="HWP 스트림 목록")
    p_streams.add_argument("file", help="HWP 파일 경로")
    p_streams.set_defaults(func=cmd_streams)

    # batch 명령
    p_batch = subparsers.add_parser("batch", help="배치 처리")
    p_batch.add_argument("directories", nargs="*", help="HWP/HWPX 디렉토리")
    p_batch.add_argument("-f", "--filelist", help="파일 목록 텍스트")
    p_batch.add_argument("-o", "--output", help="출력 디렉토리")
    p_batch.add_argument("-w", "--workers", type=int, default=None, help="워커 수")
    p_batch.add_argument("-r", "--recursive", action="store_true", help="재귀 탐색")
    p_batch.add_argument("-q", "--quiet", action="store_true", help="진행률 숨김")
    p_batch.set_defaults(func=cmd_batch)

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
