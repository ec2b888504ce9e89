#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
命令行采集客户端

使用方法：
    python -m capture_client --image face.jpg
    python -m capture_client --camera            # 回车抓拍，输入 q 取消
    python -m capture_client --camera 1 --server http://localhost:8001
"""

import argparse
import logging
import os
import sys
from typing import Callable, List, Optional

from capture_client.analysis_client import DEFAULT_SERVER_URL, AnalysisClient, AnalysisOutcome
from capture_client.camera import CameraSource
from capture_client.exceptions import CaptureError
from capture_client.session import CaptureSession

logger = logging.getLogger(__name__)

# (下限, 标签)，按分数从高到低匹配
SCORE_TIERS = (
    (80, "🌿 Fully elevated"),
    (60, "😵‍💫 Pretty lifted"),
    (40, "😌 Mildly mellow"),
    (0, "😊 Clear-headed"),
)


def score_tier(score: int) -> str:
    for threshold, label in SCORE_TIERS:
        if score >= threshold:
            return label
    return SCORE_TIERS[-1][1]


def format_outcome(outcome: AnalysisOutcome) -> str:
    if not outcome.face_detected:
        return f"No face detected\n{outcome.analysis}"
    return f"Score: {outcome.score}/100  {score_tier(outcome.score)}\n{outcome.analysis}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Face vibe analyzer capture client")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--image", "-i", help="本地图片路径")
    source.add_argument("--camera", "-c", nargs="?", type=int, const=0, help="摄像头编号（默认 0）")
    parser.add_argument("--server", default=os.getenv("API_BASE_URL", DEFAULT_SERVER_URL), help="分析服务地址")
    parser.add_argument("--timeout", type=float, default=60.0, help="请求超时（秒）")
    parser.add_argument("--verbose", "-v", action="store_true", help="显示详细日志")
    return parser


def run(args: argparse.Namespace, prompt: Callable[[str], str] = input, session: Optional[CaptureSession] = None) -> int:
    if session is None:
        client = AnalysisClient(args.server, timeout=args.timeout)
        session = CaptureSession(client, camera_factory=lambda: CameraSource(args.camera or 0))

    try:
        if args.image:
            session.load_file(args.image)
        else:
            session.start_camera()
            answer = prompt("Press Enter to take a photo (q to cancel): ")
            if answer.strip().lower() == "q":
                session.cancel_camera()
                print("Cancelled.")
                return 1
            session.take_snapshot()

        outcome = session.submit()
        if outcome is None:
            print(f"Error: {session.error}", file=sys.stderr)
            return 1
        print(format_outcome(outcome))
        return 0
    except CaptureError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        session.reset()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
