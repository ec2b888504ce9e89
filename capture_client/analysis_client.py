# -*- coding: utf-8 -*-
"""
分析接口 HTTP 客户端
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

import requests

from capture_client.exceptions import AnalysisRequestError

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "http://localhost:8001"
ANALYZE_PATH = "/api/analyze-face"


@dataclass(frozen=True)
class AnalysisOutcome:
    """接口返回的分析结果"""
    score: int
    analysis: str
    face_detected: bool = True


class AnalysisClient:
    """调用 POST /api/analyze-face"""

    def __init__(self, base_url: str = DEFAULT_SERVER_URL, timeout: float = 60.0, session: Optional[requests.Session] = None):
        self.url = base_url.rstrip('/') + ANALYZE_PATH
        self.timeout = timeout
        self.session = session or requests.Session()

    def analyze(self, image: str) -> AnalysisOutcome:
        """
        提交图片并返回结果

        Raises:
            AnalysisRequestError: 网络失败、非 200 响应或响应体不合法
        """
        start = time.time()
        try:
            response = self.session.post(self.url, json={"image": image}, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"分析请求失败: {e}")
            raise AnalysisRequestError() from e

        elapsed_ms = int((time.time() - start) * 1000)
        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code != 200:
            message = body.get("error") if isinstance(body, dict) else None
            logger.warning(f"分析接口返回 {response.status_code}: {message}, 耗时={elapsed_ms}ms")
            raise AnalysisRequestError(message or "Analysis failed. Please try again.", status_code=response.status_code)

        if not isinstance(body, dict) or "score" not in body or "analysis" not in body:
            logger.error(f"分析接口响应格式不正确: {response.text[:200]!r}")
            raise AnalysisRequestError(status_code=response.status_code)

        logger.info(f"分析完成: score={body['score']}, 耗时={elapsed_ms}ms")
        return AnalysisOutcome(
            score=int(body["score"]),
            analysis=str(body["analysis"]),
            face_detected=body.get("face_detected", True) is not False,
        )
