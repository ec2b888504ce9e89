# -*- coding: utf-8 -*-
"""
面相状态分析服务

流程：规范化图片 -> 调用 Gemini -> 解析 JSON -> 降级/限幅 -> 返回结果
解析失败不视为错误（随机分降级），调用失败则向上抛出
"""

import json
import logging
import random
import re
from typing import Callable, Optional

from pydantic import ValidationError

from server.api.v1.models.face_vibe_models import AnalysisResult, ModelReply
from server.utils.image_payload import normalize_image_payload
from server.utils.prompts.face_vibe import NO_FACE_SCORE, build_face_vibe_prompt

logger = logging.getLogger(__name__)

SCORE_MIN = 0
SCORE_MAX = 100

FALLBACK_ANALYSIS = (
    "The AI had trouble reading this image, but judging by the vibes alone, "
    "you're looking pretty chill! 😎"
)

_CODE_FENCE = re.compile(r'^```(?:json)?\s*(.*?)\s*```$', re.DOTALL | re.IGNORECASE)


def clamp_score(score: float) -> int:
    """把分数限制在 [0, 100]，对已限幅的值是幂等的"""
    return max(SCORE_MIN, min(SCORE_MAX, int(round(score))))


def parse_model_reply(text: str) -> Optional[ModelReply]:
    """
    解析模型文本为 ModelReply

    允许外层包裹 ```json 代码块；JSON 非法或字段不符时返回 None
    """
    if not text:
        return None
    body = text.strip()
    fenced = _CODE_FENCE.match(body)
    if fenced:
        body = fenced.group(1)
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(data, dict):
        return None
    try:
        return ModelReply.model_validate(data)
    except ValidationError:
        return None


def fallback_result(rng: random.Random = None) -> AnalysisResult:
    """解析失败时的降级结果：随机分 + 固定文案"""
    rng = rng or random
    return AnalysisResult(score=rng.randint(SCORE_MIN, SCORE_MAX), analysis=FALLBACK_ANALYSIS)


class FaceVibeService:
    """面相状态分析服务（无状态，每次请求独立）"""

    def __init__(self, client, prompt_builder: Callable[[], str] = build_face_vibe_prompt, rng: random.Random = None):
        """
        Args:
            client: 提供 generate(prompt, payload) -> str 的推理客户端
            prompt_builder: 指令构造函数
            rng: 降级随机分的随机源
        """
        self.client = client
        self.prompt_builder = prompt_builder
        self.rng = rng

    def analyze(self, image: Optional[str]) -> AnalysisResult:
        """
        分析一张图片

        Raises:
            MissingInputError / InvalidImageError: 输入非法（不会调用推理服务）
            UpstreamTimeoutError / UpstreamUnavailableError / UpstreamEmptyError: 推理服务异常
        """
        payload = normalize_image_payload(image)
        logger.info(f"[FaceVibe] 收到分析请求: mime={payload.mime_type}, base64长度={len(payload.data)}")

        text = self.client.generate(self.prompt_builder(), payload)

        reply = parse_model_reply(text)
        if reply is None:
            logger.warning(f"[FaceVibe] 模型回复解析失败，使用降级结果: {text[:200]!r}")
            return fallback_result(self.rng)

        if int(round(reply.score)) == NO_FACE_SCORE:
            logger.info("[FaceVibe] 模型未识别到人脸")
            return AnalysisResult(score=clamp_score(reply.score), analysis=reply.analysis, face_detected=False)

        score = clamp_score(reply.score)
        if score != reply.score:
            logger.info(f"[FaceVibe] 分数越界已限幅: {reply.score} -> {score}")
        return AnalysisResult(score=score, analysis=reply.analysis)
