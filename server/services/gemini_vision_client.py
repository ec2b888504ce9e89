# -*- coding: utf-8 -*-
"""
Gemini 多模态推理客户端

职责：
- 把固定指令 + 图片作为一次多模态请求发给 Gemini
- 对暂时性故障做有限次数的指数退避重试
- 把 SDK 异常统一转换为 UpstreamTimeout / UpstreamUnavailable / UpstreamEmpty
"""

import logging
import time
from typing import Any, Callable, Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from server.config.app_config import GeminiConfig
from server.utils.exception_handler import (
    UpstreamEmptyError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from server.utils.image_payload import ImagePayload

logger = logging.getLogger(__name__)

# 重试策略：仅对暂时性故障重试
RETRYABLE_EXCEPTIONS = (
    google_exceptions.ServiceUnavailable,
    google_exceptions.InternalServerError,
    google_exceptions.TooManyRequests,
    google_exceptions.DeadlineExceeded,
    TimeoutError,
)
TIMEOUT_EXCEPTIONS = (google_exceptions.DeadlineExceeded, TimeoutError)


def extract_response_text(response: Any) -> str:
    """
    从 generate_content 的返回中取出文本

    response.text 在候选被拦截或没有 parts 时会抛 ValueError，
    这时退回到逐个候选收集文本
    """
    try:
        text = response.text
    except (ValueError, AttributeError):
        text = None
    if text:
        return text.strip()

    parts = []
    for candidate in getattr(response, 'candidates', None) or []:
        content = getattr(candidate, 'content', None)
        for part in getattr(content, 'parts', None) or []:
            part_text = getattr(part, 'text', None)
            if part_text:
                parts.append(part_text)
    return "\n".join(parts).strip()


class GeminiVisionClient:
    """Gemini 多模态客户端（同步调用，带超时与重试）"""

    def __init__(
        self,
        config: GeminiConfig,
        model: Any = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Args:
            config: Gemini 配置
            model: 已构造的 GenerativeModel（测试时注入替身），为空则按配置创建
            sleep: 退避等待函数
        """
        self.config = config
        self._sleep = sleep
        if model is None:
            genai.configure(api_key=config.api_key)
            model = genai.GenerativeModel(model_name=config.model)
        self.model = model
        logger.info(f"✅ GeminiVisionClient 初始化成功: {config!r}")

    def _call_once(self, prompt: str, payload: ImagePayload) -> Any:
        return self.model.generate_content(
            [
                prompt,
                {"mime_type": payload.mime_type, "data": payload.to_bytes()},
            ],
            generation_config=genai.types.GenerationConfig(
                temperature=self.config.temperature,
            ),
            request_options={"timeout": self.config.timeout_seconds},
        )

    def _call_with_retry(self, prompt: str, payload: ImagePayload) -> Any:
        max_attempts = self.config.max_attempts
        backoff = self.config.initial_backoff
        for attempt in range(1, max_attempts + 1):
            try:
                return self._call_once(prompt, payload)
            except RETRYABLE_EXCEPTIONS as e:
                if attempt == max_attempts:
                    if isinstance(e, TIMEOUT_EXCEPTIONS):
                        logger.error(f"Gemini 调用超时，已重试 {attempt} 次: {e}")
                        raise UpstreamTimeoutError() from e
                    logger.error(f"Gemini 调用失败，已重试 {attempt} 次: {e}")
                    raise UpstreamUnavailableError(cause=e) from e
                sleep_time = min(backoff, self.config.max_backoff)
                logger.warning(
                    "Gemini 调用失败 (attempt %d/%d): %s，%.2fs 后重试",
                    attempt, max_attempts, type(e).__name__, sleep_time,
                )
                self._sleep(sleep_time)
                backoff *= self.config.backoff_multiplier
            except Exception as e:
                # 鉴权、参数、网络层等非暂时性错误不重试
                logger.error(f"Gemini 调用失败（不可重试）: {type(e).__name__}: {e}")
                raise UpstreamUnavailableError(cause=e) from e
        raise RuntimeError("_call_with_retry: unexpected state")

    def generate(self, prompt: str, payload: ImagePayload) -> str:
        """
        发送一次多模态请求并返回模型文本

        Raises:
            UpstreamTimeoutError: 超时（重试耗尽）
            UpstreamUnavailableError: 其他调用失败
            UpstreamEmptyError: 返回中没有可用文本
        """
        start = time.time()
        response = self._call_with_retry(prompt, payload)
        elapsed_ms = int((time.time() - start) * 1000)

        text = extract_response_text(response)
        if not text:
            logger.error(f"Gemini 返回内容为空，耗时={elapsed_ms}ms")
            raise UpstreamEmptyError()

        logger.info(f"Gemini 调用完成: 耗时={elapsed_ms}ms, 返回长度={len(text)}")
        return text


def create_gemini_client(config: Optional[GeminiConfig] = None) -> GeminiVisionClient:
    """按全局配置创建客户端"""
    if config is None:
        from server.config.app_config import get_config
        config = get_config().gemini
    return GeminiVisionClient(config)
