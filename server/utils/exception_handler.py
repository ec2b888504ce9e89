"""
统一异常处理

业务异常 -> {"error": "..."} JSON 响应的转换集中在这里，路由只负责抛出
"""

import asyncio
import functools
import logging
from typing import Callable

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Failed to analyze image"


def error_response(message: str, status_code: int) -> JSONResponse:
    """构造统一错误响应体 {"error": message}"""
    return JSONResponse(status_code=status_code, content={"error": message})


# ==================== 自定义业务异常 ====================

class BusinessError(Exception):
    """
    业务异常基类

    message 会原样返回给客户端，不要放入内部细节
    """
    def __init__(self, message: str, code: int = 400, error_type: str = "business_error"):
        self.message = message
        self.code = code
        self.error_type = error_type
        super().__init__(message)


class MissingInputError(BusinessError):
    """请求中没有图片"""
    def __init__(self, message: str = "No image provided"):
        super().__init__(message, code=400, error_type="missing_input")


class InvalidImageError(BusinessError):
    """图片内容不是合法的 base64"""
    def __init__(self, message: str = "Invalid image data"):
        super().__init__(message, code=400, error_type="invalid_image")


class UpstreamEmptyError(BusinessError):
    """推理服务返回了空内容（与解析失败不同，不做降级）"""
    def __init__(self, message: str = "Gemini API did not return a valid response."):
        super().__init__(message, code=500, error_type="upstream_empty")


class UpstreamUnavailableError(BusinessError):
    """推理服务调用失败：网络、鉴权、配额等"""
    def __init__(self, message: str = GENERIC_FAILURE_MESSAGE, cause: Exception = None):
        self.cause = cause
        super().__init__(message, code=500, error_type="upstream_unavailable")


class UpstreamTimeoutError(BusinessError):
    """推理服务调用超时"""
    def __init__(self, message: str = "Analysis timed out"):
        super().__init__(message, code=504, error_type="upstream_timeout")


# ==================== API 错误处理装饰器 ====================

def api_error_handler(func: Callable):
    """
    API 错误处理装饰器

    BusinessError 按自身 code 返回；其他异常统一 500 + GENERIC_FAILURE_MESSAGE，
    异常详情只写日志。同时支持同步与异步路由函数。

    使用示例：
    ```python
    @router.post("/analyze-face")
    @api_error_handler
    def analyze_face(...):
        ...
    ```
    """
    def _handle(fn_name: str, exc: Exception) -> JSONResponse:
        if isinstance(exc, BusinessError):
            log = logger.warning if exc.code < 500 else logger.error
            log(f"业务异常 [{fn_name}] {exc.error_type}: {exc.message}")
            return error_response(exc.message, exc.code)
        logger.error(f"API 错误 [{fn_name}]: {exc}", exc_info=True)
        return error_response(GENERIC_FAILURE_MESSAGE, 500)

    @functools.wraps(func)
    async def async_wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except HTTPException:
            raise
        except Exception as e:
            return _handle(func.__name__, e)

    @functools.wraps(func)
    def sync_wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except HTTPException:
            raise
        except Exception as e:
            return _handle(func.__name__, e)

    if asyncio.iscoroutinefunction(func):
        return async_wrapper
    return sync_wrapper



# ==================== 全局异常处理器 ====================

async def business_error_handler(request: Request, exc: BusinessError) -> JSONResponse:
    logger.warning(f"业务异常 {request.method} {request.url.path}: {exc.error_type}")
    return error_response(exc.message, exc.code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """请求体不是合法 JSON 对象时返回 400，而不是 FastAPI 默认的 422"""
    logger.warning(f"请求体校验失败 {request.url.path}: {exc.errors()}")
    return error_response("Invalid request body", 400)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"未处理的异常 {request.method} {request.url.path}: {exc}", exc_info=True)
    return error_response(GENERIC_FAILURE_MESSAGE, 500)


def register_exception_handlers(app) -> None:
    """把全局异常处理器注册到 FastAPI 应用"""
    app.add_exception_handler(BusinessError, business_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
