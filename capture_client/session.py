# -*- coding: utf-8 -*-
"""
采集-分析状态机

IDLE -> CAPTURING -> IMAGE_CAPTURED -> ANALYZING -> RESULT_READY
            |                ^              |
            +-- cancel -> IDLE   <-- 失败 ---+

所有可变状态集中在一个 CaptureContext 中，由 CaptureSession 独占；
reset() 会整体替换上下文，正在进行中的请求返回后发现上下文已换，结果直接丢弃
"""

import base64
import logging
import mimetypes
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from capture_client.analysis_client import AnalysisOutcome
from capture_client.camera import CameraSource
from capture_client.exceptions import (
    AnalysisRequestError,
    InvalidTransitionError,
    UnsupportedImageFileError,
)

logger = logging.getLogger(__name__)


class CaptureState(Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    IMAGE_CAPTURED = "image_captured"
    ANALYZING = "analyzing"
    RESULT_READY = "result_ready"


@dataclass
class CaptureContext:
    state: CaptureState = CaptureState.IDLE
    image: Optional[str] = None
    result: Optional[AnalysisOutcome] = None
    error: Optional[str] = None
    camera: Optional[CameraSource] = None


def read_image_file(path) -> str:
    """读取本地图片文件为 data URL"""
    path = Path(path)
    mime_type, _ = mimetypes.guess_type(path.name)
    if not mime_type or not mime_type.startswith('image/'):
        raise UnsupportedImageFileError(f"Not an image file: {path.name}")
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise UnsupportedImageFileError(f"Cannot read image file: {path.name}") from e
    data = base64.b64encode(raw).decode('ascii')
    return f"data:{mime_type};base64,{data}"


class CaptureSession:
    """
    单次采集-分析周期

    Args:
        client: 提供 analyze(image) -> AnalysisOutcome 的分析客户端
        camera_factory: 创建 CameraSource 的工厂（测试时注入替身）
    """

    def __init__(self, client, camera_factory: Callable[[], CameraSource] = CameraSource):
        self.client = client
        self.camera_factory = camera_factory
        self._lock = threading.Lock()
        self._ctx = CaptureContext()

    @property
    def state(self) -> CaptureState:
        return self._ctx.state

    @property
    def image(self) -> Optional[str]:
        return self._ctx.image

    @property
    def result(self) -> Optional[AnalysisOutcome]:
        return self._ctx.result

    @property
    def error(self) -> Optional[str]:
        return self._ctx.error

    @property
    def camera_active(self) -> bool:
        return self._ctx.camera is not None

    def _require(self, action: str, *allowed: CaptureState) -> None:
        if self._ctx.state not in allowed:
            raise InvalidTransitionError(action, self._ctx.state)

    def _release_camera(self, ctx: CaptureContext) -> None:
        camera, ctx.camera = ctx.camera, None
        if camera is not None:
            camera.release()

    def start_camera(self) -> None:
        with self._lock:
            self._require("start camera", CaptureState.IDLE)
            camera = self.camera_factory()
            camera.open()
            self._ctx.camera = camera
            self._ctx.error = None
            self._ctx.state = CaptureState.CAPTURING

    def take_snapshot(self) -> str:
        """抓拍一帧；无论成功与否都释放摄像头"""
        with self._lock:
            self._require("take snapshot", CaptureState.CAPTURING)
            ctx = self._ctx
            try:
                image = ctx.camera.snapshot_data_url()
            except Exception:
                ctx.state = CaptureState.IDLE
                raise
            finally:
                self._release_camera(ctx)
            ctx.image = image
            ctx.state = CaptureState.IMAGE_CAPTURED
            return image

    def cancel_camera(self) -> None:
        with self._lock:
            self._require("cancel camera", CaptureState.CAPTURING)
            self._release_camera(self._ctx)
            self._ctx.state = CaptureState.IDLE

    def load_file(self, path) -> str:
        with self._lock:
            self._require("load file", CaptureState.IDLE)
            image = read_image_file(path)
            self._ctx.image = image
            self._ctx.error = None
            self._ctx.state = CaptureState.IMAGE_CAPTURED
            return image

    def submit(self) -> Optional[AnalysisOutcome]:
        """
        提交当前图片分析

        Returns:
            分析结果；请求失败、已有请求在进行中、或期间被 reset 时返回 None

        Raises:
            InvalidTransitionError: 当前没有图片
        """
        with self._lock:
            if self._ctx.state is CaptureState.ANALYZING:
                logger.info("已有分析请求在进行中，忽略本次提交")
                return None
            self._require("submit", CaptureState.IMAGE_CAPTURED, CaptureState.RESULT_READY)
            ctx = self._ctx
            ctx.state = CaptureState.ANALYZING
            ctx.result = None
            ctx.error = None
            image = ctx.image

        try:
            outcome = self.client.analyze(image)
        except AnalysisRequestError as e:
            self._finish_failed(ctx, str(e))
            return None
        except Exception:
            self._finish_failed(ctx, str(AnalysisRequestError()))
            raise

        with self._lock:
            if self._ctx is not ctx:
                logger.info("分析期间已重置，丢弃结果")
                return None
            ctx.result = outcome
            ctx.state = CaptureState.RESULT_READY
        return outcome

    def _finish_failed(self, ctx: CaptureContext, message: str) -> None:
        with self._lock:
            if self._ctx is not ctx:
                return
            ctx.error = message
            ctx.state = CaptureState.IMAGE_CAPTURED
        logger.warning(f"分析失败: {message}")

    def reset(self) -> None:
        """回到 IDLE，丢弃图片和结果，释放摄像头"""
        with self._lock:
            self._release_camera(self._ctx)
            self._ctx = CaptureContext()
