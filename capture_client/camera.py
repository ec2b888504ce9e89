# -*- coding: utf-8 -*-
"""
摄像头采集

封装 OpenCV VideoCapture：打开设备、抓取一帧编码为 JPEG data URL、释放设备
"""

import base64
import logging

import cv2

from capture_client.exceptions import CameraUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_JPEG_QUALITY = 80


class CameraSource:
    """单个摄像头设备，open() 与 release() 必须成对调用"""

    def __init__(self, index: int = 0, jpeg_quality: int = DEFAULT_JPEG_QUALITY):
        self.index = index
        self.jpeg_quality = jpeg_quality
        self._capture = None

    @property
    def is_open(self) -> bool:
        return self._capture is not None

    def open(self) -> None:
        if self._capture is not None:
            return
        capture = cv2.VideoCapture(self.index)
        if not capture.isOpened():
            capture.release()
            logger.warning(f"摄像头 {self.index} 打开失败")
            raise CameraUnavailableError()
        self._capture = capture
        logger.info(f"摄像头 {self.index} 已打开")

    def snapshot_data_url(self) -> str:
        """抓取当前画面，返回 data:image/jpeg;base64,... 字符串"""
        if self._capture is None:
            raise CameraUnavailableError("Camera is not open.")
        ok, frame = self._capture.read()
        if not ok or frame is None:
            raise CameraUnavailableError("Could not read a frame from the webcam.")
        ok, encoded = cv2.imencode('.jpg', frame, [int(cv2.IMWRITE_JPEG_QUALITY), self.jpeg_quality])
        if not ok:
            raise CameraUnavailableError("Could not encode the webcam frame.")
        return "data:image/jpeg;base64," + base64.b64encode(encoded.tobytes()).decode('ascii')

    def release(self) -> None:
        if self._capture is None:
            return
        self._capture.release()
        self._capture = None
        logger.info(f"摄像头 {self.index} 已释放")

    def __enter__(self) -> 'CameraSource':
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False
