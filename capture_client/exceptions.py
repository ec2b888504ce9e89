# -*- coding: utf-8 -*-
"""采集客户端异常"""


class CaptureError(Exception):
    """采集客户端异常基类"""


class CameraUnavailableError(CaptureError):
    """摄像头无法打开或无法读取画面"""
    def __init__(self, message: str = "Could not access webcam. Please check permissions."):
        super().__init__(message)


class UnsupportedImageFileError(CaptureError):
    """上传的文件不是图片或无法读取"""


class InvalidTransitionError(CaptureError):
    """当前状态下不允许该操作"""
    def __init__(self, action: str, state):
        self.action = action
        self.state = state
        super().__init__(f"cannot {action} while {state.value}")


class AnalysisRequestError(CaptureError):
    """分析接口返回非 200 或请求失败"""
    def __init__(self, message: str = "Analysis failed. Please try again.", status_code: int = None):
        self.status_code = status_code
        super().__init__(message)
