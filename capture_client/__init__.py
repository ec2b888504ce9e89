# -*- coding: utf-8 -*-
"""
面相状态分析采集客户端
"""

from capture_client.analysis_client import AnalysisClient, AnalysisOutcome
from capture_client.session import CaptureSession, CaptureState

__all__ = ['AnalysisClient', 'AnalysisOutcome', 'CaptureSession', 'CaptureState']
