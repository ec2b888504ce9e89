#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
面相状态分析 API

接收一张照片（data URL 或 base64），交给 Gemini 打一个娱乐性质的"状态分"
"""

import logging
import time

from fastapi import APIRouter, Depends, Request

from server.api.v1.models.face_vibe_models import AnalysisResult, AnalyzeFaceRequest, ErrorResponse
from server.services.face_vibe_service import FaceVibeService
from server.utils.exception_handler import api_error_handler

logger = logging.getLogger(__name__)

router = APIRouter()


def get_face_vibe_service(request: Request) -> FaceVibeService:
    """从应用状态中取出启动时创建的服务实例"""
    return request.app.state.face_vibe_service


@router.post(
    "/analyze-face",
    response_model=AnalysisResult,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 504: {"model": ErrorResponse}},
    summary="面相状态分析",
)
@api_error_handler
def analyze_face(
    payload: AnalyzeFaceRequest,
    service: FaceVibeService = Depends(get_face_vibe_service),
):
    """
    面相状态分析接口

    - image 缺失或为空：400 {"error": "No image provided"}
    - 推理服务失败：500 / 504 {"error": "..."}
    - 模型回复无法解析：仍返回 200，分数为随机降级值
    """
    start = time.time()
    result = service.analyze(payload.image)
    logger.info(f"[analyze-face] 完成: score={result.score}, 耗时={int((time.time() - start) * 1000)}ms")
    return result
