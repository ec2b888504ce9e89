#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
面相状态分析接口模型
"""

from typing import Optional

from pydantic import BaseModel, Field


class AnalyzeFaceRequest(BaseModel):
    """分析请求：data URL 或纯 base64 图片"""
    image: Optional[str] = Field(default=None, description="data:image/<type>;base64,... 或纯 base64")

    class Config:
        json_schema_extra = {
            "example": {"image": "data:image/jpeg;base64,/9j/4AAQSkZJRg..."}
        }


class AnalysisResult(BaseModel):
    """
    分析结果

    score 已经被限制在 [0, 100]；face_detected 只在模型报告未识别到人脸时出现
    """
    score: int = Field(..., ge=0, le=100, description="状态分 0-100")
    analysis: str = Field(..., description="分析文字")
    face_detected: Optional[bool] = Field(default=None, description="未识别到人脸时为 false")


class ModelReply(BaseModel):
    """模型回复的结构化内容（score 允许 -1 与小数，后续再规范化）"""
    score: float = Field(..., allow_inf_nan=False)
    analysis: str = Field(..., min_length=1)


class ErrorResponse(BaseModel):
    error: str
