#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
FastAPI 应用主入口
"""

import logging
import os
import sys
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

# 优先加载 .env 文件（必须在读取配置之前）
from dotenv import load_dotenv

env_path = os.path.join(project_root, '.env')
if os.path.exists(env_path):
    load_dotenv(env_path)

from server.config.app_config import load_cors_origins, load_log_level, reload_config
from server.config.env_config import get_env_config

# 配置日志（必须在导入路由之前初始化）
logging.basicConfig(
    level=load_log_level(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

from server.api.v1.face_vibe import router as face_vibe_router
from server.services.face_vibe_service import FaceVibeService
from server.services.gemini_vision_client import create_gemini_client
from server.utils.exception_handler import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理：启动时读取一次配置，缺少 GEMINI_API_KEY 直接启动失败"""
    config = reload_config()
    app.state.config = config
    app.state.face_vibe_service = FaceVibeService(create_gemini_client(config.gemini))
    logger.info(f"✓ 服务已启动: env={config.env}, model={config.gemini.model}")
    yield
    logger.info("✓ 服务已停止")


app = FastAPI(
    title="FaceVibeAPI",
    description="娱乐向面相状态分析服务",
    version="1.0.0",
    lifespan=lifespan,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """记录请求日志，包括处理时间"""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    logger.info(
        f"{request.method} {request.url.path} - "
        f"Status: {response.status_code} - "
        f"Time: {process_time:.3f}s - "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )
    response.headers["X-Process-Time"] = str(process_time)
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=load_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# 注册路由
app.include_router(face_vibe_router, prefix="/api", tags=["面相状态分析"])


@app.get("/health")
async def health_check():
    """健康检查"""
    return {"status": "ok", "service": "face_vibe_analyzer"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "server.main:app",
        host="0.0.0.0",
        port=int(os.getenv('PORT', '8001')),
        reload=not get_env_config().is_production,
        workers=1
    )
