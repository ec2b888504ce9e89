#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pytest 全局配置

提供：
- FastAPI 应用与测试客户端
- 测试标记
"""

import os
import sys
import pytest

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)


@pytest.fixture
def stub_client():
    from tests.fixtures.doubles import StubInferenceClient
    return StubInferenceClient('{"score": 42, "analysis": "mellow"}')


# ==================== 应用和客户端 Fixtures ====================

@pytest.fixture
def gemini_env(monkeypatch):
    """最小可用的环境变量"""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.setenv("ENV", "test")
    return monkeypatch


@pytest.fixture
def app():
    from server.main import app
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def make_api_client(app):
    """
    用给定的推理客户端替身构造 TestClient

    不进入 lifespan，服务通过依赖覆盖注入
    """
    from fastapi.testclient import TestClient
    from server.api.v1.face_vibe import get_face_vibe_service
    from server.services.face_vibe_service import FaceVibeService

    def _make(inference_client, rng=None):
        service = FaceVibeService(inference_client, rng=rng)
        app.dependency_overrides[get_face_vibe_service] = lambda: service
        return TestClient(app)

    return _make


# ==================== Pytest Hooks ====================

def pytest_configure(config):
    config.addinivalue_line("markers", "unit: 单元测试")
    config.addinivalue_line("markers", "api: API 测试")


def pytest_collection_modifyitems(config, items):
    """根据路径自动添加标记"""
    for item in items:
        if "unit" in item.nodeid:
            item.add_marker(pytest.mark.unit)
        elif "api" in item.nodeid:
            item.add_marker(pytest.mark.api)
