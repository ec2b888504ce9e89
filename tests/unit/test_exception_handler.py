#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
统一异常处理单元测试
"""

import asyncio
import json

import pytest
from fastapi import HTTPException

from server.utils.exception_handler import (
    MissingInputError,
    UpstreamTimeoutError,
    api_error_handler,
)


def body_of(response):
    return json.loads(response.body)


class TestApiErrorHandler:

    def test_sync_business_error(self):
        @api_error_handler
        def endpoint():
            raise MissingInputError()

        response = endpoint()
        assert response.status_code == 400
        assert body_of(response) == {"error": "No image provided"}

    def test_async_business_error(self):
        @api_error_handler
        async def endpoint():
            raise UpstreamTimeoutError()

        response = asyncio.run(endpoint())
        assert response.status_code == 504
        assert body_of(response) == {"error": "Analysis timed out"}

    def test_unknown_error_generic(self, caplog):
        @api_error_handler
        def endpoint():
            raise ZeroDivisionError("secret detail")

        response = endpoint()
        assert response.status_code == 500
        assert body_of(response) == {"error": "Failed to analyze image"}
        assert "secret detail" in caplog.text

    def test_http_exception_passthrough(self):
        @api_error_handler
        def endpoint():
            raise HTTPException(status_code=418)

        with pytest.raises(HTTPException):
            endpoint()

    def test_success_passthrough(self):
        @api_error_handler
        def endpoint(value):
            return value * 2

        assert endpoint(21) == 42
