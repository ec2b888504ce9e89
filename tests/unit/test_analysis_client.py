#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
分析接口客户端单元测试
"""

from unittest.mock import MagicMock

import pytest
import requests

from capture_client.analysis_client import AnalysisClient, AnalysisOutcome
from capture_client.exceptions import AnalysisRequestError


def make_response(status_code, body=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


def make_client(response=None, error=None):
    session = MagicMock()
    if error is not None:
        session.post.side_effect = error
    else:
        session.post.return_value = response
    return AnalysisClient("http://localhost:8001/", timeout=5, session=session), session


class TestAnalysisClient:

    def test_success(self):
        client, session = make_client(make_response(200, {"score": 88, "analysis": "lifted"}))

        outcome = client.analyze("data:image/jpeg;base64,Zm9v")

        assert outcome == AnalysisOutcome(score=88, analysis="lifted")
        session.post.assert_called_once_with(
            "http://localhost:8001/api/analyze-face",
            json={"image": "data:image/jpeg;base64,Zm9v"},
            timeout=5,
        )

    def test_no_face_flag(self):
        client, _ = make_client(make_response(200, {"score": 0, "analysis": "?", "face_detected": False}))
        assert client.analyze("x").face_detected is False

    def test_error_message_surfaced(self):
        client, _ = make_client(make_response(400, {"error": "No image provided"}))

        with pytest.raises(AnalysisRequestError) as exc_info:
            client.analyze("")
        assert str(exc_info.value) == "No image provided"
        assert exc_info.value.status_code == 400

    def test_non_json_error(self):
        client, _ = make_client(make_response(502, text="<html>bad gateway</html>"))

        with pytest.raises(AnalysisRequestError) as exc_info:
            client.analyze("x")
        assert str(exc_info.value) == "Analysis failed. Please try again."
        assert exc_info.value.status_code == 502

    def test_network_error(self):
        client, _ = make_client(error=requests.ConnectionError("refused"))
        with pytest.raises(AnalysisRequestError):
            client.analyze("x")

    def test_unexpected_body(self):
        client, _ = make_client(make_response(200, {"result": 1}))
        with pytest.raises(AnalysisRequestError):
            client.analyze("x")
