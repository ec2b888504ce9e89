#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
图片载荷规范化单元测试
"""

import pytest

from server.utils.exception_handler import InvalidImageError, MissingInputError
from server.utils.image_payload import (
    DEFAULT_MIME_TYPE,
    normalize_image_payload,
    sniff_mime_type,
    strip_data_url_prefix,
)
from tests.fixtures.sample_data import (
    GIF_HEADER,
    JPEG_DATA_URL,
    PNG_DATA_URL,
    PNG_HEADER,
    RAW_JPEG_BASE64,
    RAW_PNG_BASE64,
    WEBP_HEADER,
)


class TestStripPrefix:
    """data URL 前缀去除测试"""

    @pytest.mark.parametrize("image,expected", [
        ("data:image/png;base64,AAAA", "AAAA"),
        ("data:image/jpeg;base64,Zm9v", "Zm9v"),
        ("DATA:IMAGE/PNG;BASE64,AAAA", "AAAA"),
        ("AAAA", "AAAA"),
        ("data:text/plain;base64,AAAA", "data:text/plain;base64,AAAA"),
    ])
    def test_strip(self, image, expected):
        assert strip_data_url_prefix(image) == expected

    def test_only_leading_prefix_removed(self):
        """只去掉开头的前缀"""
        image = "AAAA" + "data:image/png;base64,"
        assert strip_data_url_prefix(image) == image


class TestNormalize:
    """规范化测试"""

    def test_png_prefix(self):
        payload = normalize_image_payload(PNG_DATA_URL)
        assert payload.data == "AAAA"
        assert payload.mime_type == "image/png"

    def test_jpeg_prefix(self):
        payload = normalize_image_payload(JPEG_DATA_URL)
        assert payload.data == "Zm9v"
        assert payload.mime_type == "image/jpeg"
        assert payload.to_bytes() == b"foo"

    def test_jpg_alias(self):
        assert normalize_image_payload("data:image/jpg;base64,Zm9v").mime_type == "image/jpeg"

    def test_raw_base64_sniffed(self):
        assert normalize_image_payload(RAW_PNG_BASE64).mime_type == "image/png"
        assert normalize_image_payload(RAW_JPEG_BASE64).mime_type == "image/jpeg"

    def test_raw_base64_unknown_defaults_to_jpeg(self):
        payload = normalize_image_payload("Zm9v")
        assert payload.data == "Zm9v"
        assert payload.mime_type == DEFAULT_MIME_TYPE

    def test_surrounding_whitespace_ignored(self):
        assert normalize_image_payload("  " + PNG_DATA_URL + "\n").data == "AAAA"

    def test_missing_padding_tolerated(self):
        assert normalize_image_payload("Zm9vYg").to_bytes() == b"foob"

    @pytest.mark.parametrize("image", [None, "", "   ", "data:image/png;base64,", 123])
    def test_missing_input(self, image):
        with pytest.raises(MissingInputError) as exc_info:
            normalize_image_payload(image)
        assert exc_info.value.code == 400
        assert exc_info.value.message == "No image provided"

    def test_invalid_base64(self):
        with pytest.raises(InvalidImageError):
            normalize_image_payload("Zm9vY")


class TestSniff:
    """文件头识别测试"""

    def test_signatures(self):
        assert sniff_mime_type(PNG_HEADER) == "image/png"
        assert sniff_mime_type(GIF_HEADER) == "image/gif"
        assert sniff_mime_type(WEBP_HEADER) == "image/webp"

    def test_unknown(self):
        assert sniff_mime_type(b"foo") is None
