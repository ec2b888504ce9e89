#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
图片载荷规范化

- 去掉 data URL 前缀（data:image/<subtype>;base64,）
- 根据前缀或文件头识别 MIME 类型
- 调用推理服务之前先解码一次，无法解码的数据以 400 Invalid image data 拒绝，不转发给上游
"""

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Optional

from server.utils.exception_handler import InvalidImageError, MissingInputError

DATA_URL_PREFIX = re.compile(r'^data:image/([a-z]+);base64,', re.IGNORECASE)

DEFAULT_MIME_TYPE = 'image/jpeg'

_SUBTYPE_ALIASES = {'jpg': 'jpeg', 'pjpeg': 'jpeg'}

# (文件头, MIME)，WEBP 需要额外检查偏移 8 处的标记
_SIGNATURES = (
    (b'\x89PNG\r\n\x1a\n', 'image/png'),
    (b'\xff\xd8\xff', 'image/jpeg'),
    (b'GIF87a', 'image/gif'),
    (b'GIF89a', 'image/gif'),
    (b'BM', 'image/bmp'),
)


@dataclass(frozen=True)
class ImagePayload:
    """去掉前缀后的 base64 数据及其 MIME 类型"""
    data: str
    mime_type: str

    def to_bytes(self) -> bytes:
        return decode_base64(self.data)


def decode_base64(data: str) -> bytes:
    """宽松解码：忽略换行等非字母表字符，补齐缺失的 padding"""
    compact = re.sub(r'\s+', '', data)
    compact += '=' * (-len(compact) % 4)
    try:
        return base64.b64decode(compact)
    except (binascii.Error, ValueError) as e:
        raise InvalidImageError() from e


def strip_data_url_prefix(image: str) -> str:
    """去掉开头的 data URL 前缀，没有前缀时原样返回"""
    return DATA_URL_PREFIX.sub('', image, count=1)


def sniff_mime_type(raw: bytes) -> Optional[str]:
    """根据文件头猜测图片类型，无法识别时返回 None"""
    for signature, mime_type in _SIGNATURES:
        if raw.startswith(signature):
            return mime_type
    if raw[:4] == b'RIFF' and raw[8:12] == b'WEBP':
        return 'image/webp'
    return None


def normalize_image_payload(image: Optional[str]) -> ImagePayload:
    """
    规范化客户端提交的图片

    Args:
        image: data URL 或纯 base64 字符串

    Returns:
        ImagePayload: 纯 base64 数据 + MIME 类型

    Raises:
        MissingInputError: image 缺失或为空
        InvalidImageError: base64 无法解码
    """
    if not isinstance(image, str) or not image.strip():
        raise MissingInputError()

    image = image.strip()
    match = DATA_URL_PREFIX.match(image)
    data = strip_data_url_prefix(image)
    if not data:
        raise MissingInputError()

    raw = decode_base64(data)

    if match:
        subtype = match.group(1).lower()
        mime_type = f"image/{_SUBTYPE_ALIASES.get(subtype, subtype)}"
    else:
        mime_type = sniff_mime_type(raw[:16]) or DEFAULT_MIME_TYPE

    return ImagePayload(data=data, mime_type=mime_type)
