#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
运行环境识别与环境变量读取

统一 ENV / APP_ENV 的判断，避免各模块各自解析环境变量
"""

import os
from enum import Enum
from typing import Optional


class EnvironmentType(Enum):
    """环境类型枚举"""
    LOCAL = "local"
    STAGING = "staging"
    PRODUCTION = "production"


_ENV_ALIASES = {
    "local": EnvironmentType.LOCAL,
    "dev": EnvironmentType.LOCAL,
    "development": EnvironmentType.LOCAL,
    "test": EnvironmentType.LOCAL,
    "staging": EnvironmentType.STAGING,
    "stage": EnvironmentType.STAGING,
    "prod": EnvironmentType.PRODUCTION,
    "production": EnvironmentType.PRODUCTION,
}


class EnvConfig:
    """
    环境变量读取器

    每次实例化时读取当前进程环境，未知的 ENV 值按本地开发处理
    """

    def __init__(self):
        raw = os.getenv("ENV", os.getenv("APP_ENV", "local")).strip().lower()
        self._env = _ENV_ALIASES.get(raw, EnvironmentType.LOCAL)

    @property
    def env(self) -> str:
        return self._env.value

    @property
    def is_production(self) -> bool:
        return self._env is EnvironmentType.PRODUCTION

    def get_config(self, key: str, default: str = None, required: bool = False) -> Optional[str]:
        """
        获取字符串配置

        Args:
            key: 环境变量名
            default: 默认值
            required: 为 True 时，缺失或空字符串都会抛出 ValueError
        """
        value = os.getenv(key, default)
        if value is not None:
            value = value.strip()
        if required and not value:
            raise ValueError(f"必需的环境变量 {key} 未设置")
        return value

    def get_int_config(self, key: str, default: int = 0) -> int:
        value = os.getenv(key, str(default))
        try:
            return int(value)
        except ValueError:
            return default

    def get_float_config(self, key: str, default: float = 0.0) -> float:
        value = os.getenv(key, str(default))
        try:
            return float(value)
        except ValueError:
            return default


def get_env_config() -> EnvConfig:
    """获取当前进程环境的配置读取器"""
    return EnvConfig()
