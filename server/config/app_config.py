#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
统一应用配置管理
所有配置统一从这里读取，启动时一次性加载
"""

from dataclasses import dataclass
from typing import List, Optional

from server.config.env_config import get_env_config


class ConfigError(RuntimeError):
    """配置缺失或非法（启动阶段直接失败）"""


@dataclass
class GeminiConfig:
    """Gemini 多模态推理服务配置"""
    api_key: str
    model: str = 'gemini-2.5-flash'
    temperature: float = 0.7
    timeout_seconds: float = 30.0
    max_attempts: int = 3
    initial_backoff: float = 0.5
    max_backoff: float = 4.0
    backoff_multiplier: float = 2.0

    def __repr__(self) -> str:
        # api_key 不进入日志
        return f"GeminiConfig(model={self.model!r}, timeout_seconds={self.timeout_seconds}, max_attempts={self.max_attempts})"

    @classmethod
    def from_env(cls) -> 'GeminiConfig':
        """从环境变量创建配置，GEMINI_API_KEY 缺失时抛出 ConfigError"""
        env_config = get_env_config()
        try:
            api_key = env_config.get_config('GEMINI_API_KEY', required=True)
        except ValueError as e:
            raise ConfigError(str(e)) from e

        max_attempts = env_config.get_int_config('GEMINI_MAX_ATTEMPTS', default=3)
        timeout_seconds = env_config.get_float_config('GEMINI_TIMEOUT_SECONDS', default=30.0)
        if max_attempts < 1:
            raise ConfigError(f"GEMINI_MAX_ATTEMPTS 必须 >= 1，当前值: {max_attempts}")
        if timeout_seconds <= 0:
            raise ConfigError(f"GEMINI_TIMEOUT_SECONDS 必须 > 0，当前值: {timeout_seconds}")

        return cls(
            api_key=api_key,
            model=env_config.get_config('GEMINI_MODEL', default='gemini-2.5-flash'),
            temperature=env_config.get_float_config('GEMINI_TEMPERATURE', default=0.7),
            timeout_seconds=timeout_seconds,
            max_attempts=max_attempts,
        )


def parse_cors_origins(value: Optional[str]) -> List[str]:
    """逗号分隔的 CORS 来源，空值按 * 处理"""
    origins = [o.strip() for o in (value or '').split(',') if o.strip()]
    return origins or ['*']


def load_log_level() -> str:
    """日志级别（LOG_LEVEL，默认 INFO）

    在导入路由之前调用，不依赖 GEMINI_API_KEY
    """
    return get_env_config().get_config('LOG_LEVEL', default='INFO').upper() or 'INFO'


def load_cors_origins() -> List[str]:
    """CORS 来源（CORS_ORIGINS），中间件在应用创建时注册，因此不走 lifespan"""
    return parse_cors_origins(get_env_config().get_config('CORS_ORIGINS'))


@dataclass
class AppConfig:
    """应用配置"""
    env: str = 'local'

    # 子配置
    gemini: GeminiConfig = None

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """从环境变量创建完整配置"""
        env_config = get_env_config()
        config = cls(env=env_config.env)
        config.gemini = GeminiConfig.from_env()
        return config


# 全局配置实例（单例模式）
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """获取全局配置实例（单例）"""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def reload_config() -> AppConfig:
    """重新读取环境变量（测试中切换环境时使用）"""
    global _config
    _config = AppConfig.from_env()
    return _config
