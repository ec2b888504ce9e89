# -*- coding: utf-8 -*-
"""
配置模块
"""

from .app_config import AppConfig, ConfigError, GeminiConfig, get_config, reload_config

__all__ = ['AppConfig', 'ConfigError', 'GeminiConfig', 'get_config', 'reload_config']
