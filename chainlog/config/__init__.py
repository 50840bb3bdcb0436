"""Configuration Package

Purpose: process-wide logging defaults for chainlog, loaded with
pydantic-settings from the environment.
"""

from .settings import LoggingSettings, LogFormat, ConfigurationError, get_settings, reset_settings

__all__ = ['LoggingSettings', 'LogFormat', 'ConfigurationError', 'get_settings', 'reset_settings']
