"""
Environment-aware configuration.

Settings are read once from the environment (and .env if present) and held in
a process-wide config object. Scope lists, the refresh token flags and the
access token generator are read-only after start-up; `configure()` exists so
a host application (or a test) can override them before issuing tokens.
"""
from __future__ import annotations

import os
from typing import Callable, Optional

from dotenv import load_dotenv

from oauth_core.utils.security import generate_token, import_generator

load_dotenv()  # Read .env if present


def _env_list(name: str, default: str = "") -> tuple:
    return tuple(os.getenv(name, default).split())


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class BaseConfig:
    APP_ENV = os.getenv("APP_ENV", "dev")
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///oauth-core.db")
    SQL_ECHO = _env_bool("SQL_ECHO")

    # Scopes granted when a request names none
    DEFAULT_SCOPES = _env_list("OAUTH_DEFAULT_SCOPES", "public")
    # Extra scopes a request may name when its application declares no scopes
    OPTIONAL_SCOPES = _env_list("OAUTH_OPTIONAL_SCOPES")

    USE_REFRESH_TOKEN = _env_bool("OAUTH_USE_REFRESH_TOKEN")
    REVOKE_REFRESH_TOKEN_ON_USE = _env_bool("OAUTH_REVOKE_REFRESH_TOKEN_ON_USE")
    ACCESS_TOKEN_EXPIRES_IN = int(os.getenv("OAUTH_ACCESS_TOKEN_EXPIRES_IN", "7200"))
    # "package.module:function"; unset means generate_token
    ACCESS_TOKEN_GENERATOR = os.getenv("OAUTH_ACCESS_TOKEN_GENERATOR") or None

    def __init__(self, **overrides):
        for key, value in overrides.items():
            if not hasattr(self, key):
                raise AttributeError(f"Unknown setting: {key}")
            setattr(self, key, value)

    @property
    def access_token_generator(self) -> Callable[[dict], str]:
        generator = self.ACCESS_TOKEN_GENERATOR
        if generator is None:
            return generate_token
        if isinstance(generator, str):
            generator = import_generator(generator)
            self.ACCESS_TOKEN_GENERATOR = generator
        return generator


class DevelopmentConfig(BaseConfig):
    SQL_ECHO = _env_bool("SQL_ECHO", "true")


class TestingConfig(BaseConfig):
    DATABASE_URL = "sqlite://"
    SQL_ECHO = False
    DEFAULT_SCOPES = ("public",)
    OPTIONAL_SCOPES = ("read", "write")
    USE_REFRESH_TOKEN = True
    REVOKE_REFRESH_TOKEN_ON_USE = True
    ACCESS_TOKEN_GENERATOR = None


class ProductionConfig(BaseConfig):
    SQL_ECHO = False


def get_config(name: str | None = None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig


_current: Optional[BaseConfig] = None


def current_config() -> BaseConfig:
    global _current
    if _current is None:
        _current = get_config()()
    return _current


def configure(**overrides) -> BaseConfig:
    """Apply setting overrides to the process-wide config and return it."""
    config = current_config()
    for key, value in overrides.items():
        if not hasattr(config, key):
            raise AttributeError(f"Unknown setting: {key}")
        setattr(config, key, value)
    return config


def reset_config() -> BaseConfig:
    """
    Drop every override and rebuild the config for the current APP_ENV.

    Setting values are read from the environment once, at import; only the
    APP_ENV selection is re-read here.
    """
    global _current
    _current = None
    return current_config()
