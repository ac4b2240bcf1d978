"""
security helpers:
- random token values for access tokens, refresh tokens and grant codes
- resolving a configured access token generator from its import path
"""
from __future__ import annotations

import secrets
from importlib import import_module
from typing import Any, Callable, Dict, Optional

TOKEN_BYTES = 32


def generate_token(context: Optional[Dict[str, Any]] = None) -> str:
    """Return 64 lowercase hex characters from a CSPRNG.

    `context` is accepted so this can stand in for a custom access token
    generator; it is ignored.
    """
    return secrets.token_hex(TOKEN_BYTES)


def import_generator(path: str) -> Callable[[Dict[str, Any]], str]:
    """
    Resolve "package.module:function" (or "package.module.function") to a
    callable. Raises ImportError/AttributeError when it does not exist.
    """
    if ":" in path:
        module_name, _, attr = path.partition(":")
    else:
        module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        raise ImportError(f"Invalid generator path: {path!r}")

    generator = getattr(import_module(module_name), attr)
    if not callable(generator):
        raise TypeError(f"{path!r} is not callable")
    return generator
