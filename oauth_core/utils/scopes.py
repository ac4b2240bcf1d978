"""
Scope policy.

A scope string is a space-separated list of scope tokens. Comparison is set
based: order and duplicates never matter. The permitted set is either the
application's own scope string (when it declares one) or the server's
default + optional scopes.
"""
from __future__ import annotations

import json
from typing import Iterable, List, Optional, Sequence, Union

from marshmallow import ValidationError

from oauth_core.errors import InvalidScopeError

Scopes = Union[str, Sequence[str], None]


def to_list(scopes: Scopes) -> List[str]:
    if scopes is None:
        return []
    if isinstance(scopes, str):
        return scopes.split()
    if not isinstance(scopes, (list, tuple)) or not all(isinstance(scope, str) for scope in scopes):
        raise ValidationError("must be a string or list of strings", field_name="scopes")
    return [scope for scope in scopes if scope]


def to_string(scopes: Scopes) -> str:
    return " ".join(to_list(scopes))


def equal(scopes: Scopes, other: Scopes) -> bool:
    return set(to_list(scopes)) == set(to_list(other))


def all_in(requested: Scopes, permitted: Scopes) -> bool:
    return set(to_list(requested)).issubset(to_list(permitted))


def resolve(requested: Scopes, default_scopes: Iterable[str]) -> str:
    """Return the requested scopes re-joined, or the defaults when none were asked for."""
    scopes = to_list(requested)
    if not scopes:
        scopes = to_list(list(default_scopes))
    return " ".join(scopes)


def permitted_scopes(
    default_scopes: Iterable[str],
    optional_scopes: Iterable[str],
    application_scopes: Optional[str] = None,
) -> Union[str, List[str]]:
    """Application scopes replace the server's optional scopes entirely."""
    if to_list(application_scopes):
        return application_scopes
    return list(default_scopes) + list(optional_scopes)


def format_permitted(permitted: Union[str, List[str]]) -> str:
    # '"app:read"' for an application scope string, '["public", "read"]' for server scopes
    return json.dumps(permitted)


def validate(
    requested: Scopes,
    *,
    default_scopes: Iterable[str],
    optional_scopes: Iterable[str] = (),
    application_scopes: Optional[str] = None,
) -> str:
    """Resolve `requested` and check it against the permitted scopes.

    Returns the normalized scope string. Raises InvalidScopeError naming the
    permitted scopes when any requested scope is not among them.
    """
    default_scopes = list(default_scopes)
    scopes = resolve(requested, default_scopes)
    permitted = permitted_scopes(default_scopes, optional_scopes, application_scopes)
    check(scopes, permitted)
    return scopes


def check(scopes: Scopes, permitted: Union[str, List[str]]) -> None:
    if not all_in(scopes, permitted):
        raise InvalidScopeError(
            f"not in permitted scopes list: {format_permitted(permitted)}",
            permitted=permitted,
        )
