"""Compose security requirements with OR/AND semantics.

A *security requirement* maps scheme names to scope lists::

    {"OAuth": ["read", "write"], "ApiKey": []}

All keys of one requirement must be satisfied together (AND). A *list* of
requirements is satisfied when any one entry is (OR).

At operation level two states must never be conflated:

* ``security`` **absent** -- the operation inherits the document's global
  requirements.
* ``security == []`` -- the operation explicitly requires no authentication,
  overriding the global requirements.

The helpers below only ever set, clear, or read the key; they do not
collapse an empty list into absence or vice versa.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, MutableMapping, Optional

SecurityRequirement = dict[str, list[str]]


def create_requirement(
    scheme_name: str, scopes: Optional[Iterable[str]] = None
) -> SecurityRequirement:
    """Return a single-scheme requirement ``{scheme_name: scopes}``.

    Args:
        scheme_name: Name of a registered security scheme.
        scopes: OAuth2/OpenID scopes, or role names for other schemes.
            Defaults to an empty list.
    """
    return {scheme_name: list(scopes or [])}


def require_all(*requirements: Mapping[str, Iterable[str]]) -> SecurityRequirement:
    """Combine requirements into one AND-requirement.

    When a scheme appears more than once its scope lists are unioned,
    keeping first-seen order.

    Example::

        require_all(create_requirement("ApiKey"), create_requirement("OAuth", ["read"]))
        # {"ApiKey": [], "OAuth": ["read"]}
    """
    combined: SecurityRequirement = {}
    for requirement in requirements:
        for scheme, scopes in requirement.items():
            bucket = combined.setdefault(scheme, [])
            for scope in scopes:
                if scope not in bucket:
                    bucket.append(scope)
    return combined


def any_of(*requirements: Mapping[str, Iterable[str]]) -> list[SecurityRequirement]:
    """Return the requirements as an OR-list, copying each one."""
    return [{scheme: list(scopes) for scheme, scopes in req.items()} for req in requirements]


def set_operation_security(
    operation: MutableMapping[str, Any],
    requirements: Iterable[Mapping[str, Iterable[str]]],
) -> MutableMapping[str, Any]:
    """Replace an operation's ``security`` list. An empty iterable opts out."""
    operation["security"] = any_of(*requirements)
    return operation


def opt_out_of_security(operation: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Mark an operation as requiring no authentication (``security: []``)."""
    operation["security"] = []
    return operation


def inherit_security(operation: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Remove an operation's ``security`` key so it inherits the global list."""
    operation.pop("security", None)
    return operation


def effective_security(
    global_security: Optional[list[SecurityRequirement]],
    operation: Mapping[str, Any],
) -> Optional[list[SecurityRequirement]]:
    """Return the requirements that apply to *operation*.

    The operation's own list wins whenever the key is present, even when
    it is empty. Otherwise the global list applies, which may itself be
    ``None`` when nothing was declared.
    """
    if "security" in operation:
        return operation["security"]
    return global_security
