"""Misc cross-cutting helpers."""

from __future__ import annotations

import os
import re

_ES_ENDINGS = ("s", "x", "z", "ch", "sh")


def get_env_bool(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(int(default))).lower() in {"1", "true", "yes"}


def pluralize(name: str) -> str:
    """Return a naive English plural for a model name.

    Keeps the casing of the input so ``Customer`` becomes ``Customers`` and
    ``product`` becomes ``products``.

    Examples:
        >>> pluralize("Category")
        "Categories"
        >>> pluralize("box")
        "boxes"
    """
    if not name:
        return name
    lower = name.lower()
    if re.search(r"[^aeiou]y$", lower):
        return name[:-1] + ("IES" if name.isupper() else "ies")
    if lower.endswith(_ES_ENDINGS):
        return name + ("ES" if name.isupper() else "es")
    return name + ("S" if name.isupper() else "s")
