"""Derived API clients generated from the introspected project model."""

from thisgen.client.typescript import TYPESCRIPT_TYPE_MAP, emit

SUPPORTED_LANGUAGES: tuple[str, ...] = ("typescript",)

__all__ = [
    "SUPPORTED_LANGUAGES",
    "TYPESCRIPT_TYPE_MAP",
    "emit",
]
