from __future__ import annotations

import asyncio


def classify_error(provider: str, exc: BaseException) -> str:
    """Classify a catalog query failure into a provider-agnostic category.

    Categories: ``timeout``, ``connectivity``, ``auth``, ``syntax``, ``unknown``.
    """
    message = str(exc).lower()
    class_name = exc.__class__.__name__.lower()
    module_name = exc.__class__.__module__.lower()
    provider = (provider or "unknown").lower()

    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)) or _matches_any(
        message, ("timeout", "timed out", "canceling statement due to statement timeout")
    ):
        return "timeout"
    if isinstance(exc, ConnectionError) or _matches_any(
        message,
        (
            "could not connect",
            "connection refused",
            "connection reset",
            "connection was closed",
            "connection failed",
            "name or service not known",
        ),
    ):
        return "connectivity"
    if _matches_any(
        message,
        (
            "permission denied",
            "password authentication failed",
            "not authorized",
            "access denied",
        ),
    ):
        return "auth"
    if _matches_any(message, ("syntax error", "does not exist", "parse error")):
        return "syntax"

    if provider == "postgres" and module_name.startswith("asyncpg"):
        if "syntax" in class_name or "undefined" in class_name:
            return "syntax"
        if "invalidauthorization" in class_name or "insufficientprivilege" in class_name:
            return "auth"
        if "connection" in class_name or "cannotconnect" in class_name:
            return "connectivity"

    if class_name in {"connectionerror", "operationalerror", "interfaceerror"}:
        return "connectivity"

    return "unknown"


def _matches_any(text: str, fragments: tuple[str, ...]) -> bool:
    return any(fragment in text for fragment in fragments)
