from __future__ import annotations

from importlib import metadata


def tool_version() -> str:
    """
    Версия установленного дистрибутива xpathscript.
    Не зависит от остальных модулей (во избежание циклов).
    """
    try:
        return metadata.version("xpathscript")
    except metadata.PackageNotFoundError:
        return "0.0.0"


__all__ = ["tool_version"]
