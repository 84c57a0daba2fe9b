import logging
from typing import Optional, Union

_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_configured = False


def _resolve_level(level: Union[str, int, None]) -> int:
    """Преобразование имени уровня ("debug", "INFO", "20") в число"""
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    try:
        return int(level)
    except (TypeError, ValueError):
        return getattr(logging, str(level).strip().upper(), logging.INFO)


def configure_logging(level: Optional[Union[str, int]] = None, force: bool = False) -> None:
    """Настройка корневого логгера приложения"""
    global _configured

    if _configured and not force:
        return

    resolved = _resolve_level(level)
    logging.basicConfig(level=resolved, format=_DEFAULT_FORMAT, force=force)
    logging.getLogger("app").setLevel(resolved)
    _configured = True
