"""Structured logging for the codec, document and map layers, via telelog.

``get_logger``, ``record_event`` and ``span`` are all the package uses;
``configure`` lets the CLI switch to a named preset. Output is chosen from
``FLT_LOG_LEVEL``, ``FLT_LOG_FILE``, ``FLT_LOG_JSON`` and ``FLT_NO_CONSOLE``.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

LOGGER_NAME = "flt"
PRESETS = ("development", "production", "performance")

_TRUE = {"1", "true", "yes", "on"}

_loggers: Dict[str, Any] = {}
_config: Optional[Any] = None


def _setting(name: str) -> str:
    return os.getenv(f"FLT_{name}", "").strip()


def _text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def _build_config(preset: Optional[str] = None) -> Any:
    level = _setting("LOG_LEVEL").upper() or "INFO"
    console = _setting("NO_CONSOLE").lower() not in _TRUE
    as_json = _setting("LOG_JSON").lower() in _TRUE
    log_file = _setting("LOG_FILE")

    if preset == "development":
        level, console = "DEBUG", True
    elif preset == "production":
        console = False
        log_file = log_file or "flt.log"
    elif preset == "performance":
        level, console, as_json = "DEBUG", False, True
        log_file = log_file or "flt-performance.log"
    elif preset is not None:
        raise ValueError(f"Unknown telemetry preset '{preset}'.")

    config = tl.Config()
    config.with_min_level(level)
    config.with_console_output(console)
    config.with_json_format(as_json)
    if log_file:
        config.with_file_output(log_file)
    config.with_profiling(True)
    return config


def configure(preset: Optional[str] = None) -> None:
    """Rebuild the telelog config, optionally from one of ``PRESETS``."""

    global _config
    _config = _build_config(preset)
    _loggers.clear()


def get_logger(name: str = LOGGER_NAME) -> Any:
    global _config
    if _config is None:
        _config = _build_config()
    if name not in _loggers:
        _loggers[name] = tl.Logger.with_config(name, _config)
    return _loggers[name]


def _emit(log: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    pairs = [(str(key), _text(value)) for key, value in payload.items()]
    with_data = getattr(log, f"{level}_with", None)
    if with_data is not None:
        with_data(message, pairs)
        return
    plain = getattr(log, level, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {dict(pairs)}")


def record_event(
    name: str, *, level: str = "debug", data: Optional[Dict[str, Any]] = None
) -> None:
    """Log ``event::<name>`` with ``data`` as structured fields."""

    _emit(get_logger(), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Metadata collected inside a span, reported if the span fails."""

    name: str
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)


@contextmanager
def span(
    name: str,
    *,
    component: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block as ``name``, tracked under ``component`` when given.

    ``metadata`` is attached as logger context while the block runs. An
    exception leaving the block is logged as ``span::fail`` and re-raised.
    """

    log = get_logger()
    handle = SpanHandle(name, {k: _text(v) for k, v in (metadata or {}).items()})
    with ExitStack() as stack:
        for key, value in list(handle.metadata.items()):
            log.add_context(key, value)
            stack.callback(log.remove_context, key)
        if component:
            stack.enter_context(log.track_component(component))
        stack.enter_context(log.profile(name))
        try:
            yield handle
        except Exception as exc:
            _emit(
                log,
                "error",
                "span::fail",
                {
                    "span": name,
                    "component": component or "",
                    **handle.metadata,
                    "reason": str(exc),
                },
            )
            raise


__all__ = ["PRESETS", "SpanHandle", "configure", "get_logger", "record_event", "span"]
