import logging
import os
from dataclasses import dataclass


@dataclass(frozen=True)
class NodeConfig:
    log_level: int
    log_messages: bool  # per-message DEBUG events
    metrics_enabled: bool


def _is_truthy(v: str | None) -> bool:
    if v is None:
        return False
    return v.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return _is_truthy(raw)


def _log_level(name: str | None) -> int:
    level = logging.getLevelName((name or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def load_node_config() -> NodeConfig:
    return NodeConfig(
        log_level=_log_level(os.getenv("ECHONODE_LOG_LEVEL")),
        log_messages=_env_bool("ECHONODE_LOG_MESSAGES", False),
        metrics_enabled=_env_bool("ECHONODE_METRICS_ENABLED", True),
    )
