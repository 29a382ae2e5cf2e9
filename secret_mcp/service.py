"""Service lifecycle shared by the HTTP and stdio transports."""

from __future__ import annotations

import json
import logging
from typing import Optional

from secret_mcp.chain import ChainRegistry
from secret_mcp.config import ServerConfig
from secret_mcp.errors import ChainInitializationError
from secret_mcp.metrics import default_metrics

logger = logging.getLogger(__name__)

_LOG_EXTRAS = ("tool", "request_id", "error")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "message": record.getMessage(),
            "name": record.name,
        }
        for key in _LOG_EXTRAS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(config: ServerConfig) -> None:
    """Log to stderr so stdout stays free for the stdio transport."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    handler = logging.StreamHandler()
    if config.log_format.lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logging.basicConfig(level=level, handlers=[handler], force=True)


def build_registry(config: ServerConfig) -> ChainRegistry:
    return ChainRegistry(allow_offline=config.allow_offline_mode, settings=config)


async def start_chain(registry: ChainRegistry, config: ServerConfig) -> None:
    """
    Connect the registry and verify it, failing fast unless offline mode is allowed.

    Raises:
        ChainInitializationError: connection or health check failed and
            offline mode is not allowed.
    """
    logger.info(
        "Initializing Secret Network MCP server network=%s skip_network_check=%s allow_offline_mode=%s",
        config.network,
        config.skip_network_check,
        config.allow_offline_mode,
    )
    if config.skip_network_check:
        logger.info("Skipping network initialization (explicitly requested)")
        return

    try:
        await registry.initialize(
            config.network,
            overrides=config.overrides,
            allow_offline=config.allow_offline_mode,
        )
        health = await registry.health_check()
        default_metrics.record_health(health)
        logger.info("Chain health check completed: %s", health)
        if not health.get(registry.active_chain_name):
            raise ChainInitializationError("Secret Network connection failed health check")
    except ChainInitializationError as exc:
        if config.allow_offline_mode:
            logger.warning("Continuing in offline mode as explicitly requested: %s", exc)
            return
        logger.error("Network initialization failed: %s", exc)
        raise


async def check_health(registry: ChainRegistry) -> Optional[bool]:
    """Active chain health, or None when nothing is registered yet."""
    if not registry.get_available_chains():
        return None
    health = await registry.health_check()
    default_metrics.record_health(health)
    return bool(health.get(registry.active_chain_name))
