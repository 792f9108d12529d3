"""LinkCheckConfig -- link probe configuration

Loaded from environment variables; nothing about probe targets is hard-coded.
"""

import os

import structlog
from pydantic import BaseModel, Field

log = structlog.get_logger()

_DEFAULT_TIMEOUT_S = 5
_DEFAULT_MAX_CONCURRENCY = 10


class LinkCheckConfig(BaseModel):
    """linkcheck package configuration

    Environment variables:
        LINKOPS_LINK_CHECK_TIMEOUT_S: per-request timeout (seconds, default 5)
        LINKOPS_LINK_CHECK_USER_AGENT: User-Agent header of probes
        LINKOPS_LINK_CHECK_MAX_CONCURRENCY: parallel probes (default 10)
    """

    timeout_s: int = Field(default=_DEFAULT_TIMEOUT_S, ge=1, description="Probe timeout (seconds)")
    user_agent: str = Field(
        default="LinkOps-LinkCheck/0.1",
        description="User-Agent sent with HEAD probes",
    )
    max_concurrency: int = Field(
        default=_DEFAULT_MAX_CONCURRENCY,
        ge=1,
        description="Maximum simultaneous probes",
    )


def _int_env(name: str, fallback: int) -> int | None:
    val = os.environ.get(name)
    if not val:
        return None
    try:
        return int(val)
    except ValueError:
        log.warning(
            "invalid_int_config",
            env_var=name,
            value=val,
            fallback=fallback,
        )
        return None


def load_link_check_config() -> LinkCheckConfig:
    """Load LinkCheckConfig from environment variables

    Invalid integers log a warning and keep the default so startup is not
    blocked.
    """
    kwargs: dict = {}

    if (val := _int_env("LINKOPS_LINK_CHECK_TIMEOUT_S", _DEFAULT_TIMEOUT_S)) is not None:
        kwargs["timeout_s"] = val

    if val := os.environ.get("LINKOPS_LINK_CHECK_USER_AGENT"):
        kwargs["user_agent"] = val

    if (
        val := _int_env("LINKOPS_LINK_CHECK_MAX_CONCURRENCY", _DEFAULT_MAX_CONCURRENCY)
    ) is not None:
        kwargs["max_concurrency"] = val

    return LinkCheckConfig(**kwargs)
