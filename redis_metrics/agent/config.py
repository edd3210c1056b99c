"""
Agent Configuration.
"""

import os
from dataclasses import dataclass, field, fields
from typing import Optional
import yaml


class ConfigError(ValueError):
    """Raised when the configuration file holds invalid values."""


@dataclass
class DaemonConfig:
    """Redis nodes to poll."""
    enable: bool = True
    addrs: list[str] = field(default_factory=list)
    password: str = ""
    timeout: int = 3  # seconds, per connection


@dataclass
class TransferConfig:
    """open-falcon transfer destination."""
    enable: bool = True
    addr: str = ""
    interval: int = 60  # seconds between collections
    timeout: int = 10  # seconds, per push


@dataclass
class AgentConfig:
    """Main agent configuration."""
    debug: bool = False
    hostname: str = ""  # empty means use the machine hostname
    attach_tags: str = ""

    # field name -> True for gauge, False for counter; empty means defaults
    metrics: dict[str, bool] = field(default_factory=dict)

    daemon: DaemonConfig = field(default_factory=DaemonConfig)
    transfer: TransferConfig = field(default_factory=TransferConfig)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_yaml(cls, path: str) -> "AgentConfig":
        """Load configuration from a YAML (or JSON) file."""
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: top level must be a mapping")
        return cls._from_dict(data)

    @classmethod
    def from_env(cls) -> "AgentConfig":
        """Load configuration from environment variables."""
        return cls().apply_env()

    def apply_env(self) -> "AgentConfig":
        """Override values with REDIS_METRICS_* environment variables."""
        config = self

        if os.getenv("REDIS_METRICS_HOSTNAME"):
            config.hostname = os.getenv("REDIS_METRICS_HOSTNAME")
        if os.getenv("REDIS_METRICS_ATTACH_TAGS"):
            config.attach_tags = os.getenv("REDIS_METRICS_ATTACH_TAGS")
        if os.getenv("REDIS_METRICS_ADDRS"):
            config.daemon.addrs = [
                a.strip() for a in os.getenv("REDIS_METRICS_ADDRS").split(",") if a.strip()
            ]
        if os.getenv("REDIS_METRICS_PASSWORD"):
            config.daemon.password = os.getenv("REDIS_METRICS_PASSWORD")
        if os.getenv("REDIS_METRICS_TRANSFER_ADDR"):
            config.transfer.addr = os.getenv("REDIS_METRICS_TRANSFER_ADDR")
        if os.getenv("REDIS_METRICS_INTERVAL"):
            config.transfer.interval = _as_int(
                os.getenv("REDIS_METRICS_INTERVAL"), "REDIS_METRICS_INTERVAL"
            )
            if config.transfer.interval <= 0:
                raise ConfigError("REDIS_METRICS_INTERVAL must be positive")
        if os.getenv("REDIS_METRICS_LOG_LEVEL"):
            config.log_level = os.getenv("REDIS_METRICS_LOG_LEVEL")

        return config

    @classmethod
    def _from_dict(cls, data: dict) -> "AgentConfig":
        """Create config from dictionary."""
        config = cls()

        # Simple fields
        for key in ["debug", "hostname", "log_level", "log_file"]:
            if key in data:
                setattr(config, key, data[key])

        # cfg.json spells it without the underscore
        tags = data.get("attach_tags", data.get("attachtags"))
        if tags:
            config.attach_tags = str(tags)

        if data.get("metrics"):
            config.metrics = _metric_flags(data["metrics"])

        if "daemon" in data:
            config.daemon = _section(DaemonConfig, data["daemon"], "daemon")
            if isinstance(config.daemon.addrs, str):
                config.daemon.addrs = [config.daemon.addrs]
            config.daemon.timeout = _as_int(config.daemon.timeout, "daemon.timeout")
            config.daemon.password = config.daemon.password or ""

        if "transfer" in data:
            config.transfer = _section(TransferConfig, data["transfer"], "transfer")
            config.transfer.interval = _as_int(config.transfer.interval, "transfer.interval")
            config.transfer.timeout = _as_int(config.transfer.timeout, "transfer.timeout")
            if config.transfer.interval <= 0:
                raise ConfigError("transfer.interval must be positive")

        return config


def _section(kind, data, name: str):
    if not isinstance(data, dict):
        raise ConfigError(f"{name} must be a mapping")
    # Drop keys the agent does not use (e.g. daemon.username)
    known = {f.name for f in fields(kind)}
    return kind(**{k: v for k, v in data.items() if k in known})


def _as_int(value, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None


_GAUGE_FLAGS = {"1": True, "true": True, "gauge": True,
                "0": False, "false": False, "counter": False}


def _metric_flags(data) -> dict[str, bool]:
    if not isinstance(data, dict):
        raise ConfigError("metrics must map field names to gauge flags")

    flags = {}
    for name, value in data.items():
        if isinstance(value, bool):
            flags[str(name)] = value
        elif isinstance(value, int) and value in (0, 1):
            flags[str(name)] = bool(value)
        elif isinstance(value, str) and value.strip().lower() in _GAUGE_FLAGS:
            flags[str(name)] = _GAUGE_FLAGS[value.strip().lower()]
        else:
            raise ConfigError(f"metrics.{name}: expected 1 (gauge) or 0 (counter), got {value!r}")
    return flags
