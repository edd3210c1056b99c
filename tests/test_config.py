"""Unit tests for configuration loading."""

import json
import os
from unittest.mock import patch

import pytest
import yaml

from redis_metrics.agent.config import AgentConfig, ConfigError

FALCON_CFG = {
    "debug": True,
    "hostname": "",
    "attachtags": "cluster=cache",
    "metrics": {"used_memory": 1, "total_commands_processed": 0},
    "daemon": {
        "enable": True,
        "addrs": ["127.0.0.1:6379", "127.0.0.1:6380"],
        "username": "",
        "password": "secret",
        "timeout": 5,
    },
    "transfer": {"enable": True, "addr": "127.0.0.1:6060", "interval": 30, "timeout": 1000},
    "http": {"enable": True, "listen": "0.0.0.0:1989"},
}


class TestAgentConfig:
    """Test AgentConfig loading."""

    def test_defaults(self):
        config = AgentConfig()
        assert config.transfer.interval == 60
        assert config.daemon.addrs == []
        assert config.metrics == {}
        assert config.log_level == "INFO"

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps(FALCON_CFG))

        config = AgentConfig.from_yaml(str(path))

        assert config.debug is True
        assert config.attach_tags == "cluster=cache"
        assert config.metrics == {"used_memory": True, "total_commands_processed": False}
        assert config.daemon.addrs == ["127.0.0.1:6379", "127.0.0.1:6380"]
        assert config.daemon.password == "secret"
        assert config.daemon.timeout == 5
        assert config.transfer.addr == "127.0.0.1:6060"
        assert config.transfer.interval == 30

    def test_from_yaml_file(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text(yaml.safe_dump({
            "attach_tags": "env=prod",
            "daemon": {"addrs": "10.0.0.1:6379"},
            "transfer": {"addr": "falcon:6060"},
        }))

        config = AgentConfig.from_yaml(str(path))

        assert config.attach_tags == "env=prod"
        assert config.daemon.addrs == ["10.0.0.1:6379"]
        assert config.daemon.enable is True
        assert config.transfer.interval == 60

    def test_empty_file(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("")
        assert AgentConfig.from_yaml(str(path)) == AgentConfig()

    def test_invalid_interval(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text(yaml.safe_dump({"transfer": {"interval": "soon"}}))
        with pytest.raises(ConfigError):
            AgentConfig.from_yaml(str(path))

    def test_non_positive_interval(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text(yaml.safe_dump({"transfer": {"interval": 0}}))
        with pytest.raises(ConfigError):
            AgentConfig.from_yaml(str(path))

    def test_metrics_must_be_mapping(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text(yaml.safe_dump({"metrics": ["used_memory"]}))
        with pytest.raises(ConfigError):
            AgentConfig.from_yaml(str(path))

    def test_from_env(self):
        env = {
            "REDIS_METRICS_ADDRS": "10.0.0.1:6379, 10.0.0.2:6379",
            "REDIS_METRICS_TRANSFER_ADDR": "falcon:6060",
            "REDIS_METRICS_INTERVAL": "15",
            "REDIS_METRICS_PASSWORD": "secret",
        }
        with patch.dict(os.environ, env, clear=True):
            config = AgentConfig.from_env()

        assert config.daemon.addrs == ["10.0.0.1:6379", "10.0.0.2:6379"]
        assert config.transfer.addr == "falcon:6060"
        assert config.transfer.interval == 15
        assert config.daemon.password == "secret"

    def test_string_metric_flags(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text(yaml.safe_dump({"metrics": {"used_memory": "1", "expired_keys": "0"}}))

        config = AgentConfig.from_yaml(str(path))

        assert config.metrics == {"used_memory": True, "expired_keys": False}

    @pytest.mark.parametrize("flag", [2, "yes", 0.5, None])
    def test_invalid_metric_flag(self, tmp_path, flag):
        path = tmp_path / "cfg.yaml"
        path.write_text(yaml.safe_dump({"metrics": {"used_memory": flag}}))
        with pytest.raises(ConfigError):
            AgentConfig.from_yaml(str(path))

    def test_env_overrides_file_values(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps(FALCON_CFG))
        env = {"REDIS_METRICS_ADDRS": "10.0.0.9:6379", "REDIS_METRICS_PASSWORD": "rotated"}

        with patch.dict(os.environ, env, clear=True):
            config = AgentConfig.from_yaml(str(path)).apply_env()

        assert config.daemon.addrs == ["10.0.0.9:6379"]
        assert config.daemon.password == "rotated"
        assert config.transfer.addr == "127.0.0.1:6060"
