import pytest

from core.config import DEFAULT_PORT, ConnectionConfig
from core.errors import InvalidArgumentError


class TestConnectionConfig:

    def test_defaults(self):
        config = ConnectionConfig("hive.local")
        assert config.port == DEFAULT_PORT == 10000
        assert config.session_settings() == {}

    def test_from_dict_accepts_host_alias(self):
        config = ConnectionConfig.from_dict({"host": "hive.local", "port": 10001, "queue": "etl"})
        assert config.server == "hive.local"
        assert config.port == 10001
        assert config.session_settings() == {"mapred.job.queue.name": "etl"}

    def test_session_settings(self):
        config = ConnectionConfig("hive.local", priority="HIGH", queue="etl")
        assert config.session_settings() == {
            "mapred.job.priority": "HIGH",
            "mapred.job.queue.name": "etl",
        }

    @pytest.mark.parametrize("raw", [{}, {"server": ""}, {"server": "h", "port": 0}, {"server": "h", "port": "10000"}])
    def test_invalid_config(self, raw):
        with pytest.raises(InvalidArgumentError):
            ConnectionConfig.from_dict(raw)
