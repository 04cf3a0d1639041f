"""Tests for ``columnspine.adapters.types``: connection configuration."""

import pytest

from columnspine.adapters.types import CassandraConfig
from columnspine.core.errors import ConfigError, InvalidConfigError


class TestFromConnectionString:
    def test_full(self):
        config = CassandraConfig.from_connection_string(
            "Host=10.0.0.1,10.0.0.2;Port=9043;Username=app;Password=secret;Keyspace=crawl;"
        )
        assert config.contact_points == ["10.0.0.1", "10.0.0.2"]
        assert config.port == 9043
        assert config.username == "app"
        assert config.password == "secret"
        assert config.keyspace == "crawl"

    def test_keys_case_insensitive_and_aliases(self):
        config = CassandraConfig.from_connection_string("HOST=db;user id=u;PWD=p")
        assert config.contact_points == ["db"]
        assert config.username == "u"
        assert config.password == "p"

    def test_defaults_kept(self):
        config = CassandraConfig.from_connection_string("Host=db")
        assert config.port == 9042
        assert config.replication_factor == 1

    def test_password_may_contain_equals(self):
        config = CassandraConfig.from_connection_string("Host=db;Password=a=b")
        assert config.password == "a=b"

    def test_replication_factor(self):
        config = CassandraConfig.from_connection_string("Host=db;Replication Factor=3")
        assert config.replication_factor == 3

    def test_empty_rejected(self):
        with pytest.raises(ConfigError):
            CassandraConfig.from_connection_string("  ")

    def test_unknown_key_rejected(self):
        with pytest.raises(InvalidConfigError, match="Unknown"):
            CassandraConfig.from_connection_string("Host=db;Colour=blue")

    def test_malformed_segment_rejected(self):
        with pytest.raises(InvalidConfigError, match="Malformed"):
            CassandraConfig.from_connection_string("Host=db;oops")

    def test_bad_port_rejected(self):
        with pytest.raises(InvalidConfigError):
            CassandraConfig.from_connection_string("Host=db;Port=abc")

    def test_no_hosts_rejected(self):
        with pytest.raises(InvalidConfigError):
            CassandraConfig.from_connection_string("Host= , ")


class TestToConnectionString:
    def test_round_trip(self):
        config = CassandraConfig(
            contact_points=["a", "b"], port=9043, username="u", password="p", keyspace="ks"
        )
        parsed = CassandraConfig.from_connection_string(config.to_connection_string())
        assert parsed == config

    def test_round_trip_replication_factor(self):
        config = CassandraConfig(contact_points=["a"], replication_factor=3)
        text = config.to_connection_string()
        assert "Replication Factor=3" in text
        assert CassandraConfig.from_connection_string(text).replication_factor == 3

    def test_minimal(self):
        assert CassandraConfig().to_connection_string() == "Host=127.0.0.1;Port=9042;"
