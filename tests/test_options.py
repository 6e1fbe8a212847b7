"""Tests for option validation, defaults and Redis client construction."""

from datetime import timedelta
from unittest.mock import Mock

import pytest
import redis
from redis.sentinel import SentinelManagedConnection, SentinelManagedSSLConnection

from enqueuer.config import Options, TLSConfig
from enqueuer.errors import ConfigurationError
from enqueuer.options import (
    DirectTopology,
    SentinelTopology,
    normalize_namespace,
    resolve_options,
    resolve_options_with_redis_client,
)
from enqueuer.store import RedisStore

SENTINELS = "localhost:26379,localhost:46379"


class TestTopology:
    def test_requires_server_or_sentinels(self):
        with pytest.raises(ConfigurationError, match="either the Server or Sentinels"):
            resolve_options(Options(process_id="2"))

    def test_master_name_alone_is_not_a_topology(self):
        with pytest.raises(ConfigurationError, match="either the Server or Sentinels"):
            resolve_options(Options(redis_master_name="mymaster", process_id="1"))

    def test_rejects_both_topologies(self):
        with pytest.raises(ConfigurationError, match="not both"):
            resolve_options(Options(
                server_addr="localhost:6379",
                sentinel_addrs=SENTINELS,
                redis_master_name="mymaster",
                process_id="1",
            ))

    def test_sentinel_requires_master_name(self):
        with pytest.raises(ConfigurationError, match="master name"):
            resolve_options(Options(
                sentinel_addrs=SENTINELS,
                process_id="1",
                poll_interval=timedelta(seconds=1),
            ))

    def test_sentinel_list_of_only_commas(self):
        with pytest.raises(ConfigurationError, match="no addresses"):
            resolve_options(Options(sentinel_addrs=" , ,", redis_master_name="m", process_id="1"))

    def test_bad_port(self):
        with pytest.raises(ConfigurationError, match="Invalid port"):
            resolve_options(Options(server_addr="localhost:redis", process_id="1"))

    def test_direct_topology(self):
        opts = resolve_options(Options(server_addr="localhost:6379", process_id="1"))
        assert opts.topology == DirectTopology(address="localhost:6379")

    def test_sentinel_addresses_keep_order(self):
        opts = resolve_options(Options(
            sentinel_addrs="localhost:26379, localhost:46379",
            redis_master_name="123",
            process_id="1",
        ))
        assert opts.topology == SentinelTopology(
            addresses=("localhost:26379", "localhost:46379"),
            master_name="123",
        )


class TestGeneralOptions:
    def test_requires_process_id(self):
        with pytest.raises(ConfigurationError, match="ProcessID"):
            resolve_options(Options(server_addr="localhost:6379"))

    def test_requires_process_id_for_sentinel_too(self):
        with pytest.raises(ConfigurationError, match="ProcessID"):
            resolve_options(Options(sentinel_addrs=SENTINELS, redis_master_name="123"))

    def test_custom_process_id(self):
        for pid in ("1", "2"):
            opts = resolve_options(Options(server_addr="localhost:6379", process_id=pid))
            assert opts.process_id == pid

    def test_namespace_defaults_empty(self):
        opts = resolve_options(Options(server_addr="localhost:6379", process_id="1"))
        assert opts.namespace == ""

    def test_adds_colon_to_namespace(self):
        opts = resolve_options(Options(server_addr="localhost:6379", process_id="1", namespace="prod"))
        assert opts.namespace == "prod:"

    def test_namespace_colon_not_doubled(self):
        assert normalize_namespace("prod:") == "prod:"
        assert normalize_namespace("prod") == "prod:"
        assert normalize_namespace("") == ""

    def test_default_poll_interval(self):
        opts = resolve_options(Options(server_addr="localhost:6379", process_id="1"))
        assert opts.poll_interval == timedelta(seconds=15)

    def test_custom_poll_interval(self):
        opts = resolve_options(Options(
            server_addr="localhost:6379",
            process_id="1",
            poll_interval=timedelta(seconds=1),
        ))
        assert opts.poll_interval == timedelta(seconds=1)

    def test_negative_poll_interval_falls_back(self):
        opts = resolve_options(Options(
            server_addr="localhost:6379",
            process_id="1",
            poll_interval=timedelta(seconds=-3),
        ))
        assert opts.poll_interval == timedelta(seconds=15)


class TestDirectClient:
    def test_pool_size_defaults_to_one(self):
        opts = resolve_options(Options(server_addr="localhost:6379", process_id="2"))
        assert opts.pool_size == 1
        assert opts.client.connection_pool.max_connections == 1

    def test_pool_size_is_kept(self):
        opts = resolve_options(Options(server_addr="localhost:6379", process_id="1", pool_size=20))
        assert opts.pool_size == 20
        assert opts.client.connection_pool.max_connections == 20

    def test_pool_blocks_when_exhausted(self):
        opts = resolve_options(Options(server_addr="localhost:6379", process_id="1"))
        assert isinstance(opts.client.connection_pool, redis.BlockingConnectionPool)

    def test_address_database_and_password(self):
        opts = resolve_options(Options(
            server_addr="cache.internal:6380",
            database=3,
            password="s3cret",
            process_id="1",
        ))
        kwargs = opts.client.connection_pool.connection_kwargs
        assert kwargs["host"] == "cache.internal"
        assert kwargs["port"] == 6380
        assert kwargs["db"] == 3
        assert kwargs["password"] == "s3cret"

    def test_port_defaults(self):
        opts = resolve_options(Options(server_addr="localhost", process_id="1"))
        assert opts.client.connection_pool.connection_kwargs["port"] == 6379

    def test_no_tls_by_default(self):
        opts = resolve_options(Options(server_addr="localhost:6379", process_id="1", pool_size=20))
        assert opts.tls is None
        assert opts.client.connection_pool.connection_class is redis.Connection
        assert "ssl_ca_certs" not in opts.client.connection_pool.connection_kwargs

    def test_tls(self):
        opts = resolve_options(Options(
            server_addr="localhost:6379",
            process_id="1",
            pool_size=20,
            tls=TLSConfig(ca_certs="/etc/ssl/test_tls.pem"),
        ))
        pool = opts.client.connection_pool
        assert pool.connection_class is redis.SSLConnection
        assert pool.connection_kwargs["ssl_ca_certs"] == "/etc/ssl/test_tls.pem"
        assert pool.connection_kwargs["ssl_cert_reqs"] == "required"


class TestSentinelClient:
    def _opts(self, **kwargs):
        return resolve_options(Options(
            sentinel_addrs=SENTINELS,
            redis_master_name="123",
            process_id="1",
            poll_interval=timedelta(seconds=1),
            **kwargs,
        ))

    def test_failover_client(self):
        opts = self._opts()
        pool = opts.client.connection_pool
        assert pool.service_name == "123"
        assert pool.connection_class is SentinelManagedConnection
        sentinels = [
            (s.connection_pool.connection_kwargs["host"], s.connection_pool.connection_kwargs["port"])
            for s in pool.sentinel_manager.sentinels
        ]
        assert sentinels == [("localhost", 26379), ("localhost", 46379)]

    def test_pool_size(self):
        assert self._opts().client.connection_pool.max_connections == 1
        assert self._opts(pool_size=7).client.connection_pool.max_connections == 7

    def test_tls(self):
        opts = self._opts(tls=TLSConfig(ca_certs="/etc/ssl/test_tls.pem"))
        pool = opts.client.connection_pool
        assert pool.connection_class is SentinelManagedSSLConnection
        assert pool.connection_kwargs["ssl_ca_certs"] == "/etc/ssl/test_tls.pem"


class TestSharedClient:
    def test_uses_given_client(self):
        client = Mock()
        opts = resolve_options_with_redis_client(
            Options(server_addr="localhost:6379", process_id="1", namespace="prod"),
            client,
        )
        assert opts.client is client
        assert isinstance(opts.store, RedisStore)
        assert opts.store.client is client
        assert opts.namespace == "prod:"

    def test_still_validates(self):
        with pytest.raises(ConfigurationError, match="ProcessID"):
            resolve_options_with_redis_client(Options(server_addr="localhost:6379"), Mock())

    def test_client_required(self):
        with pytest.raises(ConfigurationError, match="client is required"):
            resolve_options_with_redis_client(Options(server_addr="localhost:6379", process_id="1"), None)
