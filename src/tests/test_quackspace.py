"""
Test suite for the DuckDB-facing surface of quackspace.

This test file covers:
- Builder API functionality
- Core session management and view creation
- ETL utilities
- An end-to-end session against a faked Rackspace API
"""
import logging
from unittest.mock import Mock, patch

import duckdb
import pandas as pd
import pytest

from quackspace import QuackspaceBuilder, session, with_session
from quackspace.config import ConnectionConfig
from quackspace.core import _prepare_connection, _selected_tables, render_view_sql
from quackspace.exceptions import ConfigError, UpstreamStatusError
from quackspace.tables import TABLE_REGISTRY
from quackspace.utils import ETLUtils, rows_to_frame

from conftest import DNS_URL, IDENTITY_ENDPOINT, make_response

DOMAIN = {"id": "2725233", "accountId": 555, "name": "example.com", "ttl": 300, "emailAddress": "admin@example.com"}
RECORDS = [{"id": "A-1", "type": "A", "name": "www.example.com", "data": "192.0.2.10", "ttl": 300}]


@pytest.fixture
def dns_http(fake_http):
    fake_http.add("GET", f"{DNS_URL}/domains", make_response(200, {"domains": [DOMAIN]}))
    fake_http.add("GET", f"{DNS_URL}/domains/2725233/records", make_response(200, {"records": RECORDS}))
    return fake_http


@pytest.fixture
def dns_config(rax_config):
    rax_config.tables = {"rackspace_dns_domain": {}}
    return rax_config


# ==================== BUILDER API TESTS ====================

def test_builder_creation():
    """Test QuackspaceBuilder initialization."""
    builder = QuackspaceBuilder()
    assert builder.get_configs() == []


def test_builder_add_connection():
    builder = QuackspaceBuilder()

    result = builder.add_connection(
        name="rax_prod",
        identity_endpoint=IDENTITY_ENDPOINT,
        tenant_id=555,
        region="HKG",
        secret_name="rax_prod",
        tables=["rackspace_compute"],
    )

    # Should return self for chaining
    assert result is builder

    [config] = builder.get_configs()
    assert config.name == "rax_prod"
    assert config.tenant_id == "555"
    assert config.token_id is None
    assert config.tables == {"rackspace_compute": {}}


def test_builder_chaining():
    builder = QuackspaceBuilder()

    result = (builder
              .add_connection("hkg", region="HKG", secret_name="rax")
              .add_connection("files", region="IAD", secret_name="rax",
                              tables={"rackspace_cloud_files_object": {"container_name": "logs"}}))

    assert result is builder
    assert [c.name for c in builder.get_configs()] == ["hkg", "files"]


def test_builder_session_empty():
    builder = QuackspaceBuilder()

    with pytest.raises(ValueError, match="Cannot build a session with no connections"):
        builder.session()


@patch('quackspace.builder.core_session')
def test_builder_session_success(mock_session):
    builder = QuackspaceBuilder()
    builder.add_connection("rax", secret_name="rax")

    builder.session()

    mock_session.assert_called_once_with(configs=builder._connections)


# ==================== CORE FUNCTIONALITY TESTS ====================

def test_default_table_selection_skips_qualified_tables():
    selected = [t.name for t, _ in _selected_tables(ConnectionConfig(name="rax"))]

    assert "rackspace_cloud_files_object" not in selected
    assert len(selected) == len(TABLE_REGISTRY) - 1


def test_explicit_table_without_qualifier_is_skipped(caplog):
    cfg = ConnectionConfig(name="rax", tables={"rackspace_cloud_files_object": {}, "rackspace_nope": {}})

    with caplog.at_level(logging.WARNING, logger="quackspace.core"):
        assert _selected_tables(cfg) == []

    assert "needs the 'container_name' qualifier" in caplog.text
    assert "No table named 'rackspace_nope'" in caplog.text


def test_render_view_sql():
    sql = render_view_sql("rax_rackspace_dns_domain", "rax_rackspace_dns_domain_rows",
                          TABLE_REGISTRY["rackspace_dns_domain"])

    assert sql.startswith('CREATE OR REPLACE VIEW "rax_rackspace_dns_domain" AS SELECT')
    assert 'CAST("ttl" AS BIGINT) AS "ttl"' in sql
    assert 'CAST("updated" AS TIMESTAMPTZ) AS "updated"' in sql
    assert 'CAST("records_list" AS JSON) AS "records_list"' in sql
    assert sql.endswith('FROM "rax_rackspace_dns_domain_rows";')


def test_prepare_connection(mock_duckdb_connection, dns_config, dns_http):
    _prepare_connection(mock_duckdb_connection, [dns_config], http_factory=dns_http.factory)

    # Verify plugin installation
    mock_duckdb_connection.install_extension.assert_called_with("json")
    mock_duckdb_connection.load_extension.assert_called_with("json")

    source, df = mock_duckdb_connection.register.call_args.args
    assert source == "rax_rackspace_dns_domain_rows"
    assert list(df["name"]) == ["example.com"]

    view_sql = mock_duckdb_connection.execute.call_args.args[0]
    assert 'CREATE OR REPLACE VIEW "rax_rackspace_dns_domain"' in view_sql


def test_prepare_connection_empty():
    """Test connection preparation with empty configs."""
    mock_con = Mock()

    _prepare_connection(mock_con, [])

    # Should not call any methods on empty configs
    mock_con.install_extension.assert_not_called()


def test_prepare_connection_upstream_error(mock_duckdb_connection, dns_config, fake_http):
    fake_http.add("GET", f"{DNS_URL}/domains", make_response(401))

    with pytest.raises(UpstreamStatusError, match="401"):
        _prepare_connection(mock_duckdb_connection, [dns_config], http_factory=fake_http.factory)

    mock_duckdb_connection.register.assert_not_called()


@patch('quackspace.core._prepare_connection')
def test_session_with_config_path(mock_prepare, mock_connect, mock_duckdb_connection, sample_yaml_config):
    with session(config_path=sample_yaml_config) as con:
        assert con is mock_duckdb_connection

    mock_prepare.assert_called_once()
    mock_duckdb_connection.close.assert_called_once()


def test_session_no_config():
    """Test session creation without config."""
    with pytest.raises(ConfigError, match="Must provide either 'config_path' or 'configs'"):
        with session():
            pass


@patch('quackspace.core._prepare_connection')
def test_session_with_connections_filter(mock_prepare, mock_connect):
    configs = [ConnectionConfig(name="hkg"), ConnectionConfig(name="iad"), ConnectionConfig(name="ord")]

    with session(configs=configs, connections=["hkg", "ord"]):
        pass

    prepared_configs = mock_prepare.call_args[0][1]
    assert {c.name for c in prepared_configs} == {"hkg", "ord"}


def test_session_closes_connection_on_error(mock_connect, mock_duckdb_connection, dns_config, fake_http):
    fake_http.add("GET", f"{DNS_URL}/domains", make_response(500))

    with pytest.raises(UpstreamStatusError):
        with session(configs=[dns_config], http_factory=fake_http.factory):
            pass

    mock_duckdb_connection.close.assert_called_once()


@patch('quackspace.core._prepare_connection')
def test_with_session_decorator(mock_prepare, mock_connect, mock_duckdb_connection):
    @with_session(configs=[ConnectionConfig(name="rax")])
    def count(con, table):
        return con, table

    con, table = count("rax_rackspace_compute")

    assert con is mock_duckdb_connection
    assert table == "rax_rackspace_compute"


# ==================== ETL UTILS TESTS ====================

def test_etl_utils_to_df(mock_duckdb_connection):
    """Test ETLUtils.to_df method."""
    query = "SELECT name, ttl FROM rax_rackspace_dns_domain"

    result = ETLUtils.to_df(mock_duckdb_connection, query)

    mock_duckdb_connection.execute.assert_called_once_with(query)
    assert isinstance(result, pd.DataFrame)
    assert list(result.columns) == ['name', 'ttl']


@pytest.mark.parametrize("format_type", ["parquet", "csv"])
def test_etl_utils_copy(mock_duckdb_connection, format_type):
    """Test ETLUtils.copy method with different formats."""
    source_query = "SELECT * FROM rax_rackspace_compute"
    target_path = f"inventory.{format_type}"

    ETLUtils.copy(mock_duckdb_connection, source_query, target_path, format_type)

    expected_sql = f"COPY ({source_query}) TO '{target_path}' (FORMAT {format_type.upper()})"
    mock_duckdb_connection.execute.assert_called_once_with(expected_sql)


def test_rows_to_frame_keeps_every_column():
    table = TABLE_REGISTRY["rackspace_network"]

    df = rows_to_frame(table, [{"id": "n1", "name": "public"}])
    empty = rows_to_frame(table, [])

    assert list(df.columns) == [c.name for c in table.columns]
    assert df.loc[0, "name"] == "public"
    assert df.loc[0, "shared"] is None
    assert list(empty.columns) == list(df.columns)
    assert len(empty) == 0


# ==================== END TO END ====================

def test_builder_session_end_to_end(dns_http, monkeypatch):
    # the json extension ships built into the duckdb wheel
    monkeypatch.setattr("quackspace.core.REQUIRED_PLUGINS", ())
    builder = QuackspaceBuilder().add_connection(
        "rax", tenant_id="555", token_id="tok-123", region="hkg", tables=["rackspace_dns_domain"],
    )

    with builder.session(http_factory=dns_http.factory) as con:
        assert isinstance(con, duckdb.DuckDBPyConnection)
        result = con.execute(
            "SELECT name, ttl, json_array_length(records_list) FROM rax_rackspace_dns_domain"
        ).fetchall()

    assert result == [("example.com", 300, 1)]
