"""Tests for the inspection CLI."""

import json

import pytest
from typer.testing import CliRunner

from raydium_facade.cli import main as cli
from raydium_facade.core.config import FacadeConfig
from raydium_facade.core.models import AvailabilityFlags
from raydium_facade.facade import RaydiumFacade

runner = CliRunner()


@pytest.fixture
def built(api, connection, clock, monkeypatch):
    """Replace facade construction with one backed by fakes."""
    captured = {}

    def build(ctx, **overrides):
        captured.update(ctx.obj)
        captured.update(overrides)
        config = FacadeConfig().merged(**overrides)
        return RaydiumFacade(config, api, connection=connection, clock=clock)

    monkeypatch.setattr(cli, "_build_facade", build)
    return captured


def test_chain_time_json(built, clock):
    result = runner.invoke(cli.app, ["chain-time", "--format", "json"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data == {"offset_ms": 2500, "chain_time_ms": clock.now + 2500}


def test_epoch_table(built):
    result = runner.invoke(cli.app, ["epoch"])

    assert result.exit_code == 0, result.output
    assert "600" in result.output


def test_epoch_failure_exits_with_error(built, connection):
    connection.fail = True
    result = runner.invoke(cli.app, ["epoch"])

    assert result.exit_code == 1
    assert "Failed to fetch epoch info" in result.output


def test_tokens_json(built):
    result = runner.invoke(cli.app, ["tokens", "--limit", "1", "--format", "json"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert [token["symbol"] for token in data] == ["WSOL"]


def test_tokens_empty_on_failure(built, api):
    api.failing.add("jup_token_list")
    result = runner.invoke(cli.app, ["tokens", "--external"])

    assert result.exit_code == 0
    assert "No tokens available" in result.output


def test_availability_requests_check(built, api):
    api.availability = AvailabilityFlags(all=False, swap=True)
    result = runner.invoke(cli.app, ["--cluster", "devnet", "availability", "--format", "json"])

    assert result.exit_code == 0, result.output
    assert built["skip_availability_check"] is False
    assert built["cluster"] == "devnet"
    data = json.loads(result.output)
    assert data["all"] is False
    assert data["swap"] is False


def test_list_clusters():
    result = runner.invoke(cli.app, ["list-clusters"])

    assert result.exit_code == 0
    assert "mainnet" in result.output
    assert "devnet" in result.output
