import pytest
import requests

import mokshya.borrowlend.workflow_demo as demo
from mokshya.borrowlend.workflow import StepResult


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload if payload is not None else {"chain_id": 148, "ledger_version": "1"}

    def json(self):
        return self._payload


def test_check_node_health_returns_chain_id(monkeypatch):
    monkeypatch.setattr(demo.requests, "get", lambda url, timeout: FakeResponse())
    assert demo.check_node_health("http://node/v1") == 148


def test_check_node_health_handles_http_error(monkeypatch):
    monkeypatch.setattr(demo.requests, "get", lambda url, timeout: FakeResponse(status_code=503))
    assert demo.check_node_health("http://node/v1") is None


def test_check_node_health_handles_connection_error(monkeypatch):
    def boom(url, timeout):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(demo.requests, "get", boom)
    assert demo.check_node_health("http://node/v1") is None


def test_check_node_health_handles_unexpected_body(monkeypatch):
    monkeypatch.setattr(demo.requests, "get", lambda url, timeout: FakeResponse(payload={"message": "hi"}))
    assert demo.check_node_health("http://node/v1") is None


def test_cli_flags_feed_settings(monkeypatch):
    monkeypatch.delenv("APTOS_NODE_URL", raising=False)
    args = demo._parse_args(["--network", "testnet", "--legacy-entry-points", "--faucet-url", "http://faucet"])
    settings = demo._load_settings(args)
    assert settings.network().name == "testnet"
    assert settings.resolved_faucet_url() == "http://faucet"
    assert settings.entry_points().lender_offer_cancel == "lender_offer"


def test_owner_key_falls_back_to_devnet_test_key(monkeypatch):
    monkeypatch.delenv(demo.ENV_OWNER_KEY, raising=False)
    assert demo._get_owner_key(None) == demo.DEVNET_OWNER_KEY
    assert demo._get_owner_key("abcd") == "0xabcd"


def test_main_exits_when_node_is_down(monkeypatch):
    monkeypatch.setattr(demo, "check_node_health", lambda url: None)
    with pytest.raises(SystemExit) as exc:
        demo.main(["--settle-seconds", "0"])
    assert exc.value.code == 1


def test_main_exits_on_failed_step(monkeypatch):
    async def fake_run(args):
        return [StepResult(name="fund_borrower", success=False, error="faucet down")]

    monkeypatch.setattr(demo, "check_node_health", lambda url: 148)
    monkeypatch.setattr(demo, "run", fake_run)
    with pytest.raises(SystemExit) as exc:
        demo.main([])
    assert exc.value.code == 1


def test_main_succeeds_when_all_steps_pass(monkeypatch, capsys):
    async def fake_run(args):
        return [StepResult(name="borrower_pay_loan", success=True, tx_hash="0xabc")]

    monkeypatch.setattr(demo, "check_node_health", lambda url: 148)
    monkeypatch.setattr(demo, "run", fake_run)
    demo.main([])
    out = capsys.readouterr().out
    assert "0xabc" in out
    assert "Workflow finished" in out
