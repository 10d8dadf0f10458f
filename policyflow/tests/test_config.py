from policyflow.core.config import PolicyFlowConfig


def test_defaults_run_in_mock_mode(monkeypatch):
    monkeypatch.delenv("POLICYFLOW_AGENT_URL", raising=False)
    cfg = PolicyFlowConfig.from_env()
    assert cfg.agent.mock_mode is True
    assert cfg.agent.timeout_s == 120.0
    assert cfg.wizard.draft_progress_threshold == 80
    assert cfg.wizard.default_progress == 50
    assert cfg.organization.name == "Acme Corporation"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("POLICYFLOW_AGENT_URL", "https://agents.example.test/api/agent")
    monkeypatch.setenv("POLICYFLOW_AGENT_TIMEOUT_S", "0")
    monkeypatch.setenv("POLICYFLOW_AGENT_ID_INTERVIEW", "interview-x")
    monkeypatch.setenv("POLICYFLOW_ORG_NAME", "Globex")
    monkeypatch.setenv("POLICYFLOW_MAX_SESSIONS", "0")
    monkeypatch.setenv("POLICYFLOW_DEBUG", "TRUE")
    monkeypatch.setenv("POLICYFLOW_LOG_LEVEL", " DEBUG ")

    cfg = PolicyFlowConfig.from_env()
    assert cfg.agent.mock_mode is False
    assert cfg.agent.timeout_s == 0.0
    assert cfg.agent.interview_id == "interview-x"
    assert cfg.organization.name == "Globex"
    assert cfg.wizard.max_sessions == 1
    assert cfg.debug is True
    assert cfg.log_level == "debug"


def test_invalid_numbers_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("POLICYFLOW_AGENT_TIMEOUT_S", "soon")
    monkeypatch.setenv("POLICYFLOW_API_PORT", "eighty")
    monkeypatch.setenv("POLICYFLOW_DRAFT_PROGRESS_THRESHOLD", "-")

    cfg = PolicyFlowConfig.from_env()
    assert cfg.agent.timeout_s == 120.0
    assert cfg.api_port == 8000
    assert cfg.wizard.draft_progress_threshold == 80
