"""
Configuration Tests

Run: python -m pytest tests/test_config.py -v
"""

from infrastructure.config import ChainupConfig, Environment


def test_defaults_match_explorer_expectations():
    config = ChainupConfig()

    assert config.explorer.base_url == "https://explorer.testnet.citrea.xyz"
    assert config.compiler.default_compiler_version == "v0.8.19+commit.7dd6d404"
    assert config.flattener.backend == "import_graph"
    assert config.explorer.address_url("0xabc") == "https://explorer.testnet.citrea.xyz/address/0xabc"


def test_from_env(monkeypatch):
    monkeypatch.setenv("CHAINUP_ENV", "staging")
    monkeypatch.setenv("EXPLORER_BASE_URL", "https://blockscout.example/")
    monkeypatch.setenv("EXPLORER_TIMEOUT_SECONDS", "7.5")
    monkeypatch.setenv("SOLC_COMMIT_SUFFIX", "commit.e11b9ed9")
    monkeypatch.setenv("FLATTEN_BACKEND", "forge")
    monkeypatch.setenv("VERIFY_OPTIMIZATION_RUNS", "1000")

    config = ChainupConfig.from_env()

    assert config.environment == Environment.STAGING
    assert config.explorer.request_timeout == 7.5
    assert config.explorer.address_url("0xabc") == "https://blockscout.example/address/0xabc"
    assert config.compiler.commit_suffix == "commit.e11b9ed9"
    assert config.compiler.optimization_runs == 1000
    assert config.flattener.backend == "forge"


def test_production_hardening(monkeypatch):
    monkeypatch.setenv("CHAINUP_ENV", "production")
    monkeypatch.setenv("DEBUG", "true")

    config = ChainupConfig.from_env()

    assert config.debug is False
    assert config.monitoring.log_level == "WARNING"
    assert config.to_dict()["environment"] == "production"


def test_unknown_environment_falls_back_to_development(monkeypatch):
    monkeypatch.setenv("CHAINUP_ENV", "qa")

    assert ChainupConfig.from_env().environment == Environment.DEVELOPMENT
