from txlens.config import Settings


class TestSettings:
    def test_default_endpoints(self):
        settings = Settings()
        assert settings.get_rpc_url("8453")
        assert settings.get_rpc_url(56)
        assert settings.get_rpc_url("999") is None

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("BASE_RPC_URL", "https://base.internal")
        assert Settings().get_rpc_url("8453") == "https://base.internal"

    def test_blank_url_drops_chain(self):
        settings = Settings(arb_rpc_url="")
        assert "42161" not in settings.rpc_endpoints
