import pytest

from curlite.config import Config


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "transport:\n"
        "  backend: httpx\n"
        "  timeout: 30.0\n"
        "  follow_redirects: true\n"
        "logging:\n"
        "  level: WARNING\n"
    )
    return path


class TestConfig:
    def test_shipped_defaults(self) -> None:
        config = Config(environ={})
        assert config.get("transport", "backend") == "httpx"
        assert config.get("transport", "timeout") == 30.0
        assert config.get("transport", "follow_redirects") is True
        assert config.get("transport", "user_agent") is None
        assert config.get("logging", "level") == "WARNING"

    def test_missing_key_returns_default(self, config_file) -> None:
        config = Config(config_file, environ={})
        assert config.get("transport", "nope", default=3) == 3
        assert config.get("nothing", "here") is None

    def test_env_overrides_are_typed(self, config_file) -> None:
        config = Config(
            config_file,
            environ={
                "CURLITE_TIMEOUT": "2.5",
                "CURLITE_MAX_REDIRECTS": "0",
                "CURLITE_FOLLOW_REDIRECTS": "false",
                "CURLITE_BACKEND": "requests",
                "CURLITE_LOG_JSON": "TRUE",
            },
        )
        assert config.transport == {
            "backend": "requests",
            "timeout": 2.5,
            "follow_redirects": False,
            "max_redirects": 0,
        }
        assert config.logging == {"level": "WARNING", "json": True}

    def test_override_ignores_none(self, config_file) -> None:
        config = Config(config_file, environ={})
        config.override("transport", backend=None, timeout=5.0)
        assert config.get("transport", "backend") == "httpx"
        assert config.get("transport", "timeout") == 5.0

    def test_sections_are_copies(self, config_file) -> None:
        config = Config(config_file, environ={})
        config.transport["backend"] = "requests"
        assert config.get("transport", "backend") == "httpx"

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            Config(tmp_path / "absent.yaml", environ={})

    def test_invalid_yaml(self, tmp_path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("transport: [unclosed\n")
        with pytest.raises(ValueError, match="Invalid YAML"):
            Config(path, environ={})

    def test_empty_file(self, tmp_path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("")
        config = Config(path, environ={"CURLITE_USER_AGENT": "agent/2"})
        assert config.transport == {"user_agent": "agent/2"}

    def test_null_sections(self, tmp_path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("transport: null\nlogging: null\n")
        config = Config(path, environ={})
        assert config.transport == {}
        assert config.logging == {}

        config.override("transport", timeout=5.0)
        assert config.transport == {"timeout": 5.0}
