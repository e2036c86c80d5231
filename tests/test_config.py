"""Tests for environment-driven settings."""

from pathlib import Path

import pytest

from jobpath_bot.config import DEFAULT_TEMPLATE_PATH, AppSettings


@pytest.fixture
def base_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    for name in (
        "MAF_MODEL_PROVIDER",
        "MAF_MODEL_ENDPOINT",
        "MAF_MODEL_API_VERSION",
        "JOBPATH_TEMPLATE_PATH",
        "JOBPATH_REDIS_URL",
        "JOBPATH_SESSION_TTL",
        "JOBPATH_CHAT_CONTEXT_LIMIT",
        "JOBPATH_ESCAPE_HTML",
        "JOBPATH_PDF_FONT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("jobpath_bot.config._ensure_dotenv", lambda: None)
    monkeypatch.setenv("MAF_MODEL", "gpt-test")
    monkeypatch.setenv("MAF_MODEL_API_KEY", "secret")
    output_dir = tmp_path / "out"
    monkeypatch.setenv("JOBPATH_OUTPUT_DIR", str(output_dir))
    return output_dir


class TestAppSettings:
    """Tests for AppSettings.load."""

    def test_defaults(self, base_env: Path) -> None:
        settings = AppSettings.load()

        assert settings.model.provider == "azure-openai"
        assert settings.model.model == "gpt-test"
        assert settings.output_dir == base_env
        assert base_env.is_dir()
        assert settings.template_path == DEFAULT_TEMPLATE_PATH
        assert settings.redis_url is None
        assert settings.session_ttl == 86400
        assert settings.chat_context_limit == 10
        assert settings.escape_html is True
        assert settings.pdf_font_path is None
        assert "{{fullName}}" in settings.read_template()

    def test_overrides(self, base_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAF_MODEL_PROVIDER", "openai")
        monkeypatch.setenv("JOBPATH_REDIS_URL", "redis://localhost:6379/1")
        monkeypatch.setenv("JOBPATH_CHAT_CONTEXT_LIMIT", "3")
        monkeypatch.setenv("JOBPATH_ESCAPE_HTML", "false")

        settings = AppSettings.load()

        assert settings.model.provider == "openai"
        assert settings.redis_url == "redis://localhost:6379/1"
        assert settings.chat_context_limit == 3
        assert settings.escape_html is False

    def test_blank_redis_url_disables_redis(
        self, base_env: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("JOBPATH_REDIS_URL", "  ")

        assert AppSettings.load().redis_url is None

    def test_model_required(self, base_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MAF_MODEL")

        with pytest.raises(RuntimeError, match="MAF_MODEL"):
            AppSettings.load()

    def test_api_key_required(self, base_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MAF_MODEL_API_KEY")

        with pytest.raises(RuntimeError, match="MAF_MODEL_API_KEY"):
            AppSettings.load()

    @pytest.mark.parametrize(
        "name, value",
        [
            ("JOBPATH_SESSION_TTL", "soon"),
            ("JOBPATH_SESSION_TTL", "10"),
            ("JOBPATH_CHAT_CONTEXT_LIMIT", "-1"),
            ("JOBPATH_ESCAPE_HTML", "maybe"),
        ],
    )
    def test_invalid_values(
        self, base_env: Path, monkeypatch: pytest.MonkeyPatch, name: str, value: str
    ) -> None:
        monkeypatch.setenv(name, value)

        with pytest.raises(RuntimeError, match=name):
            AppSettings.load()

    def test_missing_template(
        self, base_env: Path, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setenv("JOBPATH_TEMPLATE_PATH", str(tmp_path / "nope.html"))

        with pytest.raises(RuntimeError, match="template"):
            AppSettings.load()

    def test_pdf_font_override(
        self, base_env: Path, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        font = tmp_path / "DejaVuSans.ttf"
        font.write_bytes(b"ttf")
        monkeypatch.setenv("JOBPATH_PDF_FONT", str(font))

        assert AppSettings.load().pdf_font_path == font

    def test_missing_pdf_font(
        self, base_env: Path, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setenv("JOBPATH_PDF_FONT", str(tmp_path / "nope.ttf"))

        with pytest.raises(RuntimeError, match="JOBPATH_PDF_FONT"):
            AppSettings.load()
