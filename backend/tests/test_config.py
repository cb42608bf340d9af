"""
Tests for Configuration.

Requires Python 3.11+.
"""

from pathlib import Path

from utils.config import APISettings, RefresherSettings, Settings


class TestSettings:
    """Test cases for the settings tree."""

    def test_cors_origins_from_string(self):
        """Comma-separated origins are split."""
        settings = APISettings(cors_origins="http://a, http://b,")

        assert settings.cors_origins == ["http://a", "http://b"]

    def test_api_settings_fields(self):
        """The API section only carries what the app reads."""
        assert set(APISettings.model_fields) == {"cors_origins"}

    def test_output_dir_defaults_to_project(self, tmp_path: Path):
        """Temporary copies go to the project directory unless configured."""
        settings = Settings(project_dir=tmp_path, refresher=RefresherSettings(output_dir=None))

        assert settings.output_dir == tmp_path

    def test_output_dir_override(self, tmp_path: Path):
        """An explicit output directory wins."""
        out = tmp_path / "out"
        settings = Settings(project_dir=tmp_path, refresher=RefresherSettings(output_dir=out))

        assert settings.output_dir == out

    def test_refresher_delay_default(self, monkeypatch):
        """The refresh delay defaults to 500 ms."""
        monkeypatch.delenv("REFRESHER_DELAY_MS", raising=False)

        assert RefresherSettings().delay_ms == 500
