"""Unit tests for the scoring config loader."""

import pytest

from quill.utils.config import DEFAULT_SCORING_CONFIG_PATH, load_scoring_config
from quill.utils.exceptions import ErrorCategory, ValidationError


@pytest.mark.unit
class TestLoadScoringConfig:
    """Tests for load_scoring_config function."""

    def test_packaged_defaults(self):
        """Test the packaged config carries the documented constants."""
        config = load_scoring_config()
        weights = config["aggregation"]["weights"]

        assert config["aggregation"]["pass_threshold"] == 70
        assert config["aggregation"]["neutral_score"] == 50
        assert weights["ats"] + weights["readability"] + weights["grammar"] == pytest.approx(1.0)
        assert config["grammar"]["penalties"]["critical"] == 10

    def test_config_is_read_only(self):
        """Test nested sections reject mutation."""
        config = load_scoring_config()
        with pytest.raises(TypeError):
            config["aggregation"]["pass_threshold"] = 0
        with pytest.raises(TypeError):
            config["grammar"]["penalties"]["critical"] = 0

    def test_env_override(self, tmp_path, monkeypatch):
        """Test QUILL_SCORING_CONFIG points the loader at another file."""
        custom = tmp_path / "scoring.yaml"
        custom.write_text(
            DEFAULT_SCORING_CONFIG_PATH.read_text(encoding="utf-8").replace(
                "pass_threshold: 70", "pass_threshold: 80"
            ),
            encoding="utf-8",
        )
        monkeypatch.setenv("QUILL_SCORING_CONFIG", str(custom))

        assert load_scoring_config()["aggregation"]["pass_threshold"] == 80

    def test_missing_file(self, tmp_path):
        """Test a missing file raises ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            load_scoring_config(tmp_path / "missing.yaml")
        assert exc_info.value.category == ErrorCategory.VALIDATION

    def test_malformed_yaml(self, tmp_path):
        """Test unparsable YAML raises ValidationError."""
        path = tmp_path / "broken.yaml"
        path.write_text("aggregation: [unclosed\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_scoring_config(path)

    def test_top_level_list(self, tmp_path):
        """Test a config that is not a mapping is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- aggregation\n- grammar\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_scoring_config(path)

    def test_missing_sections(self, tmp_path):
        """Test every required section must be present."""
        path = tmp_path / "partial.yaml"
        path.write_text("aggregation:\n  pass_threshold: 70\n", encoding="utf-8")
        with pytest.raises(ValidationError) as exc_info:
            load_scoring_config(path)
        assert "grammar" in exc_info.value.message
