"""Unit tests for configuration system."""

from pathlib import Path
from typing import Any

import pytest

from folio.config import (
    ChecksConfig,
    FolioConfig,
    FormatConfig,
    create_default_config,
    find_config_file,
    load_config,
    load_config_from_dict,
    substitute_env_vars,
)
from folio.models import KNOWN_FIELDS, Severity


class TestSubstituteEnvVars:
    """Tests for environment variable substitution."""

    def test_substitute_string(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test substituting env var in string."""
        monkeypatch.setenv("CONTENT_ROOT", "site")

        result = substitute_env_vars("${CONTENT_ROOT}/posts")

        assert result == "site/posts"

    def test_substitute_in_nested_structures(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test substituting env vars in dicts and lists."""
        monkeypatch.setenv("ASSETS", "public")

        data = {"checks": {"assets_dir": "${ASSETS}"}, "paths": ["a", "${ASSETS}"]}
        result = substitute_env_vars(data)

        assert result["checks"]["assets_dir"] == "public"
        assert result["paths"] == ["a", "public"]

    def test_missing_env_var_raises(self) -> None:
        """Test that missing env var raises ValueError."""
        with pytest.raises(ValueError, match="Environment variable not set"):
            substitute_env_vars("${FOLIO_NONEXISTENT_VAR}")

    def test_passthrough_non_string(self) -> None:
        """Test that non-string values pass through unchanged."""
        assert substitute_env_vars(123) == 123
        assert substitute_env_vars(True) is True
        assert substitute_env_vars(None) is None


class TestFindConfigFile:
    """Tests for config file discovery."""

    def test_find_folio_dir_config(self, tmp_path: Path) -> None:
        """Test finding .folio/config.yaml."""
        config_dir = tmp_path / ".folio"
        config_dir.mkdir()
        config_file = config_dir / "config.yaml"
        config_file.write_text("content:\n  paths: [posts]")

        assert find_config_file(tmp_path) == config_file

    def test_find_root_config(self, tmp_path: Path) -> None:
        """Test finding folio.yaml at root."""
        config_file = tmp_path / "folio.yaml"
        config_file.write_text("content:\n  paths: [posts]")

        assert find_config_file(tmp_path) == config_file

    def test_prefer_folio_dir_over_root(self, tmp_path: Path) -> None:
        """Test .folio/config.yaml is preferred over folio.yaml."""
        config_dir = tmp_path / ".folio"
        config_dir.mkdir()
        preferred = config_dir / "config.yaml"
        preferred.write_text("# preferred")
        (tmp_path / "folio.yaml").write_text("# fallback")

        assert find_config_file(tmp_path) == preferred

    def test_no_config_returns_none(self, tmp_path: Path) -> None:
        """Test returns None when no config found."""
        assert find_config_file(tmp_path) is None


class TestLoadConfigFromDict:
    """Tests for loading config from dictionary."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        config = load_config_from_dict({})

        assert config.content.paths == ["content"]
        assert config.format.metadata_marker == "---"
        assert config.format.document_separator == "---8<---"
        assert config.checks.required_fields == list(KNOWN_FIELDS)
        assert config.checks.assets_dir is None
        assert config.checks.read_time_tolerance is None
        assert config.report.path == "content-report.md"
        assert config.ci.fail_on_warning is False

    def test_minimal_config(self, minimal_config: dict[str, Any]) -> None:
        """Test a config with only content paths."""
        config = load_config_from_dict(minimal_config)

        assert config.content.paths == ["content"]
        assert config.content.patterns == ["*.md", "*.markdown", "*.txt"]

    def test_full_config(self, full_config: dict[str, Any]) -> None:
        """Test every section is mapped."""
        config = load_config_from_dict(full_config)

        assert config.content.paths == ["posts", "drafts"]
        assert config.content.patterns == ["*.md"]
        assert config.format.metadata_marker == "+++"
        assert config.format.document_separator == "<!-- next -->"
        assert config.checks.required_fields == ["id", "title", "slug"]
        assert config.checks.date_formats == ["%Y-%m-%d"]
        assert config.checks.assets_dir == "public"
        assert config.checks.read_time_tolerance == 2
        assert config.checks.words_per_minute == 250
        assert config.checks.disabled == ["unknown-fields"]
        assert config.checks.severity == {"date-format": Severity.ERROR}
        assert config.report.path == "reports/content.md"
        assert config.ci.fail_on_warning is True

    def test_single_path_string_is_listified(self) -> None:
        """Test a bare string path becomes a one-element list."""
        config = load_config_from_dict({"content": {"paths": "posts"}})

        assert config.content.paths == ["posts"]


class TestConfigValidation:
    """Tests for __post_init__ validation."""

    def test_empty_marker_rejected(self) -> None:
        with pytest.raises(ValueError, match="metadata_marker"):
            FormatConfig(metadata_marker="  ")

    def test_marker_equal_to_separator_rejected(self) -> None:
        with pytest.raises(ValueError, match="must differ"):
            FormatConfig(metadata_marker="---", document_separator="---")

    def test_unknown_required_field_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown required fields"):
            ChecksConfig(required_fields=["title", "author"])

    def test_invalid_slug_pattern_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid slug_pattern"):
            ChecksConfig(slug_pattern="[a-z")

    def test_non_positive_words_per_minute_rejected(self) -> None:
        with pytest.raises(ValueError, match="words_per_minute"):
            ChecksConfig(words_per_minute=0)

    def test_invalid_severity_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid severity"):
            ChecksConfig(severity={"date-format": "fatal"})


class TestValueCoercion:
    """Tests for values that arrive as strings from ${VAR} substitution."""

    def test_numbers_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FOLIO_TOLERANCE", "3")
        monkeypatch.setenv("FOLIO_WPM", "250")

        config = load_config_from_dict(
            {
                "checks": {
                    "read_time_tolerance": "${FOLIO_TOLERANCE}",
                    "words_per_minute": "${FOLIO_WPM}",
                }
            }
        )

        assert config.checks.read_time_tolerance == 3
        assert config.checks.words_per_minute == 250

    def test_string_tolerance(self) -> None:
        config = load_config_from_dict({"checks": {"read_time_tolerance": "3"}})

        assert config.checks.read_time_tolerance == 3

    def test_missing_tolerance_stays_none(self) -> None:
        assert load_config_from_dict({"checks": {}}).checks.read_time_tolerance is None

    @pytest.mark.parametrize("value", ["soon", "1.5", True])
    def test_bad_tolerance_raises_value_error(self, value: object) -> None:
        with pytest.raises(ValueError, match="checks.read_time_tolerance"):
            load_config_from_dict({"checks": {"read_time_tolerance": value}})

    def test_negative_tolerance_from_string(self) -> None:
        with pytest.raises(ValueError, match="must not be negative"):
            load_config_from_dict({"checks": {"read_time_tolerance": "-1"}})

    def test_bad_words_per_minute_raises_value_error(self) -> None:
        with pytest.raises(ValueError, match="checks.words_per_minute"):
            load_config_from_dict({"checks": {"words_per_minute": None}})

    def test_booleans_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FOLIO_STRICT", "false")

        config = load_config_from_dict(
            {"ci": {"fail_on_warning": "${FOLIO_STRICT}", "json_output": "yes"}}
        )

        assert config.ci.fail_on_warning is False
        assert config.ci.json_output is True

    def test_bad_boolean_raises_value_error(self) -> None:
        with pytest.raises(ValueError, match="ci.fail_on_warning"):
            load_config_from_dict({"ci": {"fail_on_warning": "maybe"}})


class TestLoadConfig:
    """Tests for loading config files."""

    def test_missing_explicit_path_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_load_records_path(self, tmp_path: Path) -> None:
        config_file = tmp_path / "folio.yaml"
        config_file.write_text("checks:\n  words_per_minute: 180\n")

        config = load_config(config_file)

        assert config.config_path == config_file
        assert config.checks.words_per_minute == 180

    def test_non_mapping_rejected(self, tmp_path: Path) -> None:
        config_file = tmp_path / "folio.yaml"
        config_file.write_text("- just\n- a list\n")

        with pytest.raises(ValueError, match="mapping"):
            load_config(config_file)

    def test_no_discovery_returns_defaults(self) -> None:
        config = load_config(auto_discover=False)

        assert config.config_path is None
        assert config.content.paths == ["content"]

    def test_base_dir_for_folio_dir_config(self, tmp_path: Path) -> None:
        """Paths in .folio/config.yaml resolve against the project root."""
        config_dir = tmp_path / ".folio"
        config_dir.mkdir()
        config_file = config_dir / "config.yaml"
        config_file.write_text("content:\n  paths: [posts]\n")

        config = load_config(config_file)

        assert config.base_dir == tmp_path.resolve()
        assert config.resolve("posts") == tmp_path.resolve() / "posts"

    def test_default_config_round_trips(self, tmp_path: Path) -> None:
        """The generated default config loads back to the defaults."""
        config_file = tmp_path / "folio.yaml"
        config_file.write_text(create_default_config())

        config = load_config(config_file)
        defaults = FolioConfig()

        assert config.content.paths == defaults.content.paths
        assert config.format == defaults.format
        assert config.checks.required_fields == defaults.checks.required_fields
        assert config.checks.date_formats == defaults.checks.date_formats
