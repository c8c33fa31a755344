"""Tests for configuration system."""

import os
import tempfile
from pathlib import Path

import pytest

from loan_approval.config import (
    CleaningConfig,
    PipelineConfig,
    TrainingConfig,
    apply_overrides,
    load_config,
)
from loan_approval.config.settings import DEFAULT_RELEVANT_COLUMNS
from loan_approval.errors import ConfigurationError


class TestDefaults:
    """Tests for built-in defaults."""

    def test_default_constants(self) -> None:
        """Defaults reproduce the original run constants."""
        config = PipelineConfig()
        assert config.data.source == Path("./data.csv")
        assert config.training.test_fraction == 0.15
        assert config.cleaning.missing_value_replacement == "unknown"
        assert config.cleaning.label_column == "status"
        assert len(config.cleaning.relevant_columns) == 12
        assert config.output.preview_rows == 5
        assert config.output.column_width == 16

    def test_feature_columns_exclude_label(self) -> None:
        """feature_columns is the allow-list without the label."""
        config = CleaningConfig()
        assert "status" not in config.feature_columns
        assert len(config.feature_columns) == len(DEFAULT_RELEVANT_COLUMNS) - 1


class TestCleaningConfig:
    """Tests for CleaningConfig validation."""

    def test_lowercases_names(self) -> None:
        """Allow-list and label are lowercased."""
        config = CleaningConfig(relevant_columns=["Income", "STATUS"], label_column="Status")
        assert config.relevant_columns == ["income", "status"]
        assert config.label_column == "status"

    def test_label_must_be_allow_listed(self) -> None:
        """A label outside the allow-list is rejected."""
        with pytest.raises(ValueError, match="must be listed"):
            CleaningConfig(relevant_columns=["income"], label_column="status")

    def test_duplicates_rejected(self) -> None:
        """Case-insensitive duplicates are rejected."""
        with pytest.raises(ValueError, match="duplicates"):
            CleaningConfig(relevant_columns=["income", "Income", "status"])


class TestTrainingConfig:
    """Tests for TrainingConfig bounds."""

    @pytest.mark.parametrize("fraction", [0.0, 1.0, -0.1, 1.5])
    def test_test_fraction_bounds(self, fraction: float) -> None:
        """test_fraction must lie strictly between 0 and 1."""
        with pytest.raises(ValueError):
            TrainingConfig(test_fraction=fraction)


class TestConfigLoader:
    """Tests for YAML configuration loading."""

    def test_empty_config_uses_defaults(self) -> None:
        """An empty YAML file yields the defaults."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yaml"
            path.write_text("")
            config = load_config(path)

        assert config == PipelineConfig()

    def test_load_sections(self) -> None:
        """Values from each section are applied."""
        yaml_content = """
project: loan-test
data:
  source: loans.csv
  delimiter: ";"
cleaning:
  relevant_columns: [Income, Status]
training:
  test_fraction: 0.25
  random_state: 3
output:
  model_path: out/model.joblib
"""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yaml"
            path.write_text(yaml_content)
            config = load_config(path)

        assert config.project == "loan-test"
        assert config.data.source == Path("loans.csv")
        assert config.data.delimiter == ";"
        assert config.cleaning.relevant_columns == ["income", "status"]
        assert config.training.test_fraction == 0.25
        assert config.training.random_state == 3
        assert config.output.model_path == Path("out/model.joblib")

    def test_env_var_interpolation(self) -> None:
        """${VAR} and ${VAR:default} are resolved."""
        yaml_content = """
data:
  source: ${LOAN_TEST_SOURCE}
output:
  model_path: ${LOAN_TEST_MISSING:fallback.joblib}
"""
        os.environ["LOAN_TEST_SOURCE"] = "/data/loans.csv"
        try:
            with tempfile.TemporaryDirectory() as tmpdir:
                path = Path(tmpdir) / "config.yaml"
                path.write_text(yaml_content)
                config = load_config(path)
        finally:
            del os.environ["LOAN_TEST_SOURCE"]

        assert config.data.source == Path("/data/loans.csv")
        assert config.output.model_path == Path("fallback.joblib")

    def test_base_config_inheritance(self) -> None:
        """Main config overrides base.yaml in the same directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            base = Path(tmpdir) / "base.yaml"
            base.write_text("project: base\ntraining:\n  test_fraction: 0.3\n  max_iter: 50\n")
            main = Path(tmpdir) / "run.yaml"
            main.write_text("training:\n  test_fraction: 0.2\n")
            config = load_config(main)

        assert config.project == "base"
        assert config.training.test_fraction == 0.2
        assert config.training.max_iter == 50

    def test_invalid_values_raise_configuration_error(self) -> None:
        """Validation failures surface as ConfigurationError."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yaml"
            path.write_text("cleaning:\n  relevant_columns: [income]\n")
            with pytest.raises(ConfigurationError, match="Invalid configuration"):
                load_config(path)

    def test_non_mapping_rejected(self) -> None:
        """A YAML list at the top level is rejected."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yaml"
            path.write_text("- a\n- b\n")
            with pytest.raises(ConfigurationError, match="mapping"):
                load_config(path)

    def test_shipped_base_config_loads(self) -> None:
        """The example configuration validates."""
        path = Path(__file__).parent.parent / "configs" / "base.yaml"
        config = load_config(path)
        assert config.project == "loan-default"
        assert config.cleaning.relevant_columns == list(DEFAULT_RELEVANT_COLUMNS)


class TestOverrides:
    """Tests for apply_overrides."""

    def test_none_values_ignored(self) -> None:
        """None leaves the configured value in place."""
        config = PipelineConfig()
        updated = apply_overrides(
            config, {"training": {"test_fraction": None, "random_state": 5}}
        )
        assert updated.training.test_fraction == 0.15
        assert updated.training.random_state == 5

    def test_invalid_override_rejected(self) -> None:
        """Overrides are validated."""
        with pytest.raises(ConfigurationError):
            apply_overrides(PipelineConfig(), {"training": {"test_fraction": 2.0}})
