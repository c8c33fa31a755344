"""Tests for model persistence and inference."""

from pathlib import Path

import joblib
import numpy as np
import pandas as pd
import pytest

from loan_approval.config.settings import TrainingConfig
from loan_approval.errors import ConfigurationError, LoadError, SaveError
from loan_approval.modeling.inference import PROBABILITY_COLUMN, predict, prepare_features
from loan_approval.modeling.persistence import ModelArtifact, load_model, save_model
from loan_approval.modeling.preprocessing import build_feature_spec
from loan_approval.modeling.training import ModelTrainer, TrainedModel
from loan_approval.schemas.dataset import ColumnKind, DatasetSchema


@pytest.fixture
def trained(clean_loans: pd.DataFrame) -> tuple[TrainedModel, DatasetSchema]:
    """A model fitted on the clean fixture with its schema."""
    spec = build_feature_spec(clean_loans, "status")
    model = ModelTrainer(TrainingConfig()).fit(spec, clean_loans)
    return model, DatasetSchema.from_frame(clean_loans, "status")


class TestSaveLoad:
    """Tests for save_model and load_model."""

    def test_round_trip(
        self, tmp_path: Path, trained: tuple[TrainedModel, DatasetSchema], clean_loans: pd.DataFrame
    ) -> None:
        """A saved artifact predicts like the original model."""
        model, schema = trained
        path = save_model(
            model,
            schema,
            tmp_path / "nested" / "model.joblib",
            fill_values={"income": 5000.0, "region": "unknown"},
        )
        artifact = load_model(path)

        assert path.exists()
        assert artifact.schema == schema
        assert artifact.label_column == "status"
        assert artifact.fill_values == {"income": 5000.0, "region": "unknown"}
        assert artifact.created_at
        np.testing.assert_array_equal(
            artifact.to_model().predict(clean_loans), model.predict(clean_loans)
        )

    def test_single_file_overwritten(
        self, tmp_path: Path, trained: tuple[TrainedModel, DatasetSchema]
    ) -> None:
        """Saving twice to the same path leaves one file."""
        model, schema = trained
        path = tmp_path / "model.joblib"
        path.write_text("stale")

        save_model(model, schema, path)
        save_model(model, schema, path)

        assert list(tmp_path.iterdir()) == [path]
        assert isinstance(load_model(path), ModelArtifact)

    def test_unwritable_destination(
        self, tmp_path: Path, trained: tuple[TrainedModel, DatasetSchema]
    ) -> None:
        """A destination below a regular file raises SaveError."""
        model, schema = trained
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(SaveError, match="Could not save"):
            save_model(model, schema, blocker / "model.joblib")

    def test_load_missing(self, tmp_path: Path) -> None:
        """A missing file raises LoadError."""
        with pytest.raises(LoadError, match="not found"):
            load_model(tmp_path / "nope.joblib")

    def test_load_foreign_object(self, tmp_path: Path) -> None:
        """A joblib file without an artifact is rejected."""
        path = tmp_path / "other.joblib"
        joblib.dump({"not": "a model"}, path)
        with pytest.raises(LoadError, match="does not contain"):
            load_model(path)


class TestDatasetSchema:
    """Tests for DatasetSchema."""

    def test_from_frame(self, clean_loans: pd.DataFrame) -> None:
        """Kinds are inferred per column in order."""
        schema = DatasetSchema.from_frame(clean_loans, "status")

        assert schema.names == ["region", "credit_score", "income", "status"]
        assert schema.kind_of("region") is ColumnKind.CATEGORICAL
        assert schema.kind_of("income") is ColumnKind.NUMERIC
        assert schema.kind_of("status") is ColumnKind.BOOLEAN
        assert [c.name for c in schema.feature_columns] == ["region", "credit_score", "income"]

    def test_dict_round_trip(self, clean_loans: pd.DataFrame) -> None:
        """to_dict and from_dict are inverses."""
        schema = DatasetSchema.from_frame(clean_loans, "status")
        assert DatasetSchema.from_dict(schema.to_dict()) == schema


class TestInference:
    """Tests for prepare_features and predict."""

    @pytest.fixture
    def artifact(self, tmp_path: Path, trained: tuple[TrainedModel, DatasetSchema]) -> ModelArtifact:
        """Saved and reloaded artifact."""
        model, schema = trained
        path = save_model(
            model,
            schema,
            tmp_path / "model.joblib",
            fill_values={"region": "unknown", "credit_score": 700.0, "income": 6000.0},
        )
        return load_model(path)

    def test_prepare_features_fills_and_selects(self, artifact: ModelArtifact) -> None:
        """Names are lowercased, extra columns dropped, gaps filled."""
        raw = pd.DataFrame(
            {
                "Region": [None, "south"],
                "Credit_Score": [np.nan, 610.0],
                "INCOME": [4000.0, np.nan],
                "Extra": [1, 2],
            }
        )
        features = prepare_features(raw, artifact)

        assert list(features.columns) == ["region", "credit_score", "income"]
        assert features["region"].tolist() == ["unknown", "south"]
        assert features["credit_score"].tolist() == [700.0, 610.0]
        assert features["income"].tolist() == [4000.0, 6000.0]

    def test_missing_feature_column(self, artifact: ModelArtifact) -> None:
        """Rows without a model feature are rejected."""
        with pytest.raises(ConfigurationError, match="income"):
            prepare_features(pd.DataFrame({"region": ["a"], "credit_score": [1.0]}), artifact)

    def test_predict(self, artifact: ModelArtifact) -> None:
        """Predictions and probabilities are appended to the input rows."""
        rows = pd.DataFrame(
            {
                "region": ["North", "south"],
                "credit_score": [780.0, 560.0],
                "income": [6000.0, 6000.0],
            }
        )
        result = predict(artifact, rows)

        assert result.prediction_column == "predicted_status"
        assert result.n_predictions == 2
        assert result.predictions["predicted_status"].tolist() == [True, False]
        assert result.predictions[PROBABILITY_COLUMN].iloc[0] > 0.5
        assert result.n_positive == 1
