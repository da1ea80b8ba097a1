import pytest

from config.settings import ConfigError, SessionConfig


class TestSessionConfig:
    def test_defaults(self) -> None:
        config = SessionConfig()
        assert config.history_limit == 50
        assert config.presets_storage_key == "textProcessingPresets"
        assert config.export_filename == "processed_text.txt"

    @pytest.mark.parametrize(
        "values",
        [
            {"history_limit": 0},
            {"history_limit": "10"},
            {"presets_storage_key": ""},
            {"export_filename": ""},
        ],
    )
    def test_invalid_values(self, values: dict) -> None:
        with pytest.raises(ConfigError):
            SessionConfig(**values)

    def test_from_mapping_ignores_unknown_keys(self) -> None:
        config = SessionConfig.from_mapping({"history_limit": 5, "theme": "dark"})
        assert config.history_limit == 5
