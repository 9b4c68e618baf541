"""Unit tests for configuration management."""

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from docstate import Action, MachineBuilder
from docstate.config.defaults import MessageParams, get_default_config
from docstate.config.loader import ConfigLoader
from docstate.config.validation import ConfigValidator, format_errors
from docstate.errors import InvalidConfigurationError, MachineDefinitionError


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        """Test that default configuration can be created."""
        config = get_default_config()
        assert config.messages.invalid_event == "is invalid"
        assert config.messages.invalid_transition == 'cannot transition via "{event}" from "{state}"'
        assert config.logging.level == "INFO"


class TestConfigLoader:
    """Test suite for configuration loader."""

    def test_config_loader_creation(self) -> None:
        """Test that ConfigLoader can be created."""
        loader = ConfigLoader.create()
        assert isinstance(loader.config_dir, Path)
        assert loader.config_dir.name == "config"

    def test_merge_config_defaults_only(self, tmp_path: Path) -> None:
        """Test config merging without a config file."""
        loader = ConfigLoader.create(tmp_path)
        config = loader.merge_config()

        assert config["messages"]["invalid_event"] == "is invalid"
        assert config["logging"]["format_json"] is False

    def test_yaml_file_overrides_defaults(self, tmp_path: Path) -> None:
        """Test values from docstate.yaml are deep-merged over the defaults."""
        (tmp_path / "docstate.yaml").write_text(
            "messages:\n"
            "  invalid_transition: 'cannot {event} while {state}'\n"
            "logging:\n"
            "  level: DEBUG\n"
        )
        loader = ConfigLoader.create(tmp_path)

        config = loader.load()

        assert config.messages.invalid_transition == "cannot {event} while {state}"
        assert config.messages.invalid_event == "is invalid"
        assert config.logging.level == "DEBUG"
        assert config.logging.include_timestamp is True

    def test_explicit_overrides_win(self, tmp_path: Path) -> None:
        """Test explicit overrides take priority over the config file."""
        (tmp_path / "docstate.yaml").write_text("logging:\n  level: DEBUG\n")
        loader = ConfigLoader.create(tmp_path)

        config = loader.merge_config({"logging": {"level": "ERROR"}})

        assert config["logging"]["level"] == "ERROR"

    def test_empty_file(self, tmp_path: Path) -> None:
        """Test an empty config file yields the defaults."""
        (tmp_path / "docstate.yaml").write_text("")
        loader = ConfigLoader.create(tmp_path)

        assert loader.load_overrides() == {}
        assert loader.load() == get_default_config()

    def test_loaded_messages_used_by_builder(self, tmp_path: Path) -> None:
        """Test a machine reports failures with configured messages."""
        (tmp_path / "docstate.yaml").write_text(
            "messages:\n  invalid_transition: 'no {event} from {state}'\n"
        )
        messages = ConfigLoader.create(tmp_path).load().messages

        builder = MachineBuilder("state", action=Action.SAVE, messages=messages)
        builder.event("ignite").transition(from_="parked", to="idling")

        assert builder.build().messages.invalid_transition == "no {event} from {state}"

    def test_invalid_file_rejected_on_load(self, tmp_path: Path) -> None:
        """Test a template with an unknown placeholder fails when loaded."""
        (tmp_path / "docstate.yaml").write_text(
            "messages:\n  invalid_transition: 'cannot {action}'\n"
        )
        loader = ConfigLoader.create(tmp_path)

        with pytest.raises(InvalidConfigurationError) as exc_info:
            loader.load()

        assert isinstance(exc_info.value, MachineDefinitionError)
        assert [error.field for error in exc_info.value.errors] == ["invalid_transition"]
        assert "cannot {action}" in str(exc_info.value)

    def test_invalid_log_level_rejected_on_load(self, tmp_path: Path) -> None:
        loader = ConfigLoader.create(tmp_path)

        with pytest.raises(InvalidConfigurationError):
            loader.load({"logging": {"level": "VERBOSE"}})

    def test_builder_rejects_invalid_messages(self) -> None:
        """Test bad message templates fail when the machine is built, not when it fires."""
        messages = MessageParams(invalid_transition="cannot {action}")
        builder = MachineBuilder("state", action=Action.SAVE, messages=messages)
        builder.event("ignite").transition(from_="parked", to="idling")

        with pytest.raises(InvalidConfigurationError) as exc_info:
            builder.build()

        assert exc_info.value.context == {"attribute": "state"}


class TestConfigValidator:
    """Test suite for configuration validation."""

    def test_valid_messages(self) -> None:
        params = {
            "invalid_event": "is invalid",
            "invalid_transition": 'cannot transition via "{event}" from "{state}"',
        }

        assert ConfigValidator.validate_messages(params) == []

    def test_empty_message(self) -> None:
        errors = ConfigValidator.validate_messages({"invalid_event": "  "})

        assert len(errors) == 1
        assert errors[0].field == "invalid_event"

    def test_unknown_placeholder(self) -> None:
        errors = ConfigValidator.validate_messages({"invalid_transition": "cannot {action}"})

        assert len(errors) == 1
        assert errors[0].field == "invalid_transition"
        assert errors[0].value == "cannot {action}"

    def test_malformed_template(self) -> None:
        errors = ConfigValidator.validate_messages({"invalid_transition": "cannot {event"})

        assert [error.field for error in errors] == ["invalid_transition"]

    def test_invalid_log_level(self) -> None:
        errors = ConfigValidator.validate_logging({"level": "VERBOSE"})

        assert len(errors) == 1
        assert errors[0].field == "level"

    def test_lowercase_log_level_accepted(self) -> None:
        assert ConfigValidator.validate_logging({"level": "debug"}) == []

    def test_non_boolean_flags(self) -> None:
        errors = ConfigValidator.validate_logging({"format_json": "yes", "include_timestamp": 1})

        assert [error.field for error in errors] == ["format_json", "include_timestamp"]

    @pytest.mark.parametrize("section", ["messages", "logging"])
    def test_validate_config_defaults(self, section: str) -> None:
        config = ConfigLoader.create().merge_config()

        assert ConfigValidator.validate_config({section: config[section]}) == []

    def test_message_params_are_frozen(self) -> None:
        with pytest.raises(FrozenInstanceError):
            MessageParams().invalid_event = "changed"  # type: ignore[misc]

    def test_format_errors(self) -> None:
        errors = ConfigValidator.validate_logging({"level": "VERBOSE"})

        assert format_errors(errors) == [
            "level: Must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL (got: 'VERBOSE')"
        ]
