"""
Tests for structured logging of state machine firings.
"""

from unittest.mock import Mock, patch

import structlog

from docstate.config.defaults import get_default_config
from docstate.logging.config import (
    configure_logging,
    configure_logging_from,
    get_hook_logger,
    get_logger,
    get_state_logger,
    log_state_transition,
)


class TestLogStateTransition:
    """Test log_state_transition formatting."""

    def test_applied_logged_as_info(self):
        logger = Mock()
        bound = logger.bind.return_value

        log_state_transition(
            logger,
            document_id="vehicle-1",
            attribute="state",
            event="ignite",
            from_state="parked",
            to_state="idling",
            outcome="applied",
        )

        logger.bind.assert_called_once_with(
            document_id="vehicle-1",
            attribute="state",
            transition_event="ignite",
            from_state="parked",
            to_state="idling",
            outcome="applied",
        )
        bound.info.assert_called_once_with("State transition")
        bound.warning.assert_not_called()

    def test_failure_logged_as_warning_with_context(self):
        logger = Mock()
        bound = logger.bind.return_value
        with_context = bound.bind.return_value

        log_state_transition(
            logger,
            document_id=None,
            attribute="state",
            event="ignite",
            from_state="idling",
            to_state=None,
            outcome="rejected",
            context={"reason": "no_matching_transition"},
        )

        bound.bind.assert_called_once_with(context={"reason": "no_matching_transition"})
        with_context.warning.assert_called_once_with("State transition not applied")


class TestLoggers:
    """Test logger factories."""

    def test_subsystem_loggers(self):
        with patch("docstate.logging.config.get_logger") as factory:
            get_state_logger("docstate.machine.runner")
            get_hook_logger("docstate.machine.hooks")

        factory.return_value.bind.assert_any_call(subsystem="state_machine", audit_trail=True)
        factory.return_value.bind.assert_any_call(subsystem="hooks")

    def test_configure_from_defaults(self):
        params = get_default_config().logging

        with patch.object(structlog, "configure") as configure:
            configure_logging(
                level=params.level,
                format_json=True,
                include_timestamp=params.include_timestamp,
            )

        processors = configure.call_args.kwargs["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert any(isinstance(p, structlog.processors.TimeStamper) for p in processors)

    def test_firing_logs_transition(self, vehicle_cls):
        with patch("docstate.machine.runner.log_state_transition") as log:
            vehicle_cls.create(state_event="ignite")

        kwargs = log.call_args.kwargs
        assert kwargs["event"] == "ignite"
        assert kwargs["from_state"] == "parked"
        assert kwargs["to_state"] == "idling"
        assert kwargs["outcome"] == "applied"

    def test_get_logger_returns_logger(self):
        assert get_logger(__name__) is not None

    def test_configure_from_loaded_params(self):
        params = get_default_config().logging

        with patch("docstate.logging.config.configure_logging") as configure:
            configure_logging_from(params)

        configure.assert_called_once_with(level="INFO", format_json=False, include_timestamp=True)
