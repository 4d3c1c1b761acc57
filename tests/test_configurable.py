"""
Tests for Configurable owners.

These tests verify:
1. The raw parameter store reads, writes and replaces values
2. configure() reaches every component and reports unresolved names
3. Components added after configure() are configured by replay
"""

import pytest

from paramdispatch.configurable import Configurable
from paramdispatch.errors import CoercionError, UnresolvedParametersError


# =============================================================================
# TEST FIXTURES
# =============================================================================

class Engine(Configurable):
    def __init__(self):
        super().__init__()
        self.iterations = 10
        self.parameter_dispatcher.register("iterations", self.set_iterations)

    def set_iterations(self, iterations: int) -> None:
        self.iterations = iterations


class Logger(Configurable):
    def __init__(self):
        super().__init__("log")
        self.level = "info"
        self.parameter_dispatcher.register_attribute("logLevel", "level")


# =============================================================================
# PARAMETER STORE
# =============================================================================

class TestParameterStore:
    """Test the raw name → string store."""

    def test_default_name_is_class_name(self):
        assert Engine().name == "Engine"
        assert Logger().name == "log"

    def test_get_with_default(self):
        """Missing keys fall back to the default."""
        engine = Engine()
        engine.set_parameter("mode", "fast")
        assert engine.get_parameter("mode") == "fast"
        assert engine.get_parameter("other") is None
        assert engine.get_parameter("other", "x") == "x"

    def test_int_parameter(self):
        """Stored integers are parsed; missing ones use the default."""
        engine = Engine()
        engine.set_parameter("threads", "4")
        assert engine.get_int_parameter("threads", 1) == 4
        assert engine.get_int_parameter("cores", 2) == 2

    def test_malformed_int_parameter(self):
        engine = Engine()
        engine.set_parameter("threads", "four")
        with pytest.raises(CoercionError):
            engine.get_int_parameter("threads", 1)

    def test_set_parameters_replaces_store(self):
        """set_parameters drops keys that were set before."""
        engine = Engine()
        engine.set_parameter("old", "1")
        engine.set_parameters({"new": "2"})
        assert engine.parameters == {"new": "2"}

    def test_parameters_is_a_copy(self):
        engine = Engine()
        engine.parameters["x"] = "1"
        assert engine.get_parameter("x") is None


# =============================================================================
# CONFIGURE
# =============================================================================

class TestConfigure:
    """Test configuring a tree of components."""

    def test_stored_parameters_applied(self):
        engine = Engine()
        engine.set_parameter("iterations", "50")
        assert engine.configure() == frozenset()
        assert engine.iterations == 50

    def test_values_override_store(self):
        """Explicit values win over stored parameters."""
        engine = Engine()
        engine.set_parameter("iterations", "50")
        engine.configure({"iterations": "60"})
        assert engine.iterations == 60

    def test_components_receive_parameters(self):
        engine = Engine()
        log = Logger()
        engine.add_component(log)

        engine.configure({"iterations": "5", "logLevel": "debug"}, strict=True)

        assert engine.iterations == 5
        assert log.level == "debug"

    def test_unresolved_names_returned(self):
        engine = Engine()
        assert engine.configure({"logLevel": "debug"}) == {"logLevel"}

    def test_strict_configure_raises(self):
        engine = Engine()
        with pytest.raises(UnresolvedParametersError) as exc_info:
            engine.configure({"logLevel": "debug"}, strict=True)
        assert exc_info.value.handled_names == ["iterations"]

    def test_component_added_later_is_configured(self):
        """Adding a component replays the last configuration to it."""
        engine = Engine()
        engine.configure({"logLevel": "warning"})

        log = Logger()
        engine.add_component(log)

        assert log.level == "warning"
        assert engine.parameter_dispatcher.query_unresolved() == frozenset()
