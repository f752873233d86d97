"""Tests for method capture (probing a throwaway stand-in)."""

import sys
from abc import ABC, abstractmethod
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rulemock import ConfigurationError, mock
from rulemock.capture import (
    AnyMethod,
    ManyMethods,
    OneMethod,
    capture_many,
    capture_one,
    direct_method,
    record_calls,
)
from rulemock.types import CallRecord, MethodId


class Sensor(ABC):
    @abstractmethod
    def active(self) -> bool: ...

    @abstractmethod
    def count(self) -> int: ...

    @abstractmethod
    def ratio(self) -> float: ...

    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def calibrate(self, offset: float) -> None: ...


def method(name: str) -> MethodId:
    return MethodId.of(Sensor, getattr(Sensor, name))


class TestCaptureOne:
    """Single-method mode."""

    def test_direct_function(self):
        assert capture_one(Sensor, Sensor.count) == method("count")

    def test_probe(self):
        assert capture_one(Sensor, lambda s: s.calibrate(1.5)) == method("calibrate")

    def test_same_method_twice_is_fine(self):
        assert capture_one(Sensor, lambda s: (s.count(), s.count())) == method("count")

    def test_no_method_invoked(self):
        with pytest.raises(ConfigurationError, match="did not call"):
            capture_one(Sensor, lambda s: None)

    def test_two_methods_invoked(self):
        with pytest.raises(ConfigurationError, match="more than one"):
            capture_one(Sensor, lambda s: (s.count(), s.name()))

    def test_invalid_arguments_are_configuration_errors(self):
        with pytest.raises(ConfigurationError, match="calibrate"):
            capture_one(Sensor, lambda s: s.calibrate())
        with pytest.raises(ConfigurationError):
            mock(Sensor).rule("r").procedure(lambda s: s.calibrate(1.0, 2.0))

    def test_none_probe(self):
        with pytest.raises(ConfigurationError):
            capture_one(Sensor, None)

    def test_non_callable_probe(self):
        with pytest.raises(ConfigurationError):
            capture_one(Sensor, "count")


class TestCaptureMany:
    """Multi-method mode."""

    def test_order_and_deduplication(self):
        captured = capture_many(Sensor, lambda s: (s.name(), s.count(), s.name()))
        assert captured == (method("name"), method("count"))

    def test_several_probes(self):
        captured = capture_many(Sensor, Sensor.ratio, lambda s: (s.active(), s.ratio()))
        assert captured == (method("ratio"), method("active"))

    def test_no_probes(self):
        with pytest.raises(ConfigurationError):
            capture_many(Sensor)

    def test_probe_invoking_nothing(self):
        with pytest.raises(ConfigurationError):
            capture_many(Sensor, Sensor.count, lambda s: None)


class TestStandIn:
    """The capturing stand-in is harmless and isolated."""

    def test_returns_zero_values(self):
        seen = []
        record_calls(
            Sensor,
            lambda s: seen.append((s.active(), s.count(), s.ratio(), s.name(), s.calibrate(0.0))),
        )
        assert seen == [(False, 0, 0.0, None, None)]

    def test_does_not_touch_mock(self):
        mocker = mock(Sensor)
        mocker.rule("r").any_method().raises(RuntimeError)
        mocker.enable("r")

        # The probe runs against the stand-in, not mocker.target
        mocker.rule("probe").function(lambda s: s.count())
        assert mocker.rules() == ["r"]

    def test_direct_method_ignores_lambdas_and_foreign_functions(self):
        def count(self):
            return 1

        assert direct_method(Sensor, lambda s: s.count()) is None
        assert direct_method(Sensor, count) is None
        assert direct_method(Sensor, Sensor.count) == method("count")


class TestSelectors:
    """Target selectors match calls by method identity."""

    def _call(self, name):
        return CallRecord(instance=None, method=method(name))

    def test_one_method(self):
        selector = OneMethod(method("count"))
        assert selector.matches(self._call("count"))
        assert not selector.matches(self._call("name"))

    def test_many_methods(self):
        selector = ManyMethods((method("count"), method("name")))
        assert selector.matches(self._call("count"))
        assert selector.matches(self._call("name"))
        assert not selector.matches(self._call("ratio"))

    def test_any_method(self):
        assert AnyMethod().matches(self._call("calibrate"))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
