"""Actions - the behavior a rule runs when it matches a call.

Every action reduces to ``Action.process(call)``: return a value or raise.
The specializations below cover the common shapes so test authors rarely
need to subclass Action themselves.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable

from .errors import ConfigurationError
from .types import CallRecord


class Action(ABC):
    """Produces the outcome of a matched call."""

    @abstractmethod
    def process(self, call: CallRecord) -> Any:
        """Return the call's result, or raise to fail the call."""

    def __call__(self, call: CallRecord) -> Any:
        return self.process(call)


class FunctionAction(Action):
    """Returns whatever ``fn(call)`` returns."""

    def __init__(self, fn: Callable[[CallRecord], Any]):
        self.fn = fn

    def process(self, call: CallRecord) -> Any:
        return self.fn(call)


class ProcedureAction(Action):
    """Runs ``fn(call)`` for its side effects, then returns the zero-value.

    The zero-value follows the method's declared return type: False for
    bool, 0 for int, 0.0 for float, 0j for complex and None otherwise.
    """

    def __init__(self, fn: Callable[[CallRecord], Any]):
        self.fn = fn

    def process(self, call: CallRecord) -> Any:
        self.fn(call)
        return call.method.zero_value()


class Returns(Action):
    """Ignores the call and returns a fixed value."""

    def __init__(self, value: Any):
        self.value = value

    def process(self, call: CallRecord) -> Any:
        return self.value

    def __repr__(self) -> str:
        return f"Returns({self.value!r})"


class Supplies(Action):
    """Ignores the call and returns ``fn()``."""

    def __init__(self, fn: Callable[[], Any]):
        self.fn = fn

    def process(self, call: CallRecord) -> Any:
        return self.fn()


class Raises(Action):
    """Ignores the call and raises ``error``.

    ``error`` may be an exception instance (raised as is) or an exception
    class (instantiated without arguments on every call).
    """

    def __init__(self, error: BaseException | type[BaseException]):
        if not (
            isinstance(error, BaseException)
            or (isinstance(error, type) and issubclass(error, BaseException))
        ):
            raise ConfigurationError(f"Raises() needs an exception, got {error!r}")
        self.error = error

    def process(self, call: CallRecord) -> Any:
        if isinstance(self.error, type):
            raise self.error()
        raise self.error

    def __repr__(self) -> str:
        return f"Raises({self.error!r})"


def as_action(obj: Any, procedure: bool = False) -> Action:
    """Coerce ``obj`` into an Action.

    Actions pass through unchanged. Other callables receive the CallRecord;
    with ``procedure=True`` their result is replaced by the zero-value.
    """
    if obj is None:
        raise ConfigurationError("action must not be None")
    if isinstance(obj, Action):
        return obj
    if not callable(obj):
        raise ConfigurationError(f"action must be callable, got {obj!r}")
    if procedure:
        return ProcedureAction(obj)
    return FunctionAction(obj)
