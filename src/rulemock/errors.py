"""Errors raised by rulemock.

Two families:

- ConfigurationError: the test author misused the configuration API
  (bad probe, unknown rule name, None argument, ...). Raised at the call
  that caused it.
- UnconfiguredCallError: a mock method was called and no enabled rule
  matched it. Subclasses AssertionError so test runners report it as a
  failed expectation rather than a crash.

Whatever an action raises is propagated untouched and is not wrapped here.
"""

from .types import MethodId


class MockerError(Exception):
    """Base class for errors raised by rulemock."""


class ConfigurationError(MockerError, ValueError):
    """Invalid mock configuration."""


class UnknownRuleError(ConfigurationError, KeyError):
    """A rule name that is not registered was used."""

    def __init__(self, name: str):
        super().__init__(f"No such rule: {name!r}")
        self.name = name

    def __str__(self) -> str:
        # KeyError would repr() the message
        return self.args[0]


class UnconfiguredCallError(MockerError, AssertionError):
    """No enabled rule matched a call to the mock.

    Pickles through its MethodId, which is made only of strings, so it can
    cross process boundaries (e.g. parallel test workers) without a live
    function handle.
    """

    def __init__(self, method: MethodId):
        super().__init__(f"This call ({method.descriptor}) is unexpected.")
        self.method = method

    def resolve(self):
        """The live function that was called, if it can still be imported."""
        return self.method.resolve()

    def __reduce__(self):
        return (UnconfiguredCallError, (self.method,))

    def __eq__(self, other) -> bool:
        if not isinstance(other, UnconfiguredCallError):
            return NotImplemented
        return self.method == other.method

    def __hash__(self) -> int:
        return hash(self.method)
