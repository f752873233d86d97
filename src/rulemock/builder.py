"""Fluent rule configuration.

A rule is configured in three forward-only steps::

    mocker.rule("even")                       # NamedRule
          .function(lambda c: c.compute(0))   # TargetedRule
          .where(lambda call: call.argument(0) % 2 == 0)
          .executes(lambda call: "even")      # registered, disabled

TargetedRule is immutable, so a shared prefix can be reused to derive
several rules without one affecting the other.
"""

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Callable

from .actions import Raises, Returns, as_action
from .capture import AnyMethod, ManyMethods, OneMethod, Probe, TargetMethod, capture_many, capture_one
from .errors import ConfigurationError
from .types import UNANNOTATED, CallRecord

if TYPE_CHECKING:
    from .mocker import Mocker


class NamedRule:
    """First step: a rule name waiting for its target method(s)."""

    def __init__(self, owner: "Mocker", name: str):
        self._owner = owner
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def function(self, probe: Probe) -> "TargetedRule":
        """Target one method that returns a value."""
        method = capture_one(self._owner.interface, probe)
        if method.returns_nothing:
            raise ConfigurationError(
                f"{method.name}() returns None; configure it with procedure()"
            )
        return TargetedRule(self._owner, self._name, OneMethod(method))

    def procedure(self, probe: Probe) -> "TargetedRule":
        """Target one method that returns None.

        Plain callables given to ``executes`` have their result discarded.
        """
        method = capture_one(self._owner.interface, probe)
        if not method.returns_nothing and method.return_type != UNANNOTATED:
            raise ConfigurationError(
                f"{method.name}() returns {method.return_type}; configure it with function()"
            )
        return TargetedRule(self._owner, self._name, OneMethod(method), procedure=True)

    def some_methods(self, *probes: Probe) -> "TargetedRule":
        """Target every distinct method the probes invoke."""
        methods = capture_many(self._owner.interface, *probes)
        return TargetedRule(self._owner, self._name, ManyMethods(methods))

    def any_method(self) -> "TargetedRule":
        """Target every method of the interface."""
        return TargetedRule(self._owner, self._name, AnyMethod())

    def __repr__(self) -> str:
        return f"NamedRule({self._name!r})"


@dataclass(frozen=True)
class TargetedRule:
    """Second step: a target plus zero or more extra conditions."""

    owner: "Mocker" = field(repr=False)
    name: str
    target: TargetMethod
    procedure: bool = False
    conditions: tuple[Callable[[CallRecord], bool], ...] = field(default=(), repr=False)

    def where(self, predicate: Callable[[CallRecord], bool]) -> "TargetedRule":
        """Narrow the match with a predicate over the call."""
        if predicate is None:
            raise ConfigurationError("predicate must not be None")
        return replace(self, conditions=self.conditions + (predicate,))

    def named(self, name: str) -> "TargetedRule":
        """Same target and conditions under another rule name."""
        if name is None:
            raise ConfigurationError("rule name must not be None")
        return replace(self, name=name)

    def when(self, condition: Callable[[], bool]) -> "TargetedRule":
        """Narrow the match with a condition that ignores the call (e.g. a flag)."""
        if condition is None:
            raise ConfigurationError("condition must not be None")
        return self.where(lambda call: condition())

    def matches(self, call: CallRecord) -> bool:
        """True if the call hits the target and every condition holds."""
        if not self.target.matches(call):
            return False
        return all(condition(call) for condition in self.conditions)

    def executes(self, action: Any) -> str:
        """Register the rule, disabled, with ``action``. Returns the rule name.

        Any rule previously registered under this name is discarded.
        """
        self.owner._put(self.name, self.matches, as_action(action, procedure=self.procedure))
        return self.name

    def returns(self, value: Any) -> str:
        """Register the rule with an action returning ``value``."""
        return self.executes(Returns(value))

    def raises(self, error: BaseException | type[BaseException]) -> str:
        """Register the rule with an action raising ``error``."""
        return self.executes(Raises(error))
