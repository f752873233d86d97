"""Rule set and dispatch engine behind each mock instance."""

import itertools
import logging
import threading
from types import MappingProxyType
from typing import Any, Mapping

from .builder import NamedRule
from .errors import ConfigurationError, UnconfiguredCallError, UnknownRuleError
from .proxy import create_proxy, resolve_interface
from .types import CallRecord, MethodId, Rule

logger = logging.getLogger(__name__)

# Prefix of the names generated by Mocker.rule() when no name is given
AUTO_NAME_PREFIX = "auto#"

_AUTO = object()


def _check_name(name: Any) -> str:
    if name is None:
        raise ConfigurationError("rule name must not be None")
    if not isinstance(name, str) or not name:
        raise ConfigurationError(f"rule name must be a non-empty string, got {name!r}")
    return name


class Mocker:
    """Owns a mock instance and the ordered rules that decide its behavior.

    Every call on ``target`` is matched against the enabled rules in
    registration order; the first rule whose predicate accepts the call runs
    its action. If none does, UnconfiguredCallError is raised.

    Rules start disabled. Registering a name that already exists replaces
    the old rule in place (same dispatch position, disabled again).

    Thread-safe: the rule mapping is guarded by a single lock, held while
    registering, enabling/disabling, enumerating and while locating the
    matching rule. Actions run outside the lock, so an action may
    reconfigure the mocker for subsequent calls.

    Example:
        mocker = mock(Account)
        mocker.rule("balance").function(Account.balance).returns(42)
        mocker.enable("balance")

        assert mocker.target.balance() == 42
    """

    def __init__(self, interface: Any):
        self._interface = resolve_interface(interface)
        self._rules: dict[str, Rule] = {}
        # Reentrant so predicates may query the mocker (e.g. is_enabled)
        self._lock = threading.RLock()
        self._auto_names = itertools.count(1)
        self._target = create_proxy(self._interface, self._dispatch, label="mock")

    @property
    def target(self) -> Any:
        """The mock instance."""
        return self._target

    @property
    def interface(self) -> type:
        """The mocked interface class."""
        return self._interface

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _find(self, call: CallRecord) -> Rule | None:
        """Return the first enabled rule matching ``call``. Must hold lock."""
        # Snapshot so a predicate that registers rules cannot break iteration
        for rule in list(self._rules.values()):
            if rule.matches(call):
                return rule
        return None

    def _dispatch(
        self,
        instance: Any,
        method: MethodId,
        arguments: tuple | None,
        keywords: Mapping[str, Any] | None,
    ) -> Any:
        call = CallRecord(
            instance=instance,
            method=method,
            arguments=tuple(arguments or ()),
            keywords=MappingProxyType(dict(keywords or {})),
        )
        with self._lock:
            rule = self._find(call)

        if rule is None:
            logger.info(f"Unconfigured call {method.descriptor}")
            raise UnconfiguredCallError(method)

        logger.debug(f"Rule {rule.name!r} handles {method.name}")
        try:
            return rule.action.process(call)
        except Exception as e:
            logger.debug(f"Rule {rule.name!r} action raised {type(e).__name__}: {e}")
            raise

    # =========================================================================
    # Registration
    # =========================================================================

    def rule(self, name: str = _AUTO) -> NamedRule:
        """Start configuring a rule. Without a name, a unique one is generated."""
        if name is _AUTO:
            name = self._auto_name()
        return NamedRule(self, _check_name(name))

    def _auto_name(self) -> str:
        with self._lock:
            while True:
                name = f"{AUTO_NAME_PREFIX}{next(self._auto_names)}"
                if name not in self._rules:
                    return name

    def _put(self, name: str, predicate, action) -> None:
        """Install a disabled rule, replacing any rule with the same name."""
        _check_name(name)
        with self._lock:
            replaced = name in self._rules
            # Assigning to an existing key keeps its dispatch position
            self._rules[name] = Rule(name=name, predicate=predicate, action=action)
        if replaced:
            logger.debug(f"Replaced rule {name!r}")
        else:
            logger.debug(f"Registered rule {name!r}")

    def reset(self) -> "Mocker":
        """Remove every rule."""
        with self._lock:
            count = len(self._rules)
            self._rules.clear()
        logger.debug(f"Reset: removed {count} rules")
        return self

    # =========================================================================
    # Enable / disable
    # =========================================================================

    def _set_enabled(self, names: tuple, enabled: bool) -> None:
        for name in names:
            _check_name(name)
        with self._lock:
            # Validate everything first so a bad name changes nothing
            for name in names:
                if name not in self._rules:
                    raise UnknownRuleError(name)
            for name in names:
                self._rules[name].enabled = enabled
        if names:
            state = "Enabled" if enabled else "Disabled"
            logger.debug(f"{state} {', '.join(repr(n) for n in names)}")

    def enable(self, *names: str) -> "Mocker":
        """Enable the named rules.

        Raises:
            UnknownRuleError: If any name is not registered (nothing changes).
        """
        self._set_enabled(names, True)
        return self

    def disable(self, *names: str) -> "Mocker":
        """Disable the named rules.

        Raises:
            UnknownRuleError: If any name is not registered (nothing changes).
        """
        self._set_enabled(names, False)
        return self

    def enable_all(self) -> "Mocker":
        with self._lock:
            for rule in self._rules.values():
                rule.enabled = True
        return self

    def disable_all(self) -> "Mocker":
        with self._lock:
            for rule in self._rules.values():
                rule.enabled = False
        return self

    # =========================================================================
    # Queries
    # =========================================================================

    def exists(self, name: str) -> bool:
        """Whether a rule with this name is registered. Never raises for unknown names."""
        _check_name(name)
        with self._lock:
            return name in self._rules

    def is_enabled(self, name: str) -> bool:
        """Whether the named rule is enabled.

        Raises:
            UnknownRuleError: If the name is not registered.
        """
        _check_name(name)
        with self._lock:
            rule = self._rules.get(name)
            if rule is None:
                raise UnknownRuleError(name)
            return rule.enabled

    def rules(self) -> list[str]:
        """Sorted names of all rules."""
        with self._lock:
            return sorted(self._rules)

    def enabled_rules(self) -> list[str]:
        """Sorted names of the enabled rules."""
        with self._lock:
            return sorted(name for name, rule in self._rules.items() if rule.enabled)

    def disabled_rules(self) -> list[str]:
        """Sorted names of the disabled rules."""
        with self._lock:
            return sorted(name for name, rule in self._rules.items() if not rule.enabled)

    def dispatch_order(self) -> list[str]:
        """Rule names in the order dispatch tries them."""
        with self._lock:
            return list(self._rules)

    def __contains__(self, name: str) -> bool:
        return self.exists(name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._rules)

    def __repr__(self) -> str:
        with self._lock:
            enabled = sum(1 for rule in self._rules.values() if rule.enabled)
            total = len(self._rules)
        return f"<Mocker of {self._interface.__qualname__}: {total} rules, {enabled} enabled>"


def mock(interface: Any) -> Mocker:
    """Create a Mocker for ``interface`` (a class or parameterized generic)."""
    return Mocker(interface)
