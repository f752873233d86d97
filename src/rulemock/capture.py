"""Method capture - identifies which interface methods a rule targets.

A probe is either a method of the interface itself (``Account.balance``),
used directly, or a callable that invokes methods on a throwaway stand-in
(``lambda a: a.balance()``). The stand-in records each method it sees and
returns the zero-value for it, so probes run without side effects. It never
touches the real mock instance or its rules.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

from .errors import ConfigurationError
from .proxy import create_proxy, interface_methods
from .types import CallRecord, MethodId

logger = logging.getLogger(__name__)

Probe = Callable[[Any], Any]


# =============================================================================
# Target selectors
# =============================================================================


@dataclass(frozen=True)
class OneMethod:
    """Matches calls to exactly one method."""

    method: MethodId

    def matches(self, call: CallRecord) -> bool:
        return call.method == self.method


@dataclass(frozen=True)
class ManyMethods:
    """Matches calls to any of a set of methods."""

    methods: tuple[MethodId, ...]

    def matches(self, call: CallRecord) -> bool:
        return call.method in self.methods


@dataclass(frozen=True)
class AnyMethod:
    """Matches every call."""

    def matches(self, call: CallRecord) -> bool:
        return True


TargetMethod = OneMethod | ManyMethods | AnyMethod


# =============================================================================
# Probing
# =============================================================================


def direct_method(interface: type, probe: Probe) -> MethodId | None:
    """Return the MethodId if ``probe`` is itself a public method of ``interface``."""
    name = getattr(probe, "__name__", None)
    proxied = interface_methods(interface).get(name)
    if proxied is not None and getattr(interface, name, None) is probe:
        return proxied.method
    return None


def record_calls(interface: type, probe: Probe) -> list[MethodId]:
    """Run ``probe`` against a capturing stand-in.

    Returns the distinct methods it invoked, in first-invocation order.
    """
    invoked: list[MethodId] = []

    def handler(instance, method, arguments, keywords):
        if method not in invoked:
            invoked.append(method)
        return method.zero_value()

    stand_in = create_proxy(interface, handler, label="capturing stand-in")
    try:
        probe(stand_in)
    except TypeError as e:
        # Arguments that do not bind against the method signature
        raise ConfigurationError(f"The probe made an invalid call: {e}") from e
    return invoked


def _probed(interface: type, probe: Probe) -> list[MethodId]:
    if probe is None:
        raise ConfigurationError("probe must not be None")
    if not callable(probe):
        raise ConfigurationError(f"probe must be callable, got {probe!r}")
    method = direct_method(interface, probe)
    if method is not None:
        return [method]
    invoked = record_calls(interface, probe)
    if not invoked:
        raise ConfigurationError(
            f"The probe did not call any method of {interface.__qualname__}"
        )
    return invoked


def capture_one(interface: type, probe: Probe) -> MethodId:
    """Identify the single method ``probe`` refers to.

    Raises:
        ConfigurationError: If the probe invoked no method, or more than one
            distinct method.
    """
    invoked = _probed(interface, probe)
    if len(invoked) > 1:
        names = ", ".join(m.name for m in invoked)
        raise ConfigurationError(f"The probe called more than one method: {names}")
    logger.debug(f"Captured {invoked[0].descriptor}")
    return invoked[0]


def capture_many(interface: type, *probes: Probe) -> tuple[MethodId, ...]:
    """Identify every distinct method the probes refer to, in order.

    Raises:
        ConfigurationError: If no probe is given or any probe invoked nothing.
    """
    if not probes:
        raise ConfigurationError("At least one probe is required")
    collected: list[MethodId] = []
    for probe in probes:
        for method in _probed(interface, probe):
            if method not in collected:
                collected.append(method)
    logger.debug(f"Captured {len(collected)} methods: {', '.join(m.name for m in collected)}")
    return tuple(collected)
