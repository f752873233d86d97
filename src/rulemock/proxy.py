"""Proxy factory - synthesizes interface implementations backed by a handler.

Given an interface class and a handler, ``create_proxy`` builds a subclass
of the interface in which every public method is replaced by a stub that
binds its arguments against the original signature and forwards
``(instance, method_id, arguments, keywords)`` to the handler. The
handler's return value (or exception) becomes the method's outcome.

Public methods are plain functions whose name does not start with an
underscore, collected over the interface MRO (methods with a default body
included). Properties, static methods and class methods are left alone.
"""

import functools
import inspect
import logging
import typing
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping

from .errors import ConfigurationError
from .types import MethodId

logger = logging.getLogger(__name__)

Handler = Callable[[Any, MethodId, tuple, Mapping[str, Any]], Any]


@dataclass(frozen=True)
class ProxiedMethod:
    """An interface method the proxy intercepts."""

    method: MethodId
    function: Callable
    signature: inspect.Signature


def resolve_interface(interface: Any) -> type:
    """Return the class to mock for ``interface``.

    Parameterized generics (``Repository[User]``) resolve to their origin.
    """
    if interface is None:
        raise ConfigurationError("interface must not be None")
    origin = typing.get_origin(interface)
    if origin is not None:
        interface = origin
    if not inspect.isclass(interface):
        raise ConfigurationError(f"Can only mock classes, got {interface!r}")
    return interface


def interface_methods(interface: type) -> Mapping[str, ProxiedMethod]:
    """Map each public method name of ``interface`` to its ProxiedMethod."""
    found: dict[str, ProxiedMethod] = {}
    for owner in reversed(interface.__mro__):
        if owner is object:
            continue
        for name, value in vars(owner).items():
            if name.startswith("_"):
                continue
            if not inspect.isfunction(value):
                # A subclass may shadow a method with something else
                found.pop(name, None)
                continue
            found[name] = ProxiedMethod(
                method=MethodId.of(owner, value),
                function=value,
                signature=inspect.signature(value),
            )
    return MappingProxyType(found)


def _routed(proxied: ProxiedMethod, handler: Handler) -> Callable:
    """Build the stub that forwards one method to the handler."""
    signature = proxied.signature
    method = proxied.method

    # updated=() keeps __isabstractmethod__ off the stub
    @functools.wraps(proxied.function, updated=())
    def stub(self, *args, **kwargs):
        try:
            bound = signature.bind(self, *args, **kwargs)
        except TypeError as e:
            raise TypeError(f"{method.name}(): {e}") from None
        bound.apply_defaults()
        return handler(self, method, bound.args[1:], MappingProxyType(dict(bound.kwargs)))

    return stub


def create_proxy(interface: Any, handler: Handler, label: str = "proxy") -> Any:
    """Create an instance of ``interface`` whose methods all call ``handler``.

    Args:
        interface: The class (or parameterized generic) to implement.
        handler: Called as ``handler(instance, method_id, arguments, keywords)``.
        label: Shown in the proxy's repr.

    Raises:
        ConfigurationError: If ``interface`` is not a class, or has abstract
            members that are not plain methods (e.g. abstract properties).
    """
    if handler is None:
        raise ConfigurationError("handler must not be None")
    interface = resolve_interface(interface)
    methods = interface_methods(interface)

    qualname = f"{interface.__module__}.{interface.__qualname__}"
    namespace = {name: _routed(proxied, handler) for name, proxied in methods.items()}
    namespace["__init__"] = lambda self: None
    namespace["__repr__"] = lambda self: f"<{label} of {qualname} at {id(self):#x}>"
    namespace["__module__"] = interface.__module__

    try:
        proxy_class = type(interface)(f"{interface.__name__}Proxy", (interface,), namespace)
        instance = proxy_class()
    except TypeError as e:
        raise ConfigurationError(f"Cannot implement {qualname}: {e}") from e

    logger.debug(f"Created {label} for {qualname} intercepting {len(methods)} methods")
    return instance
