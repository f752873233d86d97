"""Call and rule data structures shared by the dispatch engine."""

import enum
import importlib
import inspect
import types
import typing
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

# Zero-values handed back for methods whose declared return type is one of these
ZEROS = {
    bool: False,
    int: 0,
    float: 0.0,
    complex: 0j,
}

_ZEROS_BY_NAME = {t.__name__: value for t, value in ZEROS.items()}

UNANNOTATED = "Any"
NO_RETURN = "None"


def _literal_value(value: Any) -> str:
    # Enum members render by qualified name; repr() gives "<Color.RED: 1>"
    if isinstance(value, enum.Enum):
        return f"{type_name(type(value))}.{value.name}"
    return repr(value)


def type_name(annotation: Any) -> str:
    """Render an annotation as a stable string.

    Builtins render bare (``int``), other classes as ``module.QualName``,
    parameterized generics recursively (``dict[str, list[int]]``) and unions
    with ``|``. String annotations (postponed evaluation) are kept verbatim.
    """
    if annotation is inspect.Parameter.empty or annotation is inspect.Signature.empty:
        return UNANNOTATED
    if annotation is None or annotation is type(None):
        return NO_RETURN
    if isinstance(annotation, str):
        return annotation
    if annotation is Ellipsis:
        return "..."
    if isinstance(annotation, typing.TypeVar):
        return annotation.__name__
    if isinstance(annotation, typing.ForwardRef):
        return annotation.__forward_arg__
    if isinstance(annotation, list):
        # Callable[[int], str] keeps its parameter list as a plain list
        return "[" + ", ".join(type_name(a) for a in annotation) + "]"

    origin = typing.get_origin(annotation)
    if origin is not None:
        args = typing.get_args(annotation)
        if origin is typing.Union or origin is types.UnionType:
            return " | ".join(type_name(a) for a in args)
        if origin is typing.Annotated:
            return type_name(args[0])
        if origin is typing.Literal:
            return "typing.Literal[" + ", ".join(_literal_value(a) for a in args) + "]"
        if not args:
            return type_name(origin)
        return type_name(origin) + "[" + ", ".join(type_name(a) for a in args) + "]"

    if isinstance(annotation, type):
        if annotation.__module__ == "builtins":
            return annotation.__qualname__
        return f"{annotation.__module__}.{annotation.__qualname__}"

    return repr(annotation)


@dataclass(frozen=True)
class MethodId:
    """Identity of an interface method, made only of strings.

    Equality uses the declaring type, the method name and the parameter
    types. The return type is carried along for zero-value computation.
    """

    declaring_type: str  # module.QualName of the class defining the method
    name: str
    parameter_types: tuple[str, ...] = ()
    return_type: str = field(default=UNANNOTATED, compare=False)

    @classmethod
    def of(cls, owner: type, function: Callable) -> "MethodId":
        """Build the identity of ``function`` as declared on class ``owner``."""
        signature = inspect.signature(function)
        params = list(signature.parameters.values())[1:]  # drop self
        rendered = []
        for param in params:
            name = type_name(param.annotation)
            if param.kind is inspect.Parameter.VAR_POSITIONAL:
                name = "*" + name
            elif param.kind is inspect.Parameter.VAR_KEYWORD:
                name = "**" + name
            rendered.append(name)
        return cls(
            declaring_type=f"{owner.__module__}.{owner.__qualname__}",
            name=function.__name__,
            parameter_types=tuple(rendered),
            return_type=type_name(signature.return_annotation),
        )

    @property
    def descriptor(self) -> str:
        """Text form: ``module.QualName.method(T1, T2) -> R``."""
        params = ", ".join(self.parameter_types)
        return f"{self.declaring_type}.{self.name}({params}) -> {self.return_type}"

    @property
    def returns_nothing(self) -> bool:
        return self.return_type == NO_RETURN

    def zero_value(self) -> Any:
        """Placeholder result for the declared return type."""
        return _ZEROS_BY_NAME.get(self.return_type)

    def resolve(self) -> Callable | None:
        """Locate the live function by import, or None if it is unreachable.

        Classes defined inside functions (``<locals>``) cannot be resolved.
        """
        parts = self.declaring_type.split(".")
        for split in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:split])
            try:
                target = importlib.import_module(module_name)
            except ImportError:
                continue
            for attr in parts[split:] + [self.name]:
                target = getattr(target, attr, None)
                if target is None:
                    return None
            return target
        return None

    def __str__(self) -> str:
        return self.descriptor


@dataclass(frozen=True)
class CallRecord:
    """One intercepted invocation of a mock method.

    ``arguments`` holds the positional values bound against the method
    signature with defaults applied. ``keywords`` holds keyword-only and
    ``**kwargs`` values. Values are the caller's own objects, not copies.
    """

    instance: Any
    method: MethodId
    arguments: tuple = ()
    keywords: Mapping[str, Any] = field(default_factory=lambda: types.MappingProxyType({}))

    def argument(self, index: int) -> Any:
        """Positional argument at ``index``."""
        return self.arguments[index]


@dataclass
class Rule:
    """A named binding of a call predicate to an action.

    Only ``enabled`` changes after creation; anything else is replaced by
    registering a new rule under the same name.
    """

    name: str
    predicate: Callable[[CallRecord], bool]
    action: Any  # rulemock.actions.Action
    enabled: bool = False

    def matches(self, call: CallRecord) -> bool:
        """True if enabled and the predicate accepts ``call``."""
        return self.enabled and bool(self.predicate(call))
