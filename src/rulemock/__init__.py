"""Rule-driven mocks for interface classes."""

import logging as _logging

from .actions import (
    Action,
    FunctionAction,
    ProcedureAction,
    Raises,
    Returns,
    Supplies,
    as_action,
)
from .builder import NamedRule, TargetedRule
from .capture import AnyMethod, ManyMethods, OneMethod, capture_many, capture_one
from .descriptor import parse_descriptor
from .errors import (
    ConfigurationError,
    MockerError,
    UnconfiguredCallError,
    UnknownRuleError,
)
from .logging import init_logging
from .mocker import AUTO_NAME_PREFIX, Mocker, mock
from .proxy import create_proxy
from .types import CallRecord, MethodId, Rule

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

__all__ = [
    # Entry points
    "mock",
    "Mocker",
    "AUTO_NAME_PREFIX",
    # Builder
    "NamedRule",
    "TargetedRule",
    # Types
    "CallRecord",
    "MethodId",
    "Rule",
    # Actions
    "Action",
    "FunctionAction",
    "ProcedureAction",
    "Returns",
    "Raises",
    "Supplies",
    "as_action",
    # Capture
    "OneMethod",
    "ManyMethods",
    "AnyMethod",
    "capture_one",
    "capture_many",
    # Proxy factory
    "create_proxy",
    # Descriptors
    "parse_descriptor",
    # Errors
    "MockerError",
    "ConfigurationError",
    "UnknownRuleError",
    "UnconfiguredCallError",
    # Logging
    "init_logging",
]
