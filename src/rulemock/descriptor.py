"""Method descriptor parser - turns descriptor text back into a MethodId.

A descriptor is the text form produced by ``MethodId.descriptor``::

    billing.api.Account.transfer(str, decimal.Decimal, *int) -> dict[str, list[int]] | None

Uses parsimonious for PEG parsing. The grammar accepts nested generic
parameter types, unions, literals and the ``*``/``**`` markers of variadic
parameters, and normalizes whitespace so that a parsed descriptor compares
equal to the MethodId that rendered it.
"""

import logging

from parsimonious.exceptions import ParseError, VisitationError
from parsimonious.grammar import Grammar
from parsimonious.nodes import Node, NodeVisitor

from .errors import ConfigurationError
from .types import UNANNOTATED, MethodId

logger = logging.getLogger(__name__)

# =============================================================================
# PEG Grammar
# =============================================================================

GRAMMAR = Grammar(r"""
descriptor      = ws qualified ws "(" ws param_list? ws ")" ws returns? ws
returns         = "->" ws type

param_list      = param (ws "," ws param)*
param           = star? type
star            = "**" / "*"

type_list       = type (ws "," ws type)*
type            = atom (ws "|" ws atom)*
atom            = literal / generic / bracket_list / ellipsis
generic         = qualified type_args?
type_args       = ws "[" ws type_list? ws "]"
bracket_list    = "[" ws type_list? ws "]"
literal         = ~"b?'[^']*'" / ~"b?\"[^\"]*\"" / ~"-?[0-9]+(\\.[0-9]+)?"
ellipsis        = "..."

qualified       = name ("." name)*
name            = ~"[A-Za-z_<][A-Za-z0-9_<>]*"
ws              = ~"\\s*"
""")


def _optional(visited):
    """Return the single child of an optional match, or None if it was absent."""
    if isinstance(visited, list):
        return visited[0]
    return None


def _repeated(visited) -> list:
    """Return the visited items of a ``(...)*`` match (empty if none)."""
    if isinstance(visited, Node):
        return []
    return visited


# =============================================================================
# AST Visitor - transforms parse tree to a MethodId
# =============================================================================


class DescriptorVisitor(NodeVisitor):
    """Visits a descriptor parse tree and builds a MethodId."""

    unwrapped_exceptions = (ConfigurationError,)

    def visit_descriptor(self, node, visited_children):
        _, qualified, _, _, _, params, _, _, _, returns, _ = visited_children
        owner, _, name = qualified.rpartition(".")
        if not owner:
            raise ConfigurationError(
                f"Descriptor {node.text!r} has no declaring type before the method name"
            )
        return MethodId(
            declaring_type=owner,
            name=name,
            parameter_types=tuple(_optional(params) or ()),
            return_type=_optional(returns) or UNANNOTATED,
        )

    def visit_returns(self, node, visited_children):
        _, _, type_text = visited_children
        return type_text

    def visit_param_list(self, node, visited_children):
        first, rest = visited_children
        return [first] + [item[3] for item in _repeated(rest)]

    def visit_param(self, node, visited_children):
        star, type_text = visited_children
        marker = _optional(star)
        return (marker or "") + type_text

    def visit_star(self, node, visited_children):
        return node.text

    def visit_type_list(self, node, visited_children):
        first, rest = visited_children
        return [first] + [item[3] for item in _repeated(rest)]

    def visit_type(self, node, visited_children):
        first, rest = visited_children
        return " | ".join([first] + [item[3] for item in _repeated(rest)])

    def visit_atom(self, node, visited_children):
        return visited_children[0]

    def visit_generic(self, node, visited_children):
        qualified, args = visited_children
        args = _optional(args)
        if args is None:
            return qualified
        return f"{qualified}[{', '.join(args)}]"

    def visit_type_args(self, node, visited_children):
        _, _, _, types, _, _ = visited_children
        return _optional(types) or []

    def visit_bracket_list(self, node, visited_children):
        _, _, types, _, _ = visited_children
        return "[" + ", ".join(_optional(types) or []) + "]"

    def visit_literal(self, node, visited_children):
        return node.text

    def visit_ellipsis(self, node, visited_children):
        return node.text

    def visit_qualified(self, node, visited_children):
        return node.text

    def generic_visit(self, node, visited_children):
        return visited_children or node


def parse_descriptor(text: str) -> MethodId:
    """Parse descriptor text into a MethodId.

    Raises:
        ConfigurationError: If ``text`` is None or not a valid descriptor.
    """
    if text is None:
        raise ConfigurationError("descriptor must not be None")
    try:
        tree = GRAMMAR.parse(text)
    except ParseError as e:
        logger.debug(f"Rejected descriptor {text!r}: {e}")
        raise ConfigurationError(f"Invalid method descriptor {text!r}: {e}") from e
    try:
        return DescriptorVisitor().visit(tree)
    except VisitationError as e:
        raise ConfigurationError(f"Invalid method descriptor {text!r}: {e}") from e
