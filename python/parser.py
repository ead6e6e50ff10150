"""
Hilbert Checker - Formula Parser

Validates implicational formulas and parses them into a binary AST.

Syntax:
    Formula    := Term | Term '->' Formula
    Term       := Identifier | '(' Formula ')'
    Identifier := a single alphabetic character (case-sensitive)

Implication is the only connective. It binds loosest and is
right-associative, so a->b->c reads as a->(b->c). Whitespace is ignored
everywhere. Every identifier, 'f' included, is an ordinary propositional
variable; only the semantic check reads 'f' as falsum.

AST:
    Leaf(name)                 a propositional identifier
    Implication(left, right)   left -> right
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

ARROW = "->"
FALSUM = "f"


class ParseError(Exception):
    """Error during parsing with location information."""
    def __init__(self, message: str, col: int = None):
        self.reason = message
        self.col = col
        if col is not None:
            message = f"col {col}: {message}"
        super().__init__(message)


class MalformedSyntax(ParseError):
    """The text is not a well-formed implicational formula."""
    pass


@dataclass(frozen=True)
class Leaf:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Implication:
    left: "Node"
    right: "Node"

    def __str__(self) -> str:
        return render(self)


Node = Union[Leaf, Implication]


def strip_whitespace(text: str) -> str:
    return "".join(text.split())


def is_valid_character(ch: str) -> bool:
    return ch.isalpha() or ch in "()->"


def _scan(expr: str):
    """Reject bad characters, stray arrow halves and unbalanced parentheses."""
    if not expr:
        raise MalformedSyntax("empty formula")

    balance = 0
    for i, ch in enumerate(expr):
        if not is_valid_character(ch):
            raise MalformedSyntax(f"invalid character {ch!r}", i + 1)
        if ch == "-" and expr[i + 1:i + 2] != ">":
            raise MalformedSyntax("'-' must be followed by '>'", i + 1)
        if ch == ">" and expr[i - 1:i] != "-":
            raise MalformedSyntax("'>' must be preceded by '-'", i + 1)
        if ch == "(":
            balance += 1
        elif ch == ")":
            balance -= 1
            if balance < 0:
                raise MalformedSyntax("unbalanced parentheses: unexpected ')'", i + 1)

    if balance != 0:
        raise MalformedSyntax("unbalanced parentheses: missing ')'", len(expr))


@dataclass
class _Group:
    """An open parenthesis (or the whole formula) while it is being read."""
    open_col: int
    terms: List["Node"] = field(default_factory=list)
    arrow_col: int = None
    expect_term: bool = True

    def fold(self) -> "Node":
        node = self.terms[-1]
        for term in reversed(self.terms[:-1]):
            node = Implication(term, node)
        return node


def _build(expr: str) -> Node:
    """Shift-reduce pass over a scanned formula.

    Each group collects the terms of one arrow chain and folds them to the
    right when it closes, so nesting depth costs no Python stack.
    """
    groups = [_Group(open_col=0)]
    i = 0
    while i < len(expr):
        ch = expr[i]
        group = groups[-1]

        if ch.isalpha() or ch == "(":
            if not group.expect_term:
                raise MalformedSyntax(f"missing '->' after {expr[i - 1]!r}", i + 1)
            if ch == "(":
                groups.append(_Group(open_col=i + 1))
            else:
                group.terms.append(Leaf(ch))
                group.expect_term = False

        elif ch == "-":
            if group.expect_term:
                raise MalformedSyntax("missing operand before '->'", i + 1)
            group.arrow_col = i + 1
            group.expect_term = True
            i += 1

        elif ch == ")":
            if group.expect_term:
                if not group.terms:
                    raise MalformedSyntax("empty parentheses", group.open_col)
                raise MalformedSyntax("missing operand after '->'", group.arrow_col)
            groups.pop()
            groups[-1].terms.append(group.fold())
            groups[-1].expect_term = False

        else:
            raise MalformedSyntax(f"unexpected {ch!r}", i + 1)
        i += 1

    group = groups[-1]
    if group.expect_term:
        raise MalformedSyntax("missing operand after '->'", group.arrow_col)
    return group.fold()


def parse(text: str) -> Node:
    """Parse formula text into an AST.

    Raises MalformedSyntax when the text is not well-formed; callers that
    only need a yes/no answer should use is_well_formed().
    """
    expr = strip_whitespace(text)
    _scan(expr)
    return _build(expr)


def validate(text: str) -> str:
    """Check the text and return it with whitespace removed."""
    parse(text)
    return strip_whitespace(text)


def is_well_formed(text: str) -> bool:
    try:
        parse(text)
    except MalformedSyntax:
        return False
    return True


def render(node: Node) -> str:
    """Canonical text: leaves bare, every implication parenthesised."""
    parts = []
    stack = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, str):
            parts.append(current)
        elif isinstance(current, Leaf):
            parts.append(current.name)
        else:
            stack.extend((")", current.right, ARROW, current.left, "("))
    return "".join(parts)


def identifiers(node: Node) -> List[str]:
    """Identifiers of the tree in first-occurrence order."""
    seen = []
    stack = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, Leaf):
            if current.name not in seen:
                seen.append(current.name)
        else:
            stack.append(current.right)
            stack.append(current.left)
    return seen


def to_json(node: Node) -> Dict[str, Any]:
    """Convert an AST into the JSON form used by the tools and web API."""
    converted = {}
    stack = [node]
    while stack:
        current = stack[-1]
        if isinstance(current, Leaf):
            converted[id(current)] = {"type": "var", "name": current.name}
            stack.pop()
        elif id(current.left) in converted and id(current.right) in converted:
            converted[id(current)] = {"type": "implies",
                                      "lhs": converted[id(current.left)],
                                      "rhs": converted[id(current.right)]}
            stack.pop()
        else:
            stack.extend((current.right, current.left))
    return converted[id(node)]


@dataclass(frozen=True)
class Formula:
    """An accepted or submitted formula: source text plus its AST.

    Equality and hashing look at the tree only; two spellings of the same
    formula ("a->b" and "(a->b)") compare equal.
    """
    text: str = field(compare=False)
    ast: Node

    @classmethod
    def parse(cls, text: str) -> "Formula":
        return cls(strip_whitespace(text), parse(text))

    @classmethod
    def from_ast(cls, node: Node) -> "Formula":
        return cls(render(node), node)

    @property
    def canonical(self) -> str:
        return render(self.ast)

    def identifiers(self) -> List[str]:
        return identifiers(self.ast)

    def __str__(self) -> str:
        return self.text


if __name__ == "__main__":
    import sys
    import json

    if len(sys.argv) < 2:
        print("Usage: python parser.py '<formula>'")
        sys.exit(1)

    try:
        print(json.dumps(to_json(parse(" ".join(sys.argv[1:]))), indent=2))
    except ParseError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        sys.exit(1)
