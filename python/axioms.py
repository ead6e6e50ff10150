"""
Hilbert Checker - Axiom Schemas

An axiom schema is a named template formula whose parameter identifiers are
schema variables. The default calculus has three schemas:

    K   p->(q->p)
    S   (s->(p->q))->((s->p)->(s->q))
    E   ((p->f)->f)->p

Schemas are searched with the small ones (at most two parameters) first, then
the rest, each group in declaration order.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from parser import Formula, MalformedSyntax, strip_whitespace
from matcher import Bindings, equal, match

logger = logging.getLogger(__name__)

SMALL_ARITY = 2


class AxiomError(Exception):
    """Invalid axiom definition or unknown axiom."""
    pass


@dataclass(frozen=True)
class AxiomSchema:
    name: str
    template: str
    parameters: Tuple[str, ...] = None
    formula: Formula = field(init=False, compare=False, repr=False)

    def __post_init__(self):
        formula = Formula.parse(self.template)
        object.__setattr__(self, "template", formula.text)
        object.__setattr__(self, "formula", formula)

        if self.parameters is None:
            params = tuple(formula.identifiers())
        else:
            params = tuple(self.parameters)
            missing = [p for p in params if p not in formula.identifiers()]
            if missing:
                raise AxiomError(
                    f"Axiom {self.name}: parameters {', '.join(missing)} do not occur in {self.template}"
                )
        object.__setattr__(self, "parameters", params)

    @property
    def arity(self) -> int:
        return len(self.parameters)

    def match(self, target) -> Optional[Bindings]:
        """Bindings that make `target` (an AST) an instance of this schema."""
        return match(self.formula.ast, target, self.parameters)

    def __str__(self) -> str:
        return f"{self.template} : {self.name}"


DEFAULT_AXIOMS = (
    ("K", "p->(q->p)", ("p", "q")),
    ("S", "(s->(p->q))->((s->p)->(s->q))", ("s", "p", "q")),
    ("E", "((p->f)->f)->p", ("p", "f")),
)


class AxiomSet:
    """Ordered, editable collection of axiom schemas."""

    def __init__(self, schemas: Iterable[AxiomSchema] = ()):
        self._schemas: List[AxiomSchema] = []
        for schema in schemas:
            self._append(schema)

    @classmethod
    def default(cls) -> "AxiomSet":
        return cls(AxiomSchema(name, template, params) for name, template, params in DEFAULT_AXIOMS)

    def _append(self, schema: AxiomSchema):
        if self.get(schema.name) is not None:
            raise AxiomError(f"Axiom {schema.name} already exists")
        self._schemas.append(schema)

    def add(self, name: str, template: str, parameters: Sequence[str] = None) -> AxiomSchema:
        """Declare a new schema. Raises MalformedSyntax or AxiomError."""
        name = name.strip()
        if not name:
            raise AxiomError("Axiom name must not be empty")
        schema = AxiomSchema(name, template, tuple(parameters) if parameters is not None else None)
        self._append(schema)
        logger.debug("added axiom %s", schema)
        return schema

    def remove(self, identifier_or_text: str) -> AxiomSchema:
        """Remove a schema by name, by template text, or by template structure."""
        key = identifier_or_text.strip()
        schema = self.get(key)

        if schema is None:
            text = strip_whitespace(key)
            schema = next((s for s in self._schemas if s.template == text), None)

        if schema is None:
            try:
                target = Formula.parse(key)
            except MalformedSyntax:
                target = None
            if target is not None:
                schema = next((s for s in self._schemas if equal(s.formula.ast, target.ast)), None)

        if schema is None:
            raise AxiomError(f"Axiom not found: {identifier_or_text}")

        self._schemas.remove(schema)
        logger.debug("removed axiom %s", schema)
        return schema

    def get(self, name: str) -> Optional[AxiomSchema]:
        return next((s for s in self._schemas if s.name == name), None)

    def list(self) -> List[Tuple[str, str]]:
        """(template, name) pairs in declaration order."""
        return [(s.template, s.name) for s in self._schemas]

    def search_order(self) -> List[AxiomSchema]:
        small = [s for s in self._schemas if s.arity <= SMALL_ARITY]
        large = [s for s in self._schemas if s.arity > SMALL_ARITY]
        return small + large

    def find_instance(self, target) -> Optional[Tuple[AxiomSchema, Bindings]]:
        """First schema (in search order) that `target` is an instance of."""
        for schema in self.search_order():
            bindings = schema.match(target)
            if bindings is not None:
                return schema, bindings
        return None

    def __iter__(self):
        return iter(self._schemas)

    def __len__(self):
        return len(self._schemas)

    def __contains__(self, name):
        return self.get(name) is not None
