"""
Hilbert Checker - Verifier

Decides whether submitted formulas are theorems of the axiom set, one step at
a time. Each formula is checked in a fixed order and the first success wins:

    1. instance of a previously accepted formula (every identifier free)
    2. instance of an axiom schema (small schemas first)
    3. Modus Ponens: some accepted A->F whose antecedent A is itself accepted,
       or is an instance of an axiom schema

Accepted formulas are appended to the proof store together with their
justification. Invalid and underivable formulas are reported but never
stored, so later formulas cannot cite them.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from parser import Formula, Implication, MalformedSyntax, render, strip_whitespace
from matcher import Bindings, equal, match
from axioms import AxiomSchema, AxiomSet
from semantics import check_tautology

logger = logging.getLogger(__name__)

ACCEPTED = "accepted"
INVALID = "invalid"
UNPROVABLE = "unprovable"

PRIOR_THEOREM = "prior-theorem"
AXIOM = "axiom"
MODUS_PONENS = "modus-ponens"


class ProofError(Exception):
    """Base exception for verifier errors."""
    pass


class IOUnavailable(ProofError):
    """Import or export target could not be opened."""
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not open file: {path} ({reason})")


def _env_flag(value: str) -> bool:
    return value.strip().lower() not in ("0", "false", "no", "off", "")


@dataclass
class VerifierConfig:
    """Settings for a verifier session."""
    semantic_check: bool = True
    base_dir: str = field(default_factory=os.getcwd)
    encoding: str = "utf-8"

    @classmethod
    def from_env(cls, environ=None) -> "VerifierConfig":
        """Build a config from HILBERT_* environment variables."""
        environ = os.environ if environ is None else environ
        config = cls()
        if "HILBERT_SEMANTIC_CHECK" in environ:
            config.semantic_check = _env_flag(environ["HILBERT_SEMANTIC_CHECK"])
        if environ.get("HILBERT_BASE_DIR"):
            config.base_dir = environ["HILBERT_BASE_DIR"]
        if environ.get("HILBERT_ENCODING"):
            config.encoding = environ["HILBERT_ENCODING"]
        return config

    def resolve(self, path: str) -> str:
        if os.path.isabs(path):
            return path
        return os.path.join(self.base_dir, path)


@dataclass(frozen=True)
class Justification:
    """Why a formula was accepted.

    rule: PRIOR_THEOREM, AXIOM or MODUS_PONENS
    source: the accepted formula or axiom template the formula instantiates,
        or the implication used for Modus Ponens
    axiom: name of the axiom involved, if any
    bindings: schema variable -> bound subformula
    premises: formulas cited by Modus Ponens (implication, antecedent)
    """
    rule: str
    source: str
    axiom: Optional[str] = None
    bindings: Dict[str, str] = field(default_factory=dict)
    premises: Tuple[str, ...] = ()

    def describe(self) -> str:
        subst = ", ".join(f"{k} -> {v}" for k, v in self.bindings.items()) or "(none)"
        if self.rule == PRIOR_THEOREM:
            via = f" (axiom {self.axiom})" if self.axiom else ""
            return f"is derivable from formula {self.source}{via} with substitution: {subst}"
        if self.rule == AXIOM:
            return f"is derivable from axiom {self.axiom} with substitution: {subst}"
        implication, antecedent = self.premises
        if self.axiom:
            return (f"is derivable from formula {implication} and axiom {self.axiom} "
                    f"by modus ponens with substitution: {subst}")
        return f"is derivable from formulas {antecedent} and {implication} by modus ponens"

    def to_dict(self) -> dict:
        return {
            "rule": self.rule,
            "source": self.source,
            "axiom": self.axiom,
            "bindings": dict(self.bindings),
            "premises": list(self.premises),
        }


def _bindings_text(bindings: Bindings) -> Dict[str, str]:
    return {name: render(node) for name, node in bindings.items()}


@dataclass
class Verdict:
    """Outcome of submitting one formula."""
    status: str
    formula: str
    justification: Optional[Justification] = None
    error: Optional[str] = None
    semantics: Optional[dict] = None

    @property
    def ok(self) -> bool:
        return self.status == ACCEPTED

    def describe(self) -> str:
        if self.status == ACCEPTED:
            return f"Formula {self.formula} {self.justification.describe()}"
        if self.status == INVALID:
            return f"Formula {self.formula} is invalid: {self.error}"

        line = f"Formula {self.formula} is not derivable."
        if self.semantics:
            if self.semantics["status"] == "valid":
                line += " It is a tautology, so a longer derivation exists."
            elif self.semantics["status"] == "invalid":
                line += f" It is not a tautology. {self.semantics['message']}"
        return line

    def to_dict(self) -> dict:
        result = {"ok": self.ok, "status": self.status, "formula": self.formula,
                  "message": self.describe()}
        if self.justification is not None:
            result["justification"] = self.justification.to_dict()
        if self.error is not None:
            result["error"] = self.error
        if self.semantics is not None:
            result["semantics"] = self.semantics
        return result


class ProofStore:
    """Append-only list of accepted formulas and their justifications."""

    def __init__(self):
        self._formulas: List[Formula] = []
        self._justifications: List[Justification] = []

    def append(self, formula: Formula, justification: Justification):
        self._formulas.append(formula)
        self._justifications.append(justification)

    @property
    def formulas(self) -> List[Formula]:
        return list(self._formulas)

    @property
    def justifications(self) -> List[Justification]:
        return list(self._justifications)

    def entries(self) -> List[Tuple[Formula, Justification]]:
        return list(zip(self._formulas, self._justifications))

    def justification_of(self, index: int) -> Justification:
        return self._justifications[index]

    def __iter__(self):
        return iter(list(self._formulas))

    def __len__(self):
        return len(self._formulas)


class Verifier:
    """Checks formulas against an axiom set and a growing proof store."""

    def __init__(self, axioms: AxiomSet = None, config: VerifierConfig = None):
        self.axioms = axioms if axioms is not None else AxiomSet.default()
        self.config = config or VerifierConfig()
        self.store = ProofStore()
        self.verdicts: List[Verdict] = []
        self._log: List[str] = []

    # -- submission ---------------------------------------------------------

    def submit(self, text: str) -> Verdict:
        """Validate, parse and check one formula."""
        source = strip_whitespace(text)
        try:
            formula = Formula.parse(text)
        except MalformedSyntax as e:
            logger.debug("rejected %r: %s", text, e)
            return self._record(Verdict(INVALID, source, error=str(e)))

        justification = (self.check_previous_formulas(formula)
                         or self.check_axioms(formula)
                         or self.check_modus_ponens(formula))

        if justification is None:
            semantics = check_tautology(formula.ast) if self.config.semantic_check else None
            logger.debug("%s is not derivable", formula)
            return self._record(Verdict(UNPROVABLE, formula.text, semantics=semantics))

        self.store.append(formula, justification)
        logger.debug("accepted %s by %s", formula, justification.rule)
        return self._record(Verdict(ACCEPTED, formula.text, justification=justification))

    def _record(self, verdict: Verdict) -> Verdict:
        self.verdicts.append(verdict)
        self._log.append(verdict.describe())
        return verdict

    def check_previous_formulas(self, formula: Formula) -> Optional[Justification]:
        for index, previous in enumerate(self.store):
            bindings = match(previous.ast, formula.ast, previous.identifiers())
            if bindings is not None:
                stored = self.store.justification_of(index)
                return Justification(
                    PRIOR_THEOREM, previous.text,
                    axiom=stored.axiom if stored.rule in (AXIOM, PRIOR_THEOREM) else None,
                    bindings=_bindings_text(bindings),
                )
        return None

    def check_axioms(self, formula: Formula) -> Optional[Justification]:
        found = self.axioms.find_instance(formula.ast)
        if found is None:
            return None
        schema, bindings = found
        return Justification(AXIOM, schema.template, axiom=schema.name,
                             bindings=_bindings_text(bindings))

    def check_modus_ponens(self, formula: Formula) -> Optional[Justification]:
        accepted = self.store.formulas
        for implication in accepted:
            node = implication.ast
            if not isinstance(node, Implication) or not equal(node.right, formula.ast):
                continue

            for antecedent in accepted:
                if equal(antecedent.ast, node.left):
                    return Justification(MODUS_PONENS, implication.text,
                                         premises=(implication.text, antecedent.text))

            found = self.axioms.find_instance(node.left)
            if found is not None:
                schema, bindings = found
                return Justification(MODUS_PONENS, implication.text, axiom=schema.name,
                                     bindings=_bindings_text(bindings),
                                     premises=(implication.text, render(node.left)))
        return None

    # -- axioms -------------------------------------------------------------

    def add_axiom(self, name: str, template: str, parameters=None) -> AxiomSchema:
        schema = self.axioms.add(name, template, parameters)
        if self.config.semantic_check:
            result = check_tautology(schema.formula.ast)
            if not result["ok"]:
                logger.warning("axiom %s (%s) is not a tautology; the calculus is unsound. %s",
                               schema.name, schema.template, result.get("message", ""))
        return schema

    def remove_axiom(self, identifier_or_text: str) -> AxiomSchema:
        return self.axioms.remove(identifier_or_text)

    def list_axioms(self) -> List[Tuple[str, str]]:
        return self.axioms.list()

    # -- import / export ----------------------------------------------------

    def import_lines(self, lines: Iterable[str]) -> List[Verdict]:
        """Submit each line in order. Blank lines and # comments are skipped."""
        verdicts = []
        for line in lines:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            verdicts.append(self.submit(line))
        return verdicts

    def import_file(self, path: str) -> List[Verdict]:
        full_path = self.config.resolve(path)
        try:
            with open(full_path, "r", encoding=self.config.encoding) as f:
                lines = f.read().splitlines()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("import failed for %s: %s", full_path, e)
            self._log.append(f"Could not open file: {path}")
            raise IOUnavailable(path, str(e)) from e
        return self.import_lines(lines)

    def export(self) -> str:
        """Report log: one line per verdict, in submission order."""
        return "".join(line + "\n" for line in self._log)

    def export_file(self, path: str) -> str:
        full_path = self.config.resolve(path)
        try:
            with open(full_path, "w", encoding=self.config.encoding) as f:
                f.write(self.export())
        except OSError as e:
            logger.warning("export failed for %s: %s", full_path, e)
            raise IOUnavailable(path, str(e)) from e
        return full_path


def verify(lines: Iterable[str], axioms: AxiomSet = None, config: VerifierConfig = None) -> List[Verdict]:
    """Check a sequence of formulas in a fresh session."""
    return Verifier(axioms, config).import_lines(lines)
