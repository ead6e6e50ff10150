"""
Hilbert Checker - Semantic Check

Decides classical validity of implicational formulas with Z3, reading the
identifier f as falsum. Used to annotate formulas the verifier could not
derive and to warn about user axioms that are not tautologies.
"""

from z3 import Bool, BoolVal, Implies, Not, Solver, is_true, sat, unsat

from parser import FALSUM, Implication, Leaf, Node, render


class SemanticError(Exception):
    """Error while translating a formula for the solver."""
    pass


def formula_to_z3(node, env):
    """Convert a formula AST to a Z3 Boolean expression.

    Identifiers become Bool constants, created in `env` on first use. The
    falsum identifier is the constant False.

    Args:
        node: Leaf or Implication
        env: Variable environment mapping names to Z3 expressions
    """
    done = []
    stack = [(node, False)]
    while stack:
        current, expanded = stack.pop()
        if isinstance(current, Leaf):
            if current.name == FALSUM:
                done.append(BoolVal(False))
                continue
            if current.name not in env:
                env[current.name] = Bool(current.name)
            done.append(env[current.name])
        elif not isinstance(current, Implication):
            raise SemanticError(f"Unknown node type: {type(current).__name__}")
        elif not expanded:
            stack.append((current, True))
            stack.append((current.right, False))
            stack.append((current.left, False))
        else:
            rhs = done.pop()
            lhs = done.pop()
            done.append(Implies(lhs, rhs))
    return done[0]


def format_countermodel(model: dict) -> str:
    """Format an assignment as a human-readable countermodel."""
    if not model:
        return "Countermodel: (no variables)"
    assignments = ", ".join(f"{name} = {value}" for name, value in sorted(model.items()))
    return f"Countermodel: {assignments}"


def check_tautology(node: Node) -> dict:
    """Check whether the formula holds under every assignment.

    Returns a dict with:
    - ok: True if the formula is a tautology
    - status: "valid", "invalid" or "unknown"
    - model: falsifying assignment (if status is "invalid")
    - message: countermodel text (if status is "invalid")
    """
    env = {}
    s = Solver()
    s.add(Not(formula_to_z3(node, env)))
    result = s.check()

    if result == unsat:
        return {"ok": True, "status": "valid"}

    if result == sat:
        m = s.model()
        model_out = {
            name: is_true(m.eval(var, model_completion=True))
            for name, var in env.items()
        }
        return {
            "ok": False,
            "status": "invalid",
            "model": model_out,
            "message": format_countermodel(model_out),
        }

    return {
        "ok": False,
        "status": "unknown",
        "message": f"Z3 could not decide {render(node)}",
    }


def is_tautology(node: Node) -> bool:
    return check_tautology(node)["ok"]
