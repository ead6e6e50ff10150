"""
Hilbert Checker - Structural Matcher

Tree equality, one-way pattern matching and substitution over formula ASTs.

match(pattern, target, frees) walks both trees in lock-step. Identifiers of
the pattern listed in `frees` are schema variables: the first occurrence binds
the whole target subtree at that position, later occurrences must meet a
structurally equal subtree. All other pattern leaves are literals. The target
is always concrete, so matching is not symmetric.
"""

from typing import Dict, Iterable, Optional

from parser import Leaf, Implication, Node

Bindings = Dict[str, Node]


def equal(a: Node, b: Node) -> bool:
    """Structural equality of two trees."""
    stack = [(a, b)]
    while stack:
        x, y = stack.pop()
        if isinstance(x, Leaf) and isinstance(y, Leaf):
            if x.name != y.name:
                return False
        elif isinstance(x, Implication) and isinstance(y, Implication):
            stack.append((x.right, y.right))
            stack.append((x.left, y.left))
        else:
            return False
    return True


def match(pattern: Node, target: Node, frees: Iterable[str] = ()) -> Optional[Bindings]:
    """Match `target` against `pattern`.

    Returns the bindings of the free identifiers that occur in the pattern,
    or None when the target is not an instance of the pattern. With no free
    identifiers this reduces to equal() and returns {} on success.
    """
    frees = frozenset(frees)
    bindings: Bindings = {}
    if _match(pattern, target, frees, bindings):
        return bindings
    return None


def _match(pattern: Node, target: Node, frees: frozenset, bindings: Bindings) -> bool:
    # Left subtrees are visited first so bindings keep first-occurrence order.
    stack = [(pattern, target)]
    while stack:
        p, t = stack.pop()
        if isinstance(p, Leaf):
            if p.name in frees:
                bound = bindings.get(p.name)
                if bound is None:
                    bindings[p.name] = t
                elif not equal(bound, t):
                    return False
            elif not (isinstance(t, Leaf) and t.name == p.name):
                return False
        elif isinstance(t, Implication):
            stack.append((p.right, t.right))
            stack.append((p.left, t.left))
        else:
            return False
    return True


def substitute(node: Node, bindings: Bindings) -> Node:
    """Return a new tree with every bound identifier replaced."""
    done = []
    stack = [(node, False)]
    while stack:
        current, expanded = stack.pop()
        if isinstance(current, Leaf):
            done.append(bindings.get(current.name, current))
        elif not expanded:
            stack.append((current, True))
            stack.append((current.right, False))
            stack.append((current.left, False))
        else:
            right = done.pop()
            left = done.pop()
            if left is current.left and right is current.right:
                done.append(current)
            else:
                done.append(Implication(left, right))
    return done[0]


def is_instance(pattern: Node, target: Node, frees: Iterable[str]) -> bool:
    return match(pattern, target, frees) is not None

