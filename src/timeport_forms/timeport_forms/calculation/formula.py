"""Sandboxed arithmetic for ``custom`` calculations.

Grammar::

    expr    := term (("+" | "-") term)*
    term    := unary (("*" | "/" | "%") unary)*
    unary   := ("+" | "-") unary | power
    power   := atom ("^" unary)?
    atom    := NUMBER | IDENT | "{" ... "}" | IDENT "(" args ")" | "(" expr ")"

Identifiers are field ids; the only callables are the whitelisted functions
below. Nothing is looked up outside the values the caller supplies.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Set, Tuple, Union

from ..core.constants import MAX_FORMULA_DEPTH, MAX_FORMULA_LENGTH
from ..core.exceptions import FormulaError

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<number>\d+(?:\.\d*)?(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?)
    |(?P<braced>\{[^{}]+\})
    |(?P<ident>[A-Za-z_][A-Za-z0-9_]*)
    |(?P<op>[-+*/%^(),])
    """,
    re.VERBOSE,
)


def _round(x: float, ndigits: float = 0) -> float:
    return float(round(x, int(ndigits)))


FUNCTIONS: Dict[str, Tuple[Callable[..., float], int, Optional[int]]] = {
    # name: (fn, min args, max args)
    "min": (lambda *args: min(args), 1, None),
    "max": (lambda *args: max(args), 1, None),
    "abs": (abs, 1, 1),
    "round": (_round, 1, 2),
}


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    pos: int


def tokenize(formula: str) -> List[Token]:
    if formula is not None and not isinstance(formula, str):
        raise FormulaError("Formula must be text")
    if formula is None or not formula.strip():
        raise FormulaError("Formula is empty")
    if len(formula) > MAX_FORMULA_LENGTH:
        raise FormulaError("Formula is too long")

    tokens: List[Token] = []
    pos = 0
    while pos < len(formula):
        m = _TOKEN_RE.match(formula, pos)
        if not m:
            raise FormulaError(f"Unexpected character {formula[pos]!r} at {pos}")
        kind = m.lastgroup
        text = m.group(kind)
        if kind == "braced":
            tokens.append(Token("ident", text[1:-1].strip(), pos))
        elif kind != "ws":
            tokens.append(Token(kind, text, pos))
        pos = m.end()
    return tokens


@dataclass(frozen=True)
class Num:
    value: float


@dataclass(frozen=True)
class Ref:
    name: str


@dataclass(frozen=True)
class Unary:
    op: str
    operand: "Node"


@dataclass(frozen=True)
class Binary:
    op: str
    left: "Node"
    right: "Node"


@dataclass(frozen=True)
class Call:
    name: str
    args: Tuple["Node", ...]


Node = Union[Num, Ref, Unary, Binary, Call]


class _Parser:
    def __init__(self, tokens: List[Token]):
        self._tokens = tokens
        self._i = 0
        self._depth = 0

    def _peek(self) -> Optional[Token]:
        return self._tokens[self._i] if self._i < len(self._tokens) else None

    def _take(self, text: Optional[str] = None) -> Token:
        tok = self._peek()
        if tok is None:
            raise FormulaError("Unexpected end of formula")
        if text is not None and tok.text != text:
            raise FormulaError(f"Expected {text!r} at {tok.pos}, found {tok.text!r}")
        self._i += 1
        return tok

    def _at(self, *texts: str) -> bool:
        tok = self._peek()
        return tok is not None and tok.kind == "op" and tok.text in texts

    def parse(self) -> Node:
        node = self._expr()
        tok = self._peek()
        if tok is not None:
            raise FormulaError(f"Unexpected {tok.text!r} at {tok.pos}")
        return node

    def _expr(self) -> Node:
        node = self._term()
        while self._at("+", "-"):
            op = self._take().text
            node = Binary(op, node, self._term())
        return node

    def _term(self) -> Node:
        node = self._unary()
        while self._at("*", "/", "%"):
            op = self._take().text
            node = Binary(op, node, self._unary())
        return node

    def _unary(self) -> Node:
        # Every nested sub-expression passes through here.
        self._depth += 1
        if self._depth > MAX_FORMULA_DEPTH:
            raise FormulaError("Formula is nested too deeply")
        try:
            if self._at("+", "-"):
                op = self._take().text
                return Unary(op, self._unary())
            return self._power()
        finally:
            self._depth -= 1

    def _power(self) -> Node:
        node = self._atom()
        if self._at("^"):
            self._take()
            node = Binary("^", node, self._unary())
        return node

    def _atom(self) -> Node:
        tok = self._take()
        if tok.kind == "number":
            return Num(float(tok.text))
        if tok.kind == "ident":
            if self._at("(") and tok.text in FUNCTIONS:
                return self._call(tok)
            return Ref(tok.text)
        if tok.kind == "op" and tok.text == "(":
            node = self._expr()
            self._take(")")
            return node
        raise FormulaError(f"Unexpected {tok.text!r} at {tok.pos}")

    def _call(self, name_tok: Token) -> Node:
        self._take("(")
        args: List[Node] = []
        if not self._at(")"):
            args.append(self._expr())
            while self._at(","):
                self._take()
                args.append(self._expr())
        self._take(")")

        _, lo, hi = FUNCTIONS[name_tok.text]
        if len(args) < lo or (hi is not None and len(args) > hi):
            raise FormulaError(f"Wrong number of arguments for {name_tok.text}()")
        return Call(name_tok.text, tuple(args))


def parse(formula: str) -> Node:
    return _Parser(tokenize(formula)).parse()


def identifiers(node: Node) -> Set[str]:
    if isinstance(node, Ref):
        return {node.name}
    if isinstance(node, Unary):
        return identifiers(node.operand)
    if isinstance(node, Binary):
        return identifiers(node.left) | identifiers(node.right)
    if isinstance(node, Call):
        out: Set[str] = set()
        for a in node.args:
            out |= identifiers(a)
        return out
    return set()


def evaluate(node: Node, resolve: Callable[[str], Optional[float]]) -> float:
    """Evaluate ``node``; ``resolve`` maps an identifier to a number or None."""
    try:
        result = _eval(node, resolve)
    except (OverflowError, ZeroDivisionError, ValueError) as e:
        raise FormulaError(str(e)) from e
    if isinstance(result, complex) or not math.isfinite(result):
        raise FormulaError("Formula result is not a real number")
    return result


def _eval(node: Node, resolve: Callable[[str], Optional[float]]) -> float:
    if isinstance(node, Num):
        return node.value
    if isinstance(node, Ref):
        value = resolve(node.name)
        if value is None:
            raise FormulaError(f"Unresolved field {node.name!r}")
        return float(value)
    if isinstance(node, Unary):
        v = _eval(node.operand, resolve)
        return -v if node.op == "-" else v
    if isinstance(node, Call):
        fn = FUNCTIONS[node.name][0]
        return float(fn(*[_eval(a, resolve) for a in node.args]))

    left = _eval(node.left, resolve)
    right = _eval(node.right, resolve)
    if node.op == "+":
        return left + right
    if node.op == "-":
        return left - right
    if node.op == "*":
        return left * right
    if node.op in ("/", "%") and right == 0:
        raise FormulaError("Division by zero")
    if node.op == "/":
        return left / right
    if node.op == "%":
        return math.fmod(left, right)
    result = left ** right
    if isinstance(result, complex):
        raise FormulaError("Formula result is not a real number")
    return result
