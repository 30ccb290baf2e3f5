"""
Expression evaluator.

Pipeline
--------
1) Tokenizer: splits the input text into numbers, names, operators and brackets.
2) Parser: recursive descent, precedence aware, builds an immutable tree of
   Constant / Variable / UnaryOp / BinaryOp / FunctionCall nodes.
3) Function: wraps the tree; evaluates at a single x (raising EvaluationError
   when any step of the evaluation is not finite) or over a numpy array
   (values + validity mask).

Every node returns ``(values, valid)``. A point stays invalid once any
intermediate result there was NaN or infinite, so 1/(1/x) fails at x=0 even
though the final division would give 0.

Grammar::

    expression := term (("+" | "-") term)*
    term       := unary (("*" | "/") unary)*
    unary      := ("+" | "-") unary | power
    power      := primary (("^" | "**") unary)?
    primary    := NUMBER [implicit-product] | "x" | CONSTANT
                | NAME "(" expression ("," expression)* ")" | "(" expression ")"

The text is never handed to ``eval``.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from scipy import signal

from .errors import EvaluationError, ParseError

logger = logging.getLogger(__name__)

VARIABLE = "x"

CONSTANTS = {
    "pi": math.pi,
    "π": math.pi,
    "e": math.e,
}

# name -> (callable, min args, max args)
FUNCTIONS = {
    "sin": (np.sin, 1, 1),
    "cos": (np.cos, 1, 1),
    "tan": (np.tan, 1, 1),
    "exp": (np.exp, 1, 1),
    "sqrt": (np.sqrt, 1, 1),
    "log": (np.log, 1, 1),
    "abs": (np.abs, 1, 1),
    "sinh": (np.sinh, 1, 1),
    "cosh": (np.cosh, 1, 1),
    "tanh": (np.tanh, 1, 1),
    "sign": (np.sign, 1, 1),
    # waveforms, period 2*pi
    "square": (signal.square, 1, 2),
    "sawtooth": (signal.sawtooth, 1, 2),
}

BINARY_OPS = {
    "+": np.add,
    "-": np.subtract,
    "*": np.multiply,
    "/": np.divide,
    "^": np.power,
}


# -----------------------------
# Tokenizer
# -----------------------------

@dataclass(frozen=True)
class Token:
    kind: str  # NUMBER, NAME, OP, LPAREN, RPAREN, COMMA, END
    text: str
    position: int


_TOKEN_RE = re.compile(
    r"""
    (?P<space>\s+)
  | (?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
  | (?P<name>[A-Za-z_][A-Za-z_0-9]*|π)
  | (?P<op>\*\*|[-+*/^])
  | (?P<lparen>\()
  | (?P<rparen>\))
  | (?P<comma>,)
    """,
    re.VERBOSE,
)


def tokenize(text):
    """Return the list of tokens for ``text``, terminated by an END token."""
    tokens = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise ParseError(f"unexpected character {text[pos]!r}", text, pos)
        kind = match.lastgroup
        if kind != "space":
            value = match.group()
            if kind == "op" and value == "**":
                value = "^"
            tokens.append(Token(kind.upper(), value, pos))
        pos = match.end()
    tokens.append(Token("END", "", len(text)))
    return tokens


# -----------------------------
# Tree nodes
# -----------------------------

def _checked(values, *valid):
    # AND the operands' masks with the finiteness of this step
    mask = np.isfinite(values)
    for v in valid:
        mask = np.logical_and(mask, v)
    return values, mask


@dataclass(frozen=True)
class Constant:
    value: float

    def evaluate(self, x):
        return _checked(self.value)

    def __str__(self):
        return repr(self.value)


@dataclass(frozen=True)
class Variable:
    name: str = VARIABLE

    def evaluate(self, x):
        return _checked(x)

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class UnaryOp:
    op: str
    operand: object

    def evaluate(self, x):
        value, valid = self.operand.evaluate(x)
        if self.op == "-":
            value = np.negative(value)
        return value, valid

    def __str__(self):
        return f"({self.op}{self.operand})"


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: object
    right: object

    def evaluate(self, x):
        left, left_valid = self.left.evaluate(x)
        right, right_valid = self.right.evaluate(x)
        return _checked(BINARY_OPS[self.op](left, right), left_valid, right_valid)

    def __str__(self):
        return f"({self.left} {self.op} {self.right})"


@dataclass(frozen=True)
class FunctionCall:
    name: str
    args: Tuple[object, ...]

    def evaluate(self, x):
        func = FUNCTIONS[self.name][0]
        evaluated = [arg.evaluate(x) for arg in self.args]
        values = [value for value, _ in evaluated]
        return _checked(func(*values), *(valid for _, valid in evaluated))

    def __str__(self):
        return f"{self.name}({', '.join(str(arg) for arg in self.args)})"


# -----------------------------
# Parser
# -----------------------------

class Parser:
    """Recursive-descent parser over the token list of a single expression."""

    def __init__(self, text):
        self.text = text
        self.tokens = tokenize(text)
        self.index = 0

    @property
    def current(self):
        return self.tokens[self.index]

    def advance(self):
        token = self.current
        self.index += 1
        return token

    def expect(self, kind, what):
        if self.current.kind != kind:
            self.fail(f"expected {what}")
        return self.advance()

    def fail(self, message):
        token = self.current
        found = "end of input" if token.kind == "END" else repr(token.text)
        raise ParseError(f"{message}, found {found}", self.text, token.position)

    def parse(self):
        if self.current.kind == "END":
            raise ParseError("empty expression", self.text, 0)
        tree = self.expression()
        if self.current.kind != "END":
            self.fail("unexpected trailing input")
        return tree

    def expression(self):
        node = self.term()
        while self.current.kind == "OP" and self.current.text in "+-":
            op = self.advance().text
            node = BinaryOp(op, node, self.term())
        return node

    def term(self):
        node = self.unary()
        while self.current.kind == "OP" and self.current.text in "*/":
            op = self.advance().text
            node = BinaryOp(op, node, self.unary())
        return node

    def unary(self):
        if self.current.kind == "OP" and self.current.text in "+-":
            op = self.advance().text
            return UnaryOp(op, self.unary())
        return self.power()

    def power(self):
        base = self.primary()
        if self.current.kind == "OP" and self.current.text == "^":
            self.advance()
            # right-associative: 2^3^2 == 2^(3^2)
            return BinaryOp("^", base, self.unary())
        return base

    def primary(self):
        token = self.current
        if token.kind == "NUMBER":
            self.advance()
            node = Constant(float(token.text))
            if self.current.kind in ("NAME", "LPAREN"):
                # implicit product: 2x, 3sin(x), 2(x+1)
                return BinaryOp("*", node, self.power())
            return node
        if token.kind == "NAME":
            self.advance()
            return self.name(token)
        if token.kind == "LPAREN":
            self.advance()
            node = self.expression()
            self.expect("RPAREN", "')'")
            return node
        self.fail("expected a number, 'x', a function or '('")

    def name(self, token):
        if token.text == VARIABLE:
            return Variable()
        if token.text in CONSTANTS:
            return Constant(CONSTANTS[token.text])
        if token.text not in FUNCTIONS:
            raise ParseError(f"unknown name {token.text!r}", self.text, token.position)
        self.expect("LPAREN", f"'(' after {token.text}")
        args = [self.expression()]
        while self.current.kind == "COMMA":
            self.advance()
            args.append(self.expression())
        self.expect("RPAREN", "')'")
        _, min_args, max_args = FUNCTIONS[token.text]
        if not min_args <= len(args) <= max_args:
            expected = str(min_args) if min_args == max_args else f"{min_args} to {max_args}"
            raise ParseError(
                f"{token.text} takes {expected} argument(s), got {len(args)}",
                self.text,
                token.position,
            )
        return FunctionCall(token.text, tuple(args))


# -----------------------------
# Function
# -----------------------------

@dataclass(frozen=True)
class Function:
    """An evaluable function of x built from an expression tree."""

    tree: object
    text: str = ""

    def __call__(self, x):
        values, valid = self.evaluate(np.array([x], dtype=float))
        if not valid[0]:
            raise EvaluationError(x, self.text)
        return float(values[0])

    def evaluate(self, xs):
        """Evaluate over an array of points.

        Returns ``(values, valid)``; ``valid`` is False wherever some step was
        not finite (domain violation, division by zero, overflow).
        """
        xs = np.asarray(xs, dtype=float)
        with np.errstate(all="ignore"):
            raw, valid = self.tree.evaluate(xs)
        values = np.array(np.broadcast_to(raw, xs.shape), dtype=float)
        valid = np.array(np.broadcast_to(valid, xs.shape), dtype=bool)
        return values, valid & np.isfinite(values)

    def __str__(self):
        return self.text or str(self.tree)


def parse(text):
    """Parse ``text`` into a Function, raising ParseError if it is malformed."""
    if not isinstance(text, str):
        raise ParseError(f"expression must be text, got {type(text).__name__}")
    tree = Parser(text).parse()
    logger.debug("parsed %r as %s", text, tree)
    return Function(tree, text.strip())
