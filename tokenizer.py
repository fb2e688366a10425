"""Análisis léxico de expresiones de la calculadora.

Convierte la cadena escrita por el usuario en una lista de tokens
etiquetados: números, operadores y paréntesis. El analizador nunca
evalúa; solo agrupa dígitos y decide si un '-' es unario o binario.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from evaluation_errors import ParseError

logger = logging.getLogger(__name__)


SQRT_SYMBOL = "\u221A"  # √
_NUMBER_CHARS = frozenset("0123456789.")


class TokenType(Enum):
    NUMBER = "number"
    OPERATOR = "operator"
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"


class OperatorKind(Enum):
    """Operadores soportados: (símbolo, precedencia, aridad)."""

    ADD = ("+", 1, 2)
    SUB = ("-", 1, 2)
    MUL = ("*", 2, 2)
    DIV = ("/", 2, 2)
    PERCENT = ("%", 2, 2)
    POW = ("^", 3, 2)
    SQRT = (SQRT_SYMBOL, 3, 1)

    def __init__(self, symbol: str, precedence: int, arity: int):
        self.symbol = symbol
        self.precedence = precedence
        self.arity = arity


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: float | None = None
    operator: OperatorKind | None = None
    arity: int = 0

    @classmethod
    def number(cls, value: float) -> "Token":
        return cls(TokenType.NUMBER, value=value)

    @classmethod
    def op(cls, kind: OperatorKind, arity: int | None = None) -> "Token":
        return cls(
            TokenType.OPERATOR,
            operator=kind,
            arity=kind.arity if arity is None else arity,
        )

    @property
    def is_operator(self) -> bool:
        return self.type is TokenType.OPERATOR

    def __str__(self):
        if self.type is TokenType.NUMBER:
            return repr(self.value)
        if self.type is TokenType.OPERATOR:
            return self.operator.symbol
        return self.type.value


LEFT_PAREN = Token(TokenType.LEFT_PAREN)
RIGHT_PAREN = Token(TokenType.RIGHT_PAREN)

_SINGLE_CHAR_TOKENS = {
    "+": Token.op(OperatorKind.ADD),
    "*": Token.op(OperatorKind.MUL),
    "/": Token.op(OperatorKind.DIV),
    "^": Token.op(OperatorKind.POW),
    "%": Token.op(OperatorKind.PERCENT),
    SQRT_SYMBOL: Token.op(OperatorKind.SQRT),
    "(": LEFT_PAREN,
    ")": RIGHT_PAREN,
}


def tokenize(source: str) -> list[Token]:
    """Divide ``source`` en tokens, de izquierda a derecha.

    Los caracteres no reconocidos se descartan (solo cortan el número
    en curso). Un '-' en posición unaria se acumula en el número que
    sigue en lugar de emitirse como operador.

    Raises:
        ParseError: un literal como '.' o '1.2.3' no es un número.
    """
    tokens: list[Token] = []
    buffer: list[str] = []

    def flush():
        if not buffer:
            return
        literal = "".join(buffer)
        buffer.clear()
        tokens.append(_number_token(literal, source))

    for ch in source:
        if ch in _NUMBER_CHARS:
            buffer.append(ch)
            continue

        flush()

        if ch == "-":
            if _minus_is_unary(tokens):
                buffer.append(ch)
            else:
                tokens.append(Token.op(OperatorKind.SUB))
        elif ch in _SINGLE_CHAR_TOKENS:
            tokens.append(_SINGLE_CHAR_TOKENS[ch])
        elif not ch.isspace():
            logger.debug("Carácter ignorado: %r", ch)

    flush()
    logger.debug("Tokens de %r: %s", source, " ".join(map(str, tokens)))
    return tokens


def _minus_is_unary(tokens: list[Token]) -> bool:
    if not tokens:
        return True
    last = tokens[-1]
    return last.is_operator or last.type is TokenType.LEFT_PAREN


def _number_token(literal: str, source: str) -> Token:
    # Un signo suelto ("-(3)", "- 5") se comporta como resta con 0 a la izquierda.
    if literal == "-":
        return Token.op(OperatorKind.SUB)
    try:
        return Token.number(float(literal))
    except ValueError as exc:
        raise ParseError(literal, source) from exc
