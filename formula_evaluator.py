"""Evaluación de expresiones para la calculadora.

La cadena pasa por el analizador léxico, se reordena a notación
postfija (shunting-yard) y se reduce con una pila de valores.

La evaluación es permisiva con la estructura: un ')' sin pareja se
ignora y a un operador binario sin operando izquierdo se le da 0.0.
Los casos aritméticos degenerados (división por cero, raíz de un
negativo, desbordamiento) no son errores: devuelven inf o NaN.
"""

import logging

import numpy as np

from evaluation_errors import MissingOperandError
from tokenizer import OperatorKind, Token, TokenType, tokenize

logger = logging.getLogger(__name__)


class NumpyArithmeticProvider:
    """Aritmética IEEE-754 de doble precisión sobre numpy.float64.

    Nunca lanza: la división por cero da inf y la raíz o potencia
    fraccionaria de un negativo da NaN.
    """

    _BINARY = {
        OperatorKind.ADD: np.add,
        OperatorKind.SUB: np.subtract,
        OperatorKind.MUL: np.multiply,
        OperatorKind.DIV: np.divide,
        OperatorKind.POW: np.power,
    }

    def apply_binary(self, kind: OperatorKind, a, b) -> np.float64:
        a, b = np.float64(a), np.float64(b)
        with np.errstate(all="ignore"):
            if kind is OperatorKind.PERCENT:
                # Porcentaje de: 50 % 10 -> 50 * 0.10
                return a * (b / 100.0)
            return self._BINARY[kind](a, b)

    def apply_unary(self, kind: OperatorKind, a) -> np.float64:
        a = np.float64(a)
        with np.errstate(all="ignore"):
            if kind is OperatorKind.SQRT:
                return np.sqrt(a)
            if kind is OperatorKind.PERCENT:
                return a / 100.0
        raise ValueError(f"Operador unario desconocido: {kind.symbol}")


class FormulaEvaluator:
    """Transforma expresiones a postfija y evalúa su valor numérico.

    No guarda estado entre llamadas; una misma instancia puede usarse
    desde varios hilos.
    """

    def __init__(self, provider: NumpyArithmeticProvider | None = None):
        self._provider = provider if provider is not None else NumpyArithmeticProvider()

    def evaluate(self, expression: str) -> float:
        """Evalúa ``expression`` y devuelve un float (posiblemente inf o NaN).

        Raises:
            ParseError: un literal numérico inválido.
            MissingOperandError: un operador sin operando a su derecha.
        """
        return self.evaluate_tokens(tokenize(expression), expression)

    def evaluate_tokens(self, tokens: list[Token], expression: str | None = None) -> float:
        postfix = self.to_postfix(tokens)
        logger.debug("Postfija: %s", " ".join(map(str, postfix)))
        return self.evaluate_postfix(postfix, expression)

    @staticmethod
    def to_postfix(tokens: list[Token]) -> list[Token]:
        """Reordena los tokens infijos a notación postfija.

        Un '%' sin operando detrás (final, operador binario o ')') es
        el porcentaje postfijo: se emite ya como operador unario.
        Los '(' que quedan sin cerrar se descartan.
        """
        output: list[Token] = []
        stack: list[Token] = []

        for i, tok in enumerate(tokens):
            if tok.type is TokenType.NUMBER:
                output.append(tok)
            elif tok.type is TokenType.LEFT_PAREN or tok.operator is OperatorKind.SQRT:
                stack.append(tok)
            elif tok.type is TokenType.RIGHT_PAREN:
                while stack and stack[-1].type is not TokenType.LEFT_PAREN:
                    output.append(stack.pop())
                if stack:
                    stack.pop()
                else:
                    logger.warning("')' sin '(' correspondiente, se ignora")
            elif tok.operator is OperatorKind.PERCENT and not _operand_follows(tokens, i):
                output.append(Token.op(OperatorKind.PERCENT, arity=1))
            else:
                while (
                    stack
                    and stack[-1].is_operator
                    and stack[-1].operator.precedence >= tok.operator.precedence
                ):
                    output.append(stack.pop())
                stack.append(tok)

        while stack:
            tok = stack.pop()
            if tok.is_operator:
                output.append(tok)
            else:
                logger.warning("'(' sin cerrar, se ignora")

        return output

    def evaluate_postfix(self, postfix: list[Token], expression: str | None = None) -> float:
        values: list[np.float64] = []

        for tok in postfix:
            if tok.type is TokenType.NUMBER:
                values.append(np.float64(tok.value))
                continue

            if not values:
                raise MissingOperandError(tok.operator.symbol, expression)

            if tok.arity == 1:
                values.append(self._provider.apply_unary(tok.operator, values.pop()))
                continue

            b = values.pop()
            if values:
                a = values.pop()
            else:
                logger.warning("Falta operando izquierdo para '%s', se usa 0", tok.operator.symbol)
                a = np.float64(0.0)
            values.append(self._provider.apply_binary(tok.operator, a, b))

        if not values:
            return 0.0
        if len(values) > 1:
            logger.debug("Quedan %d valores en la pila, se toma el último", len(values))
        return float(values[-1])


_default_evaluator = FormulaEvaluator()


def evaluate(expression: str) -> float:
    """Punto de entrada del núcleo: cadena -> float."""
    return _default_evaluator.evaluate(expression)


def _operand_follows(tokens: list[Token], index: int) -> bool:
    if index + 1 >= len(tokens):
        return False
    nxt = tokens[index + 1]
    return (
        nxt.type in (TokenType.NUMBER, TokenType.LEFT_PAREN)
        or nxt.operator is OperatorKind.SQRT
    )
