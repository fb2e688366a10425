"""
Motor de cálculo de la calculadora.

Este módulo provee la clase CalculatorEngine, que hace de puente
entre la interfaz y el evaluador de expresiones: traduce los glifos
de pantalla, formatea el resultado y guarda el historial.

Contrato de interfaz:
    - evaluate(expression: str) -> str        (lanza EvaluationError)
    - calculate(expression: str) -> CalculationResult | None
"""

import logging
import math
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal, localcontext
from enum import Enum

from calculation_history import CalculationHistory
from evaluation_errors import MissingOperandError, ParseError
from formula_evaluator import FormulaEvaluator

logger = logging.getLogger(__name__)


class ErrorKind(Enum):
    PARSE = "parse"
    MISSING_OPERAND = "missing_operand"


@dataclass(frozen=True)
class CalculationResult:
    expression: str
    value: float | None = None
    text: str = ""
    error: ErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CalculatorEngine:
    """Evalúa expresiones de la interfaz y formatea su resultado."""

    FRACTION_DIGITS = 8
    ERROR_TEXT = "Error"

    # Glifos de pantalla -> operadores del evaluador
    _GLYPHS = {
        "\u00D7": "*",  # ×
        "\u00F7": "/",  # ÷
        "\u2212": "-",  # −
    }

    # Suficiente para cualquier double con 8 decimales
    _DECIMAL_PRECISION = 400

    def __init__(self, evaluator: FormulaEvaluator | None = None,
                 history: CalculationHistory | None = None):
        self._evaluator = evaluator if evaluator is not None else FormulaEvaluator()
        self._history = history if history is not None else CalculationHistory()

    @property
    def history(self) -> CalculationHistory:
        return self._history

    # ── Evaluación principal ─────────────────────────────────────

    def evaluate(self, expression: str) -> str:
        """Evalúa la expresión y devuelve el resultado como cadena.

        Raises:
            ParseError: literal numérico inválido.
            MissingOperandError: operador sin operando.
        """
        value = self._evaluator.evaluate(self.normalize(expression))
        return self.format_result(value)

    def calculate(self, expression: str) -> CalculationResult | None:
        """Evalúa sin lanzar excepciones y registra los aciertos.

        Una expresión vacía no hace nada y devuelve None.
        """
        if not expression or not expression.strip():
            return None

        try:
            value = self._evaluator.evaluate(self.normalize(expression))
        except ParseError as exc:
            logger.info("Error de sintaxis en %r: %s", expression, exc)
            return self._failure(expression, ErrorKind.PARSE)
        except MissingOperandError as exc:
            logger.info("Expresión incompleta %r: %s", expression, exc)
            return self._failure(expression, ErrorKind.MISSING_OPERAND)

        text = self.format_result(value)
        self._history.add(expression, text)
        return CalculationResult(expression, value=value, text=text)

    def _failure(self, expression: str, kind: ErrorKind) -> CalculationResult:
        return CalculationResult(expression, text=self.ERROR_TEXT, error=kind)

    @classmethod
    def normalize(cls, expression: str) -> str:
        expr = expression.strip()
        for glyph, op in cls._GLYPHS.items():
            expr = expr.replace(glyph, op)
        return expr

    # ── Formato del resultado ────────────────────────────────────

    @classmethod
    def format_result(cls, value: float) -> str:
        """Hasta FRACTION_DIGITS decimales, redondeo al par, sin ceros finales."""
        if math.isnan(value):
            return "NaN"
        if value == float("inf"):
            return "∞"
        if value == float("-inf"):
            return "-∞"

        with localcontext() as ctx:
            ctx.prec = cls._DECIMAL_PRECISION
            quantum = Decimal(1).scaleb(-cls.FRACTION_DIGITS)
            rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_EVEN)

        text = format(rounded, "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        if text == "-0":
            return "0"
        return text
