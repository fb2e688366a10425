"""Errores del núcleo de evaluación.

Todos derivan de ValueError, que es lo que el motor de la calculadora
promete lanzar ante una expresión inválida.
"""


class EvaluationError(ValueError):
    def __init__(self, message, expression=None):
        super().__init__(message)
        self.message = message
        self.expression = expression


class ParseError(EvaluationError):
    """Un literal numérico no se puede interpretar como número."""

    def __init__(self, literal, expression=None):
        super().__init__(f"Número inválido: {literal!r}", expression)
        self.literal = literal


class MissingOperandError(EvaluationError):
    """Un operador se quedó sin el operando que necesita a su derecha."""

    def __init__(self, symbol, expression=None):
        super().__init__(f"Falta operando para '{symbol}'", expression)
        self.symbol = symbol
