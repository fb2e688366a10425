import math
import os
import sys
from concurrent.futures import ThreadPoolExecutor

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from evaluation_errors import EvaluationError, MissingOperandError, ParseError
from formula_evaluator import FormulaEvaluator, NumpyArithmeticProvider, evaluate
from tokenizer import OperatorKind, tokenize


@pytest.mark.parametrize(
    "expr, expected",
    [
        ("1+2", 3.0),
        ("7-10", -3.0),
        ("6*7", 42.0),
        ("1/4", 0.25),
        ("2^10", 1024.0),
        ("0.1+0.2", 0.1 + 0.2),
        ("2^0.5", pytest.approx(2 ** 0.5)),
    ],
)
def test_simple_binary_expressions(expr, expected):
    assert evaluate(expr) == expected


def test_precedence():
    assert evaluate("2+3*4") == 14
    assert evaluate("(2+3)*4") == 20
    assert evaluate("2*3^2") == 18


def test_left_associativity():
    assert evaluate("8-3-2") == 3
    assert evaluate("16/4/2") == 2
    assert evaluate("2^3^2") == 64


def test_sqrt_binds_tighter_than_binary_operators():
    assert evaluate("√9+1") == 4
    assert evaluate("2*√16") == 8
    assert evaluate("√(10+6)") == 4


def test_percent_binary_is_percentage_of():
    assert evaluate("50%10") == 5
    assert evaluate("200%(5+5)") == pytest.approx(20)


def test_trailing_percent_divides_by_hundred():
    assert evaluate("50*10%") == pytest.approx(5)
    assert evaluate("10%") == pytest.approx(0.1)
    assert evaluate("(2+3)%*4") == pytest.approx(0.2)


def test_percent_before_binary_operator_is_postfix():
    assert evaluate("50%+10") == pytest.approx(10.5)
    assert evaluate("(50%)*4") == pytest.approx(2)
    postfix = FormulaEvaluator.to_postfix(tokenize("50%+10"))
    assert [str(t) for t in postfix] == ["50.0", "%", "10.0", "+"]
    assert postfix[1].arity == 1


def test_unary_minus():
    assert evaluate("-5+3") == -2
    assert evaluate("3*-2") == -6
    assert evaluate("(-4)^2") == 16
    assert evaluate("5--3") == 8


def test_lone_minus_before_parenthesis_negates():
    assert evaluate("-(2+3)") == -5


def test_division_by_zero_is_infinite():
    assert evaluate("5/0") == math.inf
    assert evaluate("-5/0") == -math.inf
    assert math.isnan(evaluate("0/0"))


def test_negative_sqrt_is_nan():
    assert math.isnan(evaluate("√-4"))
    assert math.isnan(evaluate("√(0-4)"))


def test_overflow_is_infinite():
    assert evaluate("10^400") == math.inf


def test_fractional_power_of_negative_is_nan():
    assert math.isnan(evaluate("(-8)^0.5"))


def test_empty_expression_is_zero():
    assert evaluate("") == 0.0
    assert evaluate("  ") == 0.0
    assert evaluate("()") == 0.0


def test_unmatched_parentheses_are_ignored():
    assert evaluate("2+3)*4") == 20
    assert evaluate("(2+3") == 5
    assert evaluate("((1+1)") == 2


def test_missing_left_operand_defaults_to_zero():
    assert evaluate("*5") == 0
    assert evaluate("+5") == 5
    assert evaluate("5+") == 5


def test_extra_values_take_the_last_one():
    assert evaluate("1 2") == 2
    assert evaluate("2√9") == 3


@pytest.mark.parametrize("expr", ["+", "√", "(+)", "%"])
def test_missing_operand_raises(expr):
    with pytest.raises(MissingOperandError):
        evaluate(expr)


def test_bad_literal_raises_parse_error():
    with pytest.raises(ParseError):
        evaluate("1.2.3+4")


@pytest.mark.parametrize("expr", [".", "1.2.3", "-.", "2+.."])
def test_tokenize_and_evaluate_reject_the_same_literals(expr):
    with pytest.raises(ParseError) as from_tokenize:
        tokenize(expr)
    with pytest.raises(ParseError) as from_evaluate:
        evaluate(expr)
    assert from_tokenize.value.literal == from_evaluate.value.literal


def test_errors_share_a_base_class():
    assert issubclass(ParseError, EvaluationError)
    assert issubclass(MissingOperandError, EvaluationError)
    assert issubclass(EvaluationError, ValueError)


def test_returns_python_float():
    assert type(evaluate("1+1")) is float


def test_to_postfix_order():
    postfix = FormulaEvaluator.to_postfix(tokenize("2+3*4"))
    assert [str(t) for t in postfix] == ["2.0", "3.0", "4.0", "*", "+"]


def test_to_postfix_marks_trailing_percent_unary():
    postfix = FormulaEvaluator.to_postfix(tokenize("50*10%"))
    assert [str(t) for t in postfix] == ["50.0", "10.0", "%", "*"]
    assert postfix[2].operator is OperatorKind.PERCENT
    assert postfix[2].arity == 1


def test_evaluate_tokens_matches_evaluate():
    evaluator = FormulaEvaluator()
    assert evaluator.evaluate_tokens(tokenize("(1+2)^2")) == evaluate("(1+2)^2")


def test_repeated_calls_are_deterministic():
    first = evaluate("√2*3-1/7")
    assert all(evaluate("√2*3-1/7") == first for _ in range(5))


def test_concurrent_calls():
    exprs = ["2+3*4", "(2+3)*4", "8-3-2", "2^10"] * 25
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(evaluate, exprs))
    assert results == [14, 20, 3, 1024] * 25


def test_provider_operations():
    provider = NumpyArithmeticProvider()
    assert provider.apply_binary(OperatorKind.PERCENT, 80, 25) == 20
    assert provider.apply_binary(OperatorKind.DIV, 1, 0) == math.inf
    assert provider.apply_unary(OperatorKind.SQRT, 81) == 9
    assert provider.apply_unary(OperatorKind.PERCENT, 50) == 0.5


def test_provider_rejects_unknown_unary():
    with pytest.raises(ValueError):
        NumpyArithmeticProvider().apply_unary(OperatorKind.ADD, 1)


def test_custom_provider_is_used():
    class DoublingProvider(NumpyArithmeticProvider):
        def apply_binary(self, kind, a, b):
            return 2 * super().apply_binary(kind, a, b)

    assert FormulaEvaluator(DoublingProvider()).evaluate("1+2") == 6
