"""Punto de entrada de la calculadora (línea de comandos)."""

import argparse
import logging
import sys

from calculation_history import CalculationHistory
from calculator_engine import CalculatorEngine


HISTORY_LIMIT = 100
PROMPT = "> "
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="calculadora",
        description="Evalúa expresiones aritméticas (+ - * / ^ % √ y paréntesis).",
    )
    parser.add_argument(
        "expressions",
        nargs="*",
        help="Expresiones a evaluar; sin ninguna se abre el modo interactivo",
    )
    parser.add_argument(
        "--history-limit",
        type=int,
        default=HISTORY_LIMIT,
        help="Entradas máximas del historial (default: %(default)s)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Nivel de log (default: %(default)s)",
    )
    return parser


def evaluate_all(engine: CalculatorEngine, expressions, out=None) -> int:
    """Imprime un resultado por expresión; devuelve 1 si alguna falló."""
    status = 0
    for expr in expressions:
        result = engine.calculate(expr)
        if result is None:
            continue
        print(result.text, file=out)
        if not result.ok:
            status = 1
    return status


def run_repl(engine: CalculatorEngine, stdin=None, out=None) -> None:
    """Bucle interactivo: history, clear, load N, quit; el resto se evalúa.

    ``load N`` solo muestra la expresión N del historial.
    """
    stdin = stdin if stdin is not None else sys.stdin
    print("Calculadora. Comandos: history, clear, load N, quit", file=out)
    while True:
        print(PROMPT, end="", file=out, flush=True)
        line = stdin.readline()
        if not line:
            print(file=out)
            break

        command = line.strip()
        if not command:
            continue
        if command in ("quit", "exit"):
            break
        if command == "history":
            _print_history(engine.history, out)
            continue
        if command == "clear":
            engine.history.clear()
            print("Historial borrado.", file=out)
            continue
        if command == "load" or command.startswith("load "):
            _load_from_history(engine.history, command, out)
            continue

        result = engine.calculate(command)
        if result is not None:
            print(result.text, file=out)


def _print_history(history: CalculationHistory, out):
    if not len(history):
        print("(historial vacío)", file=out)
        return
    for idx, item in enumerate(history, start=1):
        print(f"{idx}: {item}", file=out)


def _load_from_history(history: CalculationHistory, command: str, out):
    """Muestra la expresión guardada; no la evalúa ni toca el historial."""
    _, _, arg = command.partition(" ")
    try:
        item = history.get(int(arg) - 1)
    except ValueError:
        print("Uso: load N", file=out)
        return
    except IndexError as exc:
        print(exc, file=out)
        return
    print(item.expression, file=out)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    engine = CalculatorEngine(history=CalculationHistory(limit=args.history_limit))
    if args.expressions:
        return evaluate_all(engine, args.expressions)

    logger.info("Modo interactivo")
    run_repl(engine)
    return 0


if __name__ == "__main__":
    sys.exit(main())
