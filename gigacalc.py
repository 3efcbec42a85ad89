"""
gigacalc - command line calculator on 108-digit decimal values.

USAGE
-----
    python gigacalc.py eval 1.2345e10 + 0.67890
    python gigacalc.py --format E20 eval 1 / 3
    python gigacalc.py --rounding floor eval -2 / 3
    python gigacalc.py --format N2 sum prices.txt
    python gigacalc.py product factors.npy
"""

import argparse
import logging
import os
import sys

from arithmetic import DivisionByZero
from decimal_value import DecimalValue
from formatting import FormatSpecError, parse_format_spec
from parsing import ParseError, load_values_from_file, load_values_from_npy_file
from rounding import get_rounding

OPERATORS = ("+", "-", "*", "x", "/", "^")

def evaluate(x: DecimalValue, op: str, y: str, rounding) -> DecimalValue:
    if op == "^":
        try:
            exponent = int(y)
        except ValueError:
            raise ParseError(f"Exponent must be an integer, got {y!r}") from None
        return x.power(exponent, rounding)
    rhs = DecimalValue.parse(y, rounding)
    if op == "+":
        return x.add(rhs, rounding)
    if op == "-":
        return x.subtract(rhs, rounding)
    if op in ("*", "x"):
        return x.multiply(rhs, rounding)
    return x.divide(rhs, rounding)

def load_values(path: str):
    if os.path.splitext(path)[1].lower() == ".npy":
        return [DecimalValue.coerce(v) for v in load_values_from_npy_file(path)]
    return [DecimalValue(limbs, exponent) for limbs, exponent in load_values_from_file(path)]

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Arbitrary-precision (108 digit) decimal calculator"
    )
    parser.add_argument("--format", default="G", help="Output format: D R E F G N P, optional precision and U flag (default G)")
    parser.add_argument("--rounding", default="half_even", help="Rounding policy (default half_even)")
    parser.add_argument("--verbose", action="store_true", help="Log division iterations")

    commands = parser.add_subparsers(dest="command", required=True)
    ev = commands.add_parser("eval", help="Evaluate <x> <op> <y>")
    ev.add_argument("x")
    ev.add_argument("op", choices=OPERATORS)
    ev.add_argument("y")
    for name in ("sum", "product"):
        cmd = commands.add_parser(name, help=f"{name.capitalize()} of the numbers in a .txt or .npy file")
        cmd.add_argument("file")
    return parser

def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        parse_format_spec(args.format)
        rounding = get_rounding(args.rounding)
    except (FormatSpecError, NotImplementedError) as e:
        print(f"Error: {e}"); sys.exit(1)

    try:
        if args.command == "eval":
            result = evaluate(DecimalValue.parse(args.x, rounding), args.op, args.y, rounding)
        else:
            values = load_values(args.file)
            print(f"Loaded {len(values)} values from {args.file}")
            result = values[0]
            for v in values[1:]:
                result = result.add(v, rounding) if args.command == "sum" else result.multiply(v, rounding)
    except ParseError as e:
        print(f"Error parsing input: {e}"); sys.exit(1)
    except DivisionByZero as e:
        print(f"Error: {e}"); sys.exit(1)
    except FileNotFoundError:
        print(f"Error: file not found: {args.file}"); sys.exit(1)
    except (TypeError, ValueError) as e:
        print(f"Error: {e}"); sys.exit(1)

    print(result.format(args.format, rounding))

if __name__ == "__main__":
    main()
