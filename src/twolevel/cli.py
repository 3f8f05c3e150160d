"""Command-line front end for the software reference model."""

import argparse
import logging
import sys

from .bits import BitString
from .trace import report


DEFAULT_MULTIPLIER = "10001011"
DEFAULT_MULTIPLICAND = "01011011"


def resolve_operands(multiplier=None, multiplicand=None):
    """Substitute defaults for missing or empty operands.

    Returns
    -------
    tuple(BitString, BitString)

    Raises
    ------
    ValueError
        If an operand contains non-binary digits.
    """
    return (BitString(multiplier or DEFAULT_MULTIPLIER),
            BitString(multiplicand or DEFAULT_MULTIPLICAND))


def build_parser():
    p = argparse.ArgumentParser(prog="twolevel", description="two-level multiplication algorithm emulator")  # noqa: E501
    p.add_argument("-v", "--verbose", action="store_true", help="log every iteration to stderr")  # noqa: E501
    p.add_argument("multiplier", nargs="?", default="", help=f"multiplier bit string (default {DEFAULT_MULTIPLIER})")  # noqa: E501
    p.add_argument("multiplicand", nargs="?", default="", help=f"multiplicand bit string (default {DEFAULT_MULTIPLICAND})")  # noqa: E501
    return p


def main(argv=None):
    p = build_parser()
    args = p.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else
                        logging.WARNING,
                        format="%(levelname)s:%(name)s:%(message)s")

    try:
        multiplier, multiplicand = resolve_operands(args.multiplier,
                                                    args.multiplicand)
    except ValueError as e:
        p.error(str(e))

    sys.stdout.write(report(multiplier, multiplicand))
    return 0
