"""Numbers in lox are 64-bit floats. This module converts numerals to numbers; the reverse, the text `print` shows for
a number, is lox.grammar.tokens.numeral.
"""

from lox.lang.error import ScanError


def number(numeral, line=0):
    """Returns float value of numeral (a run of digits, optionally followed by '.' and more digits). Raises ScanError
    if numeral is malformed.
    """
    try:
        return float(numeral)
    except ValueError:
        raise ScanError(f"Invalid number '{numeral}'.", line, numeral)
