""" Splits BVH text into tokens that remember their line number.

Whitespace separates tokens, braces are always tokens of their own,
everything else is returned verbatim for the parsers to interpret.
"""
import re
from collections import namedtuple
from ..utilities.exceptions import BVHSyntaxError

TOKEN_PATTERN = re.compile(r"[{}]|[^\s{}]+")

Token = namedtuple("Token", ["value", "line_number"])


class BVHLexer(object):
    """Lazy token sequence over a BVH text. Every iteration starts again from the first line."""

    def __init__(self, text):
        self.text = text

    def __iter__(self):
        for line_index, line in enumerate(self.text.splitlines()):
            for match in TOKEN_PATTERN.finditer(line):
                yield Token(match.group(0), line_index + 1)


class TokenStream(object):
    """ Cursor with one token lookahead over a BVHLexer
    """

    def __init__(self, lexer):
        self._lexer = lexer
        self._tokens = iter(lexer)
        self._lookahead = None
        self.line_number = 0

    def restart(self):
        self._tokens = iter(self._lexer)
        self._lookahead = None
        self.line_number = 0

    def peek(self):
        if self._lookahead is None:
            self._lookahead = next(self._tokens, None)
        return self._lookahead

    def at_end(self):
        return self.peek() is None

    def next_token(self, expected="a token"):
        token = self.peek()
        if token is None:
            raise BVHSyntaxError("unexpected end of input, expected " + expected, self.line_number)
        self._lookahead = None
        self.line_number = token.line_number
        return token

    def expect(self, keyword):
        token = self.next_token(repr(keyword))
        if token.value != keyword:
            raise BVHSyntaxError("expected %r but found %r" % (keyword, token.value), token.line_number)
        return token

    def read_float(self, expected="a number"):
        token = self.next_token(expected)
        try:
            return float(token.value)
        except ValueError:
            raise BVHSyntaxError("expected %s but found %r" % (expected, token.value), token.line_number)

    def read_int(self, expected="an integer"):
        token = self.next_token(expected)
        try:
            return int(token.value)
        except ValueError:
            raise BVHSyntaxError("expected %s but found %r" % (expected, token.value), token.line_number)
