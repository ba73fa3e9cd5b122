"""Lexical analysis for the lox language: turns source text into a flat list of Tokens.

Lexical grammar, loosely:

```
<token>      ::= "(" | ")" | "{" | "}" | "," | "." | "-" | "+" | ";" | "*" | "/"
               | "!" | "!=" | "=" | "==" | "<" | "<=" | ">" | ">="   ; two-character forms are greedy
<string>     ::= '"' <char>* '"'                                    ; may span lines, no escapes
<number>     ::= <digit>+ ( "." <digit>+ )?                         ; "1." is NUMBER then DOT
<identifier> ::= ( <alpha> | "_" ) ( <alpha> | <digit> | "_" )*     ; keywords are looked up afterwards
<comment>    ::= "//" <char>*                                       ; runs to the end of the line
```

Scanning never stops at a bad character: errors are reported to the ErrorHandler and scanning continues, so the caller
always gets a token list ending in EOF and must check had_error before parsing.
"""

import string

from lox.grammar.tokens import KEYWORDS, Token, TokenKind
from lox.lang.error import ErrorHandler, ScanError
from lox.lang.numerical import number


DIGITS = "0123456789"
ALPHA = string.ascii_letters + "_"
ALPHANUMERIC = ALPHA + DIGITS


class Scanner:
    """Single pass over source with three cursors: start of the current lexeme, current position and current line."""
    SINGLE = {
        "(": TokenKind.LEFT_PAREN,
        ")": TokenKind.RIGHT_PAREN,
        "{": TokenKind.LEFT_BRACE,
        "}": TokenKind.RIGHT_BRACE,
        ",": TokenKind.COMMA,
        ".": TokenKind.DOT,
        "-": TokenKind.MINUS,
        "+": TokenKind.PLUS,
        ";": TokenKind.SEMICOLON,
        "*": TokenKind.STAR,
    }
    # char: (kind if followed by "=", kind otherwise)
    DOUBLE = {
        "!": (TokenKind.BANG_EQUAL, TokenKind.BANG),
        "=": (TokenKind.EQUAL_EQUAL, TokenKind.EQUAL),
        "<": (TokenKind.LESS_EQUAL, TokenKind.LESS),
        ">": (TokenKind.GREATER_EQUAL, TokenKind.GREATER),
    }
    WHITESPACE = " \r\t"

    def __init__(self, source, error_handler=None):
        self.source = source
        self.error_handler = error_handler if error_handler is not None else ErrorHandler(fatal=False)

        self.tokens = []
        self.start = 0
        self.current = 0
        self.line = 1

        self.had_error = False

    def scan_tokens(self):
        """Scans all of self.source. Returns list of Tokens, always terminated by an EOF token."""
        while not self.is_at_end():
            self.start = self.current
            self.scan_token()

        self.tokens.append(Token(TokenKind.EOF, "", None, self.line))
        return self.tokens

    def scan_token(self):
        char = self.advance()

        if char in Scanner.SINGLE:
            self.add_token(Scanner.SINGLE[char])
        elif char in Scanner.DOUBLE:
            matched, alone = Scanner.DOUBLE[char]
            self.add_token(matched if self.match("=") else alone)
        elif char == "/":
            if self.match("/"):
                while self.peek() != "\n" and not self.is_at_end():
                    self.advance()
            else:
                self.add_token(TokenKind.SLASH)
        elif char in Scanner.WHITESPACE:
            pass
        elif char == "\n":
            self.line += 1
        elif char == '"':
            self.string()
        elif char in DIGITS:
            self.number()
        elif char in ALPHA:
            self.identifier()
        else:
            self.report(ScanError(f"Unexpected character '{char}'.", self.line, char))

    def string(self):
        while self.peek() != '"' and not self.is_at_end():
            if self.peek() == "\n":
                self.line += 1
            self.advance()

        if self.is_at_end():
            self.report(ScanError("Unterminated string.", self.line))
            return

        self.advance()  # closing "
        self.add_token(TokenKind.STRING, self.source[self.start + 1:self.current - 1])

    def number(self):
        while self.peek() in DIGITS:
            self.advance()

        if self.peek() == "." and self.peek_next() in DIGITS:
            self.advance()
            while self.peek() in DIGITS:
                self.advance()

        try:
            value = number(self.source[self.start:self.current], self.line)
        except ScanError as error:
            self.report(error)
            return
        self.add_token(TokenKind.NUMBER, value)

    def identifier(self):
        while self.peek() in ALPHANUMERIC:
            self.advance()

        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenKind.IDENTIFIER))

    def report(self, error):
        self.had_error = True
        self.error_handler.error(error)

    def is_at_end(self):
        return self.current >= len(self.source)

    def advance(self):
        self.current += 1
        return self.source[self.current - 1]

    def match(self, expected):
        """Consumes the next char only if it is expected."""
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self):
        """Next char, or NUL at the end."""
        if self.is_at_end():
            return "\0"
        return self.source[self.current]

    def peek_next(self):
        if self.current + 1 >= len(self.source):
            return "\0"
        return self.source[self.current + 1]

    def add_token(self, kind, literal=None):
        self.tokens.append(Token(kind, self.source[self.start:self.current], literal, self.line))


def scan(source, error_handler=None):
    """Returns (tokens, had_error) for source."""
    scanner = Scanner(source, error_handler)
    tokens = scanner.scan_tokens()
    return tokens, scanner.had_error
