"""Recursive-descent parser for the lox language: turns a list of Tokens into a list of statements.

Grammar, from loosest to tightest binding (one Parser method per rule):

```
<program>     ::= <declaration>* EOF
<declaration> ::= "fun" IDENTIFIER <function> | "var" IDENTIFIER ( "=" <expression> )? ";" | <statement>
<statement>   ::= <for> | <if> | <print> | <return> | <while> | <break> | <block> | <expression> ";"
<function>    ::= "(" ( IDENTIFIER ( "," IDENTIFIER )* )? ")" <block>

<expression>  ::= <assignment>
<assignment>  ::= IDENTIFIER "=" <assignment> | <or>     ; right-associative
<or>          ::= <and> ( "or" <and> )*
<and>         ::= <equality> ( "and" <equality> )*
<equality>    ::= <comparison> ( ( "!=" | "==" ) <comparison> )*
<comparison>  ::= <term> ( ( ">" | ">=" | "<" | "<=" ) <term> )*
<term>        ::= <factor> ( ( "-" | "+" ) <factor> )*
<factor>      ::= <unary> ( ( "/" | "*" ) <unary> )*
<unary>       ::= ( "!" | "-" ) <unary> | <call>
<call>        ::= <primary> ( "(" <arguments>? ")" )*
<primary>     ::= "true" | "false" | "nil" | NUMBER | STRING | IDENTIFIER | "(" <expression> ")" | "fun" <function>
```

A rule that cannot consume what it expects raises ParseError. The nearest enclosing declaration catches it, reports
it and synchronizes (skips tokens up to the next statement boundary), so one bad statement does not hide the errors
in the rest of the program.
"""

from lox.grammar import ast
from lox.grammar.tokens import TokenKind
from lox.lang.error import ErrorHandler, ParseError


class Parser:
    """Parses one token list. Keeps its own cursor, so a Parser is used once and thrown away."""
    MAX_ARGS = 127
    # tokens that start a new declaration, used when synchronizing
    BOUNDARIES = {
        TokenKind.CLASS,
        TokenKind.FUN,
        TokenKind.VAR,
        TokenKind.FOR,
        TokenKind.IF,
        TokenKind.WHILE,
        TokenKind.PRINT,
        TokenKind.RETURN,
    }

    def __init__(self, tokens, error_handler=None):
        self.tokens = tokens
        self.error_handler = error_handler if error_handler is not None else ErrorHandler(fatal=False)

        self.current = 0
        self.had_error = False

    def parse(self):
        """Returns list of statements that parsed successfully. Check had_error before using them."""
        statements = []
        while not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    # ----------------------------------------------------------------------------------------------------------------
    # statements

    def declaration(self):
        """Parses one declaration. On a syntax error, reports it, synchronizes and returns None."""
        try:
            if self.check(TokenKind.FUN) and self.check_next(TokenKind.IDENTIFIER):
                self.advance()
                return self.function("function")
            if self.match(TokenKind.VAR):
                return self.var_declaration()
            return self.statement()
        except ParseError:
            self.synchronize()
            return None

    def function(self, kind):
        name = self.consume(TokenKind.IDENTIFIER, f"Expect {kind} name.")
        return ast.Function(name, self.function_body(kind))

    def function_body(self, kind):
        """Parses parameter list and body. Named functions and anonymous functions share this."""
        self.consume(TokenKind.LEFT_PAREN, f"Expect '(' after {kind} name.")

        params = []
        if not self.check(TokenKind.RIGHT_PAREN):
            while True:
                if len(params) >= Parser.MAX_ARGS:
                    self.error(self.peek(), f"Can't have more than {Parser.MAX_ARGS} parameters.")
                params.append(self.consume(TokenKind.IDENTIFIER, "Expect parameter name."))
                if not self.match(TokenKind.COMMA):
                    break
        self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after parameters.")

        self.consume(TokenKind.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        return ast.FunctionExpr(params, self.block())

    def var_declaration(self):
        name = self.consume(TokenKind.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self.match(TokenKind.EQUAL):
            initializer = self.expression()

        self.consume(TokenKind.SEMICOLON, "Expect ';' after variable declaration.")
        return ast.Var(name, initializer)

    def statement(self):
        if self.match(TokenKind.FOR):
            return self.for_statement()
        if self.match(TokenKind.IF):
            return self.if_statement()
        if self.match(TokenKind.PRINT):
            return self.print_statement()
        if self.match(TokenKind.RETURN):
            return self.return_statement()
        if self.match(TokenKind.WHILE):
            return self.while_statement()
        if self.match(TokenKind.BREAK):
            return self.break_statement()
        if self.match(TokenKind.LEFT_BRACE):
            return ast.Block(self.block())
        return self.expression_statement()

    def for_statement(self):
        """Desugars `for (init; cond; incr) body` into `{ init; while (cond) { body; incr; } }`."""
        keyword = self.previous()
        self.consume(TokenKind.LEFT_PAREN, "Expect '(' after 'for'.")

        if self.match(TokenKind.SEMICOLON):
            initializer = None
        elif self.match(TokenKind.VAR):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not self.check(TokenKind.SEMICOLON):
            condition = self.expression()
        self.consume(TokenKind.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self.check(TokenKind.RIGHT_PAREN):
            increment = self.expression()
        self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.statement()

        if increment is not None:
            body = ast.Block([body, ast.ExprStmt(increment)])
        if condition is None:
            condition = ast.Literal(True)
        body = ast.While(keyword, condition, body)
        if initializer is not None:
            body = ast.Block([initializer, body])

        return body

    def if_statement(self):
        keyword = self.previous()
        self.consume(TokenKind.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.statement()
        else_branch = None
        if self.match(TokenKind.ELSE):
            else_branch = self.statement()

        return ast.If(keyword, condition, then_branch, else_branch)

    def print_statement(self):
        value = self.expression()
        self.consume(TokenKind.SEMICOLON, "Expect ';' after value.")
        return ast.Print(value)

    def return_statement(self):
        keyword = self.previous()
        value = None
        if not self.check(TokenKind.SEMICOLON):
            value = self.expression()

        self.consume(TokenKind.SEMICOLON, "Expect ';' after return value.")
        return ast.Return(keyword, value)

    def while_statement(self):
        keyword = self.previous()
        self.consume(TokenKind.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after condition.")

        return ast.While(keyword, condition, self.statement())

    def break_statement(self):
        keyword = self.previous()
        self.consume(TokenKind.SEMICOLON, "Expect ';' after 'break'.")
        return ast.ControlFlow(ast.FlowKind.BREAK, keyword)

    def block(self):
        """Parses statements up to the closing brace. Assumes the opening brace has been consumed."""
        statements = []
        while not self.check(TokenKind.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        self.consume(TokenKind.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def expression_statement(self):
        expr = self.expression()
        self.consume(TokenKind.SEMICOLON, "Expect ';' after value.")
        return ast.ExprStmt(expr)

    # ----------------------------------------------------------------------------------------------------------------
    # expressions

    def expression(self):
        return self.assignment()

    def assignment(self):
        expr = self.or_()

        if self.match(TokenKind.EQUAL):
            equals = self.previous()
            value = self.assignment()

            if isinstance(expr, ast.Variable):
                return ast.Assign(expr.name, value)
            self.error(equals, "Invalid assignment target.")  # reported, but not worth synchronizing over

        return expr

    def or_(self):
        expr = self.and_()
        while self.match(TokenKind.OR):
            operator = self.previous()
            expr = ast.Logical(expr, operator, self.and_())
        return expr

    def and_(self):
        expr = self.equality()
        while self.match(TokenKind.AND):
            operator = self.previous()
            expr = ast.Logical(expr, operator, self.equality())
        return expr

    def _binary(self, operand, *kinds):
        """Parses a left-associative chain of operand separated by any of kinds."""
        expr = operand()
        while self.match(*kinds):
            operator = self.previous()
            expr = ast.Binary(expr, operator, operand())
        return expr

    def equality(self):
        return self._binary(self.comparison, TokenKind.BANG_EQUAL, TokenKind.EQUAL_EQUAL)

    def comparison(self):
        kinds = TokenKind.GREATER, TokenKind.GREATER_EQUAL, TokenKind.LESS, TokenKind.LESS_EQUAL
        return self._binary(self.term, *kinds)

    def term(self):
        return self._binary(self.factor, TokenKind.MINUS, TokenKind.PLUS)

    def factor(self):
        return self._binary(self.unary, TokenKind.SLASH, TokenKind.STAR)

    def unary(self):
        if self.match(TokenKind.BANG, TokenKind.MINUS):
            operator = self.previous()
            return ast.Unary(operator, self.unary())
        return self.call()

    def call(self):
        expr = self.primary()
        while self.match(TokenKind.LEFT_PAREN):
            expr = self.finish_call(expr)
        return expr

    def finish_call(self, callee):
        arguments = []
        if not self.check(TokenKind.RIGHT_PAREN):
            while True:
                if len(arguments) >= Parser.MAX_ARGS:
                    self.error(self.peek(), f"Can't have more than {Parser.MAX_ARGS} arguments.")
                arguments.append(self.expression())
                if not self.match(TokenKind.COMMA):
                    break

        paren = self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after arguments.")
        return ast.Call(callee, paren, arguments)

    def primary(self):
        if self.match(TokenKind.FALSE):
            return ast.Literal(False)
        if self.match(TokenKind.TRUE):
            return ast.Literal(True)
        if self.match(TokenKind.NIL):
            return ast.Literal(None)

        if self.match(TokenKind.NUMBER, TokenKind.STRING):
            return ast.Literal(self.previous().literal)

        if self.match(TokenKind.IDENTIFIER):
            return ast.Variable(self.previous())

        if self.match(TokenKind.FUN):
            return self.function_body("function")

        if self.match(TokenKind.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after expression.")
            return ast.Grouping(expr)

        raise self.error(self.peek(), "Expect expression.")

    # ----------------------------------------------------------------------------------------------------------------
    # helpers

    def synchronize(self):
        """Discards tokens until a statement boundary: just past a semicolon, or before a declaration keyword."""
        self.advance()

        while not self.is_at_end():
            if self.previous().kind is TokenKind.SEMICOLON:
                return
            if self.peek().kind in Parser.BOUNDARIES:
                return
            self.advance()

    def consume(self, kind, msg):
        if self.check(kind):
            return self.advance()
        raise self.error(self.peek(), msg)

    def error(self, token, msg):
        """Reports a syntax error at token and returns it, so that callers can decide whether to raise it."""
        error = ParseError(msg, token)
        self.had_error = True
        self.error_handler.error(error)
        return error

    def match(self, *kinds):
        for kind in kinds:
            if self.check(kind):
                self.advance()
                return True
        return False

    def check(self, kind):
        if self.is_at_end():
            return False
        return self.peek().kind is kind

    def check_next(self, kind):
        if self.is_at_end() or self.current + 1 >= len(self.tokens):
            return False
        return self.tokens[self.current + 1].kind is kind

    def advance(self):
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self):
        return self.peek().kind is TokenKind.EOF

    def peek(self):
        return self.tokens[self.current]

    def previous(self):
        return self.tokens[self.current - 1]


def parse(tokens, error_handler=None):
    """Returns (statements, had_error) for tokens."""
    parser = Parser(tokens, error_handler)
    statements = parser.parse()
    return statements, parser.had_error
