"""Tree-walking evaluation of resolved lox programs.

Executing a statement has three possible outcomes, returned rather than raised: None (completed normally), BREAK (a
`break` is unwinding to its loop) or a ReturnSignal (a `return` is unwinding to its call). Loops consume BREAK, calls
consume ReturnSignal, and blocks pass both through after restoring the environment they replaced. Genuine errors are
LoxRuntimeErrors and are raised; the first one stops the program.

Operands of a binary operator are evaluated right-hand side first, then left-hand side. Programs can observe this
through side effects.
"""

import operator
import sys

from lox.grammar import ast
from lox.grammar.tokens import TokenKind
from lox.lang.environment import Environment, Globals
from lox.lang.error import ErrorHandler, LoxRuntimeError
from lox.lang.values import BREAK, NATIVES, LoxCallable, LoxFunction, ReturnSignal, is_equal, stringify


class Interpreter:
    """Holds all runtime state of one program: globals, the current environment and the resolution table. A shell
    keeps one Interpreter for its whole session, so every entry sees the globals of the previous ones.
    """
    NUMERIC = {
        TokenKind.GREATER: operator.gt,
        TokenKind.GREATER_EQUAL: operator.ge,
        TokenKind.LESS: operator.lt,
        TokenKind.LESS_EQUAL: operator.le,
        TokenKind.MINUS: operator.sub,
        TokenKind.STAR: operator.mul,
        TokenKind.SLASH: operator.truediv,
    }

    def __init__(self, error_handler=None, out=None):
        self.error_handler = error_handler if error_handler is not None else ErrorHandler(fatal=False)
        self.out = out  # defaults to sys.stdout at print time

        self.globals = Globals()
        for native in NATIVES:
            self.globals.define(native.name, native)

        self.environment = None  # None while executing top-level code
        self.locals = {}  # expr uid: (distance, slot), filled in by the resolver

        self._stmts = {
            ast.ExprStmt: self.expression_stmt,
            ast.Print: self.print_stmt,
            ast.Var: self.var,
            ast.Block: self.block,
            ast.If: self.if_stmt,
            ast.While: self.while_stmt,
            ast.ControlFlow: self.control_flow,
            ast.Function: self.function,
            ast.Return: self.return_stmt,
        }
        self._exprs = {
            ast.Literal: self.literal,
            ast.Grouping: self.grouping,
            ast.Unary: self.unary,
            ast.Binary: self.binary,
            ast.Logical: self.logical,
            ast.Variable: self.variable,
            ast.Assign: self.assign,
            ast.Call: self.call,
            ast.FunctionExpr: self.function_expr,
        }

    def resolve(self, expr, distance, slot):
        """Records that expr refers to the local distance scopes up, at slot. Called by the resolver."""
        self.locals[expr.uid] = (distance, slot)

    def interpret(self, statements):
        """Executes statements in order. Reports the first runtime error and stops there. Returns whether the
        statements ran to completion.
        """
        try:
            for stmt in statements:
                self.execute(stmt)
        except LoxRuntimeError as error:
            self.error_handler.runtime_error(error)
            return False
        return True

    def execute(self, stmt):
        return self._stmts[type(stmt)](stmt)

    def evaluate(self, expr):
        return self._exprs[type(expr)](expr)

    def execute_block(self, statements, environment):
        """Executes statements in environment, restoring the current environment on every way out. Returns the first
        signal a statement produced, or None.
        """
        previous = self.environment
        self.environment = environment
        try:
            for stmt in statements:
                signal = self.execute(stmt)
                if signal is not None:
                    return signal
            return None
        finally:
            self.environment = previous

    # ----------------------------------------------------------------------------------------------------------------
    # statements

    def expression_stmt(self, stmt):
        self.evaluate(stmt.expression)

    def print_stmt(self, stmt):
        value = self.evaluate(stmt.expression)
        print(stringify(value), file=self.out if self.out is not None else sys.stdout)

    def var(self, stmt):
        value = None
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer)
        self.define(stmt.name, value)

    def block(self, stmt):
        return self.execute_block(stmt.statements, Environment(self.environment))

    def if_stmt(self, stmt):
        if self.is_truthy(self.evaluate(stmt.condition), stmt.keyword, "Condition must be a boolean."):
            return self.execute(stmt.then_branch)
        if stmt.else_branch is not None:
            return self.execute(stmt.else_branch)
        return None

    def while_stmt(self, stmt):
        while self.is_truthy(self.evaluate(stmt.condition), stmt.keyword, "Condition must be a boolean."):
            signal = self.execute(stmt.body)
            if signal is BREAK:
                break
            if signal is not None:
                return signal
        return None

    def control_flow(self, stmt):
        return BREAK

    def function(self, stmt):
        self.define(stmt.name, LoxFunction(stmt.function, self.environment, stmt.name.lexeme))

    def return_stmt(self, stmt):
        value = None
        if stmt.value is not None:
            value = self.evaluate(stmt.value)
        return ReturnSignal(value)

    # ----------------------------------------------------------------------------------------------------------------
    # expressions

    def literal(self, expr):
        return expr.value

    def grouping(self, expr):
        return self.evaluate(expr.expression)

    def unary(self, expr):
        right = self.evaluate(expr.right)

        if expr.operator.kind is TokenKind.MINUS:
            self.check_number_operands(expr.operator, right, msg="Operand must be a number.")
            return -right
        # TokenKind.BANG
        return not self.is_truthy(right, expr.operator, "Operand must be a boolean.")

    def binary(self, expr):
        right = self.evaluate(expr.right)
        left = self.evaluate(expr.left)
        kind = expr.operator.kind

        if kind is TokenKind.EQUAL_EQUAL:
            return is_equal(left, right)
        if kind is TokenKind.BANG_EQUAL:
            return not is_equal(left, right)

        if kind is TokenKind.PLUS:
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError("Invalid values in + operator.", expr.operator)

        self.check_number_operands(expr.operator, left, right)
        if kind is TokenKind.SLASH and right == 0.0:
            raise LoxRuntimeError("Can't divide by zero.", expr.operator)
        return Interpreter.NUMERIC[kind](left, right)

    def logical(self, expr):
        left = self.evaluate(expr.left)
        truth = self.is_truthy(left, expr.operator, "Operand must be a boolean.")

        if expr.operator.kind is TokenKind.OR:
            if truth:
                return left
        elif not truth:
            return left
        return self.evaluate(expr.right)

    def variable(self, expr):
        return self.lookup_variable(expr.name, expr)

    def assign(self, expr):
        value = self.evaluate(expr.value)

        address = self.locals.get(expr.uid)
        if address is not None:
            distance, slot = address
            self.environment.assign_at(distance, value, slot, expr.name)
        else:
            self.globals.set(expr.name, value)
        return value

    def call(self, expr):
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError("Can only call functions and classes.", expr.paren)
        if len(arguments) != callee.arity():
            raise LoxRuntimeError(f"Expected {callee.arity()} arguments but got {len(arguments)}.", expr.paren)

        return callee.call(self, arguments)

    def function_expr(self, expr):
        return LoxFunction(expr, self.environment)

    # ----------------------------------------------------------------------------------------------------------------
    # helpers

    def define(self, name, value):
        """Binds name to value in the current scope: a new slot locally, or a name in the global table."""
        if self.environment is None:
            self.globals.define(name.lexeme, value)
        else:
            self.environment.define(value)

    def lookup_variable(self, name, expr):
        address = self.locals.get(expr.uid)
        if address is not None:
            distance, slot = address
            return self.environment.get_at(distance, slot, name)
        return self.globals.get(name)

    @staticmethod
    def is_truthy(value, token, msg):
        """Only booleans have a truth value. Anything else is a runtime error at token."""
        if isinstance(value, bool):
            return value
        raise LoxRuntimeError(msg, token)

    @staticmethod
    def check_number_operands(token, *operands, msg="Operands must be numbers."):
        if not all(isinstance(operand, float) for operand in operands):
            raise LoxRuntimeError(msg, token)


def interpret(statements, interpreter):
    """Executes statements with interpreter. Returns whether they ran without a runtime error."""
    return interpreter.interpret(statements)
