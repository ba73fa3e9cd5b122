"""Static scope resolution for the lox language.

The resolver is a second walk over the parsed program, run before anything executes. For every variable reference
and assignment it works out which declaration the name binds to and records the binding's lexical address: how many
scopes up it lives (distance) and its position within that scope (slot). The interpreter then reads and writes locals
by address instead of by name.

Only local scopes (blocks and function bodies) are tracked. Top-level names are not slot-resolved: a reference that
matches no local scope is left out of the table and the interpreter looks it up by name among the globals. Because of
that, redeclaring a global and `var a = a;` at top level are both allowed.
"""

from dataclasses import dataclass
from enum import Enum

from lox.grammar import ast
from lox.lang.error import ErrorHandler, ResolveError


class FunctionKind(Enum):
    NONE = "none"
    FUNCTION = "function"


@dataclass
class Binding:
    """A name declared in a local scope. defined stays False while the name's own initializer is being resolved."""
    slot: int
    defined: bool = False


class Resolver:
    """Resolves statements for interpreter, which must provide resolve(expr, distance, slot)."""

    def __init__(self, interpreter, error_handler=None):
        self.interpreter = interpreter
        self.error_handler = error_handler if error_handler is not None else ErrorHandler(fatal=False)

        self.scopes = []  # stack of dicts of name: Binding, innermost last
        self.function_kind = FunctionKind.NONE
        self.loop_depth = 0  # loops enclosing the current point, within the current function

        self.had_error = False

        self._stmts = {
            ast.Block: self.block,
            ast.Var: self.var,
            ast.Function: self.function,
            ast.ExprStmt: self.expression_stmt,
            ast.Print: self.expression_stmt,
            ast.If: self.if_stmt,
            ast.While: self.while_stmt,
            ast.ControlFlow: self.control_flow,
            ast.Return: self.return_stmt,
        }
        self._exprs = {
            ast.Literal: self.literal,
            ast.Grouping: self.grouping,
            ast.Unary: self.unary,
            ast.Binary: self.binary,
            ast.Logical: self.binary,
            ast.Variable: self.variable,
            ast.Assign: self.assign,
            ast.Call: self.call,
            ast.FunctionExpr: self.function_expr,
        }

    def resolve(self, statements):
        for stmt in statements:
            self.resolve_stmt(stmt)

    def resolve_stmt(self, stmt):
        self._stmts[type(stmt)](stmt)

    def resolve_expr(self, expr):
        self._exprs[type(expr)](expr)

    # ----------------------------------------------------------------------------------------------------------------
    # statements

    def block(self, stmt):
        self.begin_scope()
        self.resolve(stmt.statements)
        self.end_scope()

    def var(self, stmt):
        self.declare(stmt.name)
        if stmt.initializer is not None:
            self.resolve_expr(stmt.initializer)
        self.define(stmt.name)

    def function(self, stmt):
        # declared and defined up front, so the body can refer to the function recursively
        self.declare(stmt.name)
        self.define(stmt.name)
        self.resolve_function(stmt.function, FunctionKind.FUNCTION)

    def expression_stmt(self, stmt):
        self.resolve_expr(stmt.expression)

    def if_stmt(self, stmt):
        self.resolve_expr(stmt.condition)
        self.resolve_stmt(stmt.then_branch)
        if stmt.else_branch is not None:
            self.resolve_stmt(stmt.else_branch)

    def while_stmt(self, stmt):
        self.resolve_expr(stmt.condition)
        self.loop_depth += 1
        self.resolve_stmt(stmt.body)
        self.loop_depth -= 1

    def control_flow(self, stmt):
        if self.loop_depth == 0:
            self.error(stmt.keyword, "Can't break outside of a loop.")

    def return_stmt(self, stmt):
        if self.function_kind is FunctionKind.NONE:
            self.error(stmt.keyword, "Can't return from top-level code.")
        if stmt.value is not None:
            self.resolve_expr(stmt.value)

    # ----------------------------------------------------------------------------------------------------------------
    # expressions

    def literal(self, expr):
        pass

    def grouping(self, expr):
        self.resolve_expr(expr.expression)

    def unary(self, expr):
        self.resolve_expr(expr.right)

    def binary(self, expr):
        self.resolve_expr(expr.left)
        self.resolve_expr(expr.right)

    def variable(self, expr):
        if self.scopes:
            binding = self.scopes[-1].get(expr.name.lexeme)
            if binding is not None and not binding.defined:
                self.error(expr.name, "Can't read local variable in its own initializer.")
        self.resolve_local(expr, expr.name)

    def assign(self, expr):
        self.resolve_expr(expr.value)
        self.resolve_local(expr, expr.name)

    def call(self, expr):
        self.resolve_expr(expr.callee)
        for argument in expr.arguments:
            self.resolve_expr(argument)

    def function_expr(self, expr):
        self.resolve_function(expr, FunctionKind.FUNCTION)

    # ----------------------------------------------------------------------------------------------------------------
    # helpers

    def resolve_function(self, function, kind):
        """Resolves function's parameters and body in one new scope. The body is not a separate block: parameters
        and top-level body locals share slots, matching how a call binds them at runtime.
        """
        enclosing_kind, enclosing_depth = self.function_kind, self.loop_depth
        self.function_kind, self.loop_depth = kind, 0

        self.begin_scope()
        for param in function.params:
            self.declare(param)
            self.define(param)
        self.resolve(function.body)
        self.end_scope()

        self.function_kind, self.loop_depth = enclosing_kind, enclosing_depth

    def resolve_local(self, expr, name):
        """Records the innermost binding of name for expr. Leaves expr unresolved (global) if no scope has it."""
        for distance, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.interpreter.resolve(expr, distance, scope[name.lexeme].slot)
                return

    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name):
        if not self.scopes:
            return

        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = Binding(slot=len(scope))

    def define(self, name):
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme].defined = True

    def error(self, token, msg):
        self.had_error = True
        self.error_handler.error(ResolveError(msg, token))


def resolve(statements, interpreter, error_handler=None):
    """Resolves statements into interpreter's resolution table. Returns whether a resolution error occurred."""
    resolver = Resolver(interpreter, error_handler)
    resolver.resolve(statements)
    return resolver.had_error
