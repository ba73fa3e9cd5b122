"""Renders lox syntax trees as parenthesized prefix text, e.g. `print (2 + 3) * 4;` becomes

```
(print (* (group (+ 2 3)) 4))
```

Used for debugging the parser (see `lox --ast`).
"""

from lox.grammar import ast
from lox.grammar.tokens import numeral


def parenthesize(name, *parts):
    return "(" + " ".join([name] + [part for part in parts if part]) + ")"


def _literal(value):
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return numeral(value)
    return f'"{value}"'


def _params(params):
    return "(" + " ".join(param.lexeme for param in params) + ")"


def _body(statements):
    return " ".join(print_ast(stmt) for stmt in statements)


_PRINTERS = {
    ast.Literal: lambda node: _literal(node.value),
    ast.Grouping: lambda node: parenthesize("group", print_ast(node.expression)),
    ast.Unary: lambda node: parenthesize(node.operator.lexeme, print_ast(node.right)),
    ast.Binary: lambda node: parenthesize(node.operator.lexeme, print_ast(node.left), print_ast(node.right)),
    ast.Logical: lambda node: parenthesize(node.operator.lexeme, print_ast(node.left), print_ast(node.right)),
    ast.Variable: lambda node: node.name.lexeme,
    ast.Assign: lambda node: parenthesize("=", node.name.lexeme, print_ast(node.value)),
    ast.Call: lambda node: parenthesize("call", print_ast(node.callee), *map(print_ast, node.arguments)),
    ast.FunctionExpr: lambda node: parenthesize("fun", _params(node.params), _body(node.body)),

    ast.ExprStmt: lambda node: parenthesize(";", print_ast(node.expression)),
    ast.Print: lambda node: parenthesize("print", print_ast(node.expression)),
    ast.Var: lambda node: parenthesize("var", node.name.lexeme, print_ast(node.initializer)),
    ast.Block: lambda node: parenthesize("block", _body(node.statements)),
    ast.If: lambda node: parenthesize("if", print_ast(node.condition), print_ast(node.then_branch),
                                      print_ast(node.else_branch)),
    ast.While: lambda node: parenthesize("while", print_ast(node.condition), print_ast(node.body)),
    ast.ControlFlow: lambda node: parenthesize(node.kind.value),
    ast.Function: lambda node: parenthesize("fun", node.name.lexeme, _params(node.function.params),
                                            _body(node.function.body)),
    ast.Return: lambda node: parenthesize("return", print_ast(node.value)),
}


def print_ast(node):
    """Returns prefix rendering of node, an expression or a statement. None renders as empty text."""
    if node is None:
        return ""
    return _PRINTERS[type(node)](node)
