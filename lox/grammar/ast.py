"""Abstract syntax tree for lox programs.

There are two node families, expressions and statements, both plain dataclasses. Roughly:

```
<stmt> ::= <expr> ";"                                  ; ExprStmt
         | "print" <expr> ";"                          ; Print
         | "var" IDENTIFIER ( "=" <expr> )? ";"        ; Var
         | "{" <stmt>* "}"                             ; Block
         | "if" "(" <expr> ")" <stmt> ( "else" <stmt> )?
         | "while" "(" <expr> ")" <stmt>               ; "for" is desugared into Block + While
         | "break" ";"                                 ; ControlFlow
         | "fun" IDENTIFIER <function>                 ; Function
         | "return" <expr>? ";"

<expr> ::= literal | "(" <expr> ")" | unary | binary | logical | variable | assignment | call
         | "fun" <function>                            ; FunctionExpr, an anonymous function
```

Every expression gets a unique integer uid when it is built. The resolver's results are keyed by uid, so two
structurally identical expressions (say, two references to `a` on the same line) are still told apart. uid takes no
part in equality: nodes compare structurally, which is what tests want.
"""

from abc import ABC
from dataclasses import dataclass, field
from enum import Enum
from itertools import count
from typing import List, Optional

from lox.grammar.tokens import Token


_uids = count()


def _next_uid():
    return next(_uids)


@dataclass
class Expr(ABC):
    """Superclass of every expression node."""
    uid: int = field(init=False, repr=False, compare=False, default_factory=_next_uid)


@dataclass
class Literal(Expr):
    value: object


@dataclass
class Grouping(Expr):
    expression: Expr


@dataclass
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass
class Logical(Expr):
    """Short-circuiting `and`/`or`."""
    left: Expr
    operator: Token
    right: Expr


@dataclass
class Variable(Expr):
    name: Token


@dataclass
class Assign(Expr):
    name: Token
    value: Expr


@dataclass
class Call(Expr):
    """paren is the closing parenthesis, kept to locate runtime errors raised by the call."""
    callee: Expr
    paren: Token
    arguments: List[Expr]


@dataclass
class FunctionExpr(Expr):
    """Anonymous function literal. Named function declarations wrap one of these too."""
    params: List[Token]
    body: List["Stmt"]


@dataclass
class Stmt(ABC):
    """Superclass of every statement node."""


@dataclass
class ExprStmt(Stmt):
    expression: Expr


@dataclass
class Print(Stmt):
    expression: Expr


@dataclass
class Var(Stmt):
    name: Token
    initializer: Optional[Expr] = None


@dataclass
class Block(Stmt):
    statements: List[Stmt]


@dataclass
class If(Stmt):
    keyword: Token
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


@dataclass
class While(Stmt):
    keyword: Token
    condition: Expr
    body: Stmt


class FlowKind(Enum):
    BREAK = "break"


@dataclass
class ControlFlow(Stmt):
    kind: FlowKind = FlowKind.BREAK
    keyword: Optional[Token] = None


@dataclass
class Function(Stmt):
    name: Token
    function: FunctionExpr


@dataclass
class Return(Stmt):
    keyword: Token
    value: Optional[Expr] = None
