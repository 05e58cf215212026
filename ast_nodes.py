"""
Dara abstract syntax tree
Immutable statement and expression nodes produced by the parser
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from tokens import Token


class Node:
    """Base for every AST node; each node keeps its leading token"""
    token: Token

    def token_literal(self) -> str:
        return self.token.literal


class Statement(Node):
    pass


class Expression(Node):
    pass


# ============================================================================
# EXPRESSIONS
# ============================================================================

@dataclass(frozen=True)
class Identifier(Expression):
    token: Token
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class NumberLiteral(Expression):
    token: Token
    value: float

    def __str__(self) -> str:
        return self.token.literal


@dataclass(frozen=True)
class StringLiteral(Expression):
    token: Token
    value: str

    def __str__(self) -> str:
        quote = "'" if '"' in self.value else '"'
        return f"{quote}{self.value}{quote}"


@dataclass(frozen=True)
class Boolean(Expression):
    token: Token
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Nil(Expression):
    token: Token

    def __str__(self) -> str:
        return "nil"


@dataclass(frozen=True)
class PrefixExpression(Expression):
    token: Token
    operator: str
    right: Expression

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


@dataclass(frozen=True)
class InfixExpression(Expression):
    token: Token
    left: Expression
    operator: str
    right: Expression

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    token: Token
    parameters: Tuple[Identifier, ...]
    body: 'BlockStatement'

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {self.body}"


@dataclass(frozen=True)
class CallExpression(Expression):
    token: Token
    function: Expression
    arguments: Tuple[Expression, ...]

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


# ============================================================================
# STATEMENTS
# ============================================================================

@dataclass(frozen=True)
class ExpressionStatement(Statement):
    token: Token
    expression: Expression

    def __str__(self) -> str:
        return str(self.expression)


@dataclass(frozen=True)
class DeclareStatement(Statement):
    """`name := value` or `let name = value`"""
    token: Token
    name: Identifier
    value: Expression

    def __str__(self) -> str:
        return f"{self.name} := {self.value}"


@dataclass(frozen=True)
class AssignStatement(Statement):
    token: Token
    name: Identifier
    value: Expression

    def __str__(self) -> str:
        return f"{self.name} = {self.value}"


@dataclass(frozen=True)
class ReturnStatement(Statement):
    token: Token
    return_value: Expression

    def __str__(self) -> str:
        return f"return {self.return_value}"


@dataclass(frozen=True)
class BlockStatement(Statement):
    token: Token
    statements: Tuple[Statement, ...]

    def __str__(self) -> str:
        if not self.statements:
            return "{ }"
        return "{ " + "; ".join(str(s) for s in self.statements) + " }"


@dataclass(frozen=True)
class IfStatement(Statement):
    """Alternative is a terminal block or the next `else if` link"""
    token: Token
    condition: Expression
    consequence: BlockStatement
    alternative: Optional[Union[BlockStatement, 'IfStatement']] = None

    def __str__(self) -> str:
        result = f"if {self.condition} {self.consequence}"
        if self.alternative is not None:
            result += f" else {self.alternative}"
        return result


@dataclass(frozen=True)
class Program(Node):
    """Ordered top-level statements; the parser's only output"""
    statements: Tuple[Statement, ...]

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def __str__(self) -> str:
        """
        Statements are joined with no separator, so `a; -b` prints as
        `a(-b)`. Only a single statement renders back to the same tree.
        """
        return "".join(str(s) for s in self.statements)


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================

def pretty_print_ast(node: Node, indent: int = 0) -> str:
    """Pretty print an AST node tree for debugging"""
    pad = "  " * indent
    if isinstance(node, Program):
        header, children = "Program", list(node.statements)
    elif isinstance(node, BlockStatement):
        header, children = "BlockStatement", list(node.statements)
    elif isinstance(node, IfStatement):
        header = "IfStatement"
        children = [node.condition, node.consequence]
        if node.alternative is not None:
            children.append(node.alternative)
    elif isinstance(node, FunctionLiteral):
        params = ", ".join(p.value for p in node.parameters)
        header, children = f"FunctionLiteral({params})", [node.body]
    elif isinstance(node, CallExpression):
        header, children = "CallExpression", [node.function, *node.arguments]
    elif isinstance(node, InfixExpression):
        header, children = f"InfixExpression({node.operator})", [node.left, node.right]
    elif isinstance(node, PrefixExpression):
        header, children = f"PrefixExpression({node.operator})", [node.right]
    elif isinstance(node, (DeclareStatement, AssignStatement)):
        header, children = f"{type(node).__name__}({node.name.value})", [node.value]
    elif isinstance(node, ReturnStatement):
        header, children = "ReturnStatement", [node.return_value]
    elif isinstance(node, ExpressionStatement):
        header, children = "ExpressionStatement", [node.expression]
    else:
        header, children = f"{type(node).__name__}({node})", []

    result = f"{pad}{header}\n"
    for child in children:
        result += pretty_print_ast(child, indent + 1)
    return result
