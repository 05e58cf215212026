"""
Dara Interpreter
Tree-walking evaluator: every node evaluates to a runtime Object.
Errors and returns are ordinary values that unwind through the recursion.
"""

from types import MappingProxyType
from typing import Callable, List, Mapping, Optional
import math
import operator

import ast_nodes as nodes
from environment import Environment, new_child_environment, new_environment
from error_handling import DaraRuntimeError, DaraStackOverflowError
from objects import (
  FALSE, NIL, TRUE, Builtin, Error, Function, Number, Object, ReturnSignal,
  String, is_error, is_truthy, native_bool_to_boolean
)
from stdlib import get_builtin_function
from utilities import (
  identifier_not_found_error,
  not_a_function_error,
  numeric_overflow_error,
  type_mismatch_error,
  unknown_infix_error,
  unknown_prefix_error,
  validate_arity
)


# ============================================================================
# BUILT-IN OPERATIONS
# ============================================================================

NUMBER_ARITHMETIC: Mapping[str, Callable[[float, float], float]] = MappingProxyType({
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
})

NUMBER_COMPARISON: Mapping[str, Callable[[float, float], bool]] = MappingProxyType({
    '<': operator.lt,
    '>': operator.gt,
    '<=': operator.le,
    '>=': operator.ge,
    '==': operator.eq,
    '!=': operator.ne,
})


# ============================================================================
# DISPATCH
# ============================================================================

def eval_node(node: nodes.Node, env: Environment, debug: bool = False) -> Object:
  """Evaluate any AST node in the given environment"""
  if debug:
    print(f"Evaluating: {type(node).__name__}")

  # Statements
  if isinstance(node, nodes.Program):
    return eval_program(node, env, debug)
  elif isinstance(node, nodes.ExpressionStatement):
    return eval_node(node.expression, env, debug)
  elif isinstance(node, (nodes.DeclareStatement, nodes.AssignStatement)):
    return eval_binding(node, env, debug)
  elif isinstance(node, nodes.ReturnStatement):
    return eval_return(node, env, debug)
  elif isinstance(node, nodes.BlockStatement):
    return eval_block(node, env, debug)
  elif isinstance(node, nodes.IfStatement):
    return eval_if(node, env, debug)

  # Expressions
  elif isinstance(node, nodes.Identifier):
    return eval_identifier(node, env)
  elif isinstance(node, nodes.NumberLiteral):
    return Number(node.value)
  elif isinstance(node, nodes.StringLiteral):
    return String(node.value)
  elif isinstance(node, nodes.Boolean):
    return native_bool_to_boolean(node.value)
  elif isinstance(node, nodes.Nil):
    return NIL
  elif isinstance(node, nodes.PrefixExpression):
    return eval_prefix(node, env, debug)
  elif isinstance(node, nodes.InfixExpression):
    return eval_infix(node, env, debug)
  elif isinstance(node, nodes.FunctionLiteral):
    return Function(node.parameters, node.body, env)
  elif isinstance(node, nodes.CallExpression):
    return eval_call(node, env, debug)

  raise TypeError(f"Unknown node type: {type(node).__name__}")


# ============================================================================
# STATEMENTS
# ============================================================================

def eval_program(program: nodes.Program, env: Environment, debug: bool = False) -> Object:
  result: Object = NIL

  for statement in program.statements:
    result = eval_node(statement, env, debug)

    if isinstance(result, ReturnSignal):
      return result.value
    if isinstance(result, Error):
      return result

  return result


def eval_block(block: nodes.BlockStatement, env: Environment, debug: bool = False) -> Object:
  """Evaluate statements in order; returns and errors stop the block unevaluated"""
  result: Object = NIL

  for statement in block.statements:
    result = eval_node(statement, env, debug)

    if isinstance(result, (ReturnSignal, Error)):
      return result

  return result


def eval_binding(node, env: Environment, debug: bool = False) -> Object:
  """
  Both `:=` and `=` write into the current scope's own store.
  Assignment never reaches an enclosing scope, so it shadows outer names.
  """
  value = eval_node(node.value, env, debug)
  if is_error(value):
    return value
  return env.set(node.name.value, value)


def eval_return(node: nodes.ReturnStatement, env: Environment, debug: bool = False) -> Object:
  value = eval_node(node.return_value, env, debug)
  if is_error(value):
    return value
  return ReturnSignal(value)


def eval_if(node: nodes.IfStatement, env: Environment, debug: bool = False) -> Object:
  """Branches run in the same environment; `if` opens no scope"""
  condition = eval_node(node.condition, env, debug)
  if is_error(condition):
    return condition

  if is_truthy(condition):
    return eval_node(node.consequence, env, debug)
  elif node.alternative is not None:
    return eval_node(node.alternative, env, debug)
  return NIL


# ============================================================================
# EXPRESSIONS
# ============================================================================

def eval_identifier(node: nodes.Identifier, env: Environment) -> Object:
  value = env.get(node.value)
  if value is not None:
    return value

  builtin = get_builtin_function(node.value)
  if builtin is not None:
    return builtin

  return identifier_not_found_error(node.value)


def eval_prefix(node: nodes.PrefixExpression, env: Environment, debug: bool = False) -> Object:
  right = eval_node(node.right, env, debug)
  if is_error(right):
    return right
  return eval_prefix_operator(node.operator, right)


def eval_prefix_operator(op: str, right: Object) -> Object:
  if op == '!':
    return native_bool_to_boolean(not is_truthy(right))
  if op == '-':
    if not isinstance(right, Number):
      return unknown_prefix_error(op, right)
    return Number(-right.value)
  return unknown_prefix_error(op, right)


def eval_infix(node: nodes.InfixExpression, env: Environment, debug: bool = False) -> Object:
  op = node.operator

  left = eval_node(node.left, env, debug)
  if is_error(left):
    return left

  # Logical operators short-circuit on the left operand's truthiness
  if op == '&&':
    if not is_truthy(left):
      return FALSE
    return eval_logical_operand(node.right, env, debug)
  if op == '||':
    if is_truthy(left):
      return TRUE
    return eval_logical_operand(node.right, env, debug)

  right = eval_node(node.right, env, debug)
  if is_error(right):
    return right

  return eval_infix_operator(op, left, right)


def eval_logical_operand(node: nodes.Expression, env: Environment, debug: bool = False) -> Object:
  value = eval_node(node, env, debug)
  if is_error(value):
    return value
  return native_bool_to_boolean(is_truthy(value))


def eval_infix_operator(op: str, left: Object, right: Object) -> Object:
  if isinstance(left, Number) and isinstance(right, Number):
    return eval_number_infix(op, left, right)

  # Equality is defined for every pair; differing variants are never equal
  if op == '==':
    return native_bool_to_boolean(left == right)
  if op == '!=':
    return native_bool_to_boolean(left != right)

  if isinstance(left, String) and isinstance(right, String):
    return eval_string_infix(op, left, right)
  if type(left) is not type(right):
    return type_mismatch_error(left, op, right)
  return unknown_infix_error(left, op, right)


def eval_number_infix(op: str, left: Number, right: Number) -> Object:
  if op in NUMBER_COMPARISON:
    return native_bool_to_boolean(NUMBER_COMPARISON[op](left.value, right.value))

  if op in NUMBER_ARITHMETIC:
    result = NUMBER_ARITHMETIC[op](left.value, right.value)
  elif op == '/':
    if right.value == 0:
      return Error("division by zero")
    result = left.value / right.value
  elif op == '%':
    if right.value == 0:
      return Error("modulo by zero")
    # Truncated remainder: the sign follows the dividend
    result = math.fmod(left.value, right.value)
  else:
    return unknown_infix_error(left, op, right)

  # Operands are finite; only overflow leaves the finite range
  if not math.isfinite(result):
    return numeric_overflow_error(left, op, right)
  return Number(result)


def eval_string_infix(op: str, left: String, right: String) -> Object:
  if op == '+':
    return String(left.value + right.value)
  return unknown_infix_error(left, op, right)


# ============================================================================
# FUNCTION APPLICATION
# ============================================================================

def eval_call(node: nodes.CallExpression, env: Environment, debug: bool = False) -> Object:
  function = eval_node(node.function, env, debug)
  if is_error(function):
    return function

  args = eval_expressions(node.arguments, env, debug)
  if len(args) == 1 and is_error(args[0]):
    return args[0]

  return apply_function(function, args, debug)


def eval_expressions(exprs, env: Environment, debug: bool = False) -> List[Object]:
  """Evaluate left to right in the caller's environment; an error stops the list"""
  result = []
  for expr in exprs:
    value = eval_node(expr, env, debug)
    if is_error(value):
      return [value]
    result.append(value)
  return result


def apply_function(function: Object, args: List[Object], debug: bool = False) -> Object:
  if isinstance(function, Function):
    error = validate_arity(args, len(function.parameters))
    if error:
      return error

    call_env = extend_function_env(function, args)
    result = eval_node(function.body, call_env, debug)
    return unwrap_return_value(result)

  if isinstance(function, Builtin):
    return function.func(*args)

  return not_a_function_error(function)


def extend_function_env(function: Function, args: List[Object]) -> Environment:
  """New scope enclosed by the closure, with parameters bound positionally"""
  env = new_child_environment(function.env)
  for param, arg in zip(function.parameters, args):
    env.set(param.value, arg)
  return env


def unwrap_return_value(result: Object) -> Object:
  if isinstance(result, ReturnSignal):
    return result.value
  return result


def evaluate(program: nodes.Node, env: Environment, debug: bool = False) -> Object:
  """Evaluate a Program (or any node) against an environment"""
  return eval_node(program, env, debug)


# ============================================================================
# FACTORY FUNCTIONS (for main.py)
# ============================================================================

class DaraInterpreter:
  """Holds one session environment that persists across evaluations"""

  def __init__(self, debug: bool = False):
    self.debug = debug
    self.global_env = new_environment()

  def evaluate(self, program: nodes.Node, env: Optional[Environment] = None) -> Object:
    """Evaluate and return the resulting Object, error values included"""
    try:
      return evaluate(program, env if env is not None else self.global_env, self.debug)
    except RecursionError as e:
      raise DaraStackOverflowError(
        "stack overflow: maximum recursion depth exceeded") from e

  def interpret_program(self, program: nodes.Node, env: Optional[Environment] = None) -> Object:
    """Evaluate, raising DaraRuntimeError when the result is an error value"""
    result = self.evaluate(program, env)
    if isinstance(result, Error):
      raise DaraRuntimeError(result.message)
    return result


def create_interpreter(debug: bool = False) -> DaraInterpreter:
  """Factory function returning an interpreter"""
  return DaraInterpreter(debug=debug)


def create_debug_interpreter() -> DaraInterpreter:
  """Factory function returning a debug interpreter"""
  return DaraInterpreter(debug=True)
