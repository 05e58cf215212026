"""
Utilities module for the Dara interpreter
Error value builders shared by the evaluator and the standard library
"""

from typing import List

from objects import Error, Object


# ==================== ERROR MESSAGE BUILDERS ====================

def type_mismatch_error(left: Object, operator: str, right: Object) -> Error:
  """
  Operands of different types

  Examples:
    type_mismatch_error(Number(1), "+", TRUE) -> "type mismatch: NUMBER + BOOLEAN"
  """
  return Error(f"type mismatch: {left.type_name} {operator} {right.type_name}")


def unknown_prefix_error(operator: str, right: Object) -> Error:
  return Error(f"unknown operator: {operator}{right.type_name}")


def unknown_infix_error(left: Object, operator: str, right: Object) -> Error:
  return Error(f"unknown operator: {left.type_name} {operator} {right.type_name}")


def arity_error(expected: int, got: int) -> Error:
  """
  Generate arity mismatch error

  Args:
    expected: Expected number of arguments
    got: Actual number of arguments
  """
  return Error(f"wrong number of arguments: want={expected}, got={got}")


def not_a_function_error(value: Object) -> Error:
  return Error(f"not a function: {value.type_name}")


def identifier_not_found_error(name: str) -> Error:
  return Error(f"identifier not found: {name}")


def numeric_overflow_error(left: Object, operator: str, right: Object) -> Error:
  """
  Arithmetic result outside the finite float range

  Examples:
    numeric_overflow_error(Number(1e308), "*", Number(10)) -> "numeric overflow: 1e+308 * 10"
  """
  return Error(f"numeric overflow: {left.describe()} {operator} {right.describe()}")


# ==================== VALIDATION UTILITIES ====================

def validate_arity(args: List[Object], expected: int):
  """Return an arity Error when the argument count is wrong, else None"""
  if len(args) != expected:
    return arity_error(expected, len(args))
  return None
