"""
Dara Standard Library
Built-in functions resolved after the environment chain comes up empty
"""

from types import MappingProxyType
from typing import Callable, List, Mapping, Optional

from objects import NIL, Builtin, Error, Number, Object, String
from utilities import validate_arity


# ============================================================================
# PRINT FUNCTIONS
# ============================================================================

def dara_puts(*args: Object) -> Object:
  """Print each value on its own line"""
  for arg in args:
    print(arg.describe())
  return NIL


def dara_str(*args: Object) -> Object:
  """Convert value to its display string"""
  error = validate_arity(list(args), 1)
  if error:
    return error
  return String(args[0].describe())


# ============================================================================
# INTROSPECTION FUNCTIONS
# ============================================================================

def dara_len(*args: Object) -> Object:
  """Get length of a string"""
  error = validate_arity(list(args), 1)
  if error:
    return error

  value = args[0]
  if isinstance(value, String):
    return Number(float(len(value.value)))
  return Error(f'argument to "len" not supported, got {value.type_name}')


def dara_type(*args: Object) -> Object:
  """Name of the value's runtime type"""
  error = validate_arity(list(args), 1)
  if error:
    return error
  return String(args[0].type_name)


# ============================================================================
# BUILT-IN FUNCTION REGISTRY
# ============================================================================

def make_builtin_function(name: str, func: Callable[..., Object]) -> Builtin:
  """Create a built-in function value"""
  return Builtin(name, func)


BUILTIN_FUNCTIONS: Mapping[str, Builtin] = MappingProxyType({
  "len": make_builtin_function("len", dara_len),
  "puts": make_builtin_function("puts", dara_puts),
  "str": make_builtin_function("str", dara_str),
  "type": make_builtin_function("type", dara_type),
})


def get_builtin_function(name: str) -> Optional[Builtin]:
  """Get a built-in function by name"""
  return BUILTIN_FUNCTIONS.get(name)


def list_builtin_functions() -> List[str]:
  """List all available built-in functions"""
  return list(BUILTIN_FUNCTIONS.keys())
