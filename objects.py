"""
Dara runtime values
Numbers, strings, booleans, nil, functions and the two control-flow markers
"""

from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Tuple

from ast_nodes import BlockStatement, Identifier


class Object:
  """Base for every runtime value"""
  type_name: ClassVar[str] = "OBJECT"

  def describe(self) -> str:
    raise NotImplementedError


def format_number(value: float) -> str:
  """Shortest round-trip rendering; integral values drop the '.0'"""
  value = float(value)
  if value.is_integer() and abs(value) < 1e16:
    return str(int(value))
  return repr(value)


@dataclass(frozen=True)
class Number(Object):
  type_name: ClassVar[str] = "NUMBER"
  value: float

  def describe(self) -> str:
    return format_number(self.value)


@dataclass(frozen=True)
class String(Object):
  type_name: ClassVar[str] = "STRING"
  value: str

  def describe(self) -> str:
    return self.value


@dataclass(frozen=True)
class Boolean(Object):
  type_name: ClassVar[str] = "BOOLEAN"
  value: bool

  def describe(self) -> str:
    return "true" if self.value else "false"


@dataclass(frozen=True)
class Nil(Object):
  type_name: ClassVar[str] = "NIL"

  def describe(self) -> str:
    return "nil"


@dataclass(frozen=True, eq=False)
class Function(Object):
  """User function; `env` is the defining environment, shared by reference"""
  type_name: ClassVar[str] = "FUNCTION"
  parameters: Tuple[Identifier, ...]
  body: BlockStatement
  env: Any = field(repr=False)

  def describe(self) -> str:
    params = ", ".join(p.value for p in self.parameters)
    return f"fn({params}) {self.body}"


@dataclass(frozen=True, eq=False)
class Builtin(Object):
  type_name: ClassVar[str] = "BUILTIN"
  name: str
  func: Callable[..., Object] = field(repr=False)

  def describe(self) -> str:
    return f"builtin function {self.name}"


@dataclass(frozen=True)
class ReturnSignal(Object):
  """Unwinds blocks up to the nearest call boundary"""
  type_name: ClassVar[str] = "RETURN"
  value: Object

  def describe(self) -> str:
    return self.value.describe()


@dataclass(frozen=True)
class Error(Object):
  type_name: ClassVar[str] = "ERROR"
  message: str

  def describe(self) -> str:
    return f"ERROR: {self.message}"


# Shared singletons
TRUE = Boolean(True)
FALSE = Boolean(False)
NIL = Nil()


def native_bool_to_boolean(value: bool) -> Boolean:
  return TRUE if value else FALSE


def is_truthy(obj: Object) -> bool:
  """Nil and false are falsy; everything else is truthy"""
  if isinstance(obj, Nil):
    return False
  if isinstance(obj, Boolean):
    return obj.value
  return True


def is_error(obj: Object) -> bool:
  return isinstance(obj, Error)
