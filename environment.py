"""
Dara runtime environments
Chained name -> value stores implementing lexical scope and closure capture
"""

from typing import Dict, Iterator, Optional, Tuple

from objects import Object


class Environment:
  """One scope: its own bindings plus an optional enclosing scope"""

  def __init__(self, outer: Optional['Environment'] = None):
    self.store: Dict[str, Object] = {}
    self.outer = outer

  def get(self, name: str) -> Optional[Object]:
    """Look up a name locally, then through each enclosing scope"""
    env = self
    while env is not None:
      if name in env.store:
        return env.store[name]
      env = env.outer
    return None

  def set(self, name: str, value: Object) -> Object:
    """Bind in this scope only, shadowing any outer binding"""
    self.store[name] = value
    return value

  def __contains__(self, name: str) -> bool:
    return self.get(name) is not None

  def bindings(self) -> Iterator[Tuple[str, Object]]:
    """Local bindings of this scope, in insertion order"""
    return iter(self.store.items())


def new_environment() -> Environment:
  """Create a top-level environment"""
  return Environment()


def new_child_environment(outer: Environment) -> Environment:
  """Create a scope enclosed by `outer` (used once per function call)"""
  return Environment(outer)
