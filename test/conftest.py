"""
Test configuration for Dara tests
"""

import pytest
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from environment import new_environment
from interpreter import evaluate
from lexer import lex
from parsing import parse


@pytest.fixture
def run():
  """Lex, parse and evaluate source in a fresh environment"""
  def _run(source, env=None):
    program, errors = parse(lex(source))
    assert errors == [], f"parser errors: {errors}"
    return evaluate(program, env if env is not None else new_environment())
  return _run
