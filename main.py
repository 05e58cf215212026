"""
Dara Programming Language - Main Entry Point
A small dynamically-typed expression language with first-class functions
"""

import sys
import argparse
from pathlib import Path
from typing import List
import os

from termcolor import colored

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from ast_nodes import pretty_print_ast
from error_handling import DaraParseError, DaraRuntimeError, DaraStackOverflowError
from interpreter import DaraInterpreter, create_debug_interpreter, create_interpreter
from lexer import lex
from objects import Error, Nil
from parsing import create_debug_parser, create_parser, parse
from stdlib import list_builtin_functions
from tokens import KEYWORDS

PROMPT = "→ "
VERSION = "Dara v0.3.0"


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      description='Dara Programming Language - dynamically typed, first-class functions',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s script.dara             # Run a Dara script
  %(prog)s -i                      # Interactive mode
  %(prog)s --tokens script.dara    # Show the token stream
  %(prog)s --parse script.dara     # Parse and show the AST
  %(prog)s --debug script.dara     # Run with debug output
  %(prog)s --recursion-limit 5000 script.dara
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Dara script file to execute'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--tokens',
      action='store_true',
      help='Tokenize file and show tokens (for debugging)'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse file and show AST (for debugging)'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for all stages'
  )

  parser.add_argument(
      '--recursion-limit',
      type=int,
      default=None,
      metavar='N',
      help='Host recursion limit used while evaluating'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


def error_text(message: str) -> str:
  return colored(message, "red")


def hint_text(message: str) -> str:
  return colored(message, "yellow")


def read_source(script_path: str) -> str:
  """Read a script, exiting with a readable message on I/O problems"""
  try:
    with open(script_path, 'r', encoding='utf-8') as f:
      return f.read()
  except FileNotFoundError:
    print(error_text(f"Error: Script file '{script_path}' not found"))
    print(hint_text("  Hint: Check the file path and make sure the file exists"))
    sys.exit(1)
  except PermissionError:
    print(error_text(f"Error: Permission denied reading '{script_path}'"))
    print(hint_text("  Hint: Make sure you have read permissions for this file"))
    sys.exit(1)
  except UnicodeDecodeError as e:
    print(error_text(f"Error: Cannot decode file '{script_path}': {e}"))
    print(hint_text("  Hint: Make sure the file is a text file with UTF-8 encoding"))
    sys.exit(1)


def show_tokens(script_path: str) -> None:
  """Tokenize a Dara script file and print one token per line"""
  source = read_source(script_path)
  for token in lex(source):
    print(f"{token.line:4d}:{token.column:<4d} {token}")


def parse_file(script_path: str, debug: bool = False) -> None:
  """Parse a Dara script file and show the AST"""
  parser = create_debug_parser() if debug else create_parser()
  source = read_source(script_path)

  try:
    print(f"Parsing {script_path}...")
    program = parser.parse_string(source, script_path)
  except DaraParseError as e:
    print(error_text(str(e)))
    sys.exit(1)
  except DaraStackOverflowError as e:
    print(error_text(f"Fatal: {e.message} while parsing '{script_path}'"))
    sys.exit(2)

  print(f"\nParsed {len(program.statements)} top-level statements:")
  print("=" * 50)
  print(pretty_print_ast(program))
  print(f"Canonical form: {program}")


def run_script_file(script_path: str, debug: bool = False) -> None:
  """Run a Dara script file with full interpretation"""
  parser = create_debug_parser() if debug else create_parser()
  interpreter = create_debug_interpreter() if debug else create_interpreter()
  source = read_source(script_path)

  try:
    if debug:
      print(f"Parsing {script_path}...")
    program = parser.parse_string(source, script_path)
    if debug:
      print(f"Parsed {len(program.statements)} statements")

    result = interpreter.interpret_program(program)
    if not isinstance(result, Nil):
      print(result.describe())

  except DaraParseError as e:
    print(error_text(f"Parse errors in '{script_path}':"))
    print(error_text(str(e)))
    sys.exit(1)
  except DaraStackOverflowError as e:
    print(error_text(f"Fatal: {e.message} while running '{script_path}'"))
    print(hint_text("  Hint: Look for unbounded recursion, or raise --recursion-limit"))
    sys.exit(2)
  except DaraRuntimeError as e:
    print(error_text(f"ERROR: {e.message}"))
    sys.exit(1)


def setup_readline():
  """Setup readline with history and auto-completion"""
  if not READLINE_AVAILABLE:
    return

  # Setup history file
  history_file = os.path.expanduser("~/.dara_history")
  try:
    readline.read_history_file(history_file)
  except (FileNotFoundError, PermissionError, OSError):
    pass  # First time, no history yet, or permission denied

  readline.set_history_length(1000)

  # Keywords, built-ins and REPL commands
  completions = sorted(KEYWORDS) + list_builtin_functions() + [
      ":tokens", ":ast", ":env", ":help", "exit"
  ]

  def completer(text, state):
    options = [cmd for cmd in completions if cmd.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")

  # Save history on exit
  import atexit
  atexit.register(readline.write_history_file, history_file)


def format_parser_errors(errors: List[str]) -> str:
  lines = ["  parser errors:"]
  for msg in errors:
    lines.append("\t" + msg)
  return "\n".join(lines)


def show_help() -> None:
  print("REPL Commands:")
  print("  :tokens <src>     - Show the token stream")
  print("  :ast <src>        - Show the parsed AST")
  print("  :env              - Show session bindings")
  print("  :help             - Show this help")
  print("  exit              - Exit REPL")
  print()
  print("Language features:")
  print("  x := 5                       - Declare")
  print("  x = 6                        - Assign (always in the current scope)")
  print("  add := fn(a, b) { a + b }    - Function literal")
  print("  add(1, 2)                    - Call")
  print("  if x < 5 { 1 } else { 2 }    - Conditional")


def show_env(interpreter: DaraInterpreter) -> None:
  print("Current environment:")
  bindings = list(interpreter.global_env.bindings())
  if not bindings:
    print("  (no user-defined bindings)")
    return
  for name, value in bindings:
    val_str = value.describe().replace('\n', ' ')
    if len(val_str) > 60:
      val_str = val_str[:57] + "..."
    print(f"  {name} = {val_str}")


def run_line(code: str, interpreter: DaraInterpreter) -> None:
  """Lex, parse and evaluate one line in the session environment"""
  try:
    program, errors = parse(lex(code), interpreter.debug)
    if errors:
      print(error_text(format_parser_errors(errors)))
      return
    result = interpreter.evaluate(program)
  except DaraStackOverflowError as e:
    print(error_text(f"Fatal: {e.message}"))
    return

  if isinstance(result, Error):
    print(error_text(result.describe()))
  else:
    print(result.describe())


def run_interactive_mode(debug: bool = False) -> None:
  """Run Dara in interactive mode with full interpretation"""
  print(f"{VERSION} - Interactive Mode")
  print("Type 'exit' to quit, ':help' for commands")
  if READLINE_AVAILABLE:
    print("Readline enabled: Use ↑/↓ for history, Tab for completion")
  if debug:
    print("Debug mode enabled")
  print()

  setup_readline()

  # One environment for the whole session
  interpreter = create_debug_interpreter() if debug else create_interpreter()

  while True:
    try:
      code = input(PROMPT)
    except (KeyboardInterrupt, EOFError):
      print("\nGoodbye!")
      break

    stripped = code.strip()
    if stripped == "exit":
      break
    if not stripped:
      continue

    if stripped.startswith(":tokens "):
      for token in lex(stripped[len(":tokens "):]):
        print(f"  {token}")
    elif stripped.startswith(":ast "):
      try:
        program, errors = parse(lex(stripped[len(":ast "):]))
      except DaraStackOverflowError as e:
        print(error_text(f"Fatal: {e.message}"))
        continue
      if errors:
        print(error_text(format_parser_errors(errors)))
      else:
        print(pretty_print_ast(program), end="")
    elif stripped == ":env":
      show_env(interpreter)
    elif stripped == ":help":
      show_help()
    else:
      run_line(code, interpreter)


def show_language_info() -> None:
  """Show Dara language information"""
  print("Dara Programming Language")
  print("=" * 50)
  print("A small dynamically-typed language with:")
  print("• Numbers, strings, booleans and nil")
  print("• First-class functions and closures")
  print("• if / else if / else chains")
  print()


def main() -> None:
  """Main entry point for Dara"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args()

  if args.recursion_limit is not None:
    sys.setrecursionlimit(args.recursion_limit)

  if len(sys.argv) == 1:
    # No arguments - show info and start interactive mode
    show_language_info()
    run_interactive_mode(debug=False)
    return

  if args.script:
    if not Path(args.script).exists():
      print(error_text(f"Error: Script file '{args.script}' does not exist"))
      sys.exit(1)

    if args.tokens:
      show_tokens(args.script)
    elif args.parse:
      parse_file(args.script, debug=args.debug)
    else:
      run_script_file(args.script, debug=args.debug)

  elif args.interactive:
    run_interactive_mode(debug=args.debug)

  else:
    arg_parser.print_help()
    print()
    show_language_info()


if __name__ == "__main__":
  main()
