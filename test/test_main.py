"""
Command line tests for Dara
REPL line handling, script execution and argument parsing
"""

import sys

import pytest
import main
from interpreter import create_interpreter


@pytest.fixture
def script(tmp_path):
  """Write Dara source to a temporary script file"""
  def _script(source, name="script.dara"):
    path = tmp_path / name
    path.write_text(source, encoding="utf-8")
    return str(path)
  return _script


class TestReplLines:
  """Test one REPL line at a time"""

  def test_prints_result(self, capsys):
    main.run_line("1 + 2", create_interpreter())
    assert capsys.readouterr().out == "3\n"

  def test_bindings_persist_across_lines(self, capsys):
    interpreter = create_interpreter()
    main.run_line("greet := fn(name) { 'hi ' + name }", interpreter)
    main.run_line("greet('dara')", interpreter)
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("fn(name)")
    assert lines[1] == "hi dara"

  def test_runtime_error(self, capsys):
    main.run_line("-true", create_interpreter())
    assert "ERROR: unknown operator: -BOOLEAN" in capsys.readouterr().out

  def test_parser_errors_are_listed(self, capsys):
    interpreter = create_interpreter()
    main.run_line("x := ); y := ;", interpreter)
    out = capsys.readouterr().out
    assert "parser errors:" in out
    assert "\tno prefix parse function for ) found" in out
    assert "\tno prefix parse function for ; found" in out
    assert list(interpreter.global_env.bindings()) == []

  def test_format_parser_errors(self):
    assert main.format_parser_errors(["a", "b"]) == "  parser errors:\n\ta\n\tb"

  def test_stack_overflow_keeps_session(self, capsys):
    interpreter = create_interpreter()
    main.run_line("x := 1; f := fn() { f() }", interpreter)
    main.run_line("f()", interpreter)
    main.run_line("x", interpreter)
    out = capsys.readouterr().out
    assert "stack overflow" in out
    assert out.splitlines()[-1] == "1"

  def test_deep_nesting_keeps_session(self, capsys):
    interpreter = create_interpreter()
    main.run_line("x := 1", interpreter)
    main.run_line("-" * 3000 + "1", interpreter)
    main.run_line("x", interpreter)
    out = capsys.readouterr().out
    assert "stack overflow: expression nested too deeply" in out
    assert out.splitlines()[-1] == "1"

  def test_oversized_literal_is_a_parser_error(self, capsys):
    main.run_line("1" + "0" * 400 + " % 2", create_interpreter())
    assert "could not parse 1000" in capsys.readouterr().out

  def test_show_env(self, capsys):
    interpreter = create_interpreter()
    main.show_env(interpreter)
    assert "(no user-defined bindings)" in capsys.readouterr().out
    main.run_line("answer := 42", interpreter)
    capsys.readouterr()
    main.show_env(interpreter)
    assert "  answer = 42" in capsys.readouterr().out


class TestInteractiveMode:
  """Test the REPL loop with scripted input"""

  def feed(self, monkeypatch, lines):
    answers = iter(lines)

    def fake_input(prompt):
      try:
        return next(answers)
      except StopIteration:
        raise EOFError
    monkeypatch.setattr("builtins.input", fake_input)
    monkeypatch.setattr(main, "setup_readline", lambda: None)

  def test_session(self, monkeypatch, capsys):
    self.feed(monkeypatch, ["x := 2", "", "x * 21", ":tokens x", ":env", "exit", "never"])
    main.run_interactive_mode()
    out = capsys.readouterr().out
    assert "42" in out
    assert "IDENT('x')" in out
    assert "  x = 2" in out

  def test_eof_says_goodbye(self, monkeypatch, capsys):
    self.feed(monkeypatch, [":ast a + b * c"])
    main.run_interactive_mode()
    out = capsys.readouterr().out
    assert "InfixExpression" in out
    assert "Goodbye!" in out


class TestScripts:
  """Test running script files"""

  def test_prints_final_value(self, script, capsys):
    main.run_script_file(script("x := 20\nx + 22\n"))
    assert capsys.readouterr().out == "42\n"

  def test_nil_result_prints_nothing(self, script, capsys):
    main.run_script_file(script("puts('side effect')\n"))
    assert capsys.readouterr().out == "side effect\n"

  def test_parse_error_exits_1(self, script, capsys):
    with pytest.raises(SystemExit) as exc_info:
      main.run_script_file(script("x := )\n"))
    assert exc_info.value.code == 1
    assert "no prefix parse function for ) found" in capsys.readouterr().out

  def test_runtime_error_exits_1(self, script, capsys):
    with pytest.raises(SystemExit) as exc_info:
      main.run_script_file(script("1 / 0\n"))
    assert exc_info.value.code == 1
    assert "ERROR: division by zero" in capsys.readouterr().out

  def test_stack_overflow_exits_2(self, script, capsys):
    with pytest.raises(SystemExit) as exc_info:
      main.run_script_file(script("f := fn(n) { f(n + 1) }\nf(0)\n"))
    assert exc_info.value.code == 2
    assert "stack overflow" in capsys.readouterr().out

  def test_deep_nesting_exits_2(self, script, capsys):
    with pytest.raises(SystemExit) as exc_info:
      main.run_script_file(script("x := " + "(" * 3000 + "1" + ")" * 3000 + "\n"))
    assert exc_info.value.code == 2
    assert "nested too deeply" in capsys.readouterr().out

  def test_missing_file_exits_1(self, tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
      main.run_script_file(str(tmp_path / "missing.dara"))
    assert exc_info.value.code == 1
    assert "not found" in capsys.readouterr().out

  def test_show_tokens(self, script, capsys):
    main.show_tokens(script("x := 1"))
    out = capsys.readouterr().out.splitlines()
    assert len(out) == 4
    assert "IDENT('x')" in out[0]
    assert out[-1].strip().endswith("EOF('')")


class TestArguments:
  """Test the argument parser and entry point"""

  def test_flags(self):
    args = main.create_arg_parser().parse_args(["--debug", "--recursion-limit", "5000", "a.dara"])
    assert args.debug
    assert args.recursion_limit == 5000
    assert args.script == "a.dara"
    assert not args.interactive

  def test_version(self, capsys):
    with pytest.raises(SystemExit):
      main.create_arg_parser().parse_args(["--version"])
    assert main.VERSION in capsys.readouterr().out

  def test_main_runs_script(self, script, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["dara", script("'hello' + ' world'")])
    main.main()
    assert capsys.readouterr().out == "hello world\n"

  def test_main_parse_only(self, script, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["dara", "--parse", script("1 + 2 * 3")])
    main.main()
    assert "Canonical form: (1 + (2 * 3))" in capsys.readouterr().out

  def test_main_missing_script(self, tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["dara", str(tmp_path / "nope.dara")])
    with pytest.raises(SystemExit) as exc_info:
      main.main()
    assert exc_info.value.code == 1
