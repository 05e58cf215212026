"""
Error reporting for Dara with source-aware messages
Parse errors are plain dictionaries rendered by pure functions;
exception classes exist only for the driver boundary
"""

from typing import Dict, List, Optional


# ============================================================================
# PARSE ERROR RECORDS
# ============================================================================

def make_parse_error(
    message: str,
    line: int,
    column: int,
    expected: Optional[List[str]] = None,
    got: Optional[str] = None,
    context: Optional[str] = None,
    suggestions: Optional[List[str]] = None
) -> Dict:
    """One parse error as a plain record; list fields default to empty"""
    return dict(
        message=message, line=line, column=column,
        expected=list(expected or ()), got=got,
        context=context, suggestions=list(suggestions or ()),
    )


def format_parse_error(error: Dict, filename: str = "<input>") -> str:
    """Render as `file:line:column: message` followed by detail lines"""
    lines = [f"{filename}:{error['line']}:{error['column']}: {error['message']}"]
    if error['context']:
        lines.append(error['context'])
    lines.extend(f"  hint: {suggestion}" for suggestion in error['suggestions'])
    return "\n".join(lines)


# ============================================================================
# SOURCE CONTEXT AND HINTS
# ============================================================================

def get_context_lines(source_text: str, line_num: int, col_num: int, context_lines: int = 1) -> str:
    """Numbered source lines around `line_num`, with a caret under `col_num`"""
    lines = source_text.split('\n')
    first = max(1, line_num - context_lines)
    last = min(len(lines), line_num + context_lines)
    width = len(str(last))

    rendered = []
    for number in range(first, last + 1):
        rendered.append(f"  {number:>{width}} | {lines[number - 1]}")
        if number == line_num:
            rendered.append(f"  {'':>{width}} | {' ' * (col_num - 1)}^")
    return '\n'.join(rendered)


# Message fragment -> hint; {got} is the offending token text
HINTS = (
    ("no prefix parse function for ILLEGAL", "'{got}' is not part of Dara; check for typos or an unclosed quote"),
    ("unterminated block", "every '{{' needs a matching '}}'"),
    ("expected next token to be IDENT", "names start with a letter or underscore"),
    ("no prefix parse function for ==", "declare with ':=' and compare with '=='"),
    ("no prefix parse function for ;", "the statement ended before its value"),
)


def generate_suggestions(error: Dict) -> List[str]:
    got = error['got'] or ""
    return [hint.format(got=got) for fragment, hint in HINTS if fragment in error['message']]


def enhance_parse_error(error: Dict, source_text: str) -> Dict:
    """Copy of `error` with source context and hints filled in"""
    enhanced = dict(error, suggestions=generate_suggestions(error))
    if source_text and error['line'] > 0:
        enhanced['context'] = get_context_lines(source_text, error['line'], error['column'])
    return enhanced


# ============================================================================
# EXCEPTION CLASSES (driver boundary)
# ============================================================================

class DaraParseError(Exception):
    """All grammar violations of one source unit"""
    def __init__(self, errors: List[str], details: Optional[List[Dict]] = None,
                 source_text: str = "", filename: str = "<input>"):
        self.errors = list(errors)
        self.details = list(details or [])
        self.source_text = source_text
        self.filename = filename
        super().__init__("; ".join(self.errors))

    def __str__(self) -> str:
        if not self.details:
            return '\n'.join(f"{self.filename}: {msg}" for msg in self.errors)
        return '\n'.join(
            format_parse_error(enhance_parse_error(detail, self.source_text), self.filename)
            for detail in self.details
        )


class DaraRuntimeError(Exception):
    """Evaluation ended in an error value"""
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class DaraStackOverflowError(DaraRuntimeError):
    """Evaluation or parsing exhausted the host call stack"""
