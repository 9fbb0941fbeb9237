"""Shared lexical scan of one file's text.

TextProfile computes every regex-derived quantity the estimators need, once,
lazily. Nothing here understands syntax: functions are found by declaration
patterns and their bodies by brace balancing (C-family) or indentation (def).
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from functools import cached_property

# ── Token patterns ─────────────────────────────────────────────────

IDENTIFIER_RE = re.compile(r"\b[A-Za-z_]\w*\b")
LONG_IDENTIFIER_RE = re.compile(r"\b[a-zA-Z_]\w{2,}\b")
WORD_RE = re.compile(r"\w+")

GENERIC_NAME_RE = re.compile(
    r"\b(?:temp|data|result|value|item|obj|arr|res|val|ret|tmp|output|input)\b"
)

BRANCH_KEYWORD_RE = re.compile(
    r"\b(?:if|else|elif|for|while|switch|case|catch|except|and|or)\b"
)
BRANCH_OPERATOR_RE = re.compile(r"&&|\|\||(?<![?.])\?(?![.?:])")

CONTROL_FLOW_RE = re.compile(r"\b(?:if|else|elif|for|while|do|switch|try|catch|except)\b")

MAGIC_NUMBER_RE = re.compile(r"(?<![.\w])\d{2,}(?![.\w])")
LONG_PARAMS_RE = re.compile(r"\([^)]{80,}\)")
CAMEL_RE = re.compile(r"[a-z][A-Z]")
SNAKE_RE = re.compile(r"[a-z]_[a-z]")

ASYNC_RE = re.compile(r"\basync\b|\bawait\b|\.then\(")
TRY_RE = re.compile(r"\btry\b")
CATCH_RE = re.compile(r"\b(?:catch|except)\b")

IMPORT_LINE_RE = re.compile(
    r"^\s*(?:import\b|from\s+\S+\s+import\b|#\s*include\b|using\s+[\w.]+\s*;|use\s+[\w:]+)"
)
REQUIRE_RE = re.compile(r"\brequire\s*\(")
EXPORT_RE = re.compile(r"\bexport\b|\bmodule\.exports\b|^\s*pub\s|^\s*public\s", re.MULTILINE)
PY_PUBLIC_DEF_RE = re.compile(r"^(?:async\s+def|def|class)\s+[A-Za-z]\w*", re.MULTILINE)

CALL_RE = re.compile(r"\b([A-Za-z_]\w*)\s*\(")

_PREPROCESSOR_RE = re.compile(r"#\s*(?:include|define|if|ifdef|ifndef|endif|else|pragma|undef)\b")
_COMMENT_MARKER_RE = re.compile(r"^(?://+|#+|/\*+|\*+/?)\s*")

NON_CALL_KEYWORDS = frozenset(
    {
        "if", "elif", "for", "while", "switch", "catch", "except", "function",
        "return", "def", "with", "sizeof", "typeof", "await", "yield", "not",
        "and", "or", "in", "super", "class", "fn", "func", "new",
    }
)

# Declaration patterns: (regex, body style). "brace" bodies are balanced
# from the first "{" after the signature; "indent" bodies run until the
# indentation returns to the declaration's level.
_FUNCTION_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bfunction\s*\*?\s*([A-Za-z_$][\w$]*)\s*\("), "brace"),
    (
        re.compile(
            r"\b(?:const|let|var)\s+([A-Za-z_$][\w$]*)\s*=\s*(?:async\s*)?"
            r"(?:function\b|\([^)]*\)\s*=>|[A-Za-z_$][\w$]*\s*=>)"
        ),
        "brace",
    ),
    (re.compile(r"^[ \t]*(?:async\s+)?def\s+([A-Za-z_]\w*[?!]?)", re.MULTILINE), "indent"),
    (re.compile(r"\bfunc\s+(?:\([^)]*\)\s*)?([A-Za-z_]\w*)\s*\("), "brace"),
    (re.compile(r"\bfn\s+([A-Za-z_]\w*)"), "brace"),
    (
        re.compile(
            r"^[ \t]*(?:public|private|protected|internal)\s+(?:static\s+)?"
            r"(?:[\w<>\[\]]+\s+)?([A-Za-z_]\w*)\s*\(",
            re.MULTILINE,
        ),
        "brace",
    ),
)

# How far past a declaration to look for its opening brace.
_SIGNATURE_WINDOW = 300


def brace_depth(text: str) -> int:
    """Maximum brace depth scanning left to right.

    Unmatched closing braces are tolerated; depth never drops below zero.
    """
    depth = 0
    max_depth = 0
    for ch in text:
        if ch == "{":
            depth += 1
            if depth > max_depth:
                max_depth = depth
        elif ch == "}":
            depth = max(depth - 1, 0)
    return max_depth


def count_branches(text: str) -> int:
    """Branch keywords plus logical/ternary operators."""
    return len(BRANCH_KEYWORD_RE.findall(text)) + len(BRANCH_OPERATOR_RE.findall(text))


def is_comment_line(stripped: str) -> bool:
    if stripped.startswith(("//", "/*", "*")):
        return True
    if stripped.startswith("#"):
        return not _PREPROCESSOR_RE.match(stripped) and not stripped.startswith("#!")
    return False


def comment_text(stripped: str) -> str:
    """Strip the comment marker(s) from a comment line."""
    return _COMMENT_MARKER_RE.sub("", stripped).strip()


@dataclass(frozen=True)
class FunctionSpan:
    """A declared function found by pattern matching."""

    name: str
    start_line: int
    body: str

    @property
    def line_count(self) -> int:
        return len([line for line in self.body.split("\n") if line.strip()])


@dataclass(frozen=True)
class TextProfile:
    """Lazily computed lexical view of a file's text."""

    text: str

    @classmethod
    def from_text(cls, text: str) -> "TextProfile":
        return cls(text)

    # ── Lines ────────────────────────────────────────────────────

    @cached_property
    def lines(self) -> list[str]:
        return self.text.split("\n")

    @property
    def total_lines(self) -> int:
        return max(len(self.lines), 1)

    @cached_property
    def code_lines(self) -> list[str]:
        """Stripped non-empty lines."""
        return [line.strip() for line in self.lines if line.strip()]

    @property
    def loc(self) -> int:
        return len(self.code_lines)

    @cached_property
    def comment_lines(self) -> list[str]:
        return [s for s in self.code_lines if is_comment_line(s)]

    @property
    def comment_ratio(self) -> float:
        return len(self.comment_lines) / self.total_lines

    @cached_property
    def line_lengths(self) -> list[int]:
        return [len(line) for line in self.lines]

    @cached_property
    def code_line_lengths(self) -> list[int]:
        return [len(line) for line in self.lines if line.strip()]

    @cached_property
    def max_indent(self) -> int:
        indents = [
            len(line.expandtabs(4)) - len(line.expandtabs(4).lstrip())
            for line in self.lines
            if line.strip()
        ]
        return max(indents, default=0)

    @cached_property
    def repeated_consecutive_lines(self) -> int:
        """Adjacent identical lines longer than 10 characters."""
        count = 0
        stripped = [line.strip() for line in self.lines]
        for prev, cur in zip(stripped, stripped[1:]):
            if len(prev) > 10 and prev == cur:
                count += 1
        return count

    # ── Tokens ───────────────────────────────────────────────────

    @cached_property
    def identifiers(self) -> list[str]:
        return IDENTIFIER_RE.findall(self.text)

    @cached_property
    def long_identifiers(self) -> list[str]:
        return LONG_IDENTIFIER_RE.findall(self.text)

    @cached_property
    def word_counts(self) -> Counter[str]:
        return Counter(WORD_RE.findall(self.text))

    @cached_property
    def generic_name_count(self) -> int:
        return len(GENERIC_NAME_RE.findall(self.text))

    @cached_property
    def branch_count(self) -> int:
        return count_branches(self.text)

    @cached_property
    def control_flow_count(self) -> int:
        return len(CONTROL_FLOW_RE.findall(self.text))

    @cached_property
    def magic_number_count(self) -> int:
        return len(MAGIC_NUMBER_RE.findall(self.text))

    @cached_property
    def long_param_list_count(self) -> int:
        return len(LONG_PARAMS_RE.findall(self.text))

    @cached_property
    def camel_case_count(self) -> int:
        return len(CAMEL_RE.findall(self.text))

    @cached_property
    def snake_case_count(self) -> int:
        return len(SNAKE_RE.findall(self.text))

    @cached_property
    def call_site_count(self) -> int:
        return sum(
            1 for name in CALL_RE.findall(self.text) if name not in NON_CALL_KEYWORDS
        )

    @property
    def uses_async(self) -> bool:
        return ASYNC_RE.search(self.text) is not None

    @property
    def has_error_handling(self) -> bool:
        return TRY_RE.search(self.text) is not None and CATCH_RE.search(self.text) is not None

    # ── Structure ────────────────────────────────────────────────

    @cached_property
    def max_brace_depth(self) -> int:
        return brace_depth(self.text)

    @cached_property
    def import_count(self) -> int:
        return sum(
            1
            for line in self.lines
            if IMPORT_LINE_RE.match(line) or REQUIRE_RE.search(line)
        )

    @cached_property
    def export_count(self) -> int:
        return len(EXPORT_RE.findall(self.text)) + len(PY_PUBLIC_DEF_RE.findall(self.text))

    @cached_property
    def functions(self) -> list[FunctionSpan]:
        return _extract_functions(self.text)

    @property
    def function_count(self) -> int:
        return len(self.functions)


def _extract_functions(text: str) -> list[FunctionSpan]:
    """Find declarations, drop overlapping matches, and slice out bodies."""
    matches: list[tuple[int, int, str, str]] = []
    for pattern, style in _FUNCTION_PATTERNS:
        for m in pattern.finditer(text):
            matches.append((m.start(), m.end(), m.group(1), style))
    matches.sort(key=lambda item: (item[0], -item[1]))

    spans: list[FunctionSpan] = []
    last_end = -1
    for start, end, name, style in matches:
        if start < last_end:
            continue
        last_end = end
        if style == "indent":
            body = _indented_body(text, start)
        else:
            body = _braced_body(text, end)
        spans.append(
            FunctionSpan(name=name, start_line=text.count("\n", 0, start) + 1, body=body)
        )
    return spans


def _braced_body(text: str, signature_end: int) -> str:
    """Text between the first "{" after the signature and its matching "}"."""
    window_end = signature_end + _SIGNATURE_WINDOW
    open_pos = text.find("{", signature_end, window_end)
    semicolon = text.find(";", signature_end, window_end)
    if open_pos == -1 or (semicolon != -1 and semicolon < open_pos):
        # expression body or bare declaration
        line_end = text.find("\n", signature_end)
        return text[signature_end: line_end if line_end != -1 else len(text)]

    depth = 0
    for pos in range(open_pos, len(text)):
        ch = text[pos]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[open_pos + 1: pos]
    return text[open_pos + 1:]


def _indented_body(text: str, decl_start: int) -> str:
    """Lines after the declaration that are indented deeper than it."""
    line_start = text.rfind("\n", 0, decl_start) + 1
    decl_line_end = text.find("\n", decl_start)
    if decl_line_end == -1:
        return ""
    decl_line = text[line_start:decl_line_end].expandtabs(4)
    decl_indent = len(decl_line) - len(decl_line.lstrip())

    body_lines: list[str] = []
    for line in text[decl_line_end + 1:].split("\n"):
        if not line.strip():
            body_lines.append(line)
            continue
        expanded = line.expandtabs(4)
        if len(expanded) - len(expanded.lstrip()) <= decl_indent:
            break
        body_lines.append(line)
    return "\n".join(body_lines).rstrip("\n")
