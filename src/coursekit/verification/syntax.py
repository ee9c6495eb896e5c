"""
Code Block Syntax Validators.

Lesson listings are never executed, but each one must at least parse in
the language its fence declares. A validator takes the block's code and
returns None, or a SyntaxIssue whose line is relative to the block.
"""

import ast
import json
import re
import shlex
import tomllib
from collections.abc import Callable
from dataclasses import dataclass

import yaml


@dataclass(frozen=True)
class SyntaxIssue:
    """Syntax error inside a code block.

    Attributes:
        line: 1-based line within the block
        message: Parser's description of the problem
    """

    line: int
    message: str


SyntaxValidator = Callable[[str], SyntaxIssue | None]

TOML_POSITION = re.compile(r"at line (\d+)")


def validate_python(code: str) -> SyntaxIssue | None:
    try:
        ast.parse(code)
    except SyntaxError as e:
        return SyntaxIssue(line=e.lineno or 1, message=e.msg)
    except ValueError as e:
        # NUL bytes raise ValueError before Python 3.12
        return SyntaxIssue(line=1, message=str(e))
    return None


def validate_json(code: str) -> SyntaxIssue | None:
    try:
        json.loads(code)
    except json.JSONDecodeError as e:
        return SyntaxIssue(line=e.lineno, message=e.msg)
    return None


def validate_yaml(code: str) -> SyntaxIssue | None:
    try:
        for _ in yaml.safe_load_all(code):
            pass
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line = mark.line + 1 if mark is not None else 1
        problem = getattr(e, "problem", None) or str(e)
        return SyntaxIssue(line=line, message=problem)
    return None


def validate_toml(code: str) -> SyntaxIssue | None:
    try:
        tomllib.loads(code)
    except tomllib.TOMLDecodeError as e:
        match = TOML_POSITION.search(str(e))
        line = int(match.group(1)) if match else 1
        return SyntaxIssue(line=line, message=str(e))
    return None


def _tokenize_shell(code: str) -> SyntaxIssue | None:
    """Split a shell script into words; quotes may span lines."""
    lexer = shlex.shlex(code, posix=True)
    lexer.whitespace_split = True
    start = lexer.lineno
    try:
        while True:
            start = lexer.lineno
            if lexer.get_token() is None:
                return None
    except ValueError as e:
        return SyntaxIssue(line=start, message=str(e))


def validate_shell(code: str) -> SyntaxIssue | None:
    return _tokenize_shell(code)


def _prompted_commands(code: str, prompt: str) -> list[tuple[int, str]]:
    """Commands typed after a prompt, continuation lines joined; output is skipped."""
    result: list[tuple[int, str]] = []
    pending = ""
    start = 0
    continuing = False
    for number, raw in enumerate(code.splitlines(), start=1):
        line = raw.rstrip()
        if not continuing:
            stripped = line.lstrip()
            if not stripped.startswith(prompt.strip()):
                continue
            line = stripped[len(prompt.strip()):].lstrip()
            start = number
            pending = ""
        if line.endswith("\\"):
            pending += line[:-1] + " "
            continuing = True
            continue
        pending += line
        continuing = False
        result.append((start, pending))
    if continuing:
        result.append((start, pending))
    return result


def validate_console(code: str) -> SyntaxIssue | None:
    for number, command in _prompted_commands(code, "$ "):
        issue = _tokenize_shell(command)
        if issue is not None:
            return SyntaxIssue(line=number + issue.line - 1, message=issue.message)
    return None


_CLOSERS = {")": "(", "]": "[", "}": "{"}


def check_delimiters(code: str, quotes: str, line_comment: str = "//") -> SyntaxIssue | None:
    """Check that brackets pair up and string literals close on their line.

    Used for query languages that have no parser in Python: C# LINQ index
    definitions and RQL queries.
    """
    stack: list[tuple[str, int]] = []
    line = 1
    i = 0
    while i < len(code):
        char = code[i]
        if char == "\n":
            line += 1
        elif code.startswith(line_comment, i):
            end = code.find("\n", i)
            i = len(code) if end == -1 else end
            continue
        elif char in quotes:
            i += 1
            while i < len(code) and code[i] not in (char, "\n"):
                i += 2 if code[i] == "\\" and code[i + 1:i + 2] not in ("", "\n") else 1
            if i >= len(code) or code[i] != char:
                return SyntaxIssue(line=line, message="Unterminated string literal")
        elif char in "([{":
            stack.append((char, line))
        elif char in _CLOSERS:
            if not stack or stack[-1][0] != _CLOSERS[char]:
                return SyntaxIssue(line=line, message=f"Unmatched '{char}'")
            stack.pop()
        i += 1
    if stack:
        opener, opened = stack[-1]
        return SyntaxIssue(line=opened, message=f"'{opener}' is never closed")
    return None


def validate_csharp(code: str) -> SyntaxIssue | None:
    return check_delimiters(code, quotes="\"'")


RQL_CLAUSE = re.compile(r"(from|declare|match|with)\b", re.IGNORECASE)


def validate_rql(code: str) -> SyntaxIssue | None:
    """An RQL query opens with from, declare, match or with."""
    for number, raw in enumerate(code.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("//"):
            continue
        if not RQL_CLAUSE.match(line):
            word = line.split()[0]
            return SyntaxIssue(line=number, message=f"Query cannot start with '{word}'")
        break
    return check_delimiters(code, quotes="\"'")


class SyntaxValidatorRegistry:
    """Maps language tags (and their aliases) to validators.

    Usage:
        registry = SyntaxValidatorRegistry.with_defaults()
        validator = registry.get("py")
        issue = validator("print('hi')") if validator else None
    """

    def __init__(self) -> None:
        self._validators: dict[str, SyntaxValidator] = {}

    @classmethod
    def with_defaults(cls) -> "SyntaxValidatorRegistry":
        """Registry with the built-in validators."""
        registry = cls()
        registry.register(validate_python, "python", "py", "python3")
        registry.register(validate_json, "json")
        registry.register(validate_yaml, "yaml", "yml")
        registry.register(validate_toml, "toml")
        registry.register(validate_shell, "bash", "sh", "shell")
        registry.register(validate_console, "console", "shell-session")
        registry.register(validate_csharp, "csharp", "cs", "c#")
        registry.register(validate_rql, "rql")
        return registry

    def register(self, validator: SyntaxValidator, *languages: str) -> None:
        """Register a validator under one or more language tags."""
        if not languages:
            raise ValueError("At least one language tag is required")
        for language in languages:
            self._validators[language.lower()] = validator

    def unregister(self, language: str) -> bool:
        """Remove a language tag. Returns True if it was registered."""
        return self._validators.pop(language.lower(), None) is not None

    def get(self, language: str) -> SyntaxValidator | None:
        return self._validators.get(language.lower())

    def is_supported(self, language: str) -> bool:
        return language.lower() in self._validators

    @property
    def languages(self) -> list[str]:
        return sorted(self._validators)
