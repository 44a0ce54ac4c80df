"""Reader and writer for TYPO3 ``ext_emconf.php`` declaration files.

The file is PHP, but in practice it only ever assigns one array literal::

    <?php

    $EM_CONF[$_EXTKEY] = [
        'title' => 'My extension',
        'autoload' => ['classmap' => ['Classes']],
    ];

The reader understands that subset of PHP (array literals, strings, numbers,
booleans, null, comments and string concatenation) without executing code.
"""
from __future__ import annotations

import os
import re
from typing import Any, Dict, List, Tuple

from common.exceptions import DeclarationFileIsInvalid, FileDoesNotExist
from common.filesystem import dump_file

_TOKEN = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<comment>//[^\n]*|\#[^\n]*|/\*.*?\*/)
    |(?P<open_tag><\?php)
    |(?P<sq>'(?:[^'\\]|\\.)*')
    |(?P<dq>"(?:[^"\\]|\\.)*")
    |(?P<number>-?\d+(?:\.\d+)?)
    |(?P<variable>\$[A-Za-z_][A-Za-z0-9_]*)
    |(?P<ident>[A-Za-z_\\][A-Za-z0-9_\\]*)
    |(?P<arrow>=>)
    |(?P<punct>[\[\]\(\),;=.])
    """,
    re.VERBOSE | re.DOTALL,
)
_DQ_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", '"': '"', "$": "$", "0": "\0"}

Token = Tuple[str, str]


class _ParseError(ValueError):
    pass


def _tokenize(source: str) -> List[Token]:
    tokens: List[Token] = []
    position = 0
    while position < len(source):
        match = _TOKEN.match(source, position)
        if match is None:
            raise _ParseError(f"Unexpected character at offset {position}")
        kind = match.lastgroup
        if kind not in ("ws", "comment", "open_tag"):
            tokens.append((kind, match.group(kind)))
        position = match.end()
    return tokens


def _unquote(kind: str, raw: str) -> str:
    body = raw[1:-1]
    if kind == "sq":
        return re.sub(r"\\([\\'])", r"\1", body)
    return re.sub(r"\\(.)", lambda m: _DQ_ESCAPES.get(m.group(1), "\\" + m.group(1)), body)


class _Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.index = 0

    def peek(self) -> Token:
        if self.index >= len(self.tokens):
            return ("eof", "")
        return self.tokens[self.index]

    def take(self, value: str = None) -> Token:
        token = self.peek()
        if token[0] == "eof" or (value is not None and token[1].lower() != value):
            raise _ParseError(f"Expected {value or 'token'}, got {token[1]!r}")
        self.index += 1
        return token

    def find_assignment(self) -> None:
        """Advance to the value of the ``$EM_CONF[...] =`` assignment."""
        while self.peek()[0] != "eof":
            kind, value = self.take()
            if kind == "variable" and value == "$EM_CONF" and self.peek()[1] == "[":
                self.take("[")
                key_kind, _ = self.take()
                if key_kind not in ("variable", "sq", "dq"):
                    raise _ParseError("Unsupported $EM_CONF key")
                self.take("]")
                self.take("=")
                return
        raise _ParseError("No $EM_CONF assignment found")

    def value(self) -> Any:
        result = self._scalar_or_array()
        while self.peek()[1] == ".":
            self.take(".")
            right = self._scalar_or_array()
            if not isinstance(result, str) or not isinstance(right, str):
                raise _ParseError("Concatenation is only supported for strings")
            result += right
        return result

    def _scalar_or_array(self) -> Any:
        kind, raw = self.peek()
        if raw == "[":
            self.take("[")
            return self._elements("]")
        if kind == "ident" and raw.lower() == "array":
            self.take()
            self.take("(")
            return self._elements(")")
        if kind in ("sq", "dq"):
            self.take()
            return _unquote(kind, raw)
        if kind == "number":
            self.take()
            return float(raw) if "." in raw else int(raw)
        if kind == "ident" and raw.lower() in ("true", "false", "null"):
            self.take()
            return {"true": True, "false": False, "null": None}[raw.lower()]
        raise _ParseError(f"Unsupported expression {raw!r}")

    def _elements(self, closing: str) -> Any:
        items: List[Tuple[Any, Any]] = []
        keyed = False
        while self.peek()[1] != closing:
            first = self.value()
            if self.peek()[0] == "arrow":
                self.take("=>")
                items.append((first, self.value()))
                keyed = True
            else:
                items.append((None, first))
            if self.peek()[1] == ",":
                self.take(",")
            elif self.peek()[1] != closing:
                raise _ParseError(f"Expected , or {closing}")
        self.take(closing)

        if not keyed:
            return [value for _, value in items]
        result: Dict[Any, Any] = {}
        next_index = 0
        for key, value in items:
            if key is None:
                key = next_index
            if isinstance(key, int):
                next_index = max(next_index, key + 1)
            result[key] = value
        return result


def parse_ext_emconf(filename: str) -> Dict[str, Any]:
    """Return the extension configuration declared in ``filename``.

    Raises:
        FileDoesNotExist: If the file is missing.
        DeclarationFileIsInvalid: If no array is assigned to ``$EM_CONF``.
    """
    if not os.path.isfile(filename):
        raise FileDoesNotExist(filename)

    with open(filename, "r", encoding="utf-8") as handle:
        source = handle.read()

    try:
        parser = _Parser(_tokenize(source))
        parser.find_assignment()
        config = parser.value()
    except _ParseError as exc:
        raise DeclarationFileIsInvalid(filename, original_exception=exc) from exc

    if not isinstance(config, dict):
        if config == []:
            return {}
        raise DeclarationFileIsInvalid(filename)
    return config


def _export(value: Any, level: int) -> str:
    indent = "    " * (level + 1)
    closing_indent = "    " * level
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        lines = [f"{indent}{_export(item, level + 1)}," for item in value]
        return "[\n" + "\n".join(lines) + f"\n{closing_indent}]"
    if isinstance(value, dict):
        if not value:
            return "[]"
        lines = [
            f"{indent}{_export(key, level + 1)} => {_export(item, level + 1)},"
            for key, item in value.items()
        ]
        return "[\n" + "\n".join(lines) + f"\n{closing_indent}]"
    raise TypeError(f"Cannot export value of type {type(value).__name__}")


def dump_ext_emconf(filename: str, config: Dict[str, Any]) -> None:
    """Write ``config`` as ``ext_emconf.php``."""
    dump_file(filename, "<?php\n\n$EM_CONF[$_EXTKEY] = " + _export(config, 0) + ";\n")
