"""URI templates (RFC 6570 expressions) used to match resource URIs."""

from __future__ import annotations

import re
import string
from dataclasses import dataclass
from urllib.parse import unquote

_UNRESERVED = frozenset(string.ascii_letters + string.digits + "-._~")
_RESERVED = frozenset(":/?#[]@!$&'()*+,;=")
_OPERATOR_CHARS = "+#./;?&"
_VARSPEC = re.compile(r"^([A-Za-z0-9_%][A-Za-z0-9_.%]*)(?::([1-9][0-9]{0,3})|(\*))?$")


@dataclass(frozen=True)
class _Operator:
    first: str
    sep: str
    named: bool
    allow_reserved: bool
    bare_name: bool  # ";" style: a name with an empty value carries no "="


_OPERATORS = {
    "": _Operator("", ",", False, False, False),
    "+": _Operator("", ",", False, True, False),
    "#": _Operator("#", ",", False, True, False),
    ".": _Operator(".", ".", False, False, False),
    "/": _Operator("/", "/", False, False, False),
    ";": _Operator(";", ";", True, False, True),
    "?": _Operator("?", "&", True, False, False),
    "&": _Operator("&", "&", True, False, False),
}


@dataclass(frozen=True)
class _VarSpec:
    name: str
    explode: bool
    prefix: int | None


@dataclass(frozen=True)
class _Capture:
    group: str
    spec: _VarSpec
    operator: _Operator


class URITemplate:
    """A parsed URI template that can test and decompose concrete URIs."""

    def __init__(self, raw: str) -> None:
        self.raw = raw
        self._captures: list[_Capture] = []
        self._regex = re.compile(self._compile(raw))

    def __repr__(self) -> str:
        return f"URITemplate({self.raw!r})"

    def __str__(self) -> str:
        return self.raw

    def __eq__(self, other: object) -> bool:
        if isinstance(other, URITemplate):
            return self.raw == other.raw
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.raw)

    @property
    def regex(self) -> re.Pattern[str]:
        """The compiled pattern that a matching URI must fully satisfy."""
        return self._regex

    @property
    def variables(self) -> tuple[str, ...]:
        """Variable names in the order they appear in the template."""
        return tuple(capture.spec.name for capture in self._captures)

    def matches(self, uri: str) -> bool:
        """Return True if the whole URI fits this template."""
        return self._regex.fullmatch(uri) is not None

    def match(self, uri: str) -> dict[str, list[str]] | None:
        """Return the decoded values of each variable, or None if the URI does not fit."""
        found = self._regex.fullmatch(uri)
        if found is None:
            return None
        values: dict[str, list[str]] = {}
        for capture in self._captures:
            text = found.group(capture.group)
            if text is None:
                continue
            if capture.spec.explode:
                items = text.split(capture.operator.sep)
                if capture.operator.named:
                    items = [item.partition("=")[2] for item in items]
            else:
                items = [text]
            values[capture.spec.name] = [unquote(item) for item in items]
        return values

    def _compile(self, raw: str) -> str:
        pieces = ["^"]
        pos = 0
        while pos < len(raw):
            start = raw.find("{", pos)
            close = raw.find("}", pos)
            if start == -1:
                if close != -1:
                    raise ValueError(f"unexpected '}}' in URI template {raw!r}")
                pieces.append(re.escape(raw[pos:]))
                break
            if close != -1 and close < start:
                raise ValueError(f"unexpected '}}' in URI template {raw!r}")
            end = raw.find("}", start)
            if end == -1:
                raise ValueError(f"unterminated expression in URI template {raw!r}")
            pieces.append(re.escape(raw[pos:start]))
            pieces.append(self._expression(raw[start + 1 : end], raw))
            pos = end + 1
        pieces.append("$")
        return "".join(pieces)

    def _expression(self, body: str, raw: str) -> str:
        if body and body[0] in _OPERATOR_CHARS:
            operator, body = _OPERATORS[body[0]], body[1:]
        else:
            operator = _OPERATORS[""]
        if not body:
            raise ValueError(f"empty expression in URI template {raw!r}")
        specs = [self._varspec(text, raw) for text in body.split(",")]
        multiple = len(specs) > 1
        patterns = [self._variable(operator, spec, multiple) for spec in specs]
        sep = re.escape(operator.sep)
        inner = patterns[0] + "".join(f"(?:{sep}{p})?" for p in patterns[1:])
        if operator.first:
            return f"(?:{re.escape(operator.first)}{inner})?"
        return inner

    @staticmethod
    def _varspec(text: str, raw: str) -> _VarSpec:
        parsed = _VARSPEC.match(text)
        if parsed is None:
            raise ValueError(f"invalid variable {text!r} in URI template {raw!r}")
        name, prefix, explode = parsed.groups()
        return _VarSpec(name, explode is not None, int(prefix) if prefix else None)

    def _variable(self, operator: _Operator, spec: _VarSpec, multiple: bool) -> str:
        group = f"v{len(self._captures)}"
        self._captures.append(_Capture(group, spec, operator))

        chars = set(_UNRESERVED)
        if operator.allow_reserved:
            chars |= _RESERVED
        if spec.explode or multiple:
            chars.discard(operator.sep)
        char_class = "[" + "".join(re.escape(c) for c in sorted(chars)) + "]"
        unit = f"(?:{char_class}|%[0-9A-Fa-f]{{2}})"
        value = f"{unit}{{0,{spec.prefix}}}" if spec.prefix else f"{unit}*"
        name = re.escape(spec.name)

        if spec.explode:
            if operator.named:
                item = f"{name}(?:={value})?" if operator.bare_name else f"{name}={value}"
            else:
                item = value
            return f"(?P<{group}>{item}(?:{re.escape(operator.sep)}{item})*)"
        if operator.named:
            if operator.bare_name:
                return f"{name}(?:=(?P<{group}>{value}))?"
            return f"{name}=(?P<{group}>{value})"
        return f"(?P<{group}>{value})"