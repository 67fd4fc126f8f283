"""Path template handling.

Turns `{param}` placeholders into the forms the Kong scripts need:

- ``$(uri_captures.{param})`` for the request-transformer upstream URI,
- ``${param}`` for bash-interpolated URLs,
- ``(?<param>[^/]+)`` for regex route paths.
"""

import re

from kong_codegen.errors import MalformedPathError

CAPTURE_TEMPLATE = "$(uri_captures.{token})"

# Characters bash would still interpret inside a double-quoted string
SHELL_UNSAFE = frozenset("`\"\\$\n\r")


def tokenize_path(path: str) -> list[tuple[str, str]]:
    """Split a path template into ("literal", text) and ("param", "{name}") tokens.

    Raises MalformedPathError on an unmatched, nested or empty placeholder.
    """
    tokens: list[tuple[str, str]] = []
    literal_start = 0
    open_at = None

    for i, ch in enumerate(path):
        if ch == "{":
            if open_at is not None:
                raise MalformedPathError(path, i, "nested '{' inside a placeholder")
            if i > literal_start:
                tokens.append(("literal", path[literal_start:i]))
            open_at = i
        elif ch == "}":
            if open_at is None:
                raise MalformedPathError(path, i, "'}' without a matching '{'")
            if i == open_at + 1:
                raise MalformedPathError(path, open_at, "empty placeholder '{}'")
            tokens.append(("param", path[open_at:i + 1]))
            open_at = None
            literal_start = i + 1

    if open_at is not None:
        raise MalformedPathError(path, open_at, "'{' is never closed")
    if literal_start < len(path):
        tokens.append(("literal", path[literal_start:]))
    return tokens


def rewrite_path_params(path: str) -> str:
    """Wrap every `{name}` placeholder in a Kong uri_captures reference.

    /users/{id} -> /users/$(uri_captures.{id})
    """
    if "{" not in path:
        return path
    return "".join(
        CAPTURE_TEMPLATE.format(token=text) if kind == "param" else text
        for kind, text in tokenize_path(path)
    )


def dollar_escape_path(path: str) -> str:
    """Turn every `{` into `${` so the path interpolates bash variables."""
    return path.replace("{", "${")


def route_regex(path: str) -> str:
    """Build the Kong regex route path whose named groups feed uri_captures."""
    parts = []
    groups = set()
    offset = 0
    for kind, text in tokenize_path(path):
        if kind == "param":
            group = _group_name(text[1:-1])
            if group in groups:
                raise MalformedPathError(path, offset, f"placeholder {text} repeats capture group {group!r}")
            groups.add(group)
            parts.append(f"(?<{group}>[^/]+)")
        else:
            parts.append(re.escape(text))
        offset += len(text)
    return "~" + "".join(parts) + "$"


def _group_name(name: str) -> str:
    group = re.sub(r"\W", "_", name)
    return "_" + group if group[:1].isdigit() else group


def check_shell_safe(path: str) -> None:
    """Reject paths that would run code once placed in a double-quoted bash string."""
    for i, ch in enumerate(path):
        if ch in SHELL_UNSAFE:
            raise MalformedPathError(path, i, f"character {ch!r} is not allowed in a shell-interpolated path")
