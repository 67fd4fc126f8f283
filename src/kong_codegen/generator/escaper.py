"""Escaping of identifiers and free text placed into generated bash scripts."""

import re

# Bash keywords and builtins that must not be used as generated function or
# variable names.
RESERVED_WORDS = frozenset({
    "case", "coproc", "do", "done", "elif", "else", "esac", "fi", "for",
    "function", "if", "in", "select", "then", "time", "until", "while",
    "alias", "break", "builtin", "cd", "command", "continue", "declare",
    "echo", "eval", "exec", "exit", "export", "false", "getopts", "hash",
    "let", "local", "printf", "pwd", "read", "readonly", "return", "set",
    "shift", "source", "test", "trap", "true", "type", "typeset", "ulimit",
    "umask", "unalias", "unset", "wait",
})

_NON_WORD = re.compile(r"\W")
_IDENTIFIER = re.compile(r"[A-Za-z_]\w*")


class IdentifierEscaper:
    """Renders reserved identifiers, quotes and comment delimiters safely."""

    def __init__(self, reserved_words=RESERVED_WORDS, mappings: dict[str, str] | None = None):
        self.reserved_words = frozenset(w.lower() for w in reserved_words)
        self.mappings = {word.lower(): replacement for word, replacement in (mappings or {}).items()}
        for word, replacement in self.mappings.items():
            if not _IDENTIFIER.fullmatch(replacement):
                raise ValueError(f"Reserved word mapping {word!r} -> {replacement!r} is not an identifier")
            if self.is_reserved_word(replacement):
                raise ValueError(
                    f"Reserved word mapping {word!r} -> {replacement!r} maps onto another reserved word"
                )

    def is_reserved_word(self, name: str) -> bool:
        return name.lower() in self.reserved_words

    def escape_reserved_word(self, name: str) -> str:
        """Return the configured replacement for `name`, or `name` prefixed with `_`."""
        replacement = self.mappings.get(name.lower())
        if replacement is not None:
            return replacement
        return "_" + name

    def escape_quotation_mark(self, text: str) -> str:
        """Drop single quotes; the scripts wrap values in single-quoted literals."""
        return text.replace("'", "")

    def escape_unsafe_characters(self, text: str) -> str:
        """Break up block comment delimiters so text can sit inside a comment."""
        return text.replace("*/", "*_/").replace("/*", "/_*")

    def escape_text(self, text: str) -> str:
        """Make free text (summaries, descriptions) safe for a single-line comment or literal."""
        text = " ".join(text.split())
        return self.escape_unsafe_characters(self.escape_quotation_mark(text))

    def to_identifier(self, name: str) -> str:
        """Sanitise `name` into a shell identifier, escaping it if reserved."""
        ident = _NON_WORD.sub("_", name)
        if not ident:
            ident = "_"
        elif ident[0].isdigit():
            ident = "_" + ident
        if self.is_reserved_word(ident):
            return self.escape_reserved_word(ident)
        return ident
