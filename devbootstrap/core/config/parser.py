"""
Declaration parser — config text into a ``DeclaredSet``.

Two encodings are accepted for one declaration per line::

    nodejs:20.11.0      # colon form: version is the first token after the first colon
    nodejs 20.11.0      # whitespace form: second token is the version

Both yield ``ToolDeclaration(name="nodejs", version="20.11.0")``.
A line holding a single bare token declares a tool without a version
(the package-list encoding). Blank lines and lines whose first
non-whitespace character is ``#`` are skipped; lines matching no shape
are ignored without error.
"""

from __future__ import annotations

import logging

from devbootstrap.core.models.tool import DeclaredSet, ToolDeclaration

logger = logging.getLogger(__name__)


def _is_comment_or_blank(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith("#")


def parse_line(line: str) -> ToolDeclaration | None:
    """Parse a single line. Returns None for skipped or malformed lines."""
    if _is_comment_or_blank(line):
        return None
    stripped = line.strip()

    head, sep, tail = stripped.partition(":")
    if sep and head and not any(c.isspace() for c in head):
        # first token only, so trailing "# comment" text matches the whitespace form
        rest = tail.split()
        if not rest:
            return None
        return ToolDeclaration(name=head, version=rest[0])

    tokens = stripped.split()
    if ":" in tokens[0]:
        # ":1.0", "a b:c" and friends
        return None
    if len(tokens) == 1:
        return ToolDeclaration(name=tokens[0])
    return ToolDeclaration(name=tokens[0], version=tokens[1])


def parse_declarations(raw_text: str, source: str = "") -> DeclaredSet:
    """Parse a runtime/version declaration file.

    Args:
        raw_text: File contents.
        source: Where the text came from, kept on the set for logging.
    """
    declarations = []
    for lineno, line in enumerate(raw_text.splitlines(), start=1):
        decl = parse_line(line)
        if decl is None:
            if not _is_comment_or_blank(line):
                logger.debug("Ignoring malformed line %d: %r", lineno, line)
            continue
        declarations.append(decl)
    return DeclaredSet.from_declarations(declarations, source=source)


def parse_package_names(raw_text: str, source: str = "") -> DeclaredSet:
    """Parse a flat package list: one bare name per line.

    Only the first token of each line is used, so trailing inline
    comments are dropped. Names are taken verbatim; one containing a
    colon is kept as is and only logged.
    """
    declarations = []
    for lineno, line in enumerate(raw_text.splitlines(), start=1):
        if _is_comment_or_blank(line):
            continue
        name = line.split()[0]
        if ":" in name:
            # package lists carry no versions; the name goes to the installer as written
            logger.warning(
                "Package name %r on line %d contains ':', passing it verbatim", name, lineno,
            )
        declarations.append(ToolDeclaration(name=name))
    return DeclaredSet.from_declarations(declarations, source=source)
