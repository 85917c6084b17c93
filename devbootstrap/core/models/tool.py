"""
Tool declarations — what the machine should end up with.

A ``ToolDeclaration`` is one line of a config file after parsing. A
``DeclaredSet`` is the ordered result of parsing one whole file.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field


class ToolDeclaration(BaseModel):
    """A desired tool: installer-facing name plus optional pinned version."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str | None = None

    @property
    def versioned(self) -> bool:
        return self.version is not None

    def __str__(self) -> str:
        return f"{self.name}@{self.version}" if self.version else self.name


class DeclaredSet(BaseModel):
    """Ordered declarations parsed from one configuration input.

    Names are unique within a set. When a name is declared twice the
    later declaration replaces the earlier one but keeps its position.
    """

    declarations: list[ToolDeclaration] = Field(default_factory=list)
    source: str = ""               # remote, local, default, or a file path

    @classmethod
    def from_declarations(
        cls,
        declarations: Iterable[ToolDeclaration],
        source: str = "",
    ) -> DeclaredSet:
        by_name: dict[str, ToolDeclaration] = {}
        for decl in declarations:
            by_name[decl.name] = decl
        return cls(declarations=list(by_name.values()), source=source)

    @property
    def names(self) -> list[str]:
        return [d.name for d in self.declarations]

    def versioned(self) -> list[ToolDeclaration]:
        """Declarations that carry a version."""
        return [d for d in self.declarations if d.versioned]

    def unversioned(self) -> list[ToolDeclaration]:
        """Declarations without a version."""
        return [d for d in self.declarations if not d.versioned]

    def __len__(self) -> int:
        return len(self.declarations)
