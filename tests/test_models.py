"""
Tests for domain models — declarations, declared sets, backend kinds.
"""

import pytest
from pydantic import ValidationError

from devbootstrap.core.models import BackendKind, DeclaredSet, ToolDeclaration


class TestToolDeclaration:
    def test_frozen(self):
        decl = ToolDeclaration(name="nodejs", version="20.11.0")
        with pytest.raises(ValidationError):
            decl.version = "18.0.0"

    def test_str(self):
        assert str(ToolDeclaration(name="nodejs", version="20")) == "nodejs@20"
        assert str(ToolDeclaration(name="gh")) == "gh"

    def test_versioned(self):
        assert ToolDeclaration(name="nodejs", version="20").versioned
        assert not ToolDeclaration(name="gh").versioned


class TestDeclaredSet:
    def test_empty(self):
        declared = DeclaredSet()
        assert len(declared) == 0
        assert declared.names == []

    def test_last_occurrence_wins_keeps_position(self):
        declared = DeclaredSet.from_declarations(
            [
                ToolDeclaration(name="a", version="1"),
                ToolDeclaration(name="b", version="1"),
                ToolDeclaration(name="a", version="2"),
            ]
        )
        assert declared.names == ["a", "b"]
        assert declared.declarations[0].version == "2"

    def test_roundtrip_json(self):
        declared = DeclaredSet.from_declarations([ToolDeclaration(name="gh")], source="local")
        data = declared.model_dump(mode="json")
        assert DeclaredSet.model_validate(data) == declared


class TestBackendKind:
    def test_distro(self):
        assert BackendKind.DEBIAN_APT.distro == "debian"
        assert BackendKind.RHEL_YUM_DNF.distro == "rhel"
        assert BackendKind.ARCH_PACMAN.distro == "arch"

    def test_closed_set(self):
        assert len(BackendKind) == 3
