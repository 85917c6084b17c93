"""
Shell profile configuration — asdf shims, Homebrew env, completions.

Blocks are wrapped in marker comments and appended only when their
marker is missing, so re-running leaves profiles untouched. ``.zshrc``
is created if needed; ``.bashrc`` is only edited when it exists.
"""

from __future__ import annotations

import logging
from pathlib import Path

from devbootstrap.adapters.packages.homebrew import LINUXBREW_PREFIX
from devbootstrap.adapters.shell.profile import ProfileWriter
from devbootstrap.core.models.ledger import StepRecord

logger = logging.getLogger(__name__)

ASDF_MARKER = "# >>> devbootstrap asdf >>>"
BREW_MARKER = "# >>> devbootstrap homebrew >>>"

_ASDF_COMMON = """\
export PATH="${ASDF_DATA_DIR:-$HOME/.asdf}/shims:$PATH"

# Auto-install asdf tools when entering a repository with .tool-versions
auto_asdf_install() {
    if [ -f ".tool-versions" ] && [ -d ".git" ]; then
        asdf install
    fi
}
cd() {
    builtin cd "$@" && auto_asdf_install
}
"""

ZSH_BLOCK = f"""\
{ASDF_MARKER}
{_ASDF_COMMON}
fpath=(${{ASDF_DATA_DIR:-$HOME/.asdf}}/completions $fpath)
autoload -Uz compinit && compinit

command -v gh >/dev/null 2>&1 && eval "$(gh completion -s zsh)"
command -v kubectl >/dev/null 2>&1 && source <(kubectl completion zsh)
command -v helm >/dev/null 2>&1 && source <(helm completion zsh)
command -v terraform >/dev/null 2>&1 && complete -o nospace -C terraform terraform
command -v fzf >/dev/null 2>&1 && eval "$(fzf --zsh)"
# <<< devbootstrap asdf <<<
"""

BASH_BLOCK = f"""\
{ASDF_MARKER}
{_ASDF_COMMON}
command -v asdf >/dev/null 2>&1 && . <(asdf completion bash)

command -v gh >/dev/null 2>&1 && eval "$(gh completion -s bash)"
command -v kubectl >/dev/null 2>&1 && source <(kubectl completion bash)
command -v helm >/dev/null 2>&1 && source <(helm completion bash)
command -v terraform >/dev/null 2>&1 && complete -C terraform terraform
command -v fzf >/dev/null 2>&1 && eval "$(fzf --bash)"
# <<< devbootstrap asdf <<<
"""

BREW_BLOCK = f"""\
{BREW_MARKER}
eval "$({LINUXBREW_PREFIX}/bin/brew shellenv)"
# <<< devbootstrap homebrew <<<
"""


def add_homebrew_to_profiles(home: Path, writer: ProfileWriter) -> list[Path]:
    """Put Homebrew's shellenv into the zsh and bash profiles."""
    changed = []
    for path, create in ((home / ".zshrc", True), (home / ".bashrc", False)):
        if writer.append_if_absent(path, BREW_MARKER, BREW_BLOCK, create=create):
            changed.append(path)
    return changed


def configure_shell_profiles(home: Path, writer: ProfileWriter) -> StepRecord:
    """Add asdf and completion configuration to the user's shells."""
    zshrc = home / ".zshrc"
    bashrc = home / ".bashrc"
    updated = []

    if writer.append_if_absent(zshrc, ASDF_MARKER, ZSH_BLOCK, create=True):
        updated.append(zshrc.name)
    if writer.append_if_absent(bashrc, ASDF_MARKER, BASH_BLOCK):
        updated.append(bashrc.name)

    if updated:
        return StepRecord.success("Shell configuration completed", detail=f"updated {', '.join(updated)}")
    return StepRecord.success("Shell configuration completed", detail="already configured")
