"""
Built-in declared sets, used when neither the remote nor a local config
file is available.
"""

from __future__ import annotations

from devbootstrap.core.config.parser import parse_declarations, parse_package_names
from devbootstrap.core.models.tool import DeclaredSet

DEFAULT_RUNTIMES_TEXT = """\
# Development runtimes
nodejs 22.11.0
python 3.13.4
ruby 3.4.4
golang 1.24.4

# DevOps tools
terraform 1.5.2
kubectl 1.30.0
helm 3.16.0

# Additional tools
direnv 2.33.0
shellcheck 0.10.0
jq 1.7.1
yq 4.44.1
"""

DEFAULT_UTILITIES_TEXT = """\
gh              # GitHub CLI
tree            # Directory tree viewer
htop            # Process viewer
bat             # Better cat
fd              # Better find
ripgrep         # Better grep
fzf             # Fuzzy finder
neovim          # Text editor
tmux            # Terminal multiplexer
git-lfs         # Git Large File Storage
lazygit         # Git TUI
docker-compose  # Container orchestration
"""


def default_runtimes() -> DeclaredSet:
    return parse_declarations(DEFAULT_RUNTIMES_TEXT, source="default")


def default_utilities() -> DeclaredSet:
    return parse_package_names(DEFAULT_UTILITIES_TEXT, source="default")
