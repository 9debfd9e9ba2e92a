"""
Common type definitions for the parser module.
"""

from pathlib import Path
from typing import Any

# Decoded option fragment, e.g. {"null": False, "default": "x"}
OptionValues = dict[str, Any]

# File paths
FilePath = str | Path

# Dependency information: table -> tables it depends on
DependencyInfo = dict[str, list[str]]

# Emission order of tables
TableOrder = list[str]

GraphCycles = list[list[str]]
