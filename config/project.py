"""
Provides access to project metadata from pyproject.toml.
"""

import tomllib
from dataclasses import dataclass
from functools import cache
from pathlib import Path


@dataclass
class Project:
    """Container for project metadata."""

    name: str
    version: str


@cache
def get_project() -> Project:
    """
    Get project metadata by parsing pyproject.toml.
    Falls back to defaults when running from an installed wheel without it.
    """
    pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
    if not pyproject_path.exists():
        return Project(name="launcher", version="0.0.0")

    with pyproject_path.open("rb") as f:
        data = tomllib.load(f)

    project_data = data.get("project", {})
    project_name = project_data.get("name", "launcher")
    version = project_data.get("version", "0.0.0")

    return Project(name=project_name, version=version)
