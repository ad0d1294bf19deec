"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path

TOOL_NAME = "regcalc"


class ConfigError(Exception):
    """Error in regcalc configuration."""


@dataclass(slots=True, frozen=True)
class RegcalcConfig:
    """Configuration loaded from the ``[tool.regcalc]`` table.

    Relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    script: Path | None = None
    strict: bool = False
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        if current.parent == current:
            return None
        current = current.parent


def load_config(pyproject_path: Path) -> RegcalcConfig:
    """Load and validate [tool.regcalc] config from pyproject.toml.

    Raises:
        ConfigError: If the file is not valid TOML or a setting has the wrong type.

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get(TOOL_NAME, {})
    if not isinstance(section, dict):
        msg = f"Invalid [tool.{TOOL_NAME}]: expected a table"
        raise ConfigError(msg)

    script: Path | None = None
    if "script" in section:
        script_value = section["script"]
        if not isinstance(script_value, str):
            msg = f"Invalid [tool.{TOOL_NAME}].script: expected string path"
            raise ConfigError(msg)
        script = Path(script_value)
        if not script.is_absolute():
            script = project_root / script

    strict = section.get("strict", False)
    if not isinstance(strict, bool):
        msg = f"Invalid [tool.{TOOL_NAME}].strict: expected boolean"
        raise ConfigError(msg)

    return RegcalcConfig(script=script, strict=strict, project_root=project_root)


def get_config() -> RegcalcConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        RegcalcConfig (may be empty if no pyproject.toml or no [tool.regcalc] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return RegcalcConfig()
    return load_config(pyproject_path)
