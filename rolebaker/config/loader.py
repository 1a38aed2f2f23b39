"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import RoleBakerConfig

CONFIG_ENV_VAR = "ROLEBAKER_CONFIG"


def _candidate_paths(cli_path: str | None) -> list[tuple[Path, bool]]:
    """Config files to try, in order, paired with whether they were named explicitly."""
    candidates: list[tuple[Path, bool]] = []
    if cli_path:
        candidates.append((Path(cli_path), True))
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidates.append((Path(env_path), True))
    candidates.append((Path("./rolebaker.yaml"), False))
    candidates.append((Path.home() / ".rolebaker" / "config.yaml", False))
    return candidates


def _read_config(path: Path) -> RoleBakerConfig | None:
    """Parse one config file; None if it is empty."""
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ValueError(
            f"Invalid config in {path}: top level must be a mapping, got {type(raw).__name__}"
        )
    try:
        return RoleBakerConfig.model_validate(_expand_env_vars(raw))
    except ValidationError as e:
        raise ValueError(f"Invalid config in {path}: {e}") from e


def load_config(cli_path: str | None = None) -> RoleBakerConfig:
    """Load config with resolution order: CLI > $ROLEBAKER_CONFIG > project-local > user-global > defaults.

    A file named on the command line or in $ROLEBAKER_CONFIG must exist.
    """
    for path, explicit in _candidate_paths(cli_path):
        if not path.exists():
            if explicit:
                raise ValueError(f"Config file not found: {path}")
            continue
        config = _read_config(path)
        if config is not None:
            return config

    return RoleBakerConfig()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `rolebaker config init`
DEFAULT_CONFIG_TEMPLATE = """\
# rolebaker.yaml

# Permission documentation output
docs:
  base_dir: "docs"
  filename: "permissions"
  format: "markdown"           # markdown | csv | json | yaml

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
