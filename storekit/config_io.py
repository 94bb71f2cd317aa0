from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "STOREKIT_CONFIG"
LOCAL_OVERLAY_NAME = "config.local.yaml"


def find_repo_root(start: str | os.PathLike[str] | None = None) -> str:
    start_path = Path(start or os.getcwd()).resolve()
    if start_path.is_file():
        start_path = start_path.parent

    markers = ("pyproject.toml", ".git")
    for candidate in (start_path, *start_path.parents):
        if any((candidate / marker).exists() for marker in markers):
            return str(candidate)

    raise FileNotFoundError(
        f"Cannot locate repo root: searched from {start_path} for {', '.join(markers)}"
    )


def load_yaml_mapping(path: str | os.PathLike[str]) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ValueError(f"Config file must contain a YAML mapping: {path}")
    return dict(payload)


def deep_merge(base: Any, overlay: Any, *, path: str = "") -> Any:
    """Merge `overlay` onto `base`; mappings merge per key, lists and scalars replace."""

    if overlay is None:
        return None
    if base is None:
        return overlay

    if isinstance(base, Mapping):
        if not isinstance(overlay, Mapping):
            raise ValueError(
                f"Invalid config overlay merge at {path or '<root>'}: "
                f"base is mapping but overlay is {type(overlay).__name__}"
            )
        merged: dict[str, Any] = dict(base)
        for key, overlay_value in overlay.items():
            next_path = f"{path}.{key}" if path else str(key)
            if key in base:
                merged[key] = deep_merge(base[key], overlay_value, path=next_path)
            else:
                merged[key] = overlay_value
        return merged

    if isinstance(base, (list, tuple)):
        if not isinstance(overlay, (list, tuple)):
            raise ValueError(
                f"Invalid config overlay merge at {path or '<root>'}: "
                f"base is list but overlay is {type(overlay).__name__}"
            )
        return list(overlay)

    if isinstance(overlay, (Mapping, list, tuple)):
        raise ValueError(
            f"Invalid config overlay merge at {path or '<root>'}: "
            f"base is {type(base).__name__} but overlay is {type(overlay).__name__}"
        )
    return overlay


def load_config(
    *,
    config_path: str | os.PathLike[str] | None = None,
    env_var: str | None = CONFIG_ENV_VAR,
    config_dir: str | os.PathLike[str] = "config",
    config_name: str = "storekit.yaml",
    start_dir: str | os.PathLike[str] | None = None,
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Load the store configuration and return `(config, meta)`.

    An explicit `config_path` (or the path named by `env_var`) loads that single
    file. Otherwise `<config_dir>/<config_name>` is loaded, resolved against the
    repo root when relative, and `config.local.yaml` next to it is merged on top
    when present.
    """

    explicit_path: str | None = None
    if config_path is not None:
        explicit_path = str(config_path).strip() or None
    elif env_var:
        explicit_path = os.environ.get(env_var, "").strip() or None

    if explicit_path:
        expanded = os.path.abspath(os.path.expandvars(os.path.expanduser(explicit_path)))
        cfg = load_yaml_mapping(expanded)
        meta = {
            "mode": "explicit" if config_path is not None else "env",
            "paths": [expanded],
            "env_var": env_var,
            "repo_root": None,
        }
        logger.debug("Loaded store config from %s (%s)", expanded, meta["mode"])
        return cfg, meta

    if os.path.isabs(str(config_dir)):
        directory = str(config_dir)
        repo_root = None
    else:
        repo_root = find_repo_root(start_dir)
        directory = os.path.join(repo_root, str(config_dir))

    base_path = os.path.join(directory, config_name)
    local_path = os.path.join(directory, LOCAL_OVERLAY_NAME)
    if not os.path.exists(base_path):
        raise FileNotFoundError(f"Missing base config file: {base_path}")

    cfg = load_yaml_mapping(base_path)
    loaded_paths = [os.path.abspath(base_path)]
    mode = "base"

    if os.path.exists(local_path):
        cfg = deep_merge(cfg, load_yaml_mapping(local_path))
        loaded_paths.append(os.path.abspath(local_path))
        mode = "base+local"

    logger.debug("Loaded store config from %s (%s)", ", ".join(loaded_paths), mode)
    meta = {"mode": mode, "paths": loaded_paths, "env_var": env_var, "repo_root": repo_root}
    return cfg, meta
