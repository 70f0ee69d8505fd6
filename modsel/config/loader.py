"""Configuration loading & validation.

Precedence (last wins): base.yaml -> overrides.local.yaml -> ENV (MODSEL__*).

Sections:
- `schema_version` (legacy missing -> assume 1, logged).
- `modules` (enabled ids, core id, declared module records).
- `logging`, `sessions` validated by their own schema classes.

Unknown keys are rejected at every level.
"""
from __future__ import annotations

import logging
import os
import pathlib
import threading
from functools import lru_cache
from typing import Any, Dict, Type

import yaml
from pydantic import BaseModel, ConfigDict

from modsel import metrics
from modsel.errors import ModselError, validate_error_type

from .schemas.modules import ModulesConfig
from .schemas.observability import LoggingConfig
from .schemas.sessions import SessionsConfig

logger = logging.getLogger("modsel.config")


class AggregatedConfig(BaseModel):
    schema_version: int = 1
    modules: ModulesConfig = ModulesConfig()
    logging: LoggingConfig = LoggingConfig()
    sessions: SessionsConfig = SessionsConfig()

    model_config = ConfigDict(extra="forbid")


DEFAULT_CONFIG_DIR = "configs"
ENV_PREFIX = "MODSEL__"

SUB_SCHEMA_CLASSES: Dict[str, Type[BaseModel]] = {
    "modules": ModulesConfig,
    "logging": LoggingConfig,
    "sessions": SessionsConfig,
}


class ConfigError(ModselError):
    error_type = "config-invalid"


def _load_yaml_if_exists(path: pathlib.Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path.name}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Top-level mapping expected in {path.name}")
    return data


def _merge_dict(
    base: Dict[str, Any], override: Dict[str, Any]
) -> Dict[str, Any]:
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            base[k] = _merge_dict(base[k], v)
        else:
            base[k] = v
    return base


def _cast_env_value(value: str, current: Any) -> Any:
    if isinstance(current, list):
        return [part.strip() for part in value.split(",") if part.strip()]
    if value.lower() in {"true", "false"}:
        return value.lower() == "true"
    try:
        return int(value)
    except ValueError:
        try:
            return float(value)
        except ValueError:
            return value


def _apply_env(cfg: Dict[str, Any]) -> None:
    prefix_len = len(ENV_PREFIX)
    for env_key, value in sorted(os.environ.items()):
        if not env_key.startswith(ENV_PREFIX):
            continue
        path_parts = env_key[prefix_len:].lower().split("__")
        target = cfg
        for part in path_parts[:-1]:
            if part not in target or not isinstance(target[part], dict):
                target[part] = {}
            target = target[part]
        leaf = path_parts[-1]
        current = target.get(leaf)
        if current is None and leaf == "enabled":
            current = []
        target[leaf] = _cast_env_value(value, current)
        dotted_path = ".".join(path_parts)
        metrics.inc("env_override_total", {"path": dotted_path})
        logger.info(
            "config-env-override path=%s value=*** source=env", dotted_path
        )


_lock = threading.Lock()


def _resolve_config_dir() -> pathlib.Path:
    """Resolve config directory each call honoring env var changes."""
    return pathlib.Path(os.getenv("MODSEL_CONFIG_DIR", DEFAULT_CONFIG_DIR))


def _migrate_legacy(data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply in-place migrations for legacy configs.

    Rules:
    - If `schema_version` absent -> set to 1 and log a warning.
    - If `modules` is a plain list -> treat it as `modules.enabled`.
    """
    if "schema_version" not in data:
        logger.warning("config-migration schema_version missing -> assuming 1")
        data["schema_version"] = 1
    modules = data.get("modules")
    if isinstance(modules, list):
        data["modules"] = {"enabled": modules}
    elif modules is None:
        data["modules"] = {}
    elif not isinstance(modules, dict):
        raise ConfigError("modules must be a mapping or a list of ids")
    data["modules"].setdefault("enabled", [])
    return data


def _normalize_and_validate(raw: Dict[str, Any]) -> None:
    """Apply cross-field normalizations and bounds validation.

    Normalizations:
      - modules.enabled: drop duplicates keeping first occurrence.
    Validations (error -> raise):
      - modules.core_id non-empty
      - sessions.ttl_seconds > 0
      - sessions.max_sessions > 0
    """
    errors: list[tuple[str, str, str]] = []  # (path, code, msg)
    enabled = raw.get("modules", {}).get("enabled")
    if isinstance(enabled, list):
        raw["modules"]["enabled"] = list(dict.fromkeys(str(e) for e in enabled))

    core_id = raw.get("modules", {}).get("core_id")
    if core_id is not None and not str(core_id).strip():
        errors.append(("modules.core_id", "config-invalid", "non-empty required"))

    sessions = raw.get("sessions") or {}
    if not isinstance(sessions, dict):
        sessions = {}
    for key in ("ttl_seconds", "max_sessions"):
        val = sessions.get(key)
        if isinstance(val, (int, float)) and val <= 0:
            errors.append(
                (f"sessions.{key}", "config-out-of-range", ">0 required")
            )

    if errors:
        for path, code, _ in errors:
            validate_error_type(code)
            metrics.inc(
                "config_validation_errors_total",
                {"path": path, "code": code},
            )
        details = ", ".join(f"{p}:{c}:{m}" for p, c, m in errors)
        raise ConfigError(
            f"config validation failed: {details}", errors[0][1]
        )


def _validate_sub_schemas(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Validate each known section via its schema class.

    Returns dict of validated objects to build AggregatedConfig from.
    """
    validated: Dict[str, Any] = {}
    for name, cls in SUB_SCHEMA_CLASSES.items():
        if name in raw:
            try:
                validated[name] = cls.model_validate(raw[name] or {})
            except Exception as e:  # noqa: BLE001
                raise ConfigError(
                    f"Validation failed for section '{name}': {e}"
                ) from e
    return validated


@lru_cache(maxsize=1)
def get_config() -> AggregatedConfig:  # noqa: D401
    with _lock:
        cfg_dir = _resolve_config_dir()
        base_cfg = _load_yaml_if_exists(cfg_dir / "base.yaml")
        overrides_cfg = _load_yaml_if_exists(cfg_dir / "overrides.local.yaml")
        merged = _merge_dict(base_cfg, overrides_cfg)
        _apply_env(merged)
        migrated = _migrate_legacy(merged)
        _normalize_and_validate(migrated)
        validated_sub = _validate_sub_schemas(migrated)
        unknown = set(migrated) - set(SUB_SCHEMA_CLASSES) - {"schema_version"}
        if unknown:
            raise ConfigError(f"Unknown config sections: {sorted(unknown)}")
        try:
            return AggregatedConfig(
                schema_version=migrated["schema_version"], **validated_sub
            )
        except Exception as e:  # noqa: BLE001
            raise ConfigError(str(e)) from e


def clear_config_cache() -> None:
    """Clear cached config (primarily for tests)."""
    get_config.cache_clear()


def as_dict() -> Dict[str, Any]:
    return get_config().model_dump()
