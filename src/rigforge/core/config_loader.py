"""JSON config file loading: joint enhancement table and processing flags."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from rigforge.constants import AXIS_SYSTEMS, DEFAULT_ADD_ROOT_ROOT_NAME

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised for a malformed joint/config file."""


def load_json(path: Path) -> Any:
    """Load and return parsed JSON from a file."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)


@dataclass(frozen=True)
class JointEnhancement:
    """Rename target and optional proxy metadata for one source joint."""
    old_name: str
    new_name: str
    physics_proxy: str = ""
    ragdoll_proxy: str = ""
    primitive_type: str = ""
    parent_node: str = ""

    @property
    def has_proxies(self) -> bool:
        return bool(self.physics_proxy or self.ragdoll_proxy)

    @classmethod
    def from_dict(cls, data: dict) -> "JointEnhancement":
        if not isinstance(data, dict):
            raise ConfigError(f"Joint entry must be an object, got {type(data).__name__}")
        for key in ("old-name", "new-name"):
            if not isinstance(data.get(key), str):
                raise ConfigError(f"Joint entry is missing string field {key!r}: {data}")
        return cls(
            old_name=data["old-name"],
            new_name=data["new-name"],
            physics_proxy=_optional_str(data, "physics-proxy"),
            ragdoll_proxy=_optional_str(data, "ragdoll-proxy"),
            primitive_type=_optional_str(data, "primitive-type"),
            parent_node=_optional_str(data, "parent-node"),
        )


class EnhancementTable:
    """Read-only mapping from original joint name to its JointEnhancement.

    A later entry with the same old name replaces an earlier one.
    """

    def __init__(self, entries: Optional[list[JointEnhancement]] = None):
        self._entries: dict[str, JointEnhancement] = {}
        for entry in entries or []:
            self._entries[entry.old_name] = entry

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __iter__(self):
        return iter(self._entries.values())

    def get(self, name: str) -> Optional[JointEnhancement]:
        return self._entries.get(name)


@dataclass
class ProcessingConfig:
    """Global processing flags for one run."""
    joints: EnhancementTable = field(default_factory=EnhancementTable)
    axis: str = ""
    apply_weapon_fix: bool = False
    add_root: bool = False
    add_root_child_name: str = ""
    add_root_root_name: str = DEFAULT_ADD_ROOT_ROOT_NAME
    remove_leaf_name: str = ""
    # Set from the command line, not the joint file.
    scale: float = 1.0
    add_ik: bool = False
    apply_mixamo_fixes: bool = False
    create_proxies: bool = False


def _optional_str(data: dict, key: str, default: str = "") -> str:
    value = data.get(key)
    return value if isinstance(value, str) else default


def _optional_bool(data: dict, key: str, default: bool = False) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default


def parse_processing_config(data: Any) -> ProcessingConfig:
    """Build a ProcessingConfig from an already-parsed JSON document.

    Unknown fields are ignored; fields of the wrong type count as missing.
    """
    if not isinstance(data, dict):
        raise ConfigError("Joint file must contain a JSON object at the top level")

    entries = []
    joints = data.get("joints")
    if isinstance(joints, list):
        entries = [JointEnhancement.from_dict(j) for j in joints]

    axis = _optional_str(data, "axis")
    if axis and axis.lower() not in AXIS_SYSTEMS:
        raise ConfigError(
            f"Unknown axis system {axis!r}; expected one of {sorted(AXIS_SYSTEMS)}")

    return ProcessingConfig(
        joints=EnhancementTable(entries),
        axis=axis,
        apply_weapon_fix=_optional_bool(data, "applyWeaponFix"),
        add_root=_optional_bool(data, "addRoot"),
        add_root_child_name=_optional_str(data, "addRootChildName"),
        add_root_root_name=_optional_str(data, "addRootRootName", DEFAULT_ADD_ROOT_ROOT_NAME),
        remove_leaf_name=_optional_str(data, "removeLeafName"),
    )


def load_processing_config(path: Path) -> ProcessingConfig:
    """Read a joint file from disk, raising ConfigError if it is unusable."""
    try:
        data = load_json(path)
    except json.JSONDecodeError as e:
        raise ConfigError(f"JSON read error in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read joint file {path}: {e}") from e

    config = parse_processing_config(data)
    logger.info("Loaded %d joint mappings from %s", len(config.joints), path)
    return config
