"""Load and save scenes as JSON scene documents.

Document format:
  metadata: {title, subject, author, keywords, revision, comment}
  axis: axis-system name (default "maya-y")
  animation_stacks: [{name, curves}], current_animation_stack: name
  root: node, where a node is
    name, kind ("none" | "joint" | "mesh"), role ("root" | "limb" | "effector")
    translation, scale, geometric_translation: [x, y, z]
    rotation, pre_rotation, post_rotation: quaternion [x, y, z, w]
      (or rotation_euler, pre_rotation_euler, post_rotation_euler in degrees)
    pivot_active, properties
    vertices: [[x, y, z], ...]                                  (mesh only)
    skins: [{name, clusters: [{link, transform_link, indices, weights}]}]
      transform_link is 16 floats, row-major
    children: [node, ...]
"""

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

import numpy as np

from rigforge.constants import SCENE_SUFFIXES
from rigforge.core.config_loader import load_json
from rigforge.core.math_utils import quat_from_euler_degrees, quat_identity, quat_normalize, vec3
from rigforge.core.mesh import Cluster, MeshAttribute, SkinBinding
from rigforge.core.scene_graph import (
    AnimationStack, JointAttribute, Scene, SceneMetadata, SceneNode, SkeletonRole,
)

logger = logging.getLogger(__name__)


def _vec(data: dict, key: str, default) -> np.ndarray:
    value = data.get(key)
    if value is None:
        return np.array(default, dtype=np.float64)
    arr = np.asarray(value, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"{key} must have 3 components, got {value!r}")
    return arr


def _rotation(data: dict, key: str) -> np.ndarray:
    if key in data:
        q = np.asarray(data[key], dtype=np.float64)
        if q.shape != (4,):
            raise ValueError(f"{key} must be a quaternion [x, y, z, w], got {data[key]!r}")
        return quat_normalize(q)
    euler = data.get(key + "_euler")
    if euler is not None:
        return quat_from_euler_degrees(*euler)
    return quat_identity()


def _expect_object(value: Any, what: str) -> dict:
    if not isinstance(value, dict):
        raise ValueError(f"{what} must be an object, got {type(value).__name__}")
    return value


def _cluster_from_dict(data: dict) -> Cluster:
    _expect_object(data, "Cluster")
    link = data.get("transform_link")
    return Cluster(
        link=data["link"],
        transform_link=np.eye(4) if link is None else np.asarray(link, dtype=np.float64).reshape(4, 4),
        indices=data.get("indices", []),
        weights=data.get("weights", []),
    )


def node_from_dict(data: dict) -> SceneNode:
    _expect_object(data, "Node")
    kind = data.get("kind", "none")
    if kind == "joint":
        attribute = JointAttribute(SkeletonRole(data.get("role", SkeletonRole.LIMB_NODE.value)))
    elif kind == "mesh":
        skins = []
        for skin in data.get("skins", []):
            _expect_object(skin, "Skin")
            skins.append(SkinBinding(
                name=skin.get("name", "Skin"),
                clusters=[_cluster_from_dict(c) for c in skin.get("clusters", [])],
            ))
        attribute = MeshAttribute(vertices=data.get("vertices", []), skins=skins)
    elif kind == "none":
        attribute = None
    else:
        raise ValueError(f"Unknown node kind {kind!r} on node {data.get('name')!r}")

    node = SceneNode(data.get("name", ""), attribute)
    node.translation = _vec(data, "translation", vec3())
    node.rotation = _rotation(data, "rotation")
    node.pre_rotation = _rotation(data, "pre_rotation")
    node.post_rotation = _rotation(data, "post_rotation")
    node.scale = _vec(data, "scale", vec3(1, 1, 1))
    node.geometric_translation = _vec(data, "geometric_translation", vec3())
    node.pivot_active = bool(data.get("pivot_active", False))
    node.properties = dict(data.get("properties", {}))

    for child_data in data.get("children", []):
        node.add(node_from_dict(child_data))
    return node


def node_to_dict(node: SceneNode) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": node.name,
        "kind": node.kind,
        "translation": node.translation.tolist(),
        "rotation": node.rotation.tolist(),
        "pre_rotation": node.pre_rotation.tolist(),
        "post_rotation": node.post_rotation.tolist(),
        "scale": node.scale.tolist(),
    }
    if node.joint is not None:
        data["role"] = node.joint.role.value
    if node.pivot_active or np.any(node.geometric_translation):
        data["geometric_translation"] = node.geometric_translation.tolist()
        data["pivot_active"] = node.pivot_active
    if node.properties:
        data["properties"] = dict(node.properties)

    mesh = node.mesh
    if mesh is not None:
        data["vertices"] = mesh.vertices.tolist()
        data["skins"] = [
            {
                "name": skin.name,
                "clusters": [
                    {
                        "link": c.link,
                        "transform_link": c.transform_link.ravel().tolist(),
                        "indices": c.indices.tolist(),
                        "weights": c.weights.tolist(),
                    }
                    for c in skin.clusters
                ],
            }
            for skin in mesh.skins
        ]

    data["children"] = [node_to_dict(child) for child in node.children]
    return data


def scene_from_dict(data: dict) -> Scene:
    if not isinstance(data, dict) or "root" not in data:
        raise ValueError("Scene document must be an object with a 'root' node")
    axis = data.get("axis", "maya-y")
    if not isinstance(axis, str):
        raise ValueError(f"axis must be a string, got {axis!r}")
    scene = Scene(node_from_dict(data["root"]), axis=axis)
    metadata = _expect_object(data.get("metadata", {}), "metadata")
    scene.metadata = SceneMetadata(**{
        k: str(v) for k, v in metadata.items() if k in SceneMetadata.__dataclass_fields__
    })
    for stack in data.get("animation_stacks", []):
        _expect_object(stack, "Animation stack")
        scene.animation_stacks.append(
            AnimationStack(name=stack["name"], curves=stack.get("curves", {})))
    scene.current_animation_stack = data.get("current_animation_stack")
    if scene.current_animation_stack is None and scene.animation_stacks:
        scene.current_animation_stack = scene.animation_stacks[0].name
    return scene


def scene_to_dict(scene: Scene) -> dict[str, Any]:
    return {
        "metadata": asdict(scene.metadata),
        "axis": scene.axis,
        "animation_stacks": [
            {"name": s.name, "curves": s.curves} for s in scene.animation_stacks
        ],
        "current_animation_stack": scene.current_animation_stack,
        "root": node_to_dict(scene.root),
    }


def load_scene_document(path: Path) -> Scene:
    return scene_from_dict(load_json(path))


def save_scene_document(scene: Scene, path: Path) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(scene_to_dict(scene), f, indent=2)


class SceneDocumentProvider:
    """Scene provider that reports failures as None/False instead of raising."""

    suffixes: tuple[str, ...] = SCENE_SUFFIXES

    def accepts(self, path: Path) -> bool:
        return path.name.lower().endswith(self.suffixes)

    def load(self, path: Path) -> Optional[Scene]:
        try:
            scene = load_scene_document(path)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error("An error occurred while loading the scene %s: %s", path, e)
            return None
        logger.debug("Loaded %s (%d nodes)", path, scene.node_count)
        return scene

    def save(self, scene: Scene, path: Path) -> bool:
        try:
            save_scene_document(scene, path)
        except (OSError, TypeError, ValueError) as e:
            logger.error("An error occurred while saving the scene %s: %s", path, e)
            return False
        return True
