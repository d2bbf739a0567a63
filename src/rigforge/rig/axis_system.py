"""Deep axis-system conversion of a scene.

Each named system is described by the basis change from the canonical
Y-up right-handed frame.  Converting conjugates every local transform by
``C = B_target @ inverse(B_source)``, which keeps the hierarchy valid
because C @ (T Rpre R Rpost^-1 S) @ C^-1 factors into the same pieces,
each conjugated on its own.
"""

import logging

import numpy as np

from rigforge.constants import AXIS_SYSTEMS
from rigforge.core.math_utils import (
    Mat3, Quat, mat3_to_quat, mat4_from_quaternion, transform_points,
)
from rigforge.core.scene_graph import Scene, SceneNode

logger = logging.getLogger(__name__)


def axis_basis(name: str) -> Mat3:
    try:
        return AXIS_SYSTEMS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown axis system {name!r}; expected one of {sorted(AXIS_SYSTEMS)}"
        ) from None


def _conjugate_quat(c: Mat3, q: Quat) -> Quat:
    r = mat4_from_quaternion(q)[:3, :3]
    return mat3_to_quat(c @ r @ c.T)


def _convert_node(node: SceneNode, c: Mat3, c4: np.ndarray) -> None:
    node.translation = c @ node.translation
    node.rotation = _conjugate_quat(c, node.rotation)
    node.pre_rotation = _conjugate_quat(c, node.pre_rotation)
    node.post_rotation = _conjugate_quat(c, node.post_rotation)
    node.scale = np.abs(c) @ node.scale
    node.geometric_translation = c @ node.geometric_translation

    mesh = node.mesh
    if mesh is not None:
        mesh.vertices = transform_points(c4, mesh.vertices)
        for skin in mesh.skins:
            for cluster in skin.clusters:
                cluster.transform_link = c4 @ cluster.transform_link @ c4.T

    for child in list(node.children):
        _convert_node(child, c, c4)


def convert_axis_system(scene: Scene, target: str) -> bool:
    """Convert ``scene`` in place to ``target``. False if already there."""
    target_basis = axis_basis(target)
    source_basis = axis_basis(scene.axis)
    c = target_basis @ source_basis.T
    if np.allclose(c, np.eye(3)):
        scene.axis = target
        return False

    c4 = np.eye(4, dtype=np.float64)
    c4[:3, :3] = c
    _convert_node(scene.root, c, c4)

    logger.info("Converted axis system %s -> %s", scene.axis, target)
    scene.axis = target
    return True
