"""Procedural auxiliary joints: IK targets, weights, look and camera sockets."""

import logging
from enum import IntEnum
from typing import Optional, Sequence

import numpy as np

from rigforge.constants import IK_JOINT_SET, UP_REFERENCE_LENGTH, WORLD_DOWN, WORLD_UP
from rigforge.core.math_utils import Vec3, quat_inverse, quat_rotate_vec3, vec3
from rigforge.core.scene_graph import JointAttribute, Scene, SceneNode, SkeletonRole

logger = logging.getLogger(__name__)


class OffsetPolicy(IntEnum):
    FIXED = 0
    UP = 1      # foot-plane weight: points straight up in world space
    DOWN = 2    # ground-contact target: reaches the floor below the parent


def _parent_local_direction(parent: SceneNode, world_dir: Vec3) -> Vec3:
    """Express a world-space direction in ``parent``'s rotated frame."""
    inv = quat_inverse(parent.get_world_rotation())
    return quat_rotate_vec3(inv, world_dir)


def synthesize_joint(
    scene: Scene,
    name: str,
    parent_name: str,
    policy: OffsetPolicy = OffsetPolicy.FIXED,
    base_offset: Sequence[float] = (0.0, 0.0, 0.0),
) -> Optional[SceneNode]:
    """Create limb joint ``name`` under ``parent_name``.

    A missing parent is a silent no-op returning None; rigs vary in
    completeness and batch runs must keep going.
    """
    parent = scene.find_node(parent_name)
    if parent is None:
        logger.debug("Skipping %s: parent %s not in scene", name, parent_name)
        return None

    node = SceneNode(name, JointAttribute(SkeletonRole.LIMB_NODE))
    node.translation = np.asarray(base_offset, dtype=np.float64).copy()

    policy = OffsetPolicy(policy)
    if policy != OffsetPolicy.FIXED:
        scene.update()
        if policy == OffsetPolicy.UP:
            node.translation = _parent_local_direction(parent, WORLD_UP) * UP_REFERENCE_LENGTH
        else:
            height = parent.get_world_position()[1]
            node.translation = _parent_local_direction(parent, WORLD_DOWN) * height

    parent.add(node)
    logger.debug("Added joint %s under %s at %s", name, parent_name, node.translation)
    return node


def add_ik_joints(scene: Scene) -> list[SceneNode]:
    """Add the standard eight-joint IK set; absent parents are skipped."""
    created = []
    for name, parent_name, policy, offset in IK_JOINT_SET:
        node = synthesize_joint(scene, name, parent_name, OffsetPolicy(policy), vec3(*offset))
        if node is not None:
            created.append(node)
    logger.info("Added %d of %d IK joints", len(created), len(IK_JOINT_SET))
    return created
