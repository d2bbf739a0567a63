"""Bind-pose reset ("weapon fix"): zero cluster bind matrices, recenter geometry."""

import logging

from rigforge.core.math_utils import mat4_identity, mat4_inverse
from rigforge.core.scene_graph import Scene, SceneNode

logger = logging.getLogger(__name__)


def reset_bind_pose(node: SceneNode) -> int:
    """Reset skin clusters on ``node`` and its descendants.

    Node names are left untouched.  For each cluster the bind matrix becomes
    identity and the owning mesh node's destination pivot is moved to half
    the negated translation of the inverted bind matrix.

    Returns the number of clusters reset.
    """
    reset = 0
    influences = 0
    mesh = node.mesh
    if mesh is not None and mesh.is_skinned:
        for skin in mesh.skins:
            for cluster in skin.clusters:
                influences += cluster.influence_count
                inv_link = mat4_inverse(cluster.transform_link)
                cluster.transform_link = mat4_identity()
                node.pivot_active = True
                node.geometric_translation = -inv_link[:3, 3] * 0.5
                reset += 1
        logger.debug("Reset %d clusters (%d influences) on %s", reset, influences, node.name)

    for child in list(node.children):
        reset += reset_bind_pose(child)
    return reset


def apply_weapon_fix(scene: Scene) -> int:
    """Run the bind-pose reset over the whole scene."""
    reset = reset_bind_pose(scene.root)
    logger.info("Bind-pose reset: %d clusters", reset)
    return reset
