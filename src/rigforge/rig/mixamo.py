"""Clean-up for characters exported from Mixamo."""

import logging

from rigforge.constants import (
    HIPS_JOINT_NAME, MIXAMO_MESH_GROUP, MIXAMO_MESH_NAMES, MIXAMO_RENAMES,
    MIXAMO_ROOT, MIXAMO_ROOT_PROXY,
)
from rigforge.core.scene_graph import JointAttribute, Scene, SceneNode, SkeletonRole

logger = logging.getLogger(__name__)


def apply_mixamo_fixes(scene: Scene) -> SceneNode:
    """Rename stock meshes, group them, and hang the skeleton under a Root joint.

    Returns the new ``Root`` joint.
    """
    for old_name, new_name in MIXAMO_RENAMES.items():
        node = scene.find_node(old_name)
        if node is not None:
            node.name = new_name

    root = scene.root
    mesh_group = SceneNode(MIXAMO_MESH_GROUP)
    root.add(mesh_group)
    for name in MIXAMO_MESH_NAMES:
        node = scene.find_node(name)
        if node is not None and node is not mesh_group:
            mesh_group.add(node)

    # Spare transform above the skeleton, used for scaling later on.
    root_proxy = SceneNode(MIXAMO_ROOT_PROXY)
    root.add(root_proxy)

    skeleton_root = SceneNode(MIXAMO_ROOT, JointAttribute(SkeletonRole.ROOT))
    root_proxy.add(skeleton_root)

    hips = scene.find_node(HIPS_JOINT_NAME)
    if hips is not None:
        skeleton_root.add(hips)
        if hips.joint is not None and hips.joint.role == SkeletonRole.ROOT:
            hips.joint.role = SkeletonRole.LIMB_NODE
    else:
        logger.warning("Mixamo fixes: no Hips joint found")

    logger.info("Applied Mixamo fixes (%d meshes grouped)", mesh_group.child_count)
    return skeleton_root
