"""Uniform scene rescale that keeps skinning intact.

Naively multiplying every local translation by ``s`` in one top-down pass
compounds the scale at each depth.  Instead the root is scaled, every world
pose is captured (snapshot #1), the root scale is removed again and each
node's local translation is rebuilt from snapshot #1 against a unit-scale
parent.  A second snapshot taken afterwards gives the bind matrices the
skin clusters need.

Animation curves are not rescaled; the current takes are removed.
"""

import logging

from rigforge.constants import SCALE_EPSILON
from rigforge.core.math_utils import mat4_inverse, mat4_with_unit_scale, transform_point, vec3
from rigforge.core.scene_graph import Scene, SceneNode
from rigforge.core.transform_cache import GlobalTransformCache

logger = logging.getLogger(__name__)


def is_unit_scale(factor: float) -> bool:
    return abs(factor - 1.0) <= SCALE_EPSILON


def _rebuild_local_translations(node: SceneNode, snapshot: GlobalTransformCache) -> None:
    parent_global = mat4_with_unit_scale(snapshot.parent_transform(node))
    global_m = snapshot.get(node.name)
    if global_m is not None:
        node.translation = transform_point(mat4_inverse(parent_global), global_m[:3, 3])

    for child in list(node.children):
        _rebuild_local_translations(child, snapshot)


def _scale_meshes(scene: Scene, factor: float, snapshot: GlobalTransformCache) -> int:
    updated = 0
    for node in scene.meshes():
        mesh = node.mesh
        mesh.vertices = mesh.vertices * factor

        for skin in mesh.skins:
            for cluster in skin.clusters:
                link = snapshot.get(cluster.link)
                if link is None:
                    logger.warning("Cluster link %r on mesh %r not found in scene",
                                   cluster.link, node.name)
                    continue
                cluster.transform_link = link
                updated += 1
    return updated


def remove_animation(scene: Scene) -> None:
    for stack in list(scene.animation_stacks):
        logger.info("Removing animation stack %r before rescale", stack.name)
        scene.remove_animation_stack(stack.name)


def uniform_rescale(scene: Scene, factor: float) -> bool:
    """Scale ``scene`` by ``factor``. Returns False when no scale was applied.

    The scene root's own local scale is not preserved: it ends up (1, 1, 1)
    whatever it was before.
    """
    if is_unit_scale(factor):
        return False

    remove_animation(scene)

    root = scene.root
    root.scale = vec3(factor, factor, factor)
    scaled = GlobalTransformCache.capture(scene)

    root.scale = vec3(1, 1, 1)
    _rebuild_local_translations(root, scaled)

    rebound = GlobalTransformCache.capture(scene)
    clusters = _scale_meshes(scene, factor, rebound)

    logger.info("Scaled scene by %g (%d skin clusters rebound)", factor, clusters)
    return True
