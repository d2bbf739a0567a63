"""Rename skeleton joints from the enhancement table and attach proxies."""

import logging
from typing import Optional

import numpy as np

from rigforge.constants import (
    HIPS_JOINT_NAME, PHYSICS_SUFFIX, PROXY_HALF_EXTENT, RAGDOLL_SUFFIX,
)
from rigforge.core.config_loader import EnhancementTable, JointEnhancement
from rigforge.core.mesh import Cluster, MeshAttribute, make_box_vertices
from rigforge.core.scene_graph import Scene, SceneNode

logger = logging.getLogger(__name__)


def _create_proxy(name: str, entry: JointEnhancement) -> SceneNode:
    """Placeholder box mesh standing in for a physics/ragdoll shape."""
    proxy = SceneNode(name, MeshAttribute(make_box_vertices(PROXY_HALF_EXTENT)))
    if entry.primitive_type:
        proxy.properties["primitive-type"] = entry.primitive_type
    return proxy


def _enhance_joint(scene: Scene, node: SceneNode, entry: JointEnhancement) -> list[SceneNode]:
    created = []

    if entry.physics_proxy:
        logger.info("PHYSICS for %s", entry.new_name)
        proxy = _create_proxy(entry.new_name + PHYSICS_SUFFIX, entry)
        proxy.properties["physics-proxy"] = entry.physics_proxy
        owner = scene.find_node(entry.new_name) or node
        owner.add(proxy)
        created.append(proxy)

    if entry.ragdoll_proxy:
        logger.info("RAGDOLL for %s", entry.new_name)
        proxy = _create_proxy(entry.new_name + RAGDOLL_SUFFIX, entry)
        proxy.properties["ragdoll-proxy"] = entry.ragdoll_proxy
        proxy.translation = node.translation.copy()
        proxy.rotation = node.rotation.copy()
        proxy.pre_rotation = node.pre_rotation.copy()
        proxy.post_rotation = node.post_rotation.copy()
        owner: Optional[SceneNode] = None
        if entry.parent_node:
            owner = scene.find_node(entry.parent_node)
        if owner is None:
            owner = scene.root
        owner.add(proxy)
        created.append(proxy)

    return created


def _bind_clusters(scene: Scene) -> list[tuple[Cluster, SceneNode]]:
    """Resolve each cluster link to its joint node before names change."""
    joints: dict[str, SceneNode] = {}
    for node in scene.joints():
        joints.setdefault(node.name, node)

    bound = []
    for node in scene.meshes():
        for skin in node.mesh.skins:
            for cluster in skin.clusters:
                joint = joints.get(cluster.link)
                if joint is not None:
                    bound.append((cluster, joint))
    return bound


def rename_and_enhance(
    scene: Scene,
    node: SceneNode,
    table: EnhancementTable,
    create_proxies: bool = False,
) -> bool:
    """Apply the table entry for ``node`` (if any). Returns True if renamed."""
    entry = table.get(node.name)
    renamed = entry is not None
    if renamed:
        # Lookups for the rest of this call use the original name, since
        # the node's own name changes underneath us.
        index_name = entry.old_name
        logger.debug("NEW NAME: %s -> %s", index_name, entry.new_name)
        node.name = entry.new_name
    else:
        logger.debug("Name: %s", node.name)

    if node.name == HIPS_JOINT_NAME:
        node.translation = np.array(
            [0.0, node.translation[1], 0.0], dtype=np.float64)

    joint = node.joint
    if joint is not None:
        logger.debug("  Skeleton Type: %s", joint.role.value)
    logger.debug("  Translation: %s", node.translation)

    if renamed and create_proxies:
        entry = table.get(index_name)
        if entry.has_proxies:
            _enhance_joint(scene, node, entry)
    return renamed


def apply_rename_pass(
    scene: Scene,
    table: EnhancementTable,
    create_proxies: bool = False,
) -> int:
    """Visit every skeleton joint once, parents before children.

    Skin clusters that linked a renamed joint are relinked to its new name.
    """
    bound = _bind_clusters(scene)
    renamed = 0

    def _visit(node: SceneNode) -> None:
        nonlocal renamed
        children = list(node.children)
        if node.is_joint and rename_and_enhance(scene, node, table, create_proxies):
            renamed += 1
        for child in children:
            _visit(child)

    _visit(scene.root)
    for cluster, joint in bound:
        cluster.link = joint.name
    logger.info("Renamed %d of %d joints", renamed, len(scene.joints()))
    return renamed
