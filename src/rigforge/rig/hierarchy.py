"""Skeleton tree restructuring: insert ancestor, remove node, prune leaves.

Every operation snapshots a child list before detaching or reattaching
nodes, and a failed operation leaves the tree exactly as it found it.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from rigforge.core.scene_graph import JointAttribute, Scene, SceneNode, SkeletonRole

logger = logging.getLogger(__name__)


def insert_new_ancestor(
    scene: Scene,
    child: SceneNode,
    new_name: str,
    absorb_siblings: bool = False,
) -> Optional[SceneNode]:
    """Create joint ``new_name`` directly above ``child``.

    If ``child`` is a hierarchy root (no parent, or role ROOT) the new joint
    takes over the ROOT role and ``child`` is demoted to LIMB_NODE.  With
    ``absorb_siblings`` every child of the former parent moves under the new
    joint; otherwise only ``child`` does.

    Returns the new node, or None when ``child`` is not a skeleton joint.
    """
    joint = child.joint
    if joint is None:
        logger.warning("Cannot add parent %r above %r: not a skeleton joint",
                       new_name, child.name)
        return None

    old_parent = child.parent
    is_new_root = old_parent is None or joint.role == SkeletonRole.ROOT

    new_node = SceneNode(
        new_name,
        JointAttribute(SkeletonRole.ROOT if is_new_root else SkeletonRole.LIMB_NODE),
    )

    if old_parent is not None:
        if absorb_siblings:
            siblings = list(old_parent.children)
            for sibling in siblings:
                old_parent.remove(sibling)
                new_node.add(sibling)
            old_parent.add(new_node)
        else:
            index = old_parent.children.index(child)
            old_parent.remove(child)
            old_parent.add(new_node, index=index)
            new_node.add(child)
    else:
        new_node.add(child)
        if child is scene.root:
            scene.root = new_node

    if is_new_root:
        joint.role = SkeletonRole.LIMB_NODE

    logger.info("Added %s parent %r above %r", new_node.joint.role.value, new_name, child.name)
    return new_node


def remove_node(scene: Scene, node: SceneNode) -> bool:
    """Remove ``node``, handing its children to its former parent in order."""
    parent = node.parent
    if parent is None:
        logger.warning("Can not remove root node %s", node.name)
        return False

    index = parent.children.index(node)
    children = list(node.children)
    for offset, grandchild in enumerate(children, start=1):
        node.remove(grandchild)
        parent.add(grandchild, index=index + offset)

    return scene.remove_node(node)


@dataclass
class PruneReport:
    """Outcome of one leaf-pruning pass."""
    removed: list[str] = field(default_factory=list)
    not_leaf: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


def remove_leaf_bones(
    scene: Scene,
    node: SceneNode,
    name_filter: str,
    report: Optional[PruneReport] = None,
) -> PruneReport:
    """Post-order removal of childless nodes whose name contains ``name_filter``.

    Children are handled first, so a parent whose matching children were
    just removed is re-evaluated as a leaf.  Matching nodes that still have
    children are reported, never forced out.
    """
    if report is None:
        report = PruneReport()
    if not name_filter:
        return report

    for child in reversed(list(node.children)):
        remove_leaf_bones(scene, child, name_filter, report)

    name = node.name
    if name_filter not in name:
        return report

    if node.child_count == 0:
        removed = remove_node(scene, node)
        logger.info("%s removed: %s", name, removed)
        (report.removed if removed else report.failed).append(name)
    else:
        logger.info("%s is not leaf, can not remove!", name)
        report.not_leaf.append(name)
    return report
