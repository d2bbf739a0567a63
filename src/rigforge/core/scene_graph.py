"""Scene graph with hierarchical transforms and tagged node attributes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Union

import numpy as np

from rigforge.core.math_utils import (
    Mat4, Vec3, Quat,
    mat4_identity, mat4_compose, mat4_decompose, mat4_from_quaternion,
    quat_identity, quat_from_euler_degrees, quat_inverse, quat_multiply, vec3,
)
from rigforge.core.mesh import MeshAttribute


class SkeletonRole(Enum):
    ROOT = "root"
    LIMB_NODE = "limb"
    EFFECTOR = "effector"


@dataclass
class JointAttribute:
    """Node attribute marking a node as a skeleton joint."""
    role: SkeletonRole = SkeletonRole.LIMB_NODE


NodeAttribute = Union[JointAttribute, MeshAttribute]


class SceneNode:
    """A node in the scene graph hierarchy.

    Local matrix = T @ Rpre @ R @ inverse(Rpost) @ S.
    World matrix = parent.world_matrix @ local_matrix.

    ``attribute`` classifies the node: None (plain transform), a
    JointAttribute or a MeshAttribute.
    """

    def __init__(self, name: str = "", attribute: Optional[NodeAttribute] = None):
        self.name = name
        self.attribute = attribute
        self.parent: Optional["SceneNode"] = None
        self.children: list["SceneNode"] = []

        # Transform
        self.translation: Vec3 = vec3()
        self.rotation: Quat = quat_identity()
        self.pre_rotation: Quat = quat_identity()
        self.post_rotation: Quat = quat_identity()
        self.scale: Vec3 = vec3(1, 1, 1)

        # Destination-pivot geometric offset; applies to the node's own
        # geometry only, never to its children.
        self.geometric_translation: Vec3 = vec3()
        self.pivot_active: bool = False

        self.properties: dict[str, object] = {}

        self.world_matrix: Mat4 = mat4_identity()

    def __repr__(self) -> str:
        return f"SceneNode({self.name!r}, kind={self.kind})"

    # ── Classification ──

    @property
    def kind(self) -> str:
        if isinstance(self.attribute, JointAttribute):
            return "joint"
        if isinstance(self.attribute, MeshAttribute):
            return "mesh"
        return "none"

    @property
    def joint(self) -> Optional[JointAttribute]:
        return self.attribute if isinstance(self.attribute, JointAttribute) else None

    @property
    def mesh(self) -> Optional[MeshAttribute]:
        return self.attribute if isinstance(self.attribute, MeshAttribute) else None

    @property
    def is_joint(self) -> bool:
        return self.joint is not None

    # ── Hierarchy ──

    def add(self, child: "SceneNode", index: Optional[int] = None) -> "SceneNode":
        """Add a child node. Removes from previous parent if any."""
        if child is self or child.is_ancestor_of(self):
            raise ValueError(f"Adding {child.name!r} under {self.name!r} would create a cycle")
        if child.parent is not None:
            child.parent.remove(child)
        child.parent = self
        if index is None:
            self.children.append(child)
        else:
            self.children.insert(index, child)
        return self

    def remove(self, child: "SceneNode") -> "SceneNode":
        """Remove a child node."""
        if child in self.children:
            self.children.remove(child)
            child.parent = None
        return self

    def is_ancestor_of(self, other: "SceneNode") -> bool:
        node = other.parent
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False

    @property
    def child_count(self) -> int:
        return len(self.children)

    # ── Transform ──

    def set_translation(self, x: float, y: float, z: float) -> "SceneNode":
        self.translation = vec3(x, y, z)
        return self

    def set_rotation(self, q: Quat) -> "SceneNode":
        self.rotation = np.asarray(q, dtype=np.float64).copy()
        return self

    def set_rotation_euler(self, x: float, y: float, z: float) -> "SceneNode":
        """Set local rotation from Euler degrees (X, then Y, then Z)."""
        self.rotation = quat_from_euler_degrees(x, y, z)
        return self

    def set_scale(self, x: float, y: float, z: float) -> "SceneNode":
        self.scale = vec3(x, y, z)
        return self

    def local_matrix(self) -> Mat4:
        """Compose the local matrix from translation, rotations and scale."""
        m = mat4_compose(self.translation, quat_identity(), self.scale)
        q = quat_multiply(
            quat_multiply(self.pre_rotation, self.rotation),
            quat_inverse(self.post_rotation),
        )
        rot = mat4_from_quaternion(q)
        m[:3, :3] = rot[:3, :3] @ m[:3, :3]
        return m

    def update_world_matrix(self) -> None:
        """Recursively update world matrices for this node and all descendants."""
        if self.parent is not None:
            self.world_matrix = self.parent.world_matrix @ self.local_matrix()
        else:
            self.world_matrix = self.local_matrix()

        for child in self.children:
            child.update_world_matrix()

    def get_world_position(self) -> Vec3:
        """Extract world position from world matrix."""
        return self.world_matrix[:3, 3].copy()

    def get_world_rotation(self) -> Quat:
        """Extract world rotation (scale removed) from world matrix."""
        return mat4_decompose(self.world_matrix)[1]

    # ── Traversal ──

    def iter_nodes(self) -> Iterator["SceneNode"]:
        """Yield this node and all descendants in pre-order."""
        yield self
        for child in list(self.children):
            yield from child.iter_nodes()

    def find(self, name: str) -> Optional["SceneNode"]:
        """Find first descendant with given name."""
        if self.name == name:
            return self
        for child in self.children:
            found = child.find(name)
            if found is not None:
                return found
        return None


@dataclass
class AnimationStack:
    """A named take. Curve data is carried through but never resampled."""
    name: str
    curves: dict = field(default_factory=dict)


@dataclass
class SceneMetadata:
    title: str = ""
    subject: str = ""
    author: str = ""
    keywords: str = ""
    revision: str = ""
    comment: str = ""


class Scene:
    """A scene: one unclassified root node plus document-level data."""

    ROOT_NAME = "RootNode"

    def __init__(self, root: Optional[SceneNode] = None, axis: str = "maya-y"):
        self.root = root if root is not None else SceneNode(self.ROOT_NAME)
        self.axis = axis
        self.metadata = SceneMetadata()
        self.animation_stacks: list[AnimationStack] = []
        self.current_animation_stack: Optional[str] = None

    def update(self) -> None:
        """Update all world matrices in the scene."""
        self.root.update_world_matrix()

    def find_node(self, name: str) -> Optional[SceneNode]:
        return self.root.find(name)

    def nodes(self) -> list[SceneNode]:
        return list(self.root.iter_nodes())

    def joints(self) -> list[SceneNode]:
        return [n for n in self.root.iter_nodes() if n.is_joint]

    def meshes(self) -> list[SceneNode]:
        return [n for n in self.root.iter_nodes() if n.mesh is not None]

    @property
    def node_count(self) -> int:
        return sum(1 for _ in self.root.iter_nodes())

    def remove_node(self, node: SceneNode) -> bool:
        """Delete ``node`` (and whatever it still owns) from the scene."""
        if node is self.root or node.parent is None:
            return False
        node.parent.remove(node)
        return True

    def remove_animation_stack(self, name: str) -> bool:
        for stack in self.animation_stacks:
            if stack.name == name:
                self.animation_stacks.remove(stack)
                if self.current_animation_stack == name:
                    self.current_animation_stack = None
                return True
        return False
