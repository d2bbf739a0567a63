"""Mesh and skin-binding data structures (no file-format dependencies)."""

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from rigforge.core.math_utils import Mat4, mat4_identity


@dataclass
class Cluster:
    """Binds one joint to a set of mesh vertices.

    link: name of the skeleton joint driving the vertices
    transform_link: the joint's world transform at bind time
    indices / weights: per-vertex influence pairs
    """
    link: str
    transform_link: Mat4 = field(default_factory=mat4_identity)
    indices: NDArray[np.int32] = field(
        default_factory=lambda: np.zeros(0, dtype=np.int32))
    weights: NDArray[np.float64] = field(
        default_factory=lambda: np.zeros(0, dtype=np.float64))

    def __post_init__(self):
        self.transform_link = np.asarray(self.transform_link, dtype=np.float64).reshape(4, 4)
        self.indices = np.asarray(self.indices, dtype=np.int32)
        self.weights = np.asarray(self.weights, dtype=np.float64)
        if len(self.indices) != len(self.weights):
            raise ValueError(
                f"Cluster {self.link!r}: {len(self.indices)} indices "
                f"but {len(self.weights)} weights"
            )

    @property
    def influence_count(self) -> int:
        return len(self.indices)


@dataclass
class SkinBinding:
    """One skin deformer: an ordered list of clusters."""
    name: str = "Skin"
    clusters: list[Cluster] = field(default_factory=list)


@dataclass
class MeshAttribute:
    """Node attribute marking a node as a mesh.

    vertices: (N, 3) float64 control points in the mesh's bind space.
    """
    vertices: NDArray[np.float64] = field(
        default_factory=lambda: np.zeros((0, 3), dtype=np.float64))
    skins: list[SkinBinding] = field(default_factory=list)

    def __post_init__(self):
        self.vertices = np.asarray(self.vertices, dtype=np.float64).reshape(-1, 3)

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def is_skinned(self) -> bool:
        return len(self.skins) > 0


def make_box_vertices(half_extent: float = 1.0) -> NDArray[np.float64]:
    """Eight corners of an axis-aligned cube centred on the origin."""
    h = half_extent
    return np.array([
        [-h, -h, -h], [h, -h, -h], [h, h, -h], [-h, h, -h],
        [-h, -h, h], [h, -h, h], [h, h, h], [-h, h, h],
    ], dtype=np.float64)
