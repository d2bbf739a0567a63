"""Per-pass snapshot of world transforms keyed by node name."""

import logging
from typing import Optional

from rigforge.core.math_utils import Mat4, mat4_identity
from rigforge.core.scene_graph import Scene, SceneNode

logger = logging.getLogger(__name__)


class GlobalTransformCache:
    """Maps node name to the world matrix evaluated at capture time.

    A cache, not a source of truth: after any local-transform edit the
    entries are stale and a fresh cache must be captured.  When two nodes
    share a name the later one in pre-order wins.
    """

    def __init__(self):
        self._transforms: dict[str, Mat4] = {}

    @classmethod
    def capture(cls, scene: Scene) -> "GlobalTransformCache":
        """Evaluate the whole scene and snapshot every node's world matrix."""
        cache = cls()
        scene.update()
        cache._capture_recursive(scene.root)
        logger.debug("Captured %d world transforms", len(cache))
        return cache

    def _capture_recursive(self, node: SceneNode) -> None:
        self._transforms[node.name] = node.world_matrix.copy()
        for child in node.children:
            self._capture_recursive(child)

    def __len__(self) -> int:
        return len(self._transforms)

    def __contains__(self, name: str) -> bool:
        return name in self._transforms

    def get(self, name: str) -> Optional[Mat4]:
        m = self._transforms.get(name)
        return None if m is None else m.copy()

    def parent_transform(self, node: SceneNode) -> Mat4:
        """World matrix of ``node``'s parent; identity for a parentless node."""
        if node.parent is None:
            return mat4_identity()
        m = self.get(node.parent.name)
        return m if m is not None else mat4_identity()
