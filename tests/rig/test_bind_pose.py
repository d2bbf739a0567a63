"""Tests for the bind-pose reset."""

import numpy as np

from rigforge.core.math_utils import mat4_translation
from rigforge.core.mesh import Cluster, MeshAttribute, SkinBinding
from rigforge.core.scene_graph import JointAttribute, Scene, SceneNode
from rigforge.rig.bind_pose import apply_weapon_fix, reset_bind_pose


def _skinned(name, *links):
    clusters = [Cluster(link, transform_link=m) for link, m in links]
    return SceneNode(name, MeshAttribute(vertices=np.zeros((4, 3)),
                                         skins=[SkinBinding(clusters=clusters)]))


def test_cluster_reset_and_pivot_recentred():
    mesh = _skinned("Sword", ("RightHand", mat4_translation(0, 10, 0)))
    assert reset_bind_pose(mesh) == 1

    cluster = mesh.mesh.skins[0].clusters[0]
    np.testing.assert_array_equal(cluster.transform_link, np.eye(4))
    assert mesh.pivot_active
    np.testing.assert_array_almost_equal(mesh.geometric_translation, [0, 5, 0])


def test_last_cluster_sets_pivot():
    mesh = _skinned(
        "Shield",
        ("LeftHand", mat4_translation(2, 0, 0)),
        ("LeftForeArm", mat4_translation(0, 0, -8)),
    )
    assert reset_bind_pose(mesh) == 2
    np.testing.assert_array_almost_equal(mesh.geometric_translation, [0, 0, -4])


def test_names_unchanged_and_nested_meshes_visited():
    scene = Scene()
    hand = SceneNode("RightHand", JointAttribute())
    outer = _skinned("Sword", ("RightHand", mat4_translation(0, 4, 0)))
    inner = _skinned("Scabbard", ("Hips", mat4_translation(6, 0, 0)))
    scene.root.add(hand)
    hand.add(outer)
    outer.add(inner)
    names = [n.name for n in scene.nodes()]

    assert apply_weapon_fix(scene) == 2
    assert [n.name for n in scene.nodes()] == names
    np.testing.assert_array_almost_equal(inner.geometric_translation, [3, 0, 0])


def test_unskinned_nodes_untouched():
    plain = SceneNode("Prop", MeshAttribute(vertices=np.ones((2, 3))))
    joint = SceneNode("Hips", JointAttribute())
    joint.add(plain)
    assert reset_bind_pose(joint) == 0
    assert not plain.pivot_active
    np.testing.assert_array_equal(plain.geometric_translation, [0, 0, 0])
