"""Tests for procedural IK joint synthesis."""

import numpy as np

from rigforge.core.scene_graph import JointAttribute, Scene, SceneNode, SkeletonRole
from rigforge.rig.ik_joints import OffsetPolicy, add_ik_joints, synthesize_joint


def _joint(name, x=0.0, y=0.0, z=0.0):
    return SceneNode(name, JointAttribute()).set_translation(x, y, z)


def _make_legs():
    scene = Scene()
    hips = _joint("Hips", 0, 90, 0)
    right = _joint("RightFoot", -10, -40, 0)
    left = _joint("LeftFoot", 10, -40, 0)
    head = _joint("Head", 0, 70, 0)
    scene.root.add(hips)
    hips.add(right)
    hips.add(left)
    hips.add(head)
    return scene


def test_up_reference_with_identity_parent():
    scene = Scene()
    scene.root.add(_joint("Foot"))
    node = synthesize_joint(scene, "Weight", "Foot", OffsetPolicy.UP)
    np.testing.assert_array_almost_equal(node.translation, [0, 100, 0])


def test_down_reference_reaches_the_floor():
    scene = Scene()
    scene.root.add(_joint("Foot", 0, 50, 0))
    node = synthesize_joint(scene, "Target", "Foot", OffsetPolicy.DOWN)
    np.testing.assert_array_almost_equal(node.translation, [0, -50, 0])
    scene.update()
    np.testing.assert_array_almost_equal(node.get_world_position(), [0, 0, 0])


def test_fixed_offset_kept():
    scene = Scene()
    scene.root.add(_joint("Head"))
    node = synthesize_joint(scene, "Camera", "Head", OffsetPolicy.FIXED, (0, 8.3, 7.4))
    np.testing.assert_array_almost_equal(node.translation, [0, 8.3, 7.4])
    assert node.joint.role == SkeletonRole.LIMB_NODE
    assert node.parent.name == "Head"


def test_missing_parent_is_noop():
    scene = Scene()
    before = scene.node_count
    assert synthesize_joint(scene, "Camera", "Head") is None
    assert scene.node_count == before
    assert scene.find_node("Camera") is None


def test_up_reference_in_rotated_parent():
    scene = Scene()
    foot = _joint("Foot").set_rotation_euler(0, 0, 90)
    scene.root.add(foot)
    node = synthesize_joint(scene, "Weight", "Foot", OffsetPolicy.UP)

    np.testing.assert_array_almost_equal(node.translation, [100, 0, 0])
    scene.update()
    offset = node.get_world_position() - foot.get_world_position()
    np.testing.assert_array_almost_equal(offset, [0, 100, 0])


def test_policy_accepts_plain_ints():
    scene = Scene()
    scene.root.add(_joint("Foot", 0, 20, 0))
    node = synthesize_joint(scene, "Target", "Foot", 2)
    np.testing.assert_array_almost_equal(node.translation, [0, -20, 0])


def test_standard_set_skips_missing_parents():
    scene = _make_legs()
    created = add_ik_joints(scene)
    names = [n.name for n in created]
    assert names == [
        "RightFootIKTarget", "RightFootIKWeight",
        "LeftFootIKTarget", "LeftFootIKWeight",
        "HeadIKLook", "Camera",
    ]
    assert scene.find_node("RightHandIK") is None

    scene.update()
    target = scene.find_node("LeftFootIKTarget")
    assert abs(target.get_world_position()[1]) < 1e-9
    weight = scene.find_node("RightFootIKWeight")
    np.testing.assert_array_almost_equal(weight.translation, [0, 100, 0])
