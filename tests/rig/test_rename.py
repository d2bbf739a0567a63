"""Tests for the rename & enhancement pass."""

import numpy as np

from rigforge.core.config_loader import EnhancementTable, JointEnhancement
from rigforge.core.mesh import Cluster, MeshAttribute, SkinBinding
from rigforge.core.scene_graph import JointAttribute, Scene, SceneNode, SkeletonRole
from rigforge.rig.rename import apply_rename_pass, rename_and_enhance


def _joint(name, x=0.0, y=0.0, z=0.0, role=SkeletonRole.LIMB_NODE):
    return SceneNode(name, JointAttribute(role)).set_translation(x, y, z)


def _make_rig():
    scene = Scene()
    hips = _joint("mixamorig:Hips", 1.5, 95.0, -2.0, role=SkeletonRole.ROOT)
    spine = _joint("mixamorig:Spine", 0.0, 10.0, 0.5)
    head = _joint("mixamorig:Head", 0.0, 30.0, 0.0)
    scene.root.add(hips)
    hips.add(spine)
    spine.add(head)
    scene.root.add(SceneNode("mixamorig:Spine", MeshAttribute()))  # mesh sharing a joint name
    return scene


def _table(*entries):
    return EnhancementTable([JointEnhancement(*e) for e in entries])


def test_mapped_joints_renamed_and_unmapped_left_alone():
    scene = _make_rig()
    table = _table(("mixamorig:Hips", "Hips"), ("mixamorig:Spine", "Spine"))
    assert apply_rename_pass(scene, table) == 2
    names = [n.name for n in scene.joints()]
    assert names == ["Hips", "Spine", "mixamorig:Head"]


def test_non_joint_nodes_are_not_renamed():
    scene = _make_rig()
    apply_rename_pass(scene, _table(("mixamorig:Spine", "Spine")))
    assert scene.meshes()[0].name == "mixamorig:Spine"


def test_hips_translation_zeroed_on_x_and_z():
    scene = _make_rig()
    apply_rename_pass(scene, _table(("mixamorig:Hips", "Hips")))
    np.testing.assert_array_equal(scene.find_node("Hips").translation, [0.0, 95.0, 0.0])


def test_hips_rule_applies_without_a_table_entry():
    scene = Scene()
    hips = _joint("Hips", 3.0, 90.0, 4.0)
    scene.root.add(hips)
    assert rename_and_enhance(scene, hips, EnhancementTable()) is False
    np.testing.assert_array_equal(hips.translation, [0.0, 90.0, 0.0])


def test_other_joints_keep_translation():
    scene = _make_rig()
    apply_rename_pass(scene, _table(("mixamorig:Spine", "Spine")))
    np.testing.assert_array_equal(scene.find_node("Spine").translation, [0.0, 10.0, 0.5])


def test_each_joint_visited_once_in_preorder():
    # A chained mapping would double-rename a node visited twice.
    scene = Scene()
    a = _joint("A")
    b = _joint("B")
    scene.root.add(a)
    a.add(b)
    apply_rename_pass(scene, _table(("A", "B"), ("B", "C")))
    assert a.name == "B"
    assert b.name == "C"


def test_cluster_links_follow_renamed_joints():
    scene = Scene()
    a = _joint("A")
    b = _joint("B")
    scene.root.add(a)
    a.add(b)
    skin = SkinBinding(clusters=[Cluster("A"), Cluster("B"), Cluster("Other")])
    scene.root.add(SceneNode("Body", MeshAttribute(skins=[skin])))

    apply_rename_pass(scene, _table(("A", "B"), ("B", "C")))
    assert [c.link for c in skin.clusters] == ["B", "C", "Other"]


def test_no_proxies_by_default():
    scene = _make_rig()
    before = scene.node_count
    table = _table(("mixamorig:Spine", "Spine", "capsule", "box", "capsule", "Hips"))
    apply_rename_pass(scene, table)
    assert scene.node_count == before


def test_physics_proxy_attached_under_renamed_joint():
    scene = _make_rig()
    table = _table(("mixamorig:Spine", "Spine", "capsule", "", "capsule"))
    apply_rename_pass(scene, table, create_proxies=True)

    proxy = scene.find_node("Spine__phys")
    assert proxy is not None
    assert proxy.parent is scene.find_node("Spine")
    assert proxy.mesh.vertex_count == 8
    assert proxy.properties["primitive-type"] == "capsule"
    np.testing.assert_array_equal(proxy.translation, [0, 0, 0])


def test_ragdoll_proxy_under_configured_parent():
    scene = _make_rig()
    spine = scene.find_node("mixamorig:Spine")
    spine.set_rotation_euler(0, 45, 0)
    table = _table(
        ("mixamorig:Hips", "Hips"),
        ("mixamorig:Spine", "Spine", "", "box", "box", "Hips"),
    )
    apply_rename_pass(scene, table, create_proxies=True)

    proxy = scene.find_node("Spine__ragdoll")
    assert proxy.parent is scene.find_node("Hips")
    np.testing.assert_array_equal(proxy.translation, spine.translation)
    np.testing.assert_array_almost_equal(proxy.rotation, spine.rotation)
    assert proxy.properties["ragdoll-proxy"] == "box"


def test_ragdoll_proxy_falls_back_to_scene_root():
    scene = _make_rig()
    table = _table(("mixamorig:Head", "Head", "", "sphere", "", "NoSuchNode"))
    apply_rename_pass(scene, table, create_proxies=True)
    proxy = scene.find_node("Head__ragdoll")
    assert proxy.parent is scene.root


def test_proxies_are_not_visited_as_joints():
    scene = _make_rig()
    table = _table(
        ("mixamorig:Hips", "Hips", "box"),
        ("Hips__phys", "Renamed"),
    )
    apply_rename_pass(scene, table, create_proxies=True)
    assert scene.find_node("Hips__phys") is not None
    assert scene.find_node("Renamed") is None


def test_entry_without_proxy_fields_creates_nothing():
    scene = _make_rig()
    before = scene.node_count
    apply_rename_pass(scene, _table(("mixamorig:Spine", "Spine", "", "", "capsule")),
                      create_proxies=True)
    assert scene.node_count == before
