"""Tests for the JSON scene document loader/saver."""

import json

import numpy as np
import pytest

from rigforge.core.math_utils import quat_from_axis_angle, vec3
from rigforge.core.mesh import Cluster, MeshAttribute, SkinBinding
from rigforge.core.scene_graph import AnimationStack, JointAttribute, Scene, SceneNode, SkeletonRole
from rigforge.loaders.scene_document import (
    SceneDocumentProvider, load_scene_document, node_from_dict, save_scene_document,
    scene_from_dict,
)


def _make_scene():
    scene = Scene(axis="max")
    scene.metadata.title = "Hero"
    scene.metadata.author = "Rigging"
    hips = SceneNode("Hips", JointAttribute(SkeletonRole.ROOT)).set_translation(0, 95, 0)
    hips.pre_rotation = quat_from_axis_angle(vec3(1, 0, 0), -np.pi / 2)
    link = np.eye(4)
    link[:3, 3] = [0, 95, 0]
    body = SceneNode("Body", MeshAttribute(
        vertices=[[0, 0, 0], [1, 2, 3]],
        skins=[SkinBinding("Skin", [Cluster("Hips", link, [0, 1], [0.25, 0.75])])],
    ))
    body.pivot_active = True
    body.geometric_translation = vec3(0, -2, 0)
    body.properties["primitive-type"] = "box"
    scene.root.add(hips)
    scene.root.add(body)
    scene.animation_stacks = [AnimationStack("Take 001", {"Hips": [0.0, 1.0]})]
    scene.current_animation_stack = "Take 001"
    return scene


def test_save_and_load(tmp_path):
    path = tmp_path / "hero.rig.json"
    save_scene_document(_make_scene(), path)
    scene = load_scene_document(path)

    assert scene.axis == "max"
    assert scene.metadata.title == "Hero"
    assert scene.current_animation_stack == "Take 001"
    assert scene.animation_stacks[0].curves == {"Hips": [0.0, 1.0]}

    hips = scene.find_node("Hips")
    assert hips.joint.role == SkeletonRole.ROOT
    np.testing.assert_array_almost_equal(
        hips.pre_rotation, quat_from_axis_angle(vec3(1, 0, 0), -np.pi / 2))

    body = scene.find_node("Body")
    assert body.pivot_active
    np.testing.assert_array_equal(body.geometric_translation, [0, -2, 0])
    assert body.properties == {"primitive-type": "box"}
    cluster = body.mesh.skins[0].clusters[0]
    assert cluster.link == "Hips"
    np.testing.assert_array_equal(cluster.indices, [0, 1])
    np.testing.assert_array_almost_equal(cluster.weights, [0.25, 0.75])
    np.testing.assert_array_equal(cluster.transform_link[:3, 3], [0, 95, 0])


def test_euler_rotation_keys():
    node = node_from_dict({"name": "Spine", "kind": "joint", "rotation_euler": [0, 0, 90]})
    node.add(SceneNode("tip").set_translation(1, 0, 0))
    node.update_world_matrix()
    np.testing.assert_array_almost_equal(node.children[0].get_world_position(), [0, 1, 0])


def test_defaults():
    scene = scene_from_dict({"root": {"name": "RootNode"}})
    assert scene.axis == "maya-y"
    assert scene.root.kind == "none"
    np.testing.assert_array_equal(scene.root.scale, [1, 1, 1])
    assert scene.current_animation_stack is None


def test_unknown_kind_rejected():
    with pytest.raises(ValueError):
        node_from_dict({"name": "x", "kind": "camera"})


def test_bad_vector_rejected():
    with pytest.raises(ValueError):
        node_from_dict({"name": "x", "translation": [1, 2]})


def test_provider_reports_failures(tmp_path):
    provider = SceneDocumentProvider()
    assert provider.load(tmp_path / "missing.rig.json") is None

    bad = tmp_path / "bad.rig.json"
    bad.write_text(json.dumps({"root": {"name": "r", "kind": "camera"}}))
    assert provider.load(bad) is None

    no_root = tmp_path / "empty.rig.json"
    no_root.write_text("{}")
    assert provider.load(no_root) is None

    assert provider.save(_make_scene(), tmp_path / "no-dir" / "out.rig.json") is False


@pytest.mark.parametrize("document", [
    {"root": 5},
    {"root": {"name": "R", "children": [5]}},
    {"root": {"name": "R"}, "metadata": "hero"},
    {"root": {"name": "R"}, "axis": 3},
    {"root": {"name": "R"}, "animation_stacks": ["Take 001"]},
    {"root": {"name": "B", "kind": "mesh", "skins": [[]]}},
    {"root": {"name": "B", "kind": "mesh", "skins": [{"clusters": [7]}]}},
])
def test_provider_rejects_wrong_shapes(tmp_path, document):
    path = tmp_path / "odd.rig.json"
    path.write_text(json.dumps(document))
    assert SceneDocumentProvider().load(path) is None


def test_provider_accepts_suffix(tmp_path):
    provider = SceneDocumentProvider()
    assert provider.accepts(tmp_path / "hero.rig.json")
    assert provider.accepts(tmp_path / "HERO.RIG.JSON")
    assert not provider.accepts(tmp_path / "hero.json")
    assert not provider.accepts(tmp_path / "hero.fbx")
