"""Tests for building skeletons from glTF skins"""

import numpy as np
import pytest

from gltfrig.errors import GltfImportError
from gltfrig.loaders import SkeletonBuilder

from gltf_factory import GltfFactory, humanoid


def test_skin_root_is_topmost_joint():
    """The root is found by walking parents from the first skin joint"""
    gltf = humanoid().build()
    builder = SkeletonBuilder(gltf)
    assert builder.find_skin_root(gltf.skins[0]) == 1


def test_empty_skin_has_no_root():
    """A skin without joints contributes no root"""
    factory = humanoid()
    factory.add_skin([])
    gltf = factory.build()
    assert SkeletonBuilder(gltf).find_skin_root(gltf.skins[1]) is None


def test_build_joint_hierarchy():
    """Joints are laid out depth-first in source child order"""
    result = SkeletonBuilder(humanoid().build()).build()
    skeleton = result.skeleton

    assert skeleton.joint_names() == ["Hips", "Spine", "gltf_node_3", "Spine_4"]
    assert [j.parent for j in skeleton.joints] == [None, 0, 1, 0]
    assert [j.node_index for j in skeleton.joints] == [1, 2, 3, 4]
    assert skeleton.roots == [0]
    assert result.scene_index == 0


def test_names_are_unique_and_registered():
    """Renamed joints are recorded for later lookup"""
    result = SkeletonBuilder(humanoid().build()).build()
    names = result.skeleton.joint_names()

    assert all(names)
    assert len(set(names)) == len(names)
    assert result.names.node_for("Spine_4") == 4
    assert result.names.name_for(3) == "gltf_node_3"
    # Nodes outside the skeleton are never named
    assert result.names.name_for(0) is None
    assert result.names.name_for(5) is None


def test_duplicate_names_follow_node_order():
    """The lower node index keeps the name even when visited second"""
    factory = GltfFactory()
    factory.add_node("Root", children=[2, 1])
    factory.add_node("Arm")
    factory.add_node("Arm")
    factory.add_scene([0])
    factory.add_skin([0, 1, 2])
    result = SkeletonBuilder(factory.build()).build()

    assert result.skeleton.joint_names() == ["Root", "Arm_2", "Arm"]
    assert result.names.name_for(1) == "Arm"
    assert result.names.name_for(2) == "Arm_2"


def test_duplicate_names_across_roots():
    """Naming order is by node index, not by skeleton root"""
    factory = GltfFactory()
    factory.add_node("Left", children=[3])
    factory.add_node("Right", children=[2])
    factory.add_node("Hand")
    factory.add_node("Hand")
    factory.add_scene([0, 1])
    factory.add_skin([0])
    factory.add_skin([1])
    result = SkeletonBuilder(factory.build()).build()

    assert result.skeleton.joint_names() == ["Left", "Hand_3", "Right", "Hand"]
    assert result.names.name_for(2) == "Hand"
    assert result.names.name_for(3) == "Hand_3"


def test_rest_transforms():
    """Only authored TRS components override the identity"""
    skeleton = SkeletonBuilder(humanoid().build()).build().skeleton
    hips, spine, unnamed, spine_4 = skeleton.joints

    assert np.allclose(hips.translation, [0.0, 1.0, 0.0])
    assert np.allclose(hips.rotation, [0.0, 0.0, 0.0, 1.0])
    assert np.allclose(spine.rotation, [0.0, 0.0, 0.70710678, 0.70710678])
    assert np.allclose(spine.translation, [0.0, 0.0, 0.0])
    assert np.allclose(unnamed.scale, [1.0, 1.0, 1.0])
    assert np.allclose(spine_4.scale, [2.0, 2.0, 2.0])


def test_matrix_node_is_rejected():
    """A joint with an explicit matrix fails the whole build"""
    factory = humanoid()
    factory.gltf.nodes[3].matrix = [1.0, 0.0, 0.0, 0.0,
                                    0.0, 1.0, 0.0, 0.0,
                                    0.0, 0.0, 1.0, 0.0,
                                    0.0, 0.0, 0.0, 1.0]
    with pytest.raises(GltfImportError, match="matrix"):
        SkeletonBuilder(factory.build()).build()


def test_build_is_deterministic():
    """Building twice gives identical skeletons"""
    gltf = humanoid().build()
    first = SkeletonBuilder(gltf).build().skeleton
    second = SkeletonBuilder(gltf).build().skeleton

    assert first.joint_names() == second.joint_names()
    assert [j.parent for j in first.joints] == [j.parent for j in second.joints]
    assert [j.children for j in first.joints] == [j.children for j in second.joints]


def test_shared_roots_are_deduplicated():
    """Two skins over the same hierarchy produce one root"""
    factory = humanoid()
    factory.add_skin([4, 1])
    skeleton = SkeletonBuilder(factory.build()).build().skeleton
    assert skeleton.roots == [0]
    assert skeleton.num_joints == 4


def test_nested_skin_root_is_merged():
    """A skin rooted inside another skeleton adds no second copy"""
    factory = humanoid()
    factory.add_skin([3, 2])
    skeleton = SkeletonBuilder(factory.build()).build().skeleton
    assert skeleton.roots == [0]
    assert skeleton.joint_names() == ["Hips", "Spine", "gltf_node_3", "Spine_4"]


def test_independent_skins_give_multiple_roots():
    """Separate hierarchies become separate roots"""
    factory = humanoid()
    tail = factory.add_node("Tail")
    factory.add_node("TailRoot", children=[tail])
    factory.gltf.scenes[0].nodes.append(tail + 1)
    factory.add_skin([tail])
    skeleton = SkeletonBuilder(factory.build()).build().skeleton

    assert len(skeleton.roots) == 2
    assert skeleton.joint_names()[-1] == "Tail"
    # The skin only lists Tail, so TailRoot is not part of the skeleton
    assert skeleton.get_joint("TailRoot") is None


def test_skins_outside_scene_are_ignored():
    """Only skins reachable from the scene roots are imported"""
    factory = humanoid()
    other = factory.add_node("Other")
    factory.add_scene([other])
    factory.add_skin([other])

    skeleton = SkeletonBuilder(factory.build()).build(scene_index=0).skeleton
    assert skeleton.get_joint("Other") is None

    skeleton = SkeletonBuilder(factory.build()).build(scene_index=1).skeleton
    assert skeleton.joint_names() == ["Other"]


def test_default_scene_selection():
    """The document's default scene is used unless one is requested"""
    factory = humanoid()
    factory.add_scene([0])
    gltf = factory.build()
    builder = SkeletonBuilder(gltf)

    assert builder.select_scene() == 0
    gltf.scene = 1
    assert builder.select_scene() == 1
    gltf.scene = 9
    assert builder.select_scene() == 0
    with pytest.raises(GltfImportError):
        builder.select_scene(5)


def test_no_scenes():
    """Documents without scenes cannot be imported"""
    factory = GltfFactory()
    factory.add_node("Hips")
    factory.add_skin([0])
    with pytest.raises(GltfImportError, match="No scenes"):
        SkeletonBuilder(factory.build()).build()


def test_no_skins():
    """Documents without skins cannot be imported"""
    factory = GltfFactory()
    factory.add_node("Hips")
    factory.add_scene([0])
    with pytest.raises(GltfImportError, match="No skins"):
        SkeletonBuilder(factory.build()).build()


def test_scene_without_nodes():
    """An empty scene has nothing to import"""
    factory = humanoid()
    factory.add_scene([])
    with pytest.raises(GltfImportError, match="has no nodes"):
        SkeletonBuilder(factory.build()).build(scene_index=1)


def test_scene_without_skins():
    """A scene whose nodes carry no skin cannot be imported"""
    factory = humanoid()
    factory.add_scene([5])
    with pytest.raises(GltfImportError, match="No skins exist"):
        SkeletonBuilder(factory.build()).build(scene_index=1)
