"""Tests for the import pipeline"""

import logging

import pytest

from gltfrig import GltfImporter
from gltfrig.errors import GltfImportError, ValidationError

from gltf_factory import humanoid


LINEAR_CLIP = [(1, "translation", [0.0, 1.0], [[0.0, 1.0, 0.0], [0.0, 2.0, 0.0]], "LINEAR")]


def test_import_skeleton_and_animation():
    """The skeleton is imported first, then clips against it"""
    factory = humanoid()
    factory.add_animation("Walk", LINEAR_CLIP)
    importer = GltfImporter(factory.build())

    skeleton = importer.import_skeleton()
    animation = importer.import_animation("Walk", 30.0)

    assert importer.skeleton is skeleton
    assert animation.num_tracks == skeleton.num_joints
    assert animation.duration == pytest.approx(1.0)


def test_animation_before_skeleton():
    """Animations need an imported skeleton"""
    factory = humanoid()
    factory.add_animation("Walk", LINEAR_CLIP)
    with pytest.raises(GltfImportError, match="skeleton must be imported"):
        GltfImporter(factory.build()).import_animation("Walk")


def test_animation_names_skip_unnamed(caplog):
    """Unnamed clips are listed as skipped"""
    factory = humanoid()
    factory.add_animation("Walk", LINEAR_CLIP)
    factory.add_animation("", LINEAR_CLIP)
    factory.add_animation("Run", LINEAR_CLIP)
    importer = GltfImporter(factory.build())

    with caplog.at_level(logging.WARNING):
        assert importer.animation_names() == ["Walk", "Run"]
    assert "animation #1 without a name" in caplog.text


def test_import_all_skips_failed_clips(caplog):
    """One broken clip does not stop the others"""
    factory = humanoid()
    factory.add_animation("Walk", LINEAR_CLIP)
    factory.add_animation("Broken", [
        (1, "translation", [0.0, 1.0], [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]], "BOUNCE"),
    ])
    importer = GltfImporter(factory.build())

    with caplog.at_level(logging.ERROR):
        animations = importer.import_all(sampling_rate=30.0)

    assert list(animations) == ["Walk"]
    assert "Skipping animation 'Broken'" in caplog.text


def test_import_all_can_raise():
    """Failures propagate when skipping is disabled"""
    factory = humanoid()
    factory.add_animation("Broken", [
        (1, "translation", [1.0, 0.0], [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]], "LINEAR"),
    ])
    with pytest.raises(ValidationError):
        GltfImporter(factory.build()).import_all(sampling_rate=30.0, skip_failed=False)


def test_import_all_skeleton_failure_aborts():
    """Skeleton errors are never skipped"""
    factory = humanoid()
    factory.gltf.nodes[1].matrix = [1.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0,
                                    0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0, 1.0]
    with pytest.raises(GltfImportError):
        GltfImporter(factory.build()).import_all()


def test_load_missing_file(tmp_path):
    """Loading a missing file raises FileNotFoundError"""
    with pytest.raises(FileNotFoundError):
        GltfImporter.load(tmp_path / "missing.gltf")


def test_load_gltf_file(tmp_path):
    """JSON glTF files with embedded buffers import end to end"""
    factory = humanoid()
    factory.add_animation("Walk", LINEAR_CLIP)
    path = tmp_path / "rig.gltf"
    factory.build(data_uri=True).save_json(str(path))

    importer = GltfImporter.load(path)
    animations = importer.import_all(sampling_rate=30.0)

    assert importer.skeleton.joint_names() == ["Hips", "Spine", "gltf_node_3", "Spine_4"]
    assert list(animations) == ["Walk"]
