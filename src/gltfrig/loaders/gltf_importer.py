"""
glTF Importer

Imports the skeleton and animation clips of a glTF/GLB document.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

import pygltflib

from ..animation import Animation, Skeleton
from ..errors import GltfImportError, ValidationError
from .accessors import AccessorReader
from .animation_resampler import AnimationResampler
from .skeleton_builder import SkeletonBuilder, SkeletonImportResult


logger = logging.getLogger(__name__)


class GltfImporter:
    """
    Converts a parsed glTF document into a skeleton and animation clips.

    The skeleton has to be imported first: animations are resampled against
    its joints and reuse the joint names assigned while building it.
    """

    def __init__(self, gltf: pygltflib.GLTF2):
        """
        Initialize importer.

        Args:
            gltf: Parsed glTF document
        """
        self.gltf = gltf
        self.reader = AccessorReader(gltf)
        self.skeleton_result: Optional[SkeletonImportResult] = None
        self._resampler: Optional[AnimationResampler] = None

    @classmethod
    def load(cls, filepath) -> 'GltfImporter':
        """
        Load a glTF or GLB file.

        Args:
            filepath: Path to .gltf or .glb file

        Returns:
            Importer for the loaded document
        """
        filepath = Path(filepath)
        if not filepath.exists():
            raise FileNotFoundError(f"glTF file not found: {filepath}")

        # Guess the container from the extension
        extension = filepath.suffix.lower()
        if extension == ".glb":
            gltf = pygltflib.GLTF2().load_binary(str(filepath))
        else:
            if extension != ".gltf":
                logger.warning("Unknown file extension '%s', assuming a JSON-formatted glTF.", extension)
            gltf = pygltflib.GLTF2().load_json(str(filepath))

        if gltf is None:
            raise GltfImportError(f"Failed to parse {filepath}")

        logger.info("glTF parsed successfully: %s", filepath)
        return cls(gltf)

    @property
    def skeleton(self) -> Optional[Skeleton]:
        return self.skeleton_result.skeleton if self.skeleton_result else None

    def import_skeleton(self, scene_index: Optional[int] = None) -> Skeleton:
        """
        Build the skeleton of a scene.

        Args:
            scene_index: Scene to import (defaults to the document's default scene)

        Returns:
            The skeleton
        """
        self.skeleton_result = SkeletonBuilder(self.gltf).build(scene_index)
        self._resampler = AnimationResampler(
            self.gltf, self.skeleton_result.skeleton, self.skeleton_result.names, reader=self.reader
        )
        return self.skeleton_result.skeleton

    def animation_names(self) -> List[str]:
        """Names of all importable animations, in document order."""
        names = []
        for anim_idx, gltf_anim in enumerate(self.gltf.animations or []):
            if not gltf_anim.name:
                logger.warning(
                    "Found animation #%d without a name. All animations must have valid and unique names. "
                    "The animation will be skipped.", anim_idx
                )
                continue
            names.append(gltf_anim.name)
        return names

    def import_animation(self, name: str, sampling_rate: float = 0.0) -> Animation:
        """
        Import one animation for the imported skeleton.

        Args:
            name: Animation name
            sampling_rate: Bake rate for cubic-spline channels (0 for automatic)

        Returns:
            The animation
        """
        if self._resampler is None:
            raise GltfImportError("The skeleton must be imported before animations")
        return self._resampler.resample(name, sampling_rate)

    def import_all(self, sampling_rate: float = 0.0, scene_index: Optional[int] = None,
                   skip_failed: bool = True) -> Dict[str, Animation]:
        """
        Import the skeleton and every named animation.

        Args:
            sampling_rate: Bake rate for cubic-spline channels (0 for automatic)
            scene_index: Scene to import
            skip_failed: Log and skip animations that fail instead of raising

        Returns:
            Dictionary mapping animation name to Animation
        """
        self.import_skeleton(scene_index)

        animations = {}
        for name in self.animation_names():
            try:
                animations[name] = self.import_animation(name, sampling_rate)
            except ValidationError as exc:
                if not skip_failed:
                    raise
                logger.error("Internal error while importing animation '%s': %s", name, exc)
            except GltfImportError as exc:
                if not skip_failed:
                    raise
                logger.error("Skipping animation '%s': %s", name, exc)

        return animations
