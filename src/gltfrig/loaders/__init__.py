"""Loader utilities converting glTF documents into skeletons and animations."""

from .accessors import AccessorReader
from .naming import JointNameRegistry
from .skeleton_builder import SkeletonBuilder, SkeletonImportResult
from .animation_resampler import AnimationResampler
from .gltf_importer import GltfImporter

__all__ = [
    'AccessorReader',
    'JointNameRegistry',
    'SkeletonBuilder',
    'SkeletonImportResult',
    'AnimationResampler',
    'GltfImporter',
]
