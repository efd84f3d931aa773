"""
gltfrig - glTF skeleton and animation importer

Converts the node/skin/animation graph of a glTF document into a runtime
skeleton and per-joint animation clips.
"""

# Animation data
from .animation import (
    Joint,
    Skeleton,
    Keyframe,
    JointTrack,
    Animation,
    AnimationTarget,
    InterpolationType,
)

# Loaders
from .loaders import (
    AccessorReader,
    JointNameRegistry,
    SkeletonBuilder,
    SkeletonImportResult,
    AnimationResampler,
    GltfImporter,
)

# Errors
from .errors import GltfImportError, AccessorError, ValidationError

__version__ = "0.1.0"
__all__ = [
    # Animation data
    "Joint",
    "Skeleton",
    "Keyframe",
    "JointTrack",
    "Animation",
    "AnimationTarget",
    "InterpolationType",
    # Loaders
    "AccessorReader",
    "JointNameRegistry",
    "SkeletonBuilder",
    "SkeletonImportResult",
    "AnimationResampler",
    "GltfImporter",
    # Errors
    "GltfImportError",
    "AccessorError",
    "ValidationError",
]
