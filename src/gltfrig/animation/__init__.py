"""
Animation System

Skeleton and keyframe animation data produced by the glTF importer.
"""

from .skeleton import Joint, Skeleton
from .animation import Keyframe, JointTrack, Animation, AnimationTarget, InterpolationType
from .spline import sample_hermite_spline

__all__ = [
    'Joint',
    'Skeleton',
    'Keyframe',
    'JointTrack',
    'Animation',
    'AnimationTarget',
    'InterpolationType',
    'sample_hermite_spline',
]
