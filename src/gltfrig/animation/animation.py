"""
Animation

Per-joint keyframe tracks produced by the animation resampler.
"""

import math
from typing import List, Optional
from enum import Enum

from ..errors import ValidationError


class InterpolationType(Enum):
    """Animation interpolation types."""
    LINEAR = "LINEAR"
    STEP = "STEP"
    CUBICSPLINE = "CUBICSPLINE"


class AnimationTarget(Enum):
    """Animation target properties."""
    TRANSLATION = "translation"
    ROTATION = "rotation"
    SCALE = "scale"


class Keyframe:
    """
    Single keyframe in an animation.

    Stores time and value for a specific property.
    """

    def __init__(self, time: float, value):
        """
        Initialize keyframe.

        Args:
            time: Time in seconds
            value: Value at this time (Vector3 for T/S, Quaternion for R)
        """
        self.time = time
        self.value = value

    def __repr__(self):
        return f"Keyframe(t={self.time:.3f}, v={self.value})"


class JointTrack:
    """
    Keyframes of one joint.

    Translation, rotation and scale keys are sized independently.
    """

    def __init__(self):
        self.translations: List[Keyframe] = []
        self.rotations: List[Keyframe] = []
        self.scales: List[Keyframe] = []

    def keys_for(self, target: AnimationTarget) -> List[Keyframe]:
        """Return the key list backing a target property."""
        if target == AnimationTarget.TRANSLATION:
            return self.translations
        if target == AnimationTarget.ROTATION:
            return self.rotations
        return self.scales

    def __repr__(self):
        return (f"JointTrack(translations={len(self.translations)}, "
                f"rotations={len(self.rotations)}, scales={len(self.scales)})")


class Animation:
    """
    Complete animation clip.

    Holds one track per skeleton joint, in skeleton order.
    """

    def __init__(self, name: str, num_tracks: int = 0):
        """
        Initialize animation.

        Args:
            name: Animation name
            num_tracks: Number of joint tracks to allocate
        """
        self.name = name
        self.duration: float = 0.0
        self.tracks: List[JointTrack] = [JointTrack() for _ in range(num_tracks)]

    @property
    def num_tracks(self) -> int:
        return len(self.tracks)

    def validate(self, num_joints: Optional[int] = None):
        """
        Check the clip can be played back.

        A zero duration is valid: a clip without channels is a static bind pose.

        Args:
            num_joints: Expected track count (skeleton joint count)

        Raises:
            ValidationError: Wrong track count, empty tracks, keys outside
                [0, duration] or unordered keys
        """
        subject = f"Animation '{self.name}'"

        if not math.isfinite(self.duration) or self.duration < 0.0:
            raise ValidationError(subject, f"invalid duration {self.duration}")

        if num_joints is not None and len(self.tracks) != num_joints:
            raise ValidationError(subject, f"{len(self.tracks)} tracks for {num_joints} joints")

        for track_index, track in enumerate(self.tracks):
            for target in AnimationTarget:
                keys = track.keys_for(target)
                if not keys:
                    raise ValidationError(subject, f"track {track_index} has no {target.value} keys")

                previous = None
                for key in keys:
                    if not math.isfinite(key.time) or not 0.0 <= key.time <= self.duration:
                        raise ValidationError(
                            subject, f"track {track_index} has a {target.value} key at invalid time {key.time}"
                        )
                    if previous is not None and key.time <= previous:
                        raise ValidationError(
                            subject, f"track {track_index} {target.value} keys are not in chronological order"
                        )
                    previous = key.time

    def __repr__(self):
        return f"Animation(name='{self.name}', duration={self.duration:.2f}s, tracks={len(self.tracks)})"
