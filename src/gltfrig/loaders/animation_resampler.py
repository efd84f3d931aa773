"""
Animation Resampler

Converts a glTF animation into per-joint keyframe tracks for a skeleton.
"""

import logging
from typing import Dict, List, Optional

import pygltflib

from ..animation import (
    Animation, AnimationTarget, InterpolationType, Joint, JointTrack, Keyframe, Skeleton
)
from ..animation.sampling import sample_channel
from ..config.settings import DEFAULT_SAMPLING_RATE
from ..errors import AccessorError, GltfImportError
from .accessors import AccessorReader
from .naming import JointNameRegistry


logger = logging.getLogger(__name__)

VALUE_ACCESSOR_TYPES = {
    AnimationTarget.TRANSLATION: 'VEC3',
    AnimationTarget.ROTATION: 'VEC4',
    AnimationTarget.SCALE: 'VEC3',
}


class AnimationResampler:
    """
    Resamples glTF animations against an already built skeleton.

    glTF splits an animation into channels, each targeting one property of one
    node. The runtime expects one track per joint instead, so channels are
    grouped by joint and joints without a channel get their bind pose.
    """

    def __init__(self, gltf: pygltflib.GLTF2, skeleton: Skeleton, names: JointNameRegistry,
                 reader: Optional[AccessorReader] = None):
        """
        Initialize resampler.

        Args:
            gltf: Parsed glTF document
            skeleton: Skeleton the animations are imported for
            names: Joint names assigned while building the skeleton
            reader: Accessor reader to share buffer caches with
        """
        self.gltf = gltf
        self.skeleton = skeleton
        self.names = names
        self.reader = reader or AccessorReader(gltf)
        self._sampling_rate_warned = False

    def resolve_sampling_rate(self, sampling_rate: float) -> float:
        """Replace the automatic rate (0) with the default, warning once."""
        if sampling_rate == 0.0:
            if not self._sampling_rate_warned:
                logger.warning(
                    "The animation sampling rate is set to 0 (automatic) but glTF does not carry "
                    "scene frame rate information. Assuming a sampling rate of %gHz.",
                    DEFAULT_SAMPLING_RATE
                )
                self._sampling_rate_warned = True
            return DEFAULT_SAMPLING_RATE

        if sampling_rate < 0.0:
            raise GltfImportError(f"Invalid sampling rate {sampling_rate}")
        return sampling_rate

    def find_animation(self, name: str) -> pygltflib.Animation:
        """
        Find a glTF animation by exact name.

        Raises:
            GltfImportError: No animation has that name
        """
        for gltf_anim in self.gltf.animations or []:
            if gltf_anim.name == name:
                return gltf_anim
        raise GltfImportError(f"Animation '{name}' requested but not found in glTF")

    def channel_span(self, gltf_anim: pygltflib.Animation, channel: pygltflib.AnimationChannel) -> float:
        """
        Time span of one channel.

        glTF requires sampler inputs to declare min and max, so max[0] is the
        channel's last key time. Documents without it fall back to the data.
        """
        sampler = self._sampler(gltf_anim, channel)
        span = self.reader.authored_max(sampler.input)
        if span is None:
            times = self.reader.read_float(sampler.input, 'SCALAR')
            span = float(times[-1])
            logger.warning("Animation input accessor #%d has no max value, using its last key time %g.",
                           sampler.input, span)
        return span

    def clip_duration(self, gltf_anim: pygltflib.Animation) -> float:
        """Longest span over all channels that target a node."""
        duration = 0.0
        for channel in gltf_anim.channels or []:
            if channel.target is None or channel.target.node is None:
                continue
            duration = max(duration, self.channel_span(gltf_anim, channel))
        return duration

    def group_channels(self, gltf_anim: pygltflib.Animation) -> Dict[str, List[pygltflib.AnimationChannel]]:
        """
        Map joint names to the channels animating them.

        Channels without a target node, or targeting a node that is not part of
        the skeleton, are left out.
        """
        channels_per_joint: Dict[str, List[pygltflib.AnimationChannel]] = {}
        for channel in gltf_anim.channels or []:
            if channel.target is None or channel.target.node is None:
                continue

            joint_name = self.names.name_for(channel.target.node)
            if joint_name is None:
                continue
            channels_per_joint.setdefault(joint_name, []).append(channel)

        return channels_per_joint

    def resample(self, name: str, sampling_rate: float = 0.0) -> Animation:
        """
        Import one animation.

        Args:
            name: Animation name
            sampling_rate: Bake rate for cubic-spline channels (0 for automatic)

        Returns:
            Animation with one track per skeleton joint

        Raises:
            GltfImportError: Missing animation or unsupported channel data
            ValidationError: The resampled animation is malformed
        """
        sampling_rate = self.resolve_sampling_rate(sampling_rate)
        gltf_anim = self.find_animation(name)

        animation = Animation(gltf_anim.name, num_tracks=self.skeleton.num_joints)
        # Known before sampling so baked channel lengths do not depend on channel order
        animation.duration = self.clip_duration(gltf_anim)

        channels_per_joint = self.group_channels(gltf_anim)

        for joint, track in zip(self.skeleton.joints, animation.tracks):
            for channel in channels_per_joint.get(joint.name, []):
                self.sample_channel(gltf_anim, channel, track, sampling_rate, animation.duration)

            self.pad_bind_pose(joint, track)

        logger.info("Processed animation '%s' (tracks: %d, duration: %gs).",
                    animation.name, animation.num_tracks, animation.duration)

        animation.validate(self.skeleton.num_joints)
        return animation

    def sample_channel(self, gltf_anim: pygltflib.Animation, channel: pygltflib.AnimationChannel,
                       track: JointTrack, sampling_rate: float, duration: float):
        """
        Sample one channel into a joint track.

        Raises:
            GltfImportError: Unknown interpolation or target path
            AccessorError: Accessor layout or counts do not fit the channel
        """
        sampler = self._sampler(gltf_anim, channel)

        interpolation_name = sampler.interpolation or InterpolationType.LINEAR.value
        try:
            interpolation = InterpolationType(interpolation_name)
        except ValueError:
            raise GltfImportError(f"Invalid or unknown interpolation type '{interpolation_name}'") from None

        try:
            target = AnimationTarget(channel.target.path)
        except ValueError:
            raise GltfImportError(f"Invalid or unknown channel target path '{channel.target.path}'") from None

        times = self.reader.read_float(sampler.input, 'SCALAR')
        values = self.reader.read_float(sampler.output, VALUE_ACCESSOR_TYPES[target])

        expected = len(times) * 3 if interpolation == InterpolationType.CUBICSPLINE else len(times)
        if len(values) != expected:
            raise AccessorError(
                f"{interpolation.value} sampler has {len(times)} keys but {len(values)} output values "
                f"(expected {expected})"
            )
        if float(times[-1]) > duration:
            raise AccessorError(
                f"Animation input accessor #{sampler.input} has a key at {float(times[-1]):g}s, "
                "past its declared max"
            )

        keyframes = sample_channel(target, interpolation, times, values, sampling_rate, duration)
        track.keys_for(target).extend(keyframes)

    def pad_bind_pose(self, joint: Joint, track: JointTrack):
        """Give every empty key list a single bind pose key at time 0."""
        if not track.translations:
            track.translations.append(Keyframe(0.0, joint.translation.copy()))
        if not track.rotations:
            track.rotations.append(Keyframe(0.0, joint.rotation.copy()))
        if not track.scales:
            track.scales.append(Keyframe(0.0, joint.scale.copy()))

    def _sampler(self, gltf_anim: pygltflib.Animation,
                 channel: pygltflib.AnimationChannel) -> pygltflib.AnimationSampler:
        samplers = gltf_anim.samplers or []
        if channel.sampler is None or not 0 <= channel.sampler < len(samplers):
            raise GltfImportError(f"Animation '{gltf_anim.name}' channel references missing sampler {channel.sampler}")
        return samplers[channel.sampler]
