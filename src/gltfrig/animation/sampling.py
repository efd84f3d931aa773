"""
Channel Sampling

Converts the keys of one glTF sampler into runtime keyframes. glTF keys are
interpolated by the player according to the sampler's mode, while runtime
tracks are always interpolated continuously, so STEP and CUBICSPLINE data
has to be rewritten into keys that reproduce the same curve.
"""

import math
from typing import Callable, Dict, List, NamedTuple, Optional

import numpy as np
from pyrr import Vector3, Quaternion

from ..config.settings import STEP_EPSILON
from .animation import AnimationTarget, InterpolationType, Keyframe
from .spline import sample_hermite_spline


class ValueStrategy(NamedTuple):
    """How raw accessor rows become keyframe values for one target property."""
    components: int
    wrap: Callable[[np.ndarray], object]
    finish: Optional[Callable[[np.ndarray], np.ndarray]] = None


def _to_vector3(row: np.ndarray) -> Vector3:
    return Vector3(np.array(row, dtype=np.float64))


def _to_quaternion(row: np.ndarray) -> Quaternion:
    # glTF and pyrr both store quaternions as (x, y, z, w)
    return Quaternion(np.array(row, dtype=np.float64))


def normalize_quaternion(value: np.ndarray) -> np.ndarray:
    length = np.linalg.norm(value)
    if length == 0.0:
        return value
    return value / length


VALUE_STRATEGIES: Dict[AnimationTarget, ValueStrategy] = {
    AnimationTarget.TRANSLATION: ValueStrategy(3, _to_vector3),
    AnimationTarget.ROTATION: ValueStrategy(4, _to_quaternion, normalize_quaternion),
    AnimationTarget.SCALE: ValueStrategy(3, _to_vector3),
}


def sample_linear(times: np.ndarray, values: np.ndarray, strategy: ValueStrategy) -> List[Keyframe]:
    """
    Copy a LINEAR channel.

    Runtime tracks interpolate linearly too, so keys map one to one.
    """
    return [Keyframe(float(times[i]), strategy.wrap(values[i])) for i in range(len(times))]


def sample_step(times: np.ndarray, values: np.ndarray, strategy: ValueStrategy,
                epsilon: float = STEP_EPSILON) -> List[Keyframe]:
    """
    Rewrite a STEP channel as linear keys.

    Every key is followed by a copy of its value just before the next key, so
    linear playback holds the value and then jumps. The last key has no copy.
    """
    keyframes = []
    count = len(times)
    for i in range(count):
        keyframes.append(Keyframe(float(times[i]), strategy.wrap(values[i])))
        if i < count - 1:
            keyframes.append(Keyframe(float(times[i + 1]) - epsilon, strategy.wrap(values[i])))
    return keyframes


def sample_cubic_spline(times: np.ndarray, values: np.ndarray, strategy: ValueStrategy,
                        sampling_rate: float, duration: float) -> List[Keyframe]:
    """
    Bake a CUBICSPLINE channel at a fixed rate.

    Args:
        times: Key times, one per glTF key
        values: (in-tangent, value, out-tangent) rows, three per key
        strategy: Value conversion for the target property
        sampling_rate: Samples per second
        duration: Clip duration; floor(duration * rate) + 1 samples are taken

    Returns:
        Evenly spaced keyframes from time 0
    """
    num_keys = len(times)
    num_samples = int(math.floor(duration * sampling_rate)) + 1
    keyframes = []
    current = 0

    for i in range(num_samples):
        # Rounding in floor(duration * rate) must not push the last sample past the clip
        time = min(i / sampling_rate, duration)

        if num_keys == 1:
            value = np.asarray(values[1], dtype=np.float64)
        else:
            while current < num_keys - 2 and times[current + 1] <= time:
                current += 1

            current_time = float(times[current])
            next_time = float(times[current + 1])
            span = next_time - current_time

            t = (time - current_time) / span if span > 0.0 else 0.0
            # Hold the boundary values outside the authored key range
            t = min(max(t, 0.0), 1.0)

            p0 = values[current * 3 + 1]
            m0 = values[current * 3 + 2] * span
            p1 = values[(current + 1) * 3 + 1]
            m1 = values[(current + 1) * 3] * span
            value = sample_hermite_spline(t, p0, m0, p1, m1)

        if strategy.finish is not None:
            value = strategy.finish(value)
        keyframes.append(Keyframe(time, strategy.wrap(value)))

    return keyframes


def sample_channel(target: AnimationTarget, interpolation: InterpolationType,
                   times: np.ndarray, values: np.ndarray,
                   sampling_rate: float, duration: float) -> List[Keyframe]:
    """
    Sample one channel with the routine matching its interpolation mode.

    Args:
        target: Animated property
        interpolation: Sampler interpolation mode
        times: Input accessor data, shape (n,)
        values: Output accessor data, shape (n, components) or (3n, components)
        sampling_rate: Samples per second for baked channels
        duration: Clip duration

    Returns:
        Keyframes for the target's key list
    """
    strategy = VALUE_STRATEGIES[target]
    values = np.asarray(values, dtype=np.float64).reshape(-1, strategy.components)

    if interpolation == InterpolationType.LINEAR:
        return sample_linear(times, values, strategy)
    if interpolation == InterpolationType.STEP:
        return sample_step(times, values, strategy)
    return sample_cubic_spline(times, values, strategy, sampling_rate, duration)
