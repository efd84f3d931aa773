"""
Cubic Hermite spline evaluation.
"""

import numpy as np


def hermite_weights(t: float):
    """
    Basis weights of a cubic Hermite spline at parameter t.

    Returns:
        (a, b, c, d) weighting p0, m0, p1 and m1
    """
    t2 = t * t
    t3 = t2 * t

    a = 2.0 * t3 - 3.0 * t2 + 1.0
    b = t3 - 2.0 * t2 + t
    c = -2.0 * t3 + 3.0 * t2
    d = t3 - t2
    return a, b, c, d


def sample_hermite_spline(t: float, p0, m0, p1, m1) -> np.ndarray:
    """
    Sample a Hermite spline in the form

        p(t) = (2t^3 - 3t^2 + 1)p0 + (t^3 - 2t^2 + t)m0 + (-2t^3 + 3t^2)p1 + (t^3 - t^2)m1

    Values are combined component-wise, so vectors and quaternions both work.
    Quaternion results are not unit length in general.

    Args:
        t: Interpolation parameter in [0, 1]
        p0: Start point at t = 0
        m0: Start tangent, already scaled by the interval length
        p1: End point at t = 1
        m1: End tangent, already scaled by the interval length

    Returns:
        Interpolated value as a float64 array
    """
    a, b, c, d = hermite_weights(t)
    return (a * np.asarray(p0, dtype=np.float64)
            + b * np.asarray(m0, dtype=np.float64)
            + c * np.asarray(p1, dtype=np.float64)
            + d * np.asarray(m1, dtype=np.float64))
