"""Small 3-vector helpers for geometric stereo perception."""

from __future__ import annotations

import math

Vector = tuple[float, float, float]


def sub(p: Vector, q: Vector) -> Vector:
    return (p[0] - q[0], p[1] - q[1], p[2] - q[2])


def cross(u: Vector, v: Vector) -> Vector:
    return (
        u[1] * v[2] - u[2] * v[1],
        u[2] * v[0] - u[0] * v[2],
        u[0] * v[1] - u[1] * v[0],
    )


def dot(u: Vector, v: Vector) -> float:
    return u[0] * v[0] + u[1] * v[1] + u[2] * v[2]


def norm(u: Vector) -> float:
    return math.sqrt(dot(u, u))


def unit(u: Vector) -> Vector:
    """Normalised copy of ``u``; the zero vector is returned unchanged."""
    length = norm(u)
    if length == 0.0:
        return u
    return (u[0] / length, u[1] / length, u[2] / length)


def signed_volume(a: Vector, b: Vector, c: Vector) -> float:
    """Triple product ``a . (b x c)``."""
    return dot(a, cross(b, c))
