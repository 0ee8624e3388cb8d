import math


def distance_between(x1: float, z1: float, x2: float, z2: float) -> float:
    return math.hypot(x2 - x1, z2 - z1)


def point_to_segment_distance(
    px: float, pz: float, ax: float, az: float, bx: float, bz: float
) -> float:
    """Distance from P to the closest point of segment AB (projection clamped to the segment)."""
    abx, abz = bx - ax, bz - az
    apx, apz = px - ax, pz - az
    ab2 = abx * abx + abz * abz
    if ab2 == 0:
        return math.hypot(apx, apz)
    s = max(0.0, min(1.0, (apx * abx + apz * abz) / ab2))
    return math.hypot(px - (ax + s * abx), pz - (az + s * abz))


def polyline_length(points) -> float:
    """Sum of consecutive distances over anything with .x/.z."""
    total = 0.0
    for a, b in zip(points, points[1:]):
        total += math.hypot(b.x - a.x, b.z - a.z)
    return total
