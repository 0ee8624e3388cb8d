from indoor_nav.domain.entities.geography import NavigationNode, Point


class CoordinateMapper:
    """
    Translation between building map space and a tracking session's local space.

    map = local + offset. The local origin is wherever tracking happened to start, so the
    offset is fixed by pairing a known map position with the local position observed there.
    """

    def __init__(self):
        self.offset_x = 0.0
        self.offset_z = 0.0
        self._calibrated = False

    @property
    def is_calibrated(self) -> bool:
        return self._calibrated

    @property
    def offset(self) -> Point:
        return Point(self.offset_x, self.offset_z)

    def calibrate(self, map_x: float, map_z: float, local_x: float, local_z: float) -> None:
        self.offset_x = map_x - local_x
        self.offset_z = map_z - local_z
        self._calibrated = True

    def recalibrate(self, map_x: float, map_z: float, local_x: float, local_z: float) -> None:
        """Anchor scan: overwrite whatever calibration existed."""
        self.calibrate(map_x, map_z, local_x, local_z)

    def calibrate_to_node(self, node: NavigationNode, local_x: float, local_z: float) -> None:
        self.calibrate(node.x, node.z, local_x, local_z)

    def local_to_map(self, x: float, z: float) -> Point:
        return Point(x + self.offset_x, z + self.offset_z)

    def map_to_local(self, x: float, z: float) -> Point:
        return Point(x - self.offset_x, z - self.offset_z)

    def node_to_local(self, node: NavigationNode) -> Point:
        return self.map_to_local(node.x, node.z)

    def reset(self) -> None:
        self.offset_x = 0.0
        self.offset_z = 0.0
        self._calibrated = False
