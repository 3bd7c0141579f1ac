from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from floorgrid.geometry.tolerance import EPS_POS


Point3 = Tuple[float, float, float]


@dataclass
class TriMesh:
    # World coordinates, y up.
    vertices: List[Point3]
    faces: List[Tuple[int, int, int]]

    def validate(self) -> None:
        n = len(self.vertices)
        if n == 0:
            raise ValueError("TriMesh has no vertices")
        for f in self.faces:
            if len(f) != 3:
                raise ValueError("TriMesh faces must be triangles")
            for idx in f:
                if idx < 0 or idx >= n:
                    raise ValueError(f"TriMesh face index out of range: {idx}")

    def as_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        return np.asarray(self.vertices, dtype=float), np.asarray(self.faces, dtype=np.int64)

    def face_normals(self) -> np.ndarray:
        v, f = self.as_arrays()
        if f.size == 0:
            return np.zeros((0, 3), dtype=float)
        n = np.cross(v[f[:, 1]] - v[f[:, 0]], v[f[:, 2]] - v[f[:, 0]])
        ln = np.linalg.norm(n, axis=1, keepdims=True)
        return np.divide(n, ln, out=np.zeros_like(n), where=ln > EPS_POS)

    def area(self) -> float:
        v, f = self.as_arrays()
        if f.size == 0:
            return 0.0
        n = np.cross(v[f[:, 1]] - v[f[:, 0]], v[f[:, 2]] - v[f[:, 0]])
        return float(0.5 * np.linalg.norm(n, axis=1).sum())


def prism_to_trimesh(profile_xz: Sequence[Tuple[float, float]], y0: float, height: float) -> TriMesh:
    """Extrude a convex (x, z) profile upward from ``y0`` into a closed triangle mesh."""
    if height <= 0.0:
        raise ValueError("Prism height must be > 0")
    poly = [(float(x), float(z)) for x, z in profile_xz]
    if len(poly) < 3:
        raise ValueError("Prism profile requires at least 3 points")
    y1 = float(y0) + float(height)
    n = len(poly)
    vertices: List[Point3] = [(x, float(y0), z) for x, z in poly]
    vertices.extend((x, y1, z) for x, z in poly)

    faces: List[Tuple[int, int, int]] = []
    for i in range(n):
        j = (i + 1) % n
        b0, b1 = i, j
        t0, t1 = i + n, j + n
        faces.append((b0, b1, t1))
        faces.append((b0, t1, t0))
    for i in range(1, n - 1):
        faces.append((0, i + 1, i))
        faces.append((n, n + i, n + i + 1))

    mesh = TriMesh(vertices=vertices, faces=faces)
    mesh.validate()
    return mesh


def oriented_rectangle(center: Tuple[float, float], length: float, width: float, rotation: float) -> List[Tuple[float, float]]:
    """Corners of a ``length`` x ``width`` rectangle on the (x, z) plane rotated by ``rotation`` about y."""
    hl, hw = 0.5 * float(length), 0.5 * float(width)
    local = np.array([[-hl, -hw], [hl, -hw], [hl, hw], [-hl, hw]], dtype=float)
    c, s = np.cos(rotation), np.sin(rotation)
    # Rotation about +y maps local x to (cos, -sin) on (x, z).
    rot = np.array([[c, -s], [s, c]], dtype=float)
    pts = local @ rot + np.asarray(center, dtype=float)
    return [(float(x), float(z)) for x, z in pts]


def box_mesh(center: Tuple[float, float], length: float, width: float, height: float, rotation: float, y0: Optional[float] = None) -> TriMesh:
    return prism_to_trimesh(oriented_rectangle(center, length, width, rotation), 0.0 if y0 is None else float(y0), height)
