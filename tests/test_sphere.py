"""Unit tests for sphere intersection."""

import pytest
import taichi as ti


def _intersect(origin, direction, center, radius):
    """Run hit_sphere in a kernel and return (hit, t, point, normal)."""
    from tinyraytracer.geometry.sphere import hit_sphere, make_sphere
    from tinyraytracer.core.ray import vec3

    ox, oy, oz = origin
    dx, dy, dz = direction
    cx, cy, cz = center

    hit = ti.field(dtype=ti.i32, shape=())
    t = ti.field(dtype=ti.f32, shape=())
    point = ti.field(dtype=ti.math.vec3, shape=())
    normal = ti.field(dtype=ti.math.vec3, shape=())

    @ti.kernel
    def test_kernel():
        sphere = make_sphere(vec3(cx, cy, cz), radius)
        rec = hit_sphere(vec3(ox, oy, oz), vec3(dx, dy, dz), sphere)
        hit[None] = rec.hit
        t[None] = rec.t
        point[None] = rec.point
        normal[None] = rec.normal

    test_kernel()
    return hit[None], t[None], point[None], normal[None]


class TestHitSphere:
    """Tests for the geometric ray-sphere test."""

    def test_head_on_hit_distance(self):
        """Test a ray aimed at the center hits at |O - C| - r."""
        hit, t, point, normal = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -5.0), 1.0)
        assert hit == 1
        assert t == pytest.approx(4.0)
        assert point[2] == pytest.approx(-4.0)
        assert normal[2] == pytest.approx(1.0)

    def test_off_axis_hit_distance(self):
        """Test distance for a sphere off the coordinate axes."""
        hit, t, _, _ = _intersect((1.0, 2.0, 3.0), (0.6, 0.0, -0.8), (4.0, 2.0, -1.0), 2.0)
        assert hit == 1
        assert t == pytest.approx(3.0, abs=1e-5)

    def test_miss(self):
        """Test a ray passing beside the sphere misses."""
        hit, _, _, _ = _intersect((0.0, 2.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -5.0), 1.0)
        assert hit == 0

    def test_sphere_behind_origin(self):
        """Test a sphere behind the ray is not hit."""
        hit, _, _, _ = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, -5.0), 1.0)
        assert hit == 0

    def test_origin_inside_uses_far_root(self):
        """Test a ray starting inside hits the far side."""
        hit, t, point, normal = _intersect((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 0.0), 3.0)
        assert hit == 1
        assert t == pytest.approx(3.0)
        assert point[1] == pytest.approx(3.0)
        # Normal stays outward, aligned with the leaving ray
        assert normal[1] == pytest.approx(1.0)

    def test_tangent_ray_hits(self):
        """Test a ray grazing the silhouette counts as a hit."""
        hit, t, _, _ = _intersect((0.0, 1.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -5.0), 1.0)
        assert hit == 1
        assert t == pytest.approx(5.0, abs=1e-3)

    def test_normal_is_unit_length(self):
        """Test the returned normal is normalized."""
        hit, _, point, normal = _intersect((0.0, 0.0, 0.0), (0.6, 0.0, -0.8), (3.0, 0.5, -4.0), 2.0)
        assert hit == 1
        norm_sq = normal[0] ** 2 + normal[1] ** 2 + normal[2] ** 2
        assert norm_sq == pytest.approx(1.0, abs=1e-5)
        # Normal points from the center toward the hit point
        assert normal[0] == pytest.approx((point[0] - 3.0) / 2.0, abs=1e-4)


class TestSphereInfo:
    """Tests for Python-side sphere descriptions."""

    def test_valid_sphere(self):
        """Test construction keeps its fields."""
        from tinyraytracer.geometry.sphere import SphereInfo
        from tinyraytracer.materials.phong import IVORY

        info = SphereInfo(center=(1.0, 2.0, 3.0), radius=0.5, material=IVORY)
        assert info.center == (1.0, 2.0, 3.0)
        assert info.material is IVORY

    @pytest.mark.parametrize("radius", [0.0, -1.0])
    def test_non_positive_radius_raises(self, radius):
        """Test a non-positive radius is rejected."""
        from tinyraytracer.geometry.sphere import SphereInfo
        from tinyraytracer.materials.phong import IVORY

        with pytest.raises(ValueError, match="radius"):
            SphereInfo(center=(0.0, 0.0, 0.0), radius=radius, material=IVORY)
