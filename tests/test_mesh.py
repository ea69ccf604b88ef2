"""Tests for Mesh construction, queries and comparison."""

import numpy as np
import pytest

from plantgeom import (
    EmptyMeshListError,
    Mesh,
    MeshShapeError,
    PerTriangle,
    PrecisionError,
    PropertySchemaError,
    TriangleIndexError,
    merge_meshes,
    rectangle,
    solid_frustum,
)


class TestConstruction:

    def test_empty_mesh(self):
        m = Mesh()
        assert m.nvertices == 0
        assert m.ntriangles == 0
        assert m.dtype == np.float64
        assert dict(m.properties) == {}
        assert m.vertices.shape == (0, 3)

    def test_empty_single_precision(self):
        m = Mesh(np.float32)
        assert m.dtype == np.float32
        assert m.vertices.dtype == np.float32

    def test_capacity_is_only_a_hint(self):
        m = Mesh(capacity=1000)
        assert m.nvertices == 0
        assert m.ntriangles == 0
        assert dict(m.properties) == {}
        assert m == Mesh()

    def test_negative_capacity(self):
        with pytest.raises(ValueError):
            Mesh(capacity=-1)

    def test_unsupported_precision(self):
        with pytest.raises(PrecisionError):
            Mesh(np.int64)

    def test_from_vertices(self, two_triangles):
        m = Mesh.from_vertices(two_triangles)
        assert m.nvertices == 6
        assert m.ntriangles == 2
        assert len(m.normals) == 2
        assert list(m.properties) == ["normal"]
        np.testing.assert_array_equal(m.vertices, two_triangles)

    def test_from_vertices_keeps_float32(self, two_triangles):
        m = Mesh.from_vertices(two_triangles.astype(np.float32))
        assert m.dtype == np.float32
        assert m.normals.dtype == np.float32

    def test_from_python_lists(self):
        m = Mesh.from_vertices([(0, 0, 0), (1, 0, 0), (0, 1, 0)])
        assert m.dtype == np.float64
        assert m.ntriangles == 1

    def test_vertex_count_not_multiple_of_three(self, two_triangles):
        with pytest.raises(MeshShapeError):
            Mesh.from_vertices(two_triangles[:5])

    def test_vertices_must_be_3d(self):
        with pytest.raises(MeshShapeError):
            Mesh.from_vertices(np.zeros((3, 2)))

    def test_initial_properties(self, two_triangles):
        m = Mesh.from_vertices(two_triangles, properties={"color": ["red", "blue"]})
        assert m.properties["color"] == ["red", "blue"]
        assert len(m.properties["normal"]) == 2

    def test_initial_properties_wrong_length(self, two_triangles):
        with pytest.raises(ValueError):
            Mesh.from_vertices(two_triangles, properties={"color": ["red"]})

    def test_vertices_are_copied(self, two_triangles):
        m = Mesh.from_vertices(two_triangles)
        two_triangles[0, 0] = 42.0
        assert m.vertices[0, 0] == 0.0

    def test_vertices_are_read_only(self, two_triangle_mesh):
        with pytest.raises(ValueError):
            two_triangle_mesh.vertices[0, 0] = 1.0


class TestMerge:

    def test_merge_preserves_order(self, two_triangles):
        a = Mesh.from_vertices(two_triangles[:3])
        b = Mesh.from_vertices(two_triangles[3:])
        m = merge_meshes([a, b])
        np.testing.assert_array_equal(m.vertices, two_triangles)
        assert m == Mesh.from_vertices(two_triangles)

    def test_merge_counts_and_area(self):
        c = solid_frustum(length=2.0, width=1.0, height=1.0, ratio=0.5, n=40)
        c2 = solid_frustum(length=3.0, width=0.1, height=0.2, ratio=1 / 10, n=40)
        m = Mesh.from_meshes([c, c2])
        assert m.nvertices == c.nvertices + c2.nvertices
        assert m.ntriangles == 80
        assert len(m.normals) == 80
        assert abs(m.area() - (c.area() + c2.area())) < 1e-15

    def test_merge_single_mesh_is_a_copy(self, two_triangle_mesh):
        m = merge_meshes([two_triangle_mesh])
        assert m == two_triangle_mesh
        assert m is not two_triangle_mesh
        assert not np.shares_memory(m.vertices, two_triangle_mesh.vertices)

    def test_merge_empty_list(self):
        with pytest.raises(EmptyMeshListError):
            merge_meshes([])

    def test_merge_mismatched_properties(self, two_triangles):
        a = Mesh.from_vertices(two_triangles, properties={"color": ["red", "blue"]})
        b = Mesh.from_vertices(two_triangles)
        with pytest.raises(PropertySchemaError):
            merge_meshes([a, b])
        with pytest.raises(PropertySchemaError):
            merge_meshes([b, a])

    def test_merge_mismatched_precision(self, two_triangles):
        a = Mesh.from_vertices(two_triangles)
        b = Mesh.from_vertices(two_triangles.astype(np.float32))
        with pytest.raises(PrecisionError):
            merge_meshes([a, b])

    def test_merge_does_not_touch_inputs(self, two_triangles):
        a = Mesh.from_vertices(two_triangles, properties={"color": ["red", "blue"]})
        b = Mesh.from_vertices(two_triangles, properties={"color": ["green", "green"]})
        m = merge_meshes([a, b])
        assert m.properties["color"] == ["red", "blue", "green", "green"]
        assert a.properties["color"] == ["red", "blue"]
        assert a.ntriangles == 2
        assert m.properties["color"] is not a.properties["color"]

        m.add(b, color=PerTriangle(["x", "y"]))
        assert a.properties["color"] == ["red", "blue"]
        assert len(a.properties["normal"]) == 2

    def test_merge_meshes_without_properties(self):
        m = merge_meshes([Mesh(), Mesh()])
        assert m.ntriangles == 0
        assert dict(m.properties) == {}

    def test_comparing_empty_meshes_keeps_them_mergeable(self):
        m = Mesh()
        assert m == Mesh()
        assert m.isclose(Mesh(capacity=4))
        assert dict(m.properties) == {}
        merged = merge_meshes([m, Mesh()])
        assert dict(merged.properties) == {}

    def test_copy(self):
        r = rectangle(length=2.0, width=0.5)
        c = r.copy()
        assert c == r
        c.add(rectangle())
        assert r.ntriangles == 2


class TestQueries:

    def test_get_triangle(self, two_triangle_mesh, two_triangles):
        np.testing.assert_array_equal(two_triangle_mesh.get_triangle(0), two_triangles[:3])
        np.testing.assert_array_equal(two_triangle_mesh.get_triangle(1), two_triangles[3:])

    @pytest.mark.parametrize("i", [-1, 2, 100])
    def test_get_triangle_out_of_range(self, two_triangle_mesh, i):
        with pytest.raises(TriangleIndexError):
            two_triangle_mesh.get_triangle(i)

    def test_triangle_index_error_is_index_error(self, two_triangle_mesh):
        with pytest.raises(IndexError):
            two_triangle_mesh.get_triangle(5)

    def test_areas(self, two_triangle_mesh):
        np.testing.assert_allclose(two_triangle_mesh.areas(), [0.5, 1.0])
        assert two_triangle_mesh.area() == pytest.approx(1.5)

    def test_area_is_sum_of_areas(self):
        m = solid_frustum(length=2.0, width=1.0, height=1.0, ratio=0.5, n=40)
        areas = m.areas()
        assert len(areas) == m.ntriangles
        assert m.area() == sum(areas)

    def test_area_of_empty_mesh(self):
        assert Mesh().area() == 0.0
        assert Mesh().areas().shape == (0,)

    def test_rectangle_area(self):
        r = rectangle(length=10.0, width=0.2)
        assert r.area() == pytest.approx(2.0)
        np.testing.assert_allclose(r.areas(), [1.0, 1.0])

    def test_single_precision_results(self):
        r = rectangle(length=10.0, width=0.2, dtype=np.float32)
        assert r.area().dtype == np.float32
        assert r.areas().dtype == np.float32
        assert r.normals.dtype == np.float32
        assert r.area() == pytest.approx(2.0, rel=1e-6)

    def test_single_precision_arithmetic(self):
        verts = np.random.default_rng(3).normal(size=(12, 3)).astype(np.float32)
        m = Mesh.from_vertices(verts)

        areas, normals = [], []
        for j in range(0, 12, 3):
            e1 = verts[j + 1] - verts[j]
            e2 = verts[j + 2] - verts[j]
            cross = np.array(
                [
                    e1[1] * e2[2] - e1[2] * e2[1],
                    e1[2] * e2[0] - e1[0] * e2[2],
                    e1[0] * e2[1] - e1[1] * e2[0],
                ],
                dtype=np.float32,
            )
            length = np.sqrt(cross[0] * cross[0] + cross[1] * cross[1] + cross[2] * cross[2])
            areas.append(np.float32(0.5) * length)
            normals.append(cross / length)
        expected_area = np.float32(0)
        for a in areas:
            expected_area = expected_area + a

        np.testing.assert_array_equal(m.areas(), np.array(areas, dtype=np.float32))
        np.testing.assert_array_equal(m.normals, np.array(normals, dtype=np.float32))
        assert m.area() == expected_area
        assert m.area().dtype == np.float32

    def test_repr(self, two_triangle_mesh):
        assert repr(two_triangle_mesh) == "Mesh(ntriangles=2, dtype=float64, properties=['normal'])"


class TestEquality:

    def test_equal(self, two_triangles):
        assert Mesh.from_vertices(two_triangles) == Mesh.from_vertices(two_triangles.copy())

    def test_other_properties_are_ignored(self, two_triangles):
        a = Mesh.from_vertices(two_triangles, properties={"color": ["red", "blue"]})
        b = Mesh.from_vertices(two_triangles)
        assert a == b

    def test_not_equal(self, two_triangles):
        a = Mesh.from_vertices(two_triangles)
        b = Mesh.from_vertices(two_triangles[:3])
        assert a != b
        assert a != "mesh"

    def test_unhashable(self, two_triangle_mesh):
        with pytest.raises(TypeError):
            hash(two_triangle_mesh)

    def test_isclose_default_relative_tolerance(self, two_triangles):
        a = Mesh.from_vertices(two_triangles)
        b = Mesh.from_vertices(two_triangles + 1e-12)
        assert a != b
        assert a.isclose(b)

    def test_absolute_tolerance_disables_default_rtol(self, two_triangles):
        a = Mesh.from_vertices(two_triangles)
        b = Mesh.from_vertices(two_triangles + 1e-12)
        assert not a.isclose(b, atol=1e-14)
        assert a.isclose(b, atol=1e-10)
        assert a.isclose(b, atol=1e-14, rtol=1e-8)

    def test_isclose_different_sizes(self, two_triangles):
        a = Mesh.from_vertices(two_triangles)
        b = Mesh.from_vertices(two_triangles[:3])
        assert not a.isclose(b)
