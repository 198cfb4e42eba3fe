"""
Tests for STL export, decoding and uploaded meshes.
"""

import struct

import numpy as np
import pytest

from homegoods.errors import HomegoodsError, MeshDecodeError, MeshExportError
from homegoods.export import export_stl, load_stl, write_stl
from homegoods.generators.uploaded import uploaded_mesh
from homegoods.mesh import RawMesh
from homegoods.params import UploadedMeshParams
from homegoods.pipeline import build_model
from homegoods.units import INCH

ASCII_TETRAHEDRON = b"""solid tetra
facet normal 0 0 -1
 outer loop
  vertex 0 0 0
  vertex 0 1 0
  vertex 1 0 0
 endloop
endfacet
facet normal 0 -1 0
 outer loop
  vertex 0 0 0
  vertex 1 0 0
  vertex 0 0 1
 endloop
endfacet
facet normal -1 0 0
 outer loop
  vertex 0 0 0
  vertex 0 0 1
  vertex 0 1 0
 endloop
endfacet
facet normal 1 1 1
 outer loop
  vertex 1 0 0
  vertex 0 1 0
  vertex 0 0 1
 endloop
endfacet
endsolid tetra
"""


class TestExport:
    def test_binary_layout(self, unit_cube):
        data = export_stl(unit_cube)
        assert len(data) == 84 + 50 * 12
        assert struct.unpack("<I", data[80:84])[0] == 12

    def test_facet_normals_follow_winding(self, unit_cube):
        data = export_stl(unit_cube)
        # first record is the bottom face
        normal = struct.unpack("<3f", data[84:96])
        np.testing.assert_allclose(normal, [0, 0, -1], atol=1e-6)

    def test_empty_mesh_rejected(self):
        empty = RawMesh.from_arrays(np.empty((0, 3)), np.empty((0, 3), dtype=int))
        with pytest.raises(MeshExportError):
            export_stl(empty)

    def test_write(self, unit_cube, tmp_path):
        path = write_stl(unit_cube, tmp_path / "out" / "cube.stl")
        assert path.exists()
        assert path.read_bytes() == export_stl(unit_cube)


class TestLoad:
    def test_round_trip_merges_vertices(self, unit_cube, watertight):
        mesh = load_stl(export_stl(unit_cube))
        assert mesh.triangle_count == 12
        assert mesh.vertex_count == 8
        watertight(mesh)
        assert mesh.signed_volume() == pytest.approx(1.0)

    def test_ascii(self):
        mesh = load_stl(ASCII_TETRAHEDRON)
        assert mesh.triangle_count == 4
        assert mesh.signed_volume() == pytest.approx(1 / 6)

    @pytest.mark.parametrize("data", [b"", b"definitely not a mesh"])
    def test_undecodable(self, data):
        with pytest.raises(MeshDecodeError):
            load_stl(data)

    def test_decode_error_is_homegoods_error(self):
        with pytest.raises(HomegoodsError):
            load_stl(b"")


class TestUploaded:
    def test_centred_on_plate_and_rescaled(self, unit_cube):
        source = unit_cube.scaled((2.0, 1.0, 0.5)).translated((5.0, -3.0, 7.0))
        mesh = uploaded_mesh(UploadedMeshParams(data=export_stl(source), target_size=4.0))
        lo, hi = mesh.bounds
        assert (hi - lo).max() == pytest.approx(4.0 * INCH)
        assert lo[2] == pytest.approx(0.0)
        np.testing.assert_allclose((lo + hi)[:2] / 2, 0.0, atol=1e-5)
        # proportions are kept
        np.testing.assert_allclose((hi - lo) / (hi - lo).max(), [1.0, 0.5, 0.25], atol=1e-5)

    def test_through_pipeline(self, unit_cube):
        result = build_model(UploadedMeshParams(data=export_stl(unit_cube), target_size=2.0))
        assert result.report.is_manifold
        assert result.mesh.signed_volume() == pytest.approx((2.0 * INCH) ** 3, rel=1e-4)

    def test_empty_upload(self):
        with pytest.raises(MeshDecodeError):
            uploaded_mesh(UploadedMeshParams())
