"""
tests/test_slab.py

Tests for the procedural FCC(111) and FCC(100) slab builders.
"""

from __future__ import annotations

import math

import numpy as np
import pytest


class TestBuild111:

    def test_atom_count(self, au111):
        assert au111.n_atoms == 72

    def test_metadata(self, au111):
        assert au111.formula == "Au"
        assert au111.miller_index == "(111)"
        assert au111.reference_id == "mp-81"
        assert au111.symmetry_group == "Fm-3m"
        assert "Au(111)" in au111.description
        assert "3x3" in au111.description

    def test_lattice_vectors(self, au111):
        a = 4.078
        dx, dy, dz = a / math.sqrt(2), a * math.sqrt(6) / 2, a / math.sqrt(3)
        cell = au111.cell
        assert cell.shape == (3, 3)
        assert cell[0].tolist() == pytest.approx([3 * dx, 0.0, 0.0])
        assert cell[1].tolist() == pytest.approx([0.0, 3 * dy, 0.0])
        assert cell[2].tolist() == pytest.approx([0.0, 0.0, 4 * dz + 10.0])

    def test_four_layers(self, au111):
        a = 4.078
        dz = a / math.sqrt(3)
        zs = sorted({round(atom.z, 6) for atom in au111.atoms})
        assert len(zs) == 4
        assert zs == pytest.approx([k * dz for k in range(4)])

    def test_eighteen_atoms_per_layer(self, au111):
        zs = [round(atom.z, 6) for atom in au111.atoms]
        for z in set(zs):
            assert zs.count(z) == 18

    def test_in_plane_coordinates_inside_footprint(self, au111):
        lx, ly = au111.cell[0, 0], au111.cell[1, 1]
        for atom in au111.atoms:
            assert 0.0 <= atom.x < lx
            assert 0.0 <= atom.y < ly

    def test_nearest_neighbour_distance(self, au111):
        top = [a for a in au111.atoms if a.z == au111.top_z]
        xy = np.array([[a.x, a.y] for a in top])
        d = np.linalg.norm(xy[:, None, :] - xy[None, :, :], axis=-1)
        np.fill_diagonal(d, np.inf)
        assert d.min() == pytest.approx(4.078 / math.sqrt(2))

    def test_display_properties_copied(self, au111):
        assert all(a.display_color == "#FFD123" for a in au111.atoms)
        assert all(a.display_radius == pytest.approx(1.44) for a in au111.atoms)


class TestBuild100:

    def test_atom_count(self, cu100):
        assert cu100.n_atoms == 64

    def test_lattice_vectors(self, cu100):
        d = 3.615 / math.sqrt(2)
        cell = cu100.cell
        assert cell[0].tolist() == pytest.approx([4 * d, 0.0, 0.0])
        assert cell[1].tolist() == pytest.approx([0.0, 4 * d, 0.0])
        assert cell[2, 2] == pytest.approx(4 * 3.615 / 2 + 10.0)

    def test_odd_layers_are_shifted(self, cu100):
        d = 3.615 / math.sqrt(2)
        dz = 3.615 / 2
        layer1 = [a for a in cu100.atoms if a.z == pytest.approx(dz)]
        assert layer1[0].x == pytest.approx(d / 2)
        assert layer1[0].y == pytest.approx(d / 2)

    def test_other_indices_use_square_grid(self):
        from slabsite.structure.slab import build
        slab = build("Pt(110)")
        assert slab.miller_index == "(110)"
        assert slab.n_atoms == 64


class TestBuildDefaults:

    def test_ids_are_sequential(self, au111):
        assert [a.id for a in au111.atoms] == list(range(au111.n_atoms))

    def test_deterministic(self):
        from slabsite.structure.slab import build
        a, b = build("Pd(111)"), build("Pd(111)")
        assert a == b

    def test_garbage_query_builds_copper(self):
        from slabsite.structure.slab import build
        slab = build("garbage")
        assert slab.formula == "Cu"
        assert slab.miller_index == "(111)"
        assert slab.n_atoms == 72

    def test_untabulated_element_uses_fallback(self):
        from slabsite.structure.slab import build
        slab = build("Zz(100)")
        assert slab.formula == "Zz"
        assert slab.reference_id == "mp-unknown"
        assert slab.atoms[0].display_color == "#FF00FF"
        assert slab.cell[0, 0] == pytest.approx(4 * 3.615 / math.sqrt(2))

    def test_config_overrides_geometry(self):
        from slabsite.config import SlabConfig
        from slabsite.structure.slab import build
        slab = build("Au(111)", SlabConfig(fcc111_repeats=(2, 2), layers=3, vacuum=15.0))
        assert slab.n_atoms == 2 * 2 * 2 * 3
        assert slab.cell[2, 2] == pytest.approx(3 * 4.078 / math.sqrt(3) + 15.0)
        assert "15.0 Å vacuum" in slab.description

    def test_builders_return_fresh_lists(self):
        from slabsite.structure.slab import build_fcc100
        p1, _ = build_fcc100(3.615, 2, 2, 2)
        p2, _ = build_fcc100(3.615, 2, 2, 2)
        assert p1 == p2
        assert p1 is not p2


class TestMaterialStructure:

    def test_to_atoms(self, au111):
        atoms = au111.to_atoms()
        assert len(atoms) == 72
        assert np.allclose(atoms.cell[:], au111.cell)
        assert tuple(atoms.pbc) == (True, True, False)
        assert set(atoms.get_chemical_symbols()) == {"Au"}

    def test_write_xyz(self, cu100, tmp_path):
        from ase.io import read
        path = cu100.write(tmp_path / "slab.xyz")
        assert path.exists()
        assert len(read(str(path))) == 64

    def test_empty_structure_properties(self, empty_structure):
        assert empty_structure.n_atoms == 0
        assert empty_structure.positions.shape == (0, 3)
        assert empty_structure.top_z is None

    def test_structure_is_frozen(self, au111):
        import dataclasses
        with pytest.raises(dataclasses.FrozenInstanceError):
            au111.formula = "Ag"
