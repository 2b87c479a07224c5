"""
tests/test_search.py

Tests for surface detection and top / bridge / hollow candidate generation.
"""

from __future__ import annotations

import math

import numpy as np
import pytest


def _corner_ids(site) -> list[int]:
    return [int(i) for i in site.id.split("-")[1:]]


class TestSurfaceAtoms:

    def test_au111_top_layer(self, au111):
        from slabsite.sites.search import find_surface_atoms
        surface = find_surface_atoms(au111)
        assert len(surface) == 18
        assert [a.id for a in surface] == list(range(54, 72))

    def test_wide_tolerance_reaches_second_layer(self, au111):
        from slabsite.sites.search import find_surface_atoms
        dz = 4.078 / math.sqrt(3)
        surface = find_surface_atoms(au111, tolerance=dz + 0.1)
        assert len(surface) == 36

    def test_empty_structure_raises(self, empty_structure):
        from slabsite.sites.models import EmptyStructureError
        from slabsite.sites.search import find_surface_atoms
        with pytest.raises(EmptyStructureError):
            find_surface_atoms(empty_structure)


class TestTopAndBridge:

    def test_keep_all_tops(self, au111, rng):
        from slabsite.sites.search import find_surface_atoms, top_sites
        surface = find_surface_atoms(au111)
        sites = top_sites(surface, rng, height=2.0, keep_probability=1.0)
        assert len(sites) == 18
        first = sites[0]
        assert first.id == "top-54"
        assert first.site_type == "Top"
        assert first.coordinates[2] == pytest.approx(au111.top_z + 2.0)
        assert first.description == "On-top of atom #54"

    def test_keep_no_tops(self, au111, rng):
        from slabsite.sites.search import find_surface_atoms, top_sites
        surface = find_surface_atoms(au111)
        assert top_sites(surface, rng, keep_probability=0.0) == []

    def test_bridges_are_nearest_neighbour_midpoints(self, au111, rng):
        from slabsite.sites.search import bridge_sites, find_surface_atoms
        surface = find_surface_atoms(au111)
        by_id = {a.id: a for a in surface}
        sites = bridge_sites(surface, rng, keep_probability=1.0)
        assert sites
        for site in sites:
            a1, a2 = (by_id[i] for i in _corner_ids(site))
            assert 2.0 < np.linalg.norm(a1.position - a2.position) < 3.0
            mid = (a1.position + a2.position) / 2
            assert site.coordinates[0] == pytest.approx(mid[0])
            assert site.coordinates[1] == pytest.approx(mid[1])
            assert site.coordinates[2] == pytest.approx(mid[2] + 1.8)
            assert site.site_type == "Bridge"

    def test_bridge_ids_are_ordered_pairs(self, au111, rng):
        from slabsite.sites.search import bridge_sites, find_surface_atoms
        sites = bridge_sites(find_surface_atoms(au111), rng, keep_probability=1.0)
        for site in sites:
            a, b = _corner_ids(site)
            assert a < b

    def test_no_bridges_outside_window(self, au111, rng):
        from slabsite.sites.search import bridge_sites, find_surface_atoms
        surface = find_surface_atoms(au111)
        assert bridge_sites(surface, rng, min_distance=3.0, max_distance=4.0,
                            keep_probability=1.0) == []


class TestHollowSites:

    def test_three_fold_hollows_on_111(self, au111):
        from slabsite.sites.search import find_surface_atoms, hollow_sites
        surface = find_surface_atoms(au111)
        hollows = hollow_sites(au111, surface)
        assert hollows
        labels = {h.description for h in hollows}
        assert labels == {"fcc hollow", "hcp hollow"}
        assert all(h.site_type == "Hollow" for h in hollows)

    def test_three_fold_hollows_are_equidistant(self, au111):
        from slabsite.sites.search import find_surface_atoms, hollow_sites
        surface = find_surface_atoms(au111)
        by_id = {a.id: a for a in surface}
        nn = 4.078 / math.sqrt(2)
        for h in hollow_sites(au111, surface):
            corners = _corner_ids(h)
            assert len(corners) == 3
            for i in corners:
                a = by_id[i]
                r = math.hypot(h.coordinates[0] - a.x, h.coordinates[1] - a.y)
                assert r == pytest.approx(nn / math.sqrt(3), abs=1e-6)

    def test_hcp_hollow_sits_over_subsurface_atom(self, au111):
        from slabsite.sites.search import find_surface_atoms, hollow_sites
        dz = 4.078 / math.sqrt(3)
        layer2 = np.array([[a.x, a.y] for a in au111.atoms
                           if a.z == pytest.approx(2 * dz)])
        for h in hollow_sites(au111, find_surface_atoms(au111)):
            nearest = np.min(np.linalg.norm(layer2 - h.coordinates[:2], axis=1))
            if h.description == "hcp hollow":
                assert nearest < 0.5
            else:
                assert nearest > 0.5

    def test_hollow_height(self, au111):
        from slabsite.sites.search import find_surface_atoms, hollow_sites
        hollows = hollow_sites(au111, find_surface_atoms(au111), height=1.5)
        assert all(h.coordinates[2] == pytest.approx(au111.top_z + 1.5) for h in hollows)

    def test_four_fold_hollows_on_100(self, cu100):
        from slabsite.sites.search import find_surface_atoms, hollow_sites
        surface = find_surface_atoms(cu100)
        by_id = {a.id: a for a in surface}
        hollows = hollow_sites(cu100, surface)
        # 4x4 surface atoms enclose 3x3 squares
        assert len(hollows) == 9
        d = 3.615 / math.sqrt(2)
        for h in hollows:
            assert h.description == "four-fold hollow"
            for i in _corner_ids(h):
                a = by_id[i]
                r = math.hypot(h.coordinates[0] - a.x, h.coordinates[1] - a.y)
                assert r == pytest.approx(d / math.sqrt(2), abs=1e-6)

    def test_hollows_sorted_by_position(self, cu100):
        from slabsite.sites.search import find_surface_atoms, hollow_sites
        hollows = hollow_sites(cu100, find_surface_atoms(cu100))
        keys = [(round(h.coordinates[1], 6), round(h.coordinates[0], 6)) for h in hollows]
        assert keys == sorted(keys)

    def test_too_few_atoms(self, single_atom):
        from slabsite.sites.search import find_surface_atoms, hollow_sites
        assert hollow_sites(single_atom, find_surface_atoms(single_atom)) == []


class TestCandidateSearch:

    def test_hollows_fill_up_to_min_candidates(self, au111, rng):
        from slabsite.config import SiteSearchConfig
        from slabsite.sites.search import find_candidate_sites, find_surface_atoms, hollow_sites
        cfg = SiteSearchConfig(top_keep_probability=0.0, bridge_keep_probability=0.0,
                               min_candidates=5)
        sites = find_candidate_sites(au111, rng, cfg)
        expected = hollow_sites(au111, find_surface_atoms(au111))[:5]
        assert sites == expected

    def test_no_hollows_when_enough_candidates(self, au111, rng):
        from slabsite.config import SiteSearchConfig
        from slabsite.sites.search import find_candidate_sites
        cfg = SiteSearchConfig(top_keep_probability=1.0, min_candidates=5)
        sites = find_candidate_sites(au111, rng, cfg)
        assert not any(s.site_type == "Hollow" for s in sites)

    def test_estimated_hollow_for_single_atom(self, single_atom, rng):
        from slabsite.sites.search import find_candidate_sites
        sites = find_candidate_sites(single_atom, rng)
        est = [s for s in sites if s.id == "hollow-est"]
        assert len(est) == 1
        assert est[0].coordinates == pytest.approx((2.2, 1.8, 6.5))
        assert est[0].description == "fcc hollow (estimated)"

    def test_at_least_one_hollow_below_threshold(self, single_atom, rng):
        from slabsite.config import SiteSearchConfig
        from slabsite.sites.search import find_candidate_sites
        cfg = SiteSearchConfig(top_keep_probability=1.0, min_candidates=2)
        sites = find_candidate_sites(single_atom, rng, cfg)
        assert [s.site_type for s in sites] == ["Top", "Hollow"]

    def test_seeded_search_is_reproducible(self, au111):
        from slabsite.sites.search import find_candidate_sites
        a = find_candidate_sites(au111, np.random.default_rng(7))
        b = find_candidate_sites(au111, np.random.default_rng(7))
        assert a == b

    def test_all_energies_zero(self, au111, rng):
        from slabsite.sites.search import find_candidate_sites
        assert all(s.energy == 0.0 for s in find_candidate_sites(au111, rng))

    def test_never_empty_with_zero_threshold(self, au111, rng):
        from slabsite.config import SiteSearchConfig
        from slabsite.sites.search import find_candidate_sites
        cfg = SiteSearchConfig(top_keep_probability=0.0, bridge_keep_probability=0.0,
                               min_candidates=0)
        sites = find_candidate_sites(au111, rng, cfg)
        assert len(sites) == 1
        assert sites[0].site_type == "Hollow"
