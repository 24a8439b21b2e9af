import threading

import pytest

from src.models.design_inputs import CoverConfig, MaterialProperties, SearchBounds, SpacingConfig
from src.models.design_search import (
    compression_options,
    design_all_sections,
    design_section,
    filter_designs,
    moment_upper_bound,
    sort_designs,
    tension_options,
    unique_by_depth,
    unique_by_width,
)
from src.models.flexure import compute_flexural_capacity
from src.models.rebar_catalog import BarSize
from src.models.section import BeamSection
from src.models.units import kipft_to_lbin


@pytest.fixture
def small_bounds():
    return SearchBounds(min_width=10, max_width=14, min_height=14, max_height=22)


def _analyzed(b, h, bar, qty):
    section = BeamSection(b, h)
    section.add_tension_layer(bar, qty)
    return compute_flexural_capacity(section)


def _section_kwargs(bounds):
    return dict(
        materials=MaterialProperties(),
        covers=CoverConfig(),
        spacing=SpacingConfig(),
        bounds=bounds,
    )


class TestOptions:
    def test_tension_options_fit_and_ascend(self, small_bounds):
        base = BeamSection(10, 18)
        options = tension_options(base, small_bounds)
        areas = [qty * bar.area for bar, qty in options]

        assert options
        assert areas == sorted(areas)
        assert all(base.fits(bar, qty) for bar, qty in options)
        assert min(areas) >= base.rho_min * 10 * 16.5

    def test_compression_options_respect_width(self):
        base = BeamSection(6, 18)
        options = compression_options(base, SearchBounds())
        assert all(base.fits(bar, qty) for bar, qty in options)
        assert max(qty for _, qty in options) == 2
        assert (BarSize.N6, 2) in options
        assert (BarSize.N7, 2) not in options

    def test_upper_bound_exceeds_accepted_capacity(self, small_bounds):
        results = design_all_sections(100, bounds=small_bounds)
        for result in results:
            base = result.section.base_clone()
            assert moment_upper_bound(base, compression_options(base, small_bounds)) >= result.phi_Mn


class TestDesignSection:
    @pytest.mark.parametrize("b, h", [(10, 16), (12, 18), (14, 20), (12, 24)])
    def test_singly_choice_matches_exhaustive_scan(self, b, h, small_bounds):
        Mu = kipft_to_lbin(100)
        base = BeamSection(b, h)
        expected = None
        for bar, qty in tension_options(base, small_bounds):
            trial = base.base_clone()
            trial.add_tension_layer(bar, qty)
            res = compute_flexural_capacity(trial)
            if res.phi_Mn >= Mu and res.epsilon_t >= 0.005:
                expected = (bar, qty)
                break

        result = design_section(b, h, Mu, **_section_kwargs(small_bounds))
        if expected is None:
            assert result is None or result.section.compression_layers
        else:
            layer = result.section.tension_layers[0]
            assert (layer.bar_size, layer.quantity) == expected
            assert result.section.compression_layers == ()

    def test_doubly_reinforced_fallback(self):
        # 12 x 18 tops out near 200 kip-ft with a single tension-controlled layer
        Mu = kipft_to_lbin(210)
        result = design_section(12, 18, Mu, **_section_kwargs(SearchBounds()))

        assert result is not None
        assert len(result.section.compression_layers) == 1
        assert result.phi_Mn >= Mu
        assert result.epsilon_t >= 0.005
        assert result.section.compression_layers[0].depth == 1.5

    def test_too_shallow_geometry_is_skipped(self):
        covers = CoverConfig(tension=2.0, compression=2.0)
        assert design_section(12, 4, 0.0, MaterialProperties(), covers, SpacingConfig(), SearchBounds()) is None

    @pytest.mark.parametrize("kwargs", [{"tension": 0.0}, {"compression": 0.0}])
    def test_zero_bar_cover_rejected(self, kwargs):
        with pytest.raises(ValueError, match="must be positive"):
            CoverConfig(**kwargs)

    def test_zero_side_cover_allowed(self):
        bounds = SearchBounds(min_width=12, max_width=12, min_height=18, max_height=18)
        results = design_all_sections(100, covers=CoverConfig(side=0.0), bounds=bounds)
        assert results
        assert all(r.section.side_cover == 0.0 for r in results)

    def test_width_without_fitting_bars_is_skipped(self):
        assert design_section(3, 18, kipft_to_lbin(1), **_section_kwargs(SearchBounds())) is None


class TestDesignAllSections:
    def test_unreachable_target_returns_empty_list(self):
        assert design_all_sections(10_000) == []

    def test_results_sorted_and_accepted(self, small_bounds):
        Mu = kipft_to_lbin(100)
        results = design_all_sections(100, bounds=small_bounds)

        assert results
        keys = [(r.width, r.height) for r in results]
        assert keys == sorted(keys)
        assert len(set(keys)) == len(keys)
        for result in results:
            assert result.phi_Mn >= Mu
            assert result.epsilon_t >= 0.005
            for layer in result.section.tension_layers + result.section.compression_layers:
                assert result.section.fits(layer.bar_size, layer.quantity)

    def test_results_match_reanalysis(self, small_bounds):
        for result in design_all_sections(100, bounds=small_bounds):
            again = compute_flexural_capacity(result.section)
            assert again.Mn == pytest.approx(result.Mn)

    def test_end_to_end_reference_width(self):
        bounds = SearchBounds(min_width=12, max_width=12, min_height=10, max_height=24)
        results = design_all_sections(100, bounds=bounds)
        smallest = results[0]
        assert smallest.width == 12
        assert all(r.height >= smallest.height for r in results)
        assert results[-1].height == 24
        assert smallest.height < 18

    def test_first_only(self, small_bounds):
        full = design_all_sections(100, bounds=small_bounds)
        first = design_all_sections(100, bounds=small_bounds, first_only=True)
        assert len(first) == 1
        assert (first[0].width, first[0].height) == (full[0].width, full[0].height)

    def test_worker_count_does_not_change_result(self, small_bounds):
        serial = design_all_sections(100, bounds=small_bounds, max_workers=1)
        parallel = design_all_sections(100, bounds=small_bounds, max_workers=4)
        assert [r.to_dict() for r in serial] == [r.to_dict() for r in parallel]

    def test_cancelled_search_returns_partial(self, small_bounds):
        cancel = threading.Event()
        cancel.set()
        assert design_all_sections(100, bounds=small_bounds, cancel_event=cancel) == []

    def test_concrete_shear_attached_without_demand(self, small_bounds):
        for result in design_all_sections(100, bounds=small_bounds):
            assert result.Vc > 0
            assert result.Vs == 0
            assert result.stirrups is None

    def test_shear_demand_designs_stirrups(self):
        bounds = SearchBounds(min_width=12, max_width=12, min_height=16, max_height=20)
        results = design_all_sections(100, bounds=bounds, shear_demand=30)
        assert results
        for result in results:
            assert result.stirrups is not None
            assert result.phi_Vn >= 30

    def test_unsatisfiable_shear_drops_designs(self):
        bounds = SearchBounds(min_width=12, max_width=12, min_height=16, max_height=20)
        assert design_all_sections(100, bounds=bounds, shear_demand=500) == []


class TestFilters:
    @pytest.fixture
    def designs(self):
        return [
            _analyzed(12, 20, "#8", 3),
            _analyzed(14, 18, "#8", 3),
            _analyzed(12, 18, "#8", 3),
            _analyzed(12, 20, "#9", 2),
        ]

    def test_sort_by_width_then_height(self, designs):
        ordered = sort_designs(designs)
        assert [(r.width, r.height) for r in ordered] == [(12, 18), (12, 20), (12, 20), (14, 18)]

    def test_sort_by_area(self, designs):
        ordered = sort_designs(designs, by_area=True)
        assert [(r.gross_area, r.section.tension_layers[0].bar_size.value) for r in ordered] == [
            (216, "#8"), (240, "#9"), (240, "#8"), (252, "#8"),
        ]

    def test_unique_by_depth_keeps_shallowest(self, designs):
        kept = unique_by_depth(designs)
        assert [(r.width, r.height) for r in kept] == [(12, 18), (12, 20), (14, 18)]
        assert kept[1].section.tension_layers[0].bar_size.value == "#9"

    def test_unique_by_width_keeps_narrowest(self, designs):
        kept = unique_by_width(designs)
        assert sorted((r.width, r.height) for r in kept) == [(12, 18), (12, 20), (12, 20)]

    def test_filter_by_width(self, designs):
        assert all(r.width == 12 for r in filter_designs(designs, width=12))
        assert len(filter_designs(designs, width=12)) == 3

    def test_filter_by_max_bar(self, designs):
        kept = filter_designs(designs, max_bar="#8")
        assert len(kept) == 3
        assert all(layer.bar_size.value == "#8" for r in kept for layer in r.section.tension_layers)
