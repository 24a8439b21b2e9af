import pytest

from src.models.design_inputs import SearchBounds, SpacingConfig
from src.models.detailing import (
    MemberType,
    ReinforcementType,
    min_cover_cip,
    min_horizontal_clear_spacing,
    min_vertical_clear_spacing,
    proportion_dimensions,
)


class TestCover:
    def test_interior_beam_bars(self):
        cover, note = min_cover_cip()
        assert cover == 1.5
        assert "20.5.1.3.2" in note

    def test_interior_beam_stirrups(self):
        assert min_cover_cip(reinforcement_type=ReinforcementType.STIRRUP)[0] == 1.0

    def test_interior_slab(self):
        assert min_cover_cip(MemberType.ONE_WAY_SLAB)[0] == 0.75

    def test_exposed(self):
        assert min_cover_cip(MemberType.WALL, exposed=True)[0] == 1.0
        assert min_cover_cip(MemberType.BEAM, exposed=True)[0] == 1.5

    def test_cast_against_earth_wins(self):
        assert min_cover_cip(MemberType.SLAB, cast_against_earth=True, exposed=True)[0] == 3.0

    def test_accepts_plain_strings(self):
        assert min_cover_cip("column", "tie")[0] == 1.0


class TestClearSpacing:
    @pytest.mark.parametrize("bar, expected", [("#3", 1.0), ("#8", 1.0), ("#9", 1.128), ("#11", 1.41)])
    def test_flexural_member(self, bar, expected):
        spacing, note = min_horizontal_clear_spacing(bar)
        assert spacing == pytest.approx(expected)
        assert "25.2.1" in note

    def test_aggregate_can_govern(self):
        assert min_horizontal_clear_spacing("#5", max_aggregate=1.5)[0] == pytest.approx(2.0)

    def test_compression_member(self):
        spacing, note = min_horizontal_clear_spacing("#8", member_type=MemberType.COLUMN)
        assert spacing == pytest.approx(1.5)
        assert "25.2.3" in note
        assert min_horizontal_clear_spacing("#11", member_type=MemberType.COLUMN)[0] == pytest.approx(2.115)

    def test_vertical(self):
        spacing, note = min_vertical_clear_spacing()
        assert spacing == 1.0
        assert "25.2.2" in note

    def test_spacing_config_for_bar(self):
        assert SpacingConfig.for_bar("#11").clear_spacing == pytest.approx(1.41)
        assert SpacingConfig.for_bar("#4").clear_spacing == pytest.approx(1.0)


class TestProportioning:
    @pytest.mark.parametrize(
        "member, expected",
        [
            (MemberType.BEAM, (5.0, 12.0)),
            (MemberType.ONE_WAY_SLAB, (12.0, 12.0)),
            (MemberType.TWO_WAY_SLAB, (12.0, 8.0)),
            (MemberType.WALL, (12.0, 10.0)),
            (MemberType.RETAINING_WALL, (12.0, 24.0)),
            (MemberType.COLUMN, (6.0, 6.0)),
            (MemberType.JOIST, (12.0, 12.0)),
        ],
    )
    def test_twenty_foot_span(self, member, expected):
        assert proportion_dimensions(20, member) == expected

    def test_depth_rounds_up(self):
        assert proportion_dimensions(21) == (6.0, 13.0)

    @pytest.mark.parametrize("span", [0, -5])
    def test_non_positive_span_rejected(self, span):
        with pytest.raises(ValueError):
            proportion_dimensions(span)


class TestSearchBounds:
    def test_default_grid(self):
        bounds = SearchBounds()
        assert len(bounds.widths) == 32
        assert bounds.widths[0] == 4.0
        assert bounds.heights[-1] == 35.0

    def test_fractional_step(self):
        bounds = SearchBounds(min_width=10, max_width=11, step=0.5)
        assert bounds.widths == [10.0, 10.5, 11.0]

    def test_bar_sizes_parsed(self):
        bounds = SearchBounds(tension_bar_sizes=("#5", "6"))
        assert [size.value for size in bounds.tension_bar_sizes] == ["#5", "#6"]
        assert bounds.to_dict()["tension_bar_sizes"] == ["#5", "#6"]

    @pytest.mark.parametrize(
        "kwargs",
        [{"step": 0}, {"min_width": 0}, {"min_height": 20, "max_height": 10}, {"max_tension_bars": 0}],
    )
    def test_invalid_bounds(self, kwargs):
        with pytest.raises(ValueError):
            SearchBounds(**kwargs)
