import math

import pytest
from src.models.reinforcement import RebarLayer, fits_in_width, layer_footprint
from src.models.section import BeamSection, compute_beta1


@pytest.fixture
def reference_section():
    section = BeamSection(b=12, h=18, fc=4000, fy=60000, cover=1.5)
    section.add_tension_layer("#8", 3, depth=16)
    return section


class TestBeamSection:
    def test_valid_creation(self):
        s = BeamSection(12, 18, 4000, 60000, 1.5)
        assert s.b == 12
        assert s.h == 18
        assert s.fc == 4000
        assert s.fy == 60000
        assert s.cover == 1.5
        assert s.compression_cover == 1.5
        assert s.side_cover == 1.5
        assert s.gross_area == 216

    def test_effective_depth_fallback_without_layers(self):
        s = BeamSection(12, 18, 4000, 60000, 1.5)
        assert s.d == pytest.approx(16.0)

    def test_effective_depth_is_area_weighted_centroid(self):
        s = BeamSection(12, 24, 4000, 60000, 1.5)
        s.add_tension_layer("#8", 2, depth=21.5)
        s.add_tension_layer("#6", 2, depth=19.5)
        expected = (1.58 * 21.5 + 0.88 * 19.5) / (1.58 + 0.88)
        assert s.d == pytest.approx(expected)
        assert s.d_t == 21.5

    def test_default_layer_depths(self):
        s = BeamSection(12, 18, 4000, 60000, 1.5, compression_cover=2.5)
        tension = s.add_tension_layer("#8", 3)
        compression = s.add_compression_layer("#5", 2)
        assert tension.depth == 16.5
        assert compression.depth == 2.5
        assert s.d_prime == 2.5

    def test_steel_areas(self, reference_section):
        reference_section.add_compression_layer("#5", 2, depth=2.5)
        assert reference_section.As_tension == pytest.approx(2.37)
        assert reference_section.As_compression == pytest.approx(0.62)

    def test_moments_of_inertia(self):
        s = BeamSection(12, 18)
        assert s.Ix == pytest.approx(12 * 18 ** 3 / 12)
        assert s.Iy == pytest.approx(18 * 12 ** 3 / 12)

    def test_cover_equals_height_raises(self):
        with pytest.raises(ValueError, match="Cover"):
            BeamSection(12, 18, 4000, 60000, 18)

    def test_cover_exceeds_height_raises(self):
        with pytest.raises(ValueError, match="Cover"):
            BeamSection(12, 18, 4000, 60000, 20)

    def test_negative_width_raises(self):
        with pytest.raises(ValueError, match="positive"):
            BeamSection(-10, 18, 4000, 60000, 1.5)

    def test_negative_height_raises(self):
        with pytest.raises(ValueError, match="positive"):
            BeamSection(12, -18, 4000, 60000, 1.5)

    def test_zero_fc_raises(self):
        with pytest.raises(ValueError, match="positive"):
            BeamSection(12, 18, 0, 60000, 1.5)

    def test_negative_fy_raises(self):
        with pytest.raises(ValueError, match="positive"):
            BeamSection(12, 18, 4000, -60000, 1.5)

    @pytest.mark.parametrize("depth", [0, 18, 19.5, -1])
    def test_layer_outside_section_raises(self, depth):
        s = BeamSection(12, 18)
        with pytest.raises(ValueError, match="inside the section"):
            s.add_tension_layer("#8", 3, depth=depth)

    @pytest.mark.parametrize("quantity", [0, -2, 1.5])
    def test_layer_quantity_must_be_positive_integer(self, quantity):
        with pytest.raises(ValueError, match="positive integer"):
            RebarLayer("#8", quantity, 16)

    def test_layers_are_read_only(self, reference_section):
        assert isinstance(reference_section.tension_layers, tuple)
        with pytest.raises(AttributeError):
            reference_section.tension_layers.append(None)


class TestBeta1:
    def test_beta1_low_fc(self):
        assert compute_beta1(3000) == 0.85

    def test_beta1_at_4000(self):
        assert compute_beta1(4000) == 0.85

    def test_beta1_medium_fc(self):
        assert compute_beta1(5000) == pytest.approx(0.80)
        assert compute_beta1(6000) == pytest.approx(0.75)

    def test_beta1_high_fc(self):
        assert compute_beta1(8000) == 0.65
        assert compute_beta1(10000) == 0.65

    def test_section_uses_beta1(self):
        assert BeamSection(12, 18, fc=5000).beta1 == pytest.approx(0.80)


class TestSteelRatios:
    def test_rho_min_governed_by_200_over_fy(self):
        s = BeamSection(12, 18, 4000, 60000)
        assert s.rho_min == pytest.approx(200 / 60000)

    def test_rho_min_governed_by_sqrt_fc(self):
        s = BeamSection(12, 18, 6000, 60000)
        assert s.rho_min == pytest.approx(3 * math.sqrt(6000) / 60000)

    def test_rho_balanced_and_max(self):
        s = BeamSection(12, 18, 4000, 60000)
        eps_y = 60000 / 29_000_000
        expected = 0.85 * 4000 * 0.85 / 60000 * 0.003 / (0.003 + eps_y)
        assert s.rho_balanced == pytest.approx(expected)
        assert s.rho_max == pytest.approx(0.75 * expected)

    def test_rho_at_strain_decreases_with_strain(self):
        s = BeamSection(12, 18)
        assert s.rho_at_strain(0.005) < s.rho_balanced

    def test_actual_rho(self, reference_section):
        assert reference_section.rho == pytest.approx(2.37 / (12 * 16))


class TestCloning:
    def test_clone_does_not_share_layers(self, reference_section):
        trial = reference_section.clone()
        trial.add_tension_layer("#6", 2, depth=14)
        trial.add_compression_layer("#5", 2, depth=2.5)

        assert len(reference_section.tension_layers) == 1
        assert len(reference_section.compression_layers) == 0
        assert len(trial.tension_layers) == 2

    def test_base_clone_drops_reinforcement(self, reference_section):
        reference_section.add_stirrups("#3", 2, 6)
        base = reference_section.base_clone()
        assert base.tension_layers == ()
        assert base.stirrup_layers == ()
        assert (base.b, base.h, base.fc, base.fy, base.cover) == (12, 18, 4000, 60000, 1.5)

    def test_clone_keeps_reinforcement(self, reference_section):
        trial = reference_section.clone()
        assert trial.tension_layers == reference_section.tension_layers
        assert trial.to_dict() == reference_section.to_dict()


class TestFitCheck:
    def test_footprint(self):
        assert layer_footprint("#8", 3, 1.5) == pytest.approx(6.0)

    def test_exact_width_is_accepted(self):
        # 3 x 1.0 + 2 x 1.5 + 2 x 1.5 = 9.0
        assert fits_in_width(9.0, "#8", 3, clear_spacing=1.5, side_cover=1.5)

    def test_one_unit_over_is_rejected(self):
        assert not fits_in_width(8.0, "#8", 3, clear_spacing=1.5, side_cover=1.5)

    def test_section_fits(self):
        s = BeamSection(9, 18, cover=1.5, clear_spacing=1.5)
        assert s.fits("#8", 3)
        assert not s.fits("#8", 4)

    def test_summaries(self, reference_section):
        assert reference_section.tension_summary() == "3-#8 at 16"
        assert reference_section.compression_summary() == "None"
        assert reference_section.summary() == "12 in. x 18 in. = 216 sq. in."
