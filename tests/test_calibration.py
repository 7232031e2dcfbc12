import pytest

import ShareCal
from ShareCal import calibration


def build_sector(**sector_kwargs):
    modeltime = ShareCal.Modeltime(2005, 2020, 5)
    market = ShareCal.Marketplace()
    for good in ["coal", "gas"]:
        for period in range(modeltime.max_period):
            market.set_price(good, "USA", period, 10)

    sector = ShareCal.Sector("electricity", "USA", modeltime, market=market,
                             diagnostics=ShareCal.Diagnostics(show_warnings=False),
                             **sector_kwargs)
    coal = sector.add_group("coal")
    gas = sector.add_group("gas")
    sector.add_option(coal, ShareCal.Option("steam", "coal", modeltime.max_period))
    sector.add_option(coal, ShareCal.Option("igcc", "coal", modeltime.max_period))
    sector.add_option(gas, ShareCal.Option("turbine", "gas", modeltime.max_period))
    return sector


class TestAdjustForCalibration:
    @pytest.fixture
    def sector(self):
        sector = build_sector()
        coal = sector.get_group("coal")
        coal.set_calibration_output(50, 0)
        coal.share[0] = 0.5
        return sector

    def test_targets_fit_available_demand(self, sector):
        coal = sector.get_group("coal")
        target = calibration.adjust_for_calibration(sector, coal, 100, 40, 50, False, 0)

        assert target == pytest.approx(50)
        assert coal.share_weight[0] == pytest.approx(50 / (0.5 * 100))

    def test_targets_rescaled_when_all_output_fixed(self, sector):
        coal = sector.get_group("coal")
        target = calibration.adjust_for_calibration(sector, coal, 100, 40, 50, True, 0)

        assert target == pytest.approx(60)
        assert target / 50 == pytest.approx(1.2)
        assert coal.share_weight[0] == pytest.approx(60 / (0.5 * 100))

    def test_targets_rescaled_when_too_large(self, sector):
        coal = sector.get_group("coal")
        target = calibration.adjust_for_calibration(sector, coal, 100, 40, 80, False, 0)
        assert target == pytest.approx(50 * 60 / 80)

    def test_zero_share_weight_reset(self, sector):
        coal = sector.get_group("coal")
        coal.share_weight[0] = 0
        coal.share[0] = 0
        calibration.adjust_for_calibration(sector, coal, 100, 0, 50, False, 0)

        assert coal.share_weight[0] == 1

    def test_negative_share_weight_reset(self, sector):
        coal = sector.get_group("coal")
        coal.set_calibration_output(-10, 0)
        calibration.adjust_for_calibration(sector, coal, 100, 0, 50, False, 0)

        assert coal.share_weight[0] == 1
        assert sector.diagnostics.count("error") == 1

    def test_zero_total_calibrated_output(self, sector):
        coal = sector.get_group("coal")
        target = calibration.adjust_for_calibration(sector, coal, 100, 0, 0, True, 0)

        assert target == 50
        assert sector.diagnostics.count("error") == 1
        assert coal.share_weight[0] >= 0

    def test_zero_available_demand(self, sector):
        coal = sector.get_group("coal")
        target = calibration.adjust_for_calibration(sector, coal, 100, 120, 50, False, 0)
        assert target == 0
        assert coal.share_weight[0] == 0


class TestCalibrationTotals:
    @pytest.fixture
    def sector(self):
        sector = build_sector()
        steam = sector.get_option("coal", "steam")
        steam.set_calibration_output(20, 0)
        steam.efficiency[:] = 0.5
        turbine = sector.get_option("gas", "turbine")
        turbine.set_fixed_output(10, 0)
        return sector

    def test_calibration_status(self, sector):
        assert calibration.set_calibration_status(sector, sector.get_group("coal"), 0)
        assert not calibration.set_calibration_status(sector, sector.get_group("gas"), 0)
        assert not calibration.set_calibration_status(sector, sector.get_group("coal"), 1)

    def test_total_cal_outputs(self, sector):
        assert calibration.get_total_cal_outputs(sector, sector.get_group("coal"), 0) == 20
        assert sector.get_total_cal_outputs(0) == 20

        sector.get_group("coal").set_calibration_output(35, 0)
        assert sector.get_total_cal_outputs(0) == 35

    @pytest.mark.parametrize("good, both_vals, expected",
                             [(ShareCal.ALL_GOODS, True, 30),
                              ("coal", True, 20),
                              ("gas", True, 10),
                              ("gas", False, 0),
                              ("oil", True, 0)])
    def test_cal_and_fixed_outputs(self, sector, good, both_vals, expected):
        assert sector.get_cal_and_fixed_outputs(0, good, both_vals) == pytest.approx(expected)

    def test_cal_and_fixed_inputs(self, sector):
        assert sector.get_cal_and_fixed_inputs(0, "coal") == pytest.approx(40)
        assert sector.get_cal_and_fixed_inputs(0) == pytest.approx(50)

    def test_inputs_all_fixed(self, sector):
        coal = sector.get_group("coal")
        assert not calibration.inputs_all_fixed(sector, coal, 0, "coal")
        assert calibration.inputs_all_fixed(sector, coal, 0, "gas")
        assert calibration.inputs_all_fixed(sector, sector.get_group("gas"), 0)

        sector.get_option(coal, "igcc").set_calibration_output(5, 0)
        assert calibration.inputs_all_fixed(sector, coal, 0, "coal")

    def test_scale_calibrated_values(self, sector):
        coal = sector.get_group("coal")
        calibration.scale_calibrated_values(sector, coal, "coal", 1.5, 0)
        assert sector.get_option(coal, "steam").get_calibration_output(0) == pytest.approx(30)
        assert sector.get_option(coal, "igcc").get_calibration_output(0) == 0

        calibration.scale_calibration_input(sector, coal, 2, 0)
        assert sector.get_option(coal, "steam").get_calibration_output(0) == pytest.approx(60)

    def test_set_implied_fixed_input(self, sector):
        coal = sector.get_group("coal")
        assert calibration.set_implied_fixed_input(sector, coal, "coal", 10, 0)

        cal_demand = sector.market.get_market_info("coal", "USA", 0, "calDemand")
        assert cal_demand == pytest.approx(10 / 0.5)
        # Both coal options consume coal, but only the first is used
        assert sector.diagnostics.count("warning") == 1

        assert not calibration.set_implied_fixed_input(sector, coal, "oil", 10, 0)

    def test_implied_fixed_input_needs_single_good(self, sector):
        coal = sector.get_group("coal")
        assert not calibration.set_implied_fixed_input(sector, coal, ShareCal.ALL_GOODS, 10, 0)

        assert sector.diagnostics.count("error") == 1
        assert sector.market.get_market_info("*", "USA", 0, "calDemand") == 0
        assert sector.market.get_market_info("coal", "USA", 0, "calDemand") == 0

    def test_normalized_option_share_weights(self, sector):
        coal = sector.get_group("coal")
        steam, igcc = sector.options(coal)
        steam.share_weight[0] = 3
        igcc.share_weight[0] = 1
        normalized = calibration.get_normalized_option_share_weights(sector, coal, 0)

        assert normalized[steam] == pytest.approx(1.5)
        assert normalized[igcc] == pytest.approx(0.5)
        assert steam.share_weight[0] == 3

    def test_normalize_option_share_weights(self, sector):
        coal = sector.get_group("coal")
        steam, igcc = sector.options(coal)
        steam.share_weight[0] = 3
        igcc.share_weight[0] = 1
        calibration.normalize_option_share_weights(sector, coal, 0)

        assert steam.share_weight[0] == pytest.approx(1.5)
        assert igcc.share_weight[0] == pytest.approx(0.5)

    def test_normalize_zero_share_weights(self, sector):
        coal = sector.get_group("coal")
        for option in sector.options(coal):
            option.share_weight[0] = 0
        calibration.normalize_option_share_weights(sector, coal, 0)

        assert sector.diagnostics.count("error") == 1


class TestCalibrate:
    def test_group_calibration_round_trip(self):
        sector = build_sector()
        sector.get_group("coal").set_calibration_output(30, 0)
        sector.init_calc(0)

        assert sector.calibrate(0, 100)
        sector.set_output(100, 0)
        assert sector.get_group("coal").output[0] == pytest.approx(30, rel=1e-5)
        assert sector.get_group("gas").output[0] == pytest.approx(70, rel=1e-5)

    def test_option_calibration_round_trip(self):
        sector = build_sector()
        sector.get_option("coal", "steam").set_calibration_output(20, 0)
        sector.get_option("coal", "igcc").set_calibration_output(10, 0)
        sector.get_option("gas", "turbine").set_calibration_output(60, 0)

        output = sector.run_period(0, 90)

        assert output == pytest.approx(90)
        assert sector.get_option("coal", "steam").output[0] == pytest.approx(20, rel=1e-5)
        assert sector.get_option("coal", "igcc").output[0] == pytest.approx(10, rel=1e-5)
        assert sector.get_option("gas", "turbine").output[0] == pytest.approx(60, rel=1e-5)

    def test_calibrated_share_weights_interpolated(self):
        sector = build_sector()
        coal = sector.get_group("coal")
        coal.set_calibration_output(30, 0)
        sector.run_period(0, 100)
        calibrated = coal.share_weight[0]

        sector.run_period(1, 100)

        assert calibrated != 1
        assert coal.share_weight[1] == pytest.approx(calibrated + (1 - calibrated) / 3)
        assert coal.share_weight[2] == pytest.approx(calibrated + 2 * (1 - calibrated) / 3)
        assert coal.share_weight[3] == 1

    def test_calibration_inactive(self):
        sector = build_sector(calibration_active=False)
        coal = sector.get_group("coal")
        coal.set_calibration_output(30, 0)
        sector.run_period(0, 100)

        assert coal.share_weight[0] == 1
        assert coal.output[0] == pytest.approx(50)

    def test_capacity_limit_removed_for_calibration(self):
        sector = build_sector()
        coal = sector.get_group("coal")
        coal.capacity_limit[0] = 0.2
        coal.set_calibration_output(30, 0)
        sector.init_calc(0)

        assert coal.capacity_limit[0] == 1
        assert sector.diagnostics.count("notice") == 1

    def test_option_target_unreachable_beside_uncalibrated_option(self):
        sector = build_sector()
        sector.get_option("coal", "steam").set_calibration_output(20, 0)
        sector.init_calc(0)

        assert not sector.calibrate(0, 100, max_iterations=50)
        assert sector.diagnostics.count("warning") == 1

        sector.set_output(100, 0)
        assert sector.get_group("coal").output[0] == pytest.approx(20, rel=1e-5)
        assert sector.get_option("coal", "steam").output[0] < 20

    def test_option_error_included(self):
        sector = build_sector()
        coal = sector.get_group("coal")
        steam = sector.get_option(coal, "steam")
        steam.set_calibration_output(20, 0)
        coal.share[0] = 0.2
        steam.share[0] = 0.5

        assert calibration.calibration_error(sector, {coal: 20}, 100, 0) == pytest.approx(0.5)

        steam.share[0] = 1
        assert calibration.calibration_error(sector, {coal: 20}, 100, 0) == pytest.approx(0)

    def test_not_converged(self):
        sector = build_sector()
        sector.get_group("coal").set_calibration_output(30, 0)
        sector.init_calc(0)

        assert not sector.calibrate(0, 100, max_iterations=1)
        assert sector.diagnostics.count("warning") == 1
