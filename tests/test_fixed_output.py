import pytest

import ShareCal
from ShareCal.stock_allocation import fixed_output


class TestFixedOutput:
    @pytest.fixture
    def sector(self):
        modeltime = ShareCal.Modeltime(2005, 2020, 5)
        market = ShareCal.Marketplace()
        for good in ["coal", "gas", "water"]:
            for period in range(modeltime.max_period):
                market.set_price(good, "USA", period, 10)

        sector = ShareCal.Sector("electricity", "USA", modeltime, market=market,
                                 diagnostics=ShareCal.Diagnostics(show_warnings=False))
        hydro = sector.add_group("hydro")
        coal = sector.add_group("coal")
        gas = sector.add_group("gas")

        dam = ShareCal.Option("dam", "water", modeltime.max_period)
        dam.set_fixed_output(30, 0)
        sector.add_option(hydro, dam)
        sector.add_option(coal, ShareCal.Option("steam", "coal", modeltime.max_period))
        sector.add_option(gas, ShareCal.Option("turbine", "gas", modeltime.max_period))
        return sector

    def test_group_fixed_output(self, sector):
        assert fixed_output.get_group_fixed_output(sector, sector.get_group("hydro"), 0) == 30
        assert fixed_output.get_group_fixed_output(sector, sector.get_group("coal"), 0) == 0
        assert sector.get_fixed_output(0) == 30
        assert sector.get_fixed_output(1) == 0

    def test_fixed_share_seeded(self, sector):
        sector.init_calc(0)
        assert sector.get_group("hydro").fixed_share[0] == 0.1
        assert sector.get_group("coal").fixed_share[0] == 0

    def test_fixed_output_met_first(self, sector):
        sector.init_calc(0)
        shares = sector.calc_shares(0, demand=100)

        assert shares["hydro"] == pytest.approx(0.3)
        assert shares["coal"] == pytest.approx(0.35)
        assert shares["gas"] == pytest.approx(0.35)
        assert sector.get_option("hydro", "dam").share[0] == pytest.approx(1)

        sector.set_output(100, 0)
        assert sector.get_option("hydro", "dam").output[0] == pytest.approx(30)
        assert sector.get_output(0) == pytest.approx(100)

    def test_fixed_output_larger_than_demand(self, sector):
        sector.init_calc(0)
        shares = sector.calc_shares(0, demand=20)

        assert shares["hydro"] == pytest.approx(1)
        assert shares["coal"] == 0
        assert sector.get_option("hydro", "dam").get_fixed_output(0) == pytest.approx(20)

        # Scaling is undone the next time shares are calculated
        sector.calc_shares(0, demand=100)
        assert sector.get_option("hydro", "dam").get_fixed_output(0) == pytest.approx(30)

    def test_all_output_fixed(self, sector):
        hydro = sector.get_group("hydro")
        coal = sector.get_group("coal")
        gas = sector.get_group("gas")
        gas.share_weight[0] = 0

        assert fixed_output.all_output_fixed(sector, hydro, 0)
        assert not fixed_output.all_output_fixed(sector, coal, 0)
        assert fixed_output.all_output_fixed(sector, gas, 0)
        assert not sector.all_output_fixed(0)

        sector.get_option(coal, "steam").set_calibration_output(50, 0)
        assert sector.all_output_fixed(0)

    def test_calibrated_group_output_is_fixed(self, sector):
        coal = sector.get_group("coal")
        coal.set_calibration_output(40, 0)
        assert fixed_output.all_output_fixed(sector, coal, 0)

    def test_set_share_to_fixed_value(self, sector):
        hydro = sector.get_group("hydro")
        fixed_output.set_fixed_share(sector, hydro, 0.25, 0)
        assert fixed_output.get_fixed_share(hydro, 0) == 0.25

        sector.set_share_to_fixed_value("hydro", 0)
        assert sector.get_share("hydro", 0) == 0.25

    def test_fixed_share_above_one_is_reported(self, sector):
        fixed_output.set_fixed_share(sector, sector.get_group("hydro"), 1.5, 0)
        assert sector.diagnostics.count("error") == 1


class TestOptionAdjShares:
    @pytest.fixture
    def options(self):
        fixed = ShareCal.Option("fixed", "coal", 2)
        fixed.set_fixed_output(20, 0)
        variable = ShareCal.Option("variable", "coal", 2)
        variable.share[0] = 0.4
        return fixed, variable

    def test_fixed_option(self, options):
        fixed, _ = options
        fixed.adj_shares(50, 20, 0.4, 0)
        assert fixed.share[0] == pytest.approx(0.4)

    def test_variable_option(self, options):
        _, variable = options
        variable.adj_shares(50, 20, 0.4, 0)
        assert variable.share[0] == pytest.approx(0.4 * (30 / 50) / 0.4)

    def test_no_fixed_output_in_group(self, options):
        _, variable = options
        variable.adj_shares(50, 0, 0.4, 0)
        assert variable.share[0] == 0.4

    def test_no_group_demand(self, options):
        fixed, _ = options
        fixed.adj_shares(0, 20, 0.4, 0)
        assert fixed.share[0] == 0
