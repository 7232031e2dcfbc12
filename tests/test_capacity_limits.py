import numpy as np
import pytest

import ShareCal
from ShareCal.stock_allocation import cap_limit_transform, limit_shares


class TestCapLimitTransform:
    @pytest.mark.parametrize("raw_share", [0, 0.1, 0.5, 0.99, 1])
    def test_no_limit(self, raw_share):
        assert cap_limit_transform(raw_share, 1) == raw_share
        assert cap_limit_transform(raw_share, 1 - 1e-7) == raw_share

    def test_smooth_approach(self):
        bounded = cap_limit_transform(0.5, 0.5)
        assert bounded < 0.5
        assert bounded == pytest.approx(0.5 * np.exp(1.96) / (1 + np.exp(1.96)))

    def test_small_shares_barely_change(self):
        assert cap_limit_transform(0.001, 0.5) == pytest.approx(0.001, rel=1e-2)

    @pytest.mark.parametrize("cap_limit", [0.05, 0.3, 0.5, 0.9])
    def test_monotonic_and_bounded(self, cap_limit):
        raw_shares = np.linspace(0, 2 * cap_limit, 200)
        bounded = np.array([cap_limit_transform(s, cap_limit) for s in raw_shares])

        assert np.all(np.diff(bounded) >= 0)
        assert np.all(bounded < cap_limit)

    def test_large_share_saturates(self):
        assert cap_limit_transform(50, 0.3) == pytest.approx(0.3)


class TestCapacityLimits:
    @pytest.fixture
    def sector(self):
        modeltime = ShareCal.Modeltime(2005, 2020, 5)
        market = ShareCal.Marketplace()
        for period in range(modeltime.max_period):
            market.set_price("coal", "USA", period, 10)
            market.set_price("wind", "USA", period, 10)

        sector = ShareCal.Sector("electricity", "USA", modeltime, market=market,
                                 diagnostics=ShareCal.Diagnostics(show_warnings=False))
        wind = sector.add_group("wind", capacity_limit=0.3)
        coal = sector.add_group("coal")
        sector.add_option(wind, ShareCal.Option("turbine", "wind", modeltime.max_period))
        sector.add_option(coal, ShareCal.Option("steam", "coal", modeltime.max_period))
        return sector

    def test_capacity_limited_share(self, sector):
        shares = sector.calc_shares(0)

        assert shares["wind"] == pytest.approx(cap_limit_transform(0.5, 0.3))
        assert shares["wind"] < 0.3
        assert shares["wind"] + shares["coal"] == pytest.approx(1)
        assert sector.get_group("wind").get_cap_limit_status(0)
        assert not sector.get_group("coal").get_cap_limit_status(0)

    def test_transformed_once_per_calculation(self, sector):
        first = sector.calc_shares(0)
        second = sector.calc_shares(0)
        assert first == second

    def test_limit_shares_only_transforms_once(self, sector):
        wind = sector.get_group("wind")
        wind.share[0] = 0.5
        limit_shares(sector, wind, 1, 0)
        limited = wind.share[0]
        limit_shares(sector, wind, 1, 0)

        assert wind.share[0] == limited

    def test_zero_multiplier(self, sector):
        coal = sector.get_group("coal")
        coal.share[0] = 0.5
        limit_shares(sector, coal, 0, 0)
        assert coal.share[0] == 0

    def test_multiplier_skips_fixed_groups(self, sector):
        coal = sector.get_group("coal")
        coal.share[0] = 0.5
        coal.fixed_share[0] = 0.5
        limit_shares(sector, coal, 2, 0)
        assert coal.share[0] == 0.5

    def test_invalid_capacity_limit(self, sector):
        with pytest.raises(ValueError):
            sector.add_group("solar", capacity_limit=0)
