"""
This module contains the options (technologies) which compete for share within a group, along with
the logit share function used to find their unnormalized shares.
"""
import numpy as np

from .goods import Good, matches
from .utils import parameters as PARAM


def calc_logit_share(cost, share_weight, logit_exponent):
    """
    Calculate the unnormalized share of an option using the power-law form of the logit,
    `share_weight * cost ** logit_exponent`.

    Parameters
    ----------
    cost : float
        The option's cost. A cost that is zero or negative signals an option with no desirability,
        so its share is 0.
    share_weight : float
        The option's share weight. An option whose share weight is 0 is unavailable and receives a
        share of 0, regardless of cost.
    logit_exponent : float
        The exponent of the logit. Normally negative, so that lower costs produce larger shares.

    Returns
    -------
    float :
        The unnormalized share.
    """
    if share_weight == 0 or cost <= 0:
        return 0.0
    return share_weight * float(np.power(cost, logit_exponent))


class Option:
    """
    A technology competing for share within a group. All state is stored in arrays indexed by
    period, which are allocated once for the whole simulation horizon.

    Parameters
    ----------
    name : str
        The name of the option. Must be unique within its group.
    good : str or Good
        The input category (fuel) consumed by the option.
    max_period : int
        The number of periods in the simulation.
    efficiency : float, optional
        Output per unit of input, used for all periods.
    non_energy_cost : float, optional
        Cost per unit of output not attributable to the fuel, used for all periods.
    share_weight : float, optional
        Share weight used for all periods.
    """

    def __init__(self, name, good, max_period, efficiency=PARAM.efficiency_default,
                 non_energy_cost=0.0, share_weight=PARAM.share_weight_default):
        self.name = name
        self.good = Good.of(good)
        self.max_period = max_period

        self.efficiency = np.full(max_period, efficiency, dtype=float)
        self.non_energy_cost = np.full(max_period, non_energy_cost, dtype=float)
        self.share_weight = np.full(max_period, share_weight, dtype=float)

        self.cost = np.zeros(max_period)
        self.fuel_cost = np.zeros(max_period)
        self.share = np.zeros(max_period)

        self.fixed_output_read_in = np.zeros(max_period)
        self.fixed_output = np.zeros(max_period)
        self.calibration_output = np.zeros(max_period)
        self.calibrated = np.zeros(max_period, dtype=bool)

        self.output = np.zeros(max_period)
        self.input = np.zeros(max_period)

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r}, {self.good.name!r})"

    def has_good(self, good):
        return matches(self.good, good)

    def is_available(self, period):
        return self.share_weight[period] > 0

    # ==========================================
    # Per Period Initialization
    # ==========================================
    def init_calc(self, period, sector):
        """
        Performs the setup needed once per period, before any share calculation. For a standard
        option, this undoes any scaling applied to its fixed output in a previous iteration.
        """
        self.reset_fixed_output(period)

    # ==========================================
    # Cost & Share
    # ==========================================
    def calc_cost(self, period, sector):
        """
        Calculate the option's cost as its fuel cost (fuel price divided by efficiency) plus its
        non-energy cost.
        """
        price = sector.market.get_price(self.good, sector.region, period)
        efficiency = self.efficiency[period]
        if efficiency > 0:
            self.fuel_cost[period] = price / efficiency
        else:
            sector.diagnostics.warning(f"Efficiency of {self.name} is {efficiency} in period "
                                       f"{period} of {sector.name} in {sector.region}. Fuel cost "
                                       f"set to 0.")
            self.fuel_cost[period] = 0

        self.cost[period] = self.fuel_cost[period] + self.non_energy_cost[period]
        return self.cost[period]

    def calc_share(self, period, logit_exponent, sector):
        """
        Calculate the option's unnormalized share from its cost and share weight. `calc_cost`
        must be called first.
        """
        cost = self.cost[period]
        if cost <= 0 and self.is_available(period):
            sector.diagnostics.debug(f"Cost of {self.name} is {cost} in period {period} of "
                                     f"{sector.name} in {sector.region}, giving it a share of 0.")

        self.share[period] = calc_logit_share(cost, self.share_weight[period], logit_exponent)
        return self.share[period]

    def norm_share(self, total, period):
        if total == 0:
            self.share[period] = 0
        else:
            self.share[period] = self.share[period] / total

    def adj_shares(self, group_demand, group_fixed_output, var_share_total, period):
        """
        Adjust the option's share to be consistent with the fixed output in its group. Options with
        fixed output take the share of the group's demand their fixed output represents. Options
        without fixed output split the remaining demand in proportion to their existing shares.

        Parameters
        ----------
        group_demand : float
            The demand met by the option's group.
        group_fixed_output : float
            The total fixed output of the options in the group.
        var_share_total : float
            The sum of the shares of the options in the group without fixed output.
        period : int
            The model period.
        """
        if group_fixed_output <= 0:
            return

        remaining_demand = max(group_demand - group_fixed_output, 0)
        fixed_output = self.fixed_output[period]

        if group_demand <= 0:
            self.share[period] = 0
        elif fixed_output > 0:
            self.share[period] = fixed_output / group_demand
        elif var_share_total > 0:
            self.share[period] = self.share[period] * (remaining_demand / group_demand) \
                                 / var_share_total
        else:
            self.share[period] = 0

    # ==========================================
    # Fixed Output
    # ==========================================
    def set_fixed_output(self, value, period):
        self.fixed_output_read_in[period] = value
        self.fixed_output[period] = value

    def reset_fixed_output(self, period):
        self.fixed_output[period] = self.fixed_output_read_in[period]

    def scale_fixed_output(self, ratio, period):
        self.fixed_output[period] *= ratio

    def is_output_fixed(self, period):
        return self.fixed_output_read_in[period] > 0

    def get_fixed_output(self, period):
        return self.fixed_output[period]

    def get_fixed_input(self, period):
        efficiency = self.efficiency[period]
        return self.fixed_output[period] / efficiency if efficiency > 0 else 0

    # ==========================================
    # Calibration
    # ==========================================
    def set_calibration_output(self, value, period):
        self.calibration_output[period] = value
        self.calibrated[period] = True

    def get_calibration_status(self, period):
        return bool(self.calibrated[period])

    def get_calibration_output(self, period):
        return self.calibration_output[period] if self.calibrated[period] else 0

    def get_calibration_input(self, period):
        efficiency = self.efficiency[period]
        return self.get_calibration_output(period) / efficiency if efficiency > 0 else 0

    def scale_calibration_input(self, scale_factor, period):
        # Input & output are proportional, so scaling the input scales the output by the same amount
        self.calibration_output[period] *= scale_factor

    def adjust_for_calibration(self, group_cal_output, period, sector):
        """
        Scale the option's share weight so that its share of `group_cal_output` matches its
        calibration output. Options without a calibration output are left unchanged.
        """
        if not self.calibrated[period]:
            return

        cal_output = self.calibration_output[period]
        if self.share_weight[period] == 0 and cal_output > 0:
            self.share_weight[period] = 1

        option_demand = self.share[period] * group_cal_output
        if option_demand > 0:
            self.share_weight[period] *= cal_output / option_demand

        if self.share_weight[period] < 0:
            sector.diagnostics.error(f"Share weight is < 0 for {self.name} in period {period} of "
                                     f"{sector.name} in {sector.region}: "
                                     f"{self.share_weight[period]} (reset to 1)")
            self.share_weight[period] = 1

    # ==========================================
    # Share Weights
    # ==========================================
    def get_share_weight(self, period):
        return self.share_weight[period]

    def set_share_weight(self, value, period):
        self.share_weight[period] = value

    # ==========================================
    # Production
    # ==========================================
    def production(self, group_demand, period, sector):
        """
        Calculate the option's output and the input required to produce it.
        """
        self.output[period] = self.share[period] * group_demand
        efficiency = self.efficiency[period]
        self.input[period] = self.output[period] / efficiency if efficiency > 0 else 0
        return self.output[period]


class ProfitOption(Option):
    """
    A profit based production option (e.g. a crop). Its output depends on the land it is allocated
    and that land's yield, rather than on a share of its group's demand, so its share is always 1
    and its cost is not used for competition.

    The land allocation & yield are provided by a `land` collaborator, which must implement:

    * `set_intrinsic_rate(option_name, profit_rate, period)`
    * `calc_yield(option_name, profit_rate, period)`
    * `get_yield(option_name, period)`
    * `get_land_allocation(option_name, period)`
    * `get_calibrated_rate(period)` : the observed rental rate of land in a calibration period

    Parameters
    ----------
    land : object
        The land collaborator.
    variable_cost : float, optional
        Variable cost per unit of output, used for all periods unless calibrated.
    """

    def __init__(self, name, good, max_period, land, variable_cost=0.0, **kwargs):
        super().__init__(name, good, max_period, **kwargs)
        self.land = land
        self.variable_cost = np.full(max_period, variable_cost, dtype=float)
        self.cal_observed_yield = np.full(max_period, np.nan)

    def set_cal_observed_yield(self, value, period):
        self.cal_observed_yield[period] = value

    def cal_var_cost_name(self, region):
        """The name of the market info value used to pass the calibrated variable cost forward."""
        return f"{PARAM.cal_var_cost}-{self.name}-{region}"

    def init_calc(self, period, sector):
        """
        Find the option's variable cost for the period. In a period with an observed yield, the
        variable cost is calibrated from the market's calibration price. Otherwise, the variable
        cost calibrated in an earlier period is used (if there is one). The resulting value is
        passed to the next period through the market info.
        """
        super().init_calc(period, sector)

        market = sector.market
        cal_var_cost_name = self.cal_var_cost_name(sector.region)
        cal_yield = self.cal_observed_yield[period]

        if not np.isnan(cal_yield):
            cal_price = market.get_market_info(sector.name, sector.region, period, PARAM.cal_price)
            land_rate = self.land.get_calibrated_rate(period)
            cal_var_cost = cal_price - land_rate / cal_yield if cal_yield > 0 else cal_price

            if cal_var_cost > PARAM.SMALL_NUMBER:
                self.variable_cost[period] = cal_var_cost
            else:
                sector.diagnostics.debug(f"Calibration price for {self.name} in {sector.region} is "
                                         f"too low by {abs(cal_var_cost)}.")

            # A variable cost close to the price leaves a small profit rate, which changes quickly
            # with price and makes calibration difficult.
            if cal_var_cost > cal_price * 0.99:
                sector.diagnostics.debug(f"Calibrated variable cost of {cal_var_cost} for "
                                         f"{self.name} in {sector.region} is very close to the "
                                         f"calibration price of {cal_price}.")
        else:
            cal_var_cost = market.get_market_info(sector.name, sector.region, period,
                                                  cal_var_cost_name)
            if cal_var_cost > PARAM.SMALL_NUMBER:
                self.variable_cost[period] = cal_var_cost

        if period + 1 < self.max_period:
            market.set_market_info(sector.name, sector.region, period + 1, cal_var_cost_name,
                                   cal_var_cost)

    def calc_profit_rate(self, period, sector):
        """The profit rate is the price of the sector's product less the variable cost."""
        price = sector.market.get_price(sector.name, sector.region, period)
        return price - self.variable_cost[period]

    def calc_cost(self, period, sector):
        profit_rate = self.calc_profit_rate(period, sector)
        self.land.set_intrinsic_rate(self.name, profit_rate, period)

        self.fuel_cost[period] = self.variable_cost[period]
        self.cost[period] = 1
        return self.cost[period]

    def calc_share(self, period, logit_exponent, sector):
        self.share[period] = 1
        return self.share[period]

    def adjust_for_calibration(self, group_cal_output, period, sector):
        # Calibration of land based production happens in the land allocation
        pass

    def production(self, group_demand, period, sector):
        profit_rate = self.calc_profit_rate(period, sector)
        self.land.calc_yield(self.name, profit_rate, period)

        land_yield = self.land.get_yield(self.name, period)
        land_allocation = self.land.get_land_allocation(self.name, period)

        if land_yield < PARAM.SMALL_NUMBER and land_allocation > 0.1 and \
                self.variable_cost[period] > PARAM.TINY_NUMBER:
            sector.diagnostics.notice(f"Zero production by {self.name} in {sector.region} with a "
                                      f"positive land allocation of {land_allocation}.")

        self.output[period] = land_yield * land_allocation
        self.input[period] = land_allocation
        return self.output[period]
