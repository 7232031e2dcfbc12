"""
This module contains the Sector class, which owns a hierarchy of groups & options and drives the
share calculation, fixed output accounting and calibration for each period.
"""
import networkx as nx
import numpy as np

from . import calibration
from . import graph_utils
from . import share_calculation
from . import shareweight_interpolation
from .diagnostics import Diagnostics
from .goods import ALL_GOODS, Good
from .group import Group
from .market import Marketplace
from .stock_allocation import capacity_limits, fixed_output
from .utils import parameters as PARAM


class Sector:
    """
    A sector in a single region, holding groups of competing options.

    Parameters
    ----------
    name : str
        The name of the sector. This is also the name of the market for the sector's product.
    region : str
        The name of the region the sector is in.
    modeltime : ShareCal.Modeltime
        The simulation horizon. All period arrays are sized using `modeltime.max_period`.
    market : ShareCal.Marketplace, optional
        The prices & market info used by the sector. A new, empty marketplace is used by default.
    diagnostics : ShareCal.Diagnostics, optional
        Where anomalies found during calculation are recorded.
    scaled_gdp_per_capita : float or array-like, optional
        The scaled GDP per capita used in the fuel preference term of group shares. Either a single
        value or one value per period. Defaults to 1.
    co2_coefficients : dict {str: float}, optional
        CO2 emissions coefficient of each good. Goods which aren't included have a coefficient of 0.
    calibration_active : bool, optional
        Whether calibration (and share weight interpolation after calibration) is performed.
    interpolate_option_share_weights : bool, optional
        Whether option share weights are also interpolated after a calibration period.
    debug_checking : bool, optional
        Whether additional consistency checks are recorded as diagnostics.
    first_interpolation_period : int, optional
        Share weights are only interpolated when initializing periods after this one.
    share_weight_warning_threshold : float, optional
        Group share weights above this value are reported.

    Attributes
    ----------
    graph : networkx.DiGraph
        The sector's hierarchy. The root node is the sector's name. Group nodes (`sector.group`) and
        option nodes (`sector.group.option`) hold their Group or Option in their `record` data.
        Children are kept in the order they were added.
    """

    def __init__(self, name, region, modeltime, market=None, diagnostics=None,
                 scaled_gdp_per_capita=None, co2_coefficients=None,
                 calibration_active=True,
                 interpolate_option_share_weights=False,
                 debug_checking=False,
                 first_interpolation_period=0,
                 share_weight_warning_threshold=PARAM.share_weight_warning_threshold):
        self.name = name
        self.region = region
        self.modeltime = modeltime
        self.market = market if market is not None else Marketplace()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

        max_period = modeltime.max_period
        if scaled_gdp_per_capita is None:
            scaled_gdp_per_capita = 1.0
        self.scaled_gdp_per_capita = np.broadcast_to(
            np.asarray(scaled_gdp_per_capita, dtype=float), (max_period,)).copy()
        self.co2_coefficients = dict(co2_coefficients or {})

        self.calibration_active = calibration_active
        self.interpolate_option_share_weights = interpolate_option_share_weights
        self.debug_checking = debug_checking
        self.first_interpolation_period = first_interpolation_period
        self.share_weight_warning_threshold = share_weight_warning_threshold

        self.graph = nx.DiGraph()
        self.root = name
        self.graph.add_node(self.root)

        self.price = np.zeros(max_period)
        self.output = np.zeros(max_period)
        self.input = np.zeros(max_period)

    def __repr__(self):
        return f"Sector({self.name!r}, {self.region!r})"

    # ==========================================
    # Building
    # ==========================================
    def add_group(self, name, scale_year=None, **kwargs):
        """
        Create a group and add it as the last group of the sector.

        Parameters
        ----------
        name : str
            The name of the group.
        scale_year : int, optional
            The year share weights converge to after a calibration period. Defaults to the
            modeltime's end year.
        **kwargs :
            Passed to `ShareCal.Group`.

        Returns
        -------
        ShareCal.Group :
            The new group.
        """
        if scale_year is None:
            scale_year = self.modeltime.end_year
        group = Group(name, self.modeltime.max_period, scale_year, **kwargs)
        graph_utils.add_child(self.graph, self.root, name, group)
        return group

    def add_option(self, group, option):
        """
        Add `option` as the last option of `group`.

        Returns
        -------
        ShareCal.Option :
            The option that was added.
        """
        if option.max_period != self.modeltime.max_period:
            raise ValueError(f"{option.name} has {option.max_period} periods, but {self.name} has "
                             f"{self.modeltime.max_period}")
        group_node = self._group_node(group)
        graph_utils.add_child(self.graph, group_node, option.name, option)
        return option

    def replace_option(self, group, option):
        """
        Replace an existing option (with the same name) and its whole time series, keeping its
        position in the group.
        """
        node = graph_utils.child_name(self._group_node(group), option.name)
        old_option = graph_utils.get_record(self.graph, node)
        if option.max_period != self.modeltime.max_period:
            raise ValueError(f"{option.name} has {option.max_period} periods, but {self.name} has "
                             f"{self.modeltime.max_period}")

        if old_option.good is not option.good:
            self.diagnostics.warning(f"Type of fuel {old_option.good.name} changed to "
                                     f"{option.good.name} for {option.name} in "
                                     f"{graph_utils.parent_name(node)} in {self.region}")

        self.graph.nodes[node]['record'] = option
        return option

    def _group_node(self, group):
        group_name = group.name if isinstance(group, Group) else group
        node = graph_utils.child_name(self.root, group_name)
        if node not in self.graph:
            raise KeyError(f"{group_name} is not a group of {self.name}")
        return node

    # ==========================================
    # Lookup
    # ==========================================
    def groups(self):
        return graph_utils.children(self.graph, self.root)

    def options(self, group):
        return graph_utils.children(self.graph, self._group_node(group))

    def get_group(self, name):
        return graph_utils.get_record(self.graph, self._group_node(name))

    def get_option(self, group, name):
        return graph_utils.get_record(self.graph,
                                      graph_utils.child_name(self._group_node(group), name))

    def get_scaled_gdp_per_capita(self, period):
        return self.scaled_gdp_per_capita[period]

    def get_co2_coefficient(self, good):
        return self.co2_coefficients.get(Good.of(good).name, 0.0)

    # ==========================================
    # Per Period Calculation
    # ==========================================
    def init_calc(self, period):
        """
        Perform the setup needed once at the start of a period: reset option fixed output, find
        calibration statuses, interpolate share weights after a calibration period, and seed the
        fixed shares of groups with fixed output.

        A capacity limit can't be combined with a calibration value, so calibrated groups have
        their capacity limit removed for the period.
        """
        self.modeltime.check_period(period)

        for group in self.groups():
            for option in self.options(group):
                option.init_calc(period, self)

            calibration.set_calibration_status(self, group, period)
            shareweight_interpolation.interpolate_share_weights(self, group, period)
            fixed_output.seed_fixed_share(self, group, period)

            if calibration.get_total_cal_outputs(self, group, period) > 0 and \
                    group.capacity_limit[period] < 1:
                self.diagnostics.notice(f"Capacity limit of {group.name} in {self.name} in "
                                        f"{self.region} removed for calibration in period "
                                        f"{period}.")
                group.capacity_limit[period] = 1.0

    def calc_shares(self, period, demand=None):
        """
        Calculate the shares of every option & group in the sector.

        Option and group shares are found with the nested logit and normalized, groups with fixed
        output are set to their fixed share, and capacity limits are applied. If `demand` is
        provided, shares are then adjusted so that fixed output is met and the remaining demand is
        shared among the other groups.

        Calling this again with the same prices & demand gives the same shares.

        Parameters
        ----------
        period : int
            The model period.
        demand : float, optional
            The total demand for the sector's product.

        Returns
        -------
        dict {str: float} :
            The share of each group, keyed by group name.
        """
        groups = self.groups()
        for group in groups:
            group.set_cap_limit_status(False, period)

        if demand is not None:
            fixed_output.tabulate_fixed_output(self, demand, period)

        share_calculation.calc_sector_shares(self, period)

        for group in groups:
            if group.fixed_share[period] > 0:
                fixed_output.set_share_to_fixed_value(self, group, period)

        capacity_limits.apply_capacity_limits(self, period)

        if demand is not None:
            fixed_output.adjust_for_fixed_output(self, demand, period)

        return {g.name: g.share[period] for g in groups}

    def calc_price(self, period):
        """The sector's price is the share weighted average of its groups' prices."""
        self.price[period] = share_calculation.calc_sector_price(self, period)
        return self.price[period]

    def adjust_for_calibration(self, demand, period):
        """Adjust share weights once for the calibrated groups & options. See `calibrate()`."""
        return calibration.adjust_sector_for_calibration(self, demand, period)

    def calibrate(self, period, demand, max_iterations=1000, tolerance=PARAM.SMALL_NUMBER):
        """
        Adjust share weights until the outputs of calibrated groups & options match their
        calibration values.

        Returns
        -------
        bool :
            True if calibration converged.
        """
        return calibration.calibrate_sector(self, period, demand, max_iterations, tolerance)

    def interpolate_share_weights(self, period):
        return [shareweight_interpolation.interpolate_share_weights(self, g, period)
                for g in self.groups()]

    def set_output(self, demand, period):
        """
        Share `demand` out to the groups and options of the sector, finding the output and input of
        each.

        Returns
        -------
        float :
            The sector's total output.
        """
        self.input[period] = 0
        self.output[period] = 0
        for group in self.groups():
            group_demand = group.share[period] * demand
            group.output[period] = 0
            group.input[period] = 0
            for option in self.options(group):
                group.output[period] += option.production(group_demand, period, self)
                group.input[period] += option.input[period]

            self.output[period] += group.output[period]
            self.input[period] += group.input[period]

        return self.output[period]

    def run_period(self, period, demand):
        """
        Initialize the period, calculate (and, in a calibration period, calibrate) shares, then
        find the sector's price and output.

        Returns
        -------
        float :
            The sector's total output.
        """
        self.init_calc(period)

        calibrated = any(g.calibration_status[period] for g in self.groups())
        if self.calibration_active and calibrated:
            self.calibrate(period, demand)
        else:
            self.calc_shares(period, demand)

        self.calc_price(period)
        return self.set_output(demand, period)

    # ==========================================
    # Accessors
    # ==========================================
    def set_share_to_fixed_value(self, group, period):
        fixed_output.set_share_to_fixed_value(self, self.get_group(group), period)

    def get_share(self, group, period):
        return self.get_group(group).share[period]

    def get_price(self, period):
        return self.price[period]

    def get_group_price(self, group, period):
        return self.get_group(group).price[period]

    def get_output(self, period):
        return self.output[period]

    def get_fixed_output(self, period):
        return fixed_output.get_total_fixed_output(self, period)

    def get_total_cal_outputs(self, period):
        return calibration.get_sector_cal_outputs(self, period)

    def get_cal_and_fixed_outputs(self, period, good=ALL_GOODS, both_vals=True):
        return sum(calibration.get_cal_and_fixed_outputs(self, g, period, good, both_vals)
                   for g in self.groups())

    def get_cal_and_fixed_inputs(self, period, good=ALL_GOODS, both_vals=True):
        return sum(calibration.get_cal_and_fixed_inputs(self, g, period, good, both_vals)
                   for g in self.groups())

    def inputs_all_fixed(self, period, good=ALL_GOODS):
        return all(calibration.inputs_all_fixed(self, g, period, good) for g in self.groups())

    def all_output_fixed(self, period):
        return fixed_output.sector_all_output_fixed(self, period)
