"""
This module contains the Group class, which holds the state of a group of options (a subsector)
competing for share within a sector.
"""
import numpy as np

from .utils import parameters as PARAM


class Group:
    """
    A group of competing options. The group's options are held by the sector it belongs to, in the
    order they were defined.

    Every attribute that changes over time is stored in an array with one element per period. These
    arrays are allocated when the group is created and are never resized.

    Parameters
    ----------
    name : str
        The name of the group. Must be unique within its sector.
    max_period : int
        The number of periods in the simulation.
    scale_year : int
        The year share weights converge to when they are interpolated after a calibration period.
    share_weight : float, optional
        Share weight used for all periods.
    logit_exponent : float, optional
        Exponent used when the group competes against other groups.
    option_logit_exponent : float, optional
        Exponent used when the group's options compete against each other.
    fuel_pref_elasticity : float, optional
        Elasticity of the group's share to the sector's scaled GDP per capita.
    capacity_limit : float, optional
        The largest share of the sector the group can take, in (0, 1].
    """

    def __init__(self, name, max_period, scale_year,
                 share_weight=PARAM.share_weight_default,
                 logit_exponent=PARAM.logit_exponent_default,
                 option_logit_exponent=PARAM.option_logit_exponent_default,
                 fuel_pref_elasticity=PARAM.fuel_pref_elasticity_default,
                 capacity_limit=PARAM.capacity_limit_default):
        if not 0 < capacity_limit <= 1:
            raise ValueError(f"Capacity limit of {name} must be in (0, 1], not {capacity_limit}.")

        self.name = name
        self.max_period = max_period
        self.scale_year = scale_year

        self.share_weight = np.full(max_period, share_weight, dtype=float)
        self.logit_exponent = np.full(max_period, logit_exponent, dtype=float)
        self.option_logit_exponent = np.full(max_period, option_logit_exponent, dtype=float)
        self.fuel_pref_elasticity = np.full(max_period, fuel_pref_elasticity, dtype=float)
        self.capacity_limit = np.full(max_period, capacity_limit, dtype=float)

        self.share = np.zeros(max_period)
        self.fixed_share = np.zeros(max_period)
        self.cap_limited = np.zeros(max_period, dtype=bool)

        self.do_calibration = np.zeros(max_period, dtype=bool)
        self.calibration_output = np.zeros(max_period)
        self.calibration_status = np.zeros(max_period, dtype=bool)

        self.price = np.zeros(max_period)
        self.fuel_price = np.zeros(max_period)
        self.co2_em_factor = np.zeros(max_period)

        self.output = np.zeros(max_period)
        self.input = np.zeros(max_period)

    def __repr__(self):
        return f"Group({self.name!r})"

    def get_share(self, period):
        return self.share[period]

    def get_share_weight(self, period):
        return self.share_weight[period]

    def set_share_weight(self, value, period):
        self.share_weight[period] = value

    def scale_share_weight(self, scale_value, period):
        """Scale the share weight. A scale value of 0 is ignored."""
        if scale_value != 0:
            self.share_weight[period] *= scale_value

    def get_price(self, period):
        return self.price[period]

    def get_capacity_limit(self, period):
        return self.capacity_limit[period]

    def get_cap_limit_status(self, period):
        return bool(self.cap_limited[period])

    def set_cap_limit_status(self, value, period):
        self.cap_limited[period] = value

    def set_calibration_output(self, value, period):
        """Calibrate the group's total output (rather than the output of its options)."""
        self.calibration_output[period] = value
        self.do_calibration[period] = True

    def get_calibration_status(self, period):
        return bool(self.calibration_status[period])

    def get_weighted_fuel_price(self, period):
        """
        Returns the group's fuel price weighted by its share. The share is lagged one period after
        the first period.
        """
        share = self.share[period] if period == 0 else self.share[period - 1]
        return share * self.fuel_price[period]
