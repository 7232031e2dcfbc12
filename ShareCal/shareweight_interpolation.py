"""
This module contains the functions used to smooth share weights in the periods after a calibration
period, so that calibrated share weights do not cause a jump in shares in the following periods.
"""
import numpy as np
from scipy.interpolate import interp1d

from .calibration import get_normalized_option_share_weights


def _linear_interp(values, begin_period, end_period, max_period, begin_value=None):
    """
    Fill `values` between `begin_period` and `end_period` (exclusive of both) with values linearly
    interpolated between the two. If the two periods are the same, the value at `begin_period` is
    instead held constant through the last period. `begin_value` replaces the value at
    `begin_period` as the starting point, without being written to it.
    """
    if begin_value is None:
        begin_value = values[begin_period]

    if end_period == begin_period:
        values[begin_period + 1:max_period] = begin_value
    elif end_period > begin_period:
        interp_func = interp1d([begin_period, end_period],
                               [begin_value, values[end_period]])
        fill_periods = np.arange(begin_period + 1, end_period)
        if fill_periods.size:
            values[fill_periods] = interp_func(fill_periods)


def share_weight_linear_interp(sector, group, begin_period, end_period):
    """
    Linearly interpolate a group's share weights between two periods.

    Parameters
    ----------
    sector : ShareCal.Sector
        The sector containing group.
    group : ShareCal.Group
        The group whose share weights are interpolated.
    begin_period : int
        The period interpolation starts from. Its share weight is not changed.
    end_period : int
        The period interpolation ends at. Its share weight is not changed. If `end_period` equals
        `begin_period`, the share weight of `begin_period` is used for every later period.
    """
    _linear_interp(group.share_weight, begin_period, end_period, group.max_period)
    sector.diagnostics.debug(f"Share weights interpolated for {group.name} in {sector.name} in "
                             f"{sector.region}")


def option_share_weight_linear_interp(sector, group, begin_period, end_period, begin_values=None):
    """
    Linearly interpolate the share weights of a group's options between two periods. Options whose
    share weight is 0 in `begin_period` were not changed by calibration, so they are skipped.

    `begin_values` optionally maps options to the share weight interpolation starts from, in place
    of their share weight in `begin_period`. Share weights in `begin_period` are never changed.
    """
    begin_values = begin_values or {}
    for option in sector.options(group):
        if option.share_weight[begin_period] > 0:
            _linear_interp(option.share_weight, begin_period, end_period, option.max_period,
                           begin_value=begin_values.get(option))
            sector.diagnostics.debug(f"Share weights interpolated for {option.name} in "
                                     f"{group.name} in {sector.name} in {sector.region}")


def interpolate_share_weights(sector, group, period):
    """
    If the previous period was calibrated, interpolate the group's share weights from the previous
    period to its scale year. Setting the scale year to the calibration year holds the calibrated
    share weight constant, and setting it before the start year turns interpolation off.

    Interpolation only happens after the sector's first interpolation period and when calibration
    is active. Share weights are interpolated when the calibrated share weight is >= 0, which
    includes share weights of exactly 0 that calibration did not change.

    Parameters
    ----------
    sector : ShareCal.Sector
        The sector containing group.
    group : ShareCal.Group
        The group whose share weights may be interpolated.
    period : int
        The period being initialized. Share weights after `period - 1` may be changed, but those
        of `period - 1` are only read.

    Returns
    -------
    bool :
        True if the group's share weights were interpolated.
    """
    if not (period > sector.first_interpolation_period and
            group.calibration_status[period - 1] and
            sector.calibration_active):
        return False

    modeltime = sector.modeltime

    interpolated = False
    if group.scale_year >= modeltime.start_year:
        end_period = modeltime.year_to_period(min(group.scale_year, modeltime.end_year))
        # TODO: use > 0, as options do, once share weight data is updated
        if end_period >= period - 1 and group.share_weight[period - 1] >= 0:
            share_weight_linear_interp(sector, group, period - 1, end_period)
            interpolated = True

    if sector.interpolate_option_share_weights and len(sector.options(group)) > 1:
        normalized = get_normalized_option_share_weights(sector, group, period - 1)
        if normalized is not None:
            option_share_weight_linear_interp(sector, group, period - 1, modeltime.max_period - 1,
                                              begin_values=normalized)

    return interpolated
