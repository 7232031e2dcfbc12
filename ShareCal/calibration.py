"""
This module contains the calibration functions, which adjust share weights so that the outputs of
calibrated groups & options match their calibration values.

Calibration only changes share weights, never shares, so the shares keep their logit form.
"""
from .goods import ALL_GOODS, Good
from .stock_allocation import fixed_output
from .utils import parameters as PARAM


def set_calibration_status(sector, group, period):
    """
    A group is calibrated in a period if its own output is calibrated, or if the output of any of
    its options is calibrated.
    """
    status = bool(group.do_calibration[period]) or \
        any(option.get_calibration_status(period) for option in sector.options(group))
    group.calibration_status[period] = status
    return status


def get_number_avail_options(sector, group, period):
    return sum(1 for option in sector.options(group) if option.is_available(period))


def get_total_cal_outputs(sector, group, period):
    """
    Find the total calibrated output of a group. If the group's output is calibrated, this is the
    group's calibration value. Otherwise, it is the sum of the calibration values of its options.
    Fixed output is not included.
    """
    if group.do_calibration[period]:
        return group.calibration_output[period]

    total = 0
    for option in sector.options(group):
        if option.get_calibration_status(period):
            cal_output = option.get_calibration_output(period)
            if sector.debug_checking and cal_output < 0:
                sector.diagnostics.error(f"Calibration output < 0 for {option.name} in "
                                         f"{group.name} in {sector.name} in {sector.region}")
            total += cal_output
    return total


def get_sector_cal_outputs(sector, period):
    return sum(get_total_cal_outputs(sector, g, period) for g in sector.groups())


def get_cal_and_fixed_outputs(sector, group, period, good=ALL_GOODS, both_vals=True):
    """
    Find the total calibrated (and optionally fixed) output of the options in a group which consume
    `good`.

    Parameters
    ----------
    sector : ShareCal.Sector
        The sector containing group.
    group : ShareCal.Group
        The group whose outputs are summed.
    period : int
        The model period.
    good : ShareCal.Good or str, optional
        Only options consuming this good are included. By default, all options are included.
    both_vals : bool, optional
        If True, the fixed output of options which aren't calibrated is also included.

    Returns
    -------
    float :
        The total calibrated and fixed output.
    """
    total = 0
    for option in sector.options(group):
        if option.has_good(good):
            if option.get_calibration_status(period):
                total += option.get_calibration_output(period)
            elif both_vals and option.is_output_fixed(period):
                total += option.get_fixed_output(period)
    return total


def get_cal_and_fixed_inputs(sector, group, period, good=ALL_GOODS, both_vals=True):
    """
    Find the total calibrated (and optionally fixed) input of the options in a group which consume
    `good`. See `get_cal_and_fixed_outputs()`.
    """
    total = 0
    for option in sector.options(group):
        if option.has_good(good):
            if option.get_calibration_status(period):
                total += option.get_calibration_input(period)
            elif both_vals and option.is_output_fixed(period):
                total += option.get_fixed_input(period)
    return total


def inputs_all_fixed(sector, group, period, good=ALL_GOODS):
    """
    Determine whether the inputs of `good` to the group are all fixed. An input is fixed if its
    option is calibrated, has fixed output, or the group's share weight is 0. A group without any
    option consuming `good` is treated as having all of its inputs fixed.
    """
    for option in sector.options(group):
        if option.has_good(good):
            fixed = option.get_calibration_status(period) or \
                option.is_output_fixed(period) or \
                group.share_weight[period] == 0
            if not fixed:
                return False
    return True


def scale_calibrated_values(sector, group, good, scale_value, period):
    """Scale the calibration values of the calibrated options which consume `good`."""
    for option in sector.options(group):
        if option.has_good(good) and option.get_calibration_status(period):
            option.scale_calibration_input(scale_value, period)


def scale_calibration_input(sector, group, scale_factor, period):
    for option in sector.options(group):
        option.scale_calibration_input(scale_factor, period)


def set_implied_fixed_input(sector, group, good, required_output, period):
    """
    Add the input needed to produce `required_output` to the calibrated demand for `good`, which is
    stored in the market info of the good's market. Only the first option consuming `good` is
    used.

    Returns
    -------
    bool :
        True if the calibrated demand was changed.
    """
    good = Good.of(good)
    if good is ALL_GOODS:
        sector.diagnostics.error(f"Implied fixed input of {group.name} in {sector.name} in "
                                 f"{sector.region} must be set for a single good.")
        return False

    market = sector.market
    input_was_changed = False
    for option in sector.options(group):
        if option.good is not good:
            continue

        if not input_was_changed:
            efficiency = option.efficiency[period]
            input_value = required_output / efficiency if efficiency > 0 else 0
            existing_demand = max(market.get_market_info(good, sector.region, period,
                                                         PARAM.cal_demand), 0)
            market.set_market_info(good, sector.region, period, PARAM.cal_demand,
                                   existing_demand + input_value)
            input_was_changed = True
        else:
            sector.diagnostics.warning(f"More than one option input would have been changed in "
                                       f"{group.name} in {sector.name} in {sector.region}")
    return input_was_changed


def get_normalized_option_share_weights(sector, group, period):
    """
    Find the share weights of a group's options scaled so that they sum to the number of options
    with a non-zero share weight. A share weight above 1 then means an option is favoured. The
    options' share weights are not changed.

    Returns
    -------
    dict {ShareCal.Option: float} or None :
        The normalized share weight of each option, or None if the share weights sum to 0.
    """
    options = sector.options(group)
    share_weight_total = sum(o.get_share_weight(period) for o in options)
    num_non_zero = sum(1 for o in options if o.get_share_weight(period) > 0)

    if share_weight_total == 0:
        sector.diagnostics.error(f"Option share weights sum to zero in {group.name} in "
                                 f"{sector.name} in {sector.region}")
        return None

    scale = num_non_zero / share_weight_total
    return {o: o.get_share_weight(period) * scale for o in options}


def normalize_option_share_weights(sector, group, period):
    """
    Scale the share weights of a group's options in place. See
    `get_normalized_option_share_weights()`.
    """
    normalized = get_normalized_option_share_weights(sector, group, period)
    if normalized is None:
        return

    for option, share_weight in normalized.items():
        option.set_share_weight(share_weight, period)
    sector.diagnostics.debug(f"Option share weights normalized for {group.name} in {sector.name} "
                             f"in {sector.region}")


def adjust_for_calibration(sector, group, sector_demand, total_fixed_output, total_cal_outputs,
                           all_fixed_output, period):
    """
    Adjust a group's share weight so that its output is consistent with its calibration value.

    Fixed output takes precedence over calibration values, so calibration values are shared out of
    the demand left after fixed output. Unless the sector's calibration values are smaller than
    that available demand and some of the sector's output is free to vary, the group's calibration
    value is rescaled so that the sector's calibration values sum to the available demand. If the
    group has more than one available option, its options' share weights are adjusted as well.

    Parameters
    ----------
    sector : ShareCal.Sector
        The sector containing group.
    group : ShareCal.Group
        The group being calibrated.
    sector_demand : float
        The total demand for the sector's product.
    total_fixed_output : float
        The fixed output of the whole sector.
    total_cal_outputs : float
        The calibrated output of the whole sector.
    all_fixed_output : bool
        True if all of the sector's output is fixed or calibrated.
    period : int
        The model period.

    Returns
    -------
    float :
        The group's calibrated output, after any rescaling.
    """
    cal_output = get_total_cal_outputs(sector, group, period)

    # A share weight of 0 can't be calibrated
    if group.share_weight[period] == 0 and cal_output > 0:
        group.share_weight[period] = 1

    available_demand = max(sector_demand - total_fixed_output, 0)

    if not (total_cal_outputs < available_demand and not all_fixed_output):
        if total_cal_outputs != 0:
            cal_output = cal_output * (available_demand / total_cal_outputs)
        else:
            sector.diagnostics.error(f"Total calibrated output of {sector.name} in "
                                     f"{sector.region} is 0 in period {period}. Calibration "
                                     f"value of {group.name} not rescaled.")

    group_demand = group.share[period] * sector_demand
    if group_demand > 0:
        group.share_weight[period] *= cal_output / group_demand

    if group.share_weight[period] < 0:
        sector.diagnostics.error(f"Share weight is < 0 for {group.name} in {sector.name} in "
                                 f"{sector.region}: {group.share_weight[period]} (reset to 1)")
        group.share_weight[period] = 1

    if get_number_avail_options(sector, group, period) > 1:
        for option in sector.options(group):
            if option.is_available(period):
                option.adjust_for_calibration(cal_output, period, sector)

    if sector.debug_checking and group.share_weight[period] > sector.share_weight_warning_threshold:
        sector.diagnostics.notice(f"Large share weight after calibration for {group.name} in "
                                  f"{sector.name} in {sector.region}: "
                                  f"{group.share_weight[period]}")

    return cal_output


def adjust_sector_for_calibration(sector, demand, period):
    """
    Adjust the share weights of every calibrated group in `sector`. Shares must already have been
    calculated for `demand`.

    Returns
    -------
    dict {ShareCal.Group: float} :
        The calibrated output of each calibrated group, after any rescaling.
    """
    total_fixed_output = fixed_output.get_total_fixed_output(sector, period)
    total_cal_outputs = get_sector_cal_outputs(sector, period)
    all_fixed = fixed_output.sector_all_output_fixed(sector, period)

    targets = {}
    for group in sector.groups():
        if group.calibration_status[period]:
            targets[group] = adjust_for_calibration(sector, group, demand, total_fixed_output,
                                                    total_cal_outputs, all_fixed, period)
    return targets


def calibration_error(sector, targets, demand, period):
    """
    The largest relative difference between a calibrated group's output and its target, or between
    a calibrated option's output and its calibration value (rescaled in the same way as its
    group's).

    An uncalibrated option available alongside calibrated options takes part of its group's output,
    so the calibrated options' values can't all be met and the error stays above 0.
    """
    error = 0
    for group, target in targets.items():
        group_output = group.share[period] * demand
        error = max(error, abs(group_output - target) / max(abs(target), 1))

        group_cal_output = get_total_cal_outputs(sector, group, period)
        if group.do_calibration[period] or group_cal_output <= 0:
            continue
        for option in sector.options(group):
            if option.get_calibration_status(period):
                expected = option.get_calibration_output(period) * target / group_cal_output
                output = option.share[period] * group_output
                error = max(error, abs(output - expected) / max(abs(expected), 1))
    return error


def calibrate_sector(sector, period, demand, max_iterations=1000, tolerance=PARAM.SMALL_NUMBER):
    """
    Calibrate a sector by repeatedly adjusting share weights and recalculating shares until the
    outputs of calibrated groups & options match their calibration values.

    Parameters
    ----------
    sector : ShareCal.Sector
        The sector being calibrated.
    period : int
        The model period. Must be a period in which at least one group is calibrated.
    demand : float
        The total demand for the sector's product.
    max_iterations : int, optional
        The largest number of adjustments made before giving up.
    tolerance : float, optional
        The largest relative error accepted.

    Returns
    -------
    bool :
        True if calibration converged.
    """
    sector.calc_shares(period, demand)
    for _ in range(max_iterations):
        targets = adjust_sector_for_calibration(sector, demand, period)
        if not targets:
            return True

        sector.calc_shares(period, demand)
        if calibration_error(sector, targets, demand, period) <= tolerance:
            return True

    sector.diagnostics.warning(f"Calibration of {sector.name} in {sector.region} did not converge "
                               f"within {max_iterations} iterations in period {period}.")
    return False
