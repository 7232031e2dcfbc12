"""
Module containing the functions which account for exogenously fixed output. Fixed output is
produced regardless of price, so it is netted out of the demand the remaining groups compete for.

Groups are assumed to be either wholly fixed or wholly variable. A group mixing options with and
without fixed output is not detected, and its options' shares will not be consistent with the
group's share.
"""
from ..share_calculation import set_group_share
from ..utils import parameters as PARAM


def get_group_fixed_output(sector, group, period):
    """The sum of the (possibly scaled) fixed output of the options in `group`."""
    return sum(option.get_fixed_output(period) for option in sector.options(group))


def get_total_fixed_output(sector, period):
    """The sum of the fixed output of every group in `sector`."""
    return sum(get_group_fixed_output(sector, g, period) for g in sector.groups())


def all_output_fixed(sector, group, period):
    """
    Determine whether all of a group's output is fixed. Output is fixed if the group is calibrated,
    if the group's share weight is 0 (it produces nothing), or if every one of its options has
    fixed or calibrated output.

    Parameters
    ----------
    sector : ShareCal.Sector
        The sector containing group.
    group : ShareCal.Group
        The group to check.
    period : int
        The model period.

    Returns
    -------
    bool :
        True if the group's output cannot respond to price.
    """
    if group.do_calibration[period]:
        return True

    if group.share_weight[period] == 0:
        return True

    for option in sector.options(group):
        if not (option.is_output_fixed(period) or option.get_calibration_status(period)):
            return False

    return True


def sector_all_output_fixed(sector, period):
    return all(all_output_fixed(sector, g, period) for g in sector.groups())


# ==========================================
# Fixed Shares
# ==========================================
def get_fixed_share(group, period):
    return group.fixed_share[period]


def set_fixed_share(sector, group, share, period):
    """
    Save the share of the sector that the group's fixed output represents. A fixed share above 1 is
    reported, but kept.
    """
    group.fixed_share[period] = share
    if share > 1:
        sector.diagnostics.error(f"Fixed share of {group.name} in {sector.name} in "
                                 f"{sector.region} set to a value > 1: {share}")


def set_share_to_fixed_value(sector, group, period):
    """Set the group's share to the share previously saved for its fixed output."""
    set_group_share(sector, group, get_fixed_share(group, period), period)


def seed_fixed_share(sector, group, period):
    """
    Give a group with fixed output a non-zero fixed share before the sector's demand is known. The
    fixed share is replaced once shares are calculated with a demand.
    """
    group.fixed_share[period] = 0
    if get_group_fixed_output(sector, group, period) > 0:
        group.fixed_share[period] = PARAM.initial_fixed_share


def reset_fixed_output(sector, group, period):
    """Reset the fixed output of each option to its read-in value, undoing any scaling."""
    for option in sector.options(group):
        option.reset_fixed_output(period)


def scale_fixed_output(sector, group, scale_ratio, period):
    """Scale down the fixed output of each option, and the group's fixed share."""
    for option in sector.options(group):
        option.scale_fixed_output(scale_ratio, period)
    set_fixed_share(sector, group, get_fixed_share(group, period) * scale_ratio, period)


def tabulate_fixed_output(sector, demand, period):
    """
    Find the fixed output of every group and the share of `demand` it represents. Fixed output is
    first reset to its read-in value. If the total fixed output exceeds `demand`, all fixed output
    is scaled down so that it totals `demand`.

    Parameters
    ----------
    sector : ShareCal.Sector
        The sector whose fixed output is being found.
    demand : float
        The total demand for the sector's product.
    period : int
        The model period.

    Returns
    -------
    tuple (float, float) :
        The total fixed output (after any scaling) and the sum of the shares of the groups without
        fixed output.
    """
    total_fixed_output = 0
    variable_shares = 0

    for group in sector.groups():
        reset_fixed_output(sector, group, period)
        fixed_output = get_group_fixed_output(sector, group, period)
        group.fixed_share[period] = 0

        if fixed_output == 0:
            variable_shares += group.share[period]
        else:
            if demand != 0:
                set_fixed_share(sector, group, min(fixed_output / demand, 1), period)
            total_fixed_output += fixed_output

    if total_fixed_output > demand:
        scale_ratio = demand / total_fixed_output if total_fixed_output > 0 else 0
        for group in sector.groups():
            scale_fixed_output(sector, group, scale_ratio, period)
        total_fixed_output = demand

    return total_fixed_output, variable_shares


def adj_shares(sector, group, demand, share_ratio, total_fixed_output, period):
    """
    Adjust a group's share to be consistent with the sector's fixed output. A group with fixed
    output takes the share of demand its fixed output represents. Other groups have their share
    multiplied by `share_ratio`. The shares of the group's options are then adjusted to match.

    Parameters
    ----------
    sector : ShareCal.Sector
        The sector containing group.
    group : ShareCal.Group
        The group whose share is being adjusted.
    demand : float
        The total demand for the sector's product.
    share_ratio : float
        The multiplier for shares of groups without fixed output, calculated by the caller so
        that variable groups share out the demand left after fixed output.
    total_fixed_output : float
        The fixed output of the whole sector.
    period : int
        The model period.
    """
    options = sector.options(group)
    group_fixed_output = 0
    var_share_total = 0
    for option in options:
        fixed_output = option.get_fixed_output(period)
        group_fixed_output += fixed_output
        if fixed_output == 0:
            var_share_total += option.share[period]

    if total_fixed_output > 0:
        if demand <= 0:
            group.share[period] = 0
        elif group_fixed_output > 0:
            set_group_share(sector, group, group_fixed_output / demand, period)
        else:
            set_group_share(sector, group, group.share[period] * share_ratio, period)

    group_demand = group.share[period] * demand
    for option in options:
        option.adj_shares(group_demand, group_fixed_output, var_share_total, period)


def adjust_for_fixed_output(sector, demand, period):
    """
    Adjust the shares of every group in `sector` so that fixed output is met first and the
    remaining demand is shared among the groups without fixed output, in proportion to their
    existing shares.

    Returns
    -------
    float :
        The sector's total fixed output.
    """
    total_fixed_output, variable_shares = tabulate_fixed_output(sector, demand, period)

    if total_fixed_output > 0:
        new_variable_shares = max(1 - total_fixed_output / demand, 0) if demand > 0 else 0
        share_ratio = new_variable_shares / variable_shares if variable_shares != 0 else 0

        for group in sector.groups():
            adj_shares(sector, group, demand, share_ratio, total_fixed_output, period)

    return total_fixed_output
