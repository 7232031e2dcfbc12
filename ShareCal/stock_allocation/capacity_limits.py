"""
Module containing the capacity limit functionality, which smoothly limits the share of the sector a
group can take.
"""
import math

from .. import share_calculation
from ..utils import parameters as PARAM


def cap_limit_transform(raw_share: float, cap_limit: float) -> float:
    """
    Transform a share so that it smoothly approaches a capacity limit.

    The transformed share is close to `raw_share` when `raw_share` is much smaller than
    `cap_limit`, and approaches `cap_limit` as `raw_share` grows, using a logistic style
    transformation. The transformation is not idempotent, so it must only be applied to a group's
    share once per period.

    Parameters
    ----------
    raw_share : float
        The share before the capacity limit is applied.
    cap_limit : float
        The capacity limit, as a share of the sector. Limits of (almost) 1 are not limits.

    Returns
    -------
    float :
        The transformed share, which is less than `cap_limit` when `cap_limit` < 1. Shares many
        times the limit saturate at `cap_limit`.

    Examples
    --------
    >>> cap_limit_transform(0.5, 1)
    0.5

    >>> round(cap_limit_transform(0.01, 0.5), 4)
    0.0099
    """
    if cap_limit >= 1 - PARAM.SMALL_NUMBER:
        return raw_share

    ratio = raw_share / cap_limit
    exponent = (PARAM.cap_limit_multiplier * ratio) ** PARAM.cap_limit_exponent
    if exponent > PARAM.max_exp_argument:
        return cap_limit
    factor = math.exp(exponent)

    return raw_share * factor / (1 + ratio * factor)


def limit_shares(sector: "ShareCal.Sector", group: "ShareCal.Group", multiplier: float,
                 period: int):
    """
    Re-normalize a group's share, subject to its capacity limit.

    A group whose share exceeds its transformed share is set to the transformed share and flagged
    as capacity limited. A group already flagged is not transformed again. Other groups, unless
    they have fixed output, have their share multiplied by `multiplier`, which must be calculated
    by the caller.

    Parameters
    ----------
    sector : ShareCal.Sector
        The sector containing group.
    group : ShareCal.Group
        The group whose share is being limited.
    multiplier : float
        The multiplier for shares of groups which are not capacity limited. A multiplier of 0 sets
        the group's share to 0.
    period : int
        The model period.
    """
    if multiplier == 0:
        group.share[period] = 0
        return

    share = group.share[period]
    cap_limit = group.get_capacity_limit(period)
    cap_limit_value = cap_limit_transform(share, cap_limit)
    if share >= cap_limit_value and cap_limit < 1 - PARAM.SMALL_NUMBER:
        if not group.cap_limited[period]:
            share_calculation.set_group_share(sector, group, cap_limit_value, period)
            group.set_cap_limit_status(True, period)
    elif group.fixed_share[period] == 0:
        share_calculation.set_group_share(sector, group, share * multiplier, period)


def apply_capacity_limits(sector: "ShareCal.Sector", period: int):
    """
    Apply capacity limits to the (normalized) group shares of a sector.

    Capacity limited groups are transformed once. The share they give up is redistributed to the
    remaining groups without fixed output, in proportion to their shares, so that shares continue
    to sum to 1.

    Returns
    -------
    list [ShareCal.Group] :
        The groups which are capacity limited.
    """
    groups = sector.groups()

    # Transform capacity limited groups, leaving all other shares unchanged
    for group in groups:
        limit_shares(sector, group, 1, period)

    limited = [g for g in groups if g.cap_limited[period]]
    if not limited:
        return limited

    limited_total = sum(g.share[period] for g in limited)
    fixed_total = sum(g.share[period] for g in groups
                      if not g.cap_limited[period] and g.fixed_share[period] != 0)
    variable_total = sum(g.share[period] for g in groups
                         if not g.cap_limited[period] and g.fixed_share[period] == 0)

    if variable_total > 0:
        multiplier = max(1 - limited_total - fixed_total, 0) / variable_total
        for group in groups:
            limit_shares(sector, group, multiplier, period)
    else:
        sector.diagnostics.warning(f"All groups in {sector.name} in {sector.region} are capacity "
                                   f"limited or fixed in period {period}. Shares sum to "
                                   f"{limited_total + fixed_total}.")

    return limited
