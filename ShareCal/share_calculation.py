"""
This module contains the functions for the nested share calculation: option costs & shares within
each group, group prices, and group shares within the sector.
"""
import numpy as np

from .utils import parameters as PARAM


def calc_option_shares(sector: "ShareCal.Sector", group: "ShareCal.Group", period: int):
    """
    Calculate the cost and share of every option in `group`, normalizing the shares so they sum
    to 1 (or to 0, if no option has a positive unnormalized share).

    Parameters
    ----------
    sector : ShareCal.Sector
        The sector containing group.
    group : ShareCal.Group
        The group whose options are competing.
    period : int
        The model period.

    Returns
    -------
    float :
        The sum of the unnormalized option shares.
    """
    options = sector.options(group)
    logit_exponent = group.option_logit_exponent[period]

    if len(options) > 1 and logit_exponent == 0:
        sector.diagnostics.warning(f"Option logit exponent is 0 for {group.name} in "
                                   f"{sector.name} in {sector.region}. All options tie.")

    total = 0
    for option in options:
        option.calc_cost(period, sector)
        total += option.calc_share(period, logit_exponent, sector)

    for option in options:
        option.norm_share(total, period)

    return total


def calc_group_price(sector: "ShareCal.Sector", group: "ShareCal.Group", period: int):
    """
    Calculate the group's price as the share weighted average of its options' costs. The fuel
    price and CO2 emissions factor of the group are weighted the same way.
    """
    price = 0
    fuel_price = 0
    co2_em_factor = 0

    for option in sector.options(group):
        share = option.share[period]
        price += share * option.cost[period]
        fuel_price += share * option.fuel_cost[period]
        co2_em_factor += share * sector.get_co2_coefficient(option.good)

    group.price[period] = price
    group.fuel_price[period] = fuel_price
    group.co2_em_factor[period] = co2_em_factor

    return price


def calc_group_share(sector: "ShareCal.Sector", group: "ShareCal.Group", period: int):
    """
    Calculate the unnormalized share of a group. Option shares and the group price are calculated
    first, then the group's share is found using its share weight, price, logit exponent and the
    fuel preference term on the sector's scaled GDP per capita.

    Returns
    -------
    float :
        The group's unnormalized share.
    """
    calc_option_shares(sector, group, period)
    price = calc_group_price(sector, group, period)

    logit_exponent = group.logit_exponent[period]
    share_weight = group.share_weight[period]

    if logit_exponent == 0 and len(sector.groups()) > 1:
        sector.diagnostics.warning(f"Logit exponent is 0 for {group.name} in {sector.name} in "
                                   f"{sector.region}.")

    if price == 0:
        share = 0.0
    elif price < 0:
        sector.diagnostics.warning(f"Price is < 0 for {group.name} in {sector.name} in "
                                   f"{sector.region}: {price}. Share set to 0.")
        share = 0.0
    else:
        scaled_gdp = sector.get_scaled_gdp_per_capita(period)
        share = share_weight * float(np.power(price, logit_exponent)) * \
            float(np.power(scaled_gdp, group.fuel_pref_elasticity[period]))

    group.share[period] = share

    if share_weight > sector.share_weight_warning_threshold:
        sector.diagnostics.warning(f"Huge share weight for {group.name} in {sector.name} in "
                                   f"{sector.region}: {share_weight}")

    if share < 0:
        sector.diagnostics.warning(f"Share is < 0 for {group.name} in {sector.name} in "
                                   f"{sector.region}. Price: {price}, share weight: "
                                   f"{share_weight}")

    return share


def set_group_share(sector: "ShareCal.Sector", group: "ShareCal.Group", value: float,
                    period: int):
    """
    Set a share which is supposed to already be normalized. Values above 1 are reported, but kept.
    """
    group.share[period] = value
    if value > 1 + PARAM.VERY_SMALL_NUMBER:
        sector.diagnostics.error(f"Share of {group.name} in {sector.name} in {sector.region} "
                                 f"set to a value > 1: {value}")


def norm_group_share(sector, group, total, period):
    if total == 0:
        group.share[period] = 0
    else:
        set_group_share(sector, group, group.share[period] / total, period)


def calc_sector_shares(sector: "ShareCal.Sector", period: int):
    """
    Calculate and normalize the shares of every group in `sector`.

    Returns
    -------
    float :
        The sum of the unnormalized group shares.
    """
    groups = sector.groups()

    total = 0
    for group in groups:
        total += calc_group_share(sector, group, period)

    for group in groups:
        norm_group_share(sector, group, total, period)

    return total


def calc_sector_price(sector: "ShareCal.Sector", period: int):
    """The sector's price is the share weighted average of its groups' prices."""
    return sum(g.share[period] * g.price[period] for g in sector.groups())
