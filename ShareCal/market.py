"""
Module containing the Marketplace, the price oracle consulted during share calculation.
"""
from .goods import Good


def _market_name(good):
    if isinstance(good, Good):
        return good.name
    return good


class Marketplace:
    """
    Stores prices and market information by (market, region, period).

    Prices are supplied by whatever solves the markets; share calculation only reads them. Market
    information holds named scalars that can be used to pass values between periods (e.g. a
    calibrated variable cost).
    """

    def __init__(self):
        self.prices = {}
        self.market_info = {}

    @staticmethod
    def info_key(market, region, period):
        """
        Synthesize the key under which the market information of a market, region & period is
        stored.
        """
        return f"{_market_name(market)}|{region}|{period}"

    def set_price(self, good, region, period, price):
        self.prices[self.info_key(good, region, period)] = float(price)

    def get_price(self, good, region, period, default=0.0):
        return self.prices.get(self.info_key(good, region, period), default)

    def set_market_info(self, market, region, period, name, value):
        info = self.market_info.setdefault(self.info_key(market, region, period), {})
        info[name] = float(value)

    def get_market_info(self, market, region, period, name, default=0.0):
        info = self.market_info.get(self.info_key(market, region, period), {})
        return info.get(name, default)
