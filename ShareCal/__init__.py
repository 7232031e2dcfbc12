from .sector import Sector
from .group import Group
from .technology import Option, ProfitOption
from .goods import Good, ALL_GOODS
from .market import Marketplace
from .modeltime import Modeltime
from .diagnostics import Diagnostics
from .readers import SectorReader
from .stock_allocation import cap_limit_transform

from .about import __version__
