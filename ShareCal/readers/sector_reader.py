import numpy as np
import pandas as pd
import polars as pl

from ..group import Group
from ..modeltime import Modeltime
from ..sector import Sector
from ..technology import Option, ProfitOption
from ..utils import model_columns as COL
from ..utils import parameters as PARAM
from ..utils.general_utils import infer_type, is_year


def _is_missing(val):
    if val is None:
        return True
    if isinstance(val, float) and np.isnan(val):
        return True
    return isinstance(val, str) and val.strip() == ""


class SectorReader:
    """
    Reads a long format description of a sector and builds a `ShareCal.Sector` from it.

    The description has one row per (branch, technology, parameter). Groups are described by rows
    whose `Branch` is `sector.group` and whose `Technology` is empty. Options are described by rows
    whose `Technology` is the option's name. Sector level values (e.g. the scaled GDP per capita)
    use the sector's name as their `Branch`. Values which change over time are given in year
    columns, while `fuel`, `option_type` and `scale_year` are given in the `Context` column.

    Parameters
    ----------
    source : str or pandas.DataFrame
        The path to a CSV file, or a DataFrame containing the description.
    region : str, optional
        The region to read. Required if the description contains more than one region.
    """

    def __init__(self, source, region=None):
        if isinstance(source, pd.DataFrame):
            model_df = source.copy()
        else:
            model_df = self._read_csv(source)

        model_df.columns = [str(c) for c in model_df.columns]
        missing = [c for c in [COL.branch, COL.parameter] if c not in model_df.columns]
        if missing:
            raise ValueError(f"Sector description is missing column(s) {missing}")
        for col in COL.node_columns:
            if col not in model_df.columns:
                model_df[col] = None

        model_df = model_df[~model_df[COL.branch].apply(_is_missing)].copy()
        model_df[COL.parameter] = model_df[COL.parameter].str.strip().str.lower()

        self.region = self._find_region(model_df, region)
        if self.region is not None:
            model_df = model_df[model_df[COL.region].apply(
                lambda r: _is_missing(r) or r == self.region)].copy()

        self.years = [c for c in model_df.columns if is_year(c)]
        self.modeltime = self._get_modeltime(self.years)
        self.model_df = model_df

    @staticmethod
    def _read_csv(csv_file):
        # Every column is read as a string, then parsed with infer_type
        sheet_df = pl.read_csv(csv_file, infer_schema_length=0)
        return pd.DataFrame(sheet_df.to_dict(as_series=False))

    @staticmethod
    def _find_region(model_df, region):
        regions = [r for r in model_df[COL.region].unique() if not _is_missing(r)]
        if region is not None:
            if region not in regions:
                raise ValueError(f"Region {region} is not in the sector description")
            return region
        if len(regions) > 1:
            raise ValueError(f"Sector description contains several regions {regions}. Choose "
                             f"one using the region argument.")
        return regions[0] if regions else None

    @staticmethod
    def _get_modeltime(years):
        if not years:
            raise ValueError("Sector description doesn't contain any year columns")
        int_years = sorted(int(y) for y in years)
        step = int_years[1] - int_years[0] if len(int_years) > 1 else 1
        modeltime = Modeltime(int_years[0], int_years[-1], step)
        if modeltime.years != int_years:
            raise ValueError(f"Years {int_years} aren't evenly spaced")
        return modeltime

    def get_sector_name(self):
        roots = {b.split('.')[0] for b in self.model_df[COL.branch]}
        if len(roots) != 1:
            raise ValueError(f"Sector description must describe a single sector, not {roots}")
        return roots.pop()

    def get_group_names(self):
        """Group names, in the order they first appear."""
        names = []
        for branch in self.model_df[COL.branch]:
            parts = branch.split('.')
            if len(parts) == 2 and parts[1] not in names:
                names.append(parts[1])
            elif len(parts) > 2:
                raise ValueError(f"Branch {branch} is nested too deeply. Options are given in the "
                                 f"{COL.technology} column.")
        return names

    def get_option_names(self, group_name):
        """Option names of a group, in the order they first appear."""
        rows = self._rows(f"{self.get_sector_name()}.{group_name}", technology=None)
        rows = rows[~rows[COL.technology].apply(_is_missing)]
        return list(dict.fromkeys(rows[COL.technology]))

    def _rows(self, branch, technology=None):
        df = self.model_df[self.model_df[COL.branch] == branch]
        if technology is None:
            return df
        return df[df[COL.technology] == technology]

    def _own_rows(self, branch):
        df = self._rows(branch)
        return df[df[COL.technology].apply(_is_missing)]

    @staticmethod
    def _check_params(rows, valid_params, node_name):
        unknown = sorted(set(rows[COL.parameter]) - set(valid_params))
        if unknown:
            raise ValueError(f"Unknown parameter(s) {unknown} for {node_name}")

    def _context_value(self, rows, param):
        if param not in PARAM.context_params:
            raise ValueError(f"{param} isn't given in the {COL.context} column")
        param_rows = rows[rows[COL.parameter] == param]
        for val in param_rows[COL.context]:
            if not _is_missing(val):
                return infer_type(val) if param == PARAM.scale_year else str(val).strip()
        return None

    def _year_values(self, rows, param):
        """
        Find the value of `param` in each period. Periods without a value are None, unless the
        parameter's value carries forward, in which case the latest earlier value is used.
        """
        values = [None] * len(self.years)
        for _, row in rows[rows[COL.parameter] == param].iterrows():
            for i, year in enumerate(self.years):
                if not _is_missing(row[year]):
                    val = infer_type(row[year])
                    if isinstance(val, str):
                        raise ValueError(f"Value '{val}' of {param} in {row[COL.branch]} for "
                                         f"{year} isn't a number")
                    values[i] = float(val)

        if param in PARAM.persistent_params:
            for i in range(1, len(values)):
                if values[i] is None:
                    values[i] = values[i - 1]
        return values

    @staticmethod
    def _fill(array, values):
        for period, val in enumerate(values):
            if val is not None:
                array[period] = val

    def build_group(self, sector, group_name):
        rows = self._own_rows(f"{sector.name}.{group_name}")
        self._check_params(rows, PARAM.group_params, group_name)

        scale_year = self._context_value(rows, PARAM.scale_year)
        group = sector.add_group(group_name,
                                 scale_year=int(scale_year) if scale_year is not None else None)

        cap_limits = self._year_values(rows, PARAM.capacity_limit)
        for val in cap_limits:
            if val is not None and not 0 < val <= 1:
                raise ValueError(f"Capacity limit of {group_name} must be in (0, 1], not {val}.")

        self._fill(group.share_weight, self._year_values(rows, PARAM.share_weight))
        self._fill(group.logit_exponent, self._year_values(rows, PARAM.logit_exponent))
        self._fill(group.option_logit_exponent,
                   self._year_values(rows, PARAM.option_logit_exponent))
        self._fill(group.fuel_pref_elasticity, self._year_values(rows, PARAM.fuel_pref_elasticity))
        self._fill(group.capacity_limit, cap_limits)

        for period, val in enumerate(self._year_values(rows, PARAM.calibration_output)):
            if val is not None:
                group.set_calibration_output(val, period)

        return group

    def build_option(self, sector, group: Group, option_name, land=None):
        rows = self._rows(f"{sector.name}.{group.name}", technology=option_name)
        self._check_params(rows, PARAM.option_params, option_name)

        fuel = self._context_value(rows, PARAM.fuel)
        if fuel is None:
            raise ValueError(f"Option {option_name} in {group.name} has no {PARAM.fuel}")

        option_type = self._context_value(rows, PARAM.option_type) or PARAM.standard_option
        max_period = self.modeltime.max_period
        if option_type == PARAM.profit_option:
            if land is None:
                raise ValueError(f"Option {option_name} is a {PARAM.profit_option} option, but no "
                                 f"land was provided")
            option = ProfitOption(option_name, fuel, max_period, land)
            self._fill(option.variable_cost, self._year_values(rows, PARAM.variable_cost))
            for period, val in enumerate(self._year_values(rows, PARAM.cal_observed_yield)):
                if val is not None:
                    option.set_cal_observed_yield(val, period)
        elif option_type == PARAM.standard_option:
            option = Option(option_name, fuel, max_period)
        else:
            raise ValueError(f"Unknown {PARAM.option_type} '{option_type}' for {option_name}")

        self._fill(option.efficiency, self._year_values(rows, PARAM.efficiency))
        self._fill(option.non_energy_cost, self._year_values(rows, PARAM.non_energy_cost))
        self._fill(option.share_weight, self._year_values(rows, PARAM.share_weight))

        for period, val in enumerate(self._year_values(rows, PARAM.fixed_output)):
            if val is not None:
                option.set_fixed_output(val, period)
        for period, val in enumerate(self._year_values(rows, PARAM.calibration_output)):
            if val is not None:
                option.set_calibration_output(val, period)

        return sector.add_option(group, option)

    def build_sector(self, market=None, diagnostics=None, land=None, **sector_kwargs):
        """
        Build the sector described by the reader.

        Parameters
        ----------
        market : ShareCal.Marketplace, optional
            Passed to the sector.
        diagnostics : ShareCal.Diagnostics, optional
            Passed to the sector.
        land : object, optional
            The land collaborator used by profit options. Required if the description contains
            any.
        **sector_kwargs :
            Run settings passed to `ShareCal.Sector` (e.g. `calibration_active`).

        Returns
        -------
        ShareCal.Sector :
            The sector, with its groups & options in the order they were described.
        """
        name = self.get_sector_name()

        sector_rows = self._own_rows(name)
        self._check_params(sector_rows, PARAM.sector_params, name)

        gdp = self._year_values(sector_rows, PARAM.scaled_gdp_per_capita)
        if all(v is None for v in gdp):
            scaled_gdp_per_capita = None
        else:
            scaled_gdp_per_capita = [1.0 if v is None else v for v in gdp]

        sector = Sector(name, self.region, self.modeltime, market=market,
                        diagnostics=diagnostics, scaled_gdp_per_capita=scaled_gdp_per_capita,
                        **sector_kwargs)

        for group_name in self.get_group_names():
            group = self.build_group(sector, group_name)
            for option_name in self.get_option_names(group_name):
                self.build_option(sector, group, option_name, land=land)

        return sector
