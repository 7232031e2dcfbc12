"""
Module containing the mapping between simulation years and period indices.
"""


class Modeltime:
    """
    The simulation horizon. Periods are indexed from 0 (`start_year`) to `max_period - 1`
    (`end_year`) in steps of `step` years.
    """

    def __init__(self, start_year, end_year, step=5):
        if step <= 0:
            raise ValueError("Modeltime step must be a positive number of years.")
        if end_year < start_year:
            raise ValueError(f"End year {end_year} is before start year {start_year}.")
        if (end_year - start_year) % step != 0:
            raise ValueError(f"Years {start_year}-{end_year} can't be split into {step} year "
                             f"periods.")

        self.start_year = int(start_year)
        self.end_year = int(end_year)
        self.step = int(step)
        self.years = list(range(self.start_year, self.end_year + 1, self.step))

    @property
    def max_period(self):
        return len(self.years)

    def year_to_period(self, year):
        """
        Find the period containing `year`. Years between two periods belong to the earlier one.
        """
        year = int(year)
        if not self.start_year <= year <= self.end_year:
            raise ValueError(f"Year {year} is outside of {self.start_year}-{self.end_year}.")
        return (year - self.start_year) // self.step

    def period_to_year(self, period):
        self.check_period(period)
        return self.years[period]

    def check_period(self, period):
        if not 0 <= period < self.max_period:
            raise ValueError(f"Period {period} is outside of 0-{self.max_period - 1}.")
