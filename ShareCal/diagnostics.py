"""
Module containing the diagnostics collaborator which collects the anomalies (configuration
problems, numerical edge cases, structural violations) found while calculating shares.
"""
import warnings

import pandas as pd

DEBUG = "debug"
NOTICE = "notice"
WARNING = "warning"
ERROR = "error"
SEVERITIES = (DEBUG, NOTICE, WARNING, ERROR)


class DiagnosticEvent:
    """Class used to store a single diagnostic message."""

    def __init__(self, severity, message):
        self.severity = severity
        self.message = message

    def tuple(self):
        """
        Returns
        -------
        tuple :
            Returns a tuple containing the (severity, message). Used to create the diagnostics
            DataFrame.
        """
        return self.severity, self.message


class Diagnostics:
    """
    Records diagnostic events. Warning and error events are also raised as python warnings,
    unless `show_warnings` is False. Nothing recorded here ever stops a calculation.

    Parameters
    ----------
    show_warnings : bool, optional
        Whether warning & error events should be raised through `warnings.warn`.
    """

    def __init__(self, show_warnings=True):
        self.events = []
        self.show_warnings = show_warnings

    def record(self, severity, message):
        if severity not in SEVERITIES:
            raise ValueError(f"Unknown severity '{severity}'. Must be one of {SEVERITIES}.")

        self.events.append(DiagnosticEvent(severity, message))
        if self.show_warnings and severity in (WARNING, ERROR):
            warnings.warn(f"{severity.upper()}: {message}")

    def debug(self, message):
        self.record(DEBUG, message)

    def notice(self, message):
        self.record(NOTICE, message)

    def warning(self, message):
        self.record(WARNING, message)

    def error(self, message):
        self.record(ERROR, message)

    def count(self, severity=None):
        if severity is None:
            return len(self.events)
        return len([e for e in self.events if e.severity == severity])

    def messages(self, severity=None):
        return [e.message for e in self.events if severity is None or e.severity == severity]

    def clear(self):
        self.events = []

    def to_dataframe(self):
        """
        Returns
        -------
        pandas.DataFrame :
            One row per recorded event, with `severity` and `message` columns.
        """
        return pd.DataFrame([e.tuple() for e in self.events], columns=['severity', 'message'])
