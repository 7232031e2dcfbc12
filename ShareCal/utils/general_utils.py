import re


def is_year(val: str | int) -> bool:
    """ Determines whether `val` is a year

    Parameters
    ----------
    val : int or str
        The value to check to determine if it is a year.

    Returns
    -------
    bool
        True if `val` is made entirely of digits [0-9] and is 4 characters in length. False
        otherwise.

    Examples
    --------
    >>> is_year(1975)
    True

    >>> is_year('2020')
    True
    """
    re_year = re.compile(r'^\d{4}$')

    return bool(re_year.match(str(val)))


def infer_type(d):
    """
    `d` is a value assumed to be a string. Booleans ("true"/"false") become python booleans,
    percentages become fractions, thousands separators are stripped before parsing as a float.
    Anything that can't be parsed is returned unchanged.
    """
    if not isinstance(d, str):
        return d

    if d.lower() == "true":
        return True

    if d.lower() == "false":
        return False

    if '%' in d:
        try:
            return float(d.replace("%", "")) / 100.0
        except ValueError:
            return d

    if ',' in d:
        try:
            return float(d.replace(",", ""))
        except ValueError:
            return d

    try:
        return float(d)
    except ValueError:
        return d
