"""
Module containing the tags used to identify which input category (fuel) an option consumes.
"""


class Good:
    """
    An input category tag. Tags are interned, so `Good.of(name)` always returns the same object
    for the same name and tags can be compared by identity.

    Parameters
    ----------
    name : str
        The name of the good (e.g. "electricity"). Matching is exact and case-sensitive.
    """
    _tags = {}

    def __init__(self, name):
        self.name = name

    @classmethod
    def of(cls, name):
        """
        Find (or create) the tag for `name`. Passing a Good returns it unchanged.
        """
        if isinstance(name, Good):
            return name
        if name not in cls._tags:
            cls._tags[name] = cls(name)
        return cls._tags[name]

    def __repr__(self):
        return f"Good({self.name!r})"


# Wildcard matching every good. Not held in the registry.
ALL_GOODS = Good("*")


def matches(good: Good, target: Good) -> bool:
    """
    Returns True if `good` satisfies `target`, either because `target` is the ALL_GOODS wildcard
    or because they are the same tag.
    """
    return target is ALL_GOODS or good is Good.of(target)
