"""
Utils
~~~~~

Utility functions used to perform common operations.

"""


def dict_filter_update(base, updates):
    # type: (dict, dict) -> None
    """
    Update dict with None values filtered out.

    :param base:
    :param updates:

    """
    base.update((k, v) for k, v in updates.items() if v is not None)


def sort_by_priority(iterable, reverse=False, default_priority=10):
    """
    Return a list or objects sorted by a priority value.
    """
    return sorted(iterable, reverse=reverse, key=lambda o: getattr(o, 'priority', default_priority))


def always(_):
    """
    Condition that admits every request.
    """
    return True
