"""
Tailwind CSS class name utilities.

``clsx`` builds a class string from conditional inputs, ``tw_merge`` drops
Tailwind utilities overridden by later ones, and ``cn`` composes the two:

    cn('px-2 py-1', 'px-4')                    -> 'py-1 px-4'
    cn('text-red-500', {'text-blue-500': ok})  -> 'text-blue-500' when ok
"""

from collections.abc import Iterable, Mapping
from typing import List

from tailwind_merge import TailwindMerge

_tailwind_merge = TailwindMerge()


def tw_merge(class_string: str) -> str:
    """
    Merge Tailwind classes, later classes overriding conflicting earlier ones

    Args:
        class_string: Space separated class names

    Returns:
        Merged class string
    """
    if not class_string:
        return ''
    return _tailwind_merge.merge(class_string)


def clsx(*inputs) -> str:
    """
    Build a class string from strings, numbers, iterables and mappings

    Mappings contribute the keys whose values are truthy. Booleans, None
    and other falsy values are dropped.
    """
    parts: List[str] = []

    for value in inputs:
        if not value or isinstance(value, bool):
            continue
        if isinstance(value, str):
            parts.append(value)
        elif isinstance(value, (int, float)):
            parts.append(str(value))
        elif isinstance(value, Mapping):
            parts.extend(str(key) for key, enabled in value.items() if key and enabled)
        elif isinstance(value, Iterable):
            nested = clsx(*value)
            if nested:
                parts.append(nested)

    return ' '.join(parts)


def cn(*inputs) -> str:
    """
    Merge Tailwind classes with conditional support

    >>> cn('px-2 py-1', 'px-4')
    'py-1 px-4'
    """
    return tw_merge(clsx(*inputs))


__all__ = ['clsx', 'tw_merge', 'cn']
