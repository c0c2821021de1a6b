import os

from treecomparator.utils import display_name


def parse_exclude_patterns(raw_patterns):
    """
    Splits the comma separated --exclude value into a list of substrings.
    Whitespace around each item is stripped and empty items are dropped.
    """
    if not raw_patterns:
        return []
    patterns = []
    for pattern in raw_patterns.split(','):
        stripped_pattern = pattern.strip()
        if stripped_pattern:
            patterns.append(stripped_pattern)
    return patterns


def is_excluded(relative_path, exclude_patterns, debug=False):
    """
    Checks if a directory should be excluded from the comparison.

    `relative_path` is the directory path relative to the root of the D-side
    tree (e.g. 'gfs.20240101/00/products'). A directory is excluded when ANY
    pattern occurs as a substring of its relative path (case-sensitive), so
    'cache' excludes both 'data/cache/logs' and 'data/cachex'.

    Returns:
        tuple: (is_excluded_flag, matched_pattern)
    """
    # Normalize separators so that patterns written with '/' work everywhere
    normalized_path = relative_path.replace(os.sep, '/')

    for pattern in exclude_patterns:
        if pattern in normalized_path:
            if debug:
                print(f"DEBUG EXCLUDE: '{display_name(normalized_path)}' matched by '{pattern}'")
            return True, pattern

    return False, None
