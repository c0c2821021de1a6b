import os

from treecomparator.utils import calculate_hash, display_name, version_sort_key
from treecomparator.excluded import is_excluded

# Keys of the dictionary that records why candidate directories were skipped
SKIPPED_EXCLUDED = "excluded"
SKIPPED_MISSING_IN_T = "missing_in_t"
SKIPPED_EMPTY = "empty"


class FileEntry:
    def __init__(self, name, size, full_path, hash_algorithm='md5'):
        self.name = name
        self.size = size
        self.full_path = full_path
        self.hash_algorithm = hash_algorithm
        self._hash = None # Computed on first use only, see get_hash()

    @property
    def hash_computed(self):
        return self._hash is not None

    def get_hash(self):
        """Returns the content hash, reading the file the first time only."""
        if self._hash is None:
            self._hash = calculate_hash(self.full_path, self.hash_algorithm)
        return self._hash

    def __repr__(self):
        return f"FileEntry({self.name!r}, {self.size})"


class DirectoryPair:
    """
    One directory present at the same relative path in both trees, with the
    regular files found directly inside it on each side.
    """
    def __init__(self, relative_path, d_path, t_path, d_entries, t_entries, label=None, subdir=None):
        self.relative_path = relative_path # "" for the root
        self.d_path = d_path
        self.t_path = t_path
        self.d_entries = d_entries
        self.t_entries = t_entries
        self.label = label if label is not None else relative_path # Banner of the terminal table
        self.subdir = subdir if subdir is not None else relative_path # CSV "subdir" column


def list_files(directory, hash_algorithm='md5', ignore_paths=None):
    """
    Lists the regular files directly inside `directory` (no recursion), sorted
    by version-aware name order.

    A directory that cannot be read, or that vanished, gives an empty list.
    Entries that cannot be stat'ed are skipped. Symbolic links are not regular
    files and are ignored. Files whose real path is in `ignore_paths` (the CSV
    report being written) are left out.
    """
    entries = []
    try:
        with os.scandir(directory) as it:
            for dir_entry in it:
                try:
                    if not dir_entry.is_file(follow_symlinks=False):
                        continue
                    size = dir_entry.stat(follow_symlinks=False).st_size
                except OSError:
                    continue
                if ignore_paths and os.path.realpath(dir_entry.path) in ignore_paths:
                    continue
                entries.append(FileEntry(dir_entry.name, size, dir_entry.path, hash_algorithm))
    except OSError:
        return []

    entries.sort(key=lambda entry: version_sort_key(entry.name))
    return entries


def _list_subdirectories(root_path):
    """All directories below `root_path` (any depth, not following links), relative and sorted."""
    relative_dirs = []
    # os.walk skips directories it cannot read, they simply contribute nothing
    for dirpath, dirnames, _ in os.walk(root_path, followlinks=False):
        for dirname in dirnames:
            full_path = os.path.join(dirpath, dirname)
            if os.path.islink(full_path):
                continue
            relative_dirs.append(os.path.relpath(full_path, root_path))
    return sorted(relative_dirs)


def iter_directory_pairs(dir_d, dir_t, recursive=False, exclude_patterns=None,
                         skipped=None, hash_algorithm='md5', debug=False,
                         ignore_paths=None):
    """
    Yields the DirectoryPair objects to compare, in processing order.

    Root-only mode yields at most the root pair. Recursive mode yields the root
    pair (labelled '.') followed by every directory of the D-side tree that also
    exists in the T-side tree, is not excluded, and holds at least one regular
    file on either side.

    If `skipped` is a dictionary, the number of directories skipped for each
    reason is accumulated into it. `ignore_paths` is passed on to list_files().
    """
    exclude_patterns = exclude_patterns or []
    if skipped is None:
        skipped = {}
    for key in (SKIPPED_EXCLUDED, SKIPPED_MISSING_IN_T, SKIPPED_EMPTY):
        skipped.setdefault(key, 0)

    # --- Root pair ---
    root_label = "." if recursive else f"{dir_d} vs {dir_t} (root level files only)"
    d_entries = list_files(dir_d, hash_algorithm, ignore_paths)
    t_entries = list_files(dir_t, hash_algorithm, ignore_paths)
    if d_entries or t_entries:
        yield DirectoryPair("", dir_d, dir_t, d_entries, t_entries,
                            label=root_label, subdir="." if recursive else "")
    else:
        skipped[SKIPPED_EMPTY] += 1
        if debug:
            print("DEBUG: No files in the root directories, skipping root level")

    if not recursive:
        return

    # --- Subdirectories of the D-side tree ---
    for relative_path in _list_subdirectories(dir_d):
        normalized_relative_path = relative_path.replace(os.sep, '/')
        d_path = os.path.join(dir_d, relative_path)
        t_path = os.path.join(dir_t, relative_path)

        excluded_flag, _ = is_excluded(relative_path, exclude_patterns, debug)
        if excluded_flag:
            skipped[SKIPPED_EXCLUDED] += 1
            continue

        if not os.path.isdir(t_path):
            skipped[SKIPPED_MISSING_IN_T] += 1
            if debug:
                print(f"DEBUG: '{display_name(normalized_relative_path)}' does not exist in DIR_T, skipping")
            continue

        d_entries = list_files(d_path, hash_algorithm, ignore_paths)
        t_entries = list_files(t_path, hash_algorithm, ignore_paths)
        if not d_entries and not t_entries:
            skipped[SKIPPED_EMPTY] += 1
            if debug:
                print(f"DEBUG: '{display_name(normalized_relative_path)}' has no files on either side, skipping")
            continue

        yield DirectoryPair(normalized_relative_path, d_path, t_path, d_entries, t_entries)
