'''
# --- Script Description ---
#
# This script compares the output directory trees of two runs of a workflow
# test (DIR_D, usually the development run, and DIR_T, the test run) file by
# file, to check that a code change reproduces the expected outputs.
#
# For every directory compared, the files directly inside it are matched in
# three passes:
#  1. Files with the same name on both sides.
#  2. Remaining DIR_D files are paired with the remaining DIR_T file of
#     closest size, if the sizes differ by less than 5MB (outputs of two runs
#     are often renamed or reindexed but keep a near-identical size).
#  3. Files left over on either side are reported as missing.
#
# Each file (or matched pair of files) is classified as:
#   PERFECT    same size and same content hash
#   SIZE_OK    same size, different content hash
#   CLOSE      size difference below 5% of the DIR_D size
#   DIFFERENT  size difference of 5% or more
#   ONLY_D     only in DIR_D (MISSING in the CSV)
#   ONLY_T     only in DIR_T (MISSING in the CSV)
#
# Usage examples:
# ---------------
# python3 main.py /path/to/dir_d /path/to/dir_t
# python3 main.py /path/to/dir_d /path/to/dir_t results.csv -r -m "gdiags,gfis,products"
#
# Note on the directories compared:
# ---------------------------------
# Without -r only the files directly in the two root directories are compared.
# With -r the root is compared first, then every directory of DIR_D that also
# exists in DIR_T. Directories with no files on either side are skipped, and
# so are directories whose relative path contains one of the -m substrings.
#
# --- End of Script Description ---

'''

import sys

from treecomparator.compare import main


if __name__ == "__main__":
    # --- Python Version Check ---
    MIN_PYTHON_VERSION = (3, 8)
    if sys.version_info < MIN_PYTHON_VERSION:
        print(
            "Error: This script requires Python",
            MIN_PYTHON_VERSION[0],
            ".",
            MIN_PYTHON_VERSION[1],
            " or higher.",
            file=sys.stderr,
        )
        print(
            "You are currently using Python ",
            sys.version_info.major,
            ".",
            sys.version_info.minor,
            file=sys.stderr,
        )
        sys.exit(1)

    sys.exit(main())
