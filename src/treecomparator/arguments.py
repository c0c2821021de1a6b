import textwrap
import argparse

from treecomparator import (
    CLOSE_PERCENT,
    DEFAULT_HASH_ALGORITHM,
    DEFAULT_OUTPUT_CSV,
    DETAIL_DISPLAY_CAP,
    HASH_ALGORITHMS,
)

WRAP_WIDTH = 78


def _wrap_block(raw_text):
    """Wraps every line of an indented text block, keeping each line's indentation."""
    wrapped_lines = []
    for line in textwrap.dedent(raw_text).splitlines():
        if not line.strip():
            wrapped_lines.append("")
            continue

        leading_spaces = len(line) - len(line.lstrip())
        indent = " " * leading_spaces
        wrapped_lines.append(textwrap.fill(line.lstrip(),
                                           width=WRAP_WIDTH - leading_spaces,
                                           initial_indent=indent,
                                           subsequent_indent=indent))
    return "\n".join(wrapped_lines)


def get_arguments(argv=None):
    """
    Sets up and parses command-line arguments for the directory tree comparison.

    Args:
        argv (list, optional): Arguments to parse, defaults to sys.argv[1:].

    Returns:
        argparse.Namespace: An object containing the parsed arguments.
    """
    main_description_raw = ("Compares the files of two directory trees (DIR_D and DIR_T), "
                            "prints side-by-side tables per directory and writes a CSV report.")
    main_description_wrapped = textwrap.fill(main_description_raw, width=WRAP_WIDTH)

    matching_logic_raw = f"""
        File Matching Logic (per directory, files directly inside it only):
          1. Exact filename match.
          2. Otherwise, the remaining DIR_T file with the closest size, if the size
             difference is below 5MB. On equal differences the first file in
             version-sorted order wins.
          3. Files left over on either side are reported as missing.

        Status Codes:
          ✓ PERFECT        Same size AND same hash (identical files)
          ~ SIZE_OK        Same size BUT different hash (content differs)
          ≈ CLOSE          Less than {CLOSE_PERCENT}% size difference (similar files)
          ✗ DIFFERENT      {CLOSE_PERCENT}% size difference or more
          ← ONLY_D         File exists only in DIR_D (MISSING in the CSV)
          → ONLY_T         File exists only in DIR_T (MISSING in the CSV)

        Output:
          CSV report   subdir,d_file,d_size,t_file,t_size,d_hash,t_hash,status
          Terminal     one table per directory, then a final summary. Categories
                       with more than {DETAIL_DISPLAY_CAP} files are only listed in the CSV.
    """

    full_description = main_description_wrapped + "\n" + _wrap_block(matching_logic_raw)

    epilog = textwrap.dedent("""\
        Examples:
          %(prog)s /path/to/dir_d /path/to/dir_t
          %(prog)s /path/to/dir_d /path/to/dir_t results.csv
          %(prog)s /path/to/dir_d /path/to/dir_t output.csv -r -m "cache,tmp"
    """)

    parser = argparse.ArgumentParser(
        prog="compare-dirs",
        description=full_description,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )

    parser.add_argument("dir_d", help="Directory tree 1 (development/source).")
    parser.add_argument("dir_t", help="Directory tree 2 (test/target).")
    parser.add_argument("output_csv", nargs='?', default=DEFAULT_OUTPUT_CSV,
                        help=f"Output CSV file (default: {DEFAULT_OUTPUT_CSV}).")
    parser.add_argument("-r", "--recursive", action="store_true",
                        help="Compare the files of ALL subdirectories. Without -r only the files "
                             "directly in the two root directories are compared.")
    parser.add_argument("-m", "--exclude", default="",
                        help="Comma-separated list of substrings. In recursive mode, a directory "
                             "whose path relative to DIR_D contains any of them is skipped "
                             "(e.g. 'gdiags,gfis,products').")
    parser.add_argument("--hash-algorithm", choices=HASH_ALGORITHMS, default=DEFAULT_HASH_ALGORITHM,
                        help=f"Content hash used to tell same-size files apart (default: {DEFAULT_HASH_ALGORITHM}).")
    parser.add_argument("--debug", action="store_true",
                        help="Print why candidate directories are skipped.")

    # Options may appear between or after the positionals, e.g. "dir_d dir_t -r out.csv"
    return parser.parse_intermixed_args(argv)


def get_tar_log_arguments(argv=None):
    """
    Sets up and parses command-line arguments for the HTAR log comparison.

    Returns:
        argparse.Namespace: An object containing the parsed arguments.
    """
    parser = argparse.ArgumentParser(
        prog="compare-tar-logs",
        description="Compare two HTAR log files to verify identical archived file sets.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            Examples:
              %(prog)s file1.log file2.log
              %(prog)s -v develop_archive.log test_archive.log
        """),
    )

    parser.add_argument("log1", help="First HTAR log file (e.g. develop branch).")
    parser.add_argument("log2", help="Second HTAR log file (e.g. test branch).")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Also list the files common to both logs.")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Only show the summary (suppress file lists).")
    parser.add_argument("--no-color", action="store_true",
                        help="Disable colored output.")

    return parser.parse_args(argv)
