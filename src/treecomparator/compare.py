import os
import sys
import time

from treecomparator.arguments import get_arguments
from treecomparator.excluded import parse_exclude_patterns
from treecomparator.match import match_directory
from treecomparator.printreport import (
    CsvSink,
    CsvSinkError,
    print_directory_table,
    print_final_summary,
    print_run_header,
)
from treecomparator.scan import iter_directory_pairs
from treecomparator.utils import get_formatted_dates


def compare_trees(dir_d, dir_t, sink, recursive=False, exclude_patterns=None,
                  hash_algorithm='md5', debug=False, ignore_paths=None):
    """
    Compares the two trees directory by directory: each pair is matched, its
    table printed and its rows appended to `sink` before the next directory is
    read. Files listed in `ignore_paths` are not compared.

    Returns:
        tuple: (all MatchRecords in processing order, number of directories
                compared, dictionary of skipped directory counts)
    """
    all_records = []
    skipped = {}
    processed_count = 0

    for pair in iter_directory_pairs(dir_d, dir_t, recursive, exclude_patterns,
                                     skipped=skipped, hash_algorithm=hash_algorithm, debug=debug,
                                     ignore_paths=ignore_paths):
        records = match_directory(pair)
        print_directory_table(pair, records)
        sink.write_records(records)
        all_records.extend(records)
        processed_count += 1

    return all_records, processed_count, skipped


def main(argv=None):
    start_time = time.perf_counter()
    local_date_str, _ = get_formatted_dates()

    args = get_arguments(argv)

    dir_d = os.path.abspath(args.dir_d)
    dir_t = os.path.abspath(args.dir_t)

    for label, folder in (("DIR_D", dir_d), ("DIR_T", dir_t)):
        if not os.path.isdir(folder):
            print(f"Error: {label} '{folder}' not found or is not a directory.", file=sys.stderr)
            print("Usage: compare-dirs <dir_d> <dir_t> [output.csv] [-r] [-m exclude_dirs]", file=sys.stderr)
            print("       compare-dirs -h (for help)", file=sys.stderr)
            return 1

    exclude_patterns = parse_exclude_patterns(args.exclude)
    if exclude_patterns and not args.recursive:
        print("Warning: --exclude is only used in recursive mode (-r), ignoring it.", file=sys.stderr)
        exclude_patterns = []

    print_run_header(dir_d, dir_t, args.output_csv, args.recursive, exclude_patterns,
                     args.hash_algorithm, local_date_str)

    if args.recursive:
        print("Comparing files in root directory and all subdirectories recursively...")
    else:
        print("Comparing files in the given directories (not recursing into subdirectories)...")

    try:
        with CsvSink(args.output_csv) as sink:
            records, processed_count, skipped = compare_trees(
                dir_d, dir_t, sink,
                recursive=args.recursive,
                exclude_patterns=exclude_patterns,
                hash_algorithm=args.hash_algorithm,
                debug=args.debug,
                # The report may live inside one of the trees
                ignore_paths={os.path.realpath(args.output_csv)},
            )
    except CsvSinkError as e:
        print(e, file=sys.stderr)
        return 1

    if not args.recursive and processed_count == 0:
        print("No files found in the root directories to compare.", file=sys.stderr)
        return 1

    elapsed_time = time.perf_counter() - start_time
    print_final_summary(records, args.output_csv, processed_count, skipped, elapsed_time)
    return 0


if __name__ == "__main__":
    sys.exit(main())
