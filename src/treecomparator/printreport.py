import csv

from treecomparator.utils import display_name, format_size_column, format_size_human_readable
from treecomparator.scan import SKIPPED_EMPTY, SKIPPED_EXCLUDED, SKIPPED_MISSING_IN_T
from treecomparator import (
    CLOSE_PERCENT,
    CSV_HEADER,
    DETAIL_DISPLAY_CAP,
    NAME_COLUMN_WIDTH,
    SIZE_COLUMN_WIDTH,
    SUMMARY_CATEGORIES,
    TABLE_WIDTH,
    Status,
)

BANNER = "═" * 80


class CsvSinkError(Exception):
    """The CSV report file could not be opened, written or closed."""


class CsvSink:
    """
    The CSV report file: opened once, header written first, then one row per
    MatchRecord appended in processing order.

    File names are written with 'surrogateescape', so a name that is not valid
    UTF-8 ends up in the report with its original bytes.
    """
    def __init__(self, output_path):
        self.output_path = output_path
        self._file = None
        self._writer = None
        self.rows_written = 0

    def _error(self, e):
        return CsvSinkError(f"Error writing output CSV '{display_name(str(self.output_path))}': {e}")

    def __enter__(self):
        try:
            self._file = open(self.output_path, 'w', newline='', encoding='utf-8', errors='surrogateescape')
            self._writer = csv.writer(self._file)
            self._writer.writerow(CSV_HEADER)
        except OSError as e:
            if self._file is not None:
                self._file.close()
            raise self._error(e) from e
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        try:
            self._file.close()
        except OSError as e:
            if exc_type is None:
                raise self._error(e) from e
        return False

    def write_records(self, records):
        try:
            for record in records:
                self._writer.writerow(record.as_csv_row())
                self.rows_written += 1
            self._file.flush()
        except OSError as e:
            raise self._error(e) from e


def _table_row(d_name, d_size, t_name, t_size, status_text):
    d_name = display_name(d_name)
    t_name = display_name(t_name)
    return (f"{d_name[:NAME_COLUMN_WIDTH]:<{NAME_COLUMN_WIDTH}} {format_size_column(d_size)} │ "
            f"{t_name[:NAME_COLUMN_WIDTH]:<{NAME_COLUMN_WIDTH}} {format_size_column(t_size)} │ {status_text}")


def print_directory_table(pair, records):
    """
    Prints the side-by-side table of one directory pair, followed by its
    subtotal line.
    """
    print(BANNER)
    print(f"Comparing: {display_name(pair.label)}")
    print(BANNER)
    print()
    print(f"{'D_FILES':<{NAME_COLUMN_WIDTH}} {'Size':<{SIZE_COLUMN_WIDTH}} │ "
          f"{'T_FILES':<{NAME_COLUMN_WIDTH}} {'Size':<{SIZE_COLUMN_WIDTH}} │ Status")
    print("═" * TABLE_WIDTH)

    for record in records:
        print(_table_row(record.d_name, record.d_size, record.t_name, record.t_size, record.status.display))

    perfect_count = sum(1 for record in records if record.status is Status.PERFECT)
    print()
    print("═" * TABLE_WIDTH)
    print(f"Subdir Summary: Total={len(records)}, Perfect={perfect_count}")
    print()
    print()


def count_statuses(records):
    """
    Returns a dictionary {summary category: count}, in report order, plus the
    grand total under the key 'Total'.
    """
    counts = {"Total": len(records)}
    for category, statuses in SUMMARY_CATEGORIES:
        counts[category] = sum(1 for record in records if record.status in statuses)
    return counts


def _subdir_heading(subdir):
    return "ROOT" if subdir in ("", ".") else display_name(subdir)


def _difference_line(record):
    percent = record.percent_difference
    direction = "larger" if record.t_size > record.d_size else "smaller"
    if percent is None:
        return f"    → Difference: {record.size_difference} B (n/a, D-side size is 0)"
    return f"    → Difference: {record.size_difference} B ({percent:+.1f}% {direction})"


def _print_missing_details(records):
    lines = []
    for record in records:
        if record.status is Status.ONLY_T:
            lines.append(f"  {Status.ONLY_T.display}: {display_name(record.t_name):<50} [{record.t_size:>10} B] in {_subdir_heading(record.subdir)}")
        else:
            lines.append(f"  {Status.ONLY_D.display}: {display_name(record.d_name):<50} [{record.d_size:>10} B] in {_subdir_heading(record.subdir)}")
    for line in sorted(lines):
        print(line)


def _print_pair_details(records, show_hashes, show_difference):
    for record in sorted(records, key=lambda r: (r.subdir, r.d_name, r.t_name)):
        d_suffix = f" (hash: {record.d_hash})" if show_hashes else ""
        t_suffix = f" (hash: {record.t_hash})" if show_hashes else ""
        print(f"  {_subdir_heading(record.subdir)}/")
        print(f"    D: {display_name(record.d_name):<50} [{record.d_size:>12} B]{d_suffix}")
        print(f"    T: {display_name(record.t_name):<50} [{record.t_size:>12} B]{t_suffix}")
        if show_difference:
            print(_difference_line(record))
        print()


def _print_category_details(title, records, output_csv, printer):
    print(BANNER)
    print(f"{title}: {len(records)} files")
    print(BANNER)
    if len(records) <= DETAIL_DISPLAY_CAP:
        printer(records)
    else:
        print(f"  Details available in: {display_name(output_csv)}")
    print()


def print_run_header(dir_d, dir_t, output_csv, recursive, exclude_patterns, hash_algorithm, local_date_str):
    max_label_len = len("Excluding directories matching")

    print(f"{'Date':<{max_label_len}}: {local_date_str}")
    print(f"{'DIR_D':<{max_label_len}}: {display_name(dir_d)}")
    print(f"{'DIR_T':<{max_label_len}}: {display_name(dir_t)}")
    print(f"{'Output CSV':<{max_label_len}}: {display_name(output_csv)}")
    mode = "RECURSIVE (all subdirectories)" if recursive else "ROOT LEVEL ONLY (ignoring subdirectories)"
    print(f"{'Mode':<{max_label_len}}: {mode}")
    print(f"{'Hash algorithm':<{max_label_len}}: {hash_algorithm}")
    if exclude_patterns:
        print(f"{'Excluding directories matching':<{max_label_len}}: {', '.join(exclude_patterns)}")
    print()


def print_final_summary(records, output_csv, processed_count, skipped=None, elapsed_time=None):
    """
    Prints the aggregate statistics of the whole run, then the detail listings
    of the non-PERFECT categories (Missing, Size ok, Close, Different). A
    category with more than DETAIL_DISPLAY_CAP entries is replaced by a pointer
    to the CSV file.
    """
    counts = count_statuses(records)
    max_label_len = len("Same size (diff hash)") + 1

    print()
    print(BANNER)
    print("FINAL SUMMARY")
    print(BANNER)
    print()

    print("Summary Statistics:")
    print(f"  {'Directories compared':<{max_label_len}}: {processed_count}")
    if skipped:
        print(f"  {'Directories excluded':<{max_label_len}}: {skipped.get(SKIPPED_EXCLUDED, 0)}")
        print(f"  {'Directories not in T':<{max_label_len}}: {skipped.get(SKIPPED_MISSING_IN_T, 0)}")
        print(f"  {'Directories w/o files':<{max_label_len}}: {skipped.get(SKIPPED_EMPTY, 0)}")
    print(f"  {'Total files compared':<{max_label_len}}: {counts['Total']}")
    for category, _ in SUMMARY_CATEGORIES:
        print(f"  {category:<{max_label_len}}: {counts[category]}")

    total_d_size = sum(record.d_size for record in records if record.d_size is not None)
    total_t_size = sum(record.t_size for record in records if record.t_size is not None)
    print(f"  {'Total size DIR_D':<{max_label_len}}: {format_size_human_readable(total_d_size)}")
    print(f"  {'Total size DIR_T':<{max_label_len}}: {format_size_human_readable(total_t_size)}")
    print()

    missing = [record for record in records if record.status.is_missing]
    size_ok = [record for record in records if record.status is Status.SIZE_OK]
    close = [record for record in records if record.status is Status.CLOSE]
    different = [record for record in records if record.status is Status.DIFFERENT]

    if missing:
        _print_category_details(
            "MISSING FILES (not found in both directories)", missing, output_csv, _print_missing_details)
    if size_ok:
        _print_category_details(
            "SAME SIZE BUT DIFFERENT HASH FILES", size_ok, output_csv,
            lambda rs: _print_pair_details(rs, show_hashes=True, show_difference=False))
    if close:
        _print_category_details(
            f"CLOSE SIZE FILES (<{CLOSE_PERCENT}% size difference)", close, output_csv,
            lambda rs: _print_pair_details(rs, show_hashes=False, show_difference=True))
    if different:
        _print_category_details(
            f"DIFFERENT SIZED FILES (>={CLOSE_PERCENT}% size difference)", different, output_csv,
            lambda rs: _print_pair_details(rs, show_hashes=True, show_difference=True))

    print(BANNER)
    print("All subdirectories processed.")
    print(f"Output CSV: {display_name(output_csv)}")
    if elapsed_time is not None:
        print(f"Total elapsed wall clock time: {elapsed_time:.2f} seconds")

    return counts
