import os
import sys

from treecomparator.arguments import get_tar_log_arguments

HTAR_ADD_PREFIX = "HTAR: a"


ANSI_CODES = {
    "RESET": "\033[0m",
    "BOLD": "\033[1m",
    "RED": "\033[91m",
    "GREEN": "\033[92m",
    "BLUE": "\033[94m",
    "MAGENTA": "\033[95m",
    "CYAN": "\033[96m",
}


class Colors:
    """ANSI color codes for terminal output, all empty strings when disabled."""
    def __init__(self, enabled=True):
        self.enabled = enabled
        for name, code in ANSI_CODES.items():
            setattr(self, name, code if enabled else "")


def parse_tar_log(log_file):
    """
    Extracts the set of archived paths from an HTAR log file.

    Only lines of the form "HTAR: a   <path> ..." are used; the path is the
    third whitespace separated field.
    """
    files = set()
    with open(log_file, 'r', encoding='utf-8', errors='replace') as f:
        for line in f:
            line = line.strip()
            if not line.startswith(HTAR_ADD_PREFIX):
                continue
            parts = line.split(None, 2) # ['HTAR:', 'a', '<path> ...']
            # "HTAR: archive ..." also starts with the prefix
            if len(parts) >= 3 and parts[1] == "a":
                files.add(parts[2])
    return files


def compare_file_lists(files1, files2, label1, label2, colors=None):
    """
    Compares two sets of archived paths.

    Returns:
        tuple: (are_identical, report_text)
    """
    c = colors or Colors(enabled=False)
    only_in_1 = files1 - files2
    only_in_2 = files2 - files1
    common = files1 & files2

    report = []
    report.append(f"{c.CYAN}{c.BOLD}{'=' * 80}{c.RESET}")
    report.append(f"{c.CYAN}{c.BOLD}TAR FILE COMPARISON REPORT{c.RESET}")
    report.append(f"{c.CYAN}{c.BOLD}{'=' * 80}{c.RESET}")
    report.append(f"\n{c.BLUE}{label1}:{c.RESET}")
    report.append(f"  Total files: {c.BOLD}{len(files1)}{c.RESET}")
    report.append(f"\n{c.BLUE}{label2}:{c.RESET}")
    report.append(f"  Total files: {c.BOLD}{len(files2)}{c.RESET}")
    report.append(f"\n{c.MAGENTA}Common files: {c.BOLD}{len(common)}{c.RESET}")

    if not only_in_1 and not only_in_2:
        report.append(f"\n{c.GREEN}{c.BOLD}✓ SUCCESS: Both tar logs contain identical file sets!{c.RESET}")
        report.append(f"{c.CYAN}{'=' * 80}{c.RESET}")
        return True, "\n".join(report)

    report.append(f"\n{c.RED}{c.BOLD}✗ FAILURE: File sets differ!{c.RESET}")

    if only_in_1:
        report.append(f"\n{c.RED}Files only in {label1} ({len(only_in_1)} files):{c.RESET}")
        report.append(f"{c.RED}{'-' * 80}{c.RESET}")
        for path in sorted(only_in_1):
            report.append(f"{c.RED}  - {path}{c.RESET}")

    if only_in_2:
        report.append(f"\n{c.GREEN}Files only in {label2} ({len(only_in_2)} files):{c.RESET}")
        report.append(f"{c.GREEN}{'-' * 80}{c.RESET}")
        for path in sorted(only_in_2):
            report.append(f"{c.GREEN}  + {path}{c.RESET}")

    report.append(f"{c.CYAN}{'=' * 80}{c.RESET}")
    return False, "\n".join(report)


def main(argv=None):
    args = get_tar_log_arguments(argv)
    c = Colors(enabled=not args.no_color and sys.stdout.isatty())

    for log_file in (args.log1, args.log2):
        if not os.path.isfile(log_file):
            print(f"{c.RED}ERROR: Log file not found: {log_file}{c.RESET}", file=sys.stderr)
            return 1

    print(f"{c.CYAN}Parsing {args.log1}...{c.RESET}")
    files1 = parse_tar_log(args.log1)
    print(f"{c.CYAN}Parsing {args.log2}...{c.RESET}")
    files2 = parse_tar_log(args.log2)

    # The directory of each log names the run it belongs to
    label1 = os.path.dirname(os.path.abspath(args.log1))
    label2 = os.path.dirname(os.path.abspath(args.log2))

    identical, report = compare_file_lists(files1, files2, label1, label2, c)

    if args.quiet:
        if identical:
            print(f"{c.GREEN}✓ SUCCESS: Tar logs contain identical file sets{c.RESET}")
        else:
            print(f"{c.RED}✗ FAILURE: Tar logs differ{c.RESET}")
            print(f"  Files only in {label1}: {c.RED}{len(files1 - files2)}{c.RESET}")
            print(f"  Files only in {label2}: {c.GREEN}{len(files2 - files1)}{c.RESET}")
    else:
        print("\n" + report)

    if args.verbose and not args.quiet:
        common = files1 & files2
        print(f"\n{c.MAGENTA}Common files ({len(common)}):{c.RESET}")
        print(f"{c.CYAN}{'-' * 80}{c.RESET}")
        for path in sorted(common):
            print(f"  {path}")

    return 0 if identical else 1


if __name__ == "__main__":
    sys.exit(main())
