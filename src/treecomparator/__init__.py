from enum import Enum


# --- Constants for matching and classification ---
SIZE_MATCH_TOLERANCE = 5 * 1024 * 1024 # Best-size candidates must differ by strictly less than this (bytes)
CLOSE_PERCENT = 5 # Size difference (relative to the D-side size) below which a pair is CLOSE
DETAIL_DISPLAY_CAP = 15 # Categories with more entries are not listed in the final summary
NAME_COLUMN_WIDTH = 40
SIZE_COLUMN_WIDTH = 8
TABLE_WIDTH = 130

DEFAULT_OUTPUT_CSV = "output.csv"
DEFAULT_HASH_ALGORITHM = "md5"
HASH_ALGORITHMS = ("md5", "sha256")

CSV_HEADER = ["subdir", "d_file", "d_size", "t_file", "t_size", "d_hash", "t_hash", "status"]


class Status(Enum):
    """
    Closed set of classifications for a MatchRecord, in evaluation order.

    Each member carries two independent renderings: `display` for the terminal
    tables and `csv_token` for the CSV file.
    """
    PERFECT = ("✓ PERFECT", "PERFECT")
    SIZE_OK = ("~ SIZE_OK", "SIZE_OK")
    CLOSE = ("≈ CLOSE", "CLOSE")
    DIFFERENT = ("✗ DIFFERENT", "DIFFERENT")
    ONLY_D = ("← ONLY_D", "MISSING")
    ONLY_T = ("→ ONLY_T", "MISSING")

    def __init__(self, display, csv_token):
        self.display = display
        self.csv_token = csv_token

    @property
    def is_missing(self):
        return self in (Status.ONLY_D, Status.ONLY_T)


# --- Summary categories, in the order they are reported ---
SUMMARY_PERFECT = "Perfect matches"
SUMMARY_SIZE_OK = "Same size (diff hash)"
SUMMARY_CLOSE = f"Close size (<{CLOSE_PERCENT}% diff)"
SUMMARY_DIFFERENT = f"Different size (>={CLOSE_PERCENT}%)"
SUMMARY_MISSING = "Missing files"

SUMMARY_CATEGORIES = [
    (SUMMARY_PERFECT, (Status.PERFECT,)),
    (SUMMARY_SIZE_OK, (Status.SIZE_OK,)),
    (SUMMARY_CLOSE, (Status.CLOSE,)),
    (SUMMARY_DIFFERENT, (Status.DIFFERENT,)),
    (SUMMARY_MISSING, (Status.ONLY_D, Status.ONLY_T)),
]
