import re
import sys
import math
import time
import hashlib
import datetime

from treecomparator import SIZE_COLUMN_WIDTH

def calculate_hash(file_path, hash_algorithm='md5', block_size=65536):
    """
    Calculates the hash of a file using the specified algorithm (md5 or sha256).

    An unreadable file gives an empty string instead of raising, so a pair that
    contains it can never be classified PERFECT.
    """
    if hash_algorithm == 'md5':
        hasher = hashlib.md5()
    elif hash_algorithm == 'sha256':
        hasher = hashlib.sha256()
    else:
        raise ValueError(f"Unsupported hash algorithm: {hash_algorithm}")

    try:
        with open(file_path, 'rb') as f:
            for block in iter(lambda: f.read(block_size), b''):
                hasher.update(block)
        return hasher.hexdigest()
    except OSError as e:
        print(f"Warning: failure to calculate hash of '{display_name(file_path)}': {e}", file=sys.stderr)
        return ""


def format_size_column(size_in_bytes):
    """
    Abbreviates a size for the side-by-side tables: bytes below 1 KiB, whole
    KiB below 1 MiB, whole MiB otherwise (integer truncation).

    # format_size_column(1000)      ->  '   1000B'
    # format_size_column(2048)      ->  '      2K'
    # format_size_column(5242880)   ->  '      5M'
    # format_size_column(None)      ->  '       -'
    """
    if size_in_bytes is None:
        return "-".rjust(SIZE_COLUMN_WIDTH)
    if size_in_bytes < 1024:
        text = f"{size_in_bytes}B"
    elif size_in_bytes < 1048576:
        text = f"{size_in_bytes // 1024}K"
    else:
        text = f"{size_in_bytes // 1048576}M"
    return text.rjust(SIZE_COLUMN_WIDTH)


def format_size_human_readable(size_in_bytes):
    """
    Converts a size in bytes into a human readable string (Bytes, KB, MB, GB, ...).

    # format_size_human_readable(0)            -> 0 Bytes
    # format_size_human_readable(1500)         -> 1.46 KB
    # format_size_human_readable(5 * 1024**3)  -> 5.0 GB
    """
    if size_in_bytes < 0:
        return "-" + format_size_human_readable(-size_in_bytes)
    if size_in_bytes == 0:
        return "0 Bytes"

    units = ['Bytes', 'KB', 'MB', 'GB', 'TB', 'PB', 'EB', 'ZB', 'YB']

    # log base 1024 picks the unit: 1023 -> Bytes, 1024 -> KB
    i = int(math.floor(math.log(size_in_bytes, 1024)))
    if i >= len(units):
        i = len(units) - 1

    formatted_value = round(size_in_bytes / 1024 ** i, 2)
    return f"{formatted_value} {units[i]}"


def display_name(name):
    """
    Makes a file or directory name printable on a strict UTF-8 terminal.

    Names whose bytes are not valid UTF-8 reach Python with surrogate escapes
    (e.g. '\\udcff'); those bytes are shown as U+FFFD instead of raising
    UnicodeEncodeError. The CSV keeps the original bytes.
    """
    return str(name).encode('utf-8', 'surrogateescape').decode('utf-8', 'replace')


_DIGIT_RUNS = re.compile(r'(\d+)')

def version_sort_key(name):
    """
    Sort key that orders embedded numbers numerically, like `sort -V`:
    'f2.nc' sorts before 'f10.nc'.
    """
    key = []
    for part in _DIGIT_RUNS.split(name):
        if part.isdigit():
            key.append((1, int(part), part))
        else:
            key.append((0, 0, part))
    return key


def get_formatted_dates():
    """
    Generates and returns formatted local and UTC date strings.

    Returns:
        tuple: A tuple containing (local_date_str, utc_date_str).
    """
    now_local = datetime.datetime.now()
    now_utc = datetime.datetime.now(datetime.timezone.utc)

    utc_offset_seconds = time.altzone if time.daylight else time.timezone
    utc_offset_hours = -utc_offset_seconds / 3600.0

    if utc_offset_hours == int(utc_offset_hours):
        local_offset_str = f"UTC{'+' if utc_offset_hours >= 0 else ''}{int(utc_offset_hours)}"
    else:
        sign = '+' if utc_offset_hours >= 0 else '-'
        hours = int(abs(utc_offset_hours))
        minutes = int((abs(utc_offset_hours) - hours) * 60)
        local_offset_str = f"UTC{sign}{hours:02d}:{minutes:02d}"

    local_date_str = now_local.strftime(f"%a %b %d %H:%M:%S {local_offset_str} %Y")
    utc_date_str = now_utc.strftime("%a %b %d %H:%M:%S UTC %Y")

    return local_date_str, utc_date_str
