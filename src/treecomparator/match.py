from treecomparator import CLOSE_PERCENT, SIZE_MATCH_TOLERANCE, Status


class MatchRecord:
    """
    One row of the comparison: a matched pair of files, or a file found on one
    side only. Fields of the missing side are empty ("" for names and hashes,
    None for sizes).
    """
    def __init__(self, subdir, d_name="", d_size=None, t_name="", t_size=None,
                 d_hash="", t_hash="", status=None):
        self.subdir = subdir
        self.d_name = d_name
        self.d_size = d_size
        self.t_name = t_name
        self.t_size = t_size
        self.d_hash = d_hash
        self.t_hash = t_hash
        self.status = status

    @property
    def size_difference(self):
        """Absolute byte difference of a matched pair, None if a side is missing."""
        if self.d_size is None or self.t_size is None:
            return None
        return abs(self.t_size - self.d_size)

    @property
    def percent_difference(self):
        """Signed difference in percent of the D-side size (None if undefined)."""
        if self.d_size is None or self.t_size is None or self.d_size == 0:
            return None
        return (self.t_size - self.d_size) * 100.0 / self.d_size

    def as_csv_row(self):
        return [
            self.subdir,
            self.d_name,
            "" if self.d_size is None else self.d_size,
            self.t_name,
            "" if self.t_size is None else self.t_size,
            self.d_hash,
            self.t_hash,
            self.status.csv_token,
        ]

    def __repr__(self):
        return (f"MatchRecord({self.subdir!r}, {self.d_name!r}, {self.t_name!r}, "
                f"{self.status.name if self.status else None})")


def classify(d_size, t_size, d_hash, t_hash):
    """
    Classifies a matched pair of files.

    Equal sizes give PERFECT when the hashes are identical, SIZE_OK otherwise.
    Unequal sizes give CLOSE when the difference is strictly below CLOSE_PERCENT
    percent of the D-side size, DIFFERENT otherwise. A zero D-side size with a
    non-zero T-side size has no meaningful percentage and is DIFFERENT.
    """
    if d_size == t_size:
        # An empty hash (unreadable file) never equals a real one
        if d_hash and d_hash == t_hash:
            return Status.PERFECT
        return Status.SIZE_OK

    if d_size == 0:
        return Status.DIFFERENT

    # Integer form of: abs(diff) * 100 / d_size < CLOSE_PERCENT
    if abs(t_size - d_size) * 100 < CLOSE_PERCENT * d_size:
        return Status.CLOSE
    return Status.DIFFERENT


def _matched_record(subdir, d_entry, t_entry):
    d_hash = d_entry.get_hash()
    t_hash = t_entry.get_hash()
    return MatchRecord(
        subdir,
        d_name=d_entry.name,
        d_size=d_entry.size,
        t_name=t_entry.name,
        t_size=t_entry.size,
        d_hash=d_hash,
        t_hash=t_hash,
        status=classify(d_entry.size, t_entry.size, d_hash, t_hash),
    )


def find_best_size_match(d_entry, t_candidates, consumed):
    """
    Returns the unconsumed T-side entry whose size is closest to `d_entry`,
    considering only differences strictly below SIZE_MATCH_TOLERANCE, or None.

    Candidates are scanned in enumeration order and only a strictly smaller
    difference replaces the current best, so ties go to the earliest candidate.
    """
    best_match = None
    best_match_diff = None
    for t_entry in t_candidates:
        if t_entry.name in consumed:
            continue
        size_diff = abs(d_entry.size - t_entry.size)
        if size_diff >= SIZE_MATCH_TOLERANCE:
            continue
        if best_match_diff is None or size_diff < best_match_diff:
            best_match = t_entry
            best_match_diff = size_diff
    return best_match


def match_directory(pair):
    """
    Matches the files of one DirectoryPair and returns its MatchRecords.

    Three passes, in this order:
      1. Exact name: every D-side file whose name exists on the T-side.
      2. Best size: every remaining D-side file is paired with the closest
         remaining T-side file by size (see find_best_size_match), or recorded
         as ONLY_D.
      3. Leftovers: every T-side file never paired is recorded as ONLY_T.

    Every file of either side ends up in exactly one record. Hashes are only
    computed for files that are part of a pair.
    """
    records = []
    t_by_name = {t_entry.name: t_entry for t_entry in pair.t_entries}
    d_consumed = set()
    t_consumed = set()

    # First pass: exact name
    for d_entry in pair.d_entries:
        t_entry = t_by_name.get(d_entry.name)
        if t_entry is None:
            continue
        records.append(_matched_record(pair.subdir, d_entry, t_entry))
        d_consumed.add(d_entry.name)
        t_consumed.add(t_entry.name)

    # Second pass: closest size within tolerance
    for d_entry in pair.d_entries:
        if d_entry.name in d_consumed:
            continue
        t_entry = find_best_size_match(d_entry, pair.t_entries, t_consumed)
        if t_entry is not None:
            records.append(_matched_record(pair.subdir, d_entry, t_entry))
            t_consumed.add(t_entry.name)
        else:
            records.append(MatchRecord(
                pair.subdir,
                d_name=d_entry.name,
                d_size=d_entry.size,
                status=Status.ONLY_D,
            ))
        d_consumed.add(d_entry.name)

    # Third pass: T-side files nobody claimed
    for t_entry in pair.t_entries:
        if t_entry.name in t_consumed:
            continue
        records.append(MatchRecord(
            pair.subdir,
            t_name=t_entry.name,
            t_size=t_entry.size,
            status=Status.ONLY_T,
        ))

    return records
