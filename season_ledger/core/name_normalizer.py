"""Driver name normalization.

Two forms are derived from any name:
  - canonical form: trimmed, whitespace collapsed, each space-delimited part
    capitalized ("max  VERSTAPPEN" -> "Max Verstappen"). Shown to the user.
  - match key: whitespace collapsed and casefolded. Two names refer to the
    same driver when their match keys are equal.

The name audit groups ledger names by match key and flags near-duplicate
spellings so data-entry slips are visible at load time.
"""

import re
from difflib import SequenceMatcher


_SIMILARITY_THRESHOLD = 0.85


def collapse_whitespace(name: str) -> str:
    return re.sub(r'\s+', ' ', name.strip())


def canonical_name(name: str) -> str:
    """Trim, collapse whitespace and capitalize every space-delimited part."""
    collapsed = collapse_whitespace(name)
    if not collapsed:
        return collapsed
    return ' '.join(part.capitalize() for part in collapsed.split(' '))


def name_key(name: str) -> str:
    """Case- and whitespace-insensitive comparison key."""
    return collapse_whitespace(name).casefold()


def names_match(a: str, b: str) -> bool:
    return name_key(a) == name_key(b)


def audit_names(names) -> dict:
    """Inspect the distinct driver names of a ledger.

    Args:
        names: Iterable of distinct (case-sensitive) driver names.

    Returns:
        Dict with:
          unique_drivers: sorted canonical forms, one per match key
          case_variants: {match_key: [spellings]} where a driver appears
                         under more than one spelling
          potential_duplicates: [(a, b, ratio)] for different drivers whose
                                names are suspiciously similar
    """
    groups: dict[str, list[str]] = {}
    for name in names:
        groups.setdefault(name_key(name), []).append(name)

    case_variants = {k: v for k, v in groups.items() if len(v) > 1}
    unique_drivers = sorted(canonical_name(v[0]) for v in groups.values())

    potential_duplicates = []
    keys = sorted(groups)
    for i in range(len(keys)):
        for j in range(i + 1, len(keys)):
            ratio = SequenceMatcher(None, keys[i], keys[j]).ratio()
            if ratio > _SIMILARITY_THRESHOLD:
                potential_duplicates.append(
                    (groups[keys[i]][0], groups[keys[j]][0], round(ratio, 2)))

    return {
        'unique_drivers': unique_drivers,
        'case_variants': case_variants,
        'potential_duplicates': potential_duplicates,
    }


def print_name_report(report: dict) -> None:
    """Print a human-readable name audit to stdout."""
    drivers = report['unique_drivers']
    variants = report['case_variants']
    dupes = report['potential_duplicates']

    print(f"\nDriver names: {len(drivers)} unique drivers, "
          f"{len(variants)} with spelling variants, "
          f"{len(dupes)} potential duplicates to review")

    if variants:
        print("Spelling variants (counted together in career totals):")
        for key in sorted(variants):
            spellings = ', '.join(f'"{s}"' for s in variants[key])
            print(f"  {spellings}")

    if dupes:
        print(f"Potential duplicates (>{int(_SIMILARITY_THRESHOLD * 100)}% similar):")
        for a, b, ratio in dupes[:15]:
            print(f'  "{a}" / "{b}" ({int(ratio * 100)}% similar)')
        if len(dupes) > 15:
            print(f"  ... and {len(dupes) - 15} more")
