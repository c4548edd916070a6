"""Validation of user-typed menu, season and driver-name tokens.

Domains are computed once from the ledger; the validator never mutates it
and never raises. Every error message names the valid domain so the user
can correct the input.
"""

import re
from dataclasses import dataclass
from typing import Any

from .models import Ledger, MenuAction, NamePolicy
from .name_normalizer import canonical_name, collapse_whitespace, name_key


@dataclass(frozen=True)
class ValidationResult:
    value: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


_INT_RE = re.compile(r'[+-]?\d+', re.ASCII)


def _parse_int(token: str):
    if not isinstance(token, str) or not _INT_RE.fullmatch(token.strip()):
        return None
    return int(token.strip())


class InputValidator:
    """Validate tokens against a ledger's seasons and driver names.

    Args:
        ledger: The loaded Ledger.
        policy: NamePolicy controlling how strictly names are matched.
        menu_size: Number of menu actions (valid options are 1..menu_size).
    """

    def __init__(self, ledger: Ledger, policy: NamePolicy | None = None,
                 menu_size: int = len(MenuAction)):
        self.policy = policy or NamePolicy()
        self.menu_size = menu_size
        self._seasons = frozenset(ledger.seasons())
        self._season_range = (min(self._seasons), max(self._seasons)) if self._seasons else None

        # Name key -> ledger spelling (first seen wins)
        self._names: dict[str, str] = {}
        for name in ledger.all_driver_names():
            self._names.setdefault(name_key(name), name)
        self._example_name = next(iter(self._names.values()), 'First Last')

    def validate_menu_option(self, token: str) -> ValidationResult:
        option = _parse_int(token)
        if option is None or not 1 <= option <= self.menu_size:
            return ValidationResult(error=(
                f"Invalid input '{token}'. "
                f"Please enter a valid number between 1 and {self.menu_size}."))
        return ValidationResult(value=option)

    def validate_season(self, token: str) -> ValidationResult:
        season = _parse_int(token)
        if season is None or season not in self._seasons:
            if self._season_range is None:
                return ValidationResult(error=f"Invalid input '{token}'. The ledger has no seasons.")
            first, last = self._season_range
            return ValidationResult(error=(
                f"Invalid input '{token}'. "
                f"Please enter a valid year between {first} and {last}."))
        return ValidationResult(value=season)

    def validate_name(self, token: str) -> ValidationResult:
        """Match a typed driver name against the ledger.

        Returns the ledger's spelling of the matched driver on success.
        """
        if not isinstance(token, str):
            return self._name_error(token)
        typed = collapse_whitespace(token)
        if not typed:
            return self._name_error(token)

        if not self.policy.accept_any_case and token.strip() != canonical_name(token):
            return self._name_error(token)
        if self.policy.two_part_only and len(typed.split(' ')) != 2:
            return self._name_error(token)

        known = self._names.get(name_key(typed))
        if known is None:
            return self._name_error(token)
        return ValidationResult(value=known)

    def _name_error(self, token) -> ValidationResult:
        shown = canonical_name(token) if isinstance(token, str) else token
        return ValidationResult(error=(
            f"Invalid input '{shown}'. Please enter a driver name from the ledger "
            f"in the format: {canonical_name(self._example_name)}"))
