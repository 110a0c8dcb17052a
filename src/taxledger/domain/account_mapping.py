"""Resolution of logical account keys to chart of accounts codes."""

import logging
from dataclasses import dataclass
from typing import Iterable, Union

from taxledger.domain.entities import Account, AccountMappingEntry
from taxledger.domain.errors import ConfigurationError, ConflictError, unresolved_account_keys

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Found:
    key: str
    code: str


@dataclass(frozen=True)
class Missing:
    key: str


Resolution = Union[Found, Missing]


def _normalize(key: str) -> str:
    return key.strip().upper()


class AccountMapping:
    """Validated, read-only table of logical account keys.

    Keys are compared case-insensitively. Build it once at startup and share
    it; lookups never mutate it.
    """

    def __init__(self, entries: Iterable[AccountMappingEntry] = ()):
        """Build the mapping.

        Args:
            entries: Mapping entries

        Raises:
            ConflictError: If two entries share a logical name
        """
        self._entries: dict[str, AccountMappingEntry] = {}
        for entry in entries:
            normalized = _normalize(entry.logical_name)
            if normalized in self._entries:
                raise ConflictError(f"Duplicate logical account key '{entry.logical_name}'")
            self._entries[normalized] = entry

    @classmethod
    def from_rows(
        cls, rows: Iterable[AccountMappingEntry]
    ) -> tuple["AccountMapping", list[str]]:
        """Build a mapping, collecting duplicates and blanks as errors.

        The first row for a key wins; later duplicates are reported, never
        applied as overwrites.

        Returns:
            Tuple of (mapping, list of error messages)
        """
        accepted: dict[str, AccountMappingEntry] = {}
        errors = []
        for index, entry in enumerate(rows, start=1):
            if not entry.logical_name.strip() or not entry.account_code.strip():
                errors.append(f"Entry {index}: logical name and account code are required")
                continue
            normalized = _normalize(entry.logical_name)
            if normalized in accepted:
                errors.append(f"Entry {index}: Duplicate LogicalName '{entry.logical_name}'")
                continue
            accepted[normalized] = entry
        return cls(accepted.values()), errors

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return _normalize(key) in self._entries

    @property
    def entries(self) -> list[AccountMappingEntry]:
        return list(self._entries.values())

    def resolve(self, key: str) -> Resolution:
        """Resolve a logical key.

        Returns:
            Found with the account code, or Missing. Never raises for an
            unknown key; the caller decides whether that is fatal.
        """
        entry = self._entries.get(_normalize(key))
        if entry is None:
            return Missing(key)
        return Found(key, entry.account_code)

    def require(self, key: str) -> str:
        """Resolve a key, raising ConfigurationError when it is missing."""
        result = self.resolve(key)
        if isinstance(result, Missing):
            raise ConfigurationError(unresolved_account_keys([key]))
        return result.code

    def validate_against(self, accounts: Iterable[Account]) -> list[str]:
        """Check every mapped code against the chart of accounts.

        Returns:
            List of error messages, empty if all codes exist and are active
        """
        by_code = {account.code: account for account in accounts}
        errors = []
        for entry in self._entries.values():
            account = by_code.get(entry.account_code)
            if account is None:
                errors.append(
                    f"Key '{entry.logical_name}' maps to unknown account {entry.account_code}"
                )
            elif account.is_archived:
                errors.append(
                    f"Key '{entry.logical_name}' maps to archived account {entry.account_code}"
                )
        for error in errors:
            logger.warning(error)
        return errors
