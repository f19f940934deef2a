"""Script variants, pass identifiers and mapping tables.

Core concept:
    - Every conversion goes through the standard (OpenCC) intermediate form
    - Each variant has one pass into standard and one pass out of it
    - A route is always exactly two passes, even for a no-op conversion

Example:
    CN -> TW  ==  FromChina (simplified -> standard)
                  then ToTaiwan (standard -> Taiwan variants and phrases)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Script(Enum):
    """Source or destination script variant."""

    ST = "st"   # OpenCC standard traditional
    CN = "cn"   # Simplified, Mainland China
    TW = "tw"   # Traditional, Taiwan
    HK = "hk"   # Traditional, Hong Kong

    @classmethod
    def from_code(cls, code: str) -> "Script":
        """Get Script from a short code such as "cn"."""
        try:
            return cls(code.strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown script: {code}. Available: {[s.value for s in cls]}"
            ) from None


class PassId(Enum):
    """Identifier of one compiled pass dictionary."""

    FROM_STANDARD = "FromStandard"
    FROM_CHINA = "FromChina"
    FROM_TAIWAN = "FromTaiwan"
    FROM_HONG_KONG = "FromHongKong"
    TO_STANDARD = "ToStandard"
    TO_CHINA = "ToChina"
    TO_TAIWAN = "ToTaiwan"
    TO_HONG_KONG = "ToHongKong"


# Pass converting a variant into the standard form. The "From" names follow
# the direction of the source text: FromChina reads Mainland text.
TO_STANDARD: dict[Script, PassId] = {
    Script.ST: PassId.FROM_STANDARD,
    Script.CN: PassId.FROM_CHINA,
    Script.TW: PassId.FROM_TAIWAN,
    Script.HK: PassId.FROM_HONG_KONG,
}

# Pass converting the standard form into a variant.
FROM_STANDARD: dict[Script, PassId] = {
    Script.ST: PassId.TO_STANDARD,
    Script.CN: PassId.TO_CHINA,
    Script.TW: PassId.TO_TAIWAN,
    Script.HK: PassId.TO_HONG_KONG,
}


def _check_routes() -> None:
    """Every script needs both passes, and every pass is used exactly once."""
    for table_name, table in (("TO_STANDARD", TO_STANDARD), ("FROM_STANDARD", FROM_STANDARD)):
        missing = set(Script) - set(table)
        if missing:
            raise AssertionError(
                f"{table_name} has no pass for {sorted(s.name for s in missing)}"
            )
    used = list(TO_STANDARD.values()) + list(FROM_STANDARD.values())
    if sorted(p.value for p in used) != sorted(p.value for p in PassId):
        raise AssertionError("route tables must use every PassId exactly once")


_check_routes()


def resolve(source: Script, target: Script) -> tuple[PassId, PassId]:
    """Get the two passes converting `source` text into `target` text."""
    return TO_STANDARD[source], FROM_STANDARD[target]


@dataclass
class MappingTable:
    """A parsed (or reversed) mapping table, key -> replacement."""

    name: str                               # e.g. "STCharacters", "!TWVariants"
    entries: dict[str, str] = field(default_factory=dict)
    source_path: str = ""
    total_raw: int = 0                      # Lines read from the source file
    total_duplicates: int = 0               # Keys overwritten within this table
    reversed_from: Optional[str] = None     # Forward table name for reversals

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return (
            f"MappingTable({self.name}: "
            f"{len(self.entries)}/{self.total_raw} entries, "
            f"{self.total_duplicates} dupes)"
        )
