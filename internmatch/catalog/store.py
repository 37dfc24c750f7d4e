"""Catalog store: canonical internship records with filter and lookup queries.

Rows may use either the public dataset column names ("Job Title",
"Numer of Openings", ...) or the canonical snake_case names. All
normalization happens here, once, when the catalog is built.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any
from urllib.parse import quote

import yaml
from pydantic import ValidationError

from internmatch.catalog.sample_data import SAMPLE_ROWS
from internmatch.core.keywords import skills_from_title
from internmatch.core.schemas import CatalogStats, Internship, LegacyInternship

logger = logging.getLogger(__name__)

# Dataset column → canonical field.
COLUMN_ALIASES: dict[str, str] = {
    "Job Title": "title",
    "Job Type": "job_type",
    "Company Name": "company",
    "Posted Date": "posted_date",
    "Cities": "city",
    "States": "state",
    "Stipend": "stipend",
    "Start Date": "start_date",
    "Duration": "duration",
    "Numer of Openings": "total_openings",
    "Number of Openings": "total_openings",
    "Late date to apply": "apply_by",
    "opportunities": "total_openings",
}

_INT_FIELDS = ("total_openings", "remaining_slots")
_TEXT_FIELDS = tuple(name for name, f in Internship.model_fields.items() if f.annotation is str)
_LEADING_INT = re.compile(r"^\s*(\d+)")
_STIPEND_AMOUNT = re.compile(r"(\d+)")
_LOGO_URL = "https://via.placeholder.com/100x100/2d4f93/ffffff?text={}"


def parse_int(value: object) -> int | None:
    """Parse a leading integer from a dataset cell, or None if there is none."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if value is None:
        return None
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def normalize_record(row: Mapping[str, Any], index: int) -> Internship:
    """Build a canonical Internship from a raw row.

    Args:
        row: Raw row mapping (dataset columns or canonical names).
        index: 1-based row position, used for the default id.

    Raises:
        ValueError: If the row is not a mapping or fails validation.
    """
    if not isinstance(row, Mapping):
        msg = f"Invalid internship row {index}: expected a mapping, got {type(row).__name__}"
        raise ValueError(msg)

    data: dict[str, Any] = {}
    for key, value in row.items():
        field = COLUMN_ALIASES.get(key, key)
        data[field] = value.strip() if isinstance(value, str) else value

    for field in _INT_FIELDS:
        if field in data:
            data[field] = parse_int(data[field])

    # YAML reads bare numbers (pin codes, stipend amounts) as ints
    for field in _TEXT_FIELDS:
        if field in data:
            value = data[field]
            data[field] = "" if value is None else str(value).strip()

    if data.get("id") in (None, ""):
        data["id"] = f"AICTE_{index}"
    else:
        data["id"] = str(data["id"])

    try:
        return Internship.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid internship row {index}: {e}"
        raise ValueError(msg) from e


def _is_full_time(job_type: str) -> bool:
    return job_type.lower().replace("-", " ").strip() == "full time"


class CatalogStore:
    """Read-only collection of internships.

    Usage::

        store = CatalogStore.from_yaml("data/internships.yaml")
        candidates = store.filter(location="Bangalore", state="Karnataka")
    """

    def __init__(self, internships: Iterable[Internship]) -> None:
        self._internships: tuple[Internship, ...] = tuple(internships)
        self._by_id = {i.id: i for i in self._internships}

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Any]]) -> "CatalogStore":
        """Normalize raw rows into a catalog."""
        internships = [normalize_record(row, i) for i, row in enumerate(rows, start=1)]
        logger.info("Loaded %d internships", len(internships))
        return cls(internships)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "CatalogStore":
        """Load rows from a YAML file (a list, or a mapping with an ``internships`` list)."""
        path = Path(path)
        if not path.exists():
            msg = f"Catalog file not found: {path}"
            raise FileNotFoundError(msg)
        raw = yaml.safe_load(path.read_text()) or []
        if isinstance(raw, Mapping):
            raw = raw.get("internships") or []
        if not isinstance(raw, list):
            msg = f"Catalog file {path} must contain a list of internships"
            raise ValueError(msg)
        return cls.from_rows(raw)

    @classmethod
    def sample(cls) -> "CatalogStore":
        """Catalog backed by the built-in sample rows."""
        return cls.from_rows(SAMPLE_ROWS)

    def __len__(self) -> int:
        return len(self._internships)

    @property
    def internships(self) -> tuple[Internship, ...]:
        return self._internships

    def get(self, internship_id: str) -> Internship | None:
        return self._by_id.get(internship_id)

    def filter(
        self,
        *,
        location: str | None = None,
        state: str | None = None,
        paid: bool | None = None,
        full_time: bool | None = None,
        search: str | None = None,
        has_capacity: bool = False,
    ) -> list[Internship]:
        """Return internships matching every given criterion, in catalog order.

        ``location`` and ``search`` are case-insensitive substring matches;
        ``state`` is a case-insensitive exact match. ``has_capacity`` drops
        internships whose known remaining slots are zero.
        """
        result = list(self._internships)

        if location:
            needle = location.lower()
            result = [i for i in result if needle in i.location.lower()]

        if state:
            wanted = state.lower()
            result = [i for i in result if i.state.lower() == wanted]

        if paid is not None:
            result = [i for i in result if i.is_paid is paid]

        if full_time is not None:
            result = [i for i in result if _is_full_time(i.job_type) is full_time]

        if search:
            term = search.lower()
            result = [
                i for i in result
                if term in i.title.lower()
                or term in i.company.lower()
                or term in i.location.lower()
            ]

        if has_capacity:
            result = [i for i in result if i.remaining_slots is None or i.remaining_slots > 0]

        logger.debug("Catalog filter matched %d of %d", len(result), len(self._internships))
        return result

    def sample_fallback_data(self) -> list[Internship]:
        """Fixed sample records, independent of what the catalog holds."""
        return [normalize_record(row, i) for i, row in enumerate(SAMPLE_ROWS, start=1)]

    def unique_states(self) -> list[str]:
        return sorted({i.state for i in self._internships if i.state})

    def unique_cities(self) -> list[str]:
        return sorted({i.city for i in self._internships if i.city})

    def unique_companies(self) -> list[str]:
        return sorted({i.company for i in self._internships if i.company})

    def stats(self) -> CatalogStats:
        total = len(self._internships)
        paid = sum(1 for i in self._internships if i.is_paid)
        full_time = sum(1 for i in self._internships if _is_full_time(i.job_type))
        return CatalogStats(
            total=total,
            paid=paid,
            unpaid=total - paid,
            full_time=full_time,
            part_time=total - full_time,
            states=len(self.unique_states()),
            companies=len(self.unique_companies()),
            avg_stipend=self._average_stipend(),
        )

    def _average_stipend(self) -> int:
        amounts = []
        for internship in self._internships:
            if not internship.is_paid:
                continue
            match = _STIPEND_AMOUNT.search(internship.stipend.replace(",", ""))
            if match:
                amounts.append(int(match.group(1)))
        if not amounts:
            return 0
        return round(sum(amounts) / len(amounts))


def to_legacy(internship: Internship) -> LegacyInternship:
    """Project an internship into the legacy portal record shape."""
    return LegacyInternship(
        id=internship.id,
        role=internship.title,
        company=internship.company,
        location=internship.location,
        state=internship.state,
        district=internship.city,
        sector=internship.display_sector,
        area=internship.title,
        opportunities=internship.total_openings or 1,
        description=f"{internship.title} position at {internship.company}",
        skills=skills_from_title(internship.title),
        salary=internship.stipend,
        duration=internship.duration,
        type="paid" if internship.is_paid else "unpaid",
        company_logo=_LOGO_URL.format(quote(internship.company[:3])),
    )
