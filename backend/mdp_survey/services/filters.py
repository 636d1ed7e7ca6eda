from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from mdp_survey.repositories.evaluation_repository import EvaluationRecord
from mdp_survey.services.formatting import normalize_manager


@dataclass(frozen=True)
class EvaluationFilter:
    function_name: str | None = None
    manager: str | None = None
    rotation: int | None = None
    search: str | None = None
    # "name" matches the dashboard search box, "all" the admin one.
    search_scope: str = "name"

    def matches(self, record: EvaluationRecord) -> bool:
        if self.function_name and record.function_name != self.function_name:
            return False
        if self.manager and normalize_manager(record.manager) != normalize_manager(self.manager):
            return False
        if self.rotation is not None and record.rotation != self.rotation:
            return False
        if self.search:
            needle = self.search.lower()
            haystack = [record.mdp_name]
            if self.search_scope == "all":
                haystack += [record.manager, record.function_name]
            if not any(needle in value.lower() for value in haystack):
                return False
        return True

    def apply(self, records: Iterable[EvaluationRecord]) -> list[EvaluationRecord]:
        return [record for record in records if self.matches(record)]


def filter_options(records: Iterable[EvaluationRecord]) -> dict[str, list]:
    rows = list(records)
    return {
        "mdpNames": sorted({item.mdp_name for item in rows}),
        "functions": sorted({item.function_name for item in rows}),
        "managers": sorted({normalize_manager(item.manager) for item in rows}),
        "rotations": sorted({item.rotation for item in rows}),
    }
