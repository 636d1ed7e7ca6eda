from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

PROJECT_ROOT = Path(__file__).resolve().parents[1]
BACKEND_ROOT = PROJECT_ROOT / "backend"
sys.path.append(str(BACKEND_ROOT))

from mdp_survey.config import SettingsError, load_settings
from mdp_survey.errors import SurveyError
from mdp_survey.models.evaluation import EvaluationCreate
from mdp_survey.repositories.evaluation_repository import EvaluationRepository
from mdp_survey.services.evaluation_service import EvaluationService


def _read_json(path: Path) -> list[dict[str, Any]]:
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError as exc:
        raise ValueError(f"File not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, list):
        raise ValueError(f"Expected a list in {path}")
    if not all(isinstance(item, dict) for item in data):
        raise ValueError(f"Expected a list of objects in {path}")
    return data


def _require_fields(item: dict[str, Any], fields: list[str], context: str) -> None:
    missing = [field for field in fields if not item.get(field)]
    if missing:
        raise ValueError(f"{context} missing required fields: {', '.join(missing)}")


async def _run(submissions_path: Path, data_file: Path | None, skip_duplicates: bool) -> int:
    submissions = _read_json(submissions_path)
    for index, item in enumerate(submissions, start=1):
        _require_fields(item, ["mdpName", "functionName", "responses"], f"Submission {index}")

    try:
        settings = load_settings()
    except SettingsError as exc:
        raise ValueError(str(exc)) from exc

    repo = EvaluationRepository(data_file or settings.data_file)
    # Seeding never sends mail.
    service = EvaluationService(repo, notify=lambda _record: None)
    created = 0
    skipped = 0
    for item in submissions:
        try:
            record = await service.submit(EvaluationCreate(**item))
        except SurveyError as exc:
            if not skip_duplicates or exc.kind not in {"duplicate_function", "duplicate_rotation"}:
                raise
            skipped += 1
            print(f"Skipped {item['mdpName']} / {item['functionName']}: {exc}", file=sys.stderr)
            continue
        created += 1
        print(f"Stored {record.mdp_name} rotation {record.rotation} overall {record.overall:.2f}")

    print(f"Seed complete: {created} evaluations stored, {skipped} skipped in {repo.path}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed survey evaluations through the submission pipeline")
    parser.add_argument("--submissions", required=True, type=Path)
    parser.add_argument("--data-file", type=Path, default=None)
    parser.add_argument("--skip-duplicates", action="store_true")
    args = parser.parse_args()

    try:
        return asyncio.run(_run(args.submissions, args.data_file, args.skip_duplicates))
    except Exception as exc:
        print(f"Seed failed: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
