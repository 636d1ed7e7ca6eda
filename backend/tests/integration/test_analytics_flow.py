from __future__ import annotations

import csv
import io

import pytest


async def _submit(client, ratings, mdp_name, function_name, value, manager="Pat Lee"):
    response = await client.post(
        "/api/evaluations",
        json={
            "mdpName": mdp_name,
            "functionName": function_name,
            "manager": manager,
            "responses": ratings(function_name, value),
        },
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_dashboard_reflects_submissions(client, ratings):
    await _submit(client, ratings, "Jane Smith", "Planning", 4)
    await _submit(client, ratings, "John Roe", "Planning", 3, manager="sam kim")
    await _submit(client, ratings, "Jane Smith", "Member's Mark", 5)

    cohort = (await client.get("/api/analytics/cohort")).json()

    assert cohort["stats"]["totalResponses"] == 3
    assert cohort["averages"]["byRotation"] == {"1": 3.5, "2": 5.0}
    assert cohort["topPerformer"]["displayName"] == "Jane S."
    assert cohort["participants"][0]["rotationCount"] == 2
    assert cohort["participants"][0]["functions"] == ["Planning", "Member's Mark"]

    comparison = (
        await client.get("/api/analytics/compare", params={"a": "John Roe", "b": "Jane Smith"})
    ).json()
    assert comparison["overall"]["delta"] == pytest.approx(-2.0)
    assert comparison["overall"]["direction"] == "negative"
    assert comparison["bestRotation"]["b"]["rotation"] == 2

    filtered = (await client.get("/api/analytics/cohort", params={"manager": "Sam Kim"})).json()
    assert [row["mdpName"] for row in filtered["participants"]] == ["John Roe"]


@pytest.mark.asyncio
async def test_deleted_evaluation_leaves_dashboard(client, ratings):
    kept = await _submit(client, ratings, "Jane Smith", "Planning", 4)
    dropped = await _submit(client, ratings, "John Roe", "Replenishment", 2)

    await client.delete(f"/api/evaluations/{dropped['id']}")
    cohort = (await client.get("/api/analytics/cohort")).json()

    assert cohort["stats"]["uniqueParticipants"] == 1
    assert cohort["topPerformer"]["names"] == [kept["mdpName"]]

    export = await client.get("/api/evaluations/export.csv")
    rows = list(csv.reader(io.StringIO(export.text)))
    assert len(rows) == 2
    assert rows[1][0] == "Jane S."
