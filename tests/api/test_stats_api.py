"""API tests for GET /api/v1/stats and GET /api/v1/stats/top-defect-lines."""

from typing import Any

from httpx import AsyncClient

BATCH_URL = "/api/v1/events/batch"
WINDOW = {"start": "2026-01-15T10:00:00Z", "end": "2026-01-15T11:00:00Z"}
RANGE = {"factoryId": "F01", "from": "2026-01-15T10:00:00Z", "to": "2026-01-15T11:00:00Z"}


def _raw(event_id: str, minute: int = 0, **overrides: Any) -> dict[str, Any]:
    raw: dict[str, Any] = {
        "eventId": event_id,
        "eventTime": f"2026-01-15T10:{minute:02d}:00.000Z",
        "machineId": "M-001",
        "lineId": "LINE-A",
        "factoryId": "F01",
        "durationMs": 1000,
        "defectCount": 0,
    }
    raw.update(overrides)
    return raw


async def test_machine_stats(client: AsyncClient) -> None:
    await client.post(
        BATCH_URL,
        json=[
            _raw("E-1", 0, defectCount=5),
            _raw("E-2", 30, defectCount=-1),
            _raw("E-3", 59, defectCount=3),
            {**_raw("E-4", 0, defectCount=7), "eventTime": "2026-01-15T11:00:00Z"},
        ],
    )

    response = await client.get("/api/v1/stats", params={"machineId": "M-001", **WINDOW})

    assert response.status_code == 200
    data = response.json()
    assert data["machineId"] == "M-001"
    assert data["eventsCount"] == 3
    assert data["defectsCount"] == 8
    assert data["avgDefectRate"] == 8.0
    assert data["status"] == "Warning"
    assert data["start"].startswith("2026-01-15T10:00:00")
    assert data["end"].startswith("2026-01-15T11:00:00")


async def test_machine_stats_threshold_two_is_warning(client: AsyncClient) -> None:
    await client.post(BATCH_URL, json=[_raw("E-1", 5, defectCount=1), _raw("E-2", 6, defectCount=1)])

    data = (await client.get("/api/v1/stats", params={"machineId": "M-001", **WINDOW})).json()

    assert data["avgDefectRate"] == 2.0
    assert data["status"] == "Warning"


async def test_machine_stats_healthy(client: AsyncClient) -> None:
    await client.post(BATCH_URL, json=[_raw("E-1", 5, defectCount=1)])

    data = (await client.get("/api/v1/stats", params={"machineId": "M-001", **WINDOW})).json()

    assert data["status"] == "Healthy"


async def test_machine_stats_unknown_machine(client: AsyncClient) -> None:
    response = await client.get("/api/v1/stats", params={"machineId": "M-404", **WINDOW})

    assert response.status_code == 200
    data = response.json()
    assert (data["eventsCount"], data["defectsCount"], data["avgDefectRate"]) == (0, 0, 0.0)


async def test_machine_stats_requires_params(client: AsyncClient) -> None:
    missing = await client.get("/api/v1/stats", params=WINDOW)
    assert missing.status_code == 422

    bad_time = await client.get(
        "/api/v1/stats", params={"machineId": "M-001", "start": "yesterday", "end": WINDOW["end"]}
    )
    assert bad_time.status_code == 422


async def test_top_defect_lines(client: AsyncClient) -> None:
    await client.post(
        BATCH_URL,
        json=[
            _raw("E-1", lineId="LINE-A", defectCount=10),
            _raw("E-2", lineId="LINE-A", defectCount=8),
            _raw("E-3", lineId="LINE-B", defectCount=5),
            _raw("E-4", lineId="LINE-C", defectCount=5),
            _raw("E-5", lineId=None, defectCount=50),
        ],
    )

    response = await client.get("/api/v1/stats/top-defect-lines", params=RANGE)

    assert response.status_code == 200
    assert response.json() == [
        {"lineId": "LINE-A", "eventCount": 2, "totalDefects": 18, "defectsPercent": 900.0},
        {"lineId": "LINE-B", "eventCount": 1, "totalDefects": 5, "defectsPercent": 500.0},
        {"lineId": "LINE-C", "eventCount": 1, "totalDefects": 5, "defectsPercent": 500.0},
    ]


async def test_top_defect_lines_limit(client: AsyncClient) -> None:
    await client.post(
        BATCH_URL,
        json=[_raw(f"E-{i}", lineId=f"LINE-{i:02d}", defectCount=i) for i in range(15)],
    )

    default = await client.get("/api/v1/stats/top-defect-lines", params=RANGE)
    limited = await client.get("/api/v1/stats/top-defect-lines", params={**RANGE, "limit": 1})

    assert len(default.json()) == 10
    assert [line["lineId"] for line in limited.json()] == ["LINE-14"]


async def test_top_defect_lines_invalid_limit(client: AsyncClient) -> None:
    response = await client.get("/api/v1/stats/top-defect-lines", params={**RANGE, "limit": 0})

    assert response.status_code == 422


async def test_top_defect_lines_empty_factory(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/stats/top-defect-lines", params={**RANGE, "factoryId": "F-404"}
    )

    assert response.status_code == 200
    assert response.json() == []
