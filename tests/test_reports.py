"""Tests for the likes report (JSON and CSV)."""

import pytest

from conftest import bearer
from skyline.schemas.vacation import ReportRow
from skyline.services.reports import CSV_BOM, render_csv


def test_render_csv_quotes_destinations():
    rows = [
        ReportRow(destination="Paris", likes=3),
        ReportRow(destination='São "Tropez"', likes=0),
    ]
    assert render_csv(rows) == CSV_BOM + 'destination,likes\n"Paris",3\n"São ""Tropez""",0'


def test_render_csv_empty_report_is_header_only():
    assert render_csv([]) == CSV_BOM + "destination,likes"


def test_render_csv_keeps_commas_inside_quotes():
    rows = [ReportRow(destination="Rome, Italy", likes=12)]
    assert render_csv(rows).endswith('\n"Rome, Italy",12')


@pytest.mark.asyncio
async def test_report_json(app_client, admin_token, make_vacation):
    await make_vacation("Paris", liked_by=("u1", "u2"))
    await make_vacation("Berlin")

    response = await app_client.get("/api/vacations/report/json", headers=bearer(admin_token))
    assert response.status_code == 200
    assert response.json() == [
        {"destination": "Paris", "likes": 2},
        {"destination": "Berlin", "likes": 0},
    ]


@pytest.mark.asyncio
async def test_report_csv(app_client, admin_token, make_vacation):
    await make_vacation("Paris", liked_by=("u1", "u2", "u3"))
    await make_vacation('São "Tropez"')

    response = await app_client.get("/api/vacations/report/csv", headers=bearer(admin_token))
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert (
        response.headers["content-disposition"]
        == 'attachment; filename="vacations-report.csv"'
    )

    body = response.content.decode("utf-8")
    assert body.startswith("\ufeff")
    assert body[1:] == 'destination,likes\n"Paris",3\n"São ""Tropez""",0'


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/api/vacations/report/json", "/api/vacations/report/csv"])
async def test_reports_are_admin_only(app_client, user_token, path):
    response = await app_client.get(path, headers=bearer(user_token))
    assert response.status_code == 403
    assert response.json() == {"error": "You are not authorized."}
