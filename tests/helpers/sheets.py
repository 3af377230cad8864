"""In-memory spreadsheet served over the Sheets values API."""

from __future__ import annotations

import json

import httpx


class FakeSpreadsheet:
    """Serves the values API over in-memory sheets."""

    def __init__(self, sheets: dict[str, list[list[str]]]) -> None:
        self.sheets = sheets
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        _, _, target = request.url.path.partition("/values/")
        if request.method == "POST":
            sheet = target.removesuffix(":append")
            rows = json.loads(request.content)["values"]
            self.sheets.setdefault(sheet, []).extend(rows)
            return httpx.Response(
                200,
                json={
                    "spreadsheetId": "sheet-1",
                    "updates": {"updatedRange": f"{sheet}!A1", "updatedRows": len(rows)},
                },
            )
        values = self.sheets.get(target)
        if values is None:
            return httpx.Response(
                400,
                json={"error": {"code": 400, "message": f"Unable to parse range: {target}"}},
            )
        body: dict[str, object] = {"range": f"{target}!A1:Z100", "majorDimension": "ROWS"}
        if values:
            body["values"] = values
        return httpx.Response(200, json=body)
