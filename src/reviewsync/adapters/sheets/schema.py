"""Pydantic models for the Google Sheets values API."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class SheetsBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ValueInputOption(StrEnum):
    RAW = "RAW"
    USER_ENTERED = "USER_ENTERED"


class InsertDataOption(StrEnum):
    OVERWRITE = "OVERWRITE"
    INSERT_ROWS = "INSERT_ROWS"


class ValueRange(SheetsBaseModel):
    range: str
    major_dimension: str | None = Field(default=None, alias="majorDimension")
    # absent when the range is empty
    values: list[list[str]] = Field(default_factory=list[list[str]])


class UpdateValuesResponse(SheetsBaseModel):
    spreadsheet_id: str | None = Field(default=None, alias="spreadsheetId")
    updated_range: str | None = Field(default=None, alias="updatedRange")
    updated_rows: int = Field(default=0, alias="updatedRows")
    updated_cells: int = Field(default=0, alias="updatedCells")


class AppendValuesResponse(SheetsBaseModel):
    spreadsheet_id: str = Field(alias="spreadsheetId")
    table_range: str | None = Field(default=None, alias="tableRange")
    updates: UpdateValuesResponse


class ErrorBody(SheetsBaseModel):
    code: int | None = None
    message: str | None = None
    status: str | None = None


class ErrorResponse(SheetsBaseModel):
    error: ErrorBody
