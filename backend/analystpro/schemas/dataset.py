# backend/analystpro/schemas/dataset.py
from __future__ import annotations

from typing import Any, Dict, List
from pydantic import BaseModel

from .base import APIResponse


class DatasetEntry(BaseModel):
    id: str
    name: str
    path: str


class DatasetPreviewResponse(APIResponse):
    dataset_id: str
    name: str
    rows: int
    cols: int
    columns: List[str]
    dtypes: Dict[str, str]
    data: List[Dict[str, Any]]


class NumericKPI(BaseModel):
    column: str
    values: List[float]
    count: int
    min: float
    max: float
    avg: float
    median: float
    std_dev: float


class TopValue(BaseModel):
    name: str
    count: int


class CategoricalKPI(BaseModel):
    column: str
    top_values: List[TopValue]
    unique_count: int


class DatasetProfileResponse(APIResponse):
    dataset_id: str
    name: str
    row_count: int
    column_names: List[str]
    date_columns: List[str]
    numeric_kpis: List[NumericKPI]
    categorical_kpis: List[CategoricalKPI]
    raw_rows: List[Dict[str, Any]]
