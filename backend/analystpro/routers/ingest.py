# backend/analystpro/routers/ingest.py
from __future__ import annotations

import math
from typing import Any, Dict, List, Tuple

from fastapi import APIRouter, HTTPException, Query
from loguru import logger

from ..core.config import settings
from ..services import registry
from ..services.profiling import load_dataframe_from_path, build_preview, build_profile, dataframe_to_rows
from ..schemas.base import APIResponse
from ..schemas.dataset import DatasetEntry, DatasetPreviewResponse, DatasetProfileResponse

router = APIRouter(tags=["ingest"])


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------
def _json_safe(obj: Any) -> Any:
    """
    Recursively replace non-finite floats (NaN / inf / -inf) with None
    so that FastAPI's JSON encoder never crashes.
    """
    if isinstance(obj, float):
        if math.isfinite(obj):
            return obj
        return None
    if isinstance(obj, dict):
        return {k: _json_safe(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_json_safe(v) for v in obj]
    return obj


def _get_entry(dataset_id: str) -> Dict[str, Any]:
    ds = registry.get_dataset(dataset_id)
    if not ds:
        raise HTTPException(status_code=404, detail=f"Dataset '{dataset_id}' not found.")
    return ds


def _load_frame(ds: Dict[str, Any]):
    try:
        return load_dataframe_from_path(ds.get("path"))
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Failed to load dataset '{ds.get('id')}'")
        raise HTTPException(status_code=500, detail=f"Failed to load dataset: {e}")


def load_dataset_rows(dataset_id: str) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
    """Registry entry and parsed rows for `dataset_id`, or an HTTPException."""
    ds = _get_entry(dataset_id)
    rows = dataframe_to_rows(_load_frame(ds))
    if not rows:
        raise HTTPException(status_code=400, detail=f"Dataset '{dataset_id}' has no rows.")
    return ds, rows


# -------------------------------------------------------------------
# Routes
# -------------------------------------------------------------------
@router.get("/list")
def list_datasets() -> Any:
    """
    Return datasets currently registered.
    """
    datasets = registry.list_datasets()
    return {"ok": True, "datasets": datasets}


@router.post("/register", response_model=APIResponse)
def register_dataset(entry: DatasetEntry) -> APIResponse:
    """
    Register a file already on disk under `entry.id`.
    """
    registry.upsert_dataset(entry.model_dump())
    logger.info(f"Registered dataset '{entry.id}' -> {entry.path}")
    return APIResponse(ok=True, message=f"Dataset '{entry.id}' registered.")


@router.delete("/{dataset_id}", response_model=APIResponse)
def delete_dataset(dataset_id: str) -> APIResponse:
    if not registry.delete_dataset(dataset_id):
        raise HTTPException(status_code=404, detail=f"Dataset '{dataset_id}' not found.")
    return APIResponse(ok=True, message=f"Dataset '{dataset_id}' removed.")


@router.get("/preview/{dataset_id}", response_model=DatasetPreviewResponse)
def get_preview(dataset_id: str, n: int = Query(10, ge=1)) -> DatasetPreviewResponse:
    """
    Return first N rows for a dataset, with column order and dtype map.
    """
    ds = _get_entry(dataset_id)
    df = _load_frame(ds)

    payload = build_preview(df, n=min(n, settings.preview_max_rows))
    return DatasetPreviewResponse(
        ok=True,
        dataset_id=dataset_id,
        name=ds.get("name", dataset_id),
        rows=payload["rows"],
        cols=payload["cols"],
        columns=payload["columns"],
        dtypes=payload["dtypes"],
        data=_json_safe(payload["data"]),
    )


@router.get("/profile/{dataset_id}", response_model=DatasetProfileResponse)
def get_profile(dataset_id: str) -> DatasetProfileResponse:
    """
    Compute the KPI set for a dataset. Recomputed from the file on every call.
    """
    ds, rows = load_dataset_rows(dataset_id)
    profile = build_profile(rows)
    profile["raw_rows"] = _json_safe(profile["raw_rows"])

    return DatasetProfileResponse(
        ok=True,
        dataset_id=dataset_id,
        name=ds.get("name", dataset_id),
        **profile,
    )
