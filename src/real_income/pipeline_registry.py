# src/real_income/pipeline_registry.py
from __future__ import annotations

from kedro.pipeline import Pipeline

from real_income.pipelines.real_income.pipeline import create_pipeline as real_income_pipeline


def register_pipelines() -> dict[str, Pipeline]:
    pipelines = {
        "real_income": real_income_pipeline(),
    }
    pipelines["__default__"] = pipelines["real_income"]
    return pipelines
