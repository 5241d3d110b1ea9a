from __future__ import annotations

from kedro.pipeline import Pipeline, node

from real_income.pipelines.real_income.nodes import (
    build_yearly_rates_table,
    compute_real_income,
    render_real_income_report,
)


def create_pipeline(**kwargs) -> Pipeline:
    return Pipeline(
        [
            node(
                func=compute_real_income,
                inputs="params:real_income",
                outputs="real_income_result",
                name="real_income_compute",
            ),
            node(
                func=render_real_income_report,
                inputs="real_income_result",
                outputs="real_income_report",
                name="real_income_render_report",
            ),
            node(
                func=build_yearly_rates_table,
                inputs="real_income_result",
                outputs="real_income_yearly_rates",
                name="real_income_yearly_rates",
            ),
        ]
    )
