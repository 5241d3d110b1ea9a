from __future__ import annotations

import logging
from typing import Any, Dict

import pandas as pd
from kedro.framework.hooks import hook_impl

from real_income.domain.service import DataMapperRunResult, SdmxRunResult

log = logging.getLogger(__name__)


class DataObservabilityHooks:
    """Hooks leves de observabilidade: início/fim de node e resumo dos outputs."""

    @hook_impl
    def before_node_run(self, node, inputs: Dict[str, Any], is_async: bool, **kwargs):
        log.info("Starting node: %s", node.name)

    @hook_impl
    def after_node_run(self, node, outputs: Dict[str, Any], inputs: Dict[str, Any], **kwargs):
        log.info("Finished node: %s", node.name)

        for name, out in outputs.items():
            if isinstance(out, pd.DataFrame):
                log.info("Output %s: DataFrame shape=%s", name, out.shape)
                if out.empty:
                    log.warning("Output %s is EMPTY (node=%s)", name, node.name)
            elif isinstance(out, (SdmxRunResult, DataMapperRunResult)):
                log.info(
                    "Output %s: %s %s %s..%s loss_pct=%.2f",
                    name,
                    out.source_label,
                    out.country_code,
                    out.start_label,
                    out.latest_label,
                    out.result.loss_pct,
                )
