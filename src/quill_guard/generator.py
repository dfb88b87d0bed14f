from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from data_designer.engine.column_generators.generators.base import ColumnGeneratorFullColumn

from quill_guard.config import ContentCheckColumnConfig
from quill_guard.core import analyze_content

if TYPE_CHECKING:
    import pandas as pd

logger = logging.getLogger(__name__)


def summarize_row(analysis: dict, config: ContentCheckColumnConfig) -> dict:
    ai = analysis["ai_detection"]
    filler = analysis["filler_analysis"]
    plag = analysis["plagiarism_indicators"]
    output: dict = {
        "is_valid": float(ai["likelihood"]) <= config.max_ai_likelihood and plag["plagiarism_risk"] != "High",
        "ai_likelihood": float(ai["likelihood"]),
        "ai_assessment": ai["assessment"],
        "filler_percentage": float(filler["filler_percentage"]),
        "repetition_percentage": float(plag["repetition_percentage"]),
        "plagiarism_risk": plag["plagiarism_risk"],
    }
    if config.include_patterns:
        output["ai_patterns"] = ai["patterns_found"]
        output["fillers"] = filler["fillers_found"]
    if config.include_suggestions:
        output["suggestions"] = plag["suggestions"]
    return output


class ContentCheckColumnGenerator(ColumnGeneratorFullColumn[ContentCheckColumnConfig]):
    """Column generator that runs the content heuristics engine on each row."""

    def generate(self, data: pd.DataFrame) -> pd.DataFrame:
        logger.info(f"\U0001f50e Checking column {self.config.name!r} for AI phrasing, filler and repetition")
        logger.info(f"   target columns: {self.config.target_columns}")
        logger.info(f"   max_ai_likelihood: {self.config.max_ai_likelihood}")

        results = []
        for _, row in data[self.config.target_columns].iterrows():
            text = " ".join(str(v) for v in row.values if v is not None)
            results.append(summarize_row(analyze_content(text), self.config))

        data = data.copy()
        data[self.config.name] = results
        return data
