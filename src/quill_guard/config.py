from __future__ import annotations

from typing import Literal

from pydantic import Field

from data_designer.config.column_configs import SingleColumnConfig


class ContentCheckColumnConfig(SingleColumnConfig):
    """Run the rule-based content heuristics over text columns.

    Each row gets AI-phrasing likelihood, filler-word percentage and a
    repetition-based plagiarism risk, plus a validity flag.

    Attributes:
        target_columns: Columns whose text content will be concatenated and checked.
        max_ai_likelihood: Highest AI likelihood (0-100) still counted as
            ``is_valid=True``. Defaults to 25, the upper edge of the "Low" band.
        include_patterns: Include matched AI phrases and filler words in output.
        include_suggestions: Include repetition and opening-line suggestions.
    """

    target_columns: list[str]
    max_ai_likelihood: float = Field(default=25.0, ge=0, le=100, description="Maximum AI likelihood for is_valid=True")
    include_patterns: bool = Field(default=True, description="Include matched phrases in output")
    include_suggestions: bool = Field(default=True, description="Include advisory suggestions in output")
    column_type: Literal["content-check"] = "content-check"

    @staticmethod
    def get_column_emoji() -> str:
        return "\U0001f50e"

    @property
    def required_columns(self) -> list[str]:
        return self.target_columns

    @property
    def side_effect_columns(self) -> list[str]:
        return []
