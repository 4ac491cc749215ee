import json
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

NOT_FOUND_SENTINEL = "Content not found in expected format"


class MarketDetails(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    resolution_criteria: str = Field(
        alias="resolutionCriteria",
        description="Clear, objective and unambiguous resolution criteria",
    )
    description: str = Field(
        description="Long-form description giving traders context on the market"
    )
    edge_cases: str = Field(
        alias="edgeCases",
        description="Ambiguities or scenarios that might affect resolution",
    )

    @field_validator("resolution_criteria", "description", "edge_cases", mode="before")
    @classmethod
    def _coerce_to_text(cls, value: Any) -> Any:
        """
        Models sometimes answer a field with a bullet list or a number instead of
        a string. Lists become one item per line; nested objects become JSON text.
        None is left alone so that it fails validation like a missing key.
        """
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (list, tuple)):
            return "\n".join(
                item
                if isinstance(item, str)
                else json.dumps(item, ensure_ascii=False, default=str)
                for item in value
            )
        return json.dumps(value, ensure_ascii=False, default=str)

    @classmethod
    def not_found(cls) -> "MarketDetails":
        return cls(
            resolution_criteria=NOT_FOUND_SENTINEL,
            description=NOT_FOUND_SENTINEL,
            edge_cases=NOT_FOUND_SENTINEL,
        )

    def missing_fields(self) -> List[str]:
        return [
            name
            for name, value in self.model_dump().items()
            if value == NOT_FOUND_SENTINEL
        ]
