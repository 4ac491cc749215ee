from datetime import date

from pydantic import BaseModel, Field, field_validator


class MarketRequest(BaseModel):
    question: str = Field(description="Prediction market question, e.g. Will AI achieve AGI by 2030?")
    resolution_date: date = Field(description="Date on which the market resolves")

    @field_validator("question")
    @classmethod
    def _question_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("question must not be blank")
        return value
