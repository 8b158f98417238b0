from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class LottoResultModel(CamelModel):
    date: str
    numbers: List[int] = Field(..., description="5 main numbers in draw order.")
    star_ball: int = Field(..., alias="starBall", ge=1, le=10)
    all_star_bonus: int = Field(1, alias="allStarBonus", ge=1)
    winners: int = Field(0, ge=0)
    jackpot: str
    is_live: bool = Field(..., alias="isLive")
    debug_info: Optional[str] = Field(None, alias="debugInfo")

    @field_validator("numbers")
    @classmethod
    def validate_numbers(cls, value: List[int]) -> List[int]:
        if len(value) != 5:
            raise ValueError("A drawing has exactly 5 main numbers.")
        for n in value:
            if not 1 <= n <= 52:
                raise ValueError("Main numbers must be between 1 and 52.")
        return value


class DiagnosticStepModel(BaseModel):
    label: str
    ok: bool
    details: Optional[str] = None


class DiagnosticCountsModel(CamelModel):
    cards_found: int = Field(0, alias="cardsFound")
    complete_results: int = Field(0, alias="completeResults")


class DiagnosticsModel(CamelModel):
    steps: List[DiagnosticStepModel]
    counts: DiagnosticCountsModel
    source_url: str = Field(..., alias="sourceUrl")
    http_status: Optional[int] = Field(None, alias="httpStatus")
    used_fallback: Optional[bool] = Field(None, alias="usedFallback")
    errors: List[str] = Field(default_factory=list)


class CacheInfoModel(CamelModel):
    used: bool
    age_ms: int = Field(..., alias="ageMs", ge=0)
    last_fetch_time: int = Field(..., alias="lastFetchTime")


class LottoEnvelope(BaseModel):
    results: List[LottoResultModel]
    diagnostics: DiagnosticsModel
    cache: CacheInfoModel


class RevalidateResponse(BaseModel):
    revalidated: bool
    error: Optional[str] = None
