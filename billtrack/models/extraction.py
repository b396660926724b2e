from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from billtrack.models.bill import BillType, Unit


class ExtractionResult(BaseModel):
    """Structured guess returned by the vision model for one bill image.

    Field names follow the JSON contract given to the model (camelCase), so
    replies are validated as-is with ``model_validate_json(..., strict=True)``.
    """

    model_config = ConfigDict(populate_by_name=True)

    bill_type: BillType = Field(alias="billType")
    period: str
    cost: float = Field(gt=0)
    consumption: float = Field(gt=0)
    unit: Unit
    confidence: float = Field(ge=0, le=1)
    notes: str | None = None
