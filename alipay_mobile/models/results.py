"""
Pydantic Result Model

Every client operation returns an AlipayResult instead of raising, so callers
branch on `outcome`/`code` rather than catching exceptions.
"""
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, Field


class Outcome(str, Enum):
    """Closed set of call outcomes."""
    SUCCESS = "success"
    PENDING = "pending"
    PERMISSION_DENIED = "permission_denied"
    FAILURE = "failure"


class AlipayResult(BaseModel):
    """
    Structured result of a client operation.

    Stable codes:
    - "0": success
    - "1": payment pending
    - "-1": failure
    - "-2": permission denied / signature mismatch
    """
    outcome: Outcome
    code: str = Field(description="Stable short code")
    message: str = Field(description="Human-readable message for the code")
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Protocol status fields: code, msg, sub_code, sub_msg, sign"
    )
    data: Dict[str, Any] = Field(
        default_factory=dict,
        description="Business fields"
    )

    @property
    def is_success(self) -> bool:
        return self.outcome == Outcome.SUCCESS

    model_config = {
        "json_schema_extra": {
            "example": {
                "outcome": "success",
                "code": "0",
                "message": "Success",
                "metadata": {"code": "10000", "msg": "Success"},
                "data": {"trade_no": "2024101922001400000000000001", "trade_status": "TRADE_SUCCESS"}
            }
        }
    }
