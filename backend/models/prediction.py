"""
Prediction response schema.

Dependencies: pydantic
System role: Prediction API contract
"""

from pydantic import BaseModel


class PredictionResponse(BaseModel):
    """Rounded usage prediction for one date."""

    date: str
    prediction: int
