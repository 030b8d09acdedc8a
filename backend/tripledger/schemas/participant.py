"""
Pydantic schemas for Participant entity.
"""
from pydantic import BaseModel


class Participant(BaseModel):
    """A trip member who can pay for or share expenses."""
    id: int
    name: str
    
    model_config = {"frozen": True}
