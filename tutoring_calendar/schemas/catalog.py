# tutoring_calendar/schemas/catalog.py

from pydantic import BaseModel


class Subject(BaseModel):
    id: str
    name: str
    icon: str

    model_config = {"frozen": True}


class Level(BaseModel):
    id: str
    name: str
    description: str

    model_config = {"frozen": True}
