from datetime import date, datetime, time
from typing import Annotated
from pydantic import BeforeValidator, Field, StringConstraints

def _coerce_datetime(v):
    # accept plain calendar dates ("2025-03-14" or date objects) as midnight
    if isinstance(v, datetime):
        return v
    if isinstance(v, date):
        return datetime.combine(v, time.min)
    if isinstance(v, str) and len(v.strip()) == 10:
        return datetime.combine(date.fromisoformat(v.strip()), time.min)
    return v

FlexibleDateTime = Annotated[datetime, BeforeValidator(_coerce_datetime)]

PosInt = Annotated[int, Field(ge=1)]
NonNegInt = Annotated[int, Field(ge=0)]
NonNegFloat = Annotated[float, Field(ge=0, le=10000)]
NotesStr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=1000)]
NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=120)]
