from typing import Annotated
from fastapi import Path
from pydantic import Field

# Largest value a 64-bit INTEGER primary key can hold
MAX_ROW_ID = 2**63 - 1

RowId = Annotated[int, Path(ge=1, le=MAX_ROW_ID)]
RowIdField = Annotated[int, Field(ge=1, le=MAX_ROW_ID)]
