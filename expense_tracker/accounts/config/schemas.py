from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, StrictStr

from expense_tracker.users.schemas import CamelModel


class ConfigUpdate(BaseModel):
    """Partial config; only the fields sent are overwritten."""
    model_config = ConfigDict(extra="ignore")

    categories: Optional[List[StrictStr]] = None
    subcategories: Optional[Dict[StrictStr, List[StrictStr]]] = None
    modes: Optional[List[StrictStr]] = None


class ConfigOut(CamelModel):
    id: int
    categories: List[str] = []
    subcategories: Dict[str, List[str]] = {}
    modes: List[str] = []
    updated_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime
