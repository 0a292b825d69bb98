"""Response envelopes returned by the billing backend.

List endpoints answer with the collection under ``data``, sometimes wrapped
once more in a paginator object (``{"data": {"data": [...]}}``). Domain
errors carry ``status == "error"`` plus a message and an optional
field-keyed ``errors`` map.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict


class Page(BaseModel):
    model_config = ConfigDict(extra="allow")

    data: Optional[List[Dict[str, Any]]]
    current_page: Optional[int] = None
    total: Optional[int] = None


class ListEnvelope(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: Optional[str] = None
    message: Any = None
    data: Union[List[Dict[str, Any]], Page, None]


class ErrorEnvelope(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: str = "error"
    message: Any = None
    errors: Optional[Dict[str, Any]] = None
