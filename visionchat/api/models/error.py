from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str
    message: str
    details: Optional[Union[Dict[str, Any], List[Any]]] = None
