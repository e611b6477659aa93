from typing import Optional

from pydantic import BaseModel


class ForwardResult(BaseModel):
    target: str
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status_code == 200
