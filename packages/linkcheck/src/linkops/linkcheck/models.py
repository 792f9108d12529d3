"""Data model -- LinkCheckResult"""

from linkops.core.models import LinkStatus
from pydantic import BaseModel, Field


class LinkCheckResult(BaseModel):
    """Outcome of probing one URL

    Every checker call returns this type, including on transport failures.
    """

    url: str = Field(description="Probed URL")
    status: LinkStatus = Field(description="working when the response was 2xx")
    status_code: int | None = Field(default=None, description="HTTP status, None when unreachable")
    duration_ms: int = Field(default=0, ge=0, description="Probe duration in milliseconds")
    error: str = Field(default="", description="Failure description")

    @property
    def is_working(self) -> bool:
        return self.status == LinkStatus.WORKING
