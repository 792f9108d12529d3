"""Team directory models -- users and project membership

Read-only from the pipeline's point of view; used to resolve notification
recipients by role.
"""

from pydantic import BaseModel


class TeamUser(BaseModel):
    id: str
    email: str = ""
    role: str = ""


class ProjectMember(BaseModel):
    project_id: str
    user_id: str
    role: str
