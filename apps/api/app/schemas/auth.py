from pydantic import BaseModel


class MeResponse(BaseModel):
    kind: str
    email: str | None
    name: str | None
    is_admin: bool
    user_id: int | None
    member_id: int | None
