from pydantic import BaseModel, Field
from typing import Annotated, Literal, Optional, Union
from datetime import datetime


class UserAssignee(BaseModel):
    type: Literal["user"] = "user"
    id: int


class PersonnelAssignee(BaseModel):
    type: Literal["personnel"] = "personnel"
    id: int


Assignee = Annotated[Union[UserAssignee, PersonnelAssignee], Field(discriminator="type")]


class AssignmentCreate(BaseModel):
    base_id: Optional[int] = None
    asset_id: int
    assignee: Assignee
    quantity: Union[int, float]


class Assignment(BaseModel):
    id: int
    base_id: int
    asset_id: int
    assignee: Assignee
    quantity: int
    assigned_by: Optional[int] = None
    created_at: datetime

    @classmethod
    def from_model(cls, obj) -> "Assignment":
        if obj.assignee_type.value == "user":
            assignee = UserAssignee(id=obj.assignee_user_id)
        else:
            assignee = PersonnelAssignee(id=obj.assignee_personnel_id)
        return cls(
            id=obj.id,
            base_id=obj.base_id,
            asset_id=obj.asset_id,
            assignee=assignee,
            quantity=obj.quantity,
            assigned_by=obj.assigned_by,
            created_at=obj.created_at,
        )


class AssignmentReturn(BaseModel):
    assignment_id: int
