# File: mams/models/assignment.py
from sqlalchemy import Column, Integer, ForeignKey, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from mams.models.base import BaseModel
import enum


class AssigneeType(enum.Enum):
    USER = "user"
    PERSONNEL = "personnel"


class Assignment(BaseModel):
    __tablename__ = "assignments"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_assignments_quantity_positive"),
        # Exactly one assignee column is populated, matching assignee_type
        CheckConstraint(
            "(assignee_user_id IS NOT NULL AND assignee_personnel_id IS NULL) OR "
            "(assignee_user_id IS NULL AND assignee_personnel_id IS NOT NULL)",
            name="ck_assignments_single_assignee",
        ),
    )

    base_id = Column(Integer, ForeignKey("bases.id"), nullable=False, index=True)
    asset_id = Column(Integer, ForeignKey("assets.id"), nullable=False, index=True)
    assignee_type = Column(Enum(AssigneeType), nullable=False)
    assignee_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    assignee_personnel_id = Column(Integer, ForeignKey("personnel.id"), nullable=True)
    quantity = Column(Integer, nullable=False)
    assigned_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    asset = relationship("Asset")

    @property
    def assignee_id(self) -> int:
        if self.assignee_type == AssigneeType.USER:
            return self.assignee_user_id
        return self.assignee_personnel_id
