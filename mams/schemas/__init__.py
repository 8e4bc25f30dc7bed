from .auth import Token, LoginRequest, Identity
from .military_base import MilitaryBase, MilitaryBaseCreate, MilitaryBaseUpdate
from .user import User, UserCreate, UserUpdate, LogisticsOfficerCreate, LogisticsOfficerUpdate
from .asset import Asset, AssetCreate, AssetUpdate
from .inventory import StockLevel, InventoryRow
from .purchase import Purchase, PurchaseCreate, PurchaseDecision
from .transfer import TransferRequest, TransferCreate, TransferReview
from .personnel import Personnel, PersonnelCreate, PersonnelUpdate
from .assignment import Assignment, AssignmentCreate, AssignmentReturn, UserAssignee, PersonnelAssignee
