from .auth import Token, TokenData, UserCreate, UserLogin
from .user import User, UserPublic
from .rewards import Claim, Reward
from .activity_log import ActivityLog
