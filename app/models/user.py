from sqlalchemy import Column, Integer, String, Text, Boolean, TIMESTAMP, CheckConstraint
from sqlalchemy.sql import func
from ..core.roles import DEFAULT_ROLE, Role
from ..database import Base


_ROLE_VALUES = ", ".join(f"'{role.value}'" for role in Role)


class User(Base):
    __tablename__ = "users"
    
    # Primary Key
    id = Column(Integer, primary_key=True, index=True)
    
    # Authentication & Contact
    username = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    
    # Role & Authorization
    role = Column(String(50), nullable=False, default=DEFAULT_ROLE.value, index=True)
    
    # Profile
    bio = Column(Text)
    avatar_url = Column(String(500))
    
    # Account Status
    is_active = Column(Boolean, default=True, index=True)
    
    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
    
    # Constraints
    __table_args__ = (
        CheckConstraint(
            f"role IN ({_ROLE_VALUES})",
            name="check_user_role"
        ),
    )
