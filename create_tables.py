from app.database import Base, engine
from app.models import (
    user,
    category,
    channel,
    post,
    comment,
    like,
)

print("Creating database tables...")
Base.metadata.create_all(bind=engine)
print("✅ All tables created successfully!")
