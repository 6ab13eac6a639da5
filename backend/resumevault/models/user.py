from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from resumevault.db.base import Base


class User(Base):
    """Registered account with its resume and profile photo."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)

    # Password reset: both set together or both NULL
    reset_code = Column(Integer, nullable=True)
    reset_code_expiry = Column(DateTime, nullable=True)  # naive UTC

    # Resume & profile
    resume_text = Column(Text, nullable=True)  # extracted text, "" if none could be read
    photo = Column(Text, nullable=True)  # base64 of the uploaded image, or a legacy filename
    resume_uploaded = Column(Boolean, default=False)  # cached, see services.profile
