"""
Client (tenant) and client user models
"""
from sqlalchemy import Column, String, Text, Boolean, Integer, JSON, Uuid
from sqlalchemy.dialects.postgresql import ARRAY

from portal.core.database import Base
from portal.models.business import TextArray


class Client(Base):
    """Tenant of the portal, owns the businesses listed in business_mapping"""

    __tablename__ = "clients"

    id = Column(Uuid(as_uuid=True), primary_key=True)
    client_name = Column(String(255), nullable=False)
    registered_email = Column(Text, nullable=True)
    send_email = Column(Boolean, nullable=False, default=False)
    emails_list = Column(TextArray, nullable=False, default=list)
    business_mapping = Column(TextArray, nullable=False, default=list)
    email_trigger_time = Column(Text, nullable=True)
    report_days = Column(ARRAY(Integer).with_variant(JSON(), "sqlite"), nullable=True)

    def __repr__(self):
        return f"<Client(id={self.id}, name={self.client_name})>"


class ClientUser(Base):
    """Login identity of a client"""

    __tablename__ = "client_users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Uuid(as_uuid=True), nullable=False)
    registered_email = Column(Text, nullable=False, unique=True)
    password_hash = Column(Text, nullable=True)

    def __repr__(self):
        return f"<ClientUser(id={self.id}, email={self.registered_email})>"
