"""DTOs for users (view-models built from the users table and its children)."""

from dataclasses import dataclass, field

from planejar.domain.enums import ClientType, UserRole


@dataclass
class QualificationData:
    """Civil-status data of a holding partner (partner_qualification_data)."""

    cpf: str | None = None
    rg: str | None = None
    marital_status: str | None = None
    property_regime: str | None = None
    birth_date: str | None = None
    nationality: str | None = None
    address: str | None = None
    phone: str | None = None
    declares_income_tax: bool | None = None


@dataclass
class UserDocument:
    """Personal document uploaded by a user (identity, address, ...)."""

    id: str
    name: str
    category: str
    url: str
    uploaded_at: str | None = None


@dataclass
class User:
    """Application user. id equals the identity provider subject id."""

    id: str
    name: str
    email: str
    role: UserRole
    avatar_url: str | None = None
    client_type: ClientType | None = None
    requires_password_change: bool = False
    qualification_data: QualificationData | None = None
    documents: list[UserDocument] = field(default_factory=list)
