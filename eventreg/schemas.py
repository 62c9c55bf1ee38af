from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


# Characters that would split or escape a document path.
KEY_PATTERN = r"^[^/.#$\[\]]+$"


class RequestModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


class Credentials(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TeamLeader(RequestModel):
    fullName: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    phoneNumber: Optional[str] = None
    dateOfBirth: Optional[str] = None


class TeamMember(RequestModel):
    fullName: str = Field(..., min_length=1)
    email: Optional[str] = None
    phoneNumber: Optional[str] = None
    dateOfBirth: Optional[str] = None
    emergencyContact: Optional[str] = None


class FormDetails(RequestModel):
    teamName: str = Field(..., min_length=1)
    country: Optional[str] = None
    institutionName: Optional[str] = None
    teamLeader: TeamLeader


class TeamRegistration(RequestModel):
    formDetails: FormDetails
    teamMembers: List[TeamMember]


class PaymentRequest(BaseModel):
    # Validated by razorpay_service.to_minor_units so bad input maps to 400.
    teamTotalPrice: Any = None


class PaymentVerification(RequestModel):
    """Checkout result posted by the client. Any ``verified`` field is ignored."""

    orderId: str = Field(..., min_length=1, validation_alias=AliasChoices("orderId", "razorpay_order_id"))
    paymentId: str = Field(..., min_length=1, pattern=KEY_PATTERN, validation_alias=AliasChoices("paymentId", "razorpay_payment_id"))
    signature: str = Field(..., min_length=1, validation_alias=AliasChoices("signature", "razorpay_signature"))


class CertificateDetails(RequestModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="allow")

    authCode: str = Field(..., min_length=1, pattern=KEY_PATTERN)
    name: str = Field(..., min_length=1)
    event: Optional[str] = None
    certificateUrl: Optional[str] = None


class CertificateLookup(RequestModel):
    authCode: str = Field(..., min_length=1, pattern=KEY_PATTERN)


class CampusAmbassadorApplication(RequestModel):
    fullName: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    phoneNumber: str = Field(..., min_length=1)
    institutionName: str = Field(..., min_length=1)
    yearOfStudy: Optional[str] = None
    reason: Optional[str] = None
