from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse, PlainTextResponse

from eventreg import accounts, ambassadors, certificates, payments, teams
from eventreg.auth import require_admin, verify_token
from eventreg.config import get_settings
from eventreg.dependencies import get_blobs, get_documents, get_gateway, get_identity
from eventreg.errors import ValidationError
from eventreg.schemas import (
    CampusAmbassadorApplication,
    CertificateDetails,
    CertificateLookup,
    Credentials,
    PaymentRequest,
    PaymentVerification,
    TeamRegistration,
)

router = APIRouter()


def _read_upload(file: Optional[UploadFile], missing_message: str, max_mb: int) -> bytes:
    if file is None or not file.filename:
        raise ValidationError(missing_message)
    # One byte past the limit is enough for the size check to reject it.
    return file.file.read(max_mb * 1024 * 1024 + 1)


@router.get("/", response_class=PlainTextResponse)
def health():
    return "App is working"


# --- accounts -------------------------------------------------------------

@router.post("/register")
def register(body: Credentials, identity=Depends(get_identity), documents=Depends(get_documents)):
    token = accounts.register(identity, documents, body.email, body.password)
    return {"message": "User registered successfully", "token": token}


@router.post("/login")
def login(body: Credentials, identity=Depends(get_identity)):
    token = accounts.login(identity, body.email, body.password)
    return {"message": "Login successful", "token": token}


@router.post("/check-verification")
def check_verification(body: Credentials, identity=Depends(get_identity)):
    verified = accounts.check_verification(identity, body.email, body.password)
    return {"emailVerified": verified}


@router.get("/verify-email")
def verify_email(token: str = "", identity=Depends(get_identity)):
    email = accounts.confirm_email(identity, token)
    return {"message": "Email verified successfully", "email": email}


# --- profile & team -------------------------------------------------------

@router.get("/user-profile")
def user_profile(uid: str = Depends(verify_token), documents=Depends(get_documents)):
    return {"message": "User profile sent", "user": teams.get_profile(documents, uid)}


@router.post("/register-team")
def register_team(body: TeamRegistration, uid: str = Depends(verify_token), documents=Depends(get_documents)):
    teams.register_team(documents, uid, body)
    return {"message": "Team registered successfully"}


@router.post("/upload-team-image")
def upload_team_image(
    teamImage: Optional[UploadFile] = File(None),
    uid: str = Depends(verify_token),
    documents=Depends(get_documents),
    blobs=Depends(get_blobs),
):
    max_mb = get_settings().max_upload_mb
    data = _read_upload(teamImage, "No image file uploaded", max_mb)
    url = teams.upload_team_image(documents, blobs, uid, teamImage.filename, data,
                                  teamImage.content_type, max_mb)
    return {"message": "Image uploaded successfully", "imageUrl": url}


@router.post("/upload-resume")
def upload_resume(
    resume: Optional[UploadFile] = File(None),
    uid: str = Depends(verify_token),
    documents=Depends(get_documents),
    blobs=Depends(get_blobs),
):
    max_mb = get_settings().max_upload_mb
    data = _read_upload(resume, "No resume file uploaded", max_mb)
    url = teams.upload_resume(documents, blobs, uid, resume.filename, data,
                              resume.content_type, max_mb)
    return {"message": "Resume uploaded successfully", "resumeUrl": url}


# --- payments -------------------------------------------------------------

@router.post("/api/payment")
def create_payment(body: PaymentRequest, gateway=Depends(get_gateway)):
    order = payments.create_order(gateway, body.teamTotalPrice)
    return {"data": order.raw}


@router.post("/api/verify")
def verify_payment(
    body: PaymentVerification,
    uid: str = Depends(verify_token),
    gateway=Depends(get_gateway),
    documents=Depends(get_documents),
):
    record = payments.verify_payment(gateway, documents, uid, body.orderId, body.paymentId, body.signature)
    if not record.verified:
        return JSONResponse(
            status_code=400,
            content={"message": "Payment verification failed", "verified": False},
        )
    return {"message": "Payment verified successfully", "verified": True}


# --- certificates ---------------------------------------------------------

@router.post("/upload", dependencies=[Depends(require_admin)])
def upload_certificate(certificate: Optional[UploadFile] = File(None), blobs=Depends(get_blobs)):
    max_mb = get_settings().max_upload_mb
    data = _read_upload(certificate, "No certificate file uploaded", max_mb)
    url = certificates.upload_certificate(blobs, certificate.filename, data,
                                          certificate.content_type, max_mb)
    return {"message": "Certificate uploaded successfully", "certificateUrl": url}


@router.post("/save-details", dependencies=[Depends(require_admin)])
def save_details(body: CertificateDetails, documents=Depends(get_documents)):
    certificates.save_details(documents, body)
    return {"message": "Certificate details saved", "authCode": body.authCode}


@router.post("/verify")
def verify_certificate(body: CertificateLookup, documents=Depends(get_documents)):
    return {"message": "Certificate found", "certificate": certificates.lookup(documents, body.authCode)}


# --- campus ambassadors ---------------------------------------------------

@router.post("/campus-ambassador")
def campus_ambassador(body: CampusAmbassadorApplication, documents=Depends(get_documents)):
    key = ambassadors.apply(documents, body)
    return {"message": "Application submitted successfully", "id": key}
