# Account Service for the InfluenceTie marketplace
# Registration, login, one-time-code verification and password reset

import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from auth.utils import (
    create_access_token,
    generate_otp,
    generate_otp_expiry,
    get_password_hash,
    is_otp_expired,
    verify_password,
)
from core.errors import (
    BadRequestError,
    ConflictError,
    ErrorCode,
    Messages,
    NotFoundError,
    UnauthorizedError,
)
from database.models import OtpPurpose, User, UserType, utcnow
from schemas.auth import RegisterRequest
from schemas.responses import user_to_response

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def issue_token(user: User) -> str:
    role = user.role.value if hasattr(user.role, "value") else user.role
    return create_access_token(user.id, user.email, role)


class AccountService:
    """
    Credential and verification workflow for accounts.
    Each public method commits at most once.
    """

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Registration & login
    # ------------------------------------------------------------------

    def register(self, data: RegisterRequest) -> dict:
        email = normalize_email(data.email)
        self._ensure_unique(email, data.phone, data.instagram_handle)

        otp = generate_otp()
        user = User(
            email=email,
            password_hash=get_password_hash(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            phone=data.phone,
            role=data.role,
            company_name=data.company_name if data.role == UserType.BRAND else None,
            instagram_handle=data.instagram_handle,
            is_email_verified=False,
            otp=otp,
            otp_expiry=generate_otp_expiry(),
            otp_purpose=OtpPurpose.EMAIL_VERIFICATION,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            # Lost a race with a concurrent registration; the constraint decides
            raise self._conflict_from_integrity_error(e, email, data.phone, data.instagram_handle)
        self.db.refresh(user)

        self._deliver_otp(user, otp, OtpPurpose.EMAIL_VERIFICATION)
        logger.info(f"Registered {user.role.value} account {user.id}")

        return {
            "user": user_to_response(user),
            "token": issue_token(user),
            "requiresEmailVerification": True,
        }

    def login(self, email: str, password: str) -> dict:
        user = self._find_by_email(email)

        # Same error for unknown email, wrong password and password-less accounts
        if not user or not verify_password(password, user.password_hash):
            raise UnauthorizedError(Messages.INVALID_CREDENTIALS, code=ErrorCode.INVALID_CREDENTIALS)

        user.last_login_at = utcnow()
        self.db.commit()
        self.db.refresh(user)

        return {"user": user_to_response(user), "token": issue_token(user)}

    # ------------------------------------------------------------------
    # One-time codes
    # ------------------------------------------------------------------

    def verify_otp(self, email: str, otp: str) -> dict:
        user = self._require_by_email(email)
        self._check_otp(user, otp, OtpPurpose.EMAIL_VERIFICATION)

        user.is_email_verified = True
        self._clear_otp(user)
        self.db.commit()

        return {"verified": True}

    def resend_otp(self, email: str) -> dict:
        user = self._require_by_email(email)
        if user.is_email_verified:
            return {"alreadyVerified": True}

        otp = self._issue_otp(user, OtpPurpose.EMAIL_VERIFICATION)
        self.db.commit()
        self._deliver_otp(user, otp, OtpPurpose.EMAIL_VERIFICATION)

        return {"sent": True}

    def request_password_reset(self, email: str) -> dict:
        user = self._require_by_email(email)

        otp = self._issue_otp(user, OtpPurpose.PASSWORD_RESET)
        self.db.commit()
        self._deliver_otp(user, otp, OtpPurpose.PASSWORD_RESET)

        return {"sent": True}

    def confirm_password_reset(self, email: str, otp: str, new_password: str) -> dict:
        user = self._require_by_email(email)
        self._check_otp(user, otp, OtpPurpose.PASSWORD_RESET)

        user.password_hash = get_password_hash(new_password)
        self._clear_otp(user)
        self.db.commit()
        logger.info(f"Password reset for account {user.id}")

        return {"reset": True}

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == normalize_email(email)).first()

    def _require_by_email(self, email: str) -> User:
        user = self._find_by_email(email)
        if not user:
            raise NotFoundError(Messages.USER_NOT_FOUND, code=ErrorCode.USER_NOT_FOUND)
        return user

    def _ensure_unique(self, email: str, phone: Optional[str], instagram_handle: Optional[str]) -> None:
        """Single duplicate lookup across email, phone and instagram handle."""
        conditions = [User.email == email]
        if phone:
            conditions.append(User.phone == phone)
        if instagram_handle:
            conditions.append(User.instagram_handle == instagram_handle)

        existing = self.db.query(User.email, User.phone, User.instagram_handle).filter(or_(*conditions)).all()
        if not existing:
            return

        if any(row.email == email for row in existing):
            raise ConflictError(Messages.EMAIL_ALREADY_EXISTS, code=ErrorCode.EMAIL_ALREADY_EXISTS)
        if phone and any(row.phone == phone for row in existing):
            raise ConflictError(Messages.PHONE_ALREADY_EXISTS, code=ErrorCode.PHONE_ALREADY_EXISTS)
        if instagram_handle and any(row.instagram_handle == instagram_handle for row in existing):
            raise ConflictError(Messages.INSTAGRAM_ALREADY_EXISTS, code=ErrorCode.INSTAGRAM_ALREADY_EXISTS)

    def _conflict_from_integrity_error(self, error: IntegrityError, email, phone, instagram_handle) -> ConflictError:
        text = str(error.orig).lower()
        if "instagram_handle" in text:
            return ConflictError(Messages.INSTAGRAM_ALREADY_EXISTS, code=ErrorCode.INSTAGRAM_ALREADY_EXISTS)
        if "phone" in text:
            return ConflictError(Messages.PHONE_ALREADY_EXISTS, code=ErrorCode.PHONE_ALREADY_EXISTS)
        if "email" in text:
            return ConflictError(Messages.EMAIL_ALREADY_EXISTS, code=ErrorCode.EMAIL_ALREADY_EXISTS)
        logger.warning(f"Unrecognised uniqueness violation during registration: {error.orig}")
        return ConflictError("Account already exists")

    def _issue_otp(self, user: User, purpose: OtpPurpose) -> str:
        otp = generate_otp()
        user.otp = otp
        user.otp_expiry = generate_otp_expiry()
        user.otp_purpose = purpose
        return otp

    @staticmethod
    def _clear_otp(user: User) -> None:
        user.otp = None
        user.otp_expiry = None
        user.otp_purpose = None

    @staticmethod
    def _check_otp(user: User, otp: str, purpose: OtpPurpose) -> None:
        """Existence, then expiry, then match. An expired code is never accepted."""
        if not user.otp or not user.otp_expiry or user.otp_purpose != purpose:
            raise BadRequestError(Messages.INVALID_OTP, code=ErrorCode.INVALID_OTP)
        if is_otp_expired(user.otp_expiry):
            raise BadRequestError(Messages.OTP_EXPIRED, code=ErrorCode.OTP_EXPIRED)
        if user.otp != otp:
            raise BadRequestError(Messages.INVALID_OTP, code=ErrorCode.INVALID_OTP)

    @staticmethod
    def _deliver_otp(user: User, otp: str, purpose: OtpPurpose) -> None:
        # Email delivery is not wired up; the code goes to the application log
        logger.info(f"{purpose.value} OTP for {user.email}: {otp}")


def get_account_service(db: Session) -> AccountService:
    """Factory function to get an AccountService instance."""
    return AccountService(db)
