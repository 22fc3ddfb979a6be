# Delegated identity: map an externally verified Google identity onto a local account

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.errors import ConflictError, ErrorCode, UnauthorizedError
from database.models import User, UserType, utcnow
from schemas.responses import user_to_response
from services.account_service import issue_token, normalize_email

logger = logging.getLogger(__name__)


class IdentityService:
    """
    Link-or-create for Google sign-in.
    New accounts are always INFLUENCER, email pre-verified, with no password.
    """

    def __init__(self, db: Session):
        self.db = db

    def link_or_create(
        self,
        email: Optional[str],
        given_name: str,
        family_name: str,
        avatar: str,
        google_id: str,
    ) -> dict:
        if not email:
            raise UnauthorizedError("No email found in Google profile", code=ErrorCode.OAUTH_FAILED)

        email = normalize_email(email)

        # The Google subject is stable; the email on the Google side can change
        user = self.db.query(User).filter(User.google_id == google_id).first()
        if not user:
            user = self.db.query(User).filter(User.email == email).first()

        if user:
            user.google_id = google_id
            if avatar:
                user.avatar = avatar
            user.last_login_at = utcnow()
            created = False
        else:
            user = User(
                email=email,
                password_hash=None,
                first_name=given_name or None,
                last_name=family_name or None,
                google_id=google_id,
                avatar=avatar or None,
                role=UserType.INFLUENCER,
                is_email_verified=True,
                last_login_at=utcnow(),
            )
            self.db.add(user)
            created = True

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Google sign-in for {email} collided with an existing account: {e.orig}")
            raise ConflictError("Google account is already linked to another user", code=ErrorCode.OAUTH_FAILED)
        self.db.refresh(user)
        logger.info(f"Google sign-in for account {user.id} ({'created' if created else 'linked'})")

        return {"user": user_to_response(user), "token": issue_token(user), "created": created}


def get_identity_service(db: Session) -> IdentityService:
    """Factory function to get an IdentityService instance."""
    return IdentityService(db)
