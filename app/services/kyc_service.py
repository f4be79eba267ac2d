from sqlalchemy.orm import Session

from app.models.kyc import KycSubmission
from app.models.user import User


def submit_kyc(db: Session, user: User, document_type: str, document_url: str) -> KycSubmission:
    """A provider may submit any number of times; each submission is reviewed on its own."""
    submission = KycSubmission(
        user_id=user.id,
        document_type=document_type,
        document_url=document_url,
    )
    db.add(submission)
    db.commit()
    db.refresh(submission)
    return submission


def list_user_submissions(db: Session, user: User) -> list[KycSubmission]:
    return (
        db.query(KycSubmission)
        .filter(KycSubmission.user_id == user.id)
        .order_by(KycSubmission.created_at.desc())
        .all()
    )


def list_submissions(db: Session) -> list[KycSubmission]:
    return db.query(KycSubmission).order_by(KycSubmission.created_at.desc()).all()
