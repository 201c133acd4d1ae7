from dataclasses import dataclass
from datetime import datetime

DEFAULT_IMAGE_URL = (
    "https://png.pngtree.com/png-clipart/20230927/original/"
    "pngtree-man-avatar-image-for-profile-png-image_13001877.png"
)


@dataclass
class User:
    """Domain model representing a member.

    ``id`` is the internal record identity; ``user_id`` is the public,
    numeric-looking member id used for login and deposit references.
    """
    id: str
    user_id: str
    name: str
    email: str
    contact: str
    created_at: datetime
    updated_at: datetime
    image: str = DEFAULT_IMAGE_URL
    is_active: bool = True

    def public_profile(self) -> dict:
        """Profile view returned on user login."""
        return {
            'id': self.user_id,
            'name': self.name,
            'email': self.email,
            'contact': self.contact,
            'image': self.image,
        }


def normalize_email(email: str) -> str:
    return email.strip().lower()
