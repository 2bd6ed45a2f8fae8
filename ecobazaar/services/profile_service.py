# ecobazaar/services/profile_service.py
from ecobazaar.data.store import RecordStore
from ecobazaar.domain.errors import RecordNotFoundError, ValidationError
from ecobazaar.domain.roles import require_user
from ecobazaar.domain.schemas import Profile, ProfileSummary, Role, SessionContext
from ecobazaar.repos.profile_repo import ProfileRepo
from ecobazaar.services import carbon
from ecobazaar.utils.logging import get_logger

logger = get_logger(__name__)


class ProfileService:
    def __init__(self, store: RecordStore):
        self.repo = ProfileRepo(store)

    def load_session(self, user_id: str | None) -> SessionContext:
        """Session for an identity handed in by the auth layer; anonymous when None."""
        if not user_id:
            return SessionContext()
        return SessionContext(user_id=user_id, profile=self.repo.get_profile(user_id))

    def ensure_profile(self, user_id: str, name: str | None = None) -> Profile:
        """Profile created alongside signup; returns the existing one if present."""
        existing = self.repo.get_profile(user_id)
        if existing:
            return existing

        logger.info(f"Creating profile for {user_id}")
        return self.repo.create_profile(user_id, name)

    def get_summary(self, session: SessionContext) -> ProfileSummary:
        user_id = require_user(session)
        profile = self.repo.get_profile(user_id)
        if profile is None:
            raise RecordNotFoundError(f"Profile {user_id} does not exist")
        return ProfileSummary(profile=profile, eco_level=carbon.eco_level(profile.carbon_points))

    def select_role(self, session: SessionContext, role: Role) -> Profile:
        """Role is chosen once by the owner; a second choice is rejected."""
        user_id = require_user(session)

        if self.repo.set_role_once(user_id, role) == 0:
            profile = self.repo.get_profile(user_id)
            if profile is None:
                raise RecordNotFoundError(f"Profile {user_id} does not exist")
            raise ValidationError(f"Role already chosen: {profile.role.value}")

        logger.info(f"Profile {user_id} chose role {role.value}")
        return self.repo.get_profile(user_id)
