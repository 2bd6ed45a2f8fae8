# ecobazaar/repos/profile_repo.py
from typing import List

from ecobazaar.data.store import RecordStore
from ecobazaar.domain.schemas import Profile, Role

TABLE = "profiles"


class ProfileRepo:
    def __init__(self, store: RecordStore):
        self.store = store

    def get_profile(self, user_id: str) -> Profile | None:
        rows = self.store.select(TABLE, filters={"id": user_id})
        return Profile.model_validate(rows[0]) if rows else None

    def list_profiles(self) -> List[Profile]:
        return [Profile.model_validate(r) for r in self.store.select(TABLE, order="created_at.desc")]

    def create_profile(self, user_id: str, name: str | None = None) -> Profile:
        created = self.store.insert(TABLE, [{"id": user_id, "name": name, "carbon_points": 0}])
        return Profile.model_validate(created[0])

    def compare_and_set_points(self, user_id: str, expected: int, carbon_points: int) -> int:
        """Write the balance only if the row still holds ``expected``; returns rows affected."""
        return self.store.update(
            TABLE,
            {"carbon_points": carbon_points},
            filters={"id": user_id, "carbon_points": expected},
        )

    def set_role_once(self, user_id: str, role: Role) -> int:
        """Only touches a profile whose role is still unset."""
        return self.store.update(TABLE, {"role": role.value}, filters={"id": user_id, "role": None})
