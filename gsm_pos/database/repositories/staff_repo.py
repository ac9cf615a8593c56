from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...constants import KEY_CSRS, KEY_TECHNICIANS
from ...utils.errors import DomainError
from ...utils.validators import non_empty
from ...utils.helpers import new_id
from .store_repo import KeyValueStore

UNASSIGNED_NAME = "N/A"
UNKNOWN_NAME = "Unknown"


@dataclass
class StaffMember:
    id: str
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


class StaffRepo:
    """
    Technicians or customer service representatives: {id, name}.

    Deleting a member leaves sales that reference the id untouched; those
    references resolve to "Unknown".
    """

    def __init__(self, store: KeyValueStore, key: str):
        self.store = store
        self.key = key

    def _load(self) -> list[StaffMember]:
        raw = self.store.load(self.key, [])
        if not isinstance(raw, list):
            return []
        out = []
        for r in raw:
            if isinstance(r, dict) and r.get("id") is not None:
                out.append(StaffMember(id=str(r["id"]), name=str(r.get("name") or "")))
        return out

    def _save(self, members: list[StaffMember]) -> None:
        self.store.save(self.key, [m.to_dict() for m in members])

    def list(self) -> list[StaffMember]:
        return sorted(self._load(), key=lambda m: m.name.casefold())

    def get(self, member_id: str) -> Optional[StaffMember]:
        return next((m for m in self._load() if m.id == member_id), None)

    def name_for(self, member_id: Optional[str]) -> str:
        if not member_id:
            return UNASSIGNED_NAME
        m = self.get(member_id)
        return m.name if m else UNKNOWN_NAME

    def add(self, name: str) -> StaffMember:
        if not non_empty(name):
            raise DomainError("Name is required.")
        member = StaffMember(id=new_id(), name=name.strip())
        self._save(self._load() + [member])
        return member

    def upsert(self, member: StaffMember) -> StaffMember:
        if not non_empty(member.name):
            raise DomainError("Name is required.")
        members = self._load()
        for i, m in enumerate(members):
            if m.id == member.id:
                members[i] = member
                break
        else:
            members.append(member)
        self._save(members)
        return member

    def update(self, member_id: str, name: str) -> StaffMember:
        if self.get(member_id) is None:
            raise DomainError(f"No record with id {member_id}.")
        return self.upsert(StaffMember(id=member_id, name=(name or "").strip()))

    def delete(self, member_id: str) -> bool:
        members = self._load()
        kept = [m for m in members if m.id != member_id]
        if len(kept) == len(members):
            return False
        self._save(kept)
        return True


def technicians_repo(store: KeyValueStore) -> StaffRepo:
    return StaffRepo(store, KEY_TECHNICIANS)


def csrs_repo(store: KeyValueStore) -> StaffRepo:
    return StaffRepo(store, KEY_CSRS)
