from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from app.models.entities import FamilyMember, MemberId


def birth_order_key(member: FamilyMember) -> tuple[int, date, int]:
    # Members without a birth date sort after dated ones.
    if member.birth_date is None:
        return (1, date.max, member.member_id)
    return (0, member.birth_date, member.member_id)


@dataclass
class Relations:
    parents: list[FamilyMember] = field(default_factory=list)
    spouse: FamilyMember | None = None
    children: list[FamilyMember] = field(default_factory=list)
    siblings: list[FamilyMember] = field(default_factory=list)


class FamilyGraph:
    """
    Immediate-relative lookups over a snapshot of family members.

    A member carries a single ``parent_id``; the second parent is that parent's
    spouse. Lookups never go further than one hop, so corrupted data with
    parent cycles cannot loop.
    """

    def __init__(self, members: Iterable[FamilyMember]):
        self._by_id: dict[int, FamilyMember] = {}
        self._by_parent: dict[int, list[FamilyMember]] = {}
        for member in members:
            self._by_id[member.member_id] = member
            if member.parent_id is not None:
                self._by_parent.setdefault(member.parent_id, []).append(member)

    def get(self, member_id: MemberId | int | None) -> FamilyMember | None:
        if member_id is None:
            return None
        return self._by_id.get(member_id)

    def spouse(self, member_id: MemberId) -> FamilyMember | None:
        member = self.get(member_id)
        if member is None:
            return None
        return self.get(member.spouse_id)

    def parents(self, member_id: MemberId) -> list[FamilyMember]:
        member = self.get(member_id)
        if member is None or member.parent_id == member.member_id:
            return []
        parent = self.get(member.parent_id)
        if parent is None:
            return []
        co_parent = self.get(parent.spouse_id)
        if co_parent is None or co_parent.member_id == member.member_id:
            return [parent]
        return [parent, co_parent]

    def children(self, member_id: MemberId) -> list[FamilyMember]:
        found: dict[int, FamilyMember] = {
            child.member_id: child for child in self._by_parent.get(member_id, []) if child.member_id != member_id
        }
        # Children recorded against a spouse whose spouse link points back here.
        for partner in self._partners_of(member_id):
            for child in self._by_parent.get(partner.member_id, []):
                if child.member_id != member_id:
                    found.setdefault(child.member_id, child)
        return sorted(found.values(), key=birth_order_key)

    def siblings(self, member_id: MemberId) -> list[FamilyMember]:
        member = self.get(member_id)
        if member is None or member.parent_id is None:
            return []
        return sorted(
            (item for item in self._by_parent.get(member.parent_id, []) if item.member_id != member_id),
            key=birth_order_key,
        )

    def resolve(self, member_id: MemberId) -> Relations:
        return Relations(
            parents=self.parents(member_id),
            spouse=self.spouse(member_id),
            children=self.children(member_id),
            siblings=self.siblings(member_id),
        )

    def _partners_of(self, member_id: MemberId) -> list[FamilyMember]:
        return [
            item
            for item in self._by_id.values()
            if item.spouse_id == member_id and item.member_id != member_id
        ]
