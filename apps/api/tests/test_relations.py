from datetime import date

from app.models.entities import FamilyMember, GenderEnum
from app.services.relations import FamilyGraph


def _member(member_id, name, **fields):
    return FamilyMember(member_id=member_id, name=name, gender=fields.pop("gender", GenderEnum.other), **fields)


def _family():
    return [
        _member(1, "Grandpa", gender=GenderEnum.male, spouse_id=2, generation=0),
        _member(2, "Grandma", gender=GenderEnum.female, spouse_id=1, generation=0),
        _member(3, "Uncle", parent_id=1, generation=1, birth_date=date(1970, 5, 1)),
        _member(4, "Mother", parent_id=2, generation=1, birth_date=date(1965, 3, 1)),
        _member(5, "Aunt", parent_id=1, generation=1),
        _member(6, "Kid", parent_id=4, generation=2),
    ]


def test_parents_include_spouse_of_recorded_parent():
    graph = FamilyGraph(_family())
    assert [item.member_id for item in graph.parents(3)] == [1, 2]
    assert [item.member_id for item in graph.parents(4)] == [2, 1]


def test_children_merge_both_partners_in_birth_order():
    graph = FamilyGraph(_family())
    # Dated children first by birth date, undated last.
    assert [item.member_id for item in graph.children(1)] == [4, 3, 5]
    assert [item.member_id for item in graph.children(2)] == [4, 3, 5]


def test_siblings_share_recorded_parent():
    graph = FamilyGraph(_family())
    assert [item.member_id for item in graph.siblings(3)] == [5]
    assert graph.siblings(6) == []
    assert graph.siblings(1) == []


def test_spouse_is_symmetric():
    graph = FamilyGraph(_family())
    assert graph.spouse(1).member_id == 2
    assert graph.spouse(2).member_id == 1
    assert graph.spouse(3) is None


def test_dangling_references_resolve_to_nothing():
    graph = FamilyGraph([_member(10, "Orphan", parent_id=99, spouse_id=98)])
    relations = graph.resolve(10)
    assert relations.parents == []
    assert relations.spouse is None
    assert relations.children == []
    assert relations.siblings == []


def test_cyclic_parent_links_stay_one_hop():
    graph = FamilyGraph([_member(1, "A", parent_id=2), _member(2, "B", parent_id=1)])
    assert [item.member_id for item in graph.parents(1)] == [2]
    assert [item.member_id for item in graph.children(1)] == [2]


def test_unknown_member_has_no_relations():
    relations = FamilyGraph(_family()).resolve(404)
    assert relations.parents == [] and relations.spouse is None
