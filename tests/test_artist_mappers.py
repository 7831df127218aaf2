import json

from maasta.schemas.enums import DEFAULT_EXPERIENCE_LEVEL, DEFAULT_PROFILE_STATUS, DEFAULT_WORK_PREFERENCE
from maasta.utils.artist_mappers import (
    RELATION_FIELDS,
    map_artist_row,
    map_artist_summary,
    map_fallback_artist,
    map_featured_artist,
)

ARTIST_ID = "6f1c8e3a-2b4d-4c5e-9f70-1a2b3c4d5e6f"


def joined_row(**overrides):
    row = {
        "id": ARTIST_ID,
        "full_name": "Asha Rao",
        "email": "asha@example.com",
        "bio": "Theatre actor",
        "city": "Pune",
        "category": "actor",
        "experience_level": "expert",
        "work_preference": "freelance",
        "status": "active",
        "special_skills": [
            {"id": "s1", "skill": "Kathak"},
            {"skill": "Stage combat"},
        ],
        "language_skills": [{"id": "l1", "language": "Marathi", "proficiency": None}],
        "tools_software": [{"tool_name": "Final Draft"}],
        "projects": [{"id": "p1", "project_name": "Ghashiram", "role_in_project": "Lead", "project_type": None}],
        "education_training": [{"qualification_name": "NSD Diploma", "institution": "NSD"}],
        "media_assets": [{"id": "m1", "url": "https://cdn.example.com/reel.mp4", "file_name": "reel.mp4", "file_type": "video/mp4", "is_video": True}],
        "awards": [{"id": "a1", "title": "Best Actor", "organization": "META", "year": 2022}],
    }
    row.update(overrides)
    return row


def test_full_mapping_renames_fields():
    artist = map_artist_row(joined_row())

    assert [s.skill_name for s in artist.special_skills] == ["Kathak", "Stage combat"]
    assert artist.skills == ["Kathak", "Stage combat"]
    assert artist.media_assets[0].asset_url == "https://cdn.example.com/reel.mp4"
    assert artist.awards[0].title == "Best Actor"
    assert artist.awards[0].award_name == "Best Actor"
    assert artist.language_skills[0].proficiency == "basic"
    assert artist.projects[0].project_type == "other"
    assert all(item.artist_id == ARTIST_ID for item in artist.special_skills)


def test_mapping_is_idempotent_apart_from_synthesized_ids():
    row = joined_row()
    first = map_artist_row(row).model_dump()
    second = map_artist_row(row).model_dump()

    # The skill without an id gets a fresh one on every call
    first_synth = first["special_skills"][1].pop("id")
    second_synth = second["special_skills"][1].pop("id")
    assert first_synth and second_synth
    assert first_synth != second_synth

    for name in ("tools_software", "education_training"):
        for a, b in zip(first[name], second[name]):
            assert a.pop("id") != b.pop("id")

    assert first == second


def test_synthesized_ids_are_unique_within_a_response():
    row = joined_row(special_skills=[{"skill": f"skill {i}"} for i in range(20)])
    ids = [s.id for s in map_artist_row(row).special_skills]
    assert all(ids)
    assert len(set(ids)) == len(ids)


def test_stored_ids_are_kept():
    artist = map_artist_row(joined_row())
    assert artist.special_skills[0].id == "s1"
    assert artist.awards[0].id == "a1"


def test_fallback_mapper_never_leaves_relations_empty_of_a_value():
    bare = {"id": ARTIST_ID, "full_name": "Asha Rao"}
    artist = map_fallback_artist(bare)

    for name in RELATION_FIELDS:
        assert getattr(artist, name) == []
    assert artist.skills == []
    assert artist.custom_links == []


def test_fallback_mapper_ignores_relations_even_when_present():
    artist = map_fallback_artist(joined_row())
    for name in RELATION_FIELDS:
        assert getattr(artist, name) == []


def test_missing_joins_in_full_mapper_default_to_empty_lists():
    row = {"id": ARTIST_ID, "full_name": "Asha Rao", "special_skills": None, "awards": "not-a-list"}
    artist = map_artist_row(row)
    for name in RELATION_FIELDS:
        assert getattr(artist, name) == []


def test_enum_like_fields_get_neutral_defaults():
    artist = map_fallback_artist({
        "id": ARTIST_ID,
        "full_name": None,
        "experience_level": None,
        "work_preference": None,
        "status": None,
    })
    assert artist.full_name == "Unknown Artist"
    assert artist.experience_level == DEFAULT_EXPERIENCE_LEVEL == "beginner"
    assert artist.work_preference == DEFAULT_WORK_PREFERENCE == "any"
    assert artist.status == DEFAULT_PROFILE_STATUS == "active"


def test_custom_links_accept_json_strings_and_drop_incomplete_entries():
    links = [{"title": "Showreel", "url": "https://vimeo.com/1"}, {"title": "No url"}]
    artist = map_fallback_artist({"id": ARTIST_ID, "full_name": "A", "custom_links": json.dumps(links)})
    assert [(l.title, l.url) for l in artist.custom_links] == [("Showreel", "https://vimeo.com/1")]

    broken = map_fallback_artist({"id": ARTIST_ID, "full_name": "A", "custom_links": "{not json"})
    assert broken.custom_links == []


def test_summary_mappers():
    featured = map_featured_artist(joined_row())
    assert featured.skills == ["Kathak", "Stage combat"]
    assert featured.city == "Pune"

    plain = map_artist_summary(joined_row())
    assert plain.skills == []
    assert plain.id == ARTIST_ID
