from maasta.utils.artist_mappers import map_artist_row, map_fallback_artist
from maasta.utils.profile_strength import MAX_STRENGTH, SECTIONS, calculate_profile_strength, strength_status

ARTIST_ID = "6f1c8e3a-2b4d-4c5e-9f70-1a2b3c4d5e6f"

COMPLETE_ROW = {
    "id": ARTIST_ID,
    "full_name": "Asha Rao",
    "bio": "Actor",
    "phone_number": "+91 90000 00000",
    "city": "Pune",
    "date_of_birth": "1994-03-02",
    "profile_picture_url": "https://cdn.example.com/p.jpg",
    "cover_image_url": "https://cdn.example.com/c.jpg",
    "instagram": "@asha",
    "media_assets": [{"url": "u", "file_name": "f", "file_type": "image/jpeg"}],
    "projects": [{"project_name": "Play", "role_in_project": "Lead"}],
    "special_skills": [{"skill": "Kathak"}],
    "language_skills": [{"language": "Hindi"}],
    "tools_software": [{"tool_name": "Celtx"}],
    "education_training": [{"qualification_name": "Diploma"}],
    "awards": [{"title": "Best Actor"}],
    "work_links": [{"work_title": "Showreel", "work_url": "https://vimeo.com/1"}],
}


def test_section_weights():
    weights = dict((name, weight) for name, weight, _ in SECTIONS)

    assert weights["Work Links"] == 10
    assert weights["Basic Information"] == 5
    # The weights overflow 100; the reported total is capped
    assert sum(weights.values()) == 105


def test_empty_profile_is_weak():
    strength = calculate_profile_strength(map_fallback_artist({"id": ARTIST_ID, "full_name": "New Artist"}))

    assert strength.total_strength == 0
    assert strength.status == "Weak"
    assert len(strength.incomplete_sections) == len(SECTIONS)


def test_complete_profile_is_capped_at_one_hundred():
    strength = calculate_profile_strength(map_artist_row(COMPLETE_ROW))

    assert strength.total_strength == MAX_STRENGTH == 100
    assert strength.status == "Strong"
    assert strength.incomplete_sections == []


def test_work_links_section_counts():
    without_links = dict(COMPLETE_ROW, work_links=[], awards=[], tools_software=[])
    with_links = dict(without_links, work_links=COMPLETE_ROW["work_links"])

    assert calculate_profile_strength(map_artist_row(without_links)).total_strength == 85
    assert calculate_profile_strength(map_artist_row(with_links)).total_strength == 95


def test_basic_information_needs_phone_and_date_of_birth():
    row = dict(COMPLETE_ROW, phone_number=None)
    strength = calculate_profile_strength(map_artist_row(row))
    assert "Basic Information" in strength.incomplete_sections

    row = dict(COMPLETE_ROW, date_of_birth=None, category=None)
    strength = calculate_profile_strength(map_artist_row(row))
    assert "Basic Information" in strength.incomplete_sections

    row = dict(COMPLETE_ROW, category=None)
    strength = calculate_profile_strength(map_artist_row(row))
    assert "Basic Information" not in strength.incomplete_sections


def test_social_links_ignore_linkedin_and_website():
    base = dict(COMPLETE_ROW, instagram=None)

    only_professional = dict(base, linkedin="https://linkedin.com/in/asha", personal_website="https://asha.in")
    assert "Social Links" in calculate_profile_strength(map_artist_row(only_professional)).incomplete_sections

    youtube = dict(base, youtube_vimeo="https://youtube.com/@asha")
    assert "Social Links" not in calculate_profile_strength(map_artist_row(youtube)).incomplete_sections

    custom = dict(base, custom_links='[{"title": "Portfolio", "url": "https://asha.in"}]')
    assert "Social Links" not in calculate_profile_strength(map_artist_row(custom)).incomplete_sections

    untitled = dict(base, custom_links=[{"url": "https://asha.in"}])
    assert "Social Links" in calculate_profile_strength(map_artist_row(untitled)).incomplete_sections


def test_partial_profile_lists_missing_sections():
    artist = map_artist_row({
        "id": ARTIST_ID,
        "full_name": "Asha Rao",
        "profile_picture_url": "https://cdn.example.com/p.jpg",
        "media_assets": [{"url": "u", "file_name": "f", "file_type": "image/jpeg"}],
        "projects": [{"project_name": "Play", "role_in_project": "Lead"}],
    })

    strength = calculate_profile_strength(artist)

    assert strength.total_strength == 40
    assert strength.status == "Moderate"
    assert "Profile Picture" not in strength.incomplete_sections
    assert "Work Links" in strength.incomplete_sections


def test_status_thresholds():
    assert strength_status(39) == "Weak"
    assert strength_status(40) == "Moderate"
    assert strength_status(69) == "Moderate"
    assert strength_status(70) == "Strong"
