"""
Weighted profile completeness score.

The section weights add up to 105, so a fully completed profile would
overflow; the reported total is capped at 100.
"""

from typing import List, Tuple

from maasta.schemas.artist import ArtistRead, ProfileStrength, ProfileStrengthSection

MAX_STRENGTH = 100
STRONG_THRESHOLD = 70
MODERATE_THRESHOLD = 40

# (name, weight, description)
SECTIONS: List[Tuple[str, int, str]] = [
    ("Basic Information", 5, "Complete your name, bio, phone, city and date of birth"),
    ("Profile Picture", 10, "Add your profile picture"),
    ("Cover Picture", 5, "Add a cover image to your profile"),
    ("Media Portfolio", 15, "Upload photos or videos to showcase your work"),
    ("Projects", 15, "Add your film, theater or other creative projects"),
    ("Social Links", 10, "Add Instagram, YouTube or custom portfolio links"),
    ("Skills", 10, "List your special skills and talents"),
    ("Languages", 5, "Add languages you speak"),
    ("Tools", 5, "List software and tools you use"),
    ("Education", 10, "Add your educational background and training"),
    ("Awards", 5, "Showcase your achievements and awards"),
    ("Work Links", 10, "Add links to your work portfolio, demo reels or projects"),
]


def _section_checks(artist: ArtistRead) -> dict:
    return {
        "Basic Information": bool(
            artist.full_name
            and artist.bio
            and artist.phone_number
            and artist.city
            and artist.date_of_birth
        ),
        "Profile Picture": bool(artist.profile_picture_url),
        "Cover Picture": bool(artist.cover_image_url),
        "Media Portfolio": bool(artist.media_assets),
        "Projects": bool(artist.projects),
        # custom_links only holds entries with both a title and a url
        "Social Links": any([artist.instagram, artist.youtube_vimeo, artist.custom_links]),
        "Skills": bool(artist.special_skills),
        "Languages": bool(artist.language_skills),
        "Tools": bool(artist.tools_software),
        "Education": bool(artist.education_training),
        "Awards": bool(artist.awards),
        "Work Links": bool(artist.work_links),
    }


def strength_status(total: int) -> str:
    if total >= STRONG_THRESHOLD:
        return "Strong"
    if total >= MODERATE_THRESHOLD:
        return "Moderate"
    return "Weak"


def calculate_profile_strength(artist: ArtistRead) -> ProfileStrength:
    checks = _section_checks(artist)
    sections = [
        ProfileStrengthSection(name=name, weight=weight, completed=checks[name], description=description)
        for name, weight, description in SECTIONS
    ]
    total = min(sum(section.weight for section in sections if section.completed), MAX_STRENGTH)
    return ProfileStrength(
        total_strength=total,
        status=strength_status(total),
        sections=sections,
        incomplete_sections=[section.name for section in sections if not section.completed],
    )
