"""Catalog of editable content keys with their fallback values.

Public pages render these defaults until an admin stores a value.
Descriptions give the chat editor and the dashboard a human label, and
supply the page/section a key belongs to when a write omits them.
"""

from typing import NamedTuple


class KeyInfo(NamedTuple):
    description: str
    page: str
    section: str


DEFAULT_TEXT_CONTENT: dict[str, str] = {
    "hero.headline": "BUILDING CHAMPIONS ON AND OFF THE FIELD",
    "hero.subtitle": (
        "Youth football programs for ages 5-14. Building character, discipline, "
        "and teamwork through the game we love."
    ),
    "hero.cta_primary": "Register Now",
    "hero.cta_secondary": "Learn More",
    "programs.section_title": "Our Programs",
    "impact.title": "THE RISEUP EFFECT",
    "impact.stat_1_value": "500+",
    "impact.stat_1_label": "Athletes Trained",
    "impact.stat_2_value": "24",
    "impact.stat_2_label": "Teams Strong",
    "impact.stat_3_value": "95%",
    "impact.stat_3_label": "Return Rate",
    "impact.stat_4_value": "1,000+",
    "impact.stat_4_label": "Hours Coached",
    "impact.testimonial_quote": (
        "RiseUp taught my son that failure is just another rep. He's a different kid now."
    ),
    "impact.testimonial_author": "Sarah M.",
    "impact.testimonial_role": "Flag Football Parent",
}

DEFAULT_IMAGE_CONTENT: dict[str, dict] = {
    "hero.poster": {"url": "/images/hero-poster.jpg", "alt": "Youth football players on the field"},
    "hero.video": {"url": "/videos/hero.mp4", "alt": "Hero background video"},
    "header.logo": {"url": "/images/logo.png", "alt": "RiseUp Youth Football logo"},
    "scroll_reveal.earth_background": {
        "url": "https://images.unsplash.com/photo-1451187580459-43490279c0fa?w=1920&q=80",
        "alt": "Earth horizon from space",
    },
    "programs.flag_football.image_1": {"url": "", "alt": "Flag football program image 1"},
    "programs.flag_football.image_2": {"url": "", "alt": "Flag football program image 2"},
    "programs.flag_football.image_3": {"url": "", "alt": "Flag football program image 3"},
    "programs.tackle_football.image_1": {"url": "", "alt": "Tackle football program image 1"},
    "programs.tackle_football.image_2": {"url": "", "alt": "Tackle football program image 2"},
    "programs.tackle_football.image_3": {"url": "", "alt": "Tackle football program image 3"},
    "programs.academies.image_1": {"url": "", "alt": "Academies and clinics program image 1"},
    "programs.academies.image_2": {"url": "", "alt": "Academies and clinics program image 2"},
    "programs.academies.image_3": {"url": "", "alt": "Academies and clinics program image 3"},
    "tackle_football.hero": {
        "url": "/images/tackle-football-hero.jpg",
        "alt": "RiseUp Tackle Football Players",
    },
    "donation.flag_background": {
        "url": "https://images.unsplash.com/photo-1485230895905-ec40ba36b9bc?w=1920&q=80",
        "alt": "American flag background",
    },
}

TEXT_CONTENT_DESCRIPTIONS: dict[str, KeyInfo] = {
    "hero.headline": KeyInfo("Main headline on the homepage", "Homepage", "Hero"),
    "hero.subtitle": KeyInfo("Subtitle text below the main headline", "Homepage", "Hero"),
    "hero.cta_primary": KeyInfo("Primary call-to-action button text", "Homepage", "Hero"),
    "hero.cta_secondary": KeyInfo("Secondary call-to-action button text", "Homepage", "Hero"),
    "programs.section_title": KeyInfo("Section title for programs grid", "Homepage", "Programs"),
    "impact.title": KeyInfo("Impact section main title", "Homepage", "Impact"),
    "impact.stat_1_value": KeyInfo("First stat number (e.g., 500+)", "Homepage", "Impact"),
    "impact.stat_1_label": KeyInfo("First stat label (e.g., Athletes Trained)", "Homepage", "Impact"),
    "impact.stat_2_value": KeyInfo("Second stat number (e.g., 12)", "Homepage", "Impact"),
    "impact.stat_2_label": KeyInfo("Second stat label (e.g., Seasons Strong)", "Homepage", "Impact"),
    "impact.stat_3_value": KeyInfo("Third stat number (e.g., 95%)", "Homepage", "Impact"),
    "impact.stat_3_label": KeyInfo("Third stat label (e.g., Return Rate)", "Homepage", "Impact"),
    "impact.stat_4_value": KeyInfo("Fourth stat number (e.g., 1,000+)", "Homepage", "Impact"),
    "impact.stat_4_label": KeyInfo("Fourth stat label (e.g., Hours Coached)", "Homepage", "Impact"),
    "impact.testimonial_quote": KeyInfo("Featured testimonial quote", "Homepage", "Impact"),
    "impact.testimonial_author": KeyInfo("Testimonial author name", "Homepage", "Impact"),
    "impact.testimonial_role": KeyInfo("Testimonial author role/title", "Homepage", "Impact"),
}

IMAGE_CONTENT_DESCRIPTIONS: dict[str, KeyInfo] = {
    "hero.poster": KeyInfo("Hero background poster image", "Homepage", "Hero"),
    "hero.video": KeyInfo("Hero background video (plays on desktop)", "Homepage", "Hero"),
    "header.logo": KeyInfo("Site logo displayed in the navigation header", "All pages", "Header"),
    "scroll_reveal.earth_background": KeyInfo(
        "Earth from space background image for scroll reveal section", "Homepage", "Scroll Reveal"
    ),
    "programs.flag_football.image_1": KeyInfo("Flag football program tile image (slot 1)", "Homepage", "Programs"),
    "programs.flag_football.image_2": KeyInfo("Flag football program tile image (slot 2)", "Homepage", "Programs"),
    "programs.flag_football.image_3": KeyInfo("Flag football program tile image (slot 3)", "Homepage", "Programs"),
    "programs.tackle_football.image_1": KeyInfo("Tackle football program tile image (slot 1)", "Homepage", "Programs"),
    "programs.tackle_football.image_2": KeyInfo("Tackle football program tile image (slot 2)", "Homepage", "Programs"),
    "programs.tackle_football.image_3": KeyInfo("Tackle football program tile image (slot 3)", "Homepage", "Programs"),
    "programs.academies.image_1": KeyInfo("Academies & clinics program tile image (slot 1)", "Homepage", "Programs"),
    "programs.academies.image_2": KeyInfo("Academies & clinics program tile image (slot 2)", "Homepage", "Programs"),
    "programs.academies.image_3": KeyInfo("Academies & clinics program tile image (slot 3)", "Homepage", "Programs"),
    "tackle_football.hero": KeyInfo("Hero banner image for tackle football page", "Tackle Football", "Hero"),
    "donation.flag_background": KeyInfo("Faded flag background image for donation section", "Homepage", "Donation"),
}

# Keys the chat editor may change. The agent cannot address anything else.
CHAT_EDITABLE_TEXT_KEYS: tuple[str, ...] = (
    "hero.headline",
    "hero.subtitle",
    "hero.cta_primary",
    "hero.cta_secondary",
    "programs.section_title",
)


def describe(content_key: str) -> KeyInfo | None:
    """Catalog entry for a text or image key, if known."""
    return TEXT_CONTENT_DESCRIPTIONS.get(content_key) or IMAGE_CONTENT_DESCRIPTIONS.get(content_key)
