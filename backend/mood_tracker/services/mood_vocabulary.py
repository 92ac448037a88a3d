"""Mood vocabulary — label and emoji for each mood level (1–5)."""

UNKNOWN_DESCRIPTION = "Unknown"
UNKNOWN_EMOJI = "❓"

MOOD_DESCRIPTIONS = {
    1: "Very Bad",
    2: "Bad",
    3: "Neutral",
    4: "Good",
    5: "Very Good",
}

MOOD_EMOJIS = {
    1: "😞",
    2: "😔",
    3: "😐",
    4: "😊",
    5: "😁",
}


def get_mood_description(level: int) -> str:
    return MOOD_DESCRIPTIONS.get(level, UNKNOWN_DESCRIPTION)


def get_mood_emoji(level: int) -> str:
    return MOOD_EMOJIS.get(level, UNKNOWN_EMOJI)
