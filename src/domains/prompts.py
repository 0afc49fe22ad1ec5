"""
Prompt builders for the generative-text features: dashboard campaign ideas
and finder outreach messages.
"""

from __future__ import annotations

from typing import Sequence


def campaign_ideas_prompt(low_stock_types: Sequence[str]) -> str:
    """Ask for three donation-drive ideas targeted at the blood types running low."""
    needed = ", ".join(low_stock_types) or "all types"
    return (
        "As an expert marketing strategist for a blood donation center, generate 3 creative "
        "and engaging campaign ideas to attract more donors. The current urgent need is for "
        f"the following blood types: {needed}. For each idea, provide: 1. A catchy slogan. "
        "2. A brief theme description. 3. A sample social media post (under 280 characters). "
        "Format the response clearly using markdown."
    )


def outreach_message_prompt(city: str, state: str, blood_types: Sequence[str]) -> str:
    """Ask for a short SMS/email to donors in a location, naming the blood types found there."""
    return (
        "Create a polite and encouraging outreach message (SMS or email) for registered blood "
        f"donors in {city}, {state}. The message should be friendly and appreciative. Mention "
        "that there is a need for donations in their local area. Specifically mention the need "
        f"for these blood types if relevant: {', '.join(blood_types)}. Encourage them to "
        "schedule an appointment. Keep it concise and professional. Do not include placeholders "
        "like [Clinic Name] or [Link]."
    )
