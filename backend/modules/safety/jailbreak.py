"""
Prompt-injection detection.

A fixed set of case-insensitive rules matched against free text. Pure and
synchronous; no network access.
"""

import re

from .models import InjectionDetection

INJECTION_RULES: tuple[tuple[str, re.Pattern[str]], ...] = (
    (
        "ignore_instructions",
        re.compile(r"ignore (all|previous|above) (instructions|rules|directions|messages)", re.I),
    ),
    (
        "reveal_system",
        re.compile(r"(reveal|show|expose|leak) (the )?(system|developer) (prompt|message|instructions)", re.I),
    ),
    (
        "system_prompt",
        re.compile(r"(system prompt|developer message|hidden prompt|hidden instructions)", re.I),
    ),
    (
        "override_policy",
        re.compile(r"(override|bypass) (safety|policy|guardrails|filters)", re.I),
    ),
    (
        "prompt_injection",
        re.compile(r"(prompt injection|jailbreak|\bDAN\b|do anything now)", re.I),
    ),
)


def detect_prompt_injection(text: str) -> InjectionDetection:
    """
    Scan text for prompt-injection phrasing.

    Args:
        text: Text to scan

    Returns:
        InjectionDetection listing the ids of every matching rule
    """
    if not text:
        return InjectionDetection(flagged=False)

    matches = [rule_id for rule_id, pattern in INJECTION_RULES if pattern.search(text)]
    return InjectionDetection(flagged=bool(matches), matches=matches)
