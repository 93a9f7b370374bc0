from __future__ import annotations

from typing import Any, Dict, List, Optional


# Industry families used for "related" niche matches
RELATED_INDUSTRIES: Dict[str, List[str]] = {
    "fashion": ["clothing", "beauty", "accessories", "lifestyle"],
    "technology": ["electronics", "gadgets", "software", "gaming"],
    "food": ["cooking", "restaurant", "beverages", "nutrition"],
    "fitness": ["health", "sports", "wellness", "nutrition"],
    "travel": ["tourism", "hospitality", "adventure", "lifestyle"],
}

EXACT_NICHE_POINTS = 100
RELATED_NICHE_POINTS = 50
PRIOR_COLLABORATION_POINTS = 30
JITTER_RANGE = 20  # jitter is drawn from [0, JITTER_RANGE)


def _norm(s: Optional[str]) -> str:
    return (s or "").strip().lower()


def is_related_niche(industry_a: Optional[str], industry_b: Optional[str]) -> bool:
    """
    True when the two categories belong to the same family: one contains a
    family key and the other contains that key or one of its members, or
    both contain the same member.
    """
    a = _norm(industry_a)
    b = _norm(industry_b)
    if not a or not b:
        return False

    for key, members in RELATED_INDUSTRIES.items():
        if key in a and (key in b or any(m in b for m in members)):
            return True
        if key in b and (key in a or any(m in a for m in members)):
            return True
        if any(m in a and m in b for m in members):
            return True

    return False


def _niche_score(industry: Optional[str], niche: Optional[str]) -> int:
    # unset on either side is a non-match, not an error
    if not _norm(industry) or not _norm(niche):
        return 0
    if _norm(industry) == _norm(niche):
        return EXACT_NICHE_POINTS
    if is_related_niche(industry, niche):
        return RELATED_NICHE_POINTS
    return 0


def _budget_score(rate: float, budget: float) -> int:
    if rate <= budget * 0.2:
        return 50
    if rate <= budget * 0.4:
        return 25
    return 0


def _followers_score(followers: int) -> int:
    if followers > 1_000_000:
        return 40
    if followers > 100_000:
        return 30
    if followers > 10_000:
        return 20
    return 10


def compute_match_score(
    *,
    industry: Optional[str],
    niche: Optional[str],
    rate: float,
    budget: float,
    followers: int,
    prior_collaboration: bool = False,
    jitter: int = 0,
) -> Dict[str, Any]:
    """
    Additive brand/influencer compatibility score. Not calibrated to a fixed
    scale; only meaningful for ranking candidates against each other.

    Returns:
      {
        score: int,
        breakdown: dict
      }
    """
    n_score = _niche_score(industry, niche)       # 0 / 50 / 100
    b_score = _budget_score(rate, budget)         # 0 / 25 / 50
    f_score = _followers_score(followers)         # 10–40
    c_score = PRIOR_COLLABORATION_POINTS if prior_collaboration else 0

    base = n_score + b_score + f_score + c_score

    breakdown: Dict[str, Any] = {
        "niche_score": n_score,
        "budget_score": b_score,
        "followers_score": f_score,
        "collaboration_score": c_score,
        "base_score": base,
        "jitter": jitter,
        "notes": [],
    }

    if n_score == EXACT_NICHE_POINTS:
        breakdown["notes"].append("Niche matches brand industry")
    elif n_score == RELATED_NICHE_POINTS:
        breakdown["notes"].append("Niche is in a related industry")
    if b_score == 50:
        breakdown["notes"].append("Rate fits comfortably in campaign budget")
    if c_score:
        breakdown["notes"].append("Worked with this brand before")

    return {"score": base + jitter, "breakdown": breakdown}


# ---------- budget / platform heuristics ----------

CAMPAIGN_TYPE_MULTIPLIERS = {
    "product launch": 2.0,
    "product-launch": 2.0,
    "awareness": 1.5,
    "engagement": 1.2,
}
BUDGET_BUFFER = 1.2
DEFAULT_AVERAGE_RATE = 500.0


def campaign_type_multiplier(campaign_type: Optional[str]) -> float:
    return CAMPAIGN_TYPE_MULTIPLIERS.get(_norm(campaign_type), 1.0)


# (substrings, platforms to add, platforms to drop)
INDUSTRY_PLATFORM_RULES = [
    (("fashion", "beauty", "lifestyle", "food"), ("TikTok", "Pinterest"), ()),
    (("tech", "gaming", "software", "business"), ("Twitter", "LinkedIn", "YouTube"), ()),
    (("entertainment", "music"), ("TikTok", "YouTube", "Twitch"), ()),
]

AUDIENCE_PLATFORM_RULES = [
    (("young", "teen", "gen z"), ("TikTok", "Snapchat"), ("LinkedIn",)),
    (("professional", "business", "corporate"), ("LinkedIn", "Twitter"), ("Snapchat",)),
]


def platforms_for(industry: Optional[str], audience: Optional[str]) -> List[str]:
    platforms: List[str] = ["Instagram"]

    def apply(text: str, rules) -> None:
        for needles, add, drop in rules:
            if any(n in text for n in needles):
                platforms.extend(add)
                for p in drop:
                    # drops only the first occurrence, like list.remove
                    if p in platforms:
                        platforms.remove(p)

    apply(_norm(industry), INDUSTRY_PLATFORM_RULES)
    apply(_norm(audience), AUDIENCE_PLATFORM_RULES)

    # dedupe, keep first-seen order
    return list(dict.fromkeys(platforms))
