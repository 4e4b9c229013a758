from __future__ import annotations

from typing import List, Sequence

from apps.users.services import get_users

STARTER_COUNT = 3

GENERIC_OPENERS = (
    "שלום! נשמח לשמוע מה הבילוי המושלם בעינייך? 😊",
    "מה הדבר שהכי מרגש אותך בלהכיר מישהו חדש?",
    "אם היינו בוחרים פעילות ראשונה יחד, מה היית מציעה?",
)

INTEREST_OPENERS = (
    "שמתי לב שגם אתם אוהבים {interest}. מה הכי כיף בזה בשבילכם?",
    "אם היינו מתכננים מפגש סביב {interest}, איך הוא היה נראה?",
    "איזה זיכרון מגניב יש לכם שקשור ל-{interest}?",
)


def intersect_interests(source: Sequence[str] | None, target: Sequence[str] | None) -> List[str]:
    """Interests of ``source`` that ``target`` also lists, keeping ``source`` order."""
    target_set = set(target or [])
    return [interest for interest in source or [] if interest in target_set]


def extract_shared_interests(user_a: object, user_b: object) -> List[str]:
    first, second = get_users([user_a, user_b])
    return intersect_interests(first.interests, second.interests)


def opening_lines(shared: Sequence[str]) -> List[str]:
    if not shared:
        return list(GENERIC_OPENERS)
    interest = shared[0]
    return [template.format(interest=interest) for template in INTEREST_OPENERS]
