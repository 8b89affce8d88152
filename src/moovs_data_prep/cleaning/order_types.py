"""
Order type normalization
"""
import re
from typing import Optional

from ..schemas import DEFAULT_ORDER_TYPE, ORDER_TYPES

_ORDER_TYPE_SET = frozenset(ORDER_TYPES)

# Keyword -> canonical order type; more specific phrases come first
ORDER_TYPE_ALIASES = [
    ('airport pick up', 'airport-pick-up'),
    ('airport pickup', 'airport-pick-up'),
    ('airport arrival', 'airport-pick-up'),
    ('from airport', 'airport-pick-up'),
    ('airport drop off', 'airport-drop-off'),
    ('airport dropoff', 'airport-drop-off'),
    ('airport departure', 'airport-drop-off'),
    ('to airport', 'airport-drop-off'),
    ('airport', 'airport'),
    ('bachelorette', 'bachelor-bachelorette'),
    ('bachelor', 'bachelor-bachelorette'),
    ('bar mitzvah', 'bar-bat-mitzvah'),
    ('bat mitzvah', 'bar-bat-mitzvah'),
    ('21st', 'birthday-21'),
    ('kids birthday', 'kids-birthday'),
    ('birthday', 'birthday'),
    ('brewery', 'brew-tour'),
    ('brew', 'brew-tour'),
    ('bridal', 'bridal-party'),
    ('bride', 'bride-groom'),
    ('wedding', 'wedding'),
    ('business', 'business-trip'),
    ('corporate', 'corporate'),
    ('concert', 'concert'),
    ('funeral', 'funeral'),
    ('golf', 'golf'),
    ('graduation', 'graduation'),
    ('prom', 'prom-homecoming'),
    ('homecoming', 'prom-homecoming'),
    ('quince', 'quinceanera'),
    ('sweet 16', 'sweet-16'),
    ('sweet sixteen', 'sweet-16'),
    ('train', 'train-station'),
    ('amtrak', 'train-station'),
    ('seaport', 'seaport'),
    ('cruise', 'seaport'),
    ('winery', 'wine-tour'),
    ('wine', 'wine-tour'),
    ('night out', 'night-out'),
    ('hospital', 'medical'),
    ('medical', 'medical'),
    ('field trip', 'field-trip'),
    ('fundraiser', 'school-fundraiser'),
    ('school', 'school'),
    ('family reunion', 'family-reunion'),
    ('reunion', 'family-reunion'),
    ('holiday', 'holiday'),
    ('football', 'football'),
    ('baseball', 'baseball'),
    ('basketball', 'basketball'),
    ('hockey', 'hockey'),
    ('sporting', 'sporting-event'),
    ('game', 'sporting-event'),
    ('shopping', 'retail'),
    ('retail', 'retail'),
    ('leisure', 'leisure'),
    ('personal', 'personal-trip'),
    ('anniversary', 'special-occasion'),
    ('special occasion', 'special-occasion'),
    ('point to point', 'point-to-point'),
    ('transfer', 'point-to-point'),
    ('hourly', 'point-to-point'),
]


def normalize_order_type(value: Optional[str]) -> str:
    """Map a free-text service type onto the closed order type vocabulary"""
    text = re.sub(r'[\s\-_/]+', ' ', (value or '').strip().lower()).strip()
    if not text:
        return DEFAULT_ORDER_TYPE

    hyphenated = text.replace(' ', '-')
    if hyphenated in _ORDER_TYPE_SET:
        return hyphenated

    for keyword, canonical in ORDER_TYPE_ALIASES:
        if text == keyword:
            return canonical
    for keyword, canonical in ORDER_TYPE_ALIASES:
        if keyword in text:
            return canonical
    return DEFAULT_ORDER_TYPE


def is_valid_order_type(value: Optional[str]) -> bool:
    return (value or '').strip().lower() in _ORDER_TYPE_SET
