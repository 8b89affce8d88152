"""
Closed vocabularies used by the cleaning heuristics
"""
import re

US_STATES = frozenset([
    'AL', 'AK', 'AZ', 'AR', 'CA', 'CO', 'CT', 'DE', 'FL', 'GA',
    'HI', 'ID', 'IL', 'IN', 'IA', 'KS', 'KY', 'LA', 'ME', 'MD',
    'MA', 'MI', 'MN', 'MS', 'MO', 'MT', 'NE', 'NV', 'NH', 'NJ',
    'NM', 'NY', 'NC', 'ND', 'OH', 'OK', 'OR', 'PA', 'RI', 'SC',
    'SD', 'TN', 'TX', 'UT', 'VT', 'VA', 'WA', 'WV', 'WI', 'WY', 'DC',
])

# City names that show up in the State column of shifted exports
COMMON_CITIES = frozenset([
    'seattle', 'bellevue', 'redmond', 'tacoma', 'spokane', 'vancouver',
    'portland', 'san francisco', 'los angeles', 'new york', 'chicago',
    'boston', 'denver', 'phoenix', 'dallas', 'houston', 'atlanta',
    'miami', 'orlando', 'las vegas', 'san diego', 'austin', 'sammamish',
    'kirkland', 'renton', 'kent', 'bothell', 'woodinville', 'issaquah',
])

# Organizational roles that appear in name columns
NON_PERSON_NAMES = frozenset([
    'payable', 'billing', 'accounts', 'accounts payable', 'accounts receivable',
    'receivable', 'shuttle', 'bus', 'van', 'driver', 'office', 'admin',
    'dispatch', 'reservation', 'reservations', 'booking', 'bookings', 'fleet',
    'maintenance', 'operations', 'corporate', 'company', 'business',
    'dept', 'department', 'accounting', 'front desk', 'concierge',
])

GARBAGE_ADDRESS_PATTERNS = [
    re.compile(r'^tbd$', re.I),
    re.compile(r'^hotel\s*tbd$', re.I),
    re.compile(r'^address\s*tbd$', re.I),
    re.compile(r'^tba$', re.I),
    re.compile(r'^n/?a$', re.I),
    re.compile(r'^unknown$', re.I),
    re.compile(r'^pending$', re.I),
    re.compile(r'restaurant\s+in\s+', re.I),
    re.compile(r'^see\s+notes?$', re.I),
    re.compile(r'^contact\s+for\s+', re.I),
]

EVENT_KEYWORDS = re.compile(r'\b(wedding|reception|ceremony|rehearsal)\b', re.I)

# VIP/test/demo placeholder phrasing in name columns
PLACEHOLDER_NAME_PATTERNS = [
    re.compile(r'^vip\b', re.I),
    re.compile(r'\bvip\s+(guest|client|passenger|customer)\b', re.I),
    re.compile(r'^test\b', re.I),
    re.compile(r'\btest\s+(user|account|contact|customer|booking)\b', re.I),
    re.compile(r'^demo\b', re.I),
    re.compile(r'^(guest|passenger|client|customer)\s*#?\d*$', re.I),
    re.compile(r'^(tbd|tba|n/?a|unknown|none)$', re.I),
]

# Reservation name values that are always a charge line or an office
RESERVATION_NON_PERSON_PATTERNS = [
    re.compile(r'\b\d+\s*-?\s*(pax|passengers?)\b', re.I),
    re.compile(r'\b(surcharge|gratuity|discount)\b', re.I),
    re.compile(r'\b(office|dispatch|headquarters|hq|front\s+desk|concierge|reservations?)\b', re.I),
]

# A name value made only of these words describes a vehicle. At least one
# word must come from VEHICLE_NOUNS, so "Van Dyke" or "Lincoln" stay names.
VEHICLE_NOUNS = frozenset([
    'sedan', 'suv', 'limo', 'limousine', 'sprinter', 'minibus', 'coach',
    'motorcoach', 'bus', 'van', 'shuttle', 'car', 'suburban', 'escalade',
])

VEHICLE_QUALIFIERS = frozenset([
    'stretch', 'party', 'mini', 'motor', 'black', 'white', 'luxury',
    'executive', 'pax', 'passenger', 'passengers', 'mercedes', 'lincoln',
    'cadillac', 'chevy', 'chevrolet', 'ford', 'town', 'navigator', 'transit',
    'hummer', 'exec', 'vip',
])

# Same rule for charge lines: "Parking Fee" is a charge, "Bob Toll" a person
CHARGE_NOUNS = frozenset([
    'toll', 'tolls', 'parking', 'fuel', 'fee', 'fees', 'tax', 'taxes',
    'stc', 'charge', 'charges',
])

CHARGE_QUALIFIERS = frozenset([
    'airport', 'extra', 'stop', 'stops', 'wait', 'waiting', 'time', 'meet',
    'greet', 'and', 'service', 'sales', 'admin', 'booking',
])
