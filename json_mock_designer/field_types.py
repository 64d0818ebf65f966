"""Semantic field types: name-based detection and synthetic value generation.

`detect_field_type` ranks the types a field name most likely refers to, using
an ordered table of (pattern, type, confidence) rules. Every semantic type also
has a generator backed by Faker, so a suggestion always carries an example
value and the mock generator can fill any leaf on demand.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Pattern, Tuple

from faker import Faker

logger = logging.getLogger(__name__)

PRIMITIVE_TYPES = ('string', 'number', 'boolean')


def _rule(pattern: str, type_name: str, confidence: float) -> Tuple[Pattern[str], str, float]:
    return re.compile(pattern, re.IGNORECASE), type_name, confidence


# Order matters only for ties: the sort below is stable.
FIELD_PATTERNS: List[Tuple[Pattern[str], str, float]] = [
    # email
    _rule(r'^(email|e_mail|mail|email_address)$', 'email', 0.9),
    _rule(r'email$', 'email', 0.8),
    # names
    _rule(r'^(first_name|firstName|first|fname|given_name)$', 'firstName', 0.9),
    _rule(r'^(last_name|lastName|last|lname|surname|family_name)$', 'lastName', 0.9),
    _rule(r'^(full_name|fullName|name|display_name)$', 'fullName', 0.8),
    _rule(r'name$', 'fullName', 0.6),
    # contact
    _rule(r'^(phone|telephone|tel|phone_number|mobile|cell)$', 'phone', 0.9),
    _rule(r'(phone|tel)$', 'phone', 0.7),
    # address
    _rule(r'^(address|street|street_address|addr)$', 'address', 0.9),
    _rule(r'^(city|town)$', 'city', 0.9),
    _rule(r'^(country|nation)$', 'country', 0.9),
    _rule(r'^(zip|zipcode|zip_code|postal|postal_code|postcode)$', 'zipCode', 0.9),
    # company
    _rule(r'^(company|corp|corporation|business|organization|org)$', 'company', 0.9),
    _rule(r'^(job|position|role|title|job_title|occupation)$', 'jobTitle', 0.8),
    # dates
    _rule(r'^(date|created|updated|birth|birthday|born|timestamp)$', 'date', 0.8),
    _rule(r'(date|time)$', 'date', 0.6),
    # web
    _rule(r'^(url|link|website|site|homepage)$', 'url', 0.9),
    _rule(r'^(username|user|login|handle)$', 'username', 0.8),
    _rule(r'^(password|pass|pwd|secret)$', 'password', 0.9),
    _rule(r'^(id|uuid|guid|identifier)$', 'uuid', 0.8),
    _rule(r'^(avatar|profile_pic|picture|photo|image)$', 'avatar', 0.8),
    # financial
    _rule(r'^(price|cost|amount|value|fee)$', 'price', 0.8),
    _rule(r'^(currency|curr)$', 'currency', 0.9),
    _rule(r'^(credit_card|card|cc|card_number)$', 'creditCard', 0.9),
    _rule(r'^(iban|bank_account|account)$', 'iban', 0.8),
    # other
    _rule(r'^(color|colour)$', 'color', 0.9),
    _rule(r'^(ip|ip_address|ipv4)$', 'ip', 0.9),
    _rule(r'^(mac|mac_address)$', 'mac', 0.9),
    _rule(r'^(domain|hostname|host)$', 'domain', 0.8),
    _rule(r'^(age|years)$', 'age', 0.8),
    _rule(r'^(gender|sex)$', 'gender', 0.9),
    _rule(r'^(description|desc|summary|bio|about)$', 'description', 0.7),
    _rule(r'^(title|heading|subject)$', 'title', 0.6),
    _rule(r'^(image|img|pic|picture|photo)$', 'image', 0.7),
]

FIELD_TYPE_DESCRIPTIONS: Dict[str, str] = {
    'string': "Generic text string",
    'number': "Numeric value",
    'boolean': "True/false value",
    'object': "Nested object",
    'array': "Array/list of items",
    'email': "Valid email address",
    'firstName': "Person's first name",
    'lastName': "Person's last name",
    'fullName': "Person's full name",
    'phone': "Phone number",
    'address': "Street address",
    'city': "City name",
    'country': "Country name",
    'zipCode': "Postal/ZIP code",
    'company': "Company name",
    'jobTitle': "Job title/position",
    'date': "Date in YYYY-MM-DD format",
    'url': "Web URL",
    'username': "Username/handle",
    'password': "Password string",
    'uuid': "Unique identifier",
    'avatar': "Avatar image URL",
    'price': "Price/currency amount",
    'currency': "Currency code",
    'creditCard': "Credit card number",
    'iban': "IBAN bank account",
    'color': "Color name",
    'ip': "IP address",
    'mac': "MAC address",
    'domain': "Domain name",
    'age': "Age in years",
    'gender': "Gender/sex",
    'description': "Descriptive text",
    'title': "Title or heading",
    'image': "Image URL",
}

_fake = Faker('en_US')


def configure_faker(locale: str = 'en_US', seed: Optional[int] = None) -> Faker:
    """Replace the shared Faker instance; a seed makes generated values reproducible."""
    global _fake
    _fake = Faker(locale)
    if seed is not None:
        _fake.seed_instance(seed)
    return _fake


FIELD_GENERATORS: Dict[str, Callable[[], Any]] = {
    'string': lambda: ' '.join(_fake.words(nb=2)),
    'number': lambda: _fake.random_int(min=1, max=1000),
    'boolean': lambda: _fake.pybool(),
    'object': lambda: {},
    'array': lambda: [],
    'email': lambda: _fake.email(),
    'firstName': lambda: _fake.first_name(),
    'lastName': lambda: _fake.last_name(),
    'fullName': lambda: _fake.name(),
    'phone': lambda: _fake.phone_number(),
    'address': lambda: _fake.street_address(),
    'city': lambda: _fake.city(),
    'country': lambda: _fake.country(),
    'zipCode': lambda: _fake.postcode(),
    'company': lambda: _fake.company(),
    'jobTitle': lambda: _fake.job(),
    'date': lambda: _fake.date_between(start_date='-30d', end_date='today').isoformat(),
    'url': lambda: _fake.url(),
    'username': lambda: _fake.user_name(),
    'password': lambda: _fake.password(),
    'uuid': lambda: _fake.uuid4(),
    'avatar': lambda: _fake.image_url(width=128, height=128),
    'price': lambda: round(_fake.pyfloat(right_digits=2, min_value=1, max_value=1000), 2),
    'currency': lambda: _fake.currency_code(),
    'creditCard': lambda: _fake.credit_card_number(),
    'iban': lambda: _fake.iban(),
    'color': lambda: _fake.color_name(),
    'ip': lambda: _fake.ipv4(),
    'mac': lambda: _fake.mac_address(),
    'domain': lambda: _fake.domain_name(),
    'age': lambda: _fake.random_int(min=18, max=80),
    'gender': lambda: _fake.random_element(('male', 'female')),
    'description': lambda: _fake.sentence(),
    'title': lambda: ' '.join(_fake.words(nb=3)),
    'image': lambda: _fake.image_url(),
}


@dataclass
class FieldSuggestion:
    type: str
    confidence: float
    description: str
    example: Any
    generator: Callable[[], Any]


def _suggest(type_name: str, confidence: float) -> FieldSuggestion:
    generator = FIELD_GENERATORS[type_name]
    return FieldSuggestion(
        type=type_name,
        confidence=confidence,
        description=FIELD_TYPE_DESCRIPTIONS[type_name],
        example=generator(),
        generator=generator,
    )


def detect_field_type(field_name: str) -> List[FieldSuggestion]:
    """Rank the semantic types `field_name` most likely refers to.

    Every matching rule contributes one suggestion (with a freshly generated
    example); the result is sorted by confidence, highest first. A name no
    rule matches yields a single `string` suggestion at confidence 0.5.
    """
    name = field_name or ''
    suggestions = [_suggest(t, c) for pattern, t, c in FIELD_PATTERNS if pattern.search(name)]
    suggestions.sort(key=lambda s: s.confidence, reverse=True)

    if not suggestions:
        suggestions.append(_suggest('string', 0.5))
    return suggestions


def get_best_field_type(field_name: str) -> FieldSuggestion:
    return detect_field_type(field_name)[0]


def generate_value_for_type(type_name: str) -> Any:
    generator = FIELD_GENERATORS.get(type_name)
    if generator is None:
        logger.warning("No generator for field type %r, using 'string'", type_name)
        generator = FIELD_GENERATORS['string']
    return generator()


def get_available_field_types() -> List[Tuple[str, str]]:
    return list(FIELD_TYPE_DESCRIPTIONS.items())


def is_primitive_type(type_name: str) -> bool:
    """Primitive leaves honour a literal `value`; every other leaf is generated."""
    return type_name in PRIMITIVE_TYPES


def is_smart_type(type_name: str) -> bool:
    return not is_primitive_type(type_name) and type_name != 'object'
