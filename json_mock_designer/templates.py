from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .models import MockSchema


@dataclass
class JsonTemplate:
    id: str
    name: str
    description: str
    category: str
    icon: str
    schema: MockSchema
    tags: List[str] = field(default_factory=list)


def _template(id, name, description, category, icon, tags, schema) -> JsonTemplate:
    return JsonTemplate(
        id=id,
        name=name,
        description=description,
        category=category,
        icon=icon,
        tags=tags,
        schema=MockSchema.from_dict(schema),
    )


JSON_TEMPLATES: List[JsonTemplate] = [
    _template(
        "user-profile", "User Profile", "Complete user profile with personal information",
        "user", "👤", ["user", "profile", "personal"],
        {
            "type": "object",
            "fields": [
                {"key": "id", "type": "number", "value": 1},
                {"key": "firstName", "type": "firstName", "value": "John"},
                {"key": "lastName", "type": "lastName", "value": "Doe"},
                {"key": "email", "type": "email", "value": "john.doe@example.com"},
                {"key": "age", "type": "age", "value": 25},
                {"key": "avatar", "type": "avatar"},
                {"key": "phone", "type": "phone", "value": "+1-234-567-8900"},
                {
                    "key": "address",
                    "type": "object",
                    "fields": [
                        {"key": "street", "type": "address"},
                        {"key": "city", "type": "city"},
                        {"key": "zipCode", "type": "zipCode"},
                        {"key": "country", "type": "country"},
                    ],
                },
            ],
        },
    ),
    _template(
        "user-list", "User List", "Array of users with basic information",
        "user", "👥", ["users", "list", "array"],
        {
            "type": "array",
            "length": 5,
            "fields": [
                {"key": "id", "type": "uuid"},
                {"key": "name", "type": "fullName"},
                {"key": "email", "type": "email"},
                {"key": "username", "type": "username"},
                {"key": "isActive", "type": "boolean", "value": True},
            ],
        },
    ),
    _template(
        "product", "Product", "E-commerce product with pricing and details",
        "ecommerce", "🛍️", ["product", "ecommerce", "shopping"],
        {
            "type": "object",
            "fields": [
                {"key": "id", "type": "number", "value": 1},
                {"key": "name", "type": "title"},
                {"key": "description", "type": "description"},
                {"key": "price", "type": "price"},
                {"key": "currency", "type": "currency"},
                {"key": "image", "type": "image"},
                {"key": "inStock", "type": "boolean", "value": True},
                {"key": "category", "type": "string", "value": "Electronics"},
                {"key": "tags", "type": "array", "length": 3, "fields": [{"key": "item", "type": "string", "value": "tech"}]},
            ],
        },
    ),
    _template(
        "order", "Order", "Customer order with items and billing",
        "ecommerce", "📦", ["order", "purchase", "billing"],
        {
            "type": "object",
            "fields": [
                {"key": "id", "type": "uuid"},
                {"key": "orderNumber", "type": "string", "value": "ORD-2024-001"},
                {"key": "customerId", "type": "number", "value": 123},
                {"key": "status", "type": "string", "value": "pending"},
                {"key": "total", "type": "price"},
                {"key": "currency", "type": "currency"},
                {"key": "orderDate", "type": "date"},
                {
                    "key": "items",
                    "type": "array",
                    "length": 3,
                    "fields": [
                        {"key": "productId", "type": "number", "value": 1},
                        {"key": "name", "type": "title"},
                        {"key": "quantity", "type": "number", "value": 2},
                        {"key": "price", "type": "price"},
                    ],
                },
            ],
        },
    ),
    _template(
        "blog-post", "Blog Post", "Blog article with author and metadata",
        "blog", "📝", ["blog", "article", "content"],
        {
            "type": "object",
            "fields": [
                {"key": "id", "type": "number", "value": 1},
                {"key": "title", "type": "title"},
                {"key": "slug", "type": "string", "value": "amazing-blog-post-title"},
                {"key": "content", "type": "description"},
                {"key": "publishedAt", "type": "date"},
                {"key": "readTime", "type": "number", "value": 5},
                {"key": "featured", "type": "boolean", "value": False},
                {
                    "key": "author",
                    "type": "object",
                    "fields": [
                        {"key": "id", "type": "number", "value": 1},
                        {"key": "name", "type": "fullName"},
                        {"key": "email", "type": "email"},
                        {"key": "avatar", "type": "avatar"},
                    ],
                },
                {"key": "tags", "type": "array", "length": 4, "fields": [{"key": "item", "type": "string", "value": "technology"}]},
            ],
        },
    ),
    _template(
        "api-response", "API Response", "Standard API response with data and metadata",
        "api", "🌐", ["api", "response", "standard"],
        {
            "type": "object",
            "fields": [
                {"key": "success", "type": "boolean", "value": True},
                {"key": "message", "type": "string", "value": "Request successful"},
                {"key": "statusCode", "type": "number", "value": 200},
                {"key": "timestamp", "type": "date"},
                {
                    "key": "data",
                    "type": "object",
                    "fields": [
                        {"key": "id", "type": "number", "value": 1},
                        {"key": "name", "type": "string", "value": "Sample Data"},
                    ],
                },
            ],
        },
    ),
    _template(
        "api-error-response", "API Error Response", "Standard error response with details and debugging info",
        "api", "❌", ["api", "error", "debugging", "response"],
        {
            "type": "object",
            "fields": [
                {"key": "success", "type": "boolean", "value": False},
                {"key": "error", "type": "string", "value": "ValidationError"},
                {"key": "message", "type": "string", "value": "Invalid input parameters"},
                {"key": "statusCode", "type": "number", "value": 400},
                {"key": "requestId", "type": "uuid"},
                {
                    "key": "details",
                    "type": "array",
                    "length": 2,
                    "fields": [
                        {"key": "field", "type": "string", "value": "email"},
                        {"key": "message", "type": "string", "value": "Invalid email format"},
                    ],
                },
            ],
        },
    ),
    _template(
        "paginated-response", "Paginated Response", "API response with pagination metadata and data",
        "api", "📄", ["api", "pagination", "list", "metadata"],
        {
            "type": "object",
            "fields": [
                {"key": "success", "type": "boolean", "value": True},
                {
                    "key": "data",
                    "type": "array",
                    "length": 10,
                    "fields": [
                        {"key": "id", "type": "number", "value": 1},
                        {"key": "name", "type": "title"},
                        {"key": "createdAt", "type": "date"},
                    ],
                },
                {
                    "key": "pagination",
                    "type": "object",
                    "fields": [
                        {"key": "currentPage", "type": "number", "value": 1},
                        {"key": "totalPages", "type": "number", "value": 15},
                        {"key": "pageSize", "type": "number", "value": 10},
                        {"key": "hasNext", "type": "boolean", "value": True},
                    ],
                },
            ],
        },
    ),
]


def get_templates_by_category(category: str) -> List[JsonTemplate]:
    return [t for t in JSON_TEMPLATES if t.category == category]


def search_templates(query: str) -> List[JsonTemplate]:
    needle = (query or '').lower()
    return [
        t for t in JSON_TEMPLATES
        if needle in t.name.lower()
        or needle in t.description.lower()
        or any(needle in tag.lower() for tag in t.tags)
    ]


def get_template_by_id(template_id: str) -> Optional[JsonTemplate]:
    for template in JSON_TEMPLATES:
        if template.id == template_id:
            return template
    return None
