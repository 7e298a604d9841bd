"""Static catalogs returned by the example tools."""

from __future__ import annotations

from typing import Any

IMAGE_DOMAIN = "https://images.unsplash.com"

# Content Security Policy hints so widget hosts allow image loading
WIDGET_META: dict[str, Any] = {
    "openai/widgetCSP": {
        "connect_domains": [IMAGE_DOMAIN],
        "resource_domains": [IMAGE_DOMAIN],
    },
}

WIDGET_MIME_TYPE = "text/html+skybridge"

PRODUCTS: list[dict[str, Any]] = [
    {
        "name": "Premium Widget",
        "price": "99.99",
        "priceId": "price_premium_widget",
        "description": "Our flagship product with advanced features and premium support",
        "image": f"{IMAGE_DOMAIN}/photo-1526374965328-7f61d4dc18c5?w=150&h=150&fit=crop",
    },
    {
        "name": "Standard Package",
        "price": "49.99",
        "priceId": "price_standard_package",
        "description": "Perfect for small teams with essential features included",
        "image": f"{IMAGE_DOMAIN}/photo-1460925895917-afdab827c52f?w=150&h=150&fit=crop",
    },
    {
        "name": "Basic Starter",
        "price": "29.99",
        "priceId": "price_basic_starter",
        "description": "Get started with our basic plan, ideal for individuals",
        "image": f"{IMAGE_DOMAIN}/photo-1484480974693-6ca0a78fb36b?w=150&h=150&fit=crop",
    },
    {
        "name": "Enterprise Solution",
        "price": "199.99",
        "priceId": "price_enterprise_solution",
        "description": "Complete enterprise solution with dedicated support and custom features",
        "image": f"{IMAGE_DOMAIN}/photo-1551288049-bebda4e38f71?w=150&h=150&fit=crop",
    },
]

ASSETS: list[dict[str, Any]] = [
    {
        "id": "asset_001",
        "name": "Social Media Post",
        "type": "Instagram Post (1080x1080)",
        "description": "Eye-catching social media post with modern gradient design",
        "icon": "📱",
        "preview": f"{IMAGE_DOMAIN}/photo-1611162617474-5b21e879e113?w=400&h=400&fit=crop",
        "tags": ["Social Media", "Instagram", "Marketing"],
    },
    {
        "id": "asset_002",
        "name": "Banner Ad",
        "type": "Web Banner (728x90)",
        "description": "Professional banner ad for website campaigns",
        "icon": "🎯",
        "preview": f"{IMAGE_DOMAIN}/photo-1557838923-2985c318be48?w=728&h=200&fit=crop",
        "tags": ["Banner", "Advertising", "Web"],
    },
    {
        "id": "asset_003",
        "name": "Business Card",
        "type": "Print Ready (3.5x2 in)",
        "description": "Modern business card design with clean layout",
        "icon": "💼",
        "preview": f"{IMAGE_DOMAIN}/photo-1589829545856-d10d557cf95f?w=400&h=250&fit=crop",
        "tags": ["Print", "Business", "Professional"],
    },
]
