#!/usr/bin/env python3
"""
Seed a demo strain log.

Usage:
    python scripts/seed_demo_strains.py [identity]

If no identity is provided, a fresh anonymous one is used. Logs a handful of
strains through the mutation gateway (so each one also gets a community
mirror) and prints a custom token for signing in as that identity.
"""

import asyncio
import sys

from tracker.config import settings
from tracker.context import close_context, create_context
from tracker.models.strain import StrainInput
from tracker.services.gateway import StrainGateway
from tracker.services.session import SessionManager

DEMO_STRAINS = [
    {
        "strainName": "Blue Dream",
        "productType": "Flower",
        "type": "Hybrid",
        "brand": "Cookies",
        "purchasedLocation": "Sunnyside",
        "cost": 45.0,
        "rating": 4,
        "effects": ["Relaxing", "Creative"],
        "terpenes": ["Myrcene", "Pinene"],
    },
    {
        "strainName": "OG Kush",
        "productType": "Flower",
        "type": "Indica",
        "brand": "Jungle Boys",
        "rating": 2,
        "effects": ["Sleepy"],
        "terpenes": ["Caryophyllene", "Limonene", "Myrcene"],
    },
    {
        "strainName": "Sour Diesel",
        "productType": "Vape",
        "type": "Sativa",
        "brand": "Stiiizy",
        "cost": 38.5,
        "rating": 5,
        "effects": ["Energizing", "Focus", "Uplifting"],
        "terpenes": ["Limonene"],
    },
]


async def main():
    context = await create_context(settings)

    try:
        session = SessionManager(context.auth, admin_prefix=settings.ADMIN_ID_PREFIX)
        token = context.auth.mint(sys.argv[1]) if len(sys.argv) >= 2 else None
        identity = await session.start(token)
        if identity is None:
            print("Sign-in failed")
            sys.exit(1)
        print(f"Using identity: {identity}")

        gateway = StrainGateway(context.store, session, context.app_id)
        for data in DEMO_STRAINS:
            doc_id = await gateway.create(StrainInput.model_validate(data))
            print(f"Logged {data['strainName']}: {doc_id}")

        if settings.JWT_SECRET:
            print(f"Custom token: {context.auth.mint(identity)}")
    finally:
        await close_context(context)


if __name__ == "__main__":
    asyncio.run(main())
