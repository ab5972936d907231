"""
Demo catalog used by the ``seed_catalog`` command.

Products and banners reference categories by slug; the command resolves
slugs to the ids the remote service assigns.
"""

PEXELS = (
    "https://images.pexels.com/photos/{id}/pexels-photo-{id}.jpeg"
    "?auto=compress&cs=tinysrgb&w={width}"
)


def image(photo_id: int, width: int = 800) -> str:
    return PEXELS.format(id=photo_id, width=width)


CATEGORIES = [
    {
        "name": "Hair",
        "slug": "hair",
        "description": "Premium hair care products for all hair types",
        "image": image(3993449),
        "sort_order": 1,
    },
    {
        "name": "Beard",
        "slug": "beard",
        "description": "Professional beard grooming essentials",
        "image": image(1319460),
        "sort_order": 2,
    },
    {
        "name": "Skincare",
        "slug": "skincare",
        "description": "Luxurious skincare for radiant complexion",
        "image": image(3762879),
        "sort_order": 3,
    },
    {
        "name": "Perfume",
        "slug": "perfume",
        "description": "Exquisite fragrances for every occasion",
        "image": image(1961795),
        "sort_order": 4,
    },
    {
        "name": "Body Spray",
        "slug": "body-spray",
        "description": "Refreshing body sprays for daily use",
        "image": image(4465124),
        "sort_order": 5,
    },
    {
        "name": "Air Freshener",
        "slug": "air-freshener",
        "description": "Transform your space with luxury scents",
        "image": image(4210374),
        "sort_order": 6,
    },
]

BRANDS = [
    {
        "name": "Chanel",
        "slug": "chanel",
        "description": "Luxury French fashion and beauty brand",
        "image": image(1961795, 400),
        "country": "France",
        "featured": True,
        "sort_order": 1,
    },
    {
        "name": "Dior",
        "slug": "dior",
        "description": "Premium French luxury goods company",
        "image": image(3762879, 400),
        "country": "France",
        "featured": True,
        "sort_order": 2,
    },
    {
        "name": "Tom Ford",
        "slug": "tom-ford",
        "description": "American luxury fashion house",
        "image": image(1319460, 400),
        "country": "United States",
        "sort_order": 3,
    },
    {
        "name": "Versace",
        "slug": "versace",
        "description": "Italian luxury fashion company",
        "image": image(4465124, 400),
        "country": "Italy",
        "sort_order": 4,
    },
]

PRODUCTS = [
    {
        "name": "Luxury Hair Serum",
        "slug": "luxury-hair-serum",
        "category": "hair",
        "price": 2500,
        "description": "Premium hair serum for silky smooth hair",
        "ingredients": "Argan oil, Vitamin E, Keratin proteins",
        "usage": "Apply 2-3 drops to damp hair, style as usual",
        "images": [image(3993449), image(4465124)],
        "stock": 25,
        "featured": True,
    },
    {
        "name": "Beard Growth Oil",
        "slug": "beard-growth-oil",
        "category": "beard",
        "price": 1800,
        "description": "Natural beard oil for healthy growth",
        "ingredients": "Jojoba oil, Castor oil, Essential oils",
        "usage": "Massage into beard and skin daily",
        "images": [image(1319460)],
        "stock": 30,
        "featured": True,
    },
    {
        "name": "Radiance Face Cream",
        "slug": "radiance-face-cream",
        "category": "skincare",
        "brand": "dior",
        "price": 3200,
        "description": "Anti-aging cream for glowing skin",
        "ingredients": "Hyaluronic acid, Retinol, Vitamin C",
        "usage": "Apply morning and evening to clean skin",
        "images": [image(3762879)],
        "stock": 20,
        "featured": True,
    },
    {
        "name": "Midnight Oud",
        "slug": "midnight-oud",
        "category": "perfume",
        "brand": "tom-ford",
        "price": 4500,
        "description": "Luxurious oud fragrance for evening wear",
        "ingredients": "Oud, Rose, Amber, Musk",
        "usage": "Spray on pulse points",
        "images": [image(1961795)],
        "stock": 15,
        "featured": True,
    },
    {
        "name": "Fresh Citrus Body Spray",
        "slug": "fresh-citrus-body-spray",
        "category": "body-spray",
        "brand": "versace",
        "price": 1200,
        "description": "Refreshing citrus body spray",
        "ingredients": "Citrus extracts, Natural oils",
        "usage": "Spray all over body after shower",
        "images": [image(4465124)],
        "stock": 40,
    },
    {
        "name": "Lavender Room Spray",
        "slug": "lavender-room-spray",
        "category": "air-freshener",
        "price": 800,
        "description": "Calming lavender air freshener",
        "ingredients": "Lavender essential oil, Natural extracts",
        "usage": "Spray in room as needed",
        "images": [image(4210374)],
        "stock": 50,
    },
]

BANNERS = [
    {
        "title": "Luxury Fragrances",
        "subtitle": "Discover our premium perfume collection",
        "image": image(1961795, 1200),
        "category": "perfume",
        "position": "hero",
        "sort_order": 1,
    },
    {
        "title": "Hair Care Excellence",
        "subtitle": "Professional hair treatments for every need",
        "image": image(3993449, 1200),
        "category": "hair",
        "position": "hero",
        "sort_order": 2,
    },
    {
        "title": "Skincare Luxury",
        "subtitle": "Radiant skin with our premium skincare line",
        "image": image(3762879, 1200),
        "category": "skincare",
        "position": "hero",
        "sort_order": 3,
    },
]
