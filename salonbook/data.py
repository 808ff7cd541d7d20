# salonbook/data.py

# Seeded into an empty service_categories table at startup
DEFAULT_SERVICE_CATEGORIES = [
    {"name": "قص الشعر", "name_en": "Haircut", "icon": "content_cut"},
    {"name": "العناية بالبشرة", "name_en": "Skincare", "icon": "spa"},
    {"name": "مكياج", "name_en": "Makeup", "icon": "brush"},
    {"name": "حناء", "name_en": "Henna", "icon": "palette"},
]

PAYMENT_METHODS = ("mada", "credit_card", "cash")
