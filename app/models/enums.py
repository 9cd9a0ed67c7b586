import enum


class CategoryType(str, enum.Enum):
    SPACE = "SPACE"
    SERVICE = "SERVICE"
    EQUIPMENT = "EQUIPMENT"


class ListingType(str, enum.Enum):
    # derived from the listing's category, see app.services.catalog.reclassify_listings
    SPACE = "SPACE"
    SERVICE = "SERVICE"
