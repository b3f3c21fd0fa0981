from enum import Enum

class EntityType(str, Enum):
    rail = "RAIL"
    popular_pills = "POPULAR_PILLS"


class EntityPage(str, Enum):
    home = "HOME"
    search = "SEARCH"


class VariantAttribute(str, Enum):
    storage = "storage"
    ram = "ram"
    colour = "colour"
