"""
Grocery category table - default categories and their matching keywords

Each category has:
- phrases: multi-word keywords, matched as whole substrings of the normalized
  title (worth 3 points each)
- tokens: single-word keywords, matched against the tokenized title with naive
  singularization on both sides (worth 1 point each)

Phrases exist mostly to win collisions on shared words:
- "Peanut Butter" → pantry (phrase) instead of dairy ("butter")
- "Ice Cream" → frozen (phrase) instead of dairy ("cream")
- "Black Pepper" → pantry (phrase) instead of produce ("pepper")

Plural spellings are listed where the naive singularizer mangles them:
"apples" → "appl", "cookies" → "cooky", and every -e word whose -es plural
loses the e ("grapes" → "grap", "sausages" → "sausag").
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple


class GroceryCategory(str, Enum):
    """Built-in category ids (user-created categories use uuid4 ids)"""
    PRODUCE = "produce"
    DAIRY = "dairy"
    MEAT = "meat"
    BAKERY = "bakery"
    PANTRY = "pantry"
    FROZEN = "frozen"
    BEVERAGES = "beverages"
    SNACKS = "snacks"
    DELI = "deli"
    HOUSEHOLD = "household"
    UNCATEGORIZED = "uncategorized"


UNCATEGORIZED_ID = GroceryCategory.UNCATEGORIZED.value

# Display names for the built-in categories
CATEGORY_NAMES: Dict[str, str] = {
    GroceryCategory.UNCATEGORIZED.value: "Uncategorized",
    GroceryCategory.PRODUCE.value: "Produce",
    GroceryCategory.DAIRY.value: "Dairy & Eggs",
    GroceryCategory.MEAT.value: "Meat & Seafood",
    GroceryCategory.BAKERY.value: "Bakery",
    GroceryCategory.PANTRY.value: "Pantry",
    GroceryCategory.FROZEN.value: "Frozen",
    GroceryCategory.BEVERAGES.value: "Beverages",
    GroceryCategory.SNACKS.value: "Snacks",
    GroceryCategory.DELI.value: "Deli",
    GroceryCategory.HOUSEHOLD.value: "Household",
}

# Canonical display order; also the final tie-break for classification
DEFAULT_CATEGORY_ORDER: Tuple[str, ...] = (
    GroceryCategory.PRODUCE.value,
    GroceryCategory.DAIRY.value,
    GroceryCategory.MEAT.value,
    GroceryCategory.BAKERY.value,
    GroceryCategory.PANTRY.value,
    GroceryCategory.FROZEN.value,
    GroceryCategory.BEVERAGES.value,
    GroceryCategory.SNACKS.value,
    GroceryCategory.DELI.value,
    GroceryCategory.HOUSEHOLD.value,
    GroceryCategory.UNCATEGORIZED.value,
)


@dataclass(frozen=True)
class CategoryDefinition:
    """Keyword evidence for one category."""

    category_id: str
    phrases: Tuple[str, ...] = field(default_factory=tuple)
    tokens: Tuple[str, ...] = field(default_factory=tuple)


# Definition (iteration) order. Not the display order.
DEFAULT_DEFINITIONS: List[CategoryDefinition] = [
    CategoryDefinition(
        GroceryCategory.PRODUCE.value,
        phrases=("green beans", "bell pepper", "sweet potato", "baby spinach",
                 "salad mix", "fresh herbs"),
        tokens=("produce", "fruit", "vegetable", "vegetables", "veggie", "veggies",
                "greens", "lettuce", "spinach", "kale", "tomato", "onion", "garlic",
                "potato", "apple", "apples", "banana", "berries", "strawberries",
                "blueberries", "raspberries", "grape", "grapes", "lemon", "lime",
                "limes", "orange", "oranges", "avocado", "zucchini", "carrot",
                "cucumber", "pepper", "broccoli", "celery", "mushroom", "pineapple",
                "pineapples", "mango", "cilantro"),
    ),
    CategoryDefinition(
        GroceryCategory.DAIRY.value,
        phrases=("sour cream", "cream cheese", "cottage cheese", "half and half",
                 "greek yogurt", "string cheese"),
        tokens=("dairy", "milk", "cheese", "cheeses", "cheddar", "mozzarella",
                "parmesan", "yogurt", "butter", "cream", "eggs", "kefir", "fairlife"),
    ),
    CategoryDefinition(
        GroceryCategory.MEAT.value,
        phrases=("ground beef", "ground turkey", "chicken breast", "chicken thighs",
                 "pork chops"),
        tokens=("meat", "beef", "chicken", "pork", "steak", "bacon", "sausage",
                "sausages", "lamb", "fish", "salmon", "shrimp", "seafood"),
    ),
    CategoryDefinition(
        GroceryCategory.BAKERY.value,
        phrases=("killer bread", "english muffins", "hamburger buns", "hot dog buns"),
        tokens=("bakery", "bread", "bagel", "muffin", "pastry", "croissant",
                "baguette", "baguettes", "tortilla", "bun"),
    ),
    CategoryDefinition(
        GroceryCategory.PANTRY.value,
        phrases=("olive oil", "peanut butter", "black pepper", "tomato sauce",
                 "pasta sauce", "black beans", "chicken broth", "maple syrup"),
        tokens=("pantry", "sauce", "pasta", "spaghetti", "noodles", "rice", "canned",
                "soup", "broth", "spice", "spices", "salt", "oil", "vinegar", "flour",
                "sugar", "honey", "cereal", "oats", "beans", "ketchup", "mustard",
                "mayo", "salsa"),
    ),
    CategoryDefinition(
        GroceryCategory.FROZEN.value,
        phrases=("ice cream", "frozen pizza", "frozen vegetables", "frozen fruit"),
        tokens=("frozen", "pizza", "popsicle", "popsicles", "waffles"),
    ),
    CategoryDefinition(
        GroceryCategory.BEVERAGES.value,
        phrases=("oat milk", "sparkling water", "orange juice", "cold brew",
                 "sports drink", "apple juice", "green tea", "iced tea"),
        tokens=("beverage", "beverages", "drink", "soda", "juice", "juices", "water",
                "seltzer", "lemonade", "kombucha", "tea", "coffee", "oatmilk", "beer",
                "wine"),
    ),
    CategoryDefinition(
        GroceryCategory.SNACKS.value,
        phrases=("rold gold", "trail mix", "granola bar", "potato chips",
                 "tortilla chips"),
        tokens=("snack", "chips", "crackers", "cookie", "cookies", "pretzels",
                "popcorn", "nuts", "almonds", "cashews", "jerky", "candy",
                "chocolate", "ritz"),
    ),
    CategoryDefinition(
        GroceryCategory.DELI.value,
        phrases=("deli slices", "deli meat", "lunch meat", "sliced turkey"),
        tokens=("deli", "sliced", "tofurky", "salami", "ham", "turkey", "prosciutto",
                "pepperoni", "hummus"),
    ),
    CategoryDefinition(
        GroceryCategory.HOUSEHOLD.value,
        phrases=("paper towels", "toilet paper", "dish soap", "laundry detergent",
                 "trash bags", "aluminum foil"),
        tokens=("household", "cleaner", "soap", "shampoo", "detergent", "bleach",
                "sponge", "sponges", "wipes", "tissue", "tissues", "napkins"),
    ),
]
