"""
Color Rules (v1.0.0)
Static color knowledge: hex names, pairing table, harmony classification.

Pure functions, no I/O.
"""
import logging
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


# ==================== COLOR NAMES ====================

# Human-friendly names for common palette hex codes
HEX_NAMES = {
    "#000000": "Black",
    "#FFFFFF": "White",
    "#808080": "Gray",
    "#A9A9A9": "Dark Gray",
    "#D3D3D3": "Light Gray",
    "#C0C0C0": "Silver",
    "#FFB6C1": "Light Pink",
    "#FFD700": "Gold",
    "#87CEEB": "Sky Blue",
    "#98FB98": "Pale Green",
    "#DDA0DD": "Plum",
    "#FF0000": "Red",
    "#0000FF": "Blue",
    "#00FF00": "Lime",
    "#FFFF00": "Yellow",
    "#FF8C00": "Dark Orange",
    "#8B4513": "Saddle Brown",
    "#CD853F": "Peru",
    "#DEB887": "Burly Wood",
    "#D2B48C": "Tan",
    "#BC8F8F": "Rosy Brown",
    "#FF4500": "Orange Red",
    "#FF6347": "Tomato",
    "#FFA500": "Orange",
    "#DC143C": "Crimson",
    "#0000CD": "Medium Blue",
    "#00CED1": "Dark Turquoise",
    "#48D1CC": "Medium Turquoise",
    "#20B2AA": "Light Sea Green",
    "#4169E1": "Royal Blue",
    "#6C5CE7": "Indigo",
    "#00CEC9": "Teal",
    "#FAB1A0": "Peach",
    "#2D3436": "Charcoal",
    "#FF69B4": "Hot Pink",
    "#FF6B6B": "Coral Red",
}

# Vocabulary handed to the vision model so it answers with names we can pair
COLOR_VOCABULARY = [
    "black", "white", "gray", "silver", "charcoal", "beige", "cream", "tan",
    "brown", "red", "crimson", "burgundy", "pink", "hot pink", "orange",
    "yellow", "mustard", "gold", "green", "olive", "forest green", "teal",
    "blue", "navy blue", "sky blue", "purple", "lavender", "indigo", "peach",
]

# Keys are lowercase names or uppercase hex codes. Hex entries list hex codes.
PAIRING_RULES: Dict[str, List[str]] = {
    "#000000": ["#FFFFFF", "#FFD700", "#FF69B4"],
    "#FFFFFF": ["#000000", "#00CEC9", "#FF6B6B"],
    "#6C5CE7": ["#00CEC9", "#FAB1A0", "#FFFFFF"],
    "#00CEC9": ["#6C5CE7", "#2D3436", "#FFD700"],
    "#FAB1A0": ["#2D3436", "#FFFFFF", "#6C5CE7"],
    # Reds
    "red": ["White", "Black", "Navy Blue", "Beige", "Gray"],
    "crimson": ["White", "Black", "Cream", "Gold"],
    "burgundy": ["Cream", "Tan", "Black", "Gray"],
    # Blues
    "blue": ["White", "Gray", "Beige", "Brown", "Navy Blue"],
    "navy blue": ["White", "Beige", "Gray", "Red", "Gold"],
    "sky blue": ["White", "Pink", "Gray", "Beige"],
    # Greens
    "green": ["White", "Brown", "Beige", "Navy Blue", "Black"],
    "olive": ["Cream", "Brown", "White", "Burgundy"],
    "forest green": ["Tan", "Cream", "Brown", "Gold"],
    # Yellows / oranges
    "yellow": ["Gray", "Navy Blue", "White", "Purple"],
    "mustard": ["Navy Blue", "Brown", "Cream", "Burgundy"],
    "orange": ["Navy Blue", "Teal", "Brown", "White"],
    # Pinks
    "pink": ["White", "Gray", "Navy Blue", "Beige"],
    "hot pink": ["Black", "White", "Navy Blue"],
    # Purples
    "purple": ["White", "Gray", "Yellow", "Green"],
    "lavender": ["White", "Gray", "Navy Blue", "Sage Green"],
    # Browns
    "brown": ["Cream", "Beige", "White", "Olive", "Orange"],
    "tan": ["White", "Navy Blue", "Brown", "Burgundy"],
    "beige": ["Navy Blue", "Brown", "White", "Black"],
    # Neutrals
    "black": ["White", "Red", "Pink", "Gold", "any color"],
    "white": ["any color", "Navy Blue", "Red", "Black"],
    "gray": ["Yellow", "Pink", "Teal", "White", "any color"],
}

DEFAULT_PAIRINGS = ["White", "Black", "Navy Blue", "Beige"]

# Exact hex / lowercase name -> harmony type. Anything else is vibrant_modern.
HARMONY_TABLE = {
    "#6C5CE7": "cool_minimal",
    "#00CEC9": "cool_minimal",
    "#2F4F4F": "cool_minimal",
    "#708090": "cool_minimal",
    "#778899": "cool_minimal",
    "#A9A9A9": "cool_minimal",
    "indigo": "cool_minimal",
    "teal": "cool_minimal",
    "#FAB1A0": "warm_earthy",
    "#8B4513": "warm_earthy",
    "#A0522D": "warm_earthy",
    "#CD853F": "warm_earthy",
    "#DAA520": "warm_earthy",
    "peach": "warm_earthy",
    "saddle brown": "warm_earthy",
    "#FFB6D9": "soft_romantic",
    "#DDA0DD": "soft_romantic",
    "#D8BFD8": "soft_romantic",
    "#F0E68C": "soft_romantic",
    "plum": "soft_romantic",
    "lavender": "soft_romantic",
}
DEFAULT_HARMONY = "vibrant_modern"


def _normalize_hex(color: str) -> str:
    """Uppercase and expand 3-digit shorthand (#fff -> #FFFFFF)."""
    hex_code = color.strip().upper()
    if len(hex_code) == 4:
        hex_code = "#" + "".join(ch * 2 for ch in hex_code[1:])
    return hex_code


def to_color_name(color: Optional[str]) -> Optional[str]:
    """
    Convert a hex code or color name to a canonical display name.

    Hex codes resolve through HEX_NAMES (unknown hex stays as uppercase hex).
    Names pass through with their first letter capitalized. Idempotent.
    """
    if color is None:
        return None
    color = str(color).strip()
    if not color:
        return None

    if not color.startswith("#"):
        return color[0].upper() + color[1:]

    hex_code = _normalize_hex(color)
    return HEX_NAMES.get(hex_code, hex_code)


def find_complementary_colors(color: Optional[str]) -> List[str]:
    """
    Look up colors that pair with `color`.

    Order: exact name key, exact hex key (mapped to names), substring
    containment against name keys, then DEFAULT_PAIRINGS.
    """
    name = to_color_name(color)
    if not name:
        return list(DEFAULT_PAIRINGS)

    name_key = name.lower()
    if name_key in PAIRING_RULES:
        return list(PAIRING_RULES[name_key])

    hex_code = _normalize_hex(color) if str(color).strip().startswith("#") else None
    if hex_code and hex_code in PAIRING_RULES:
        return [to_color_name(h) for h in PAIRING_RULES[hex_code]]

    for key, pairings in PAIRING_RULES.items():
        if key.startswith("#"):
            continue
        if key in name_key or name_key in key:
            return list(pairings)

    return list(DEFAULT_PAIRINGS)


def determine_color_harmony(color: Optional[str]) -> str:
    """Classify a primary color into one of the four harmony types."""
    if not color:
        return DEFAULT_HARMONY

    raw = str(color).strip()
    if raw.startswith("#"):
        harmony = HARMONY_TABLE.get(_normalize_hex(raw))
        if harmony:
            return harmony

    name = to_color_name(raw) or ""
    return HARMONY_TABLE.get(name.lower(), DEFAULT_HARMONY)


# Small table used when describing a color to the image model
PROMPT_COLOR_NAMES = {
    "#6C5CE7": "violet",
    "#00CEC9": "teal",
    "#FAB1A0": "coral",
    "#000000": "black",
    "#FFFFFF": "white",
    "#FF6B6B": "red",
    "#4ECDC4": "turquoise",
    "#FFD700": "gold",
    "#FFB6D9": "pink",
    "#DDA0DD": "plum",
    "#87CEEB": "sky blue",
    "#98FB98": "pale green",
    "#8B4513": "brown",
}


def describe_color_for_prompt(color: Optional[str]) -> str:
    """Hex -> short human color name; names pass through lowercased."""
    if not color:
        return "neutral"
    raw = str(color).strip()
    if raw.startswith("#"):
        return PROMPT_COLOR_NAMES.get(_normalize_hex(raw), "neutral")
    return raw.lower()
