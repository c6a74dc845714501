"""
Style Rule Engine (v1.0.0)
Deterministic styling advice from static tables.

Given classified garments and an occasion, builds the styling rationale,
color analysis, outfit components and accessory tips. Phrasing variety is
drawn from fixed pools through an injected random.Random, so a seeded
generator gives reproducible output.
"""
import random
import logging
from typing import Dict, List, Optional, Sequence

from stylist_service.core.errors import InvalidInput
from stylist_service.core.models import (
    ColorAnalysis,
    GarmentAttributes,
    OutfitComponents,
    StylingResult,
)
from stylist_service.core.color_rules import (
    to_color_name,
    find_complementary_colors,
    determine_color_harmony,
)

logger = logging.getLogger(__name__)


# ==================== GARMENT CATEGORIES ====================

BOTTOM_KEYWORDS = ("pants", "skirt", "jeans", "shorts", "trousers", "leggings", "chinos", "joggers")
TOP_KEYWORDS = (
    "shirt", "top", "blouse", "tee", "sweater", "jacket", "blazer", "coat",
    "hoodie", "cardigan", "turtleneck", "polo", "tank", "knit",
)
OUTERWEAR_KEYWORDS = ("jacket", "blazer", "coat", "parka", "trench", "windbreaker")

OCCASIONS = ("formal", "business", "casual", "party")
DEFAULT_OCCASION = "casual"


def classify_garment(garment_type: Optional[str]) -> str:
    """Return "bottom", "top" or "other" by keyword match."""
    text = (garment_type or "").lower()
    if any(k in text for k in BOTTOM_KEYWORDS):
        return "bottom"
    if any(k in text for k in TOP_KEYWORDS):
        return "top"
    return "other"


# ==================== PHRASE POOLS ====================

COLOR_PHRASES = [
    "pairs beautifully with",
    "works well with",
    "looks stunning with",
    "complements",
    "goes great with",
    "harmonizes with",
    "creates a perfect match with",
    "shines alongside",
]

PAIRING_PHRASES = [
    "Try pairing",
    "Consider styling",
    "Combine",
    "Match",
    "Wear",
    "Layer this with",
    "Style",
    "Complement this with",
]

# (logic, recommendation) pairs keyed by fit branch x garment category
FIT_ADVICE = {
    ("oversized", "bottom"): [(
        "Relaxed bottoms create a comfortable, effortless silhouette.",
        "Balance these relaxed bottoms with a fitted or cropped top for proportion.",
    )],
    ("oversized", "top"): [(
        "Oversized tops create a relaxed, modern aesthetic.",
        "Pair this oversized piece with fitted bottoms like skinny jeans or tailored pants.",
    )],
    ("oversized", "other"): [(
        "Balance oversized pieces with fitted counterparts for visual proportion.",
        "Mix fitted and relaxed pieces to create balanced outfits.",
    )],
    ("fitted", "bottom"): [
        ("Fitted bottoms elongate the silhouette and create clean lines.",
         "Pair these fitted bottoms with a relaxed top or structured blazer for balance."),
        ("Sleek, fitted bottoms are incredibly versatile and flattering.",
         "Style with an oversized sweater or flowy blouse for that perfect high-low contrast."),
        ("These form-fitting bottoms create a streamlined base for any outfit.",
         "Add volume on top with a peplum top, ruffled blouse, or chunky knit."),
        ("Fitted pants are a wardrobe essential that work season after season.",
         "Tuck in a crisp button-down or add a longline cardigan for effortless chic."),
    ],
    ("fitted", "top"): [(
        "Fitted tops work beautifully with relaxed or wide-leg bottoms.",
        "Style this fitted top with wide-leg pants or flowing skirts for comfort and elegance.",
    )],
    ("fitted", "other"): [(
        "Fitted pieces create streamlined silhouettes.",
        "Balance fitted items with relaxed pieces for versatile styling.",
    )],
    ("relaxed", "bottom"): [
        ("Relaxed-fit bottoms offer comfort without sacrificing style.",
         "Pair with a tucked-in tee or fitted top to define your waist."),
        ("These easy-wearing bottoms are perfect for laid-back sophistication.",
         "Try a half-tuck with a casual tee or go full glam with a bodysuit and heels."),
        ("Comfortable yet stylish, the best of both worlds.",
         "Cinch with a statement belt or keep it relaxed with a cropped tank."),
        ("Effortless style starts with comfortable, well-cut bottoms.",
         "Balance the silhouette with a fitted knit or structured jacket."),
    ],
    ("relaxed", "top"): [(
        "Relaxed pieces create an effortless, casual aesthetic.",
        "Style with fitted bottoms or add a belt to create structure.",
    )],
    ("relaxed", "other"): [(
        "Relaxed pieces create an effortless, casual aesthetic.",
        "Style with fitted bottoms or add a belt to create structure.",
    )],
}

DEFAULT_FIT_ADVICE = (
    "This piece offers flexible styling across different fits and silhouettes.",
    "Mix with contrasting fits to create dynamic, balanced outfits.",
)

FIT_BRANCHES = {
    "oversized": "oversized",
    "loose": "oversized",
    "fitted": "fitted",
    "bodycon": "fitted",
    "relaxed": "relaxed",
}

OCCASION_LOGIC = {
    "formal": "Formal occasions require polished pieces without excessive patterns or casual elements.",
    "business": "Professional styling emphasizes clean lines, neutral tones, and structured silhouettes.",
    "casual": "Casual wear allows for relaxed fits, patterns, and personal expression.",
    "party": "Event styling can feature bolder colors, textures, and statement pieces.",
}

OCCASION_ADVICE = {
    "formal": [
        "Pair with tailored bottoms and structured accessories for maximum elegance.",
        "Layer with a sophisticated blazer and minimal jewelry for a refined look.",
        "Combine with polished heels and a structured bag for a formal event.",
        "Accessorize with classic pieces: think pearls, leather belts, and understated bags.",
    ],
    "business": [
        "Match with neutral-toned trousers or a pencil skirt for professional polish.",
        "Layer with a blazer and keep accessories minimal and corporate-friendly.",
        "Pair with smart footwear and a professional bag to complete the look.",
        "Add a structured cardigan and invest-worthy accessories for power dressing.",
    ],
    "casual": [
        "Style with comfortable jeans or casual bottoms for an effortless vibe.",
        "Mix with your favorite sneakers and a relaxed bag for everyday comfort.",
        "Combine with soft fabrics and laid-back accessories for a chill aesthetic.",
        "Pair with joggers, shorts, or casual bottoms depending on the season.",
    ],
    "party": [
        "Elevate with bold jewelry and statement accessories for impact.",
        "Layer with metallic accents and eye-catching bags to stand out.",
        "Pair with heels and glamorous jewelry to make a memorable impression.",
        "Accessorize with confidence: bold colors, statement pieces, and standout shoes.",
    ],
}

MATERIAL_ADVICE = {
    "silk": [
        "This silk piece has a luxe feel, so pair it with delicate accessories and lighter fabrics.",
        "Silk shines with understated styling; avoid heavy pairings that compete with its elegance.",
        "Layer gently with silk-compatible materials like cotton or linen for sophistication.",
    ],
    "denim": [
        "Denim is incredibly versatile: dress it up with heels or keep it casual with sneakers.",
        "This denim piece works from day to night, just change your accessories.",
        "Denim is timeless; style it with anything from blazers to tees depending on your mood.",
    ],
    "cotton": [
        "Cotton is your everyday essential, breathable and endlessly mixable.",
        "This cotton piece is perfect for layering and mixing with other textures.",
        "Cotton basics are foundation pieces, so build around them with bolder pieces.",
    ],
    "wool": [
        "Wool provides warmth and structure; pair with lighter pieces in warmer seasons.",
        "This wool piece works beautifully with complementary textures like cotton or linen.",
        "Wool is timeless; style it across multiple seasons with smart layering.",
    ],
    "polyester": [
        "Polyester is durable and travel-friendly, easy to mix with most pieces.",
        "This synthetic blend is versatile and low-maintenance for everyday styling.",
        "Polyester takes color well, so make it the focal point of your outfit.",
    ],
    "linen": [
        "Linen has natural texture and movement; embrace its relaxed aesthetic.",
        "This linen piece is perfect for warm weather, so keep styling light and airy.",
        "Linen pairs beautifully with natural fibers for an effortless summer look.",
    ],
}

GENERIC_MATERIAL_ADVICE = [
    "This fabric pairs well with most materials, so mix freely with other pieces.",
    "Experiment with layering to see how this fabric works with different textures.",
    "This fabric is versatile; style it confidently with pieces from your wardrobe.",
]

# {style} is replaced with the garment's aesthetic style
LAYERING_ADVICE = [
    ("{style} pieces benefit from strategic layering to add depth.",
     "Try layering with a denim jacket for that perfect casual-cool vibe."),
    ("Building versatility is key with {style} pieces.",
     "Layer with a cardigan or sweater to extend this piece across seasons."),
    ("A well-layered outfit multiplies outfit options.",
     "Throw on a blazer for instant polish or keep it relaxed with an overshirt."),
    ("{style} styling works beautifully with thoughtful layering.",
     "Add dimension with a light jacket or structured layer underneath."),
]

SHOE_POOLS = {
    "dress": [
        "strappy heels or elegant ballet flats",
        "classic pumps or sophisticated mules",
        "block heels for comfort or sleek stilettos",
        "ankle strap heels or pointed-toe flats",
        "kitten heels or trendy slingbacks",
    ],
    "skirt": [
        "ankle boots or classic loafers",
        "knee-high boots or mary jane heels",
        "sneakers for casual or heels for dressy",
        "ballet flats or strappy sandals",
        "platform boots or elegant flats",
    ],
    "pants": [
        "white sneakers or leather loafers",
        "ankle boots or classic oxfords",
        "chunky sneakers or sleek flats",
        "pointed-toe heels or casual slip-ons",
        "minimalist trainers or heeled mules",
        "Chelsea boots or trendy platforms",
    ],
    "formal": [
        "polished heels or dress shoes",
        "elegant pumps or oxford shoes",
        "sophisticated heels or loafers",
    ],
    "street": [
        "chunky sneakers or high-tops",
        "retro trainers or combat boots",
        "bold sneakers or platform shoes",
    ],
    "casual": [
        "versatile white sneakers",
        "casual loafers or slip-ons",
        "comfortable flats or sandals",
        "trendy mules or espadrilles",
        "classic canvas shoes",
    ],
}

BAG_POOLS = {
    "minimalist": [
        "sleek leather tote in black or beige",
        "simple crossbody with clean lines",
        "structured handbag in neutral tone",
        "minimalist bucket bag or slim shoulder bag",
    ],
    "streetwear": [
        "bold crossbody or utility backpack",
        "logo belt bag or oversized tote",
        "sporty sling bag or canvas messenger",
        "trendy bucket bag with street edge",
    ],
    "business casual": [
        "professional tote or structured satchel",
        "leather briefcase or elegant handbag",
        "polished work bag or classic tote",
        "sophisticated shoulder bag in neutral",
    ],
    "y2k": [
        "mini shoulder bag or colorful baguette",
        "fun hobo bag or trendy clutch",
        "retro shoulder bag with personality",
        "bold colored bag or statement mini",
    ],
    "bohemian": [
        "woven straw bag or fringe crossbody",
        "slouchy hobo bag or embroidered tote",
        "natural fiber bag or relaxed bucket bag",
        "vintage-inspired bag with boho flair",
    ],
    "preppy": [
        "classic tote or saddle bag",
        "structured handbag or satchel",
        "timeless shoulder bag in navy or tan",
        "traditional tote with clean design",
    ],
}

GENERIC_BAGS = [
    "versatile crossbody or tote bag",
    "structured shoulder bag",
    "everyday handbag or backpack",
    "practical tote or messenger bag",
    "casual bucket bag or satchel",
]

JEWELRY_POOLS = {
    "minimal": [
        "keep it simple with delicate studs or a thin chain",
        "minimal jewelry lets the garment be the star",
        "subtle pieces only, small hoops or a dainty bracelet",
        "understated accessories work best here",
        "let the piece shine with barely-there jewelry",
    ],
    "layered": [
        "layer delicate necklaces for visual interest",
        "stack rings and bracelets to add dimension",
        "mix metals with layered chains and hoops",
        "create depth with multiple delicate pieces",
        "add personality with stacked jewelry",
        "embrace the layered look with mixed pieces",
    ],
    "formal": [
        "classic pearls or diamond studs",
        "elegant drop earrings or tennis bracelet",
        "timeless pieces in gold or silver",
        "sophisticated studs with delicate necklace",
    ],
    "party": [
        "bold statement earrings or cocktail rings",
        "dramatic pieces that catch the light",
        "chunky bracelets or eye-catching necklace",
        "sparkle with oversized hoops or gemstones",
        "go big with shoulder-dusting earrings",
    ],
    "casual": [
        "everyday hoops and layered necklaces",
        "mixed metals for effortless cool",
        "stackable rings and simple chains",
        "comfortable pieces you can wear daily",
        "trendy ear cuffs or classic studs",
        "personalized pieces that tell your story",
        "fun, playful jewelry that matches your vibe",
    ],
}

DEFAULT_LOGIC = "This piece offers versatile styling options for your wardrobe."


# ==================== RULE STEPS ====================

def resolve_occasion(garment: GarmentAttributes, context: Optional[Dict[str, Optional[str]]]) -> str:
    """context.occasion, then the garment's first occasion, then casual."""
    occasion = (context or {}).get("occasion")
    if not occasion and garment.occasion:
        occasion = garment.occasion[0]
    occasion = (occasion or DEFAULT_OCCASION).strip().lower()
    return occasion if occasion in OCCASIONS else DEFAULT_OCCASION


def _color_advice(garment: GarmentAttributes, primary_name: Optional[str], complementary: List[str], rng: random.Random):
    if not primary_name or len(complementary) < 2:
        return None, None

    pairing = complementary[:2]
    color_phrase = rng.choice(COLOR_PHRASES)
    logic = f"{color_phrase[0].upper() + color_phrase[1:]} {', '.join(pairing)}."

    pairing_phrase = rng.choice(PAIRING_PHRASES)
    category = classify_garment(garment.garment_type)
    if category == "top":
        recommendation = f"{pairing_phrase} this {primary_name} top with {pairing[0]} or {pairing[1]} bottoms."
    elif category == "bottom":
        recommendation = f"{pairing_phrase} these {primary_name} bottoms with a {pairing[0]} or {pairing[1]} top."
    else:
        recommendation = f"{pairing_phrase} this {primary_name} piece with {pairing[0]} for great contrast."
    return logic, recommendation


def fit_advice(garment: GarmentAttributes, rng: random.Random):
    """Pick a (logic, recommendation) pair for the fit x category branch."""
    branch = FIT_BRANCHES.get(garment.fit or "")
    if branch is None:
        return DEFAULT_FIT_ADVICE
    pool = FIT_ADVICE[(branch, classify_garment(garment.garment_type))]
    return rng.choice(pool)


def material_advice(garment: GarmentAttributes, rng: random.Random) -> str:
    material = (garment.material or "cotton").lower()
    return rng.choice(MATERIAL_ADVICE.get(material, GENERIC_MATERIAL_ADVICE))


def layering_advice(garment: GarmentAttributes, rng: random.Random):
    style = garment.aesthetic_style or "Casual"
    logic, recommendation = rng.choice(LAYERING_ADVICE)
    return logic.format(style=style), recommendation


def shoe_recommendation(garment: GarmentAttributes, occasion: str, rng: random.Random) -> str:
    garment_type = garment.garment_type.lower()
    style = (garment.aesthetic_style or "casual").lower()

    if "dress" in garment_type:
        pool = SHOE_POOLS["dress"]
    elif "skirt" in garment_type:
        pool = SHOE_POOLS["skirt"]
    elif "pants" in garment_type or "jeans" in garment_type or "trousers" in garment_type:
        pool = SHOE_POOLS["pants"]
    elif occasion == "formal":
        pool = SHOE_POOLS["formal"]
    elif "street" in style:
        pool = SHOE_POOLS["street"]
    else:
        pool = SHOE_POOLS["casual"]
    return rng.choice(pool)


def bag_recommendation(garment: GarmentAttributes, rng: random.Random) -> str:
    style = (garment.aesthetic_style or "casual").lower()
    return rng.choice(BAG_POOLS.get(style, GENERIC_BAGS))


def jewelry_recommendation(garment: GarmentAttributes, occasion: str, rng: random.Random) -> str:
    garment_type = garment.garment_type.lower()
    details = garment.details.lower()

    if "statement" in garment_type or "embroidery" in details or "pattern" in details:
        pool = JEWELRY_POOLS["minimal"]
    elif "simple" in garment_type or "plain" in garment_type:
        pool = JEWELRY_POOLS["layered"]
    elif occasion in ("formal", "party"):
        pool = JEWELRY_POOLS[occasion]
    else:
        pool = JEWELRY_POOLS["casual"]
    return rng.choice(pool)


def accessory_advice(garment: GarmentAttributes, occasion: str, rng: random.Random) -> List[str]:
    return [
        f"Shoes: {shoe_recommendation(garment, occasion, rng)}",
        f"Bag: {bag_recommendation(garment, rng)}",
        f"Jewelry: {jewelry_recommendation(garment, occasion, rng)}",
    ]


def suggest_outfit_components(garment: GarmentAttributes) -> OutfitComponents:
    """Place the base garment in its slot and suggest the rest."""
    components = OutfitComponents(
        shoes="Shoes in neutral or complementary color",
        bag="Structured or crossbody bag for cohesion",
        accessories=["Watch or bracelet", "Minimal jewelry", "Scarf if weather permits"],
    )
    garment_type = garment.garment_type
    text = garment_type.lower()
    category = classify_garment(garment_type)

    if category == "bottom":
        components.bottom = garment_type
        components.top = "Coordinating top or shirt"
    elif any(k in text for k in OUTERWEAR_KEYWORDS):
        components.outerwear = garment_type
        components.top = "Simple fitted top or fine knit"
        components.bottom = "Tailored trousers or straight-leg jeans"
    elif category == "top":
        components.top = garment_type
        components.bottom = "Matching bottom (jeans, skirt, or trousers)"
    elif "dress" in text or "jumpsuit" in text:
        components.top = garment_type
        components.outerwear = "Light jacket or cropped cardigan"
    return components


def calculate_confidence_score(garment: GarmentAttributes, recommendation_count: int) -> int:
    score = 70
    if garment.primary_color:
        score += 10
    if garment.material:
        score += 5
    if garment.aesthetic_style:
        score += 10
    if garment.fit:
        score += 5
    score += min(recommendation_count * 2, 10)
    return max(0, min(score, 100))


# ==================== ENTRY POINT ====================

def recommend(
    garments: Sequence[GarmentAttributes],
    context: Optional[Dict[str, Optional[str]]] = None,
    rng: Optional[random.Random] = None
) -> StylingResult:
    """
    Build a StylingResult for garments[0].

    Args:
        garments: Classified garments; the first one is the base garment
        context: Optional {"occasion": ...}
        rng: Random source for phrasing pools (seed it for reproducible output)

    Raises:
        InvalidInput: If garments is empty
    """
    if not garments:
        raise InvalidInput("Rule engine needs at least one garment")

    rng = rng or random.Random()
    base = garments[0]
    occasion = resolve_occasion(base, context)

    logic: List[str] = []
    recommendations: List[str] = []

    # 1. Color harmony
    primary_name = to_color_name(base.primary_color)
    complementary = find_complementary_colors(base.primary_color)
    color_logic, color_rec = _color_advice(base, primary_name, complementary, rng)
    if color_logic:
        logic.append(color_logic)
        recommendations.append(color_rec)

    # 2. Fit and proportion
    fit_logic, fit_rec = fit_advice(base, rng)
    logic.append(fit_logic)
    recommendations.append(fit_rec)

    # 3. Occasion
    logic.append(OCCASION_LOGIC[occasion])
    recommendations.append(rng.choice(OCCASION_ADVICE[occasion]))

    # 4. Material
    recommendations.append(material_advice(base, rng))

    # 5. Layering
    layer_logic, layer_rec = layering_advice(base, rng)
    logic.append(layer_logic)
    recommendations.append(layer_rec)

    # 6. Accessories
    recommendations.extend(accessory_advice(base, occasion, rng))

    if not logic:
        logic.append(DEFAULT_LOGIC)

    result = StylingResult(
        base_garment=base,
        styling_logic=" ".join(logic),
        recommendations=recommendations,
        color_analysis=ColorAnalysis(
            primary=primary_name or "Neutral",
            complementary=complementary,
            harmony_type=determine_color_harmony(base.primary_color),
        ),
        outfit_components=suggest_outfit_components(base),
        confidence_score=calculate_confidence_score(base, len(recommendations)),
    )

    logger.info(
        f"Styled {base.garment_type} ({occasion}): "
        f"{len(recommendations)} tips, confidence={result.confidence_score}"
    )
    return result
