"""
Marketplace rule tables.

Every marketplace-specific knob the listing generator uses lives here as
data keyed by MarketplaceKey: bullet caps, default discounts, fulfillment
policy, brand gating, title limits, compliance reminders and taxonomy paths.
Adding a marketplace means adding a MarketplaceProfile entry.
"""

from pydantic import BaseModel, ConfigDict, Field

from commerce_desk.models.schemas import FulfillmentMode, MarketplaceKey


UNCATEGORIZED_PATH = "Uncategorized"


class MarketplaceProfile(BaseModel):
    """Generation rules for one marketplace."""

    model_config = ConfigDict(frozen=True)

    key: MarketplaceKey
    label: str
    bullet_limit: int = Field(..., ge=1, description="Maximum bullet points")
    discount: float = Field(
        default=0.0,
        ge=0,
        lt=1,
        description="Default discount fraction applied to MRP",
    )
    fulfillment: FulfillmentMode = Field(..., description="Default fulfillment policy")
    requires_brand: bool = Field(default=True, description="Brand-gated marketplace")
    title_limit: int = Field(default=200, ge=1, description="Maximum title length")
    compliance_reminders: tuple[str, ...] = Field(default_factory=tuple)
    taxonomy: dict[str, str] = Field(
        default_factory=dict,
        description="Normalized source category to marketplace category path",
    )
    fallback_category_path: str = UNCATEGORIZED_PATH


AMAZON = MarketplaceProfile(
    key=MarketplaceKey.AMAZON,
    label="Amazon",
    bullet_limit=5,
    discount=0.10,
    fulfillment=FulfillmentMode.FULFILLED,
    requires_brand=True,
    title_limit=200,
    compliance_reminders=(
        "Declare country of origin on the detail page.",
        "Confirm the returns policy matches the category returns window.",
        "Add a GTIN/EAN or an approved GTIN exemption.",
    ),
    taxonomy={
        "kurta set": "Clothing & Accessories > Women > Ethnic Wear > Kurta Sets",
        "kurta": "Clothing & Accessories > Women > Ethnic Wear > Kurtas & Kurtis",
        "saree": "Clothing & Accessories > Women > Ethnic Wear > Sarees",
        "ethnic wear": "Clothing & Accessories > Women > Ethnic Wear",
        "apparel": "Clothing & Accessories",
        "clothing": "Clothing & Accessories",
        "footwear": "Shoes & Handbags > Shoes",
        "shoes": "Shoes & Handbags > Shoes",
        "jewellery": "Jewellery > Fashion Jewellery",
        "jewelry": "Jewellery > Fashion Jewellery",
        "beauty": "Beauty > Skin Care",
        "home": "Home & Kitchen > Home Furnishing",
        "kitchen": "Home & Kitchen > Kitchen & Dining",
        "electronics": "Electronics > Accessories",
        "accessories": "Clothing & Accessories > Accessories",
    },
)

FLIPKART = MarketplaceProfile(
    key=MarketplaceKey.FLIPKART,
    label="Flipkart",
    bullet_limit=6,
    discount=0.15,
    fulfillment=FulfillmentMode.FULFILLED,
    requires_brand=True,
    title_limit=150,
    compliance_reminders=(
        "Mention country of origin and manufacturer/packer details (Legal Metrology).",
        "State the returns policy applicable to the vertical.",
    ),
    taxonomy={
        "kurta set": "Clothing and Accessories > Ethnic Sets > Kurta Sets",
        "kurta": "Clothing and Accessories > Topwear > Kurtas",
        "saree": "Clothing and Accessories > Sarees",
        "ethnic wear": "Clothing and Accessories > Ethnic Wear",
        "apparel": "Clothing and Accessories",
        "clothing": "Clothing and Accessories",
        "footwear": "Footwear",
        "shoes": "Footwear > Casual Shoes",
        "jewellery": "Jewellery > Artificial Jewellery",
        "jewelry": "Jewellery > Artificial Jewellery",
        "beauty": "Beauty and Grooming",
        "home": "Home Furnishing",
        "kitchen": "Kitchen, Cookware & Serveware",
        "electronics": "Electronics Accessories",
    },
)

MEESHO = MarketplaceProfile(
    key=MarketplaceKey.MEESHO,
    label="Meesho",
    bullet_limit=3,
    discount=0.20,
    fulfillment=FulfillmentMode.SELF,
    requires_brand=False,
    title_limit=100,
    compliance_reminders=(
        "Declare country of origin in the catalog upload form.",
        "Mark non-returnable items and confirm return eligibility.",
    ),
    taxonomy={
        "kurta set": "Women Fashion > Ethnic Wear > Kurta Sets & Dress Materials",
        "kurta": "Women Fashion > Ethnic Wear > Kurtis",
        "saree": "Women Fashion > Ethnic Wear > Sarees",
        "ethnic wear": "Women Fashion > Ethnic Wear",
        "apparel": "Women Fashion > Western Wear",
        "clothing": "Women Fashion > Western Wear",
        "footwear": "Footwear",
        "jewellery": "Women Fashion > Jewellery",
        "jewelry": "Women Fashion > Jewellery",
        "beauty": "Beauty & Health > Makeup",
        "home": "Home & Kitchen > Home Decor",
        "kitchen": "Home & Kitchen > Kitchen Tools",
    },
)

MYNTRA = MarketplaceProfile(
    key=MarketplaceKey.MYNTRA,
    label="Myntra",
    bullet_limit=8,
    discount=0.0,
    fulfillment=FulfillmentMode.SELF,
    requires_brand=True,
    title_limit=120,
    compliance_reminders=(
        "Add country of origin and importer/manufacturer details.",
        "Confirm returns and exchange eligibility for the style.",
        "Attach a size chart for apparel and footwear styles.",
    ),
    taxonomy={
        "kurta set": "Women > Indian & Fusion Wear > Kurta Sets",
        "kurta": "Women > Indian & Fusion Wear > Kurtas & Suits",
        "saree": "Women > Indian & Fusion Wear > Sarees",
        "ethnic wear": "Women > Indian & Fusion Wear",
        "apparel": "Women > Western Wear",
        "clothing": "Women > Western Wear",
        "footwear": "Women > Footwear",
        "shoes": "Women > Footwear > Casual Shoes",
        "jewellery": "Women > Jewellery",
        "jewelry": "Women > Jewellery",
        "beauty": "Beauty & Personal Care",
        "accessories": "Women > Accessories",
    },
)


MARKETPLACE_PROFILES: dict[MarketplaceKey, MarketplaceProfile] = {
    profile.key: profile for profile in (AMAZON, FLIPKART, MEESHO, MYNTRA)
}


def get_profile(platform: MarketplaceKey | str) -> MarketplaceProfile:
    """Get the rule profile for a marketplace."""
    return MARKETPLACE_PROFILES[MarketplaceKey(platform)]


def marketplace_label(platform: MarketplaceKey | str) -> str:
    """Human-readable marketplace name."""
    return get_profile(platform).label


__all__ = [
    "UNCATEGORIZED_PATH",
    "MarketplaceProfile",
    "MARKETPLACE_PROFILES",
    "get_profile",
    "marketplace_label",
]
