"""Wire shapes of the Coloso endpoints and the course page JSON-LD block."""

from typing import List, Optional

from pydantic import BaseModel, Field


class ColosoCategory(BaseModel):
    id: int
    title: str
    children: List["ColosoCategory"] = Field(default_factory=list)


class ColosoCategoryListResponse(BaseModel):
    categories: List[ColosoCategory]


class PriceSpecification(BaseModel):
    price: Optional[int] = None


class Offer(BaseModel):
    price_specifications: List[PriceSpecification] = Field(default_factory=list, alias="priceSpecifications")


class Product(BaseModel):
    """schema.org Product as embedded in <script type="application/ld+json">."""
    product_id: int = Field(..., alias="productId")
    offers: List[Offer] = Field(default_factory=list)


class CourseExtras(BaseModel):
    additional_text1: Optional[str] = Field(None, alias="additionalText1")
    additional_text2: Optional[str] = Field(None, alias="additionalText2")
    additional_text3: Optional[str] = Field(None, alias="additionalText3")

    def texts(self) -> List[Optional[str]]:
        return [self.additional_text1, self.additional_text2, self.additional_text3]


class ColosoCourseRecord(BaseModel):
    public_title: Optional[str] = Field(None, alias="publicTitle")
    instructor: Optional[str] = None
    keywords: Optional[str] = None
    desktop_card_asset: Optional[str] = Field(None, alias="desktopCardAsset")
    extras: Optional[CourseExtras] = None


class ColosoCourseListResponse(BaseModel):
    courses: List[ColosoCourseRecord] = Field(default_factory=list)
