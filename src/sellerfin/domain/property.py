from pydantic import BaseModel, ConfigDict, Field


class PropertyData(BaseModel):
    """
    Financial inputs for one property. All amounts are dollars, monthly
    except the listed price.
    """
    model_config = ConfigDict(frozen=True)

    listed_price: float = Field(..., ge=0, description="Asking price; offers are built on it")
    monthly_rent: float = Field(..., ge=0, description="Expected achievable rent")

    monthly_property_tax: float = Field(default=0.0, ge=0)
    monthly_insurance: float = Field(default=0.0, ge=0)
    monthly_hoa_fee: float = Field(default=0.0, ge=0)
    monthly_other_fees: float = Field(default=0.0, ge=0)
