from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from rentwise.presets import PERSONAL_CONTENTS_DEFAULT, PERSONAL_CONTENTS_TIERS


def new_id() -> str:
    return uuid4().hex


class Employer(BaseModel):
    name: str = ""
    industry: str = ""
    position: str = ""
    # Digits while editing, comma-grouped after blur.
    income: str = ""
    employment_status: str = "full-time"


class Person(BaseModel):
    """Fields shared by the applicant, lease holders and guarantors."""

    id: str = Field(default_factory=new_id)
    first_name: str = ""
    middle_initial: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    date_of_birth: str = ""
    ssn: str = ""
    ssn_raw: str = ""
    is_citizen: Optional[bool] = True
    current_street: str = ""
    current_city: str = ""
    current_state: str = ""
    current_zip: str = ""
    current_duration: str = ""
    previous_street: str = ""
    previous_city: str = ""
    previous_state: str = ""
    previous_zip: str = ""
    employers: List[Employer] = Field(default_factory=list)


class Applicant(Person):
    move_in_date: str = ""
    desired_lease_term: str = ""
    employment: str = ""
    employer_name: str = ""
    has_other_income: bool = False
    other_income_details: str = ""
    employers: List[Employer] = Field(default_factory=lambda: [Employer()])


class LeaseHolder(Person):
    same_as_primary: bool = False


class Guarantor(Person):
    same_as_primary: bool = False


class AdditionalOccupant(BaseModel):
    id: str = Field(default_factory=new_id)
    first_name: str = ""
    middle_initial: str = ""
    last_name: str = ""
    age: str = ""
    date_of_birth: str = ""
    ssn: str = ""


class Pet(BaseModel):
    id: str = Field(default_factory=new_id)
    type: str = ""
    name: str = ""
    breed: str = ""
    age: str = ""
    weight: str = ""
    is_service_animal: bool = False


class Vehicle(BaseModel):
    id: str = Field(default_factory=new_id)
    type: str = ""
    make: str = ""
    model: str = ""
    year: str = ""
    color: str = ""
    license_plate: str = ""

    @field_validator("license_plate")
    @classmethod
    def _upper_plate(cls, v: str) -> str:
        return (v or "").upper()

    @field_validator("year", mode="before")
    @classmethod
    def _year_str(cls, v) -> str:
        return "" if v is None else str(v)


class EmergencyContact(BaseModel):
    name: str = ""
    phone: str = ""
    email: str = ""
    relation: str = ""


class Documents(BaseModel):
    id: List[str] = Field(default_factory=list)


class ApplicationForm(BaseModel):
    """The whole applicant aggregate as edited across the form steps."""

    applicant: Applicant = Field(default_factory=Applicant)
    lease_holders: List[LeaseHolder] = Field(default_factory=list)
    guarantors: List[Guarantor] = Field(default_factory=list)
    additional_occupants: List[AdditionalOccupant] = Field(default_factory=list)
    has_pets: Optional[bool] = None
    pets: List[Pet] = Field(default_factory=list)
    has_vehicles: Optional[bool] = None
    vehicles: List[Vehicle] = Field(default_factory=list)
    emergency_contact: EmergencyContact = Field(default_factory=EmergencyContact)
    additional_info: str = ""
    documents: Documents = Field(default_factory=Documents)
    background_check_permission: bool = False
    text_message_permission: bool = True


class AuthUser(BaseModel):
    uid: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""


class LeaseTerm(BaseModel):
    months: int
    rent: float
    popular: bool = False
    savings: Optional[float] = None
    concession: Optional[str] = None


class Unit(BaseModel):
    id: str
    unit_number: str = ""
    bedrooms: int = 0
    bathrooms: float = 0
    sqft: int = 0
    floor: int = 0
    available: bool = True
    qualified: bool = False
    rent: float = 0.0
    deposit: float = 0.0
    available_date: str = ""
    lease_terms: List[LeaseTerm] = Field(default_factory=list)
    amenities: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)


class PetPolicy(BaseModel):
    allowed: bool = False
    fee: float = 0.0
    deposit: float = 0.0


class Property(BaseModel):
    id: str
    name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    amenities: List[str] = Field(default_factory=list)
    latitude: float = 0.0
    longitude: float = 0.0
    pet_policy: PetPolicy = Field(default_factory=PetPolicy)
    units: List[Unit] = Field(default_factory=list)


class FlatSelection(BaseModel):
    kind: Literal["flat"] = "flat"
    selected: bool = False


class TieredSelection(BaseModel):
    kind: Literal["tiered"] = "tiered"
    selected: bool = False
    option: str = PERSONAL_CONTENTS_DEFAULT

    @field_validator("option")
    @classmethod
    def _known_tier(cls, v: str) -> str:
        if v not in PERSONAL_CONTENTS_TIERS:
            raise ValueError(f"unknown coverage tier {v!r}")
        return v


ProductSelection = Annotated[Union[FlatSelection, TieredSelection], Field(discriminator="kind")]


class Coupon(BaseModel):
    code: str
    discount_percent: float


class PetInfo(BaseModel):
    type: str = ""
    name: str = ""
    breed: str = ""
    weight: str = ""


class PaymentTotals(BaseModel):
    monthly_only: float = 0.0
    flexible_payment: float = 0.0
    subtotal: float = 0.0
    annual_flexible: float = 0.0
    annual_discount: float = 0.0
    coupon_discount: float = 0.0
    total: float = 0.0


SelectionMap = Dict[str, ProductSelection]


class PrequalAnswers(BaseModel):
    location: str = ""
    move_in: str = ""
    budget: str = ""
    bedrooms: str = ""
    pets: bool = False


class Listing(BaseModel):
    id: str
    title: str = ""
    address: str = ""
    rent: str = ""
    beds: int = 0
    baths: float = 0
    available: str = ""
    network: bool = False
    explainers: List[str] = Field(default_factory=list)
