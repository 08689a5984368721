DISCLAIMER = (
    "Add-on pricing shown here is an estimate based on the selected unit, lease term and coverage. "
    "Final charges are confirmed at checkout; screening results and landlord policies prevail."
)

STEP_TITLES = [
    "Personal Info",
    "Financial Info",
    "Housing History",
    "Lease Holders & Guarantors",
    "Additional Occupants",
    "Additional Info",
    "Documents",
    "Review & Submit",
]
STEP_PERSONAL, STEP_FINANCIAL, STEP_HOUSING, STEP_HOLDERS = 0, 1, 2, 3
STEP_OCCUPANTS, STEP_ADDITIONAL, STEP_DOCUMENTS, STEP_REVIEW = 4, 5, 6, 7

EMPLOYMENT_STATUSES = ["full-time", "part-time", "contract", "self-employed", "student", "retired", "unemployed"]
UNEMPLOYED = "unemployed"

INDUSTRY_OPTIONS = ["Technology", "Healthcare", "Finance", "Education", "Retail", "Manufacturing",
"Construction", "Hospitality", "Transportation", "Government", "Non-profit", "Other"]

POSITION_OPTIONS = ["Manager", "Supervisor", "Director", "VP", "C-Level", "Individual Contributor",
"Intern", "Contractor", "Consultant", "Other"]

VEHICLE_TYPES = ["Car", "Truck", "Van", "SUV", "Motorcycle", "Other"]
PET_TYPES = ["dog", "cat", "bird", "fish", "rabbit", "other"]
RELATIONS = ["Parent", "Partner", "Sibling", "Spouse", "Child", "Friend", "Other"]

# Current-address duration buckets. "0-2" is the only bucket that requires a
# previous address.
DURATION_UNDER_2 = "0-2"
DURATION_OPTIONS = {"0-2": "Less than 2 years", "2+": "More than 2 years"}
DURATION_LABELS = {"0-2": "Less than 2 years", "2+": "More than 2 years",
"2-5": "More than 2 years", "5+": "More than 2 years"}

ADULT_AGE = 18
MIN_VEHICLE_YEAR = 1900
MIN_DOB_YEAR = 1900

# Add-on catalogue. Prices are monthly dollars.
RENTERS_INSURANCE = "renters_insurance"
SECURITY_DEPOSIT_ALT = "security_deposit_alt"
PERSONAL_CONTENTS = "personal_contents"
FLEX_RENT = "flex_rent"
CREDIT_REPORTING = "credit_reporting"
PET_INSURANCE = "pet_insurance"

PRODUCT_NAMES = {
    RENTERS_INSURANCE: "Renter's Insurance",
    SECURITY_DEPOSIT_ALT: "Security Deposit Alternative",
    PERSONAL_CONTENTS: "Personal Contents Coverage",
    FLEX_RENT: "Flex Rent Payments",
    CREDIT_REPORTING: "Credit Reporting",
    PET_INSURANCE: "Pet Insurance",
}
PRODUCT_DESCRIPTIONS = {
    RENTERS_INSURANCE: "Covers up to $100,000 in damages",
    SECURITY_DEPOSIT_ALT: "Monthly fee instead of large upfront deposit",
    PERSONAL_CONTENTS: "Protect your Personal Contents",
    FLEX_RENT: "Split rent into three installments",
    CREDIT_REPORTING: "Build your credit with ontime rental payments",
    PET_INSURANCE: "Healthcare coverage for your furry family members",
}
REQUIRED_PRODUCTS = [RENTERS_INSURANCE, SECURITY_DEPOSIT_ALT]
OPTIONAL_PRODUCTS = [PERSONAL_CONTENTS, FLEX_RENT, CREDIT_REPORTING, PET_INSURANCE]
ANNUAL_ELIGIBLE = {RENTERS_INSURANCE, SECURITY_DEPOSIT_ALT, PERSONAL_CONTENTS, CREDIT_REPORTING, PET_INSURANCE}

FLAT_PRICES = {RENTERS_INSURANCE: 11.0, FLEX_RENT: 30.0, CREDIT_REPORTING: 7.0, PET_INSURANCE: 4.0}
PERSONAL_CONTENTS_TIERS = {"3000": 3.0, "7500": 4.5, "15000": 6.0, "30000": 8.0}
PERSONAL_CONTENTS_DEFAULT = "7500"

DEPOSIT_ALT_RENT_PCT = 0.02
# (minimum credit score, monthly fee), checked top-down
DEPOSIT_ALT_FEE_TIERS = [(725, 0.0), (675, 15.0), (625, 25.0)]
DEPOSIT_ALT_FEE_FLOOR = 35.0
FLEX_RENT_SHARE = 0.5

BASELINE_TERM_MONTHS = 12
SHORT_TERM_STEP = 0.05
LONG_TERM_STEP = 0.02
MAX_TERM_MONTHS = 24
FALLBACK_RENT = 1200.0
MIN_CHARGE_CENTS = 50

# Deployment overrides for these live in core.config.
VALID_COUPONS = {"111": 5.0}
ANNUAL_DISCOUNT_RATE = 0.07
DEFAULT_CREDIT_SCORE = 720

MAX_COMPARE = 5
# (minimum score, label), checked top-down
CREDIT_SCORE_LABELS = [(750, "Excellent (750+)"), (700, "Good (700-749)"), (650, "Fair (650-699)")]
CREDIT_SCORE_FLOOR_LABEL = "Poor (below 650)"
MAX_RENT_TO_INCOME = 30.0

# Listing match weights; each factor only counts when both sides supply it.
RANK_WEIGHTS = {"budget": 0.4, "bedrooms": 0.3, "location": 0.2, "availability": 0.1}
RANK_DEFAULT = 70
NETWORK_BOOST = 1.1
MAX_EXPLAINERS = 3

# Listing shown when no document store is configured.
SAMPLE_PROPERTY = {
    "id": "sample-property",
    "name": "Maple Court Apartments",
    "address": "120 Maple Court",
    "city": "Austin",
    "state": "TX",
    "zip": "78701",
    "amenities": ["Pool", "Fitness center", "Covered parking"],
    "pet_policy": {"allowed": True, "fee": 35.0, "deposit": 300.0},
    "units": [
        {"id": "101", "unit_number": "101", "bedrooms": 1, "bathrooms": 1, "sqft": 720, "floor": 1,
         "rent": 1200.0, "deposit": 500.0, "available_date": "Available Now",
         "lease_terms": [{"months": 12, "rent": 1200.0, "popular": True}]},
        {"id": "204", "unit_number": "204", "bedrooms": 2, "bathrooms": 2, "sqft": 1050, "floor": 2,
         "rent": 1650.0, "deposit": 750.0, "available_date": "2026-12-01",
         "lease_terms": [{"months": 12, "rent": 1650.0, "popular": True},
                         {"months": 15, "rent": 1600.0, "concession": "One month free"}]},
        {"id": "305", "unit_number": "305", "bedrooms": 3, "bathrooms": 2, "sqft": 1320, "floor": 3,
         "rent": 2100.0, "deposit": 900.0, "available_date": "2027-01-15"},
    ],
}
