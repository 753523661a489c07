"""Built-in document template catalog.

Holds the template definitions offered by the studio and the lookup
helpers used by the API.
"""

from docstudio.core.exceptions import TemplateNotFoundError
from docstudio.engine.models import (
    Section,
    ShowIf,
    Template,
    TemplateCategory,
    Variable,
    VariableValidation,
)
from docstudio.engine.template_content import (
    CONTRACTOR_CONTENT,
    EMPLOYMENT_CONTENT,
    NDA_CONTENT,
)

US_STATES = [
    "California",
    "New York",
    "Texas",
    "Florida",
    "Illinois",
    "Washington",
    "Massachusetts",
    "Colorado",
    "Delaware",
    "Other",
]

ENTITY_TYPES = ["corporation", "llc", "partnership", "individual"]

CATEGORY_NAMES: dict[str, str] = {
    "employment": "Employment",
    "nda": "Non-Disclosure",
    "services": "Services",
    "lease": "Lease",
    "corporate": "Corporate",
    "litigation": "Litigation",
}


# =============================================================================
# Mutual NDA
# =============================================================================

NDA_TEMPLATE = Template(
    id="nda-mutual",
    name="Mutual Non-Disclosure Agreement",
    description="Mutual NDA for protecting confidential information shared between two parties.",
    category="nda",
    tags=["nda", "confidentiality", "privacy"],
    sections=[
        Section(
            id="parties",
            title="Parties",
            description="Information about both parties to the NDA",
            variables=[
                Variable(name="party_a_name", label="First Party Name", required=True, placeholder="Your Company, Inc."),
                Variable(name="party_a_type", label="First Party Type", type="select", required=True, options=ENTITY_TYPES),
                Variable(name="party_a_state", label="First Party State of Formation", required=True, placeholder="Delaware"),
                Variable(name="party_b_name", label="Second Party Name", required=True, placeholder="Other Company, LLC"),
                Variable(name="party_b_type", label="Second Party Type", type="select", required=True, options=ENTITY_TYPES),
                Variable(name="party_b_state", label="Second Party State of Formation", required=True, placeholder="California"),
            ],
        ),
        Section(
            id="terms",
            title="Terms",
            description="Purpose and duration of the agreement",
            variables=[
                Variable(name="effective_date", label="Effective Date", type="date", required=True),
                Variable(
                    name="purpose",
                    label="Purpose of Disclosure",
                    type="textarea",
                    required=True,
                    placeholder="evaluating a potential business relationship",
                    validation=VariableValidation(min_length=10, max_length=500),
                ),
                Variable(
                    name="term_years",
                    label="Term (years)",
                    type="number",
                    required=True,
                    default_value=2,
                    validation=VariableValidation(min=1, max=10),
                ),
                Variable(
                    name="perpetual_trade_secrets",
                    label="Trade Secrets Survive Indefinitely",
                    type="boolean",
                    required=True,
                    default_value=True,
                ),
                Variable(name="include_non_solicit", label="Include Non-Solicitation", type="boolean", required=True),
                Variable(name="governing_state", label="Governing Law State", type="select", required=True, options=US_STATES),
            ],
        ),
        Section(
            id="non_solicit",
            title="Non-Solicitation",
            description="Duration of the non-solicitation covenant",
            show_if=ShowIf(variable_id="include_non_solicit", value=True),
            variables=[
                Variable(
                    name="non_solicit_months",
                    label="Non-Solicitation Period (months)",
                    type="number",
                    required=True,
                    default_value=12,
                    validation=VariableValidation(min=1, max=36),
                ),
            ],
        ),
    ],
    content=NDA_CONTENT,
)


# =============================================================================
# Employment Agreement
# =============================================================================

EMPLOYMENT_TEMPLATE = Template(
    id="employment-agreement",
    name="Employment Agreement",
    description="Standard employment contract covering position, compensation, benefits, and terms of employment.",
    category="employment",
    tags=["employment", "hr", "hiring"],
    sections=[
        Section(
            id="parties",
            title="Parties",
            description="Information about the employer and employee",
            variables=[
                Variable(
                    name="employer_name",
                    label="Employer Name",
                    required=True,
                    placeholder="Acme Corporation",
                    help_text="Legal name of the employing company",
                ),
                Variable(name="employer_address", label="Employer Address", type="textarea", required=True),
                Variable(name="employee_name", label="Employee Name", required=True, placeholder="John Smith"),
                Variable(name="employee_address", label="Employee Address", type="textarea", required=True),
            ],
        ),
        Section(
            id="position",
            title="Position Details",
            description="Job title, responsibilities, and work location",
            variables=[
                Variable(name="job_title", label="Job Title", required=True, placeholder="Software Engineer"),
                Variable(name="department", label="Department", placeholder="Engineering"),
                Variable(name="reports_to", label="Reports To", placeholder="VP of Engineering"),
                Variable(
                    name="work_location",
                    label="Work Location",
                    type="select",
                    required=True,
                    options=["onsite", "remote", "hybrid"],
                ),
                Variable(name="office_address", label="Office Address", type="textarea"),
                Variable(
                    name="state",
                    label="Employment State",
                    type="select",
                    required=True,
                    options=US_STATES,
                    help_text="State where employment laws apply",
                ),
            ],
        ),
        Section(
            id="compensation",
            title="Compensation",
            description="Salary, bonuses, and payment terms",
            variables=[
                Variable(
                    name="employment_type",
                    label="Employment Type",
                    type="select",
                    required=True,
                    options=["full-time", "part-time", "contract"],
                ),
                Variable(name="salary_type", label="Compensation Type", type="select", required=True, options=["annual", "hourly"]),
                Variable(
                    name="salary_amount",
                    label="Salary Amount",
                    type="number",
                    required=True,
                    placeholder="150000",
                    help_text="Annual salary or hourly rate",
                    validation=VariableValidation(min=0),
                ),
                Variable(
                    name="pay_frequency",
                    label="Pay Frequency",
                    type="select",
                    required=True,
                    options=["weekly", "bi-weekly", "semi-monthly", "monthly"],
                ),
                Variable(name="bonus_eligible", label="Bonus Eligible", type="boolean", required=True),
                Variable(name="equity_eligible", label="Equity/Stock Options", type="boolean", required=True),
            ],
        ),
        Section(
            id="bonus",
            title="Bonus",
            show_if=ShowIf(variable_id="bonus_eligible", value=True),
            variables=[
                Variable(
                    name="bonus_percentage",
                    label="Target Bonus (%)",
                    type="number",
                    required=True,
                    placeholder="15",
                    validation=VariableValidation(min=0, max=100),
                ),
            ],
        ),
        Section(
            id="equity",
            title="Equity",
            show_if=ShowIf(variable_id="equity_eligible", value=True),
            variables=[
                Variable(name="equity_shares", label="Number of Stock Options", type="number", required=True, placeholder="10000"),
            ],
        ),
        Section(
            id="dates",
            title="Employment Dates",
            description="Start date and employment term",
            variables=[
                Variable(name="start_date", label="Start Date", type="date", required=True),
                Variable(
                    name="is_at_will",
                    label="At-Will Employment",
                    type="boolean",
                    required=True,
                    default_value=True,
                    help_text="Employment can be terminated by either party at any time",
                ),
                Variable(name="contract_duration", label="Contract Duration (months)", type="number", placeholder="12"),
            ],
        ),
        Section(
            id="benefits",
            title="Benefits",
            description="Health insurance, PTO, and other benefits",
            variables=[
                Variable(name="health_insurance", label="Health Insurance", type="boolean", required=True, default_value=True),
                Variable(name="dental_vision", label="Dental & Vision", type="boolean", required=True, default_value=True),
                Variable(
                    name="pto_days",
                    label="PTO Days per Year",
                    type="number",
                    required=True,
                    default_value=15,
                    validation=VariableValidation(min=0, max=365),
                ),
                Variable(name="retirement_401k", label="401(k) Plan", type="boolean", required=True, default_value=True),
                Variable(name="retirement_match", label="401(k) Match (%)", type="number", placeholder="4"),
            ],
        ),
    ],
    content=EMPLOYMENT_CONTENT,
)


# =============================================================================
# Independent Contractor Agreement
# =============================================================================

CONTRACTOR_TEMPLATE = Template(
    id="contractor-agreement",
    name="Independent Contractor Agreement",
    description="Agreement for engaging an independent contractor on an hourly or fixed-fee basis.",
    category="services",
    tags=["contractor", "freelance", "services"],
    sections=[
        Section(
            id="parties",
            title="Parties",
            variables=[
                Variable(name="client_name", label="Client Name", required=True),
                Variable(name="contractor_name", label="Contractor Name", required=True),
                Variable(name="start_date", label="Start Date", type="date", required=True),
            ],
        ),
        Section(
            id="services",
            title="Services",
            variables=[
                Variable(
                    name="services_description",
                    label="Description of Services",
                    type="textarea",
                    required=True,
                    validation=VariableValidation(min_length=10),
                ),
                Variable(name="is_hourly", label="Hourly Engagement", type="boolean", required=True, default_value=True),
                Variable(
                    name="payment_terms_days",
                    label="Payment Terms (days)",
                    type="number",
                    required=True,
                    default_value=30,
                    validation=VariableValidation(min=0, max=120),
                ),
                Variable(
                    name="termination_notice_days",
                    label="Termination Notice (days)",
                    type="number",
                    required=True,
                    default_value=30,
                ),
                Variable(
                    name="include_ip_assignment",
                    label="Assign Work Product to Client",
                    type="boolean",
                    required=True,
                    default_value=True,
                ),
            ],
        ),
        Section(
            id="hourly",
            title="Hourly Rate",
            show_if=ShowIf(variable_id="is_hourly", value=True),
            variables=[
                Variable(name="hourly_rate", label="Hourly Rate", type="number", required=True, validation=VariableValidation(min=0)),
                Variable(name="max_hours", label="Maximum Hours per Month", type="number"),
            ],
        ),
        Section(
            id="fixed_fee",
            title="Fixed Fee",
            show_if=ShowIf(variable_id="is_hourly", value=False),
            variables=[
                Variable(name="fixed_fee", label="Fixed Fee", type="number", required=True, validation=VariableValidation(min=0)),
            ],
        ),
    ],
    content=CONTRACTOR_CONTENT,
)


TEMPLATES: list[Template] = [
    EMPLOYMENT_TEMPLATE,
    NDA_TEMPLATE,
    CONTRACTOR_TEMPLATE,
]


def get_template_by_id(template_id: str) -> Template:
    """Look up a template.

    Raises:
        TemplateNotFoundError: If no template has this id.
    """
    for template in TEMPLATES:
        if template.id == template_id:
            return template
    raise TemplateNotFoundError(template_id)


def get_templates_by_category(category: TemplateCategory) -> list[Template]:
    """Templates belonging to a category."""
    return [t for t in TEMPLATES if t.category == category]


def get_categories() -> list[dict[str, str | int]]:
    """Categories that have at least one template, with counts."""
    counts: dict[str, int] = {}
    for template in TEMPLATES:
        counts[template.category] = counts.get(template.category, 0) + 1

    return [
        {"id": category_id, "name": name, "count": counts[category_id]}
        for category_id, name in CATEGORY_NAMES.items()
        if counts.get(category_id, 0) > 0
    ]


def search_templates(query: str) -> list[Template]:
    """Case-insensitive search over name, description and tags."""
    needle = query.lower()
    return [
        t
        for t in TEMPLATES
        if needle in t.name.lower()
        or needle in t.description.lower()
        or any(needle in tag.lower() for tag in t.tags)
    ]
