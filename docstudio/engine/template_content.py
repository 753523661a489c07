"""Markdown bodies for the built-in templates."""

NDA_CONTENT = """# MUTUAL NON-DISCLOSURE AGREEMENT

This Mutual Non-Disclosure Agreement (the "Agreement") is entered into as of {{effective_date}} (the "Effective Date") by and between:

**{{party_a_name}}**, a {{party_a_state}} {{party_a_type}} ("Party A"), and

**{{party_b_name}}**, a {{party_b_state}} {{party_b_type}} ("Party B").

Party A and Party B are each referred to as a "Party" and together as the "Parties."

## 1. Purpose

The Parties wish to exchange Confidential Information for the purpose of {{purpose}} (the "Purpose").

## 2. Confidential Information

"Confidential Information" means any non-public information disclosed by one Party to the other, whether orally, in writing, or by inspection, that is designated as confidential or that reasonably should be understood to be confidential.

## 3. Obligations

Each receiving Party shall:

- hold the disclosing Party's Confidential Information in strict confidence;
- use the Confidential Information solely for the Purpose;
- restrict disclosure to employees and advisors with a need to know.

## 4. Term

This Agreement remains in effect for {{term_years}} year(s) from the Effective Date.{{#if perpetual_trade_secrets}} Obligations with respect to trade secrets survive for as long as the information remains a trade secret under applicable law.{{/if}}

{{#if include_non_solicit}}
## 5. Non-Solicitation

During the term of this Agreement and for {{non_solicit_months}} months thereafter, neither Party shall solicit for employment any employee of the other Party with whom it had contact in connection with the Purpose.
{{/if}}

## Governing Law

This Agreement is governed by the laws of the State of {{governing_state}}.

---

**{{party_a_name}}**

By: ______________________

**{{party_b_name}}**

By: ______________________
"""

EMPLOYMENT_CONTENT = """# EMPLOYMENT AGREEMENT

This Employment Agreement (the "Agreement") is made between **{{employer_name}}**, located at {{employer_address}} (the "Company"), and **{{employee_name}}**, residing at {{employee_address}} (the "Employee").

## 1. Position

The Company employs the Employee as **{{job_title}}**{{#if department}} in the {{department}} department{{/if}}{{#if reports_to}}, reporting to the {{reports_to}}{{/if}}. This is a {{employment_type}} position.

{{#if office_address}}The Employee's principal place of work is {{office_address}}.{{else}}The Employee's work location is {{work_location}}.{{/if}}

## 2. Start Date and Term

Employment begins on {{start_date}}. {{#if is_at_will}}Employment is at-will and may be terminated by either party at any time, with or without cause.{{else}}{{#if contract_duration}}Employment continues for an initial term of {{contract_duration}} months.{{else}}Employment continues for a fixed term agreed in writing.{{/if}}{{/if}}

## 3. Compensation

The Employee will receive {{salary_type}} compensation of ${{salary_amount}}, paid {{pay_frequency}}.

{{#if bonus_eligible}}
The Employee is eligible for an annual bonus with a target of {{bonus_percentage}}% of base salary.
{{/if}}
{{#if equity_eligible}}
Subject to board approval, the Employee will be granted options to purchase {{equity_shares}} shares of the Company's common stock.
{{/if}}

## 4. Benefits

- Paid time off: {{pto_days}} days per year
{{#if health_insurance}}- Health insurance under the Company's group plan
{{/if}}{{#if dental_vision}}- Dental and vision coverage
{{/if}}{{#if retirement_401k}}- 401(k) plan participation{{#if retirement_match}} with a {{retirement_match}}% Company match{{/if}}
{{/if}}
## 5. Governing Law

This Agreement is governed by the laws of the State of {{state}}.

---

**{{employer_name}}**

By: ______________________

**{{employee_name}}**

Signature: ______________________
"""

CONTRACTOR_CONTENT = """# INDEPENDENT CONTRACTOR AGREEMENT

This Independent Contractor Agreement is entered into between **{{client_name}}** (the "Client") and **{{contractor_name}}** (the "Contractor"), effective {{start_date}}.

## 1. Services

The Contractor will provide the following services: {{services_description}}.

## 2. Compensation

{{#if is_hourly}}The Client will pay the Contractor ${{hourly_rate}} per hour{{#if max_hours}}, not to exceed {{max_hours}} hours per month without prior written approval{{/if}}.{{else}}The Client will pay the Contractor a fixed fee of ${{fixed_fee}} for the services.{{/if}} Invoices are payable within {{payment_terms_days}} days of receipt.

## 3. Independent Contractor Status

The Contractor is an independent contractor and not an employee of the Client. The Contractor is responsible for all taxes on compensation received under this Agreement.

## 4. Termination

Either party may terminate this Agreement with {{termination_notice_days}} days' written notice.

{{#if include_ip_assignment}}
## 5. Intellectual Property

All work product created by the Contractor in performing the services is a work made for hire and is owned exclusively by the Client.
{{/if}}

---

**{{client_name}}**

By: ______________________

**{{contractor_name}}**

By: ______________________
"""
