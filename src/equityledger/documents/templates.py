"""Built-in agreement templates used when no active template is stored."""

from equityledger.models import DocumentTemplate, DocumentType

BUILTIN_TEMPLATE_VERSION = "1.0"

NDA_TEMPLATE = """
CONFIDENTIALITY AND NON-DISCLOSURE AGREEMENT

This Confidentiality and Non-Disclosure Agreement ("Agreement") is made on {{effectiveDate}} between:

DISCLOSING PARTY:
Company Name: {{businessName}}
Representative: {{businessRepName}}
Title: {{businessRepTitle}}
Email: {{businessEmail}}
Phone: {{businessPhone}}

RECEIVING PARTY:
Name: {{jobseekerName}}
Email: {{jobseekerEmail}}
Phone: {{jobseekerPhone}}

1. CONFIDENTIAL INFORMATION

"Confidential Information" means any non-public business, technical or financial
information the Disclosing Party shares with the Receiving Party, in any form.

2. OBLIGATIONS

The Receiving Party will keep Confidential Information in strict confidence, use it
only to evaluate and perform work for the Disclosing Party, and return or destroy it
on written request.

3. EXCLUSIONS

These obligations do not cover information that is public through no fault of the
Receiving Party, was already known to it, was independently developed, or must be
disclosed by law.

4. TERM

This Agreement remains in effect for {{confidentialityPeriod}} years from the date of
execution unless both parties end it earlier in writing.

5. DISPUTES

Disputes arising from this Agreement are resolved by binding arbitration administered
by {{arbitrationOrg}}.

DISCLOSING PARTY:                    RECEIVING PARTY:
{{businessName}}                     {{jobseekerName}}

By: ________________________        Signature: ________________________
Name: {{businessRepName}}           Date: {{effectiveDate}}
Title: {{businessRepTitle}}
"""

WORK_CONTRACT_TEMPLATE = """
WORK AGREEMENT AND EQUITY ALLOCATION CONTRACT

This Work Agreement ("Agreement") is made on {{effectiveDate}} between:

COMPANY:
{{businessName}} ({{entityType}})
Representative: {{businessRepName}}
Title: {{businessRepTitle}}
Email: {{businessEmail}}
Phone: {{businessPhone}}

CONTRACTOR:
{{jobseekerName}}
Email: {{jobseekerEmail}}
Phone: {{jobseekerPhone}}

PROJECT:
Title: {{projectTitle}}
Description: {{projectDescription}}

1. SCOPE OF WORK

The Contractor will deliver the work described for "{{projectTitle}}" as set out in the
project's tasks and tickets.

2. EQUITY COMPENSATION

The Contractor will earn {{equityAmount}}% of {{equityClass}} in {{businessName}},
granted as tasks are completed and approved. Total equity under this
Agreement will not exceed {{equityAmount}}%.

3. RELATIONSHIP

The Contractor is an independent contractor and not an employee of the Company.

4. INTELLECTUAL PROPERTY

Work product created under this Agreement belongs to the Company. Pre-existing
intellectual property of the Contractor remains the Contractor's.

5. TERM AND TERMINATION

This Agreement runs for {{duration}} years or until the project is complete, whichever
comes first. Vested equity survives termination.

6. DISPUTES

Disputes arising from this Agreement are resolved by binding arbitration administered
by {{arbitrationOrg}}.

COMPANY:                             CONTRACTOR:
{{businessName}}                     {{jobseekerName}}

By: ________________________        Signature: ________________________
Name: {{businessRepName}}           Date: {{effectiveDate}}
Title: {{businessRepTitle}}
"""

AWARD_AGREEMENT_TEMPLATE = """
EQUITY AWARD AGREEMENT

This Equity Award Agreement ("Award") is made on {{effectiveDate}} between {{businessName}},
a {{entityType}} (the "Company"), and {{jobseekerName}} (the "Recipient").

1. BACKGROUND

Under the Work Agreement dated {{contractDate}}, the Recipient agreed to perform work on
"{{projectTitle}}". The Recipient has {{completedDeliverables}}.

2. AWARD

The Company awards the Recipient {{equityAmount}}% of its {{equityClass}},
fully vested on execution of this Award.

3. REPRESENTATIONS

The Company confirms it has authority to make this Award. The Recipient confirms the
work described above is complete.

4. DISPUTES

Disputes arising from this Award are resolved by binding arbitration administered by
{{arbitrationOrg}}.

COMPANY:                             RECIPIENT:
{{businessName}}                     {{jobseekerName}}

By: ________________________        Signature: ________________________
Name: {{businessRepName}}           Date: {{effectiveDate}}
Title: {{businessRepTitle}}
"""

BUILTIN_TEMPLATES: dict[DocumentType, DocumentTemplate] = {
    DocumentType.NDA: DocumentTemplate(
        template_type=DocumentType.NDA,
        template_version=BUILTIN_TEMPLATE_VERSION,
        template_name="Standard NDA",
        template_content=NDA_TEMPLATE,
    ),
    DocumentType.WORK_CONTRACT: DocumentTemplate(
        template_type=DocumentType.WORK_CONTRACT,
        template_version=BUILTIN_TEMPLATE_VERSION,
        template_name="Standard Work Contract",
        template_content=WORK_CONTRACT_TEMPLATE,
    ),
    DocumentType.AWARD_AGREEMENT: DocumentTemplate(
        template_type=DocumentType.AWARD_AGREEMENT,
        template_version=BUILTIN_TEMPLATE_VERSION,
        template_name="Standard Equity Award Agreement",
        template_content=AWARD_AGREEMENT_TEMPLATE,
    ),
}


def builtin_template(document_type: DocumentType) -> DocumentTemplate:
    return BUILTIN_TEMPLATES[document_type]
