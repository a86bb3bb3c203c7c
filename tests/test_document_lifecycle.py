"""
Document lifecycle tests.

Covers generation (idempotent per owning record, award after contract),
rendering, the forward-only status machine, status mirroring onto the
owning record and signing.
"""

import re
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from equityledger.documents import (
    BUILTIN_TEMPLATES,
    render_document,
    render_html_preview,
    storage_path,
    unresolved_placeholders,
)
from equityledger.engine import (
    InvalidInput,
    InvalidTransition,
    MissingPrerequisiteDocument,
    NotFound,
    NotSignable,
)
from equityledger.models import DocumentData, DocumentStatus, DocumentTemplate, DocumentType
from equityledger.models.lifecycle import can_transition_document
from equityledger.utils.time import long_date


async def _generate(ledger, document_type, **kwargs):
    owner = (
        {"application_id": ledger.application_id}
        if document_type == "nda"
        else {"accepted_job_id": ledger.accepted_job_id}
    )
    owner.update(kwargs)
    return await ledger.engine.generate_document(
        document_type=document_type,
        business_id=ledger.business_id,
        counterparty_id=ledger.profile_id,
        project_id=ledger.project_id,
        **owner,
    )


async def _advance(ledger, document_id, *statuses):
    for status in statuses:
        await ledger.engine.advance_document_status(document_id, status)


# ============================================================================
# Rendering
# ============================================================================


def _data(**overrides):
    values = dict(
        business_name="Acme Robotics",
        jobseeker_name="Sam Okafor",
        effective_date="March 4, 2025",
        duration="2",
        confidentiality_period="5",
        arbitration_org="ICC",
    )
    values.update(overrides)
    return DocumentData(**values)


def test_render_substitutes_known_fields_and_keeps_unknown():
    content = render_document(
        "  {{businessName}} and {{ jobseekerName }} agree on {{unknownField}}  ",
        _data(),
    )
    assert content == "Acme Robotics and Sam Okafor agree on {{ unknownField }}\n"
    assert unresolved_placeholders(content) == {"unknownField"}


def test_unset_optional_field_is_left_in_place():
    content = render_document("Dated {{contractDate}} for {{businessName}}", _data())
    assert content == "Dated {{ contractDate }} for Acme Robotics\n"
    assert unresolved_placeholders(content) == {"contractDate"}


def test_builtin_nda_renders_completely():
    content = render_document(BUILTIN_TEMPLATES[DocumentType.NDA].template_content, _data())
    assert unresolved_placeholders(content) == set()
    assert "5 years" in content
    assert "ICC" in content


def test_html_preview_escapes_content():
    preview = render_html_preview("Terms & <conditions>\nSecond line")
    assert "Terms &amp; &lt;conditions&gt;<br>Second line" in preview
    assert "<conditions>" not in preview
    assert preview.startswith("<div style=")


def test_storage_path_layout():
    document_id = uuid4()
    created = datetime(2025, 3, 4, 9, 5, 7, tzinfo=timezone.utc)
    path = storage_path(DocumentType.WORK_CONTRACT, document_id, created)
    assert path == f"work_contract/{document_id}/20250304-090507-draft.txt"


def test_document_transition_table():
    assert can_transition_document(DocumentStatus.DRAFT, DocumentStatus.REVIEW)
    assert can_transition_document(DocumentStatus.FINAL, DocumentStatus.EXECUTED)
    assert can_transition_document(DocumentStatus.EXECUTED, DocumentStatus.AMENDED)
    assert can_transition_document(DocumentStatus.REVIEW, DocumentStatus.TERMINATED)
    assert not can_transition_document(DocumentStatus.DRAFT, DocumentStatus.FINAL)
    assert not can_transition_document(DocumentStatus.FINAL, DocumentStatus.REVIEW)
    assert not can_transition_document(DocumentStatus.DRAFT, DocumentStatus.TERMINATED)
    for status in DocumentStatus.terminal_states():
        assert not any(can_transition_document(status, target) for target in DocumentStatus)
    assert not can_transition_document(DocumentStatus.TERMINATED, DocumentStatus.REVIEW)
    assert not can_transition_document(DocumentStatus.AMENDED, DocumentStatus.EXECUTED)


# ============================================================================
# Generation
# ============================================================================


@pytest.mark.asyncio
async def test_nda_is_generated_in_draft_and_mirrored(ledger):
    engine = ledger.engine
    document_id = await _generate(ledger, "nda")
    await ledger.session.commit()

    document = await engine.get_document(document_id)
    assert document.document_type == DocumentType.NDA
    assert document.status == DocumentStatus.DRAFT
    assert document.version == "0.1"
    assert document.job_application_id == ledger.application_id
    assert document.accepted_job_id is None
    assert re.fullmatch(rf"nda/{document_id}/\d{{8}}-\d{{6}}-draft\.txt", document.storage_path)
    assert "Acme Robotics" in document.content
    assert "Sam Okafor" in document.content
    assert "{{" not in document.content

    application = await engine.applications.get(ledger.application_id)
    assert application.nda_document_id == document_id
    assert application.nda_status == DocumentStatus.DRAFT


@pytest.mark.asyncio
async def test_generation_is_idempotent_per_owner(ledger):
    engine = ledger.engine
    first = await _generate(ledger, "nda")
    second = await _generate(ledger, "nda")

    assert first == second
    assert await engine.documents.count(DocumentType.NDA) == 1


@pytest.mark.asyncio
async def test_award_requires_work_contract(ledger):
    engine = ledger.engine
    with pytest.raises(MissingPrerequisiteDocument) as exc_info:
        await _generate(ledger, "award_agreement")

    assert exc_info.value.required == "work_contract"
    assert await engine.documents.count() == 0
    accepted_job = await engine.accepted_jobs.get(ledger.accepted_job_id)
    assert accepted_job.award_agreement_document_id is None


@pytest.mark.asyncio
async def test_contract_then_award(ledger):
    engine = ledger.engine
    contract_id = await _generate(ledger, "work_contract")
    contract = await engine.get_document(contract_id)

    assert contract.accepted_job_id == ledger.accepted_job_id
    assert "6% of membership units" in contract.content
    assert "of membership units in Acme Robotics" in contract.content
    assert "(membership units)" not in contract.content
    assert "Acme Robotics (LLC)" in contract.content
    assert "Pick-and-place arm for small parcels" in contract.content

    award_id = await _generate(ledger, "award_agreement")
    award = await engine.get_document(award_id)

    assert f"Work Agreement dated {long_date(contract.created_at)}" in award.content
    assert "The Recipient has completed the services." in award.content
    assert "{{" not in award.content

    accepted_job = await engine.accepted_jobs.get(ledger.accepted_job_id)
    assert accepted_job.work_contract_document_id == contract_id
    assert accepted_job.work_contract_status == DocumentStatus.DRAFT
    assert accepted_job.award_agreement_document_id == award_id
    assert accepted_job.award_agreement_status == DocumentStatus.DRAFT


@pytest.mark.asyncio
async def test_award_names_completed_deliverables(ledger):
    await _generate(ledger, "work_contract")
    award_id = await _generate(
        ledger, "award_agreement", completed_deliverables="shipped the gripper firmware"
    )
    award = await ledger.engine.get_document(award_id)
    assert "The Recipient has shipped the gripper firmware." in award.content


@pytest.mark.asyncio
async def test_contract_uses_agreed_equity_once_set(ledger):
    engine = ledger.engine
    await engine.accepted_jobs.update(ledger.accepted_job_id, equity_agreed=Decimal("12.5"))

    contract_id = await _generate(ledger, "work_contract")

    assert "12.5% of membership units" in (await engine.get_document(contract_id)).content


@pytest.mark.asyncio
async def test_nda_requires_application(ledger):
    with pytest.raises(InvalidInput) as exc_info:
        await ledger.engine.generate_document(
            document_type="nda",
            business_id=ledger.business_id,
            counterparty_id=ledger.profile_id,
            project_id=ledger.project_id,
        )
    assert exc_info.value.field == "application_id"


@pytest.mark.asyncio
async def test_unknown_document_type_is_invalid(ledger):
    with pytest.raises(InvalidInput):
        await _generate(ledger, "lease")


@pytest.mark.asyncio
async def test_missing_party_is_not_found(ledger):
    engine = ledger.engine
    with pytest.raises(NotFound):
        await engine.generate_document(
            document_type="nda",
            business_id=uuid4(),
            counterparty_id=ledger.profile_id,
            project_id=ledger.project_id,
            application_id=ledger.application_id,
        )
    assert await engine.documents.count() == 0
    application = await engine.applications.get(ledger.application_id)
    assert application.nda_document_id is None


@pytest.mark.asyncio
async def test_stored_template_is_preferred(ledger):
    engine = ledger.engine
    await engine.templates.create(
        DocumentTemplate(
            template_type=DocumentType.NDA,
            template_version="2.0",
            template_name="Short NDA",
            template_content="Short NDA between {{businessName}} and {{jobseekerName}}.",
        )
    )

    document = await engine.get_document(await _generate(ledger, "nda"))

    assert document.template_version == "2.0"
    assert document.content == "Short NDA between Acme Robotics and Sam Okafor.\n"


@pytest.mark.asyncio
async def test_builtin_template_is_used_without_stored_one(ledger):
    document = await ledger.engine.get_document(await _generate(ledger, "nda"))
    assert document.template_version == "1.0"


@pytest.mark.asyncio
async def test_default_templates_are_seeded_once(ledger):
    engine = ledger.engine
    created = await engine.ensure_default_templates()
    assert {t.template_type for t in created} == set(DocumentType)

    assert await engine.ensure_default_templates() == []


# ============================================================================
# Status & signing
# ============================================================================


@pytest.mark.asyncio
async def test_draft_cannot_be_signed(ledger):
    engine = ledger.engine
    document_id = await _generate(ledger, "nda")

    with pytest.raises(NotSignable):
        await engine.sign_document(document_id, "sam", "data:image/png;base64,AAAA")

    assert await engine.list_signatures(document_id) == []


@pytest.mark.asyncio
async def test_signing_in_review_keeps_status(ledger):
    engine = ledger.engine
    document_id = await _generate(ledger, "nda")
    await _advance(ledger, document_id, "review")

    signature_id = await engine.sign_document(
        document_id,
        "sam",
        "data:image/png;base64,AAAA",
        remarks="Read and agreed",
        metadata={"ip": "10.0.0.8"},
    )
    await ledger.session.commit()

    signatures = await engine.list_signatures(document_id)
    assert [s.signature_id for s in signatures] == [signature_id]
    signature = signatures[0]
    assert signature.version == "0.1"
    assert signature.signer_id == "sam"
    assert signature.signature_metadata["remarks"] == "Read and agreed"
    assert signature.signature_metadata["ip"] == "10.0.0.8"
    assert "timestamp" in signature.signature_metadata

    assert (await engine.get_document(document_id)).status == DocumentStatus.REVIEW


@pytest.mark.asyncio
async def test_both_parties_sign_in_final(ledger):
    engine = ledger.engine
    document_id = await _generate(ledger, "work_contract")
    await _advance(ledger, document_id, "review", "final")

    await engine.sign_document(document_id, "sam", "sig-sam")
    await engine.sign_document(document_id, "dana", "sig-dana")

    signers = [s.signer_id for s in await engine.list_signatures(document_id)]
    assert sorted(signers) == ["dana", "sam"]


@pytest.mark.asyncio
async def test_executed_document_cannot_be_signed(ledger):
    engine = ledger.engine
    document_id = await _generate(ledger, "nda")
    await _advance(ledger, document_id, "review", "final", "executed")

    with pytest.raises(NotSignable):
        await engine.sign_document(document_id, "sam", "sig")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("path", "target"),
    [
        ([], "final"),
        ([], "executed"),
        (["review"], "draft"),
        (["review", "final"], "review"),
        ([], "terminated"),
        (["review"], "review"),
    ],
)
async def test_skips_and_backward_moves_are_rejected(ledger, path, target):
    engine = ledger.engine
    document_id = await _generate(ledger, "nda")
    await _advance(ledger, document_id, *path)
    before = await engine.get_document(document_id)

    with pytest.raises(InvalidTransition):
        await engine.advance_document_status(document_id, target)

    assert (await engine.get_document(document_id)).status == before.status


@pytest.mark.asyncio
async def test_execution_is_timestamped_and_mirrored(ledger):
    engine = ledger.engine
    document_id = await _generate(ledger, "work_contract")

    await _advance(ledger, document_id, "review")
    accepted_job = await engine.accepted_jobs.get(ledger.accepted_job_id)
    assert accepted_job.work_contract_status == DocumentStatus.REVIEW

    await _advance(ledger, document_id, "final", "executed")
    await ledger.session.commit()

    document = await engine.get_document(document_id)
    assert document.status == DocumentStatus.EXECUTED
    assert document.executed_at is not None
    accepted_job = await engine.accepted_jobs.get(ledger.accepted_job_id)
    assert accepted_job.work_contract_status == DocumentStatus.EXECUTED


@pytest.mark.asyncio
async def test_executed_document_can_be_amended(ledger):
    engine = ledger.engine
    document_id = await _generate(ledger, "nda")
    await _advance(ledger, document_id, "review", "final", "executed", "amended")

    document = await engine.get_document(document_id)
    assert document.status == DocumentStatus.AMENDED
    application = await engine.applications.get(ledger.application_id)
    assert application.nda_status == DocumentStatus.AMENDED

    with pytest.raises(InvalidTransition):
        await engine.advance_document_status(document_id, "executed")


@pytest.mark.asyncio
async def test_terminated_is_terminal(ledger):
    engine = ledger.engine
    document_id = await _generate(ledger, "nda")
    await _advance(ledger, document_id, "review", "terminated")

    for target in DocumentStatus:
        with pytest.raises(InvalidTransition):
            await engine.advance_document_status(document_id, target)


@pytest.mark.asyncio
async def test_list_documents_filters_by_owner(ledger):
    engine = ledger.engine
    nda_id = await _generate(ledger, "nda")
    contract_id = await _generate(ledger, "work_contract")

    by_application = await engine.list_documents(application_id=ledger.application_id)
    by_job = await engine.list_documents(accepted_job_id=ledger.accepted_job_id)
    contracts = await engine.list_documents(document_type="work_contract")

    assert [d.document_id for d in by_application] == [nda_id]
    assert [d.document_id for d in by_job] == [contract_id]
    assert [d.document_id for d in contracts] == [contract_id]


@pytest.mark.asyncio
async def test_unknown_document_is_not_found(ledger):
    engine = ledger.engine
    with pytest.raises(NotFound):
        await engine.advance_document_status(uuid4(), "review")
    with pytest.raises(NotFound):
        await engine.list_signatures(uuid4())
