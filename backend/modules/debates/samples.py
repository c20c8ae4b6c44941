"""
Curated sample questions, four per domain.
"""

from core.schemas import Domain

from .models import SampleQuestion, SamplesResponse

_SAMPLES: list[tuple[str, Domain, str]] = [
    (
        "finance-1",
        Domain.FINANCE,
        "Should a portfolio manager increase NVIDIA exposure given AI regulation uncertainty, "
        "considering valuation, concentration risk, and historical analogs?",
    ),
    (
        "finance-2",
        Domain.FINANCE,
        "Is it defensible to mark a private AI startup at a 40x revenue multiple in the "
        "current rate environment?",
    ),
    (
        "finance-3",
        Domain.FINANCE,
        "Would a bank breach Basel III liquidity rules by reallocating 15% of HQLA to "
        "tokenized treasuries?",
    ),
    (
        "finance-4",
        Domain.FINANCE,
        "Does the carry trade unwind risk outweigh yield benefits for a USD investor adding "
        "10% allocation to JPY bonds this quarter?",
    ),
    (
        "healthcare-1",
        Domain.HEALTHCARE,
        "A 55-year-old smoker has persistent cough, weight loss, and fatigue; how should a "
        "clinician prioritize differential diagnoses and next tests?",
    ),
    (
        "healthcare-2",
        Domain.HEALTHCARE,
        "In a patient on warfarin with fluctuating INR, should a clinician switch to a DOAC "
        "given stage-3 CKD and recent GI bleed history?",
    ),
    (
        "healthcare-3",
        Domain.HEALTHCARE,
        "How should a hospital balance sepsis protocol timing with antibiotic stewardship "
        "when biomarkers are equivocal?",
    ),
    (
        "healthcare-4",
        Domain.HEALTHCARE,
        "For a patient with long-COVID symptoms and normal imaging, what is the "
        "evidence-based approach to management and return-to-work planning?",
    ),
    (
        "legal-1",
        Domain.LEGAL,
        "Does a 3-year non-compete across all industries hold up in California versus "
        "Delaware, and what factors drive enforceability?",
    ),
    (
        "legal-2",
        Domain.LEGAL,
        "Is a generative-AI training dataset of public web content likely to qualify as "
        "fair use under recent US case law?",
    ),
    (
        "legal-3",
        Domain.LEGAL,
        "Can a company rely on a browse-wrap agreement for arbitration clauses after recent "
        "circuit splits on assent?",
    ),
    (
        "legal-4",
        Domain.LEGAL,
        "Should a firm disclose a material cybersecurity incident under SEC rules within "
        "4 business days if attribution is unclear?",
    ),
    (
        "general-1",
        Domain.GENERAL,
        "Will AGI be achieved before 2030 if current scaling trends continue but regulatory "
        "constraints tighten?",
    ),
    (
        "general-2",
        Domain.GENERAL,
        "Does the evidence support remote work policies improving long-term productivity in "
        "knowledge work, despite short-term gains?",
    ),
    (
        "general-3",
        Domain.GENERAL,
        "Should governments impose a moratorium on facial recognition in public spaces until "
        "bias and oversight standards mature?",
    ),
    (
        "general-4",
        Domain.GENERAL,
        "Is it defensible to mandate open-sourcing frontier models given security, "
        "innovation, and competitive risks?",
    ),
]

SAMPLE_QUESTIONS: list[SampleQuestion] = [
    SampleQuestion(id=sample_id, domain=domain, prompt=prompt, difficulty="hard")
    for sample_id, domain, prompt in _SAMPLES
]


def samples_by_domain() -> dict[str, list[SampleQuestion]]:
    """Group samples by domain; every domain is present even if empty."""
    grouped: dict[str, list[SampleQuestion]] = {domain.value: [] for domain in Domain}
    for sample in SAMPLE_QUESTIONS:
        grouped[sample.domain.value].append(sample)
    return grouped


def list_samples() -> SamplesResponse:
    """Build the samples listing response."""
    return SamplesResponse(
        count=len(SAMPLE_QUESTIONS),
        items=SAMPLE_QUESTIONS,
        by_domain=samples_by_domain(),
    )
