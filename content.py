"""Practicum content: the Doctor's Office level and JSON content loading."""

from pathlib import Path

from models import (
    ChecklistItem,
    DocumentPage,
    MultiSelectExercise,
    OrderingExercise,
    PageIssue,
    Practicum,
    ReviewDocument,
    SingleChoiceExercise,
)

# Plausible wrong answers for document pages
DISTRACTOR_POOL = [
    "Missing signature date",
    "Wrong patient name",
    "Wrong MRN",
    "No valid authorization for spouse",
    "DOB mismatch vs. request",
    "Scope exceeds authorization",
]


def _quiz_questions() -> list[SingleChoiceExercise]:
    return [
        SingleChoiceExercise(
            id="quiz-q1",
            prompt="Before discussing PHI with a caller, what must you do first?",
            choices=[
                "Verify two patient identifiers (e.g., full name and DOB).",
                "Ask for the insurance group number.",
                "Place the caller on hold and transfer to billing.",
                "Confirm the provider's NPI.",
            ],
            correct="Verify two patient identifiers (e.g., full name and DOB).",
        ),
        SingleChoiceExercise(
            id="quiz-q2",
            prompt="A spouse requests the patient's records. What should you confirm next?",
            choices=[
                "There is a valid authorization or documented permission allowing spouse access.",
                "That the spouse knows the last visit date.",
                "That the spouse is listed as emergency contact for billing.",
                "That the spouse can pick up any records they want.",
            ],
            correct="There is a valid authorization or documented permission allowing spouse access.",
        ),
        SingleChoiceExercise(
            id="quiz-q3",
            prompt="The patient wants records by email today. What is the best next step?",
            choices=[
                "Confirm scope & delivery, verify ID/authorization, and follow policy timelines.",
                "Email everything immediately to be helpful.",
                "Decline all email requests for security reasons.",
                "Send only the problem list without documentation.",
            ],
            correct="Confirm scope & delivery, verify ID/authorization, and follow policy timelines.",
        ),
        SingleChoiceExercise(
            id="quiz-q4",
            prompt="For minimum necessary, you should:",
            choices=[
                "Disclose only what's needed to fulfill the stated purpose.",
                "Provide the entire chart for convenience.",
                "Refuse all disclosures unless in person.",
                "Share everything if the caller states it's urgent.",
            ],
            correct="Disclose only what's needed to fulfill the stated purpose.",
        ),
    ]


def _quiz_order() -> OrderingExercise:
    return OrderingExercise(
        id="quiz-order",
        prompt="Arrange the ROI workflow steps in the correct order:",
        correct_sequence=[
            "Verify patient identity (two identifiers).",
            "Confirm authorization/permission is valid.",
            "Clarify request scope & preferred delivery method.",
            "Process request (fees/timelines per policy).",
            "Log disclosure per policy.",
        ],
        metadata={
            "hint": "Start with identity, then permission, then scope/delivery, "
            "then processing, then logging."
        },
    )


def _call_steps() -> list[SingleChoiceExercise]:
    return [
        SingleChoiceExercise(
            id="call-1",
            prompt="What should you do first?",
            choices=[
                "Verify two identifiers (name + DOB).",
                "Ask what records they want before identifying them.",
                "Put caller on hold immediately.",
            ],
            correct="Verify two identifiers (name + DOB).",
        ),
        SingleChoiceExercise(
            id="call-2",
            prompt="Caller identified as patient's spouse; what do you confirm next?",
            choices=[
                "Authorization on file or signed ROI allowing spouse access.",
                "Insurance group number.",
                "The provider's NPI.",
            ],
            correct="Authorization on file or signed ROI allowing spouse access.",
        ),
        SingleChoiceExercise(
            id="call-3",
            prompt="They want records emailed today. Best response?",
            choices=[
                "Confirm scope & delivery method, review ID/authorization, "
                "and give timeline following policy.",
                "Say you'll email anything they want right now.",
                "Decline all requests over the phone.",
            ],
            correct="Confirm scope & delivery method, review ID/authorization, "
            "and give timeline following policy.",
        ),
    ]


def _coding_cases() -> list[SingleChoiceExercise]:
    return [
        SingleChoiceExercise(
            id="A1",
            prompt="Established pt follow-up for hypertension, stable control.",
            choices=["99213 + I10", "99203 + J06.9", "99214 + E11.9"],
            correct="99213 + I10",
        ),
        SingleChoiceExercise(
            id="A2",
            prompt="Established pt BP check, med refill; no complicating factors.",
            choices=["99213 + I10", "99203 + J06.9", "99212 + Z76.0"],
            correct="99213 + I10",
        ),
        SingleChoiceExercise(
            id="B1",
            prompt="NEW patient with acute URI, low complexity.",
            choices=["99203 + J06.9", "99213 + I10", "99204 + J45.909"],
            correct="99203 + J06.9",
        ),
        SingleChoiceExercise(
            id="B2",
            prompt="NEW patient, acute URI symptoms, exam and counseling provided.",
            choices=["99203 + J06.9", "99214 + J06.9", "99212 + Z20.822"],
            correct="99203 + J06.9",
        ),
    ]


def _chart_audit() -> MultiSelectExercise:
    complete = "Signed, complete"
    rows = [
        ("1", "Signed, dated, correct patient", False),
        ("2", "Signed, dated, correct patient", False),
        ("3", "Missing provider signature", True),
        ("4", "Signed, date present", False),
        ("5", "DOB mismatch vs. request", True),
        ("6", complete, False),
        ("7", complete, False),
        ("8", complete, False),
        ("9", complete, False),
        ("10", complete, False),
    ]
    return MultiSelectExercise(
        id="chart-audit",
        prompt="Select the two non-compliant charts from the list.",
        items=[
            ChecklistItem(id=chart_id, label=f"Chart {chart_id}: {label}", is_defect=defect)
            for chart_id, label, defect in rows
        ],
        required_count=2,
    )


def _documents() -> list[ReviewDocument]:
    return [
        ReviewDocument(
            id="D1",
            title="D1: Progress Note",
            pages=[
                DocumentPage(
                    id="p1",
                    title="Header",
                    body="Patient: Angela Wood  DOB: 07/14/1988\nMRN: 55421\n"
                    "Provider: J. Lang, MD\nDate of Service: 03/02/2025",
                ),
                DocumentPage(
                    id="p2",
                    title="Assessment",
                    body="Assessment: Essential Hypertension (I10)\nPlan: Continue current meds",
                ),
                DocumentPage(
                    id="p3",
                    title="Signature",
                    body="Signed: __________________  Date: 03/02/2025",
                    issue=PageIssue(id="i1", label="Missing provider signature"),
                ),
            ],
        ),
        ReviewDocument(
            id="D2",
            title="D2: ROI Packet",
            pages=[
                DocumentPage(
                    id="p1",
                    title="Request",
                    body="Requester: Spouse\nDelivery: Email\n"
                    "Patient: Sam Brooks (DOB: 08/22/1984)",
                ),
                DocumentPage(
                    id="p2",
                    title="Authorization",
                    body="Authorization allows PCP access only; spouse not listed",
                    issue=PageIssue(id="i1", label="No valid authorization for spouse"),
                ),
            ],
        ),
        ReviewDocument(
            id="D3",
            title="D3: Lab Result",
            pages=[
                DocumentPage(
                    id="p1",
                    title="Header",
                    body="Patient: L. Chen  DOB: 02/03/1982 (Request DOB: 02/30/1982)",
                    issue=PageIssue(id="i1", label="DOB mismatch vs. request"),
                ),
                DocumentPage(id="p2", title="Result", body="CMP normal"),
            ],
        ),
        ReviewDocument(
            id="D4",
            title="D4: Imaging Report",
            pages=[
                DocumentPage(
                    id="p1",
                    title="Header",
                    body="Patient: Erin Diaz  DOB: 01/19/1990\nSigned by: P. Rivera, MD",
                ),
                DocumentPage(
                    id="p2",
                    title="Footer",
                    body="No signature date",
                    issue=PageIssue(id="i1", label="Missing signature date"),
                ),
            ],
        ),
        ReviewDocument(
            id="D5",
            title="D5: Discharge Summary",
            pages=[
                DocumentPage(
                    id="p1",
                    title="Header",
                    body="Patient: T. Morgan  DOB: 11/11/1975\nMRN: 77102",
                ),
                DocumentPage(
                    id="p2",
                    title="Attestation",
                    body="Electronically signed by S. Patel, PA-C 03/08/2025",
                ),
                DocumentPage(
                    id="p3",
                    title="Countersign",
                    body="Supervising MD: ________  (not signed)",
                    issue=PageIssue(
                        id="i1", label="Missing supervising MD countersignature"
                    ),
                ),
            ],
        ),
    ]


def build_default_practicum() -> Practicum:
    """Build the Doctor's Office practicum (Intake & ROI)."""
    return Practicum(
        title="Practicum Level 1: Doctor's Office",
        quiz_questions=_quiz_questions(),
        quiz_order=_quiz_order(),
        call_steps=_call_steps(),
        coding_cases=_coding_cases(),
        chart_audit=_chart_audit(),
        documents=_documents(),
        distractor_pool=list(DISTRACTOR_POOL),
    )


def load_practicum(path: Path | str) -> Practicum:
    """Load practicum content from a JSON file.

    Raises:
        UnsatisfiableConfiguration: If the content can never be passed.
        pydantic.ValidationError: If the file does not match the schema.
    """
    return Practicum.model_validate_json(Path(path).read_text(encoding="utf-8"))


def save_practicum(practicum: Practicum, path: Path | str) -> None:
    """Write practicum content as JSON (the format load_practicum reads)."""
    Path(path).write_text(practicum.model_dump_json(indent=2), encoding="utf-8")
