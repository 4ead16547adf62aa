"""Field-by-field merge rules."""

from label_scanner.domain.entities.label_record import CandidateRecord, ExtractionSource
from label_scanner.domain.services.merge import (
    LabelHits,
    MergeInputs,
    prefer_name,
    merge_date,
    compute_total,
    merge_candidates,
)


def test_prefer_name():
    assert prefer_name("Paracetamol 500mg", "BUSTOP") == "Paracetamol 500mg"
    assert prefer_name("PCM", "Flucloxacillin") == "Flucloxacillin"
    assert prefer_name("PCM", "BUS") == "PCM"
    assert prefer_name(None, "BUS") == "BUS"
    assert prefer_name(None, None) is None


def test_date_precedence():
    assert merge_date("OCT 24", "2025-01-01", "2026-01-01") == "2024-10-01"
    assert merge_date(None, "2025-01-01", "2026-01-01") == "2025-01-01"
    assert merge_date(None, "", "2026-01-01") == "2026-01-01"
    assert merge_date(None, None, None) is None


def test_unreadable_label_date_falls_through_to_model():
    assert merge_date("45/13/2026", "2026-03-01", None) == "2026-03-01"
    assert merge_date("45/13/2026", None, "01/02/2027") == "2027-02-01"
    assert merge_date("45/13/2026", "sometime", None) is None


def test_partial_label_date_uses_year_from_text():
    assert merge_date("OCT", None, None, "Exp: OCT\nPrinted 2025") == "2025-10-01"


def test_total_needs_both_counts():
    assert compute_total(10, 10) == 100
    assert compute_total(10, None) is None
    assert compute_total(None, 15) is None


def test_model_wins_numeric_fields_where_present():
    model = CandidateRecord(name="Paracetamol 500mg", slips_count=3, mrp_amount=None)
    regex = CandidateRecord(slips_count=10, tablets_per_slip=10, mrp_amount=20.0, mrp_currency="Rs")
    record = merge_candidates(MergeInputs(model=model, regex=regex), ExtractionSource.OCR_LLM)
    assert record.slips_count == 3
    assert record.tablets_per_slip == 10
    assert record.total_tablets == 30
    assert record.mrp_amount == 20.0
    assert record.mrp_currency == "Rs"
    assert record.source is ExtractionSource.OCR_LLM


def test_label_fields_come_only_from_model():
    model = CandidateRecord(
        uses_on_label=["fever", ""],
        active_ingredient_on_label="Paracetamol",
        strength_on_label="500 mg",
        dosage_form_on_label="Tablet",
    )
    record = merge_candidates(MergeInputs(model=model))
    assert record.uses_on_label == ["fever"]
    assert record.active_ingredient_on_label == "Paracetamol"
    assert record.strength_on_label == "500 mg"
    assert record.dosage_form_on_label == "Tablet"

    regex_only = merge_candidates(MergeInputs(regex=CandidateRecord(name="BUSTOP")))
    assert regex_only.uses_on_label is None
    assert regex_only.active_ingredient_on_label is None


def test_batch_is_voted_not_copied():
    inputs = MergeInputs(
        model=CandidateRecord(batch_number="XY 9999"),
        regex=CandidateRecord(batch_number="FBLSL"),
        ocr_texts=["Batch No: FBLSL 2209"],
        lines=["Batch No: FBLSL 2209"],
    )
    assert merge_candidates(inputs).batch_number == "FBSL 2209"


def test_labelled_batch_used_only_when_nothing_votes():
    inputs = MergeInputs(label_hits=LabelHits(batch_number="ab-12345"))
    assert merge_candidates(inputs).batch_number == "AB 12345"

    rejected = MergeInputs(label_hits=LabelHits(batch_number="FBLSL"))
    assert merge_candidates(rejected).batch_number is None


def test_all_empty_gives_regex_only_nulls():
    record = merge_candidates(MergeInputs())
    assert record.source is ExtractionSource.REGEX_ONLY
    data = record.to_dict()
    assert data["_source"] == "regex-only"
    assert "source" not in data
    assert all(value is None for key, value in data.items() if key != "_source")
