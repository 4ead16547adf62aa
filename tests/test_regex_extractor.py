"""Regex fallback extractor and labelled value pulls."""

from label_scanner.domain.services.hints import split_lines
from label_scanner.infrastructure.extraction.regex_extractor import (
    RegexLabelExtractor,
    extract_labeled_values,
)


def extract(text):
    return RegexLabelExtractor().extract_from_text(text)


def test_known_product_names():
    assert extract("FLUCLASS  500 capsules").name == "FLUCLASS 500"
    assert extract("Flucloxacillin Capsules BP 500mg").name == "Flucloxacillin Capsules BP"
    assert extract("Some Unknown Brand").name is None


def test_month_year_dates_on_labelled_lines():
    record = extract("Mfg. Date: JAN 2023\nExp. Date: DEC 25")
    assert record.manufacturing_date == "2023-01-01"
    assert record.expiry_date == "2025-12-01"


def test_two_full_dates_are_manufacture_then_expiry():
    record = extract("Printed 02/09/2024 valid until 01/09/2026")
    assert record.manufacturing_date == "2024-09-02"
    assert record.expiry_date == "2026-09-01"


def test_single_full_date_is_expiry():
    record = extract("Use before Sep 2, 2026")
    assert record.manufacturing_date is None
    assert record.expiry_date == "2026-09-02"


def test_batch_after_keyword():
    assert extract("Batch No: FBLSL 2209").batch_number == "FBLSL"
    assert extract("Lot - AB12345").batch_number == "AB12345"
    assert extract("no code here").batch_number is None


def test_pack_patterns_in_priority_order():
    ex = RegexLabelExtractor()
    assert ex.extract_pack_info("10 x 10 Tablets") == (10, 10)
    assert ex.extract_pack_info("10 CAPS x 10") == (10, 10)
    assert ex.extract_pack_info("3 x 15 TAB") == (3, 15)
    assert ex.extract_pack_info("15 TAB x 2") == (2, 15)
    assert ex.extract_pack_info("Strip of 15 Tablets") == (None, 15)
    assert ex.extract_pack_info("200 ml bottle") == (None, None)


def test_mrp_amount_and_currency():
    ex = RegexLabelExtractor()
    assert ex.extract_mrp("Batch AB 1234\nM.R.P. NRs. 120.50 incl. taxes") == (
        120.5, "NPR", "M.R.P. NRs. 120.50 incl. taxes"
    )
    assert ex.extract_mrp("MRP INR 45")[:2] == (45.0, "INR")
    assert ex.extract_mrp("MRP Rs. 30/-")[:2] == (30.0, "Rs")
    assert ex.extract_mrp("MRP 99")[:2] == (99.0, None)
    assert ex.extract_mrp("no price") == (None, None, None)


def test_extract_ignores_images_and_returns_candidate():
    record = RegexLabelExtractor().extract([], ocr_text="10 CAPS x 10\nMRP Rs 20")
    assert record.slips_count == 10
    assert record.tablets_per_slip == 10
    assert record.mrp_amount == 20.0


def test_labelled_values_same_line():
    hits = extract_labeled_values(split_lines("Batch No: FBLSL 2209\nExp: OCT 24\nMfg. Date: 02/09/2023"))
    assert hits.batch_number == "FBLSL"
    assert hits.expiry_date == "OCT 24"
    assert hits.manufacturing_date == "02/09/2023"


def test_labelled_values_from_next_line():
    hits = extract_labeled_values(split_lines("Expiry Date:\nDEC 2026\nBatch No.\nAB 4321"))
    assert hits.expiry_date == "DEC 2026"
    assert hits.batch_number == "AB"


def test_labelled_values_missing():
    hits = extract_labeled_values(split_lines("Paracetamol 500 mg"))
    assert hits.batch_number is None
    assert hits.manufacturing_date is None
    assert hits.expiry_date is None


def test_labels_inside_product_words_are_ignored():
    lines = split_lines("BENADRYL EXPECTORANT\n01/03/2024\nDOMPERIDONE\n05/06/2025")
    hits = extract_labeled_values(lines)
    assert hits.expiry_date is None
    assert hits.manufacturing_date is None


def test_expiry_label_after_expectorant_name():
    lines = split_lines("BENADRYL EXPECTORANT\nMfg. Date: 01/03/2024\nExp. Date: 28/02/2026")
    hits = extract_labeled_values(lines)
    assert hits.manufacturing_date == "01/03/2024"
    assert hits.expiry_date == "28/02/2026"


def test_short_batch_label():
    hits = extract_labeled_values(split_lines("B.No. FBSL2209"))
    assert hits.batch_number == "FBSL2209"
    record = RegexLabelExtractor().extract_from_text("B.No.: FBSL2209")
    assert record.batch_number == "FBSL2209"
