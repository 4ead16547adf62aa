"""Dosage form decision and liquid parsing."""

from label_scanner.domain.services.dosage import decide_dosage_form, parse_liquid_meta
from label_scanner.domain.value_objects.dosage_info import DosageForm


def test_label_hint_wins_over_keywords():
    assert decide_dosage_form("Film coated tablets", "Paracetamol syrup") is DosageForm.TABLET
    assert decide_dosage_form("Syrup", "") is DosageForm.SYRUP
    assert decide_dosage_form("सिरप", None) is DosageForm.SYRUP


def test_keyword_inference_from_text():
    assert decide_dosage_form(None, "Paracetamol Oral Suspension") is DosageForm.SUSPENSION
    assert decide_dosage_form(None, "10 CAPS x 10") is DosageForm.CAPSULE
    assert decide_dosage_form("", "Eye Drops 10 ml") is DosageForm.DROPS
    assert decide_dosage_form(None, "nothing useful") is None


def test_liquid_forms():
    assert DosageForm.SYRUP.is_liquid
    assert DosageForm.DROPS.is_liquid
    assert not DosageForm.TABLET.is_liquid
    assert DosageForm.SUSPENSION.label == "SUSPENSION"


def test_dose_is_kept_apart_from_bottle_volume():
    info = parse_liquid_meta("Paracetamol Oral Suspension\n125 mg per 5 ml\nNet Qty: 200 ml")
    assert info.dose_ml == 5
    assert info.bottle_volume_ml == 200
    assert info.concentration_mg_per_5ml == 125.0
    assert info.concentration_label == "125 mg per 5 ml"
    assert info.bottles_per_pack is None


def test_concentration_per_10ml_is_halved():
    info = parse_liquid_meta("Each 10 ml contains 250 mg/10 ml")
    assert info.concentration_mg_per_5ml == 125.0
    assert info.dose_ml == 10


def test_bottle_volume_band_outside_quantity_lines():
    info = parse_liquid_meta("Take 5 ml twice daily\n60 ml")
    assert info.bottle_volume_ml == 60
    assert info.dose_ml is None


def test_multi_bottle_pack():
    info = parse_liquid_meta("ORS Solution 2 x 100 ml")
    assert info.bottles_per_pack == 2
    assert info.bottle_volume_ml == 100


def test_noise_is_normalized_before_matching():
    info = parse_liquid_meta("प्रति ५ मिली\n1O0 ml")
    assert info.dose_ml == 5
    assert info.bottle_volume_ml == 100
