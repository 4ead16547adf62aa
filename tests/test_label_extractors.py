"""Chat model extractors and medicine info lookups against fake clients."""

from label_scanner.domain.entities.extraction_result import HintBundle
from label_scanner.domain.entities.label_record import CandidateRecord, SafetyNotes
from label_scanner.infrastructure.llm import (
    VisionLabelExtractor,
    TextLabelExtractor,
    DummyLabelExtractor,
    ChatMedicineInfoLookup,
    StaticMedicineInfoLookup,
)

from conftest import make_image


def test_vision_request_shape(chat_client):
    client, completions = chat_client({"name": "Flucloxacillin", "batch_number": "FBLSL 2209"})
    extractor = VisionLabelExtractor("some/vision-model", client=client)

    record = extractor.extract([make_image("a.png"), make_image("b.png", size=(3000, 100))])

    assert record.name == "Flucloxacillin"
    assert record.batch_number == "FBSL 2209"

    request = completions.requests[0]
    assert request["model"] == "some/vision-model"
    assert request["temperature"] == 0.0
    assert request["response_format"] == {"type": "json_object"}
    assert "extra_body" not in request

    parts = request["messages"][1]["content"]
    images = [p for p in parts if p["type"] == "image_url"]
    assert len(images) == 2
    assert all(p["image_url"]["url"].startswith("data:image/jpeg;base64,") for p in images)


def test_vision_skips_without_images(chat_client):
    client, completions = chat_client({"name": "X"})
    assert VisionLabelExtractor("m", client=client).extract([]) is None
    assert completions.requests == []


def test_invalid_batch_from_model_is_dropped(chat_client):
    client, _ = chat_client({"batch_number": "B N O 1 2 3 4"})
    record = VisionLabelExtractor("m", client=client).extract([make_image()])
    assert record.batch_number is None


def test_client_error_yields_none(chat_client):
    client, _ = chat_client(error=TimeoutError("read timed out"))
    assert VisionLabelExtractor("m", client=client).extract([make_image()]) is None


def test_bad_json_yields_none(chat_client):
    client, _ = chat_client("Sorry, I cannot help with that.")
    assert TextLabelExtractor("m", client=client).extract([], ocr_text="BUSTOP") is None


def test_missing_api_key_yields_none():
    extractor = TextLabelExtractor("m", api_key=None)
    assert extractor.extract([], ocr_text="Paracetamol 500mg") is None


def test_text_model_skips_empty_text(chat_client):
    client, completions = chat_client({"name": "X"})
    assert TextLabelExtractor("m", client=client).extract([], ocr_text="   ") is None
    assert completions.requests == []


def test_text_model_prompt_and_openrouter_body(chat_client):
    client, completions = chat_client('```json\n{"name": "Paracetamol 500mg", "slips_count": "10"}\n```')
    hints = HintBundle(batch="Batch No: AB 1234")
    extractor = TextLabelExtractor("m", provider="openrouter", client=client)

    record = extractor.extract([], ocr_text="Paracetamol 500mg\nBatch No: AB 1234", hints=hints)

    assert record.name == "Paracetamol 500mg"
    assert record.slips_count == 10
    request = completions.requests[0]
    assert request["extra_body"] == {"reasoning": {"enabled": False}}
    user_message = request["messages"][1]["content"]
    assert "BATCH: Batch No: AB 1234" in user_message
    assert "MFG: (none)" in user_message
    assert "Full OCR:\nParacetamol 500mg" in user_message


def test_text_model_on_groq_has_no_extra_body(chat_client):
    client, completions = chat_client({"name": "X"})
    TextLabelExtractor("m", provider="groq", client=client).extract([], ocr_text="X")
    assert "extra_body" not in completions.requests[0]


def test_dummy_extractor_counts_calls():
    record = CandidateRecord(name="BUSTOP")
    dummy = DummyLabelExtractor(record, name="vision")
    assert dummy.extract([]) is record
    assert dummy.extract([]) is record
    assert dummy.calls == 2
    assert dummy.extractor_name == "vision"


def test_lookup_uses(chat_client):
    client, completions = chat_client({"uses": ["fever", "", "pain"]})
    lookup = ChatMedicineInfoLookup(client=client)
    assert lookup.lookup_uses("Paracetamol") == ["fever", "pain"]
    assert '"Paracetamol"' in completions.requests[0]["messages"][1]["content"]


def test_lookup_safety_notes_accepts_camel_case(chat_client):
    client, _ = chat_client({
        "careNotes": ["Take after food"],
        "side_effects_common": ["Nausea"],
        "avoidIf": [],
        "precautions": "not a list",
    })
    notes = ChatMedicineInfoLookup(client=client).lookup_safety_notes("Ibuprofen")
    assert notes.care_notes == ["Take after food"]
    assert notes.side_effects_common == ["Nausea"]
    assert notes.avoid_if is None
    assert notes.precautions is None
    assert notes.interactions_key is None


def test_lookup_failures_are_empty(chat_client):
    client, _ = chat_client(error=ConnectionError("offline"))
    lookup = ChatMedicineInfoLookup(client=client)
    assert lookup.lookup_uses("Paracetamol") == []
    assert lookup.lookup_safety_notes("Paracetamol") == SafetyNotes()

    client, _ = chat_client("not json")
    assert ChatMedicineInfoLookup(client=client).lookup_uses("Paracetamol") == []


def test_static_lookup_is_case_insensitive():
    notes = SafetyNotes(care_notes=["Take with water"])
    lookup = StaticMedicineInfoLookup(uses={"Paracetamol": ["fever"]}, notes={"paracetamol": notes})
    assert lookup.lookup_uses("PARACETAMOL") == ["fever"]
    assert lookup.lookup_safety_notes("Paracetamol") is notes
    assert lookup.lookup_uses("other") == []
    assert lookup.lookup_safety_notes("other").is_empty
