"""
Prompts

Schema instructions for the label extractors and the enrichment lookups.
"""

from ...domain.entities.extraction_result import HintBundle


RECORD_SCHEMA = """{
  "name": string | null,
  "manufacturing_date": string | null,
  "batch_number": string | null,
  "expiry_date": string | null,
  "slips_count": number | null,
  "tablets_per_slip": number | null,
  "mrp_amount": number | null,
  "mrp_currency": string | null,
  "mrp_text": string | null,

  "uses_on_label": string[] | null,
  "active_ingredient_on_label": string | null,
  "strength_on_label": string | null,
  "dosage_form_on_label": string | null
}"""

VISION_SYSTEM_PROMPT = "You read product labels from images and output strict JSON."

VISION_PROMPT = f"""
Return ONLY a valid JSON object (no markdown) with:
{RECORD_SCHEMA}
Rules:
- Use ONLY what you see on the label images; do not guess.
- "Batch Number" must be the value after Batch/Lot labels.
- Normalize batch to the shape: LETTERS + space + DIGITS (regex: ^[A-Z]{{2,5}}\\s\\d{{4,6}}$).
- If you see a stray 'L' between 'B' and 'SL' (e.g., "FBLSL"), correct to "FBSL".
- Dates: keep as Month Year if that is all that is visible.
- Packaging + MRP: extract exactly as printed (amount numeric).
- Use null for anything not visible.
"""

TEXT_SYSTEM_PROMPT = "You extract structured data from noisy OCR. Be terse and accurate."

TEXT_PROMPT = f"""
Return ONLY a valid JSON object (no markdown) with:
{RECORD_SCHEMA}
Rules:
- Use ONLY values present in the provided text; do not infer medical uses.
- Batch must match ^[A-Z]{{2,5}}\\s\\d{{4,6}}$ after normalization. Correct "FBLSL" to "FBSL" if seen.
- Dates: normalize to YYYY-MM-DD if possible; else keep "OCT 24".
- Packaging & MRP: read as printed.
- Use null for anything not present.
"""

USES_SYSTEM_PROMPT = "You are a concise medical assistant. You output strict JSON."

USES_PROMPT = """Give the main medical uses/indications of "{name}" as JSON: {{"uses": ["..."]}}
- Base it on standard, well-known clinical uses.
- At most {max_items} short items.
- No dosing, no advice, no brands, no contraindications."""

NOTES_SYSTEM_PROMPT = (
    "You are a careful medical summarizer. Provide short, general, non-prescriptive info. "
    "No dosing, no personalized advice. Avoid country-specific regulation claims."
)

NOTES_PROMPT = """Give concise safety notes for "{name}" as JSON with these keys:
{{
  "care_notes": ["when/how to take (very short bullets)"],
  "side_effects_common": ["<={max_items} most common"],
  "avoid_if": ["<={max_items} conditions where generally avoided/contraindicated"],
  "precautions": ["<={max_items} important cautions incl. procedures like contrast studies"],
  "interactions_key": ["<={max_items} notable interaction themes (e.g., alcohol)"]
}}
Rules:
- Keep each bullet 3-8 words.
- DO NOT include dosing or medical advice.
- If uncertain, omit the item.
- Focus on widely agreed standard references."""


def build_text_prompt(ocr_text: str, hints: HintBundle) -> str:
    """User message for the text model: hint windows first, then the full OCR."""
    return (
        "Important snippets (focus here first):\n"
        f"MFG: {hints.mfg or '(none)'}\n"
        f"EXP: {hints.exp or '(none)'}\n"
        f"BATCH: {hints.batch or '(none)'}\n"
        f"PRICE: {hints.price or '(none)'}\n"
        f"LICENSE: {hints.license or '(none)'}\n"
        "---\n"
        "Full OCR:\n"
        f"{ocr_text}\n"
        f"{TEXT_PROMPT}"
    )
