"""
Chat Medicine Info Lookup

General uses and safety notes for a medicine from a chat model.
"""

from typing import Any, Dict, List, Optional
import logging

from ...domain.ports.medicine_info import MedicineInfoPort
from ...domain.entities.label_record import SafetyNotes
from ...domain.exceptions import EnrichmentError
from ...cross_cutting.error_handling import handle_exception
from .client import create_chat_client
from .parsing import safe_parse_json, coerce_string_list
from .prompts import (
    USES_SYSTEM_PROMPT,
    USES_PROMPT,
    NOTES_SYSTEM_PROMPT,
    NOTES_PROMPT,
)


logger = logging.getLogger(__name__)


# Accepted spellings per safety-notes field
NOTE_KEYS = {
    "care_notes": ("care_notes", "careNotes"),
    "side_effects_common": ("side_effects_common", "sideEffectsCommon"),
    "avoid_if": ("avoid_if", "avoidIf"),
    "precautions": ("precautions",),
    "interactions_key": ("interactions_key", "interactionsKey"),
}


class ChatMedicineInfoLookup(MedicineInfoPort):
    """
    Medicine info source backed by a chat model.

    Lookups never raise: failures are logged and return empty results.
    """

    def __init__(
        self,
        model: str = "openai/gpt-4o-mini",
        api_key: Optional[str] = None,
        provider: str = "openrouter",
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        max_items: int = 6,
        referer: str = "http://localhost:3000",
        client: Any = None
    ):
        self._model = model
        self._api_key = api_key
        self._provider = provider
        self._base_url = base_url
        self._timeout = timeout
        self._max_items = max_items
        self._referer = referer
        self._client = client

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _initialize(self) -> None:
        """Lazy initialization of the chat client."""
        if self._client is not None:
            return
        headers = None
        if self._provider == "openrouter":
            headers = {"HTTP-Referer": self._referer, "X-Title": "Medicine Info Lookup"}
        self._client = create_chat_client(
            provider=self._provider,
            api_key=self._api_key,
            base_url=self._base_url,
            timeout=self._timeout,
            headers=headers,
        )

    def _ask(self, system: str, user: str, max_tokens: int) -> Dict[str, Any]:
        self._initialize()
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                temperature=0,
                response_format={"type": "json_object"},
                max_tokens=max_tokens,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
            )
        except Exception as e:
            raise EnrichmentError(f"Lookup request failed: {e}")

        raw = response.choices[0].message.content if response.choices else ""
        data = safe_parse_json(raw)
        if data is None:
            raise EnrichmentError("Lookup response is not a JSON object", details={"raw_preview": (raw or "")[:200]})
        return data

    @handle_exception(default_factory=list, log_level=logging.WARNING)
    def lookup_uses(self, name: str) -> List[str]:
        """
        Get common uses for a medicine.

        Args:
            name: Product or ingredient name

        Returns:
            Up to max_items short use phrases
        """
        if not name:
            return []
        data = self._ask(
            USES_SYSTEM_PROMPT,
            USES_PROMPT.format(name=name, max_items=self._max_items),
            max_tokens=150,
        )
        return coerce_string_list(data.get("uses"), self._max_items) or []

    @handle_exception(default_factory=SafetyNotes, log_level=logging.WARNING)
    def lookup_safety_notes(self, name: str) -> SafetyNotes:
        """
        Get general, non-prescriptive safety notes.

        Args:
            name: Product or ingredient name

        Returns:
            SafetyNotes with up to max_items bullets per field
        """
        if not name:
            return SafetyNotes()
        data = self._ask(
            NOTES_SYSTEM_PROMPT,
            NOTES_PROMPT.format(name=name, max_items=self._max_items),
            max_tokens=400,
        )

        values = {}
        for field_name, keys in NOTE_KEYS.items():
            raw = next((data[k] for k in keys if k in data), None)
            values[field_name] = coerce_string_list(raw, self._max_items)
        return SafetyNotes(**values)


class StaticMedicineInfoLookup(MedicineInfoPort):
    """Medicine info from fixed tables (tests, offline runs)."""

    def __init__(
        self,
        uses: Optional[Dict[str, List[str]]] = None,
        notes: Optional[Dict[str, SafetyNotes]] = None
    ):
        self._uses = {k.lower(): v for k, v in (uses or {}).items()}
        self._notes = {k.lower(): v for k, v in (notes or {}).items()}

    def lookup_uses(self, name: str) -> List[str]:
        return list(self._uses.get((name or "").lower(), []))

    def lookup_safety_notes(self, name: str) -> SafetyNotes:
        return self._notes.get((name or "").lower(), SafetyNotes())
