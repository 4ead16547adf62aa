"""
Infrastructure Layer

Adapters implementing the domain ports: Tesseract OCR, chat-model
extractors and lookups, the regex extractor and image utilities.
"""
