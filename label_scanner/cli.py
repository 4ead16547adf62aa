"""
Command line entry point.

    label-scanner front.jpg back.jpg [--provider dummy] [--debug]
"""

from typing import List, Optional
import argparse
import json
import logging
import sys

from .config.settings import AppConfig
from .cross_cutting.logging import setup_logging
from .domain.exceptions import ValidationError, PipelineConfigurationError


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INPUT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="label-scanner",
        description="Extract a structured record from photographs of a medicine package",
    )
    parser.add_argument(
        "images",
        nargs="+",
        help="Label photographs (2-20 images of the same package)",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Path to a .env file (default: search from the working directory)",
    )
    parser.add_argument(
        "--provider",
        choices=["openrouter", "openai", "groq", "dummy"],
        default=None,
        help="Model provider override",
    )
    parser.add_argument(
        "--no-vision",
        action="store_true",
        help="Skip the vision model",
    )
    parser.add_argument(
        "--no-enrichment",
        action="store_true",
        help="Skip the uses / safety-notes lookups",
    )
    parser.add_argument(
        "--lang",
        default=None,
        help="OCR languages, e.g. eng+nep",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Include warnings, errors and stage statuses in the output",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: from configuration)",
    )
    return parser


def load_config(args: argparse.Namespace) -> AppConfig:
    """Configuration from the environment with command line overrides applied."""
    config = AppConfig.from_env(dotenv_path=args.env_file)

    if args.provider:
        config.model.use_provider(args.provider)
        config.resolve_api_key()
    if args.no_vision:
        config.model.vision_enabled = False
    if args.no_enrichment:
        config.enrichment.enabled = False
    if args.lang:
        config.ocr.language = args.lang
    if args.log_level:
        config.logging.level = args.log_level
    return config


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args)
    setup_logging(
        level=config.logging.level,
        log_file=config.logging.log_file,
        format_string=config.logging.format,
    )

    # Imported late so --help works without the OCR and model libraries
    from .application.services.label_scan_service import create_default_service

    try:
        service = create_default_service(config)
        report = service.scan_files(args.images)
    except (ValidationError, PipelineConfigurationError) as e:
        logger.error(str(e))
        print(json.dumps({"error": e.to_dict()}, ensure_ascii=False, indent=2), file=sys.stderr)
        return EXIT_INPUT_ERROR

    output = report.to_dict()
    if args.debug:
        output["debug"] = report.get_debug_info()
    print(json.dumps(output, ensure_ascii=False, indent=2))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
