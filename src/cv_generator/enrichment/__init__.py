"""Build CV records from manual, generated and repository data."""

from cv_generator.enrichment.enhancer import (
    CVEnhancer,
    EnhancementResult,
    enhance_cv,
    parse_cv_completion,
)
from cv_generator.enrichment.json_extract import extract_json_object
from cv_generator.enrichment.merge import build_cv_record, finalize_record, merge_records

__all__ = [
    "CVEnhancer",
    "EnhancementResult",
    "build_cv_record",
    "enhance_cv",
    "extract_json_object",
    "finalize_record",
    "merge_records",
    "parse_cv_completion",
]
