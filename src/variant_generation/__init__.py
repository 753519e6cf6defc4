"""Public API for deterministic variant generation runs."""

from variant_generation.contracts import GenerationConfig, GenerationOutput, VariantSummary
from variant_generation.pipeline import generate_all

__all__ = ["GenerationConfig", "GenerationOutput", "VariantSummary", "generate_all"]
