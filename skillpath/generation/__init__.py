"""Roadmap generation against the external chat model."""

from skillpath.generation.generator import RoadmapGenerator, validate_roadmap
from skillpath.generation.json_extract import extract_json

__all__ = ["RoadmapGenerator", "extract_json", "validate_roadmap"]
