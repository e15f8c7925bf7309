"""Data models for CV Generator."""

from cv_generator.models.cv import (
    CVRecord,
    Education,
    Experience,
    GitHubProject,
    PartialCVRecord,
    Project,
)

__all__ = [
    "CVRecord",
    "Education",
    "Experience",
    "GitHubProject",
    "PartialCVRecord",
    "Project",
]
