from academy.application.ports.repositories import (
    AssessmentRepository,
    AttemptRepository,
    LearnerRepository,
)

__all__ = [
    "AssessmentRepository",
    "AttemptRepository",
    "LearnerRepository",
]
