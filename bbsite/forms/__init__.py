"""Entity form wizard model."""

from .values import AliasRow, AliasesValue, EntityDataValue, IdentifierRow, RevisionNoteValue
from .steps import AliasesStep, EntityDataStep, FormStep, RevisionNoteStep, default_steps
from .submission import SubmissionClient, SubmissionError
from .wizard import EntityFormWizard, NavigationIntent

__all__ = [
    "AliasRow",
    "AliasesValue",
    "EntityDataValue",
    "IdentifierRow",
    "RevisionNoteValue",
    "AliasesStep",
    "EntityDataStep",
    "FormStep",
    "RevisionNoteStep",
    "default_steps",
    "SubmissionClient",
    "SubmissionError",
    "EntityFormWizard",
    "NavigationIntent",
]
