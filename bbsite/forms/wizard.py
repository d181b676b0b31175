"""Multi-step entity form wizard.

The wizard owns one immutable value per step plus that step's validity.
Steps report edits through ``on_value_changed``; tab transitions recompute
every step's validity. Submission posts the merged payload through an
injected client and signals the outcome through an injected navigation
callable instead of redirecting anything itself.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from bbsite import config as app_config
from bbsite.utils.entities import get_entity_link
from bbsite.utils.logging import get_logger

from .steps import FormStep, default_steps
from .submission import SubmissionError

LOG = get_logger("bbsite.forms.wizard")


@dataclass(frozen=True)
class NavigationIntent:
    path: str
    replace: bool = False


Navigate = Callable[[NavigationIntent], None]


class EntityFormWizard:
    def __init__(
        self,
        entity_type: str,
        steps: Sequence[FormStep],
        *,
        submission_url: str,
        navigate: Navigate,
        prefill: Optional[Mapping[str, Any]] = None,
        login_path: Optional[str] = None,
    ):
        if not steps:
            raise ValueError("wizard_requires_steps")
        self.entity_type = entity_type
        self.steps: List[FormStep] = list(steps)
        self.submission_url = submission_url
        self.login_path = login_path or app_config.login_path()
        self._navigate = navigate
        self._lock = threading.Lock()

        self.tab = 1
        self.values: Dict[str, Any] = {
            step.step_id: step.initial_value(prefill) for step in self.steps
        }
        self.validity: Dict[str, bool] = {}
        self.waiting = False
        self.submitted = False
        self.error: Optional[SubmissionError] = None
        self._refresh_validity()

    @classmethod
    def from_props(
        cls,
        props: Mapping[str, Any],
        *,
        navigate: Navigate,
        login_path: Optional[str] = None,
    ) -> "EntityFormWizard":
        entity_type = props["entity_type"]
        return cls(
            entity_type,
            default_steps(entity_type, props.get("type_field"), props.get("identifier_types") or ()),
            submission_url=props["submission_url"],
            navigate=navigate,
            prefill=props.get("entity"),
            login_path=login_path,
        )

    # Navigation between steps
    @property
    def step_count(self) -> int:
        return len(self.steps)

    @property
    def current_step(self) -> FormStep:
        return self.steps[self.tab - 1]

    def is_visible(self, step_id: str) -> bool:
        return self.current_step.step_id == step_id

    def set_tab(self, tab: int) -> None:
        if not 1 <= tab <= self.step_count:
            raise ValueError("invalid_tab")
        self.tab = tab
        self._refresh_validity()

    def back(self) -> None:
        self.set_tab(self.tab - 1)

    def next(self) -> None:
        self.set_tab(self.tab + 1)

    # Values
    def _step(self, step_id: str) -> FormStep:
        for step in self.steps:
            if step.step_id == step_id:
                return step
        raise KeyError(step_id)

    def on_value_changed(self, step_id: str, value: Any) -> None:
        step = self._step(step_id)
        self.values[step_id] = value
        self.validity[step_id] = step.is_valid(value)

    def _refresh_validity(self) -> None:
        self.validity = {
            step.step_id: step.is_valid(self.values[step.step_id]) for step in self.steps
        }

    @property
    def is_valid(self) -> bool:
        return all(self.validity.values())

    @property
    def submit_enabled(self) -> bool:
        return self.is_valid and not self.waiting and not self.submitted

    def build_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        for step in self.steps:
            payload.update(step.to_payload(self.values[step.step_id]))
        return payload

    # Submission
    def submit(self, client) -> Optional[NavigationIntent]:
        """Post the form once; returns the navigation intent that was signalled.

        Returns None when the submission was refused (invalid, already in
        flight or done) or failed; a failure is kept in ``error``.
        """
        with self._lock:
            if not self.submit_enabled:
                LOG.debug("Submission refused for %s (valid=%s waiting=%s)",
                          self.entity_type, self.is_valid, self.waiting)
                return None
            self.waiting = True
            self.error = None

        payload = self.build_payload()
        try:
            body = client.post(self.submission_url, payload)
            intent = self._outcome(body)
            self._navigate(intent)
        except Exception as exc:
            if not isinstance(exc, SubmissionError):
                LOG.exception("Unexpected submission failure for %s", self.entity_type)
                cause, exc = exc, SubmissionError("submission_failed")
                exc.__cause__ = cause
            LOG.warning("Submission of %s failed: %s", self.entity_type, exc)
            with self._lock:
                self.error = exc
                self.waiting = False
            return None
        return intent

    def _outcome(self, body: Any) -> NavigationIntent:
        entity = body.get("entity") if isinstance(body, Mapping) else None
        if not entity:
            return NavigationIntent(self.login_path, replace=True)
        if not isinstance(entity, Mapping) or not entity.get("bbid"):
            raise SubmissionError("invalid_response")
        self.submitted = True
        return NavigationIntent(get_entity_link({
            "type": entity.get("type") or self.entity_type,
            "bbid": entity["bbid"],
        }))


__all__ = ["NavigationIntent", "EntityFormWizard"]
