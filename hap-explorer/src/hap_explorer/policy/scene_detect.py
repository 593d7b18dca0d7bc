"""Scripted event sequences for well-known scenes such as login forms.

A model is a JSON file ``{"events": [...]}`` whose entries are event records
(see `create_event_from_json`). Each entry's ``component`` only needs
``type`` and ``bounds``; a model matches a page when every referenced
component exists on it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from hap_explorer.event.event import Event
from hap_explorer.event.event_builder import create_event_from_json
from hap_explorer.logging_utils import resolve_logger
from hap_explorer.model.component import Component
from hap_explorer.model.page import Page


class SceneDetect:
    def __init__(
        self,
        models_dir: Optional[Union[str, Path]] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.logger = resolve_logger(logger, __name__)
        self.models: Dict[str, Dict[str, Any]] = {}
        self._matched: Dict[str, List[Event]] = {}
        self._matched_idx: Dict[str, int] = {}
        if models_dir is not None:
            self._load_models(Path(models_dir))

    def _load_models(self, models_dir: Path) -> None:
        if not models_dir.is_dir():
            self.logger.warning("scene model dir not found: %s", models_dir)
            return
        for path in sorted(models_dir.glob("*.json")):
            model = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(model, dict) or not isinstance(model.get("events"), list):
                raise ValueError(f"scene model must be an object with an events list: {path}")
            self.models[path.name] = model
        self.logger.info("loaded %d scene model(s) from %s", len(self.models), models_dir)

    def generate_event_based_on_model(self, page: Page) -> Optional[Event]:
        sig = page.structural_sig
        if sig not in self._matched:
            events = self._match(page)
            if not events:
                return None
            self._matched[sig] = events
            self._matched_idx[sig] = 0

        idx = self._matched_idx[sig]
        events = self._matched[sig]
        if idx >= len(events):
            return None
        self._matched_idx[sig] = idx + 1
        return events[idx]

    def _match(self, page: Page) -> List[Event]:
        by_id = {c.unique_id: c for c in page.get_components()}
        for name, model in self.models.items():
            events: List[Event] = []
            for record in model["events"]:
                probe = Component.from_json(record.get("component") or {})
                target = by_id.get(probe.unique_id)
                if target is None:
                    break
                events.append(create_event_from_json({**record, "component": target.to_json(with_children=False)}))
            else:
                self.logger.info("page %s matches scene model %s", page.page_path, name)
                return events
        return []
