"""
UI text/visibility sinks. The loop writes to them and never reads back.
"""

from typing import Dict


class UiSink:
    def set_text(self, element_id: str, value: str):
        raise NotImplementedError

    def set_visible(self, element_id: str, visible: bool):
        raise NotImplementedError


class NullUi(UiSink):
    def set_text(self, element_id: str, value: str):
        pass

    def set_visible(self, element_id: str, visible: bool):
        pass


class RecordingUi(UiSink):
    """Keeps the last value written to every element"""

    def __init__(self):
        self.texts: Dict[str, str] = {}
        self.visible: Dict[str, bool] = {}
        self.writes = 0

    def set_text(self, element_id: str, value: str):
        self.texts[element_id] = value
        self.writes += 1

    def set_visible(self, element_id: str, visible: bool):
        self.visible[element_id] = visible
        self.writes += 1

    def is_visible(self, element_id: str) -> bool:
        return self.visible.get(element_id, False)
