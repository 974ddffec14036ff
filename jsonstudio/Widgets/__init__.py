# Widgets/__init__.py
# Description: UI-layer glue between editing surfaces and the tab session
#
from .editor_mirror import EditorMirror, EditorSurface, JsonAnalysisService
from .text_area_surface import TextAreaSurface

__all__ = ["EditorMirror", "EditorSurface", "JsonAnalysisService", "TextAreaSurface"]
