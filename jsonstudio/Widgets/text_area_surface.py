# text_area_surface.py
# Description: EditorSurface adapter for Textual's TextArea
#
# Imports
#
# 3rd-Party Imports
from textual.widgets import TextArea
#
#######################################################################################################################
#
# Classes:

class TextAreaSurface:
    """
    Exposes a TextArea as an EditorSurface.

    Route ``TextArea.Changed`` for this widget to ``EditorMirror.on_editor_changed``.
    """

    def __init__(self, text_area: TextArea):
        self.text_area = text_area

    def get_value(self) -> str:
        return self.text_area.text

    def set_value(self, text: str) -> None:
        self.text_area.load_text(text)

#
# End of text_area_surface.py
#######################################################################################################################
