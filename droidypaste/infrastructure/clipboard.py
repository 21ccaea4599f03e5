import pyperclip


class ClipboardManager:
    """
    Thin wrapper over the system clipboard.
    """

    def write_text(self, text: str) -> None:
        pyperclip.copy(text)
