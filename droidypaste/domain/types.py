"""Names of uploaded files as reported by the server's list endpoint."""

from typing import NewType

FileName = NewType("FileName", str)
