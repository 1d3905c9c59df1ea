"""
Output formatting for flodskim.
"""

import json
import sys

from .models import DirectoryEntry


class OutputFormatter:
    """Handle output formatting (text or JSON)."""

    def __init__(self, json_mode: bool = False):
        self.json_mode = json_mode

    def success(self, message: str, **data) -> None:
        """Output success message."""
        if self.json_mode:
            output = {"status": "success", "message": message, **data}
            print(json.dumps(output))
        else:
            print(message)

    def error(self, message: str) -> None:
        """Output error message."""
        if self.json_mode:
            output = {"status": "error", "message": message}
            print(json.dumps(output))
        else:
            print(f"Error: {message}", file=sys.stderr)

    def list_entries(self, entries: list[DirectoryEntry], image: str = "") -> None:
        """Output a directory listing, one line per entry or extent."""
        if self.json_mode:
            output = {
                "status": "success",
                "image": image,
                "files": [entry.to_dict() for entry in entries],
            }
            print(json.dumps(output))
            return

        if image:
            print(f"Directory of {image}")
            print()

        total_bytes = 0
        for entry in entries:
            print(entry)
            if not entry.deleted:
                total_bytes += entry.file_size

        print()
        print(f"  {len(entries)} entries  {total_bytes:,} bytes")

    def dump(self, lines: list[str], offset: int = 0, length: int = 0) -> None:
        """Output a hex dump."""
        if self.json_mode:
            output = {"status": "success", "offset": offset, "length": length, "lines": lines}
            print(json.dumps(output))
        else:
            for line in lines:
                print(line)

    def info(self, details: dict) -> None:
        """Output key/value information about an image."""
        if self.json_mode:
            print(json.dumps({"status": "success", **details}))
            return
        width = max((len(key) for key in details), default=0)
        for key, value in details.items():
            label = key.replace('_', ' ').capitalize()
            print(f"  {label:<{width}}  {value}")
