"""
Generate ASCII guitar tablature
"""
from typing import Sequence

from fretfusion.config.guitar_config import NUM_STRINGS, STRING_NAMES
from fretfusion.events import TabNote, TabVariation


NO_NOTES_MESSAGE = "No notes detected."


class TabGenerator:
    """Generate ASCII tab format from resolved tab notes"""

    def __init__(self, string_names=None):
        """
        Args:
            string_names: Line labels, high string first
        """
        self.string_names = list(string_names or STRING_NAMES)

        if len(self.string_names) != NUM_STRINGS:
            raise ValueError(f"Expected {NUM_STRINGS} string names, got {len(self.string_names)}")

    def generate(self, notes: Sequence[TabNote]) -> str:
        """
        Generate ASCII tab from notes

        Every note takes one column segment; the other strings get dashes of
        the same width so all six lines stay aligned.

        Args:
            notes: Tab notes (sorted here by onset)

        Returns:
            Six tab lines joined by newlines, or a message if there are no notes
        """
        if not notes:
            return NO_NOTES_MESSAGE

        lines = [f"{name}|" for name in self.string_names]

        for note in sorted(notes, key=lambda n: n.onset):
            display_line = NUM_STRINGS - 1 - note.string  # High e on top
            fret_str = str(note.fret)

            for i in range(NUM_STRINGS):
                if i == display_line:
                    lines[i] += f"-{fret_str}-"
                else:
                    lines[i] += "-" * (len(fret_str) + 2)

        return '\n'.join(lines)

    def generate_for_variation(self, variation: TabVariation) -> str:
        """Tab for a variation, headed by its name and description"""
        output = f"[{variation.name}]\n"
        output += variation.description + "\n\n"
        output += self.generate(variation.notes)
        return output
