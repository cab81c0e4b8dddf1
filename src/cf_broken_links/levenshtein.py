"""
Levenshtein edit distance.

Used by the similar-path and nearest-match rules to score candidate
replacement paths against a broken one.
"""

from typing import Optional


class LevenshteinDistance:
    """Edit distance over single-character inserts, deletes and substitutions."""

    @staticmethod
    def calculate(source: Optional[str], target: Optional[str]) -> int:
        """
        Calculate the edit distance between two strings.

        The comparison is case-sensitive and works on code points; callers
        normalize their input first if they need to.

        Args:
            source: The string to transform.
            target: The string to transform into.

        Returns:
            The minimum number of single-character edits.

        Raises:
            ValueError: If either string is None.
        """
        if source is None or target is None:
            raise ValueError("Strings cannot be None")

        if source == target:
            return 0
        if not source:
            return len(target)
        if not target:
            return len(source)

        # Two rolling rows of the DP matrix
        previous = list(range(len(target) + 1))
        for i, source_char in enumerate(source, start=1):
            current = [i] + [0] * len(target)
            for j, target_char in enumerate(target, start=1):
                cost = 0 if source_char == target_char else 1
                current[j] = min(
                    previous[j] + 1,         # deletion
                    current[j - 1] + 1,      # insertion
                    previous[j - 1] + cost,  # substitution
                )
            previous = current

        return previous[len(target)]
