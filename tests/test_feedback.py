"""Tests for corrective retry messages."""

from patchgate.engine.feedback import corrective_message
from patchgate.engine.outcome import Invalid, Stage


class TestCorrectiveMessage:
    def test_context_mismatch(self):
        outcome = Invalid(
            stage=Stage.CONTEXT,
            message="Context mismatch",
            detail='File: a.ts, near line 2, expected: "line2"',
        )
        assert corrective_message(outcome) == (
            'CRITICAL ERROR: Context mismatch. File: a.ts, near line 2, expected: "line2"\n'
            "Fix the diff format immediately."
        )

    def test_without_detail(self):
        outcome = Invalid(stage=Stage.PARSE, message="No file patches found")
        assert corrective_message(outcome) == (
            "CRITICAL ERROR: No file patches found.\nFix the diff format immediately."
        )

    def test_allowlist_lists_granted_files(self):
        outcome = Invalid(stage=Stage.ALLOWLIST, message="Unauthorized file modification", detail="b.ts")
        text = corrective_message(outcome, {"z.ts", "a.ts"})
        assert "You may only edit: a.ts, z.ts" in text
        assert text.endswith("Fix the diff format immediately.")

    def test_allowlist_empty_grant(self):
        outcome = Invalid(stage=Stage.ALLOWLIST, message="Unauthorized file modification", detail="b.ts")
        assert "(no files)" in corrective_message(outcome, [])

    def test_allowed_files_ignored_for_other_stages(self):
        outcome = Invalid(stage=Stage.STRUCTURE, message="Invalid diff structure")
        assert "You may only edit" not in corrective_message(outcome, {"a.ts"})
