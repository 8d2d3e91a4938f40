"""Tests for context verification."""

from patchgate.diff.parser import parse
from patchgate.engine.context import verify
from patchgate.engine.outcome import Stage


class TestVerify:
    def test_matching_context(self, diff_modify, files_a):
        assert verify(parse(diff_modify), files_a) is None

    def test_drifted_content(self, diff_modify):
        outcome = verify(parse(diff_modify), {"a.ts": "line1\nDIFFERENT\nline3\n"})
        assert outcome.stage is Stage.CONTEXT
        assert outcome.message == "Context mismatch"
        assert outcome.detail == 'File: a.ts, near line 2, expected: "line2"'

    def test_create_skips_replay(self, diff_create):
        assert verify(parse(diff_create), {}) is None

    def test_create_over_existing_file(self, diff_create):
        outcome = verify(parse(diff_create), {"b.ts": "already here\n"})
        assert outcome.message == "File already exists"

    def test_missing_source(self, diff_modify):
        outcome = verify(parse(diff_modify), {})
        assert outcome.message == "Missing source content"
        assert "a.ts" in outcome.detail

    def test_delete_checks_deleted_lines(self, diff_delete, files_a):
        assert verify(parse(diff_delete), files_a) is None
        outcome = verify(parse(diff_delete), {"a.ts": "line1\nline2\nchanged\n"})
        assert outcome.stage is Stage.CONTEXT

    def test_rename_keyed_on_old_path(self, diff_rename, files_a):
        assert verify(parse(diff_rename), files_a) is None

    def test_rename_onto_existing_file(self, diff_rename, files_a):
        files = dict(files_a, **{"c.ts": "taken\n"})
        assert verify(parse(diff_rename), files).message == "Rename target already exists"

    def test_window_is_honoured(self, diff_modify):
        files = {"a.ts": "x\nx\nline1\nline2\nline3\n"}
        assert verify(parse(diff_modify), files, window=5) is None
        assert verify(parse(diff_modify), files, window=1) is not None

    def test_delete_must_cover_whole_file(self, files_a):
        diff = "--- a/a.ts\n+++ /dev/null\n@@ -1,1 +0,0 @@\n-line1\n"
        outcome = verify(parse(diff), files_a)
        assert outcome.stage is Stage.CONTEXT
        assert outcome.message == "Removal patch leaves file contents"
        assert outcome.detail == "File: a.ts, only 1 of 3 lines are deleted"

    def test_mixed_line_endings_match(self, diff_modify):
        assert verify(parse(diff_modify), {"a.ts": "line1\r\nline2\nline3\n"}) is None
